"""Catalog validator orchestrating fixture loading, execution and comparison."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..catalog import CatalogEntry, QueryCatalog, load_catalog
from ..execution import DuckDBExecutor, DualExecutor, PairExecutionResult
from ..fixtures import FixtureLoader, FixtureSummary
from .equivalence_checker import EquivalenceChecker
from .schemas import CatalogReport, EntryResult, EntryStatus, EquivalenceResult

logger = logging.getLogger(__name__)

DENORMALIZED_TABLE = "supermarket_transactions"


class CatalogValidator:
    """Validates every catalog entry against one loaded fixture.

    Orchestrates:
    1. Fixture loading (built-in rows or a CSV directory)
    2. Dual execution of each normalized/denormalized pair
    3. Ordering decision (top-level ORDER BY on both sides, or override)
    4. Equivalence checking, or the not-representable subset check

    A failing entry never stops the run.

    Usage:
        with CatalogValidator() as validator:
            report = validator.validate_catalog(load_catalog())
    """

    def __init__(
        self,
        fixtures_path: Optional[str | Path] = None,
        database: str = ":memory:",
        dialect: str = "duckdb",
        float_tolerance: float = 1e-6,
        max_differences: int = 10,
    ):
        """Initialize validator.

        Args:
            fixtures_path: CSV fixture directory, or None for built-in rows.
            database: DuckDB database path or ":memory:".
            dialect: sqlglot dialect for pre-parsing catalog SQL.
            float_tolerance: Tolerance for numeric comparison.
            max_differences: Cap on recorded diff rows per entry.
        """
        self.fixtures_path = fixtures_path
        self.database = database
        self.dialect = dialect
        self.float_tolerance = float_tolerance
        self.max_differences = max_differences

        # Components
        self._executor: Optional[DuckDBExecutor] = None
        self._dual: Optional[DualExecutor] = None
        self._checker: Optional[EquivalenceChecker] = None
        self._fixture: Optional[FixtureSummary] = None

    @property
    def fixture(self) -> FixtureSummary:
        """Summary of the loaded fixture (loads it on first access)."""
        if self._fixture is None:
            self._fixture = FixtureLoader(self._get_executor()).load(self.fixtures_path)
        return self._fixture

    def _get_executor(self) -> DuckDBExecutor:
        """Get or create executor."""
        if self._executor is None:
            self._executor = DuckDBExecutor(self.database)
            self._executor.connect()
        return self._executor

    def _get_dual(self) -> DualExecutor:
        """Get or create dual executor (fixture loaded first)."""
        if self._dual is None:
            _ = self.fixture
            self._dual = DualExecutor(self._get_executor(), dialect=self.dialect)
        return self._dual

    def _get_checker(self) -> EquivalenceChecker:
        """Get or create equivalence checker."""
        if self._checker is None:
            self._checker = EquivalenceChecker(
                float_tolerance=self.float_tolerance,
                max_differences=self.max_differences,
            )
        return self._checker

    def close(self) -> None:
        """Close database connection."""
        if self._executor is not None:
            self._executor.close()
            self._executor = None
        self._dual = None
        self._fixture = None

    def __enter__(self) -> "CatalogValidator":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()

    def _schema_warnings(self, pair: PairExecutionResult) -> list[str]:
        warnings = []
        if DENORMALIZED_TABLE in pair.normalized.tables:
            warnings.append(f"normalized query reads {DENORMALIZED_TABLE}")
        if pair.denormalized is not None and pair.denormalized.ok:
            others = [t for t in pair.denormalized.tables if t != DENORMALIZED_TABLE]
            if others:
                warnings.append(f"denormalized query reads normalized tables: {', '.join(others)}")
        for run in (pair.normalized, pair.denormalized):
            if run is not None and run.has_limit_without_order:
                warnings.append(f"{run.role} query uses LIMIT without ORDER BY; result is nondeterministic")
        return warnings

    def _decide_ordering(self, entry: CatalogEntry, pair: PairExecutionResult, warnings: list[str]) -> bool:
        normalized_ordered = pair.normalized.has_order_by
        denormalized_ordered = pair.denormalized.has_order_by if pair.denormalized else False
        if entry.ordering is not None:
            return entry.ordering
        if normalized_ordered != denormalized_ordered:
            warnings.append("ORDER BY on only one query; compared as multisets")
            return False
        return normalized_ordered

    def validate_entry(self, entry: CatalogEntry) -> EntryResult:
        """Validate one catalog entry.

        Returns:
            EntryResult; query errors are captured as ERROR status.
        """
        result = EntryResult(
            entry_id=entry.entry_id,
            question=entry.question,
            status=EntryStatus.ERROR,
            expect_equivalent=entry.expect_equivalent,
        )

        if entry.parse_error:
            result.errors.append(f"catalog error: {entry.parse_error}")
            self._log(result)
            return result

        if entry.expect_equivalent and not entry.denormalized_sql:
            result.errors.append("no denormalized query for an entry expected to be equivalent")
            self._log(result)
            return result

        pair = self._get_dual().run_pair(entry.normalized_sql, entry.denormalized_sql)
        result.normalized_row_count = pair.normalized.row_count if pair.normalized.ok else None
        if pair.denormalized is not None and pair.denormalized.ok:
            result.denormalized_row_count = pair.denormalized.row_count

        if not pair.ok:
            result.errors.extend(str(e) for e in pair.errors)
            self._log(result)
            return result

        result.warnings.extend(self._schema_warnings(pair))

        if not entry.expect_equivalent:
            self._check_not_representable(pair, result)
            self._log(result)
            return result

        assert pair.denormalized is not None
        ordered = self._decide_ordering(entry, pair, result.warnings)
        result.ordered = ordered
        equivalence = self._get_checker().check_equivalence(
            pair.normalized.rows,
            pair.denormalized.rows,
            ordered=ordered,
            normalized_columns=pair.normalized.columns,
            denormalized_columns=pair.denormalized.columns,
        )
        result.equivalence = equivalence
        result.warnings.extend(equivalence.warnings)

        if equivalence.match:
            result.status = EntryStatus.PASS
        else:
            result.status = EntryStatus.FAIL
            result.errors.append(self._describe_mismatch(equivalence))

        self._log(result)
        return result

    def _check_not_representable(self, pair: PairExecutionResult, result: EntryResult) -> None:
        """Denormalized rows must be a sub-multiset of the normalized rows.

        The normalized rows left over are the ones only the normalized schema
        can express.
        """
        result.status = EntryStatus.NOT_REPRESENTABLE
        if pair.denormalized is None:
            result.normalized_only_rows = pair.normalized.rows[: self.max_differences]
            return

        checker = self._get_checker()
        alignment = checker.align_columns(pair.normalized.columns, pair.denormalized.columns)
        if alignment.mismatch:
            result.status = EntryStatus.FAIL
            result.errors.append(f"column mismatch: {alignment.mismatch}")
            return

        missing, extra = checker.compare_unordered(
            pair.normalized.rows, pair.denormalized.rows, alignment.pairs
        )
        result.normalized_only_rows = missing[: self.max_differences]

        if extra:
            result.status = EntryStatus.FAIL
            result.errors.append(
                f"denormalized query returned {len(extra)} rows absent from the normalized result"
            )
        elif not missing:
            result.warnings.append(
                "denormalized query returned every normalized row; the question may be representable"
            )

    def _describe_mismatch(self, equivalence: EquivalenceResult) -> str:
        if equivalence.column_mismatch:
            return f"column mismatch: {equivalence.column_mismatch}"
        if not equivalence.row_counts_match:
            return (
                f"row count mismatch: normalized={equivalence.normalized_row_count}, "
                f"denormalized={equivalence.denormalized_row_count}"
            )
        if equivalence.value_differences:
            return f"value mismatch in {len(equivalence.value_differences)} positions"
        return (
            f"row mismatch: {len(equivalence.missing_rows)} missing, "
            f"{len(equivalence.extra_rows)} extra"
        )

    def _log(self, result: EntryResult) -> None:
        if result.status in (EntryStatus.PASS, EntryStatus.NOT_REPRESENTABLE):
            logger.info("%s: %s", result.entry_id, result.status.value)
        else:
            logger.warning("%s: %s (%s)", result.entry_id, result.status.value, "; ".join(result.errors))

    def validate_catalog(self, catalog: QueryCatalog) -> CatalogReport:
        """Validate every entry in catalog order.

        Raises:
            FixtureLoadError: Fixture could not be loaded.
            FixtureIntegrityError: Fixture violates schema invariants.
        """
        report = CatalogReport(catalog=catalog.source, fixture=self.fixture.source)
        for entry in catalog:
            report.results.append(self.validate_entry(entry))
        return report


def validate_catalog_file(
    catalog_path: Optional[str] = None,
    fixtures_path: Optional[str] = None,
    float_tolerance: float = 1e-6,
) -> CatalogReport:
    """Convenience function to validate a markdown catalog file.

    Args:
        catalog_path: Markdown catalog, or None for the bundled tutorial.
        fixtures_path: CSV fixture directory, or None for built-in rows.
        float_tolerance: Tolerance for numeric comparison.

    Returns:
        CatalogReport.
    """
    catalog = load_catalog(catalog_path)
    with CatalogValidator(fixtures_path=fixtures_path, float_tolerance=float_tolerance) as validator:
        return validator.validate_catalog(catalog)
