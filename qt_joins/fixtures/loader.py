"""Fixture loading into an in-memory DuckDB database.

Two sources are supported:
- the built-in sample rows (``sample_data``)
- a directory of CSV files, one per table, with a header row

When a source does not provide ``supermarket_transactions`` it is derived
from the normalized tables with a four-way inner join.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Sequence

import duckdb

from ..errors import FixtureIntegrityError, FixtureLoadError
from ..execution.duckdb_executor import DuckDBExecutor
from .integrity import check_integrity
from .sample_data import SAMPLE_ROWS
from .schema import (
    ALL_TABLES,
    DENORMALIZE_SQL,
    NORMALIZED_TABLES,
    SUPERMARKET_TRANSACTIONS,
    TableSpec,
    schema_ddl,
)

logger = logging.getLogger(__name__)

BUILTIN_SOURCE = "builtin"


@dataclass
class FixtureSummary:
    """What was loaded and from where."""

    source: str
    row_counts: dict[str, int] = field(default_factory=dict)
    derived_denormalized: bool = True
    violations: list[str] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        return not self.violations

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "row_counts": dict(self.row_counts),
            "derived_denormalized": self.derived_denormalized,
            "violations": list(self.violations),
        }


def _cell(value: str) -> Optional[str]:
    # Empty CSV cells are NULL
    return None if value == "" else value


def read_csv_table(path: Path, spec: TableSpec) -> tuple[list[str], list[list[Optional[str]]]]:
    """Read a fixture CSV for one table.

    Args:
        path: CSV file with a header row.
        spec: Table the file populates.

    Returns:
        Tuple of (column names from the header, row values).

    Raises:
        FixtureLoadError: File is unreadable or not valid UTF-8 CSV, header is
            missing, names unknown columns, or omits the primary key.
    """
    try:
        with path.open(newline="", encoding="utf-8") as f:
            reader = csv.reader(f)
            header = next(reader, None)
            if not header:
                raise FixtureLoadError("file has no header row", table=spec.name)
            columns = [h.strip() for h in header]
            rows = [[_cell(v) for v in row] for row in reader if row]
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise FixtureLoadError(f"cannot read {path.name}", table=spec.name, original_error=e) from e

    unknown = [c for c in columns if c not in spec.column_names]
    if unknown:
        raise FixtureLoadError(f"unknown columns {unknown}", table=spec.name)
    if spec.primary_key not in columns:
        raise FixtureLoadError(f"missing key column '{spec.primary_key}'", table=spec.name)

    for line_no, row in enumerate(rows, start=2):
        if len(row) != len(columns):
            raise FixtureLoadError(
                f"line {line_no} has {len(row)} values, expected {len(columns)}",
                table=spec.name,
            )

    return columns, rows


class FixtureLoader:
    """Creates the supermarket schema and fills it with fixture rows.

    Args:
        executor: Executor owning the target DuckDB connection.
        check: If True, run integrity checks after loading and raise
            FixtureIntegrityError on violations.
    """

    def __init__(self, executor: DuckDBExecutor, check: bool = True):
        self.executor = executor
        self.check = check

    def load(self, fixtures_path: Optional[str | Path] = None) -> FixtureSummary:
        """Load the built-in fixture, or a CSV directory when a path is given."""
        if fixtures_path is None:
            return self.load_builtin()
        return self.load_directory(Path(fixtures_path))

    def load_builtin(self) -> FixtureSummary:
        """Load the hand-authored sample rows."""
        self._create_schema()
        for spec in NORMALIZED_TABLES:
            self._insert(spec, spec.column_names, SAMPLE_ROWS[spec.name])
        self._derive_denormalized()
        return self._finish(BUILTIN_SOURCE, derived=True)

    def load_directory(self, directory: Path) -> FixtureSummary:
        """Load ``<table>.csv`` files from a directory."""
        if not directory.is_dir():
            raise FixtureLoadError(f"fixture directory not found: {directory}")

        self._create_schema()
        for spec in NORMALIZED_TABLES:
            path = directory / f"{spec.name}.csv"
            if not path.exists():
                raise FixtureLoadError(f"missing {path.name}", table=spec.name)
            columns, rows = read_csv_table(path, spec)
            self._insert(spec, columns, rows)

        denorm_path = directory / f"{SUPERMARKET_TRANSACTIONS.name}.csv"
        derived = not denorm_path.exists()
        if derived:
            self._derive_denormalized()
        else:
            columns, rows = read_csv_table(denorm_path, SUPERMARKET_TRANSACTIONS)
            self._insert(SUPERMARKET_TRANSACTIONS, columns, rows)

        return self._finish(str(directory), derived=derived)

    def _create_schema(self) -> None:
        try:
            self.executor.execute_script(schema_ddl())
        except duckdb.Error as e:
            raise FixtureLoadError("cannot create schema", original_error=e) from e

    def _insert(self, spec: TableSpec, columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> None:
        types = dict(spec.columns)
        try:
            self.executor.insert_rows(spec.name, columns, [types[c] for c in columns], rows)
        except duckdb.Error as e:
            raise FixtureLoadError("insert failed", table=spec.name, original_error=e) from e

    def _derive_denormalized(self) -> None:
        try:
            self.executor.execute_script(DENORMALIZE_SQL)
        except duckdb.Error as e:
            raise FixtureLoadError(
                "cannot derive denormalized table",
                table=SUPERMARKET_TRANSACTIONS.name,
                original_error=e,
            ) from e

    def _finish(self, source: str, derived: bool) -> FixtureSummary:
        summary = FixtureSummary(
            source=source,
            row_counts={t.name: self.executor.row_count(t.name) for t in ALL_TABLES},
            derived_denormalized=derived,
            violations=check_integrity(self.executor),
        )
        logger.info(
            "Loaded fixture %s: %s",
            source,
            ", ".join(f"{k}={v}" for k, v in summary.row_counts.items()),
        )
        if summary.violations:
            logger.warning("Fixture %s has %d integrity violations", source, len(summary.violations))
            if self.check:
                raise FixtureIntegrityError(summary.violations)
        return summary


def _csv_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def export_fixture(directory: str | Path) -> list[Path]:
    """Write the built-in fixture as CSV files loadable by ``load_directory``.

    Only normalized tables are written; the denormalized table is derived
    on load.

    Returns:
        Paths of the written files.
    """
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for spec in NORMALIZED_TABLES:
        path = out_dir / f"{spec.name}.csv"
        with path.open("w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(spec.column_names)
            for row in SAMPLE_ROWS[spec.name]:
                writer.writerow([_csv_value(v) for v in row])
        written.append(path)

    logger.info("Exported %d fixture tables to %s", len(written), out_dir)
    return written
