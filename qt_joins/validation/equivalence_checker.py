"""Equivalence checker for comparing normalized and denormalized results."""

from __future__ import annotations

import datetime as dt
import hashlib
import json
import logging
import math
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional, Sequence

from .schemas import EquivalenceResult, ValueDifference

logger = logging.getLogger(__name__)


@dataclass
class RowCountResult:
    """Result of row count comparison."""

    normalized_count: int
    denormalized_count: int
    match: bool


@dataclass
class ColumnAlignment:
    """How normalized columns line up with denormalized columns."""

    pairs: list[tuple[str, str]]
    by_position: bool = False
    mismatch: Optional[str] = None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


class EquivalenceChecker:
    """Checks equivalence between two query results.

    Supports:
    - Row count comparison
    - Checksum comparison (fast path, order-independent)
    - Positional comparison when both queries define an ORDER BY
    - Multiset comparison otherwise
    - Numeric comparison with an absolute tolerance (AVG, derived totals)
    """

    def __init__(self, float_tolerance: float = 1e-6, max_differences: int = 10):
        """Initialize checker.

        Args:
            float_tolerance: Absolute tolerance for numeric comparison.
            max_differences: Maximum number of diff rows/values to record.
        """
        self.float_tolerance = float_tolerance
        self.max_differences = max_differences

    def compare_row_counts(
        self, normalized_rows: list[dict], denormalized_rows: list[dict]
    ) -> RowCountResult:
        """Compare row counts."""
        normalized_count = len(normalized_rows)
        denormalized_count = len(denormalized_rows)
        return RowCountResult(
            normalized_count=normalized_count,
            denormalized_count=denormalized_count,
            match=normalized_count == denormalized_count,
        )

    def _normalize_value(self, value: Any) -> str:
        """Normalize a value for hashing and sorting.

        Handles:
        - None/NULL values
        - NaN and Inf floats
        - Decimal and float rounding
        - Dates and times

        Args:
            value: Value to normalize.

        Returns:
            String representation suitable for comparison/hashing/sorting.
        """
        if value is None:
            return "__NULL__"

        if isinstance(value, bool):
            return str(value)

        if isinstance(value, Decimal):
            value = float(value)

        if isinstance(value, float):
            if math.isnan(value):
                return "__NAN__"
            if math.isinf(value):
                return f"__INF_{'pos' if value > 0 else 'neg'}__"
            return f"{round(value, 9):.9f}"

        if isinstance(value, int):
            # Pad integers for proper string sorting
            return f"{value:020d}" if value >= 0 else f"-{abs(value):019d}"

        if isinstance(value, str):
            return value

        if isinstance(value, (dt.date, dt.time, dt.datetime)):
            return value.isoformat()

        if isinstance(value, (list, tuple)):
            return "[" + ",".join(self._normalize_value(v) for v in value) + "]"

        if isinstance(value, dict):
            items = sorted((k, self._normalize_value(v)) for k, v in value.items())
            return "{" + ",".join(f"{k}:{v}" for k, v in items) + "}"

        return str(value)

    def _row_key(self, row: dict, columns: Sequence[str]) -> tuple:
        """Convert a row dict to a tuple of normalized values."""
        return tuple(self._normalize_value(row.get(col)) for col in columns)

    def compute_checksum(self, rows: list[dict], columns: Sequence[str]) -> str:
        """Compute MD5 checksum of sorted, normalized rows.

        Args:
            rows: Row dictionaries.
            columns: Columns to include, in comparison order.

        Returns:
            MD5 hex digest of the normalized rows.
        """
        if not rows:
            return hashlib.md5(b"__EMPTY__").hexdigest()

        normalized = sorted(self._row_key(row, columns) for row in rows)
        serialized = json.dumps(normalized, sort_keys=True, default=str)
        return hashlib.md5(serialized.encode("utf-8")).hexdigest()

    def _values_equal(self, v1: Any, v2: Any) -> bool:
        """Check if two values are equal, with tolerance for numbers."""
        if v1 is None or v2 is None:
            return v1 is None and v2 is None

        if _is_number(v1) and _is_number(v2):
            f1, f2 = float(v1), float(v2)
            if math.isnan(f1) or math.isnan(f2):
                return math.isnan(f1) and math.isnan(f2)
            if math.isinf(f1) or math.isinf(f2):
                return f1 == f2
            if isinstance(v1, int) and isinstance(v2, int):
                return v1 == v2
            return abs(f1 - f2) <= self.float_tolerance

        return self._normalize_value(v1) == self._normalize_value(v2)

    def _rows_equal(self, left: dict, right: dict, pairs: Sequence[tuple[str, str]]) -> bool:
        return all(self._values_equal(left.get(lc), right.get(rc)) for lc, rc in pairs)

    def align_columns(
        self, normalized_columns: Sequence[str], denormalized_columns: Sequence[str]
    ) -> ColumnAlignment:
        """Pair up result columns.

        Columns are matched by name (case-insensitive). When the names
        differ but the column counts agree, columns are matched by position.
        """
        norm_lower = {c.lower(): c for c in normalized_columns}
        denorm_lower = {c.lower(): c for c in denormalized_columns}

        if len(normalized_columns) == len(denormalized_columns) and set(norm_lower) == set(denorm_lower):
            return ColumnAlignment(pairs=[(c, denorm_lower[c.lower()]) for c in normalized_columns])

        if len(normalized_columns) == len(denormalized_columns):
            return ColumnAlignment(
                pairs=list(zip(normalized_columns, denormalized_columns)),
                by_position=True,
            )

        return ColumnAlignment(
            pairs=[],
            mismatch=(
                f"normalized returns {len(normalized_columns)} columns {list(normalized_columns)}, "
                f"denormalized returns {len(denormalized_columns)} columns {list(denormalized_columns)}"
            ),
        )

    def compare_ordered(
        self,
        normalized_rows: list[dict],
        denormalized_rows: list[dict],
        pairs: Sequence[tuple[str, str]],
    ) -> list[ValueDifference]:
        """Compare rows positionally. Row counts must already match."""
        differences: list[ValueDifference] = []

        for i, (left, right) in enumerate(zip(normalized_rows, denormalized_rows)):
            for left_col, right_col in pairs:
                left_val = left.get(left_col)
                right_val = right.get(right_col)
                if not self._values_equal(left_val, right_val):
                    differences.append(
                        ValueDifference(
                            row_index=i,
                            column=left_col,
                            normalized_value=left_val,
                            denormalized_value=right_val,
                        )
                    )
                    if len(differences) >= self.max_differences:
                        return differences

        return differences

    def compare_unordered(
        self,
        normalized_rows: list[dict],
        denormalized_rows: list[dict],
        pairs: Sequence[tuple[str, str]],
    ) -> tuple[list[dict], list[dict]]:
        """Compare rows as multisets.

        Exact matches on normalized keys are paired first; the remainder is
        paired greedily under numeric tolerance.

        Returns:
            Tuple of (rows only in normalized, rows only in denormalized).
        """
        left_cols = [lc for lc, _ in pairs]
        right_cols = [rc for _, rc in pairs]

        buckets: dict[tuple, list[int]] = defaultdict(list)
        for j, row in enumerate(denormalized_rows):
            buckets[self._row_key(row, right_cols)].append(j)

        matched_right: set[int] = set()
        unmatched_left: list[dict] = []
        for row in normalized_rows:
            bucket = buckets.get(self._row_key(row, left_cols))
            if bucket:
                matched_right.add(bucket.pop())
            else:
                unmatched_left.append(row)

        remaining_right = [j for j in range(len(denormalized_rows)) if j not in matched_right]
        missing: list[dict] = []
        for row in unmatched_left:
            for pos, j in enumerate(remaining_right):
                if self._rows_equal(row, denormalized_rows[j], pairs):
                    del remaining_right[pos]
                    break
            else:
                missing.append(row)

        extra = [denormalized_rows[j] for j in remaining_right]
        return missing, extra

    def check_equivalence(
        self,
        normalized_rows: list[dict],
        denormalized_rows: list[dict],
        ordered: bool = False,
        normalized_columns: Optional[Sequence[str]] = None,
        denormalized_columns: Optional[Sequence[str]] = None,
    ) -> EquivalenceResult:
        """Check whether two result sets are logically equivalent.

        Args:
            normalized_rows: Rows from the normalized-schema query.
            denormalized_rows: Rows from the denormalized-schema query.
            ordered: Compare positionally (both queries define ORDER BY).
            normalized_columns: Result columns; defaults to first row keys.
            denormalized_columns: Result columns; defaults to first row keys.

        Returns:
            EquivalenceResult with match status and diff.
        """
        if normalized_columns is None:
            normalized_columns = list(normalized_rows[0].keys()) if normalized_rows else []
        if denormalized_columns is None:
            denormalized_columns = list(denormalized_rows[0].keys()) if denormalized_rows else []

        counts = self.compare_row_counts(normalized_rows, denormalized_rows)
        result = EquivalenceResult(
            match=False,
            ordered=ordered,
            normalized_row_count=counts.normalized_count,
            denormalized_row_count=counts.denormalized_count,
        )

        alignment = self.align_columns(normalized_columns, denormalized_columns)
        if alignment.mismatch:
            result.column_mismatch = alignment.mismatch
            return result
        if alignment.by_position:
            result.warnings.append(
                "column names differ; compared by position: "
                + ", ".join(f"{lc}~{rc}" for lc, rc in alignment.pairs)
            )

        pairs = alignment.pairs
        left_checksum = self.compute_checksum(normalized_rows, [lc for lc, _ in pairs])
        right_checksum = self.compute_checksum(denormalized_rows, [rc for _, rc in pairs])
        result.checksum_match = left_checksum == right_checksum

        if ordered and counts.match:
            result.value_differences = self.compare_ordered(normalized_rows, denormalized_rows, pairs)
            result.match = not result.value_differences
            return result

        # Unordered, or ordered with differing counts: a multiset diff explains
        # which rows are missing or extra.
        if result.checksum_match and counts.match and not ordered:
            result.match = True
            return result

        missing, extra = self.compare_unordered(normalized_rows, denormalized_rows, pairs)
        result.missing_rows = missing[: self.max_differences]
        result.extra_rows = extra[: self.max_differences]
        result.match = not ordered and not missing and not extra
        logger.debug(
            "Multiset diff: %d missing, %d extra", len(missing), len(extra)
        )
        return result
