"""Data models for catalog validation."""

from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class EntryStatus(str, Enum):
    """Validation status of one catalog entry."""

    PASS = "pass"
    FAIL = "fail"
    ERROR = "error"
    NOT_REPRESENTABLE = "not_representable"  # equivalence skipped by design

    @property
    def is_success(self) -> bool:
        return self in (EntryStatus.PASS, EntryStatus.NOT_REPRESENTABLE)


def json_safe(value: Any) -> Any:
    """Convert an engine value to something json.dumps accepts."""
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return str(value)
        return value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (dt.date, dt.time, dt.datetime)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [json_safe(v) for v in value]
    if isinstance(value, dict):
        return {str(k): json_safe(v) for k, v in value.items()}
    return str(value)


def _rows_safe(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [json_safe(r) for r in rows]


@dataclass
class ValueDifference:
    """A single positional value difference (ordered comparison only)."""

    row_index: int
    column: str
    normalized_value: Any
    denormalized_value: Any

    def to_dict(self) -> dict[str, Any]:
        return {
            "row_index": self.row_index,
            "column": self.column,
            "normalized": json_safe(self.normalized_value),
            "denormalized": json_safe(self.denormalized_value),
        }


@dataclass
class EquivalenceResult:
    """Outcome of comparing two result sets."""

    match: bool
    ordered: bool
    normalized_row_count: int
    denormalized_row_count: int
    checksum_match: Optional[bool] = None
    column_mismatch: Optional[str] = None

    # Multiset diff: rows present on one side only (capped)
    missing_rows: list[dict[str, Any]] = field(default_factory=list)
    extra_rows: list[dict[str, Any]] = field(default_factory=list)

    # Positional diff (ordered comparison)
    value_differences: list[ValueDifference] = field(default_factory=list)

    warnings: list[str] = field(default_factory=list)

    @property
    def row_counts_match(self) -> bool:
        return self.normalized_row_count == self.denormalized_row_count

    def to_dict(self) -> dict[str, Any]:
        return {
            "match": self.match,
            "ordered": self.ordered,
            "row_counts": {
                "normalized": self.normalized_row_count,
                "denormalized": self.denormalized_row_count,
                "match": self.row_counts_match,
            },
            "checksum_match": self.checksum_match,
            "column_mismatch": self.column_mismatch,
            "missing_rows": _rows_safe(self.missing_rows),
            "extra_rows": _rows_safe(self.extra_rows),
            "value_differences": [d.to_dict() for d in self.value_differences],
            "warnings": list(self.warnings),
        }


@dataclass
class EntryResult:
    """Validation result for one catalog entry."""

    entry_id: str
    question: str
    status: EntryStatus
    expect_equivalent: bool = True
    ordered: Optional[bool] = None
    normalized_row_count: Optional[int] = None
    denormalized_row_count: Optional[int] = None
    equivalence: Optional[EquivalenceResult] = None

    # Rows only the normalized schema can express (not-representable entries)
    normalized_only_rows: list[dict[str, Any]] = field(default_factory=list)

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.entry_id,
            "question": self.question,
            "status": self.status.value,
            "expect_equivalent": self.expect_equivalent,
            "ordered": self.ordered,
            "row_counts": {
                "normalized": self.normalized_row_count,
                "denormalized": self.denormalized_row_count,
            },
            "equivalence": self.equivalence.to_dict() if self.equivalence else None,
            "normalized_only_rows": _rows_safe(self.normalized_only_rows),
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


@dataclass
class CatalogReport:
    """Results for a whole catalog run, in catalog order."""

    catalog: str
    fixture: str
    results: list[EntryResult] = field(default_factory=list)

    def count(self, status: EntryStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def counts(self) -> dict[str, int]:
        return {status.value: self.count(status) for status in EntryStatus}

    @property
    def passed(self) -> bool:
        """True when no entry failed or errored."""
        return all(r.status.is_success for r in self.results)

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "catalog": self.catalog,
            "fixture": self.fixture,
            "passed": self.passed,
            "summary": self.counts,
            "entries": [r.to_dict() for r in self.results],
        }
