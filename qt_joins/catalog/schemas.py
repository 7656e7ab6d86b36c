"""Data models for the query catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class CatalogEntry:
    """One business question with its normalized and denormalized SQL."""

    entry_id: str
    question: str
    normalized_sql: str
    denormalized_sql: Optional[str] = None
    expect_equivalent: bool = True
    """False when the question cannot be answered on the denormalized schema."""

    ordering: Optional[bool] = None
    """None = detect ORDER BY; True/False force ordered/unordered comparison."""

    description: str = ""
    line: int = 0
    """1-based line of the entry heading in the source markdown."""

    parse_error: Optional[str] = None
    """Set when the section could not be turned into a query pair."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.entry_id,
            "question": self.question,
            "expect_equivalent": self.expect_equivalent,
            "ordering": self.ordering,
            "has_denormalized": self.denormalized_sql is not None,
            "line": self.line,
            "description": self.description,
            "normalized_sql": self.normalized_sql,
            "denormalized_sql": self.denormalized_sql,
            "parse_error": self.parse_error,
        }


@dataclass
class QueryCatalog:
    """Ordered collection of catalog entries parsed from one source."""

    source: str
    entries: list[CatalogEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def get(self, entry_id: str) -> Optional[CatalogEntry]:
        for entry in self.entries:
            if entry.entry_id == entry_id:
                return entry
        return None

    def select(self, entry_ids: list[str]) -> "QueryCatalog":
        """Sub-catalog with only the given ids, in catalog order.

        Raises:
            KeyError: If an id is not in the catalog.
        """
        known = {e.entry_id for e in self.entries}
        unknown = [i for i in entry_ids if i not in known]
        if unknown:
            raise KeyError(f"Unknown catalog entries: {', '.join(unknown)}")
        wanted = set(entry_ids)
        return QueryCatalog(
            source=self.source,
            entries=[e for e in self.entries if e.entry_id in wanted],
        )
