"""Exceptions raised by QueryTorque Joins.

Query errors are recoverable: the catalog validator records them against the
entry that produced them and moves on. Catalog and fixture errors make every
entry meaningless and are surfaced to the caller.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class QtJoinsError(Exception):
    """Base exception for all harness errors."""

    pass


class CatalogError(QtJoinsError):
    """Raised when a markdown catalog cannot be read or parsed."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path:
            message = f"Error reading catalog '{path}': {message}"
        super().__init__(message)


class FixtureLoadError(QtJoinsError):
    """Raised when fixture data cannot be loaded into the engine."""

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.table = table
        self.original_error = original_error

        if table:
            message = f"Error loading fixture table '{table}': {message}"

        if original_error:
            message = f"{message} (Original error: {original_error})"

        super().__init__(message)


class FixtureIntegrityError(QtJoinsError):
    """Raised when loaded fixture rows violate schema invariants."""

    def __init__(self, violations: list[str]):
        self.violations = violations
        summary = "; ".join(violations[:5])
        if len(violations) > 5:
            summary += f"; ... ({len(violations) - 5} more)"
        super().__init__(f"Fixture integrity check failed: {summary}")


class QueryError(QtJoinsError):
    """Base for errors raised by a single catalog query.

    Attributes:
        role: Which side of the pair failed ("normalized" or "denormalized").
        sql: The offending statement.
        detail: Engine or parser message.
    """

    kind = "query"

    def __init__(self, detail: str, sql: str = "", role: str = ""):
        self.detail = detail
        self.sql = sql
        self.role = role
        super().__init__(self._format())

    @property
    def statement(self) -> str:
        """First non-blank line of the offending SQL."""
        for line in self.sql.splitlines():
            if line.strip():
                return line.strip()
        return ""

    def _format(self) -> str:
        prefix = f"{self.role} query" if self.role else "query"
        message = f"{self.kind} error in {prefix}: {self.detail}"
        if self.statement:
            message += f" [statement: {self.statement}]"
        return message


class QuerySyntaxError(QueryError):
    """Malformed SQL, or something other than a single read query."""

    kind = "syntax"


class QueryBindingError(QueryError):
    """SQL references a table or column that does not exist."""

    kind = "binding"


class QueryExecutionError(QueryError):
    """Engine failure that is neither a syntax nor a binding problem."""

    kind = "execution"
