"""Runs a normalized / denormalized query pair against one fixture database."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from ..errors import QueryError
from .duckdb_executor import DuckDBExecutor

logger = logging.getLogger(__name__)

NORMALIZED = "normalized"
DENORMALIZED = "denormalized"


@dataclass
class QueryRun:
    """Outcome of running one side of a pair."""

    role: str
    sql: str
    columns: list[str] = field(default_factory=list)
    rows: list[dict[str, Any]] = field(default_factory=list)
    has_order_by: bool = False
    has_limit_without_order: bool = False
    tables: list[str] = field(default_factory=list)
    error: Optional[QueryError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def row_count(self) -> int:
        return len(self.rows)


@dataclass
class PairExecutionResult:
    """Both sides of a pair. ``denormalized`` is None when no SQL was given."""

    normalized: QueryRun
    denormalized: Optional[QueryRun] = None

    @property
    def errors(self) -> list[QueryError]:
        runs = [self.normalized, self.denormalized]
        return [r.error for r in runs if r is not None and r.error is not None]

    @property
    def ok(self) -> bool:
        return not self.errors


class DualExecutor:
    """Executes SQL pairs and captures result sets or errors per side.

    Every statement is parsed with sqlglot before it reaches DuckDB so that
    malformed SQL and non-read statements are reported as syntax errors
    naming the offending statement. Errors never propagate out of
    ``run_pair``; they are stored on the QueryRun for that side.

    Args:
        executor: Connected executor holding the loaded fixture.
        dialect: sqlglot dialect used for pre-parsing.
    """

    def __init__(self, executor: DuckDBExecutor, dialect: str = "duckdb"):
        from ..validation.query_normalizer import QueryNormalizer

        self.executor = executor
        self.normalizer = QueryNormalizer(dialect=dialect)

    def run(self, sql: str, role: str = NORMALIZED) -> QueryRun:
        """Run a single query.

        Raises:
            QuerySyntaxError: Malformed SQL or not a single read query.
            QueryBindingError: Unknown table or column.
            QueryExecutionError: Any other engine failure.
        """
        shape = self.normalizer.analyze(sql, role=role)
        columns, rows = self.executor.query(sql, role=role)

        logger.debug("%s query returned %d rows", role, len(rows))
        return QueryRun(
            role=role,
            sql=sql,
            columns=columns,
            rows=rows,
            has_order_by=shape.has_order_by,
            has_limit_without_order=shape.has_limit_without_order,
            tables=shape.tables,
        )

    def _run_captured(self, sql: str, role: str) -> QueryRun:
        try:
            return self.run(sql, role=role)
        except QueryError as e:
            logger.warning("%s", e)
            return QueryRun(role=role, sql=sql, error=e)

    def run_pair(
        self, normalized_sql: str, denormalized_sql: Optional[str] = None
    ) -> PairExecutionResult:
        """Run both queries of a catalog entry.

        Both sides are always attempted, so an error on one side does not
        hide an error on the other.
        """
        normalized = self._run_captured(normalized_sql, NORMALIZED)
        denormalized = None
        if denormalized_sql:
            denormalized = self._run_captured(denormalized_sql, DENORMALIZED)
        return PairExecutionResult(normalized=normalized, denormalized=denormalized)
