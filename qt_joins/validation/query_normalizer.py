"""Static inspection of catalog SQL with sqlglot.

Decides how a pair of result sets must be compared (ordered or as a
multiset) and rejects anything that is not a single read query before it
reaches the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import sqlglot
from sqlglot import exp

from ..errors import QuerySyntaxError


@dataclass
class QueryShape:
    """Shape of a parsed query relevant to result comparison."""

    has_order_by: bool
    has_limit_without_order: bool
    tables: List[str] = field(default_factory=list)


class QueryNormalizer:
    """Parses catalog queries and reports their comparison-relevant shape."""

    def __init__(self, dialect: str = "duckdb"):
        """Initialize normalizer.

        Args:
            dialect: SQL dialect for parsing (duckdb, postgres, etc.)
        """
        self.dialect = dialect

    def parse_statement(self, sql: str, role: str = "") -> exp.Expression:
        """Parse exactly one read-only query.

        Args:
            sql: SQL text.
            role: Label used in error messages ("normalized"/"denormalized").

        Returns:
            The parsed query expression.

        Raises:
            QuerySyntaxError: SQL does not parse, holds several statements,
                or is not a SELECT/set operation.
        """
        if not sql or not sql.strip():
            raise QuerySyntaxError("empty statement", sql=sql, role=role)

        try:
            statements = [s for s in sqlglot.parse(sql, dialect=self.dialect) if s is not None]
        except sqlglot.errors.SqlglotError as e:
            raise QuerySyntaxError(str(e), sql=sql, role=role) from e

        if len(statements) != 1:
            raise QuerySyntaxError(
                f"expected a single statement, found {len(statements)}", sql=sql, role=role
            )

        statement = statements[0]
        if not isinstance(statement, exp.Query):
            raise QuerySyntaxError(
                f"only read queries are allowed, got {statement.key.upper()}",
                sql=sql,
                role=role,
            )
        return statement

    def has_order_by(self, parsed: exp.Expression) -> bool:
        """True if the outermost query defines an ORDER BY.

        ORDER BY inside subqueries, CTEs or window specs does not order the
        final result and is ignored.
        """
        return parsed.args.get("order") is not None

    def detect_limit_without_order(self, parsed: exp.Expression) -> bool:
        """True if the outermost query has LIMIT but no ORDER BY."""
        return parsed.args.get("limit") is not None and not self.has_order_by(parsed)

    def referenced_tables(self, parsed: exp.Expression) -> List[str]:
        """Names of base tables read by the query, excluding CTE names."""
        cte_names = {cte.alias_or_name.lower() for cte in parsed.find_all(exp.CTE)}
        names = {
            table.name.lower()
            for table in parsed.find_all(exp.Table)
            if table.name and table.name.lower() not in cte_names
        }
        return sorted(names)

    def analyze(self, sql: str, role: str = "") -> QueryShape:
        """Parse and describe a query.

        Raises:
            QuerySyntaxError: See ``parse_statement``.
        """
        parsed = self.parse_statement(sql, role=role)
        return QueryShape(
            has_order_by=self.has_order_by(parsed),
            has_limit_without_order=self.detect_limit_without_order(parsed),
            tables=self.referenced_tables(parsed),
        )
