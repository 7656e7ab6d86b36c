"""Tests for sqlglot-based query inspection."""

import pytest

from qt_joins.errors import QuerySyntaxError
from qt_joins.validation import QueryNormalizer


@pytest.fixture
def normalizer():
    return QueryNormalizer(dialect="duckdb")


class TestOrderDetection:

    def test_top_level_order_by(self, normalizer):
        shape = normalizer.analyze("SELECT a FROM t ORDER BY a")
        assert shape.has_order_by is True

    def test_subquery_order_by_ignored(self, normalizer):
        shape = normalizer.analyze("SELECT a FROM (SELECT a FROM t ORDER BY a) sub")
        assert shape.has_order_by is False

    def test_window_order_by_ignored(self, normalizer):
        shape = normalizer.analyze("SELECT a, ROW_NUMBER() OVER (ORDER BY a) AS rn FROM t")
        assert shape.has_order_by is False

    def test_union_order_by(self, normalizer):
        shape = normalizer.analyze("SELECT a FROM t UNION ALL SELECT a FROM u ORDER BY a")
        assert shape.has_order_by is True

    def test_limit_without_order(self, normalizer):
        assert normalizer.analyze("SELECT a FROM t LIMIT 3").has_limit_without_order is True
        assert normalizer.analyze("SELECT a FROM t ORDER BY a LIMIT 3").has_limit_without_order is False


class TestReferencedTables:

    def test_join_tables(self, normalizer):
        shape = normalizer.analyze(
            "SELECT * FROM cart ca JOIN customer cu ON cu.customer_id = ca.customer_id"
        )
        assert shape.tables == ["cart", "customer"]

    def test_cte_names_excluded(self, normalizer):
        shape = normalizer.analyze(
            "WITH spend AS (SELECT customer_id FROM cart) SELECT * FROM spend"
        )
        assert shape.tables == ["cart"]


class TestStatementChecks:

    def test_trailing_semicolon_ok(self, normalizer):
        normalizer.parse_statement("SELECT 1;")

    def test_multiple_statements(self, normalizer):
        with pytest.raises(QuerySyntaxError, match="single statement"):
            normalizer.parse_statement("SELECT 1; SELECT 2;")

    def test_write_statement_rejected(self, normalizer):
        with pytest.raises(QuerySyntaxError, match="read queries"):
            normalizer.parse_statement("DELETE FROM cart", role="denormalized")

    def test_empty(self, normalizer):
        with pytest.raises(QuerySyntaxError, match="empty"):
            normalizer.parse_statement("   ")

    def test_error_names_role_and_statement(self, normalizer):
        with pytest.raises(QuerySyntaxError) as exc_info:
            normalizer.parse_statement("DROP TABLE cart", role="normalized")
        assert exc_info.value.role == "normalized"
        assert "normalized query" in str(exc_info.value)
        assert "DROP TABLE cart" in str(exc_info.value)
