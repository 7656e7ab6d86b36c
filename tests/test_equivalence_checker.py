"""Tests for result-set equivalence checking."""

import datetime as dt
from decimal import Decimal

from qt_joins.validation import EquivalenceChecker


class TestRowCounts:

    def test_counts(self, checker):
        counts = checker.compare_row_counts([{"a": 1}], [{"a": 1}, {"a": 2}])
        assert counts.normalized_count == 1
        assert counts.denormalized_count == 2
        assert not counts.match


class TestUnordered:

    def test_same_rows_different_order(self, checker):
        left = [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]
        right = [{"id": 2, "name": "Bob"}, {"id": 1, "name": "Alice"}]

        result = checker.check_equivalence(left, right)

        assert result.match
        assert result.checksum_match
        assert not result.ordered

    def test_duplicates_counted(self, checker):
        left = [{"id": 1}, {"id": 1}, {"id": 2}]
        right = [{"id": 1}, {"id": 2}, {"id": 2}]

        result = checker.check_equivalence(left, right)

        assert not result.match
        assert result.missing_rows == [{"id": 1}]
        assert result.extra_rows == [{"id": 2}]

    def test_missing_and_extra(self, checker):
        result = checker.check_equivalence(
            [{"id": 1}, {"id": 2}, {"id": 6}],
            [{"id": 1}, {"id": 2}],
        )
        assert not result.match
        assert not result.row_counts_match
        assert result.missing_rows == [{"id": 6}]
        assert result.extra_rows == []

    def test_empty_results_match(self, checker):
        result = checker.check_equivalence([], [], normalized_columns=["a"], denormalized_columns=["a"])
        assert result.match

    def test_diff_capped(self):
        checker = EquivalenceChecker(max_differences=3)
        left = [{"id": i} for i in range(10)]
        result = checker.check_equivalence(left, [], normalized_columns=["id"], denormalized_columns=["id"])
        assert len(result.missing_rows) == 3


class TestOrdered:

    def test_order_matters(self, checker):
        left = [{"id": 1}, {"id": 2}]
        right = [{"id": 2}, {"id": 1}]

        result = checker.check_equivalence(left, right, ordered=True)

        assert not result.match
        assert result.checksum_match
        assert [d.row_index for d in result.value_differences] == [0, 1]

    def test_identical_order(self, checker):
        rows = [{"id": 1}, {"id": 2}]
        assert checker.check_equivalence(rows, list(rows), ordered=True).match

    def test_ordered_count_mismatch_reports_rows(self, checker):
        result = checker.check_equivalence([{"id": 1}, {"id": 2}], [{"id": 1}], ordered=True)
        assert not result.match
        assert result.missing_rows == [{"id": 2}]


class TestValues:

    def test_strings_compared_exactly(self, checker):
        result = checker.check_equivalence([{"name": "Alice "}], [{"name": "Alice"}])
        assert not result.match
        assert result.missing_rows == [{"name": "Alice "}]

    def test_float_tolerance(self, checker):
        result = checker.check_equivalence([{"avg": 2.0}], [{"avg": 2.0000000001}])
        assert result.match

    def test_float_outside_tolerance(self, checker):
        result = checker.check_equivalence([{"avg": 2.0}], [{"avg": 2.001}])
        assert not result.match

    def test_decimal_and_float(self, checker):
        result = checker.check_equivalence([{"price": Decimal("1.29")}], [{"price": 1.29}])
        assert result.match

    def test_null_equals_null_only(self, checker):
        assert checker.check_equivalence([{"x": None}], [{"x": None}]).match
        assert not checker.check_equivalence([{"x": None}], [{"x": 0}]).match

    def test_bool_is_not_number(self, checker):
        assert not checker.check_equivalence([{"x": True}], [{"x": 1}]).match

    def test_dates(self, checker):
        day = dt.date(2024, 3, 1)
        assert checker.check_equivalence([{"d": day}], [{"d": dt.date(2024, 3, 1)}]).match


class TestColumns:

    def test_case_insensitive_names(self, checker):
        result = checker.check_equivalence([{"Name": "Alice"}], [{"name": "Alice"}])
        assert result.match
        assert result.warnings == []

    def test_name_order_does_not_matter(self, checker):
        result = checker.check_equivalence(
            [{"a": 1, "b": 2}], [{"b": 2, "a": 1}],
            normalized_columns=["a", "b"], denormalized_columns=["b", "a"],
        )
        assert result.match

    def test_positional_fallback_warns(self, checker):
        result = checker.check_equivalence([{"cashier": "Grace"}], [{"cashier_name": "Grace"}])
        assert result.match
        assert any("by position" in w for w in result.warnings)

    def test_column_count_mismatch(self, checker):
        result = checker.check_equivalence([{"a": 1, "b": 2}], [{"a": 1}])
        assert not result.match
        assert "2 columns" in result.column_mismatch
