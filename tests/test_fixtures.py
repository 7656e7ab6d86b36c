"""Tests for fixture schema, loading, export and integrity checks."""

import pytest

from qt_joins.errors import FixtureIntegrityError, FixtureLoadError
from qt_joins.execution import DuckDBExecutor
from qt_joins.fixtures import (
    ALL_TABLES,
    BUILTIN_SOURCE,
    CART,
    FixtureLoader,
    check_integrity,
    read_csv_table,
    schema_ddl,
)
from qt_joins.fixtures.sample_data import SAMPLE_ROWS


class TestSchema:
    """Tests for table definitions."""

    def test_ddl_creates_all_tables(self):
        ddl = schema_ddl()
        for table in ALL_TABLES:
            assert f"CREATE TABLE {table.name}" in ddl

    def test_cart_references_normalized_tables(self):
        assert CART.references == {
            "customer_id": "customer",
            "cashier_id": "cashier",
            "product_id": "product",
        }


class TestBuiltinFixture:
    """Tests for loading the hand-authored rows."""

    def test_row_counts(self):
        with DuckDBExecutor() as db:
            summary = FixtureLoader(db).load()

        assert summary.source == BUILTIN_SOURCE
        assert summary.row_counts["customer"] == len(SAMPLE_ROWS["customer"])
        assert summary.row_counts["cart"] == len(SAMPLE_ROWS["cart"])
        assert summary.row_counts["supermarket_transactions"] == len(SAMPLE_ROWS["cart"])
        assert summary.derived_denormalized is True
        assert summary.is_consistent

    def test_denormalized_has_one_row_per_cart_line(self, loaded_db):
        rows = loaded_db.execute(
            "SELECT COUNT(*) AS n FROM cart ca "
            "JOIN supermarket_transactions st ON st.purchase_id = ca.purchase_id "
            "AND st.customer_id = ca.customer_id AND st.product_id = ca.product_id"
        )
        assert rows[0]["n"] == len(SAMPLE_ROWS["cart"])

    def test_unpurchased_customer_absent_from_denormalized(self, loaded_db):
        normalized = loaded_db.execute("SELECT customer_id FROM customer WHERE customer_id = 6")
        denormalized = loaded_db.execute(
            "SELECT customer_id FROM supermarket_transactions WHERE customer_id = 6"
        )
        assert len(normalized) == 1
        assert denormalized == []

    def test_integrity_clean(self, loaded_db):
        assert check_integrity(loaded_db) == []


class TestDirectoryFixture:
    """Tests for CSV fixture directories."""

    def test_export_writes_normalized_tables(self, fixture_dir):
        names = sorted(p.name for p in fixture_dir.iterdir())
        assert names == ["cart.csv", "cashier.csv", "customer.csv", "product.csv"]

    def test_exported_fixture_loads_identically(self, fixture_dir):
        with DuckDBExecutor() as db:
            from_dir = FixtureLoader(db).load(fixture_dir)
            dir_rows = db.execute("SELECT * FROM supermarket_transactions ORDER BY purchase_id")
        with DuckDBExecutor() as db:
            FixtureLoader(db).load()
            builtin_rows = db.execute("SELECT * FROM supermarket_transactions ORDER BY purchase_id")

        assert from_dir.source == str(fixture_dir)
        assert dir_rows == builtin_rows

    def test_missing_table_file(self, fixture_dir):
        (fixture_dir / "cashier.csv").unlink()
        with DuckDBExecutor() as db:
            with pytest.raises(FixtureLoadError, match="cashier"):
                FixtureLoader(db).load(fixture_dir)

    def test_missing_directory(self, tmp_path):
        with DuckDBExecutor() as db:
            with pytest.raises(FixtureLoadError, match="not found"):
                FixtureLoader(db).load(tmp_path / "nope")

    def test_unknown_column_rejected(self, tmp_path):
        path = tmp_path / "cashier.csv"
        path.write_text("cashier_id,name,nickname\n1,Grace Lee,G\n")
        from qt_joins.fixtures import CASHIER
        with pytest.raises(FixtureLoadError, match="nickname"):
            read_csv_table(path, CASHIER)

    def test_empty_cells_are_null(self, tmp_path):
        path = tmp_path / "customer.csv"
        path.write_text("customer_id,first_name,last_name,phone_number,date_of_birth\n7,Gil,Moss,,\n")
        from qt_joins.fixtures import CUSTOMER
        columns, rows = read_csv_table(path, CUSTOMER)
        assert columns[0] == "customer_id"
        assert rows == [["7", "Gil", "Moss", None, None]]

    def test_orphan_foreign_key_raises(self, fixture_dir):
        with (fixture_dir / "cart.csv").open("a", encoding="utf-8") as f:
            f.write("99,2000,42,1,1,1,2024-03-09,10:00:00,card,Downtown,0,false\n")

        with DuckDBExecutor() as db:
            with pytest.raises(FixtureIntegrityError) as exc_info:
                FixtureLoader(db).load(fixture_dir)

        assert any("customer_id" in v and "42" in v for v in exc_info.value.violations)

    def test_non_positive_quantity_reported(self, fixture_dir):
        with (fixture_dir / "cart.csv").open("a", encoding="utf-8") as f:
            f.write("99,2000,1,1,1,0,2024-03-09,10:00:00,card,Downtown,0,false\n")

        with DuckDBExecutor() as db:
            summary = FixtureLoader(db, check=False).load(fixture_dir)

        assert not summary.is_consistent
        assert any("quantity" in v for v in summary.violations)

    def test_zero_priced_product_loads(self, fixture_dir):
        with (fixture_dir / "product.csv").open("a", encoding="utf-8") as f:
            f.write("9,Free tasting cup,Dairyland,Dairy,0.00\n")

        with DuckDBExecutor() as db:
            summary = FixtureLoader(db).load(fixture_dir)

        assert summary.is_consistent
        assert summary.row_counts["product"] == len(SAMPLE_ROWS["product"]) + 1

    def test_negative_price_reported(self, fixture_dir):
        with (fixture_dir / "product.csv").open("a", encoding="utf-8") as f:
            f.write("9,Refund voucher,Dairyland,Dairy,-1.00\n")

        with DuckDBExecutor() as db:
            summary = FixtureLoader(db, check=False).load(fixture_dir)

        assert any("unit_price" in v for v in summary.violations)

    def test_invalid_utf8_is_load_error(self, fixture_dir):
        (fixture_dir / "cashier.csv").write_bytes(b"cashier_id,name\n1,\xff\xfe\n")

        with DuckDBExecutor() as db:
            with pytest.raises(FixtureLoadError, match="cashier"):
                FixtureLoader(db).load(fixture_dir)

    def test_duplicate_primary_key(self, fixture_dir):
        with (fixture_dir / "product.csv").open("a", encoding="utf-8") as f:
            f.write("1,Duplicate milk,Dairyland,Dairy,1.00\n")

        with DuckDBExecutor() as db:
            with pytest.raises(FixtureLoadError, match="product"):
                FixtureLoader(db).load(fixture_dir)

    def test_supplied_denormalized_table_is_used(self, fixture_dir):
        (fixture_dir / "supermarket_transactions.csv").write_text(
            "purchase_id,transaction_id,customer_id,first_name\n1,1001,1,Alice\n"
        )
        with DuckDBExecutor() as db:
            summary = FixtureLoader(db).load(fixture_dir)

        assert summary.derived_denormalized is False
        assert summary.row_counts["supermarket_transactions"] == 1
