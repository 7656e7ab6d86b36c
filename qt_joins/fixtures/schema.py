"""Supermarket schema: four normalized relations plus the flattened one."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TableSpec:
    """A fixture table: name, ordered (column, type) pairs, key column."""

    name: str
    columns: tuple[tuple[str, str], ...]
    primary_key: str
    normalized: bool = True
    references: dict[str, str] = field(default_factory=dict)
    """Foreign key column -> referenced table (normalized schema only)."""

    @property
    def column_names(self) -> list[str]:
        return [name for name, _ in self.columns]

    def ddl(self) -> str:
        """CREATE TABLE statement for DuckDB."""
        cols = ",\n    ".join(f"{name} {sql_type}" for name, sql_type in self.columns)
        return (
            f"CREATE TABLE {self.name} (\n"
            f"    {cols},\n"
            f"    PRIMARY KEY ({self.primary_key})\n"
            f");"
        )


CUSTOMER = TableSpec(
    name="customer",
    columns=(
        ("customer_id", "INTEGER"),
        ("first_name", "VARCHAR"),
        ("last_name", "VARCHAR"),
        ("phone_number", "VARCHAR"),
        ("date_of_birth", "DATE"),
    ),
    primary_key="customer_id",
)

CASHIER = TableSpec(
    name="cashier",
    columns=(
        ("cashier_id", "INTEGER"),
        ("name", "VARCHAR"),
    ),
    primary_key="cashier_id",
)

PRODUCT = TableSpec(
    name="product",
    columns=(
        ("product_id", "INTEGER"),
        ("description", "VARCHAR"),
        ("brand_name", "VARCHAR"),
        ("category", "VARCHAR"),
        ("unit_price", "DECIMAL(10, 2)"),
    ),
    primary_key="product_id",
)

CART = TableSpec(
    name="cart",
    columns=(
        ("purchase_id", "INTEGER"),
        ("transaction_id", "INTEGER"),
        ("customer_id", "INTEGER"),
        ("cashier_id", "INTEGER"),
        ("product_id", "INTEGER"),
        ("quantity", "INTEGER"),
        ("purchase_date", "DATE"),
        ("purchase_time", "TIME"),
        ("payment_method", "VARCHAR"),
        ("store_location", "VARCHAR"),
        ("discount_percent", "DECIMAL(5, 2)"),
        ("is_discounted", "BOOLEAN"),
    ),
    primary_key="purchase_id",
    references={
        "customer_id": "customer",
        "cashier_id": "cashier",
        "product_id": "product",
    },
)

SUPERMARKET_TRANSACTIONS = TableSpec(
    name="supermarket_transactions",
    columns=(
        ("purchase_id", "INTEGER"),
        ("transaction_id", "INTEGER"),
        ("customer_id", "INTEGER"),
        ("first_name", "VARCHAR"),
        ("last_name", "VARCHAR"),
        ("phone_number", "VARCHAR"),
        ("date_of_birth", "DATE"),
        ("cashier_id", "INTEGER"),
        ("cashier_name", "VARCHAR"),
        ("product_id", "INTEGER"),
        ("description", "VARCHAR"),
        ("brand_name", "VARCHAR"),
        ("category", "VARCHAR"),
        ("unit_price", "DECIMAL(10, 2)"),
        ("quantity", "INTEGER"),
        ("purchase_date", "DATE"),
        ("purchase_time", "TIME"),
        ("payment_method", "VARCHAR"),
        ("store_location", "VARCHAR"),
        ("discount_percent", "DECIMAL(5, 2)"),
        ("is_discounted", "BOOLEAN"),
    ),
    primary_key="purchase_id",
    normalized=False,
)

NORMALIZED_TABLES: tuple[TableSpec, ...] = (CUSTOMER, CASHIER, PRODUCT, CART)
ALL_TABLES: tuple[TableSpec, ...] = NORMALIZED_TABLES + (SUPERMARKET_TRANSACTIONS,)
TABLES_BY_NAME: dict[str, TableSpec] = {t.name: t for t in ALL_TABLES}

# One row per cart line; every cart FK resolves, so the inner join loses
# exactly the customers, cashiers and products with no purchases.
DENORMALIZE_SQL = """
INSERT INTO supermarket_transactions
SELECT
    ca.purchase_id,
    ca.transaction_id,
    cu.customer_id,
    cu.first_name,
    cu.last_name,
    cu.phone_number,
    cu.date_of_birth,
    cs.cashier_id,
    cs.name AS cashier_name,
    p.product_id,
    p.description,
    p.brand_name,
    p.category,
    p.unit_price,
    ca.quantity,
    ca.purchase_date,
    ca.purchase_time,
    ca.payment_method,
    ca.store_location,
    ca.discount_percent,
    ca.is_discounted
FROM cart ca
JOIN customer cu ON cu.customer_id = ca.customer_id
JOIN cashier cs ON cs.cashier_id = ca.cashier_id
JOIN product p ON p.product_id = ca.product_id
"""


def schema_ddl(tables: tuple[TableSpec, ...] = ALL_TABLES) -> str:
    """DDL script creating the given tables."""
    return "\n\n".join(t.ddl() for t in tables)
