"""Supermarket fixture schema and loading.

Example usage:
    from qt_joins.execution import DuckDBExecutor
    from qt_joins.fixtures import FixtureLoader

    with DuckDBExecutor() as db:
        summary = FixtureLoader(db).load()  # built-in rows
        print(summary.row_counts)
"""

from .integrity import check_integrity
from .loader import (
    BUILTIN_SOURCE,
    FixtureLoader,
    FixtureSummary,
    export_fixture,
    read_csv_table,
)
from .schema import (
    ALL_TABLES,
    CART,
    CASHIER,
    CUSTOMER,
    NORMALIZED_TABLES,
    PRODUCT,
    SUPERMARKET_TRANSACTIONS,
    TableSpec,
    schema_ddl,
)

__all__ = [
    "FixtureLoader",
    "FixtureSummary",
    "BUILTIN_SOURCE",
    "export_fixture",
    "read_csv_table",
    "check_integrity",
    "TableSpec",
    "CUSTOMER",
    "CASHIER",
    "PRODUCT",
    "CART",
    "SUPERMARKET_TRANSACTIONS",
    "NORMALIZED_TABLES",
    "ALL_TABLES",
    "schema_ddl",
]
