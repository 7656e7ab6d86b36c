"""Integrity checks for loaded fixture data.

Runs anti-join and range queries against the normalized tables and returns
human-readable violations instead of stopping at the first one.
"""

from __future__ import annotations

from ..execution.duckdb_executor import DuckDBExecutor
from .schema import CART, TABLES_BY_NAME


def _orphan_checks() -> list[tuple[str, str]]:
    checks = []
    for column, target in CART.references.items():
        target_key = TABLES_BY_NAME[target].primary_key
        sql = (
            f"SELECT c.purchase_id, c.{column} AS ref FROM {CART.name} c "
            f"LEFT JOIN {target} t ON t.{target_key} = c.{column} "
            f"WHERE t.{target_key} IS NULL ORDER BY c.purchase_id"
        )
        checks.append((f"{CART.name}.{column} -> {target}", sql))
    return checks


def check_integrity(executor: DuckDBExecutor) -> list[str]:
    """Check referential integrity and value ranges of the normalized schema.

    Args:
        executor: Connected executor holding the fixture tables.

    Returns:
        List of violation messages (empty when the fixture is consistent).
    """
    violations: list[str] = []

    for label, sql in _orphan_checks():
        for row in executor.execute(sql):
            violations.append(
                f"purchase {row['purchase_id']}: {label} references missing id {row['ref']}"
            )

    for row in executor.execute(
        "SELECT purchase_id, quantity FROM cart "
        "WHERE quantity IS NULL OR quantity <= 0 ORDER BY purchase_id"
    ):
        violations.append(
            f"purchase {row['purchase_id']}: quantity must be positive, got {row['quantity']}"
        )

    for row in executor.execute(
        "SELECT product_id, unit_price FROM product "
        "WHERE unit_price IS NULL OR unit_price < 0 ORDER BY product_id"
    ):
        violations.append(
            f"product {row['product_id']}: unit_price must not be negative, got {row['unit_price']}"
        )

    return violations
