"""Pytest configuration and fixtures for qt-joins tests."""

import pytest

from qt_joins.catalog import load_catalog
from qt_joins.execution import DualExecutor, DuckDBExecutor
from qt_joins.fixtures import FixtureLoader, export_fixture
from qt_joins.validation import CatalogValidator, EquivalenceChecker


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture
def loaded_db():
    """In-memory DuckDB loaded with the built-in supermarket fixture."""
    with DuckDBExecutor() as db:
        FixtureLoader(db).load()
        yield db


@pytest.fixture
def dual(loaded_db) -> DualExecutor:
    """Dual executor over the built-in fixture."""
    return DualExecutor(loaded_db)


@pytest.fixture
def fixture_dir(tmp_path):
    """Built-in fixture exported as CSV files."""
    out = tmp_path / "fixtures"
    export_fixture(out)
    return out


# =============================================================================
# CATALOG / VALIDATION FIXTURES
# =============================================================================

@pytest.fixture(scope="session")
def bundled_catalog():
    """The bundled supermarket tutorial catalog."""
    return load_catalog()


@pytest.fixture
def validator():
    """Catalog validator over the built-in fixture."""
    with CatalogValidator() as v:
        yield v


@pytest.fixture
def checker() -> EquivalenceChecker:
    """Equivalence checker with default tolerance."""
    return EquivalenceChecker(float_tolerance=1e-6)


# =============================================================================
# SAMPLE MARKDOWN
# =============================================================================

@pytest.fixture
def sample_markdown() -> str:
    """Small catalog covering labels, ordering overrides and notes."""
    return """# Tutorial

Intro text without SQL.

## 1. Who bought what?

Normalized schema:

```sql
SELECT ca.purchase_id, cu.first_name
FROM cart ca JOIN customer cu ON cu.customer_id = ca.customer_id
ORDER BY ca.purchase_id;
```

Denormalized schema:

```sql
SELECT purchase_id, first_name FROM supermarket_transactions ORDER BY purchase_id;
```

## 2. Customers without purchases

```sql
SELECT cu.customer_id FROM customer cu
LEFT JOIN cart ca ON ca.customer_id = cu.customer_id
WHERE ca.purchase_id IS NULL;
```

This cannot be performed on the denormalized schema.

### Latest purchases

<!-- ordering: ignore -->

Denormalized version:

```sql
SELECT purchase_id FROM supermarket_transactions ORDER BY purchase_date DESC;
```

Normalized version:

```sql
SELECT purchase_id FROM cart ORDER BY purchase_date DESC;
```
"""
