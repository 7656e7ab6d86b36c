"""QueryTorque Joins - SQL join example validation.

Runs the normalized and denormalized SQL of every question in a markdown
join tutorial against an in-memory supermarket fixture and checks that the
two schemas give the same answer.

Modules:
- fixtures: schema, built-in sample rows, CSV loading, integrity checks
- catalog: markdown tutorial parsing
- execution: DuckDB and dual (normalized/denormalized) execution
- validation: equivalence checking and the catalog validator
- renderers: rich console and JSON reports
- config: environment-driven settings
"""

__version__ = "0.1.0"

from .catalog import CatalogEntry, QueryCatalog, load_catalog, parse_catalog
from .config import Settings, get_settings
from .errors import (
    CatalogError,
    FixtureIntegrityError,
    FixtureLoadError,
    QtJoinsError,
    QueryBindingError,
    QueryError,
    QueryExecutionError,
    QuerySyntaxError,
)
from .validation import CatalogReport, CatalogValidator, EntryStatus, validate_catalog_file

__all__ = [
    "__version__",
    "CatalogEntry",
    "QueryCatalog",
    "load_catalog",
    "parse_catalog",
    "Settings",
    "get_settings",
    "CatalogValidator",
    "CatalogReport",
    "EntryStatus",
    "validate_catalog_file",
    "QtJoinsError",
    "CatalogError",
    "FixtureLoadError",
    "FixtureIntegrityError",
    "QueryError",
    "QuerySyntaxError",
    "QueryBindingError",
    "QueryExecutionError",
]
