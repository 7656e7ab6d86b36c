"""Validation of normalized vs denormalized query pairs.

Key components:
- CatalogValidator: runs every catalog entry against the fixture database
- EquivalenceChecker: ordered / multiset comparison with numeric tolerance
- QueryNormalizer: sqlglot inspection (ORDER BY, LIMIT, read-only check)
- CatalogReport / EntryResult: per-entry status and diff

Example usage:
    from qt_joins.catalog import load_catalog
    from qt_joins.validation import CatalogValidator

    with CatalogValidator() as validator:
        report = validator.validate_catalog(load_catalog())

    if not report.passed:
        for result in report.results:
            print(result.entry_id, result.status.value, result.errors)
"""

from .schemas import (
    CatalogReport,
    EntryResult,
    EntryStatus,
    EquivalenceResult,
    ValueDifference,
    json_safe,
)
from .equivalence_checker import (
    ColumnAlignment,
    EquivalenceChecker,
    RowCountResult,
)
from .query_normalizer import (
    QueryNormalizer,
    QueryShape,
)
from .catalog_validator import (
    CatalogValidator,
    validate_catalog_file,
)

__all__ = [
    # Main validator
    "CatalogValidator",
    "validate_catalog_file",
    # Schemas
    "EntryStatus",
    "EntryResult",
    "CatalogReport",
    "EquivalenceResult",
    "ValueDifference",
    "json_safe",
    # Equivalence checker
    "EquivalenceChecker",
    "RowCountResult",
    "ColumnAlignment",
    # Normalizer
    "QueryNormalizer",
    "QueryShape",
]
