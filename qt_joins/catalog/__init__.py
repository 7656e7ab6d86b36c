"""Query catalog: business questions paired with normalized/denormalized SQL."""

from .markdown_parser import BUNDLED_CATALOG, load_catalog, parse_catalog, slugify
from .schemas import CatalogEntry, QueryCatalog

__all__ = [
    "CatalogEntry",
    "QueryCatalog",
    "parse_catalog",
    "load_catalog",
    "slugify",
    "BUNDLED_CATALOG",
]
