"""SQL execution against the in-memory fixture database."""

from .duckdb_executor import DuckDBExecutor
from .dual_executor import (
    DENORMALIZED,
    NORMALIZED,
    DualExecutor,
    PairExecutionResult,
    QueryRun,
)

__all__ = [
    "DuckDBExecutor",
    "DualExecutor",
    "QueryRun",
    "PairExecutionResult",
    "NORMALIZED",
    "DENORMALIZED",
]
