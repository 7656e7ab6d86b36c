"""Application configuration for QueryTorque Joins."""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Harness settings loaded from environment.

    CLI flags take precedence over these values.
    """

    # Equivalence checking
    float_tolerance: float = 1e-6
    max_differences: int = 10

    # Engine
    dialect: str = "duckdb"
    database: str = ":memory:"

    # Inputs (None = bundled tutorial / built-in fixture)
    catalog_path: Optional[str] = None
    fixtures_path: Optional[str] = None

    # Logging
    log_level: str = "WARNING"

    class Config:
        env_prefix = "QT_JOINS_"
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
