"""DuckDB executor for the fixture database."""

from __future__ import annotations

import logging
from typing import Any, Sequence

try:
    import duckdb
except ImportError as e:
    raise ImportError(
        "DuckDB is not installed. Install with: pip install qt-joins"
    ) from e

from ..errors import QueryBindingError, QueryExecutionError, QuerySyntaxError

logger = logging.getLogger(__name__)


class DuckDBExecutor:
    """DuckDB connection wrapper used for fixture loading and query execution.

    Usage:
        with DuckDBExecutor(":memory:") as db:
            db.execute_script("CREATE TABLE t (x INT); INSERT INTO t VALUES (1);")
            rows = db.execute("SELECT * FROM t")

    Args:
        database: Path to database file or ":memory:" for in-memory database.
        read_only: If True, open database in read-only mode.
    """

    def __init__(self, database: str = ":memory:", read_only: bool = False):
        self.database = database
        self.read_only = read_only
        self._conn: duckdb.DuckDBPyConnection | None = None

    def connect(self) -> None:
        """Open connection to DuckDB."""
        if self._conn is not None:
            return  # Already connected

        self._conn = duckdb.connect(
            database=self.database,
            read_only=self.read_only,
        )

    def close(self) -> None:
        """Close connection to DuckDB."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "DuckDBExecutor":
        """Context manager entry - opens connection."""
        self.connect()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit - closes connection."""
        self.close()

    def _ensure_connected(self) -> duckdb.DuckDBPyConnection:
        """Ensure connection is open and return it."""
        if self._conn is None:
            self.connect()
        assert self._conn is not None
        return self._conn

    def query(self, sql: str, role: str = "") -> tuple[list[str], list[dict[str, Any]]]:
        """Execute a read query and return (columns, rows).

        Engine errors are translated into the harness QueryError hierarchy:
        parser errors become QuerySyntaxError, binder/catalog errors become
        QueryBindingError, everything else QueryExecutionError.

        Args:
            sql: SQL query to execute.
            role: Label attached to raised errors ("normalized"/"denormalized").

        Returns:
            Tuple of column names in result order and a list of row dicts.
        """
        conn = self._ensure_connected()

        try:
            result = conn.execute(sql)
            columns = [desc[0] for desc in result.description] if result.description else []
            rows = result.fetchall()
        except duckdb.ParserException as e:
            raise QuerySyntaxError(str(e), sql=sql, role=role) from e
        except (duckdb.BinderException, duckdb.CatalogException) as e:
            raise QueryBindingError(str(e), sql=sql, role=role) from e
        except duckdb.Error as e:
            raise QueryExecutionError(str(e), sql=sql, role=role) from e

        return columns, [dict(zip(columns, row)) for row in rows]

    def execute(self, sql: str) -> list[dict[str, Any]]:
        """Execute SQL and return results as list of dicts."""
        _, rows = self.query(sql)
        return rows

    def execute_script(self, sql_script: str) -> None:
        """Execute multi-statement SQL script (schema creation, seeding)."""
        conn = self._ensure_connected()

        # DuckDB can execute multiple statements directly
        conn.execute(sql_script)

    def insert_rows(
        self,
        table: str,
        columns: Sequence[str],
        column_types: Sequence[str],
        rows: Sequence[Sequence[Any]],
    ) -> int:
        """Bulk insert rows, casting every parameter to its column type.

        Args:
            table: Target table name.
            columns: Column names, in the order values appear in each row.
            column_types: DuckDB type for each column.
            rows: Row value sequences.

        Returns:
            Number of rows inserted.
        """
        if not rows:
            return 0

        conn = self._ensure_connected()
        placeholders = ", ".join(f"CAST(? AS {t})" for t in column_types)
        sql = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"
        conn.executemany(sql, [list(row) for row in rows])
        logger.debug("Inserted %d rows into %s", len(rows), table)
        return len(rows)

    def row_count(self, table: str) -> int:
        """Count rows in a table."""
        rows = self.execute(f"SELECT COUNT(*) AS n FROM {table}")
        return int(rows[0]["n"])
