"""
DuckDB-backed key-value storage for lotuscards.

The whole study document is kept as a single JSON text record, so the store
only needs string keys mapped to string values.
"""

import duckdb
import logging
from pathlib import Path
from typing import List, Optional, Union

from ..exceptions import StorageReadError, StorageWriteError
from .connection import ConnectionHandler
from .schema_manager import SchemaManager

logger = logging.getLogger(__name__)


class KeyValueStore:
    """
    Facade over the storage subsystem: coordinates the ConnectionHandler and
    SchemaManager and exposes get/set/delete on text records.

    Intended for use as a context manager. In-memory stores keep their data
    only while the connection is open.
    """

    _GET_SQL = "SELECT value FROM kv_store WHERE key = $1"
    _SET_SQL = """
        INSERT INTO kv_store (key, value) VALUES ($1, $2)
        ON CONFLICT (key) DO UPDATE SET value = EXCLUDED.value;
    """
    _DELETE_SQL = "DELETE FROM kv_store WHERE key = $1"
    _KEYS_SQL = "SELECT key FROM kv_store ORDER BY key"

    def __init__(self, db_path: Union[str, Path], read_only: bool = False):
        """
        Args:
            db_path (str | Path): Path to the store file, or ':memory:'.
            read_only (bool): Open the store in read-only mode.
        """
        self._handler = ConnectionHandler(db_path=db_path, read_only=read_only)
        self._schema_manager = SchemaManager(self._handler)
        self._schema_ready = False

    @property
    def db_path_resolved(self) -> Path:
        return self._handler.db_path_resolved

    @property
    def read_only(self) -> bool:
        return self._handler.read_only

    def get_connection(self) -> duckdb.DuckDBPyConnection:
        """Return the open connection, creating the schema on first use."""
        conn = self._handler.get_connection()
        if not self._schema_ready:
            self._schema_manager.initialize_schema()
            self._schema_ready = True
        return conn

    def close(self) -> None:
        self._handler.close_connection()
        self._schema_ready = False

    def __enter__(self) -> "KeyValueStore":
        self.get_connection()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def get(self, key: str) -> Optional[str]:
        """
        Fetch the value stored under `key`.

        Returns:
            Optional[str]: The stored text, or None if the key is absent.

        Raises:
            StorageReadError: If the query fails.
        """
        conn = self.get_connection()
        try:
            row = conn.execute(self._GET_SQL, [key]).fetchone()
        except duckdb.Error as e:
            logger.error(f"Error reading key '{key}': {e}")
            raise StorageReadError(
                f"Failed to read key '{key}': {e}",
                original_exception=e,
                key=key,
            ) from e
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        """
        Store `value` under `key`, replacing any previous value.

        Raises:
            StorageWriteError: In read-only mode or if the write fails.
        """
        if self.read_only:
            raise StorageWriteError(
                "Cannot write to a read-only store.", key=key
            )
        conn = self.get_connection()
        try:
            with conn.cursor() as cursor:
                cursor.begin()
                cursor.execute(self._SET_SQL, [key, value])
                cursor.commit()
        except duckdb.Error as e:
            logger.error(f"Error writing key '{key}': {e}")
            self._rollback(conn)
            raise StorageWriteError(
                f"Failed to write key '{key}': {e}",
                original_exception=e,
                key=key,
            ) from e
        logger.debug(f"Stored {len(value)} characters under '{key}'.")

    def delete(self, key: str) -> None:
        """Remove `key` if present."""
        if self.read_only:
            raise StorageWriteError(
                "Cannot delete from a read-only store.", key=key
            )
        conn = self.get_connection()
        try:
            conn.execute(self._DELETE_SQL, [key])
        except duckdb.Error as e:
            logger.error(f"Error deleting key '{key}': {e}")
            raise StorageWriteError(
                f"Failed to delete key '{key}': {e}",
                original_exception=e,
                key=key,
            ) from e

    def keys(self) -> List[str]:
        conn = self.get_connection()
        try:
            return [row[0] for row in conn.execute(self._KEYS_SQL).fetchall()]
        except duckdb.Error as e:
            raise StorageReadError(
                f"Failed to list keys: {e}", original_exception=e
            ) from e

    def _rollback(self, conn: duckdb.DuckDBPyConnection) -> None:
        try:
            conn.rollback()
            logger.info("Transaction rolled back after failed write.")
        except duckdb.Error as rb_err:
            # No open transaction is the usual case here.
            logger.debug(f"Rollback skipped: {rb_err}")
