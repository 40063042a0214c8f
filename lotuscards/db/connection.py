import duckdb
import logging
from pathlib import Path
from typing import Optional, Union

from ..exceptions import StorageConnectionError

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"


class ConnectionHandler:
    """Manages the lifecycle of a DuckDB database connection."""

    def __init__(self, db_path: Union[str, Path], read_only: bool = False):
        """
        Initialize the handler with a database path and optional read-only mode.

        Parameters:
            db_path (Union[str, Path]): Path to the DuckDB file, or ":memory:"
                (case-insensitive) for a transient in-memory database. File
                paths are resolved to an absolute Path.
            read_only (bool): Open the connection in read-only mode.
        """
        if isinstance(db_path, str) and db_path.lower() == MEMORY_PATH:
            self.db_path_resolved = Path(MEMORY_PATH)
            logger.info("Using in-memory DuckDB store.")
        else:
            self.db_path_resolved = Path(db_path).expanduser().resolve()
            logger.info(
                f"ConnectionHandler initialized for store at: {self.db_path_resolved}"  # noqa: E501
            )

        self.read_only: bool = read_only
        self._connection: Optional[duckdb.DuckDBPyConnection] = None
        self.is_new_db: bool = False

    @property
    def is_memory(self) -> bool:
        return str(self.db_path_resolved) == MEMORY_PATH

    def get_connection(self) -> duckdb.DuckDBPyConnection:
        """
        Provide an active DuckDB connection, opening one if none exists.

        Sets `is_new_db` when the database is in-memory or the file does not
        exist yet, and creates the parent directory of file-based stores.

        Raises:
            StorageConnectionError: If DuckDB fails to open the database.
        """
        if self._connection is None:
            try:
                if self.is_memory:
                    self.is_new_db = True
                else:
                    self.is_new_db = not self.db_path_resolved.exists()
                    if not self.read_only:
                        self.db_path_resolved.parent.mkdir(
                            parents=True, exist_ok=True
                        )

                self._connection = duckdb.connect(
                    database=str(self.db_path_resolved),
                    read_only=self.read_only,
                )
                logger.info("Successfully connected to the store.")
            except (duckdb.Error, OSError) as e:
                raise StorageConnectionError(
                    f"Failed to connect to store: {e}", original_exception=e
                ) from e
        return self._connection

    def close_connection(self) -> None:
        """Close the connection if open; a later call reconnects."""
        if self._connection:
            try:
                self._connection.close()
                logger.info(f"Store connection to {self.db_path_resolved} closed.")
            except duckdb.Error as e:
                logger.error(f"Error closing the store connection: {e}")
            finally:
                self._connection = None

    def __enter__(self) -> duckdb.DuckDBPyConnection:
        return self.get_connection()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close_connection()
