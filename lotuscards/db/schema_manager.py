import duckdb
import logging

from .connection import ConnectionHandler
from ..exceptions import SchemaInitializationError

logger = logging.getLogger(__name__)

KV_SCHEMA_SQL = """
    CREATE TABLE IF NOT EXISTS kv_store (
        key VARCHAR PRIMARY KEY,
        value VARCHAR NOT NULL
    );
"""


class SchemaManager:
    """Creates the key-value table the document snapshot lives in."""

    def __init__(self, handler: ConnectionHandler):
        self._handler = handler

    def initialize_schema(self) -> None:
        """
        Create the schema inside a transaction. Skipped for read-only file
        stores, which can only be read as they are.

        Raises:
            SchemaInitializationError: If the DDL fails.
        """
        if self._handler.read_only and not self._handler.is_memory:
            logger.warning(
                "Attempting to initialize schema in read-only mode. Skipping."
            )
            return

        conn = self._handler.get_connection()
        try:
            with conn.cursor() as cursor:
                cursor.begin()
                cursor.execute(KV_SCHEMA_SQL)
                cursor.commit()
            logger.info(
                f"Store schema at {self._handler.db_path_resolved} initialized successfully (or already exists)."  # noqa: E501
            )
        except duckdb.Error as e:
            logger.error(
                f"Error initializing store schema at {self._handler.db_path_resolved}: {e}"  # noqa: E501
            )
            raise SchemaInitializationError(
                f"Failed to initialize schema: {e}", original_exception=e
            ) from e
