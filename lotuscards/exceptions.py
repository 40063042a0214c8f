"""
Exceptions raised by the lotuscards storage layer and deck lookups.

Corrupt stored data is never reported through these: the persistence
adapter recovers from it and starts fresh.
"""

from typing import Optional


class StorageError(Exception):
    """
    Base exception for failures of the durable key-value store.

    Attributes:
        key: The storage key being accessed, when the failure concerns one.
        original_exception: The underlying driver or OS error, if any.
    """

    def __init__(
        self,
        message: str,
        original_exception: Optional[Exception] = None,
        key: Optional[str] = None,
    ):
        super().__init__(message)
        self.original_exception = original_exception
        self.key = key


class StorageConnectionError(StorageError):
    """The store file could not be opened."""


class SchemaInitializationError(StorageError):
    """The key-value table could not be created."""


class StorageReadError(StorageError):
    """A stored value (or the key listing) could not be read."""


class StorageWriteError(StorageError):
    """A value could not be written or deleted, or the store is read-only."""


class DeckNotFoundError(LookupError):
    """No deck matches the id or name given on the command line."""

    def __init__(self, query: str):
        super().__init__(f"Deck '{query}' not found.")
        self.query = query
