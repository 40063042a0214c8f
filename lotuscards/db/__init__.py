"""Storage package for lotuscards.

Only KeyValueStore is exported as the public API.
"""

from .kv_store import KeyValueStore

__all__ = ["KeyValueStore"]
