"""Lotuscards - a local flashcard deck study tool."""

from .models import Card, Deck, SessionState, StudyDocument
from .constants import STORAGE_KEY, SEARCH_DEBOUNCE_MS
from .db import KeyValueStore
from .persistence import PersistenceAdapter
from .document_store import DocumentStore
from .controller import StudyController
from .render import EmptyState, ViewModel

__all__ = [
    "Card",
    "Deck",
    "SessionState",
    "StudyDocument",
    "STORAGE_KEY",
    "SEARCH_DEBOUNCE_MS",
    "KeyValueStore",
    "PersistenceAdapter",
    "DocumentStore",
    "StudyController",
    "EmptyState",
    "ViewModel",
]
