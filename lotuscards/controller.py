"""
This module defines the StudyController class, the single entry point the UI
layer calls into. Each operation mutates the document or the session, persists
when the document changed, re-derives the session sequence and returns a fresh
ViewModel for the UI to render.
"""

import logging
import random
import time
from typing import Callable, Optional

from .constants import SEARCH_DEBOUNCE_MS
from .debounce import SearchDebouncer
from .document_store import ConfirmCallback, DocumentStore
from .models import SessionState, StudyDocument
from .navigation import clamp_index, flip, next_card, prev_card
from .persistence import PersistenceAdapter
from .render import ViewModel, project
from .session_view import SessionView

logger = logging.getLogger(__name__)


class StudyController:
    """
    Owns the document store and the ephemeral session state.

    Every operation that can change the displayed card leaves the card
    unflipped; only `flip()` shows the back.
    """

    def __init__(
        self,
        store: DocumentStore,
        rng: Optional[random.Random] = None,
        debounce_ms: int = SEARCH_DEBOUNCE_MS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.session = SessionState()
        self.view_state = SessionView(store.document, self.session, rng)
        self.debouncer = SearchDebouncer(
            self._apply_search, delay_ms=debounce_ms, clock=clock
        )

    @classmethod
    def open(
        cls,
        adapter: PersistenceAdapter,
        rng: Optional[random.Random] = None,
        debounce_ms: int = SEARCH_DEBOUNCE_MS,
        clock: Callable[[], float] = time.monotonic,
    ) -> "StudyController":
        """
        Load the stored document (or start empty), seed the demo deck when
        there are no decks, and start a fresh session.
        """
        store = DocumentStore.load(adapter)
        store.seed_if_empty()
        return cls(store, rng=rng, debounce_ms=debounce_ms, clock=clock)

    @property
    def document(self) -> StudyDocument:
        return self.store.document

    # --- Rendering ---

    def view(self) -> ViewModel:
        """
        Derive the session sequence, clamp the active index into it and
        project the result.
        """
        cards = self.view_state.session_cards
        self.session.active_card_index = clamp_index(
            self.session.active_card_index, len(cards)
        )
        if not cards:
            self.session.is_flipped = False
        warning = self.store.last_save_error
        return project(
            self.document,
            self.session,
            cards=cards,
            save_warning=str(warning) if warning else None,
        )

    def _show_new_card(self) -> ViewModel:
        self.session.is_flipped = False
        return self.view()

    # --- Deck operations ---

    def select_deck(self, deck_id: str) -> ViewModel:
        if not self.store.select_deck(deck_id):
            return self.view()
        self.debouncer.cancel()
        self.session.reset()
        return self._show_new_card()

    def create_deck(self, name: str) -> ViewModel:
        if self.store.create_deck(name) is None:
            return self.view()
        self.debouncer.cancel()
        self.session.reset()
        return self._show_new_card()

    def rename_deck(self, new_name: str) -> ViewModel:
        if not self.store.rename_active_deck(new_name):
            return self.view()
        self.session.restart()
        return self._show_new_card()

    def delete_deck(self, confirm: ConfirmCallback) -> ViewModel:
        if not self.store.delete_active_deck(confirm):
            return self.view()
        self.debouncer.cancel()
        self.session.reset()
        return self._show_new_card()

    # --- Card operations ---

    def create_card(self, front: str, back: str) -> ViewModel:
        # An active shuffle order is kept; the new card joins the session
        # only once the order is cleared.
        if self.store.create_card(front, back) is None:
            return self.view()
        return self._show_new_card()

    # --- Session operations ---

    def shuffle(self) -> ViewModel:
        self.view_state.shuffle()
        return self._show_new_card()

    def next_card(self) -> ViewModel:
        if not next_card(self.session, len(self.view_state.session_cards)):
            return self.view()
        return self._show_new_card()

    def prev_card(self) -> ViewModel:
        if not prev_card(self.session, len(self.view_state.session_cards)):
            return self.view()
        return self._show_new_card()

    def flip(self) -> ViewModel:
        flip(self.session)
        return self.view()

    # --- Search ---

    def _apply_search(self, term: str) -> None:
        self.view_state.set_search_term(term)
        logger.debug(f"Search term applied: {term!r}")

    def set_search_term(self, term: str) -> ViewModel:
        """Apply a search term immediately, dropping any pending input."""
        self.debouncer.cancel()
        self._apply_search(term)
        return self._show_new_card()

    def input_search(self, term: str) -> ViewModel:
        """
        Record a keystroke-level search input. It takes effect through
        `poll_search()` once the debounce window passes without newer input.
        """
        self.debouncer.submit(term)
        return self.view()

    def poll_search(self) -> ViewModel:
        if self.debouncer.poll():
            return self._show_new_card()
        return self.view()

    def flush_search(self) -> ViewModel:
        if self.debouncer.flush():
            return self._show_new_card()
        return self.view()
