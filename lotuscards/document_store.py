"""
Document store: owns the study document and its mutations.

Every mutation validates its inputs first. A failed precondition is a silent
no-op: nothing changes, nothing is persisted, no error is raised. Successful
mutations are persisted immediately.
"""

import logging
from typing import Callable, List, Optional

from .constants import SEED_CARDS, SEED_DECK_NAME
from .exceptions import DeckNotFoundError, StorageError
from .models import Card, Deck, StudyDocument, now_ms
from .persistence import PersistenceAdapter

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[Deck], bool]


class DocumentStore:
    """
    Holds the single StudyDocument and applies deck/card mutations to it.

    Session state is not kept here; callers reset it after deck-level
    changes.
    """

    def __init__(
        self,
        adapter: PersistenceAdapter,
        document: Optional[StudyDocument] = None,
    ):
        self.adapter = adapter
        self.document = document if document is not None else StudyDocument()
        self.last_save_error: Optional[StorageError] = None

    @classmethod
    def load(cls, adapter: PersistenceAdapter) -> "DocumentStore":
        """Create a store from the persisted document, or an empty one."""
        document = adapter.load()
        if document is None:
            logger.info("Starting with an empty document.")
        return cls(adapter, document)

    # --- Read helpers ---

    def active_deck(self) -> Optional[Deck]:
        return self.document.active_deck

    def get_deck(self, deck_id: Optional[str]) -> Optional[Deck]:
        return self.document.get_deck(deck_id)

    def cards_for(self, deck_id: Optional[str]) -> List[Card]:
        return self.document.cards_for(deck_id)

    def find_deck(self, id_or_name: str) -> Optional[Deck]:
        """Look a deck up by exact id, then by case-insensitive name."""
        deck = self.get_deck(id_or_name)
        if deck is not None:
            return deck
        wanted = id_or_name.strip().lower()
        for candidate in self.document.decks:
            if candidate.name.lower() == wanted:
                return candidate
        return None

    def require_deck(self, id_or_name: str) -> Deck:
        """
        Like find_deck, but raises DeckNotFoundError when nothing matches.
        """
        deck = self.find_deck(id_or_name)
        if deck is None:
            raise DeckNotFoundError(id_or_name)
        return deck

    # --- Persistence ---

    def persist(self) -> bool:
        """
        Save the document. A failed save keeps the in-memory change and is
        remembered in `last_save_error` so the UI can warn about it.

        Returns:
            bool: True if the snapshot was written.
        """
        try:
            self.adapter.save(self.document)
        except StorageError as e:
            logger.warning(f"Failed to save document, changes kept in memory: {e}")
            self.last_save_error = e
            return False
        self.last_save_error = None
        return True

    # --- Mutations ---

    def seed_if_empty(self) -> bool:
        """Add the demo deck and its cards when the document has no decks."""
        if self.document.decks:
            return False

        deck = Deck(name=SEED_DECK_NAME)
        self.document.decks.append(deck)
        self.document.cards_by_deck_id[deck.id] = [
            Card(front=front, back=back) for front, back in SEED_CARDS
        ]
        self.document.active_deck_id = deck.id
        logger.info(f"Seeded demo deck '{deck.name}'.")
        self.persist()
        return True

    def create_deck(self, name: str) -> Optional[Deck]:
        """
        Append a new, empty deck and make it active.

        Returns:
            Optional[Deck]: The new deck, or None if the trimmed name is empty.
        """
        trimmed = name.strip()
        if not trimmed:
            logger.debug("Ignoring deck creation with an empty name.")
            return None

        deck = Deck(name=trimmed, created_at=now_ms())
        self.document.decks.append(deck)
        self.document.cards_by_deck_id[deck.id] = []
        self.document.active_deck_id = deck.id
        logger.info(f"Created deck '{deck.name}' ({deck.id}).")
        self.persist()
        return deck

    def rename_active_deck(self, new_name: str) -> bool:
        deck = self.active_deck()
        if deck is None:
            logger.debug("Ignoring rename: no active deck.")
            return False

        trimmed = new_name.strip()
        if not trimmed:
            logger.debug("Ignoring rename to an empty name.")
            return False

        deck.name = trimmed
        logger.info(f"Renamed deck {deck.id} to '{deck.name}'.")
        self.persist()
        return True

    def delete_active_deck(self, confirm: ConfirmCallback) -> bool:
        """
        Delete the active deck and all of its cards after `confirm(deck)`
        returns True. The first remaining deck (if any) becomes active.

        Returns:
            bool: True if the deck was deleted.
        """
        deck = self.active_deck()
        if deck is None:
            logger.debug("Ignoring delete: no active deck.")
            return False

        if not confirm(deck):
            logger.info(f"Deletion of deck '{deck.name}' cancelled.")
            return False

        self.document.decks = [d for d in self.document.decks if d.id != deck.id]
        self.document.cards_by_deck_id.pop(deck.id, None)
        remaining = self.document.decks
        self.document.active_deck_id = remaining[0].id if remaining else None
        logger.info(f"Deleted deck '{deck.name}' ({deck.id}).")
        self.persist()
        return True

    def create_card(self, front: str, back: str) -> Optional[Card]:
        """
        Append a card to the active deck.

        Returns:
            Optional[Card]: The new card, or None when there is no active deck
            or either side is blank.
        """
        deck_id = self.document.active_deck_id
        if deck_id is None or self.get_deck(deck_id) is None:
            logger.debug("Ignoring card creation: no active deck.")
            return None

        f, b = front.strip(), back.strip()
        if not f or not b:
            logger.debug("Ignoring card creation with an empty side.")
            return None

        card = Card(front=f, back=b, updated_at=now_ms())
        self.document.cards_by_deck_id.setdefault(deck_id, []).append(card)
        logger.info(f"Added card {card.id} to deck {deck_id}.")
        self.persist()
        return card

    def select_deck(self, deck_id: str) -> bool:
        """Make an existing deck active. Unknown ids are ignored."""
        if self.get_deck(deck_id) is None:
            logger.debug(f"Ignoring selection of unknown deck {deck_id!r}.")
            return False

        self.document.active_deck_id = deck_id
        self.persist()
        return True
