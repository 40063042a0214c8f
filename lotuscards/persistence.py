"""
Persistence adapter: whole-document snapshots stored under one key.

Loading is fail-soft. Anything missing, unreadable or malformed is reported
as "no stored document" and the caller starts fresh. Saving overwrites the
previous snapshot entirely.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Set

from pydantic import ValidationError

from .constants import STORAGE_KEY
from .db import KeyValueStore
from .exceptions import StorageError
from .models import Card, Deck, StudyDocument

logger = logging.getLogger(__name__)


def _validation_summary(e: ValidationError) -> str:
    error_details = e.errors()[0]
    field = ".".join(map(str, error_details["loc"]))
    return f"field '{field}': {error_details['msg']}"


def _decode_decks(raw_decks: Any) -> List[Deck]:
    if not isinstance(raw_decks, list):
        if raw_decks is not None:
            logger.warning("Stored 'decks' is not a list; using no decks.")
        return []

    decks: List[Deck] = []
    seen_ids: Set[str] = set()
    for index, item in enumerate(raw_decks):
        try:
            deck = Deck.model_validate(item)
        except ValidationError as e:
            logger.warning(
                f"Dropping stored deck #{index}: {_validation_summary(e)}"
            )
            continue
        if deck.id in seen_ids:
            logger.warning(f"Dropping stored deck with duplicate id {deck.id}")
            continue
        seen_ids.add(deck.id)
        decks.append(deck)
    return decks


def _decode_cards(
    deck_id: str, raw_cards: Any, seen_ids: Set[str]
) -> List[Card]:
    if not isinstance(raw_cards, list):
        if raw_cards is not None:
            logger.warning(
                f"Stored cards for deck {deck_id} are not a list; using none."
            )
        return []

    cards: List[Card] = []
    for index, item in enumerate(raw_cards):
        try:
            card = Card.model_validate(item)
        except ValidationError as e:
            logger.warning(
                f"Dropping card #{index} of deck {deck_id}: "
                f"{_validation_summary(e)}"
            )
            continue
        if card.id in seen_ids:
            logger.warning(f"Dropping card with duplicate id {card.id}")
            continue
        seen_ids.add(card.id)
        cards.append(card)
    return cards


def decode_document(raw: Any) -> Optional[StudyDocument]:
    """
    Build a valid StudyDocument from decoded JSON, repairing what it can.

    Returns None when `raw` is not a JSON object. Otherwise:
    - `decks` that is not a list becomes an empty list, and
      `cardsByDeckId` that is not an object becomes an empty mapping;
    - invalid or duplicate decks and cards are dropped;
    - every deck gets a card list and lists of unknown decks are dropped;
    - `activeDeckId` defaults to None and is reset to the first deck (or
      None) when it does not name an existing deck.
    """
    if not isinstance(raw, dict):
        return None

    decks = _decode_decks(raw.get("decks"))

    raw_cards_by_deck = raw.get("cardsByDeckId")
    if not isinstance(raw_cards_by_deck, dict):
        if raw_cards_by_deck is not None:
            logger.warning("Stored 'cardsByDeckId' is not an object; ignoring.")
        raw_cards_by_deck = {}

    deck_ids = {deck.id for deck in decks}
    orphaned = [key for key in raw_cards_by_deck if key not in deck_ids]
    if orphaned:
        logger.warning(f"Dropping card lists of unknown decks: {orphaned}")

    seen_card_ids: Set[str] = set()
    cards_by_deck_id: Dict[str, List[Card]] = {
        deck.id: _decode_cards(
            deck.id, raw_cards_by_deck.get(deck.id), seen_card_ids
        )
        for deck in decks
    }

    active_deck_id = raw.get("activeDeckId")
    if active_deck_id is not None and (
        not isinstance(active_deck_id, str) or active_deck_id not in deck_ids
    ):
        fallback = decks[0].id if decks else None
        logger.warning(
            f"Stored active deck {active_deck_id!r} does not exist; "
            f"using {fallback!r}."
        )
        active_deck_id = fallback

    return StudyDocument(
        decks=decks,
        cards_by_deck_id=cards_by_deck_id,
        active_deck_id=active_deck_id,
    )


class PersistenceAdapter:
    """
    Reads and writes the study document as one JSON record in a
    KeyValueStore.
    """

    def __init__(self, store: KeyValueStore, storage_key: str = STORAGE_KEY):
        """
        Parameters:
            store (KeyValueStore): Durable key-value store to read/write.
            storage_key (str): Key the document snapshot is stored under.
        """
        self.store = store
        self.storage_key = storage_key

    def load(self) -> Optional[StudyDocument]:
        """
        Load the stored document.

        Returns:
            Optional[StudyDocument]: The decoded document, or None when the
            key is missing, storage cannot be read, or the stored text is not
            a JSON object. Never raises for these cases.
        """
        try:
            raw_text = self.store.get(self.storage_key)
        except StorageError as e:
            logger.warning(f"Could not read stored document, starting fresh: {e}")
            return None

        if not raw_text:
            logger.info(f"No stored document under '{self.storage_key}'.")
            return None

        try:
            raw = json.loads(raw_text)
        except (ValueError, RecursionError) as e:
            # JSONDecodeError is a ValueError; oversized integers and deep
            # nesting fail with plain ValueError or RecursionError.
            logger.warning(f"Stored document is not valid JSON, ignoring: {e}")
            return None

        document = decode_document(raw)
        if document is None:
            logger.warning("Stored document is not a JSON object, ignoring.")
            return None

        logger.info(
            f"Loaded document with {len(document.decks)} decks "
            f"from '{self.storage_key}'."
        )
        return document

    def save(self, document: StudyDocument) -> None:
        """
        Overwrite the stored snapshot with `document`.

        Raises:
            StorageWriteError: If the store rejects the write.
        """
        payload = json.dumps(document.to_storage(), ensure_ascii=False)
        self.store.set(self.storage_key, payload)
        logger.debug(f"Saved document snapshot to '{self.storage_key}'.")
