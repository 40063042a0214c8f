"""
Data models for the lotuscards document and study session.

The persisted document (decks, cards, active deck pointer) is modelled with
pydantic; the ephemeral study session is a plain dataclass that is never
written to storage.
"""

from __future__ import annotations

import logging
import random
import time
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)

logger = logging.getLogger(__name__)


def now_ms() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)


def new_id() -> str:
    """
    Generate a collision-resistant identifier for a deck or card.

    Uses a random UUIDv4. Platforms without an OS randomness source raise
    NotImplementedError from uuid4; those fall back to a millisecond
    timestamp followed by a random hex suffix.
    """
    try:
        return str(uuid.uuid4())
    except NotImplementedError:
        logger.warning("uuid4 unavailable, using timestamp-based id.")
        return f"{now_ms()}{random.getrandbits(52):x}"


def _strip_non_empty(value: str, field_name: str) -> str:
    stripped = value.strip()
    if not stripped:
        raise ValueError(f"{field_name} must not be empty.")
    return stripped


class Deck(BaseModel):
    """
    A named collection of cards.

    Identity is `id`; `name` may change but never becomes empty.
    """

    # Stored snapshots may carry extra keys from older writers.
    model_config = ConfigDict(
        validate_assignment=True, extra="ignore", populate_by_name=True
    )

    id: str = Field(
        default_factory=new_id,
        min_length=1,
        description="Opaque unique deck identifier.",
    )
    name: str = Field(..., description="Display name, trimmed, non-empty.")
    created_at: int = Field(
        default_factory=now_ms,
        alias="createdAt",
        description="Creation time as Unix milliseconds.",
    )

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        """Trim the name and reject empty results."""
        return _strip_non_empty(v, "name")


class Card(BaseModel):
    """
    A front/back text pair belonging to exactly one deck.
    """

    model_config = ConfigDict(
        validate_assignment=True, extra="ignore", populate_by_name=True
    )

    id: str = Field(
        default_factory=new_id,
        min_length=1,
        description="Opaque unique card identifier.",
    )
    front: str = Field(..., description="Prompt side, trimmed, non-empty.")
    back: str = Field(..., description="Answer side, trimmed, non-empty.")
    updated_at: int = Field(
        default_factory=now_ms,
        alias="updatedAt",
        description="Last modification time as Unix milliseconds.",
    )

    @field_validator("front", "back")
    @classmethod
    def side_must_not_be_blank(cls, v: str, info: ValidationInfo) -> str:
        """Trim each side and reject empty results."""
        return _strip_non_empty(v, info.field_name)


class StudyDocument(BaseModel):
    """
    The whole persisted state: decks in display order, each deck's card
    list, and the active deck pointer.

    Invariants (maintained by DocumentStore and the persistence decoder):
    every deck has a card list, every card list belongs to a deck, and
    `active_deck_id` is either None or the id of an existing deck.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    decks: List[Deck] = Field(default_factory=list)
    cards_by_deck_id: Dict[str, List[Card]] = Field(
        default_factory=dict, alias="cardsByDeckId"
    )
    active_deck_id: Optional[str] = Field(default=None, alias="activeDeckId")

    def get_deck(self, deck_id: Optional[str]) -> Optional[Deck]:
        """Return the deck with the given id, or None."""
        if deck_id is None:
            return None
        for deck in self.decks:
            if deck.id == deck_id:
                return deck
        return None

    @property
    def active_deck(self) -> Optional[Deck]:
        return self.get_deck(self.active_deck_id)

    def cards_for(self, deck_id: Optional[str]) -> List[Card]:
        """Return the card list for a deck (empty if the deck is unknown)."""
        if deck_id is None:
            return []
        return self.cards_by_deck_id.get(deck_id, [])

    def to_storage(self) -> dict:
        """JSON-compatible dict using the persisted (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True)


@dataclass
class SessionState:
    """
    Ephemeral study session state. Never persisted.

    `session_order` holds the card ids from the last shuffle, or None when
    the session follows the stored card order.
    """

    search_term: str = ""
    session_order: Optional[List[str]] = None
    active_card_index: int = 0
    is_flipped: bool = False

    def reset(self) -> None:
        """Return every field to its default."""
        self.search_term = ""
        self.session_order = None
        self.active_card_index = 0
        self.is_flipped = False

    def restart(self) -> None:
        """Drop the shuffle order and go back to the first card."""
        self.session_order = None
        self.active_card_index = 0
        self.is_flipped = False
