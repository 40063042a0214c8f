"""
Render projection: a pure mapping from state to the view-model the UI draws.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from .constants import (
    EMPTY_POSITION_LABEL,
    NO_CARDS_BACK,
    NO_CARDS_FRONT,
    NO_DECK_BACK,
    NO_DECK_FRONT,
    NO_DECK_TITLE,
    NO_RESULTS_FRONT,
)
from .models import Card, SessionState, StudyDocument
from .navigation import clamp_index
from .session_view import SessionView


class EmptyState(str, Enum):
    """Why there is no card to show."""

    NO_DECK = "no_deck"
    NO_CARDS = "no_cards"
    NO_RESULTS = "no_results"


@dataclass(frozen=True)
class DeckListEntry:
    id: str
    name: str
    is_active: bool
    card_count: int


@dataclass(frozen=True)
class ViewModel:
    """Everything the UI needs to draw one frame. Holds no behaviour."""

    deck_entries: List[DeckListEntry] = field(default_factory=list)
    deck_title: str = NO_DECK_TITLE
    card_front: str = NO_DECK_FRONT
    card_back: str = NO_DECK_BACK
    position_label: str = EMPTY_POSITION_LABEL
    is_flipped: bool = False
    active_card_id: Optional[str] = None
    active_card_index: int = 0
    session_size: int = 0
    empty_state: Optional[EmptyState] = EmptyState.NO_DECK
    search_term: str = ""
    save_warning: Optional[str] = None

    @property
    def has_decks(self) -> bool:
        return bool(self.deck_entries)


def deck_entries(document: StudyDocument) -> List[DeckListEntry]:
    return [
        DeckListEntry(
            id=deck.id,
            name=deck.name,
            is_active=deck.id == document.active_deck_id,
            card_count=len(document.cards_for(deck.id)),
        )
        for deck in document.decks
    ]


def project(
    document: StudyDocument,
    session: SessionState,
    cards: Optional[Sequence[Card]] = None,
    save_warning: Optional[str] = None,
) -> ViewModel:
    """
    Build the view-model for the current document and session.

    `cards` is the session sequence when the caller already has it;
    otherwise it is derived here. The active index is clamped for display
    only: neither `document` nor `session` is modified.
    """
    entries = deck_entries(document)
    deck = document.active_deck

    if deck is None:
        return ViewModel(
            deck_entries=entries,
            search_term=session.search_term,
            save_warning=save_warning,
        )

    if cards is None:
        cards = SessionView(document, session).session_cards

    if not cards:
        searching = bool(session.search_term)
        return ViewModel(
            deck_entries=entries,
            deck_title=deck.name,
            card_front=NO_RESULTS_FRONT if searching else NO_CARDS_FRONT,
            card_back=NO_CARDS_BACK,
            empty_state=(
                EmptyState.NO_RESULTS if searching else EmptyState.NO_CARDS
            ),
            search_term=session.search_term,
            save_warning=save_warning,
        )

    index = clamp_index(session.active_card_index, len(cards))
    card = cards[index]
    return ViewModel(
        deck_entries=entries,
        deck_title=deck.name,
        card_front=card.front,
        card_back=card.back,
        position_label=f"{index + 1} / {len(cards)}",
        is_flipped=session.is_flipped,
        active_card_id=card.id,
        active_card_index=index,
        session_size=len(cards),
        empty_state=None,
        search_term=session.search_term,
        save_warning=save_warning,
    )
