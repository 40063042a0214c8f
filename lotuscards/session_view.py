"""
Derivation of the card sequence the user is currently studying.

The stored card lists are never reordered or filtered in place: search and
shuffle only change which cards are shown and in what order.
"""

import logging
import random
from typing import Dict, List, Optional, Sequence

from .models import Card, SessionState, StudyDocument

logger = logging.getLogger(__name__)


def active_deck_cards(document: StudyDocument) -> List[Card]:
    """Cards of the active deck, or an empty list without an active deck."""
    return document.cards_for(document.active_deck_id)


def filter_cards(cards: Sequence[Card], term: str) -> List[Card]:
    """
    Keep cards whose front or back contains `term`, case-insensitively.

    A blank term returns all cards in their original order.
    """
    needle = term.strip().lower()
    if not needle:
        return list(cards)
    return [
        card
        for card in cards
        if needle in card.front.lower() or needle in card.back.lower()
    ]


def order_session_cards(
    filtered: Sequence[Card], session_order: Optional[Sequence[str]]
) -> List[Card]:
    """
    Arrange `filtered` by the id order of the last shuffle.

    Ids that are no longer in `filtered` are skipped. Cards missing from
    the shuffle order (added after the shuffle) are left out until the
    order is cleared.
    """
    if session_order is None:
        return list(filtered)

    by_id: Dict[str, Card] = {card.id: card for card in filtered}
    return [by_id[card_id] for card_id in session_order if card_id in by_id]


def shuffle_order(
    cards: Sequence[Card], rng: Optional[random.Random] = None
) -> List[str]:
    """Return the ids of `cards` in a uniformly random order."""
    ids = [card.id for card in cards]
    (rng or random).shuffle(ids)
    return ids


class SessionView:
    """
    Binds a document to the session state and answers "what is on screen".

    Holds no data of its own; every property is recomputed from the current
    document and session on access.
    """

    def __init__(
        self,
        document: StudyDocument,
        session: SessionState,
        rng: Optional[random.Random] = None,
    ):
        self.document = document
        self.session = session
        self.rng = rng or random.Random()

    @property
    def all_cards(self) -> List[Card]:
        return active_deck_cards(self.document)

    @property
    def filtered_cards(self) -> List[Card]:
        return filter_cards(self.all_cards, self.session.search_term)

    @property
    def session_cards(self) -> List[Card]:
        return order_session_cards(
            self.filtered_cards, self.session.session_order
        )

    def shuffle(self) -> List[str]:
        """
        Store a fresh random order of the currently filtered cards and go
        back to the first position.
        """
        order = shuffle_order(self.filtered_cards, self.rng)
        self.session.session_order = order
        self.session.active_card_index = 0
        self.session.is_flipped = False
        logger.debug(f"Shuffled session of {len(order)} cards.")
        return order

    def set_search_term(self, term: str) -> None:
        """
        Apply a new search term and go back to the first card. A shuffle
        order survives the change, so clearing the search brings the last
        shuffle back.
        """
        self.session.search_term = term
        self.session.active_card_index = 0
        self.session.is_flipped = False
