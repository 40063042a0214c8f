"""
Position and flip handling within the current session sequence.
"""

from .models import SessionState


def clamp_index(index: int, length: int) -> int:
    """
    Constrain `index` into [0, max(0, length - 1)].

    Negative values clamp to 0, values past the end clamp to the last
    position, and an empty sequence always yields 0.
    """
    if length <= 0 or index < 0:
        return 0
    if index >= length:
        return length - 1
    return index


def next_card(session: SessionState, length: int) -> bool:
    """
    Advance to the next card, wrapping to the first after the last.

    Returns:
        bool: False (and no change) when the session is empty.
    """
    if length <= 0:
        return False
    session.active_card_index = (session.active_card_index + 1) % length
    session.is_flipped = False
    return True


def prev_card(session: SessionState, length: int) -> bool:
    """Step back one card, wrapping to the last before the first."""
    if length <= 0:
        return False
    session.active_card_index = (session.active_card_index - 1) % length
    session.is_flipped = False
    return True


def flip(session: SessionState) -> bool:
    """Toggle which side of the current card is shown; returns the new side."""
    session.is_flipped = not session.is_flipped
    return session.is_flipped
