"""
Debounced search input.

Keystrokes arrive faster than the session should be rebuilt. Each new input
replaces the pending one and restarts the idle window; only the value that
survives a full window is applied. Timing is driven by an injectable clock
and explicit `poll()` calls, so no timer threads touch the session state.
"""

import logging
import time
from typing import Callable, Optional

from .constants import SEARCH_DEBOUNCE_MS

logger = logging.getLogger(__name__)


class SearchDebouncer:
    """A single cancellable delayed task carrying the latest search term."""

    def __init__(
        self,
        apply: Callable[[str], None],
        delay_ms: int = SEARCH_DEBOUNCE_MS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Parameters:
            apply: Called with the term once it is due.
            delay_ms: Idle window in milliseconds.
            clock: Returns the current time in seconds.
        """
        self._apply = apply
        self.delay_s = delay_ms / 1000.0
        self._clock = clock
        self._pending: Optional[str] = None
        self._due_at: Optional[float] = None

    @property
    def pending(self) -> Optional[str]:
        return self._pending

    @property
    def has_pending(self) -> bool:
        return self._due_at is not None

    def submit(self, term: str) -> None:
        """Schedule `term`, superseding anything still pending."""
        if self.has_pending:
            logger.debug(f"Search input {self._pending!r} superseded.")
        self._pending = term
        self._due_at = self._clock() + self.delay_s

    def cancel(self) -> None:
        self._pending = None
        self._due_at = None

    def poll(self) -> bool:
        """
        Apply the pending term if its idle window has elapsed.

        Returns:
            bool: True if a term was applied.
        """
        if self._due_at is None or self._clock() < self._due_at:
            return False
        return self.flush()

    def flush(self) -> bool:
        """Apply the pending term now, ignoring the window."""
        if self._due_at is None:
            return False
        term = self._pending or ""
        self.cancel()
        self._apply(term)
        return True
