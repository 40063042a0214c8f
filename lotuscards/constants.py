"""
Static constants for lotuscards.

Storage key, debounce window, seed content and the user-facing texts shown
by the render projection. No runtime configuration here.
"""
from typing import Tuple

# Key under which the whole document is stored.
STORAGE_KEY: str = "lotusFlashcards_v1"

# Idle window before a typed search term is applied.
SEARCH_DEBOUNCE_MS: int = 300

# --- Seed data (affirmations) ---
SEED_DECK_NAME: str = "White Lotus — Self Love"

SEED_CARDS: Tuple[Tuple[str, str], ...] = (
    ("I am worthy.", "I deserve love, peace, and good things."),
    ("I am safe.", "My mind and body can relax right now."),
    ("I can do hard things.", "Step by step, I always figure it out."),
    ("I am protected.", "I trust myself and my path."),
    ("I bloom in my own time.", "No rushing. My growth is real."),
)

# --- Render texts ---
NO_DECK_TITLE = "No deck selected"
NO_DECK_FRONT = "Pick a deck to begin."
NO_DECK_BACK = "Your affirmation will appear here."
NO_CARDS_FRONT = "No cards yet."
NO_RESULTS_FRONT = "No cards found."
NO_CARDS_BACK = "Add a new card to begin."
NO_DECKS_PLACEHOLDER = "No decks yet."
EMPTY_POSITION_LABEL = "0 / 0"

DELETE_DECK_PROMPT = 'Delete deck "{name}"? This cannot be undone.'
NO_ACTIVE_DECK_MESSAGE = "Pick or create a deck first."
