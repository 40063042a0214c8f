import random
import pytest
from pathlib import Path
from typing import Generator

from lotuscards.controller import StudyController
from lotuscards.db import KeyValueStore
from lotuscards.document_store import DocumentStore
from lotuscards.models import Card, Deck, StudyDocument
from lotuscards.persistence import PersistenceAdapter


# each test runs with cwd in its temp dir and a clean LOTUSCARDS_* environment
@pytest.fixture(autouse=True)
def go_to_tmpdir(tmp_path: Path, monkeypatch):
    """
    Change the working directory to the test's tmp_path (so no stray .env is
    picked up) and clear lotuscards environment variables.
    """
    monkeypatch.chdir(tmp_path)
    for var in (
        "LOTUSCARDS_DB",
        "LOTUSCARDS_DB_PATH",
        "LOTUSCARDS_STORAGE_KEY",
        "LOTUSCARDS_SEARCH_DEBOUNCE_MS",
    ):
        monkeypatch.delenv(var, raising=False)
    yield


# --- Storage Fixtures ---
@pytest.fixture
def store_path_file(tmp_path: Path) -> Path:
    """Path to a temporary store file named "test_lotus.db"."""
    return tmp_path / "test_lotus.db"


@pytest.fixture(params=["memory", "file"])
def kv_store(
    request, store_path_file: Path
) -> Generator[KeyValueStore, None, None]:
    """
    Provide a KeyValueStore, either in-memory or file-backed, closed on
    teardown.
    """
    if request.param == "memory":
        store = KeyValueStore(":memory:")
    else:
        store = KeyValueStore(store_path_file)
    try:
        yield store
    finally:
        store.close()


@pytest.fixture
def memory_store() -> Generator[KeyValueStore, None, None]:
    store = KeyValueStore(":memory:")
    try:
        yield store
    finally:
        store.close()


@pytest.fixture
def adapter(memory_store: KeyValueStore) -> PersistenceAdapter:
    return PersistenceAdapter(memory_store)


# --- Document Fixtures ---
@pytest.fixture
def spanish_cards() -> list:
    """
    Three cards in a fixed order: A (hola/hello), B (adios/goodbye) and
    C (gato/cat).
    """
    return [
        Card(id="card-a", front="hola", back="hello", updated_at=1000),
        Card(id="card-b", front="adios", back="goodbye", updated_at=2000),
        Card(id="card-c", front="gato", back="cat", updated_at=3000),
    ]


@pytest.fixture
def sample_document(spanish_cards) -> StudyDocument:
    """
    A document with an active "Spanish" deck holding three cards and an
    empty "Empty" deck.
    """
    return StudyDocument(
        decks=[
            Deck(id="deck-es", name="Spanish", created_at=100),
            Deck(id="deck-empty", name="Empty", created_at=200),
        ],
        cards_by_deck_id={"deck-es": spanish_cards, "deck-empty": []},
        active_deck_id="deck-es",
    )


@pytest.fixture
def store(adapter: PersistenceAdapter, sample_document) -> DocumentStore:
    return DocumentStore(adapter, sample_document)


@pytest.fixture
def controller(store: DocumentStore) -> StudyController:
    """A controller over the sample document with a seeded RNG."""
    return StudyController(store, rng=random.Random(42))


class FakeClock:
    """Monotonic clock stand-in advanced by whole milliseconds."""

    def __init__(self):
        self.now_ms = 100_000

    def __call__(self) -> float:
        return self.now_ms / 1000.0

    def advance(self, ms: int) -> None:
        self.now_ms += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
