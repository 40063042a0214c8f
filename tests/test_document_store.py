"""
Tests for DocumentStore mutations, their no-op preconditions and persistence.
"""

import pytest
from unittest.mock import MagicMock, patch

from lotuscards.constants import SEED_CARDS, SEED_DECK_NAME
from lotuscards.document_store import DocumentStore
from lotuscards.exceptions import DeckNotFoundError, StorageWriteError
from lotuscards.models import StudyDocument


def _all_ids(document: StudyDocument) -> list:
    ids = [deck.id for deck in document.decks]
    for cards in document.cards_by_deck_id.values():
        ids.extend(card.id for card in cards)
    return ids


def _assert_invariants(document: StudyDocument) -> None:
    deck_ids = {deck.id for deck in document.decks}
    assert set(document.cards_by_deck_id) == deck_ids
    assert document.active_deck_id is None or document.active_deck_id in deck_ids
    ids = _all_ids(document)
    assert len(ids) == len(set(ids))


class TestLoadAndSeed:
    def test_load_without_snapshot_starts_empty(self, adapter):
        store = DocumentStore.load(adapter)
        assert store.document.decks == []
        assert store.document.active_deck_id is None

    def test_load_uses_stored_document(self, adapter, sample_document):
        adapter.save(sample_document)
        store = DocumentStore.load(adapter)
        assert store.document == sample_document

    def test_seed_if_empty_adds_demo_deck(self, adapter):
        store = DocumentStore.load(adapter)
        assert store.seed_if_empty() is True

        document = store.document
        assert len(document.decks) == 1
        deck = document.decks[0]
        assert deck.name == SEED_DECK_NAME == "White Lotus — Self Love"
        assert document.active_deck_id == deck.id
        cards = document.cards_for(deck.id)
        assert [(c.front, c.back) for c in cards] == list(SEED_CARDS)
        assert len(cards) == 5
        _assert_invariants(document)
        # persisted
        assert adapter.load() == document

    def test_seed_if_empty_leaves_existing_decks(self, store):
        with patch.object(store.adapter, "save") as save:
            assert store.seed_if_empty() is False
        save.assert_not_called()
        assert len(store.document.decks) == 2


class TestDeckMutations:
    def test_create_deck(self, store):
        deck = store.create_deck("  Portuguese ")
        assert deck is not None
        assert deck.name == "Portuguese"
        assert store.document.decks[-1] is deck
        assert store.document.active_deck_id == deck.id
        assert store.cards_for(deck.id) == []
        assert store.adapter.load() == store.document
        _assert_invariants(store.document)

    @pytest.mark.parametrize("name", ["", "   ", "\n"])
    def test_create_deck_blank_name_is_noop(self, store, name):
        before = store.document.model_copy(deep=True)
        with patch.object(store.adapter, "save") as save:
            assert store.create_deck(name) is None
        save.assert_not_called()
        assert store.document == before

    def test_rename_active_deck(self, store):
        assert store.rename_active_deck("  Castellano ") is True
        deck = store.active_deck()
        assert deck.id == "deck-es"
        assert deck.name == "Castellano"
        assert len(store.cards_for("deck-es")) == 3
        assert store.adapter.load().active_deck.name == "Castellano"

    def test_rename_blank_is_noop(self, store):
        with patch.object(store.adapter, "save") as save:
            assert store.rename_active_deck("   ") is False
        save.assert_not_called()
        assert store.active_deck().name == "Spanish"

    def test_rename_without_active_deck_is_noop(self, store):
        store.document.active_deck_id = None
        with patch.object(store.adapter, "save") as save:
            assert store.rename_active_deck("New") is False
        save.assert_not_called()

    def test_delete_requires_confirmation(self, store):
        confirm = MagicMock(return_value=False)
        with patch.object(store.adapter, "save") as save:
            assert store.delete_active_deck(confirm) is False
        confirm.assert_called_once_with(store.active_deck())
        save.assert_not_called()
        assert len(store.document.decks) == 2
        assert store.document.active_deck_id == "deck-es"

    def test_delete_active_deck_moves_to_first_remaining(self, store):
        assert store.delete_active_deck(lambda deck: True) is True
        assert [d.id for d in store.document.decks] == ["deck-empty"]
        assert "deck-es" not in store.document.cards_by_deck_id
        assert store.document.active_deck_id == "deck-empty"
        assert store.adapter.load() == store.document
        _assert_invariants(store.document)

    def test_delete_only_deck_leaves_no_active_deck(self, store):
        store.delete_active_deck(lambda deck: True)
        store.delete_active_deck(lambda deck: True)
        assert store.document.decks == []
        assert store.document.cards_by_deck_id == {}
        assert store.document.active_deck_id is None

    def test_delete_without_active_deck_never_asks(self, store):
        store.document.active_deck_id = None
        confirm = MagicMock(return_value=True)
        assert store.delete_active_deck(confirm) is False
        confirm.assert_not_called()

    def test_select_deck(self, store):
        assert store.select_deck("deck-empty") is True
        assert store.document.active_deck_id == "deck-empty"
        assert store.adapter.load().active_deck_id == "deck-empty"

    def test_select_unknown_deck_is_noop(self, store):
        with patch.object(store.adapter, "save") as save:
            assert store.select_deck("ghost") is False
        save.assert_not_called()
        assert store.document.active_deck_id == "deck-es"


class TestCardMutations:
    def test_create_card_appends_to_active_deck(self, store):
        card = store.create_card(" perro ", " dog ")
        assert card is not None
        assert (card.front, card.back) == ("perro", "dog")
        assert store.cards_for("deck-es")[-1] is card
        assert len(store.cards_for("deck-es")) == 4
        assert store.adapter.load() == store.document

    @pytest.mark.parametrize("front, back", [("", "dog"), ("perro", "  ")])
    def test_create_card_blank_side_is_noop(self, store, front, back):
        with patch.object(store.adapter, "save") as save:
            assert store.create_card(front, back) is None
        save.assert_not_called()
        assert len(store.cards_for("deck-es")) == 3

    def test_create_card_without_active_deck_is_noop(self, store):
        store.document.active_deck_id = None
        assert store.create_card("perro", "dog") is None
        assert sum(len(c) for c in store.document.cards_by_deck_id.values()) == 3


class TestLookupAndIds:
    def test_find_deck_by_id_or_name(self, store):
        assert store.find_deck("deck-empty").name == "Empty"
        assert store.find_deck("  spanish ").id == "deck-es"
        assert store.find_deck("french") is None

    def test_require_deck_raises_for_unknown(self, store):
        with pytest.raises(DeckNotFoundError, match="french") as excinfo:
            store.require_deck("french")
        assert excinfo.value.query == "french"
        assert isinstance(excinfo.value, LookupError)

    def test_ids_stay_unique_across_many_creations(self, adapter):
        store = DocumentStore.load(adapter)
        store.seed_if_empty()
        for i in range(20):
            store.create_deck(f"Deck {i}")
            for j in range(5):
                store.create_card(f"Q{i}-{j}", f"A{i}-{j}")
        _assert_invariants(store.document)
        assert len(_all_ids(store.document)) == 1 + 5 + 20 + 20 * 5


class TestSaveFailures:
    def test_failed_save_keeps_change_and_records_error(self, store):
        with patch.object(
            store.adapter, "save", side_effect=StorageWriteError("disk full")
        ):
            deck = store.create_deck("French")
        assert deck is not None
        assert store.document.active_deck_id == deck.id
        assert isinstance(store.last_save_error, StorageWriteError)

        # The next successful save clears the warning and writes everything.
        store.create_card("bonjour", "hello")
        assert store.last_save_error is None
        assert store.adapter.load().get_deck(deck.id).name == "French"
