# tests/test_flashcards.py
import random

import pytest

from history_review.flashcards import get_deck, get_unknown_terms, mark_known, reset_vocab_progress


def test_get_deck_in_catalog_order(catalog):
    deck = get_deck(catalog)
    assert [v.term for v in deck] == catalog.terms


def test_get_deck_shuffled_keeps_every_term(catalog):
    deck = get_deck(catalog, shuffle=True, rng=random.Random(7))
    assert sorted(v.term for v in deck) == sorted(catalog.terms)


def test_mark_known(store, catalog):
    assert mark_known(store, catalog, "Boycott") is True
    assert store.load_vocab_progress() == {"Boycott"}


def test_mark_known_twice_is_idempotent(store, catalog):
    mark_known(store, catalog, "Boycott")
    assert mark_known(store, catalog, "Boycott") is False
    assert store.load_vocab_progress() == {"Boycott"}


def test_mark_known_rejects_unknown_term(store, catalog):
    with pytest.raises(ValueError):
        mark_known(store, catalog, "Monarchy of Mars")
    assert store.load_vocab_progress() == set()


def test_get_unknown_terms(store, catalog):
    mark_known(store, catalog, "Tax")
    unknown = get_unknown_terms(store, catalog)
    assert len(unknown) == catalog.vocab_count - 1
    assert "Tax" not in [v.term for v in unknown]


def test_reset_vocab_progress(store, catalog):
    mark_known(store, catalog, "Tax")
    reset_vocab_progress(store)
    assert len(get_unknown_terms(store, catalog)) == catalog.vocab_count
