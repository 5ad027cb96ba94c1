"""Vocabulary flashcard drill."""
import logging
import random

from history_review.mastery import vocab_mastery_percent

logger = logging.getLogger(__name__)


def get_deck(catalog, shuffle: bool = False, rng: random.Random | None = None) -> list:
    deck = list(catalog.vocabulary)
    if shuffle:
        (rng or random).shuffle(deck)
    return deck


def get_unknown_terms(store, catalog) -> list:
    known = store.load_vocab_progress()
    return [v for v in catalog.vocabulary if v.term not in known]


def mark_known(store, catalog, term: str) -> bool:
    """Add ``term`` to the mastered set. Returns False if it was already known."""
    if catalog.get_term(term) is None:
        raise ValueError(f"Unknown vocabulary term: {term}")
    known = store.load_vocab_progress()
    if term in known:
        return False
    known.add(term)
    store.save_vocab_progress(known)
    mastered = catalog.known_terms(known)
    logger.info(
        "Vocab progress: %d/%d (%d%%)",
        len(mastered), catalog.vocab_count, vocab_mastery_percent(mastered, catalog.vocab_count),
    )
    return True


def reset_vocab_progress(store) -> None:
    store.reset_vocab_progress()
    logger.info("Vocabulary progress reset")
