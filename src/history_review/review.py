"""Weak area identification and focused review session logic."""
import random
from dataclasses import dataclass, field

from history_review.mastery import topic_breakdown

WEAK_TOPIC_THRESHOLD = 70.0


def get_weak_topics(practice_progress: dict, catalog, threshold: float = WEAK_TOPIC_THRESHOLD) -> list[dict]:
    """Attempted topics scoring below ``threshold`` (sorted worst first)."""
    weak = [
        row for row in topic_breakdown(practice_progress, catalog)
        if row["total"] and row["correct"] * 100 / row["total"] < threshold
    ]
    return sorted(weak, key=lambda w: w["correct"] / w["total"])


@dataclass
class FocusedSession:
    vocab: list = field(default_factory=list)
    questions: list = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.vocab) + len(self.questions)

    def items(self):
        """Yield ("vocab", term) and ("question", question) pairs, alternating, vocab first."""
        vocab, questions = list(self.vocab), list(self.questions)
        while vocab or questions:
            if vocab:
                yield "vocab", vocab.pop(0)
            if questions:
                yield "question", questions.pop(0)


def build_focused_session(store, catalog, rng: random.Random | None = None,
                          limit: int = 10, per_topic: int = 3) -> FocusedSession:
    """Unknown vocabulary plus unanswered or missed questions from weak topics."""
    rng = rng or random
    known = store.load_vocab_progress()
    practice = store.load_practice_progress()

    vocab = [v for v in catalog.vocabulary if v.term not in known]
    questions = []
    for weak in get_weak_topics(practice, catalog):
        candidates = [
            q for q in catalog.questions
            if q.topic == weak["topic"] and not practice.get(q.id, False)
        ]
        questions.extend(candidates[:per_topic])

    rng.shuffle(vocab)
    rng.shuffle(questions)
    return FocusedSession(vocab=vocab[:limit], questions=questions[:limit])


def get_challenging_questions(wrong_counts: dict, catalog, limit: int = 5) -> list[dict]:
    """Questions missed most often, most-missed first."""
    ranked = sorted(
        ((qid, n) for qid, n in wrong_counts.items() if n > 0),
        key=lambda item: (-item[1], item[0]),
    )
    known_ids = {q.id for q in catalog.questions}
    return [
        {"question": catalog.get_question(qid), "wrong_count": count}
        for qid, count in ranked
        if qid in known_ids
    ][:limit]
