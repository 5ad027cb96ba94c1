"""Achievement badges: one predicate per badge kind, evaluated against a progress snapshot.

A badge moves from locked to unlocked at most once. Already-earned badges are
skipped without re-checking their predicate, and earned ids are only ever
appended, so the stored list doubles as the unlock history.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable

from history_review.models import BadgeKind, StudyStreak, TimelineProgress

logger = logging.getLogger(__name__)

STUDY_HOUR_MS = 3_600_000
PASSING_TEST_SCORE = 80
PERFECT_TEST_SCORE = 100
TIMELINE_MASTER_PERFECTS = 3


@dataclass(frozen=True)
class ProgressSnapshot:
    mastered: frozenset = frozenset()
    practice: dict = field(default_factory=dict)
    test_history: tuple = ()
    total_study_time: int = 0
    streak: StudyStreak = field(default_factory=StudyStreak)
    timeline: TimelineProgress = field(default_factory=TimelineProgress)
    vocab_total: int = 0


PREDICATES: dict[BadgeKind, Callable[[ProgressSnapshot], bool]] = {
    BadgeKind.FIRST_STUDY: lambda s: s.total_study_time > 0,
    BadgeKind.VOCAB_5: lambda s: len(s.mastered) >= 5,
    BadgeKind.VOCAB_ALL: lambda s: len(s.mastered) >= s.vocab_total,
    BadgeKind.STREAK_3: lambda s: s.streak.current >= 3,
    BadgeKind.STREAK_7: lambda s: s.streak.current >= 7,
    BadgeKind.PRACTICE_10: lambda s: len(s.practice) >= 10,
    BadgeKind.TEST_PASS: lambda s: any(r.score >= PASSING_TEST_SCORE for r in s.test_history),
    BadgeKind.PERFECT_TEST: lambda s: any(r.score >= PERFECT_TEST_SCORE for r in s.test_history),
    BadgeKind.STUDY_HOUR: lambda s: s.total_study_time >= STUDY_HOUR_MS,
    BadgeKind.TIMELINE_MASTER: lambda s: s.timeline.perfect_count >= TIMELINE_MASTER_PERFECTS,
}


def load_snapshot(store, catalog) -> ProgressSnapshot:
    return ProgressSnapshot(
        mastered=frozenset(catalog.known_terms(store.load_vocab_progress())),
        practice=store.load_practice_progress(),
        test_history=tuple(store.load_test_results()),
        total_study_time=store.load_total_study_time(),
        streak=store.load_study_streak(),
        timeline=store.load_timeline_progress(),
        vocab_total=catalog.vocab_count,
    )


def evaluate_badges(snapshot: ProgressSnapshot, earned, kinds=tuple(BadgeKind)) -> list[BadgeKind]:
    """Kinds among ``kinds`` that are not yet earned and whose predicate now holds."""
    return [
        kind for kind in kinds
        if kind.value not in earned and PREDICATES[kind](snapshot)
    ]


def check_badges(store, catalog, notify=None) -> list:
    """Unlock every badge whose threshold has been reached.

    Newly unlocked badges are appended to the earned list in catalog order and
    persisted; ``notify`` is called once per new badge. Returns the new badges.
    """
    earned = store.load_earned_badges()
    snapshot = load_snapshot(store, catalog)
    new_kinds = evaluate_badges(snapshot, earned, [b.kind for b in catalog.badges])
    if not new_kinds:
        return []
    store.save_earned_badges(earned + [k.value for k in new_kinds])
    unlocked = [catalog.get_badge(k.value) for k in new_kinds]
    for badge in unlocked:
        logger.info("Badge earned: %s (%s)", badge.name, badge.id)
        if notify:
            notify(badge)
    return unlocked


def earned_badges(store, catalog) -> list:
    """Earned badge definitions in unlock order."""
    badges = (catalog.get_badge(b) for b in store.load_earned_badges())
    return [b for b in badges if b is not None]
