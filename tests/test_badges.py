# tests/test_badges.py
from history_review.badges import (
    PREDICATES, STUDY_HOUR_MS, ProgressSnapshot, check_badges, earned_badges, evaluate_badges,
)
from history_review.models import BadgeKind, StudyStreak, TestResult, TimelineProgress


def test_every_badge_kind_has_a_predicate():
    assert set(PREDICATES) == set(BadgeKind)


def test_empty_progress_unlocks_nothing():
    assert evaluate_badges(ProgressSnapshot(vocab_total=22), []) == []


def test_vocab_thresholds():
    four = ProgressSnapshot(mastered=frozenset("abcd"), vocab_total=22)
    five = ProgressSnapshot(mastered=frozenset("abcde"), vocab_total=22)
    assert BadgeKind.VOCAB_5 not in evaluate_badges(four, [])
    assert BadgeKind.VOCAB_5 in evaluate_badges(five, [])
    everything = ProgressSnapshot(mastered=frozenset("abcde"), vocab_total=5)
    assert BadgeKind.VOCAB_ALL in evaluate_badges(everything, [])


def test_streak_thresholds():
    assert evaluate_badges(ProgressSnapshot(streak=StudyStreak(3, 3, "x"), vocab_total=1), []) == [BadgeKind.STREAK_3]
    found = evaluate_badges(ProgressSnapshot(streak=StudyStreak(7, 7, "x"), vocab_total=1), [])
    assert found == [BadgeKind.STREAK_3, BadgeKind.STREAK_7]


def test_streak_uses_current_not_longest():
    snapshot = ProgressSnapshot(streak=StudyStreak(1, 9, "x"), vocab_total=1)
    assert evaluate_badges(snapshot, []) == []


def test_practice_counts_attempts_not_correct_answers():
    snapshot = ProgressSnapshot(practice={i: False for i in range(10)}, vocab_total=1)
    assert evaluate_badges(snapshot, []) == [BadgeKind.PRACTICE_10]


def test_test_badges():
    passed = ProgressSnapshot(test_history=(TestResult(80, "d"),), vocab_total=1)
    assert evaluate_badges(passed, []) == [BadgeKind.TEST_PASS]
    perfect = ProgressSnapshot(test_history=(TestResult(50, "d"), TestResult(100, "d")), vocab_total=1)
    assert evaluate_badges(perfect, []) == [BadgeKind.TEST_PASS, BadgeKind.PERFECT_TEST]


def test_study_time_badges():
    snapshot = ProgressSnapshot(total_study_time=STUDY_HOUR_MS, vocab_total=1)
    assert evaluate_badges(snapshot, []) == [BadgeKind.FIRST_STUDY, BadgeKind.STUDY_HOUR]
    short = ProgressSnapshot(total_study_time=1, vocab_total=1)
    assert evaluate_badges(short, []) == [BadgeKind.FIRST_STUDY]


def test_timeline_master_needs_three_perfects():
    two = ProgressSnapshot(timeline=TimelineProgress(10, 2, 5), vocab_total=1)
    three = ProgressSnapshot(timeline=TimelineProgress(10, 3, 6), vocab_total=1)
    assert evaluate_badges(two, []) == []
    assert evaluate_badges(three, []) == [BadgeKind.TIMELINE_MASTER]


def test_earned_badges_are_skipped():
    snapshot = ProgressSnapshot(mastered=frozenset("abcde"), vocab_total=22)
    assert evaluate_badges(snapshot, ["vocab_5"]) == []


def test_vocab_5_unlocks_exactly_once(store, catalog):
    terms = [v.term for v in catalog.vocabulary]
    store.save_vocab_progress(set(terms[:4]))
    assert check_badges(store, catalog) == []

    store.save_vocab_progress(set(terms[:5]))
    unlocked = check_badges(store, catalog)
    assert [b.id for b in unlocked] == ["vocab_5"]

    store.save_vocab_progress(set(terms[:6]))
    assert check_badges(store, catalog) == []
    assert store.load_earned_badges() == ["vocab_5"]


def test_simultaneous_unlocks_notify_each(store, catalog):
    store.save_total_study_time(STUDY_HOUR_MS)
    store.save_study_streak(StudyStreak(3, 3, "2026-10-17"))
    seen = []
    unlocked = check_badges(store, catalog, notify=seen.append)
    ids = ["first_study", "streak_3", "study_hour"]
    assert [b.id for b in unlocked] == ids
    assert [b.id for b in seen] == ids
    assert store.load_earned_badges() == ids


def test_badges_are_never_removed(store, catalog):
    store.save_study_streak(StudyStreak(3, 3, "2026-10-17"))
    check_badges(store, catalog)
    store.save_study_streak(StudyStreak(1, 3, "2026-10-20"))
    check_badges(store, catalog)
    assert "streak_3" in store.load_earned_badges()


def test_new_badges_are_appended_after_old_ones(store, catalog):
    store.save_earned_badges(["timeline_master"])
    store.save_total_study_time(1_000)
    check_badges(store, catalog)
    assert store.load_earned_badges() == ["timeline_master", "first_study"]


def test_earned_badges_in_unlock_order(store, catalog):
    store.save_earned_badges(["streak_3", "first_study", "retired_badge"])
    assert [b.name for b in earned_badges(store, catalog)] == ["Dedicated Student", "First Steps"]


def test_vocab_badges_ignore_terms_missing_from_catalog(store, catalog):
    store.import_all({"version": "1.0", "vocabProgress": [f"retired term {i}" for i in range(30)]})
    assert check_badges(store, catalog) == []
    assert store.load_earned_badges() == []
