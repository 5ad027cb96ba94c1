# tests/test_timeline.py
import random

from history_review.models import TimelineProgress
from history_review.timeline import apply_score, grade_timeline, score_placements, shuffled_events


def _perfect_placements(catalog):
    return {e.id: e.id for e in catalog.timeline_events}


def test_shuffled_events_keeps_every_event(catalog):
    events = shuffled_events(catalog, rng=random.Random(3))
    assert sorted(e.id for e in events) == list(range(1, 11))


def test_score_placements_empty_slots_are_wrong():
    results = score_placements({1: 1, 2: 3}, slots=3)
    assert [r.is_correct for r in results] == [True, False, False]
    assert results[2].placed_event_id is None


def test_apply_score():
    progress = apply_score(TimelineProgress(best_score=6, perfect_count=1, attempts=4), 5)
    assert progress == TimelineProgress(best_score=6, perfect_count=1, attempts=5)


def test_grade_perfect_timeline(store, catalog):
    grade = grade_timeline(store, catalog, _perfect_placements(catalog))
    assert grade.score == 10
    assert grade.is_perfect
    assert grade.progress == TimelineProgress(best_score=10, perfect_count=1, attempts=1)
    assert store.load_timeline_progress() == grade.progress


def test_grade_partial_timeline(store, catalog):
    placements = _perfect_placements(catalog)
    placements[1], placements[2] = 2, 1
    grade = grade_timeline(store, catalog, placements)
    assert grade.score == 8
    assert not grade.is_perfect
    assert [r.slot for r in grade.results if not r.is_correct] == [1, 2]


def test_best_score_never_drops(store, catalog):
    grade_timeline(store, catalog, _perfect_placements(catalog))
    grade_timeline(store, catalog, {})
    progress = store.load_timeline_progress()
    assert progress.best_score == 10
    assert progress.perfect_count == 1
    assert progress.attempts == 2
