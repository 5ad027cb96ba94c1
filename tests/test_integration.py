# tests/test_integration.py
"""End-to-end test of the core workflow."""
from datetime import date

import pytest

from history_review.backup import export_to_file, import_from_file
from history_review.badges import check_badges
from history_review.dashboard import get_progress_summary
from history_review.flashcards import mark_known
from history_review.quiz import grade_test, record_practice_answer
from history_review.store import ProgressStore
from history_review.timeline import grade_timeline
from history_review.timer import SessionTimer


def test_full_study_week(store, catalog, clock, tmp_path):
    """Simulate three days of study and verify all systems work together."""
    days = iter([date(2026, 10, 15), date(2026, 10, 16), date(2026, 10, 17)])
    today = {"value": None}
    timer = SessionTimer(store, clock=clock, today=lambda: today["value"])
    unlocked = []

    # Day 1: flashcards
    today["value"] = next(days)
    timer.start("vocab")
    for term in catalog.terms[:5]:
        mark_known(store, catalog, term)
    clock.advance(20 * 60)
    timer.stop()
    unlocked += check_badges(store, catalog)
    assert {b.id for b in unlocked} == {"first_study", "vocab_5"}

    # Day 2: practice questions
    today["value"] = next(days)
    timer.start("practice")
    for q in catalog.questions[:10]:
        record_practice_answer(store, catalog, q.id, q.correct)
    clock.advance(20 * 60)
    timer.stop()
    unlocked += check_badges(store, catalog)
    assert "practice_10" in [b.id for b in unlocked]

    # Day 3: test and timeline
    today["value"] = next(days)
    timer.start("test")
    grade_test(store, catalog, {q.id: q.correct for q in catalog.questions})
    grade_timeline(store, catalog, {e.id: e.id for e in catalog.timeline_events})
    clock.advance(20 * 60)
    timer.stop()
    unlocked += check_badges(store, catalog)

    earned = store.load_earned_badges()
    assert earned == [b.id for b in unlocked]
    assert {"streak_3", "test_pass", "perfect_test", "study_hour"} <= set(earned)
    assert "timeline_master" not in earned

    summary = get_progress_summary(store, catalog)
    assert summary["streak_current"] == 3
    assert summary["study_time"] == "1h 0m"
    assert summary["vocab_mastery"] == 23  # 5/22
    assert summary["practice_accuracy"] == 100
    assert summary["overall"] == pytest.approx(69.2)
    assert summary["can_email_teacher"] is False

    # Back up and restore into a fresh install
    path = tmp_path / "week.json"
    export_to_file(store, str(path))
    fresh = ProgressStore(str(tmp_path / "fresh.db"))
    assert import_from_file(fresh, str(path)) is True
    assert get_progress_summary(fresh, catalog) == summary
