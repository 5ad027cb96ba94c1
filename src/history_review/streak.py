"""Daily study streak tracking."""
import logging
from datetime import date, timedelta

from history_review.models import StudyStreak, normalize_study_date

logger = logging.getLogger(__name__)


def update_streak(streak: StudyStreak, today: date) -> StudyStreak:
    """Return the streak after studying on ``today``.

    Studying again on the same day changes nothing; studying the day after
    the last study day extends the streak; anything else restarts it at 1.
    """
    today_str = today.isoformat()
    last = normalize_study_date(streak.last_study_date) if streak.last_study_date else None
    if last == today_str:
        return StudyStreak(streak.current, streak.longest, last)
    yesterday = (today - timedelta(days=1)).isoformat()
    current = streak.current + 1 if last == yesterday else 1
    return StudyStreak(
        current=current,
        longest=max(streak.longest, current),
        last_study_date=today_str,
    )


def check_and_update_streak(store, today: date | None = None) -> StudyStreak:
    """Count ``today`` as a study day and persist the resulting streak."""
    today = today or date.today()
    streak = store.load_study_streak()
    updated = update_streak(streak, today)
    if updated != streak:
        store.save_study_streak(updated)
        logger.info("Study streak now %d day(s), longest %d", updated.current, updated.longest)
    return updated
