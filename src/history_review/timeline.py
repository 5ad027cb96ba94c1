"""Timeline ordering challenge: place events into chronological slots."""
import logging
import random
from dataclasses import dataclass
from typing import Optional

from history_review.models import TimelineProgress

logger = logging.getLogger(__name__)

TIMELINE_SLOTS = 10


@dataclass(frozen=True)
class SlotResult:
    slot: int
    placed_event_id: Optional[int]
    correct_event_id: int

    @property
    def is_correct(self) -> bool:
        return self.placed_event_id == self.correct_event_id


@dataclass(frozen=True)
class TimelineGrade:
    score: int
    results: tuple
    progress: TimelineProgress

    @property
    def is_perfect(self) -> bool:
        return self.score == len(self.results)


def shuffled_events(catalog, rng: random.Random | None = None) -> list:
    events = list(catalog.timeline_events)
    (rng or random).shuffle(events)
    return events


def score_placements(placements: dict, slots: int = TIMELINE_SLOTS) -> list[SlotResult]:
    """Slot ``i`` (1-based) is correct when the event placed there has id ``i``."""
    return [SlotResult(slot=i, placed_event_id=placements.get(i), correct_event_id=i) for i in range(1, slots + 1)]


def apply_score(progress: TimelineProgress, score: int, slots: int = TIMELINE_SLOTS) -> TimelineProgress:
    return TimelineProgress(
        best_score=max(progress.best_score, score),
        perfect_count=progress.perfect_count + (1 if score == slots else 0),
        attempts=progress.attempts + 1,
    )


def grade_timeline(store, catalog, placements: dict) -> TimelineGrade:
    """Score ``placements`` (slot -> event id) and persist the updated timeline stats."""
    slots = len(catalog.timeline_events) or TIMELINE_SLOTS
    results = score_placements(placements, slots)
    score = sum(1 for r in results if r.is_correct)
    progress = apply_score(store.load_timeline_progress(), score, slots)
    store.save_timeline_progress(progress)
    logger.info("Timeline graded: %d/%d (best %d)", score, slots, progress.best_score)
    return TimelineGrade(score=score, results=tuple(results), progress=progress)
