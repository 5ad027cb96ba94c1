"""Study session timer.

One timer runs per visit to a study section. Starting it counts the day toward
the study streak; stopping it adds the elapsed time to the stored total.
Time is read from an injectable ``clock`` returning seconds, so tests can
drive it without waiting.
"""
import logging
import time
from datetime import date
from enum import Enum

from history_review.streak import check_and_update_streak

logger = logging.getLogger(__name__)


class TimerState(Enum):
    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"


def elapsed_since(session_start_ms: int, now_ms: int) -> int:
    return max(0, now_ms - session_start_ms)


def format_elapsed(ms: int) -> str:
    """Format a duration as ``MM:SS``."""
    seconds = ms // 1000
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


class SessionTimer:
    def __init__(self, store, clock=time.time, today=date.today):
        self.store = store
        self.clock = clock
        self.today = today
        self.state = TimerState.STOPPED
        self.section = None
        self.session_start = 0  # ms; rebased on every resume
        self._elapsed = 0  # ms accumulated up to the last pause

    def _now(self) -> int:
        return int(self.clock() * 1000)

    @property
    def elapsed_ms(self) -> int:
        if self.state is TimerState.RUNNING:
            return elapsed_since(self.session_start, self._now())
        return self._elapsed

    def display(self) -> str:
        return format_elapsed(self.elapsed_ms)

    def start(self, section: str = "") -> bool:
        """Start timing ``section``. Returns False if a session is already active."""
        if self.state is not TimerState.STOPPED:
            return False
        check_and_update_streak(self.store, self.today())
        self.section = section
        self.session_start = self._now() - self._elapsed
        self.state = TimerState.RUNNING
        return True

    def pause(self) -> None:
        if self.state is TimerState.RUNNING:
            self._elapsed = elapsed_since(self.session_start, self._now())
            self.state = TimerState.PAUSED

    def resume(self) -> None:
        if self.state is TimerState.PAUSED:
            self.session_start = self._now() - self._elapsed
            self.state = TimerState.RUNNING

    def toggle(self) -> TimerState:
        if self.state is TimerState.RUNNING:
            self.pause()
        elif self.state is TimerState.PAUSED:
            self.resume()
        return self.state

    def stop(self) -> int:
        """End the session, add its time to the stored total and return it in ms."""
        if self.state is TimerState.STOPPED:
            return 0
        elapsed = self.elapsed_ms
        total = self.store.load_total_study_time() + elapsed
        self.store.save_total_study_time(total)
        logger.info("Study session %s: %d ms (total %d ms)", self.section or "-", elapsed, total)
        self._elapsed = 0
        self.section = None
        self.state = TimerState.STOPPED
        return elapsed
