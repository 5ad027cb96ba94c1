"""Durable storage of every progress aggregate.

Each aggregate lives in one row of the ``progress`` table as JSON. Loads never
raise: a missing row, unparseable JSON or a value of the wrong shape all come
back as the aggregate's default, with a warning logged for the latter two.
"""
import json
import logging
from datetime import datetime

from history_review.db import DEFAULT_DB_PATH, get_connection, init_db
from history_review.models import (
    StudyStreak, TestResult, TimelineProgress, require_dict, require_int,
)

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"

VOCAB_PROGRESS = "vocabProgress"
PRACTICE_PROGRESS = "practiceProgress"
WRONG_ANSWER_COUNT = "wrongAnswerCount"
TEST_RESULTS = "testResults"
TOTAL_STUDY_TIME = "totalStudyTime"
STUDY_STREAK = "studyStreak"
EARNED_BADGES = "earnedBadges"
TIMELINE_PROGRESS = "timelineProgress"
SHORT_ANSWER_RESPONSES = "shortAnswerResponses"


def _question_key(key) -> int:
    try:
        return int(key)
    except (TypeError, ValueError):
        raise ValueError(f"question id must be an integer, got {key!r}") from None


def parse_vocab_progress(raw) -> set[str]:
    if not isinstance(raw, list):
        raise ValueError("vocabulary progress must be a list")
    if not all(isinstance(term, str) for term in raw):
        raise ValueError("vocabulary progress must contain only strings")
    return set(raw)


def parse_practice_progress(raw) -> dict[int, bool]:
    raw = require_dict(raw, "practice progress")
    result = {}
    for key, value in raw.items():
        if not isinstance(value, bool):
            raise ValueError(f"practice result for {key} must be true/false")
        result[_question_key(key)] = value
    return result


def parse_wrong_answer_count(raw) -> dict[int, int]:
    raw = require_dict(raw, "wrong answer count")
    return {_question_key(k): require_int(v, f"wrong count for {k}") for k, v in raw.items()}


def parse_test_results(raw) -> list[TestResult]:
    if not isinstance(raw, list):
        raise ValueError("test results must be a list")
    return [TestResult.from_dict(item) for item in raw]


def parse_total_study_time(raw) -> int:
    # older exports stored the total as a string
    if isinstance(raw, str):
        try:
            raw = int(raw)
        except ValueError:
            raise ValueError(f"total study time is not a number: {raw!r}") from None
    return require_int(raw, "total study time")


def parse_earned_badges(raw) -> list[str]:
    if not isinstance(raw, list) or not all(isinstance(b, str) for b in raw):
        raise ValueError("earned badges must be a list of strings")
    return list(dict.fromkeys(raw))


def parse_short_answers(raw) -> dict[int, str]:
    raw = require_dict(raw, "short answer responses")
    result = {}
    for key, value in raw.items():
        if not isinstance(value, str):
            raise ValueError(f"short answer {key} must be text")
        result[_question_key(key)] = value
    return result


# key -> (parse, dump, default factory)
AGGREGATES = {
    VOCAB_PROGRESS: (parse_vocab_progress, sorted, set),
    PRACTICE_PROGRESS: (parse_practice_progress, lambda v: {str(k): b for k, b in v.items()}, dict),
    WRONG_ANSWER_COUNT: (parse_wrong_answer_count, lambda v: {str(k): n for k, n in v.items()}, dict),
    TEST_RESULTS: (parse_test_results, lambda v: [r.to_dict() for r in v], list),
    TOTAL_STUDY_TIME: (parse_total_study_time, int, int),
    STUDY_STREAK: (StudyStreak.from_dict, lambda v: v.to_dict(), StudyStreak),
    EARNED_BADGES: (parse_earned_badges, lambda v: list(dict.fromkeys(v)), list),
    TIMELINE_PROGRESS: (TimelineProgress.from_dict, lambda v: v.to_dict(), TimelineProgress),
    SHORT_ANSWER_RESPONSES: (parse_short_answers, lambda v: {str(k): t for k, t in v.items()}, dict),
}


class ProgressStore:
    """Typed load/save access to the persisted progress aggregates."""

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        self.db_path = db_path
        init_db(db_path)

    def _read(self, key: str) -> str | None:
        conn = get_connection(self.db_path)
        row = conn.execute("SELECT value FROM progress WHERE key = ?", (key,)).fetchone()
        conn.close()
        return row["value"] if row else None

    def _write(self, key: str, value) -> None:
        text = json.dumps(value)
        conn = get_connection(self.db_path)
        conn.execute(
            "INSERT INTO progress (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
            (key, text, text),
        )
        conn.commit()
        conn.close()

    def load(self, key: str):
        parse, _, default = AGGREGATES[key]
        text = self._read(key)
        if text is None:
            return default()
        try:
            return parse(json.loads(text))
        except ValueError as e:  # JSONDecodeError is a ValueError
            logger.warning("Ignoring malformed %s: %s", key, e)
            return default()

    def save(self, key: str, value) -> None:
        _, dump, _ = AGGREGATES[key]
        self._write(key, dump(value))

    def load_vocab_progress(self) -> set[str]:
        return self.load(VOCAB_PROGRESS)

    def save_vocab_progress(self, terms) -> None:
        self.save(VOCAB_PROGRESS, terms)

    def load_practice_progress(self) -> dict[int, bool]:
        return self.load(PRACTICE_PROGRESS)

    def save_practice_progress(self, progress: dict) -> None:
        self.save(PRACTICE_PROGRESS, progress)

    def load_wrong_answer_count(self) -> dict[int, int]:
        return self.load(WRONG_ANSWER_COUNT)

    def save_wrong_answer_count(self, counts: dict) -> None:
        self.save(WRONG_ANSWER_COUNT, counts)

    def load_test_results(self) -> list[TestResult]:
        return self.load(TEST_RESULTS)

    def save_test_results(self, results: list) -> None:
        self.save(TEST_RESULTS, results)

    def load_total_study_time(self) -> int:
        return self.load(TOTAL_STUDY_TIME)

    def save_total_study_time(self, ms: int) -> None:
        self.save(TOTAL_STUDY_TIME, ms)

    def load_study_streak(self) -> StudyStreak:
        return self.load(STUDY_STREAK)

    def save_study_streak(self, streak: StudyStreak) -> None:
        self.save(STUDY_STREAK, streak)

    def load_earned_badges(self) -> list[str]:
        return self.load(EARNED_BADGES)

    def save_earned_badges(self, badge_ids: list) -> None:
        self.save(EARNED_BADGES, badge_ids)

    def load_timeline_progress(self) -> TimelineProgress:
        return self.load(TIMELINE_PROGRESS)

    def save_timeline_progress(self, progress: TimelineProgress) -> None:
        self.save(TIMELINE_PROGRESS, progress)

    def load_short_answer_responses(self) -> dict[int, str]:
        return self.load(SHORT_ANSWER_RESPONSES)

    def save_short_answer_responses(self, responses: dict) -> None:
        self.save(SHORT_ANSWER_RESPONSES, responses)

    def reset_vocab_progress(self) -> None:
        """Forget every mastered vocabulary term."""
        conn = get_connection(self.db_path)
        conn.execute("DELETE FROM progress WHERE key = ?", (VOCAB_PROGRESS,))
        conn.commit()
        conn.close()

    def export_all(self) -> dict:
        """Snapshot of every aggregate in its stored JSON shape."""
        snapshot = {"version": EXPORT_VERSION, "exportDate": datetime.now().isoformat()}
        for key, (_, dump, _) in AGGREGATES.items():
            snapshot[key] = dump(self.load(key))
        return snapshot

    def import_all(self, snapshot) -> bool:
        """Write every field present in ``snapshot``.

        Returns False without writing anything when the version tag is
        missing or any present field is malformed.
        """
        if not isinstance(snapshot, dict) or not snapshot.get("version"):
            logger.warning("Rejected import: missing version tag")
            return False
        parsed = {}
        for key, (parse, _, _) in AGGREGATES.items():
            if key not in snapshot:
                continue
            try:
                parsed[key] = parse(snapshot[key])
            except ValueError as e:
                logger.warning("Rejected import: malformed %s: %s", key, e)
                return False
        for key, value in parsed.items():
            self.save(key, value)
        logger.info("Imported %d progress fields (version %s)", len(parsed), snapshot["version"])
        return True

    def clear_all(self) -> None:
        """Erase every stored aggregate."""
        conn = get_connection(self.db_path)
        conn.execute("DELETE FROM progress")
        conn.commit()
        conn.close()
