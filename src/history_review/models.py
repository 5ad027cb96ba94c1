"""Data classes for curriculum content and persisted progress.

Progress records convert to and from the JSON shapes kept in storage.
``from_dict`` raises ``ValueError`` when the data has the wrong shape, so the
store can fall back to a default instead of handing back half-parsed data.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class BadgeKind(str, Enum):
    FIRST_STUDY = "first_study"
    VOCAB_5 = "vocab_5"
    VOCAB_ALL = "vocab_all"
    STREAK_3 = "streak_3"
    STREAK_7 = "streak_7"
    PRACTICE_10 = "practice_10"
    TEST_PASS = "test_pass"
    PERFECT_TEST = "perfect_test"
    STUDY_HOUR = "study_hour"
    TIMELINE_MASTER = "timeline_master"


@dataclass(frozen=True)
class VocabularyTerm:
    term: str
    definition: str
    example: str = ""
    category: str = ""


@dataclass(frozen=True)
class Question:
    id: int
    stem: str
    options: tuple
    correct: int
    explanation: str = ""
    topic: str = ""


@dataclass(frozen=True)
class TimelineEvent:
    id: int  # also its 1-based chronological position
    title: str
    year: str
    description: str = ""


@dataclass(frozen=True)
class Badge:
    kind: BadgeKind
    name: str
    icon: str = ""
    description: str = ""

    @property
    def id(self) -> str:
        return self.kind.value


@dataclass(frozen=True)
class ShortAnswerPrompt:
    id: int
    prompt: str
    topic: str = ""
    rubric: tuple = ()
    exemplar: str = ""
    sentence_starters: tuple = ()


def require_int(value, name: str, minimum: int = 0, maximum: Optional[int] = None) -> int:
    """Return ``value`` if it is an int within bounds, else raise ValueError."""
    # bool is an int subclass but never a valid counter
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < minimum or (maximum is not None and value > maximum):
        raise ValueError(f"{name} out of range: {value}")
    return value


def require_dict(value, name: str) -> dict:
    if not isinstance(value, dict):
        raise ValueError(f"{name} must be an object, got {type(value).__name__}")
    return value


@dataclass
class TopicScore:
    correct: int = 0
    total: int = 0

    def to_dict(self) -> dict:
        return {"correct": self.correct, "total": self.total}

    @classmethod
    def from_dict(cls, data) -> "TopicScore":
        data = require_dict(data, "topic score")
        correct = require_int(data.get("correct"), "correct")
        total = require_int(data.get("total"), "total")
        if correct > total:
            raise ValueError(f"topic score has {correct} correct of {total}")
        return cls(correct=correct, total=total)


@dataclass
class TestResult:
    score: int
    date: str
    topic_scores: dict = field(default_factory=dict)  # topic -> TopicScore

    __test__ = False  # not a pytest test class

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "date": self.date,
            "topicScores": {t: s.to_dict() for t, s in self.topic_scores.items()},
        }

    @classmethod
    def from_dict(cls, data) -> "TestResult":
        data = require_dict(data, "test result")
        score = require_int(data.get("score"), "score", maximum=100)
        date = data.get("date")
        if not isinstance(date, str):
            raise ValueError(f"test result date must be a string, got {date!r}")
        raw_topics = require_dict(data.get("topicScores", {}), "topicScores")
        topics = {str(t): TopicScore.from_dict(s) for t, s in raw_topics.items()}
        return cls(score=score, date=date, topic_scores=topics)


@dataclass
class TimelineProgress:
    best_score: int = 0
    perfect_count: int = 0
    attempts: int = 0

    def to_dict(self) -> dict:
        return {
            "bestScore": self.best_score,
            "perfectCount": self.perfect_count,
            "attempts": self.attempts,
        }

    @classmethod
    def from_dict(cls, data) -> "TimelineProgress":
        data = require_dict(data, "timeline progress")
        return cls(
            best_score=require_int(data.get("bestScore"), "bestScore", maximum=10),
            perfect_count=require_int(data.get("perfectCount"), "perfectCount"),
            attempts=require_int(data.get("attempts"), "attempts"),
        )


STUDY_DATE_FORMATS = ("%Y-%m-%d", "%a %b %d %Y")


def normalize_study_date(value: str) -> str:
    """Return ``value`` as an ISO date if it is in a known format, else unchanged.

    Older exports wrote dates like ``"Fri Oct 16 2026"``.
    """
    for fmt in STUDY_DATE_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt).date().isoformat()
        except ValueError:
            continue
    return value


@dataclass
class StudyStreak:
    current: int = 0
    longest: int = 0
    last_study_date: Optional[str] = None  # ISO date in local time

    def to_dict(self) -> dict:
        return {
            "current": self.current,
            "longest": self.longest,
            "lastStudyDate": self.last_study_date,
        }

    @classmethod
    def from_dict(cls, data) -> "StudyStreak":
        data = require_dict(data, "study streak")
        current = require_int(data.get("current"), "current")
        longest = require_int(data.get("longest"), "longest")
        last = data.get("lastStudyDate")
        if last is not None and not isinstance(last, str):
            raise ValueError(f"lastStudyDate must be a string or null, got {last!r}")
        if last is not None:
            last = normalize_study_date(last)
        return cls(current=current, longest=max(longest, current), last_study_date=last)
