"""Load the read-only curriculum content: vocabulary, questions, timeline, badges."""
import json
from dataclasses import dataclass
from pathlib import Path

from history_review.models import (
    Badge, BadgeKind, Question, ShortAnswerPrompt, TimelineEvent, VocabularyTerm,
)

CONTENT_DIR = Path(__file__).parent / "content"


@dataclass(frozen=True)
class ContentCatalog:
    vocabulary: tuple = ()
    questions: tuple = ()
    timeline_events: tuple = ()
    badges: tuple = ()
    short_answers: tuple = ()

    @property
    def vocab_count(self) -> int:
        return len(self.vocabulary)

    @property
    def terms(self) -> list[str]:
        return [v.term for v in self.vocabulary]

    def known_terms(self, mastered) -> set[str]:
        """Members of ``mastered`` that are terms in this catalog."""
        return set(mastered) & set(self.terms)

    @property
    def categories(self) -> list[str]:
        """Vocabulary categories in first-appearance order."""
        return list(dict.fromkeys(v.category for v in self.vocabulary))

    @property
    def topics(self) -> list[str]:
        """Question topics in first-appearance order."""
        return list(dict.fromkeys(q.topic for q in self.questions))

    def get_question(self, question_id: int) -> Question:
        """Return the question with ``question_id``; raise KeyError if absent."""
        for q in self.questions:
            if q.id == question_id:
                return q
        raise KeyError(question_id)

    def get_term(self, term: str) -> VocabularyTerm | None:
        return next((v for v in self.vocabulary if v.term == term), None)

    def get_badge(self, badge_id: str) -> Badge | None:
        return next((b for b in self.badges if b.id == badge_id), None)


def _read(content_dir: Path, name: str) -> dict:
    return json.loads((content_dir / name).read_text(encoding="utf-8"))


def load_vocabulary(content_dir: Path = CONTENT_DIR) -> tuple:
    data = _read(content_dir, "vocabulary.json")
    return tuple(
        VocabularyTerm(
            term=v["term"], definition=v["definition"],
            example=v.get("example", ""), category=v.get("category", ""),
        )
        for v in data["vocabulary"]
    )


def load_questions(content_dir: Path = CONTENT_DIR) -> tuple:
    data = _read(content_dir, "questions.json")
    questions = []
    for q in data["questions"]:
        options = tuple(q["options"])
        if not 0 <= q["correct"] < len(options):
            raise ValueError(f"Question {q['id']} has no option {q['correct']}")
        questions.append(Question(
            id=q["id"], stem=q["stem"], options=options, correct=q["correct"],
            explanation=q.get("explanation", ""), topic=q.get("topic", ""),
        ))
    return tuple(questions)


def load_timeline_events(content_dir: Path = CONTENT_DIR) -> tuple:
    data = _read(content_dir, "timeline.json")
    events = tuple(
        TimelineEvent(id=e["id"], title=e["title"], year=e["year"], description=e.get("description", ""))
        for e in data["events"]
    )
    return tuple(sorted(events, key=lambda e: e.id))


def load_badges(content_dir: Path = CONTENT_DIR) -> tuple:
    """Badge definitions. An id outside BadgeKind raises ValueError."""
    data = _read(content_dir, "badges.json")
    return tuple(
        Badge(kind=BadgeKind(b["id"]), name=b["name"], icon=b.get("icon", ""), description=b.get("description", ""))
        for b in data["badges"]
    )


def load_short_answers(content_dir: Path = CONTENT_DIR) -> tuple:
    data = _read(content_dir, "short_answers.json")
    return tuple(
        ShortAnswerPrompt(
            id=p["id"], prompt=p["prompt"], topic=p.get("topic", ""),
            rubric=tuple(p.get("rubric", [])), exemplar=p.get("exemplar", ""),
            sentence_starters=tuple(p.get("sentence_starters", [])),
        )
        for p in data["prompts"]
    )


def load_catalog(content_dir: Path = CONTENT_DIR) -> ContentCatalog:
    """Load every content file into a single catalog."""
    return ContentCatalog(
        vocabulary=load_vocabulary(content_dir),
        questions=load_questions(content_dir),
        timeline_events=load_timeline_events(content_dir),
        badges=load_badges(content_dir),
        short_answers=load_short_answers(content_dir),
    )
