"""Mastery percentages, proficiency tiers and category/topic breakdowns."""
import math

VOCAB_WEIGHT = 0.4
PRACTICE_WEIGHT = 0.4
TEST_WEIGHT = 0.2


def percent(part: int, whole: int) -> int:
    """Whole-number percentage, rounded half up. Zero when ``whole`` is zero."""
    if not whole:
        return 0
    return math.floor(part * 100 / whole + 0.5)


def get_proficiency_level(score: float) -> str:
    if score >= 90:
        return "expert"
    elif score >= 70:
        return "proficient"
    elif score >= 40:
        return "learning"
    return "beginner"


def get_proficiency_label(score: float) -> str:
    return get_proficiency_level(score).capitalize()


def mastery_class(pct: float) -> str:
    if pct >= 80:
        return "high"
    elif pct >= 60:
        return "medium"
    return "low"


def vocab_mastery_percent(mastered, total_vocab_count: int) -> int:
    return percent(len(mastered), total_vocab_count)


def practice_accuracy_percent(practice_progress: dict) -> int:
    """Accuracy over attempted questions only; unattempted ones don't count."""
    correct = sum(1 for ok in practice_progress.values() if ok)
    return percent(correct, len(practice_progress))


def average_test_percent(test_history: list) -> int:
    if not test_history:
        return 0
    return percent(sum(r.score for r in test_history), 100 * len(test_history))


def overall_proficiency(vocab_pct: float, practice_pct: float, test_pct: float) -> float:
    return vocab_pct * VOCAB_WEIGHT + practice_pct * PRACTICE_WEIGHT + test_pct * TEST_WEIGHT


def category_breakdown(mastered, catalog) -> list[dict]:
    results = []
    for category in catalog.categories:
        terms = [v.term for v in catalog.vocabulary if v.category == category]
        known = sum(1 for t in terms if t in mastered)
        pct = percent(known, len(terms))
        results.append({
            "category": category,
            "known": known,
            "total": len(terms),
            "percent": pct,
            "class": mastery_class(pct),
        })
    return results


def _topic_rows(scores: dict) -> list[dict]:
    rows = []
    for topic, (correct, total) in scores.items():
        pct = percent(correct, total)
        rows.append({
            "topic": topic,
            "correct": correct,
            "total": total,
            "percent": pct,
            "class": mastery_class(pct),
        })
    return rows


def topic_breakdown(practice_progress: dict, catalog) -> list[dict]:
    """Practice accuracy per question topic, counting attempted questions only."""
    scores = {topic: [0, 0] for topic in catalog.topics}
    for q in catalog.questions:
        if q.id in practice_progress:
            scores[q.topic][1] += 1
            if practice_progress[q.id]:
                scores[q.topic][0] += 1
    return _topic_rows(scores)


def result_topic_breakdown(result) -> list[dict]:
    """Per-topic rows for a single graded test."""
    return _topic_rows({t: (s.correct, s.total) for t, s in result.topic_scores.items()})
