"""Progress summary, analytics dashboard and teacher email draft."""
import math
from urllib.parse import quote

from history_review.badges import STUDY_HOUR_MS
from history_review.mastery import (
    average_test_percent, category_breakdown, get_proficiency_label, get_proficiency_level,
    overall_proficiency, practice_accuracy_percent, result_topic_breakdown, topic_breakdown,
    vocab_mastery_percent,
)
from history_review.review import get_challenging_questions

EMAIL_TEACHER_THRESHOLD = 70
RECENT_BADGE_COUNT = 3


def format_study_time(ms: int) -> str:
    total_minutes = ms // 60_000
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}h {minutes}m" if hours > 0 else f"{minutes}m"


def streak_flames(current: int) -> str:
    if current >= 7:
        return "🔥🔥🔥"
    elif current >= 3:
        return "🔥🔥"
    return "🔥" if current > 0 else ""


def recent_badges(store, catalog, count: int = RECENT_BADGE_COUNT) -> list:
    """Most recently earned badges, newest first."""
    ids = store.load_earned_badges()[-count:]
    badges = (catalog.get_badge(b) for b in reversed(ids))
    return [b for b in badges if b is not None]


def get_progress_summary(store, catalog) -> dict:
    mastered = catalog.known_terms(store.load_vocab_progress())
    practice = store.load_practice_progress()
    tests = store.load_test_results()
    study_time = store.load_total_study_time()
    streak = store.load_study_streak()

    vocab_pct = vocab_mastery_percent(mastered, catalog.vocab_count)
    practice_pct = practice_accuracy_percent(practice)
    test_pct = average_test_percent(tests)
    overall = overall_proficiency(vocab_pct, practice_pct, test_pct)

    proficient = overall >= EMAIL_TEACHER_THRESHOLD
    studied_enough = study_time >= STUDY_HOUR_MS
    minutes_remaining = 0
    if proficient and not studied_enough:
        minutes_remaining = math.ceil((STUDY_HOUR_MS - study_time) / 60_000)

    return {
        "vocab_known": len(mastered),
        "vocab_total": catalog.vocab_count,
        "vocab_mastery": vocab_pct,
        "practice_correct": sum(1 for ok in practice.values() if ok),
        "practice_attempted": len(practice),
        "practice_accuracy": practice_pct,
        "tests_taken": len(tests),
        "test_average": test_pct,
        "overall": overall,
        "level": get_proficiency_level(overall),
        "label": get_proficiency_label(overall),
        "study_time_ms": study_time,
        "study_time": format_study_time(study_time),
        "streak_current": streak.current,
        "streak_longest": streak.longest,
        "badges_earned": len(store.load_earned_badges()),
        "badges_total": len(catalog.badges),
        "recent_badges": recent_badges(store, catalog),
        "can_email_teacher": proficient and studied_enough,
        "minutes_until_email": minutes_remaining,
    }


def get_weaknesses(store, catalog) -> dict:
    """Unlearned vocabulary and topics with wrong practice answers (most wrong first)."""
    known = store.load_vocab_progress()
    practice = store.load_practice_progress()
    topic_counts = {}
    for q in catalog.questions:
        if practice.get(q.id) is False:
            topic_counts[q.topic] = topic_counts.get(q.topic, 0) + 1
    return {
        "unknown_vocab": [v for v in catalog.vocabulary if v.term not in known],
        "wrong_topics": sorted(topic_counts.items(), key=lambda item: -item[1]),
    }


def get_strengths(store, catalog) -> dict:
    """Known vocabulary by category and the latest test's topic breakdown."""
    known = store.load_vocab_progress()
    tests = store.load_test_results()
    return {
        "categories": [c for c in category_breakdown(known, catalog) if c["known"] > 0],
        "last_test_topics": result_topic_breakdown(tests[-1]) if tests else [],
    }


def get_analytics(store, catalog) -> dict:
    summary = get_progress_summary(store, catalog)
    return {
        "summary": summary,
        "challenging_questions": get_challenging_questions(store.load_wrong_answer_count(), catalog),
        "categories": category_breakdown(store.load_vocab_progress(), catalog),
        "topics": topic_breakdown(store.load_practice_progress(), catalog),
        "test_history": store.load_test_results(),
        "timeline": store.load_timeline_progress(),
    }


def compose_teacher_email(summary: dict, student_name: str, feedback: str = "") -> tuple[str, str]:
    """Build the subject and body of a progress report for the teacher."""
    subject = f"Revolutionary War Study Progress - {student_name}"
    overall = round(summary["overall"])
    body = f"""Hello,

{student_name} has reached {overall}% proficiency on the Revolutionary War Study Tool!

PROGRESS SUMMARY:
Overall Proficiency: {overall}%
Vocabulary Mastery: {summary['vocab_known']}/{summary['vocab_total']} terms ({summary['vocab_mastery']}%)
Practice Accuracy: {summary['practice_correct']}/{summary['practice_attempted']} correct ({summary['practice_accuracy']}%)
Practice Tests Taken: {summary['tests_taken']} (Average score: {summary['test_average']}%)
Total Study Time: {summary['study_time']}
Current Study Streak: {summary['streak_current']} days
Longest Streak: {summary['streak_longest']} days
Badges Earned: {summary['badges_earned']}/{summary['badges_total']}

STUDENT FEEDBACK:
{feedback or 'No feedback provided.'}

Sent from Revolutionary War Study Tool"""
    return subject, body


def mailto_link(address: str, subject: str, body: str) -> str:
    return f"mailto:{address}?subject={quote(subject)}&body={quote(body)}"
