"""Practice questions and full practice tests."""
import logging
import random
from datetime import datetime

from history_review.mastery import percent
from history_review.models import TestResult, TopicScore

logger = logging.getLogger(__name__)

NOTE_REVIEW_THRESHOLD = 2  # wrong answers before suggesting a notebook review
REVIEW_NOTE_SCORE = 70


def get_practice_set(catalog, count: int = 10, rng: random.Random | None = None) -> list:
    questions = list(catalog.questions)
    return (rng or random).sample(questions, min(count, len(questions)))


def _check_option(question, option_index: int) -> None:
    if not 0 <= option_index < len(question.options):
        raise ValueError(f"Question {question.id} has no option {option_index}")


def record_practice_answer(store, catalog, question_id: int, option_index: int) -> bool:
    """Record a practice attempt; returns whether it was correct.

    Only the latest result per question is kept; wrong answers also bump the
    question's wrong-answer counter.
    """
    question = catalog.get_question(question_id)
    _check_option(question, option_index)
    is_correct = option_index == question.correct

    progress = store.load_practice_progress()
    progress[question_id] = is_correct
    store.save_practice_progress(progress)

    if not is_correct:
        counts = store.load_wrong_answer_count()
        counts[question_id] = counts.get(question_id, 0) + 1
        store.save_wrong_answer_count(counts)
        if counts[question_id] >= NOTE_REVIEW_THRESHOLD:
            logger.info("Question %d missed %d times", question_id, counts[question_id])
    logger.info("Question %d: %s", question_id, "correct" if is_correct else "incorrect")
    return is_correct


def needs_note_review(store, question_id: int) -> bool:
    return store.load_wrong_answer_count().get(question_id, 0) >= NOTE_REVIEW_THRESHOLD


def grade_test(store, catalog, answers: dict, now: datetime | None = None) -> TestResult:
    """Grade a full practice test over the whole question bank and store the result.

    ``answers`` maps question id to the chosen option index; unanswered
    questions count as wrong.
    """
    correct = 0
    topic_scores = {}
    for q in catalog.questions:
        is_correct = answers.get(q.id) == q.correct
        scores = topic_scores.setdefault(q.topic, TopicScore())
        scores.total += 1
        if is_correct:
            correct += 1
            scores.correct += 1
    result = TestResult(
        score=percent(correct, len(catalog.questions)),
        date=(now or datetime.now()).isoformat(),
        topic_scores=topic_scores,
    )
    history = store.load_test_results()
    history.append(result)
    store.save_test_results(history)
    logger.info("Test completed: %d%% (%d/%d)", result.score, correct, len(catalog.questions))
    return result


def missed_questions(catalog, answers: dict) -> list:
    return [q for q in catalog.questions if answers.get(q.id) != q.correct]
