"""Answer scoring and percentage helpers.

Scoring is deliberately lenient: an answer that points at a question or
option that does not exist is graded as incorrect instead of being rejected.
Students may also leave questions unanswered; those are simply absent from
the scored answers and the submission still counts every question of the
quiz in its total.
"""

from __future__ import annotations

from collections.abc import Iterable

from quizdesk.core.models import Answer, Quiz, ScoredAnswer


def score_answers(quiz: Quiz, answers: Iterable[Answer]) -> tuple[list[ScoredAnswer], int]:
    """Grade ``answers`` against ``quiz`` and return the scored answers and the score."""
    scored: list[ScoredAnswer] = []
    score = 0
    for answer in answers:
        is_correct = is_answer_correct(quiz, answer)
        if is_correct:
            score += 1
        scored.append(
            ScoredAnswer(
                question_index=answer.question_index,
                selected_option_index=answer.selected_option_index,
                is_correct=is_correct,
            )
        )
    return scored, score


def is_answer_correct(quiz: Quiz, answer: Answer) -> bool:
    questions = quiz.questions
    if not 0 <= answer.question_index < len(questions):
        return False
    options = questions[answer.question_index].options
    if not 0 <= answer.selected_option_index < len(options):
        return False
    return options[answer.selected_option_index].is_correct


def round_half_up(numerator: int, denominator: int) -> int:
    """Round ``numerator / denominator`` to the nearest integer, halves away from zero.

    Works on integers only so that 12.5 always becomes 13 regardless of
    floating point representation. Returns 0 when ``denominator`` is 0.
    """
    if denominator == 0:
        return 0
    sign = -1 if (numerator < 0) != (denominator < 0) else 1
    numerator, denominator = abs(numerator), abs(denominator)
    return sign * ((2 * numerator + denominator) // (2 * denominator))


def percentage(score: int, total_questions: int) -> int:
    """Percentage score of a submission, 0 for a quiz without questions."""
    return round_half_up(score * 100, total_questions)
