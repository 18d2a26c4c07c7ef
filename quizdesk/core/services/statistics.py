"""Service for aggregating submission scores into per-quiz statistics."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from quizdesk.core.models import Quiz, Submission
from quizdesk.core.scoring import percentage, round_half_up


@dataclass(slots=True)
class QuestionTally:
    """Mutable per-question counter used internally."""

    question_index: int
    correct_count: int = 0
    incorrect_count: int = 0


@dataclass(slots=True, frozen=True)
class QuestionStat:
    """Immutable per-question snapshot returned to consumers."""

    question_index: int
    correct_count: int
    incorrect_count: int

    @property
    def total_responses(self) -> int:
        return self.correct_count + self.incorrect_count

    @property
    def correct_percentage(self) -> int:
        return percentage(self.correct_count, self.total_responses)


@dataclass(slots=True, frozen=True)
class QuizStats:
    """Aggregate results of every submission to one quiz."""

    total_submissions: int
    average_score: int
    highest_score: int
    lowest_score: int
    question_stats: list[QuestionStat]


def aggregate(quiz: Quiz, submissions: Iterable[Submission]) -> QuizStats:
    """Compute score statistics and per-question correct rates for ``quiz``.

    Answers that reference a question index outside the quiz are not counted
    in any question's tally.
    """
    tallies = [QuestionTally(question_index=index) for index in range(len(quiz.questions))]
    total_submissions = 0
    percentage_sum = 0
    highest_score = 0
    lowest_score = 100

    for submission in submissions:
        total_submissions += 1
        submission_percentage = percentage(submission.score, submission.total_questions)
        percentage_sum += submission_percentage
        highest_score = max(highest_score, submission_percentage)
        lowest_score = min(lowest_score, submission_percentage)

        for answer in submission.answers:
            if not 0 <= answer.question_index < len(tallies):
                continue
            tally = tallies[answer.question_index]
            if answer.is_correct:
                tally.correct_count += 1
            else:
                tally.incorrect_count += 1

    return QuizStats(
        total_submissions=total_submissions,
        average_score=round_half_up(percentage_sum, total_submissions),
        highest_score=highest_score,
        lowest_score=lowest_score if total_submissions else 0,
        question_stats=[
            QuestionStat(
                question_index=tally.question_index,
                correct_count=tally.correct_count,
                incorrect_count=tally.incorrect_count,
            )
            for tally in tallies
        ],
    )
