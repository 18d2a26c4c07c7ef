"""
Tests for per-quiz statistics aggregation.
"""

from quizdesk.core.models import ScoredAnswer, Submission
from quizdesk.core.services.statistics import aggregate


def _submission(submission_id, score, total_questions, answers=()):
    return Submission(
        id=submission_id,
        quiz_id="quiz-1",
        student_id=f"student-{submission_id}",
        answers=tuple(answers),
        score=score,
        total_questions=total_questions,
    )


class TestScoreAggregates:
    """Average, highest and lowest percentages."""

    def test_no_submissions_reports_zeros(self, sample_quiz):
        """Lowest score is reported as 0 rather than its internal seed of 100."""
        stats = aggregate(sample_quiz, [])

        assert stats.total_submissions == 0
        assert stats.average_score == 0
        assert stats.highest_score == 0
        assert stats.lowest_score == 0
        assert len(stats.question_stats) == len(sample_quiz.questions)
        assert all(s.correct_count == 0 and s.incorrect_count == 0 for s in stats.question_stats)
        assert all(s.correct_percentage == 0 for s in stats.question_stats)

    def test_full_half_and_zero_percentages(self, sample_quiz):
        submissions = [_submission("a", 4, 4), _submission("b", 2, 4), _submission("c", 0, 4)]

        stats = aggregate(sample_quiz, submissions)

        assert stats.total_submissions == 3
        assert stats.average_score == 50
        assert stats.highest_score == 100
        assert stats.lowest_score == 0

    def test_single_submission_sets_both_extremes(self, sample_quiz):
        stats = aggregate(sample_quiz, [_submission("a", 2, 4)])

        assert stats.highest_score == 50
        assert stats.lowest_score == 50

    def test_average_rounds_half_up(self, sample_quiz):
        """Percentages 50 and 75 average to 62.5, reported as 63."""
        stats = aggregate(sample_quiz, [_submission("a", 2, 4), _submission("b", 3, 4)])

        assert stats.average_score == 63

    def test_submission_without_questions_counts_as_zero_percent(self, sample_quiz):
        stats = aggregate(sample_quiz, [_submission("a", 0, 0), _submission("b", 4, 4)])

        assert stats.lowest_score == 0
        assert stats.average_score == 50

    def test_result_does_not_depend_on_submission_order(self, sample_quiz):
        submissions = [
            _submission("a", 1, 4, [ScoredAnswer(0, 0, True)]),
            _submission("b", 3, 4, [ScoredAnswer(0, 1, False), ScoredAnswer(1, 1, True)]),
            _submission("c", 2, 4, [ScoredAnswer(2, 2, True)]),
        ]

        assert aggregate(sample_quiz, submissions) == aggregate(sample_quiz, list(reversed(submissions)))


class TestQuestionStats:
    """Per-question correct and incorrect tallies."""

    def test_answers_are_bucketed_by_question_index(self, sample_quiz):
        submissions = [
            _submission("a", 2, 4, [ScoredAnswer(0, 0, True), ScoredAnswer(1, 1, True)]),
            _submission("b", 0, 4, [ScoredAnswer(0, 2, False), ScoredAnswer(1, 0, False)]),
            _submission("c", 1, 4, [ScoredAnswer(0, 0, True)]),
        ]

        stats = aggregate(sample_quiz, submissions).question_stats

        assert [(s.correct_count, s.incorrect_count) for s in stats] == [(2, 1), (1, 1), (0, 0), (0, 0)]
        assert stats[0].correct_percentage == 67
        assert stats[1].correct_percentage == 50
        assert stats[2].correct_percentage == 0

    def test_answers_outside_the_quiz_are_ignored(self, sample_quiz):
        submissions = [
            _submission("a", 0, 4, [ScoredAnswer(7, 0, False), ScoredAnswer(-1, 0, False)]),
        ]

        stats = aggregate(sample_quiz, submissions).question_stats

        assert all(s.total_responses == 0 for s in stats)

    def test_question_indexes_follow_quiz_order(self, sample_quiz):
        stats = aggregate(sample_quiz, []).question_stats

        assert [s.question_index for s in stats] == [0, 1, 2, 3]
