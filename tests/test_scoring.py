"""
Tests for answer scoring and percentage rounding.
"""

from quizdesk.core.models import Answer
from quizdesk.core.scoring import percentage, round_half_up, score_answers


class TestScoreAnswers:
    """Grading submitted answers against a quiz."""

    def test_all_correct_answers_score_every_question(self, sample_quiz):
        """Answering every question correctly scores the question count."""
        answers = [Answer(question_index=i, selected_option_index=i) for i in range(4)]

        scored, score = score_answers(sample_quiz, answers)

        assert score == 4
        assert all(answer.is_correct for answer in scored)

    def test_wrong_answer_is_marked_incorrect(self, sample_quiz):
        scored, score = score_answers(sample_quiz, [Answer(question_index=0, selected_option_index=1)])

        assert score == 0
        assert scored[0].is_correct is False

    def test_option_index_past_end_is_incorrect(self, sample_quiz):
        """An option index beyond the option list is graded wrong without raising."""
        scored, score = score_answers(sample_quiz, [Answer(question_index=0, selected_option_index=9)])

        assert score == 0
        assert scored[0].is_correct is False

    def test_question_index_past_end_is_incorrect(self, sample_quiz):
        scored, score = score_answers(sample_quiz, [Answer(question_index=42, selected_option_index=0)])

        assert score == 0
        assert scored[0].is_correct is False

    def test_negative_indexes_are_incorrect(self, sample_quiz):
        """Negative indexes never wrap around to the last question or option."""
        answers = [
            Answer(question_index=-1, selected_option_index=3),
            Answer(question_index=3, selected_option_index=-1),
        ]

        scored, score = score_answers(sample_quiz, answers)

        assert score == 0
        assert [answer.is_correct for answer in scored] == [False, False]

    def test_scored_answers_keep_submission_order_and_indexes(self, sample_quiz):
        answers = [
            Answer(question_index=2, selected_option_index=2),
            Answer(question_index=0, selected_option_index=3),
        ]

        scored, _ = score_answers(sample_quiz, answers)

        assert [(a.question_index, a.selected_option_index) for a in scored] == [(2, 2), (0, 3)]
        assert [a.is_correct for a in scored] == [True, False]

    def test_scoring_is_repeatable_and_leaves_quiz_untouched(self, sample_quiz):
        """Scoring the same answers twice gives the same result and no side effects."""
        snapshot = [
            [(option.text, option.is_correct) for option in question.options]
            for question in sample_quiz.questions
        ]
        answers = [Answer(question_index=1, selected_option_index=1)]

        first = score_answers(sample_quiz, answers)
        second = score_answers(sample_quiz, answers)

        assert first == second
        assert snapshot == [
            [(option.text, option.is_correct) for option in question.options]
            for question in sample_quiz.questions
        ]

    def test_no_answers_scores_zero(self, sample_quiz):
        assert score_answers(sample_quiz, []) == ([], 0)


class TestPercentage:
    """Integer percentage with halves rounded up."""

    def test_three_of_four_is_75(self):
        assert percentage(3, 4) == 75

    def test_half_rounds_up(self):
        """1/8 is 12.5% which rounds to 13, not to the even 12."""
        assert percentage(1, 8) == 13
        assert percentage(5, 8) == 63

    def test_one_third_rounds_down(self):
        assert percentage(1, 3) == 33

    def test_zero_questions_is_zero(self):
        assert percentage(0, 0) == 0

    def test_round_half_up_with_zero_denominator(self):
        assert round_half_up(7, 0) == 0

    def test_round_half_up_on_exact_values(self):
        assert round_half_up(150, 3) == 50
        assert round_half_up(5, 2) == 3
