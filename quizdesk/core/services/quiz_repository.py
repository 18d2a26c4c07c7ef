"""Service for storing quizzes and enforcing their authoring invariants."""

from __future__ import annotations

from dataclasses import replace
from uuid import uuid4

from quizdesk.constants.quiz_constants import (
    MAX_OPTIONS_PER_QUESTION,
    MAX_TITLE_LENGTH,
    MIN_OPTIONS_PER_QUESTION,
)
from quizdesk.core.errors import NotFoundError, QuizValidationError
from quizdesk.core.models import Quiz, QuizOption, QuizQuestion, utc_now


class QuizRepository:
    """Manages the lifecycle and storage of quizzes."""

    def __init__(self) -> None:
        self._quizzes: dict[str, Quiz] = {}

    def add_quiz(
        self,
        title: str,
        description: str,
        questions: list[QuizQuestion],
        created_by: str,
        pdf_url: str | None = None,
    ) -> Quiz:
        quiz = Quiz(
            id=uuid4().hex,
            title=self._validate_title(title),
            description=self._validate_description(description),
            questions=self._prepare_questions(questions),
            created_by=created_by,
            pdf_url=pdf_url or None,
        )
        self._quizzes[quiz.id] = quiz
        return quiz

    def get_quiz(self, quiz_id: str) -> Quiz:
        quiz = self._quizzes.get(quiz_id)
        if quiz is None:
            raise NotFoundError("Quiz not found")
        return quiz

    def list_quizzes(self, created_by: str | None = None) -> list[Quiz]:
        quizzes = [
            quiz
            for quiz in self._quizzes.values()
            if created_by is None or quiz.created_by == created_by
        ]
        return sorted(quizzes, key=lambda q: q.created_at)

    def quiz_ids_created_by(self, created_by: str) -> set[str]:
        return {quiz.id for quiz in self._quizzes.values() if quiz.created_by == created_by}

    def update_quiz(
        self,
        quiz_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
        questions: list[QuizQuestion] | None = None,
        pdf_url: str | None = None,
    ) -> Quiz:
        current = self.get_quiz(quiz_id)
        updated = replace(
            current,
            title=current.title if title is None else self._validate_title(title),
            description=(
                current.description if description is None else self._validate_description(description)
            ),
            questions=current.questions if questions is None else self._prepare_questions(questions),
            pdf_url=current.pdf_url if pdf_url is None else (pdf_url or None),
            updated_at=utc_now(),
        )
        self._quizzes[quiz_id] = updated
        return updated

    def delete_quiz(self, quiz_id: str) -> Quiz:
        quiz = self.get_quiz(quiz_id)
        del self._quizzes[quiz_id]
        return quiz

    def _prepare_questions(self, questions: list[QuizQuestion]) -> list[QuizQuestion]:
        if not questions:
            raise QuizValidationError("Quiz must have at least 1 question")
        return [self._prepare_question(question) for question in questions]

    def _prepare_question(self, question: QuizQuestion) -> QuizQuestion:
        """Validate and normalize a question before storage."""
        cleaned_text = question.question_text.strip()
        if not cleaned_text:
            raise QuizValidationError("Please provide a question")
        options = self._validate_options(question.options)
        return QuizQuestion(question_text=cleaned_text, options=options)

    @staticmethod
    def _validate_options(options: list[QuizOption]) -> list[QuizOption]:
        if not MIN_OPTIONS_PER_QUESTION <= len(options) <= MAX_OPTIONS_PER_QUESTION:
            raise QuizValidationError(
                f"Question must have between {MIN_OPTIONS_PER_QUESTION} and "
                f"{MAX_OPTIONS_PER_QUESTION} options."
            )
        cleaned = [QuizOption(text=option.text.strip(), is_correct=option.is_correct) for option in options]
        if any(not option.text for option in cleaned):
            raise QuizValidationError("Please provide option text")
        if not any(option.is_correct for option in cleaned):
            raise QuizValidationError("Question must have at least 2 options and 1 correct answer")
        return cleaned

    @staticmethod
    def _validate_title(title: str) -> str:
        cleaned = title.strip()
        if not cleaned:
            raise QuizValidationError("Please provide a title")
        if len(cleaned) > MAX_TITLE_LENGTH:
            raise QuizValidationError(f"Title cannot be more than {MAX_TITLE_LENGTH} characters")
        return cleaned

    @staticmethod
    def _validate_description(description: str) -> str:
        cleaned = description.strip()
        if not cleaned:
            raise QuizValidationError("Please provide a description")
        return cleaned
