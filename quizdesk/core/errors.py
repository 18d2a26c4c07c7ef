"""Exceptions raised by the quiz core and translated to HTTP errors by the API."""

from __future__ import annotations


class QuizDeskError(Exception):
    """Base class for every error raised deliberately by the service."""


class QuizValidationError(QuizDeskError, ValueError):
    """Raised when a quiz, question, or user record breaks a model invariant."""


class QuestionParseError(QuizDeskError, ValueError):
    """Raised when a generated question payload has the wrong shape."""


class NotFoundError(QuizDeskError, LookupError):
    """Raised when a quiz, submission, or user does not exist."""


class PermissionDeniedError(QuizDeskError):
    """Raised when the caller's role or ownership forbids the operation."""


class DuplicateSubmissionError(QuizDeskError):
    """Raised when a student submits the same quiz a second time."""

    def __init__(self, quiz_id: str, student_id: str) -> None:
        super().__init__("You have already submitted this quiz")
        self.quiz_id = quiz_id
        self.student_id = student_id


class DuplicateEmailError(QuizDeskError):
    """Raised when an email address is already registered to another user."""
