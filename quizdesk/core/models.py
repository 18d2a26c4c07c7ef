"""Domain models for the quiz service."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    """Role supplied by the identity provider for every request."""

    TEACHER = "teacher"
    STUDENT = "student"


@dataclass(slots=True)
class QuizOption:
    """One selectable answer of a multiple-choice question."""

    text: str
    is_correct: bool = False


@dataclass(slots=True)
class QuizQuestion:
    """Multiple-choice question with between two and six options."""

    question_text: str
    options: list[QuizOption]

    @property
    def correct_option_indexes(self) -> list[int]:
        return [index for index, option in enumerate(self.options) if option.is_correct]


@dataclass(slots=True)
class Quiz:
    """Ordered set of questions authored by a teacher."""

    id: str
    title: str
    description: str
    questions: list[QuizQuestion]
    created_by: str
    pdf_url: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def total_questions(self) -> int:
        return len(self.questions)


@dataclass(slots=True, frozen=True)
class Answer:
    """Option a student picked for one question."""

    question_index: int
    selected_option_index: int


@dataclass(slots=True, frozen=True)
class ScoredAnswer:
    """Submitted answer annotated with its computed correctness."""

    question_index: int
    selected_option_index: int
    is_correct: bool


@dataclass(slots=True, frozen=True)
class Submission:
    """One student's single graded attempt at a quiz. Never modified once stored."""

    id: str
    quiz_id: str
    student_id: str
    answers: tuple[ScoredAnswer, ...]
    score: int
    total_questions: int
    submitted_at: datetime = field(default_factory=utc_now)


@dataclass(slots=True)
class User:
    """Registered teacher or student. Credentials live with the identity provider."""

    id: str
    name: str
    email: str
    role: Role
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)


@dataclass(slots=True, frozen=True)
class Principal:
    """Authenticated caller of a request."""

    user_id: str
    role: Role

    @property
    def is_teacher(self) -> bool:
        return self.role is Role.TEACHER

    @property
    def is_student(self) -> bool:
        return self.role is Role.STUDENT
