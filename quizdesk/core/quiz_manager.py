"""Business logic for quizzes, submissions and results shared by the API layer."""

from __future__ import annotations

from collections.abc import Iterable
import logging
from threading import Lock
from uuid import uuid4

from quizdesk.core.errors import (
    NotFoundError,
    PermissionDeniedError,
    QuizValidationError,
)
from quizdesk.core.models import (
    Answer,
    Principal,
    Quiz,
    QuizQuestion,
    Role,
    Submission,
    User,
)
from quizdesk.core.question_generator import GenerationResult, QuestionGenerationService
from quizdesk.core.results_exporter import ResultRow, export_results_csv, results_file_name
from quizdesk.core.scoring import score_answers
from quizdesk.core.services.quiz_repository import QuizRepository
from quizdesk.core.services.statistics import QuizStats, aggregate
from quizdesk.core.services.submission_ledger import SubmissionLedger
from quizdesk.core.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)


class QuizManager:
    """Facade for quiz services: UserDirectory, QuizRepository, SubmissionLedger and statistics."""

    def __init__(self, question_service: QuestionGenerationService | None = None) -> None:
        self._lock = Lock()

        # Services
        self._users = UserDirectory()
        self._repository = QuizRepository()
        self._ledger = SubmissionLedger()
        self._question_service = question_service or QuestionGenerationService(primary=None)

    # --- Users ---

    def register_user(self, name: str, email: str, role: Role, user_id: str | None = None) -> User:
        with self._lock:
            user = self._users.register_user(name, email, role, user_id=user_id)
        logger.info("Registered %s %s", user.role.value, user.id)
        return user

    def resolve_principal(self, user_id: str, role: Role) -> Principal:
        """Match the identity asserted by the auth layer against a registered user."""
        with self._lock:
            user = self._users.find_user(user_id)
        if user is None or user.role is not role:
            raise NotFoundError("Unknown user")
        return Principal(user_id=user.id, role=user.role)

    def get_user(self, user_id: str) -> User:
        with self._lock:
            return self._users.get_user(user_id)

    def find_user(self, user_id: str) -> User | None:
        with self._lock:
            return self._users.find_user(user_id)

    def update_profile(self, principal: Principal, name: str, email: str) -> User:
        with self._lock:
            return self._users.update_profile(principal.user_id, name, email)

    # --- Quizzes ---

    def create_quiz(
        self,
        principal: Principal,
        title: str,
        description: str,
        questions: list[QuizQuestion],
        pdf_url: str | None = None,
    ) -> Quiz:
        _require_role(principal, Role.TEACHER, "Only teachers can create quizzes")
        with self._lock:
            quiz = self._repository.add_quiz(
                title, description, questions, created_by=principal.user_id, pdf_url=pdf_url
            )
        logger.info("Quiz %s created by %s with %d questions", quiz.id, principal.user_id, quiz.total_questions)
        return quiz

    def list_quizzes(self, principal: Principal) -> list[Quiz]:
        """Teachers see the quizzes they created; students see every quiz."""
        with self._lock:
            if principal.is_teacher:
                return self._repository.list_quizzes(created_by=principal.user_id)
            return self._repository.list_quizzes()

    def get_quiz(self, principal: Principal, quiz_id: str) -> Quiz:
        with self._lock:
            quiz = self._repository.get_quiz(quiz_id)
        if principal.is_teacher:
            _require_owner(principal, quiz, "You do not have permission to view this quiz")
        return quiz

    def update_quiz(
        self,
        principal: Principal,
        quiz_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
        questions: list[QuizQuestion] | None = None,
        pdf_url: str | None = None,
    ) -> Quiz:
        _require_role(principal, Role.TEACHER, "Only teachers can update quizzes")
        with self._lock:
            quiz = self._repository.get_quiz(quiz_id)
            _require_owner(principal, quiz, "You do not have permission to update this quiz")
            return self._repository.update_quiz(
                quiz_id,
                title=title,
                description=description,
                questions=questions,
                pdf_url=pdf_url,
            )

    def delete_quiz(self, principal: Principal, quiz_id: str) -> int:
        """Delete a quiz and every submission to it; returns the number of submissions removed."""
        _require_role(principal, Role.TEACHER, "Only teachers can delete quizzes")
        with self._lock:
            quiz = self._repository.get_quiz(quiz_id)
            _require_owner(principal, quiz, "You do not have permission to delete this quiz")
            self._repository.delete_quiz(quiz_id)
            removed = self._ledger.delete_for_quiz(quiz_id)
        logger.info("Quiz %s deleted along with %d submissions", quiz_id, removed)
        return removed

    # --- Submissions ---

    def submit_quiz(self, principal: Principal, quiz_id: str, answers: Iterable[Answer]) -> Submission:
        _require_role(principal, Role.STUDENT, "Only students can submit quizzes")
        with self._lock:
            quiz = self._repository.get_quiz(quiz_id)
            scored_answers, score = score_answers(quiz, answers)
            submission = self._ledger.record(
                Submission(
                    id=uuid4().hex,
                    quiz_id=quiz.id,
                    student_id=principal.user_id,
                    answers=tuple(scored_answers),
                    score=score,
                    total_questions=quiz.total_questions,
                )
            )
        logger.info(
            "Submission %s for quiz %s scored %d/%d",
            submission.id,
            quiz_id,
            submission.score,
            submission.total_questions,
        )
        return submission

    def list_submissions(
        self,
        principal: Principal,
        quiz_id: str | None = None,
        student_id: str | None = None,
    ) -> list[Submission]:
        with self._lock:
            if principal.is_student:
                quiz_ids = None if quiz_id is None else {quiz_id}
                return self._ledger.find_submissions(quiz_ids=quiz_ids, student_id=principal.user_id)
            if quiz_id is not None:
                quiz = self._repository.get_quiz(quiz_id)
                _require_owner(
                    principal, quiz, "You do not have permission to view submissions for this quiz"
                )
                return self._ledger.find_submissions(quiz_ids={quiz_id})
            owned = self._repository.quiz_ids_created_by(principal.user_id)
            return self._ledger.find_submissions(quiz_ids=owned, student_id=student_id)

    def get_submission(self, principal: Principal, submission_id: str) -> Submission:
        with self._lock:
            submission = self._ledger.get_submission(submission_id)
            if principal.is_student:
                if submission.student_id != principal.user_id:
                    raise PermissionDeniedError("You do not have permission to view this submission")
            else:
                quiz = self._repository.get_quiz(submission.quiz_id)
                _require_owner(principal, quiz, "You do not have permission to view this submission")
            return submission

    def get_latest_submission(self, principal: Principal, quiz_id: str) -> Submission | None:
        _require_role(principal, Role.STUDENT, "Only students have quiz results")
        with self._lock:
            return self._ledger.latest_submission(quiz_id, principal.user_id)

    # --- Statistics & Export ---

    def get_quiz_statistics(self, principal: Principal, quiz_id: str) -> QuizStats:
        with self._lock:
            quiz, submissions = self._owned_quiz_with_submissions(principal, quiz_id)
        return aggregate(quiz, submissions)

    def export_quiz_results(self, principal: Principal, quiz_id: str) -> tuple[str, str]:
        """Return the download file name and CSV text for a quiz's results."""
        with self._lock:
            quiz, submissions = self._owned_quiz_with_submissions(principal, quiz_id)
            rows = [self._result_row(submission) for submission in submissions]
        return results_file_name(quiz.title), export_results_csv(rows)

    # --- Question Generation ---

    def generate_questions(
        self,
        principal: Principal,
        text: str,
        num_questions: int,
        title: str | None = None,
        description: str | None = None,
        save: bool = False,
    ) -> tuple[GenerationResult, Quiz | None]:
        _require_role(principal, Role.TEACHER, "Only teachers can generate questions")
        result = self._question_service.generate(text, num_questions)
        if not (save and title):
            return result, None
        try:
            quiz = self.create_quiz(principal, title, description or "", result.questions)
        except QuizValidationError as exc:
            # The generated questions are still returned when they cannot be stored.
            logger.error("Failed to save generated quiz: %s", exc)
            return result, None
        return result, quiz

    # --- Internal helpers ---

    def _owned_quiz_with_submissions(self, principal: Principal, quiz_id: str) -> tuple[Quiz, list[Submission]]:
        _require_role(principal, Role.TEACHER, "Only teachers can view quiz results")
        quiz = self._repository.get_quiz(quiz_id)
        _require_owner(principal, quiz, "You do not have permission to view results for this quiz")
        return quiz, self._ledger.find_submissions(quiz_ids={quiz_id})

    def _result_row(self, submission: Submission) -> ResultRow:
        student = self._users.find_user(submission.student_id)
        return ResultRow(
            student_name=student.name if student else "",
            email=student.email if student else "",
            submitted_at=submission.submitted_at,
            score=submission.score,
            total_questions=submission.total_questions,
        )


def _require_role(principal: Principal, role: Role, message: str) -> None:
    if principal.role is not role:
        raise PermissionDeniedError(message)


def _require_owner(principal: Principal, quiz: Quiz, message: str) -> None:
    if quiz.created_by != principal.user_id:
        raise PermissionDeniedError(message)
