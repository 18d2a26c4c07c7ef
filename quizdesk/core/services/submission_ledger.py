"""Service for storing graded submissions, at most one per quiz and student."""

from __future__ import annotations

from collections.abc import Collection
from threading import Lock

from quizdesk.core.errors import DuplicateSubmissionError, NotFoundError
from quizdesk.core.models import Submission


class SubmissionLedger:
    """Append-only store of submissions keyed uniquely by (quiz_id, student_id).

    ``record`` checks the key and inserts under one lock, so two concurrent
    attempts for the same pair can never both be stored.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._submissions: dict[str, Submission] = {}
        self._by_quiz_and_student: dict[tuple[str, str], str] = {}

    def record(self, submission: Submission) -> Submission:
        key = (submission.quiz_id, submission.student_id)
        with self._lock:
            if key in self._by_quiz_and_student:
                raise DuplicateSubmissionError(*key)
            self._by_quiz_and_student[key] = submission.id
            self._submissions[submission.id] = submission
        return submission

    def get_submission(self, submission_id: str) -> Submission:
        with self._lock:
            submission = self._submissions.get(submission_id)
        if submission is None:
            raise NotFoundError("Submission not found")
        return submission

    def find_submissions(
        self,
        quiz_ids: Collection[str] | None = None,
        student_id: str | None = None,
    ) -> list[Submission]:
        """Return matching submissions in the order they were recorded."""
        with self._lock:
            return [
                submission
                for submission in self._submissions.values()
                if (quiz_ids is None or submission.quiz_id in quiz_ids)
                and (student_id is None or submission.student_id == student_id)
            ]

    def latest_submission(self, quiz_id: str, student_id: str) -> Submission | None:
        matches = self.find_submissions(quiz_ids={quiz_id}, student_id=student_id)
        if not matches:
            return None
        return sorted(matches, key=lambda s: s.submitted_at, reverse=True)[0]

    def delete_for_quiz(self, quiz_id: str) -> int:
        with self._lock:
            doomed = [sid for sid, s in self._submissions.items() if s.quiz_id == quiz_id]
            for submission_id in doomed:
                submission = self._submissions.pop(submission_id)
                self._by_quiz_and_student.pop((submission.quiz_id, submission.student_id), None)
            return len(doomed)
