"""Service for the registered teachers and students."""

from __future__ import annotations

import re
from uuid import uuid4

from quizdesk.constants.quiz_constants import MAX_NAME_LENGTH
from quizdesk.core.errors import DuplicateEmailError, NotFoundError, QuizValidationError
from quizdesk.core.models import Role, User, utc_now

_EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")


class UserDirectory:
    """Keeps user profiles so results can be reported with names and emails."""

    def __init__(self) -> None:
        self._users: dict[str, User] = {}

    def register_user(self, name: str, email: str, role: Role, user_id: str | None = None) -> User:
        cleaned_name = self._validate_name(name)
        cleaned_email = self._validate_email(email)
        if self._email_owner(cleaned_email) is not None:
            raise DuplicateEmailError("Email is already in use")
        user = User(
            id=user_id or uuid4().hex,
            name=cleaned_name,
            email=cleaned_email,
            role=role,
        )
        if user.id in self._users:
            raise QuizValidationError(f"User id {user.id!r} is already registered.")
        self._users[user.id] = user
        return user

    def get_user(self, user_id: str) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def find_user(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def update_profile(self, user_id: str, name: str, email: str) -> User:
        user = self.get_user(user_id)
        cleaned_name = self._validate_name(name)
        cleaned_email = self._validate_email(email)
        owner = self._email_owner(cleaned_email)
        if owner is not None and owner.id != user_id:
            raise DuplicateEmailError("Email is already in use")
        user.name = cleaned_name
        user.email = cleaned_email
        user.updated_at = utc_now()
        return user

    def _email_owner(self, email: str) -> User | None:
        return next((u for u in self._users.values() if u.email == email), None)

    @staticmethod
    def _validate_name(name: str) -> str:
        cleaned = name.strip()
        if not cleaned:
            raise QuizValidationError("Please provide a name")
        if len(cleaned) > MAX_NAME_LENGTH:
            raise QuizValidationError(f"Name cannot be more than {MAX_NAME_LENGTH} characters")
        return cleaned

    @staticmethod
    def _validate_email(email: str) -> str:
        cleaned = email.strip().lower()
        if not _EMAIL_PATTERN.match(cleaned):
            raise QuizValidationError("Please provide a valid email address")
        return cleaned
