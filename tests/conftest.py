import pytest
from fastapi.testclient import TestClient

from quizdesk.core.models import Quiz, QuizOption, QuizQuestion, Role
from quizdesk.core.quiz_manager import QuizManager
from quizdesk.server.api_server import create_api_app


def _question(text, correct_index, option_count=4):
    return QuizQuestion(
        question_text=text,
        options=[
            QuizOption(text=f"{text} option {index}", is_correct=index == correct_index)
            for index in range(option_count)
        ],
    )


@pytest.fixture
def make_questions():
    """Build ``len(correct_indexes)`` questions with the given correct options."""

    def factory(correct_indexes, option_count=4):
        return [
            _question(f"Question {number}", correct_index, option_count)
            for number, correct_index in enumerate(correct_indexes, start=1)
        ]

    return factory


@pytest.fixture
def sample_quiz(make_questions):
    return Quiz(
        id="quiz-1",
        title="Cell Biology",
        description="Chapter 3 review",
        questions=make_questions([0, 1, 2, 3]),
        created_by="teacher-1",
    )


@pytest.fixture
def manager():
    return QuizManager()


@pytest.fixture
def teacher(manager):
    user = manager.register_user("Tina Teacher", "tina@school.edu", Role.TEACHER, user_id="teacher-1")
    return manager.resolve_principal(user.id, Role.TEACHER)


@pytest.fixture
def other_teacher(manager):
    user = manager.register_user("Omar Other", "omar@school.edu", Role.TEACHER, user_id="teacher-2")
    return manager.resolve_principal(user.id, Role.TEACHER)


@pytest.fixture
def student(manager):
    user = manager.register_user("Sam Student", "sam@school.edu", Role.STUDENT, user_id="student-1")
    return manager.resolve_principal(user.id, Role.STUDENT)


@pytest.fixture
def second_student(manager):
    user = manager.register_user("Ada Lovelace", "ada@school.edu", Role.STUDENT, user_id="student-2")
    return manager.resolve_principal(user.id, Role.STUDENT)


@pytest.fixture
def stored_quiz(manager, teacher, make_questions):
    return manager.create_quiz(teacher, "Cell Biology", "Chapter 3 review", make_questions([0, 1, 2, 3]))


@pytest.fixture
def client(manager):
    return TestClient(create_api_app(manager))
