"""FastAPI server that exposes the teacher and student endpoints."""

from __future__ import annotations

from threading import Thread
from urllib.parse import quote

from fastapi import Depends, FastAPI, Header, HTTPException, Response
from pydantic import BaseModel, Field
import uvicorn

from quizdesk.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION
from quizdesk.constants.network_constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    USER_ID_HEADER,
    USER_ROLE_HEADER,
)
from quizdesk.constants.quiz_constants import (
    DEFAULT_GENERATED_QUESTION_COUNT,
    MAX_GENERATED_QUESTION_COUNT,
)
from quizdesk.core.errors import (
    DuplicateEmailError,
    DuplicateSubmissionError,
    NotFoundError,
    PermissionDeniedError,
    QuizDeskError,
    QuizValidationError,
)
from quizdesk.core.markdown_math_renderer import MarkdownMathRenderer
from quizdesk.core.models import (
    Answer,
    Principal,
    Quiz,
    QuizOption,
    QuizQuestion,
    Role,
    Submission,
    User,
)
from quizdesk.core.quiz_manager import QuizManager
from quizdesk.core.services.statistics import QuizStats


class OptionPayload(BaseModel):
    """Payload schema for one answer option."""

    text: str
    is_correct: bool = False


class QuestionPayload(BaseModel):
    """Payload schema for one multiple-choice question."""

    question: str
    options: list[OptionPayload]


class QuizPayload(BaseModel):
    """Payload schema for creating a quiz."""

    title: str
    description: str
    questions: list[QuestionPayload]
    pdf_url: str | None = None


class QuizUpdatePayload(BaseModel):
    """Payload schema for updating a quiz; omitted fields are left unchanged."""

    title: str | None = None
    description: str | None = None
    questions: list[QuestionPayload] | None = None
    pdf_url: str | None = None


class AnswerPayload(BaseModel):
    """Payload schema for a single submitted answer."""

    question_index: int
    selected_option_index: int


class SubmissionPayload(BaseModel):
    """Payload schema for a quiz attempt."""

    quiz_id: str
    answers: list[AnswerPayload]


class GenerateQuestionsPayload(BaseModel):
    """Payload schema for generating questions from extracted document text."""

    text: str = Field(min_length=1)
    num_questions: int = Field(
        default=DEFAULT_GENERATED_QUESTION_COUNT, ge=1, le=MAX_GENERATED_QUESTION_COUNT
    )
    title: str | None = None
    description: str | None = None
    save_to_db: bool = False


class RegisterPayload(BaseModel):
    """Payload schema for registering the caller's profile."""

    name: str
    email: str


class ProfilePayload(BaseModel):
    """Payload schema for profile updates."""

    name: str
    email: str


def _http_error(exc: QuizDeskError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, PermissionDeniedError):
        return HTTPException(status_code=403, detail=str(exc))
    if isinstance(exc, (DuplicateSubmissionError, DuplicateEmailError)):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, QuizValidationError):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def _get_identity_dependency():
    """Read the identity asserted by the auth proxy, registered or not."""

    def dependency(
        x_user_id: str | None = Header(default=None, alias=USER_ID_HEADER),
        x_user_role: str | None = Header(default=None, alias=USER_ROLE_HEADER),
    ) -> tuple[str, Role]:
        user_id = (x_user_id or "").strip()
        if not user_id or not x_user_role:
            raise HTTPException(status_code=401, detail="Unauthorized")
        try:
            role = Role(x_user_role.strip().lower())
        except ValueError as exc:
            raise HTTPException(status_code=401, detail="Unauthorized") from exc
        return user_id, role

    return dependency


def _get_principal_dependency(quiz_manager: QuizManager, identity_dep):
    def dependency(identity: tuple[str, Role] = Depends(identity_dep)) -> Principal:
        user_id, role = identity
        try:
            return quiz_manager.resolve_principal(user_id, role)
        except NotFoundError as exc:
            raise HTTPException(status_code=401, detail="Unauthorized") from exc

    return dependency


def _to_questions(payloads: list[QuestionPayload]) -> list[QuizQuestion]:
    return [
        QuizQuestion(
            question_text=payload.question,
            options=[QuizOption(text=o.text, is_correct=o.is_correct) for o in payload.options],
        )
        for payload in payloads
    ]


def _user_payload(user: User) -> dict[str, object]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
        "created_at": user.created_at.isoformat(),
        "updated_at": user.updated_at.isoformat(),
    }


def _quiz_payload(
    quiz: Quiz,
    renderer: MarkdownMathRenderer,
    include_answers: bool,
) -> dict[str, object]:
    questions = []
    for question in quiz.questions:
        options = []
        for option in question.options:
            entry: dict[str, object] = {
                "text": option.text,
                "text_html": renderer.render_fragment(option.text),
            }
            if include_answers:
                entry["is_correct"] = option.is_correct
            options.append(entry)
        questions.append(
            {
                "question": question.question_text,
                "question_html": renderer.render_fragment(question.question_text),
                "options": options,
            }
        )
    return {
        "id": quiz.id,
        "title": quiz.title,
        "description": quiz.description,
        "questions": questions,
        "created_by": quiz.created_by,
        "pdf_url": quiz.pdf_url,
        "created_at": quiz.created_at.isoformat(),
        "updated_at": quiz.updated_at.isoformat(),
    }


def _submission_payload(submission: Submission, student: User | None) -> dict[str, object]:
    return {
        "id": submission.id,
        "quiz_id": submission.quiz_id,
        "student": {
            "id": submission.student_id,
            "name": student.name if student else None,
            "email": student.email if student else None,
        },
        "answers": [
            {
                "question_index": answer.question_index,
                "selected_option_index": answer.selected_option_index,
                "is_correct": answer.is_correct,
            }
            for answer in submission.answers
        ],
        "score": submission.score,
        "total_questions": submission.total_questions,
        "submitted_at": submission.submitted_at.isoformat(),
    }


def _stats_payload(stats: QuizStats) -> dict[str, object]:
    return {
        "total_submissions": stats.total_submissions,
        "average_score": stats.average_score,
        "highest_score": stats.highest_score,
        "lowest_score": stats.lowest_score,
        "question_stats": [
            {
                "question_index": stat.question_index,
                "correct_count": stat.correct_count,
                "incorrect_count": stat.incorrect_count,
                "correct_percentage": stat.correct_percentage,
            }
            for stat in stats.question_stats
        ],
    }


def create_api_app(quiz_manager: QuizManager) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    app = FastAPI(title=f"{APP_NAME} API", description=APP_ABOUT_TEXT, version=APP_VERSION)
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)
    identity_dep = _get_identity_dependency()
    principal_dep = _get_principal_dependency(quiz_manager, identity_dep)
    renderer = MarkdownMathRenderer()

    def submission_view(manager: QuizManager, submission: Submission) -> dict[str, object]:
        return _submission_payload(submission, manager.find_user(submission.student_id))

    # --- Users ---

    @app.post("/users", status_code=201)
    def register_user(
        payload: RegisterPayload,
        identity: tuple[str, Role] = Depends(identity_dep),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        user_id, role = identity
        try:
            user = manager.register_user(payload.name, payload.email, role, user_id=user_id)
        except QuizDeskError as exc:
            raise _http_error(exc) from exc
        return _user_payload(user)

    @app.get("/users/me")
    def get_profile(
        principal: Principal = Depends(principal_dep),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            return _user_payload(manager.get_user(principal.user_id))
        except QuizDeskError as exc:
            raise _http_error(exc) from exc

    @app.put("/users/me")
    def update_profile(
        payload: ProfilePayload,
        principal: Principal = Depends(principal_dep),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            return _user_payload(manager.update_profile(principal, payload.name, payload.email))
        except QuizDeskError as exc:
            raise _http_error(exc) from exc

    # --- Quizzes ---

    @app.get("/quizzes")
    def list_quizzes(
        principal: Principal = Depends(principal_dep),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> list[dict[str, object]]:
        return [
            _quiz_payload(quiz, renderer, include_answers=principal.is_teacher)
            for quiz in manager.list_quizzes(principal)
        ]

    @app.post("/quizzes", status_code=201)
    def create_quiz(
        payload: QuizPayload,
        principal: Principal = Depends(principal_dep),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            quiz = manager.create_quiz(
                principal,
                payload.title,
                payload.description,
                _to_questions(payload.questions),
                pdf_url=payload.pdf_url,
            )
        except QuizDeskError as exc:
            raise _http_error(exc) from exc
        return _quiz_payload(quiz, renderer, include_answers=True)

    @app.get("/quizzes/{quiz_id}")
    def get_quiz(
        quiz_id: str,
        principal: Principal = Depends(principal_dep),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            quiz = manager.get_quiz(principal, quiz_id)
        except QuizDeskError as exc:
            raise _http_error(exc) from exc
        return _quiz_payload(quiz, renderer, include_answers=principal.is_teacher)

    @app.put("/quizzes/{quiz_id}")
    def update_quiz(
        quiz_id: str,
        payload: QuizUpdatePayload,
        principal: Principal = Depends(principal_dep),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        questions = None if payload.questions is None else _to_questions(payload.questions)
        try:
            quiz = manager.update_quiz(
                principal,
                quiz_id,
                title=payload.title,
                description=payload.description,
                questions=questions,
                pdf_url=payload.pdf_url,
            )
        except QuizDeskError as exc:
            raise _http_error(exc) from exc
        return _quiz_payload(quiz, renderer, include_answers=True)

    @app.delete("/quizzes/{quiz_id}")
    def delete_quiz(
        quiz_id: str,
        principal: Principal = Depends(principal_dep),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            removed = manager.delete_quiz(principal, quiz_id)
        except QuizDeskError as exc:
            raise _http_error(exc) from exc
        return {"message": "Quiz deleted successfully", "deleted_submissions": removed}

    @app.get("/quizzes/{quiz_id}/stats")
    def get_quiz_statistics(
        quiz_id: str,
        principal: Principal = Depends(principal_dep),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            stats = manager.get_quiz_statistics(principal, quiz_id)
        except QuizDeskError as exc:
            raise _http_error(exc) from exc
        return _stats_payload(stats)

    @app.get("/quizzes/{quiz_id}/results.csv")
    def export_quiz_results(
        quiz_id: str,
        principal: Principal = Depends(principal_dep),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> Response:
        try:
            file_name, document = manager.export_quiz_results(principal, quiz_id)
        except QuizDeskError as exc:
            raise _http_error(exc) from exc
        return Response(
            content=document,
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(file_name)}"},
        )

    @app.get("/quizzes/{quiz_id}/my-submission")
    def get_my_submission(
        quiz_id: str,
        principal: Principal = Depends(principal_dep),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            submission = manager.get_latest_submission(principal, quiz_id)
        except QuizDeskError as exc:
            raise _http_error(exc) from exc
        if submission is None:
            raise HTTPException(status_code=404, detail="Submission not found")
        return submission_view(manager, submission)

    # --- Submissions ---

    @app.post("/submissions", status_code=201)
    def submit_quiz(
        payload: SubmissionPayload,
        principal: Principal = Depends(principal_dep),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        answers = [
            Answer(question_index=a.question_index, selected_option_index=a.selected_option_index)
            for a in payload.answers
        ]
        try:
            submission = manager.submit_quiz(principal, payload.quiz_id, answers)
        except QuizDeskError as exc:
            raise _http_error(exc) from exc
        return submission_view(manager, submission)

    @app.get("/submissions")
    def list_submissions(
        quiz_id: str | None = None,
        student_id: str | None = None,
        principal: Principal = Depends(principal_dep),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> list[dict[str, object]]:
        try:
            submissions = manager.list_submissions(principal, quiz_id=quiz_id, student_id=student_id)
        except QuizDeskError as exc:
            raise _http_error(exc) from exc
        return [submission_view(manager, submission) for submission in submissions]

    @app.get("/submissions/{submission_id}")
    def get_submission(
        submission_id: str,
        principal: Principal = Depends(principal_dep),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            submission = manager.get_submission(principal, submission_id)
        except QuizDeskError as exc:
            raise _http_error(exc) from exc
        return submission_view(manager, submission)

    # --- Question Generation ---

    @app.post("/generate-questions")
    def generate_questions(
        payload: GenerateQuestionsPayload,
        principal: Principal = Depends(principal_dep),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        try:
            result, quiz = manager.generate_questions(
                principal,
                payload.text,
                payload.num_questions,
                title=payload.title,
                description=payload.description,
                save=payload.save_to_db,
            )
        except QuizDeskError as exc:
            raise _http_error(exc) from exc
        body: dict[str, object] = {
            "success": True,
            "questions": [
                {
                    "question": question.question_text,
                    "options": [
                        {"text": option.text, "is_correct": option.is_correct}
                        for option in question.options
                    ],
                }
                for question in result.questions
            ],
        }
        if result.warning:
            body["warning"] = result.warning
        if quiz is not None:
            body["quiz"] = _quiz_payload(quiz, renderer, include_answers=True)
        return body

    return app


def start_api_server(
    quiz_manager: QuizManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(quiz_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="QuizApiServer", daemon=True)
    thread.start()
    return thread
