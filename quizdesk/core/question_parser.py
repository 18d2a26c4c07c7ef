"""Strict parsing of generated question payloads.

Payload format (JSON object, as requested from the language model):

    {
      "questions": [
        {
          "question": "What does the mitochondrion produce?",
          "options": [
            {"text": "ATP", "isCorrect": true},
            {"text": "DNA", "isCorrect": false}
          ]
        }
      ]
    }

Every question needs non-empty text, between two and six options with
non-empty text, and exactly one option flagged as correct. Anything else is
rejected before it can reach a stored quiz or the scorer.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from quizdesk.constants.quiz_constants import MAX_OPTIONS_PER_QUESTION, MIN_OPTIONS_PER_QUESTION
from quizdesk.core.errors import QuestionParseError
from quizdesk.core.models import QuizOption, QuizQuestion


class _GeneratedOption(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    text: str = Field(min_length=1, strict=True)
    is_correct: bool = Field(alias="isCorrect", strict=True)


class _GeneratedQuestion(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    question: str = Field(min_length=1, strict=True)
    options: list[_GeneratedOption] = Field(
        min_length=MIN_OPTIONS_PER_QUESTION,
        max_length=MAX_OPTIONS_PER_QUESTION,
    )


class _GeneratedQuestionSet(BaseModel):
    questions: list[_GeneratedQuestion] = Field(min_length=1)


def parse_generated_questions(payload: str | bytes | Mapping[str, Any]) -> list[QuizQuestion]:
    """Validate a raw model response (JSON text or decoded mapping) into questions."""
    if isinstance(payload, (str, bytes)) and not payload.strip():
        raise QuestionParseError("Empty response from question generator.")
    try:
        if isinstance(payload, (str, bytes)):
            parsed = _GeneratedQuestionSet.model_validate_json(payload)
        else:
            parsed = _GeneratedQuestionSet.model_validate(payload)
    except ValidationError as exc:
        raise QuestionParseError(f"Malformed question payload: {_summarize(exc)}") from exc

    questions: list[QuizQuestion] = []
    for position, item in enumerate(parsed.questions, start=1):
        correct_count = sum(1 for option in item.options if option.is_correct)
        if correct_count != 1:
            raise QuestionParseError(
                f"Question {position} must have exactly one correct option, found {correct_count}."
            )
        questions.append(
            QuizQuestion(
                question_text=item.question,
                options=[
                    QuizOption(text=option.text, is_correct=option.is_correct)
                    for option in item.options
                ],
            )
        )
    return questions


def _summarize(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "payload"
    return f"{location}: {first.get('msg', 'invalid value')}"
