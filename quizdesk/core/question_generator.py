"""Question generation backed by a hosted language model with an offline fallback.

The OpenAI client is never created here. It is constructed once at startup
from configuration and handed to ``OpenAIQuestionGenerator`` so that tests
and alternative deployments can substitute their own client.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import random

from openai import OpenAI, OpenAIError

from quizdesk.constants.ai_constants import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_OPENAI_MODEL,
    DEFAULT_TEMPERATURE,
    FALLBACK_QUESTIONS_WARNING,
    SAMPLE_QUESTIONS_WARNING,
    SYSTEM_PROMPT,
    USER_PROMPT_TEMPLATE,
)
from quizdesk.constants.quiz_constants import (
    GENERATOR_SAMPLE_SNIPPET_CHARS,
    GENERATOR_SAMPLE_SNIPPET_WORDS,
    GENERATOR_SOURCE_TEXT_LIMIT,
)
from quizdesk.core.errors import QuestionParseError
from quizdesk.core.models import QuizOption, QuizQuestion
from quizdesk.core.question_parser import parse_generated_questions

logger = logging.getLogger(__name__)

_SAMPLE_OPTION_LETTERS = ("A", "B", "C", "D")


@dataclass(slots=True)
class GenerationResult:
    """Questions produced for one request and how they were obtained."""

    questions: list[QuizQuestion]
    used_fallback: bool = False
    warning: str | None = None


class OpenAIQuestionGenerator:
    """Asks a chat-completion model for questions and validates the reply."""

    def __init__(
        self,
        client: OpenAI,
        model: str = DEFAULT_OPENAI_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    def generate(self, text: str, num_questions: int) -> list[QuizQuestion]:
        completion = self._client.chat.completions.create(
            model=self._model,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(text, num_questions)},
            ],
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        if not completion.choices:
            raise QuestionParseError("Empty response from question generator.")
        return parse_generated_questions(completion.choices[0].message.content or "")


class SampleQuestionGenerator:
    """Builds placeholder questions from snippets of the source text.

    Output depends only on the seed and the inputs, so the same text always
    yields the same sample quiz.
    """

    def __init__(self, seed: int | None = 0) -> None:
        self._seed = seed

    def generate(self, text: str, num_questions: int) -> list[QuizQuestion]:
        rng = random.Random(self._seed)
        questions: list[QuizQuestion] = []
        for index in range(num_questions):
            snippet = _pick_snippet(text, rng)
            number = index + 1
            questions.append(
                QuizQuestion(
                    question_text=f'Question {number} about: "{snippet}..."?',
                    options=[
                        QuizOption(
                            text=f"Answer option {letter} for question {number}",
                            is_correct=index % len(_SAMPLE_OPTION_LETTERS) == position,
                        )
                        for position, letter in enumerate(_SAMPLE_OPTION_LETTERS)
                    ],
                )
            )
        return questions


class QuestionGenerationService:
    """Uses the model when one is configured and falls back to sample questions."""

    def __init__(
        self,
        primary: OpenAIQuestionGenerator | None,
        fallback: SampleQuestionGenerator | None = None,
    ) -> None:
        self._primary = primary
        self._fallback = fallback or SampleQuestionGenerator()

    @property
    def has_model(self) -> bool:
        return self._primary is not None

    def generate(self, text: str, num_questions: int) -> GenerationResult:
        if self._primary is None:
            logger.warning("OpenAI API key not configured, using fallback sample questions")
            return GenerationResult(
                questions=self._fallback.generate(text, num_questions),
                used_fallback=True,
                warning=SAMPLE_QUESTIONS_WARNING,
            )
        try:
            questions = self._primary.generate(text, num_questions)
        except (OpenAIError, QuestionParseError) as exc:
            logger.error("AI question generation failed: %s", exc)
            return GenerationResult(
                questions=self._fallback.generate(text, num_questions),
                used_fallback=True,
                warning=FALLBACK_QUESTIONS_WARNING,
            )
        logger.info("Generated %d questions with AI", len(questions))
        return GenerationResult(questions=questions)


def build_prompt(text: str, num_questions: int) -> str:
    return USER_PROMPT_TEMPLATE.format(
        num_questions=num_questions,
        source_text=text[:GENERATOR_SOURCE_TEXT_LIMIT],
    )


def _pick_snippet(text: str, rng: random.Random) -> str:
    start = rng.randrange(max(len(text) - GENERATOR_SAMPLE_SNIPPET_CHARS, 1))
    window = text[start:start + GENERATOR_SAMPLE_SNIPPET_CHARS]
    return " ".join(window.split(" ")[:GENERATOR_SAMPLE_SNIPPET_WORDS]).strip()
