"""Application entry point for the QuizDesk service."""

from __future__ import annotations

from openai import OpenAI

from quizdesk.config import AppConfig
from quizdesk.core.question_generator import (
    OpenAIQuestionGenerator,
    QuestionGenerationService,
    SampleQuestionGenerator,
)
from quizdesk.core.quiz_manager import QuizManager
from quizdesk.server.api_server import start_api_server
from quizdesk.utils.logging_config import configure_logging


def build_question_service(config: AppConfig) -> QuestionGenerationService:
    """Construct the question generator from configuration, with an explicit client."""
    primary = None
    if config.has_openai_key:
        client = OpenAI(api_key=config.openai_api_key, timeout=config.openai_timeout_seconds)
        primary = OpenAIQuestionGenerator(client, model=config.openai_model)
    return QuestionGenerationService(primary, SampleQuestionGenerator(seed=config.sample_seed))


def main() -> None:
    """Initialize logging, wire the quiz manager, and serve the API until interrupted."""
    logger = configure_logging()
    config = AppConfig.from_env()
    logger.info("Starting QuizDesk…")

    question_service = build_question_service(config)
    if not question_service.has_model:
        logger.warning("OPENAI_API_KEY is not set; generated quizzes will use sample questions")

    quiz_manager = QuizManager(question_service=question_service)
    server_thread = start_api_server(quiz_manager=quiz_manager, host=config.host, port=config.port)
    logger.info("API available at http://%s:%d/", config.host, config.port)
    try:
        server_thread.join()
    except KeyboardInterrupt:
        logger.info("Shutting down QuizDesk")


if __name__ == "__main__":
    main()
