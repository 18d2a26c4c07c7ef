"""Defaults for the hosted question-generation model."""

DEFAULT_OPENAI_MODEL: str = "gpt-3.5-turbo-1106"
DEFAULT_TEMPERATURE: float = 0.7
DEFAULT_MAX_TOKENS: int = 2000
DEFAULT_REQUEST_TIMEOUT_SECONDS: float = 60.0

SYSTEM_PROMPT: str = (
    "You are a helpful assistant that generates quiz questions based on educational content."
)

USER_PROMPT_TEMPLATE: str = """Generate {num_questions} multiple-choice questions based on the following text.
Format your response as a valid JSON object with a "questions" array where each question has:
1. "question": The question text
2. "options": An array of 4 options, each with "text" and "isCorrect" (boolean) properties

Make sure:
- Only one option should be correct per question
- Questions should test understanding of key concepts
- Options should be plausible but clearly different
- Questions should be diverse and cover different concepts from the text

Text to base questions on:
{source_text}
"""

SAMPLE_QUESTIONS_WARNING: str = "Using sample questions (OpenAI API key not configured)"
FALLBACK_QUESTIONS_WARNING: str = "Using sample questions (AI question generation failed)"
