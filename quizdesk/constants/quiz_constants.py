"""Quiz-related constants shared across the core and API layers."""

MIN_OPTIONS_PER_QUESTION: int = 2
MAX_OPTIONS_PER_QUESTION: int = 6
MAX_TITLE_LENGTH: int = 100
MAX_NAME_LENGTH: int = 60

RESULTS_CSV_HEADER: tuple[str, ...] = (
    "Student Name",
    "Email",
    "Submission Date",
    "Score",
    "Percentage",
)
RESULTS_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"
RESULTS_FILE_SUFFIX: str = "_results.csv"

DEFAULT_GENERATED_QUESTION_COUNT: int = 5
MAX_GENERATED_QUESTION_COUNT: int = 50
GENERATOR_SOURCE_TEXT_LIMIT: int = 4000
GENERATOR_SAMPLE_SNIPPET_CHARS: int = 100
GENERATOR_SAMPLE_SNIPPET_WORDS: int = 10
