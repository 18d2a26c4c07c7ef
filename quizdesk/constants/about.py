"""Static metadata describing QuizDesk."""

APP_NAME = "QuizDesk"
APP_VERSION = "0.1"
APP_ABOUT_TEXT = (
    "QuizDesk is a classroom quiz service built with FastAPI. Teachers turn course "
    "material into multiple-choice quizzes, students take them once, and the "
    "service scores every submission and reports per-quiz statistics."
)
