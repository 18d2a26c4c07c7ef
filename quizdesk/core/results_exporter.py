"""Utilities for exporting quiz results as CSV text."""

from __future__ import annotations

from collections.abc import Iterable
import csv
from dataclasses import dataclass
from datetime import datetime
import io
import re

from quizdesk.constants.quiz_constants import (
    RESULTS_CSV_HEADER,
    RESULTS_DATE_FORMAT,
    RESULTS_FILE_SUFFIX,
)
from quizdesk.core.scoring import percentage

_WHITESPACE_RUN = re.compile(r"\s+")


@dataclass(slots=True, frozen=True)
class ResultRow:
    """A submission resolved with the name and email of its student."""

    student_name: str
    email: str
    submitted_at: datetime
    score: int
    total_questions: int


def export_results_csv(rows: Iterable[ResultRow]) -> str:
    """Serialize ``rows`` into a CSV document with a header line.

    Values are quoted only when they contain a delimiter, a quote, or a line
    break, so ordinary names and emails appear exactly as entered.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(RESULTS_CSV_HEADER)
    for row in rows:
        writer.writerow(_serialize_row(row))
    return buffer.getvalue()


def results_file_name(quiz_title: str) -> str:
    """Download name for a quiz's results, e.g. ``Unit_3_Quiz_results.csv``."""
    return _WHITESPACE_RUN.sub("_", quiz_title) + RESULTS_FILE_SUFFIX


def _serialize_row(row: ResultRow) -> list[str]:
    return [
        row.student_name,
        row.email,
        row.submitted_at.strftime(RESULTS_DATE_FORMAT),
        f"{row.score}/{row.total_questions}",
        f"{percentage(row.score, row.total_questions)}%",
    ]
