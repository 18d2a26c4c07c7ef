"""
Tests for strict validation of generated question payloads.
"""

import json

import pytest

from quizdesk.core.errors import QuestionParseError
from quizdesk.core.question_parser import parse_generated_questions


def _option(text, is_correct=False):
    return {"text": text, "isCorrect": is_correct}


def _payload(*questions):
    return {"questions": list(questions)}


def _question(text="What is 2 + 2?", options=None):
    if options is None:
        options = [_option("3"), _option("4", True), _option("5"), _option("22")]
    return {"question": text, "options": options}


class TestValidPayloads:
    """Well-formed payloads become quiz questions."""

    def test_json_text_is_parsed(self):
        questions = parse_generated_questions(json.dumps(_payload(_question())))

        assert len(questions) == 1
        assert questions[0].question_text == "What is 2 + 2?"
        assert [o.text for o in questions[0].options] == ["3", "4", "5", "22"]
        assert questions[0].correct_option_indexes == [1]

    def test_decoded_mapping_is_parsed(self):
        questions = parse_generated_questions(_payload(_question(), _question("Capital of France?")))

        assert [q.question_text for q in questions] == ["What is 2 + 2?", "Capital of France?"]

    def test_whitespace_is_stripped(self):
        payload = _payload(_question("  Spaced?  ", [_option(" yes ", True), _option("no ")]))

        question = parse_generated_questions(payload)[0]

        assert question.question_text == "Spaced?"
        assert [o.text for o in question.options] == ["yes", "no"]

    def test_extra_keys_are_ignored(self):
        payload = _payload(dict(_question(), explanation="because"))

        assert len(parse_generated_questions(payload)) == 1


class TestMalformedPayloads:
    """Anything that does not match the question shape is rejected."""

    @pytest.mark.parametrize("raw", ["", "   ", "not json", "[]", '{"items": []}'])
    def test_unusable_text(self, raw):
        with pytest.raises(QuestionParseError):
            parse_generated_questions(raw)

    def test_empty_question_list(self):
        with pytest.raises(QuestionParseError):
            parse_generated_questions(_payload())

    def test_single_option_question(self):
        with pytest.raises(QuestionParseError):
            parse_generated_questions(_payload(_question(options=[_option("only", True)])))

    def test_seven_option_question(self):
        options = [_option(str(i), i == 0) for i in range(7)]

        with pytest.raises(QuestionParseError):
            parse_generated_questions(_payload(_question(options=options)))

    def test_no_correct_option(self):
        with pytest.raises(QuestionParseError, match="exactly one correct option"):
            parse_generated_questions(_payload(_question(options=[_option("a"), _option("b")])))

    def test_two_correct_options(self):
        options = [_option("a", True), _option("b", True), _option("c")]

        with pytest.raises(QuestionParseError, match="found 2"):
            parse_generated_questions(_payload(_question(options=options)))

    def test_correct_flag_must_be_boolean(self):
        """String flags such as "true" are not coerced."""
        options = [{"text": "a", "isCorrect": "true"}, _option("b")]

        with pytest.raises(QuestionParseError):
            parse_generated_questions(json.dumps(_payload(_question(options=options))))

    def test_blank_question_text(self):
        with pytest.raises(QuestionParseError):
            parse_generated_questions(_payload(_question(text="   ")))

    def test_missing_option_text(self):
        options = [{"isCorrect": True}, _option("b")]

        with pytest.raises(QuestionParseError):
            parse_generated_questions(_payload(_question(options=options)))

    def test_options_not_a_list(self):
        with pytest.raises(QuestionParseError):
            parse_generated_questions(_payload({"question": "Q?", "options": "a, b, c"}))
