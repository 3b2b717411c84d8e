import json

import pytest

from assessment.quiz import generate_quiz, parse_quiz_content, validate_questions
from errors import (
    ConfigurationError, ExternalServiceError, InputValidationError, QuizValidationError, RateLimitError,
    ResponseParseError,
)
from conftest import JOB, RESUME, make_questions


def test_generate_quiz_returns_five_questions(llm):
    llm.reply_json(make_questions())

    questions = generate_quiz(RESUME, JOB)

    assert len(questions) == 5
    assert questions[0].correct_answer == 0
    assert questions[0].wrong_explanations == ["B is wrong", "C is wrong", "D is wrong"]
    body = llm.calls[0]["json"]
    assert body["temperature"] == 0.7
    assert body["max_tokens"] == 2500
    assert body["messages"][0]["role"] == "user"
    assert JOB in llm.prompt()
    assert "exactly 5 questions" in llm.prompt()
    assert llm.calls[0]["headers"]["Authorization"] == "Bearer test-key"
    assert llm.calls[0]["timeout"] > 0


def test_generate_quiz_extracts_array_from_prose(llm):
    llm.reply("Here is your quiz:\n" + json.dumps(make_questions()) + "\nGood luck!")

    assert len(generate_quiz(RESUME, JOB)) == 5


@pytest.mark.parametrize("resume,job", [(RESUME, ""), ("", JOB), ("  ", "  ")])
def test_missing_inputs_fail_before_network(llm, resume, job):
    with pytest.raises(InputValidationError, match="Missing resume or job description"):
        generate_quiz(resume, job)
    assert llm.calls == []


def test_rate_limit_is_typed(llm):
    llm.reply("slow down", status_code=429)

    with pytest.raises(RateLimitError) as exc:
        generate_quiz(RESUME, JOB)
    assert exc.value.status_code == 429
    assert "Rate limit" in exc.value.message


def test_server_error_names_status(llm):
    llm.reply("boom", status_code=500)

    with pytest.raises(ExternalServiceError, match="API Error: 500"):
        generate_quiz(RESUME, JOB)


def test_missing_api_key(monkeypatch):
    monkeypatch.delenv("LLM_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    with pytest.raises(ConfigurationError):
        generate_quiz(RESUME, JOB)


def test_unparseable_content(llm):
    llm.reply("I cannot help with that.")

    with pytest.raises(ResponseParseError, match="Failed to parse quiz data"):
        generate_quiz(RESUME, JOB)


def test_wrong_question_count_is_rejected(llm):
    llm.reply_json(make_questions(n=3))

    with pytest.raises(QuizValidationError, match="Expected 5 questions, received 3"):
        generate_quiz(RESUME, JOB)


def test_validation_names_offending_index():
    questions = make_questions()
    del questions[2]["correctAnswer"]

    with pytest.raises(QuizValidationError, match="index 2"):
        validate_questions(questions)


def test_validation_rejects_blank_question_and_bad_options():
    blank = make_questions()
    blank[0]["question"] = "   "
    with pytest.raises(QuizValidationError, match="index 0"):
        validate_questions(blank)

    no_options = make_questions()
    no_options[4]["options"] = "A, B, C, D"
    with pytest.raises(QuizValidationError, match="index 4"):
        validate_questions(no_options)

    out_of_range = make_questions()
    out_of_range[1]["correctAnswer"] = 7
    with pytest.raises(QuizValidationError, match="index 1"):
        validate_questions(out_of_range)


def test_object_instead_of_array():
    with pytest.raises(QuizValidationError, match="not an array"):
        validate_questions(parse_quiz_content('{"question": "x"}'))
