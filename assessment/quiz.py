import json
import logging
import re
from typing import Any, Callable, List

from errors import InputValidationError, QuizValidationError, ResponseParseError
from schemas import QuizQuestion
from . import llm_client
from .prompts import QUIZ_QUESTION_COUNT, QUIZ_TEMPLATE

logger = logging.getLogger(__name__)

_ARRAY_RE = re.compile(r"\[[\s\S]*\]")


def require_inputs(resume_text: str, job_description: str) -> None:
    if not (resume_text or "").strip() or not (job_description or "").strip():
        raise InputValidationError("Missing resume or job description")


def parse_quiz_content(content: str) -> Any:
    """Parse the model output as JSON, falling back to the first [...] span."""
    try:
        return json.loads(content)
    except json.JSONDecodeError as direct_error:
        logger.warning(f"Quiz content is not plain JSON ({direct_error}); extracting array")
        match = _ARRAY_RE.search(content or "")
        if not match:
            raise ResponseParseError("Failed to parse quiz data: could not extract JSON from response")
        try:
            return json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise ResponseParseError(f"Failed to parse quiz data: {e}") from e


def validate_questions(parsed: Any, expected: int = QUIZ_QUESTION_COUNT) -> List[QuizQuestion]:
    if not isinstance(parsed, list):
        raise QuizValidationError("Response is not an array")

    questions = []
    for index, item in enumerate(parsed):
        if not isinstance(item, dict):
            raise QuizValidationError(f"Invalid question object at index {index}")
        text = item.get("question")
        options = item.get("options")
        correct = item.get("correctAnswer")
        if (
            not isinstance(text, str) or not text.strip()
            or not isinstance(options, list)
            or correct is None or isinstance(correct, bool) or not isinstance(correct, int)
            or not 0 <= correct < len(options)
        ):
            logger.error(f"Invalid question object at index {index}: {item}")
            raise QuizValidationError(f"Invalid question object at index {index}")
        wrong = item.get("wrongExplanations") or []
        questions.append(QuizQuestion(
            question=text.strip(),
            options=[str(o) for o in options],
            correct_answer=correct,
            explanation=str(item.get("explanation") or ""),
            wrong_explanations=[str(w) for w in wrong] if isinstance(wrong, list) else [],
        ))

    if len(questions) != expected:
        raise QuizValidationError(f"Expected {expected} questions, received {len(questions)}")
    return questions


def generate_quiz(
    resume_text: str,
    job_description: str,
    complete: Callable[..., str] = None,
) -> List[QuizQuestion]:
    """Ask the text-generation service for a tailored five-question quiz."""
    require_inputs(resume_text, job_description)
    complete = complete or llm_client.chat_completion

    prompt = QUIZ_TEMPLATE.format(count=QUIZ_QUESTION_COUNT, resume=resume_text, jd=job_description)
    content = complete([{"role": "user", "content": prompt}], temperature=0.7, max_tokens=2500)

    questions = validate_questions(parse_quiz_content(content))
    logger.info(f"Generated {len(questions)} quiz questions")
    return questions
