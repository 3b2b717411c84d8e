import json
import logging
from typing import Callable, List, Union

from pydantic import ValidationError

from errors import InputValidationError, ResponseParseError
from schemas import AnalysisReport, QuizResult, ResumeSkills
from . import llm_client
from .prompts import ANALYSIS_TEMPLATE, KEY_SKILLS_TEMPLATE, QUIZ_QUESTION_COUNT, RESUME_SKILLS_TEMPLATE
from .quiz import require_inputs

logger = logging.getLogger(__name__)


def _quiz_details(quiz: QuizResult) -> str:
    if not quiz.feedback:
        return ""
    lines = ["Per-question outcome:"]
    for f in quiz.feedback:
        question = quiz.questions[f.question_index].question if f.question_index < len(quiz.questions) else ""
        verdict = "correct" if f.is_correct else "incorrect"
        lines.append(f"- Q{f.question_index + 1} ({verdict}): {question}")
    return "\n".join(lines) + "\n"


def _load_json(content: str, what: str):
    try:
        return json.loads(content)
    except (json.JSONDecodeError, TypeError) as e:
        logger.error(f"Error parsing {what} JSON: {e}; raw content: {str(content)[:300]}")
        raise ResponseParseError(f"Failed to parse {what} data") from e


def analyze_compatibility(
    resume_text: str,
    job_description: str,
    quiz: Union[QuizResult, int],
    complete: Callable[..., str] = None,
) -> AnalysisReport:
    """
    Ask the text-generation service for the full compatibility report.

    `quiz` is normally the scored QuizResult; a bare score is read as out
    of five questions.
    """
    require_inputs(resume_text, job_description)
    complete = complete or llm_client.chat_completion

    if isinstance(quiz, QuizResult):
        score, total, details = quiz.score, quiz.total_questions, _quiz_details(quiz)
    else:
        score, total, details = int(quiz), QUIZ_QUESTION_COUNT, ""

    prompt = ANALYSIS_TEMPLATE.format(
        resume=resume_text, jd=job_description, score=score, total=total, quiz_details=details,
    )
    content = complete([{"role": "user", "content": prompt}], temperature=0.4, max_tokens=3500)

    parsed = _load_json(content, "analysis")
    if not isinstance(parsed, dict):
        raise ResponseParseError("Failed to parse analysis data")
    try:
        report = AnalysisReport.model_validate(parsed)
    except ValidationError as e:
        raise ResponseParseError(f"Failed to parse analysis data: {e.errors()[0]['msg']}") from e

    logger.info(f"Analysis ready: score={report.score}, skills match={report.skills_match_percentage}%")
    return report


def extract_key_skills(job_description: str, complete: Callable[..., str] = None) -> List[str]:
    if not (job_description or "").strip():
        raise InputValidationError("Missing job description")
    complete = complete or llm_client.chat_completion

    content = complete(
        [{"role": "user", "content": KEY_SKILLS_TEMPLATE.format(jd=job_description)}],
        temperature=0.3, max_tokens=500,
    )
    parsed = _load_json(content, "skills")
    if not isinstance(parsed, list):
        raise ResponseParseError("Failed to parse skills data")
    return [str(s) for s in parsed]


def extract_resume_skills(resume_text: str, job_description: str, complete: Callable[..., str] = None) -> ResumeSkills:
    require_inputs(resume_text, job_description)
    complete = complete or llm_client.chat_completion

    content = complete(
        [{"role": "user", "content": RESUME_SKILLS_TEMPLATE.format(resume=resume_text, jd=job_description)}],
        temperature=0.3, max_tokens=1000,
    )
    parsed = _load_json(content, "resume skills")
    if not isinstance(parsed, dict):
        raise ResponseParseError("Failed to parse resume skills data")
    try:
        return ResumeSkills.model_validate(parsed)
    except ValidationError as e:
        raise ResponseParseError("Failed to parse resume skills data") from e
