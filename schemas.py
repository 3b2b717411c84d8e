from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional, Dict, Any


def _clamp_percent(value: Any) -> int:
    """Coerce a model-reported score into an integer in 0..100."""
    if value is None or value == "":
        return 0
    try:
        number = float(str(value).strip().rstrip("%"))
    except ValueError:
        return 0
    return int(round(max(0.0, min(100.0, number))))


class CamelModel(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Resume handed over by the intake step
class ResumeData(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    text: str
    file_name: str = "resume.txt"


class QuizQuestion(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    question: str
    options: List[str]
    correct_answer: int
    explanation: str = ""
    wrong_explanations: List[str] = []


# What the quiz screen is allowed to see before submission
class QuestionView(CamelModel):
    index: int
    question: str
    options: List[str]


class QuestionFeedback(CamelModel):
    question_index: int
    selected_answer: int
    correct_answer: int
    is_correct: bool
    explanation: str = ""


class QuizResult(CamelModel):
    score: int
    total_questions: int
    answers: Dict[int, Optional[int]] = {}
    feedback: List[QuestionFeedback] = []
    questions: List[QuizQuestion] = []


class SkillAnalysis(CamelModel):
    skill: str = ""
    relevance: int = 0
    match: int = 0
    gap: int = 0

    @field_validator("relevance", "match", "gap", mode="before")
    @classmethod
    def _percent(cls, v):
        return _clamp_percent(v)

    @field_validator("skill", mode="before")
    @classmethod
    def _skill(cls, v):
        return "" if v is None else str(v)


class AnalysisReport(CamelModel):
    summary: str = ""
    analysis: str = ""
    recommendations: str = ""
    learning_resources: str = ""
    learning_roadmap: str = ""
    skills_match_percentage: int = 0
    score: int = 0
    skills_analysis: List[SkillAnalysis] = []
    strengths: List[str] = []
    areas_for_growth: List[str] = []

    @field_validator("skills_match_percentage", "score", mode="before")
    @classmethod
    def _percent(cls, v):
        return _clamp_percent(v)

    @field_validator(
        "summary", "analysis", "recommendations", "learning_resources", "learning_roadmap",
        mode="before",
    )
    @classmethod
    def _text(cls, v):
        return "" if v is None else str(v)

    @field_validator("skills_analysis", mode="before")
    @classmethod
    def _skills(cls, v):
        return [] if v is None else v

    @field_validator("strengths", "areas_for_growth", mode="before")
    @classmethod
    def _items(cls, v):
        if v is None:
            return []
        return [item for item in v if item is not None] if isinstance(v, list) else v


class Notification(CamelModel):
    message: str
    severity: str = "info"


# ---- report storage ---------------------------------------------------------
class ReportIn(CamelModel):
    resume_data: ResumeData
    job_description: str
    quiz_results: QuizResult
    analysis: AnalysisReport


class SavedReport(ReportIn):
    id: str
    user_id: str
    created_at: datetime


class ReportCreated(CamelModel):
    id: str


# ---- request bodies ----------------------------------------------------------
class SessionIn(CamelModel):
    resume_data: ResumeData
    job_description: str


class AnswerIn(CamelModel):
    choice: int


class JobTextIn(CamelModel):
    job_description: str


class ResumeSkillsIn(CamelModel):
    resume_text: str
    job_description: str


# ---- responses -----------------------------------------------------------------
class QuizState(CamelModel):
    complete: bool = False
    index: int = 0


class SessionOut(CamelModel):
    id: str
    resume_data: ResumeData
    job_description: str
    state: QuizState
    total_questions: int = 0
    answered: int = 0
    answers: Dict[int, Optional[int]] = {}
    current_question: Optional[QuestionView] = None
    quiz_results: Optional[QuizResult] = None
    analysis: Optional[AnalysisReport] = None
    notification: Optional[Notification] = None


class JobInspection(CamelModel):
    title: str
    job_description: str


class ResumeSkills(CamelModel):
    skills: List[str] = []
    match_analysis: Dict[str, Dict[str, Any]] = {}
    missing_skills: List[str] = []
