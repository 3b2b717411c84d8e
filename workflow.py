"""
Workflow controller: one AssessmentSession per intake, carrying resume,
job description, quiz and report between steps.
"""
import logging
import threading
import time
import uuid
from collections import OrderedDict
from typing import Callable, List, Optional, Tuple

import settings
from assessment.analyzer import analyze_compatibility
from assessment.quiz import generate_quiz, require_inputs
from assessment.runner import QuizRunner
from errors import InputValidationError, MatcherError, SessionNotFoundError
from notifications import Notifier
from parsers.jd_extract import clean_job_description
from schemas import (
    AnalysisReport, QuestionView, QuizQuestion, QuizResult, QuizState, ReportIn, ResumeData, SessionOut,
)

logger = logging.getLogger(__name__)


class AssessmentSession:
    def __init__(
        self,
        resume: ResumeData,
        job_description: str,
        notifier: Optional[Notifier] = None,
        quiz_generator: Callable[[str, str], List[QuizQuestion]] = generate_quiz,
        analyzer: Callable[..., AnalysisReport] = analyze_compatibility,
    ):
        job_description = clean_job_description(job_description)
        require_inputs(resume.text if resume else "", job_description)
        self.id = uuid.uuid4().hex
        self.resume = resume
        self.job_description = job_description
        self.notifier = notifier or Notifier()
        self._generate = quiz_generator
        self._analyze = analyzer
        self.runner: Optional[QuizRunner] = None
        self.analysis: Optional[AnalysisReport] = None

    # ---- state ---------------------------------------------------------------
    @property
    def questions(self) -> List[QuizQuestion]:
        return self.runner.questions if self.runner else []

    @property
    def result(self) -> Optional[QuizResult]:
        return self.runner.result if self.runner else None

    @property
    def quiz_state(self) -> QuizState:
        return self.runner.state if self.runner else QuizState(complete=False, index=0)

    def _quiz(self) -> QuizRunner:
        if self.runner is None:
            raise InputValidationError("Quiz has not been generated yet")
        return self.runner

    # ---- steps ---------------------------------------------------------------
    def start_quiz(self) -> List[QuestionView]:
        """Generate the quiz. A failure leaves the session exactly as it was."""
        try:
            questions = self._generate(self.resume.text, self.job_description)
            runner = QuizRunner(questions)
        except MatcherError as e:
            self.notifier.publish(f"Failed to generate quiz questions: {e.message}", "error")
            raise
        self.runner = runner
        self.analysis = None
        self.notifier.publish("Quiz ready", "success")
        return [QuestionView(index=i, question=q.question, options=list(q.options))
                for i, q in enumerate(runner.questions)]

    def answer(self, choice: int, index: Optional[int] = None) -> QuizState:
        self._quiz().answer(choice, index)
        return self.quiz_state

    def next(self) -> QuizState:
        runner = self._quiz()
        try:
            runner.next()
        except MatcherError as e:
            self.notifier.publish(e.message, "warning")
            raise
        if runner.complete:
            self._run_analysis()
        return self.quiz_state

    def previous(self) -> QuizState:
        return self._quiz().previous()

    def submit(self) -> QuizResult:
        """
        Score the quiz (once) and run the compatibility analysis.

        If the analysis call fails the score is kept, so calling submit
        again only repeats the analysis.
        """
        runner = self._quiz()
        if not runner.complete:
            try:
                runner.submit()
            except MatcherError as e:
                self.notifier.publish(e.message, "warning")
                raise
        if self.analysis is None:
            self._run_analysis()
        return runner.result

    def _run_analysis(self) -> AnalysisReport:
        try:
            self.analysis = self._analyze(self.resume.text, self.job_description, self.runner.result)
        except MatcherError as e:
            self.notifier.publish(f"Failed to analyze results: {e.message}", "error")
            raise
        self.notifier.publish("Analysis complete", "success")
        return self.analysis

    def report_payload(self) -> ReportIn:
        if self.result is None or self.analysis is None:
            raise InputValidationError("No analysis data available to save")
        return ReportIn(
            resume_data=self.resume,
            job_description=self.job_description,
            quiz_results=self.result,
            analysis=self.analysis,
        )

    def snapshot(self) -> SessionOut:
        runner = self.runner
        return SessionOut(
            id=self.id,
            resume_data=self.resume,
            job_description=self.job_description,
            state=self.quiz_state,
            total_questions=len(self.questions),
            answered=runner.answered if runner else 0,
            answers=dict(runner.answers) if runner else {},
            current_question=runner.current_view() if runner and not runner.complete else None,
            quiz_results=self.result,
            analysis=self.analysis,
            notification=self.notifier.latest,
        )


class SessionRegistry:
    """
    In-memory sessions keyed by opaque id.

    Sessions idle longer than ``ttl`` seconds are dropped, and once
    ``max_sessions`` is reached the least recently touched one is evicted.
    """

    def __init__(self, ttl: Optional[float] = None, max_sessions: Optional[int] = None,
                 clock: Callable[[], float] = time.monotonic, **session_kwargs):
        self.ttl = settings.session_ttl() if ttl is None else ttl
        self.max_sessions = settings.max_sessions() if max_sessions is None else max_sessions
        self._clock = clock
        self._sessions: "OrderedDict[str, Tuple[AssessmentSession, float]]" = OrderedDict()
        self._lock = threading.Lock()
        self._session_kwargs = session_kwargs

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _prune(self, now: float) -> None:
        # oldest first, so stop at the first live one
        while self._sessions:
            sid, (_, touched) = next(iter(self._sessions.items()))
            if now - touched <= self.ttl:
                break
            del self._sessions[sid]
            logger.info(f"Session {sid} expired")
        while self.max_sessions > 0 and len(self._sessions) >= self.max_sessions:
            sid, _ = self._sessions.popitem(last=False)
            logger.info(f"Session {sid} evicted")

    def create(self, resume: ResumeData, job_description: str) -> AssessmentSession:
        session = AssessmentSession(resume, job_description, **self._session_kwargs)
        with self._lock:
            now = self._clock()
            self._prune(now)
            self._sessions[session.id] = (session, now)
        logger.info(f"Session {session.id} created for {resume.file_name}")
        return session

    def get(self, session_id: str) -> AssessmentSession:
        with self._lock:
            now = self._clock()
            entry = self._sessions.get(session_id)
            if entry is None or now - entry[1] > self.ttl:
                self._sessions.pop(session_id, None)
                raise SessionNotFoundError()
            self._sessions[session_id] = (entry[0], now)
            self._sessions.move_to_end(session_id)
            return entry[0]

    def discard(self, session_id: str) -> None:
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise SessionNotFoundError()
