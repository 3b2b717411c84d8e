import pytest

from errors import (
    ExternalServiceError, InputValidationError, RateLimitError, SessionNotFoundError, UnansweredQuestionsError,
)
from notifications import Notifier
from schemas import ResumeData
from workflow import AssessmentSession, SessionRegistry
from conftest import JOB, RESUME, make_analysis, make_questions

RESUME_DATA = ResumeData(text=RESUME, file_name="cv.txt")


@pytest.fixture
def seen():
    return []


@pytest.fixture
def session(seen):
    return AssessmentSession(RESUME_DATA, JOB, notifier=Notifier(seen.append))


def test_empty_job_description_rejected(llm):
    with pytest.raises(InputValidationError, match="Missing resume or job description"):
        AssessmentSession(RESUME_DATA, "   ")
    assert llm.calls == []


def test_rate_limit_leaves_quiz_untouched(llm, session, seen):
    llm.reply("too many requests", status_code=429)

    with pytest.raises(RateLimitError):
        session.start_quiz()

    assert session.quiz_state.complete is False
    assert session.quiz_state.index == 0
    assert session.runner is None
    assert seen[-1].severity == "error"
    assert "Rate limit" in seen[-1].message


def test_all_correct_flow(llm, session, seen):
    llm.reply_json(make_questions())
    llm.reply_json(make_analysis())

    views = session.start_quiz()
    assert len(views) == 5
    assert not hasattr(views[0], "correct_answer")

    for _ in range(4):
        session.answer(0)
        session.next()
    session.answer(0)
    state = session.next()

    assert state.complete
    assert session.result.score == 5
    assert "scored 5/5" in llm.prompt()
    assert 0 <= session.analysis.score <= 100
    assert seen[-1].message == "Analysis complete"

    payload = session.report_payload()
    assert payload.quiz_results.score == 5
    assert payload.job_description == JOB


def test_submit_with_one_unanswered(llm, session, seen):
    llm.reply_json(make_questions())
    session.start_quiz()
    for i in range(4):
        session.answer(1, index=i)

    with pytest.raises(UnansweredQuestionsError) as exc:
        session.submit()

    assert exc.value.remaining == 1
    assert seen[-1].severity == "warning"
    assert seen[-1].message == "Please answer all questions (1 remaining)"
    assert len(llm.calls) == 1


def test_analysis_failure_keeps_score_and_can_retry(llm, session):
    llm.reply_json(make_questions())
    session.start_quiz()
    for i in range(5):
        session.answer(2, index=i)

    llm.reply("oops", status_code=503)
    with pytest.raises(ExternalServiceError, match="503"):
        session.submit()
    assert session.result.score == 0
    assert session.analysis is None

    llm.reply_json(make_analysis())
    result = session.submit()
    assert result.score == 0
    assert session.analysis is not None
    # the quiz is not regenerated or rescored
    assert len(llm.calls) == 3


def test_report_payload_requires_analysis(session):
    with pytest.raises(Exception, match="No analysis data"):
        session.report_payload()


def test_snapshot_hides_answers(llm, session):
    llm.reply_json(make_questions())
    session.start_quiz()
    session.answer(3)

    snap = session.snapshot().model_dump(by_alias=True)

    assert snap["currentQuestion"] == {
        "index": 0,
        "question": "Question 1 about React internals?",
        "options": ["Option A", "Option B", "Option C", "Option D"],
    }
    assert snap["answered"] == 1
    assert snap["answers"][0] == 3
    assert snap["quizResults"] is None


def test_registry():
    registry = SessionRegistry()
    s = registry.create(RESUME_DATA, JOB)
    assert registry.get(s.id) is s
    registry.discard(s.id)
    with pytest.raises(SessionNotFoundError):
        registry.get(s.id)
    with pytest.raises(SessionNotFoundError):
        registry.discard(s.id)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_registry_expires_idle_sessions():
    clock = FakeClock()
    registry = SessionRegistry(ttl=60, max_sessions=10, clock=clock)
    old = registry.create(RESUME_DATA, JOB)
    clock.now = 50
    kept = registry.create(RESUME_DATA, JOB)
    clock.now = 100

    with pytest.raises(SessionNotFoundError):
        registry.get(old.id)
    assert registry.get(kept.id) is kept
    assert len(registry) == 1


def test_registry_touch_extends_lifetime():
    clock = FakeClock()
    registry = SessionRegistry(ttl=60, max_sessions=10, clock=clock)
    s = registry.create(RESUME_DATA, JOB)
    clock.now = 50
    registry.get(s.id)
    clock.now = 100
    assert registry.get(s.id) is s


def test_registry_evicts_least_recently_used_at_capacity():
    clock = FakeClock()
    registry = SessionRegistry(ttl=3600, max_sessions=2, clock=clock)
    first = registry.create(RESUME_DATA, JOB)
    clock.now = 1
    second = registry.create(RESUME_DATA, JOB)
    clock.now = 2
    registry.get(first.id)
    clock.now = 3
    third = registry.create(RESUME_DATA, JOB)

    assert len(registry) == 2
    with pytest.raises(SessionNotFoundError):
        registry.get(second.id)
    assert registry.get(first.id) is first
    assert registry.get(third.id) is third
