import json

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from assessment import llm_client
from models import Base
from reports import ReportStore

RESUME = "Experienced JavaScript developer, 5 years React"
JOB = "Looking for a senior React/Node engineer"


def make_questions(n=5, correct=0):
    return [
        {
            "question": f"Question {i + 1} about React internals?",
            "options": ["Option A", "Option B", "Option C", "Option D"],
            "correctAnswer": correct,
            "explanation": f"Why A is right for {i + 1}",
            "wrongExplanations": ["B is wrong", "C is wrong", "D is wrong"],
        }
        for i in range(n)
    ]


def make_analysis(**overrides):
    data = {
        "summary": "<p>Strong match</p>",
        "analysis": "<h3>Strengths</h3><ul><li>React</li></ul>",
        "recommendations": "<p>Learn Node streams</p>",
        "learningResources": '<a href="https://nodejs.org/en/docs">Node docs</a>',
        "learningRoadmap": "<p>Month 1: Node</p>",
        "skillsMatchPercentage": 78,
        "score": 82,
        "skillsAnalysis": [
            {"skill": "React", "relevance": 95, "match": 90, "gap": 5},
            {"skill": "Node.js", "relevance": 85, "match": 50, "gap": 35},
        ],
        "strengths": ["React depth"],
        "areasForGrowth": ["Backend experience"],
    }
    data.update(overrides)
    return data


class FakeResponse:
    def __init__(self, status_code=200, content=None, body=None):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        if body is None:
            body = {"choices": [{"message": {"role": "assistant", "content": content}}]}
        self._body = body
        self.text = json.dumps(body)

    def json(self):
        return self._body


class FakeLLM:
    """Stands in for requests.post inside the text-generation client."""

    def __init__(self):
        self.responses = []
        self.calls = []

    def reply(self, content, status_code=200):
        self.responses.append(FakeResponse(status_code=status_code, content=content))

    def reply_json(self, data):
        self.reply(json.dumps(data))

    def __call__(self, url, headers=None, json=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        if not self.responses:
            raise AssertionError("unexpected call to the text-generation service")
        return self.responses.pop(0)

    def prompt(self, i=-1):
        return self.calls[i]["json"]["messages"][0]["content"]


@pytest.fixture
def llm(monkeypatch):
    fake = FakeLLM()
    monkeypatch.setenv("LLM_API_KEY", "test-key")
    monkeypatch.setattr(llm_client.requests, "post", fake)
    return fake


@pytest.fixture
def store(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'reports.db'}", future=True)
    Base.metadata.create_all(engine)
    yield ReportStore(sessionmaker(bind=engine, autoflush=False, future=True))
    engine.dispose()
