from __future__ import annotations
import logging
import os
from typing import List
from contextlib import asynccontextmanager
from fastapi import FastAPI, UploadFile, File, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import settings
from assessment.analyzer import extract_key_skills, extract_resume_skills
from errors import MatcherError
from models import Base
from parsers.extract import ResumeTextExtractor
from parsers.jd_extract import clean_job_description, guess_title
from reports import ReportStore
from schemas import (
    AnswerIn, JobInspection, JobTextIn, QuestionView, ReportCreated, ReportIn, ResumeData,
    ResumeSkills, ResumeSkillsIn, SavedReport, SessionIn, SessionOut,
)
from workflow import SessionRegistry

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

engine = None
Session = sessionmaker(autoflush=False, autocommit=False, future=True)
store = ReportStore(Session)
sessions = SessionRegistry()
extractor = ResumeTextExtractor()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the data directory and database on startup; dispose the engine on shutdown."""
    global engine

    base_dir = settings.base_dir()
    os.makedirs(base_dir, exist_ok=True)

    db_url = settings.database_url()
    logger.info(f"Using base directory: {base_dir}")
    logger.info(f"Database URL: {db_url}")
    engine = create_engine(db_url, future=True)
    Session.configure(bind=engine)

    Base.metadata.create_all(engine)

    yield
    engine.dispose()
    logger.info("Application shutting down.")


app = FastAPI(title="Resume Quiz Matcher", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _http_error(e: MatcherError) -> HTTPException:
    return HTTPException(status_code=e.http_status, detail=e.message)


# -------------------------------------------------------------------
# Intake
# -------------------------------------------------------------------
@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/resumes/extract", response_model=ResumeData)
async def extract_resume(resume: UploadFile = File(...)):
    data = await resume.read()
    try:
        return extractor.extract(resume.filename or "", data, resume.content_type)
    except MatcherError as e:
        raise _http_error(e)


@app.post("/jobs/inspect", response_model=JobInspection)
def inspect_job(body: JobTextIn):
    text = clean_job_description(body.job_description)
    if not text:
        raise HTTPException(status_code=400, detail="Please enter a job description")
    return JobInspection(title=guess_title(text), job_description=text)


@app.post("/skills/key", response_model=List[str])
def key_skills(body: JobTextIn):
    try:
        return extract_key_skills(body.job_description)
    except MatcherError as e:
        raise _http_error(e)


@app.post("/skills/resume", response_model=ResumeSkills)
def resume_skills(body: ResumeSkillsIn):
    try:
        return extract_resume_skills(body.resume_text, body.job_description)
    except MatcherError as e:
        raise _http_error(e)


# -------------------------------------------------------------------
# Quiz workflow
# -------------------------------------------------------------------
@app.post("/sessions", response_model=SessionOut)
def create_session(body: SessionIn):
    try:
        return sessions.create(body.resume_data, body.job_description).snapshot()
    except MatcherError as e:
        raise _http_error(e)


@app.get("/sessions/{session_id}", response_model=SessionOut)
def get_session(session_id: str):
    try:
        return sessions.get(session_id).snapshot()
    except MatcherError as e:
        raise _http_error(e)


@app.delete("/sessions/{session_id}", status_code=204)
def discard_session(session_id: str):
    try:
        sessions.discard(session_id)
    except MatcherError as e:
        raise _http_error(e)


@app.post("/sessions/{session_id}/quiz", response_model=List[QuestionView])
def start_quiz(session_id: str):
    try:
        return sessions.get(session_id).start_quiz()
    except MatcherError as e:
        raise _http_error(e)


@app.put("/sessions/{session_id}/answers/{index}", response_model=SessionOut)
def answer_question(session_id: str, index: int, body: AnswerIn):
    try:
        s = sessions.get(session_id)
        s.answer(body.choice, index)
        return s.snapshot()
    except MatcherError as e:
        raise _http_error(e)


@app.post("/sessions/{session_id}/next", response_model=SessionOut)
def next_question(session_id: str):
    try:
        s = sessions.get(session_id)
        s.next()
        return s.snapshot()
    except MatcherError as e:
        raise _http_error(e)


@app.post("/sessions/{session_id}/previous", response_model=SessionOut)
def previous_question(session_id: str):
    try:
        s = sessions.get(session_id)
        s.previous()
        return s.snapshot()
    except MatcherError as e:
        raise _http_error(e)


@app.post("/sessions/{session_id}/submit", response_model=SessionOut)
def submit_quiz(session_id: str):
    try:
        s = sessions.get(session_id)
        s.submit()
        return s.snapshot()
    except MatcherError as e:
        raise _http_error(e)


# -------------------------------------------------------------------
# Saved reports
# -------------------------------------------------------------------
@app.post("/users/{user_id}/reports", response_model=ReportCreated, status_code=201)
def save_report(user_id: str, report: ReportIn):
    try:
        return ReportCreated(id=store.save(user_id, report))
    except MatcherError as e:
        raise _http_error(e)


@app.get("/users/{user_id}/reports", response_model=List[SavedReport])
def list_reports(user_id: str):
    try:
        return store.list(user_id)
    except MatcherError as e:
        raise _http_error(e)


@app.get("/users/{user_id}/reports/{report_id}", response_model=SavedReport)
def get_report(user_id: str, report_id: str):
    try:
        return store.get(user_id, report_id)
    except MatcherError as e:
        raise _http_error(e)


@app.delete("/users/{user_id}/reports/{report_id}", status_code=204)
def delete_report(user_id: str, report_id: str):
    try:
        store.delete(user_id, report_id)
    except MatcherError as e:
        raise _http_error(e)
