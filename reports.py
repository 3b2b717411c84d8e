"""Per-user report storage on top of the SQLAlchemy `reports` table."""
import logging
import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from errors import PersistenceError, ReportNotFoundError
from models import Report
from schemas import ReportIn, SavedReport

logger = logging.getLogger(__name__)


def _to_saved(row: Report) -> SavedReport:
    return SavedReport(
        id=row.id,
        user_id=row.user_id,
        resume_data=row.resume_data,
        job_description=row.job_description or "",
        quiz_results=row.quiz_results,
        analysis=row.analysis,
        created_at=row.created_at,
    )


class ReportStore:
    """
    Create/read/delete of saved reports, namespaced by user id.

    The store trusts the caller-supplied user id; authorization happens
    upstream. Ids and timestamps are assigned here at save time.
    """

    def __init__(self, session_factory: sessionmaker):
        self.Session = session_factory

    def save(self, user_id: str, report: ReportIn) -> str:
        report_id = uuid.uuid4().hex
        payload = report.model_dump(mode="json")
        try:
            with self.Session() as s:
                s.add(Report(
                    id=report_id,
                    user_id=user_id,
                    resume_data=payload["resume_data"],
                    job_description=payload["job_description"],
                    quiz_results=payload["quiz_results"],
                    analysis=payload["analysis"],
                    created_at=datetime.now(timezone.utc).replace(tzinfo=None),
                ))
                s.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error saving report for user {user_id}: {e}")
            raise PersistenceError(f"Failed to save report: {e}") from e
        logger.info(f"Report {report_id} saved for user {user_id}")
        return report_id

    def list(self, user_id: str) -> List[SavedReport]:
        stmt = (
            select(Report)
            .where(Report.user_id == user_id)
            .order_by(Report.created_at.desc(), Report.seq.desc())
        )
        try:
            with self.Session() as s:
                rows = s.scalars(stmt).all()
                return [_to_saved(r) for r in rows]
        except SQLAlchemyError as e:
            logger.error(f"Error listing reports for user {user_id}: {e}")
            raise PersistenceError(f"Failed to load reports: {e}") from e

    def get(self, user_id: str, report_id: str) -> SavedReport:
        try:
            with self.Session() as s:
                row = self._find(s, user_id, report_id)
                return _to_saved(row)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load report: {e}") from e

    def delete(self, user_id: str, report_id: str) -> None:
        try:
            with self.Session() as s:
                row = self._find(s, user_id, report_id)
                s.delete(row)
                s.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to delete report: {e}") from e
        logger.info(f"Report {report_id} deleted for user {user_id}")

    @staticmethod
    def _find(s, user_id: str, report_id: str) -> Report:
        row = s.scalars(
            select(Report).where(Report.user_id == user_id, Report.id == report_id)
        ).first()
        if row is None:
            logger.info(f"Report {report_id} not found for user {user_id}")
            raise ReportNotFoundError()
        return row
