from sqlalchemy import Column, Integer, String, Text, DateTime, TypeDecorator, Index
from sqlalchemy.orm import declarative_base
import json

Base = declarative_base()

class JSONType(TypeDecorator):
    """Custom JSON type that works reliably with SQLite."""
    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        """Convert Python object to JSON string for storage."""
        if value is None:
            return None
        return json.dumps(value)

    def process_result_value(self, value, dialect):
        """Convert JSON string back to Python object."""
        if value is None:
            return None
        return json.loads(value)


class Report(Base):
    __tablename__ = "reports"
    seq = Column(Integer, primary_key=True, autoincrement=True)  # insertion order, tie-break for listing
    id = Column(String(32), unique=True, nullable=False)
    user_id = Column(String, nullable=False)
    resume_data = Column(JSONType)
    job_description = Column(Text)
    quiz_results = Column(JSONType)
    analysis = Column(JSONType)
    created_at = Column(DateTime, nullable=False)

    __table_args__ = (Index("ix_reports_user_created", "user_id", "created_at"),)
