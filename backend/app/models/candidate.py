"""Candidate model"""

from sqlalchemy import Column, String, Float, Text, JSON, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from backend.app.core.database import Base
from backend.app.models.base import TimestampMixin
import uuid

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Candidate(Base, TimestampMixin):
    """Applicant record carrying the structured AI analysis"""

    __tablename__ = "candidates"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False, index=True)
    initials = Column(String(10), nullable=False, default="")
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(50), nullable=True)
    text_color = Column(String(50), nullable=False, default="")
    bg_color = Column(String(50), nullable=False, default="")
    user_id = Column(Uuid(as_uuid=True), nullable=True, index=True)  # owning account
    cv_file_id = Column(Uuid(as_uuid=True), nullable=True)
    meeting_code = Column(String(100), nullable=True)
    cover_letter = Column(Text, nullable=True)
    ai_score = Column(Float, nullable=True)
    status = Column(String(100), nullable=True, index=True)
    position = Column(String(255), nullable=True)
    applied_date = Column(String(50), nullable=True)  # ISO date string
    recruiter = Column(String(255), nullable=True)
    last_activity = Column(String(50), nullable=True)
    profile = Column(JSONType, nullable=True)  # legacy flat summary
    candidate_profile = Column(JSONType, nullable=True)  # six-section analysis

    def __repr__(self):
        return f"<Candidate(id={self.id}, name={self.name}, email={self.email})>"
