"""Job applications and interview requests"""

from sqlalchemy import Column, String, Integer, Float, Text, ForeignKey, Uuid
from backend.app.core.database import Base
from backend.app.models.base import TimestampMixin
import uuid


class JobApplication(Base, TimestampMixin):
    """A candidate's application to a job posting"""

    __tablename__ = "job_applications"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    candidate_id = Column(Uuid(as_uuid=True), ForeignKey("candidates.id"), nullable=False, index=True)
    job_id = Column(String(100), nullable=True, index=True)
    status = Column(String(100), nullable=True)
    applied_date = Column(String(50), nullable=True)
    progress = Column(Integer, nullable=True)
    match_score = Column(Float, nullable=True)
    meeting_code = Column(String(100), nullable=True)

    def __repr__(self):
        return f"<JobApplication(id={self.id}, candidate_id={self.candidate_id}, job_id={self.job_id})>"


class InterviewRequest(Base, TimestampMixin):
    """A scheduled or requested interview for a candidate"""

    __tablename__ = "interview_requests"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    candidate_id = Column(Uuid(as_uuid=True), ForeignKey("candidates.id"), nullable=False, index=True)
    position = Column(String(255), nullable=True)
    date = Column(String(50), nullable=True)
    time = Column(String(50), nullable=True)
    status = Column(String(100), nullable=True)
    meeting_code = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    interview_type = Column(String(100), nullable=True)
    round = Column(Integer, nullable=True)
    job_id = Column(String(100), nullable=True)

    def __repr__(self):
        return f"<InterviewRequest(id={self.id}, candidate_id={self.candidate_id}, status={self.status})>"
