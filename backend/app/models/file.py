"""Stored resume files"""

from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey, Uuid
from sqlalchemy.sql import func
from backend.app.core.database import Base
from backend.app.models.base import TimestampMixin
import uuid
import enum


class FileStatus(str, enum.Enum):
    """Analysis status of a stored file; NULL means not yet analyzed"""
    ANALYZING = "analyzing"
    ANALYZED = "analyzed"
    ERROR = "error"


class CandidateFile(Base, TimestampMixin):
    """A file uploaded to object storage, usually a candidate resume"""

    __tablename__ = "candidate_files"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    storage_key = Column(String(500), nullable=False)  # S3 object key
    file_name = Column(String(255), nullable=False)
    file_size = Column(Integer, nullable=False, default=0)
    file_type = Column(String(100), nullable=False, default="application/pdf")
    file_category = Column(String(50), nullable=False, default="resume")
    candidate_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("candidates.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    uploaded_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    # Correlation token linking an analysis run back to its candidate
    analysis_id = Column(String(100), nullable=True, unique=True, index=True)
    status = Column(String(20), nullable=True, index=True)
    cv_summary = Column(Text, nullable=True)

    def __repr__(self):
        return f"<CandidateFile(id={self.id}, file_name={self.file_name}, status={self.status})>"
