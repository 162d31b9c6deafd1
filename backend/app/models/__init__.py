"""Database models"""

from backend.app.models.base import TimestampMixin
from backend.app.models.candidate import Candidate
from backend.app.models.file import CandidateFile, FileStatus
from backend.app.models.application import JobApplication, InterviewRequest
from backend.app.models.prompt import PromptTemplate

__all__ = [
    "TimestampMixin",
    "Candidate",
    "CandidateFile",
    "FileStatus",
    "JobApplication",
    "InterviewRequest",
    "PromptTemplate",
]
