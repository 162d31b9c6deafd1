"""Data access layer"""

from backend.app.repositories.candidate_repository import CandidateRepository
from backend.app.repositories.file_repository import FileRepository
from backend.app.repositories.prompt_repository import PromptRepository

__all__ = ['CandidateRepository', 'FileRepository', 'PromptRepository']
