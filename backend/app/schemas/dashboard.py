"""Dashboard schemas"""

from typing import Dict, List, Optional
from uuid import UUID
from pydantic import BaseModel


class TopCandidate(BaseModel):
    id: UUID
    name: str
    position: Optional[str] = None
    ai_score: Optional[float] = None
    applications: int


class RecentCandidate(BaseModel):
    id: UUID
    name: str
    email: str
    applied_date: Optional[str] = None


class CandidateStatsResponse(BaseModel):
    """Aggregate view over all candidates"""
    total_candidates: int
    average_ai_score: int
    candidates_per_status: Dict[str, int]
    top_candidates: List[TopCandidate]
    recent_candidates: List[RecentCandidate]


class HiddenGemResponse(BaseModel):
    """Third-highest scored candidate"""
    id: UUID
    name: str
    initials: str
    ai_score: Optional[float] = None
    position: Optional[str] = None
