"""Dashboard API endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.database import get_db
from backend.app.repositories.candidate_repository import CandidateRepository
from backend.app.services.dashboard_service import DashboardService
from backend.app.schemas.dashboard import CandidateStatsResponse, HiddenGemResponse

router = APIRouter()


async def get_dashboard_service(db: AsyncSession = Depends(get_db)) -> DashboardService:
    """Dependency to get dashboard service"""
    return DashboardService(CandidateRepository(db))


@router.get("/candidates", response_model=CandidateStatsResponse)
async def get_candidate_stats(
    dashboard_service: DashboardService = Depends(get_dashboard_service)
):
    """
    Candidate statistics for the dashboard

    **Returns:**
    - total count and rounded average AI score
    - counts per status label
    - top 5 candidates by score with their application counts
    - 5 most recent applicants
    """
    return CandidateStatsResponse(**await dashboard_service.get_candidate_stats())


@router.get("/hidden-gem", response_model=Optional[HiddenGemResponse])
async def get_hidden_gem(
    dashboard_service: DashboardService = Depends(get_dashboard_service)
):
    """Third-highest scored candidate; null when fewer than three are scored"""
    gem = await dashboard_service.get_hidden_gem()
    return HiddenGemResponse(**gem) if gem else None
