"""Dashboard aggregation over candidates"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from backend.app.models.candidate import Candidate
from backend.app.repositories.candidate_repository import CandidateRepository
from backend.app.services.profile_builder import is_number, round_half_up
from backend.app.core.logging import get_logger

logger = get_logger(__name__)

TOP_CANDIDATES = 5
RECENT_CANDIDATES = 5
HIDDEN_GEM_RANK = 3


def _applied_timestamp(applied_date: Optional[str]) -> float:
    """Sort key for applied dates; missing or unparseable dates sort last"""
    if not applied_date:
        return 0.0
    try:
        parsed = datetime.fromisoformat(applied_date)
    except ValueError:
        return 0.0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


class DashboardService:
    """Read-only statistics for the recruiter dashboard"""

    def __init__(self, candidate_repository: CandidateRepository):
        self.candidate_repo = candidate_repository

    async def get_candidate_stats(self) -> Dict[str, Any]:
        """
        Totals, average score, status counts, top and most recent candidates

        Only numeric ``ai_score`` values count toward the average. Top
        candidates rank missing scores as 0.
        """
        candidates = await self.candidate_repo.get_all()

        scores = [c.ai_score for c in candidates if is_number(c.ai_score)]
        average = round_half_up(sum(scores) / len(scores)) if scores else 0

        per_status: Dict[str, int] = {}
        for candidate in candidates:
            if candidate.status:
                per_status[candidate.status] = per_status.get(candidate.status, 0) + 1

        top = sorted(candidates, key=lambda c: c.ai_score or 0, reverse=True)[:TOP_CANDIDATES]
        application_counts = await self.candidate_repo.count_applications([c.id for c in top])

        recent = sorted(
            candidates, key=lambda c: _applied_timestamp(c.applied_date), reverse=True
        )[:RECENT_CANDIDATES]

        return {
            "total_candidates": len(candidates),
            "average_ai_score": average,
            "candidates_per_status": per_status,
            "top_candidates": [
                {
                    "id": c.id,
                    "name": c.name,
                    "position": c.position,
                    "ai_score": c.ai_score,
                    "applications": application_counts.get(c.id, 0),
                }
                for c in top
            ],
            "recent_candidates": [
                {"id": c.id, "name": c.name, "email": c.email, "applied_date": c.applied_date}
                for c in recent
            ],
        }

    async def get_hidden_gem(self) -> Optional[Dict[str, Any]]:
        """The third-highest scored candidate, or None with fewer than three scores"""
        candidates = await self.candidate_repo.get_all()
        scored: List[Candidate] = sorted(
            (c for c in candidates if is_number(c.ai_score)),
            key=lambda c: c.ai_score,
            reverse=True,
        )

        if len(scored) < HIDDEN_GEM_RANK:
            return None

        gem = scored[HIDDEN_GEM_RANK - 1]
        logger.debug(f"Hidden gem: {gem.id}")
        return {
            "id": gem.id,
            "name": gem.name,
            "initials": gem.initials,
            "ai_score": gem.ai_score,
            "position": gem.position,
        }
