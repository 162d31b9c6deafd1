"""Candidate repository for database operations"""

from typing import List, Optional, Dict, Any
from uuid import UUID
from sqlalchemy import select, delete, or_, and_, func
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.models.candidate import Candidate
from backend.app.models.application import JobApplication, InterviewRequest
from backend.app.core.logging import get_logger

logger = get_logger(__name__)


class CandidateRepository:
    """Repository for candidate database operations"""

    def __init__(self, session: AsyncSession):
        """
        Initialize repository

        Args:
            session: Database session
        """
        self.session = session

    async def create(self, candidate_data: Dict[str, Any]) -> Candidate:
        """
        Create a new candidate

        Args:
            candidate_data: Dictionary with candidate column values

        Returns:
            Created candidate
        """
        candidate = Candidate(**candidate_data)
        self.session.add(candidate)
        await self.session.commit()
        await self.session.refresh(candidate)

        logger.info(f"Created candidate: {candidate.id}", extra={"candidate_id": candidate.id})
        return candidate

    async def get_by_id(self, candidate_id: UUID, for_update: bool = False) -> Optional[Candidate]:
        """
        Get candidate by ID

        Args:
            candidate_id: Candidate UUID
            for_update: Lock the row until the session commits (no-op on SQLite)

        Returns:
            Candidate if found, None otherwise
        """
        stmt = select(Candidate).where(Candidate.id == candidate_id)
        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        candidate = result.scalar_one_or_none()

        if not candidate:
            logger.debug(f"Candidate not found: {candidate_id}")
        return candidate

    async def get_by_meeting_code(self, meeting_code: str) -> Optional[Candidate]:
        result = await self.session.execute(
            select(Candidate).where(Candidate.meeting_code == meeting_code).limit(1)
        )
        return result.scalar_one_or_none()

    async def update(self, candidate: Candidate, update_data: Dict[str, Any]) -> Candidate:
        """
        Apply column updates to a loaded candidate and commit once

        JSON columns must be given fresh objects; in-place mutation is not tracked.
        """
        for key, value in update_data.items():
            if hasattr(candidate, key):
                setattr(candidate, key, value)

        await self.session.commit()
        await self.session.refresh(candidate)

        logger.info(f"Updated candidate: {candidate.id}", extra={"candidate_id": candidate.id})
        return candidate

    async def delete(self, candidate_id: UUID) -> bool:
        """
        Delete a candidate and its applications and interview requests

        Dependents are removed explicitly in the same transaction since the
        foreign keys carry no cascade.

        Returns:
            True if deleted, False if not found
        """
        candidate = await self.get_by_id(candidate_id)
        if not candidate:
            return False

        await self._delete_dependents(candidate_id)
        await self.session.delete(candidate)
        await self.session.commit()

        logger.info(f"Deleted candidate: {candidate_id}", extra={"candidate_id": candidate_id})
        return True

    async def _delete_dependents(self, candidate_id: UUID) -> None:
        await self.session.execute(
            delete(JobApplication).where(JobApplication.candidate_id == candidate_id)
        )
        await self.session.execute(
            delete(InterviewRequest).where(InterviewRequest.candidate_id == candidate_id)
        )

    async def list_all(
        self,
        skip: int = 0,
        limit: int = 100,
        search: Optional[str] = None,
        status: Optional[str] = None,
        user_id: Optional[UUID] = None,
        order_by: str = "created_at"
    ) -> List[Candidate]:
        """
        List candidates with optional filters and pagination

        Args:
            skip: Number of records to skip
            limit: Maximum number of records to return
            search: Case-insensitive match on name or email
            status: Exact stage label
            user_id: Owning account
            order_by: Column to sort descending by

        Returns:
            List of candidates
        """
        stmt = select(Candidate)

        conditions = self._filters(search, status, user_id)
        if conditions:
            stmt = stmt.where(and_(*conditions))

        if hasattr(Candidate, order_by):
            stmt = stmt.order_by(getattr(Candidate, order_by).desc())

        stmt = stmt.offset(skip).limit(limit)
        result = await self.session.execute(stmt)
        candidates = result.scalars().all()

        logger.debug(f"Listed {len(candidates)} candidates")
        return list(candidates)

    async def count(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        user_id: Optional[UUID] = None
    ) -> int:
        stmt = select(func.count()).select_from(Candidate)
        conditions = self._filters(search, status, user_id)
        if conditions:
            stmt = stmt.where(and_(*conditions))

        result = await self.session.execute(stmt)
        return result.scalar() or 0

    @staticmethod
    def _filters(search: Optional[str], status: Optional[str], user_id: Optional[UUID]) -> list:
        conditions = []
        if search:
            pattern = f"%{search}%"
            conditions.append(or_(Candidate.name.ilike(pattern), Candidate.email.ilike(pattern)))
        if status:
            conditions.append(Candidate.status == status)
        if user_id:
            conditions.append(Candidate.user_id == user_id)
        return conditions

    async def get_all(self) -> List[Candidate]:
        """Every candidate, unpaginated; used by dashboard aggregation"""
        result = await self.session.execute(select(Candidate))
        return list(result.scalars().all())

    async def count_applications(self, candidate_ids: List[UUID]) -> Dict[UUID, int]:
        """Number of job applications per candidate id"""
        if not candidate_ids:
            return {}

        result = await self.session.execute(
            select(JobApplication.candidate_id, func.count())
            .where(JobApplication.candidate_id.in_(candidate_ids))
            .group_by(JobApplication.candidate_id)
        )
        return {candidate_id: count for candidate_id, count in result.all()}
