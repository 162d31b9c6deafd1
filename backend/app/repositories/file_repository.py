"""Stored file repository, including the analysis token handshake"""

from typing import List, Optional, Dict, Any
from uuid import UUID
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.models.file import CandidateFile, FileStatus
from backend.app.core.exceptions import ConflictException, NotFoundException
from backend.app.core.logging import get_logger

logger = get_logger(__name__)


class FileRepository:
    """Repository for candidate file metadata"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, file_data: Dict[str, Any]) -> CandidateFile:
        candidate_file = CandidateFile(**file_data)
        self.session.add(candidate_file)
        await self.session.commit()
        await self.session.refresh(candidate_file)

        logger.info(
            f"Created file record: {candidate_file.id}",
            extra={"file_id": candidate_file.id, "candidate_id": candidate_file.candidate_id}
        )
        return candidate_file

    async def get_by_id(self, file_id: UUID) -> Optional[CandidateFile]:
        result = await self.session.execute(
            select(CandidateFile).where(CandidateFile.id == file_id)
        )
        return result.scalar_one_or_none()

    async def list_for_candidate(self, candidate_id: UUID) -> List[CandidateFile]:
        result = await self.session.execute(
            select(CandidateFile)
            .where(CandidateFile.candidate_id == candidate_id)
            .order_by(CandidateFile.uploaded_at.desc())
        )
        return list(result.scalars().all())

    async def get_resume_for_candidate(
        self,
        candidate_id: UUID,
        cv_file_id: Optional[UUID] = None
    ) -> Optional[CandidateFile]:
        """
        Find a candidate's resume

        The file linked through ``cv_file_id`` wins; otherwise the most recent
        file in the ``resume`` category.
        """
        if cv_file_id:
            linked = await self.get_by_id(cv_file_id)
            if linked:
                return linked

        result = await self.session.execute(
            select(CandidateFile)
            .where(and_(
                CandidateFile.candidate_id == candidate_id,
                CandidateFile.file_category == "resume"
            ))
            .order_by(CandidateFile.uploaded_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def reserve_analysis_id(self, file_id: UUID, analysis_id: str) -> CandidateFile:
        """
        Phase one of the handshake: claim ``analysis_id`` for a file

        Re-reserving the same token on the same file is a no-op.

        Raises:
            ConflictException: Token already owned by another file
            NotFoundException: File does not exist
        """
        result = await self.session.execute(
            select(CandidateFile).where(CandidateFile.analysis_id == analysis_id)
        )
        owners = list(result.scalars().all())
        if any(owner.id != file_id for owner in owners):
            raise ConflictException(
                f"Analysis id {analysis_id} is already reserved by another file",
                details={"analysis_id": analysis_id}
            )

        candidate_file = await self.get_by_id(file_id)
        if candidate_file is None:
            raise NotFoundException(f"File not found: {file_id}")

        if candidate_file.analysis_id != analysis_id:
            candidate_file.analysis_id = analysis_id
            await self.session.commit()
            await self.session.refresh(candidate_file)

        logger.debug(
            "Reserved analysis id",
            extra={"file_id": file_id, "analysis_id": analysis_id}
        )
        return candidate_file

    async def resolve_candidate_id(self, analysis_id: str) -> Optional[UUID]:
        """
        Phase two of the handshake: map a reserved token to its candidate

        Returns None when no file holds the token or the file has no owner.

        Raises:
            ConflictException: More than one file holds the token
        """
        result = await self.session.execute(
            select(CandidateFile.candidate_id).where(CandidateFile.analysis_id == analysis_id)
        )
        rows = result.all()

        if len(rows) > 1:
            raise ConflictException(
                f"Analysis id {analysis_id} resolves to {len(rows)} files",
                details={"analysis_id": analysis_id}
            )
        if not rows:
            return None
        return rows[0][0]

    async def update_status(self, candidate_file: CandidateFile, status: FileStatus) -> CandidateFile:
        candidate_file.status = status.value
        await self.session.commit()
        await self.session.refresh(candidate_file)

        logger.info(
            f"File status -> {status.value}",
            extra={"file_id": candidate_file.id, "analysis_id": candidate_file.analysis_id}
        )
        return candidate_file

    async def update_cv_summary(self, file_id: UUID, summary: str) -> bool:
        """
        Overwrite the stored CV summary

        Returns:
            True if updated, False if the file does not exist
        """
        candidate_file = await self.get_by_id(file_id)
        if candidate_file is None:
            return False

        candidate_file.cv_summary = summary
        await self.session.commit()
        return True
