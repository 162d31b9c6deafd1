"""Candidate service: CRUD plus profile editing"""

from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from backend.app.models.candidate import Candidate
from backend.app.repositories.candidate_repository import CandidateRepository
from backend.app.repositories.file_repository import FileRepository
from backend.app.services.profile_builder import (
    ProfileHints,
    apply_section_patch,
    build_default_profile,
    normalize_candidate,
    validate_section_name,
)
from backend.app.services.chat_context import build_candidate_context
from backend.app.core.exceptions import NotFoundException
from backend.app.core.logging import get_logger

logger = get_logger(__name__)


def candidate_to_record(candidate: Candidate) -> Dict[str, Any]:
    """Column values of a candidate row as a plain dict"""
    return {column.key: getattr(candidate, column.key) for column in Candidate.__table__.columns}


def derive_initials(name: str) -> str:
    words = [word for word in name.split() if word]
    return "".join(word[0].upper() for word in words[:2])


class CandidateService:
    """Business logic for candidates and their structured profiles

    Every read returns records passed through ``normalize_candidate``.
    """

    def __init__(self, candidate_repository: CandidateRepository, file_repository: FileRepository):
        self.candidate_repo = candidate_repository
        self.file_repo = file_repository

    async def _load(self, candidate_id: UUID, for_update: bool = False) -> Candidate:
        candidate = await self.candidate_repo.get_by_id(candidate_id, for_update=for_update)
        if not candidate:
            raise NotFoundException(f"Candidate not found: {candidate_id}")
        return candidate

    @staticmethod
    def _read(candidate: Candidate) -> Dict[str, Any]:
        return normalize_candidate(candidate_to_record(candidate))

    async def create_candidate(self, candidate_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a candidate; initials are derived from the name when not given

        Candidates start without a structured profile.
        """
        data = dict(candidate_data)
        if not data.get("initials"):
            data["initials"] = derive_initials(data["name"])
        data.pop("candidate_profile", None)

        candidate = await self.candidate_repo.create(data)
        return self._read(candidate)

    async def get_candidate(self, candidate_id: UUID) -> Dict[str, Any]:
        return self._read(await self._load(candidate_id))

    async def get_candidate_by_meeting_code(self, meeting_code: str) -> Dict[str, Any]:
        candidate = await self.candidate_repo.get_by_meeting_code(meeting_code)
        if not candidate:
            raise NotFoundException(f"No candidate with meeting code: {meeting_code}")
        return self._read(candidate)

    async def list_candidates(
        self,
        skip: int = 0,
        limit: int = 100,
        search: Optional[str] = None,
        status: Optional[str] = None,
        user_id: Optional[UUID] = None
    ) -> Tuple[List[Dict[str, Any]], int]:
        """
        List candidates with pagination

        Returns:
            Tuple of (normalized records, total matching count)
        """
        candidates = await self.candidate_repo.list_all(
            skip=skip, limit=limit, search=search, status=status, user_id=user_id
        )
        total = await self.candidate_repo.count(search=search, status=status, user_id=user_id)
        return [self._read(candidate) for candidate in candidates], total

    async def update_candidate(self, candidate_id: UUID, updates: Dict[str, Any]) -> Dict[str, Any]:
        """Update scalar fields; the structured profile is not editable here"""
        candidate = await self._load(candidate_id)
        updates = {key: value for key, value in updates.items() if key != "candidate_profile"}
        if not updates:
            return self._read(candidate)

        candidate = await self.candidate_repo.update(candidate, updates)
        return self._read(candidate)

    async def delete_candidate(self, candidate_id: UUID) -> None:
        """Delete a candidate with its applications and interview requests"""
        deleted = await self.candidate_repo.delete(candidate_id)
        if not deleted:
            raise NotFoundException(f"Candidate not found: {candidate_id}")

    async def bulk_delete_candidates(self, candidate_ids: List[UUID]) -> Dict[str, Any]:
        """
        Delete several candidates; unknown ids are reported, not raised

        Returns:
            Dict with success flag, message, deleted_count and failed_ids
        """
        deleted_count = 0
        failed_ids: List[UUID] = []

        for candidate_id in candidate_ids:
            if await self.candidate_repo.delete(candidate_id):
                deleted_count += 1
            else:
                failed_ids.append(candidate_id)

        noun = "candidate" if deleted_count == 1 else "candidates"
        if not failed_ids:
            message = f"Successfully deleted {deleted_count} {noun}"
        else:
            failed_noun = "candidate" if len(failed_ids) == 1 else "candidates"
            message = f"Deleted {deleted_count} {noun}, but failed to delete {len(failed_ids)} {failed_noun}"
            logger.warning(message)

        return {
            "success": not failed_ids or deleted_count > 0,
            "message": message,
            "deleted_count": deleted_count,
            "failed_ids": failed_ids,
        }

    async def replace_profile(self, candidate_id: UUID, profile: Dict[str, Any]) -> Dict[str, Any]:
        """Replace the whole structured profile"""
        candidate = await self._load(candidate_id, for_update=True)
        candidate = await self.candidate_repo.update(candidate, {"candidate_profile": dict(profile)})
        return self._read(candidate)

    async def patch_profile_section(
        self,
        candidate_id: UUID,
        section: str,
        value: Any
    ) -> Dict[str, Any]:
        """
        Replace one section of a candidate's profile in a single commit

        A candidate without a profile gets the blank default first.

        Raises:
            ValidationException: Unknown section name
            NotFoundException: Unknown candidate; nothing is written
        """
        validate_section_name(section)
        candidate = await self._load(candidate_id, for_update=True)

        merged = apply_section_patch(candidate.candidate_profile, section, value)
        candidate = await self.candidate_repo.update(candidate, {"candidate_profile": merged})

        logger.info(
            f"Patched profile section {section}",
            extra={"candidate_id": candidate_id}
        )
        return self._read(candidate)

    async def generate_default_profile(self, candidate_id: UUID) -> Dict[str, Any]:
        """Give a profile-less candidate a placeholder profile; no-op otherwise"""
        candidate = await self._load(candidate_id, for_update=True)
        if candidate.candidate_profile:
            return self._read(candidate)

        hints = ProfileHints(position=candidate.position, ai_score=candidate.ai_score)
        candidate = await self.candidate_repo.update(
            candidate, {"candidate_profile": build_default_profile(hints)}
        )

        logger.info("Generated default profile", extra={"candidate_id": candidate_id})
        return self._read(candidate)

    async def get_experience_and_skills(self, candidate_id: UUID) -> Dict[str, Any]:
        """
        Project experience and skills out of the profile for table views

        Skills are technical skill names followed by matched skills, de-duplicated
        in first-seen order. Unknown candidates and empty projections yield None.
        """
        candidate = await self.candidate_repo.get_by_id(candidate_id)
        if not candidate:
            return {"experience": None, "skills": None}

        profile = candidate.candidate_profile or {}
        experience = (profile.get("career") or {}).get("experience") or None

        names: List[str] = []
        technical = ((profile.get("skills") or {}).get("technical") or {}).get("skills") or []
        names.extend(
            skill["name"] for skill in technical if isinstance(skill, dict) and skill.get("name")
        )
        names.extend((profile.get("skillInsights") or {}).get("matchedSkills") or [])

        skills = list(dict.fromkeys(names))
        return {"experience": experience, "skills": skills or None}

    async def get_chat_context(self, candidate_id: UUID) -> str:
        """Markdown context for the recruiter chat assistant"""
        candidate = await self._load(candidate_id)
        record = self._read(candidate)

        resume = await self.file_repo.get_resume_for_candidate(candidate.id, candidate.cv_file_id)
        cv_summary = resume.cv_summary if resume else None
        return build_candidate_context(record, cv_summary)
