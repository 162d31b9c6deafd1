"""CV analysis pipeline: stored resume -> Claude -> structured candidate profile"""

import base64
import json
import re
import secrets
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from backend.app.core.config import settings
from backend.app.core.exceptions import (
    BackgroundJobException,
    NotFoundException,
    ParseException,
    SmarterAIException,
    ValidationException,
)
from backend.app.core.logging import get_logger
from backend.app.core.task_queue import TaskQueue
from backend.app.models.file import CandidateFile, FileStatus
from backend.app.repositories.candidate_repository import CandidateRepository
from backend.app.repositories.file_repository import FileRepository
from backend.app.repositories.prompt_repository import PromptRepository
from backend.app.services.chat_context import format_number
from backend.app.services.llm_service import TextGenerationService, document_block, text_block
from backend.app.services.profile_builder import complete_profile, score_or_zero
from backend.app.services.s3_service import S3Service

logger = get_logger(__name__)

CV_ANALYSIS_PROMPT_NAME = "cv_analysis"
CV_SUMMARY_TASK = "cv_summary"
SUMMARY_PLACEHOLDER = "Generating AI summary..."
SUMMARY_ERROR_PREFIX = "Error generating AI summary: "

ANALYSIS_SYSTEM = (
    "You are an expert AI recruiter assistant. "
    "Analyze CVs and provide structured feedback in JSON format."
)
ANALYSIS_REQUEST_SUFFIX = (
    "\n\nPlease analyze this CV and provide your assessment in the JSON format described above."
)
SUMMARY_SYSTEM = "You are an expert in summarizing candidate profiles for recruitment purposes."

DEFAULT_CV_ANALYSIS_PROMPT = """You are an expert AI recruiter assistant that analyzes candidate CVs. I will provide you with CV/resume content, and I need you to:

1. Extract and evaluate the candidate's technical skills
2. Assess their soft skills based on achievements and experience
3. Identify cultural fit indicators
4. Extract educational background and career progression
5. Highlight the most impressive achievements
6. Provide key insights about the candidate's strengths and weaknesses
7. Estimate their competence in various areas with numerical scores

Format your response as a JSON object with the following structure:
{
  "candidateProfile": {
    "personal": {
      "age": "estimated or extracted age or 'Not specified'",
      "nationality": "extracted or 'Not specified'",
      "location": "extracted location or 'Not specified'",
      "dependents": "any dependent information or 'Not specified'",
      "visa_status": "any visa information or 'Not specified'"
    },
    "career": {
      "experience": "years of experience extracted from CV",
      "past_roles": "brief summary of previous roles",
      "progression": "assessment of career progression (steady, rapid, etc.)"
    },
    "interview": {
      "duration": "",
      "work_eligibility": "",
      "id_check": "",
      "highlights": [],
      "overallFeedback": []
    },
    "skills": {
      "technical": {
        "overallScore": 85,
        "skills": [
          {"name": "JavaScript", "score": 90},
          {"name": "React", "score": 85}
        ]
      },
      "soft": {
        "overallScore": 80,
        "skills": [
          {"name": "Communication", "score": 85},
          {"name": "Leadership", "score": 75}
        ]
      },
      "culture": {
        "overallScore": 75,
        "skills": [
          {"name": "Teamwork", "score": 80},
          {"name": "Adaptability", "score": 70}
        ]
      }
    },
    "cv": {
      "highlights": [
        "Key achievement 1",
        "Key achievement 2"
      ],
      "keyInsights": [
        "Important insight about candidate 1",
        "Important insight about candidate 2"
      ],
      "score": 82
    },
    "skillInsights": {
      "matchedSkills": ["JavaScript", "React"],
      "missingSkills": ["DevOps", "GraphQL"],
      "skillGaps": [
        {"name": "Cloud Computing", "percentage": 65},
        {"name": "Mobile Development", "percentage": 45}
      ],
      "learningPaths": [
        {"title": "Advanced React Patterns", "provider": "Frontend Masters"},
        {"title": "Cloud Certification", "provider": "AWS"}
      ]
    },
    "recommendation": "Strongly Recommend | Recommend | Consider"
  }
}

Ensure the JSON is valid, with no trailing commas. Base all evaluations strictly on the CV content."""

# Greedy on purpose: spans from the first "{" to the last "}" in the reply.
# Brace-delimited prose before the payload makes the span unparseable.
JSON_SPAN = re.compile(r"\{[\s\S]*\}")


def new_analysis_id() -> str:
    """Fresh correlation token, e.g. ``analysis_1718000000000_9f2c1a7b``"""
    return f"analysis_{int(time.time() * 1000)}_{secrets.token_hex(4)}"


def extract_candidate_profile(reply: str) -> Dict[str, Any]:
    """
    Pull the JSON payload out of a free-text analysis reply

    The payload is the greedy span from the first ``{`` to the last ``}``. It
    must decode to an object holding a ``candidateProfile`` object.

    Raises:
        ParseException: No span, invalid JSON, or missing ``candidateProfile``
    """
    match = JSON_SPAN.search(reply or "")
    if not match:
        raise ParseException("No JSON found in analysis reply")

    try:
        parsed = json.loads(match.group())
    except json.JSONDecodeError as e:
        raise ParseException(
            f"Failed to parse analysis reply: {e.msg}",
            details={"position": e.pos}
        )

    if not isinstance(parsed, dict) or not isinstance(parsed.get("candidateProfile"), dict):
        raise ParseException("Analysis reply is missing candidateProfile")
    return parsed


def _or_na(value: Any) -> str:
    return format_number(value) if value else "N/A"


def _scored_list(skills: List[Dict[str, Any]]) -> str:
    rendered = ", ".join(
        f"{skill.get('name')} ({format_number(skill.get('score'))})" for skill in skills or []
    )
    return rendered or "None"


def build_summary_prompt(profile: Dict[str, Any]) -> str:
    """Deterministic summary request built from a profile's scalar fields"""
    personal = profile.get("personal") or {}
    career = profile.get("career") or {}
    skills = profile.get("skills") or {}
    cv = profile.get("cv") or {}
    technical = skills.get("technical") or {}
    soft = skills.get("soft") or {}
    culture = skills.get("culture") or {}

    return (
        "You are an expert AI recruiter assistant. I have analyzed a candidate's CV and need a "
        "detailed, natural-language summary of the key points for quick reference.\n"
        "Use the following candidate profile data to create a professional summary in "
        "approximately 10 sentences.\n"
        "Cover the candidate's background, key skills, career progression, notable achievements, "
        "strengths, areas for improvement, cultural fit, key highlights from the CV, key insights "
        "derived from the analysis, and overall recommendation.\n"
        "Ensure the summary is specific to this candidate, avoiding generic statements, and "
        "provides a comprehensive overview.\n\n"
        "Candidate Profile Data:\n"
        f"- Personal: Age: {_or_na(personal.get('age'))}, "
        f"Nationality: {_or_na(personal.get('nationality'))}, "
        f"Location: {_or_na(personal.get('location'))}\n"
        f"- Career: Experience: {_or_na(career.get('experience'))}, "
        f"Past Roles: {_or_na(career.get('past_roles'))}, "
        f"Progression: {_or_na(career.get('progression'))}\n"
        f"- Skills: Technical (Score: {format_number(technical.get('overallScore'))}): "
        f"{_scored_list(technical.get('skills'))}, "
        f"Soft (Score: {format_number(soft.get('overallScore'))}): {_scored_list(soft.get('skills'))}, "
        f"Cultural Fit (Score: {format_number(culture.get('overallScore'))}): "
        f"{_scored_list(culture.get('skills'))}\n"
        f"- CV Highlights: {'; '.join(cv.get('highlights') or []) or 'None'}\n"
        f"- Key Insights: {'; '.join(cv.get('keyInsights') or []) or 'None'}\n"
        f"- Recommendation: {_or_na(profile.get('recommendation'))}\n"
        f"- Overall CV Score: {_or_na(cv.get('score'))}\n\n"
        "Provide the summary as plain text without any JSON formatting or additional headers."
    )


class CVAnalysisService:
    """
    Runs the resume analysis pipeline

    The primary path (fetch, generate, parse, persist) is awaited by the
    caller. The narrative summary is handed to the task queue and written
    later by a worker, so readers may see ``SUMMARY_PLACEHOLDER`` until then.
    """

    def __init__(
        self,
        file_repository: FileRepository,
        candidate_repository: CandidateRepository,
        prompt_repository: PromptRepository,
        storage: S3Service,
        generator: TextGenerationService,
        task_queue: TaskQueue
    ):
        self.file_repo = file_repository
        self.candidate_repo = candidate_repository
        self.prompt_repo = prompt_repository
        self.storage = storage
        self.generator = generator
        self.task_queue = task_queue

    async def analyze_stored_cv(self, file_id: UUID, analysis_id: str) -> Dict[str, Any]:
        """
        Analyze a stored resume and persist the result on its candidate

        A failure rolls the session back before the file is marked as errored,
        which expires every other instance the caller loaded on that session.
        Summary scheduling runs after the file is analyzed and never fails
        the call.

        Args:
            file_id: Stored file id
            analysis_id: Correlation token previously reserved for the file

        Returns:
            Dict with file_id, analysis_id, status, candidate_id, ai_score
            and candidate_profile

        Raises:
            NotFoundException: Unknown file, or its object is missing from storage
            ValidationException: ``analysis_id`` does not match the file's token
            ParseException: Reply did not contain a usable profile
            UpstreamException: Text generation or storage failed
        """
        candidate_file = await self.file_repo.get_by_id(file_id)
        if candidate_file is None:
            raise NotFoundException(f"File not found: {file_id}")

        log_extra = {"file_id": file_id, "analysis_id": analysis_id}
        logger.info("Starting stored CV analysis", extra=log_extra)

        try:
            if candidate_file.analysis_id != analysis_id:
                raise ValidationException(
                    "Analysis ID mismatch",
                    details={"file_id": str(file_id), "analysis_id": analysis_id}
                )

            await self.file_repo.update_status(candidate_file, FileStatus.ANALYZING)

            content = await self.storage.download_cv(candidate_file.storage_key)
            document_b64 = base64.b64encode(content).decode("ascii")

            outcome = await self.analyze_document(
                analysis_id,
                document_b64,
                cv_file_id=file_id,
                media_type=candidate_file.file_type or "application/pdf"
            )

            await self.file_repo.update_status(candidate_file, FileStatus.ANALYZED)
        except Exception:
            logger.error("Stored CV analysis failed", extra=log_extra, exc_info=True)
            await self._mark_error(candidate_file)
            raise

        logger.info("Stored CV analysis completed", extra=log_extra)
        await self._start_summary(file_id, outcome["candidate_profile"])

        return {
            "file_id": file_id,
            "analysis_id": analysis_id,
            "status": FileStatus.ANALYZED.value,
            **outcome,
        }

    async def analyze_document(
        self,
        analysis_id: str,
        document_b64: str,
        cv_file_id: Optional[UUID] = None,
        media_type: str = "application/pdf"
    ) -> Dict[str, Any]:
        """
        Generate, parse and persist a profile for an already-encoded document

        The owning candidate is found through ``analysis_id``. When none
        resolves, nothing is written and ``candidate_id`` is None.

        Returns:
            Dict with candidate_id, ai_score and candidate_profile
        """
        instruction = await self._analysis_prompt()
        reply = await self.generator.complete(
            system=ANALYSIS_SYSTEM,
            content=[
                document_block(document_b64, media_type),
                text_block(instruction + ANALYSIS_REQUEST_SUFFIX),
            ],
            max_tokens=settings.CV_ANALYSIS_MAX_TOKENS,
        )

        parsed = extract_candidate_profile(reply)
        profile = complete_profile(parsed["candidateProfile"])
        ai_score = score_or_zero((profile.get("cv") or {}).get("score"))

        candidate_id = await self.file_repo.resolve_candidate_id(analysis_id)
        candidate = None
        if candidate_id is not None:
            candidate = await self.candidate_repo.get_by_id(candidate_id, for_update=True)

        if candidate is None:
            logger.warning(
                "No candidate resolves analysis id; profile not stored",
                extra={"analysis_id": analysis_id}
            )
            return {"candidate_id": None, "ai_score": ai_score, "candidate_profile": profile}

        updates: Dict[str, Any] = {
            "candidate_profile": profile,
            "ai_score": ai_score,
            "last_activity": datetime.now(timezone.utc).isoformat(),
        }
        if cv_file_id is not None:
            updates["cv_file_id"] = cv_file_id
        await self.candidate_repo.update(candidate, updates)

        logger.info(
            f"Stored analysis (ai_score={format_number(ai_score)})",
            extra={"analysis_id": analysis_id, "candidate_id": candidate_id}
        )
        return {"candidate_id": candidate_id, "ai_score": ai_score, "candidate_profile": profile}

    async def generate_cv_summary(self, file_id: UUID, profile: Dict[str, Any]) -> str:
        """
        Write the narrative summary for a file; failures become the stored text

        Never raises for generation errors.

        Returns:
            The text written to ``cv_summary``
        """
        try:
            reply = await self.generator.complete(
                system=SUMMARY_SYSTEM,
                content=build_summary_prompt(profile),
                max_tokens=settings.CV_SUMMARY_MAX_TOKENS,
            )
            summary = reply.strip()
        except Exception as e:
            message = e.message if isinstance(e, SmarterAIException) else str(e)
            logger.error(
                f"CV summary generation failed: {message}",
                extra={"file_id": file_id},
                exc_info=True
            )
            summary = f"{SUMMARY_ERROR_PREFIX}{message}"

        if not await self.file_repo.update_cv_summary(file_id, summary):
            logger.warning("File vanished before its summary was written", extra={"file_id": file_id})
        return summary

    async def _analysis_prompt(self) -> str:
        try:
            template = await self.prompt_repo.get_by_name(CV_ANALYSIS_PROMPT_NAME)
        except SQLAlchemyError as e:
            logger.warning(f"Could not read {CV_ANALYSIS_PROMPT_NAME} prompt, using default: {e}")
            await self.prompt_repo.session.rollback()
            return DEFAULT_CV_ANALYSIS_PROMPT

        if template and template.content:
            return template.content
        return DEFAULT_CV_ANALYSIS_PROMPT

    async def _start_summary(self, file_id: UUID, profile: Dict[str, Any]) -> None:
        """Write the summary placeholder and queue the job; failures are only logged"""
        try:
            await self.file_repo.update_cv_summary(file_id, SUMMARY_PLACEHOLDER)
            try:
                job_id = await self.task_queue.enqueue_task(
                    CV_SUMMARY_TASK,
                    {"file_id": str(file_id), "profile": profile}
                )
            except BackgroundJobException as e:
                logger.error(f"Could not schedule CV summary: {e.message}", extra={"file_id": file_id})
                await self.file_repo.update_cv_summary(file_id, f"{SUMMARY_ERROR_PREFIX}{e.message}")
                return
        except SQLAlchemyError:
            logger.error("Could not record CV summary state", extra={"file_id": file_id}, exc_info=True)
            await self.file_repo.session.rollback()
            return

        logger.info("Scheduled CV summary", extra={"file_id": file_id, "job_id": job_id})

    async def _mark_error(self, candidate_file: CandidateFile) -> None:
        await self.file_repo.session.rollback()
        await self.file_repo.update_status(candidate_file, FileStatus.ERROR)
