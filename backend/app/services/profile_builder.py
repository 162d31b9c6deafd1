"""Candidate profile construction, normalization and section merging

All functions here are pure: they never touch the database and never
mutate their arguments.
"""

import copy
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from backend.app.core.config import settings
from backend.app.core.exceptions import ValidationException
from backend.app.schemas.profile import SECTION_NAMES


@dataclass(frozen=True)
class ProfileHints:
    """Scalar candidate fields a placeholder profile is derived from"""
    position: Optional[str] = None
    ai_score: Optional[float] = None


def is_number(value: Any) -> bool:
    """True for ints and floats, excluding bools"""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def score_or_zero(value: Any) -> float:
    """A usable score: the value itself when numeric, non-zero and not NaN, else 0"""
    if is_number(value) and value and not math.isnan(value):
        return value
    return 0


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def normalize_candidate(record: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Return a copy of a candidate record whose profile has a numeric ``cv.score``

    When ``candidate_profile`` is present, a missing ``cv`` section is created
    and a non-numeric ``cv.score`` is replaced with the candidate's
    ``ai_score`` (or 0). Records without a profile, and ``None``, pass through.

    Args:
        record: Candidate record as a dict, or None

    Returns:
        Normalized deep copy, or None
    """
    if record is None:
        return None

    normalized = copy.deepcopy(record)
    profile = normalized.get("candidate_profile")
    if not isinstance(profile, dict):
        return normalized

    fallback = score_or_zero(normalized.get("ai_score"))
    cv = profile.get("cv")
    if isinstance(cv, dict):
        if not is_number(cv.get("score")):
            cv["score"] = fallback
    else:
        profile["cv"] = {"highlights": [], "keyInsights": [], "score": fallback}

    return normalized


def recommendation_for(ai_score: Optional[float]) -> str:
    score = score_or_zero(ai_score)
    if score > settings.RECOMMEND_STRONG_THRESHOLD:
        return "Strongly Recommend"
    if score > settings.RECOMMEND_THRESHOLD:
        return "Recommend"
    return "Consider"


def _weighted(ai_score: float, weight: float, fallback: int) -> int:
    if not ai_score:
        return fallback
    return round_half_up(ai_score * weight)


def _blank_profile() -> Dict[str, Any]:
    return {
        "personal": {
            "age": "",
            "nationality": "",
            "location": "",
            "dependents": "",
            "visa_status": "",
        },
        "career": {
            "experience": "",
            "past_roles": "",
            "progression": "",
        },
        "interview": {
            "duration": "",
            "work_eligibility": "",
            "id_check": "",
            "highlights": [],
            "overallFeedback": [],
        },
        "skills": {
            "technical": {"overallScore": 0, "skills": []},
            "soft": {"overallScore": 0, "skills": []},
            "culture": {"overallScore": 0, "skills": []},
        },
        "cv": {
            "highlights": [],
            "keyInsights": [],
            "score": 0,
        },
        "skillInsights": {
            "matchedSkills": [],
            "missingSkills": [],
            "skillGaps": [],
            "learningPaths": [],
        },
        "recommendation": "Consider",
    }


def _placeholder_profile(hints: ProfileHints) -> Dict[str, Any]:
    position = hints.position
    ai_score = score_or_zero(hints.ai_score)

    return {
        "personal": {
            "age": "28",
            "nationality": "Not specified",
            "location": f"{position} location" if position else "Not specified",
            "dependents": "None",
            "visa_status": "Not specified",
        },
        "career": {
            "experience": "5+ years",
            "past_roles": f"Junior {position}" if position else "Various roles",
            "progression": "Steady growth",
        },
        "interview": {
            "duration": "45 minutes",
            "work_eligibility": "Yes",
            "id_check": "Verified",
            "highlights": [
                {
                    "title": "Key moment #1: Communication Skills",
                    "content": "Excellent communication skills demonstrated during the technical discussion",
                    "timestamp": "00:12:35",
                    "mediaUrl": "",
                },
                {
                    "title": "Key moment #2: Problem Solving",
                    "content": "Demonstrated strong problem-solving ability by breaking down complex issues",
                    "timestamp": "00:25:40",
                    "mediaUrl": "",
                },
                {
                    "title": "Key moment #3: Technical Knowledge",
                    "content": "Showed proficiency in required technical areas with detailed explanations",
                    "timestamp": "00:37:15",
                    "mediaUrl": "",
                },
                {
                    "title": "Key moment #4: Job Understanding",
                    "content": "Clear understanding of job requirements and company goals",
                    "timestamp": "00:42:10",
                    "mediaUrl": "",
                },
            ],
            "overallFeedback": [
                {
                    "text": "Candidate performed well in the interview and showed good technical understanding and communication skills.",
                    "praise": True,
                },
                {
                    "text": "Candidate showed good problem-solving abilities and adaptability.",
                    "praise": True,
                },
                {
                    "text": "Candidate needs to improve their communication skills and project management abilities.",
                    "praise": False,
                },
            ],
        },
        "skills": {
            "technical": {
                "overallScore": _weighted(
                    ai_score, settings.PROFILE_TECHNICAL_WEIGHT, settings.PROFILE_TECHNICAL_FALLBACK
                ),
                "skills": [
                    {"name": "Programming", "score": 80},
                    {"name": "Problem Solving", "score": 85},
                    {"name": "Technical Knowledge", "score": 75},
                ],
            },
            "soft": {
                "overallScore": _weighted(
                    ai_score, settings.PROFILE_SOFT_WEIGHT, settings.PROFILE_SOFT_FALLBACK
                ),
                "skills": [
                    {"name": "Communication", "score": 80},
                    {"name": "Teamwork", "score": 85},
                    {"name": "Leadership", "score": 75},
                ],
            },
            "culture": {
                "overallScore": _weighted(
                    ai_score, settings.PROFILE_CULTURE_WEIGHT, settings.PROFILE_CULTURE_FALLBACK
                ),
                "skills": [
                    {"name": "Values Alignment", "score": 75},
                    {"name": "Adaptability", "score": 80},
                    {"name": "Growth Mindset", "score": 85},
                ],
            },
        },
        "cv": {
            "highlights": [
                f"{position or 'Professional'} with proven track record",
                "Strong technical background",
                "Excellent problem-solving abilities",
                "Team player with collaborative approach",
            ],
            "keyInsights": [
                "Technical expertise aligns with requirements",
                "Good cultural fit potential",
                "Demonstrates continuous learning",
                "Strong communication skills",
            ],
            "score": ai_score or settings.PROFILE_CV_SCORE_FALLBACK,
        },
        "skillInsights": {
            "matchedSkills": [
                "Communication",
                "Problem Solving",
                "Technical Knowledge",
                "Teamwork",
            ],
            "missingSkills": [
                "Leadership",
                "Project Management",
                "Advanced Technical Skills",
            ],
            "skillGaps": [
                {"name": "Leadership", "percentage": 60},
                {"name": "Project Management", "percentage": 45},
            ],
            "learningPaths": [
                {"title": "Advanced Leadership", "provider": "LinkedIn Learning (8 weeks)"},
                {"title": "Project Management Fundamentals", "provider": "Coursera (6 weeks)"},
            ],
        },
        "recommendation": recommendation_for(ai_score),
    }


def build_default_profile(hints: Optional[ProfileHints] = None) -> Dict[str, Any]:
    """
    Build a complete six-section profile

    With no hints the result is the blank structure (empty strings, empty
    lists, zero scores, "Consider"). With hints it is a plausible placeholder
    whose skill scores are derived from ``ai_score``.
    """
    if hints is None:
        return _blank_profile()
    return _placeholder_profile(hints)


def validate_section_name(section: str) -> None:
    if section not in SECTION_NAMES:
        raise ValidationException(
            f"Unknown profile section: {section}",
            details={"section": section, "allowed": list(SECTION_NAMES)}
        )


def apply_section_patch(
    profile: Optional[Dict[str, Any]],
    section: str,
    value: Any
) -> Dict[str, Any]:
    """
    Replace exactly one section of a profile

    A missing profile starts from the blank default. The other sections and
    ``recommendation`` are carried over untouched.

    Raises:
        ValidationException: ``section`` is not one of the six section keys
    """
    validate_section_name(section)

    merged = copy.deepcopy(profile) if isinstance(profile, dict) else build_default_profile(None)
    merged[section] = copy.deepcopy(value)
    return merged


def complete_profile(profile: Dict[str, Any]) -> Dict[str, Any]:
    """
    Fill sections missing from a generated profile with their blank defaults

    Sections that are present are kept exactly as given.
    """
    completed = _blank_profile()
    completed.update(copy.deepcopy(profile))
    return completed
