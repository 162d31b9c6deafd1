"""Candidate profile schemas

The stored profile keeps the key casing produced by the analysis prompt:
snake_case inside ``personal``/``career``/``interview`` and camelCase
everywhere else. Python attribute names are snake_case throughout and the
camelCase keys are exposed as aliases.
"""

from typing import List, Optional, Literal
from pydantic import BaseModel, Field, ConfigDict


Recommendation = Literal["Strongly Recommend", "Recommend", "Consider"]

SECTION_NAMES = ("personal", "career", "interview", "skills", "cv", "skillInsights")


class ProfileModel(BaseModel):
    """Base for profile sections: accept either key style, keep unknown keys"""

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class PersonalSection(ProfileModel):
    age: Optional[str] = None
    nationality: Optional[str] = None
    location: Optional[str] = None
    dependents: Optional[str] = None
    visa_status: Optional[str] = None


class CareerSection(ProfileModel):
    experience: Optional[str] = None
    past_roles: Optional[str] = None
    progression: Optional[str] = None


class InterviewHighlight(ProfileModel):
    title: str
    content: str
    timestamp: str
    media_url: Optional[str] = Field(None, alias="mediaUrl")


class FeedbackItem(ProfileModel):
    text: str
    praise: bool


class InterviewSection(ProfileModel):
    duration: Optional[str] = None
    work_eligibility: Optional[str] = None
    id_check: Optional[str] = None
    highlights: List[InterviewHighlight] = Field(default_factory=list)
    overall_feedback: List[FeedbackItem] = Field(default_factory=list, alias="overallFeedback")


class SkillScore(ProfileModel):
    name: str
    score: float = Field(..., ge=0, le=100)


class SkillCategory(ProfileModel):
    overall_score: int = Field(0, ge=0, le=100, alias="overallScore")
    skills: List[SkillScore] = Field(default_factory=list)


class SkillsSection(ProfileModel):
    technical: SkillCategory = Field(default_factory=SkillCategory)
    soft: SkillCategory = Field(default_factory=SkillCategory)
    culture: SkillCategory = Field(default_factory=SkillCategory)


class CVSection(ProfileModel):
    highlights: List[str] = Field(default_factory=list)
    key_insights: List[str] = Field(default_factory=list, alias="keyInsights")
    score: Optional[float] = Field(None, ge=0, le=100)


class SkillGap(ProfileModel):
    name: str
    percentage: float


class LearningPath(ProfileModel):
    title: str
    provider: str


class SkillInsightsSection(ProfileModel):
    matched_skills: List[str] = Field(default_factory=list, alias="matchedSkills")
    missing_skills: List[str] = Field(default_factory=list, alias="missingSkills")
    skill_gaps: List[SkillGap] = Field(default_factory=list, alias="skillGaps")
    learning_paths: List[LearningPath] = Field(default_factory=list, alias="learningPaths")


class CandidateProfile(ProfileModel):
    """The six-section structured analysis plus a recommendation label"""

    personal: PersonalSection
    career: CareerSection
    interview: InterviewSection
    skills: SkillsSection
    cv: CVSection
    skill_insights: SkillInsightsSection = Field(..., alias="skillInsights")
    recommendation: Recommendation

    model_config = ConfigDict(
        populate_by_name=True,
        extra="allow",
        json_schema_extra={
            "example": {
                "personal": {
                    "age": "31",
                    "nationality": "Irish",
                    "location": "Dublin",
                    "dependents": "None",
                    "visa_status": "Not required"
                },
                "career": {
                    "experience": "7 years",
                    "past_roles": "Backend Engineer, Tech Lead",
                    "progression": "Rapid"
                },
                "interview": {
                    "duration": "",
                    "work_eligibility": "",
                    "id_check": "",
                    "highlights": [],
                    "overallFeedback": []
                },
                "skills": {
                    "technical": {"overallScore": 86, "skills": [{"name": "Python", "score": 90}]},
                    "soft": {"overallScore": 80, "skills": [{"name": "Communication", "score": 80}]},
                    "culture": {"overallScore": 78, "skills": [{"name": "Teamwork", "score": 78}]}
                },
                "cv": {
                    "highlights": ["Led migration to event-driven architecture"],
                    "keyInsights": ["Strong distributed systems background"],
                    "score": 84
                },
                "skillInsights": {
                    "matchedSkills": ["Python"],
                    "missingSkills": ["Kubernetes"],
                    "skillGaps": [{"name": "Kubernetes", "percentage": 40}],
                    "learningPaths": [{"title": "CKA Prep", "provider": "Linux Foundation"}]
                },
                "recommendation": "Recommend"
            }
        }
    )


SECTION_MODELS = {
    "personal": PersonalSection,
    "career": CareerSection,
    "interview": InterviewSection,
    "skills": SkillsSection,
    "cv": CVSection,
    "skillInsights": SkillInsightsSection,
}


def dump_profile_model(model: BaseModel) -> dict:
    """Serialize a validated profile model back to its stored key casing"""
    return model.model_dump(by_alias=True)
