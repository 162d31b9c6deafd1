"""Render a candidate's profile into Markdown context for the chat assistant"""

from typing import Any, Dict, List, Optional


def format_number(value: Any) -> str:
    """Render whole floats without a trailing ``.0``"""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _bullets(items: List[Any]) -> str:
    return "".join(f"- {item}\n" for item in items) + "\n"


def _scored_bullets(skills: List[Dict[str, Any]]) -> str:
    return "".join(
        f"- {skill.get('name')}: {format_number(skill.get('score'))}/100\n" for skill in skills
    ) + "\n"


def build_candidate_context(candidate: Dict[str, Any], cv_summary: Optional[str] = None) -> str:
    """
    Build the candidate block of the chat system prompt

    Args:
        candidate: Normalized candidate record
        cv_summary: Narrative summary from the candidate's resume file, if any

    Returns:
        Markdown text
    """
    parts = ["# Candidate Information\n\n", f"## {candidate.get('name') or 'Candidate'}\n\n"]

    if candidate.get("email"):
        parts.append(f"**Email**: {candidate['email']}\n\n")
    if candidate.get("position"):
        parts.append(f"**Position**: {candidate['position']}\n\n")

    profile = candidate.get("candidate_profile") or {}

    cv = profile.get("cv")
    if cv:
        parts.append("## CV Highlights\n\n")
        if cv.get("highlights"):
            parts.append(_bullets(cv["highlights"]))
        if cv.get("keyInsights"):
            parts.append("## Key Insights\n\n")
            parts.append(_bullets(cv["keyInsights"]))
        if cv.get("score") is not None:
            parts.append(f"**CV Match Score**: {format_number(cv['score'])}/100\n\n")

    if cv_summary:
        parts.append("## CV Summary\n\n")
        parts.append(f"{cv_summary}\n\n")

    skills = profile.get("skills")
    if skills:
        parts.append("## Skills Assessment\n\n")
        technical = (skills.get("technical") or {}).get("skills")
        if technical:
            parts.append("### Technical Skills\n\n")
            parts.append(_scored_bullets(technical))
        soft = (skills.get("soft") or {}).get("skills")
        if soft:
            parts.append("### Soft Skills\n\n")
            parts.append(_scored_bullets(soft))

    insights = profile.get("skillInsights")
    if insights:
        if insights.get("matchedSkills"):
            parts.append("### Matched Skills\n\n")
            parts.append(_bullets(insights["matchedSkills"]))
        if insights.get("missingSkills"):
            parts.append("### Missing Skills\n\n")
            parts.append(_bullets(insights["missingSkills"]))

    career = profile.get("career")
    if career:
        if career.get("experience"):
            parts.append(f"**Experience**: {career['experience']}\n\n")
        if career.get("past_roles"):
            parts.append(f"**Past Roles**: {career['past_roles']}\n\n")
        if career.get("progression"):
            parts.append(f"**Career Progression**: {career['progression']}\n\n")

    return "".join(parts)
