"""
Career Guidance Service - recommendation, skill-gap and roadmap orchestration.

Flow for every operation:
1. Validate the input (ValidationError before any upstream call)
2. Ask the Groq model for JSON
3. Validate the JSON against the result schema
4. Return the result model

Any upstream failure - transport error, empty reply, unparseable JSON or a
reply missing required fields - becomes UpstreamGenerationError. Results are
all-or-nothing and are not stored.
"""

import json
from typing import List, Optional, Type, TypeVar

from openai import OpenAIError
from pydantic import BaseModel, ValidationError as SchemaValidationError
from loguru import logger

from careercatalyst.core.errors import UpstreamGenerationError, ValidationError
from careercatalyst.services.groq_client import GroqClient, get_groq_client
from careercatalyst.schemas.schemas import (
    ExperiencedRecommendationResult,
    GapAnalysisResult,
    RecommendationResult,
    RoadmapResult,
)

ResultT = TypeVar("ResultT", bound=BaseModel)


def clean_skills(skills: Optional[List[str]]) -> List[str]:
    """Strip blanks and duplicates, keeping first-seen order."""
    seen = set()
    cleaned = []
    for skill in skills or []:
        if not isinstance(skill, str):
            continue
        name = skill.strip()
        if name and name.lower() not in seen:
            seen.add(name.lower())
            cleaned.append(name)
    return cleaned


def _unwrap(payload, key: str):
    """Upstream replies are either {key: {...}} or the bare object."""
    if isinstance(payload, dict) and isinstance(payload.get(key), dict):
        return payload[key]
    return payload


class CareerGuidanceService:
    """
    Orchestrates the three generation steps of the career pipeline.
    """

    def __init__(self, ai_client: Optional[GroqClient] = None):
        self.ai_client = ai_client or get_groq_client()

    def _generate(self, operation: str, model: Type[ResultT], call, unwrap_key: Optional[str] = None) -> ResultT:
        try:
            payload = call()
            if unwrap_key:
                payload = _unwrap(payload, unwrap_key)
            return model.model_validate(payload)
        except UpstreamGenerationError:
            logger.error(f"{operation}: empty response from Groq")
            raise
        except OpenAIError as e:
            logger.error(f"{operation}: Groq API error: {e}")
            raise UpstreamGenerationError() from e
        except json.JSONDecodeError as e:
            logger.error(f"{operation}: response is not valid JSON: {e}")
            raise UpstreamGenerationError() from e
        except SchemaValidationError as e:
            logger.error(f"{operation}: response does not match schema: {e.error_count()} errors\n{e}")
            raise UpstreamGenerationError() from e

    def get_career_recommendations(
        self,
        skills: List[str],
        interested_roles: Optional[List[str]] = None,
        salary_preferences: Optional[float] = None,
        work_mode: Optional[str] = None,
        audience: Optional[str] = None,
    ) -> RecommendationResult:
        """Role suggestions for a skill set. Fresher preferences are optional."""
        skills = clean_skills(skills)
        if not skills:
            raise ValidationError("Please add skills to get recommendations")

        return self._generate(
            "career recommendations",
            RecommendationResult,
            lambda: self.ai_client.get_career_recommendations(
                skills,
                interested_roles=clean_skills(interested_roles),
                salary_preferences=salary_preferences,
                work_mode=work_mode,
                audience=audience,
            ),
        )

    def get_experienced_recommendations(
        self,
        skills: List[str],
        experience_years: Optional[float] = None,
        reason_for_switch: Optional[str] = None,
        work_mode: Optional[str] = None,
    ) -> ExperiencedRecommendationResult:
        """Career-switch suggestions with transition details."""
        skills = clean_skills(skills)
        if not skills:
            raise ValidationError("Please add skills to get recommendations")

        return self._generate(
            "experienced recommendations",
            ExperiencedRecommendationResult,
            lambda: self.ai_client.get_experienced_recommendations(
                skills,
                experience_years=experience_years,
                reason_for_switch=reason_for_switch,
                work_mode=work_mode,
            ),
        )

    def get_skill_gap_analysis(
        self,
        current_skills: List[str],
        target_role: str,
        audience: Optional[str] = None,
        transition: bool = False,
    ) -> GapAnalysisResult:
        """Strengths and missing skills for a target role. current_skills may be empty."""
        target_role = (target_role or "").strip()
        if not target_role:
            raise ValidationError("Target role is required")

        return self._generate(
            "skill gap analysis",
            GapAnalysisResult,
            lambda: self.ai_client.get_skill_gap_analysis(
                clean_skills(current_skills), target_role, audience=audience, transition=transition
            ),
            unwrap_key="analysis",
        )

    def generate_learning_roadmap(
        self,
        current_skills: List[str],
        target_skills: List[str],
        audience: Optional[str] = None,
    ) -> RoadmapResult:
        """Phased plan for acquiring target_skills."""
        target_skills = clean_skills(target_skills)
        if not target_skills:
            raise ValidationError("Target skills must be provided as a non-empty array")

        return self._generate(
            "learning roadmap",
            RoadmapResult,
            lambda: self.ai_client.generate_learning_roadmap(
                clean_skills(current_skills), target_skills, audience=audience
            ),
            unwrap_key="roadmap",
        )

    def get_gap_analysis_with_roadmap(
        self,
        current_skills: List[str],
        target_role: str,
        audience: Optional[str] = None,
        transition: bool = False,
    ) -> tuple:
        """
        Gap analysis, then a roadmap for the skills it found missing.

        When nothing is missing the roadmap targets the role itself.
        """
        analysis = self.get_skill_gap_analysis(current_skills, target_role, audience=audience, transition=transition)
        missing = [s.skill for s in analysis.missing_skills] or [analysis.role or target_role]
        roadmap = self.generate_learning_roadmap(current_skills, missing, audience=audience)
        return analysis, roadmap


# ============================================================
# STUDENT EDUCATIONAL CONTEXT
# Static catalogue attached to Student skill-gap responses and PDFs.
# ============================================================

def get_relevant_courses(role: str) -> List[dict]:
    return [
        {"name": f"Introduction to {role}", "provider": "Coursera", "duration": "8 weeks", "level": "Beginner"},
        {"name": f"{role} Fundamentals", "provider": "edX", "duration": "12 weeks", "level": "Intermediate"},
    ]


def get_prerequisite_skills(role: str) -> List[dict]:
    return [
        {"skill": "Mathematics", "level": "Advanced", "importance": "High"},
        {"skill": "Computer Science Basics", "level": "Intermediate", "importance": "High"},
    ]


def get_academic_pathway(role: str) -> dict:
    return {
        "recommendations": [
            "Complete Bachelor's in Computer Science",
            f"Take specialized courses related to {role}",
            "Gain practical experience through internships",
        ],
        "certifications": [
            "AWS Certified Developer",
            "Google Cloud Professional Developer",
        ],
        "timeline": "4-5 years",
    }


def build_educational_context(role: str) -> dict:
    return {
        "relevantCourses": get_relevant_courses(role),
        "prerequisites": get_prerequisite_skills(role),
        "academicPathway": get_academic_pathway(role),
    }


def get_educational_resources(skill: str) -> List[dict]:
    return [
        {"type": "Course", "name": f"Introduction to {skill}", "platform": "Coursera",
         "duration": "6 weeks", "level": "Beginner"},
        {"type": "Tutorial", "name": f"{skill} Fundamentals", "platform": "YouTube",
         "duration": "3 hours", "level": "Beginner"},
        {"type": "Practice", "name": f"{skill} Projects", "platform": "GitHub",
         "duration": "Self-paced", "level": "Intermediate"},
    ]


def get_career_service() -> CareerGuidanceService:
    return CareerGuidanceService()
