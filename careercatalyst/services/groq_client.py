"""
Groq API Client

Groq exposes an OpenAI-compatible API, so we use the openai library.

The model is asked for strict JSON; responses are fence-stripped and parsed
here, and schema-validated by career_service. Nothing is retried: one failed
call is one failed request.
"""
from typing import List, Optional
from openai import OpenAI
from loguru import logger
import json

from careercatalyst.core.config import get_settings
from careercatalyst.core.errors import UpstreamGenerationError

settings = get_settings()

SYSTEM_PROMPT = "You are a backend API. Respond ONLY with valid JSON - no markdown, no explanations."

CAREER_MATCHES_FORMAT = """{
    "careerMatches": [
        {
            "role": "job title",
            "matchPercentage": 85,
            "averageSalary": "salary range",
            "marketDemand": "High/Medium/Low",
            "description": "Brief role description",
            "requiredSkills": ["skill1", "skill2"],
            "skillGaps": [
                {
                    "skill": "missing skill",
                    "priority": "High/Medium/Low",
                    "timeToAcquire": "estimated time",
                    "impact": "What this skill enables"
                }
            ],
            "learningRoadmap": [
                {
                    "phase": 1,
                    "focus": "What to learn in this phase",
                    "duration": "estimated time",
                    "resources": [
                        {
                            "type": "Course/Book/Tutorial",
                            "name": "resource name",
                            "platform": "where to find it",
                            "url": "link to resource",
                            "difficulty": "Beginner/Intermediate/Advanced"
                        }
                    ]
                }
            ]
        }
    ]
}"""

EXPERIENCED_MATCHES_FORMAT = """{
    "careerMatches": [
        {
            "role": "job title",
            "compatibilityScore": 80,
            "description": "Brief role description",
            "averageSalary": "salary range",
            "marketDemand": "High/Medium/Low",
            "transitionTime": "estimated time to switch",
            "transitionDifficulty": "Easy/Moderate/Hard",
            "remoteWorkPotential": "High/Medium/Low",
            "growthPotential": {"shortTerm": "1-2 year outlook", "longTerm": "5+ year outlook"},
            "skillTransferability": ["how an existing skill carries over"],
            "industryTrends": "Relevant industry trends"
        }
    ]
}"""

SKILL_GAP_FORMAT = """{
    "analysis": {
        "role": "%(role)s",
        "currentSkillsAssessment": {
            "strengths": ["skill1", "skill2"],
            "relevance": "How current skills relate to the role"
        },
        "missingSkills": [
            {
                "skill": "name of skill",
                "priority": "High/Medium/Low",
                "timeToAcquire": "estimated time",
                "impact": "What this skill enables in the role",
                "prerequisiteSkills": ["skill1", "skill2"],
                "learningSteps": ["step1", "step2"],
                "resources": [
                    {
                        "type": "resource type",
                        "title": "resource name",
                        "url": "resource link",
                        "duration": "estimated time"
                    }
                ]
            }
        ]%(transition)s
    }
}"""

TRANSITION_PLAN_FORMAT = """,
        "transitionPlan": {
            "phases": [
                {"name": "phase name", "duration": "estimated time", "activities": ["activity1", "activity2"]}
            ]
        }"""

ROADMAP_FORMAT = """{
    "roadmap": {
        "estimatedTotalDuration": "total time",
        "phases": [
            {
                "phase": 1,
                "title": "phase title",
                "duration": "estimated time",
                "focusAreas": ["area1", "area2"],
                "skills": [
                    {
                        "skill": "skill name",
                        "level": "target proficiency level",
                        "resources": [
                            {
                                "type": "resource type",
                                "name": "resource name",
                                "platform": "platform name",
                                "url": "resource link",
                                "duration": "estimated time",
                                "cost": "free/paid/subscription"
                            }
                        ],
                        "projects": [
                            {
                                "title": "project title",
                                "description": "what to build",
                                "skills": ["skills practiced"],
                                "difficulty": "level"
                            }
                        ]
                    }
                ],
                "milestones": ["milestone1", "milestone2"]
            }
        ]
    }
}"""


def _audience_hint(audience: Optional[str]) -> str:
    if audience == "student":
        return ("The learner is a current student: favour foundational courses, "
                "university-friendly resources, internships and academic projects.\n")
    return ""


class GroqClient:
    """
    Wrapper for the Groq chat completions API with one method per prompt.
    """

    def __init__(self, client: Optional[OpenAI] = None):
        self.client = client or OpenAI(
            api_key=settings.groq_api_key,
            base_url=settings.groq_base_url
        )
        self.model = settings.groq_model

    def _call_api(self, user_content: str, max_tokens: Optional[int] = None) -> Optional[str]:
        """
        Internal method to call the Groq API.
        Returns raw text response (None if the model returned nothing).
        """
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": user_content}
            ],
            max_tokens=max_tokens or settings.groq_max_tokens,
            temperature=settings.groq_temperature,
            top_p=1,
            stream=False
        )
        if not response.choices:
            return None
        return response.choices[0].message.content

    def _extract_json(self, text: Optional[str]):
        """
        Extract JSON from API response.
        Handles cases where model wraps JSON in markdown code blocks.
        """
        if not text or not text.strip():
            raise UpstreamGenerationError()

        text = text.strip()
        if text.startswith("```json"):
            text = text[7:]
        if text.startswith("```"):
            text = text[3:]
        if text.endswith("```"):
            text = text[:-3]

        try:
            return json.loads(text.strip())
        except json.JSONDecodeError:
            logger.error(f"JSON parse failed. Raw response:\n{text[:2000]}")
            raise

    def get_career_recommendations(
        self,
        skills: List[str],
        interested_roles: Optional[List[str]] = None,
        salary_preferences: Optional[float] = None,
        work_mode: Optional[str] = None,
        audience: Optional[str] = None,
    ) -> dict:
        """Suggest roles for a skill set (generic and Fresher path)."""
        preferences = []
        if interested_roles:
            preferences.append(f"Interested roles: {', '.join(interested_roles)}")
        if salary_preferences is not None:
            preferences.append(f"Expected salary: {salary_preferences}")
        if work_mode:
            preferences.append(f"Preferred work mode: {work_mode}")

        prompt = (
            "You are a career advisor AI specializing in technology careers. Based on the provided "
            "skills, analyze and suggest suitable job roles, skill gaps, and create a learning roadmap.\n\n"
            f"Given skills: {', '.join(skills)}\n"
            + "".join(f"{line}\n" for line in preferences)
            + _audience_hint(audience)
            + "\nPlease provide your response in the following JSON format:\n"
            + CAREER_MATCHES_FORMAT
            + "\n\nEvery career match must list at least one skill gap. Ensure the suggestions are modern, "
            "relevant to current industry demands, and include practical learning resources."
        )
        return self._extract_json(self._call_api(prompt))

    def get_experienced_recommendations(
        self,
        skills: List[str],
        experience_years: Optional[float] = None,
        reason_for_switch: Optional[str] = None,
        work_mode: Optional[str] = None,
    ) -> dict:
        """Suggest career-switch targets for an experienced professional."""
        prompt = (
            "You are a career transition advisor. Suggest roles an experienced professional "
            "could realistically switch into.\n\n"
            f"Current skills: {', '.join(skills)}\n"
            f"Years of experience: {experience_years if experience_years is not None else 'not given'}\n"
            f"Reason for switching: {reason_for_switch or 'not given'}\n"
            f"Preferred work mode: {work_mode or 'any'}\n\n"
            "Provide your response in this JSON format:\n"
            + EXPERIENCED_MATCHES_FORMAT
        )
        return self._extract_json(self._call_api(prompt))

    def get_skill_gap_analysis(
        self,
        current_skills: List[str],
        target_role: str,
        audience: Optional[str] = None,
        transition: bool = False,
    ) -> dict:
        """Analyse what is missing between current skills and a target role."""
        response_format = SKILL_GAP_FORMAT % {
            "role": target_role.replace('"', "'"),
            "transition": TRANSITION_PLAN_FORMAT if transition else "",
        }
        prompt = (
            f"As a career development AI, analyze the skill gap for a {target_role} position.\n\n"
            f"Current skills: {', '.join(current_skills) or 'none listed'}\n"
            f"Target role: {target_role}\n"
            + _audience_hint(audience)
            + ("The person is switching careers; include a phased transition plan.\n" if transition else "")
            + "\nProvide a detailed skill gap analysis in this JSON format:\n"
            + response_format
        )
        return self._extract_json(self._call_api(prompt))

    def generate_learning_roadmap(
        self,
        current_skills: List[str],
        target_skills: List[str],
        audience: Optional[str] = None,
    ) -> dict:
        """Phased learning plan for a list of target skills."""
        prompt = (
            f"Create a personalized learning roadmap to acquire these target skills: {', '.join(target_skills)}\n"
            f"Current skills: {', '.join(current_skills) or 'none listed'}\n"
            + _audience_hint(audience)
            + "\nProvide the roadmap in this JSON format:\n"
            + ROADMAP_FORMAT
        )
        return self._extract_json(self._call_api(prompt))

    def test_connection(self) -> bool:
        """Test if the Groq API is reachable"""
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": "Reply with exactly: OK"}],
                max_tokens=10
            )
            return "OK" in (response.choices[0].message.content or "").upper()
        except Exception as e:
            logger.error(f"Groq connection failed: {e}")
            return False


# Singleton instance
_groq_client: GroqClient = None


def get_groq_client() -> GroqClient:
    """Get or create Groq client (singleton pattern)"""
    global _groq_client
    if _groq_client is None:
        _groq_client = GroqClient()
    return _groq_client
