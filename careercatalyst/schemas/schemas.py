"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Field names are snake_case in Python and camelCase on the wire
(and in MongoDB documents), via the shared alias generator.
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Any
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserType(str, Enum):
    student = "Student"
    fresher = "Fresher"
    experienced = "Experienced"


class WorkMode(str, Enum):
    remote = "remote"
    hybrid = "hybrid"
    onsite = "onsite"


class Priority(str, Enum):
    high = "High"
    medium = "Medium"
    low = "Low"


class ResourceCost(str, Enum):
    free = "free"
    paid = "paid"
    subscription = "subscription"


class LearningStatus(str, Enum):
    not_started = "Not Started"
    in_progress = "In Progress"
    completed = "Completed"


class GuidanceAccount(str, Enum):
    """URL segment for routes shared by Student and Fresher accounts."""
    student = "student"
    fresher = "fresher"

    @property
    def user_type(self) -> UserType:
        return UserType(self.value.capitalize())


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(CamelModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)
    user_type: UserType

class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

class UserResponse(CamelModel):
    id: str
    name: str
    email: str
    user_type: UserType
    is_profile_complete: bool = False
    skills: List[str] = []
    created_at: Optional[datetime] = None

class LoginResponse(CamelModel):
    message: str
    token: str
    user: UserResponse

class ProfileResponse(CamelModel):
    user: UserResponse

class SkillsUpdateRequest(CamelModel):
    skills: List[str]

class SkillsUpdateResponse(CamelModel):
    message: str
    user: UserResponse


# ============================================================
# ROLE PROFILE SCHEMAS
# ============================================================

class Education(CamelModel):
    level: Optional[str] = None
    institution: Optional[str] = None
    major: Optional[str] = None
    graduation_year: Optional[int] = Field(None, ge=1950, le=2100)

class AcademicPerformance(CamelModel):
    gpa: Optional[float] = Field(None, ge=0, le=10)
    achievements: List[str] = []

class StudentProfileUpdate(CamelModel):
    skills: List[str]
    current_education: Optional[Education] = None
    interests: Optional[List[str]] = None
    academic_performance: Optional[AcademicPerformance] = None

class FresherProfileUpdate(CamelModel):
    skills: Optional[List[str]] = None
    interested_roles: Optional[List[str]] = None
    salary_preferences: Optional[float] = Field(None, ge=0)
    work_mode: Optional[WorkMode] = None

class ExperiencedProfileUpdate(CamelModel):
    skills: Optional[List[str]] = None
    reason_for_switch: Optional[str] = None
    salary_preferences: Optional[float] = Field(None, ge=0)
    experience_years: Optional[float] = Field(None, ge=0)
    work_mode: Optional[WorkMode] = None
    additional_achievements: Optional[str] = None

class SavedProfileCreate(CamelModel):
    name: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    company: Optional[str] = None
    profile_url: str = Field(..., min_length=1)
    thumbnail_url: Optional[str] = None
    role: str = Field(..., min_length=1)

class SavedProfile(SavedProfileCreate):
    saved_at: datetime

class SavedProfileResponse(CamelModel):
    message: str
    profile: SavedProfile

class SavedProfileListResponse(CamelModel):
    saved_profiles: List[SavedProfile]

class LearningProgressUpdate(CamelModel):
    skill: str = Field(..., min_length=1)
    status: LearningStatus

class LearningProgressEntry(CamelModel):
    skill: str
    status: LearningStatus
    started_at: Optional[datetime] = None
    updated_at: datetime
    completed_at: Optional[datetime] = None


# ============================================================
# CAREER REQUEST SCHEMAS
# ============================================================

class RoadmapRequest(CamelModel):
    target_skills: List[str]

class SkillDevelopmentRequest(CamelModel):
    skills: List[str]

class ExperiencedRecommendationRequest(CamelModel):
    current_skills: Optional[List[str]] = None
    experience_years: Optional[float] = Field(None, ge=0)
    reason_for_switch: Optional[str] = None
    work_mode: Optional[WorkMode] = None


# ============================================================
# GENERATED RESULT SCHEMAS
# Validated from upstream model output, never stored.
# ============================================================

class ResultModel(CamelModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)


def _normalize_priority(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().capitalize()
    return value


def _parse_percentage(value: Any) -> Any:
    """Accept 85, 85.0, "85" or "85%"."""
    if isinstance(value, str):
        cleaned = value.strip().rstrip("%").strip()
        try:
            return round(float(cleaned))
        except ValueError:
            return value
    if isinstance(value, float):
        return round(value)
    return value


class LearningResource(ResultModel):
    title: str = Field(..., validation_alias=AliasChoices("title", "name"))
    type: str = ""
    url: Optional[str] = None
    duration: Optional[str] = None

class MissingSkill(ResultModel):
    skill: str
    priority: Priority
    time_to_acquire: str
    impact: str
    prerequisite_skills: List[str] = []
    resources: List[LearningResource] = []
    learning_steps: List[str] = []

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, value: Any) -> Any:
        return _normalize_priority(value)

    @model_validator(mode="before")
    @classmethod
    def flatten_learning_path(cls, data: Any) -> Any:
        # older prompt shape nests steps/resources under learningPath
        if isinstance(data, dict) and isinstance(data.get("learningPath"), dict):
            data = dict(data)
            path = data.pop("learningPath")
            data.setdefault("resources", path.get("resources") or [])
            data.setdefault("learningSteps", path.get("steps") or [])
        return data

class SkillsAssessment(ResultModel):
    strengths: List[str] = []
    relevance: str

class TransitionPhase(ResultModel):
    name: str
    duration: str
    activities: List[str] = []

class TransitionPlan(ResultModel):
    phases: List[TransitionPhase] = Field(..., min_length=1)

class GapAnalysisResult(ResultModel):
    role: str
    current_skills_assessment: SkillsAssessment
    missing_skills: List[MissingSkill] = []
    transition_plan: Optional[TransitionPlan] = None


class RoadmapResource(ResultModel):
    type: str = ""
    name: str
    platform: str = ""
    url: Optional[str] = None
    duration: Optional[str] = None
    cost: ResourceCost

    @field_validator("cost", mode="before")
    @classmethod
    def normalize_cost(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

class PracticeProject(ResultModel):
    title: str
    description: str
    skills: List[str] = []
    difficulty: str = ""

class PhaseSkill(ResultModel):
    skill: str
    level: str
    resources: List[RoadmapResource] = []
    projects: List[PracticeProject] = []

class RoadmapPhase(ResultModel):
    phase: int
    title: str
    duration: str
    focus_areas: List[str] = []
    skills: List[PhaseSkill] = []
    milestones: List[str] = []

class RoadmapResult(ResultModel):
    estimated_total_duration: str
    phases: List[RoadmapPhase] = Field(..., min_length=1)


class CareerSkillGap(ResultModel):
    skill: str
    priority: Priority
    time_to_acquire: str
    impact: str

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, value: Any) -> Any:
        return _normalize_priority(value)

class CareerRoadmapResource(ResultModel):
    type: str = ""
    name: str
    platform: str = ""
    url: Optional[str] = None
    difficulty: Optional[str] = None

class CareerRoadmapStep(ResultModel):
    phase: int
    focus: str
    duration: str
    resources: List[CareerRoadmapResource] = []

class CareerMatch(ResultModel):
    role: str
    match_percentage: int = Field(..., ge=0, le=100)
    average_salary: str
    market_demand: str
    description: str
    required_skills: List[str] = []
    skill_gaps: List[CareerSkillGap] = Field(..., min_length=1)
    learning_roadmap: List[CareerRoadmapStep] = []

    @field_validator("match_percentage", mode="before")
    @classmethod
    def parse_match(cls, value: Any) -> Any:
        return _parse_percentage(value)

class RecommendationResult(ResultModel):
    career_matches: List[CareerMatch] = Field(..., min_length=1)


class GrowthPotential(ResultModel):
    short_term: str
    long_term: str

class ExperiencedCareerMatch(ResultModel):
    role: str
    compatibility_score: int = Field(..., ge=0, le=100)
    description: str
    average_salary: str
    market_demand: str
    transition_time: str
    transition_difficulty: str
    remote_work_potential: str
    growth_potential: GrowthPotential
    skill_transferability: List[str] = []
    industry_trends: str = ""

    @field_validator("compatibility_score", mode="before")
    @classmethod
    def parse_score(cls, value: Any) -> Any:
        return _parse_percentage(value)

class ExperiencedRecommendationResult(ResultModel):
    career_matches: List[ExperiencedCareerMatch] = Field(..., min_length=1)


# ============================================================
# PROFILE SEARCH SCHEMAS
# ============================================================

class ProfileSummary(CamelModel):
    name: str
    title: str
    company: str
    description: str = ""
    profile_url: str
    thumbnail_url: Optional[str] = None

class ProfileSearchResponse(CamelModel):
    profiles: List[ProfileSummary]


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True
