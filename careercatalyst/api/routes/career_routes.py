"""
Career Guidance Routes

GET /career/recommendations - Role suggestions from the caller's stored skills
GET /career/skill-gaps/{targetRole} - Skill gap analysis
POST /career/roadmap - Learning roadmap for target skills
GET /career/fresher-recommendations - Fresher suggestions with preferences
GET /career/student/recommendations - Student suggestions
POST /career/experienced/recommendations - Career-switch suggestions
GET /career/experienced/skill-gaps/{role} - Transition analysis
GET /career/{account}/skill-gaps/{targetRole} - Gap analysis + roadmap
POST /career/{account}/skill-development - Roadmap + experts per skill
GET /career/{account}/roadmap-pdf/{targetRole} - Roadmap PDF download
GET /career/linkedin-profiles/{role} - Public profiles for a role

Generation calls block on the Groq API, so they run in the threadpool.
Nothing generated here is stored.
"""

import asyncio
import re
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from loguru import logger

from careercatalyst.core.auth import get_current_user, require_user_type
from careercatalyst.core.errors import CareerCatalystError, PermissionDeniedError
from careercatalyst.services.career_service import (
    build_educational_context, clean_skills, get_career_service, get_educational_resources
)
from careercatalyst.services.mongo_service import RoleProfileService, UserService
from careercatalyst.services.pdf_service import render_roadmap_pdf
from careercatalyst.services.search_service import get_search_client
from careercatalyst.schemas.schemas import (
    GuidanceAccount, UserType, RoadmapRequest, SkillDevelopmentRequest,
    ExperiencedRecommendationRequest, RecommendationResult, ExperiencedRecommendationResult,
    GapAnalysisResult, ProfileSearchResponse
)

router = APIRouter(prefix="/career", tags=["Career Guidance"])

PDF_FILENAME_PREFIXES = {
    UserType.fresher: "career-roadmap",
    UserType.student: "student-roadmap",
    UserType.experienced: "career-switch-roadmap",
}

EXPERTS_PER_SKILL = 3


def load_user_skills(user: dict) -> List[str]:
    """Skills from the caller's role profile, falling back to the legacy user record."""
    profile = RoleProfileService(user["user_type"]).get(user["id"])
    if profile and profile.get("skills"):
        return profile["skills"]
    user_doc = UserService().get_by_id(user["id"])
    return (user_doc or {}).get("skills") or []


def check_account(account: GuidanceAccount, user: dict) -> UserType:
    if user["user_type"] != account.user_type:
        raise PermissionDeniedError(f"{account.user_type.value} accounts only")
    return account.user_type


def audience_for(user_type: UserType) -> Optional[str]:
    return "student" if user_type == UserType.student else None


def pdf_filename(user_type: UserType, target_role: str) -> str:
    """e.g. student-roadmap-data-scientist.pdf"""
    slug = re.sub(r"\s+", "-", target_role.strip().lower())
    slug = re.sub(r"[^a-z0-9._-]", "", slug) or "roadmap"
    return f"{PDF_FILENAME_PREFIXES[user_type]}-{slug}.pdf"


def dump(model) -> dict:
    return model.model_dump(by_alias=True, mode="json")


# ============================================================
# GENERIC (any account type)
# ============================================================

@router.get("/recommendations", response_model=RecommendationResult)
async def get_career_suggestions(user: dict = Depends(get_current_user)):
    """Role suggestions for the caller's stored skills."""
    skills = load_user_skills(user)
    return await run_in_threadpool(
        get_career_service().get_career_recommendations,
        skills,
        audience=audience_for(user["user_type"])
    )


@router.get("/skill-gaps/{target_role:path}")
async def get_skill_gaps(target_role: str, user: dict = Depends(get_current_user)):
    """Strengths and missing skills for a target role."""
    skills = load_user_skills(user)
    analysis = await run_in_threadpool(get_career_service().get_skill_gap_analysis, skills, target_role)
    return {"analysis": dump(analysis)}


@router.post("/roadmap")
async def generate_roadmap(request: RoadmapRequest, user: dict = Depends(get_current_user)):
    """Phased learning plan for the requested skills."""
    skills = load_user_skills(user)
    roadmap = await run_in_threadpool(
        get_career_service().generate_learning_roadmap, skills, request.target_skills
    )
    return {"roadmap": dump(roadmap)}


# ============================================================
# PER-ROLE RECOMMENDATIONS
# ============================================================

@router.get("/fresher-recommendations", response_model=RecommendationResult)
async def get_fresher_recommendations(user: dict = Depends(require_user_type(UserType.fresher))):
    """Suggestions using the fresher's skills and stated preferences."""
    profile = RoleProfileService(UserType.fresher).get_or_404(user["id"])
    return await run_in_threadpool(
        get_career_service().get_career_recommendations,
        profile.get("skills") or [],
        interested_roles=profile.get("interestedRoles"),
        salary_preferences=profile.get("salaryPreferences"),
        work_mode=profile.get("workMode")
    )


@router.get("/student/recommendations", response_model=RecommendationResult)
async def get_student_recommendations(user: dict = Depends(require_user_type(UserType.student))):
    skills = load_user_skills(user)
    return await run_in_threadpool(
        get_career_service().get_career_recommendations, skills, audience="student"
    )


@router.post("/experienced/recommendations", response_model=ExperiencedRecommendationResult)
async def get_experienced_recommendations(
    request: Optional[ExperiencedRecommendationRequest] = None,
    user: dict = Depends(require_user_type(UserType.experienced))
):
    """
    Career-switch suggestions.

    Body fields override the stored profile; omitted fields use the profile.
    """
    request = request or ExperiencedRecommendationRequest()
    profile = RoleProfileService(UserType.experienced).get(user["id"]) or {}
    work_mode = request.work_mode.value if request.work_mode else profile.get("workMode")

    return await run_in_threadpool(
        get_career_service().get_experienced_recommendations,
        request.current_skills or profile.get("skills") or [],
        experience_years=request.experience_years if request.experience_years is not None
        else profile.get("experienceYears"),
        reason_for_switch=request.reason_for_switch or profile.get("reasonForSwitch"),
        work_mode=work_mode
    )


# ============================================================
# SKILL GAPS / DEVELOPMENT
# ============================================================

@router.get("/experienced/skill-gaps/{target_role:path}", response_model=GapAnalysisResult)
async def get_experienced_skill_gaps(
    target_role: str,
    user: dict = Depends(require_user_type(UserType.experienced))
):
    """Gap analysis including a phased transition plan."""
    profile = RoleProfileService(UserType.experienced).get_or_404(user["id"])
    return await run_in_threadpool(
        get_career_service().get_skill_gap_analysis,
        profile.get("skills") or [],
        target_role,
        transition=True
    )


@router.get("/{account}/skill-gaps/{target_role:path}")
async def get_account_skill_gaps(
    account: GuidanceAccount,
    target_role: str,
    user: dict = Depends(get_current_user)
):
    """
    Gap analysis plus a roadmap for the missing skills.

    Student responses also carry the educational context for the role.
    """
    user_type = check_account(account, user)
    profile = RoleProfileService(user_type).get_or_404(user["id"])
    audience = audience_for(user_type)

    analysis, roadmap = await run_in_threadpool(
        get_career_service().get_gap_analysis_with_roadmap,
        profile.get("skills") or [],
        target_role,
        audience=audience
    )

    result = {"skillGapAnalysis": dump(analysis), "learningRoadmap": dump(roadmap)}
    if user_type == UserType.student:
        result["educationalContext"] = build_educational_context(analysis.role or target_role)
    return result


async def find_skill_experts(skill: str, audience: Optional[str] = None) -> List[dict]:
    """Top expert profiles for one skill; a failed search yields an empty list."""
    query = f"{skill} education expert" if audience == "student" else f"{skill} expert"
    try:
        profiles = await run_in_threadpool(get_search_client().search_profiles, query)
    except CareerCatalystError as e:
        logger.warning(f"Expert search for '{skill}' failed: {e.message}")
        return []
    return [dump(p) for p in profiles[:EXPERTS_PER_SKILL]]


@router.post("/{account}/skill-development")
async def get_skill_development(
    account: GuidanceAccount,
    request: SkillDevelopmentRequest,
    user: dict = Depends(get_current_user)
):
    """
    Roadmap for the requested skills plus expert profiles per skill.

    Expert searches run concurrently with each other. Student responses
    also carry the educational context of the first skill.
    """
    user_type = check_account(account, user)
    skills = clean_skills(request.skills)
    profile = RoleProfileService(user_type).get_or_404(user["id"])
    audience = audience_for(user_type)

    roadmap = await run_in_threadpool(
        get_career_service().generate_learning_roadmap,
        profile.get("skills") or [],
        skills,
        audience=audience
    )
    experts = await asyncio.gather(*(find_skill_experts(skill, audience) for skill in skills))

    development = [
        {"skill": skill, "experts": found}
        for skill, found in zip(skills, experts)
    ]
    result = {"developmentPath": dump(roadmap), "skillDevelopment": development}
    if user_type == UserType.student:
        for item in development:
            item["educationalResources"] = get_educational_resources(item["skill"])
        result["educationalContext"] = build_educational_context(skills[0])

    return result


# ============================================================
# PDF EXPORT
# ============================================================

async def build_roadmap_pdf_response(user: dict, user_type: UserType, target_role: str) -> Response:
    profile = RoleProfileService(user_type).get_or_404(user["id"])
    audience = audience_for(user_type)

    analysis, roadmap = await run_in_threadpool(
        get_career_service().get_gap_analysis_with_roadmap,
        profile.get("skills") or [],
        target_role,
        audience=audience,
        transition=user_type == UserType.experienced
    )
    educational_context = (
        build_educational_context(analysis.role or target_role)
        if user_type == UserType.student else None
    )

    pdf = await run_in_threadpool(render_roadmap_pdf, roadmap, analysis, audience, educational_context)
    filename = pdf_filename(user_type, target_role)
    logger.info(f"Rendered {filename} ({len(pdf)} bytes) for user {user['id']}")

    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


@router.get("/experienced/roadmap-pdf/{target_role:path}")
async def download_experienced_roadmap_pdf(
    target_role: str,
    user: dict = Depends(require_user_type(UserType.experienced))
):
    """Career-switch roadmap as a PDF, with the transition timeline."""
    return await build_roadmap_pdf_response(user, UserType.experienced, target_role)


@router.get("/{account}/roadmap-pdf/{target_role:path}")
async def download_roadmap_pdf(
    account: GuidanceAccount,
    target_role: str,
    user: dict = Depends(get_current_user)
):
    """Roadmap for a target role as a PDF attachment."""
    user_type = check_account(account, user)
    return await build_roadmap_pdf_response(user, user_type, target_role)


# ============================================================
# PROFILE SEARCH
# ============================================================

@router.get("/linkedin-profiles/{role:path}", response_model=ProfileSearchResponse)
async def search_linkedin_profiles(
    role: str,
    skills: Optional[str] = Query(None, description="Comma-separated skills"),
    user: dict = Depends(get_current_user)
):
    """Public profiles of people working in a role."""
    skill_list = clean_skills(skills.split(",")) if skills else []
    profiles = await run_in_threadpool(get_search_client().search_profiles, role, skill_list)
    return ProfileSearchResponse(profiles=profiles)
