"""
Role Profile Routes

GET/POST /career/student-profile - Read / upsert Student profile
GET/POST /career/fresher-profile - Read / upsert Fresher profile
GET/POST /career/experienced-profile - Read / upsert Experienced profile
POST /career/{account}/save-profile - Save a LinkedIn profile (fresher, student)
DELETE /career/{account}/remove-profile/{profileUrl} - Remove a saved profile
GET /career/{account}/saved-profiles - List saved profiles
GET/POST /career/student/learning-progress - Per-skill learning progress
"""

from typing import List
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from careercatalyst.core.auth import get_current_user, require_user_type
from careercatalyst.core.errors import PermissionDeniedError
from careercatalyst.services.mongo_service import RoleProfileService, UserService, serialize_doc
from careercatalyst.services.profile_completion import reconcile_profile_completion
from careercatalyst.schemas.schemas import (
    GuidanceAccount, StudentProfileUpdate, FresherProfileUpdate, ExperiencedProfileUpdate,
    SavedProfileCreate, SavedProfileResponse, SavedProfileListResponse,
    LearningProgressUpdate, LearningProgressEntry, UserType, MessageResponse
)

router = APIRouter(prefix="/career", tags=["Profiles"])


def upsert_role_profile(user: dict, data: BaseModel) -> dict:
    """Write the provided fields, then reconcile the user's completion flag."""
    fields = data.model_dump(by_alias=True, exclude_unset=True, mode="json")
    doc = RoleProfileService(user["user_type"]).upsert(user["id"], fields)

    user_doc = UserService().get_by_id(user["id"])
    if user_doc:
        reconcile_profile_completion(user_doc)
    return serialize_doc(doc)


def account_service(account: GuidanceAccount, user: dict) -> RoleProfileService:
    """Profile service for the URL's account type, which must be the caller's."""
    user_type = account.user_type
    if user["user_type"] != user_type:
        raise PermissionDeniedError(f"{user_type.value} accounts only")
    return RoleProfileService(user_type)


# ============================================================
# PROFILE READ / UPSERT
# ============================================================

@router.get("/student-profile")
async def get_student_profile(user: dict = Depends(require_user_type(UserType.student))):
    """Get current student's profile."""
    return serialize_doc(RoleProfileService(UserType.student).get_or_404(user["id"]))


@router.post("/student-profile")
async def update_student_profile(
    data: StudentProfileUpdate,
    user: dict = Depends(require_user_type(UserType.student))
):
    """Create or update the student profile. skills is required."""
    return upsert_role_profile(user, data)


@router.get("/fresher-profile")
async def get_fresher_profile(user: dict = Depends(require_user_type(UserType.fresher))):
    """Get current fresher's profile."""
    return serialize_doc(RoleProfileService(UserType.fresher).get_or_404(user["id"]))


@router.post("/fresher-profile")
async def update_fresher_profile(
    data: FresherProfileUpdate,
    user: dict = Depends(require_user_type(UserType.fresher))
):
    """Create or update the fresher profile. Only provided fields are written."""
    return upsert_role_profile(user, data)


@router.get("/experienced-profile")
async def get_experienced_profile(user: dict = Depends(require_user_type(UserType.experienced))):
    """Get current experienced user's profile."""
    return serialize_doc(RoleProfileService(UserType.experienced).get_or_404(user["id"]))


@router.post("/experienced-profile")
async def update_experienced_profile(
    data: ExperiencedProfileUpdate,
    user: dict = Depends(require_user_type(UserType.experienced))
):
    """Create or update the experienced profile. Only provided fields are written."""
    return upsert_role_profile(user, data)


# ============================================================
# SAVED PROFILES
# ============================================================

@router.post("/{account}/save-profile", response_model=SavedProfileResponse)
async def save_profile(
    account: GuidanceAccount,
    data: SavedProfileCreate,
    user: dict = Depends(get_current_user)
):
    """Save a LinkedIn profile. A URL can only be saved once."""
    service = account_service(account, user)
    entry = service.add_saved_profile(user["id"], data.model_dump(by_alias=True))
    return SavedProfileResponse(message="Profile saved successfully", profile=entry)


@router.delete("/{account}/remove-profile/{profile_url:path}", response_model=MessageResponse)
async def remove_saved_profile(
    account: GuidanceAccount,
    profile_url: str,
    user: dict = Depends(get_current_user)
):
    """Remove a saved profile. Unknown URLs are ignored."""
    account_service(account, user).remove_saved_profile(user["id"], profile_url)
    return MessageResponse(message="Profile removed successfully")


@router.get("/{account}/saved-profiles", response_model=SavedProfileListResponse)
async def get_saved_profiles(account: GuidanceAccount, user: dict = Depends(get_current_user)):
    """Saved profiles in the order they were saved."""
    saved = account_service(account, user).list_saved_profiles(user["id"])
    return SavedProfileListResponse(saved_profiles=saved)


# ============================================================
# LEARNING PROGRESS (students)
# ============================================================

@router.get("/student/learning-progress", response_model=List[LearningProgressEntry])
async def get_learning_progress(user: dict = Depends(require_user_type(UserType.student))):
    return RoleProfileService(UserType.student).list_learning_progress(user["id"])


@router.post("/student/learning-progress", response_model=LearningProgressEntry)
async def update_learning_progress(
    data: LearningProgressUpdate,
    user: dict = Depends(require_user_type(UserType.student))
):
    """Set the status of one skill (Not Started / In Progress / Completed)."""
    return RoleProfileService(UserType.student).update_learning_progress(
        user["id"], data.skill.strip(), data.status
    )
