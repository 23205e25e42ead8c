"""
Profile Completion - decides whether a user's profile is usable for
recommendations, and keeps the stored isProfileComplete flag in step.

Rules (one predicate per account type):
- Student:     profile exists with at least one skill
               (legacy user.skills counts while no profile exists)
- Fresher:     a Fresher profile exists, whatever it contains
- Experienced: profile exists and skills, reasonForSwitch,
               salaryPreferences, experienceYears, workMode are all set

reconcile_profile_completion() is the only writer of the flag outside
registration. It is called at login, on GET /auth/profile and after every
profile write. Two concurrent requests can interleave here; the flag
converges on the next reconcile.
"""

from typing import Callable, Dict, Optional
from pydantic import BaseModel
from pymongo.errors import PyMongoError
from loguru import logger

from careercatalyst.schemas.schemas import UserType
from careercatalyst.services.mongo_service import RoleProfileService, UserService


EXPERIENCED_REQUIRED_FIELDS = (
    "reasonForSwitch",
    "salaryPreferences",
    "experienceYears",
    "workMode",
)


def _is_set(value) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def student_profile_complete(user: dict, profile: Optional[dict]) -> bool:
    if profile is None:
        return bool(user.get("skills"))
    return bool(profile.get("skills"))


def fresher_profile_complete(user: dict, profile: Optional[dict]) -> bool:
    return profile is not None


def experienced_profile_complete(user: dict, profile: Optional[dict]) -> bool:
    if profile is None or not profile.get("skills"):
        return False
    return all(_is_set(profile.get(field)) for field in EXPERIENCED_REQUIRED_FIELDS)


COMPLETION_RULES: Dict[UserType, Callable[[dict, Optional[dict]], bool]] = {
    UserType.student: student_profile_complete,
    UserType.fresher: fresher_profile_complete,
    UserType.experienced: experienced_profile_complete,
}

# Account types whose profile is created at registration. Fresher is
# excluded: its rule is existence, so seeding would mark it complete.
SEED_PROFILE_ON_REGISTER = {UserType.experienced}


class CompletionCheck(BaseModel):
    is_profile_complete: bool
    changed: bool = False
    error: Optional[str] = None


def evaluate_profile_completion(user: dict, profile: Optional[dict]) -> bool:
    """Pure predicate lookup."""
    return COMPLETION_RULES[UserType(user["userType"])](user, profile)


def reconcile_profile_completion(user: dict) -> CompletionCheck:
    """
    Recompute the flag for a user document and persist it if it differs.

    Never raises on store failures: the stored flag is returned untouched
    and the error is reported in the result.
    """
    stored = bool(user.get("isProfileComplete", False))
    try:
        profile = RoleProfileService(UserType(user["userType"])).get(str(user["_id"]))
        computed = evaluate_profile_completion(user, profile)
        if computed != stored:
            UserService().set_profile_complete(str(user["_id"]), computed)
            user["isProfileComplete"] = computed
            logger.info(f"Profile completion for user {user['_id']} set to {computed}")
            return CompletionCheck(is_profile_complete=computed, changed=True)
        return CompletionCheck(is_profile_complete=computed)
    except PyMongoError as e:
        logger.warning(f"Profile completion check failed for user {user.get('_id')}: {e}")
        return CompletionCheck(is_profile_complete=stored, error=str(e))
