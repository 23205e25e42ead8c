"""
Authentication Routes

POST /auth/register - Register new user
POST /auth/login - Login and get JWT token
GET /auth/profile - Get current user info (profile completion reconciled)
POST /auth/update-profile - Update the legacy flat skills list (Students)
"""

from fastapi import APIRouter, Depends
from pymongo.errors import PyMongoError
from loguru import logger

from careercatalyst.core.auth import (
    hash_password, verify_password, create_access_token, get_current_user, require_user_type
)
from careercatalyst.core.errors import InternalError, NotFoundError, ValidationError
from careercatalyst.services.mongo_service import RoleProfileService, UserService, serialize_user
from careercatalyst.services.profile_completion import SEED_PROFILE_ON_REGISTER, reconcile_profile_completion
from careercatalyst.schemas.schemas import (
    RegisterRequest, LoginRequest, LoginResponse, ProfileResponse, SkillsUpdateRequest,
    SkillsUpdateResponse, UserResponse, UserType, MessageResponse
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(request: RegisterRequest):
    """
    Register a new user account.

    Experienced accounts get an empty role profile straight away; if that
    write fails the new user is deleted again.
    """
    users = UserService()
    user_id = users.create(
        name=request.name.strip(),
        email=request.email.lower(),
        password_hash=hash_password(request.password),
        user_type=request.user_type
    )

    if request.user_type in SEED_PROFILE_ON_REGISTER:
        try:
            RoleProfileService(request.user_type).create_empty(user_id)
        except PyMongoError as e:
            logger.error(f"Initial {request.user_type.value} profile creation failed for {user_id}: {e}")
            users.delete(user_id)
            raise InternalError("Registration failed. Please try again.")

    logger.info(f"Registered {request.user_type.value} user {user_id}")
    return MessageResponse(message="User registered successfully")


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    user = UserService().get_by_email(request.email.lower())
    if not user or not verify_password(request.password, user.get("password", "")):
        logger.info(f"Failed login for {request.email}")
        raise ValidationError("Invalid credentials")

    token = create_access_token(data={"id": str(user["_id"]), "userType": user["userType"]})

    check = reconcile_profile_completion(user)
    user_out = serialize_user(user)
    user_out["isProfileComplete"] = check.is_profile_complete

    return LoginResponse(
        message="Login successful",
        token=token,
        user=UserResponse.model_validate(user_out)
    )


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(claims: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    user = UserService().get_by_id(claims["id"])
    if not user:
        raise NotFoundError("User not found")

    check = reconcile_profile_completion(user)
    user_out = serialize_user(user)
    user_out["isProfileComplete"] = check.is_profile_complete
    return ProfileResponse(user=UserResponse.model_validate(user_out))


@router.post("/update-profile", response_model=SkillsUpdateResponse)
async def update_skills(
    request: SkillsUpdateRequest,
    claims: dict = Depends(require_user_type(UserType.student))
):
    """Replace the flat skills list stored on the user record."""
    users = UserService()
    user = users.update_skills(claims["id"], request.skills)
    if not user:
        raise NotFoundError("User not found")

    check = reconcile_profile_completion(user)
    user_out = serialize_user(user)
    user_out["isProfileComplete"] = check.is_profile_complete
    return SkillsUpdateResponse(
        message="Profile updated successfully",
        user=UserResponse.model_validate(user_out)
    )
