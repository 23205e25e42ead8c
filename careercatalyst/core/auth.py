"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- FastAPI dependencies for protected routes
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from careercatalyst.core.config import get_settings
from careercatalyst.core.errors import AuthError, PermissionDeniedError
from careercatalyst.schemas.schemas import UserType

settings = get_settings()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor (missing header is reported as 401 by us, not 403)
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # stored value is not a recognised hash
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> dict:
    """
    FastAPI dependency - claims of the authenticated caller.

    Usage:
        @router.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user["id"], user["user_type"]
    """
    if credentials is None or not credentials.credentials:
        raise AuthError("No token provided")

    payload = decode_token(credentials.credentials)
    if not payload:
        raise AuthError("Invalid token")

    user_id = payload.get("id")
    user_type = payload.get("userType")
    if not user_id or not user_type:
        raise AuthError("Invalid token")

    try:
        user_type = UserType(user_type)
    except ValueError:
        raise AuthError("Invalid token")

    return {"id": user_id, "user_type": user_type}


def require_user_type(user_type: UserType):
    """Dependency factory - restrict a route to one account type."""

    async def dependency(user: dict = Depends(get_current_user)) -> dict:
        if user["user_type"] != user_type:
            raise PermissionDeniedError(f"{user_type.value} accounts only")
        return user

    return dependency
