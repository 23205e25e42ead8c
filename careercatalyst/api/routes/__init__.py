"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from careercatalyst.api.routes.auth_routes import router as auth_router
from careercatalyst.api.routes.profile_routes import router as profile_router
from careercatalyst.api.routes.career_routes import router as career_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(profile_router)
api_router.include_router(career_router)
