"""
CareerCatalyst - Main Application

FastAPI backend with:
- MongoDB for users and role profiles
- Groq (OpenAI-compatible) for career guidance generation
- Google Custom Search for LinkedIn profile lookup
- JWT authentication

Run: uvicorn careercatalyst.main:app --reload
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from pymongo.errors import PyMongoError
from loguru import logger

from careercatalyst.api import api_router
from careercatalyst.core.config import get_settings
from careercatalyst.core.errors import CareerCatalystError
from careercatalyst.db.mongodb import init_mongo_indexes, test_mongo_connection

settings = get_settings()

# Create FastAPI app
app = FastAPI(
    title="CareerCatalyst",
    description="""
    Career guidance for students, freshers and experienced professionals.

    ## Features
    - **Authentication**: JWT-based auth for three account types
    - **Profiles**: One role profile per user, with completion tracking
    - **Recommendations**: AI-generated career matches
    - **Skill Gaps**: Missing skills and transition plans for a target role
    - **Roadmaps**: Phased learning plans, downloadable as PDF
    - **Profile Search**: Public LinkedIn profiles for a role
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


# ============================================================
# ERROR HANDLERS
# Every error body is {"message": ...}
# ============================================================

@app.exception_handler(CareerCatalystError)
async def career_catalyst_error_handler(request: Request, exc: CareerCatalystError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"message": "Server error"})


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes()
        logger.info("MongoDB indexes initialized")
    except PyMongoError as e:
        logger.warning(f"MongoDB index initialization failed: {e}")


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "CareerCatalyst"}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("careercatalyst.main:app", host=settings.host, port=settings.port, reload=settings.debug)
