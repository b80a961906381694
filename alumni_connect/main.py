"""
AlumniConnect - Main Application

FastAPI backend with:
- MongoDB for every entity (users, content, mentorships, messages)
- Session cookie authentication (signed JWT)
- Mentorship lifecycle, per-mentorship messaging, placement statistics

Run: uvicorn alumni_connect.main:app --reload
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.database import Database
from starlette.exceptions import HTTPException

from alumni_connect import __version__
from alumni_connect.api.routes import api_router
from alumni_connect.core.config import Settings, get_settings
from alumni_connect.core.exceptions import AppError
from alumni_connect.core.logging_config import configure_logging
from alumni_connect.db.mongodb import create_mongo_client, get_database, init_indexes, ping

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    """First pydantic error as 'field: reason'."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    error = errors[0]
    location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    reason = error.get("msg", "invalid value")
    return f"{'.'.join(location)}: {reason}" if location else reason


def register_exception_handlers(app: FastAPI) -> None:
    """Every error leaves the API as {"message": "..."}."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"message": _validation_message(exc)})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_app(settings: Optional[Settings] = None, db: Optional[Database] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: defaults to get_settings() (environment / .env)
        db: database handle to use instead of connecting to settings.mongodb_uri
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="AlumniConnect API",
        description="""
        Campus alumni networking backend.

        ## Features
        - **Authentication**: session cookie for students, alumni and staff
        - **Directory**: profiles and alumni search
        - **Mentorships**: request, accept/decline, complete, delete
        - **Messages**: per-mentorship conversation with read tracking
        - **Content**: feed, interview guides, assessments, events
        - **Placements**: records and aggregated statistics
        """,
        version=__version__,
        debug=settings.debug,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    if db is None:
        # pymongo connects lazily, on the first operation
        db = get_database(create_mongo_client(settings), settings)
    app.state.settings = settings
    app.state.db = db

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API routes
    app.include_router(api_router, prefix="/api")

    @app.on_event("startup")
    async def startup_event():
        """Initialize MongoDB indexes on startup."""
        try:
            init_indexes(app.state.db)
            logger.info("MongoDB indexes initialized")
        except Exception:
            logger.exception("MongoDB index initialization failed")

    @app.get("/health", tags=["Health"])
    async def health_check():
        mongo_ok = ping(app.state.db)
        return {
            "status": "healthy" if mongo_ok else "degraded",
            "mongodb": "connected" if mongo_ok else "disconnected"
        }

    logger.info("AlumniConnect API configured (db=%s, strict_mentorship_access=%s)",
                db.name, settings.strict_mentorship_access)
    return app


app = create_app()
