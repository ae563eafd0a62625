# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the BizPlanner scheduling API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import BizPlannerException, bizplanner_exception_handler
from app.routers import daily, health, jobs, overdue, tasks, weekly_tasks
from app.auth import routes as auth_routes
from agents.weekly_planner import WeeklyTaskGenerationError
from lib.supabase_client import SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# HTTP status per generation error code; anything else is an upstream failure
GENERATION_ERROR_STATUS = {
    "NOTHING_TO_PLAN": 422,
    "RATE_LIMITED": 429,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown.
    """
    logger.info(f"Starting BizPlanner API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    yield

    logger.info("Shutting down BizPlanner API")


# Create FastAPI application
app = FastAPI(
    title="BizPlanner API",
    description="""
## Business Plan Scheduling API

Turns a business plan into a week-by-week schedule and keeps it in step with
the project's task list.

### Key Features

- **Overdue tasks**: Find scheduled tasks whose day has passed, reschedule
  them to today/tomorrow or complete them
- **Daily view**: Today's tasks and how many are still pending
- **Weekly tasks**: Per-week CRUD, AI week generation
- **Task sync**: Every weekly task is mirrored into the task list; edits to
  the mirror flow back
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Authentication endpoints for verifying JWT tokens"},
        {"name": "Overdue", "description": "Overdue weekly tasks and the actions that clear them"},
        {"name": "Daily", "description": "Today's scheduled tasks"},
        {"name": "Weekly Tasks", "description": "Weekly task CRUD, generation and sync"},
        {"name": "Tasks", "description": "Sync task list edits back to weekly tasks"},
        {"name": "Jobs", "description": "Track background job progress"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(BizPlannerException)
async def handle_bizplanner_exception(request: Request, exc: BizPlannerException):
    """Handle custom BizPlanner exceptions."""
    return await bizplanner_exception_handler(request, exc)


@app.exception_handler(WeeklyTaskGenerationError)
async def handle_generation_error(request: Request, exc: WeeklyTaskGenerationError):
    """Handle failed weekly task generation."""
    logger.warning(f"Weekly task generation failed: {exc}")
    return JSONResponse(
        status_code=GENERATION_ERROR_STATUS.get(exc.code, 502),
        content={
            "detail": exc.message,
            "code": exc.code,
            "suggestion": exc.suggestion,
            "details": exc.details,
        }
    )


@app.exception_handler(SupabaseClientError)
async def handle_storage_error(request: Request, exc: SupabaseClientError):
    """Handle database errors that reached the HTTP layer."""
    logger.error(f"Storage error: {exc}")
    return JSONResponse(
        status_code=502,
        content={
            "detail": exc.message,
            "code": exc.code,
            "suggestion": exc.suggestion,
        }
    )


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Overdue tasks
app.include_router(
    overdue.router,
    prefix="/api/v1/overdue",
    tags=["Overdue"]
)

# Today's tasks
app.include_router(
    daily.router,
    prefix="/api/v1/daily",
    tags=["Daily"]
)

# Weekly task CRUD, generation and week sync
app.include_router(
    weekly_tasks.router,
    prefix="/api/v1",
    tags=["Weekly Tasks"]
)

# Task list -> weekly task sync
app.include_router(
    tasks.router,
    prefix="/api/v1/tasks",
    tags=["Tasks"]
)

# Background job status
app.include_router(
    jobs.router,
    prefix="/api/v1/jobs",
    tags=["Jobs"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "BizPlanner API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
