# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends(), and can be
# replaced in tests with app.dependency_overrides.
# =============================================================================

from datetime import date
from typing import Annotated

from fastapi import Depends

from app.auth import AuthUser, get_current_user
from agents.weekly_planner import WeeklyTaskGenerator
from lib.supabase_client import SupabaseClient
from lib.week_calendar import Clock
from core.services.project_service import PlanContext, ProjectService


def get_supabase_client() -> type[SupabaseClient]:
    """
    Get Supabase client instance.

    Returns the singleton client wrapper.
    """
    return SupabaseClient


def get_clock() -> Clock:
    """The clock that defines "today" for scheduling (the server's local date)."""
    return date.today


def get_weekly_task_generator() -> WeeklyTaskGenerator:
    """LLM generator for weekly tasks, configured from settings."""
    return WeeklyTaskGenerator()


def get_user_plan(
    user: AuthUser = Depends(get_current_user),
    clock: Clock = Depends(get_clock),
) -> PlanContext:
    """
    The business plan of the authenticated user's project.

    Raises:
        ProjectNotFoundError / BusinessPlanNotFoundError (404)
    """
    return ProjectService.get_user_business_plan(user.id, clock)


# Type aliases for dependency injection
SupabaseDep = Annotated[type[SupabaseClient], Depends(get_supabase_client)]
ClockDep = Annotated[Clock, Depends(get_clock)]
CurrentUser = Annotated[AuthUser, Depends(get_current_user)]
UserPlan = Annotated[PlanContext, Depends(get_user_plan)]
GeneratorDep = Annotated[WeeklyTaskGenerator, Depends(get_weekly_task_generator)]
