# =============================================================================
# core/services/project_service.py - Project / Business Plan Context
# =============================================================================
# Resolves which project and business plan a request operates on, and
# verifies ownership. The service_role key bypasses RLS, so every lookup
# that takes a user_id checks projects.owner_id explicitly.
# =============================================================================

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.week_calendar import Clock
from app.exceptions import BusinessPlanNotFoundError, ProjectNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanContext:
    """Everything the scheduling code needs to know about a business plan."""
    user_id: str
    project_id: str
    business_plan_id: str
    year: int

    @classmethod
    def from_rows(
        cls,
        user_id: str | UUID,
        project: dict[str, Any],
        plan: dict[str, Any],
        clock: Clock | None = None,
    ) -> "PlanContext":
        today = (clock or date.today)()
        return cls(
            user_id=str(user_id),
            project_id=str(project["id"]),
            business_plan_id=str(plan["id"]),
            # Plans created before the year column existed default to this year
            year=int(plan.get("year") or today.year),
        )


class ProjectService:
    """
    Service for project and business plan lookups.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def find_user_business_plan(
        user_id: str | UUID,
        clock: Clock | None = None,
    ) -> PlanContext | None:
        """
        Find the business plan of the user's first owned project.

        Args:
            user_id: The authenticated user
            clock: Supplies the default year for plans without one

        Returns:
            PlanContext, or None if the user has no project or no plan yet

        Raises:
            SupabaseClientError: If a query fails
        """
        project = SupabaseClient.fetch_project_for_owner(user_id)
        if not project:
            return None

        plan = SupabaseClient.fetch_business_plan_for_project(project["id"])
        if not plan:
            return None

        return PlanContext.from_rows(user_id, project, plan, clock)

    @staticmethod
    def get_user_business_plan(
        user_id: str | UUID,
        clock: Clock | None = None,
    ) -> PlanContext:
        """
        Same as find_user_business_plan() but raises when missing.

        Raises:
            ProjectNotFoundError: If the user owns no project
            BusinessPlanNotFoundError: If the project has no business plan
        """
        project = SupabaseClient.fetch_project_for_owner(user_id)
        if not project:
            raise ProjectNotFoundError(str(user_id))

        plan = SupabaseClient.fetch_business_plan_for_project(project["id"])
        if not plan:
            raise BusinessPlanNotFoundError()

        return PlanContext.from_rows(user_id, project, plan, clock)

    @staticmethod
    def get_owned_business_plan(
        business_plan_id: str | UUID,
        user_id: str | UUID,
        clock: Clock | None = None,
    ) -> PlanContext:
        """
        Get a business plan by ID, verifying the user owns its project.

        Raises:
            BusinessPlanNotFoundError: If the plan doesn't exist or isn't the user's
        """
        plan_id_str = str(business_plan_id)

        plan = SupabaseClient.fetch_business_plan(plan_id_str)
        if not plan:
            raise BusinessPlanNotFoundError(plan_id_str)

        project = SupabaseClient.fetch_project(plan["project_id"])
        if not project or str(project.get("owner_id")) != str(user_id):
            # Don't reveal that the plan exists - return not found
            logger.warning(f"User {user_id} requested business plan {plan_id_str} they don't own")
            raise BusinessPlanNotFoundError(plan_id_str)

        return PlanContext.from_rows(user_id, project, plan, clock)
