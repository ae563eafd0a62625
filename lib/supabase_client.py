# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides specialized methods for:
# - Weekly tasks (the generated schedule of a business plan)
# - Canonical tasks (the project's main task list)
# - Projects, business plans and plan steps (ownership/context lookups)
#
# Every method raises SupabaseClientError on failure. Callers decide whether
# a failure is fatal (HTTP layer) or degrades to a False/None result
# (scheduling and sync services).
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   task = SupabaseClient.fetch_weekly_task(task_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)

WEEKLY_TASKS_TABLE = "weekly_tasks"
TASKS_TABLE = "tasks"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages:
    errors should tell HOW to fix, not just WHAT failed.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        # Incomplete tasks of a plan up to week 12
        rows = SupabaseClient.fetch_weekly_tasks(plan_id, incomplete_only=True, max_week=12)

        # The canonical task mirroring a weekly task
        task = SupabaseClient.fetch_task_by_source(weekly_task_id)
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        Ownership checks are therefore done explicitly by the services.

        Returns:
            Client: Supabase client instance

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def _normalize_uuid(cls, uuid_value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return str(uuid_value) if isinstance(uuid_value, UUID) else uuid_value

    @classmethod
    def _fetch_by_id(cls, table: str, row_id: str | UUID, code: str) -> dict[str, Any] | None:
        """Fetch one row by primary key, None if it doesn't exist."""
        client = cls.get_client()
        row_id_str = cls._normalize_uuid(row_id)

        try:
            response = (
                client.table(table)
                .select("*")
                .eq("id", row_id_str)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            # PostgREST code for "no rows" on .single()
            if "PGRST116" in str(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch {table} row: {e}",
                code=code,
                details={"table": table, "id": row_id_str}
            )

    @classmethod
    def _fetch_first(
        cls,
        table: str,
        filters: dict[str, Any],
        code: str,
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """Fetch the first row matching equality filters, None if there is none."""
        client = cls.get_client()

        try:
            query = client.table(table).select(columns)
            for column, value in filters.items():
                query = query.eq(column, value)
            response = query.limit(1).execute()

            rows = response.data or []
            return rows[0] if rows else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to query {table}: {e}",
                code=code,
                details={"table": table, "filters": filters}
            )

    @classmethod
    def _update_by_id(
        cls,
        table: str,
        row_id: str | UUID,
        data: dict[str, Any],
        code: str,
    ) -> dict[str, Any] | None:
        """Apply a partial update to one row. Returns the updated row if PostgREST sent it back."""
        client = cls.get_client()
        row_id_str = cls._normalize_uuid(row_id)

        try:
            response = (
                client.table(table)
                .update(data)
                .eq("id", row_id_str)
                .execute()
            )
            rows = response.data or []
            return rows[0] if rows else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update {table} row: {e}",
                code=code,
                details={"table": table, "id": row_id_str, "columns": sorted(data)}
            )

    @classmethod
    def _delete_by_id(cls, table: str, row_id: str | UUID, code: str) -> None:
        client = cls.get_client()
        row_id_str = cls._normalize_uuid(row_id)

        try:
            client.table(table).delete().eq("id", row_id_str).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete {table} row: {e}",
                code=code,
                details={"table": table, "id": row_id_str}
            )

    # -------------------------------------------------------------------------
    # Weekly Tasks
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_weekly_task(cls, task_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a weekly task by ID.

        Returns:
            Weekly task dict, or None if not found

        Raises:
            SupabaseClientError: If query fails
        """
        return cls._fetch_by_id(WEEKLY_TASKS_TABLE, task_id, "FETCH_WEEKLY_TASK_FAILED")

    @classmethod
    def fetch_weekly_tasks(
        cls,
        business_plan_id: str | UUID,
        week_number: int | None = None,
        day_of_week: int | None = None,
        incomplete_only: bool = False,
        max_week: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch weekly tasks of a business plan.

        Args:
            business_plan_id: The business plan UUID
            week_number: Only tasks of this week
            day_of_week: Only tasks on this day
            incomplete_only: Only tasks with is_completed = false
            max_week: Only tasks with week_number <= max_week

        Returns:
            List of weekly task dicts ordered by week then day

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        plan_id_str = cls._normalize_uuid(business_plan_id)

        try:
            query = (
                client.table(WEEKLY_TASKS_TABLE)
                .select("*")
                .eq("business_plan_id", plan_id_str)
            )
            if week_number is not None:
                query = query.eq("week_number", week_number)
            if day_of_week is not None:
                query = query.eq("day_of_week", day_of_week)
            if incomplete_only:
                query = query.eq("is_completed", False)
            if max_week is not None:
                query = query.lte("week_number", max_week)

            response = (
                query
                .order("week_number")
                .order("day_of_week")
                .execute()
            )

            tasks = response.data or []
            logger.debug(f"Fetched {len(tasks)} weekly tasks for plan {plan_id_str}")
            return tasks

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch weekly tasks: {e}",
                code="FETCH_WEEKLY_TASKS_FAILED",
                suggestion="Check that the business_plan_id exists and weekly_tasks is accessible",
                details={"business_plan_id": plan_id_str, "week_number": week_number}
            )

    @classmethod
    def insert_weekly_task(cls, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a weekly task.

        Returns:
            Inserted row with generated id

        Raises:
            SupabaseClientError: If insert fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table(WEEKLY_TASKS_TABLE)
                .insert(data)
                .execute()
            )

            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert weekly task: {e}",
                code="INSERT_WEEKLY_TASK_FAILED",
                details={"business_plan_id": data.get("business_plan_id")}
            )

    @classmethod
    def update_weekly_task(cls, task_id: str | UUID, data: dict[str, Any]) -> dict[str, Any] | None:
        """Partial update of a weekly task. Raises SupabaseClientError on failure."""
        return cls._update_by_id(WEEKLY_TASKS_TABLE, task_id, data, "UPDATE_WEEKLY_TASK_FAILED")

    @classmethod
    def delete_weekly_task(cls, task_id: str | UUID) -> None:
        """Delete a weekly task. Raises SupabaseClientError on failure."""
        cls._delete_by_id(WEEKLY_TASKS_TABLE, task_id, "DELETE_WEEKLY_TASK_FAILED")

    # -------------------------------------------------------------------------
    # Canonical Tasks
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_task(cls, task_id: str | UUID) -> dict[str, Any] | None:
        """Fetch a canonical task by ID, None if not found."""
        return cls._fetch_by_id(TASKS_TABLE, task_id, "FETCH_TASK_FAILED")

    @classmethod
    def fetch_task_by_source(cls, weekly_task_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch the canonical task that mirrors a weekly task.

        Returns:
            Task dict, or None if no task references the weekly task

        Raises:
            SupabaseClientError: If query fails
        """
        return cls._fetch_first(
            TASKS_TABLE,
            {"source_weekly_task_id": cls._normalize_uuid(weekly_task_id)},
            "FETCH_LINKED_TASK_FAILED",
        )

    @classmethod
    def upsert_task_by_source(cls, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert or update the canonical task keyed on source_weekly_task_id.

        A single conditional write: requires the unique constraint on
        tasks.source_weekly_task_id (see supabase/migrations).

        Returns:
            The inserted or updated row

        Raises:
            SupabaseClientError: If the write fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table(TASKS_TABLE)
                .upsert(data, on_conflict="source_weekly_task_id")
                .execute()
            )

            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Upsert returned no data",
                code="UPSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to upsert linked task: {e}",
                code="UPSERT_TASK_FAILED",
                suggestion="Check that tasks.source_weekly_task_id has a unique constraint",
                details={"source_weekly_task_id": data.get("source_weekly_task_id")}
            )

    @classmethod
    def delete_task(cls, task_id: str | UUID) -> None:
        """Delete a canonical task. Raises SupabaseClientError on failure."""
        cls._delete_by_id(TASKS_TABLE, task_id, "DELETE_TASK_FAILED")

    # -------------------------------------------------------------------------
    # Projects / Business Plans
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_project(cls, project_id: str | UUID) -> dict[str, Any] | None:
        """Fetch a project by ID, None if not found."""
        return cls._fetch_by_id("projects", project_id, "FETCH_PROJECT_FAILED")

    @classmethod
    def fetch_project_for_owner(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """Fetch the first project owned by a user."""
        return cls._fetch_first(
            "projects",
            {"owner_id": cls._normalize_uuid(user_id)},
            "FETCH_PROJECT_FAILED",
        )

    @classmethod
    def fetch_business_plan(cls, business_plan_id: str | UUID) -> dict[str, Any] | None:
        """Fetch a business plan by ID, None if not found."""
        return cls._fetch_by_id("business_plans", business_plan_id, "FETCH_BUSINESS_PLAN_FAILED")

    @classmethod
    def fetch_business_plan_for_project(cls, project_id: str | UUID) -> dict[str, Any] | None:
        """Fetch the business plan of a project."""
        return cls._fetch_first(
            "business_plans",
            {"project_id": cls._normalize_uuid(project_id)},
            "FETCH_BUSINESS_PLAN_FAILED",
        )

    @classmethod
    def fetch_plan_steps(cls, project_id: str | UUID) -> list[dict[str, Any]]:
        """
        Fetch the plan steps of a project (id, completed).

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        project_id_str = cls._normalize_uuid(project_id)

        try:
            response = (
                client.table("plan_steps")
                .select("id, completed")
                .eq("project_id", project_id_str)
                .execute()
            )
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch plan steps: {e}",
                code="FETCH_PLAN_STEPS_FAILED",
                details={"project_id": project_id_str}
            )
