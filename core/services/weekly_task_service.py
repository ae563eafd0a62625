# =============================================================================
# core/services/weekly_task_service.py - Weekly Task CRUD
# =============================================================================
# Create, read, update and delete the weekly tasks of a business plan.
# Deleting a weekly task first deletes its mirror in the task list; the
# cascade is done here, not by the database.
# =============================================================================

import logging

from lib.supabase_client import SupabaseClient
from core.models.weekly_task import WeeklyTask, WeeklyTaskCreate, WeeklyTaskUpdate
from core.services.task_sync_service import TaskSyncService
from app.exceptions import WeeklyTaskNotFoundError

logger = logging.getLogger(__name__)


class WeeklyTaskService:
    """
    Service for weekly task operations.

    Storage errors (SupabaseClientError) propagate to the caller.
    """

    @staticmethod
    def get(task_id: str) -> WeeklyTask:
        """
        Get a weekly task by ID.

        Raises:
            WeeklyTaskNotFoundError: If the task doesn't exist
        """
        row = SupabaseClient.fetch_weekly_task(task_id)
        if not row:
            raise WeeklyTaskNotFoundError(task_id)
        return WeeklyTask.from_db_row(row)

    @staticmethod
    def list_for_week(business_plan_id: str, week_number: int) -> list[WeeklyTask]:
        """All tasks of one week of a plan, ordered by day."""
        rows = SupabaseClient.fetch_weekly_tasks(business_plan_id, week_number=week_number)
        return [WeeklyTask.from_db_row(row) for row in rows]

    @staticmethod
    def create(
        business_plan_id: str,
        week_number: int,
        data: WeeklyTaskCreate,
    ) -> WeeklyTask:
        """
        Add a task to a week of a plan.

        Returns:
            The created WeeklyTask (with generated id)
        """
        row = SupabaseClient.insert_weekly_task(data.to_row(business_plan_id, week_number))
        task = WeeklyTask.from_db_row(row)
        logger.info(f"Created weekly task {task.id} in week {week_number} of plan {business_plan_id}")
        return task

    @staticmethod
    def update(task_id: str, data: WeeklyTaskUpdate) -> WeeklyTask:
        """
        Apply a sparse patch to a weekly task.

        Raises:
            WeeklyTaskNotFoundError: If the task doesn't exist
        """
        patch = data.to_patch()
        if not patch:
            return WeeklyTaskService.get(task_id)

        row = SupabaseClient.update_weekly_task(task_id, patch)
        if not row:
            raise WeeklyTaskNotFoundError(task_id)
        return WeeklyTask.from_db_row(row)

    @staticmethod
    def delete(task_id: str, sync: TaskSyncService | None = None) -> None:
        """
        Delete a weekly task together with its task-list mirror.

        The mirror goes first so a failure never leaves a task pointing at a
        deleted weekly task.
        """
        sync = sync or TaskSyncService()
        if not sync.delete_linked_task(task_id):
            logger.warning(f"Linked task of weekly task {task_id} could not be deleted")

        SupabaseClient.delete_weekly_task(task_id)
        logger.info(f"Deleted weekly task {task_id}")

    @staticmethod
    def replace_week(
        business_plan_id: str,
        week_number: int,
        tasks: list[WeeklyTaskCreate],
        sync: TaskSyncService | None = None,
    ) -> list[WeeklyTask]:
        """
        Replace every task of a week with a new set (e.g. a generated plan).

        Returns:
            The newly created tasks
        """
        sync = sync or TaskSyncService()

        for existing in WeeklyTaskService.list_for_week(business_plan_id, week_number):
            WeeklyTaskService.delete(existing.id, sync=sync)

        created = [
            WeeklyTaskService.create(business_plan_id, week_number, data)
            for data in tasks
        ]
        logger.info(f"Replaced week {week_number} of plan {business_plan_id} with {len(created)} tasks")
        return created
