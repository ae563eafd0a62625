# =============================================================================
# core/services/task_sync_service.py - Weekly Task <-> Task List Sync
# =============================================================================
# Keeps a weekly task (business plan schedule) and its mirror in the
# project's main task list consistent.
#
# Forward (weekly -> tasks):
#   One upsert into tasks keyed on source_weekly_task_id, then the returned
#   id is written onto weekly_tasks.linked_task_id. Calling it twice for the
#   same weekly task updates the same row.
#
# Backward (tasks -> weekly):
#   Sparse patch: only the fields the caller changed are copied back.
#
# All operations are best-effort. Storage errors are logged and reported as
# None/False; earlier writes of a multi-step operation are not rolled back.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.week_calendar import day_name, get_date_from_week_day
from core.models.task import TaskStatus, TaskSyncUpdate
from core.models.weekly_task import WeeklyTask

logger = logging.getLogger(__name__)

SOURCE_MARKER = "📋 Източник: Бизнес план"
DESCRIPTION_SEPARATOR = "\n\n---\n"


def build_task_description(
    description: str | None,
    week_number: int,
    day_of_week: int | None,
) -> str:
    """
    Description for the mirrored task: the weekly task's own text followed
    by where it came from (week, weekday, business plan).

    Example:
        build_task_description("Call suppliers", 3, 1)
        # "Call suppliers\n\n---\n📅 Седмица 3, Понеделник\n📋 Източник: Бизнес план"
    """
    when = f"📅 Седмица {week_number}"
    if day_of_week is not None:
        when += f", {day_name(day_of_week)}"
    source_info = f"{when}\n{SOURCE_MARKER}"

    if description:
        return f"{description}{DESCRIPTION_SEPARATOR}{source_info}"
    return source_info


class TaskSyncService:
    """
    Bidirectional, best-effort sync between weekly tasks and tasks.

    Example:
        sync = TaskSyncService()
        task_id = sync.sync_weekly_task_to_tasks(
            weekly_task, week_number=3, year=2025,
            business_plan_id=plan_id, project_id=project_id, user_id=user_id,
        )
    """

    def __init__(self, client: type[SupabaseClient] = SupabaseClient):
        self.client = client

    # -------------------------------------------------------------------------
    # Weekly task -> task list
    # -------------------------------------------------------------------------

    def sync_weekly_task_to_tasks(
        self,
        task: WeeklyTask,
        week_number: int,
        year: int,
        business_plan_id: str,
        project_id: str,
        user_id: str,
    ) -> str | None:
        """
        Create or update the task-list mirror of a weekly task.

        Args:
            task: The weekly task to mirror
            week_number: Week the task is scheduled in
            year: Business plan year (anchors the due date)
            business_plan_id: Owning business plan
            project_id: Project whose task list receives the mirror
            user_id: Owner of the mirrored task

        Returns:
            The canonical task id, or None if any storage step failed
        """
        due_date = None
        if task.day_of_week is not None:
            due_date = get_date_from_week_day(year, week_number, task.day_of_week)

        data: dict[str, Any] = {
            "title": task.title,
            "description": build_task_description(task.description, week_number, task.day_of_week),
            "priority": task.priority.value,
            "status": TaskStatus.DONE.value if task.is_completed else TaskStatus.TODO.value,
            "due_date": due_date,
            "day_of_week": task.day_of_week,
            "user_id": str(user_id),
            "project_id": str(project_id),
            "source_weekly_task_id": task.id,
            "source_week_number": week_number,
            "source_business_plan_id": str(business_plan_id),
        }

        try:
            row = self.client.upsert_task_by_source(data)
            linked_id = str(row["id"])

            if task.linked_task_id != linked_id:
                self.client.update_weekly_task(task.id, {"linked_task_id": linked_id})
                logger.info(f"Linked weekly task {task.id} to task {linked_id}")

            return linked_id

        except SupabaseClientError as e:
            logger.error(f"Error syncing weekly task {task.id} to tasks: {e}")
            return None

    def sync_week(
        self,
        business_plan_id: str,
        week_number: int,
        year: int,
        project_id: str,
        user_id: str,
    ) -> dict[str, str | None]:
        """
        Mirror every weekly task of one week.

        Returns:
            {weekly_task_id: canonical task id, or None where the sync failed}.
            Empty if the week couldn't be read at all.
        """
        try:
            rows = self.client.fetch_weekly_tasks(business_plan_id, week_number=week_number)
        except SupabaseClientError as e:
            logger.error(f"Error loading week {week_number} of plan {business_plan_id}: {e}")
            return {}

        results: dict[str, str | None] = {}
        for row in rows:
            task = WeeklyTask.from_db_row(row)
            results[task.id] = self.sync_weekly_task_to_tasks(
                task,
                week_number=week_number,
                year=year,
                business_plan_id=business_plan_id,
                project_id=project_id,
                user_id=user_id,
            )

        failed = sum(1 for linked in results.values() if linked is None)
        logger.info(
            f"Synced week {week_number} of plan {business_plan_id}: "
            f"{len(results) - failed} ok, {failed} failed"
        )
        return results

    # -------------------------------------------------------------------------
    # Task list -> weekly task
    # -------------------------------------------------------------------------

    def sync_task_to_weekly_task(
        self,
        task_id: str,
        updates: TaskSyncUpdate | dict[str, Any],
    ) -> bool:
        """
        Copy changes of a task back onto the weekly task it mirrors.

        Only title, priority, status (as is_completed) and day_of_week are
        mirrored, and only when present in `updates`. Tasks that don't mirror
        a weekly task are left alone.

        Returns:
            False if a storage call failed, True otherwise (including no-ops)
        """
        if not isinstance(updates, TaskSyncUpdate):
            updates = TaskSyncUpdate.model_validate(updates)

        try:
            task = self.client.fetch_task(task_id)
            weekly_task_id = task.get("source_weekly_task_id") if task else None
            if not weekly_task_id:
                return True

            patch = updates.to_weekly_patch()
            if not patch:
                return True

            self.client.update_weekly_task(weekly_task_id, patch)
            logger.info(f"Synced task {task_id} back to weekly task {weekly_task_id}: {sorted(patch)}")
            return True

        except SupabaseClientError as e:
            logger.error(f"Error syncing task {task_id} to weekly task: {e}")
            return False

    def delete_linked_task(self, weekly_task_id: str) -> bool:
        """
        Delete the task that mirrors a weekly task, if there is one.

        The weekly task's linked_task_id is not cleared; callers delete or
        update the weekly task themselves.

        Returns:
            False if a storage call failed, True otherwise (including no-ops)
        """
        try:
            linked = self.client.fetch_task_by_source(weekly_task_id)
            if linked:
                self.client.delete_task(linked["id"])
                logger.info(f"Deleted task {linked['id']} linked to weekly task {weekly_task_id}")
            return True

        except SupabaseClientError as e:
            logger.error(f"Error deleting linked task of weekly task {weekly_task_id}: {e}")
            return False
