# =============================================================================
# core/services/overdue_service.py - Overdue Detection & Rescheduling
# =============================================================================
# Finds weekly tasks whose scheduled (week, day) is already behind today and
# moves them to today/tomorrow or marks them complete.
#
# Overdue rule:
#   not completed AND (week < current week
#                      OR (week == current week AND day < current day))
#   days_overdue = max(0, (current week - week) * 7 + (current day - day))
#
# Tasks without a day of week are due by the end of their week: they become
# overdue only once that week is over.
#
# Usage:
#   tracker = OverdueTaskTracker(business_plan_id)
#   tracker.refresh()
#   tracker.reschedule_to_tomorrow(tracker.overdue_tasks[0].id)
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.week_calendar import (
    DAYS_IN_WEEK,
    Clock,
    WeekDay,
    current_week_and_day,
    next_day,
)
from core.models.overdue import OverdueTask
from core.models.weekly_task import WeeklyTask
from core.services.project_service import ProjectService

logger = logging.getLogger(__name__)


def overdue_days(task: WeeklyTask, now: WeekDay) -> int | None:
    """
    How many days a task is overdue relative to `now`.

    Returns:
        Days overdue (>= 0), or None if the task is not overdue
    """
    if task.is_completed:
        return None

    weeks_behind = now.week_number - task.week_number

    if task.day_of_week is None:
        if weeks_behind <= 0:
            return None
        return max(0, weeks_behind * DAYS_IN_WEEK + (now.day_of_week - DAYS_IN_WEEK))

    if weeks_behind > 0 or (weeks_behind == 0 and task.day_of_week < now.day_of_week):
        return max(0, weeks_behind * DAYS_IN_WEEK + (now.day_of_week - task.day_of_week))

    return None


class OverdueService:
    """
    Read-only overdue detection for one business plan.

    The clock is injectable so "today" can be pinned in tests.
    """

    def __init__(
        self,
        client: type[SupabaseClient] = SupabaseClient,
        clock: Clock | None = None,
    ):
        self.client = client
        self.clock = clock

    def now(self) -> WeekDay:
        """Current (week, day) according to this service's clock."""
        return current_week_and_day(self.clock)

    def find_overdue(self, business_plan_id: str) -> list[OverdueTask]:
        """
        Get the overdue tasks of a business plan, most overdue first.

        Ties keep the storage order (week, then day).

        Raises:
            SupabaseClientError: If the query fails
        """
        now = self.now()

        # Narrow in the database, apply the exact rule here
        rows = self.client.fetch_weekly_tasks(
            business_plan_id,
            incomplete_only=True,
            max_week=now.week_number,
        )

        overdue: list[OverdueTask] = []
        for row in rows:
            task = WeeklyTask.from_db_row(row)
            days = overdue_days(task, now)
            if days is not None:
                overdue.append(OverdueTask.from_weekly_task(task, days))

        overdue.sort(key=lambda t: t.days_overdue, reverse=True)

        logger.debug(
            f"Found {len(overdue)} overdue tasks for plan {business_plan_id} "
            f"at week {now.week_number} day {now.day_of_week}"
        )
        return overdue

    def find_overdue_for_user(self, user_id: str) -> list[OverdueTask]:
        """
        Overdue tasks of the business plan of the user's first project.

        Returns an empty list when the user has no project or no plan yet.
        """
        plan = ProjectService.find_user_business_plan(user_id, self.clock)
        if not plan:
            return []
        return self.find_overdue(plan.business_plan_id)


class OverdueTaskTracker:
    """
    Working set of overdue tasks plus the operations that clear them.

    Each tracker keeps its own cached list. Successful mutations drop the
    task from the list locally; nothing is re-fetched until refresh().
    Failed mutations return False and leave the list as it was.
    """

    def __init__(
        self,
        business_plan_id: str,
        client: type[SupabaseClient] = SupabaseClient,
        clock: Clock | None = None,
    ):
        self.business_plan_id = business_plan_id
        self.client = client
        self.detector = OverdueService(client=client, clock=clock)
        self.overdue_tasks: list[OverdueTask] = []

    def refresh(self) -> bool:
        """
        Re-fetch the overdue list.

        Returns:
            True on success. On failure the previous list is kept.
        """
        try:
            self.overdue_tasks = self.detector.find_overdue(self.business_plan_id)
            return True
        except SupabaseClientError as e:
            logger.error(f"Error fetching overdue tasks: {e}")
            return False

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def reschedule_task(self, task_id: str, week_number: int, day_of_week: int) -> bool:
        """Move a task to an explicit (week, day)."""
        return self._write(
            task_id,
            {"week_number": week_number, "day_of_week": day_of_week},
            "reschedule",
        )

    def reschedule_to_today(self, task_id: str) -> bool:
        """Move a task to today's (week, day)."""
        now = self.detector.now()
        return self.reschedule_task(task_id, now.week_number, now.day_of_week)

    def reschedule_to_tomorrow(self, task_id: str) -> bool:
        """
        Move a task to tomorrow.

        On Sunday this is Monday of the next week number.
        """
        tomorrow = next_day(self.detector.now())
        return self.reschedule_task(task_id, tomorrow.week_number, tomorrow.day_of_week)

    def complete_task(self, task_id: str) -> bool:
        """Mark a task completed. Its week/day are left as they are."""
        return self._write(task_id, {"is_completed": True}, "complete")

    def _write(self, task_id: str, patch: dict[str, Any], operation: str) -> bool:
        try:
            self.client.update_weekly_task(task_id, patch)
        except SupabaseClientError as e:
            logger.error(f"Error trying to {operation} task {task_id}: {e}")
            return False

        self.overdue_tasks = [t for t in self.overdue_tasks if t.id != task_id]
        logger.info(f"Task {task_id}: {operation} -> {patch}")
        return True
