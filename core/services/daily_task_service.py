# =============================================================================
# core/services/daily_task_service.py - Today's Tasks
# =============================================================================
# The dashboard's "today" view: weekly tasks scheduled on the current
# (week, day), and how many of them are still pending.
# =============================================================================

import logging

from lib.supabase_client import SupabaseClient
from lib.week_calendar import Clock, current_week_and_day
from core.models.overdue import DailyTask, DailyTasksResponse
from core.services.project_service import PlanContext

logger = logging.getLogger(__name__)


class DailyTaskService:
    """Today's tasks for a business plan."""

    def __init__(
        self,
        client: type[SupabaseClient] = SupabaseClient,
        clock: Clock | None = None,
    ):
        self.client = client
        self.clock = clock

    def get_today(self, context: PlanContext) -> DailyTasksResponse:
        """
        Get today's tasks and the pending count.

        When nothing is scheduled today but the project still has an
        unfinished plan step, the pending count is 1 (finishing the plan is
        today's task).

        Raises:
            SupabaseClientError: If a query fails
        """
        now = current_week_and_day(self.clock)

        rows = self.client.fetch_weekly_tasks(
            context.business_plan_id,
            week_number=now.week_number,
            day_of_week=now.day_of_week,
        )
        tasks = [
            DailyTask(
                id=str(row["id"]),
                title=row.get("title") or "",
                is_completed=bool(row.get("is_completed")),
            )
            for row in rows
        ]

        pending = sum(1 for t in tasks if not t.is_completed)
        if not tasks:
            steps = self.client.fetch_plan_steps(context.project_id)
            if any(not step.get("completed") for step in steps):
                pending = 1

        return DailyTasksResponse(
            week_number=now.week_number,
            day_of_week=now.day_of_week,
            tasks=tasks,
            pending_count=pending,
        )
