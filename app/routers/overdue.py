# =============================================================================
# app/routers/overdue.py - Overdue Task Endpoints
# =============================================================================
# The dashboard's overdue list and the actions that clear it:
# reschedule (today / tomorrow / explicit week+day) and complete.
#
# After a successful change the task's mirror in the task list (if any) is
# re-synced so its due date and status follow.
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path
from pydantic import BaseModel, Field

from app.dependencies import ClockDep, CurrentUser, SupabaseDep, UserPlan
from app.exceptions import TaskUpdateFailedError, WeeklyTaskNotFoundError
from core.models.overdue import OverdueTask, RescheduleRequest, RescheduleTarget
from core.models.weekly_task import WeeklyTask
from core.services.overdue_service import OverdueService, OverdueTaskTracker
from core.services.project_service import PlanContext
from core.services.task_sync_service import TaskSyncService
from core.services.weekly_task_service import WeeklyTaskService

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class OverdueListResponse(BaseModel):
    """Overdue tasks, most overdue first."""
    week_number: int = Field(..., description="Current week number")
    day_of_week: int = Field(..., description="Current day of week (Monday=1)")
    tasks: list[OverdueTask] = Field(default_factory=list)
    total: int = 0


class TaskChangeResponse(BaseModel):
    """State of a weekly task after a reschedule/complete."""
    task_id: str
    week_number: int
    day_of_week: int | None
    is_completed: bool
    linked_task_id: str | None = None
    message: str


# =============================================================================
# Helpers
# =============================================================================

def _plan_task(task_id: str, plan: PlanContext) -> WeeklyTask:
    """Fetch a weekly task, treating tasks of other plans as missing."""
    task = WeeklyTaskService.get(task_id)
    if task.business_plan_id != plan.business_plan_id:
        raise WeeklyTaskNotFoundError(task_id)
    return task


def _resync(task_id: str, plan: PlanContext, client: SupabaseDep) -> WeeklyTask:
    """Re-read the task and refresh its mirror in the task list."""
    task = WeeklyTaskService.get(task_id)
    if task.linked_task_id:
        linked = TaskSyncService(client).sync_weekly_task_to_tasks(
            task,
            week_number=task.week_number,
            year=plan.year,
            business_plan_id=plan.business_plan_id,
            project_id=plan.project_id,
            user_id=plan.user_id,
        )
        if linked is None:
            logger.warning(f"Weekly task {task_id} changed but its linked task was not updated")
    return task


# =============================================================================
# Endpoints
# =============================================================================

@router.get("", response_model=OverdueListResponse)
async def list_overdue_tasks(
    user: CurrentUser,
    client: SupabaseDep,
    clock: ClockDep,
):
    """
    List the overdue tasks of the user's business plan.

    Users without a project or business plan get an empty list.
    """
    detector = OverdueService(client=client, clock=clock)
    now = detector.now()

    tasks = detector.find_overdue_for_user(user.id)

    return OverdueListResponse(
        week_number=now.week_number,
        day_of_week=now.day_of_week,
        tasks=tasks,
        total=len(tasks),
    )


@router.post("/{task_id}/reschedule", response_model=TaskChangeResponse)
async def reschedule_overdue_task(
    task_id: Annotated[UUID, Path(description="Weekly task UUID")],
    request: RescheduleRequest,
    plan: UserPlan,
    client: SupabaseDep,
    clock: ClockDep,
):
    """
    Move a task to today, tomorrow, or an explicit week/day.

    Examples:
        {"target": "today"}
        {"target": "tomorrow"}
        {"week_number": 20, "day_of_week": 3}
    """
    task_id_str = str(task_id)
    _plan_task(task_id_str, plan)

    tracker = OverdueTaskTracker(plan.business_plan_id, client=client, clock=clock)
    if request.target == RescheduleTarget.TODAY:
        ok = tracker.reschedule_to_today(task_id_str)
    elif request.target == RescheduleTarget.TOMORROW:
        ok = tracker.reschedule_to_tomorrow(task_id_str)
    else:
        ok = tracker.reschedule_task(task_id_str, request.week_number, request.day_of_week)

    if not ok:
        raise TaskUpdateFailedError(task_id_str, "reschedule")

    task = _resync(task_id_str, plan, client)
    return TaskChangeResponse(
        task_id=task.id,
        week_number=task.week_number,
        day_of_week=task.day_of_week,
        is_completed=task.is_completed,
        linked_task_id=task.linked_task_id,
        message="Task rescheduled",
    )


@router.post("/{task_id}/complete", response_model=TaskChangeResponse)
async def complete_overdue_task(
    task_id: Annotated[UUID, Path(description="Weekly task UUID")],
    plan: UserPlan,
    client: SupabaseDep,
    clock: ClockDep,
):
    """Mark an overdue task as completed."""
    task_id_str = str(task_id)
    _plan_task(task_id_str, plan)

    tracker = OverdueTaskTracker(plan.business_plan_id, client=client, clock=clock)
    if not tracker.complete_task(task_id_str):
        raise TaskUpdateFailedError(task_id_str, "complete")

    task = _resync(task_id_str, plan, client)
    return TaskChangeResponse(
        task_id=task.id,
        week_number=task.week_number,
        day_of_week=task.day_of_week,
        is_completed=task.is_completed,
        linked_task_id=task.linked_task_id,
        message="Task completed",
    )
