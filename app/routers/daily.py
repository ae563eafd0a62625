# =============================================================================
# app/routers/daily.py - Today's Tasks
# =============================================================================

from fastapi import APIRouter

from app.dependencies import ClockDep, CurrentUser, SupabaseDep
from core.models.overdue import DailyTasksResponse
from core.services.daily_task_service import DailyTaskService
from core.services.project_service import ProjectService
from lib.week_calendar import current_week_and_day

router = APIRouter()


@router.get("", response_model=DailyTasksResponse)
async def get_daily_tasks(
    user: CurrentUser,
    client: SupabaseDep,
    clock: ClockDep,
):
    """
    Tasks scheduled for today, and how many are still pending.

    Users without a project or business plan get an empty day.
    """
    plan = ProjectService.find_user_business_plan(user.id, clock)
    if not plan:
        now = current_week_and_day(clock)
        return DailyTasksResponse(week_number=now.week_number, day_of_week=now.day_of_week)

    return DailyTaskService(client=client, clock=clock).get_today(plan)
