# =============================================================================
# app/routers/weekly_tasks.py - Weekly Task Endpoints
# =============================================================================
# CRUD for the weekly tasks of a business plan, LLM week generation and
# bulk week sync. Single-task writes mirror the task into the project's task
# list synchronously; whole-week operations can run as Celery jobs.
#
# Routes (mounted under /api/v1):
#   GET    /business-plans/{plan_id}/weeks/{week}/tasks
#   POST   /business-plans/{plan_id}/weeks/{week}/tasks
#   PUT    /business-plans/{plan_id}/weeks/{week}/tasks
#   POST   /business-plans/{plan_id}/weeks/{week}/generate
#   POST   /business-plans/{plan_id}/weeks/{week}/sync
#   PATCH  /weekly-tasks/{task_id}
#   DELETE /weekly-tasks/{task_id}
# =============================================================================

import logging
from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, HTTPException, Path, Query, Response, status
from pydantic import BaseModel, Field

from app.dependencies import ClockDep, CurrentUser, GeneratorDep, SupabaseDep
from app.exceptions import (
    BusinessPlanNotFoundError,
    SyncFailedError,
    WeeklyTaskNotFoundError,
)
from core.models.weekly_task import (
    GeneratedWeeklyTask,
    WeeklyTask,
    WeeklyTaskCreate,
    WeeklyTaskUpdate,
)
from core.services.project_service import PlanContext, ProjectService
from core.services.task_sync_service import TaskSyncService
from core.services.weekly_task_service import WeeklyTaskService
from lib.week_calendar import quarter_for_week

logger = logging.getLogger(__name__)

router = APIRouter()

PlanIdPath = Annotated[UUID, Path(description="Business plan UUID")]
WeekPath = Annotated[int, Path(ge=1, le=53, description="Week number")]
TaskIdPath = Annotated[UUID, Path(description="Weekly task UUID")]
SyncQuery = Annotated[bool, Query(description="Mirror the change into the task list")]


# =============================================================================
# Request/Response Models
# =============================================================================

class WeekTasksResponse(BaseModel):
    """All tasks of one week of a plan."""
    business_plan_id: str
    week_number: int
    quarter: str
    tasks: list[WeeklyTask] = Field(default_factory=list)


class GenerateWeekRequest(BaseModel):
    """Input for LLM week generation."""
    goals: list[dict[str, Any]] = Field(default_factory=list)
    items: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Quarter projects/strategies/actions"
    )
    background: bool = Field(
        default=False,
        description="Generate, save and sync in a Celery job instead of returning a preview"
    )


class GenerateWeekResponse(BaseModel):
    """Generated preview, or the id of the queued generation job."""
    week_number: int
    quarter: str
    tasks: list[GeneratedWeeklyTask] = Field(default_factory=list)
    job_id: str | None = None
    message: str


class JobQueuedResponse(BaseModel):
    """A background job was queued; poll /jobs/{job_id}."""
    job_id: str
    message: str


# =============================================================================
# Helpers
# =============================================================================

def _owned_task(task_id: str, user: CurrentUser, clock: ClockDep) -> tuple[WeeklyTask, PlanContext]:
    """Fetch a weekly task and the plan it belongs to, if the user owns it."""
    task = WeeklyTaskService.get(task_id)
    try:
        plan = ProjectService.get_owned_business_plan(task.business_plan_id, user.id, clock)
    except BusinessPlanNotFoundError:
        raise WeeklyTaskNotFoundError(task_id)
    return task, plan


def _sync_one(task: WeeklyTask, plan: PlanContext, client: SupabaseDep) -> WeeklyTask:
    """Mirror one task and return it with its link filled in."""
    linked_id = TaskSyncService(client).sync_weekly_task_to_tasks(
        task,
        week_number=task.week_number,
        year=plan.year,
        business_plan_id=plan.business_plan_id,
        project_id=plan.project_id,
        user_id=plan.user_id,
    )
    if linked_id is None:
        raise SyncFailedError(task.id)
    return task.model_copy(update={"linked_task_id": linked_id})


# =============================================================================
# Week Endpoints
# =============================================================================

@router.get("/business-plans/{plan_id}/weeks/{week_number}/tasks", response_model=WeekTasksResponse)
async def list_week_tasks(
    plan_id: PlanIdPath,
    week_number: WeekPath,
    user: CurrentUser,
    clock: ClockDep,
):
    """List the tasks of one week, ordered by day."""
    plan = ProjectService.get_owned_business_plan(plan_id, user.id, clock)
    tasks = WeeklyTaskService.list_for_week(plan.business_plan_id, week_number)

    return WeekTasksResponse(
        business_plan_id=plan.business_plan_id,
        week_number=week_number,
        quarter=quarter_for_week(week_number),
        tasks=tasks,
    )


@router.post(
    "/business-plans/{plan_id}/weeks/{week_number}/tasks",
    response_model=WeeklyTask,
    status_code=status.HTTP_201_CREATED,
)
async def create_week_task(
    plan_id: PlanIdPath,
    week_number: WeekPath,
    data: WeeklyTaskCreate,
    user: CurrentUser,
    clock: ClockDep,
    client: SupabaseDep,
    sync: SyncQuery = True,
):
    """
    Add a task to a week and mirror it into the task list.

    Raises:
        SyncFailedError (502): The task was saved but could not be mirrored
    """
    plan = ProjectService.get_owned_business_plan(plan_id, user.id, clock)
    task = WeeklyTaskService.create(plan.business_plan_id, week_number, data)

    if sync:
        task = _sync_one(task, plan, client)
    return task


@router.put("/business-plans/{plan_id}/weeks/{week_number}/tasks", response_model=WeekTasksResponse)
async def replace_week_tasks(
    plan_id: PlanIdPath,
    week_number: WeekPath,
    tasks: list[WeeklyTaskCreate],
    user: CurrentUser,
    clock: ClockDep,
    client: SupabaseDep,
    sync: SyncQuery = True,
):
    """
    Replace every task of a week (e.g. with an accepted generated preview).

    Tasks that fail to mirror are returned without a linked_task_id.
    """
    plan = ProjectService.get_owned_business_plan(plan_id, user.id, clock)
    sync_service = TaskSyncService(client)
    created = WeeklyTaskService.replace_week(
        plan.business_plan_id, week_number, tasks, sync=sync_service
    )

    if sync:
        synced = []
        for task in created:
            linked_id = sync_service.sync_weekly_task_to_tasks(
                task,
                week_number=week_number,
                year=plan.year,
                business_plan_id=plan.business_plan_id,
                project_id=plan.project_id,
                user_id=plan.user_id,
            )
            synced.append(task.model_copy(update={"linked_task_id": linked_id}))
        created = synced

    return WeekTasksResponse(
        business_plan_id=plan.business_plan_id,
        week_number=week_number,
        quarter=quarter_for_week(week_number),
        tasks=created,
    )


@router.post("/business-plans/{plan_id}/weeks/{week_number}/generate", response_model=GenerateWeekResponse)
async def generate_week_tasks(
    plan_id: PlanIdPath,
    week_number: WeekPath,
    request: GenerateWeekRequest,
    user: CurrentUser,
    clock: ClockDep,
    generator: GeneratorDep,
):
    """
    Generate the tasks of a week from the quarter's goals and plan items.

    By default returns the generated tasks as a preview without saving them.
    With background=true a Celery job generates, replaces the week and
    syncs it to the task list.

    Raises:
        WeeklyTaskGenerationError: If generation fails (preview mode)
    """
    plan = ProjectService.get_owned_business_plan(plan_id, user.id, clock)
    quarter = quarter_for_week(week_number)

    if request.background:
        try:
            from workers.tasks import generate_week

            result = generate_week.delay(
                business_plan_id=plan.business_plan_id,
                week_number=week_number,
                quarter=quarter,
                year=plan.year,
                project_id=plan.project_id,
                user_id=plan.user_id,
                goals=request.goals,
                items=request.items,
            )
        except Exception as e:
            logger.exception(f"Failed to queue generation of week {week_number}: {e}")
            raise HTTPException(status_code=503, detail="Failed to queue job. Is Redis running?")

        return GenerateWeekResponse(
            week_number=week_number,
            quarter=quarter,
            job_id=result.id,
            message=f"Generating week {week_number}. Job ID: {result.id}",
        )

    tasks = generator.generate(request.goals, request.items, week_number, quarter, plan.year)
    return GenerateWeekResponse(
        week_number=week_number,
        quarter=quarter,
        tasks=tasks,
        message=f"Generated {len(tasks)} tasks",
    )


@router.post(
    "/business-plans/{plan_id}/weeks/{week_number}/sync",
    response_model=JobQueuedResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def sync_week_tasks(
    plan_id: PlanIdPath,
    week_number: WeekPath,
    user: CurrentUser,
    clock: ClockDep,
):
    """Queue a job that mirrors every task of the week into the task list."""
    plan = ProjectService.get_owned_business_plan(plan_id, user.id, clock)

    try:
        from workers.tasks import sync_week_to_tasks

        result = sync_week_to_tasks.delay(
            business_plan_id=plan.business_plan_id,
            week_number=week_number,
            year=plan.year,
            project_id=plan.project_id,
            user_id=plan.user_id,
        )
    except Exception as e:
        logger.exception(f"Failed to queue sync of week {week_number}: {e}")
        raise HTTPException(status_code=503, detail="Failed to queue job. Is Redis running?")

    return JobQueuedResponse(
        job_id=result.id,
        message=f"Syncing week {week_number}. Job ID: {result.id}",
    )


# =============================================================================
# Single Task Endpoints
# =============================================================================

@router.patch("/weekly-tasks/{task_id}", response_model=WeeklyTask)
async def update_weekly_task(
    task_id: TaskIdPath,
    data: WeeklyTaskUpdate,
    user: CurrentUser,
    clock: ClockDep,
    client: SupabaseDep,
    sync: SyncQuery = True,
):
    """
    Update a weekly task and its mirror in the task list.

    Only the fields present in the body are changed.
    """
    task_id_str = str(task_id)
    _, plan = _owned_task(task_id_str, user, clock)

    task = WeeklyTaskService.update(task_id_str, data)
    if sync:
        task = _sync_one(task, plan, client)
    return task


@router.delete("/weekly-tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_weekly_task(
    task_id: TaskIdPath,
    user: CurrentUser,
    clock: ClockDep,
    client: SupabaseDep,
):
    """Delete a weekly task and its mirror in the task list."""
    task_id_str = str(task_id)
    _owned_task(task_id_str, user, clock)

    WeeklyTaskService.delete(task_id_str, sync=TaskSyncService(client))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
