# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Background jobs for the business plan schedule.
#
# Tasks:
# - sync_week_to_tasks: Mirror every weekly task of a week into the task list
# - generate_week: Generate a week with the LLM, persist it, then mirror it
# =============================================================================

import logging
from typing import Any

from celery import shared_task, current_task

logger = logging.getLogger(__name__)


# =============================================================================
# Task State Updates
# =============================================================================

def update_progress(current: int, total: int, message: str = "Processing..."):
    """
    Update task progress for polling.

    Args:
        current: Current step number
        total: Total steps
        message: Status message
    """
    if current_task:
        current_task.update_state(
            state="PROGRESS",
            meta={
                "current": current,
                "total": total,
                "percent": int((current / total) * 100),
                "message": message,
            }
        )


# =============================================================================
# Week Sync
# =============================================================================

@shared_task(bind=True, name="workers.tasks.sync_week_to_tasks")
def sync_week_to_tasks(
    self,
    business_plan_id: str,
    week_number: int,
    year: int,
    project_id: str,
    user_id: str,
) -> dict[str, Any]:
    """
    Mirror all weekly tasks of one week into the project's task list.

    Returns:
        Dict with:
        - success: bool (False if any task failed to sync)
        - synced: {weekly_task_id: task_id} for the tasks that synced
        - failed: weekly task ids that didn't
    """
    from core.services.task_sync_service import TaskSyncService

    logger.info(f"Syncing week {week_number} of plan {business_plan_id}")
    update_progress(1, 2, "Syncing weekly tasks...")

    results = TaskSyncService().sync_week(
        business_plan_id=business_plan_id,
        week_number=week_number,
        year=year,
        project_id=project_id,
        user_id=user_id,
    )

    synced = {weekly_id: task_id for weekly_id, task_id in results.items() if task_id}
    failed = [weekly_id for weekly_id, task_id in results.items() if not task_id]

    update_progress(2, 2, "Done")
    return {
        "success": not failed,
        "week_number": week_number,
        "synced": synced,
        "failed": failed,
    }


# =============================================================================
# Week Generation
# =============================================================================

@shared_task(bind=True, name="workers.tasks.generate_week")
def generate_week(
    self,
    business_plan_id: str,
    week_number: int,
    quarter: str,
    year: int,
    project_id: str,
    user_id: str,
    goals: list[dict[str, Any]],
    items: list[dict[str, Any]],
) -> dict[str, Any]:
    """
    Generate a week of tasks, replace the week's tasks with them and mirror
    them into the task list.

    Returns:
        Dict with success flag, created weekly task ids and sync results
    """
    from agents.weekly_planner import WeeklyTaskGenerator, WeeklyTaskGenerationError
    from core.services.task_sync_service import TaskSyncService
    from core.services.weekly_task_service import WeeklyTaskService
    from lib.supabase_client import SupabaseClientError

    try:
        update_progress(1, 3, "Generating tasks...")
        generated = WeeklyTaskGenerator().generate(goals, items, week_number, quarter, year)

        update_progress(2, 3, "Saving tasks...")
        sync = TaskSyncService()
        created = WeeklyTaskService.replace_week(
            business_plan_id,
            week_number,
            [task.to_create() for task in generated],
            sync=sync,
        )

        update_progress(3, 3, "Syncing to task list...")
        linked = {
            task.id: sync.sync_weekly_task_to_tasks(
                task, week_number, year, business_plan_id, project_id, user_id
            )
            for task in created
        }

        return {
            "success": True,
            "week_number": week_number,
            "created": [task.id for task in created],
            "failed_syncs": [weekly_id for weekly_id, task_id in linked.items() if not task_id],
        }

    except (WeeklyTaskGenerationError, SupabaseClientError) as e:
        logger.error(f"Week generation failed for plan {business_plan_id} week {week_number}: {e}")
        return {
            "success": False,
            "week_number": week_number,
            "error": str(e),
            "code": e.code,
        }
