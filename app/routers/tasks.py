# =============================================================================
# app/routers/tasks.py - Task List -> Weekly Task Sync
# =============================================================================
# The task list itself is edited by the frontend directly in Supabase. After
# editing a task that mirrors a weekly task, the frontend calls this endpoint
# so the change is copied back to the business plan schedule.
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path
from pydantic import BaseModel

from app.dependencies import CurrentUser, SupabaseDep
from app.exceptions import SyncFailedError, TaskNotFoundError
from core.models.task import CanonicalTask, TaskSyncUpdate
from core.services.task_sync_service import TaskSyncService

logger = logging.getLogger(__name__)

router = APIRouter()


class SyncBackResponse(BaseModel):
    """Result of copying a task's changes to its weekly task."""
    task_id: str
    weekly_task_id: str | None
    synced_fields: list[str]


@router.patch("/{task_id}/sync-back", response_model=SyncBackResponse)
async def sync_task_back(
    task_id: Annotated[UUID, Path(description="Task UUID")],
    updates: TaskSyncUpdate,
    user: CurrentUser,
    client: SupabaseDep,
):
    """
    Copy title, priority, status and day_of_week changes of a task back to
    the weekly task it was created from.

    Tasks that don't come from a weekly task are accepted and left alone.

    Raises:
        TaskNotFoundError (404): Unknown task, or not the caller's
        SyncFailedError (502): The weekly task could not be updated
    """
    task_id_str = str(task_id)

    row = client.fetch_task(task_id_str)
    if not row:
        raise TaskNotFoundError(task_id_str)
    task = CanonicalTask.from_db_row(row)
    if task.user_id != str(user.id):
        logger.warning(f"User {user.id} tried to sync back task {task_id_str} they don't own")
        raise TaskNotFoundError(task_id_str)

    if not TaskSyncService(client).sync_task_to_weekly_task(task_id_str, updates):
        raise SyncFailedError(task.source_weekly_task_id or task_id_str)

    synced_fields = sorted(updates.to_weekly_patch()) if task.source_weekly_task_id else []
    return SyncBackResponse(
        task_id=task_id_str,
        weekly_task_id=task.source_weekly_task_id,
        synced_fields=synced_fields,
    )
