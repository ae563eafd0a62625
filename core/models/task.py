# =============================================================================
# core/models/task.py - Canonical Task Schemas
# =============================================================================
# A canonical task lives in the project's main task list. It may mirror a
# weekly task, in which case source_weekly_task_id points back at it.
# =============================================================================

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from .weekly_task import Priority


class TaskStatus(str, Enum):
    """
    Status of a canonical task.

    Only "done" maps to a completed weekly task.
    """
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class CanonicalTask(BaseModel):
    """A task in the project's main task list."""

    id: str
    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: Priority = Priority.MEDIUM
    due_date: date | None = None
    day_of_week: int | None = Field(default=None, ge=1, le=7)
    project_id: str
    user_id: str

    # Back-references to the weekly task this one mirrors
    source_weekly_task_id: str | None = None
    source_week_number: int | None = None
    source_business_plan_id: str | None = None

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "CanonicalTask":
        """Create CanonicalTask from a tasks row."""
        return cls(
            id=str(row["id"]),
            title=row.get("title") or "",
            description=row.get("description"),
            status=row.get("status") or TaskStatus.TODO,
            priority=row.get("priority") or Priority.MEDIUM,
            due_date=row.get("due_date"),
            day_of_week=row.get("day_of_week"),
            project_id=str(row["project_id"]),
            user_id=str(row["user_id"]),
            source_weekly_task_id=row.get("source_weekly_task_id"),
            source_week_number=row.get("source_week_number"),
            source_business_plan_id=row.get("source_business_plan_id"),
        )


class TaskSyncUpdate(BaseModel):
    """
    Changes made to a canonical task that should flow back to its weekly task.

    Only fields that were explicitly set are propagated.

    Example:
        TaskSyncUpdate(status="done")  # marks the weekly task completed, nothing else
    """

    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    priority: Priority | None = None
    status: TaskStatus | None = None
    day_of_week: int | None = Field(default=None, ge=1, le=7)

    def to_weekly_patch(self) -> dict[str, Any]:
        """
        Translate the set fields into weekly_tasks column names.

        description is not mirrored back: the canonical description carries
        provenance text that doesn't belong on the weekly task.
        """
        changes = self.model_dump(mode="json", exclude_unset=True)
        patch: dict[str, Any] = {}

        if changes.get("title") is not None:
            patch["title"] = changes["title"]
        if changes.get("priority") is not None:
            patch["priority"] = changes["priority"]
        if changes.get("status") is not None:
            patch["is_completed"] = changes["status"] == TaskStatus.DONE.value
        if changes.get("day_of_week") is not None:
            patch["day_of_week"] = changes["day_of_week"]

        return patch
