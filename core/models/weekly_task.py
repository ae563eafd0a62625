# =============================================================================
# core/models/weekly_task.py - Weekly Task Schemas
# =============================================================================
# A weekly task is one entry in the generated schedule of a business plan,
# positioned on a (week number, day of week) pair.
#
# - WeeklyTask: Full task as stored in the weekly_tasks table
# - WeeklyTaskCreate / WeeklyTaskUpdate: API input (update is a sparse patch)
# - GeneratedWeeklyTask: One task as returned by the weekly task generator
#
# day_of_week may be None: the task belongs to a week but no specific day.
# =============================================================================

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Priority(str, Enum):
    """Task priority shared by weekly and canonical tasks."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskType(str, Enum):
    """
    What part of the business plan a weekly task comes from.

    - project: a quarterly project
    - strategy: a quarterly strategy
    - action: a concrete action or goal
    """
    PROJECT = "project"
    STRATEGY = "strategy"
    ACTION = "action"


class WeeklyTask(BaseModel):
    """
    A task scheduled on a week/day of a business plan.

    Example:
        {
            "id": "0c6f...",
            "title": "Plan the Q1 campaign kickoff",
            "priority": "high",
            "is_completed": false,
            "week_number": 3,
            "day_of_week": 1,
            "task_type": "project",
            "business_plan_id": "8d2a..."
        }
    """

    id: str = Field(..., description="Weekly task UUID")

    title: str = Field(..., min_length=1, description="Task title")

    description: str | None = Field(
        default=None,
        description="Optional longer description"
    )

    priority: Priority = Field(default=Priority.MEDIUM)

    is_completed: bool = Field(default=False)

    # No upper bound: "tomorrow" from Sunday of week 53 is stored as week 54
    week_number: int = Field(
        ...,
        ge=1,
        description="1-based week of the year, Monday-anchored"
    )

    day_of_week: int | None = Field(
        default=None,
        ge=1,
        le=7,
        description="1 (Monday) .. 7 (Sunday), None when no day is assigned"
    )

    task_type: TaskType | None = Field(default=None)

    estimated_hours: float | None = Field(default=None, ge=0)

    business_plan_id: str = Field(..., description="Owning business plan UUID")

    linked_task_id: str | None = Field(
        default=None,
        description="Canonical task mirroring this weekly task"
    )

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "WeeklyTask":
        """Create WeeklyTask from a weekly_tasks row (nullable columns get defaults)."""
        return cls(
            id=str(row["id"]),
            title=row.get("title") or "",
            description=row.get("description") or None,
            priority=row.get("priority") or Priority.MEDIUM,
            is_completed=bool(row.get("is_completed")),
            week_number=row["week_number"],
            day_of_week=row.get("day_of_week"),
            task_type=row.get("task_type") or None,
            estimated_hours=row.get("estimated_hours"),
            business_plan_id=str(row["business_plan_id"]),
            linked_task_id=row.get("linked_task_id"),
        )


class WeeklyTaskCreate(BaseModel):
    """Input for creating a weekly task in a given week."""

    title: str = Field(..., min_length=1, max_length=500)
    description: str | None = Field(default=None, max_length=5000)
    priority: Priority = Field(default=Priority.MEDIUM)
    day_of_week: int | None = Field(default=None, ge=1, le=7)
    task_type: TaskType | None = Field(default=None)
    estimated_hours: float | None = Field(default=None, ge=0)
    is_completed: bool = Field(default=False)

    def to_row(self, business_plan_id: str, week_number: int) -> dict[str, Any]:
        """Build the weekly_tasks insert payload."""
        row = self.model_dump(mode="json")
        row["business_plan_id"] = business_plan_id
        row["week_number"] = week_number
        return row


class WeeklyTaskUpdate(BaseModel):
    """
    Sparse patch for a weekly task.

    Only fields explicitly sent by the client are written.
    """

    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = Field(default=None, max_length=5000)
    priority: Priority | None = None
    is_completed: bool | None = None
    week_number: int | None = Field(default=None, ge=1, le=53)
    day_of_week: int | None = Field(default=None, ge=1, le=7)
    task_type: TaskType | None = None
    estimated_hours: float | None = Field(default=None, ge=0)

    def to_patch(self) -> dict[str, Any]:
        """Columns to write: everything the client set, including explicit nulls."""
        return self.model_dump(mode="json", exclude_unset=True)


class GeneratedWeeklyTask(BaseModel):
    """
    One task produced by the weekly task generator.

    Field names follow the camelCase JSON the model is asked to emit.
    """

    title: str = Field(..., min_length=1)
    description: str = Field(default="")
    priority: Priority = Field(default=Priority.MEDIUM)
    estimatedHours: float | None = Field(default=None, ge=0)
    dayOfWeek: int = Field(..., ge=1, le=7)
    taskType: TaskType | None = Field(default=None)

    def to_create(self) -> WeeklyTaskCreate:
        """Convert to the regular create input."""
        return WeeklyTaskCreate(
            title=self.title,
            description=self.description or None,
            priority=self.priority,
            day_of_week=self.dayOfWeek,
            task_type=self.taskType,
            estimated_hours=self.estimatedHours,
        )
