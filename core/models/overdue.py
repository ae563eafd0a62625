# =============================================================================
# core/models/overdue.py - Overdue / Daily View Schemas
# =============================================================================
# Derived views over weekly tasks. Nothing here is persisted.
# =============================================================================

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from .weekly_task import Priority, TaskType, WeeklyTask


class OverdueTask(BaseModel):
    """
    A weekly task whose scheduled (week, day) is already behind us.

    original_week_number/original_day_of_week keep the position the task was
    overdue from, for display, even after it has been rescheduled.
    """

    id: str
    title: str
    description: str | None = None
    priority: Priority = Priority.MEDIUM
    task_type: TaskType | None = None
    business_plan_id: str
    original_week_number: int
    original_day_of_week: int | None = None
    days_overdue: int = Field(..., ge=0)

    @classmethod
    def from_weekly_task(cls, task: WeeklyTask, days_overdue: int) -> "OverdueTask":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            priority=task.priority,
            task_type=task.task_type,
            business_plan_id=task.business_plan_id,
            original_week_number=task.week_number,
            original_day_of_week=task.day_of_week,
            days_overdue=days_overdue,
        )


class RescheduleTarget(str, Enum):
    """Shortcut targets for moving an overdue task."""
    TODAY = "today"
    TOMORROW = "tomorrow"


class RescheduleRequest(BaseModel):
    """
    Where to move an overdue task.

    Either a shortcut target, or an explicit week_number + day_of_week.

    Examples:
        {"target": "tomorrow"}
        {"week_number": 14, "day_of_week": 2}
    """

    target: RescheduleTarget | None = None
    week_number: int | None = Field(default=None, ge=1, le=53)
    day_of_week: int | None = Field(default=None, ge=1, le=7)

    @model_validator(mode="after")
    def check_target(self) -> "RescheduleRequest":
        explicit = self.week_number is not None or self.day_of_week is not None
        if self.target is not None and explicit:
            raise ValueError("Give either target or week_number/day_of_week, not both")
        if self.target is None:
            if self.week_number is None or self.day_of_week is None:
                raise ValueError("week_number and day_of_week are both required without a target")
        return self


class DailyTask(BaseModel):
    """A weekly task scheduled for today."""
    id: str
    title: str
    is_completed: bool = False


class DailyTasksResponse(BaseModel):
    """Today's tasks and how many are still pending."""
    week_number: int
    day_of_week: int
    tasks: list[DailyTask] = Field(default_factory=list)
    pending_count: int = 0
