# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - weekly_task.py: Weekly task schemas (stored, create, update, generated)
# - task.py: Canonical task-list schemas and the reverse-sync patch
# - overdue.py: Overdue/daily views and reschedule requests
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Weekly Task Models - Business plan schedule
# -----------------------------------------------------------------------------
from .weekly_task import (
    GeneratedWeeklyTask,
    Priority,
    TaskType,
    WeeklyTask,
    WeeklyTaskCreate,
    WeeklyTaskUpdate,
)

# -----------------------------------------------------------------------------
# Task Models - Project task list
# -----------------------------------------------------------------------------
from .task import (
    CanonicalTask,
    TaskStatus,
    TaskSyncUpdate,
)

# -----------------------------------------------------------------------------
# Overdue / Daily Models
# -----------------------------------------------------------------------------
from .overdue import (
    DailyTask,
    DailyTasksResponse,
    OverdueTask,
    RescheduleRequest,
    RescheduleTarget,
)

__all__ = [
    # Weekly tasks
    "GeneratedWeeklyTask",
    "Priority",
    "TaskType",
    "WeeklyTask",
    "WeeklyTaskCreate",
    "WeeklyTaskUpdate",
    # Tasks
    "CanonicalTask",
    "TaskStatus",
    "TaskSyncUpdate",
    # Overdue / daily
    "DailyTask",
    "DailyTasksResponse",
    "OverdueTask",
    "RescheduleRequest",
    "RescheduleTarget",
]
