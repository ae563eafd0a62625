# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .project_service import PlanContext, ProjectService
from .overdue_service import OverdueService, OverdueTaskTracker
from .task_sync_service import TaskSyncService
from .weekly_task_service import WeeklyTaskService
from .daily_task_service import DailyTaskService

__all__ = [
    "PlanContext",
    "ProjectService",
    "OverdueService",
    "OverdueTaskTracker",
    "TaskSyncService",
    "WeeklyTaskService",
    "DailyTaskService",
]
