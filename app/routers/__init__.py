# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - overdue.py: Overdue tasks, reschedule and complete
# - daily.py: Today's tasks
# - weekly_tasks.py: Weekly task CRUD, generation, week sync
# - tasks.py: Task list -> weekly task sync
# - jobs.py: Background job status endpoints
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import overdue
from . import daily
from . import weekly_tasks
from . import tasks
from . import jobs

__all__ = [
    "health",
    "overdue",
    "daily",
    "weekly_tasks",
    "tasks",
    "jobs",
]
