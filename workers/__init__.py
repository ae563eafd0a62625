# =============================================================================
# workers/ - Celery Background Task Workers
# =============================================================================
# This package contains the Celery configuration and task definitions for
# background processing of business plan weeks.
#
# Components:
# - celery_app.py: Celery app and job lifecycle logging
# - tasks.py: Task definitions (week sync, week generation)
# - config.py: Worker-specific settings
#
# Usage:
#   # Start worker
#   celery -A workers.celery_app worker --loglevel=info
#
#   # Submit task (from API)
#   from workers.tasks import sync_week_to_tasks
#   result = sync_week_to_tasks.delay(plan_id, week, year, project_id, user_id)
# =============================================================================

from .celery_app import celery_app
from . import tasks

__all__ = [
    "celery_app",
    "tasks",
]
