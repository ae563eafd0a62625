# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the scheduling logic:
# - models/: Pydantic schemas for weekly tasks, tasks and overdue views
# - services/: Overdue detection, rescheduling, task sync, CRUD
#
# Code in this package should NOT import from FastAPI routers or Celery.
# This keeps the logic testable and reusable.
# =============================================================================
