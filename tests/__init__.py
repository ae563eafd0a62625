# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the BizPlanner API:
# - test_week_calendar.py: Week/day calendar math
# - test_overdue_service.py: Overdue detection and rescheduling
# - test_task_sync_service.py: Weekly task <-> task list sync
# - test_weekly_task_service.py / test_daily_task_service.py: Services
# - test_weekly_planner.py: LLM week generation (mocked OpenAI)
# - test_models.py: Pydantic model validation
# - test_workers.py: Celery task bodies
# - test_api.py: API endpoints via TestClient
#
# Run tests with: pytest
# =============================================================================
