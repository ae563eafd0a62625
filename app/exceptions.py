# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors should tell HOW to fix, not just WHAT failed.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class BizPlannerException(Exception):
    """
    Base exception for the BizPlanner API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "BIZPLANNER_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Project / Business Plan Exceptions
# =============================================================================

class ProjectNotFoundError(BizPlannerException):
    """Raised when the user has no project (or doesn't own the given one)."""

    def __init__(self, user_id: str):
        super().__init__(
            message=f"No project found for user: {user_id}",
            code="PROJECT_NOT_FOUND",
            status_code=404,
            suggestion="Create a project first",
            details={"user_id": user_id}
        )


class BusinessPlanNotFoundError(BizPlannerException):
    """Raised when a business plan doesn't exist or belongs to someone else."""

    def __init__(self, business_plan_id: str | None = None):
        super().__init__(
            message=f"Business plan not found: {business_plan_id}" if business_plan_id
            else "Business plan not found",
            code="BUSINESS_PLAN_NOT_FOUND",
            status_code=404,
            suggestion="Sync the marketing plan into a business plan before scheduling weeks",
            details={"business_plan_id": business_plan_id} if business_plan_id else {}
        )


# =============================================================================
# Task Exceptions
# =============================================================================

class WeeklyTaskNotFoundError(BizPlannerException):
    """Raised when a weekly task ID doesn't exist."""

    def __init__(self, task_id: str):
        super().__init__(
            message=f"Weekly task not found: {task_id}",
            code="WEEKLY_TASK_NOT_FOUND",
            status_code=404,
            suggestion="Check that the task id is correct and hasn't been deleted",
            details={"task_id": task_id}
        )


class TaskNotFoundError(BizPlannerException):
    """Raised when a canonical task ID doesn't exist."""

    def __init__(self, task_id: str):
        super().__init__(
            message=f"Task not found: {task_id}",
            code="TASK_NOT_FOUND",
            status_code=404,
            suggestion="Check that the task id is correct",
            details={"task_id": task_id}
        )


class TaskUpdateFailedError(BizPlannerException):
    """Raised when a reschedule/complete/sync write didn't go through."""

    def __init__(self, task_id: str, operation: str):
        super().__init__(
            message=f"Could not {operation} task: {task_id}",
            code="TASK_UPDATE_FAILED",
            status_code=502,
            suggestion="The database did not accept the change. Try again in a moment",
            details={"task_id": task_id, "operation": operation}
        )


class SyncFailedError(BizPlannerException):
    """Raised when a weekly task could not be mirrored into the task list."""

    def __init__(self, weekly_task_id: str):
        super().__init__(
            message=f"Failed to sync weekly task to tasks: {weekly_task_id}",
            code="SYNC_FAILED",
            status_code=502,
            suggestion="The weekly task was saved; retry the sync for this week",
            details={"weekly_task_id": weekly_task_id}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def bizplanner_exception_handler(
    request: Request,
    exc: BizPlannerException
) -> JSONResponse:
    """
    Convert BizPlannerException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
