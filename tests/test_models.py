# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the scheduling models to ensure:
# - Valid data is accepted and parsed correctly
# - Invalid data raises ValidationError
# - Database rows with missing/nullable columns are handled
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

import pytest
from pydantic import ValidationError

from core.models import (
    CanonicalTask,
    GeneratedWeeklyTask,
    OverdueTask,
    Priority,
    RescheduleRequest,
    RescheduleTarget,
    TaskStatus,
    TaskSyncUpdate,
    TaskType,
    WeeklyTask,
    WeeklyTaskCreate,
    WeeklyTaskUpdate,
)


# =============================================================================
# Weekly Task Models
# =============================================================================

class TestWeeklyTask:
    """Tests for WeeklyTask."""

    def test_from_db_row(self):
        row = {
            "id": "a1",
            "title": "Register company",
            "description": "",
            "priority": "high",
            "is_completed": None,
            "week_number": 2,
            "day_of_week": 5,
            "task_type": "project",
            "estimated_hours": 1.5,
            "business_plan_id": "p1",
            "linked_task_id": None,
        }

        task = WeeklyTask.from_db_row(row)

        assert task.priority == Priority.HIGH
        assert task.task_type == TaskType.PROJECT
        assert task.is_completed is False
        assert task.description is None

    def test_from_db_row_missing_fields(self):
        """Nullable columns fall back to defaults."""
        task = WeeklyTask.from_db_row({
            "id": "a1",
            "title": "x",
            "week_number": 2,
            "business_plan_id": "p1",
        })

        assert task.priority == Priority.MEDIUM
        assert task.day_of_week is None
        assert task.task_type is None

    @pytest.mark.parametrize("field,value", [
        ("week_number", 0),
        ("day_of_week", 0),
        ("day_of_week", 8),
    ])
    def test_out_of_range_position(self, field, value):
        data = {"id": "a1", "title": "x", "week_number": 2, "business_plan_id": "p1", field: value}
        with pytest.raises(ValidationError):
            WeeklyTask(**data)

    def test_stored_week_54_is_readable(self):
        """Rescheduling past Sunday of week 53 leaves week 54 in storage."""
        task = WeeklyTask.from_db_row({
            "id": "a1",
            "title": "x",
            "week_number": 54,
            "day_of_week": 1,
            "business_plan_id": "p1",
        })

        assert task.week_number == 54

    def test_input_week_still_capped(self):
        with pytest.raises(ValidationError):
            WeeklyTaskUpdate(week_number=54)

    def test_invalid_priority(self):
        with pytest.raises(ValidationError):
            WeeklyTaskCreate(title="x", priority="urgent")


class TestWeeklyTaskCreateUpdate:
    """Tests for the create/update inputs."""

    def test_to_row(self):
        row = WeeklyTaskCreate(title="x", day_of_week=3).to_row("p1", 7)

        assert row["business_plan_id"] == "p1"
        assert row["week_number"] == 7
        assert row["day_of_week"] == 3
        assert row["priority"] == "medium"
        assert row["is_completed"] is False

    def test_empty_title_rejected(self):
        with pytest.raises(ValidationError):
            WeeklyTaskCreate(title="")

    def test_patch_contains_only_set_fields(self):
        patch = WeeklyTaskUpdate(priority="low", description=None).to_patch()

        assert patch == {"priority": "low", "description": None}


class TestGeneratedWeeklyTask:
    """Tests for generator output."""

    def test_to_create(self):
        generated = GeneratedWeeklyTask(
            title="Visit suppliers",
            description="",
            priority="high",
            estimatedHours=3,
            dayOfWeek=2,
            taskType="action",
        )

        create = generated.to_create()

        assert create.day_of_week == 2
        assert create.estimated_hours == 3
        assert create.task_type == TaskType.ACTION
        assert create.description is None

    def test_day_is_required(self):
        with pytest.raises(ValidationError):
            GeneratedWeeklyTask(title="x")


# =============================================================================
# Task Models
# =============================================================================

class TestCanonicalTask:
    """Tests for CanonicalTask."""

    def test_from_db_row(self):
        task = CanonicalTask.from_db_row({
            "id": "t1",
            "title": "Call bank",
            "status": "in-progress",
            "priority": None,
            "due_date": "2025-01-13",
            "project_id": "pr1",
            "user_id": "u1",
            "source_weekly_task_id": "w1",
        })

        assert task.status == TaskStatus.IN_PROGRESS
        assert task.priority == Priority.MEDIUM
        assert task.due_date.isoformat() == "2025-01-13"
        assert task.source_weekly_task_id == "w1"


class TestTaskSyncUpdate:
    """Tests for the reverse-sync patch."""

    def test_done_maps_to_completed(self):
        assert TaskSyncUpdate(status="done").to_weekly_patch() == {"is_completed": True}

    def test_todo_maps_to_not_completed(self):
        assert TaskSyncUpdate(status="todo").to_weekly_patch() == {"is_completed": False}

    def test_explicit_nulls_are_not_mirrored(self):
        assert TaskSyncUpdate(title=None, day_of_week=None).to_weekly_patch() == {}

    def test_all_fields(self):
        patch = TaskSyncUpdate(
            title="t", description="d", priority="high", status="done", day_of_week=6
        ).to_weekly_patch()

        assert patch == {"title": "t", "priority": "high", "is_completed": True, "day_of_week": 6}


# =============================================================================
# Overdue Models
# =============================================================================

class TestRescheduleRequest:
    """Tests for reschedule input validation."""

    def test_target(self):
        assert RescheduleRequest(target="tomorrow").target == RescheduleTarget.TOMORROW

    def test_explicit_position(self):
        request = RescheduleRequest(week_number=20, day_of_week=3)
        assert (request.week_number, request.day_of_week) == (20, 3)

    def test_both_rejected(self):
        with pytest.raises(ValidationError):
            RescheduleRequest(target="today", week_number=20, day_of_week=3)

    def test_partial_position_rejected(self):
        with pytest.raises(ValidationError):
            RescheduleRequest(week_number=20)

    def test_empty_rejected(self):
        with pytest.raises(ValidationError):
            RescheduleRequest()

    def test_unknown_target_rejected(self):
        with pytest.raises(ValidationError):
            RescheduleRequest(target="yesterday")


class TestOverdueTask:
    """Tests for OverdueTask."""

    def test_negative_days_rejected(self):
        with pytest.raises(ValidationError):
            OverdueTask(
                id="a", title="x", business_plan_id="p",
                original_week_number=1, days_overdue=-1,
            )
