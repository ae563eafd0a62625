# =============================================================================
# tests/test_task_sync_service.py - Weekly Task <-> Task List Sync Tests
# =============================================================================
# Run with: pytest tests/test_task_sync_service.py -v
# =============================================================================

from core.models.task import TaskSyncUpdate
from core.models.weekly_task import WeeklyTask
from core.services.task_sync_service import (
    DESCRIPTION_SEPARATOR,
    SOURCE_MARKER,
    TaskSyncService,
    build_task_description,
)


def sync_args(plan, week_number=3):
    return {
        "week_number": week_number,
        "year": plan.year,
        "business_plan_id": plan.business_plan_id,
        "project_id": plan.project_id,
        "user_id": plan.user_id,
    }


# =============================================================================
# Description
# =============================================================================

class TestBuildTaskDescription:
    """Tests for the provenance text on mirrored tasks."""

    def test_with_description_and_day(self):
        text = build_task_description("Call suppliers", 3, 1)

        assert text == (
            f"Call suppliers{DESCRIPTION_SEPARATOR}"
            f"📅 Седмица 3, Понеделник\n{SOURCE_MARKER}"
        )

    def test_without_description(self):
        assert build_task_description(None, 5, 5) == f"📅 Седмица 5, Петък\n{SOURCE_MARKER}"

    def test_without_day(self):
        assert build_task_description("", 7, None) == f"📅 Седмица 7\n{SOURCE_MARKER}"


# =============================================================================
# Weekly task -> task list
# =============================================================================

class TestSyncWeeklyTaskToTasks:
    """Tests for the forward sync."""

    def test_creates_task_and_links_it(self, plan, add_weekly_task, fake_db):
        row = add_weekly_task(3, 1, title="Call suppliers", description="Ask for prices", priority="high")
        task = WeeklyTask.from_db_row(row)

        linked_id = TaskSyncService().sync_weekly_task_to_tasks(task, **sync_args(plan))

        assert linked_id is not None
        [created] = fake_db.rows("tasks")
        assert created["id"] == linked_id
        assert created["title"] == "Call suppliers"
        assert created["priority"] == "high"
        assert created["status"] == "todo"
        # Week 3 of 2025 starts on Monday 2025-01-13
        assert created["due_date"] == "2025-01-13"
        assert created["day_of_week"] == 1
        assert created["user_id"] == plan.user_id
        assert created["project_id"] == plan.project_id
        assert created["source_weekly_task_id"] == task.id
        assert created["source_week_number"] == 3
        assert created["source_business_plan_id"] == plan.business_plan_id
        assert created["description"].startswith("Ask for prices")
        assert fake_db.get("weekly_tasks", task.id)["linked_task_id"] == linked_id

    def test_completed_task_is_done(self, plan, add_weekly_task, fake_db):
        task = WeeklyTask.from_db_row(add_weekly_task(3, 2, is_completed=True))

        TaskSyncService().sync_weekly_task_to_tasks(task, **sync_args(plan))

        assert fake_db.rows("tasks")[0]["status"] == "done"

    def test_no_day_has_no_due_date(self, plan, add_weekly_task, fake_db):
        task = WeeklyTask.from_db_row(add_weekly_task(3, None))

        TaskSyncService().sync_weekly_task_to_tasks(task, **sync_args(plan))

        created = fake_db.rows("tasks")[0]
        assert created["due_date"] is None
        assert created["day_of_week"] is None

    def test_second_sync_updates_the_same_task(self, plan, add_weekly_task, fake_db):
        row = add_weekly_task(3, 1, title="Old title")
        sync = TaskSyncService()

        first = sync.sync_weekly_task_to_tasks(WeeklyTask.from_db_row(row), **sync_args(plan))

        row = fake_db.get("weekly_tasks", row["id"])
        row["title"] = "New title"
        row["day_of_week"] = 4
        second = sync.sync_weekly_task_to_tasks(WeeklyTask.from_db_row(row), **sync_args(plan))

        assert first == second
        [task] = fake_db.rows("tasks")
        assert task["title"] == "New title"
        assert task["due_date"] == "2025-01-16"

    def test_link_is_not_rewritten_when_unchanged(self, plan, add_weekly_task, fake_db):
        row = add_weekly_task(3, 1)
        sync = TaskSyncService()
        sync.sync_weekly_task_to_tasks(WeeklyTask.from_db_row(row), **sync_args(plan))
        fake_db.calls.clear()

        linked = WeeklyTask.from_db_row(fake_db.get("weekly_tasks", row["id"]))
        sync.sync_weekly_task_to_tasks(linked, **sync_args(plan))

        assert ("weekly_tasks", "update") not in fake_db.calls

    def test_upsert_failure_returns_none(self, plan, add_weekly_task, fake_db):
        task = WeeklyTask.from_db_row(add_weekly_task(3, 1))
        fake_db.fail("tasks", "upsert")

        assert TaskSyncService().sync_weekly_task_to_tasks(task, **sync_args(plan)) is None
        assert fake_db.get("weekly_tasks", task.id)["linked_task_id"] is None

    def test_link_failure_returns_none(self, plan, add_weekly_task, fake_db):
        """The task row is written but the back-link isn't: reported as a failure."""
        task = WeeklyTask.from_db_row(add_weekly_task(3, 1))
        fake_db.fail("weekly_tasks", "update")

        assert TaskSyncService().sync_weekly_task_to_tasks(task, **sync_args(plan)) is None
        assert len(fake_db.rows("tasks")) == 1


class TestSyncWeek:
    """Tests for syncing a whole week."""

    def test_syncs_every_task_of_the_week(self, plan, add_weekly_task, fake_db):
        a = add_weekly_task(3, 1)
        b = add_weekly_task(3, None)
        add_weekly_task(4, 1)

        results = TaskSyncService().sync_week(
            plan.business_plan_id, 3, plan.year, plan.project_id, plan.user_id
        )

        assert set(results) == {a["id"], b["id"]}
        assert all(results.values())
        assert len(fake_db.rows("tasks")) == 2

    def test_unreadable_week_returns_empty(self, plan, fake_db):
        fake_db.fail("weekly_tasks", "select")

        results = TaskSyncService().sync_week(
            plan.business_plan_id, 3, plan.year, plan.project_id, plan.user_id
        )

        assert results == {}


# =============================================================================
# Task list -> weekly task
# =============================================================================

class TestSyncTaskToWeeklyTask:
    """Tests for the reverse sync."""

    def _linked(self, plan, add_weekly_task, fake_db, **fields):
        row = add_weekly_task(3, 1, title="Original", priority="low", **fields)
        linked_id = TaskSyncService().sync_weekly_task_to_tasks(
            WeeklyTask.from_db_row(row), **sync_args(plan)
        )
        return row["id"], linked_id

    def test_status_done_only_completes(self, plan, add_weekly_task, fake_db):
        weekly_id, task_id = self._linked(plan, add_weekly_task, fake_db)

        assert TaskSyncService().sync_task_to_weekly_task(task_id, {"status": "done"}) is True

        weekly = fake_db.get("weekly_tasks", weekly_id)
        assert weekly["is_completed"] is True
        assert weekly["title"] == "Original"
        assert weekly["priority"] == "low"
        assert weekly["day_of_week"] == 1

    def test_status_other_than_done_reopens(self, plan, add_weekly_task, fake_db):
        weekly_id, task_id = self._linked(plan, add_weekly_task, fake_db, is_completed=True)

        TaskSyncService().sync_task_to_weekly_task(task_id, TaskSyncUpdate(status="in-progress"))

        assert fake_db.get("weekly_tasks", weekly_id)["is_completed"] is False

    def test_title_priority_and_day(self, plan, add_weekly_task, fake_db):
        weekly_id, task_id = self._linked(plan, add_weekly_task, fake_db)

        TaskSyncService().sync_task_to_weekly_task(
            task_id, {"title": "Renamed", "priority": "high", "day_of_week": 5}
        )

        weekly = fake_db.get("weekly_tasks", weekly_id)
        assert (weekly["title"], weekly["priority"], weekly["day_of_week"]) == ("Renamed", "high", 5)
        assert weekly["is_completed"] is False

    def test_description_is_not_mirrored(self, plan, add_weekly_task, fake_db):
        weekly_id, task_id = self._linked(plan, add_weekly_task, fake_db, description="Keep me")
        fake_db.calls.clear()

        assert TaskSyncService().sync_task_to_weekly_task(task_id, {"description": "Changed"}) is True

        assert fake_db.get("weekly_tasks", weekly_id)["description"] == "Keep me"
        assert ("weekly_tasks", "update") not in fake_db.calls

    def test_task_without_source_is_ignored(self, plan, fake_db):
        task = fake_db.add("tasks", title="Manual", user_id=plan.user_id, project_id=plan.project_id)

        assert TaskSyncService().sync_task_to_weekly_task(task["id"], {"status": "done"}) is True
        assert ("weekly_tasks", "update") not in fake_db.calls

    def test_unknown_task_is_ignored(self, plan, fake_db):
        assert TaskSyncService().sync_task_to_weekly_task("missing", {"status": "done"}) is True

    def test_storage_failure(self, plan, add_weekly_task, fake_db):
        _, task_id = self._linked(plan, add_weekly_task, fake_db)
        fake_db.fail("weekly_tasks", "update")

        assert TaskSyncService().sync_task_to_weekly_task(task_id, {"status": "done"}) is False


# =============================================================================
# Cascade delete
# =============================================================================

class TestDeleteLinkedTask:
    """Tests for deleting the mirror of a weekly task."""

    def test_deletes_the_linked_task(self, plan, add_weekly_task, fake_db):
        row = add_weekly_task(3, 1)
        TaskSyncService().sync_weekly_task_to_tasks(WeeklyTask.from_db_row(row), **sync_args(plan))

        assert TaskSyncService().delete_linked_task(row["id"]) is True
        assert fake_db.rows("tasks") == []

    def test_nothing_to_delete(self, plan, add_weekly_task, fake_db):
        row = add_weekly_task(3, 1)

        assert TaskSyncService().delete_linked_task(row["id"]) is True
        assert ("tasks", "delete") not in fake_db.calls

    def test_delete_failure(self, plan, add_weekly_task, fake_db):
        row = add_weekly_task(3, 1)
        TaskSyncService().sync_weekly_task_to_tasks(WeeklyTask.from_db_row(row), **sync_args(plan))
        fake_db.fail("tasks", "delete")

        assert TaskSyncService().delete_linked_task(row["id"]) is False
        assert len(fake_db.rows("tasks")) == 1
