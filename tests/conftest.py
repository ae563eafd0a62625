# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - In-memory stand-in for the supabase-py query builder, installed as the
#   SupabaseClient singleton
# - Pinned clocks and a seeded user/project/business plan
# =============================================================================

import os
import uuid
from copy import deepcopy
from datetime import date
from typing import Any

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from lib.supabase_client import SupabaseClient
from core.services.project_service import PlanContext


USER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_USER_ID = "22222222-2222-2222-2222-222222222222"

# Wednesday of week 11 in 2025
WEDNESDAY = date(2025, 3, 12)
# Sunday of week 11 in 2025
SUNDAY = date(2025, 3, 16)


# =============================================================================
# Fake Supabase
# =============================================================================

class FakeResponse:
    """What .execute() returns: just the data."""

    def __init__(self, data: Any):
        self.data = data


class FakeQuery:
    """
    Chainable query over one in-memory table.

    Supports the subset of the PostgREST builder the app uses:
    select/insert/update/upsert/delete, eq/lte filters, order, limit, single.
    """

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload: Any = None
        self.on_conflict: str | None = None
        self.filters: list = []
        self.orders: list[tuple[str, bool]] = []
        self.max_rows: int | None = None
        self.single_row = False

    # Operations -------------------------------------------------------------

    def select(self, columns: str = "*"):
        self.op = "select"
        return self

    def insert(self, data):
        self.op = "insert"
        self.payload = data
        return self

    def update(self, data):
        self.op = "update"
        self.payload = data
        return self

    def upsert(self, data, on_conflict: str | None = None):
        self.op = "upsert"
        self.payload = data
        self.on_conflict = on_conflict
        return self

    def delete(self):
        self.op = "delete"
        return self

    # Modifiers --------------------------------------------------------------

    def eq(self, column: str, value: Any):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def lte(self, column: str, value: Any):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) <= value)
        return self

    def order(self, column: str, desc: bool = False):
        self.orders.append((column, desc))
        return self

    def limit(self, count: int):
        self.max_rows = count
        return self

    def single(self):
        self.single_row = True
        return self

    # Execution --------------------------------------------------------------

    def _matching(self) -> list[dict]:
        rows = self.db.tables.setdefault(self.table, [])
        return [row for row in rows if all(f(row) for f in self.filters)]

    def execute(self) -> FakeResponse:
        self.db.calls.append((self.table, self.op))
        if (self.table, self.op) in self.db.failures:
            raise Exception(f"simulated {self.op} failure on {self.table}")

        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            created = [self.db.add(self.table, **item) for item in items]
            return FakeResponse(deepcopy(created))

        if self.op == "upsert":
            existing = None
            if self.on_conflict:
                key = self.payload.get(self.on_conflict)
                existing = next((r for r in rows if r.get(self.on_conflict) == key), None)
            if existing is not None:
                existing.update(self.payload)
                return FakeResponse([deepcopy(existing)])
            return FakeResponse([deepcopy(self.db.add(self.table, **self.payload))])

        matched = self._matching()

        if self.op == "update":
            for row in matched:
                row.update(self.payload)
            return FakeResponse(deepcopy(matched))

        if self.op == "delete":
            self.db.tables[self.table] = [r for r in rows if r not in matched]
            return FakeResponse(deepcopy(matched))

        # select: stable sort, last key applied first; nulls sort last
        for column, desc in reversed(self.orders):
            matched.sort(key=lambda r: (r.get(column) is None, r.get(column) or 0), reverse=desc)
        if self.max_rows is not None:
            matched = matched[: self.max_rows]

        if self.single_row:
            if len(matched) != 1:
                raise Exception(
                    "{'code': 'PGRST116', 'message': 'JSON object requested, "
                    f"multiple (or no) rows returned', 'rows': {len(matched)}}}"
                )
            return FakeResponse(deepcopy(matched[0]))

        return FakeResponse(deepcopy(matched))


class FakeSupabase:
    """
    In-memory database with a supabase-py shaped table() entry point.

    Attributes:
        tables: {table name: list of row dicts}
        failures: {(table, op)} pairs whose execute() raises
        calls: Log of (table, op) for every executed query
    """

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.failures: set[tuple[str, str]] = set()
        self.calls: list[tuple[str, str]] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def add(self, table: str, **row) -> dict:
        """Insert a row directly, generating an id if none is given."""
        row.setdefault("id", str(uuid.uuid4()))
        self.tables.setdefault(table, []).append(row)
        return row

    def rows(self, table: str) -> list[dict]:
        return self.tables.get(table, [])

    def get(self, table: str, row_id: str) -> dict | None:
        return next((r for r in self.rows(table) if r["id"] == row_id), None)

    def fail(self, table: str, op: str) -> None:
        self.failures.add((table, op))


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_db(monkeypatch) -> FakeSupabase:
    """Fresh in-memory database installed as the Supabase client."""
    db = FakeSupabase()
    monkeypatch.setattr(SupabaseClient, "_instance", db)
    return db


@pytest.fixture
def plan(fake_db) -> PlanContext:
    """A user owning one project with one 2025 business plan."""
    project = fake_db.add("projects", name="Coffee shop", owner_id=USER_ID)
    business_plan = fake_db.add("business_plans", project_id=project["id"], year=2025)
    return PlanContext(
        user_id=USER_ID,
        project_id=project["id"],
        business_plan_id=business_plan["id"],
        year=2025,
    )


@pytest.fixture
def add_weekly_task(fake_db, plan):
    """Factory inserting a weekly task into the seeded plan."""

    def _add(week_number: int, day_of_week: int | None, **fields) -> dict:
        row = {
            "title": f"Task w{week_number}d{day_of_week}",
            "description": None,
            "priority": "medium",
            "is_completed": False,
            "week_number": week_number,
            "day_of_week": day_of_week,
            "task_type": "action",
            "business_plan_id": plan.business_plan_id,
            "linked_task_id": None,
        }
        row.update(fields)
        return fake_db.add("weekly_tasks", **row)

    return _add


@pytest.fixture
def wednesday_clock():
    """Clock pinned to Wednesday 2025-03-12 (week 11, day 3)."""
    return lambda: WEDNESDAY


@pytest.fixture
def sunday_clock():
    """Clock pinned to Sunday 2025-03-16 (week 11, day 7)."""
    return lambda: SUNDAY
