# =============================================================================
# tests/test_weekly_planner.py - Weekly Task Generator Tests
# =============================================================================
# Tests for response parsing and the generator with a mocked OpenAI client.
#
# Run with: pytest tests/test_weekly_planner.py -v
# =============================================================================

import json
from unittest.mock import MagicMock

import httpx
import pytest
from openai import RateLimitError

from agents.prompts.weekly_tasks_system import build_weekly_tasks_prompt
from agents.weekly_planner import (
    WeeklyTaskGenerationError,
    WeeklyTaskGenerator,
    parse_generated_tasks,
)

GOALS = [{"title": "Open the shop", "category": "growth", "priority": "high", "description": "By April"}]
ITEMS = [{"type": "project", "title": "Fit-out", "priority": "high", "description": "Renovate", "owner": "Ana"}]

TASKS_JSON = [
    {
        "title": "Get contractor quotes",
        "description": "Three quotes",
        "priority": "high",
        "estimatedHours": 3,
        "dayOfWeek": 1,
        "taskType": "project",
    },
    {
        "title": "Draft opening budget",
        "description": "",
        "priority": "medium",
        "estimatedHours": 2,
        "dayOfWeek": 3,
        "taskType": "action",
    },
]


# =============================================================================
# Parsing
# =============================================================================

class TestParseGeneratedTasks:
    """Tests for parse_generated_tasks()."""

    def test_bare_array(self):
        tasks = parse_generated_tasks(json.dumps(TASKS_JSON))

        assert [t.title for t in tasks] == ["Get contractor quotes", "Draft opening budget"]
        assert tasks[0].dayOfWeek == 1

    def test_fenced_array(self):
        content = "```json\n" + json.dumps(TASKS_JSON) + "\n```"

        assert len(parse_generated_tasks(content)) == 2

    def test_invalid_json(self):
        with pytest.raises(WeeklyTaskGenerationError) as exc_info:
            parse_generated_tasks("not json")
        assert exc_info.value.code == "INVALID_JSON"

    def test_not_an_array(self):
        with pytest.raises(WeeklyTaskGenerationError) as exc_info:
            parse_generated_tasks(json.dumps({"tasks": TASKS_JSON}))
        assert exc_info.value.code == "INVALID_SHAPE"

    def test_invalid_task(self):
        bad = [dict(TASKS_JSON[0], dayOfWeek=9)]

        with pytest.raises(WeeklyTaskGenerationError) as exc_info:
            parse_generated_tasks(json.dumps(bad))
        assert exc_info.value.code == "INVALID_TASK"
        assert exc_info.value.details["errors"]


class TestPrompt:
    """Tests for the prompt builder."""

    def test_includes_week_and_inputs(self):
        prompt = build_weekly_tasks_prompt(GOALS, ITEMS, 3, "Q1", 2025)

        assert "седмица 3" in prompt
        assert "Open the shop" in prompt
        assert "[Проект] Fit-out" in prompt
        assert "Ana" in prompt

    def test_empty_inputs(self):
        prompt = build_weekly_tasks_prompt([], [], 3, "Q1", 2025)

        assert "Няма добавени цели" in prompt


# =============================================================================
# Generator (Mocked OpenAI)
# =============================================================================

class TestWeeklyTaskGenerator:
    """Test WeeklyTaskGenerator with mocked OpenAI responses."""

    @pytest.fixture
    def mock_client(self):
        """OpenAI client whose completion returns TASKS_JSON."""
        client = MagicMock()
        response = MagicMock()
        response.choices = [MagicMock()]
        response.choices[0].message.content = json.dumps(TASKS_JSON)
        client.chat.completions.create.return_value = response
        return client

    def test_generate(self, mock_client):
        generator = WeeklyTaskGenerator(model="test-model", temperature=0.2, max_tokens=500, client=mock_client)

        tasks = generator.generate(GOALS, ITEMS, week_number=3, quarter="Q1", year=2025)

        assert len(tasks) == 2
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["temperature"] == 0.2
        assert kwargs["max_tokens"] == 500
        assert kwargs["messages"][0]["role"] == "system"

    def test_defaults_from_settings(self, mock_client):
        from app.config import settings

        generator = WeeklyTaskGenerator(client=mock_client)

        assert generator.model == settings.OPENAI_MODEL
        assert generator.temperature == settings.WEEKLY_TASKS_TEMPERATURE

    def test_nothing_to_plan(self, mock_client):
        with pytest.raises(WeeklyTaskGenerationError) as exc_info:
            WeeklyTaskGenerator(client=mock_client).generate([], [], 3, "Q1", 2025)

        assert exc_info.value.code == "NOTHING_TO_PLAN"
        mock_client.chat.completions.create.assert_not_called()

    def test_rate_limited(self, mock_client):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        mock_client.chat.completions.create.side_effect = RateLimitError(
            "Rate limit reached",
            response=httpx.Response(429, request=request),
            body=None,
        )

        with pytest.raises(WeeklyTaskGenerationError) as exc_info:
            WeeklyTaskGenerator(client=mock_client).generate(GOALS, ITEMS, 3, "Q1", 2025)

        assert exc_info.value.code == "RATE_LIMITED"

    def test_api_error(self, mock_client):
        mock_client.chat.completions.create.side_effect = RuntimeError("connection reset")

        with pytest.raises(WeeklyTaskGenerationError) as exc_info:
            WeeklyTaskGenerator(client=mock_client).generate(GOALS, ITEMS, 3, "Q1", 2025)

        assert exc_info.value.code == "OPENAI_ERROR"

    def test_empty_response(self, mock_client):
        mock_client.chat.completions.create.return_value.choices[0].message.content = ""

        with pytest.raises(WeeklyTaskGenerationError) as exc_info:
            WeeklyTaskGenerator(client=mock_client).generate(GOALS, ITEMS, 3, "Q1", 2025)

        assert exc_info.value.code == "EMPTY_RESPONSE"
