# =============================================================================
# agents/weekly_planner.py - Weekly Task Generator
# =============================================================================
# Turns a quarter's goals and plan items into concrete tasks for one week,
# using an OpenAI chat completion.
#
# Flow:
# 1. Build the system prompt from goals/items
# 2. Ask the model for a bare JSON array
# 3. Strip markdown fences, parse, validate each entry with pydantic
#
# The generated tasks are NOT persisted here; see WeeklyTaskService.replace_week.
#
# Usage:
#   from agents.weekly_planner import WeeklyTaskGenerator
#   tasks = WeeklyTaskGenerator().generate(goals, items, week_number=3, quarter="Q1", year=2025)
# =============================================================================

from __future__ import annotations

import json
import logging
import re
from typing import Any

from openai import OpenAI, RateLimitError
from pydantic import ValidationError

from app.config import settings
from agents.prompts.weekly_tasks_system import build_weekly_tasks_prompt
from core.models.weekly_task import GeneratedWeeklyTask

logger = logging.getLogger(__name__)

_FENCE_PATTERN = re.compile(r"```(?:json)?\n?")


# =============================================================================
# Exceptions
# =============================================================================

class WeeklyTaskGenerationError(Exception):
    """
    Error during weekly task generation.

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging
    """

    def __init__(
        self,
        message: str,
        code: str = "GENERATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


def parse_generated_tasks(content: str) -> list[GeneratedWeeklyTask]:
    """
    Parse the model output into validated tasks.

    Accepts a bare JSON array, optionally wrapped in ```json fences.

    Raises:
        WeeklyTaskGenerationError: If the content isn't a valid task array
    """
    cleaned = _FENCE_PATTERN.sub("", content).strip()

    try:
        raw = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise WeeklyTaskGenerationError(
            message=f"Failed to parse AI response: {e}",
            code="INVALID_JSON",
            suggestion="Try generating the week again",
            details={"content": content[:500]},
        )

    if not isinstance(raw, list):
        raise WeeklyTaskGenerationError(
            message="AI response is not a JSON array",
            code="INVALID_SHAPE",
            suggestion="Try generating the week again",
            details={"content": content[:500]},
        )

    try:
        return [GeneratedWeeklyTask.model_validate(item) for item in raw]
    except ValidationError as e:
        raise WeeklyTaskGenerationError(
            message=f"AI returned an invalid task: {e.error_count()} validation errors",
            code="INVALID_TASK",
            suggestion="Try generating the week again",
            details={"errors": [err["msg"] for err in e.errors()]},
        )


# =============================================================================
# Generator
# =============================================================================

class WeeklyTaskGenerator:
    """
    Generates one week of tasks from a business plan's quarter.

    Attributes:
        model: OpenAI model to use (default from settings)
        temperature: Generation temperature
        max_tokens: Completion token cap
    """

    def __init__(
        self,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        client: OpenAI | None = None,
    ):
        self.client = client or OpenAI(api_key=settings.OPENAI_API_KEY)
        self.model = model or settings.OPENAI_MODEL
        self.temperature = temperature if temperature is not None else settings.WEEKLY_TASKS_TEMPERATURE
        self.max_tokens = max_tokens or settings.WEEKLY_TASKS_MAX_TOKENS

        logger.info(f"WeeklyTaskGenerator initialized with model={self.model}, temp={self.temperature}")

    def generate(
        self,
        goals: list[dict[str, Any]],
        items: list[dict[str, Any]],
        week_number: int,
        quarter: str,
        year: int,
    ) -> list[GeneratedWeeklyTask]:
        """
        Generate the tasks of one week.

        Args:
            goals: Quarter goals (title, description, category, priority)
            items: Quarter projects/strategies/actions
            week_number: Week to plan
            quarter: "Q1".."Q4"
            year: Plan year

        Returns:
            Validated generated tasks

        Raises:
            WeeklyTaskGenerationError: If there is nothing to plan from, the
                API call fails, or the response can't be parsed
        """
        if not goals and not items:
            raise WeeklyTaskGenerationError(
                message="No goals or plan items to generate tasks from",
                code="NOTHING_TO_PLAN",
                suggestion="Add goals or projects/strategies/actions to the quarter first",
            )

        system_prompt = build_weekly_tasks_prompt(goals, items, week_number, quarter, year)

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": f"Генерирай задачи за седмица {week_number} от {quarter}, {year}"},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except RateLimitError as e:
            raise WeeklyTaskGenerationError(
                message=f"OpenAI rate limit reached: {e}",
                code="RATE_LIMITED",
                suggestion="Wait a moment and try again",
            )
        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise WeeklyTaskGenerationError(
                message=f"OpenAI API call failed: {e}",
                code="OPENAI_ERROR",
                suggestion="Check OPENAI_API_KEY and try again",
            )

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise WeeklyTaskGenerationError(
                message="No content in AI response",
                code="EMPTY_RESPONSE",
                suggestion="Try generating the week again",
            )

        tasks = parse_generated_tasks(content)
        logger.info(f"Generated {len(tasks)} tasks for week {week_number} ({quarter} {year})")
        return tasks
