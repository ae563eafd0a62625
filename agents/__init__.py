# =============================================================================
# agents/ - AI Agent Definitions
# =============================================================================
# This package contains the LLM-backed planning agent:
# - weekly_planner.py: Generates one week of tasks from a quarter's plan
#
# Prompts:
# - prompts/weekly_tasks_system.py: System prompt for the weekly planner
# =============================================================================

from agents.weekly_planner import (
    WeeklyTaskGenerator,
    WeeklyTaskGenerationError,
    parse_generated_tasks,
)

__all__ = [
    "WeeklyTaskGenerator",
    "WeeklyTaskGenerationError",
    "parse_generated_tasks",
]
