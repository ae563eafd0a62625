# =============================================================================
# agents/prompts/ - System Prompts for AI Agents
# =============================================================================
# - weekly_tasks_system.py: Weekly planner prompt
# =============================================================================

from agents.prompts.weekly_tasks_system import build_weekly_tasks_prompt

__all__ = [
    "build_weekly_tasks_prompt",
]
