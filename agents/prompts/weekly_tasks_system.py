# =============================================================================
# agents/prompts/weekly_tasks_system.py - Weekly Task Generation Prompt
# =============================================================================
# Builds the system prompt that turns quarterly goals and plan items into
# concrete tasks for one week. The application UI is Bulgarian, so the
# generated titles and descriptions are requested in Bulgarian.
# =============================================================================

from __future__ import annotations

from typing import Any

ITEM_TYPE_LABELS = {
    "project": "Проект",
    "strategy": "Стратегия",
    "action": "Действие",
}


def format_goals(goals: list[dict[str, Any]]) -> str:
    """One line per goal: title, category, priority, description."""
    return "\n".join(
        f"- {g.get('title', '')} ({g.get('category', 'other')}, приоритет: "
        f"{g.get('priority', 'medium')}): {g.get('description', '')}"
        for g in goals
    )


def format_items(items: list[dict[str, Any]]) -> str:
    """One line per quarterly project/strategy/action."""
    return "\n".join(
        f"- [{ITEM_TYPE_LABELS.get(i.get('type', ''), 'Действие')}] {i.get('title', '')} "
        f"({i.get('priority', 'medium')}): {i.get('description', '')}. "
        f"Отговорник: {i.get('owner') or 'Не определен'}. "
        f"Очаквани резултати: {i.get('expectedResults') or 'Не са посочени'}"
        for i in items
    )


def build_weekly_tasks_prompt(
    goals: list[dict[str, Any]],
    items: list[dict[str, Any]],
    week_number: int,
    quarter: str,
    year: int,
) -> str:
    """
    Build the system prompt for one week.

    The model must answer with a bare JSON array of objects with keys
    title, description, priority, estimatedHours, dayOfWeek (1-5), taskType.
    """
    return f"""Ти си бизнес консултант и планировчик. Генерирай конкретни задачи за седмица {week_number} ({quarter}, {year}).

Правила:
1. Разпредели задачите от понеделник (1) до петък (5)
2. Високоприоритетните задачи да са в началото на седмицата
3. Задачите трябва да са конкретни и изпълними, с реалистична оценка за време
4. taskType: "project", "strategy" или "action" според източника

ЦЕЛИ:
{format_goals(goals) or "Няма добавени цели"}

ПРОЕКТИ/СТРАТЕГИИ/ДЕЙСТВИЯ:
{format_items(items) or "Няма добавени елементи"}

Отговори САМО с валиден JSON масив от 5 до 10 обекта с ключове:
title, description, priority ("low"|"medium"|"high"), estimatedHours, dayOfWeek, taskType."""
