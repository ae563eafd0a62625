# =============================================================================
# lib/week_calendar.py - Week/Day Calendar Math
# =============================================================================
# Pure functions for converting between calendar dates and the
# (week number, day of week) positions used by business-plan schedules.
#
# Conventions:
# - Days run Monday=1 ... Sunday=7
# - Week 1 is the week holding the year's first Thursday, anchored on Monday
# - No timezone component: everything is plain calendar-date arithmetic
#
# "Today" is always obtained through current_week_and_day(), which takes an
# injectable clock so callers (and tests) can pin the current date.
#
# Usage:
#   from lib.week_calendar import get_date_from_week_day, current_week_and_day
#   get_date_from_week_day(2024, 1, 1)   # "2024-01-01"
#   now = current_week_and_day()         # WeekDay(year=..., week_number=..., day_of_week=...)
# =============================================================================

from __future__ import annotations

from datetime import date, timedelta
from typing import Callable, NamedTuple

# A clock returns today's date. date.today is the production clock.
Clock = Callable[[], date]

DAYS_IN_WEEK = 7

# Weekday names used in task provenance text (Bulgarian UI)
DAY_NAMES: dict[int, str] = {
    1: "Понеделник",
    2: "Вторник",
    3: "Сряда",
    4: "Четвъртък",
    5: "Петък",
    6: "Събота",
    7: "Неделя",
}

# Weeks per quarter (approximate, week 53 is folded into Q4)
QUARTER_WEEKS: dict[str, list[int]] = {
    "Q1": list(range(1, 14)),
    "Q2": list(range(14, 27)),
    "Q3": list(range(27, 40)),
    "Q4": list(range(40, 53)),
}


class WeekDay(NamedTuple):
    """A position in the schedule: anchoring year, week number and day of week."""

    year: int
    week_number: int
    day_of_week: int


# =============================================================================
# Date <-> (week, day)
# =============================================================================

def iso_day_of_week(d: date) -> int:
    """Day of week with Monday=1 ... Sunday=7."""
    return d.weekday() + 1


def week_one_monday(year: int) -> date:
    """
    Get the Monday that starts week 1 of a year.

    If January 1 falls Monday-Thursday, week 1 starts on the Monday on or
    before January 1. If it falls Friday-Sunday, week 1 starts on the
    following Monday.

    Example:
        week_one_monday(2024)  # date(2024, 1, 1) - Jan 1 is a Monday
        week_one_monday(2021)  # date(2021, 1, 4) - Jan 1 is a Friday
    """
    jan1 = date(year, 1, 1)
    jan1_day = iso_day_of_week(jan1)

    if jan1_day <= 4:
        return jan1 - timedelta(days=jan1_day - 1)
    return jan1 + timedelta(days=8 - jan1_day)


def date_from_week_day(year: int, week_number: int, day_of_week: int) -> date:
    """
    Resolve (year, week number, day of week) to a concrete date.

    Week numbers past the last week of the year simply continue counting
    into the next year; no range checks are applied here.

    Args:
        year: Anchoring year
        week_number: 1-based week number
        day_of_week: 1 (Monday) .. 7 (Sunday)

    Returns:
        The calendar date
    """
    offset = (week_number - 1) * DAYS_IN_WEEK + (day_of_week - 1)
    return week_one_monday(year) + timedelta(days=offset)


def get_date_from_week_day(year: int, week_number: int, day_of_week: int) -> str:
    """Same as date_from_week_day() but formatted as YYYY-MM-DD."""
    return date_from_week_day(year, week_number, day_of_week).isoformat()


def week_day_of(d: date) -> WeekDay:
    """
    Compute the schedule position of a date.

    Inverse of date_from_week_day(): a date before its year's week-1 Monday
    belongs to the last week of the previous year, and a date on or after the
    next year's week-1 Monday belongs to week 1 of the next year.
    """
    year = d.year
    if d < week_one_monday(year):
        year -= 1
    elif d >= week_one_monday(year + 1):
        year += 1

    delta = (d - week_one_monday(year)).days
    return WeekDay(
        year=year,
        week_number=delta // DAYS_IN_WEEK + 1,
        day_of_week=delta % DAYS_IN_WEEK + 1,
    )


# =============================================================================
# "Now" and relative positions
# =============================================================================

def current_week_and_day(clock: Clock | None = None) -> WeekDay:
    """
    Get today's schedule position.

    This is the only place the current date enters the scheduling code, so
    overdue detection and rescheduling agree on what "today" means.

    Args:
        clock: Zero-arg callable returning today's date (default: date.today)
    """
    today = (clock or date.today)()
    return week_day_of(today)


def next_day(position: WeekDay) -> WeekDay:
    """
    The position one day after `position`.

    Sunday rolls over to Monday of the next week number. The year is never
    advanced, so week 53 becomes week 54.
    """
    if position.day_of_week == DAYS_IN_WEEK:
        return WeekDay(position.year, position.week_number + 1, 1)
    return WeekDay(position.year, position.week_number, position.day_of_week + 1)


def day_name(day_of_week: int) -> str:
    """Localized weekday name, or "Ден N" for out-of-range values."""
    return DAY_NAMES.get(day_of_week, f"Ден {day_of_week}")


# =============================================================================
# Quarters
# =============================================================================

def weeks_for_quarter(quarter: str) -> list[int]:
    """
    Week numbers covered by a quarter ("Q1".."Q4").

    Raises:
        ValueError: If the quarter name is unknown
    """
    try:
        return list(QUARTER_WEEKS[quarter.upper()])
    except KeyError:
        raise ValueError(f"Unknown quarter: {quarter!r} (expected Q1-Q4)")


def quarter_for_week(week_number: int) -> str:
    """Quarter holding a week number. Week 53 belongs to Q4."""
    for quarter, weeks in QUARTER_WEEKS.items():
        if week_number in weeks:
            return quarter
    if week_number == 53:
        return "Q4"
    raise ValueError(f"Week number out of range: {week_number}")
