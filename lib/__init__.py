# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - week_calendar.py: Week/day calendar math (no I/O)
# - supabase_client.py: Typed Supabase wrapper for database operations
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.week_calendar import (
    WeekDay,
    current_week_and_day,
    get_date_from_week_day,
    next_day,
    week_day_of,
)

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Calendar
    "WeekDay",
    "current_week_and_day",
    "get_date_from_week_day",
    "next_day",
    "week_day_of",
]
