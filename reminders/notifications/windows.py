"""
Reminder window matching.

A schedule is due for a window when the minutes remaining until class fall
within the window's tolerance band. Pure functions only; the current time is
always passed in.
"""

import math
from datetime import datetime

from reminders.enums import WINDOW_TOLERANCE_MINUTES, ReminderWindow
from reminders.records import ReminderSettings


def minutes_until(schedule_at: datetime, now: datetime) -> int:
    """Whole minutes from now until the class starts, floored."""
    return math.floor((schedule_at - now).total_seconds() / 60)


def is_within_window(diff_minutes: int, window: ReminderWindow) -> bool:
    """Whether diff_minutes falls in the window's closed tolerance band."""
    return (
        window.offset_minutes - WINDOW_TOLERANCE_MINUTES
        <= diff_minutes
        <= window.offset_minutes + WINDOW_TOLERANCE_MINUTES
    )


def match_window(
    schedule_at: datetime,
    now: datetime,
    settings: ReminderSettings,
) -> ReminderWindow | None:
    """
    Find the reminder window that is due for a class.

    Windows are checked in priority order 24h, 3h, 1h; the first enabled
    window whose band contains the remaining minutes wins.

    Args:
        schedule_at: Class start (timezone-aware)
        now: Evaluation instant (timezone-aware)
        settings: Enabled flags per window

    Returns:
        The due window, or None if nothing is due
    """
    diff_minutes = minutes_until(schedule_at, now)
    for window in ReminderWindow:
        if settings.is_enabled(window) and is_within_window(diff_minutes, window):
            return window
    return None
