"""
Class reminder notifications over LINE.

Public API:
    run_reminder_cycle(context) - Match windows and push due reminders
    broadcast(user_ids, message, access_token) - Push one message to many users
    match_window(schedule_at, now, settings) - Which window is due, if any
    render_template(template, schedule) - Substitute schedule fields
    init_scheduler() / shutdown_scheduler() - Optional in-process trigger
"""

from .context import CycleContext
from .dispatcher import (
    BroadcastOutcome,
    ReminderCycleResult,
    SentReminder,
    SkippedSchedule,
    broadcast,
    run_reminder_cycle,
)
from .scheduler import init_scheduler, shutdown_scheduler
from .templates import build_reminder_message, render_template
from .windows import match_window, minutes_until

__all__ = [
    "CycleContext",
    # Dispatch
    "run_reminder_cycle",
    "broadcast",
    "ReminderCycleResult",
    "SentReminder",
    "SkippedSchedule",
    "BroadcastOutcome",
    # Pure helpers
    "match_window",
    "minutes_until",
    "render_template",
    "build_reminder_message",
    # Scheduler
    "init_scheduler",
    "shutdown_scheduler",
]
