"""
Per-invocation context for a reminder cycle.

Configuration and the evaluation instant are captured once per call and
passed down explicitly, so window matching never reads the clock itself.
"""

from dataclasses import dataclass
from datetime import datetime

from reminders.config import ReminderConfig, load_reminder_config
from reminders.timezone import now_in_class_timezone, to_class_timezone


@dataclass(frozen=True)
class CycleContext:
    config: ReminderConfig
    now: datetime

    @classmethod
    def create(cls, now: datetime | None = None) -> "CycleContext":
        """
        Build a context from the environment.

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        config = load_reminder_config()
        if now is None:
            now = now_in_class_timezone()
        return cls(config=config, now=to_class_timezone(now))
