"""
Timezone utilities.

Class schedules are stored as local date/time strings in Japan time. All
calculations happen in that zone regardless of the host's local zone.
"""

from datetime import datetime

import pytz

CLASS_TIMEZONE = pytz.timezone("Asia/Tokyo")


def now_in_class_timezone() -> datetime:
    """Current instant as an aware datetime in the class timezone."""
    return datetime.now(pytz.UTC).astimezone(CLASS_TIMEZONE)


def parse_schedule_datetime(schedule_date: str, schedule_time: str) -> datetime:
    """
    Build the class start instant from stored date and time strings.

    Args:
        schedule_date: "YYYY-MM-DD"
        schedule_time: "HH:MM" (seconds are accepted and ignored)

    Returns:
        Aware datetime in the class timezone

    Raises:
        ValueError: If either string cannot be parsed
    """
    hours_minutes = ":".join(schedule_time.strip().split(":")[:2])
    naive = datetime.strptime(f"{schedule_date.strip()} {hours_minutes}", "%Y-%m-%d %H:%M")
    return CLASS_TIMEZONE.localize(naive)


def to_class_timezone(dt: datetime) -> datetime:
    """Convert an aware datetime to the class timezone (naive treated as UTC)."""
    if dt.tzinfo is None:
        dt = pytz.UTC.localize(dt)
    return dt.astimezone(CLASS_TIMEZONE)
