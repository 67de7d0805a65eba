"""Enum definitions for schedules and reminder windows."""

import enum


class AttendanceStatus(str, enum.Enum):
    pending = "予定"
    completed = "完了"
    absent = "欠席"

    @classmethod
    def parse(cls, value) -> "AttendanceStatus | None":
        """Map a stored attendance value (Japanese label or English name) to a status."""
        if value is None:
            return None
        text = str(value).strip()
        for status in cls:
            if text == status.value or text.lower() == status.name:
                return status
        return None

    @property
    def is_terminal(self) -> bool:
        return self in (AttendanceStatus.completed, AttendanceStatus.absent)


class ReminderWindow(str, enum.Enum):
    """Lead-time categories, in match priority order."""

    reminder_24h = "reminder_24h"
    reminder_3h = "reminder_3h"
    reminder_1h = "reminder_1h"

    @property
    def offset_minutes(self) -> int:
        return _WINDOW_OFFSETS[self]

    @property
    def label(self) -> str:
        """Short name reported in cycle results, e.g. "24-hour"."""
        return _WINDOW_LABELS[self]

    @property
    def settings_key(self) -> str:
        """Name of the enabled flag in the reminder_settings document."""
        return self.value.replace("reminder_", "remind_")

    @property
    def template_key(self) -> str:
        """Name of the per-window template field in reminder_settings."""
        return self.value.replace("reminder_", "template_")


WINDOW_TOLERANCE_MINUTES = 15

_WINDOW_OFFSETS = {
    ReminderWindow.reminder_24h: 24 * 60,
    ReminderWindow.reminder_3h: 3 * 60,
    ReminderWindow.reminder_1h: 60,
}

_WINDOW_LABELS = {
    ReminderWindow.reminder_24h: "24-hour",
    ReminderWindow.reminder_3h: "3-hour",
    ReminderWindow.reminder_1h: "1-hour",
}
