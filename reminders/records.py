"""
Record normalization for documents read from the data store.

Firestore returns every field wrapped in a typed value object, e.g.
{"stringValue": "Alice"} or {"integerValue": "3"}. Decoding happens here and
nowhere else, so the window matcher and renderer only ever see plain records.
"""

import logging
from dataclasses import dataclass, field

from reminders.enums import AttendanceStatus, ReminderWindow

logger = logging.getLogger(__name__)

BACKEND_ID_FIELD = "__backendId"

SCHEDULE_TYPE = "schedule"
STUDENT_TYPE = "student"
SETTINGS_TYPE = "reminder_settings"


def decode_value(value: dict):
    """
    Convert one Firestore typed value to a Python scalar.

    Unrecognized value types (maps, arrays, timestamps, nulls) decode to None.
    """
    if not isinstance(value, dict):
        return None
    if "stringValue" in value:
        return value["stringValue"]
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        # Sent as a string on the wire to preserve 64-bit precision
        try:
            return int(value["integerValue"])
        except (TypeError, ValueError):
            return None
    if "doubleValue" in value:
        try:
            return float(value["doubleValue"])
        except (TypeError, ValueError):
            return None
    return None


def parse_document(doc: dict) -> dict:
    """
    Flatten a Firestore document into a plain dict.

    The document id (last segment of the resource name) is stored under
    "__backendId".
    """
    fields = doc.get("fields") or {}
    result = {key: decode_value(val) for key, val in fields.items()}
    name = doc.get("name") or ""
    result[BACKEND_ID_FIELD] = name.rsplit("/", 1)[-1] if name else None
    return result


def _text(value, strip: bool = True) -> str:
    if value is None:
        return ""
    return str(value).strip() if strip else str(value)


@dataclass
class ScheduleRecord:
    """A scheduled class for one student."""

    schedule_id: str | None
    student_name: str
    schedule_date: str
    schedule_time: str
    subject: str = ""
    instructor: str = ""
    attendance: AttendanceStatus | None = None

    @classmethod
    def from_flat(cls, record: dict) -> "ScheduleRecord":
        return cls(
            schedule_id=record.get(BACKEND_ID_FIELD),
            student_name=_text(record.get("student_name"), strip=False),
            schedule_date=_text(record.get("schedule_date")),
            schedule_time=_text(record.get("schedule_time")),
            subject=_text(record.get("subject")),
            instructor=_text(record.get("instructor")),
            attendance=AttendanceStatus.parse(record.get("attendance")),
        )

    @property
    def has_required_fields(self) -> bool:
        return bool(self.schedule_date and self.schedule_time and self.student_name)

    @property
    def is_reminder_eligible(self) -> bool:
        """Completed or absent classes never get reminders."""
        return not (self.attendance and self.attendance.is_terminal)

    @property
    def datetime_text(self) -> str:
        return f"{self.schedule_date} {self.schedule_time}"


@dataclass
class StudentRecord:
    student_name: str
    line_user_id: str | None = None

    @classmethod
    def from_flat(cls, record: dict) -> "StudentRecord":
        return cls(
            student_name=_text(record.get("student_name"), strip=False),
            line_user_id=_text(record.get("student_line_id")) or None,
        )


@dataclass
class ReminderSettings:
    """
    Which reminder windows are enabled, and the templates to render.

    The stored settings document has one template field, template_24h.
    template_3h and template_1h are used when present; otherwise every window
    shares template_24h.
    """

    enabled: dict[ReminderWindow, bool] = field(default_factory=dict)
    templates: dict[ReminderWindow, str] = field(default_factory=dict)

    @classmethod
    def default(cls) -> "ReminderSettings":
        """Settings used when the data store has no reminder_settings document."""
        from reminders.notifications.templates import get_default_template

        return cls(
            enabled={
                ReminderWindow.reminder_24h: True,
                ReminderWindow.reminder_3h: True,
                ReminderWindow.reminder_1h: False,
            },
            templates={ReminderWindow.reminder_24h: get_default_template()},
        )

    @classmethod
    def from_flat(cls, record: dict) -> "ReminderSettings":
        enabled = {window: bool(record.get(window.settings_key)) for window in ReminderWindow}
        templates = {
            window: record[window.template_key]
            for window in ReminderWindow
            if isinstance(record.get(window.template_key), str) and record[window.template_key]
        }
        return cls(enabled=enabled, templates=templates)

    def is_enabled(self, window: ReminderWindow) -> bool:
        return bool(self.enabled.get(window, False))

    def template_for(self, window: ReminderWindow) -> str | None:
        return self.templates.get(window) or self.templates.get(ReminderWindow.reminder_24h)


@dataclass
class RecordSnapshot:
    """Everything one reminder cycle reads from the data store."""

    schedules: list[ScheduleRecord]
    students: list[StudentRecord]
    settings: ReminderSettings
    settings_found: bool = True

    def find_student(self, student_name: str) -> StudentRecord | None:
        """First student whose name matches exactly."""
        for student in self.students:
            if student.student_name == student_name:
                return student
        return None


def build_snapshot(records: list[dict]) -> RecordSnapshot:
    """
    Split flat records on their "type" field into typed records.

    Order of schedules and students follows the data store.
    """
    schedules = [
        ScheduleRecord.from_flat(r) for r in records if r.get("type") == SCHEDULE_TYPE
    ]
    students = [
        StudentRecord.from_flat(r) for r in records if r.get("type") == STUDENT_TYPE
    ]
    settings_record = next((r for r in records if r.get("type") == SETTINGS_TYPE), None)

    if settings_record is None:
        logger.info("No reminder_settings document found, using defaults")
        return RecordSnapshot(
            schedules=schedules,
            students=students,
            settings=ReminderSettings.default(),
            settings_found=False,
        )

    return RecordSnapshot(
        schedules=schedules,
        students=students,
        settings=ReminderSettings.from_flat(settings_record),
    )
