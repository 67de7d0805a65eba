"""Message template loading and rendering."""

from pathlib import Path

import yaml

from reminders.enums import ReminderWindow
from reminders.records import ScheduleRecord


STUDENT_NAME_PLACEHOLDER = "{生徒名}"
DATETIME_PLACEHOLDER = "{日時}"
SUBJECT_PLACEHOLDER = "{科目}"
INSTRUCTOR_PLACEHOLDER = "{担当講師}"

_templates: dict | None = None


def load_templates() -> dict:
    """
    Load message templates from YAML file.

    Caches templates after first load.
    """
    global _templates
    if _templates is not None:
        return _templates

    yaml_path = Path(__file__).parent / "messages.yaml"
    with open(yaml_path, encoding="utf-8") as f:
        _templates = yaml.safe_load(f)

    return _templates


def get_default_template() -> str:
    return load_templates()["class_reminder"]["default_template"]


def get_fallback_template() -> str:
    return load_templates()["class_reminder"]["fallback_template"]


def render_template(template: str, schedule: ScheduleRecord) -> str:
    """
    Substitute schedule fields into a reminder template.

    Each placeholder is replaced at its first occurrence only; later
    occurrences are left as-is. Placeholders absent from the template are
    ignored.

    Args:
        template: Template with {生徒名}, {日時}, {科目}, {担当講師} tokens
        schedule: Schedule to render

    Returns:
        Rendered message body
    """
    replacements = [
        (STUDENT_NAME_PLACEHOLDER, schedule.student_name),
        (DATETIME_PLACEHOLDER, schedule.datetime_text),
        (SUBJECT_PLACEHOLDER, schedule.subject or ""),
        (INSTRUCTOR_PLACEHOLDER, schedule.instructor or ""),
    ]
    for placeholder, value in replacements:
        template = template.replace(placeholder, value, 1)
    return template


def format_banner(window: ReminderWindow) -> str:
    config = load_templates()["class_reminder"]
    return config["banner"].format(label=config["window_labels"][window.value])


def build_reminder_message(
    window: ReminderWindow,
    template: str | None,
    schedule: ScheduleRecord,
) -> str:
    """
    Build the full push text: window banner, newline, rendered body.

    An empty or missing template falls back to the short built-in one.
    """
    body = render_template(template or get_fallback_template(), schedule)
    return f"{format_banner(window)}\n{body}"


def format_cycle_summary(count: int) -> str:
    return load_templates()["cycle_summary"]["message"].format(count=count)
