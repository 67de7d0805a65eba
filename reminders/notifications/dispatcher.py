"""
Reminder dispatcher - decides which classes are due and pushes reminders.

One call to run_reminder_cycle() is one stateless pass over the data store:
fetch records, match each schedule against the reminder windows, push the
rendered message to the student's LINE account, and report what happened.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime

import sentry_sdk

from reminders.config import ReminderConfig
from reminders.data_source import DataSourceError, fetch_documents
from reminders.enums import ReminderWindow
from reminders.notifications.channels.line import PushResult, push_message
from reminders.notifications.context import CycleContext
from reminders.notifications.templates import (
    build_reminder_message,
    format_cycle_summary,
)
from reminders.notifications.windows import match_window, minutes_until
from reminders.records import RecordSnapshot, ScheduleRecord, build_snapshot
from reminders.timezone import parse_schedule_datetime

logger = logging.getLogger(__name__)


@dataclass
class SentReminder:
    """A reminder that was pushed (successfully or not)."""

    student: str
    window: ReminderWindow
    status: int | None
    error: str | None = None

    @property
    def label(self) -> str:
        return self.window.label

    def to_dict(self) -> dict:
        result = {"student": self.student, "label": self.label, "lineStatus": self.status}
        if self.error:
            result["error"] = self.error
        return result


@dataclass
class SkippedSchedule:
    """A schedule with no window due at this instant."""

    student: str
    diff_minutes: int

    def to_dict(self) -> dict:
        return {"student": self.student, "diffMin": self.diff_minutes}


@dataclass
class ReminderCycleResult:
    sent: list[SentReminder]
    skipped: list[SkippedSchedule]
    checked_at: datetime

    @property
    def sent_count(self) -> int:
        return len(self.sent)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    def to_response(self) -> dict:
        """JSON body returned to the scheduler that triggered the cycle."""
        return {
            "message": format_cycle_summary(self.sent_count),
            "sent": [s.to_dict() for s in self.sent],
            "skippedCount": self.skipped_count,
            "checkedAt": self.checked_at.isoformat(),
        }


@dataclass
class BroadcastOutcome:
    user_id: str
    success: bool
    error: str | None = None

    @property
    def status(self) -> str:
        return "success" if self.success else "error"

    def to_dict(self) -> dict:
        result = {"userId": self.user_id, "status": self.status}
        if self.error:
            result["error"] = self.error
        return result


@dataclass
class _PendingReminder:
    schedule: ScheduleRecord
    window: ReminderWindow
    line_user_id: str
    text: str


async def load_snapshot(config: ReminderConfig) -> RecordSnapshot:
    """
    Fetch and normalize all records for one cycle.

    A data store failure is logged and reported, then treated as an empty
    data set so the cycle still completes (and sends nothing).
    """
    try:
        records = await fetch_documents(
            config.firebase_project_id,
            config.firebase_api_key,
            timeout=config.http_timeout,
        )
    except DataSourceError as e:
        logger.error(f"Could not load records, continuing with no data: {e}")
        sentry_sdk.capture_exception(e)
        records = []

    return build_snapshot(records)


def plan_reminders(
    snapshot: RecordSnapshot,
    now: datetime,
) -> tuple[list[_PendingReminder], list[SkippedSchedule]]:
    """
    Decide which schedules get a reminder right now.

    Schedules are visited in data store order. Incomplete, completed and
    absent schedules are dropped without a trace in either list; schedules
    whose student has no LINE ID are logged and dropped.
    """
    pending: list[_PendingReminder] = []
    skipped: list[SkippedSchedule] = []

    for schedule in snapshot.schedules:
        if not schedule.has_required_fields:
            continue
        if not schedule.is_reminder_eligible:
            continue

        try:
            schedule_at = parse_schedule_datetime(
                schedule.schedule_date, schedule.schedule_time
            )
        except ValueError:
            logger.warning(
                f"Unparseable schedule time for {schedule.student_name}: "
                f"{schedule.datetime_text!r}"
            )
            continue

        window = match_window(schedule_at, now, snapshot.settings)
        if window is None:
            skipped.append(
                SkippedSchedule(
                    student=schedule.student_name,
                    diff_minutes=minutes_until(schedule_at, now),
                )
            )
            continue

        student = snapshot.find_student(schedule.student_name)
        if not student or not student.line_user_id:
            logger.warning(f"No LINE ID for {schedule.student_name}, skipping")
            continue

        pending.append(
            _PendingReminder(
                schedule=schedule,
                window=window,
                line_user_id=student.line_user_id,
                text=build_reminder_message(
                    window, snapshot.settings.template_for(window), schedule
                ),
            )
        )

    return pending, skipped


async def _push_reminder(
    reminder: _PendingReminder,
    config: ReminderConfig,
    semaphore: asyncio.Semaphore,
) -> SentReminder:
    student = reminder.schedule.student_name
    async with semaphore:
        try:
            result = await push_message(
                reminder.line_user_id,
                reminder.text,
                config.line_access_token,
                timeout=config.http_timeout,
            )
        except Exception as e:
            logger.error(f"Error pushing reminder to {student}: {e}")
            sentry_sdk.capture_exception(e)
            result = PushResult(status_code=None, error=str(e) or type(e).__name__)

    logger.info(
        f"Sent {reminder.window.label} reminder to {student} "
        f"-> LINE status {result.status_code}"
    )
    return SentReminder(
        student=student,
        window=reminder.window,
        status=result.status_code,
        error=result.error_message(),
    )


async def run_reminder_cycle(context: CycleContext) -> ReminderCycleResult:
    """
    Run one reminder pass.

    Pushes run concurrently (bounded by config.max_concurrency); the sent
    list keeps the order in which schedules were returned by the data store.
    A failed push is recorded and never stops the others.

    Args:
        context: Configuration and evaluation instant for this call

    Returns:
        ReminderCycleResult with sent and skipped entries
    """
    snapshot = await load_snapshot(context.config)
    pending, skipped = plan_reminders(snapshot, context.now)

    semaphore = asyncio.Semaphore(context.config.max_concurrency)
    sent = await asyncio.gather(
        *(_push_reminder(reminder, context.config, semaphore) for reminder in pending)
    )

    logger.info(
        f"Reminder cycle at {context.now.isoformat()}: "
        f"{len(sent)} sent, {len(skipped)} skipped"
    )
    return ReminderCycleResult(sent=list(sent), skipped=skipped, checked_at=context.now)


async def broadcast(
    user_ids: list[str],
    message: str,
    access_token: str,
    timeout: float = 5.0,
    max_concurrency: int = 5,
) -> list[BroadcastOutcome]:
    """
    Push the same message to each LINE user ID.

    Returns one outcome per input ID, in input order.
    """
    semaphore = asyncio.Semaphore(max_concurrency)

    async def _send(user_id: str) -> BroadcastOutcome:
        async with semaphore:
            try:
                result = await push_message(user_id, message, access_token, timeout=timeout)
            except Exception as e:
                logger.error(f"Error broadcasting to {user_id}: {e}")
                sentry_sdk.capture_exception(e)
                return BroadcastOutcome(
                    user_id=user_id, success=False, error=str(e) or type(e).__name__
                )
        return BroadcastOutcome(
            user_id=user_id, success=result.ok, error=result.error_message()
        )

    return list(await asyncio.gather(*(_send(user_id) for user_id in user_ids)))
