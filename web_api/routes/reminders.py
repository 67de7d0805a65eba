"""
Class reminder API routes.

Endpoints:
- POST /api/reminders/check - Run one reminder cycle (called hourly by cron)
- POST /api/reminders/broadcast - Push a literal message to a list of LINE users
"""

import json
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from reminders.config import (
    ConfigurationError,
    get_http_timeout,
    get_line_access_token,
    get_max_concurrency,
)
from reminders.notifications.context import CycleContext
from reminders.notifications.dispatcher import broadcast, run_reminder_cycle

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reminders", tags=["reminders"])


# --- Pydantic models ---


class BroadcastRequest(BaseModel):
    """Request body for an ad-hoc broadcast."""

    userIds: list[str]
    message: str


class BroadcastResponse(BaseModel):
    results: list[dict]


# --- Helpers ---


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


# --- Endpoints ---


@router.post("/check")
async def check_reminders():
    """
    Run one reminder cycle against the current data.

    Returns:
    - message: Summary line
    - sent: [{student, label, lineStatus, error?}] per pushed reminder
    - skippedCount: Schedules with no window due right now
    - checkedAt: Evaluation instant (ISO 8601, UTC+9)

    Always 200 once processing starts; 500 if configuration is missing.
    """
    try:
        context = CycleContext.create()
    except ConfigurationError as e:
        logger.error(str(e))
        return _error(500, str(e))

    result = await run_reminder_cycle(context)
    return result.to_response()


@router.post("/broadcast", response_model=BroadcastResponse)
async def broadcast_message(request: Request):
    """
    Push a literal message to each LINE user ID.

    Request body:
    - userIds: List of LINE user IDs
    - message: Text to send

    Returns one {userId, status, error?} entry per user ID, where status is
    "success" or "error".
    """
    try:
        access_token = get_line_access_token()
    except ConfigurationError:
        return _error(500, "LINE_CHANNEL_ACCESS_TOKEN が設定されていません")

    try:
        body = json.loads(await request.body())
    except ValueError:
        return _error(400, "Invalid JSON")

    try:
        payload = BroadcastRequest.model_validate(body)
    except ValidationError:
        return _error(400, "userIds (配列) と message が必要です")

    if not payload.message:
        return _error(400, "userIds (配列) と message が必要です")

    outcomes = await broadcast(
        payload.userIds,
        payload.message,
        access_token,
        timeout=get_http_timeout(),
        max_concurrency=get_max_concurrency(),
    )
    return BroadcastResponse(results=[o.to_dict() for o in outcomes])
