"""LINE Messaging API push delivery channel."""

import logging
from dataclasses import dataclass

import httpx
import sentry_sdk

logger = logging.getLogger(__name__)

LINE_PUSH_URL = "https://api.line.me/v2/bot/message/push"


@dataclass
class PushResult:
    """Outcome of a single push call."""

    status_code: int | None
    body: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status_code is not None and 200 <= self.status_code < 300

    def error_message(self) -> str | None:
        if self.ok:
            return None
        if self.error:
            return self.error
        return f"LINE API error: {self.status_code} {self.body}"


async def push_message(
    user_id: str,
    text: str,
    access_token: str,
    timeout: float = 5.0,
) -> PushResult:
    """
    Push a text message to a LINE user.

    Never raises for delivery problems: non-2xx responses come back with
    their status code, transport errors with status_code None.

    Args:
        user_id: LINE user ID of the recipient
        text: Message text
        access_token: Channel access token
        timeout: Request timeout in seconds

    Returns:
        PushResult with status code and response body
    """
    payload = {"to": user_id, "messages": [{"type": "text", "text": text}]}
    headers = {"Authorization": f"Bearer {access_token}"}

    try:
        async with httpx.AsyncClient(timeout=httpx.Timeout(timeout)) as client:
            response = await client.post(LINE_PUSH_URL, json=payload, headers=headers)
    except httpx.HTTPError as e:
        logger.error(f"Failed to push LINE message to {user_id}: {e}")
        sentry_sdk.capture_exception(e)
        return PushResult(status_code=None, error=str(e) or type(e).__name__)

    if not 200 <= response.status_code < 300:
        logger.warning(
            f"LINE push to {user_id} returned {response.status_code}: {response.text}"
        )

    return PushResult(status_code=response.status_code, body=response.text)
