"""
Centralized configuration for the class reminder service.

All settings come from environment variables (loaded from .env files by
main.py). Required values are checked per invocation so a missing credential
fails that request instead of the whole process.
"""

import os
from dataclasses import dataclass


class ConfigurationError(Exception):
    """Raised when required environment variables are missing."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"環境変数が不足: {', '.join(missing)}")


# Required environment variables
# Format: (name, description)
REQUIRED_ENV_VARS = [
    ("LINE_CHANNEL_ACCESS_TOKEN", "LINE Messaging API channel access token"),
    ("FIREBASE_PROJECT_ID", "Firebase project holding the system_data collection"),
    ("FIREBASE_WEB_API_KEY", "Firebase Web API key for Firestore REST access"),
]

DEFAULT_HTTP_TIMEOUT_SECONDS = 5.0
DEFAULT_MAX_CONCURRENCY = 5
DEFAULT_INTERVAL_MINUTES = 60


@dataclass(frozen=True)
class ReminderConfig:
    """Configuration needed by one reminder cycle."""

    line_access_token: str
    firebase_project_id: str
    firebase_api_key: str
    http_timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY


def get_missing_env_vars(names: list[str] | None = None) -> list[str]:
    """Return the names of required variables that are unset or empty."""
    if names is None:
        names = [name for name, _ in REQUIRED_ENV_VARS]
    return [name for name in names if not os.environ.get(name)]


def get_http_timeout() -> float:
    """Per-call timeout for Firestore and LINE requests, in seconds."""
    return float(os.getenv("HTTP_TIMEOUT_SECONDS", str(DEFAULT_HTTP_TIMEOUT_SECONDS)))


def get_max_concurrency() -> int:
    """Maximum number of LINE pushes in flight at once."""
    return max(1, int(os.getenv("REMINDER_MAX_CONCURRENCY", str(DEFAULT_MAX_CONCURRENCY))))


def get_api_port() -> int:
    """Get API server port from env or default."""
    return int(os.getenv("API_PORT", "8000"))


def is_scheduler_enabled() -> bool:
    """Whether to run the reminder cycle from an in-process scheduler."""
    return os.getenv("REMINDER_SCHEDULER_ENABLED", "").lower() in ("true", "1", "yes")


def get_interval_minutes() -> int:
    """Interval for the in-process scheduler (defaults to hourly)."""
    return int(os.getenv("REMINDER_INTERVAL_MINUTES", str(DEFAULT_INTERVAL_MINUTES)))


def get_line_access_token() -> str:
    """
    Get the LINE channel access token.

    Raises:
        ConfigurationError: If LINE_CHANNEL_ACCESS_TOKEN is not set
    """
    missing = get_missing_env_vars(["LINE_CHANNEL_ACCESS_TOKEN"])
    if missing:
        raise ConfigurationError(missing)
    return os.environ["LINE_CHANNEL_ACCESS_TOKEN"]


def load_reminder_config() -> ReminderConfig:
    """
    Load the full configuration for a reminder cycle.

    Raises:
        ConfigurationError: Listing every required variable that is missing
    """
    missing = get_missing_env_vars()
    if missing:
        raise ConfigurationError(missing)

    return ReminderConfig(
        line_access_token=os.environ["LINE_CHANNEL_ACCESS_TOKEN"],
        firebase_project_id=os.environ["FIREBASE_PROJECT_ID"],
        firebase_api_key=os.environ["FIREBASE_WEB_API_KEY"],
        http_timeout=get_http_timeout(),
        max_concurrency=get_max_concurrency(),
    )
