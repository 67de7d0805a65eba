"""Root pytest configuration."""

import pytest

from reminders.config import REQUIRED_ENV_VARS

OPTIONAL_ENV_VARS = [
    "HTTP_TIMEOUT_SECONDS",
    "REMINDER_MAX_CONCURRENCY",
    "REMINDER_SCHEDULER_ENABLED",
    "REMINDER_INTERVAL_MINUTES",
    "SENTRY_DSN",
]


@pytest.fixture(autouse=True)
def isolate_reminder_env(monkeypatch):
    """Keep real credentials from the shell out of every test."""
    for name, _ in REQUIRED_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    for name in OPTIONAL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
