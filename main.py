"""
Class reminder service entry point.

Architecture:
- One Python process, one asyncio event loop
- FastAPI serves the reminder endpoints that an external cron service
  POSTs to (hourly)
- Optionally, an in-process APScheduler job runs the same cycle
  (REMINDER_SCHEDULER_ENABLED=true)

Run with: python main.py [--port PORT] [--scheduler]
"""

import logging
import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path

# Set up import paths before any local imports
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

# Load .env.local first (if exists), then .env as fallback
# .env.local is gitignored and used for local dev overrides
load_dotenv(project_root / ".env.local")  # Local overrides (gitignored)
load_dotenv()  # Fallback to .env

import sentry_sdk
from fastapi import FastAPI

from reminders.config import get_api_port, get_missing_env_vars, is_scheduler_enabled
from reminders.notifications.scheduler import init_scheduler, shutdown_scheduler
from web_api.routes.reminders import router as reminders_router

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

if os.environ.get("SENTRY_DSN"):
    sentry_sdk.init(dsn=os.environ["SENTRY_DSN"], traces_sample_rate=0.0)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan context manager.

    Warns about missing configuration and starts the in-process scheduler
    when enabled.
    """
    missing = get_missing_env_vars()
    if missing:
        logger.warning(f"Missing environment variables: {', '.join(missing)}")

    if is_scheduler_enabled():
        init_scheduler()

    yield

    shutdown_scheduler()


app = FastAPI(
    title="Class Reminder API",
    lifespan=lifespan,
)

app.include_router(reminders_router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "scheduler_enabled": is_scheduler_enabled(),
    }


if __name__ == "__main__":
    import argparse
    import uvicorn

    parser = argparse.ArgumentParser(description="Class Reminder Server")
    parser.add_argument(
        "--port",
        type=int,
        default=get_api_port(),
        help="Port to run the server on (default: $API_PORT or 8000)",
    )
    parser.add_argument(
        "--scheduler",
        action="store_true",
        help="Run the reminder cycle from an in-process scheduler",
    )
    args = parser.parse_args()

    # Set env var so it persists across uvicorn reloads
    if args.scheduler:
        os.environ["REMINDER_SCHEDULER_ENABLED"] = "true"

    # Pass app object directly (not string) to avoid module reimport issues
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=args.port,
    )
