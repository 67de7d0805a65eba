#!/usr/bin/env python3
"""
Preview which reminders a cycle would send, without pushing anything.

Reads the live Firestore data, evaluates every schedule at the given time,
and prints the rendered messages plus the skipped schedules.

Usage:
    python scripts/preview_reminders.py
    python scripts/preview_reminders.py --at 2024-06-09T10:05

Requirements:
    - FIREBASE_PROJECT_ID and FIREBASE_WEB_API_KEY set
"""

import argparse
import asyncio
import logging
import os
import sys
from datetime import datetime
from pathlib import Path

# Load environment variables from .env files
from dotenv import load_dotenv

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
load_dotenv(project_root / ".env")
load_dotenv(project_root / ".env.local", override=True)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


async def main(at: datetime | None):
    from reminders.config import ReminderConfig, get_http_timeout, get_missing_env_vars
    from reminders.notifications.dispatcher import load_snapshot, plan_reminders
    from reminders.timezone import CLASS_TIMEZONE, now_in_class_timezone

    missing = get_missing_env_vars(["FIREBASE_PROJECT_ID", "FIREBASE_WEB_API_KEY"])
    if missing:
        print(f"ERROR: Missing environment variables: {', '.join(missing)}")
        return 1

    config = ReminderConfig(
        line_access_token="",
        firebase_project_id=os.environ["FIREBASE_PROJECT_ID"],
        firebase_api_key=os.environ["FIREBASE_WEB_API_KEY"],
        http_timeout=get_http_timeout(),
    )
    now = CLASS_TIMEZONE.localize(at) if at else now_in_class_timezone()

    snapshot = await load_snapshot(config)
    pending, skipped = plan_reminders(snapshot, now)

    print(f"\n{'='*60}")
    print(f"Reminder preview at {now.isoformat()}")
    print(f"Settings: {'stored' if snapshot.settings_found else 'defaults'}")
    print(f"{'='*60}\n")

    for reminder in pending:
        print(f"→ {reminder.schedule.student_name} ({reminder.window.label}) to {reminder.line_user_id}")
        print("  " + reminder.text.replace("\n", "\n  "))
        print()

    print(f"{len(pending)} would be sent, {len(skipped)} skipped")
    for entry in skipped:
        print(f"  - {entry.student}: {entry.diff_minutes} minutes until class")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Preview class reminders (dry run)")
    parser.add_argument(
        "--at",
        type=datetime.fromisoformat,
        default=None,
        help="Evaluate at this local Japan time instead of now (e.g. 2024-06-09T10:05)",
    )
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.at)))
