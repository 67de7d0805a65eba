"""Tests for the reminder API endpoints."""

import os
import sys
from datetime import datetime
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from reminders.enums import ReminderWindow
from reminders.notifications.channels.line import PushResult
from reminders.notifications.dispatcher import (
    ReminderCycleResult,
    SentReminder,
    SkippedSchedule,
)
from reminders.timezone import CLASS_TIMEZONE
from web_api.routes.reminders import router

FULL_ENV = {
    "LINE_CHANNEL_ACCESS_TOKEN": "line-token",
    "FIREBASE_PROJECT_ID": "test-project",
    "FIREBASE_WEB_API_KEY": "test-key",
}


@pytest.fixture
def client():
    app = FastAPI()
    app.include_router(router)
    return TestClient(app)


class TestCheckReminders:
    def test_missing_config_returns_500_listing_names(self, client):
        with patch.dict(os.environ, {"LINE_CHANNEL_ACCESS_TOKEN": "t"}, clear=True):
            with patch(
                "web_api.routes.reminders.run_reminder_cycle", new_callable=AsyncMock
            ) as mock_run:
                response = client.post("/api/reminders/check")

        assert response.status_code == 500
        error = response.json()["error"]
        assert "FIREBASE_PROJECT_ID" in error
        assert "FIREBASE_WEB_API_KEY" in error
        assert "LINE_CHANNEL_ACCESS_TOKEN" not in error
        mock_run.assert_not_called()

    def test_returns_cycle_summary(self, client):
        checked_at = CLASS_TIMEZONE.localize(datetime(2024, 6, 9, 10, 5))
        cycle_result = ReminderCycleResult(
            sent=[
                SentReminder(student="Alice", window=ReminderWindow.reminder_24h, status=200),
                SentReminder(
                    student="Bob",
                    window=ReminderWindow.reminder_3h,
                    status=None,
                    error="timed out",
                ),
            ],
            skipped=[SkippedSchedule(student="Carol", diff_minutes=1560)],
            checked_at=checked_at,
        )

        with patch.dict(os.environ, FULL_ENV, clear=True):
            with patch(
                "web_api.routes.reminders.run_reminder_cycle",
                new_callable=AsyncMock,
                return_value=cycle_result,
            ) as mock_run:
                response = client.post("/api/reminders/check")

        assert response.status_code == 200
        assert response.json() == {
            "message": "2件のリマインドを送信しました",
            "sent": [
                {"student": "Alice", "label": "24-hour", "lineStatus": 200},
                {"student": "Bob", "label": "3-hour", "lineStatus": None, "error": "timed out"},
            ],
            "skippedCount": 1,
            "checkedAt": "2024-06-09T10:05:00+09:00",
        }
        context = mock_run.call_args[0][0]
        assert context.config.firebase_project_id == "test-project"
        assert context.now.utcoffset().total_seconds() == 9 * 3600

    def test_end_to_end_with_mocked_collaborators(self, client):
        """Data source and LINE mocked; checks the whole request path."""
        records = [
            {
                "type": "schedule",
                "student_name": "Alice",
                "schedule_date": "2024-06-10",
                "schedule_time": "10:00",
            },
            {"type": "student", "student_name": "Alice", "student_line_id": "U-alice"},
        ]
        now = CLASS_TIMEZONE.localize(datetime(2024, 6, 9, 10, 5))

        with patch.dict(os.environ, FULL_ENV, clear=True):
            with patch(
                "reminders.notifications.context.now_in_class_timezone", return_value=now
            ):
                with patch(
                    "reminders.notifications.dispatcher.fetch_documents",
                    AsyncMock(return_value=records),
                ):
                    with patch(
                        "reminders.notifications.dispatcher.push_message",
                        AsyncMock(return_value=PushResult(status_code=200)),
                    ) as mock_push:
                        response = client.post("/api/reminders/check")

        assert response.status_code == 200
        body = response.json()
        assert body["sent"] == [{"student": "Alice", "label": "24-hour", "lineStatus": 200}]
        assert body["skippedCount"] == 0
        mock_push.assert_called_once()

    def test_get_not_allowed(self, client):
        response = client.get("/api/reminders/check")
        assert response.status_code == 405


class TestBroadcast:
    def test_missing_token_returns_500(self, client):
        with patch.dict(os.environ, {}, clear=True):
            response = client.post(
                "/api/reminders/broadcast", json={"userIds": ["U1"], "message": "hi"}
            )

        assert response.status_code == 500

    @pytest.mark.parametrize(
        "body",
        [
            {"message": "hi"},
            {"userIds": "U1", "message": "hi"},
            {"userIds": ["U1"]},
            {"userIds": ["U1"], "message": ""},
            {"userIds": [1, 2], "message": "hi"},
            ["U1"],
        ],
    )
    def test_malformed_body_returns_400(self, client, body):
        with patch.dict(os.environ, FULL_ENV, clear=True):
            with patch(
                "web_api.routes.reminders.broadcast", new_callable=AsyncMock
            ) as mock_broadcast:
                response = client.post("/api/reminders/broadcast", json=body)

        assert response.status_code == 400
        assert "error" in response.json()
        mock_broadcast.assert_not_called()

    def test_invalid_json_returns_400(self, client):
        with patch.dict(os.environ, FULL_ENV, clear=True):
            response = client.post(
                "/api/reminders/broadcast",
                content=b"{not json",
                headers={"Content-Type": "application/json"},
            )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON"}

    def test_reports_each_recipient(self, client):
        async def fake_push(user_id, text, token, timeout=5.0):
            if user_id == "U2":
                return PushResult(status_code=400, body="invalid user")
            return PushResult(status_code=200)

        with patch.dict(os.environ, FULL_ENV, clear=True):
            with patch(
                "reminders.notifications.dispatcher.push_message",
                AsyncMock(side_effect=fake_push),
            ):
                response = client.post(
                    "/api/reminders/broadcast",
                    json={"userIds": ["U1", "U2", "U3"], "message": "休講のお知らせ"},
                )

        assert response.status_code == 200
        results = response.json()["results"]
        assert [r["userId"] for r in results] == ["U1", "U2", "U3"]
        assert [r["status"] for r in results] == ["success", "error", "success"]
        assert "invalid user" in results[1]["error"]
