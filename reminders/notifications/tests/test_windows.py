"""Tests for reminder window matching."""

from datetime import datetime, timedelta

import pytest
import pytz

from reminders.enums import ReminderWindow
from reminders.notifications.windows import is_within_window, match_window, minutes_until
from reminders.records import ReminderSettings
from reminders.timezone import CLASS_TIMEZONE


CLASS_START = CLASS_TIMEZONE.localize(datetime(2024, 6, 10, 10, 0))


def _settings(remind_24h=True, remind_3h=True, remind_1h=True) -> ReminderSettings:
    return ReminderSettings(
        enabled={
            ReminderWindow.reminder_24h: remind_24h,
            ReminderWindow.reminder_3h: remind_3h,
            ReminderWindow.reminder_1h: remind_1h,
        }
    )


def _now_minutes_before(minutes: int) -> datetime:
    return CLASS_START - timedelta(minutes=minutes)


class TestMinutesUntil:
    def test_whole_minutes(self):
        now = CLASS_TIMEZONE.localize(datetime(2024, 6, 9, 10, 5))
        assert minutes_until(CLASS_START, now) == 1435

    def test_floors_partial_minutes(self):
        """30 seconds short of 60 minutes floors to 59."""
        now = CLASS_START - timedelta(minutes=59, seconds=30)
        assert minutes_until(CLASS_START, now) == 59

    def test_negative_after_class_started(self):
        now = CLASS_START + timedelta(seconds=30)
        assert minutes_until(CLASS_START, now) == -1

    def test_independent_of_now_timezone(self):
        """The same instant expressed in UTC gives the same diff."""
        now_jst = CLASS_TIMEZONE.localize(datetime(2024, 6, 9, 10, 5))
        now_utc = now_jst.astimezone(pytz.UTC)
        assert minutes_until(CLASS_START, now_utc) == 1435


class TestTwentyFourHourBand:
    @pytest.mark.parametrize("diff", [1425, 1430, 1440, 1450, 1455])
    def test_matches_inside_band(self, diff):
        result = match_window(CLASS_START, _now_minutes_before(diff), _settings())
        assert result == ReminderWindow.reminder_24h

    @pytest.mark.parametrize("diff", [1424, 1456])
    def test_no_match_just_outside_band(self, diff):
        result = match_window(CLASS_START, _now_minutes_before(diff), _settings())
        assert result is None

    def test_disabled_window_never_matches(self):
        result = match_window(
            CLASS_START, _now_minutes_before(1440), _settings(remind_24h=False)
        )
        assert result is None


class TestThreeAndOneHourBands:
    @pytest.mark.parametrize("diff", [165, 180, 195])
    def test_three_hour_band(self, diff):
        result = match_window(CLASS_START, _now_minutes_before(diff), _settings())
        assert result == ReminderWindow.reminder_3h

    @pytest.mark.parametrize("diff", [45, 60, 75])
    def test_one_hour_band(self, diff):
        result = match_window(CLASS_START, _now_minutes_before(diff), _settings())
        assert result == ReminderWindow.reminder_1h

    def test_one_hour_disabled_by_default(self):
        """Default settings leave the 1-hour window off."""
        result = match_window(
            CLASS_START, _now_minutes_before(60), ReminderSettings.default()
        )
        assert result is None

    def test_three_hour_offset_with_defaults_matches_three_hour_only(self):
        result = match_window(
            CLASS_START, _now_minutes_before(180), ReminderSettings.default()
        )
        assert result == ReminderWindow.reminder_3h

    def test_past_class_never_matches(self):
        result = match_window(CLASS_START, CLASS_START + timedelta(hours=1), _settings())
        assert result is None


class TestMutualExclusion:
    def test_no_diff_falls_in_two_bands(self):
        """Tolerance bands never overlap, so at most one window is due."""
        for diff in range(-10, 1600):
            matching = [w for w in ReminderWindow if is_within_window(diff, w)]
            assert len(matching) <= 1, f"diff={diff} matched {matching}"

    def test_is_pure(self):
        now = _now_minutes_before(1440)
        settings = _settings()
        first = match_window(CLASS_START, now, settings)
        second = match_window(CLASS_START, now, settings)
        assert first == second == ReminderWindow.reminder_24h
