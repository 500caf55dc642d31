"""Tests for hydrify.core.progress — pure progress math."""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from hydrify.core.progress import (
    ProgressSnapshot,
    build_snapshot,
    consumed_on_day,
    expected_by,
    format_status,
    is_same_day,
    suggested_sip,
)
from hydrify.data.models import PENDING, IntakeEntry, Resolved, UserPreferences

DAY = datetime(2026, 3, 10)


def _entry(ts, ml=None):
    return IntakeEntry(timestamp=ts, amount=PENDING if ml is None else Resolved(ml))


class TestIsSameDay:
    def test_naive_same_day(self):
        assert is_same_day(DAY.replace(hour=0), DAY.replace(hour=23, minute=59))

    def test_naive_other_day(self):
        assert not is_same_day(DAY - timedelta(minutes=1), DAY.replace(hour=12))

    def test_aware_uses_callers_zone(self):
        plus8 = timezone(timedelta(hours=8))
        # 20:00 UTC on the 9th is 04:00 on the 10th in UTC+8
        ts = datetime(2026, 3, 9, 20, 0, tzinfo=timezone.utc)
        now = datetime(2026, 3, 10, 12, 0, tzinfo=plus8)
        assert is_same_day(ts, now) is True

    def test_aware_ts_with_naive_now_uses_host_calendar(self):
        ts = datetime(2026, 3, 9, 23, 30, tzinfo=timezone(timedelta(hours=-10)))
        host_local = ts.astimezone().replace(tzinfo=None)
        assert is_same_day(ts, host_local.replace(hour=12)) is True
        assert is_same_day(ts, host_local.replace(hour=12) + timedelta(days=1)) is False

    def test_naive_ts_with_aware_now(self):
        now = datetime(2026, 3, 10, 12, 0).astimezone()
        assert is_same_day(datetime(2026, 3, 10, 12, 0), now) is True


class TestConsumedOnDay:
    def test_ignores_other_days_and_pending(self):
        now = DAY.replace(hour=15)
        entries = [
            _entry(DAY.replace(hour=9), 300),
            _entry(DAY.replace(hour=10)),
            _entry(DAY - timedelta(hours=2), 500),
        ]
        assert consumed_on_day(entries, now) == 300

    def test_empty(self):
        assert consumed_on_day([], DAY) == 0.0

    def test_zero_amount_counts_as_zero(self):
        entries = [_entry(DAY.replace(hour=9), 0), _entry(DAY.replace(hour=9), 200)]
        assert consumed_on_day(entries, DAY.replace(hour=12)) == 200


class TestExpectedBy:
    prefs = UserPreferences(daily_goal_ml=1400, day_start_hour=8, day_end_hour=22)

    def test_midway(self):
        assert expected_by(self.prefs, DAY.replace(hour=15)) == pytest.approx(700)

    def test_before_window(self):
        assert expected_by(self.prefs, DAY.replace(hour=7)) == 0

    def test_after_window(self):
        assert expected_by(self.prefs, DAY.replace(hour=23)) == 1400

    def test_window_edges(self):
        assert expected_by(self.prefs, DAY.replace(hour=8)) == 0
        assert expected_by(self.prefs, DAY.replace(hour=22)) == pytest.approx(1400)

    def test_inverted_window_does_not_divide_by_zero(self):
        prefs = UserPreferences(daily_goal_ml=2000, day_start_hour=22, day_end_hour=8)
        assert expected_by(prefs, DAY.replace(hour=7)) == 0
        assert expected_by(prefs, DAY.replace(hour=23)) == 2000

    def test_empty_window(self):
        prefs = UserPreferences(daily_goal_ml=2000, day_start_hour=9, day_end_hour=9)
        assert expected_by(prefs, DAY.replace(hour=9)) == 2000

    def test_aware_now(self):
        tz = timezone(timedelta(hours=-5))
        now = datetime(2026, 3, 10, 15, 0, tzinfo=tz)
        assert expected_by(self.prefs, now) == pytest.approx(700)

    def test_dst_day_uses_elapsed_time(self):
        # Clocks skip 02:00 to 03:00 in Berlin: the 0-22 window lasts 21 hours.
        prefs = UserPreferences(daily_goal_ml=1400, day_start_hour=0, day_end_hour=22)
        now = datetime(2026, 3, 29, 11, 0, tzinfo=ZoneInfo("Europe/Berlin"))
        assert expected_by(prefs, now) == pytest.approx(1400 * 10 / 21)


class TestSuggestedSip:
    def test_third_of_remaining(self):
        assert suggested_sip(2000, 800) == 400

    def test_floor(self):
        assert suggested_sip(2000, 1900) == 150

    def test_ceiling(self):
        assert suggested_sip(2000, 0) == 500

    def test_goal_exceeded(self):
        assert suggested_sip(2000, 2600) == 150

    def test_rounds_to_step(self):
        # 1000 / 3 = 333.3 → 350
        assert suggested_sip(2000, 1000) == 350

    def test_half_step_rounds_up(self):
        # 525 / 3 = 175 → 200
        assert suggested_sip(2000, 1475) == 200
        # 675 / 3 = 225 → 250
        assert suggested_sip(2000, 1325) == 250


class TestSnapshot:
    def test_build_snapshot(self):
        prefs = UserPreferences(daily_goal_ml=1400, day_start_hour=8, day_end_hour=22)
        entries = [_entry(DAY.replace(hour=9), 800)]
        snap = build_snapshot(entries, prefs, DAY.replace(hour=15))
        assert snap.goal_ml == 1400
        assert snap.consumed_ml == 800
        assert snap.expected_ml == pytest.approx(700)
        assert snap.delta_ml == pytest.approx(100)
        assert snap.suggested_sip_ml == 200
        assert snap.consumed_ratio == pytest.approx(800 / 1400)
        assert snap.expected_ratio == pytest.approx(0.5)

    def test_ratios_clamped(self):
        snap = ProgressSnapshot(goal_ml=1000, consumed_ml=1500, expected_ml=0,
                                suggested_sip_ml=150)
        assert snap.consumed_ratio == 1.0
        assert snap.expected_ratio == 0.0

    def test_zero_goal_ratio(self):
        snap = ProgressSnapshot(goal_ml=0, consumed_ml=0, expected_ml=0,
                                suggested_sip_ml=150)
        assert snap.consumed_ratio == 1.0


class TestFormatStatus:
    def test_ahead(self):
        snap = ProgressSnapshot(goal_ml=2000, consumed_ml=900, expected_ml=750.6,
                                suggested_sip_ml=350)
        text = format_status(snap)
        assert "Daily goal: 2000 ml" in text
        assert "Consumed: 900 ml" in text
        assert "Expected: 750 ml (ahead 149 ml)" in text
        assert "Suggested sip: 350 ml" in text

    def test_behind(self):
        snap = ProgressSnapshot(goal_ml=2000, consumed_ml=300, expected_ml=1000,
                                suggested_sip_ml=500)
        assert "(behind 700 ml)" in format_status(snap)

    def test_on_pace_counts_as_ahead(self):
        snap = ProgressSnapshot(goal_ml=2000, consumed_ml=500, expected_ml=500,
                                suggested_sip_ml=500)
        assert "(ahead 0 ml)" in format_status(snap)
