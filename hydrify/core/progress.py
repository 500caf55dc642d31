"""Hydration progress math — pure business logic.

Sums today's intake, computes where the user should be by now along a
linear active window, and sizes the next suggested sip.

No I/O: this module only transforms data.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable

from hydrify.data.models import IntakeEntry, UserPreferences

SIP_MIN_ML = 150
SIP_MAX_ML = 500
SIP_STEP_ML = 50


@dataclass
class ProgressSnapshot:
    """Everything the progress lane needs for one point in time."""

    goal_ml: float
    consumed_ml: float
    expected_ml: float
    suggested_sip_ml: float

    @property
    def delta_ml(self) -> float:
        """Positive when ahead of the expected curve, negative when behind."""
        return self.consumed_ml - self.expected_ml

    @property
    def consumed_ratio(self) -> float:
        return _ratio(self.consumed_ml, self.goal_ml)

    @property
    def expected_ratio(self) -> float:
        return _ratio(self.expected_ml, self.goal_ml)


def _ratio(part: float, whole: float) -> float:
    if whole <= 0:
        return 1.0
    return max(0.0, min(1.0, part / whole))


def as_aware(ts: datetime) -> datetime:
    """An aware datetime for ordering; naive values are read as host-local time."""
    return ts.astimezone()


def _on_calendar_of(ts: datetime, now: datetime) -> datetime:
    """View ts in the same calendar as now (now's zone, or host-local if naive)."""
    if now.tzinfo is not None:
        return ts.astimezone(now.tzinfo)
    if ts.tzinfo is not None:
        return ts.astimezone().replace(tzinfo=None)
    return ts


def _seconds_between(earlier: datetime, later: datetime) -> float:
    """Elapsed seconds; aware values go through UTC so DST shifts count."""
    if later.tzinfo is not None:
        earlier = earlier.astimezone(timezone.utc)
        later = later.astimezone(timezone.utc)
    return (later - earlier).total_seconds()


def is_same_day(ts: datetime, now: datetime) -> bool:
    """True when ts falls on now's civil calendar day.

    Timestamps are viewed in now's zone first (host-local when now is
    naive), so the day boundary is the caller's, not UTC.
    """
    return _on_calendar_of(ts, now).date() == now.date()


def consumed_on_day(entries: Iterable[IntakeEntry], now: datetime) -> float:
    """Sum resolved amounts logged on now's day. Pending entries add nothing."""
    return sum(
        (e.amount_ml for e in entries
         if e.amount_ml is not None and is_same_day(e.timestamp, now)),
        0.0,
    )


def expected_by(prefs: UserPreferences, now: datetime) -> float:
    """Target intake at `now`, spreading the goal linearly over the active window.

    Returns 0 before the window opens and the full goal once it has closed.
    An empty or inverted window jumps straight to the goal at its start hour.
    Durations are real elapsed time, so a DST change shortens or stretches
    the window.
    """
    start = now.replace(hour=prefs.day_start_hour, minute=0, second=0, microsecond=0)
    end = now.replace(hour=prefs.day_end_hour, minute=0, second=0, microsecond=0)
    if now < start:
        return 0.0
    if now > end:
        return prefs.daily_goal_ml

    total = _seconds_between(start, end)
    if total <= 0:
        return prefs.daily_goal_ml
    elapsed = _seconds_between(start, now)
    ratio = max(0.0, min(1.0, elapsed / total))
    return prefs.daily_goal_ml * ratio


def suggested_sip(goal_ml: float, consumed_ml: float) -> float:
    """A third of what's left, clamped to [150, 500], on a 50 ml step.

    Halfway values round up (e.g. 175 → 200).
    """
    remaining = max(0.0, goal_ml - consumed_ml)
    raw = max(SIP_MIN_ML, min(SIP_MAX_ML, remaining / 3))
    return float(math.floor(raw / SIP_STEP_ML + 0.5) * SIP_STEP_ML)


def build_snapshot(
    entries: Iterable[IntakeEntry], prefs: UserPreferences, now: datetime,
) -> ProgressSnapshot:
    """Compute consumed / expected / suggested sip in one pass."""
    consumed = consumed_on_day(entries, now)
    return ProgressSnapshot(
        goal_ml=prefs.daily_goal_ml,
        consumed_ml=consumed,
        expected_ml=expected_by(prefs, now),
        suggested_sip_ml=suggested_sip(prefs.daily_goal_ml, consumed),
    )


def format_status(snapshot: ProgressSnapshot) -> str:
    """Render the progress lane as plain text lines."""
    diff = int(snapshot.delta_ml)
    pace = f"ahead {diff} ml" if diff >= 0 else f"behind {abs(diff)} ml"
    return "\n".join([
        f"Daily goal: {int(snapshot.goal_ml)} ml",
        f"Consumed: {int(snapshot.consumed_ml)} ml",
        f"Expected: {int(snapshot.expected_ml)} ml ({pace})",
        f"Suggested sip: {int(snapshot.suggested_sip_ml)} ml",
    ])
