"""
Hydrify — Data Models.

Intake entries, cup presets and user preferences. Plain dataclasses;
serialization lives in hydrify.data.codec.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Union


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Pending:
    """Time recorded, quantity not yet known."""


@dataclass(frozen=True)
class Resolved:
    """A known quantity. Zero is a valid resolved amount."""

    milliliters: float


Amount = Union[Pending, Resolved]

PENDING = Pending()


@dataclass
class IntakeEntry:
    """One drink: a time, and either an amount or a pending marker."""

    timestamp: datetime
    amount: Amount = PENDING
    preset_id: str | None = None   # statistics only; preset may be deleted later
    id: str = field(default_factory=new_id)

    @property
    def is_pending(self) -> bool:
        return isinstance(self.amount, Pending)

    @property
    def amount_ml(self) -> float | None:
        if isinstance(self.amount, Resolved):
            return self.amount.milliliters
        return None


@dataclass
class CupPreset:
    """A reusable serving size with the usage stats that drive its rank."""

    name: str                          # e.g. "Paper cup"
    amount_ml: float
    iced: bool = False
    warm: bool = False
    usage_count: int = 0
    last_used_at: datetime | None = None
    id: str = field(default_factory=new_id)


@dataclass
class UserPreferences:
    """Daily goal and the active window used for expected progress."""

    daily_goal_ml: float = 2000
    day_start_hour: int = 8    # wake-up, start of the progress lane
    day_end_hour: int = 22     # bedtime, end of the progress lane
    quick_amounts_ml: list[float] = field(default_factory=lambda: [200, 300, 500])


def default_presets() -> list[CupPreset]:
    """The three presets seeded on first run."""
    return [
        CupPreset(name="Paper cup", amount_ml=200, warm=True),
        CupPreset(name="Water bottle", amount_ml=300),
        CupPreset(name="Sports bottle", amount_ml=500, iced=True),
    ]
