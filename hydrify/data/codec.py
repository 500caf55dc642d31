"""
Hydrify — Blob codec.

Encodes the three persisted collections as JSON and decodes them back.
Decoding never raises: a missing or corrupt blob falls back to the
collection's default and logs a warning.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime

from hydrify.data.models import (
    PENDING,
    CupPreset,
    IntakeEntry,
    Resolved,
    UserPreferences,
)

logger = logging.getLogger(__name__)

ENTRIES_KEY = "hydrify.entries.v1"
PRESETS_KEY = "hydrify.presets.v1"
PREFS_KEY = "hydrify.prefs.v1"

_DECODE_ERRORS = (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError)


def _dt_or_none(raw: str | None) -> datetime | None:
    if raw is None:
        return None
    return datetime.fromisoformat(raw)


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def entry_to_dict(entry: IntakeEntry) -> dict:
    return {
        "id": entry.id,
        "timestamp": entry.timestamp.isoformat(),
        "amount_ml": entry.amount_ml,   # None → pending
        "preset_id": entry.preset_id,
    }


def preset_to_dict(preset: CupPreset) -> dict:
    return {
        "id": preset.id,
        "name": preset.name,
        "amount_ml": preset.amount_ml,
        "iced": preset.iced,
        "warm": preset.warm,
        "usage_count": preset.usage_count,
        "last_used_at": preset.last_used_at.isoformat() if preset.last_used_at else None,
    }


def prefs_to_dict(prefs: UserPreferences) -> dict:
    return {
        "daily_goal_ml": prefs.daily_goal_ml,
        "day_start_hour": prefs.day_start_hour,
        "day_end_hour": prefs.day_end_hour,
        "quick_amounts_ml": list(prefs.quick_amounts_ml),
    }


def encode_entries(entries: list[IntakeEntry]) -> str:
    return json.dumps([entry_to_dict(e) for e in entries])


def encode_presets(presets: list[CupPreset]) -> str:
    return json.dumps([preset_to_dict(p) for p in presets])


def encode_prefs(prefs: UserPreferences) -> str:
    return json.dumps(prefs_to_dict(prefs))


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def entry_from_dict(data: dict) -> IntakeEntry:
    """Build an entry; a null or missing amount_ml means pending."""
    raw_amount = data.get("amount_ml")
    amount = PENDING if raw_amount is None else Resolved(float(raw_amount))
    return IntakeEntry(
        id=str(data["id"]),
        timestamp=datetime.fromisoformat(data["timestamp"]),
        amount=amount,
        preset_id=data.get("preset_id"),
    )


def preset_from_dict(data: dict) -> CupPreset:
    return CupPreset(
        id=str(data["id"]),
        name=str(data["name"]),
        amount_ml=float(data["amount_ml"]),
        iced=bool(data.get("iced", False)),
        warm=bool(data.get("warm", False)),
        usage_count=int(data.get("usage_count", 0)),
        last_used_at=_dt_or_none(data.get("last_used_at")),
    )


def prefs_from_dict(data: dict, default: UserPreferences | None = None) -> UserPreferences:
    """Build preferences; fields missing from the blob take the default's value."""
    base = default or UserPreferences()
    return UserPreferences(
        daily_goal_ml=float(data.get("daily_goal_ml", base.daily_goal_ml)),
        day_start_hour=int(data.get("day_start_hour", base.day_start_hour)),
        day_end_hour=int(data.get("day_end_hour", base.day_end_hour)),
        quick_amounts_ml=[
            float(a) for a in data.get("quick_amounts_ml", base.quick_amounts_ml)
        ],
    )


def decode_entries(blob: str | None) -> list[IntakeEntry]:
    if blob is None:
        return []
    try:
        return [entry_from_dict(item) for item in json.loads(blob)]
    except _DECODE_ERRORS as exc:
        logger.warning("Entries blob unreadable, starting empty: %s", exc)
        return []


def decode_presets(blob: str | None) -> list[CupPreset]:
    if blob is None:
        return []
    try:
        return [preset_from_dict(item) for item in json.loads(blob)]
    except _DECODE_ERRORS as exc:
        logger.warning("Presets blob unreadable, starting empty: %s", exc)
        return []


def decode_prefs(
    blob: str | None, default: UserPreferences | None = None,
) -> UserPreferences:
    fallback = default or UserPreferences()
    if blob is None:
        return fallback
    try:
        return prefs_from_dict(json.loads(blob), fallback)
    except _DECODE_ERRORS as exc:
        logger.warning("Preferences blob unreadable, using defaults: %s", exc)
        return fallback
