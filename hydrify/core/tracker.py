"""
Hydrify — Tracking Engine.

Owns the intake log, the cup preset catalog and the user preferences.
Every mutating method changes the in-memory state first and then writes
the affected blob through the store. Time-based queries take `now`
explicitly; the host decides when to refresh.
"""

from __future__ import annotations

import logging
from dataclasses import fields, replace
from datetime import datetime
from typing import Callable

from hydrify.core import progress as progress_math
from hydrify.core.progress import ProgressSnapshot
from hydrify.data import codec
from hydrify.data.models import (
    PENDING,
    CupPreset,
    IntakeEntry,
    Resolved,
    UserPreferences,
    default_presets,
)
from hydrify.ports.store_port import BlobStore, StoreError

logger = logging.getLogger(__name__)


class HydrationTracker:
    """Single-user hydration state with write-through persistence.

    Not thread-safe: a multi-threaded host must guard the whole object
    with one lock.
    """

    def __init__(
        self,
        store: BlobStore,
        default_prefs: UserPreferences | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._clock = clock or datetime.now

        self.entries: list[IntakeEntry] = []       # newest first
        self.presets: list[CupPreset] = []
        self.prefs: UserPreferences = default_prefs or UserPreferences()

        # One-slot undo: each add overwrites it, never pushes.
        self.last_added_id: str | None = None
        self.undo_banner_visible: bool = False

        self._load(default_prefs)
        self._seed_if_needed()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _load(self, default_prefs: UserPreferences | None) -> None:
        self.entries = codec.decode_entries(self._read(codec.ENTRIES_KEY))
        self.presets = codec.decode_presets(self._read(codec.PRESETS_KEY))
        self.prefs = codec.decode_prefs(self._read(codec.PREFS_KEY), default_prefs)
        logger.info(
            "Tracker loaded: %d entries, %d presets, goal %d ml",
            len(self.entries), len(self.presets), self.prefs.daily_goal_ml,
        )

    def _read(self, key: str) -> str | None:
        try:
            return self._store.load(key)
        except StoreError as exc:
            logger.error("Failed to read %s, using defaults: %s", key, exc)
            return None

    def _write(self, key: str, blob: str) -> None:
        try:
            self._store.save(key, blob)
        except StoreError as exc:
            logger.error("Failed to save %s: %s", key, exc)

    def _save_entries(self) -> None:
        self._write(codec.ENTRIES_KEY, codec.encode_entries(self.entries))

    def _save_presets(self) -> None:
        self._write(codec.PRESETS_KEY, codec.encode_presets(self.presets))

    def _save_prefs(self) -> None:
        self._write(codec.PREFS_KEY, codec.encode_prefs(self.prefs))

    def _seed_if_needed(self) -> None:
        """First run: give the user a few presets to tap."""
        if self.presets:
            return
        self.presets = default_presets()
        self._save_presets()
        logger.info("Seeded %d default presets", len(self.presets))

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_entry(self, entry_id: str) -> IntakeEntry | None:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    def get_preset(self, preset_id: str) -> CupPreset | None:
        for preset in self.presets:
            if preset.id == preset_id:
                return preset
        return None

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    def add(
        self,
        amount_ml: float | None,
        at: datetime,
        preset_id: str | None = None,
    ) -> IntakeEntry:
        """Log a drink. amount_ml=None records the time only (pending).

        `at` may be backdated; a referenced preset is stamped with the real
        current time instead.
        """
        amount = PENDING if amount_ml is None else Resolved(amount_ml)
        entry = IntakeEntry(timestamp=at, amount=amount, preset_id=preset_id)
        self.entries.insert(0, entry)
        self.last_added_id = entry.id
        self.undo_banner_visible = True

        preset = self.get_preset(preset_id) if preset_id is not None else None
        if preset is not None:
            preset.usage_count += 1
            preset.last_used_at = self._clock()
            self._save_presets()

        self._save_entries()
        logger.info(
            "Intake logged: %s at %s (preset %s)",
            "pending" if entry.is_pending else f"{entry.amount_ml:g} ml",
            at.isoformat(), preset_id,
        )
        return entry

    def remove(self, entry_id: str) -> bool:
        """Delete an entry. Unknown ids are ignored."""
        before = len(self.entries)
        self.entries = [e for e in self.entries if e.id != entry_id]
        removed = len(self.entries) < before
        if removed:
            self._save_entries()
            logger.info("Intake %s removed", entry_id)
        return removed

    def undo_last_add(self) -> IntakeEntry | None:
        """Remove the most recent add, once. Returns the removed entry, if any."""
        if self.last_added_id is None:
            return None
        entry = self.get_entry(self.last_added_id)
        self.remove(self.last_added_id)
        self.last_added_id = None
        self.undo_banner_visible = False
        return entry

    def dismiss_undo_banner(self) -> None:
        """Hide the banner; the last add stays undoable."""
        self.undo_banner_visible = False

    def fill_amount(self, entry_id: str, amount_ml: float) -> IntakeEntry | None:
        """Set the amount of an entry (normally a pending one)."""
        entry = self.get_entry(entry_id)
        if entry is None:
            return None
        entry.amount = Resolved(amount_ml)
        self._save_entries()
        logger.info("Intake %s filled with %g ml", entry_id, amount_ml)
        return entry

    def recent_entries(self, n: int = 3) -> list[IntakeEntry]:
        return self.entries[:n]

    def pending_entries(self) -> list[IntakeEntry]:
        return [e for e in self.entries if e.is_pending]

    # ------------------------------------------------------------------
    # Presets
    # ------------------------------------------------------------------

    def ranked_presets(self) -> list[CupPreset]:
        """Recently used first, then most used. Never-used presets go last.

        Two stable passes: usage count first, then recency on top of it, so
        presets tied on both keep their catalog order.
        Stamps are compared as aware times, so naive and zoned stamps mix.
        """
        by_usage = sorted(self.presets, key=lambda p: p.usage_count, reverse=True)
        used = [p for p in by_usage if p.last_used_at is not None]
        unused = [p for p in by_usage if p.last_used_at is None]
        used.sort(key=lambda p: progress_math.as_aware(p.last_used_at), reverse=True)
        return used + unused

    def quick_amounts(self) -> list[float]:
        """Amounts to offer as one-tap buttons."""
        if self.presets:
            return [p.amount_ml for p in self.ranked_presets()]
        return list(self.prefs.quick_amounts_ml)

    def add_preset(
        self, name: str, amount_ml: float, iced: bool = False, warm: bool = False,
    ) -> CupPreset:
        preset = CupPreset(name=name, amount_ml=amount_ml, iced=iced, warm=warm)
        self.presets.append(preset)
        self._save_presets()
        logger.info("Preset added: '%s' %g ml", name, amount_ml)
        return preset

    def delete_preset(self, preset_id: str) -> bool:
        """Drop a preset. Entries that used it keep their preset_id."""
        before = len(self.presets)
        self.presets = [p for p in self.presets if p.id != preset_id]
        deleted = len(self.presets) < before
        if deleted:
            self._save_presets()
            logger.info("Preset %s deleted", preset_id)
        return deleted

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------

    def update_preferences(self, **changes) -> UserPreferences:
        """Replace the named preference fields. Values are not validated."""
        known = {f.name for f in fields(UserPreferences)}
        unknown = set(changes) - known
        if unknown:
            raise TypeError(f"Unknown preference fields: {sorted(unknown)}")
        self.prefs = replace(self.prefs, **changes)
        self._save_prefs()
        logger.info("Preferences updated: %s", changes)
        return self.prefs

    # ------------------------------------------------------------------
    # Derived metrics
    # ------------------------------------------------------------------

    def consumed_today(self, now: datetime) -> float:
        return progress_math.consumed_on_day(self.entries, now)

    def expected_by_now(self, now: datetime) -> float:
        return progress_math.expected_by(self.prefs, now)

    def suggested_sip(self, now: datetime) -> float:
        return progress_math.suggested_sip(self.prefs.daily_goal_ml, self.consumed_today(now))

    def progress(self, now: datetime) -> ProgressSnapshot:
        return progress_math.build_snapshot(self.entries, self.prefs, now)
