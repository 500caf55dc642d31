"""
Hydrify — Entry Point.

`python main.py` loads the tracker and prints today's hydration status.
"""

import logging

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

from datetime import datetime
from zoneinfo import ZoneInfo

from hydrify.adapters.store_factory import create_store
from hydrify.config import settings
from hydrify.core.progress import format_status
from hydrify.core.tracker import HydrationTracker
from hydrify.data.models import UserPreferences


def main() -> None:
    tz = ZoneInfo(settings.TIMEZONE) if settings.TIMEZONE else None
    now = datetime.now(tz)

    tracker = HydrationTracker(
        create_store(),
        default_prefs=UserPreferences(
            daily_goal_ml=settings.DAILY_GOAL_ML,
            day_start_hour=settings.DAY_START_HOUR,
            day_end_hour=settings.DAY_END_HOUR,
            quick_amounts_ml=list(settings.QUICK_AMOUNTS_ML),
        ),
        clock=lambda: datetime.now(tz),
    )

    print(format_status(tracker.progress(now)))
    for entry in tracker.recent_entries(3):
        label = "time only (pending)" if entry.is_pending else f"{entry.amount_ml:g} ml"
        print(f"  {entry.timestamp:%Y-%m-%d %H:%M}  {label}")


if __name__ == "__main__":
    main()
