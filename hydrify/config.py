"""
Hydrify — Centralized configuration.

Loads all settings from .env and validates them.
Every other module reads its defaults from here.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

# Load .env from project root (two levels up from hydrify/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Persistence: "sqlite" | "memory"
    STORE_BACKEND: str = "sqlite"
    DATABASE_PATH: str = "data/hydrify.db"

    # First-run preferences (stored preferences win once saved)
    DAILY_GOAL_ML: float = 2000
    DAY_START_HOUR: int = 8
    DAY_END_HOUR: int = 22
    QUICK_AMOUNTS_ML: list[float] = [200, 300, 500]

    # Host zone used by main.py for "now"; empty → system local time
    TIMEZONE: str = ""

    @field_validator("QUICK_AMOUNTS_ML", mode="before")
    @classmethod
    def parse_amounts(cls, v: str | list[float]) -> list[float]:
        if isinstance(v, list):
            return v
        if isinstance(v, str) and v.strip():
            return [float(a.strip()) for a in v.split(",") if a.strip()]
        return []

    @field_validator("DAY_START_HOUR", "DAY_END_HOUR", mode="before")
    @classmethod
    def parse_hour(cls, v: str | int) -> int:
        hour = int(v)
        if not 0 <= hour <= 23:
            raise ValueError(f"Hour out of range: {hour}")
        return hour


def _load_settings() -> Settings:
    """Load settings from environment."""
    return Settings(
        STORE_BACKEND=os.getenv("STORE_BACKEND", "sqlite"),
        DATABASE_PATH=os.getenv("DATABASE_PATH", "data/hydrify.db"),
        DAILY_GOAL_ML=os.getenv("DAILY_GOAL_ML", "2000"),
        DAY_START_HOUR=os.getenv("DAY_START_HOUR", "8"),
        DAY_END_HOUR=os.getenv("DAY_END_HOUR", "22"),
        QUICK_AMOUNTS_ML=os.getenv("QUICK_AMOUNTS_ML", "200,300,500"),
        TIMEZONE=os.getenv("TIMEZONE", ""),
    )


# Singleton — imported by all other modules as:
#   from hydrify.config import settings
settings = _load_settings()
