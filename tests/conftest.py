"""Shared test fixtures and configuration.

Sets environment variables before any hydrify imports so settings never
point at a real database, and provides common fixtures like a temp DB
and a tracker with a frozen clock.
"""

import os

# Patch env vars BEFORE any hydrify imports
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("DATABASE_PATH", ":memory:")
os.environ.setdefault("TIMEZONE", "")

import pytest
from datetime import datetime

FROZEN_NOW = datetime(2026, 3, 10, 15, 0)


@pytest.fixture
def tmp_db_path(tmp_path):
    """Return a temporary SQLite DB path."""
    return str(tmp_path / "test_hydrify.db")


@pytest.fixture
def sqlite_store(tmp_db_path):
    """Return a SqliteBlobStore backed by a temp file."""
    from hydrify.adapters.sqlite_store import SqliteBlobStore
    return SqliteBlobStore(db_path=tmp_db_path)


@pytest.fixture
def memory_store():
    from hydrify.adapters.memory_store import MemoryBlobStore
    return MemoryBlobStore()


@pytest.fixture
def clock():
    """A settable clock; tests move it with clock.now = ..."""

    class _Clock:
        now = FROZEN_NOW

        def __call__(self):
            return self.now

    return _Clock()


@pytest.fixture
def tracker(memory_store, clock):
    """Return a HydrationTracker on an empty memory store (defaults seeded)."""
    from hydrify.core.tracker import HydrationTracker
    return HydrationTracker(memory_store, clock=clock)
