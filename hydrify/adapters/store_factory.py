"""Store adapter factory — creates the right adapter based on config."""

from __future__ import annotations

from hydrify.config import settings
from hydrify.ports.store_port import BlobStore


def create_store(db_path: str | None = None) -> BlobStore:
    """Return the store adapter matching the STORE_BACKEND setting.

    Args:
        db_path: Overrides DATABASE_PATH for the sqlite backend.
    """
    backend = settings.STORE_BACKEND.lower()

    if backend == "sqlite":
        from hydrify.adapters.sqlite_store import SqliteBlobStore

        return SqliteBlobStore(db_path=db_path)

    if backend == "memory":
        from hydrify.adapters.memory_store import MemoryBlobStore

        return MemoryBlobStore()

    raise ValueError(f"Unknown STORE_BACKEND: {backend!r}")
