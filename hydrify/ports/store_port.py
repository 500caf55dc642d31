"""Store port — abstract interface for blob persistence.

The tracker depends on this protocol, never on a specific backend.
"""

from __future__ import annotations

from typing import Protocol


class StoreError(Exception):
    """Raised when any store backend operation fails."""


class BlobStore(Protocol):
    """Key-value store of serialized blobs, keyed by stable strings."""

    def load(self, key: str) -> str | None: ...

    def save(self, key: str, blob: str) -> None: ...
