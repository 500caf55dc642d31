"""In-memory store adapter — implements BlobStore.

Nothing survives the process. Used by tests and throwaway sessions.
"""

from __future__ import annotations


class MemoryBlobStore:
    """Dict-backed implementation of BlobStore.

    save_count tallies writes so tests can assert when the tracker persisted.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._blobs: dict[str, str] = dict(initial or {})
        self.save_count = 0

    def load(self, key: str) -> str | None:
        return self._blobs.get(key)

    def save(self, key: str, blob: str) -> None:
        self._blobs[key] = blob
        self.save_count += 1
