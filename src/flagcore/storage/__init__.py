"""Flag and segment storage."""

from __future__ import annotations

from flagcore.storage.memory import MemoryStorageBackend
from flagcore.storage.protocols import FlagStore, SnapshotProvider
from flagcore.storage.snapshot import Snapshot

__all__ = ["FlagStore", "MemoryStorageBackend", "Snapshot", "SnapshotProvider"]
