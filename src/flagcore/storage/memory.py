"""In-memory storage backend."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from flagcore.models.flag import FeatureFlag
from flagcore.models.segment import Segment
from flagcore.storage.snapshot import Snapshot

__all__ = ["MemoryStorageBackend"]

logger = logging.getLogger(__name__)


class MemoryStorageBackend:
    """Copy-on-write in-memory flag store.

    Every write builds a new :class:`Snapshot` and publishes it with a single
    reference assignment, so readers never need a lock and never see a
    partially applied update. Writes are serialized by a lock.
    """

    def __init__(
        self,
        flags: Iterable[FeatureFlag] = (),
        segments: Iterable[Segment] = (),
    ) -> None:
        self._lock = threading.Lock()
        self._snapshot = Snapshot(flags, segments)

    def __len__(self) -> int:
        return len(self._snapshot.flags)

    def snapshot(self) -> Snapshot:
        """Return the current snapshot."""
        return self._snapshot

    def get_flag(self, key: str) -> FeatureFlag | None:
        return self._snapshot.get_flag(key)

    def get_segment(self, identifier: str) -> Segment | None:
        return self._snapshot.get_segment(identifier)

    def find_flags_by_segment(self, identifier: str) -> set[str]:
        return self._snapshot.find_flags_by_segment(identifier)

    def set_flag(self, flag: FeatureFlag) -> None:
        """Create or replace a flag."""
        with self._lock:
            current = self._snapshot
            self._snapshot = Snapshot({**current.flags, flag.key: flag}, current.segments)
        logger.debug("Stored flag %s (version %s)", flag.key, flag.version)

    def set_segment(self, segment: Segment) -> None:
        """Create or replace a segment."""
        with self._lock:
            current = self._snapshot
            self._snapshot = Snapshot(current.flags, {**current.segments, segment.identifier: segment})
        logger.debug("Stored segment %s (version %s)", segment.identifier, segment.version)

    def delete_flag(self, key: str) -> bool:
        """Remove a flag. Returns ``False`` when it did not exist."""
        with self._lock:
            current = self._snapshot
            if key not in current.flags:
                return False
            flags = {k: v for k, v in current.flags.items() if k != key}
            self._snapshot = Snapshot(flags, current.segments)
        return True

    def delete_segment(self, identifier: str) -> bool:
        """Remove a segment. Returns ``False`` when it did not exist."""
        with self._lock:
            current = self._snapshot
            if identifier not in current.segments:
                return False
            segments = {k: v for k, v in current.segments.items() if k != identifier}
            self._snapshot = Snapshot(current.flags, segments)
        return True

    def replace(self, flags: Iterable[FeatureFlag], segments: Iterable[Segment] = ()) -> None:
        """Replace the whole flag set at once."""
        snapshot = Snapshot(flags, segments)
        with self._lock:
            self._snapshot = snapshot
        logger.debug("Replaced snapshot: %r", snapshot)

    def clear(self) -> None:
        """Remove all flags and segments."""
        with self._lock:
            self._snapshot = Snapshot()
