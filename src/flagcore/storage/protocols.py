"""Storage protocols consumed by the evaluation engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from flagcore.models.flag import FeatureFlag
    from flagcore.models.segment import Segment
    from flagcore.storage.snapshot import Snapshot

__all__ = ["FlagStore", "SnapshotProvider"]


@runtime_checkable
class FlagStore(Protocol):
    """Read access to flag and segment definitions."""

    def get_flag(self, key: str) -> FeatureFlag | None:
        """Return the flag with the given key, or ``None``."""
        ...

    def get_segment(self, identifier: str) -> Segment | None:
        """Return the segment with the given identifier, or ``None``."""
        ...

    def find_flags_by_segment(self, identifier: str) -> set[str]:
        """Return the keys of flags that reference the segment."""
        ...


@runtime_checkable
class SnapshotProvider(Protocol):
    """Source of immutable, point-in-time views of the flag set.

    Evaluators take one snapshot per call so that a concurrent update is
    observed either entirely or not at all.
    """

    def snapshot(self) -> Snapshot:
        """Return the current snapshot."""
        ...
