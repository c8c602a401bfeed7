"""Immutable point-in-time view of flags and segments."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from flagcore.models.flag import FeatureFlag
from flagcore.models.segment import Segment

__all__ = ["Snapshot"]


class Snapshot:
    """A read-only set of flag and segment definitions.

    A snapshot never changes after construction. Storage backends publish a
    new snapshot on every update instead of mutating the current one.
    """

    __slots__ = ("_flags", "_segments")

    def __init__(
        self,
        flags: Iterable[FeatureFlag] | Mapping[str, FeatureFlag] = (),
        segments: Iterable[Segment] | Mapping[str, Segment] = (),
    ) -> None:
        flag_map = dict(flags) if isinstance(flags, Mapping) else {f.key: f for f in flags}
        segment_map = (
            dict(segments) if isinstance(segments, Mapping) else {s.identifier: s for s in segments}
        )
        self._flags: Mapping[str, FeatureFlag] = MappingProxyType(flag_map)
        self._segments: Mapping[str, Segment] = MappingProxyType(segment_map)

    def __repr__(self) -> str:
        return f"<Snapshot(flags={len(self._flags)}, segments={len(self._segments)})>"

    @property
    def flags(self) -> Mapping[str, FeatureFlag]:
        return self._flags

    @property
    def segments(self) -> Mapping[str, Segment]:
        return self._segments

    def get_flag(self, key: str) -> FeatureFlag | None:
        return self._flags.get(key)

    def get_segment(self, identifier: str) -> Segment | None:
        return self._segments.get(identifier)

    def find_flags_by_segment(self, identifier: str) -> set[str]:
        return {key for key, flag in self._flags.items() if identifier in flag.referenced_segments()}
