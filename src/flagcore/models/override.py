"""Variation override model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = ["VariationOverride"]


@dataclass(frozen=True, slots=True)
class VariationOverride:
    """Serve ``variation`` to explicitly listed targets or segment members.

    Overrides are checked before any rule and win over rules and the default
    serve.

    Attributes:
        variation: The variation identifier to serve.
        targets: Target identifiers.
        target_segments: Segment identifiers whose members receive the variation.

    """

    variation: str
    targets: tuple[str, ...] = ()
    target_segments: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "variation": self.variation,
            "targets": [{"identifier": t} for t in self.targets],
            "targetSegments": list(self.target_segments),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VariationOverride:
        targets = []
        for target in data.get("targets") or ():
            if isinstance(target, dict):
                targets.append(str(target["identifier"]))
            else:
                targets.append(str(target))
        return cls(
            variation=data["variation"],
            targets=tuple(targets),
            target_segments=tuple(data.get("targetSegments") or ()),
        )
