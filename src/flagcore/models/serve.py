"""Serve directives: a fixed variation or a weighted distribution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = ["Distribution", "Serve", "WeightedVariation"]


@dataclass(frozen=True, slots=True)
class WeightedVariation:
    """A variation identifier paired with its share of the 100 buckets."""

    variation: str
    weight: int

    def to_dict(self) -> dict[str, Any]:
        return {"variation": self.variation, "weight": self.weight}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WeightedVariation:
        return cls(variation=data["variation"], weight=int(data.get("weight", 0)))


@dataclass(frozen=True, slots=True)
class Distribution:
    """Percentage rollout across variations.

    Attributes:
        bucket_by: Target attribute hashed to pick a bucket. Falls back to the
            target identifier when the target does not carry the attribute.
        variations: Ordered weights. They need not add up to 100; buckets past
            the cumulative total are served the last entry.

    """

    bucket_by: str
    variations: tuple[WeightedVariation, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "bucketBy": self.bucket_by,
            "variations": [v.to_dict() for v in self.variations],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Distribution:
        return cls(
            bucket_by=data.get("bucketBy") or "identifier",
            variations=tuple(WeightedVariation.from_dict(v) for v in data.get("variations") or ()),
        )


@dataclass(frozen=True, slots=True)
class Serve:
    """What to serve when a rule (or the default) applies.

    Exactly one of ``variation`` and ``distribution`` is expected. A serve with
    neither is treated as a misconfiguration by the engine.
    """

    variation: str | None = None
    distribution: Distribution | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.variation is not None:
            data["variation"] = self.variation
        if self.distribution is not None:
            data["distribution"] = self.distribution.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Serve:
        if not data:
            return cls()
        distribution = data.get("distribution")
        return cls(
            variation=data.get("variation"),
            distribution=Distribution.from_dict(distribution) if distribution else None,
        )
