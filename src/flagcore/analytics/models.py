"""Metrics data models and the submission payload."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, NamedTuple

from flagcore.analytics.constants import (
    FEATURE_IDENTIFIER_ATTRIBUTE,
    FEATURE_NAME_ATTRIBUTE,
    GLOBAL_TARGET,
    METRICS_TYPE,
    SDK_LANGUAGE,
    SDK_LANGUAGE_ATTRIBUTE,
    SDK_TYPE,
    SDK_TYPE_ATTRIBUTE,
    SDK_VERSION,
    SDK_VERSION_ATTRIBUTE,
    TARGET_ATTRIBUTE,
    VARIATION_IDENTIFIER_ATTRIBUTE,
)
from flagcore.attributes import to_text

if TYPE_CHECKING:
    from flagcore.target import Target

__all__ = [
    "AggregateSnapshot",
    "KeyValue",
    "MetricsData",
    "MetricsKey",
    "MetricsPayload",
    "TargetData",
]


class MetricsKey(NamedTuple):
    """Aggregation key for evaluation counts."""

    flag_key: str
    variation_identifier: str
    variation_value: str


@dataclass(frozen=True, slots=True)
class AggregateSnapshot:
    """Everything accumulated during one flush interval.

    Attributes:
        counts: Number of evaluations per (flag, variation, value).
        targets: Distinct non-anonymous targets, keyed by identifier.

    """

    counts: dict[MetricsKey, int] = field(default_factory=dict)
    targets: dict[str, Target] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.counts or self.targets)

    @property
    def total_evaluations(self) -> int:
        return sum(self.counts.values())


@dataclass(frozen=True, slots=True)
class KeyValue:
    key: str
    value: str

    def to_dict(self) -> dict[str, str]:
        return {"key": self.key, "value": self.value}


@dataclass(frozen=True, slots=True)
class TargetData:
    """A target as reported to the events service."""

    identifier: str
    name: str
    attributes: tuple[KeyValue, ...] = ()

    @classmethod
    def from_target(cls, target: Target) -> TargetData:
        return cls(
            identifier=target.identifier,
            name=target.display_name,
            attributes=tuple(KeyValue(key, to_text(value)) for key, value in target.attributes.items()),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "identifier": self.identifier,
            "name": self.name,
            "attributes": [attribute.to_dict() for attribute in self.attributes],
        }


@dataclass(frozen=True, slots=True)
class MetricsData:
    """Evaluation count of one (flag, variation, value) over an interval."""

    timestamp: int
    count: int
    attributes: tuple[KeyValue, ...]
    metrics_type: str = METRICS_TYPE

    @classmethod
    def from_key(cls, key: MetricsKey, count: int, timestamp: int) -> MetricsData:
        return cls(
            timestamp=timestamp,
            count=count,
            attributes=(
                KeyValue(FEATURE_IDENTIFIER_ATTRIBUTE, key.flag_key),
                KeyValue(FEATURE_NAME_ATTRIBUTE, key.flag_key),
                KeyValue(VARIATION_IDENTIFIER_ATTRIBUTE, key.variation_identifier),
                KeyValue(SDK_TYPE_ATTRIBUTE, SDK_TYPE),
                KeyValue(SDK_LANGUAGE_ATTRIBUTE, SDK_LANGUAGE),
                KeyValue(SDK_VERSION_ATTRIBUTE, SDK_VERSION),
                KeyValue(TARGET_ATTRIBUTE, GLOBAL_TARGET),  # counts span all targets
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "count": self.count,
            "metricsType": self.metrics_type,
            "attributes": [attribute.to_dict() for attribute in self.attributes],
        }


@dataclass(frozen=True, slots=True)
class MetricsPayload:
    """Request body of a metrics submission."""

    target_data: tuple[TargetData, ...] = ()
    metrics_data: tuple[MetricsData, ...] = ()

    @classmethod
    def from_snapshot(cls, snapshot: AggregateSnapshot, timestamp: int | None = None) -> MetricsPayload:
        """Build a payload from a drained snapshot.

        Args:
            snapshot: The drained aggregate.
            timestamp: Epoch milliseconds stamped on every metrics entry.
                Defaults to the current time.

        """
        if timestamp is None:
            timestamp = int(time.time() * 1000)
        return cls(
            target_data=tuple(TargetData.from_target(t) for t in snapshot.targets.values()),
            metrics_data=tuple(MetricsData.from_key(k, c, timestamp) for k, c in snapshot.counts.items()),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "targetData": [target.to_dict() for target in self.target_data],
            "metricsData": [metrics.to_dict() for metrics in self.metrics_data],
        }
