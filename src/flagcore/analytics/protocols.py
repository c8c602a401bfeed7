"""Protocol definitions for metrics recording."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from flagcore.models.flag import FeatureFlag
    from flagcore.models.variation import Variation
    from flagcore.target import Target

__all__ = ["MetricsRecorder"]


@runtime_checkable
class MetricsRecorder(Protocol):
    """Receives one call per successful evaluation.

    Implementations must not block: ``enqueue`` is called on the evaluation
    path, possibly from many threads at once.
    """

    def enqueue(self, target: Target, flag: FeatureFlag, variation: Variation) -> None:
        """Record that ``target`` was served ``variation`` of ``flag``."""
        ...
