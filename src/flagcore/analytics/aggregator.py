"""Thread-safe accumulation of evaluation metrics between flushes."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from flagcore.analytics.models import AggregateSnapshot, MetricsKey
from flagcore.sdk_codes import info_metrics_target_exceeded

if TYPE_CHECKING:
    from flagcore.models.flag import FeatureFlag
    from flagcore.models.variation import Variation
    from flagcore.target import Target

__all__ = ["MetricsAggregator"]

logger = logging.getLogger(__name__)


class MetricsAggregator:
    """Accumulates evaluation counts and the targets that produced them.

    Evaluations are counted per (flag key, variation identifier, variation
    value). Distinct non-anonymous targets are retained by identifier, up to
    ``max_targets`` per interval; evaluations of targets past the cap are
    still counted.

    :meth:`enqueue` may be called from any thread. :meth:`drain` swaps both
    accumulators for empty ones under the same lock, so every enqueue lands
    in exactly one snapshot.

    Example:
        >>> aggregator = MetricsAggregator()
        >>> snapshot = aggregator.drain()
        >>> snapshot.total_evaluations
        0

    """

    def __init__(self, max_targets: int = 100_000) -> None:
        self._max_targets = max_targets
        self._lock = threading.Lock()
        self._counts: dict[MetricsKey, int] = {}
        self._targets: dict[str, Target] = {}
        self._targets_exceeded = False

    @property
    def max_targets(self) -> int:
        return self._max_targets

    def __len__(self) -> int:
        """Return the number of distinct aggregation keys pending."""
        with self._lock:
            return len(self._counts)

    def enqueue(self, target: Target, flag: FeatureFlag, variation: Variation) -> None:
        """Record one evaluation."""
        key = MetricsKey(flag.key, variation.identifier, variation.value)
        exceeded = False
        with self._lock:
            self._counts[key] = self._counts.get(key, 0) + 1
            if target.anonymous or target.identifier in self._targets:
                return
            if len(self._targets) < self._max_targets:
                self._targets[target.identifier] = target
            elif not self._targets_exceeded:
                self._targets_exceeded = exceeded = True
        if exceeded:
            info_metrics_target_exceeded(logger)

    def drain(self) -> AggregateSnapshot:
        """Take everything accumulated so far and reset the accumulators."""
        with self._lock:
            counts, self._counts = self._counts, {}
            targets, self._targets = self._targets, {}
            self._targets_exceeded = False
        return AggregateSnapshot(counts=counts, targets=targets)
