"""Benchmarks for storage and metrics aggregation.

These benchmarks measure:
- Flag retrieval from a snapshot
- Copy-on-write flag updates at different store sizes
- Metrics aggregation from one and many targets
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from flagcore import MemoryStorageBackend, MetricsAggregator

if TYPE_CHECKING:
    from flagcore import FeatureFlag, Target


@pytest.fixture
def storage_1000(many_flags: list[FeatureFlag]) -> MemoryStorageBackend:
    """Create storage holding 1000 flags."""
    return MemoryStorageBackend(flags=many_flags)


# -----------------------------------------------------------------------------
# Reads
# -----------------------------------------------------------------------------


class TestReads:
    """Benchmarks for flag retrieval."""

    @pytest.mark.benchmark(group="storage-get")
    def test_get_flag(self, benchmark, storage_1000: MemoryStorageBackend) -> None:
        """Benchmark retrieving an existing flag by key."""
        result = benchmark(storage_1000.get_flag, "flag-500")

        assert result is not None

    @pytest.mark.benchmark(group="storage-get")
    def test_snapshot(self, benchmark, storage_1000: MemoryStorageBackend) -> None:
        """Benchmark taking a snapshot."""
        result = benchmark(storage_1000.snapshot)

        assert len(result.flags) == 1000


# -----------------------------------------------------------------------------
# Writes
# -----------------------------------------------------------------------------


class TestWrites:
    """Benchmarks for copy-on-write updates.

    Every write copies the flag mapping, so cost grows with store size.
    """

    @pytest.mark.benchmark(group="storage-write")
    def test_set_flag_small_store(
        self, benchmark, storage: MemoryStorageBackend, simple_boolean_flag: FeatureFlag
    ) -> None:
        """Benchmark updating a flag in an otherwise empty store."""
        benchmark(storage.set_flag, simple_boolean_flag)

        assert len(storage) == 1

    @pytest.mark.benchmark(group="storage-write")
    def test_set_flag_large_store(
        self, benchmark, storage_1000: MemoryStorageBackend, simple_boolean_flag: FeatureFlag
    ) -> None:
        """Benchmark updating a flag in a store of 1000 flags."""
        benchmark(storage_1000.set_flag, simple_boolean_flag)

        assert len(storage_1000) == 1001


# -----------------------------------------------------------------------------
# Metrics Aggregation
# -----------------------------------------------------------------------------


class TestAggregation:
    """Benchmarks for MetricsAggregator.enqueue."""

    @pytest.mark.benchmark(group="metrics")
    def test_enqueue_same_target(
        self, benchmark, simple_boolean_flag: FeatureFlag, simple_target: Target
    ) -> None:
        """Benchmark counting repeated evaluations of one target."""
        aggregator = MetricsAggregator()
        variation = simple_boolean_flag.get_variation("true")

        benchmark(aggregator.enqueue, simple_target, simple_boolean_flag, variation)

        assert len(aggregator.drain().targets) == 1

    @pytest.mark.benchmark(group="metrics")
    def test_enqueue_many_targets(
        self, benchmark, simple_boolean_flag: FeatureFlag, many_targets: list[Target]
    ) -> None:
        """Benchmark aggregating 1000 distinct targets."""
        variation = simple_boolean_flag.get_variation("true")

        def enqueue_all() -> MetricsAggregator:
            aggregator = MetricsAggregator()
            for target in many_targets:
                aggregator.enqueue(target, simple_boolean_flag, variation)
            return aggregator

        aggregator = benchmark(enqueue_all)

        assert len(aggregator.drain().targets) == 1000
