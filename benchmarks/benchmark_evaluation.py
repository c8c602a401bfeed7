"""Benchmarks for flag evaluation performance.

These benchmarks measure the core flag evaluation logic including:
- Simple boolean flag evaluation
- Flag evaluation with targeting rules and segments
- Percentage rollouts
- Batch evaluation of many flags

Run with ``pytest benchmarks/benchmark_evaluation.py``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from flagcore import EvaluationReason, FeatureFlagClient, MetricsAggregator

if TYPE_CHECKING:
    from flagcore import EvaluationEngine, FeatureFlag, MemoryStorageBackend, Target


# -----------------------------------------------------------------------------
# Simple Boolean Flag Evaluation
# -----------------------------------------------------------------------------


class TestSimpleBooleanEvaluation:
    """Benchmarks for simple boolean flag evaluation.

    This is the baseline for all other benchmarks.
    """

    @pytest.mark.benchmark(group="evaluation-simple")
    def test_engine(
        self,
        benchmark,
        storage: MemoryStorageBackend,
        engine: EvaluationEngine,
        simple_boolean_flag: FeatureFlag,
        simple_target: Target,
    ) -> None:
        """Benchmark evaluating a flag directly with the engine."""
        storage.set_flag(simple_boolean_flag)
        snapshot = storage.snapshot()

        result = benchmark(engine.evaluate_flag, simple_boolean_flag, simple_target, snapshot)

        assert result.variation.identifier == "true"

    @pytest.mark.benchmark(group="evaluation-simple")
    def test_via_client(
        self,
        benchmark,
        storage: MemoryStorageBackend,
        client: FeatureFlagClient,
        simple_boolean_flag: FeatureFlag,
        simple_target: Target,
    ) -> None:
        """Benchmark evaluation through the client, including value parsing."""
        storage.set_flag(simple_boolean_flag)

        result = benchmark(client.bool_variation, "simple-flag", simple_target, False)

        assert result is True

    @pytest.mark.benchmark(group="evaluation-simple")
    def test_via_client_with_metrics(
        self,
        benchmark,
        storage: MemoryStorageBackend,
        simple_boolean_flag: FeatureFlag,
        simple_target: Target,
    ) -> None:
        """Benchmark evaluation with metrics aggregation on the hot path."""
        storage.set_flag(simple_boolean_flag)
        client = FeatureFlagClient(storage=storage, metrics=MetricsAggregator())

        result = benchmark(client.bool_variation, "simple-flag", simple_target, False)

        assert result is True


# -----------------------------------------------------------------------------
# Rules and Segments
# -----------------------------------------------------------------------------


class TestRulesEvaluation:
    """Benchmarks for evaluation with targeting rules."""

    @pytest.mark.benchmark(group="evaluation-rules")
    def test_multiple_rules_worst_case(
        self,
        benchmark,
        storage: MemoryStorageBackend,
        engine: EvaluationEngine,
        flag_with_multiple_rules: FeatureFlag,
        simple_target: Target,
    ) -> None:
        """Benchmark walking every rule before falling through to the default."""
        snapshot = storage.snapshot()

        result = benchmark(engine.evaluate_flag, flag_with_multiple_rules, simple_target, snapshot)

        assert result.reason == EvaluationReason.DEFAULT

    @pytest.mark.benchmark(group="evaluation-rules")
    def test_segment_match(
        self,
        benchmark,
        storage: MemoryStorageBackend,
        engine: EvaluationEngine,
        segment_flag: FeatureFlag,
        simple_target: Target,
    ) -> None:
        """Benchmark a rule resolving segment membership."""
        snapshot = storage.snapshot()

        result = benchmark(engine.evaluate_flag, segment_flag, simple_target, snapshot)

        assert result.reason == EvaluationReason.TARGETING_MATCH


# -----------------------------------------------------------------------------
# Percentage Rollout
# -----------------------------------------------------------------------------


class TestRolloutEvaluation:
    """Benchmarks for percentage rollouts."""

    @pytest.mark.benchmark(group="evaluation-rollout")
    def test_rollout_across_targets(
        self,
        benchmark,
        storage: MemoryStorageBackend,
        engine: EvaluationEngine,
        rollout_flag: FeatureFlag,
        many_targets: list[Target],
    ) -> None:
        """Benchmark bucketing 1000 distinct targets."""
        snapshot = storage.snapshot()

        def evaluate_all() -> int:
            return sum(
                engine.evaluate_flag(rollout_flag, target, snapshot).variation.identifier == "true"
                for target in many_targets
            )

        enabled = benchmark(evaluate_all)

        # 50% rollout over 1000 targets
        assert 400 < enabled < 600


# -----------------------------------------------------------------------------
# Batch Evaluation
# -----------------------------------------------------------------------------


class TestBatchEvaluation:
    """Benchmarks for evaluating many flags."""

    @pytest.mark.benchmark(group="evaluation-batch")
    def test_batch_1000_flags(
        self,
        benchmark,
        storage: MemoryStorageBackend,
        client: FeatureFlagClient,
        many_flags: list[FeatureFlag],
        simple_target: Target,
    ) -> None:
        """Benchmark evaluating 1000 flags for one target."""
        storage.replace(many_flags)

        def evaluate_all() -> int:
            return sum(client.bool_variation(flag.key, simple_target) for flag in many_flags)

        assert benchmark(evaluate_all) == 1000
