"""Benchmark fixtures for flagcore performance testing.

This module provides fixtures for benchmarking flag evaluation,
storage operations and metrics aggregation at various scales.
"""

from __future__ import annotations

import pytest

from flagcore import (
    Clause,
    ClauseOperator,
    Distribution,
    EvaluationEngine,
    FeatureFlag,
    FeatureFlagClient,
    FeatureState,
    FlagKind,
    MemoryStorageBackend,
    Segment,
    SegmentRule,
    Serve,
    Target,
    TargetingRule,
    Variation,
    WeightedVariation,
)

BOOLEAN_VARIATIONS = (Variation("true", "true"), Variation("false", "false"))


def boolean_flag(key: str, rules: tuple[TargetingRule, ...] = (), default: Serve | None = None) -> FeatureFlag:
    return FeatureFlag(
        key=key,
        kind=FlagKind.BOOLEAN,
        state=FeatureState.ON,
        variations=BOOLEAN_VARIATIONS,
        off_variation="false",
        default_serve=default or Serve(variation="true"),
        rules=rules,
    )


# -----------------------------------------------------------------------------
# Storage and Client Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def storage() -> MemoryStorageBackend:
    """Create a memory storage backend for benchmarking."""
    return MemoryStorageBackend()


@pytest.fixture
def engine() -> EvaluationEngine:
    """Create an evaluation engine for benchmarking."""
    return EvaluationEngine()


@pytest.fixture
def client(storage: MemoryStorageBackend) -> FeatureFlagClient:
    """Create a feature flag client without metrics for benchmarking."""
    return FeatureFlagClient(storage=storage)


# -----------------------------------------------------------------------------
# Flag Complexity Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def simple_boolean_flag() -> FeatureFlag:
    """Create a boolean flag with no rules.

    This represents the minimum complexity flag for baseline benchmarks.
    """
    return boolean_flag("simple-flag")


@pytest.fixture
def flag_with_multiple_rules() -> FeatureFlag:
    """Create a flag with five rules, none of which match ``simple_target``.

    Evaluating it walks every rule before reaching the default serve.
    """
    return boolean_flag(
        "multi-rule-flag",
        rules=(
            TargetingRule("enterprise", (Clause("plan", ClauseOperator.EQUAL, ("enterprise",)),), Serve("true")),
            TargetingRule(
                "premium-na",
                (
                    Clause("plan", ClauseOperator.EQUAL, ("premium",)),
                    Clause("country", ClauseOperator.IN, ("US", "CA")),
                ),
                Serve("true"),
            ),
            TargetingRule("beta", (Clause("beta_tester", ClauseOperator.EQUAL, ("true",)),), Serve("true")),
            TargetingRule("internal", (Clause("email", ClauseOperator.ENDS_WITH, ("@company.com",)),), Serve("true")),
            TargetingRule("adults", (Clause("age", ClauseOperator.GREATER_THAN, ("99",)),), Serve("true")),
        ),
        default=Serve(variation="false"),
    )


@pytest.fixture
def rollout_flag() -> FeatureFlag:
    """Create a flag serving a 50/50 percentage rollout."""
    return boolean_flag(
        "rollout-flag",
        default=Serve(
            distribution=Distribution(
                "identifier", (WeightedVariation("true", 50), WeightedVariation("false", 50))
            )
        ),
    )


@pytest.fixture
def segment_flag(storage: MemoryStorageBackend) -> FeatureFlag:
    """Create a flag gated on a segment of premium targets, stored with its segment."""
    storage.set_segment(
        Segment("premium", rules=(SegmentRule("r1", 0, (Clause("plan", ClauseOperator.EQUAL, ("premium",)),)),))
    )
    flag = boolean_flag(
        "segment-flag",
        rules=(TargetingRule("members", (Clause("", ClauseOperator.SEGMENT_MATCH, ("premium",)),), Serve("true")),),
        default=Serve(variation="false"),
    )
    storage.set_flag(flag)
    return flag


@pytest.fixture
def many_flags() -> list[FeatureFlag]:
    """Create 1000 simple flags."""
    return [boolean_flag(f"flag-{i}") for i in range(1000)]


# -----------------------------------------------------------------------------
# Target Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def simple_target() -> Target:
    """Create a target with a handful of attributes."""
    return Target(
        "user-123",
        name="Benchmark User",
        attributes={"plan": "premium", "country": "DE", "email": "user@example.com", "age": 30},
    )


@pytest.fixture
def many_targets() -> list[Target]:
    """Create 1000 distinct targets."""
    return [Target(f"user-{i}", attributes={"plan": "free"}) for i in range(1000)]
