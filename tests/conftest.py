"""Test fixtures for flagcore."""

from __future__ import annotations

import pytest

from flagcore import (
    Clause,
    ClauseOperator,
    Distribution,
    FeatureFlag,
    FeatureFlagClient,
    FeatureState,
    FlagKind,
    MemoryStorageBackend,
    Serve,
    Target,
    TargetingRule,
    Variation,
    VariationOverride,
    WeightedVariation,
)


# -----------------------------------------------------------------------------
# pytest-asyncio Configuration
# -----------------------------------------------------------------------------
pytest_plugins = ["pytest_asyncio"]


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
BOOLEAN_VARIATIONS = (
    Variation("true", "true", name="True"),
    Variation("false", "false", name="False"),
)


class RecordingMetrics:
    """Metrics recorder that keeps every call for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[Target, FeatureFlag, Variation]] = []

    def enqueue(self, target: Target, flag: FeatureFlag, variation: Variation) -> None:
        self.calls.append((target, flag, variation))


def make_boolean_flag(
    key: str,
    *,
    state: FeatureState = FeatureState.ON,
    default: str = "true",
    rules: tuple[TargetingRule, ...] = (),
    overrides: tuple[VariationOverride, ...] = (),
) -> FeatureFlag:
    """Build a boolean flag with ``true``/``false`` variations."""
    return FeatureFlag(
        key=key,
        kind=FlagKind.BOOLEAN,
        state=state,
        variations=BOOLEAN_VARIATIONS,
        off_variation="false",
        default_serve=Serve(variation=default),
        rules=rules,
        variation_overrides=overrides,
        version=1,
    )


# -----------------------------------------------------------------------------
# Storage and Client Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def storage() -> MemoryStorageBackend:
    """Create a memory storage backend."""
    return MemoryStorageBackend()


@pytest.fixture
def metrics() -> RecordingMetrics:
    """Create a recording metrics collaborator."""
    return RecordingMetrics()


@pytest.fixture
def client(storage: MemoryStorageBackend, metrics: RecordingMetrics) -> FeatureFlagClient:
    """Create a feature flag client recording its metrics."""
    return FeatureFlagClient(storage=storage, metrics=metrics)


# -----------------------------------------------------------------------------
# Flag Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def enabled_flag() -> FeatureFlag:
    """Create a boolean flag serving ``true`` by default."""
    return make_boolean_flag("enabled-flag")


@pytest.fixture
def disabled_flag() -> FeatureFlag:
    """Create a boolean flag that is switched off."""
    return make_boolean_flag("disabled-flag", state=FeatureState.OFF)


@pytest.fixture
def flag_with_rules() -> FeatureFlag:
    """Create a boolean flag serving ``true`` to premium or North American targets."""
    return make_boolean_flag(
        "rules-flag",
        default="false",
        rules=(
            TargetingRule(
                rule_id="premium-users",
                clauses=(Clause("plan", ClauseOperator.EQUAL, ("premium",)),),
                serve=Serve(variation="true"),
            ),
            TargetingRule(
                rule_id="north-america",
                clauses=(Clause("country", ClauseOperator.IN, ("US", "CA")),),
                serve=Serve(variation="true"),
            ),
        ),
    )


@pytest.fixture
def flag_with_override() -> FeatureFlag:
    """Create a boolean flag overridden to ``true`` for user-123."""
    return make_boolean_flag(
        "override-flag",
        default="false",
        overrides=(VariationOverride("true", targets=("user-123",)),),
    )


@pytest.fixture
def string_flag() -> FeatureFlag:
    """Create a string flag splitting targets across three variations."""
    return FeatureFlag(
        key="flag",
        kind=FlagKind.STRING,
        state=FeatureState.ON,
        variations=(
            Variation("variation1", "default_on"),
            Variation("variation2", "wanted_value"),
            Variation("variation3", "default_off"),
        ),
        off_variation="variation3",
        default_serve=Serve(variation="variation1"),
        rules=(
            TargetingRule(
                rule_id="rule1",
                clauses=(Clause("identifier", ClauseOperator.EQUAL, ("test",)),),
                serve=Serve(
                    distribution=Distribution(
                        bucket_by="i_do_not_exist",
                        variations=(
                            WeightedVariation("variation1", 56),
                            WeightedVariation("variation2", 1),
                            WeightedVariation("variation3", 43),
                        ),
                    )
                ),
            ),
        ),
    )


@pytest.fixture
def number_flag() -> FeatureFlag:
    """Create a number flag."""
    return FeatureFlag(
        key="max-items",
        kind=FlagKind.NUMBER,
        state=FeatureState.ON,
        variations=(Variation("small", "10"), Variation("large", "99.5")),
        off_variation="small",
        default_serve=Serve(variation="large"),
    )


@pytest.fixture
def json_flag() -> FeatureFlag:
    """Create a JSON flag."""
    return FeatureFlag(
        key="checkout-config",
        kind=FlagKind.JSON,
        state=FeatureState.ON,
        variations=(
            Variation("v1", '{"steps": 3, "express": false}'),
            Variation("v2", '{"steps": 1, "express": true}'),
        ),
        off_variation="v1",
        default_serve=Serve(variation="v2"),
    )


# -----------------------------------------------------------------------------
# Target Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def target() -> Target:
    """Create a basic target."""
    return Target(identifier="user-123", name="Test User", attributes={"plan": "free", "country": "DE"})


@pytest.fixture
def premium_target() -> Target:
    """Create a target on the premium plan."""
    return Target(identifier="premium-user", attributes={"plan": "premium"})


@pytest.fixture
def anonymous_target() -> Target:
    """Create an anonymous target."""
    return Target(identifier="anon-1", anonymous=True)


@pytest.fixture
def make_flag():
    """Return the boolean flag builder."""
    return make_boolean_flag
