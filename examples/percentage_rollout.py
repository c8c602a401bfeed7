"""Percentage Rollout Example.

This example demonstrates gradual feature rollouts using flagcore:
- Serving a weighted distribution of variations
- Bucketing on a custom attribute so whole organisations move together
- Combining a targeting rule with a rollout
- Checking that bucket assignment is stable across evaluations

Percentage rollouts are useful for:
- Reducing risk when launching new features
- Gradual migration from old to new systems
- Canary deployments and monitoring

To run this example:
    python examples/percentage_rollout.py
"""

from __future__ import annotations

from collections import Counter

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
    WeightedVariation,
)
from flagcore.bucketing import get_bucket

BOOLEAN = (Variation("on", "true"), Variation("off", "false"))


def rollout(percentage: int, bucket_by: str = "identifier") -> Serve:
    return Serve(
        distribution=Distribution(
            bucket_by,
            (WeightedVariation("on", percentage), WeightedVariation("off", 100 - percentage)),
        )
    )


def build_storage() -> MemoryStorageBackend:
    # Example 1: 25% of targets get the new checkout
    new_checkout = FeatureFlag(
        key="new_checkout",
        kind=FlagKind.BOOLEAN,
        state=FeatureState.ON,
        variations=BOOLEAN,
        off_variation="off",
        default_serve=rollout(25),
    )

    # Example 2: rollout by organisation, so colleagues share an experience
    org_dashboard = FeatureFlag(
        key="org_dashboard",
        kind=FlagKind.BOOLEAN,
        state=FeatureState.ON,
        variations=BOOLEAN,
        off_variation="off",
        default_serve=rollout(50, bucket_by="org"),
    )

    # Example 3: everyone in the US, 10% elsewhere
    search_v2 = FeatureFlag(
        key="search_v2",
        kind=FlagKind.BOOLEAN,
        state=FeatureState.ON,
        variations=BOOLEAN,
        off_variation="off",
        default_serve=rollout(10),
        rules=(TargetingRule("us", (Clause("country", ClauseOperator.EQUAL, ("US",)),), Serve(variation="on")),),
    )

    return MemoryStorageBackend(flags=[new_checkout, org_dashboard, search_v2])


def main() -> None:
    client = FeatureFlagClient(build_storage())
    targets = [
        Target(f"user-{i}", attributes={"org": f"org-{i % 20}", "country": "US" if i % 4 == 0 else "DE"})
        for i in range(2000)
    ]

    for flag_key in ("new_checkout", "org_dashboard", "search_v2"):
        served = Counter(client.bool_variation(flag_key, target) for target in targets)
        print(f"{flag_key:15} enabled for {served[True] / len(targets):.1%} of {len(targets)} targets")

    # Targets in the same organisation always land in the same bucket
    by_org: dict[str, set[bool]] = {}
    for target in targets:
        by_org.setdefault(target.get("org"), set()).add(client.bool_variation("org_dashboard", target))
    print("org_dashboard consistent per org:", all(len(values) == 1 for values in by_org.values()))

    # Buckets are stable: re-evaluating gives the same answer
    first = [client.bool_variation("new_checkout", target) for target in targets]
    second = [client.bool_variation("new_checkout", target) for target in targets]
    print("new_checkout stable:", first == second)

    details = client.bool_variation_details("new_checkout", targets[1])
    print(f"user-1 bucket={get_bucket('identifier', 'user-1')} -> {details.variation} ({details.reason.value})")


if __name__ == "__main__":
    main()
