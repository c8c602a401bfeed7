"""Basic Feature Flag Usage Example.

This example demonstrates the fundamental usage of flagcore:
- Loading flag and segment definitions in the control plane's JSON shape
- Evaluating typed variations for different targets
- Inspecting evaluation details (variation, reason, errors)
- Aggregating evaluation metrics locally

To run this example:
    python examples/basic_usage.py
"""

from __future__ import annotations

import asyncio
import logging

from flagcore import (
    FeatureFlag,
    FeatureFlagClient,
    FeatureFlagsConfig,
    MemoryStorageBackend,
    MetricsAggregator,
    Segment,
    Target,
)

FLAGS = [
    {
        "feature": "dark_mode",
        "kind": "boolean",
        "state": "on",
        "variations": [{"identifier": "on", "value": "true"}, {"identifier": "off", "value": "false"}],
        "offVariation": "off",
        "defaultServe": {"variation": "on"},
    },
    {
        "feature": "beta_feature",
        "kind": "boolean",
        "state": "on",
        "variations": [{"identifier": "on", "value": "true"}, {"identifier": "off", "value": "false"}],
        "offVariation": "off",
        "defaultServe": {"variation": "off"},
        "rules": [
            {
                "ruleId": "beta-testers",
                "clauses": [{"attribute": "", "op": "segmentMatch", "values": ["beta-testers"]}],
                "serve": {"variation": "on"},
            }
        ],
        "variationToTargetMap": [{"variation": "on", "targets": [{"identifier": "admin"}]}],
    },
    {
        "feature": "welcome_message",
        "kind": "string",
        "state": "on",
        "variations": [
            {"identifier": "default", "value": "Welcome to our application!"},
            {"identifier": "premium", "value": "Welcome back, valued customer!"},
        ],
        "offVariation": "default",
        "defaultServe": {"variation": "default"},
        "rules": [
            {
                "ruleId": "premium-plan",
                "clauses": [{"attribute": "plan", "op": "equal", "values": ["premium"]}],
                "serve": {"variation": "premium"},
            }
        ],
    },
    {
        "feature": "max_upload_mb",
        "kind": "int",
        "state": "off",
        "variations": [{"identifier": "small", "value": "10"}, {"identifier": "large", "value": "100"}],
        "offVariation": "small",
        "defaultServe": {"variation": "large"},
    },
]

SEGMENTS = [
    {
        "identifier": "beta-testers",
        "servingRules": [
            {"ruleId": "internal", "priority": 0, "clauses": [{"attribute": "email", "op": "ends_with", "values": ["@example.com"]}]}
        ],
    }
]


async def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    storage = MemoryStorageBackend(
        flags=[FeatureFlag.from_dict(f) for f in FLAGS],
        segments=[Segment.from_dict(s) for s in SEGMENTS],
    )
    aggregator = MetricsAggregator()

    # analytics are aggregated locally here instead of being sent to the events service
    async with FeatureFlagClient(
        storage, config=FeatureFlagsConfig(enable_analytics=False), metrics=aggregator
    ) as client:
        targets = [
            Target("admin", name="Admin"),
            Target("alice", attributes={"plan": "premium", "email": "alice@example.com"}),
            Target("bob", attributes={"plan": "free"}),
        ]
        for target in targets:
            print(f"--- {target.display_name}")
            print("dark_mode:      ", client.bool_variation("dark_mode", target))
            print("beta_feature:   ", client.bool_variation_details("beta_feature", target, False).to_dict())
            print("welcome_message:", client.string_variation("welcome_message", target, "Hello"))
            print("max_upload_mb:  ", client.number_variation("max_upload_mb", target, 5))

        # Unknown flags and kind mismatches serve the caller's default
        print("missing flag:   ", client.bool_variation_details("does_not_exist", targets[0], True).to_dict())
        print("wrong kind:     ", client.string_variation_details("dark_mode", targets[0], "n/a").to_dict())

    snapshot = aggregator.drain()
    print(f"--- recorded {snapshot.total_evaluations} evaluations from {len(snapshot.targets)} targets")
    for key, count in sorted(snapshot.counts.items()):
        print(f"{key.flag_key}={key.variation_identifier}: {count}")


if __name__ == "__main__":
    asyncio.run(main())
