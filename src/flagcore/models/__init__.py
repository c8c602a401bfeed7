"""Flag and segment definitions."""

from __future__ import annotations

from flagcore.models.flag import FeatureFlag
from flagcore.models.override import VariationOverride
from flagcore.models.rule import Clause, TargetingRule
from flagcore.models.segment import Segment, SegmentRule
from flagcore.models.serve import Distribution, Serve, WeightedVariation
from flagcore.models.variation import Variation

__all__ = [
    "Clause",
    "Distribution",
    "FeatureFlag",
    "Segment",
    "SegmentRule",
    "Serve",
    "TargetingRule",
    "Variation",
    "VariationOverride",
    "WeightedVariation",
]
