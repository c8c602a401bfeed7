"""flagcore: server-side feature flag evaluation and evaluation metrics."""

from __future__ import annotations

from flagcore._version import __version__
from flagcore.analytics import MetricsAggregator, MetricsApi, MetricsProcessor, MetricsRecorder
from flagcore.client import FeatureFlagClient
from flagcore.config import FeatureFlagsConfig
from flagcore.engine import EvaluationEngine
from flagcore.exceptions import (
    CircularSegmentReferenceError,
    ConfigurationError,
    FlagCoreError,
    FlagNotFoundError,
    KindMismatchError,
    MalformedValueError,
    MisconfiguredReferenceError,
    SegmentNotFoundError,
)
from flagcore.models import (
    Clause,
    Distribution,
    FeatureFlag,
    Segment,
    SegmentRule,
    Serve,
    TargetingRule,
    Variation,
    VariationOverride,
    WeightedVariation,
)
from flagcore.results import EvaluationDetails, EvaluationResult
from flagcore.segment_evaluator import SegmentEvaluator
from flagcore.storage import FlagStore, MemoryStorageBackend, Snapshot, SnapshotProvider
from flagcore.target import Target
from flagcore.types import ClauseOperator, ErrorCode, EvaluationReason, FeatureState, FlagKind

__all__ = [
    "CircularSegmentReferenceError",
    "Clause",
    "ClauseOperator",
    "ConfigurationError",
    "Distribution",
    "ErrorCode",
    "EvaluationDetails",
    "EvaluationEngine",
    "EvaluationReason",
    "EvaluationResult",
    "FeatureFlag",
    "FeatureFlagClient",
    "FeatureFlagsConfig",
    "FeatureState",
    "FlagCoreError",
    "FlagKind",
    "FlagNotFoundError",
    "FlagStore",
    "KindMismatchError",
    "MalformedValueError",
    "MemoryStorageBackend",
    "MetricsAggregator",
    "MetricsApi",
    "MetricsProcessor",
    "MetricsRecorder",
    "MisconfiguredReferenceError",
    "Segment",
    "SegmentEvaluator",
    "SegmentNotFoundError",
    "SegmentRule",
    "Serve",
    "Snapshot",
    "SnapshotProvider",
    "Target",
    "TargetingRule",
    "Variation",
    "VariationOverride",
    "WeightedVariation",
    "__version__",
]
