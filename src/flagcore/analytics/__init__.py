"""Evaluation metrics: aggregation and submission to the events service."""

from __future__ import annotations

from flagcore.analytics.aggregator import MetricsAggregator
from flagcore.analytics.api import MetricsApi
from flagcore.analytics.models import (
    AggregateSnapshot,
    KeyValue,
    MetricsData,
    MetricsKey,
    MetricsPayload,
    TargetData,
)
from flagcore.analytics.processor import MetricsProcessor, ProcessorState
from flagcore.analytics.protocols import MetricsRecorder

__all__ = [
    "AggregateSnapshot",
    "KeyValue",
    "MetricsAggregator",
    "MetricsApi",
    "MetricsData",
    "MetricsKey",
    "MetricsPayload",
    "MetricsProcessor",
    "MetricsRecorder",
    "ProcessorState",
    "TargetData",
]
