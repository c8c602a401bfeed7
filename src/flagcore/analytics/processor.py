"""Periodic submission of aggregated metrics."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

import httpx

from flagcore.analytics.aggregator import MetricsAggregator
from flagcore.analytics.api import MetricsApi
from flagcore.analytics.models import MetricsPayload
from flagcore.config import FeatureFlagsConfig
from flagcore.sdk_codes import (
    info_metrics_success,
    info_metrics_thread_exited,
    info_metrics_thread_started,
    warn_post_metrics_failed,
)

if TYPE_CHECKING:
    from flagcore.models.flag import FeatureFlag
    from flagcore.models.variation import Variation
    from flagcore.target import Target

__all__ = ["MetricsProcessor", "ProcessorState"]

logger = logging.getLogger(__name__)


class ProcessorState(str, Enum):
    """Lifecycle state of a :class:`MetricsProcessor`."""

    IDLE = "idle"
    RUNNING = "running"
    CLOSED = "closed"


class MetricsProcessor:
    """Aggregates evaluations and flushes them to the events service.

    The processor owns a :class:`MetricsAggregator` and a background task that
    flushes it every ``events_sync_interval`` seconds. A failed submission is
    logged and its batch dropped; the next interval starts from an empty
    aggregate.

    Lifecycle: ``IDLE`` -> ``RUNNING`` on :meth:`start`, any state ->
    ``CLOSED`` on :meth:`close`. Closing stops the background task between
    intervals, waits for a submission already in flight, then performs one
    final flush. Once closed, evaluations are accepted and
    discarded and flushes do nothing.

    Args:
        api: Transport used for submissions. Built from ``config`` and closed
            together with the processor when omitted.
        config: Flush interval, target cap and events service settings.
        aggregator: Aggregator to flush. Created from ``config`` when omitted.

    """

    def __init__(
        self,
        api: MetricsApi | None = None,
        config: FeatureFlagsConfig | None = None,
        aggregator: MetricsAggregator | None = None,
    ) -> None:
        self._config = config or FeatureFlagsConfig()
        self._owns_api = api is None
        self._api = api or MetricsApi(
            self._config.events_url,
            api_key=self._config.api_key,
            timeout=self._config.request_timeout,
        )
        self._aggregator = aggregator or MetricsAggregator(max_targets=self._config.max_targets)
        self._state = ProcessorState.IDLE
        self._task: asyncio.Task[None] | None = None
        self._flush_lock = asyncio.Lock()
        self._stop = asyncio.Event()

    @property
    def state(self) -> ProcessorState:
        return self._state

    @property
    def aggregator(self) -> MetricsAggregator:
        return self._aggregator

    @property
    def config(self) -> FeatureFlagsConfig:
        return self._config

    def enqueue(self, target: Target, flag: FeatureFlag, variation: Variation) -> None:
        """Record one evaluation. Never blocks on I/O."""
        if self._state == ProcessorState.CLOSED:
            logger.debug("Metrics processor is closed, discarding evaluation of %s", flag.key)
            return
        self._aggregator.enqueue(target, flag, variation)

    async def start(self) -> None:
        """Start the background flush task. Calling it again does nothing."""
        if self._state != ProcessorState.IDLE:
            logger.debug("Metrics processor already %s, not starting", self._state.value)
            return
        self._task = asyncio.create_task(self._run(), name="flagcore-metrics")
        self._state = ProcessorState.RUNNING
        info_metrics_thread_started(self._config.events_sync_interval, logger)

    async def flush(self) -> bool:
        """Submit everything aggregated so far.

        Returns:
            True if a payload was accepted by the events service.

        """
        if self._state == ProcessorState.CLOSED:
            logger.debug("Metrics processor is closed, skipping flush")
            return False
        return await self._flush()

    async def close(self) -> None:
        """Stop the background task and flush one last time. Idempotent."""
        if self._state == ProcessorState.CLOSED:
            return
        self._state = ProcessorState.CLOSED

        self._stop.set()
        if self._task is not None:
            # a submission already in flight completes and logs its outcome
            await asyncio.gather(self._task, return_exceptions=True)
            self._task = None

        try:
            await self._flush()
        finally:
            if self._owns_api:
                await self._api.aclose()
            info_metrics_thread_exited(logger)

    async def __aenter__(self) -> MetricsProcessor:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _run(self) -> None:
        while not self._stop.is_set():
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self._config.events_sync_interval)
            except TimeoutError:
                pass
            else:
                return
            try:
                await self._flush()
            except Exception:
                logger.exception("Unexpected error while flushing metrics")

    async def _flush(self) -> bool:
        async with self._flush_lock:
            snapshot = self._aggregator.drain()
            if not snapshot:
                logger.debug("No metrics to send in this interval")
                return False

            payload = MetricsPayload.from_snapshot(snapshot)
            logger.debug(
                "Sending metrics for %d evaluations and %d targets",
                snapshot.total_evaluations,
                len(snapshot.targets),
            )
            try:
                status = await self._api.post_metrics(self._config.environment, self._config.cluster, payload)
            except httpx.HTTPError as e:
                warn_post_metrics_failed(f"{type(e).__name__}: {e}", logger)
                return False

            if status >= 400:
                warn_post_metrics_failed(f"status code {status}", logger)
                return False

            info_metrics_success(logger)
            return True
