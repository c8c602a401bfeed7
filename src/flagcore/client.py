"""Feature flag client with typed accessors."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from flagcore.analytics.processor import MetricsProcessor
from flagcore.engine import EvaluationEngine
from flagcore.exceptions import FlagCoreError, FlagNotFoundError, KindMismatchError
from flagcore.parsing import parse_value
from flagcore.results import EvaluationDetails
from flagcore.sdk_codes import (
    debug_eval_success,
    info_sdk_close_success,
    info_sdk_init_ok,
    info_sdk_start_close,
    warn_default_variation_served,
)
from flagcore.storage.protocols import SnapshotProvider
from flagcore.types import ErrorCode, EvaluationReason, FlagKind

if TYPE_CHECKING:
    from types import TracebackType

    from flagcore.analytics.protocols import MetricsRecorder
    from flagcore.config import FeatureFlagsConfig
    from flagcore.results import EvaluationResult
    from flagcore.storage.protocols import FlagStore
    from flagcore.target import Target

__all__ = ["FeatureFlagClient"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FeatureFlagClient:
    """Main client for evaluating feature flags.

    The client never raises from its evaluation methods. Any failure (missing
    flag, kind mismatch, unparsable value, misconfigured flag, storage error)
    is logged and the caller's default is returned. Every successful
    evaluation is reported exactly once to the metrics recorder.

    Evaluation is synchronous and never performs I/O. Only :meth:`start` and
    :meth:`close`, which manage the metrics processor, are coroutines.

    Args:
        storage: Flag and segment source. Stores that can produce snapshots
            are read through one snapshot per evaluation.
        config: Client configuration. When given with analytics enabled and
            no ``metrics`` recorder, a :class:`MetricsProcessor` is created.
        metrics: Recorder receiving one call per successful evaluation.
        engine: Evaluation engine. A default engine is created when omitted.

    Example:
        >>> from flagcore import FeatureFlagClient, MemoryStorageBackend, Target
        >>> client = FeatureFlagClient(storage=MemoryStorageBackend())
        >>> client.bool_variation("new-checkout", Target("user-1"), default=False)
        False

    """

    def __init__(
        self,
        storage: FlagStore | SnapshotProvider,
        config: FeatureFlagsConfig | None = None,
        metrics: MetricsRecorder | None = None,
        engine: EvaluationEngine | None = None,
    ) -> None:
        self._storage = storage
        self._config = config
        self._engine = engine or EvaluationEngine()
        if metrics is None and config is not None and config.enable_analytics:
            metrics = MetricsProcessor(config=config)
        self._metrics = metrics
        self._closed = False

    @property
    def storage(self) -> FlagStore | SnapshotProvider:
        """Get the storage backend."""
        return self._storage

    @property
    def metrics(self) -> MetricsRecorder | None:
        """Get the metrics recorder, if any."""
        return self._metrics

    @property
    def engine(self) -> EvaluationEngine:
        return self._engine

    @property
    def closed(self) -> bool:
        return self._closed

    # -------------------------------------------------------------------------
    # Typed accessors
    # -------------------------------------------------------------------------

    def bool_variation(self, flag_key: str, target: Target, default: bool = False) -> bool:
        """Evaluate a boolean flag."""
        return self._evaluate(flag_key, target, default, FlagKind.BOOLEAN).value

    def bool_variation_details(self, flag_key: str, target: Target, default: bool = False) -> EvaluationDetails[bool]:
        return self._evaluate(flag_key, target, default, FlagKind.BOOLEAN)

    def string_variation(self, flag_key: str, target: Target, default: str = "") -> str:
        """Evaluate a string flag."""
        return self._evaluate(flag_key, target, default, FlagKind.STRING).value

    def string_variation_details(self, flag_key: str, target: Target, default: str = "") -> EvaluationDetails[str]:
        return self._evaluate(flag_key, target, default, FlagKind.STRING)

    def number_variation(self, flag_key: str, target: Target, default: float = 0.0) -> float:
        """Evaluate a number flag."""
        return self._evaluate(flag_key, target, default, FlagKind.NUMBER).value

    def number_variation_details(
        self, flag_key: str, target: Target, default: float = 0.0
    ) -> EvaluationDetails[float]:
        return self._evaluate(flag_key, target, default, FlagKind.NUMBER)

    def json_variation(self, flag_key: str, target: Target, default: Any = None) -> Any:
        """Evaluate a JSON flag.

        Returns:
            The decoded object or array, or ``default`` (an empty dict when
            ``default`` is ``None``) on failure.

        """
        return self._evaluate(flag_key, target, {} if default is None else default, FlagKind.JSON).value

    def json_variation_details(self, flag_key: str, target: Target, default: Any = None) -> EvaluationDetails[Any]:
        return self._evaluate(flag_key, target, {} if default is None else default, FlagKind.JSON)

    def is_enabled(self, flag_key: str, target: Target) -> bool:
        """Check whether a boolean flag is on for a target, defaulting to ``False``."""
        return self.bool_variation(flag_key, target, default=False)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> None:
        """Start background metrics submission, if configured."""
        if isinstance(self._metrics, MetricsProcessor):
            await self._metrics.start()
        info_sdk_init_ok(logger)

    async def close(self) -> None:
        """Flush pending metrics and stop background work. Idempotent."""
        if self._closed:
            return
        self._closed = True
        info_sdk_start_close(logger)
        if isinstance(self._metrics, MetricsProcessor):
            await self._metrics.close()
        info_sdk_close_success(logger)

    async def __aenter__(self) -> FeatureFlagClient:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    def _evaluate(self, flag_key: str, target: Target, default: T, kind: FlagKind) -> EvaluationDetails[T]:
        try:
            store = self._storage.snapshot() if isinstance(self._storage, SnapshotProvider) else self._storage
            flag = store.get_flag(flag_key)
            if flag is None:
                raise FlagNotFoundError(flag_key)
            if flag.kind != kind:
                raise KindMismatchError(flag_key, kind.value, flag.kind.value)

            result = self._engine.evaluate_flag(flag, target, store)
            value = parse_value(kind, result.variation.value)
        except FlagCoreError as e:
            return self._default(flag_key, target, default, e.error_code, str(e))
        except Exception as e:
            logger.exception("Unexpected error evaluating flag %s", flag_key)
            return self._default(flag_key, target, default, ErrorCode.GENERAL_ERROR, str(e))

        debug_eval_success(value, flag_key, target, logger)
        if self._metrics is not None:
            self._record(target, result)
        return EvaluationDetails(
            flag_key=flag_key,
            value=value,
            reason=result.reason,
            variation=result.variation.identifier,
            rule_id=result.rule_id,
            flag_metadata={"version": flag.version, "kind": flag.kind.value},
        )

    def _record(self, target: Target, result: EvaluationResult) -> None:
        try:
            self._metrics.enqueue(target, result.flag, result.variation)
        except Exception:
            logger.exception("Failed to record evaluation of %s", result.flag.key)

    @staticmethod
    def _default(
        flag_key: str,
        target: Target,
        default: T,
        error_code: ErrorCode,
        message: str,
    ) -> EvaluationDetails[T]:
        warn_default_variation_served(flag_key, target, default, logger)
        reason = EvaluationReason.DEFAULT if error_code == ErrorCode.FLAG_NOT_FOUND else EvaluationReason.ERROR
        return EvaluationDetails(
            flag_key=flag_key,
            value=default,
            reason=reason,
            error_code=error_code,
            error_message=message,
        )
