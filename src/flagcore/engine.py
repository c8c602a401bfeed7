"""Flag evaluation engine.

The engine decides which variation of a flag a target is served. Evaluation
proceeds in a fixed order and stops at the first step that applies:

1. flag state ``off``: serve the off variation
2. variation overrides, in order: explicit targets or segment members
3. targeting rules, in order: first rule whose clauses all hold
4. the default serve

Serves are either a fixed variation or a percentage distribution resolved
through :mod:`flagcore.bucketing`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from flagcore.bucketing import EmptyDistributionError, select_variation
from flagcore.exceptions import FlagNotFoundError, MisconfiguredReferenceError
from flagcore.results import EvaluationResult
from flagcore.segment_evaluator import SegmentEvaluator
from flagcore.types import EvaluationReason, FeatureState

if TYPE_CHECKING:
    from flagcore.models.flag import FeatureFlag
    from flagcore.models.override import VariationOverride
    from flagcore.models.serve import Serve
    from flagcore.storage.protocols import FlagStore
    from flagcore.target import Target

__all__ = ["EvaluationEngine"]

logger = logging.getLogger(__name__)


class EvaluationEngine:
    """Evaluates flags against targets.

    The engine holds no mutable state; a single instance can serve concurrent
    evaluations. Callers pass the store (normally a
    :class:`~flagcore.storage.snapshot.Snapshot`) on every call so that one
    evaluation reads one consistent view of the flag set.
    """

    def __init__(self, segment_evaluator: SegmentEvaluator | None = None) -> None:
        self._segments = segment_evaluator or SegmentEvaluator()
        self._matcher = self._segments.matcher

    @property
    def segment_evaluator(self) -> SegmentEvaluator:
        return self._segments

    def evaluate(self, flag_key: str, target: Target, store: FlagStore) -> EvaluationResult:
        """Evaluate a flag by key.

        Args:
            flag_key: The flag to evaluate.
            target: The target to evaluate for.
            store: Source of flag and segment definitions.

        Returns:
            The served variation and the reason it was served.

        Raises:
            FlagNotFoundError: If the flag does not exist in ``store``.
            MisconfiguredReferenceError: If the flag serves a variation it
                does not declare.

        """
        flag = store.get_flag(flag_key)
        if flag is None:
            raise FlagNotFoundError(flag_key)
        return self.evaluate_flag(flag, target, store)

    def evaluate_flag(self, flag: FeatureFlag, target: Target, store: FlagStore) -> EvaluationResult:
        """Evaluate an already resolved flag definition."""
        if flag.state == FeatureState.OFF:
            return self._result(flag, flag.off_variation, EvaluationReason.DISABLED)

        override = self._match_override(flag, target, store)
        if override is not None:
            return self._result(flag, override.variation, EvaluationReason.OVERRIDE)

        for rule in flag.rules:
            if self._matcher.matches_all(rule.clauses, target, store):
                variation_id, split = self._resolve_serve(flag, rule.serve, target)
                reason = EvaluationReason.SPLIT if split else EvaluationReason.TARGETING_MATCH
                return self._result(flag, variation_id, reason, rule.rule_id)

        variation_id, _ = self._resolve_serve(flag, flag.default_serve, target)
        return self._result(flag, variation_id, EvaluationReason.DEFAULT)

    def _match_override(self, flag: FeatureFlag, target: Target, store: FlagStore) -> VariationOverride | None:
        for override in flag.variation_overrides:
            if target.identifier in override.targets:
                return override
            if any(self._segments.is_member_of(s, target, store) for s in override.target_segments):
                return override
        return None

    def _resolve_serve(self, flag: FeatureFlag, serve: Serve, target: Target) -> tuple[str, bool]:
        """Resolve a serve to a variation identifier.

        Returns the identifier and whether it was picked by a distribution.
        A serve that cannot be resolved falls back to the off variation.
        """
        if serve.distribution is not None:
            try:
                return select_variation(serve.distribution, target, flag.key), True
            except EmptyDistributionError:
                logger.warning("Flag %s has an empty distribution, serving off variation", flag.key)
                return flag.off_variation, False
        if serve.variation is not None:
            return serve.variation, False
        logger.warning("Flag %s has a serve without variation or distribution, serving off variation", flag.key)
        return flag.off_variation, False

    @staticmethod
    def _result(
        flag: FeatureFlag,
        variation_id: str | None,
        reason: EvaluationReason,
        rule_id: str | None = None,
    ) -> EvaluationResult:
        variation = flag.get_variation(variation_id)
        if variation is None:
            raise MisconfiguredReferenceError(flag.key, variation_id)
        return EvaluationResult(flag=flag, variation=variation, reason=reason, rule_id=rule_id)
