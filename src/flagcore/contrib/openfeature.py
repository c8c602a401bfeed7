"""OpenFeature provider backed by :class:`~flagcore.client.FeatureFlagClient`.

Requires the ``openfeature`` extra::

    pip install flagcore[openfeature]

Example:
    >>> from openfeature import api
    >>> from flagcore import FeatureFlagClient, MemoryStorageBackend
    >>> from flagcore.contrib.openfeature import FlagCoreProvider
    >>> api.set_provider(FlagCoreProvider(FeatureFlagClient(MemoryStorageBackend())))

"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from openfeature.exception import ErrorCode as OFErrorCode
from openfeature.flag_evaluation import FlagResolutionDetails, Reason
from openfeature.provider import AbstractProvider, Metadata

from flagcore.target import NAME_ATTRIBUTE, Target
from flagcore.types import ErrorCode, EvaluationReason

if TYPE_CHECKING:
    from openfeature.evaluation_context import EvaluationContext as OFEvaluationContext
    from openfeature.hook import Hook

    from flagcore.client import FeatureFlagClient
    from flagcore.results import EvaluationDetails

__all__ = [
    "PROVIDER_NAME",
    "FlagCoreProvider",
    "adapt_evaluation_context",
    "map_error_code",
    "map_reason",
]

logger = logging.getLogger(__name__)

PROVIDER_NAME = "flagcore"

ANONYMOUS_ATTRIBUTE = "anonymous"

_ERROR_CODES: dict[ErrorCode, OFErrorCode] = {
    ErrorCode.FLAG_NOT_FOUND: OFErrorCode.FLAG_NOT_FOUND,
    ErrorCode.TYPE_MISMATCH: OFErrorCode.TYPE_MISMATCH,
    ErrorCode.PARSE_ERROR: OFErrorCode.PARSE_ERROR,
    ErrorCode.SEGMENT_NOT_FOUND: OFErrorCode.GENERAL,
    ErrorCode.MISCONFIGURED_REFERENCE: OFErrorCode.GENERAL,
    ErrorCode.GENERAL_ERROR: OFErrorCode.GENERAL,
}

_REASONS: dict[EvaluationReason, Reason] = {
    EvaluationReason.DISABLED: Reason.DISABLED,
    EvaluationReason.OVERRIDE: Reason.TARGETING_MATCH,
    EvaluationReason.TARGETING_MATCH: Reason.TARGETING_MATCH,
    EvaluationReason.SPLIT: Reason.SPLIT,
    EvaluationReason.DEFAULT: Reason.DEFAULT,
    EvaluationReason.ERROR: Reason.ERROR,
}


def map_error_code(code: ErrorCode | None) -> OFErrorCode | None:
    """Map a flagcore error code onto its OpenFeature counterpart."""
    if code is None:
        return None
    return _ERROR_CODES.get(code, OFErrorCode.GENERAL)


def map_reason(reason: EvaluationReason) -> Reason:
    """Map a flagcore evaluation reason onto its OpenFeature counterpart."""
    return _REASONS.get(reason, Reason.UNKNOWN)


def adapt_evaluation_context(context: OFEvaluationContext | None) -> Target | None:
    """Build a target from an OpenFeature evaluation context.

    The targeting key becomes the target identifier. The ``name`` and
    ``anonymous`` attributes populate the corresponding target fields and
    every other attribute is passed through.

    Returns:
        The target, or ``None`` when the context carries no targeting key.

    """
    if context is None or not context.targeting_key:
        return None
    attributes = dict(context.attributes or {})
    name = attributes.pop(NAME_ATTRIBUTE, None)
    anonymous = attributes.pop(ANONYMOUS_ATTRIBUTE, False)
    return Target(
        identifier=context.targeting_key,
        name=str(name) if name is not None else None,
        anonymous=bool(anonymous),
        attributes=attributes,
    )


class FlagCoreProvider(AbstractProvider):
    """OpenFeature provider evaluating flags through a :class:`FeatureFlagClient`.

    Args:
        client: The client used for evaluation.
        hooks: Provider hooks returned by :meth:`get_provider_hooks`.

    """

    def __init__(self, client: FeatureFlagClient, hooks: Sequence[Hook] | None = None) -> None:
        super().__init__()
        self._client = client
        self._hooks = list(hooks or [])
        self._shutdown_task: asyncio.Task[None] | None = None

    @property
    def client(self) -> FeatureFlagClient:
        return self._client

    def get_metadata(self) -> Metadata:
        return Metadata(name=PROVIDER_NAME)

    def get_provider_hooks(self) -> list[Hook]:
        return list(self._hooks)

    def shutdown(self) -> None:
        """Close the underlying client."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self._client.close())
            return
        self._shutdown_task = loop.create_task(self._client.close())

    def resolve_boolean_details(
        self,
        flag_key: str,
        default_value: bool,
        evaluation_context: OFEvaluationContext | None = None,
    ) -> FlagResolutionDetails[bool]:
        return self._resolve(flag_key, default_value, evaluation_context, self._client.bool_variation_details)

    def resolve_string_details(
        self,
        flag_key: str,
        default_value: str,
        evaluation_context: OFEvaluationContext | None = None,
    ) -> FlagResolutionDetails[str]:
        return self._resolve(flag_key, default_value, evaluation_context, self._client.string_variation_details)

    def resolve_integer_details(
        self,
        flag_key: str,
        default_value: int,
        evaluation_context: OFEvaluationContext | None = None,
    ) -> FlagResolutionDetails[int]:
        details = self._resolve(flag_key, default_value, evaluation_context, self._client.number_variation_details)
        if details.error_code is not None:
            return details
        value = details.value
        if isinstance(value, float) and not value.is_integer():
            return FlagResolutionDetails(
                value=default_value,
                reason=Reason.ERROR,
                error_code=OFErrorCode.TYPE_MISMATCH,
                error_message=f"Flag '{flag_key}' served non-integer value {value}",
            )
        details.value = int(value)
        return details

    def resolve_float_details(
        self,
        flag_key: str,
        default_value: float,
        evaluation_context: OFEvaluationContext | None = None,
    ) -> FlagResolutionDetails[float]:
        return self._resolve(flag_key, default_value, evaluation_context, self._client.number_variation_details)

    def resolve_object_details(
        self,
        flag_key: str,
        default_value: dict | list,
        evaluation_context: OFEvaluationContext | None = None,
    ) -> FlagResolutionDetails[dict | list]:
        return self._resolve(flag_key, default_value, evaluation_context, self._client.json_variation_details)

    def _resolve(
        self,
        flag_key: str,
        default_value: Any,
        evaluation_context: OFEvaluationContext | None,
        evaluate: Callable[[str, Target, Any], EvaluationDetails[Any]],
    ) -> FlagResolutionDetails[Any]:
        target = adapt_evaluation_context(evaluation_context)
        if target is None:
            return FlagResolutionDetails(
                value=default_value,
                reason=Reason.ERROR,
                error_code=OFErrorCode.TARGETING_KEY_MISSING,
                error_message="Evaluation context has no targeting key",
            )
        try:
            details = evaluate(flag_key, target, default_value)
        except Exception as e:
            logger.exception("Provider failed to evaluate flag %s", flag_key)
            return FlagResolutionDetails(
                value=default_value,
                reason=Reason.ERROR,
                error_code=OFErrorCode.GENERAL,
                error_message=str(e),
            )
        return FlagResolutionDetails(
            value=details.value,
            variant=details.variation,
            reason=map_reason(details.reason),
            error_code=map_error_code(details.error_code),
            error_message=details.error_message,
            flag_metadata=dict(details.flag_metadata),
        )
