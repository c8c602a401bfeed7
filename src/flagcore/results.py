"""Evaluation results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from flagcore.types import ErrorCode, EvaluationReason

if TYPE_CHECKING:
    from flagcore.models.flag import FeatureFlag
    from flagcore.models.variation import Variation

__all__ = ["EvaluationDetails", "EvaluationResult"]

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class EvaluationResult:
    """Raw outcome of the rule engine: which variation a target is served.

    Attributes:
        flag: The evaluated flag definition.
        variation: The served variation.
        reason: Which step of the evaluation produced the variation.
        rule_id: Identifier of the matching rule, when a rule matched.

    """

    flag: FeatureFlag
    variation: Variation
    reason: EvaluationReason
    rule_id: str | None = None


@dataclass(frozen=True, slots=True)
class EvaluationDetails(Generic[T]):
    """Typed outcome returned by the client's ``*_details`` accessors.

    Attributes:
        flag_key: The evaluated flag key.
        value: The parsed value, or the caller's default on failure.
        reason: Why the value was returned.
        variation: Identifier of the served variation, ``None`` on failure.
        rule_id: Identifier of the matching rule, when a rule matched.
        error_code: Set when the caller's default was returned.
        error_message: Human readable error description.
        flag_metadata: Extra information about the flag.

    """

    flag_key: str
    value: T
    reason: EvaluationReason = EvaluationReason.DEFAULT
    variation: str | None = None
    rule_id: str | None = None
    error_code: ErrorCode | None = None
    error_message: str | None = None
    flag_metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        """Whether evaluation failed and the caller's default was returned."""
        return self.error_code is not None

    @property
    def is_default(self) -> bool:
        """Whether the value came from the flag's default serve or the caller."""
        return self.reason in (EvaluationReason.DEFAULT, EvaluationReason.ERROR)

    def to_dict(self) -> dict[str, Any]:
        return {
            "flag_key": self.flag_key,
            "value": self.value,
            "reason": self.reason.value,
            "variation": self.variation,
            "rule_id": self.rule_id,
            "error_code": self.error_code.value if self.error_code else None,
            "error_message": self.error_message,
            "flag_metadata": self.flag_metadata,
        }
