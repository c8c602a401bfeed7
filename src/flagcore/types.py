"""Type definitions and enums for flagcore."""

from __future__ import annotations

from enum import Enum
from typing import Any

__all__ = [
    "AttributeValue",
    "ClauseOperator",
    "ErrorCode",
    "EvaluationReason",
    "FeatureState",
    "FlagKind",
]


AttributeValue = str | int | float | bool | list[str]
"""Primitive value types allowed in a target's attribute mapping."""


class FlagKind(str, Enum):
    """The declared value kind of a feature flag.

    Variation values are always stored as strings; the kind determines how
    the typed accessors parse them.
    """

    BOOLEAN = "boolean"
    STRING = "string"
    NUMBER = "int"
    JSON = "json"

    @classmethod
    def _missing_(cls, value: Any) -> FlagKind | None:
        if isinstance(value, str) and value.lower() == "number":
            return cls.NUMBER
        return None


class FeatureState(str, Enum):
    """Lifecycle state of a feature flag."""

    ON = "on"
    OFF = "off"


class ClauseOperator(str, Enum):
    """Operators recognized by the clause matcher.

    Clauses carrying any other operator string are kept as-is and never match.
    """

    SEGMENT_MATCH = "segmentMatch"
    IN = "in"
    NOT_IN = "not_in"
    EQUAL = "equal"
    EQUAL_SENSITIVE = "equal_sensitive"
    NOT_EQUAL = "not_equal"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    CONTAINS = "contains"
    MATCH = "match"
    GREATER_THAN = "gt"
    GREATER_THAN_OR_EQUAL = "gte"
    LESS_THAN = "lt"
    LESS_THAN_OR_EQUAL = "lte"


class EvaluationReason(str, Enum):
    """Why a particular variation was served."""

    DISABLED = "DISABLED"
    OVERRIDE = "OVERRIDE"
    TARGETING_MATCH = "TARGETING_MATCH"
    SPLIT = "SPLIT"
    DEFAULT = "DEFAULT"
    ERROR = "ERROR"


class ErrorCode(str, Enum):
    """Error codes attached to failed evaluations."""

    FLAG_NOT_FOUND = "FLAG_NOT_FOUND"
    SEGMENT_NOT_FOUND = "SEGMENT_NOT_FOUND"
    TYPE_MISMATCH = "TYPE_MISMATCH"
    PARSE_ERROR = "PARSE_ERROR"
    MISCONFIGURED_REFERENCE = "MISCONFIGURED_REFERENCE"
    GENERAL_ERROR = "GENERAL_ERROR"
