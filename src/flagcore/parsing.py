"""Parsers turning serialized variation values into typed values."""

from __future__ import annotations

import json
import math
from collections.abc import Callable
from typing import Any

from flagcore.exceptions import MalformedValueError
from flagcore.types import FlagKind

__all__ = [
    "PARSERS",
    "parse_bool",
    "parse_json",
    "parse_number",
    "parse_string",
    "parse_value",
]


def parse_bool(raw: str) -> bool:
    """Parse ``"true"``/``"false"`` (case-insensitive)."""
    lowered = raw.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise MalformedValueError(f"Expected 'true' or 'false', got {raw!r}")


def parse_string(raw: str) -> str:
    return raw


def parse_number(raw: str) -> float:
    """Parse a finite decimal number."""
    try:
        number = float(raw)
    except (TypeError, ValueError) as e:
        raise MalformedValueError(f"Expected a number, got {raw!r}") from e
    if math.isnan(number) or math.isinf(number):
        raise MalformedValueError(f"Expected a finite number, got {raw!r}")
    return number


def parse_json(raw: str) -> dict[str, Any] | list[Any]:
    """Parse a JSON object or array."""
    try:
        value = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedValueError(f"Expected a JSON document, got {raw!r}") from e
    if not isinstance(value, (dict, list)):
        raise MalformedValueError(f"Expected a JSON object or array, got {type(value).__name__}")
    return value


PARSERS: dict[FlagKind, Callable[[str], Any]] = {
    FlagKind.BOOLEAN: parse_bool,
    FlagKind.STRING: parse_string,
    FlagKind.NUMBER: parse_number,
    FlagKind.JSON: parse_json,
}


def parse_value(kind: FlagKind, raw: str) -> Any:
    """Parse ``raw`` according to ``kind``.

    Raises:
        MalformedValueError: If ``raw`` is not a valid value of ``kind``.

    """
    return PARSERS[kind](raw)
