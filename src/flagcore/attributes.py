"""Conversion of target attribute values to their canonical text form."""

from __future__ import annotations

import json
from typing import Any

__all__ = ["to_text"]


def to_text(value: Any) -> str:
    """Render an attribute value the way every SDK in the family does.

    Booleans become ``true``/``false``, lists are joined with commas, mappings
    are JSON encoded and ``None`` becomes an empty string. This keeps clause
    matching, bucketing keys and metrics payloads consistent across
    implementations.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(to_text(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, separators=(",", ":"))
    return str(value)
