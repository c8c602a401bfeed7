"""Variation model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = ["Variation"]


@dataclass(frozen=True, slots=True)
class Variation:
    """One value a flag can serve.

    Values are stored serialized regardless of the flag's kind and are parsed
    by the typed accessors of :class:`~flagcore.client.FeatureFlagClient`.

    Attributes:
        identifier: Stable identifier referenced by serves and overrides.
        value: The serialized value, e.g. ``"true"``, ``"42"`` or ``'{"a": 1}'``.
        name: Optional display name.
        description: Optional description.

    """

    identifier: str
    value: str
    name: str | None = None
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"identifier": self.identifier, "value": self.value}
        if self.name is not None:
            data["name"] = self.name
        if self.description is not None:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Variation:
        return cls(
            identifier=data["identifier"],
            value=str(data.get("value", "")),
            name=data.get("name"),
            description=data.get("description"),
        )
