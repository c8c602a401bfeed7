"""Target (principal) definition for flag evaluation."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from flagcore.types import AttributeValue

__all__ = ["IDENTIFIER_ATTRIBUTE", "NAME_ATTRIBUTE", "Target"]

IDENTIFIER_ATTRIBUTE = "identifier"
NAME_ATTRIBUTE = "name"


@dataclass(frozen=True, slots=True)
class Target:
    """The entity a flag is evaluated for.

    Targets are immutable. Use :meth:`with_attributes` to derive a new target
    with additional attributes.

    Attributes:
        identifier: Stable key of the target. Also used as the bucketing key
            when a distribution's ``bucket_by`` attribute is missing.
        name: Display name.
        anonymous: Anonymous targets are left out of the metrics target list.
        attributes: Custom attributes used by targeting clauses.

    Example:
        >>> target = Target(identifier="user-1", attributes={"plan": "premium"})
        >>> target.get("plan")
        'premium'
        >>> target.get("identifier")
        'user-1'

    """

    identifier: str
    name: str | None = None
    anonymous: bool = False
    attributes: dict[str, AttributeValue] = field(default_factory=dict)

    @property
    def display_name(self) -> str:
        """The target's name, falling back to its identifier."""
        return self.name or self.identifier

    def get(self, attribute: str) -> Any:
        """Resolve an attribute for clause matching.

        The reserved names ``identifier`` and ``name`` read the corresponding
        fields. Every other name is looked up in :attr:`attributes`.

        Args:
            attribute: The attribute name.

        Returns:
            The attribute value, or ``None`` when the target does not carry it.

        """
        if attribute == IDENTIFIER_ATTRIBUTE:
            return self.identifier
        if attribute == NAME_ATTRIBUTE and self.name is not None:
            return self.name
        return self.attributes.get(attribute)

    def with_attributes(self, **attributes: AttributeValue) -> Target:
        """Create a new target with additional attributes."""
        return replace(self, attributes={**self.attributes, **attributes})

    def to_dict(self) -> dict[str, Any]:
        return {
            "identifier": self.identifier,
            "name": self.name,
            "anonymous": self.anonymous,
            "attributes": dict(self.attributes),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Target:
        return cls(
            identifier=str(data["identifier"]),
            name=data.get("name"),
            anonymous=bool(data.get("anonymous", False)),
            attributes=dict(data.get("attributes") or {}),
        )
