"""Segment models for reusable audience definitions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from flagcore.models.rule import Clause

__all__ = ["Segment", "SegmentRule"]


@dataclass(frozen=True, slots=True)
class SegmentRule:
    """A segment serving rule. All clauses must hold for the rule to match."""

    rule_id: str
    priority: int
    clauses: tuple[Clause, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "ruleId": self.rule_id,
            "priority": self.priority,
            "clauses": [c.to_dict() for c in self.clauses],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SegmentRule:
        return cls(
            rule_id=data.get("ruleId") or "",
            priority=int(data.get("priority", 0)),
            clauses=tuple(Clause.from_dict(c) for c in data.get("clauses") or ()),
        )


@dataclass(frozen=True, slots=True)
class Segment:
    """A named audience.

    A target is a member when any serving rule matches. Rules are tried in
    ascending priority and evaluation stops at the first match. A segment
    without rules has no members.

    Attributes:
        identifier: Unique segment identifier.
        name: Display name.
        rules: Serving rules.
        version: Version of the definition as reported by the control plane.

    """

    identifier: str
    name: str = ""
    rules: tuple[SegmentRule, ...] = ()
    version: int = 0

    def __repr__(self) -> str:
        return f"<Segment(identifier={self.identifier!r}, rules={len(self.rules)})>"

    def ordered_rules(self) -> list[SegmentRule]:
        """Rules sorted by ascending priority, keeping list order for ties."""
        return sorted(self.rules, key=lambda rule: rule.priority)

    def to_dict(self) -> dict[str, Any]:
        return {
            "identifier": self.identifier,
            "name": self.name,
            "servingRules": [r.to_dict() for r in self.rules],
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Segment:
        return cls(
            identifier=data["identifier"],
            name=data.get("name") or "",
            rules=tuple(SegmentRule.from_dict(r) for r in data.get("servingRules") or ()),
            version=int(data.get("version") or 0),
        )
