"""Clause and targeting rule models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from flagcore.models.serve import Serve
from flagcore.types import ClauseOperator

__all__ = ["Clause", "TargetingRule", "parse_operator"]


def parse_operator(op: str) -> ClauseOperator | str:
    """Convert an operator string to :class:`ClauseOperator`.

    Unrecognized operators are returned unchanged so that the clause can
    still be loaded; the matcher treats them as never matching.
    """
    try:
        return ClauseOperator(op)
    except ValueError:
        return op


@dataclass(frozen=True, slots=True)
class Clause:
    """A single targeting predicate.

    The clause holds when the target's attribute satisfies ``op`` against any
    of ``values``; ``negate`` inverts the outcome for targets that carry the
    attribute.

    Attributes:
        attribute: Target attribute name (``identifier`` reads the target key).
        op: The comparison operator.
        values: Comparison values. For ``segmentMatch`` these are segment ids.
        negate: Invert the result.
        id: Optional clause identifier.

    """

    attribute: str
    op: ClauseOperator | str
    values: tuple[str, ...] = ()
    negate: bool = False
    id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        op = self.op.value if isinstance(self.op, ClauseOperator) else self.op
        data: dict[str, Any] = {
            "attribute": self.attribute,
            "op": op,
            "values": list(self.values),
            "negate": self.negate,
        }
        if self.id is not None:
            data["id"] = self.id
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Clause:
        return cls(
            attribute=data.get("attribute", ""),
            op=parse_operator(data["op"]),
            values=tuple(str(v) for v in data.get("values") or ()),
            negate=bool(data.get("negate", False)),
            id=data.get("id"),
        )


@dataclass(frozen=True, slots=True)
class TargetingRule:
    """A flag rule: when all clauses hold, ``serve`` is applied.

    Rules are evaluated in the order they appear on the flag; the first
    matching rule wins.
    """

    rule_id: str
    clauses: tuple[Clause, ...]
    serve: Serve
    priority: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "ruleId": self.rule_id,
            "priority": self.priority,
            "clauses": [c.to_dict() for c in self.clauses],
            "serve": self.serve.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TargetingRule:
        return cls(
            rule_id=data.get("ruleId") or "",
            clauses=tuple(Clause.from_dict(c) for c in data.get("clauses") or ()),
            serve=Serve.from_dict(data.get("serve")),
            priority=int(data.get("priority", 0)),
        )
