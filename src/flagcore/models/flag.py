"""FeatureFlag model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from flagcore.models.override import VariationOverride
from flagcore.models.rule import TargetingRule
from flagcore.models.serve import Serve
from flagcore.models.variation import Variation
from flagcore.types import ClauseOperator, FeatureState, FlagKind

__all__ = ["FeatureFlag"]


@dataclass(frozen=True, slots=True)
class FeatureFlag:
    """A feature flag definition.

    Flag definitions are owned by the storage layer and treated as read-only
    snapshots by the evaluation engine.

    Attributes:
        key: Unique flag identifier.
        kind: The declared value kind.
        state: ``on`` evaluates overrides and rules, ``off`` always serves
            ``off_variation``.
        variations: The variations the flag can serve.
        off_variation: Variation identifier served while the flag is off.
        default_serve: Serve applied when no override or rule matches.
        rules: Targeting rules, evaluated in order.
        variation_overrides: Explicit target/segment overrides, evaluated in
            order before the rules.
        version: Version of the definition as reported by the control plane.

    Example:
        >>> flag = FeatureFlag(
        ...     key="dark-mode",
        ...     kind=FlagKind.BOOLEAN,
        ...     state=FeatureState.ON,
        ...     variations=(Variation("on", "true"), Variation("off", "false")),
        ...     off_variation="off",
        ...     default_serve=Serve(variation="on"),
        ... )
        >>> flag.get_variation("on").value
        'true'

    """

    key: str
    kind: FlagKind
    state: FeatureState
    variations: tuple[Variation, ...]
    off_variation: str
    default_serve: Serve
    rules: tuple[TargetingRule, ...] = ()
    variation_overrides: tuple[VariationOverride, ...] = ()
    version: int = 0

    def __repr__(self) -> str:
        return f"<FeatureFlag(key={self.key!r}, kind={self.kind.value}, state={self.state.value})>"

    def get_variation(self, identifier: str | None) -> Variation | None:
        """Look up a declared variation by identifier."""
        if identifier is None:
            return None
        for variation in self.variations:
            if variation.identifier == identifier:
                return variation
        return None

    def referenced_segments(self) -> set[str]:
        """Segment identifiers this flag depends on through overrides or rules."""
        segments: set[str] = set()
        for override in self.variation_overrides:
            segments.update(override.target_segments)
        for rule in self.rules:
            for clause in rule.clauses:
                if clause.op == ClauseOperator.SEGMENT_MATCH:
                    segments.update(clause.values)
        return segments

    def to_dict(self) -> dict[str, Any]:
        return {
            "feature": self.key,
            "kind": self.kind.value,
            "state": self.state.value,
            "variations": [v.to_dict() for v in self.variations],
            "offVariation": self.off_variation,
            "defaultServe": self.default_serve.to_dict(),
            "rules": [r.to_dict() for r in self.rules],
            "variationToTargetMap": [o.to_dict() for o in self.variation_overrides],
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FeatureFlag:
        """Build a flag from the control plane's feature configuration shape."""
        return cls(
            key=data["feature"],
            kind=FlagKind(data.get("kind", FlagKind.BOOLEAN.value)),
            state=FeatureState(data.get("state", FeatureState.OFF.value)),
            variations=tuple(Variation.from_dict(v) for v in data.get("variations") or ()),
            off_variation=data.get("offVariation", ""),
            default_serve=Serve.from_dict(data.get("defaultServe")),
            rules=tuple(TargetingRule.from_dict(r) for r in data.get("rules") or ()),
            variation_overrides=tuple(
                VariationOverride.from_dict(o) for o in data.get("variationToTargetMap") or ()
            ),
            version=int(data.get("version") or 0),
        )
