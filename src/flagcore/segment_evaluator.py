"""Segment membership evaluation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from flagcore.clauses import ClauseMatcher
from flagcore.exceptions import CircularSegmentReferenceError, SegmentNotFoundError

if TYPE_CHECKING:
    from flagcore.models.segment import Segment
    from flagcore.storage.protocols import FlagStore
    from flagcore.target import Target

__all__ = ["SegmentEvaluator"]

logger = logging.getLogger(__name__)


class SegmentEvaluator:
    """Decides whether a target belongs to a segment.

    A target is a member when any of the segment's serving rules has all of
    its clauses hold. Rules are tried in ascending priority and evaluation
    stops at the first match, so priority orders evaluation but does not make
    rules exclusive.

    Segment rules may themselves contain ``segmentMatch`` clauses. Cycles
    between segments are detected and resolve to a non-match.
    """

    def __init__(self) -> None:
        self._matcher = ClauseMatcher(self)

    @property
    def matcher(self) -> ClauseMatcher:
        """The clause matcher bound to this evaluator."""
        return self._matcher

    def is_member(
        self,
        segment: Segment,
        target: Target,
        store: FlagStore,
        path: tuple[str, ...] = (),
    ) -> bool:
        """Check whether a target is a member of a segment.

        Args:
            segment: The segment definition.
            target: The target being evaluated.
            store: Source of nested segment definitions.
            path: Segment identifiers already being resolved.

        Returns:
            True on the first serving rule whose clauses all hold.

        Raises:
            CircularSegmentReferenceError: If nested ``segmentMatch`` clauses
                lead back to a segment on ``path``.

        """
        if segment.identifier in path:
            raise CircularSegmentReferenceError([*path, segment.identifier])

        nested_path = (*path, segment.identifier)
        for rule in segment.ordered_rules():
            if self._matcher.matches_all(rule.clauses, target, store, nested_path):
                logger.debug(
                    "Target %s matched rule %s of segment %s",
                    target.identifier,
                    rule.rule_id,
                    segment.identifier,
                )
                return True
        return False

    def is_member_of(
        self,
        segment_id: str,
        target: Target,
        store: FlagStore,
        path: tuple[str, ...] = (),
    ) -> bool:
        """Check membership by segment identifier.

        A segment missing from ``store`` is a non-match. A circular reference
        is a non-match for the outermost lookup and propagates from nested ones
        so that the whole chain is abandoned.
        """
        try:
            segment = store.get_segment(segment_id)
            if segment is None:
                raise SegmentNotFoundError(segment_id)
            return self.is_member(segment, target, store, path)
        except SegmentNotFoundError as exc:
            logger.debug("%s, treating as no match", exc)
            return False
        except CircularSegmentReferenceError as exc:
            if path:
                raise
            logger.warning("%s, treating as no match", exc)
            return False
