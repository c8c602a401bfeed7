"""Clause matching.

A clause compares one target attribute against a list of values. The clause
holds when the attribute satisfies the operator for any listed value. A
target that does not carry the attribute never satisfies a clause, negated
or not.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from flagcore.attributes import to_text
from flagcore.types import ClauseOperator

if TYPE_CHECKING:
    from flagcore.models.rule import Clause
    from flagcore.segment_evaluator import SegmentEvaluator
    from flagcore.storage.protocols import FlagStore
    from flagcore.target import Target

__all__ = ["ClauseMatcher"]

logger = logging.getLogger(__name__)


def _as_number(value: str) -> float | None:
    try:
        return float(value)
    except ValueError:
        return None


def _compare(actual: str, expected: str, check: Callable[[Any, Any], bool]) -> bool:
    actual_num = _as_number(actual)
    expected_num = _as_number(expected)
    if actual_num is not None and expected_num is not None:
        return check(actual_num, expected_num)
    return check(actual, expected)


def _regex_search(actual: str, pattern: str) -> bool:
    try:
        return re.search(pattern, actual) is not None
    except re.error:
        logger.debug("Invalid pattern %r in clause, treating as no match", pattern)
        return False


_COMPARATORS: dict[ClauseOperator, Callable[[str, str], bool]] = {
    ClauseOperator.IN: lambda a, e: a == e,
    ClauseOperator.EQUAL: lambda a, e: a.lower() == e.lower(),
    ClauseOperator.EQUAL_SENSITIVE: lambda a, e: a == e,
    ClauseOperator.STARTS_WITH: lambda a, e: a.startswith(e),
    ClauseOperator.ENDS_WITH: lambda a, e: a.endswith(e),
    ClauseOperator.CONTAINS: lambda a, e: e in a,
    ClauseOperator.MATCH: _regex_search,
    ClauseOperator.GREATER_THAN: lambda a, e: _compare(a, e, lambda x, y: x > y),
    ClauseOperator.GREATER_THAN_OR_EQUAL: lambda a, e: _compare(a, e, lambda x, y: x >= y),
    ClauseOperator.LESS_THAN: lambda a, e: _compare(a, e, lambda x, y: x < y),
    ClauseOperator.LESS_THAN_OR_EQUAL: lambda a, e: _compare(a, e, lambda x, y: x <= y),
}

# operators defined as the complement of another operator
_COMPLEMENTS: dict[ClauseOperator, ClauseOperator] = {
    ClauseOperator.NOT_IN: ClauseOperator.IN,
    ClauseOperator.NOT_EQUAL: ClauseOperator.EQUAL,
}


class ClauseMatcher:
    """Evaluates clauses against targets.

    ``segmentMatch`` clauses are delegated to the segment evaluator this
    matcher was created with.
    """

    def __init__(self, segment_evaluator: SegmentEvaluator | None = None) -> None:
        self._segment_evaluator = segment_evaluator

    def matches(
        self,
        clause: Clause,
        target: Target,
        store: FlagStore,
        path: tuple[str, ...] = (),
    ) -> bool:
        """Check whether a clause holds for a target.

        Args:
            clause: The clause to evaluate.
            target: The target being evaluated.
            store: Source of segment definitions for ``segmentMatch``.
            path: Segment identifiers currently being resolved, used to
                detect circular segment references.

        Returns:
            True if the clause holds.

        """
        if clause.op == ClauseOperator.SEGMENT_MATCH:
            return self._matches_segments(clause.values, target, store, path) != clause.negate

        if clause.op not in _COMPARATORS and clause.op not in _COMPLEMENTS:
            logger.debug("Unknown clause operator %r on attribute %r", clause.op, clause.attribute)
            return False

        actual = target.get(clause.attribute)
        if actual is None:
            return False

        return self._apply(clause.op, actual, clause.values) != clause.negate

    def matches_all(
        self,
        clauses: Sequence[Clause],
        target: Target,
        store: FlagStore,
        path: tuple[str, ...] = (),
    ) -> bool:
        """Check whether every clause holds (empty sequences hold)."""
        return all(self.matches(clause, target, store, path) for clause in clauses)

    def _apply(self, op: ClauseOperator, actual: Any, values: Sequence[str]) -> bool:
        complement = _COMPLEMENTS.get(op)
        if complement is not None:
            return not self._apply(complement, actual, values)

        comparator = _COMPARATORS[op]
        candidates = actual if isinstance(actual, (list, tuple)) else [actual]
        for candidate in candidates:
            text = to_text(candidate)
            if any(comparator(text, value) for value in values):
                return True
        return False

    def _matches_segments(
        self,
        segment_ids: Sequence[str],
        target: Target,
        store: FlagStore,
        path: tuple[str, ...],
    ) -> bool:
        if self._segment_evaluator is None:
            logger.debug("segmentMatch clause evaluated without a segment evaluator")
            return False
        return any(
            self._segment_evaluator.is_member_of(segment_id, target, store, path) for segment_id in segment_ids
        )
