"""Deterministic grouping and ordering of violations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterable, List, Tuple

from .severity import Severity, max_severity

if TYPE_CHECKING:
    from .result import Violation


@dataclass(frozen=True)
class GroupedViolation:
    """All occurrences of one rule id, ordered by file then line."""

    rule_id: str
    severity: Severity
    occurrences: Tuple["Violation", ...]

    @property
    def count(self) -> int:
        return len(self.occurrences)


def _occurrence_key(violation: "Violation") -> Tuple[str, int]:
    return (violation.file_path, violation.line_number or 0)


def sort_violations(violations: Iterable["Violation"]) -> List["Violation"]:
    """Order violations by file path then line number (missing line = 0).

    ``sorted`` is stable so violations on the same line keep engine order.
    """

    return sorted(violations, key=_occurrence_key)


def group_violations(violations: Iterable["Violation"]) -> Tuple[GroupedViolation, ...]:
    """Group by rule id; groups sort by severity descending then rule id.

    A group's severity is the highest severity among its occurrences since
    some rules escalate per value.
    """

    buckets: Dict[str, List["Violation"]] = {}
    for violation in violations:
        buckets.setdefault(violation.rule_id, []).append(violation)

    groups = [
        GroupedViolation(
            rule_id=rule_id,
            severity=max_severity(item.severity for item in items),
            occurrences=tuple(sort_violations(items)),
        )
        for rule_id, items in buckets.items()
    ]
    groups.sort(key=lambda group: (-group.severity.level, group.rule_id))
    return tuple(groups)


def top_blockers(
    grouped: Iterable[GroupedViolation], threshold: Severity, limit: int = 5
) -> List[GroupedViolation]:
    """Return the first ``limit`` groups at or above ``threshold``."""

    blockers = [group for group in grouped if group.severity.at_least(threshold)]
    return blockers[:limit]


def split_by_threshold(
    grouped: Iterable[GroupedViolation], threshold: Severity
) -> Tuple[List[GroupedViolation], List[GroupedViolation]]:
    """Partition groups into (blocking, non-blocking) keeping their order."""

    blocking: List[GroupedViolation] = []
    other: List[GroupedViolation] = []
    for group in grouped:
        (blocking if group.severity.at_least(threshold) else other).append(group)
    return blocking, other
