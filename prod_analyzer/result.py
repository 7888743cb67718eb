"""Violation and scan result data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .grouping import GroupedViolation, group_violations
from .profiles import Platform, ScanProfile
from .severity import SEVERITY_ORDER, Severity, max_severity


@dataclass(frozen=True)
class Violation:
    """A single rule or policy firing against one configuration entry."""

    rule_id: str
    severity: Severity
    message: str
    file_path: str
    config_key: str
    config_value: str
    suggestion: str
    line_number: Optional[int] = None


@dataclass
class Summary:
    """Aggregate violation counts by severity."""

    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    info: int = 0

    def increment(self, severity: Severity) -> None:
        attr = severity.value.lower()
        setattr(self, attr, getattr(self, attr) + 1)

    def count(self, severity: Severity) -> int:
        return getattr(self, severity.value.lower())

    def to_dict(self) -> Dict[str, int]:
        return {severity.value: self.count(severity) for severity in SEVERITY_ORDER}

    def as_rows(self) -> List[Tuple[str, int]]:
        """Return severity/count pairs ordered for reporting."""

        return [(severity.value, self.count(severity)) for severity in SEVERITY_ORDER]

    @property
    def total(self) -> int:
        return sum(self.count(severity) for severity in SEVERITY_ORDER)

    @classmethod
    def from_violations(cls, violations: Iterable[Violation]) -> "Summary":
        summary = cls()
        for violation in violations:
            summary.increment(violation.severity)
        return summary


@dataclass(frozen=True)
class ScanStatistics:
    files_scanned: int = 0
    files_failed: int = 0
    entries_evaluated: int = 0
    rules_executed: int = 0
    policy_rules: int = 0
    duration_ms: int = 0


@dataclass(frozen=True)
class ScanResult:
    """Everything a renderer needs, computed once per scan."""

    scanned_at: datetime
    target_directory: str
    environment: str
    profile: ScanProfile
    detected_platform: Platform
    threshold: Severity
    violations: Tuple[Violation, ...]
    statistics: ScanStatistics
    summary: Summary
    max_severity: Severity
    grouped: Tuple[GroupedViolation, ...] = field(default_factory=tuple)

    @property
    def failed(self) -> bool:
        return has_violations_above_threshold(self.violations, self.threshold)

    @property
    def passed(self) -> bool:
        return not self.failed

    @property
    def total_violations(self) -> int:
        return len(self.violations)


def has_violations_above_threshold(violations: Iterable[Violation], threshold: Severity) -> bool:
    """True when at least one violation is at or above ``threshold``."""

    return any(violation.severity.at_least(threshold) for violation in violations)


def create_scan_result(
    violations: Sequence[Violation],
    statistics: ScanStatistics,
    *,
    target_directory: str,
    environment: str,
    profile: ScanProfile,
    threshold: Severity,
    detected_platform: Platform = Platform.GENERIC,
    scanned_at: Optional[datetime] = None,
) -> ScanResult:
    """Aggregate violations into an immutable :class:`ScanResult`."""

    violations = tuple(violations)
    return ScanResult(
        scanned_at=scanned_at or datetime.now().astimezone(),
        target_directory=target_directory,
        environment=environment,
        profile=profile,
        detected_platform=detected_platform,
        threshold=threshold,
        violations=violations,
        statistics=statistics,
        summary=Summary.from_violations(violations),
        max_severity=max_severity(violation.severity for violation in violations),
        grouped=group_violations(violations),
    )
