"""Severity definitions for configuration violations."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Sequence

from .errors import InvalidArgumentError


class Severity(str, Enum):
    """Enumerate the supported severity levels for violations."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    INFO = "INFO"

    @property
    def level(self) -> int:
        """Return the numeric rank used for ordering and thresholds."""

        ordering = {
            Severity.CRITICAL: 5,
            Severity.HIGH: 4,
            Severity.MEDIUM: 3,
            Severity.LOW: 2,
            Severity.INFO: 1,
        }
        return ordering[self]

    def at_least(self, threshold: "Severity") -> bool:
        return self.level >= threshold.level


SEVERITY_ORDER: Sequence[Severity] = (
    Severity.CRITICAL,
    Severity.HIGH,
    Severity.MEDIUM,
    Severity.LOW,
    Severity.INFO,
)


def parse_severity(value: str) -> Severity:
    """Parse a severity name case-insensitively.

    Raises ``InvalidArgumentError`` for unknown names so the CLI can abort
    before any scanning work starts.
    """

    normalized = str(value).strip().upper()
    try:
        return Severity(normalized)
    except ValueError:
        valid = ", ".join(severity.value for severity in reversed(SEVERITY_ORDER))
        raise InvalidArgumentError(
            f'Invalid severity: "{value}". Valid values are: {valid}'
        ) from None


def max_severity(severities: Iterable[Severity]) -> Severity:
    """Return the highest severity present, or ``INFO`` when there is none."""

    highest = Severity.INFO
    for severity in severities:
        if severity.level > highest.level:
            highest = severity
    return highest
