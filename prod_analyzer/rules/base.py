"""Rule contract and helpers shared by the built-in catalog."""

from __future__ import annotations

import re
from typing import List, Optional, Protocol, Sequence

from ..entry import ConfigEntry
from ..profiles import Platform
from ..result import Violation
from ..severity import Severity

WILDCARD = "*"
REDACTED = "***REDACTED***"


class Rule(Protocol):
    """Protocol implemented by all built-in detectors.

    ``target_keys`` holds dot keys (or ``*`` for every key) and
    ``platforms`` an empty tuple when the rule applies to every profile.
    ``evaluate`` must be pure: same entry in, same violations out.
    """

    id: str
    name: str
    description: str
    default_severity: Severity
    target_keys: Sequence[str]
    platforms: Sequence[Platform]

    def evaluate(self, entry: ConfigEntry) -> List[Violation]:
        """Return the violations ``entry`` triggers, possibly none."""


def make_violation(
    rule: Rule,
    entry: ConfigEntry,
    message: str,
    suggestion: str,
    severity: Optional[Severity] = None,
    value: Optional[str] = None,
) -> Violation:
    return Violation(
        rule_id=rule.id,
        severity=severity or rule.default_severity,
        message=message,
        file_path=entry.source_file,
        config_key=entry.key,
        config_value=entry.value if value is None else value,
        suggestion=suggestion,
        line_number=entry.line_number,
    )


def normalized(value: str) -> str:
    return value.strip().lower()


def split_list(value: str) -> List[str]:
    """Split a comma-separated setting into trimmed lower-case items."""

    return [item.strip().lower() for item in value.split(",") if item.strip()]


def any_match(patterns: Sequence["re.Pattern[str]"], value: str) -> bool:
    return any(pattern.search(value) for pattern in patterns)
