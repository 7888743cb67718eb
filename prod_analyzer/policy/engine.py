"""Evaluate policy rules against configuration entries."""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Iterable, List, Optional, Pattern

from ..entry import ConfigEntry
from ..result import Violation
from .models import Policy, PolicyRule

logger = logging.getLogger(__name__)

POLICY_RULE_PREFIX = "POLICY:"
DEFAULT_POLICY_SUGGESTION = "Review company security policy"

_SEPARATORS = re.compile(r"[_-]")


def _canonical_key(key: str) -> str:
    return _SEPARATORS.sub(".", key.lower())


@lru_cache(maxsize=256)
def _key_regex(pattern: str) -> Pattern[str]:
    parts = _canonical_key(pattern).split("*")
    return re.compile(".*".join(re.escape(part) for part in parts))


def matches_key_pattern(key: str, pattern: str) -> bool:
    """Match ``key`` against a policy key pattern.

    Both sides are lower-cased with ``_``/``-`` folded to ``.``; ``*`` matches
    any run of characters and the whole key must match.
    """

    if pattern == "*":
        return True
    return _key_regex(pattern).fullmatch(_canonical_key(key)) is not None


def normalize_value(value: str, case_insensitive: bool) -> str:
    value = value.strip()
    return value.lower() if case_insensitive else value


@lru_cache(maxsize=256)
def _compile_forbidden(pattern: str) -> Optional[Pattern[str]]:
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        logger.warning("Skipping invalid forbiddenPattern %r: %s", pattern, exc)
        return None


def evaluate_policy_rule(entry: ConfigEntry, rule: PolicyRule) -> Optional[Violation]:
    """Return at most one violation; clauses are checked in a fixed order."""

    if not matches_key_pattern(entry.key, rule.key):
        return None
    value = normalize_value(entry.value, rule.case_insensitive)

    if rule.forbidden_values:
        forbidden = {normalize_value(item, rule.case_insensitive) for item in rule.forbidden_values}
        if value in forbidden:
            return _violation(entry, rule, rule.message, rule.suggestion)

    if rule.required_value is not None:
        required = normalize_value(rule.required_value, rule.case_insensitive)
        if value != required:
            return _violation(
                entry,
                rule,
                f"{rule.message} (expected: {rule.required_value}, found: {entry.value})",
                rule.suggestion or f"Set {entry.key} to {rule.required_value}",
            )

    if rule.forbidden_pattern:
        compiled = _compile_forbidden(rule.forbidden_pattern)
        if compiled is not None and compiled.search(value):
            return _violation(entry, rule, rule.message, rule.suggestion)

    return None


def _violation(entry: ConfigEntry, rule: PolicyRule, message: str, suggestion: Optional[str]) -> Violation:
    return Violation(
        rule_id=rule.id,
        severity=rule.severity,
        message=message,
        file_path=entry.source_file,
        config_key=entry.key,
        config_value=entry.value,
        suggestion=suggestion or "",
        line_number=entry.line_number,
    )


def evaluate_policy(entries: Iterable[ConfigEntry], policy: Policy) -> List[Violation]:
    """Raw policy violations in entry order then rule order."""

    violations: List[Violation] = []
    for entry in entries:
        for rule in policy.rules:
            violation = evaluate_policy_rule(entry, rule)
            if violation is not None:
                violations.append(violation)
    return violations


def merge_policy_violations(violations: Iterable[Violation], policy: Policy) -> List[Violation]:
    """Tag raw policy violations so they read apart from built-in ones."""

    return [
        Violation(
            rule_id=f"{POLICY_RULE_PREFIX}{violation.rule_id}",
            severity=violation.severity,
            message=f"[{policy.name}] {violation.message}",
            file_path=violation.file_path,
            config_key=violation.config_key,
            config_value=violation.config_value,
            suggestion=violation.suggestion or DEFAULT_POLICY_SUGGESTION,
            line_number=violation.line_number,
        )
        for violation in violations
    ]
