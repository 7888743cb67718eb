"""Declarative company policies evaluated alongside the built-in rules."""

from .engine import (
    evaluate_policy,
    evaluate_policy_rule,
    matches_key_pattern,
    merge_policy_violations,
    normalize_value,
)
from .loader import (
    POLICY_FILE_NAMES,
    find_and_load_policy,
    find_policy_file,
    load_policy_file,
    parse_policy_document,
)
from .models import Policy, PolicyRule

__all__ = [
    "POLICY_FILE_NAMES",
    "Policy",
    "PolicyRule",
    "evaluate_policy",
    "evaluate_policy_rule",
    "find_and_load_policy",
    "find_policy_file",
    "load_policy_file",
    "matches_key_pattern",
    "merge_policy_violations",
    "normalize_value",
    "parse_policy_document",
]
