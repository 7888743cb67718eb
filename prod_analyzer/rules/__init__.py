"""Built-in rule catalog."""

from __future__ import annotations

from typing import List

from . import dotnet, general, nodejs, spring_boot
from .base import WILDCARD, Rule, make_violation
from .engine import RuleExecutionResult, execute_rules
from .registry import RuleRegistry, create_rule_registry


def load_rules() -> List[Rule]:
    """Return fresh instances of every built-in rule in catalog order."""

    return [
        *spring_boot.get_rules(),
        *nodejs.get_rules(),
        *dotnet.get_rules(),
        *general.get_rules(),
    ]


ALL_RULES = tuple(load_rules())

__all__ = [
    "ALL_RULES",
    "Rule",
    "RuleExecutionResult",
    "RuleRegistry",
    "WILDCARD",
    "create_rule_registry",
    "execute_rules",
    "load_rules",
    "make_violation",
]
