"""Apply registered rules to configuration entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List

from ..entry import ConfigEntry
from ..result import Violation
from .registry import RuleRegistry


@dataclass(frozen=True)
class RuleExecutionResult:
    violations: List[Violation] = field(default_factory=list)
    executed_rule_ids: FrozenSet[str] = frozenset()
    entries_evaluated: int = 0

    @property
    def rules_executed(self) -> int:
        return len(self.executed_rule_ids)


def evaluate_entry(entry: ConfigEntry, registry: RuleRegistry) -> List[Violation]:
    violations: List[Violation] = []
    for rule in registry.rules_for_key(entry.key):
        violations.extend(rule.evaluate(entry))
    return violations


def execute_rules(entries: Iterable[ConfigEntry], registry: RuleRegistry) -> RuleExecutionResult:
    """Evaluate every entry; violations keep entry order then rule order."""

    violations: List[Violation] = []
    executed = set()
    count = 0
    for entry in entries:
        count += 1
        for rule in registry.rules_for_key(entry.key):
            executed.add(rule.id)
            violations.extend(rule.evaluate(entry))
    return RuleExecutionResult(violations, frozenset(executed), count)
