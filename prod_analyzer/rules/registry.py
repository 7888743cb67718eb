"""Index built-in rules by target key for the active scan profile."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from ..profiles import ScanProfile, platforms_for_profile
from .base import WILDCARD, Rule

logger = logging.getLogger(__name__)


class RuleRegistry:
    """Rules applicable to one profile, looked up by entry key.

    Target keys are indexed lower-cased; a rule only fires for entries whose
    lower-cased key is one of its targets (or for every entry when it
    targets ``*``), so lookup returns the same rules a brute-force pass
    would invoke successfully.
    """

    def __init__(self, profile: ScanProfile = ScanProfile.SPRING) -> None:
        self.profile = profile
        self._platforms = set(platforms_for_profile(profile))
        self._rules: Dict[str, Rule] = {}
        self._by_key: Dict[str, List[Rule]] = {}
        self._wildcard: List[Rule] = []

    def applies(self, rule: Rule) -> bool:
        return not rule.platforms or any(platform in self._platforms for platform in rule.platforms)

    def register(self, rule: Rule) -> bool:
        """Add ``rule``; returns False when it does not apply to the profile."""

        if rule.id in self._rules:
            raise ValueError(f"Rule with ID {rule.id} is already registered")
        if not self.applies(rule):
            logger.debug("Skipping rule %s for profile %s", rule.id, self.profile.value)
            return False
        self._rules[rule.id] = rule
        for target in rule.target_keys:
            if target == WILDCARD:
                self._wildcard.append(rule)
                continue
            bucket = self._by_key.setdefault(target.lower(), [])
            if rule not in bucket:
                bucket.append(rule)
        return True

    def register_all(self, rules: Iterable[Rule]) -> None:
        for rule in rules:
            self.register(rule)

    def rules_for_key(self, key: str) -> List[Rule]:
        """Exact-key rules first, then wildcard rules, without duplicates."""

        matched = list(self._by_key.get(key.lower(), ()))
        matched.extend(rule for rule in self._wildcard if rule not in matched)
        return matched

    def get(self, rule_id: str) -> Optional[Rule]:
        return self._rules.get(rule_id)

    def all_rules(self) -> List[Rule]:
        return list(self._rules.values())

    def clear(self) -> None:
        self._rules.clear()
        self._by_key.clear()
        self._wildcard.clear()

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules


def create_rule_registry(rules: Iterable[Rule], profile: ScanProfile = ScanProfile.SPRING) -> RuleRegistry:
    registry = RuleRegistry(profile)
    registry.register_all(rules)
    return registry
