"""User-authored policy documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from ..severity import Severity


@dataclass(frozen=True)
class PolicyRule:
    """One declarative rule.

    ``key`` is an exact key, a ``prefix.*`` pattern, a pattern with inner
    ``*`` wildcards, or ``*`` for every key.
    """

    id: str
    description: str
    key: str
    message: str
    severity: Severity = Severity.HIGH
    forbidden_values: Tuple[str, ...] = ()
    required_value: Optional[str] = None
    forbidden_pattern: Optional[str] = None
    suggestion: Optional[str] = None
    case_insensitive: bool = True

    @property
    def has_enforcement(self) -> bool:
        return bool(self.forbidden_values) or self.required_value is not None or bool(self.forbidden_pattern)


@dataclass(frozen=True)
class Policy:
    name: str
    version: str
    rules: Tuple[PolicyRule, ...] = ()
    description: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)
    source_path: Optional[str] = None

    def __len__(self) -> int:
        return len(self.rules)
