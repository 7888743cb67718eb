"""Locate and parse policy documents."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence

import yaml

from ..errors import InvalidArgumentError, PolicyError
from ..parsers.flatten import stringify_value
from ..severity import parse_severity
from ..utils.fileio import ConfigLoader, read_text_file
from .models import Policy, PolicyRule

logger = logging.getLogger(__name__)

POLICY_FILE_NAMES: Sequence[str] = (
    ".prod-analyzer-policy.yml",
    ".prod-analyzer-policy.yaml",
    "prod-analyzer-policy.yml",
    "prod-analyzer-policy.yaml",
)

_REQUIRED_RULE_FIELDS = ("id", "description", "key", "message")


def find_policy_file(directory: Path) -> Optional[Path]:
    """Return the first conventional policy file present in ``directory``."""

    for name in POLICY_FILE_NAMES:
        candidate = Path(directory) / name
        if candidate.is_file():
            return candidate
    return None


def find_and_load_policy(directory: Path) -> Optional[Policy]:
    path = find_policy_file(directory)
    if path is None:
        logger.debug("No policy file found in %s", directory)
        return None
    return load_policy_file(path)


def load_policy_file(path: Path) -> Policy:
    path = Path(path)
    try:
        content = read_text_file(path)
    except (OSError, UnicodeDecodeError) as exc:
        raise PolicyError(f"Cannot read policy file {path}: {exc}") from exc
    policy = parse_policy_document(content, str(path))
    logger.info("Loaded policy '%s' v%s with %d rules from %s", policy.name, policy.version, len(policy), path)
    return policy


def parse_policy_document(content: str, source_path: str = "<policy>") -> Policy:
    """Validate and convert a YAML policy document.

    Raises ``PolicyError`` naming the first problem found.
    """

    try:
        data = yaml.load(content, Loader=ConfigLoader)
    except yaml.YAMLError as exc:
        raise PolicyError(f"Invalid YAML in policy file {source_path}: {exc}") from exc

    if not isinstance(data, dict) or not isinstance(data.get("policies"), dict):
        raise PolicyError(f"Policy file {source_path} must contain a top-level 'policies' mapping")
    section = data["policies"]

    for field_name in ("name", "version"):
        if section.get(field_name) in (None, ""):
            raise PolicyError(f"Policy file {source_path} is missing 'policies.{field_name}'")

    raw_rules = section.get("rules")
    if not isinstance(raw_rules, list):
        raise PolicyError(f"Policy file {source_path} must define 'policies.rules' as a list")

    rules: List[PolicyRule] = []
    seen = set()
    for index, raw in enumerate(raw_rules):
        rule = _parse_rule(raw, index, source_path)
        if rule.id in seen:
            raise PolicyError(f"Duplicate policy rule id '{rule.id}' in {source_path}")
        seen.add(rule.id)
        rules.append(rule)

    metadata = section.get("metadata") or {}
    if not isinstance(metadata, dict):
        raise PolicyError(f"'policies.metadata' in {source_path} must be a mapping")

    return Policy(
        name=stringify_value(section["name"]),
        version=stringify_value(section["version"]),
        rules=tuple(rules),
        description=_optional_text(section.get("description")),
        metadata={str(k): stringify_value(v) for k, v in metadata.items()},
        source_path=source_path,
    )


def _parse_rule(raw: Any, index: int, source_path: str) -> PolicyRule:
    where = f"rule #{index + 1} in {source_path}"
    if not isinstance(raw, dict):
        raise PolicyError(f"Policy {where} must be a mapping")
    for field_name in _REQUIRED_RULE_FIELDS:
        if raw.get(field_name) in (None, ""):
            raise PolicyError(f"Policy {where} is missing required field '{field_name}'")

    rule_id = stringify_value(raw["id"])
    try:
        severity = parse_severity(raw.get("severity") or "HIGH")
    except InvalidArgumentError as exc:
        raise PolicyError(f"Policy rule '{rule_id}': {exc}") from exc

    forbidden = raw.get("forbiddenValues") or []
    if not isinstance(forbidden, list):
        forbidden = [forbidden]

    case_insensitive = raw.get("caseInsensitive", True)
    if not isinstance(case_insensitive, bool):
        raise PolicyError(f"Policy rule '{rule_id}': caseInsensitive must be true or false")

    rule = PolicyRule(
        id=rule_id,
        description=stringify_value(raw["description"]),
        key=stringify_value(raw["key"]),
        message=stringify_value(raw["message"]),
        severity=severity,
        forbidden_values=tuple(stringify_value(value) for value in forbidden if value is not None),
        required_value=_optional_text(raw.get("requiredValue")),
        forbidden_pattern=_optional_text(raw.get("forbiddenPattern")),
        suggestion=_optional_text(raw.get("suggestion")),
        case_insensitive=case_insensitive,
    )
    if not rule.has_enforcement:
        raise PolicyError(
            f"Policy rule '{rule_id}' needs at least one of forbiddenValues, requiredValue or forbiddenPattern"
        )
    return rule


def _optional_text(value: Any) -> Optional[str]:
    return None if value is None else stringify_value(value)
