"""Scan orchestration: discover, normalize, evaluate, aggregate."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from .entry import ConfigEntry, ParsedConfigFile
from .errors import InvalidArgumentError, ScanError
from .license import LicenseTier
from .parsers import parse_config_file
from .policy import evaluate_policy, find_and_load_policy, load_policy_file, merge_policy_violations
from .policy.models import Policy
from .profiles import ScanProfile, detect_platform, parse_profile
from .result import ScanResult, ScanStatistics, Violation, create_scan_result
from .rules import ALL_RULES, Rule, create_rule_registry, execute_rules
from .severity import Severity, parse_severity
from .utils import DiscoveredFile, discover_config_files, read_text_file

logger = logging.getLogger(__name__)


class OutputFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"
    SARIF = "sarif"


def parse_output_format(value: str) -> OutputFormat:
    try:
        return OutputFormat(str(value).strip().lower())
    except ValueError:
        valid = ", ".join(item.value for item in OutputFormat)
        raise InvalidArgumentError(f"Invalid format: {value}. Valid options: {valid}") from None


@dataclass(frozen=True)
class ScanOptions:
    """Validated inputs for one scan."""

    target_directory: Path
    environment: str = "prod"
    profile: ScanProfile = ScanProfile.SPRING
    fail_on: Severity = Severity.HIGH
    output_format: OutputFormat = OutputFormat.CONSOLE
    verbose: bool = False
    policy_path: Optional[Path] = None
    license_tier: LicenseTier = LicenseTier.PRO


def create_scan_options(
    target_directory: Union[str, Path],
    environment: str = "prod",
    profile: Union[str, ScanProfile] = ScanProfile.SPRING,
    fail_on: Union[str, Severity] = Severity.HIGH,
    output_format: Union[str, OutputFormat] = OutputFormat.CONSOLE,
    verbose: bool = False,
    policy_path: Optional[Union[str, Path]] = None,
    license_tier: LicenseTier = LicenseTier.PRO,
) -> ScanOptions:
    """Build options from loosely typed input; bad names raise ``InvalidArgumentError``."""

    return ScanOptions(
        target_directory=Path(target_directory).resolve(),
        environment=environment,
        profile=profile if isinstance(profile, ScanProfile) else parse_profile(profile),
        fail_on=fail_on if isinstance(fail_on, Severity) else parse_severity(fail_on),
        output_format=(
            output_format if isinstance(output_format, OutputFormat) else parse_output_format(output_format)
        ),
        verbose=verbose,
        policy_path=Path(policy_path) if policy_path else None,
        license_tier=license_tier,
    )


def load_policy(options: ScanOptions) -> Optional[Policy]:
    """Explicit ``policy_path`` first, otherwise probe the scan root."""

    if options.policy_path is not None:
        return load_policy_file(options.policy_path)
    return find_and_load_policy(options.target_directory)


def parse_files(discovered_files: Iterable[DiscoveredFile]) -> List[ParsedConfigFile]:
    parsed: List[ParsedConfigFile] = []
    for discovered in discovered_files:
        file_path = str(discovered.path)
        try:
            content = read_text_file(discovered.path)
        except (OSError, UnicodeDecodeError) as exc:
            message = f"Cannot read {file_path}: {exc}"
            logger.warning(message)
            parsed.append(ParsedConfigFile(file_path, discovered.format, (), message))
            continue
        parsed.append(parse_config_file(content, file_path, discovered.format))
    return parsed


def scan(
    options: ScanOptions,
    rules: Sequence[Rule] = ALL_RULES,
    policy: Optional[Policy] = None,
    *,
    policy_resolved: bool = False,
) -> ScanResult:
    """Run one scan. Invalid policy documents raise ``PolicyError``.

    Pass ``policy_resolved=True`` when the caller already looked for a policy,
    so a ``None`` policy means "none found" and no second lookup happens.
    """

    started = time.monotonic()
    root = options.target_directory
    if not root.is_dir():
        raise ScanError(f"Directory not found: {root}")

    if policy is None and not policy_resolved:
        policy = load_policy(options)

    discovered = discover_config_files(root)
    parsed = parse_files(discovered)
    entries: List[ConfigEntry] = [entry for item in parsed for entry in item.entries]

    registry = create_rule_registry(rules, options.profile)
    execution = execute_rules(entries, registry)
    violations: List[Violation] = list(execution.violations)

    if policy is not None and policy.rules:
        violations.extend(merge_policy_violations(evaluate_policy(entries, policy), policy))

    statistics = ScanStatistics(
        files_scanned=len(parsed),
        files_failed=sum(1 for item in parsed if item.degraded),
        entries_evaluated=execution.entries_evaluated,
        rules_executed=execution.rules_executed,
        policy_rules=len(policy.rules) if policy is not None else 0,
        duration_ms=int((time.monotonic() - started) * 1000),
    )
    logger.info(
        "Scanned %d files (%d entries), %d violations",
        statistics.files_scanned,
        statistics.entries_evaluated,
        len(violations),
    )
    return create_scan_result(
        violations,
        statistics,
        target_directory=str(root),
        environment=options.environment,
        profile=options.profile,
        threshold=options.fail_on,
        detected_platform=detect_platform(str(item.path) for item in discovered),
    )
