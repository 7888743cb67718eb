"""Plain-text report for terminals and CI logs."""

from __future__ import annotations

import os
from typing import List

from .. import __version__
from ..grouping import GroupedViolation, sort_violations, split_by_threshold
from ..license import LicenseTier, features_for
from ..result import ScanResult, Violation

RULE = "=" * 60
THIN_RULE = "-" * 60


def display_path(path: str, root: str) -> str:
    """Show ``path`` relative to the scan root when it lives beneath it."""

    try:
        relative = os.path.relpath(path, root)
    except ValueError:
        return path
    return path if relative.startswith("..") else relative


def _location(violation: Violation, root: str) -> str:
    location = display_path(violation.file_path, root)
    if violation.line_number is not None:
        location += f":{violation.line_number}"
    return location


def _format_occurrence(violation: Violation, root: str, show_fix: bool) -> List[str]:
    lines = [
        f"  -> {_location(violation, root)}",
        f"     {violation.config_key} = {violation.config_value}",
        f"     Issue: {violation.message}",
    ]
    if show_fix and violation.suggestion:
        lines.append(f"     Fix  : {violation.suggestion}")
    return lines


def _format_group(group: GroupedViolation, root: str, show_fix: bool) -> List[str]:
    noun = "occurrence" if group.count == 1 else "occurrences"
    lines = [f"[{group.severity.value}] {group.rule_id} ({group.count} {noun})"]
    for occurrence in group.occurrences:
        lines.extend(_format_occurrence(occurrence, root, show_fix))
    lines.append("")
    return lines


def format_summary_table(result: ScanResult) -> List[str]:
    lines = ["Scan Summary", RULE]
    header = f"{'Severity':<10} | {'Count':>5}"
    lines.append(header)
    lines.append("-" * len(header))
    for severity, count in result.summary.as_rows():
        lines.append(f"{severity:<10} | {count:>5}")
    lines.append("-" * len(header))
    stats = result.statistics
    lines.append(f"Status    : {'FAIL' if result.failed else 'PASS'}")
    lines.append(f"Violations: {result.total_violations}")
    lines.append(f"Files     : {stats.files_scanned} ({stats.files_failed} failed to parse)")
    lines.append(f"Entries   : {stats.entries_evaluated}")
    lines.append(f"Rules     : {stats.rules_executed} built-in, {stats.policy_rules} policy")
    lines.append(f"Duration  : {stats.duration_ms}ms")
    return lines


def format_console(
    result: ScanResult,
    tier: LicenseTier = LicenseTier.PRO,
    verbose: bool = False,
) -> str:
    """Render the header, decision, summary and findings as text.

    Without grouping (FREE tier) findings are listed one by one in file
    order. Fix suggestions for non-blocking findings need ``verbose``.
    """

    features = features_for(tier)
    root = result.target_directory
    lines: List[str] = [
        f"Production Config Analyzer v{__version__}",
        RULE,
        f"Target    : {root}",
        f"Profile   : {result.profile.value} (detected platform: {result.detected_platform.value})",
        f"Env       : {result.environment}",
        f"Threshold : {result.threshold.value}",
        f"Scanned at: {result.scanned_at.isoformat(timespec='seconds')}",
        "",
    ]
    lines.extend(format_summary_table(result))
    lines.append("")

    if result.failed:
        lines.append(
            f"STATUS: FAIL - Deploy blocked due to {result.max_severity.value} violations "
            f"(threshold: {result.threshold.value})"
        )
    else:
        lines.append(f"STATUS: PASS - No violations at or above {result.threshold.value}")
    lines.append("")

    show_details = verbose and features.verbose_mode
    if features.grouped_violations:
        blocking, other = split_by_threshold(result.grouped, result.threshold)
        if blocking:
            lines.extend(["Blocking Issues", THIN_RULE])
            for group in blocking:
                lines.extend(_format_group(group, root, show_fix=True))
        if other:
            lines.extend(["Other Findings", THIN_RULE])
            for group in other:
                lines.extend(_format_group(group, root, show_fix=show_details))
    elif result.violations:
        lines.extend(["Findings", THIN_RULE])
        for violation in sort_violations(result.violations):
            lines.append(f"[{violation.severity.value}] {violation.rule_id}")
            blocking = violation.severity.at_least(result.threshold)
            lines.extend(_format_occurrence(violation, root, show_fix=blocking or show_details))
            lines.append("")

    lines.append(RULE)
    lines.append(_footer(result, tier))
    return "\n".join(lines)


def _footer(result: ScanResult, tier: LicenseTier) -> str:
    if tier == LicenseTier.FREE:
        return "FREE tier: upgrade to PRO for grouped findings and CI mode."
    if result.failed:
        return "Fix the blocking issues above before deploying to production."
    return "Configuration is ready for production."
