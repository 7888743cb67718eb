"""Machine-readable JSON report (schema 2.0.0)."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from .. import __version__
from ..grouping import GroupedViolation, sort_violations
from ..license import LicenseTier, features_for
from ..result import ScanResult, Violation

SCHEMA_VERSION = "2.0.0"


def is_redacted(value: str) -> bool:
    return value.startswith("***") and value.endswith("REDACTED***")


def _violation_dict(violation: Violation) -> Dict[str, Any]:
    return {
        "ruleId": violation.rule_id,
        "severity": violation.severity.value,
        "file": violation.file_path,
        "line": violation.line_number,
        "key": violation.config_key,
        "value": violation.config_value,
        "valueRedacted": is_redacted(violation.config_value),
        "message": violation.message,
        "fix": violation.suggestion,
    }


def _group_dict(group: GroupedViolation) -> Dict[str, Any]:
    occurrences = []
    for occurrence in group.occurrences:
        item = _violation_dict(occurrence)
        del item["ruleId"], item["severity"]
        occurrences.append(item)
    return {
        "ruleId": group.rule_id,
        "severity": group.severity.value,
        "severityLevel": group.severity.level,
        "count": group.count,
        "occurrences": occurrences,
    }


def build_json_report(result: ScanResult, tier: LicenseTier = LicenseTier.PRO) -> Dict[str, Any]:
    stats = result.statistics
    report: Dict[str, Any] = {
        "toolVersion": __version__,
        "schemaVersion": SCHEMA_VERSION,
        "licenseTier": tier.value,
        "profile": result.profile.value,
        "detectedPlatform": result.detected_platform.value,
        "target": result.target_directory,
        "env": result.environment,
        "scannedAt": result.scanned_at.isoformat(),
        "threshold": result.threshold.value,
        "status": "FAIL" if result.failed else "PASS",
        "summary": {
            "filesScanned": stats.files_scanned,
            "filesFailed": stats.files_failed,
            "entriesEvaluated": stats.entries_evaluated,
            "rulesExecuted": stats.rules_executed,
            "policyRules": stats.policy_rules,
            "durationMs": stats.duration_ms,
            "totalViolations": result.total_violations,
            "maxSeverity": result.max_severity.value,
            "violationsBySeverity": result.summary.to_dict(),
        },
    }
    if features_for(tier).grouped_violations:
        report["groupedViolations"] = [_group_dict(group) for group in result.grouped]
    violations: List[Dict[str, Any]] = [_violation_dict(item) for item in sort_violations(result.violations)]
    report["violations"] = violations
    return report


def format_json(result: ScanResult, tier: LicenseTier = LicenseTier.PRO) -> str:
    return json.dumps(build_json_report(result, tier), indent=2)
