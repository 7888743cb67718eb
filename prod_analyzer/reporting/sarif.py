"""SARIF 2.1.0 output for code-scanning dashboards."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from .. import __version__
from ..result import ScanResult, Violation
from ..severity import Severity

SARIF_SCHEMA = "https://json.schemastore.org/sarif-2.1.0.json"
SARIF_VERSION = "2.1.0"

SARIF_LEVELS = {
    Severity.INFO: "note",
    Severity.LOW: "note",
    Severity.MEDIUM: "warning",
    Severity.HIGH: "error",
    Severity.CRITICAL: "error",
}


def sarif_level(severity: Severity) -> str:
    return SARIF_LEVELS[severity]


def _artifact_uri(file_path: str) -> str:
    return Path(file_path).resolve().as_uri()


def _result(violation: Violation) -> Dict[str, Any]:
    location: Dict[str, Any] = {"artifactLocation": {"uri": _artifact_uri(violation.file_path)}}
    if violation.line_number is not None:
        location["region"] = {"startLine": violation.line_number}
    return {
        "ruleId": violation.rule_id,
        "level": sarif_level(violation.severity),
        "message": {"text": violation.message},
        "locations": [{"physicalLocation": location}],
        "properties": {
            "severity": violation.severity.value,
            "configKey": violation.config_key,
            "configValue": violation.config_value,
            "suggestion": violation.suggestion,
        },
    }


def build_sarif_report(result: ScanResult) -> Dict[str, Any]:
    """One run; driver rules and results follow the grouped order."""

    rules: List[Dict[str, Any]] = []
    results: List[Dict[str, Any]] = []
    for group in result.grouped:
        first = group.occurrences[0]
        rules.append(
            {
                "id": group.rule_id,
                "shortDescription": {"text": group.rule_id},
                "fullDescription": {"text": first.message},
                "help": {"text": first.suggestion},
                "defaultConfiguration": {"level": sarif_level(group.severity)},
                "properties": {"severity": group.severity.value},
            }
        )
        results.extend(_result(occurrence) for occurrence in group.occurrences)

    return {
        "$schema": SARIF_SCHEMA,
        "version": SARIF_VERSION,
        "runs": [
            {
                "tool": {
                    "driver": {
                        "name": "prod-analyzer",
                        "version": __version__,
                        "rules": rules,
                    }
                },
                "results": results,
                "invocations": [
                    {
                        "executionSuccessful": True,
                        "properties": {
                            "threshold": result.threshold.value,
                            "status": "FAIL" if result.failed else "PASS",
                        },
                    }
                ],
            }
        ],
    }


def format_sarif(result: ScanResult) -> str:
    return json.dumps(build_sarif_report(result), indent=2)
