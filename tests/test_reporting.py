import json
from pathlib import Path

import pytest

from prod_analyzer.license import LicenseTier
from prod_analyzer.reporting import build_json_report, build_sarif_report, format_console, format_scan_result
from prod_analyzer.scan import OutputFormat, create_scan_options, scan

SAMPLES = Path(__file__).resolve().parent.parent / "samples"


@pytest.fixture(scope="module")
def vulnerable_result():
    return scan(create_scan_options(SAMPLES / "vulnerable", profile="all"))


def test_console_report_lists_blocking_groups(vulnerable_result):
    text = format_console(vulnerable_result)

    assert "Scan Summary" in text
    assert "STATUS: FAIL - Deploy blocked due to CRITICAL violations (threshold: HIGH)" in text
    assert "Blocking Issues" in text
    assert "[CRITICAL] HIBERNATE_DDL_AUTO_UNSAFE (1 occurrence)" in text
    assert "-> application.yml:6" in text
    assert text.index("Blocking Issues") < text.index("Other Findings")


def test_console_free_tier_lists_findings_individually(vulnerable_result):
    text = format_console(vulnerable_result, tier=LicenseTier.FREE)
    assert "Blocking Issues" not in text
    assert "Findings" in text
    assert "FREE tier" in text


def test_json_report_matches_core_counts(vulnerable_result):
    report = json.loads(format_scan_result(vulnerable_result, OutputFormat.JSON))

    assert report["schemaVersion"] == "2.0.0"
    assert report["status"] == "FAIL"
    assert report["summary"]["totalViolations"] == vulnerable_result.total_violations
    assert report["summary"]["violationsBySeverity"] == vulnerable_result.summary.to_dict()
    assert [group["ruleId"] for group in report["groupedViolations"]] == [
        group.rule_id for group in vulnerable_result.grouped
    ]
    files_and_lines = [(item["file"], item["line"] or 0) for item in report["violations"]]
    assert files_and_lines == sorted(files_and_lines, key=lambda pair: (pair[0], pair[1]))


def test_json_report_flags_redacted_values(vulnerable_result):
    report = build_json_report(vulnerable_result)
    redacted = [item for item in report["violations"] if item["valueRedacted"]]
    assert redacted
    assert all(item["value"].endswith("REDACTED***") for item in redacted)


def test_json_free_tier_omits_groups(vulnerable_result):
    report = build_json_report(vulnerable_result, LicenseTier.FREE)
    assert "groupedViolations" not in report
    assert report["licenseTier"] == "FREE"


def test_sarif_levels_and_locations(vulnerable_result):
    sarif = build_sarif_report(vulnerable_result)
    run = sarif["runs"][0]

    assert sarif["version"] == "2.1.0"
    assert len(run["results"]) == vulnerable_result.total_violations
    assert [rule["id"] for rule in run["tool"]["driver"]["rules"]] == [g.rule_id for g in vulnerable_result.grouped]

    hibernate = next(item for item in run["results"] if item["ruleId"] == "HIBERNATE_DDL_AUTO_UNSAFE")
    location = hibernate["locations"][0]["physicalLocation"]
    assert hibernate["level"] == "error"
    assert location["artifactLocation"]["uri"].startswith("file://")
    assert location["region"]["startLine"] == 6

    levels = {item["properties"]["severity"]: item["level"] for item in run["results"]}
    assert levels.get("MEDIUM", "warning") == "warning"
    assert levels.get("LOW", "note") == "note"


def test_sarif_omits_region_without_line(vulnerable_result):
    run = build_sarif_report(vulnerable_result)["runs"][0]
    json_results = [item for item in run["results"] if item["locations"][0]["physicalLocation"]["artifactLocation"]["uri"].endswith("appsettings.json")]
    assert json_results
    assert all("region" not in item["locations"][0]["physicalLocation"] for item in json_results)


def test_renderers_are_deterministic():
    first = scan(create_scan_options(SAMPLES / "vulnerable", profile="all"))
    second = scan(create_scan_options(SAMPLES / "vulnerable", profile="all"))
    assert build_sarif_report(first) == build_sarif_report(second)
    assert first.grouped == second.grouped
