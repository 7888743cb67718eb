from datetime import datetime, timezone

import pytest

from prod_analyzer.grouping import group_violations, split_by_threshold, top_blockers
from prod_analyzer.profiles import ScanProfile
from prod_analyzer.result import (
    ScanStatistics,
    Violation,
    create_scan_result,
    has_violations_above_threshold,
)
from prod_analyzer.severity import SEVERITY_ORDER, Severity


def _violation(rule_id, severity, file_path="b.yml", line=None):
    return Violation(
        rule_id=rule_id,
        severity=severity,
        message=f"{rule_id} fired",
        file_path=file_path,
        config_key="key",
        config_value="value",
        suggestion="fix it",
        line_number=line,
    )


VIOLATIONS = [
    _violation("B_RULE", Severity.HIGH, "b.yml", 7),
    _violation("A_RULE", Severity.HIGH, "a.yml", 3),
    _violation("LOW_RULE", Severity.LOW, "a.yml", 1),
    _violation("B_RULE", Severity.HIGH, "a.yml", None),
    _violation("B_RULE", Severity.HIGH, "a.yml", 2),
    _violation("CRIT", Severity.CRITICAL, "z.env", 1),
]


def test_groups_sort_by_severity_then_rule_id():
    grouped = group_violations(VIOLATIONS)
    assert [(g.rule_id, g.severity) for g in grouped] == [
        ("CRIT", Severity.CRITICAL),
        ("A_RULE", Severity.HIGH),
        ("B_RULE", Severity.HIGH),
        ("LOW_RULE", Severity.LOW),
    ]


def test_occurrences_sort_by_file_then_line():
    b_rule = next(g for g in group_violations(VIOLATIONS) if g.rule_id == "B_RULE")
    assert [(v.file_path, v.line_number) for v in b_rule.occurrences] == [
        ("a.yml", None),
        ("a.yml", 2),
        ("b.yml", 7),
    ]
    assert b_rule.count == 3


def test_grouping_is_deterministic_regardless_of_input_order():
    assert group_violations(VIOLATIONS) == group_violations(list(reversed(VIOLATIONS)))


def test_group_severity_is_highest_occurrence():
    grouped = group_violations(
        [_violation("MIXED", Severity.MEDIUM, "a", 1), _violation("MIXED", Severity.HIGH, "a", 2)]
    )
    assert grouped[0].severity == Severity.HIGH


def test_top_blockers_respects_threshold_and_limit():
    grouped = group_violations(VIOLATIONS)
    assert [g.rule_id for g in top_blockers(grouped, Severity.HIGH)] == ["CRIT", "A_RULE", "B_RULE"]
    assert [g.rule_id for g in top_blockers(grouped, Severity.HIGH, limit=1)] == ["CRIT"]
    blocking, other = split_by_threshold(grouped, Severity.CRITICAL)
    assert [g.rule_id for g in blocking] == ["CRIT"]
    assert [g.rule_id for g in other] == ["A_RULE", "B_RULE", "LOW_RULE"]


def _result(violations, threshold=Severity.HIGH):
    return create_scan_result(
        violations,
        ScanStatistics(files_scanned=3),
        target_directory="/srv/app",
        environment="prod",
        profile=ScanProfile.ALL,
        threshold=threshold,
        scanned_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def test_scan_result_counts_every_severity():
    result = _result(VIOLATIONS)
    assert result.summary.to_dict() == {"CRITICAL": 1, "HIGH": 4, "MEDIUM": 0, "LOW": 1, "INFO": 0}
    assert result.summary.total == len(VIOLATIONS)
    assert result.max_severity == Severity.CRITICAL
    assert result.failed


def test_empty_result_passes_with_info_max():
    result = _result([])
    assert result.summary.as_rows() == [(severity.value, 0) for severity in SEVERITY_ORDER]
    assert result.max_severity == Severity.INFO
    assert result.passed
    assert result.grouped == ()


@pytest.mark.parametrize("present", list(Severity))
def test_threshold_decision_is_monotonic(present):
    violations = [_violation("R", present)]
    ordered = sorted(Severity, key=lambda severity: severity.level)
    decisions = [has_violations_above_threshold(violations, threshold) for threshold in ordered]

    assert decisions == [threshold.level <= present.level for threshold in ordered]
    # once false for some threshold, stays false for every higher one
    assert decisions == sorted(decisions, reverse=True)
