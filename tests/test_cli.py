import json
import logging
from pathlib import Path

import pytest

from prod_analyzer import cli
from prod_analyzer import scan as scan_module

SAMPLES = Path(__file__).resolve().parent.parent / "samples"


def test_cli_fails_on_vulnerable_sample(tmp_path, capsys):
    output_path = tmp_path / "report.json"

    exit_code = cli.main(
        [
            "--directory",
            str(SAMPLES / "vulnerable"),
            "--format",
            "json",
            "--out",
            str(output_path),
        ]
    )

    captured = capsys.readouterr()
    assert exit_code == cli.EXIT_VIOLATIONS_FOUND
    assert "Report written to" in captured.out
    data = json.loads(output_path.read_text(encoding="utf-8"))
    assert data["status"] == "FAIL"
    assert data["profile"] == "spring"
    rule_ids = {group["ruleId"] for group in data["groupedViolations"]}
    assert {
        "SPRING_PROFILE_DEV_ACTIVE",
        "HIBERNATE_DDL_AUTO_UNSAFE",
        "ACTUATOR_ENDPOINTS_EXPOSED",
        "DEBUG_LOGGING_ENABLED",
        "TLS_VERIFY_DISABLED",
        "POLICY:NODE_ENV_REQUIRED",
        "POLICY:NO_VERBOSE_LOGGING",
        "POLICY:NO_LOCALHOST",
    } <= rule_ids
    assert "NODE_ENV_NOT_PRODUCTION" not in rule_ids
    assert data["summary"]["policyRules"] == 3


def test_cli_passes_on_safe_sample(capsys):
    exit_code = cli.main(["-d", str(SAMPLES / "safe")])

    captured = capsys.readouterr()
    assert exit_code == cli.EXIT_SUCCESS
    assert "Scan Summary" in captured.out
    assert "STATUS: PASS" in captured.out
    assert "detected platform: spring-boot" in captured.out


def test_cli_threshold_controls_exit_code(tmp_path):
    (tmp_path / "application.properties").write_text("management.endpoint.health.show-details=always\n")

    assert cli.main(["-d", str(tmp_path), "--fail-on", "HIGH"]) == cli.EXIT_SUCCESS
    assert cli.main(["-d", str(tmp_path), "--fail-on", "medium"]) == cli.EXIT_VIOLATIONS_FOUND


@pytest.mark.parametrize(
    "argv",
    [
        ["--fail-on", "SEVERE"],
        ["--profile", "python"],
        ["--format", "xml"],
    ],
)
def test_cli_rejects_invalid_arguments(tmp_path, capsys, argv):
    exit_code = cli.main(["-d", str(tmp_path), *argv])

    assert exit_code == cli.EXIT_INVALID_ARGUMENTS
    assert "Error:" in capsys.readouterr().err


def test_cli_rejects_invalid_policy_before_scanning(tmp_path, capsys):
    (tmp_path / ".prod-analyzer-policy.yml").write_text("policies:\n  name: Broken\n")

    assert cli.main(["-d", str(tmp_path)]) == cli.EXIT_INVALID_ARGUMENTS
    assert "policies.version" in capsys.readouterr().err


def test_cli_missing_directory_is_a_generic_error(tmp_path, capsys):
    exit_code = cli.main(["-d", str(tmp_path / "missing")])

    assert exit_code == cli.EXIT_ERROR
    assert "Directory not found" in capsys.readouterr().err


def test_cli_reports_undecodable_policy_as_policy_error(tmp_path, capsys):
    (tmp_path / ".prod-analyzer-policy.yml").write_bytes(b"policies:\n  name: Caf\xe9\n")

    assert cli.main(["-d", str(tmp_path)]) == cli.EXIT_INVALID_ARGUMENTS
    assert "Cannot read policy file" in capsys.readouterr().err


def test_cli_unexpected_failure_exits_with_error(tmp_path, capsys, caplog, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(cli, "scan", explode)

    with caplog.at_level(logging.ERROR):
        exit_code = cli.main(["-d", str(tmp_path)])

    assert exit_code == cli.EXIT_ERROR
    assert "Error: boom" in capsys.readouterr().err
    assert "Unexpected failure" in caplog.text


def test_cli_looks_up_policy_once(tmp_path, capsys, monkeypatch):
    (tmp_path / "application.properties").write_text("server.port=8080\n")
    calls = []
    original = scan_module.find_and_load_policy

    def counting(directory):
        calls.append(directory)
        return original(directory)

    monkeypatch.setattr(scan_module, "find_and_load_policy", counting)

    assert cli.main(["-d", str(tmp_path)]) == cli.EXIT_SUCCESS
    assert len(calls) == 1


def test_cli_continues_past_malformed_files(tmp_path, capsys, caplog):
    (tmp_path / "broken.yml").write_text("spring: [unclosed\n  profiles: {\n")
    (tmp_path / "application.properties").write_text("spring.profiles.active=dev\nserver.port=8080\n")

    with caplog.at_level(logging.WARNING):
        exit_code = cli.main(["-d", str(tmp_path), "--format", "json"])

    data = json.loads(capsys.readouterr().out)
    assert exit_code == cli.EXIT_VIOLATIONS_FOUND
    assert data["summary"]["filesScanned"] == 2
    assert data["summary"]["filesFailed"] == 1
    assert data["summary"]["entriesEvaluated"] == 2
    assert [item["ruleId"] for item in data["violations"]] == ["SPRING_PROFILE_DEV_ACTIVE"]
    assert "broken.yml" in caplog.text


def test_cli_sarif_output(tmp_path, capsys):
    (tmp_path / ".env").write_text("NODE_TLS_REJECT_UNAUTHORIZED=0\n")

    exit_code = cli.main(["-d", str(tmp_path), "-p", "node", "--format", "SARIF"])

    sarif = json.loads(capsys.readouterr().out)
    assert exit_code == cli.EXIT_VIOLATIONS_FOUND
    [result] = sarif["runs"][0]["results"]
    assert result["ruleId"] == "TLS_VERIFY_DISABLED"
    assert result["level"] == "error"
    assert result["locations"][0]["physicalLocation"]["region"]["startLine"] == 1
