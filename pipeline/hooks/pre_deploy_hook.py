"""CodePipeline gate that blocks deployment on a failing prod-analyzer report."""

from __future__ import annotations

import json
import os
import tempfile
import zipfile

import boto3


REPORT_PATH = os.environ.get("REPORT_PATH", "artifacts/prod-analyzer.json")
FAILURE_GUIDE_URL = os.environ.get(
    "GUIDE_URL",
    "https://owasp.org/Top10/A05_2021-Security_Misconfiguration/",
)

LEVELS = {"INFO": 1, "LOW": 2, "MEDIUM": 3, "HIGH": 4, "CRITICAL": 5}


def _extract_report(job_data: dict, target_path: str) -> dict:
    credentials = job_data["artifactCredentials"]
    session = boto3.Session(
        aws_access_key_id=credentials["accessKeyId"],
        aws_secret_access_key=credentials["secretAccessKey"],
        aws_session_token=credentials["sessionToken"],
        region_name=os.environ.get("AWS_REGION"),
    )
    s3_client = session.client("s3")

    artifact = job_data["inputArtifacts"][0]
    bucket = artifact["location"]["s3Location"]["bucketName"]
    key = artifact["location"]["s3Location"]["objectKey"]

    with tempfile.NamedTemporaryFile() as tmp_file:
        s3_client.download_file(bucket, key, tmp_file.name)
        with zipfile.ZipFile(tmp_file.name) as zipped:
            with zipped.open(target_path) as report_file:
                return json.loads(report_file.read().decode("utf-8"))


def top_blockers(report: dict, limit: int = 5) -> list[str]:
    """Blocking groups in the order the report already carries them."""

    threshold = LEVELS.get(report.get("threshold", "HIGH"), LEVELS["HIGH"])
    highlights = []
    for group in report.get("groupedViolations", []):
        if LEVELS.get(group.get("severity"), 0) < threshold:
            continue
        first = (group.get("occurrences") or [{}])[0]
        location = first.get("file", "?")
        if first.get("line") is not None:
            location += f":{first['line']}"
        highlights.append(f"[{group.get('severity')}] {group.get('ruleId')} x{group.get('count')} -> {location}")
        if len(highlights) >= limit:
            break
    return highlights


def build_message(report: dict) -> str:
    summary = report.get("summary", {})
    lines = [
        "prod-analyzer gate (pre-deploy hook)",
        f"Status: {report.get('status')} (threshold: {report.get('threshold')})",
        f"Violations: {summary.get('totalViolations', 0)}, max severity: {summary.get('maxSeverity')}",
    ]
    highlights = top_blockers(report)
    if highlights:
        lines.append("Blocking:")
        lines.extend(highlights)
    lines.append(f"Remediation: {FAILURE_GUIDE_URL}")
    return "\n".join(lines)


def handler(event, _context):
    job = event["CodePipeline.job"]
    job_id = job["id"]
    data = job["data"]

    client = boto3.client("codepipeline")

    try:
        report = _extract_report(data, REPORT_PATH)
    except Exception as exc:  # pylint: disable=broad-except
        client.put_job_failure_result(
            jobId=job_id,
            failureDetails={
                "type": "JobFailed",
                "message": f"Failed to read {REPORT_PATH}: {exc}",
            },
        )
        return

    message = build_message(report)
    if report.get("status") != "PASS":
        client.put_job_failure_result(
            jobId=job_id,
            failureDetails={
                "type": "JobFailed",
                "message": message[:5000],
            },
        )
        return

    client.put_job_success_result(jobId=job_id, executionDetails={"summary": message[:2048]})
