"""Renderers for scan results."""

from __future__ import annotations

from ..license import LicenseTier
from ..result import ScanResult
from ..scan import OutputFormat
from .console import format_console
from .json_report import build_json_report, format_json
from .sarif import build_sarif_report, format_sarif


def format_scan_result(
    result: ScanResult,
    output_format: OutputFormat = OutputFormat.CONSOLE,
    tier: LicenseTier = LicenseTier.PRO,
    verbose: bool = False,
) -> str:
    if output_format == OutputFormat.JSON:
        return format_json(result, tier)
    if output_format == OutputFormat.SARIF:
        return format_sarif(result)
    return format_console(result, tier, verbose)


__all__ = [
    "build_json_report",
    "build_sarif_report",
    "format_console",
    "format_json",
    "format_sarif",
    "format_scan_result",
]
