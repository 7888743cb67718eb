"""Command-line entry point for the production config analyzer."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .errors import InvalidArgumentError, PolicyError, ProdAnalyzerError
from .license import LicenseTier, parse_license_tier
from .reporting import format_scan_result
from .result import ScanResult
from .scan import ScanOptions, create_scan_options, load_policy, scan

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_VIOLATIONS_FOUND = 1
EXIT_INVALID_ARGUMENTS = 2
EXIT_ERROR = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prod-analyzer",
        description="Scan application configuration for settings that are unsafe in production.",
    )
    parser.add_argument(
        "-d",
        "--directory",
        default=".",
        help="Directory to scan (defaults to the current directory).",
    )
    parser.add_argument(
        "-e",
        "--env",
        dest="environment",
        default="prod",
        help="Target environment label shown in reports.",
    )
    parser.add_argument(
        "-p",
        "--profile",
        default="spring",
        help="Rule profile: spring, node, dotnet or all.",
    )
    parser.add_argument(
        "-f",
        "--fail-on",
        default="HIGH",
        help="Lowest severity that fails the scan: INFO, LOW, MEDIUM, HIGH or CRITICAL.",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        default="console",
        help="Report format: console, json or sarif.",
    )
    parser.add_argument(
        "--policy",
        dest="policy_path",
        default=None,
        help="Policy file to apply instead of probing the scan directory.",
    )
    parser.add_argument(
        "--out",
        "--output",
        dest="output_path",
        default=None,
        help="Write the report to this path instead of stdout (e.g. artifacts/report.json).",
    )
    parser.add_argument(
        "--license-tier",
        default=LicenseTier.PRO.value,
        help=argparse.SUPPRESS,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show all details and debug logs.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_options(args: argparse.Namespace) -> ScanOptions:
    return create_scan_options(
        target_directory=args.directory,
        environment=args.environment,
        profile=args.profile,
        fail_on=args.fail_on,
        output_format=args.output_format,
        verbose=args.verbose,
        policy_path=args.policy_path,
        license_tier=parse_license_tier(args.license_tier),
    )


def write_output(result: ScanResult, options: ScanOptions, output_path: Optional[str]) -> None:
    payload = format_scan_result(result, options.output_format, options.license_tier, options.verbose)
    if output_path:
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(payload + "\n", encoding="utf-8")
        status = "FAIL" if result.failed else "PASS"
        print(f"{status}: {result.total_violations} violations. Report written to {output_path}")
    else:
        print(payload)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        options = build_options(args)
        policy = load_policy(options)
    except (InvalidArgumentError, PolicyError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INVALID_ARGUMENTS
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Unexpected failure while preparing the scan")
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR

    try:
        result = scan(options, policy=policy, policy_resolved=True)
        write_output(result, options, args.output_path)
    except (ProdAnalyzerError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Unexpected failure while scanning %s", options.target_directory)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR

    return EXIT_VIOLATIONS_FOUND if result.failed else EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
