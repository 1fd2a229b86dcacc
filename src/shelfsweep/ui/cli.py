from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from shelfsweep.app import (
    add_record,
    cleanup_duplicates,
    diagnose,
    fix_catalog_issues,
    scan_duplicates,
)
from shelfsweep.config import ConfigurationError, configure_logging, get_detection_config
from shelfsweep.domain.model import RecordKind

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from shelfsweep.domain.reconciliation import NormalizationPolicy

log = logging.getLogger(__name__)

_KIND_CHOICES = [kind.value for kind in RecordKind]
_POLICY_COMMANDS = frozenset({"scan", "cleanup", "fix"})


def _add_policy_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--case-sensitive",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Compare keys case-sensitively (defaults to config)",
    )
    parser.add_argument(
        "--trim-whitespace",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Strip leading/trailing whitespace before comparing (defaults to config)",
    )
    parser.add_argument(
        "--ignore-empty",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Skip records whose key is empty after normalisation (defaults to config)",
    )
    parser.add_argument(
        "--min-duplicates",
        type=int,
        default=None,
        help="Minimum group size reported as duplicates (defaults to config)",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Find and clean up duplicate catalog records")
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan = subparsers.add_parser("scan", help="Report duplicate records of one kind")
    scan.add_argument("kind", choices=_KIND_CHOICES, help="Record kind to scan")
    scan.add_argument(
        "--category",
        type=str,
        help="Only scan products filed under this category",
    )
    _add_policy_arguments(scan)

    cleanup = subparsers.add_parser(
        "cleanup",
        help="Merge duplicate records into the first-seen one",
    )
    cleanup.add_argument("kind", choices=_KIND_CHOICES, help="Record kind to clean up")
    cleanup.add_argument(
        "--category",
        type=str,
        help="Only clean up products filed under this category",
    )
    _add_policy_arguments(cleanup)

    subparsers.add_parser("diagnose", help="Summarise duplicates and orphaned records")
    fix = subparsers.add_parser(
        "fix",
        help="Merge duplicate categories and tags, then delete empty ones",
    )
    _add_policy_arguments(fix)

    add = subparsers.add_parser("add", help="Add a record to the catalog")
    add.add_argument("kind", choices=_KIND_CHOICES, help="Record kind to create")
    add.add_argument("name", type=str, help="Display name of the record")
    add.add_argument("--category", type=str, help="Category for a new product")
    add.add_argument(
        "--tag",
        dest="tags",
        action="append",
        default=[],
        help="Tag for a new product (repeatable)",
    )

    return parser.parse_args(list(argv))


def _build_policy(args: argparse.Namespace) -> NormalizationPolicy:
    config = get_detection_config()
    policy = config.to_policy()
    overrides: dict[str, object] = {}
    if args.case_sensitive is not None:
        overrides["case_sensitive"] = args.case_sensitive
    if args.trim_whitespace is not None:
        overrides["trim_whitespace"] = args.trim_whitespace
    if args.ignore_empty is not None:
        overrides["ignore_empty"] = args.ignore_empty
    if args.min_duplicates is not None:
        overrides["minimum_duplicate_count"] = args.min_duplicates
    if not overrides:
        return policy
    return policy.with_overrides(**overrides)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    try:
        configure_logging()
    except ConfigurationError:
        configure_logging(level=logging.INFO)
        log.exception("CLI validation error")
        sys.exit(2)
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        policy = (
            _build_policy(parsed_args) if parsed_args.command in _POLICY_COMMANDS else None
        )
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "scan":
            result = scan_duplicates(
                RecordKind(parsed_args.kind),
                category_name=parsed_args.category,
                policy=policy,
            )
            log.info("%s", result.summary)
            for group in result.duplicates:
                log.info("  %r: %s records", group.key, group.count)
            if result.diagnostic is not None:
                log.error("Scan incomplete: %s", result.diagnostic)
                sys.exit(1)
        elif parsed_args.command == "cleanup":
            outcome = cleanup_duplicates(
                RecordKind(parsed_args.kind),
                category_name=parsed_args.category,
                policy=policy,
            )
            log.info("%s", outcome.summary)
            for error in outcome.errors:
                log.error("  %s", error)
            if not outcome.succeeded:
                sys.exit(1)
        elif parsed_args.command == "diagnose":
            report = diagnose()
            log.info("%s", report.summary)
            for diagnostic in report.diagnostics:
                log.error("  %s", diagnostic)
            if report.diagnostics:
                sys.exit(1)
        elif parsed_args.command == "fix":
            fix_outcome = fix_catalog_issues(policy=policy)
            log.info("%s", fix_outcome.summary)
            for error in fix_outcome.errors:
                log.error("  %s", error)
            if not fix_outcome.succeeded:
                sys.exit(1)
        elif parsed_args.command == "add":
            record = add_record(
                RecordKind(parsed_args.kind),
                parsed_args.name,
                category_name=parsed_args.category,
                tag_names=parsed_args.tags,
            )
            log.info("Created %s %s", record.kind.value, record.id)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
