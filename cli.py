#!/usr/bin/env python3
"""
CLI interface for drivetext.

Usage:
    drivetext run [--output-dir DIR] [--concurrency N] [--folder ID]
    drivetext extract <file_id>
    drivetext types

Prints a JSON report on stdout; progress goes to stderr via logging.
"""

import argparse
import asyncio
import json
import sys

from config import load_settings
from extractors.registry import get_extractor, supported_mime_types
from logging_config import configure_logging
from models import DriveTextError, OutcomeStatus
from pipeline import ExtractionOrchestrator, run_extraction
from workspace import OutputWriter


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2))


def cmd_run(args: argparse.Namespace) -> int:
    """Extract every supported file in the account."""
    settings = load_settings(
        output_dir=args.output_dir,
        max_concurrency=args.concurrency,
        page_size=args.page_size,
        max_pages=args.max_pages,
        folder_id=args.folder,
        log_level=args.log_level,
    )
    configure_logging(settings.log_level)

    try:
        report = asyncio.run(run_extraction(settings))
    except DriveTextError as e:
        _print_json(e.to_dict())
        return 1

    _print_json(report.to_dict())
    return 0


def cmd_extract(args: argparse.Namespace) -> int:
    """Extract one file by ID."""
    settings = load_settings(output_dir=args.output_dir, log_level=args.log_level)
    configure_logging(settings.log_level)

    orchestrator = ExtractionOrchestrator(OutputWriter(settings.output_dir))
    outcome = asyncio.run(orchestrator.extract_by_id(args.file_id))

    _print_json(outcome.to_dict())
    return 1 if outcome.status is OutcomeStatus.FAILED else 0


def cmd_types(args: argparse.Namespace) -> int:
    """List supported MIME types and where their output goes."""
    rows = []
    for mime_type in sorted(supported_mime_types()):
        extractor = get_extractor(mime_type)
        rows.append({
            "mimeType": mime_type,
            "category": extractor.category.value,
            "fetch": extractor.encoding.value,
            "output_dir": extractor.category.output_dir,
        })
    _print_json(rows)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract plain text from Google Drive files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    drivetext run
    drivetext run --output-dir /tmp/out --concurrency 8
    drivetext run --folder 1AbCdEfGh --max-pages 2
    drivetext extract 1abc123def456
    drivetext types
""",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO, or DRIVETEXT_LOG_LEVEL)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # run
    run_p = subparsers.add_parser("run", help="Extract all supported files")
    run_p.add_argument("--output-dir", help="Base output directory (default: saved-outputs)")
    run_p.add_argument("--concurrency", type=int, help="Files processed at once (default: 4)")
    run_p.add_argument("--page-size", type=int, help="Files per listing page (default: 100)")
    run_p.add_argument("--max-pages", type=int, help="Stop listing after this many pages")
    run_p.add_argument("--folder", help="Only files directly inside this folder ID")
    run_p.set_defaults(func=cmd_run)

    # extract
    extract_p = subparsers.add_parser("extract", help="Extract a single file")
    extract_p.add_argument("file_id", help="Drive file ID")
    extract_p.add_argument("--output-dir", help="Base output directory (default: saved-outputs)")
    extract_p.set_defaults(func=cmd_extract)

    # types
    types_p = subparsers.add_parser("types", help="List supported MIME types")
    types_p.set_defaults(func=cmd_types)

    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        sys.exit(args.func(args))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
