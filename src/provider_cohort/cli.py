"""Command-line interface for provider-cohort."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console

from provider_cohort import configure_logging
from provider_cohort.adapters.structlog_logger import (
    StructlogAuditLogger,
    configure_structlog,
)
from provider_cohort.config.loader import load_config
from provider_cohort.config.models import CohortConfig
from provider_cohort.errors import CohortError
from provider_cohort.pipeline.cohort_pipeline import create_pipeline
from provider_cohort.reporting.cohort_report import render_report

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="provider-cohort",
        description="Filter a provider registry extract and report cohort statistics",
    )
    parser.add_argument("input", help="Registry CSV file")
    parser.add_argument("--config", "-c", help="YAML configuration file")
    parser.add_argument("--profile", "-p", help="Profile overlay name")
    parser.add_argument("--output", "-o", help="Write the cohort extract to this CSV")
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit the audit trail as structured JSON events",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.profile and not args.config:
        parser.error("--profile requires --config")

    level = logging.DEBUG if args.verbose else logging.INFO
    configure_logging(level)

    audit_logger = None
    if args.json_logs:
        configure_structlog(use_json=True, log_level=level)
        audit_logger = StructlogAuditLogger()

    try:
        if args.config:
            config = load_config(args.config, profile=args.profile)
        else:
            config = CohortConfig()
        pipeline = create_pipeline(
            config, audit_logger=audit_logger, verbose=args.verbose
        )
        result = pipeline.run(args.input, extract_path=args.output)
    except (CohortError, FileNotFoundError) as e:
        console.print(f"[red]Error:[/red] {e}")
        return 2

    render_report(result.report, console)
    if "extract_path" in result.metadata:
        console.print(f"[green]Extract written:[/green] {result.metadata['extract_path']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
