# org_analysis/cli.py
# Command-line interface entry point (argparse)
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import pandas as pd

from org_analysis.analysis import OrgAnalysisService
from org_analysis.config.loaders import ConfigLoadError, load_settings
from org_analysis.config.models import AnalysisSettings
from org_analysis.data.readers import DataReadError
from org_analysis.metrics.engine import HierarchyCycleError
from org_analysis.reporting.report import write_report

# Import logging configuration
from logging_config import setup_logging

# Get logger for this module
logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


class AnalysisArgumentParser(argparse.ArgumentParser):
    """ArgumentParser whose usage errors exit with EXIT_FAILURE instead of 2."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = AnalysisArgumentParser(
        prog="org-analysis",
        description="Flag underpaid/overpaid managers and long reporting lines in an employee roster.",
    )

    # Required arguments
    parser.add_argument(
        "csv_path",
        type=str,
        help="Path to the roster CSV (header line, then id,firstName,lastName,salary,managerId).",
    )

    # Optional arguments
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a YAML settings file."
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker pool size (default: number of CPUs)."
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Largest number of lines parsed per task (default: 10000)."
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default=None,
        help="Directory to store log files (default: output_dev/analysis_logs)"
    )

    return parser.parse_args(argv)


def resolve_settings(args: argparse.Namespace) -> AnalysisSettings:
    """Settings from the optional YAML file, with command-line options taking precedence."""
    settings = load_settings(args.config)
    return settings.with_overrides(
        max_workers=args.workers,
        batch_size=args.batch_size,
        log_dir=Path(args.log_dir) if args.log_dir else None,
        log_level="DEBUG" if args.debug else None,
    )


def initialize_logging(settings: AnalysisSettings, debug: bool = False) -> None:
    """Initialize the logging configuration.

    Args:
        settings: Resolved run settings (log directory and level)
        debug: Whether to enable debug logging
    """
    setup_logging(log_dir=settings.log_dir, debug=debug, level=settings.log_level)

    logger.info("Starting organizational analysis")
    logger.info(f"Command line arguments: {sys.argv}")
    logger.info(f"Python version: {sys.version}")
    logger.info(f"Pandas version: {pd.__version__}")

    if debug:
        logger.debug("Debug logging enabled")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the organizational analysis CLI."""
    args = parse_arguments(argv)

    try:
        settings = resolve_settings(args)
    except (ConfigLoadError, ValueError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        initialize_logging(settings, debug=args.debug)
    except OSError as e:
        print(f"Error initializing logging: {e}", file=sys.stderr)
        return EXIT_FAILURE

    logger.info(f"Starting analysis run with arguments: {vars(args)}")

    try:
        with OrgAnalysisService(settings) as service:
            report_lines = service.analyze_from_csv(args.csv_path)
    except (DataReadError, HierarchyCycleError) as e:
        print(f"Error processing employee data: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except Exception as e:
        logger.exception("Unexpected error during analysis")
        print(f"Error processing employee data: {e}", file=sys.stderr)
        return EXIT_FAILURE

    write_report(report_lines, sys.stdout)
    logger.info("Analysis finished successfully")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
