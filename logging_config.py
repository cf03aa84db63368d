"""
Structured logging configuration for the org-analysis project.

This module provides a centralized way to configure logging across the application
with different log levels and output files for different concerns.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import List, Optional, Set

# Define logger names for different concerns
ANALYSIS_LOGGER = "org_analysis.analysis"
PERFORMANCE_LOGGER = "org_analysis.performance"
DEBUG_LOGGER = "org_analysis.debug"
# Skipped-record diagnostics must always reach stderr
RECORD_LOGGER = "org_analysis.data.readers"

# Standard log format with module name and line number
LOG_FORMAT = "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_LOG_DIR = Path("output_dev/analysis_logs")
LOG_FILE_NAMES = (
    "analysis_events.log",
    "performance_metrics.log",
    "warnings_errors.log",
    "debug_detail.log",
    "combined.log",
)

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5

# Track if logging is already configured and log files
_LOGGING_CONFIGURED = False
_log_files_created: Set[Path] = set()
_installed_handlers: List[logging.Handler] = []


def clear_logs(log_dir: Path) -> None:
    """
    Clear all log files in the specified directory.

    Args:
        log_dir: Directory containing log files to clear
    """
    for name in LOG_FILE_NAMES:
        log_file = log_dir / name
        if log_file.exists():
            try:
                log_file.unlink()
            except OSError as e:
                print(f"Warning: Could not delete {log_file}: {e}", file=sys.stderr)


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
        mode="a",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    _log_files_created.add(path)
    _installed_handlers.append(handler)
    return handler


def _attach(logger_name: str, handler: logging.Handler, level: int) -> None:
    named = logging.getLogger(logger_name)
    for h in named.handlers[:]:
        named.removeHandler(h)
    named.setLevel(level)
    named.addHandler(handler)
    named.propagate = True  # Allow to bubble up to root


def setup_logging(
    log_dir: Path = DEFAULT_LOG_DIR,
    debug: bool = False,
    clear_existing: bool = True,
    level: Optional[str] = None,
) -> None:
    """
    Configure structured logging for the application.

    Creates separate log files for different concerns:
    - analysis_events.log: Analysis workflow events (resolved level+)
    - performance_metrics.log: Phase timings (resolved level+)
    - warnings_errors.log: Warnings and errors, including skipped roster lines (WARNING+)
    - debug_detail.log: Detailed debug information (DEBUG, only if debug=True)
    - combined.log: Combined log of all messages (INFO+)

    Warnings and errors are also echoed to stderr, which keeps stdout free for
    the report itself. Skipped-record warnings from RECORD_LOGGER reach stderr
    even when the level is ERROR or CRITICAL.

    Args:
        log_dir: Directory where log files will be stored
        debug: If True, enables debug logging and creates debug_detail.log
        clear_existing: If True, clears existing log files before starting
        level: Optional root level name; overridden to DEBUG when debug=True
    """
    global _LOGGING_CONFIGURED

    if _LOGGING_CONFIGURED:
        return

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    if clear_existing:
        clear_logs(log_dir)

    # Remove all handlers from the root logger before setup
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    if debug:
        resolved_level = logging.DEBUG
    else:
        resolved_level = getattr(logging, (level or "INFO").upper(), logging.INFO)
    root_logger.setLevel(resolved_level)
    logging.getLogger(RECORD_LOGGER).setLevel(min(resolved_level, logging.WARNING))

    # Formatters
    file_formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    console_formatter = logging.Formatter("%(levelname)-8s %(message)s")

    # Console handler (for warnings and above)
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logging.WARNING)
    console.setFormatter(console_formatter)
    root_logger.addHandler(console)
    _installed_handlers.append(console)

    root_logger.addHandler(_rotating_handler(log_dir / "combined.log", logging.INFO, file_formatter))
    root_logger.addHandler(
        _rotating_handler(log_dir / "warnings_errors.log", logging.WARNING, file_formatter)
    )

    _attach(
        ANALYSIS_LOGGER,
        _rotating_handler(log_dir / "analysis_events.log", resolved_level, file_formatter),
        resolved_level,
    )
    _attach(
        PERFORMANCE_LOGGER,
        _rotating_handler(log_dir / "performance_metrics.log", resolved_level, file_formatter),
        resolved_level,
    )

    if debug:
        _attach(
            DEBUG_LOGGER,
            _rotating_handler(log_dir / "debug_detail.log", logging.DEBUG, file_formatter),
            logging.DEBUG,
        )

    _LOGGING_CONFIGURED = True


def reset_logging() -> None:
    """Remove and close the handlers installed by setup_logging so it can run again."""
    global _LOGGING_CONFIGURED

    for name in (None, ANALYSIS_LOGGER, PERFORMANCE_LOGGER, DEBUG_LOGGER):
        named = logging.getLogger(name)
        for handler in named.handlers[:]:
            if handler in _installed_handlers:
                named.removeHandler(handler)
    for name in (ANALYSIS_LOGGER, PERFORMANCE_LOGGER, DEBUG_LOGGER, RECORD_LOGGER):
        logging.getLogger(name).setLevel(logging.NOTSET)
    for handler in _installed_handlers:
        handler.close()
    _installed_handlers.clear()
    _log_files_created.clear()
    _LOGGING_CONFIGURED = False

