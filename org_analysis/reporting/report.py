# org_analysis/reporting/report.py
"""
Renders the organizational compliance report from computed metrics.
"""

import logging
import sys
from typing import Iterable, List, Optional, TextIO

import pandas as pd

from org_analysis.metrics.engine import MetricEngine
from org_analysis.state.registry import EmployeeRegistry
from org_analysis.utils.columns import (
    EMP_FIRST_NAME,
    EMP_ID,
    EMP_LAST_NAME,
    EMP_SALARY,
    EXCESS_MANAGER_COUNT,
    EXPECTED_MAX_SALARY,
    EXPECTED_MIN_SALARY,
    HAS_LONG_REPORTING_LINE,
    IS_OVERPAID,
    IS_UNDERPAID,
    MANAGER_DEPTH,
    SALARY_DEFICIT,
    SALARY_EXCESS,
)

logger = logging.getLogger(__name__)

REPORT_TITLE = "ORGANIZATIONAL ANALYSIS REPORT"
END_MARKER = "END OF REPORT"


def format_money(amount: float) -> str:
    """Thousands separators and two decimals, e.g. 60000 -> '60,000.00'."""
    return f"{amount:,.2f}"


def _heading(title: str, underline: str) -> List[str]:
    return [title, underline]


def _underpaid_lines(metrics: pd.DataFrame) -> List[str]:
    flagged = metrics[metrics[IS_UNDERPAID]]
    if flagged.empty:
        return ["No underpaid managers found."]
    return [
        f"{row[EMP_FIRST_NAME]} {row[EMP_LAST_NAME]} (ID: {row[EMP_ID]}) is underpaid by "
        f"${format_money(row[SALARY_DEFICIT])}. Current salary: ${format_money(row[EMP_SALARY])}, "
        f"required minimum: ${format_money(row[EXPECTED_MIN_SALARY])}."
        for _, row in flagged.iterrows()
    ]


def _overpaid_lines(metrics: pd.DataFrame) -> List[str]:
    flagged = metrics[metrics[IS_OVERPAID]]
    if flagged.empty:
        return ["No overpaid managers found."]
    return [
        f"{row[EMP_FIRST_NAME]} {row[EMP_LAST_NAME]} (ID: {row[EMP_ID]}) is overpaid by "
        f"${format_money(row[SALARY_EXCESS])}. Current salary: ${format_money(row[EMP_SALARY])}, "
        f"maximum allowed: ${format_money(row[EXPECTED_MAX_SALARY])}."
        for _, row in flagged.iterrows()
    ]


def _long_line_lines(metrics: pd.DataFrame) -> List[str]:
    flagged = metrics[metrics[HAS_LONG_REPORTING_LINE]]
    if flagged.empty:
        return ["No employees with excessively long reporting lines found."]
    return [
        f"{row[EMP_FIRST_NAME]} {row[EMP_LAST_NAME]} (ID: {row[EMP_ID]}) has a reporting line "
        f"that is too long by {row[EXCESS_MANAGER_COUNT]} managers. "
        f"Current: {row[MANAGER_DEPTH]} managers in chain."
        for _, row in flagged.iterrows()
    ]


def generate_report(
    registry: EmployeeRegistry,
    engine: MetricEngine,
    metrics: Optional[pd.DataFrame] = None,
) -> List[str]:
    """
    Builds the three-section compliance report.

    Args:
        registry: Linked roster.
        engine: Metric engine over ``registry``.
        metrics: Precomputed ``engine.compute_all()`` output, computed here if None.

    Returns:
        Report lines in print order. Findings within a section are ordered by
        employee id.
    """
    if metrics is None:
        metrics = engine.compute_all()
    if len(metrics) != len(registry):
        logger.warning(
            f"Metrics frame has {len(metrics)} rows but registry holds {len(registry)} employees"
        )

    underpaid = _underpaid_lines(metrics)
    overpaid = _overpaid_lines(metrics)
    long_lines = _long_line_lines(metrics)
    logger.info(
        f"Report findings: {int(metrics[IS_UNDERPAID].sum())} underpaid, "
        f"{int(metrics[IS_OVERPAID].sum())} overpaid, "
        f"{int(metrics[HAS_LONG_REPORTING_LINE].sum())} long reporting line(s)"
    )

    lines: List[str] = []
    lines += _heading(REPORT_TITLE, "=" * 27)
    lines.append("")
    lines += _heading("1. UNDERPAID MANAGERS", "-" * 19)
    lines += underpaid
    lines.append("")
    lines += _heading("2. OVERPAID MANAGERS", "-" * 18)
    lines += overpaid
    lines.append("")
    lines += _heading("3. EMPLOYEES WITH LONG REPORTING LINES", "-" * 37)
    lines += long_lines
    lines.append("")
    lines.append(END_MARKER)
    return lines


def write_report(lines: Iterable[str], stream: Optional[TextIO] = None) -> None:
    """Write report lines to ``stream`` (stdout by default), one per line."""
    if stream is None:
        stream = sys.stdout
    for line in lines:
        stream.write(f"{line}\n")
    stream.flush()
