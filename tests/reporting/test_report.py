import io

import pytest

from org_analysis.metrics.engine import MetricEngine
from org_analysis.reporting.report import END_MARKER, REPORT_TITLE, format_money, generate_report, write_report
from org_analysis.state.registry import EmployeeRegistry


@pytest.mark.parametrize(
    "amount, expected",
    [(0, "0.00"), (15000, "15,000.00"), (1234567.891, "1,234,567.89"), (-2.5, "-2.50")],
)
def test_format_money(amount, expected):
    assert format_money(amount) == expected


def test_sample_report(sample_registry, sample_engine):
    lines = generate_report(sample_registry, sample_engine)
    assert lines[0] == REPORT_TITLE
    assert lines[-1] == END_MARKER
    assert (
        "Martin Chekov (ID: 124) is underpaid by $15,000.00. "
        "Current salary: $45,000.00, required minimum: $60,000.00."
    ) in lines
    assert "No overpaid managers found." in lines
    assert "No employees with excessively long reporting lines found." in lines
    assert not any("Joe Doe" in line for line in lines)


def test_report_structure_for_empty_roster():
    reg = EmployeeRegistry()
    reg.is_linked = True
    lines = generate_report(reg, MetricEngine(reg))
    assert lines == [
        "ORGANIZATIONAL ANALYSIS REPORT",
        "===========================",
        "",
        "1. UNDERPAID MANAGERS",
        "-------------------",
        "No underpaid managers found.",
        "",
        "2. OVERPAID MANAGERS",
        "------------------",
        "No overpaid managers found.",
        "",
        "3. EMPLOYEES WITH LONG REPORTING LINES",
        "-------------------------------------",
        "No employees with excessively long reporting lines found.",
        "",
        "END OF REPORT",
    ]


def test_long_reporting_lines_listed_in_id_order(chain_registry):
    lines = generate_report(chain_registry, MetricEngine(chain_registry))
    long_lines = [line for line in lines if "reporting line that is too long" in line]
    assert long_lines == [
        "First6 Last6 (ID: 6) has a reporting line that is too long by 1 managers. "
        "Current: 5 managers in chain.",
        "First7 Last7 (ID: 7) has a reporting line that is too long by 2 managers. "
        "Current: 6 managers in chain.",
    ]


def test_overpaid_line(make_registry):
    reg = make_registry(["1,Big,Boss,200000,", "2,A,B,50000,1", "3,C,D,70000,1"])
    lines = generate_report(reg, MetricEngine(reg))
    assert (
        "Big Boss (ID: 1) is overpaid by $110,000.00. "
        "Current salary: $200,000.00, maximum allowed: $90,000.00."
    ) in lines
    assert "No underpaid managers found." in lines


def test_precomputed_metrics_are_used(sample_registry, sample_engine):
    metrics = sample_engine.compute_all()
    assert generate_report(sample_registry, sample_engine, metrics=metrics) == generate_report(
        sample_registry, sample_engine
    )


def test_write_report():
    buf = io.StringIO()
    write_report(["a", "", "b"], buf)
    assert buf.getvalue() == "a\n\nb\n"
