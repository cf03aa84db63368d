from concurrent.futures import ThreadPoolExecutor

import pytest

from org_analysis.analysis import OrgAnalysisService
from org_analysis.config.models import AnalysisSettings
from org_analysis.data.readers import DataReadError
from org_analysis.metrics.engine import HierarchyCycleError


@pytest.fixture
def service():
    with OrgAnalysisService(AnalysisSettings(max_workers=2, batch_size=2)) as svc:
        yield svc


def test_analyze_file_sample(service, write_roster, sample_lines):
    result = service.analyze_file(write_roster(sample_lines))
    assert len(result.registry) == 5
    assert result.hierarchy.root_ids == [123]
    assert result.engine.is_underpaid(124)
    assert any("Martin Chekov (ID: 124) is underpaid" in line for line in result.report_lines)


def test_same_input_twice_gives_identical_report(service, write_roster, sample_lines, chain_lines):
    path = write_roster(sample_lines + chain_lines)
    first = service.analyze_from_csv(path)
    second = service.analyze_from_csv(path)
    assert first == second


def test_batch_size_does_not_change_report(write_roster, chain_lines, sample_lines):
    path = write_roster(sample_lines + chain_lines)
    reports = []
    for batch_size in (1, 3, 10_000):
        with OrgAnalysisService(AnalysisSettings(max_workers=3, batch_size=batch_size)) as svc:
            reports.append(svc.analyze_from_csv(path))
    assert reports[0] == reports[1] == reports[2]


def test_header_only_roster(service, write_roster):
    lines = service.analyze_from_csv(write_roster([]))
    assert "No underpaid managers found." in lines
    assert "No overpaid managers found." in lines
    assert "No employees with excessively long reporting lines found." in lines
    assert lines[-1] == "END OF REPORT"


def test_malformed_lines_are_skipped(service, write_roster, sample_lines):
    result = service.analyze_file(write_roster(sample_lines + ["oops", "7,X,Y,notanumber,"]))
    assert len(result.registry) == len(sample_lines)


def test_missing_file(service, tmp_path):
    with pytest.raises(DataReadError):
        service.analyze_file(tmp_path / "missing.csv")


def test_cycle_aborts_run(service):
    with pytest.raises(HierarchyCycleError):
        service.analyze_lines(["1,A,B,100,2", "2,C,D,100,1"])


def test_external_executor_is_not_shut_down(sample_lines):
    with ThreadPoolExecutor(max_workers=2) as pool:
        with OrgAnalysisService(executor=pool) as svc:
            svc.analyze_lines(sample_lines)
        # still usable after the service closed
        assert pool.submit(lambda: 42).result() == 42
