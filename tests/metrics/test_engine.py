import logging

import pytest

from org_analysis.metrics.engine import (
    MAX_REPORTING_DEPTH,
    EmployeeMetrics,
    HierarchyCycleError,
    MetricEngine,
)
from org_analysis.state.employee import Employee
from org_analysis.state.registry import EmployeeRegistry
from org_analysis.utils.columns import (
    EMP_ID,
    HAS_LONG_REPORTING_LINE,
    IS_OVERPAID,
    IS_UNDERPAID,
    MANAGER_DEPTH,
    METRIC_COLS,
)

from logging_config import DEBUG_LOGGER


def test_sample_average_and_band(sample_engine):
    eng = sample_engine
    assert eng.average_subordinate_salary(123) == pytest.approx(46000)
    assert eng.expected_min_salary(123) == pytest.approx(55200)
    assert eng.expected_max_salary(123) == pytest.approx(69000)
    assert eng.average_subordinate_salary(124) == pytest.approx(50000)
    assert eng.expected_min_salary(124) == pytest.approx(60000)
    assert eng.expected_max_salary(124) == pytest.approx(75000)


def test_sample_martin_underpaid_joe_not_flagged(sample_engine):
    eng = sample_engine
    assert eng.is_underpaid(124)
    assert eng.salary_deficit(124) == pytest.approx(15000)
    assert not eng.is_overpaid(124)
    # 60000 sits inside Joe's [55200, 69000] band
    assert not eng.is_underpaid(123)
    assert not eng.is_overpaid(123)
    # Alice: 50000 inside [40800, 51000]
    assert not eng.is_underpaid(300)
    assert not eng.is_overpaid(300)


def test_no_reports_means_zero_average_and_no_flags(sample_engine):
    for emp_id in (125, 305):
        assert sample_engine.average_subordinate_salary(emp_id) == 0.0
        assert not sample_engine.is_underpaid(emp_id)
        assert not sample_engine.is_overpaid(emp_id)


def test_zero_salary_ic_is_not_flagged(make_registry):
    eng = MetricEngine(make_registry(["1,A,B,0,"]))
    assert not eng.is_underpaid(1)
    assert not eng.is_overpaid(1)


def test_sample_depths(sample_engine):
    depths = {i: sample_engine.manager_depth(i) for i in (123, 124, 125, 300, 305)}
    assert depths == {123: 0, 124: 1, 125: 1, 300: 2, 305: 3}
    assert not any(sample_engine.has_long_reporting_line(i) for i in depths)


def test_chain_of_seven(chain_registry):
    eng = MetricEngine(chain_registry)
    assert eng.manager_depth(7) == 6
    assert eng.has_long_reporting_line(7)
    assert eng.excess_manager_count(7) == 2
    assert eng.manager_depth(6) == 5
    assert eng.excess_manager_count(6) == 1
    assert not eng.has_long_reporting_line(5)
    assert eng.manager_depth(5) == MAX_REPORTING_DEPTH


def test_depth_walk_fills_cache_for_whole_path(chain_registry):
    eng = MetricEngine(chain_registry)
    eng.manager_depth(7)
    assert eng._depth_cache == {i: i - 1 for i in range(1, 8)}


def test_depth_reuses_cached_ancestor(chain_registry):
    eng = MetricEngine(chain_registry)
    assert eng.manager_depth(4) == 3
    assert eng.manager_depth(7) == 6


def test_unresolved_manager_has_depth_zero(make_registry):
    eng = MetricEngine(make_registry(["1,A,B,10,999", "2,C,D,10,1"]))
    assert eng.manager_depth(1) == 0
    assert eng.manager_depth(2) == 1


def test_overpaid_and_mutual_exclusion(make_registry):
    eng = MetricEngine(make_registry(["1,Boss,X,200000,", "2,A,B,50000,1", "3,C,D,70000,1"]))
    # average 60000, band [72000, 90000]
    assert eng.is_overpaid(1)
    assert eng.salary_excess(1) == pytest.approx(110000)
    assert not eng.is_underpaid(1)


@pytest.mark.parametrize("salary", [0, 59999, 60000, 75000, 90000, 90001, 10**7])
def test_underpaid_and_overpaid_never_both(make_registry, salary):
    eng = MetricEngine(make_registry([f"1,M,X,{salary},", "2,A,B,50000,1"]))
    assert not (eng.is_underpaid(1) and eng.is_overpaid(1))


def test_band_boundaries_are_not_flagged(make_registry):
    eng = MetricEngine(make_registry(["1,M,X,60000,", "2,A,B,50000,1", "3,N,Y,75000,", "4,C,D,50000,3"]))
    assert not eng.is_underpaid(1)
    assert not eng.is_overpaid(3)


def test_average_is_memoized(sample_engine, monkeypatch):
    assert sample_engine.average_subordinate_salary(123) == pytest.approx(46000)

    def boom(_):
        raise AssertionError("direct reports looked up twice")

    monkeypatch.setattr(sample_engine.registry, "direct_reports", boom)
    assert sample_engine.average_subordinate_salary(123) == pytest.approx(46000)


def test_unknown_id_raises(sample_engine):
    with pytest.raises(KeyError):
        sample_engine.average_subordinate_salary(1)
    with pytest.raises(KeyError):
        sample_engine.manager_depth(1)
    with pytest.raises(KeyError):
        sample_engine.metrics_for(1)


def test_cycle_is_detected():
    reg = EmployeeRegistry([
        Employee(1, "A", "A", 1.0, 3),
        Employee(2, "B", "B", 1.0, 1),
        Employee(3, "C", "C", 1.0, 2),
        Employee(4, "D", "D", 1.0, 3),
    ])
    for emp_id, mgr in ((1, 3), (2, 1), (3, 2), (4, 3)):
        reg.link(emp_id, mgr)
    reg.is_linked = True
    eng = MetricEngine(reg)
    with pytest.raises(HierarchyCycleError) as excinfo:
        eng.manager_depth(4)
    assert sorted(excinfo.value.cycle) == [1, 2, 3]
    assert "cycle" in str(excinfo.value)


def test_self_managed_employee_is_a_cycle(make_registry):
    eng = MetricEngine(make_registry(["1,Self,Boss,100,1"]))
    with pytest.raises(HierarchyCycleError) as excinfo:
        eng.manager_depth(1)
    assert excinfo.value.cycle == [1]


def test_cycle_walk_is_logged_to_debug_logger(make_registry, caplog):
    caplog.set_level(logging.DEBUG, logger=DEBUG_LOGGER)
    eng = MetricEngine(make_registry(["1,Self,Boss,100,1"]))
    with pytest.raises(HierarchyCycleError):
        eng.manager_depth(1)
    records = [r for r in caplog.records if r.name == DEBUG_LOGGER]
    assert any("revisited 1" in r.getMessage() for r in records)


def test_metrics_for_snapshot(sample_engine):
    m = sample_engine.metrics_for(124)
    assert isinstance(m, EmployeeMetrics)
    assert m.direct_report_count == 1
    assert m.is_underpaid and not m.is_overpaid
    assert m.salary_deficit == pytest.approx(15000)
    assert m.manager_depth == 1
    assert m.excess_manager_count == 1 - MAX_REPORTING_DEPTH


def test_compute_all_frame(sample_engine):
    df = sample_engine.compute_all()
    assert list(df.columns) == METRIC_COLS
    assert df[EMP_ID].tolist() == [123, 124, 125, 300, 305]
    assert df.loc[df[IS_UNDERPAID], EMP_ID].tolist() == [124]
    assert not df[IS_OVERPAID].any()
    assert df[MANAGER_DEPTH].tolist() == [0, 1, 1, 2, 3]


def test_compute_all_empty_registry():
    reg = EmployeeRegistry()
    reg.is_linked = True
    df = MetricEngine(reg).compute_all()
    assert df.empty
    assert list(df.columns) == METRIC_COLS
    assert df[HAS_LONG_REPORTING_LINE].dtype == bool
