# org_analysis/metrics/engine.py
"""
Derived per-employee metrics over a linked EmployeeRegistry.

The engine is a computation layer kept apart from the Employee entity. Each
metric is computed at most once per employee and cached by identifier; the
registry must not be re-linked while an engine is in use.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Dict, List

import pandas as pd

from org_analysis.state.registry import EmployeeRegistry
from org_analysis.utils.columns import (
    AVG_SUBORDINATE_SALARY,
    DIRECT_REPORT_COUNT,
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
    METRIC_COLS,
    SALARY_DEFICIT,
    SALARY_EXCESS,
)

from logging_config import DEBUG_LOGGER

logger = logging.getLogger(__name__)
debug_logger = logging.getLogger(DEBUG_LOGGER)

# Pay policy, relative to the average salary of a manager's direct reports
MIN_SALARY_MULTIPLIER = 1.2
MAX_SALARY_MULTIPLIER = 1.5
# Most managers allowed between an employee and the top of the organization
MAX_REPORTING_DEPTH = 4


class HierarchyCycleError(Exception):
    """Raised when following manager links from an employee loops back on itself."""

    def __init__(self, cycle: List[int]):
        self.cycle = cycle
        path = " -> ".join(str(i) for i in cycle + cycle[:1])
        super().__init__(f"Management cycle detected: {path}")


@dataclass(frozen=True)
class EmployeeMetrics:
    """Snapshot of every derived metric for one employee."""
    employee_id: int
    first_name: str
    last_name: str
    salary: float
    direct_report_count: int
    average_subordinate_salary: float
    expected_min_salary: float
    expected_max_salary: float
    salary_deficit: float
    salary_excess: float
    is_underpaid: bool
    is_overpaid: bool
    manager_depth: int
    excess_manager_count: int
    has_long_reporting_line: bool


class MetricEngine:
    """Memoized salary-band and reporting-depth metrics for a linked registry."""

    def __init__(self, registry: EmployeeRegistry):
        if not registry.is_linked:
            logger.warning("MetricEngine created over a registry that has not been linked")
        self.registry = registry
        self._avg_salary_cache: Dict[int, float] = {}
        self._depth_cache: Dict[int, int] = {}

    def _require(self, employee_id: int):
        employee = self.registry.get(employee_id)
        if employee is None:
            raise KeyError(employee_id)
        return employee

    # --- Salary band ---

    def has_direct_reports(self, employee_id: int) -> bool:
        self._require(employee_id)
        return bool(self.registry.direct_report_ids(employee_id))

    def average_subordinate_salary(self, employee_id: int) -> float:
        """Mean salary of immediate direct reports, 0.0 when there are none."""
        cached = self._avg_salary_cache.get(employee_id)
        if cached is not None:
            return cached

        self._require(employee_id)
        reports = self.registry.direct_reports(employee_id)
        if not reports:
            average = 0.0
        else:
            average = sum(r.salary for r in reports) / len(reports)
        self._avg_salary_cache[employee_id] = average
        return average

    def expected_min_salary(self, employee_id: int) -> float:
        return self.average_subordinate_salary(employee_id) * MIN_SALARY_MULTIPLIER

    def expected_max_salary(self, employee_id: int) -> float:
        return self.average_subordinate_salary(employee_id) * MAX_SALARY_MULTIPLIER

    def is_underpaid(self, employee_id: int) -> bool:
        employee = self._require(employee_id)
        return self.has_direct_reports(employee_id) and employee.salary < self.expected_min_salary(employee_id)

    def is_overpaid(self, employee_id: int) -> bool:
        employee = self._require(employee_id)
        return self.has_direct_reports(employee_id) and employee.salary > self.expected_max_salary(employee_id)

    def salary_deficit(self, employee_id: int) -> float:
        """Shortfall below the expected minimum. Only meaningful when underpaid."""
        return self.expected_min_salary(employee_id) - self._require(employee_id).salary

    def salary_excess(self, employee_id: int) -> float:
        """Amount above the expected maximum. Only meaningful when overpaid."""
        return self._require(employee_id).salary - self.expected_max_salary(employee_id)

    # --- Reporting line ---

    def manager_depth(self, employee_id: int) -> int:
        """
        Number of managers between the employee and the top of its chain.

        Walks up the manager links until it reaches a root or an employee whose
        depth is already cached, then fills the cache for the whole walked path.

        Raises:
            KeyError: If the employee is not in the registry.
            HierarchyCycleError: If the walk revisits an employee.
        """
        cached = self._depth_cache.get(employee_id)
        if cached is not None:
            return cached
        self._require(employee_id)

        path: List[int] = []
        position: Dict[int, int] = {}
        current = employee_id
        base = 0
        while True:
            if current in self._depth_cache:
                base = self._depth_cache[current]
                break
            if current in position:
                debug_logger.debug(f"Depth walk from {employee_id} revisited {current}; walked path {path}")
                raise HierarchyCycleError(path[position[current]:])
            position[current] = len(path)
            path.append(current)
            manager_id = self.registry.manager_id_of(current)
            if manager_id is None:
                base = -1
                break
            current = manager_id

        # path[-1] sits directly below the employee with depth `base`
        for offset, node in enumerate(reversed(path), start=1):
            self._depth_cache[node] = base + offset
        return self._depth_cache[employee_id]

    def has_long_reporting_line(self, employee_id: int) -> bool:
        return self.manager_depth(employee_id) > MAX_REPORTING_DEPTH

    def excess_manager_count(self, employee_id: int) -> int:
        return self.manager_depth(employee_id) - MAX_REPORTING_DEPTH

    # --- Aggregates ---

    def metrics_for(self, employee_id: int) -> EmployeeMetrics:
        employee = self._require(employee_id)
        return EmployeeMetrics(
            employee_id=employee.employee_id,
            first_name=employee.first_name,
            last_name=employee.last_name,
            salary=employee.salary,
            direct_report_count=len(self.registry.direct_report_ids(employee_id)),
            average_subordinate_salary=self.average_subordinate_salary(employee_id),
            expected_min_salary=self.expected_min_salary(employee_id),
            expected_max_salary=self.expected_max_salary(employee_id),
            salary_deficit=self.salary_deficit(employee_id),
            salary_excess=self.salary_excess(employee_id),
            is_underpaid=self.is_underpaid(employee_id),
            is_overpaid=self.is_overpaid(employee_id),
            manager_depth=self.manager_depth(employee_id),
            excess_manager_count=self.excess_manager_count(employee_id),
            has_long_reporting_line=self.has_long_reporting_line(employee_id),
        )

    def compute_all(self) -> pd.DataFrame:
        """
        Metrics for every employee as a DataFrame sorted by employee id.

        Columns follow ``METRIC_COLS``. An empty registry yields an empty frame
        with the same columns and dtypes.
        """
        rows = [asdict(self.metrics_for(i)) for i in sorted(self.registry.ids())]
        df = pd.DataFrame(rows, columns=METRIC_COLS)
        df = df.astype({
            EMP_ID: "int64",
            EMP_FIRST_NAME: "object",
            EMP_LAST_NAME: "object",
            EMP_SALARY: "float64",
            DIRECT_REPORT_COUNT: "int64",
            AVG_SUBORDINATE_SALARY: "float64",
            EXPECTED_MIN_SALARY: "float64",
            EXPECTED_MAX_SALARY: "float64",
            SALARY_DEFICIT: "float64",
            SALARY_EXCESS: "float64",
            IS_UNDERPAID: "bool",
            IS_OVERPAID: "bool",
            MANAGER_DEPTH: "int64",
            EXCESS_MANAGER_COUNT: "int64",
            HAS_LONG_REPORTING_LINE: "bool",
        })
        logger.debug(f"Computed metrics for {len(df)} employees")
        return df
