# org_analysis/state/registry.py
"""
In-memory arena of employees for a single analysis run.

The registry owns every :class:`Employee` and the manager / direct-report
relations between them. Relations are stored as identifiers and resolved
through the registry on lookup, so no entity holds a reference to another.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Mapping, Optional

from org_analysis.state.employee import Employee

logger = logging.getLogger(__name__)


class EmployeeRegistry:
    """Employees keyed by identifier, plus the links between them."""

    def __init__(self, employees: Optional[Iterable[Employee]] = None):
        self._employees: Dict[int, Employee] = {}
        self._manager_of: Dict[int, int] = {}
        self._direct_reports: Dict[int, List[int]] = {}
        self.is_linked = False
        for employee in employees or ():
            self.insert(employee)

    @classmethod
    def from_mapping(cls, employees_by_id: Mapping[int, Employee]) -> "EmployeeRegistry":
        return cls(employees_by_id.values())

    # --- Storage ---

    def insert(self, employee: Employee) -> None:
        """Store ``employee``, replacing any earlier entry with the same id."""
        if employee.employee_id in self._employees:
            logger.debug(f"Overwriting employee {employee.employee_id} (last write wins)")
        self._employees[employee.employee_id] = employee

    def get(self, employee_id: int) -> Optional[Employee]:
        return self._employees.get(employee_id)

    def all(self) -> List[Employee]:
        return list(self._employees.values())

    def ids(self) -> List[int]:
        return list(self._employees.keys())

    def __len__(self) -> int:
        return len(self._employees)

    def __contains__(self, employee_id: object) -> bool:
        return employee_id in self._employees

    def __iter__(self) -> Iterator[Employee]:
        return iter(self._employees.values())

    # --- Links ---

    def link(self, employee_id: int, manager_id: int) -> None:
        """
        Record that ``employee_id`` reports to ``manager_id``.

        Both ids must already be stored. Linking the same pair twice is a no-op,
        so an employee appears at most once in a direct-report list.

        Raises:
            KeyError: If either id is not in the registry.
        """
        if employee_id not in self._employees:
            raise KeyError(employee_id)
        if manager_id not in self._employees:
            raise KeyError(manager_id)

        current = self._manager_of.get(employee_id)
        if current == manager_id:
            return
        if current is not None:
            self._direct_reports[current].remove(employee_id)

        self._manager_of[employee_id] = manager_id
        self._direct_reports.setdefault(manager_id, []).append(employee_id)

    def manager_id_of(self, employee_id: int) -> Optional[int]:
        """Resolved manager id, or None when the employee has no (resolvable) manager."""
        return self._manager_of.get(employee_id)

    def direct_report_ids(self, employee_id: int) -> List[int]:
        return list(self._direct_reports.get(employee_id, ()))

    def direct_reports(self, employee_id: int) -> List[Employee]:
        return [self._employees[i] for i in self._direct_reports.get(employee_id, ())]

    def roots(self) -> List[Employee]:
        """Employees without a resolved manager."""
        return [e for e in self._employees.values() if e.employee_id not in self._manager_of]

