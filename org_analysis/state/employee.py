# org_analysis/state/employee.py
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """A single roster entry.

    Manager and direct-report relations are not stored here; the
    :class:`~org_analysis.state.registry.EmployeeRegistry` resolves them by
    identifier.

    Args:
        employee_id: Unique, non-negative identifier
        first_name: Given name
        last_name: Family name
        salary: Annual salary (non-negative)
        manager_id: Identifier of the manager, None for the organizational root
    """
    employee_id: int
    first_name: str
    last_name: str
    salary: float
    manager_id: Optional[int] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def has_manager_reference(self) -> bool:
        return self.manager_id is not None

    def __str__(self) -> str:
        return f"Employee(id={self.employee_id}, name='{self.full_name}', salary={self.salary})"
