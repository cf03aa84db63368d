from .employee import Employee
from .registry import EmployeeRegistry

__all__ = [
    "Employee",
    "EmployeeRegistry",
]
