from .readers import (
    DataReadError,
    RecordParseError,
    parse_employee_line,
    parse_employees,
    read_roster_lines,
)

__all__ = [
    "DataReadError",
    "RecordParseError",
    "parse_employee_line",
    "parse_employees",
    "read_roster_lines",
]
