# org_analysis/data/readers.py
"""
Functions for reading the employee roster and parsing it into Employee records.

Parsing is a divide-and-conquer reduce: the line list is halved until each
range holds at most ``batch_size`` lines, every range is parsed on its own
into a partial ``id -> Employee`` dict, and the partial dicts are merged
pairwise. The merge is right-biased so a later line with a duplicate id
overwrites an earlier one, wherever the split points fall.
"""

import logging
import math
from concurrent.futures import Executor
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from org_analysis.state.employee import Employee

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10_000
FIELD_DELIMITER = ","
MIN_FIELDS = 4


class DataReadError(Exception):
    """Custom exception for errors during roster reading."""
    pass


class RecordParseError(ValueError):
    """Raised when a single roster line cannot be turned into an Employee."""
    pass


def read_roster_lines(file_path: Union[str, Path]) -> List[str]:
    """
    Reads a roster file and returns its data lines (the header line is dropped).

    Args:
        file_path: Path to the roster CSV.

    Returns:
        The lines after the header, without line terminators. An empty file or a
        header-only file yields an empty list.

    Raises:
        DataReadError: If the file does not exist or cannot be read.
    """
    if not isinstance(file_path, Path):
        file_path = Path(file_path)

    logger.info(f"Attempting to read roster from: {file_path}")

    if not file_path.exists():
        logger.error(f"Roster file not found: {file_path}")
        raise DataReadError(f"File does not exist: {file_path}")
    if not file_path.is_file():
        logger.error(f"Roster path is not a file: {file_path}")
        raise DataReadError(f"Not a file: {file_path}")

    try:
        with open(file_path, "r", encoding="utf-8-sig") as f:
            lines = f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error reading roster file {file_path}: {e}")
        raise DataReadError(f"Cannot read {file_path}: {e}") from e

    data_lines = lines[1:]
    logger.info(f"Read {len(data_lines)} data lines from {file_path}")
    return data_lines


def _parse_id(raw: str, field_name: str) -> int:
    # int() would also take "1_000" and non-ASCII digits
    digits = raw[1:] if raw.startswith(("+", "-")) else raw
    if not (digits.isascii() and digits.isdigit()):
        raise RecordParseError(f"{field_name} is not an integer: '{raw}'")
    value = int(raw)
    if value < 0:
        raise RecordParseError(f"{field_name} must be non-negative, got {value}")
    return value


def _parse_salary(raw: str) -> float:
    if not raw.isascii() or "_" in raw:
        raise RecordParseError(f"salary is not a number: '{raw}'")
    try:
        value = float(raw)
    except ValueError:
        raise RecordParseError(f"salary is not a number: '{raw}'") from None
    if not math.isfinite(value):
        raise RecordParseError(f"salary must be finite, got '{raw}'")
    if value < 0:
        raise RecordParseError(f"salary must be non-negative, got {value}")
    return value


def parse_employee_line(line: str) -> Employee:
    """
    Parses ``id,firstName,lastName,salary[,managerId]`` into an Employee.

    Fields are stripped of surrounding whitespace and anything past the fifth
    field is ignored. An empty manager field means the employee is the root.

    Raises:
        RecordParseError: If the line has too few fields or a bad numeric field.
    """
    parts = [p.strip() for p in line.split(FIELD_DELIMITER)]
    if len(parts) < MIN_FIELDS:
        raise RecordParseError(f"expected at least {MIN_FIELDS} fields, got {len(parts)}")

    employee_id = _parse_id(parts[0], "id")
    salary = _parse_salary(parts[3])
    manager_id = None
    if len(parts) > MIN_FIELDS and parts[4]:
        manager_id = _parse_id(parts[4], "manager id")

    return Employee(
        employee_id=employee_id,
        first_name=parts[1],
        last_name=parts[2],
        salary=salary,
        manager_id=manager_id,
    )


def parse_batch(lines: Sequence[str], start: int = 0, end: Optional[int] = None) -> Dict[int, Employee]:
    """
    Sequentially parses ``lines[start:end]`` into a partial id -> Employee map.

    Malformed lines are logged and skipped; they never abort the batch.
    """
    if end is None:
        end = len(lines)

    result: Dict[int, Employee] = {}
    skipped = 0
    for i in range(start, end):
        line = lines[i]
        try:
            employee = parse_employee_line(line)
        except RecordParseError as e:
            skipped += 1
            logger.warning(f"Error parsing line: {line} - {e}")
            continue
        result[employee.employee_id] = employee

    if skipped:
        logger.info(f"Skipped {skipped} malformed line(s) in range [{start}, {end})")
    return result


def merge_partials(left: Dict[int, Employee], right: Dict[int, Employee]) -> Dict[int, Employee]:
    """Right-biased merge: entries from ``right`` win on id collisions."""
    merged = dict(left)
    merged.update(right)
    return merged


def split_ranges(start: int, end: int, batch_size: int) -> List[Tuple[int, int]]:
    """Recursively halve ``[start, end)`` until every range holds at most ``batch_size`` items."""
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")
    if end - start <= batch_size:
        return [(start, end)]
    mid = start + (end - start) // 2
    return split_ranges(start, mid, batch_size) + split_ranges(mid, end, batch_size)


def _reduce_pairwise(partials: List[Dict[int, Employee]]) -> Dict[int, Employee]:
    if not partials:
        return {}
    while len(partials) > 1:
        reduced = []
        for i in range(0, len(partials) - 1, 2):
            reduced.append(merge_partials(partials[i], partials[i + 1]))
        if len(partials) % 2:
            reduced.append(partials[-1])
        partials = reduced
    return partials[0]


def parse_employees(
    lines: Sequence[str],
    batch_size: int = DEFAULT_BATCH_SIZE,
    executor: Optional[Executor] = None,
) -> Dict[int, Employee]:
    """
    Parses all roster lines into an id -> Employee map.

    Args:
        lines: Data lines (header already removed).
        batch_size: Largest number of lines parsed as one sequential unit.
        executor: Worker pool for the batches. Batches run inline when None.

    Returns:
        Every valid employee keyed by id; for duplicate ids the last line wins.
    """
    ranges = split_ranges(0, len(lines), batch_size)
    logger.debug(f"Parsing {len(lines)} lines in {len(ranges)} batch(es) of <= {batch_size}")

    if executor is None or len(ranges) == 1:
        partials = [parse_batch(lines, s, e) for s, e in ranges]
    else:
        # map() yields results in submission order, which the right-biased merge relies on
        partials = list(executor.map(lambda r: parse_batch(lines, r[0], r[1]), ranges))

    employees = _reduce_pairwise(partials)
    logger.info(f"Parsed {len(employees)} employees from {len(lines)} lines")
    return employees
