from concurrent.futures import ThreadPoolExecutor

import pytest

from org_analysis.data.readers import parse_employees
from org_analysis.hierarchy.builder import build_hierarchy
from org_analysis.metrics.engine import MetricEngine
from org_analysis.state.registry import EmployeeRegistry

HEADER = "Id,firstName,lastName,salary,managerId"

SAMPLE_LINES = [
    "123,Joe,Doe,60000,",
    "124,Martin,Chekov,45000,123",
    "125,Bob,Ronstad,47000,123",
    "300,Alice,Hasacat,50000,124",
    "305,Brett,Hardleaf,34000,300",
]

# 1 is the root, 7 sits six managers down
CHAIN_LINES = [f"{i},First{i},Last{i},50000,{i - 1 if i > 1 else ''}" for i in range(1, 8)]


def linked_registry(lines):
    registry = EmployeeRegistry.from_mapping(parse_employees(lines))
    build_hierarchy(registry)
    return registry


@pytest.fixture
def sample_lines():
    return list(SAMPLE_LINES)


@pytest.fixture
def chain_lines():
    return list(CHAIN_LINES)


@pytest.fixture
def sample_registry(sample_lines):
    return linked_registry(sample_lines)


@pytest.fixture
def sample_engine(sample_registry):
    return MetricEngine(sample_registry)


@pytest.fixture
def executor():
    with ThreadPoolExecutor(max_workers=4) as pool:
        yield pool


@pytest.fixture
def write_roster(tmp_path):
    """Write a roster file (header + lines) and return its path."""
    def _write(lines, name="employees.csv", header=HEADER):
        path = tmp_path / name
        content = "\n".join([header] + list(lines)) + "\n"
        path.write_text(content, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def chain_registry(chain_lines):
    return linked_registry(chain_lines)


@pytest.fixture
def make_registry():
    """Parse and link arbitrary roster lines."""
    return linked_registry
