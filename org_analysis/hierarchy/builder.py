# org_analysis/hierarchy/builder.py
"""
Builds manager -> direct-report links inside an EmployeeRegistry.

Phase 1 groups employees by manager id. Chunks of the roster are grouped
independently (optionally on a worker pool) and the partial maps are merged
by list concatenation, so workers never share a mutable structure.

Phase 2 resolves each manager id against the registry and records the links.
It mutates direct-report lists, so it runs on the calling thread only.
"""

import logging
from collections import defaultdict
from concurrent.futures import Executor
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from org_analysis.state.employee import Employee
from org_analysis.state.registry import EmployeeRegistry

from logging_config import DEBUG_LOGGER

logger = logging.getLogger(__name__)
debug_logger = logging.getLogger(DEBUG_LOGGER)

DEFAULT_GROUPING_CHUNK_SIZE = 10_000


@dataclass(frozen=True)
class HierarchySummary:
    """Outcome of a hierarchy build."""
    total_employees: int
    linked_employees: int
    unresolved_references: Dict[int, List[int]] = field(default_factory=dict)
    root_ids: List[int] = field(default_factory=list)

    @property
    def unresolved_employee_count(self) -> int:
        return sum(len(ids) for ids in self.unresolved_references.values())


def group_chunk(employees: Sequence[Employee]) -> Dict[int, List[int]]:
    """Group one chunk of employees by manager id. Employees without a manager id are left out."""
    groups: Dict[int, List[int]] = defaultdict(list)
    for employee in employees:
        if employee.has_manager_reference:
            groups[employee.manager_id].append(employee.employee_id)
    return dict(groups)


def merge_groups(partials: Sequence[Dict[int, List[int]]]) -> Dict[int, List[int]]:
    """Merge partial group maps by concatenating the lists for each manager id."""
    merged: Dict[int, List[int]] = defaultdict(list)
    for partial in partials:
        for manager_id, employee_ids in partial.items():
            merged[manager_id].extend(employee_ids)
    return dict(merged)


def group_by_manager(
    employees: Sequence[Employee],
    executor: Optional[Executor] = None,
    chunk_size: int = DEFAULT_GROUPING_CHUNK_SIZE,
) -> Dict[int, List[int]]:
    """
    Group employee ids by the manager id they reference.

    Args:
        employees: Roster entries to group.
        executor: Optional worker pool; chunks are grouped inline when None.
        chunk_size: Number of employees grouped per task.

    Returns:
        Mapping of referenced manager id -> employee ids, regardless of whether
        the manager exists in the roster.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")

    chunks = [employees[i:i + chunk_size] for i in range(0, len(employees), chunk_size)]
    if executor is None or len(chunks) <= 1:
        partials = [group_chunk(chunk) for chunk in chunks]
    else:
        partials = list(executor.map(group_chunk, chunks))
    return merge_groups(partials)


def build_hierarchy(
    registry: EmployeeRegistry,
    executor: Optional[Executor] = None,
    chunk_size: int = DEFAULT_GROUPING_CHUNK_SIZE,
) -> HierarchySummary:
    """
    Link every employee in ``registry`` to the manager it references.

    A manager id that is not in the registry is not an error: the employees
    referencing it are left without a manager and treated as roots.

    Returns:
        HierarchySummary describing what was linked and what was left unresolved.
    """
    employees = registry.all()
    groups = group_by_manager(employees, executor=executor, chunk_size=chunk_size)

    linked = 0
    unresolved: Dict[int, List[int]] = {}
    # Sorted so direct-report order is reproducible across runs
    for manager_id in sorted(groups):
        employee_ids = sorted(groups[manager_id])
        if manager_id not in registry:
            unresolved[manager_id] = employee_ids
            continue
        for employee_id in employee_ids:
            registry.link(employee_id, manager_id)
            linked += 1

    registry.is_linked = True

    summary = HierarchySummary(
        total_employees=len(registry),
        linked_employees=linked,
        unresolved_references=unresolved,
        root_ids=sorted(e.employee_id for e in registry.roots()),
    )
    if unresolved:
        logger.info(
            f"{summary.unresolved_employee_count} employee(s) reference "
            f"{len(unresolved)} manager id(s) not present in the roster; treating them as roots"
        )
        debug_logger.debug(f"Unresolved manager references: {unresolved}")
    logger.info(
        f"Hierarchy built: {summary.total_employees} employees, "
        f"{summary.linked_employees} linked, {len(summary.root_ids)} root(s)"
    )
    return summary
