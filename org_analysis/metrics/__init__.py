from .engine import (
    MAX_REPORTING_DEPTH,
    MAX_SALARY_MULTIPLIER,
    MIN_SALARY_MULTIPLIER,
    EmployeeMetrics,
    HierarchyCycleError,
    MetricEngine,
)

__all__ = [
    "MAX_REPORTING_DEPTH",
    "MAX_SALARY_MULTIPLIER",
    "MIN_SALARY_MULTIPLIER",
    "EmployeeMetrics",
    "HierarchyCycleError",
    "MetricEngine",
]
