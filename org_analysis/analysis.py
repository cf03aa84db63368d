# org_analysis/analysis.py
"""
End-to-end roster analysis: read -> parse -> link -> metrics -> report.
"""

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

import pandas as pd

from org_analysis.config.models import AnalysisSettings
from org_analysis.data.readers import parse_employees, read_roster_lines
from org_analysis.hierarchy.builder import HierarchySummary, build_hierarchy
from org_analysis.metrics.engine import MetricEngine
from org_analysis.reporting.report import generate_report
from org_analysis.state.registry import EmployeeRegistry

from logging_config import ANALYSIS_LOGGER, PERFORMANCE_LOGGER

logger = logging.getLogger(ANALYSIS_LOGGER)
perf_logger = logging.getLogger(PERFORMANCE_LOGGER)


@dataclass
class AnalysisResult:
    """Everything produced by one run."""
    registry: EmployeeRegistry
    hierarchy: HierarchySummary
    engine: MetricEngine
    metrics: pd.DataFrame
    report_lines: List[str]


class OrgAnalysisService:
    """
    Runs the roster analysis on a fixed-size worker pool.

    Use as a context manager, or call :meth:`close`, so the pool is shut down.
    """

    def __init__(self, settings: Optional[AnalysisSettings] = None, executor: Optional[ThreadPoolExecutor] = None):
        self.settings = settings or AnalysisSettings()
        self._owns_executor = executor is None
        if executor is None:
            workers = self.settings.max_workers or os.cpu_count() or 1
            executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="org-analysis")
            logger.debug(f"Created worker pool with {workers} worker(s)")
        self.executor = executor

    def __enter__(self) -> "OrgAnalysisService":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_executor:
            self.executor.shutdown(wait=True)

    def build_registry(self, lines: Sequence[str]) -> EmployeeRegistry:
        """Parse data lines (no header) into an unlinked registry."""
        start = time.perf_counter()
        employees_by_id = parse_employees(
            lines, batch_size=self.settings.batch_size, executor=self.executor
        )
        registry = EmployeeRegistry.from_mapping(employees_by_id)
        perf_logger.info(
            f"Parsed {len(lines)} lines into {len(registry)} employees in "
            f"{time.perf_counter() - start:.3f}s"
        )
        return registry

    def analyze_lines(self, lines: Sequence[str]) -> AnalysisResult:
        """Run the full analysis over data lines (header already removed)."""
        registry = self.build_registry(lines)

        start = time.perf_counter()
        hierarchy = build_hierarchy(
            registry, executor=self.executor, chunk_size=self.settings.batch_size
        )
        perf_logger.info(f"Built hierarchy in {time.perf_counter() - start:.3f}s")

        start = time.perf_counter()
        engine = MetricEngine(registry)
        metrics = engine.compute_all()
        perf_logger.info(f"Computed metrics in {time.perf_counter() - start:.3f}s")

        start = time.perf_counter()
        report_lines = generate_report(registry, engine, metrics=metrics)
        perf_logger.info(f"Generated report in {time.perf_counter() - start:.3f}s")

        logger.info(f"Analysis complete for {len(registry)} employees")
        return AnalysisResult(
            registry=registry,
            hierarchy=hierarchy,
            engine=engine,
            metrics=metrics,
            report_lines=report_lines,
        )

    def analyze_file(self, csv_path: Union[str, Path]) -> AnalysisResult:
        """Read a roster file (first line is a header) and analyze it."""
        logger.info(f"Starting analysis of {csv_path}")
        return self.analyze_lines(read_roster_lines(csv_path))

    def analyze_from_csv(self, csv_path: Union[str, Path]) -> List[str]:
        """Report lines for the roster at ``csv_path``."""
        return self.analyze_file(csv_path).report_lines
