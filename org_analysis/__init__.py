from org_analysis.analysis import AnalysisResult, OrgAnalysisService
from org_analysis.hierarchy.builder import build_hierarchy
from org_analysis.metrics.engine import MetricEngine
from org_analysis.state.registry import EmployeeRegistry

__version__ = "0.1.0"

__all__ = [
    "AnalysisResult",
    "EmployeeRegistry",
    "MetricEngine",
    "OrgAnalysisService",
    "build_hierarchy",
]
