from .builder import HierarchySummary, build_hierarchy, group_by_manager

__all__ = [
    "HierarchySummary",
    "build_hierarchy",
    "group_by_manager",
]
