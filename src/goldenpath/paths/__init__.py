"""Path filtering and sorting: discovery, classification, ranking and reporting."""

from goldenpath.paths.analyzer import InvalidBatchError, PathAnalyzer, validate_batch
from goldenpath.paths.classifier import (
    calculate_priority,
    determine_path_type,
    is_golden_path,
    is_risk_path,
    path_confidence,
)
from goldenpath.paths.discovery import discover_candidate_paths
from goldenpath.paths.report import generate_report
from goldenpath.paths.sorter import sort_golden_paths, sort_neutral_paths, sort_risk_paths

__all__ = [
    "InvalidBatchError",
    "PathAnalyzer",
    "calculate_priority",
    "determine_path_type",
    "discover_candidate_paths",
    "generate_report",
    "is_golden_path",
    "is_risk_path",
    "path_confidence",
    "sort_golden_paths",
    "sort_neutral_paths",
    "sort_risk_paths",
    "validate_batch",
]
