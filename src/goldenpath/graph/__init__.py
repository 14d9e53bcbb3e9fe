"""Call graph: thread-safe store plus pure traversal algorithms over NetworkX."""

from goldenpath.graph.store import FileAnalyzer, GraphStore, classify_node_risk
from goldenpath.graph.traversal import (
    enumerate_paths,
    impact_radius,
    propagate_risk,
    top_degree_nodes,
)

__all__ = [
    "FileAnalyzer",
    "GraphStore",
    "classify_node_risk",
    "enumerate_paths",
    "impact_radius",
    "propagate_risk",
    "top_degree_nodes",
]
