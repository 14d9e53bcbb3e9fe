"""Shared numeric helpers for the scoring calculators."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from goldenpath.models import CallPath, CallsEdge

if TYPE_CHECKING:
    from goldenpath.graph import GraphStore


def clamp(x: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, x))


def mean(values: Iterable[float]) -> float:
    items = list(values)
    return sum(items) / len(items) if items else 0.0


def band(value: float, bands: tuple[tuple[float, float], ...], above: float) -> float:
    """Score of the first ``(bound, score)`` band with ``value <= bound``, else *above*."""
    for bound, score in bands:
        if value <= bound:
            return score
    return above


def resolved_edges(path: CallPath, graph: GraphStore | None = None) -> list[CallsEdge]:
    """Edges that are direct evidence for their hop.

    A slot counts only when it connects ``methods[i]`` to ``methods[i + 1]``
    and, when a graph is given, the call edge still exists there.
    """
    resolved = []
    for i, edge in enumerate(path.edges):
        if edge is None:
            continue
        if edge.caller_id != path.methods[i].id or edge.callee_id != path.methods[i + 1].id:
            continue
        if graph is not None and graph.get_call_edge(edge.caller_id, edge.callee_id) is None:
            continue
        resolved.append(edge)
    return resolved
