"""Call-graph traversals over a ``networkx.DiGraph`` whose edges point caller -> callee.

All functions are pure: they read the graph and never mutate it. Results
are ordered by hop count, then by node id, so they do not depend on
insertion order.
"""

from __future__ import annotations

import heapq

import networkx as nx

from goldenpath.defaults import RISK_DECAY_FACTOR


def enumerate_paths(
    G: nx.DiGraph,
    source: str,
    target: str,
    max_depth: int,
    max_paths: int,
) -> list[list[str]]:
    """All simple caller -> callee paths from *source* to *target* within *max_depth* hops.

    Shorter paths come first; paths of equal length are ordered by their
    id sequence. At most *max_paths* are returned.
    """
    if source not in G or target not in G or max_paths <= 0:
        return []
    if source == target:
        return [[source]]
    if max_depth <= 0:
        return []
    candidates = nx.all_simple_paths(G, source, target, cutoff=max_depth)
    return heapq.nsmallest(max_paths, candidates, key=lambda p: (len(p), p))


def impact_radius(G: nx.DiGraph, origin: str, max_depth: int) -> list[str]:
    """Nodes within *max_depth* hops of *origin* in either direction, origin first."""
    if origin not in G:
        return []
    hops = nx.single_source_shortest_path_length(
        G.to_undirected(as_view=True), origin, cutoff=max(0, max_depth))
    return sorted(hops, key=lambda n: (hops[n], n))


def propagate_risk(
    G: nx.DiGraph,
    origin: str,
    origin_risk: float,
    depth: int,
    decay: float = RISK_DECAY_FACTOR,
) -> dict[str, float]:
    """Spread *origin_risk* outward over callers with per-hop decay.

    Hop 0 carries *origin_risk* unchanged. A caller first reached at hop
    ``h`` from a node holding risk ``r`` receives ``r * decay ** h``, so risk
    strictly decreases with distance for any positive origin risk. Each
    node keeps the value from its shortest hop.
    """
    if origin not in G:
        return {}
    risk = {origin: origin_risk}
    frontier = [origin]
    for hop in range(1, max(0, depth) + 1):
        nxt_frontier: list[str] = []
        for node in frontier:
            for caller in sorted(G.predecessors(node)):
                if caller in risk:
                    continue
                risk[caller] = risk[node] * decay ** hop
                nxt_frontier.append(caller)
        if not nxt_frontier:
            break
        frontier = nxt_frontier
    return risk


def top_degree_nodes(G: nx.DiGraph, limit: int) -> list[str]:
    """Node ids ranked by total degree (in + out), ties broken by id."""
    ranked = sorted(G.nodes, key=lambda n: (-G.degree(n), n))
    return ranked[:max(0, limit)]
