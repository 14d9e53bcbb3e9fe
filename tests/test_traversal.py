"""Tests for goldenpath.graph.traversal on plain NetworkX graphs."""

from __future__ import annotations

import networkx as nx
import pytest

from goldenpath.graph import enumerate_paths, impact_radius, propagate_risk, top_degree_nodes


def _graph(*edges):
    G = nx.DiGraph()
    G.add_edges_from(edges)
    return G


class TestEnumeratePaths:
    def test_diamond_shortest_first(self):
        G = _graph(("a", "b"), ("a", "c"), ("b", "d"), ("c", "d"), ("a", "d"))
        paths = enumerate_paths(G, "a", "d", max_depth=5, max_paths=10)
        assert paths[0] == ["a", "d"]
        assert sorted(paths[1:]) == [["a", "b", "d"], ["a", "c", "d"]]

    def test_depth_bound(self):
        G = _graph(("a", "b"), ("b", "c"), ("c", "d"))
        assert enumerate_paths(G, "a", "d", max_depth=2, max_paths=10) == []
        assert enumerate_paths(G, "a", "d", max_depth=3, max_paths=10) == [["a", "b", "c", "d"]]

    def test_cycles_not_followed(self):
        G = _graph(("a", "b"), ("b", "a"), ("b", "c"))
        assert enumerate_paths(G, "a", "c", max_depth=10, max_paths=10) == [["a", "b", "c"]]

    def test_max_paths_cap(self):
        G = _graph(*[("s", f"m{i}") for i in range(5)], *[(f"m{i}", "t") for i in range(5)])
        assert len(enumerate_paths(G, "s", "t", max_depth=3, max_paths=2)) == 2

    def test_unknown_source(self):
        assert enumerate_paths(_graph(("a", "b")), "zz", "b", 5, 10) == []

    def test_source_is_target(self):
        assert enumerate_paths(_graph(("a", "b")), "a", "a", 5, 10) == [["a"]]

    def test_insertion_order_does_not_matter(self):
        edges = [("a", "c"), ("a", "b"), ("b", "d"), ("c", "d")]
        assert enumerate_paths(_graph(*edges), "a", "d", 5, 10) == \
            enumerate_paths(_graph(*reversed(edges)), "a", "d", 5, 10)

    def test_equal_length_paths_ordered_by_ids(self):
        G = _graph(("a", "c"), ("a", "b"), ("c", "d"), ("b", "d"), ("a", "d"))
        assert enumerate_paths(G, "a", "d", 5, 10) == [["a", "d"], ["a", "b", "d"], ["a", "c", "d"]]

    def test_cap_keeps_shortest(self):
        G = _graph(("a", "b"), ("b", "c"), ("c", "t"), ("a", "t"))
        assert enumerate_paths(G, "a", "t", 5, 1) == [["a", "t"]]

    def test_unknown_target(self):
        assert enumerate_paths(_graph(("a", "b")), "a", "zz", 5, 10) == []


class TestImpactRadius:
    def test_both_directions(self):
        G = _graph(("up", "m"), ("m", "down"), ("down", "deeper"))
        assert impact_radius(G, "m", 1) == ["m", "down", "up"]
        assert impact_radius(G, "m", 2) == ["m", "down", "up", "deeper"]

    def test_depth_zero_is_origin(self):
        assert impact_radius(_graph(("a", "b")), "a", 0) == ["a"]

    def test_unknown(self):
        assert impact_radius(_graph(("a", "b")), "zz", 3) == []

    def test_nearest_first_then_by_id(self):
        G = _graph(("z", "m"), ("m", "a"), ("a", "b"), ("y", "z"))
        assert impact_radius(G, "m", 3) == ["m", "a", "z", "b", "y"]


class TestPropagateRisk:
    def test_hop_zero_exact_and_decay(self):
        G = _graph(("c3", "c2"), ("c2", "c1"), ("c1", "m"))
        risk = propagate_risk(G, "m", 0.9, depth=3)
        assert risk["m"] == 0.9
        assert risk["c1"] == pytest.approx(0.9 * 0.8)
        assert risk["c2"] == pytest.approx(0.9 * 0.8 * 0.8 ** 2)
        assert risk["m"] > risk["c1"] > risk["c2"] > risk["c3"]

    def test_depth_limits_reach(self):
        G = _graph(("c2", "c1"), ("c1", "m"))
        assert set(propagate_risk(G, "m", 0.5, depth=1)) == {"m", "c1"}

    def test_callees_not_affected(self):
        G = _graph(("m", "callee"))
        assert "callee" not in propagate_risk(G, "m", 0.5, depth=3)

    def test_shortest_hop_wins(self):
        G = _graph(("a", "m"), ("a", "b"), ("b", "m"))
        risk = propagate_risk(G, "m", 1.0, depth=3)
        assert risk["a"] == pytest.approx(0.8)

    def test_unknown(self):
        assert propagate_risk(_graph(("a", "b")), "zz", 0.5, 3) == {}


class TestTopDegreeNodes:
    def test_rank_and_tiebreak(self):
        G = _graph(("a", "hub"), ("b", "hub"), ("hub", "c"))
        assert top_degree_nodes(G, 2) == ["hub", "a"]

    def test_zero_limit(self):
        assert top_degree_nodes(_graph(("a", "b")), 0) == []
