"""Authoritative in-memory call graph: methods, classes and three edge kinds.

Nodes live in id-indexed maps; each relationship kind is a ``networkx.DiGraph``
over method ids whose edges carry the edge record under the ``data``
attribute. A single re-entrant lock guards every mutation and every
multi-step read. Stored nodes are replaced, never mutated in place, so a
node handed to a caller never changes underneath it.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import replace

import networkx as nx

from goldenpath import observability
from goldenpath.defaults import (
    DEFAULT_HOTSPOT_LIMIT,
    DEFAULT_IMPACT_RADIUS_DEPTH,
    DEFAULT_MAX_PATH_DEPTH,
    DEFAULT_MAX_PATHS,
    DEFAULT_PROPAGATION_DEPTH,
    GRAPH_RISK_BANDS,
)
from goldenpath.graph import traversal
from goldenpath.inbound import FileAnalysisResult
from goldenpath.models import (
    BlockType,
    CallPath,
    CallsEdge,
    ChangeType,
    ClassNode,
    DataFlowEdge,
    FileChange,
    GraphStatistics,
    ImplementsEdge,
    MethodNode,
    RiskLevel,
    UpdateResult,
)

log = logging.getLogger("goldenpath.graph")

# Source analysis collaborator: file path -> parsed records
FileAnalyzer = Callable[[str], FileAnalysisResult]


def classify_node_risk(score: float) -> RiskLevel:
    for bound, level in GRAPH_RISK_BANDS:
        if score < bound:
            return RiskLevel(level)
    return RiskLevel.CRITICAL


class GraphStore:
    """Thread-safe call graph with traversal primitives.

    Unknown ids never raise: lookups return ``None`` and traversals return
    empty results.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._methods: dict[str, MethodNode] = {}
        self._classes: dict[str, ClassNode] = {}
        self._calls = nx.DiGraph()
        self._implements = nx.DiGraph()
        self._data_flow = nx.DiGraph()

    # ------------------------------------------------------------------
    # Transactions and snapshots
    # ------------------------------------------------------------------

    @contextmanager
    def locked(self) -> Iterator[GraphStore]:
        """Hold the store lock across several calls."""
        with self._lock:
            yield self

    def snapshot(self) -> GraphStore:
        """Independent copy of the current state, taken under the lock."""
        copy = GraphStore()
        with self._lock:
            copy._methods = dict(self._methods)
            copy._classes = dict(self._classes)
            copy._calls = self._calls.copy()
            copy._implements = self._implements.copy()
            copy._data_flow = self._data_flow.copy()
        return copy

    def clear(self) -> None:
        with self._lock:
            self._methods.clear()
            self._classes.clear()
            self._calls.clear()
            self._implements.clear()
            self._data_flow.clear()

    # ------------------------------------------------------------------
    # Upserts
    # ------------------------------------------------------------------

    def upsert_method(self, node: MethodNode) -> None:
        with self._lock:
            self._calls.add_node(node.id)
            self._methods[node.id] = replace(
                node,
                in_degree=self._calls.in_degree(node.id),
                out_degree=self._calls.out_degree(node.id),
            )

    def upsert_class(self, node: ClassNode) -> None:
        with self._lock:
            self._classes[node.id] = node

    def add_call_edge(self, edge: CallsEdge) -> bool:
        with self._lock:
            if not self._endpoints_known(edge.caller_id, edge.callee_id, edge.edge_id):
                return False
            self._calls.add_edge(edge.caller_id, edge.callee_id, data=edge)
            self._refresh_degrees((edge.caller_id, edge.callee_id))
            return True

    def add_implements_edge(self, edge: ImplementsEdge) -> bool:
        with self._lock:
            if not self._endpoints_known(edge.interface_method_id, edge.implementation_method_id, edge.edge_id):
                return False
            self._implements.add_edge(edge.interface_method_id, edge.implementation_method_id, data=edge)
            return True

    def add_data_flow_edge(self, edge: DataFlowEdge) -> bool:
        with self._lock:
            if not self._endpoints_known(edge.source_id, edge.target_id, edge.edge_id):
                return False
            self._data_flow.add_edge(edge.source_id, edge.target_id, data=edge)
            return True

    def update_risk_score(self, method_id: str, score: float) -> bool:
        with self._lock:
            node = self._methods.get(method_id)
            if node is None:
                return False
            self._methods[method_id] = replace(node, risk_score=score)
            return True

    def apply_analysis_result(self, result: FileAnalysisResult) -> int:
        """Upsert the classes, methods and call edges of one analyzed file.

        Relationships with an unknown endpoint are skipped. Returns the number
        of upserted nodes.
        """
        nodes, _ = self._apply_analysis(result)
        return nodes

    def _apply_analysis(self, result: FileAnalysisResult) -> tuple[int, int]:
        with self._lock:
            for cls in result.classes:
                self.upsert_class(cls.to_node(result.file_path))
            for method in result.methods:
                node = method.to_node()
                if not node.file_path:
                    node = replace(node, file_path=result.file_path)
                self.upsert_method(node)
            edges = sum(1 for rel in result.call_relationships if self.add_call_edge(rel.to_edge()))
            return len(result.classes) + len(result.methods), edges

    # ------------------------------------------------------------------
    # Point reads
    # ------------------------------------------------------------------

    def get_method(self, method_id: str) -> MethodNode | None:
        return self._methods.get(method_id)

    def get_class(self, class_id: str) -> ClassNode | None:
        return self._classes.get(class_id)

    def has_method(self, method_id: str) -> bool:
        return method_id in self._methods

    def get_call_edge(self, caller_id: str, callee_id: str) -> CallsEdge | None:
        with self._lock:
            if not self._calls.has_edge(caller_id, callee_id):
                return None
            return self._calls.edges[caller_id, callee_id]["data"]

    def get_callers(self, method_id: str) -> list[MethodNode]:
        with self._lock:
            if method_id not in self._calls:
                return []
            return [self._methods[n] for n in sorted(self._calls.predecessors(method_id))]

    def get_callees(self, method_id: str) -> list[MethodNode]:
        with self._lock:
            if method_id not in self._calls:
                return []
            return [self._methods[n] for n in sorted(self._calls.successors(method_id))]

    def list_methods(self) -> list[MethodNode]:
        with self._lock:
            return [self._methods[k] for k in sorted(self._methods)]

    def list_classes(self) -> list[ClassNode]:
        with self._lock:
            return [self._classes[k] for k in sorted(self._classes)]

    def get_methods_for_file(self, file_path: str) -> list[MethodNode]:
        with self._lock:
            return [m for m in self.list_methods() if m.file_path == file_path]

    def entry_points(self) -> list[MethodNode]:
        """Controller methods plus methods nobody calls."""
        with self._lock:
            return [
                m for m in self.list_methods()
                if m.block_type == BlockType.CONTROLLER or m.in_degree == 0
            ]

    def method_count(self) -> int:
        return len(self._methods)

    def class_count(self) -> int:
        return len(self._classes)

    def edge_count(self) -> int:
        with self._lock:
            return (
                self._calls.number_of_edges()
                + self._implements.number_of_edges()
                + self._data_flow.number_of_edges()
            )

    # ------------------------------------------------------------------
    # Traversals
    # ------------------------------------------------------------------

    def find_paths(
        self,
        source_id: str,
        target_id: str,
        max_depth: int = DEFAULT_MAX_PATH_DEPTH,
        max_paths: int = DEFAULT_MAX_PATHS,
    ) -> list[CallPath]:
        with self._lock:
            if source_id not in self._methods:
                return []
            id_paths = traversal.enumerate_paths(self._calls, source_id, target_id, max_depth, max_paths)
            return [self._materialize(f"path_{i}", ids) for i, ids in enumerate(id_paths)]

    def build_path(self, path_id: str, method_ids: list[str]) -> CallPath | None:
        """Materialize a path over known methods; ``None`` if any id is unknown."""
        with self._lock:
            if not method_ids or any(m not in self._methods for m in method_ids):
                return None
            return self._materialize(path_id, method_ids)

    def get_impact_radius(self, method_id: str, max_depth: int = DEFAULT_IMPACT_RADIUS_DEPTH) -> list[MethodNode]:
        with self._lock:
            if method_id not in self._methods:
                return []
            return [self._methods[n] for n in traversal.impact_radius(self._calls, method_id, max_depth)]

    def calculate_risk_propagation(self, method_id: str, depth: int = DEFAULT_PROPAGATION_DEPTH) -> dict[str, float]:
        with self._lock:
            node = self._methods.get(method_id)
            if node is None:
                return {}
            return traversal.propagate_risk(self._calls, method_id, node.risk_score, depth)

    # ------------------------------------------------------------------
    # File-level maintenance
    # ------------------------------------------------------------------

    def remove_file_nodes(self, file_path: str) -> int:
        """Remove every method and class owned by *file_path*; returns removed node count."""
        nodes, _ = self._remove_file(file_path)
        return nodes

    def rename_file_nodes(self, old_path: str, new_path: str) -> int:
        """Rewrite the file path of nodes owned by *old_path*; ids are unchanged."""
        with self._lock:
            renamed = 0
            for mid, node in list(self._methods.items()):
                if node.file_path == old_path:
                    self._methods[mid] = replace(node, file_path=new_path)
                    renamed += 1
            for cid, cls in list(self._classes.items()):
                if cls.file_path == old_path:
                    self._classes[cid] = replace(cls, file_path=new_path)
                    renamed += 1
            return renamed

    def incremental_update(
        self,
        changes: Iterable[FileChange],
        analyzer: FileAnalyzer | None = None,
    ) -> UpdateResult:
        """Apply file-level changes; failures are reported per file, never raised.

        Added and modified files are re-read through *analyzer* when given, and
        a modified file's previous nodes and outgoing calls are replaced;
        without one, the listed added and modified methods are counted as
        affected and left to a later ``apply_analysis_result``.
        """
        affected_nodes = 0
        affected_edges = 0
        errors: list[str] = []
        with self._lock:
            for change in changes:
                try:
                    nodes, edges = self._apply_change(change, analyzer)
                except Exception as exc:
                    log.warning(
                        "Incremental update failed for %s: %s", change.file_path, exc,
                        extra={"file_path": change.file_path},
                    )
                    errors.append(f"Error updating {change.file_path}: {exc}")
                    continue
                affected_nodes += nodes
                affected_edges += edges

        observability.record_graph_update(affected_nodes, len(errors))
        return UpdateResult(
            success=not errors,
            affected_nodes=affected_nodes,
            affected_edges=affected_edges,
            errors=errors,
        )

    def _apply_change(self, change: FileChange, analyzer: FileAnalyzer | None) -> tuple[int, int]:
        nodes = edges = 0
        if change.change_type == ChangeType.RENAMED:
            if not change.old_path:
                raise ValueError("rename requires old_path")
            return self.rename_file_nodes(change.old_path, change.file_path), 0

        if change.change_type == ChangeType.DELETED:
            nodes, edges = self._remove_file(change.file_path)

        for method_id in change.deleted_methods:
            n, e = self._remove_method(method_id)
            nodes += n
            edges += e

        if change.change_type in (ChangeType.ADDED, ChangeType.MODIFIED):
            if analyzer is not None:
                result = analyzer(change.file_path)
                if change.change_type == ChangeType.MODIFIED:
                    n, e = self._replace_file(result)
                else:
                    n, e = self._apply_analysis(result)
                nodes += n
                edges += e
            else:
                nodes += len(change.added_methods) + len(change.modified_methods)
        return nodes, edges

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_statistics(self, top_n: int = DEFAULT_HOTSPOT_LIMIT) -> GraphStatistics:
        with self._lock:
            methods = list(self._methods.values())
            distribution = {level: 0 for level in RiskLevel}
            for m in methods:
                distribution[classify_node_risk(m.risk_score)] += 1
            avg_cc = sum(m.cyclomatic_complexity for m in methods) / len(methods) if methods else 0.0
            return GraphStatistics(
                node_count=len(methods) + len(self._classes),
                edge_count=self.edge_count(),
                method_count=len(methods),
                class_count=len(self._classes),
                average_complexity=avg_cc,
                hotspot_methods=traversal.top_degree_nodes(self._calls, top_n),
                risk_distribution=distribution,
            )

    # ------------------------------------------------------------------
    # Internals (caller holds the lock)
    # ------------------------------------------------------------------

    def _endpoints_known(self, a: str, b: str, edge_id: str) -> bool:
        if a in self._methods and b in self._methods:
            return True
        log.debug("Skipping edge %s: unknown endpoint", edge_id)
        return False

    def _refresh_degrees(self, method_ids: Iterable[str]) -> None:
        for mid in method_ids:
            node = self._methods.get(mid)
            if node is not None:
                self._methods[mid] = replace(
                    node,
                    in_degree=self._calls.in_degree(mid),
                    out_degree=self._calls.out_degree(mid),
                )

    def _materialize(self, path_id: str, ids: list[str]) -> CallPath:
        edges = [
            self._calls.edges[a, b]["data"] if self._calls.has_edge(a, b) else None
            for a, b in zip(ids, ids[1:])
        ]
        return CallPath(id=path_id, methods=[self._methods[i] for i in ids], edges=edges)

    def _remove_method(self, method_id: str) -> tuple[int, int]:
        if method_id not in self._methods:
            return 0, 0
        before = self.edge_count()
        neighbors = set(self._calls.predecessors(method_id)) | set(self._calls.successors(method_id))
        for G in (self._calls, self._implements, self._data_flow):
            if method_id in G:
                G.remove_node(method_id)
        del self._methods[method_id]
        self._refresh_degrees(neighbors - {method_id})
        return 1, before - self.edge_count()

    def _remove_file(self, file_path: str) -> tuple[int, int]:
        with self._lock:
            nodes = edges = 0
            for method_id in [m for m, node in self._methods.items() if node.file_path == file_path]:
                n, e = self._remove_method(method_id)
                nodes += n
                edges += e
            for class_id in [c for c, cls in self._classes.items() if cls.file_path == file_path]:
                del self._classes[class_id]
                nodes += 1
            return nodes, edges

    def _replace_file(self, result: FileAnalysisResult) -> tuple[int, int]:
        """Swap a file's nodes for a fresh analysis of it.

        Calls into the file from other files, and implements / data-flow
        edges touching it, are restored where both endpoints survive; the
        file's own outgoing calls come only from *result*.
        """
        owned = {m for m, node in self._methods.items() if node.file_path == result.file_path}
        kept = [
            (self.add_call_edge, edge)
            for a, b, edge in self._calls.edges(data="data")
            if b in owned and a not in owned
        ]
        for G, add in ((self._implements, self.add_implements_edge), (self._data_flow, self.add_data_flow_edge)):
            kept += [(add, edge) for a, b, edge in G.edges(data="data") if a in owned or b in owned]

        self._remove_file(result.file_path)
        nodes, edges = self._apply_analysis(result)
        restored = sum(1 for add, edge in kept if add(edge))
        return nodes, edges + restored
