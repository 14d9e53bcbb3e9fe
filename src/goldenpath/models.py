"""Core data types: call-graph nodes, edges, paths and update results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class BlockType(str, Enum):
    CONTROLLER = "CONTROLLER"
    SERVICE = "SERVICE"
    REPOSITORY = "REPOSITORY"
    MAPPER = "MAPPER"
    ENTITY = "ENTITY"
    DTO = "DTO"
    VO = "VO"
    UTIL = "UTIL"
    CONFIG = "CONFIG"
    COMPONENT = "COMPONENT"
    TEST = "TEST"
    OTHER = "OTHER"
    UNKNOWN = "UNKNOWN"


class CallType(str, Enum):
    DIRECT = "DIRECT"
    INTERFACE = "INTERFACE"
    REFLECTION = "REFLECTION"
    LAMBDA = "LAMBDA"
    METHOD_REF = "METHOD_REF"


class DataFlowType(str, Enum):
    PARAMETER = "PARAMETER"
    RETURN_VALUE = "RETURN_VALUE"
    FIELD_ACCESS = "FIELD_ACCESS"
    SHARED_STATE = "SHARED_STATE"


class PathType(str, Enum):
    GOLDEN_PATH = "GOLDEN_PATH"
    RISK_PATH = "RISK_PATH"
    CRITICAL_PATH = "CRITICAL_PATH"
    NEUTRAL_PATH = "NEUTRAL_PATH"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class PathPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ChangeType(str, Enum):
    ADDED = "ADDED"
    MODIFIED = "MODIFIED"
    DELETED = "DELETED"
    RENAMED = "RENAMED"


class CommitType(str, Enum):
    FEATURE = "FEATURE"
    BUGFIX = "BUGFIX"
    REFACTOR = "REFACTOR"
    PERFORMANCE = "PERFORMANCE"
    TEST = "TEST"
    DOCS = "DOCS"
    STYLE = "STYLE"
    BUILD = "BUILD"
    CI = "CI"
    CHORE = "CHORE"
    OTHER = "OTHER"


# ---------------------------------------------------------------------------
# Graph nodes
# ---------------------------------------------------------------------------

@dataclass
class MethodNode:
    """A method in the call graph.

    ``id`` has the form ``pkg.Class#method(ParamA,ParamB)`` and is derived
    from the qualified name, never from the file path. ``in_degree`` and
    ``out_degree`` are maintained by the graph store.
    """

    id: str
    method_name: str
    block_type: BlockType = BlockType.OTHER
    signature: str = ""
    return_type: str = "void"
    param_types: list[str] = field(default_factory=list)
    file_path: str = ""
    line_number: int = 0
    start_line: int = 0
    end_line: int = 0
    is_interface: bool = False
    annotations: list[str] = field(default_factory=list)
    cyclomatic_complexity: int = 1
    lines_of_code: int = 0
    has_tests: bool = False
    in_degree: int = 0
    out_degree: int = 0
    risk_score: float = 0.0
    last_modified: str = field(default_factory=now_iso)

    def __post_init__(self) -> None:
        self.annotations = list(dict.fromkeys(self.annotations))
        self.cyclomatic_complexity = max(1, self.cyclomatic_complexity)

    @staticmethod
    def generate_id(class_qualified_name: str, method_name: str, param_types: list[str] | None = None) -> str:
        return f"{class_qualified_name}#{method_name}({','.join(param_types or [])})"

    @property
    def class_id(self) -> str:
        return self.id.split("#", 1)[0]

    @property
    def class_name(self) -> str:
        return self.class_id.rsplit(".", 1)[-1]

    def has_annotation(self, *fragments: str) -> bool:
        """True if any annotation contains any of *fragments* (case-insensitive)."""
        lowered = [a.lower() for a in self.annotations]
        return any(f.lower() in a for a in lowered for f in fragments)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "method_name": self.method_name,
            "block_type": self.block_type.value,
            "signature": self.signature,
            "return_type": self.return_type,
            "param_types": self.param_types,
            "file_path": self.file_path,
            "line_number": self.line_number,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "is_interface": self.is_interface,
            "annotations": self.annotations,
            "cyclomatic_complexity": self.cyclomatic_complexity,
            "lines_of_code": self.lines_of_code,
            "has_tests": self.has_tests,
            "in_degree": self.in_degree,
            "out_degree": self.out_degree,
            "risk_score": self.risk_score,
            "last_modified": self.last_modified,
        }


@dataclass
class ClassNode:
    id: str
    class_name: str
    package_name: str = ""
    block_type: BlockType = BlockType.OTHER
    file_path: str = ""
    is_interface: bool = False
    is_abstract: bool = False
    implemented_interfaces: list[str] = field(default_factory=list)
    super_class: str | None = None
    annotations: list[str] = field(default_factory=list)
    method_count: int = 0
    field_count: int = 0
    cohesion: float = 0.0
    coupling: float = 0.0
    design_patterns: list[str] = field(default_factory=list)
    last_modified: str = field(default_factory=now_iso)

    @staticmethod
    def generate_id(package_name: str, class_name: str) -> str:
        return f"{package_name}.{class_name}" if package_name else class_name

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "class_name": self.class_name,
            "package_name": self.package_name,
            "block_type": self.block_type.value,
            "file_path": self.file_path,
            "is_interface": self.is_interface,
            "is_abstract": self.is_abstract,
            "implemented_interfaces": self.implemented_interfaces,
            "super_class": self.super_class,
            "annotations": self.annotations,
            "method_count": self.method_count,
            "field_count": self.field_count,
            "cohesion": self.cohesion,
            "coupling": self.coupling,
            "design_patterns": self.design_patterns,
        }


# ---------------------------------------------------------------------------
# Graph edges (endpoints are ids, resolved against the store on demand)
# ---------------------------------------------------------------------------

@dataclass
class CallsEdge:
    caller_id: str
    callee_id: str
    call_type: CallType = CallType.DIRECT
    line_number: int = 0
    frequency: int = 1
    is_conditional: bool = False
    context: str | None = None      # try-catch | if | loop
    intent_weight: float = 0.5
    risk_weight: float = 0.5
    is_new_in_change: bool = False
    is_modified_in_change: bool = False

    @property
    def edge_id(self) -> str:
        return f"{self.caller_id} -> {self.callee_id}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.edge_id,
            "caller_id": self.caller_id,
            "callee_id": self.callee_id,
            "call_type": self.call_type.value,
            "line_number": self.line_number,
            "frequency": self.frequency,
            "is_conditional": self.is_conditional,
            "context": self.context,
            "intent_weight": self.intent_weight,
            "risk_weight": self.risk_weight,
            "is_new_in_change": self.is_new_in_change,
            "is_modified_in_change": self.is_modified_in_change,
        }


@dataclass
class ImplementsEdge:
    interface_method_id: str
    implementation_method_id: str
    is_override: bool = True
    implementation_quality: float = 1.0
    follows_contract: bool = True

    @property
    def edge_id(self) -> str:
        return f"{self.interface_method_id} <- {self.implementation_method_id}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.edge_id,
            "interface_method_id": self.interface_method_id,
            "implementation_method_id": self.implementation_method_id,
            "is_override": self.is_override,
            "implementation_quality": self.implementation_quality,
            "follows_contract": self.follows_contract,
        }


@dataclass
class DataFlowEdge:
    source_id: str
    target_id: str
    data_type: str = ""
    flow_type: DataFlowType = DataFlowType.PARAMETER
    is_sensitive: bool = False

    @property
    def edge_id(self) -> str:
        return f"{self.source_id} ~> {self.target_id}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.edge_id,
            "source_id": self.source_id,
            "target_id": self.target_id,
            "data_type": self.data_type,
            "flow_type": self.flow_type.value,
            "is_sensitive": self.is_sensitive,
        }


# ---------------------------------------------------------------------------
# Call path
# ---------------------------------------------------------------------------

@dataclass
class CallPath:
    """An ordered walk through the call graph.

    ``edges[i]`` connects ``methods[i]`` to ``methods[i + 1]``; a slot is
    ``None`` when no call edge was found for that hop.
    """

    id: str
    methods: list[MethodNode]
    edges: list[CallsEdge | None] = field(default_factory=list)
    path_type: PathType = PathType.NEUTRAL_PATH
    total_weight: float = 0.0

    def __post_init__(self) -> None:
        slots = max(0, len(self.methods) - 1)
        if len(self.edges) > slots:
            raise ValueError(f"path {self.id} has {len(self.edges)} edges for {len(self.methods)} methods")
        self.edges = list(self.edges) + [None] * (slots - len(self.edges))

    @property
    def method_ids(self) -> list[str]:
        return [m.id for m in self.methods]

    @property
    def hops(self) -> int:
        return max(0, len(self.methods) - 1)

    @property
    def present_edges(self) -> list[CallsEdge]:
        return [e for e in self.edges if e is not None]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "path_type": self.path_type.value,
            "total_weight": self.total_weight,
            "hops": self.hops,
            "methods": self.method_ids,
            "edges": [e.edge_id if e is not None else None for e in self.edges],
        }


# ---------------------------------------------------------------------------
# Incremental updates and statistics
# ---------------------------------------------------------------------------

@dataclass
class FileChange:
    file_path: str
    change_type: ChangeType
    modified_methods: list[str] = field(default_factory=list)
    added_methods: list[str] = field(default_factory=list)
    deleted_methods: list[str] = field(default_factory=list)
    old_path: str | None = None     # RENAMED only


@dataclass
class UpdateResult:
    success: bool
    affected_nodes: int = 0
    affected_edges: int = 0
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "affected_nodes": self.affected_nodes,
            "affected_edges": self.affected_edges,
            "errors": self.errors,
        }


@dataclass
class GraphStatistics:
    node_count: int = 0
    edge_count: int = 0
    method_count: int = 0
    class_count: int = 0
    average_complexity: float = 0.0
    hotspot_methods: list[str] = field(default_factory=list)
    risk_distribution: dict[RiskLevel, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "node_count": self.node_count,
            "edge_count": self.edge_count,
            "method_count": self.method_count,
            "class_count": self.class_count,
            "average_complexity": round(self.average_complexity, 4),
            "hotspot_methods": self.hotspot_methods,
            "risk_distribution": {k.value: v for k, v in self.risk_distribution.items()},
        }
