"""Inbound records from the source-analysis and commit-history collaborators."""

from __future__ import annotations

from dataclasses import dataclass, field

from goldenpath.models import BlockType, CallType, CallsEdge, ClassNode, CommitType, MethodNode, now_iso


# ---------------------------------------------------------------------------
# Source analysis
# ---------------------------------------------------------------------------

@dataclass
class MethodAnalysis:
    method_id: str
    method_name: str
    signature: str = ""
    return_type: str = "void"
    param_types: list[str] = field(default_factory=list)
    block_type: BlockType = BlockType.OTHER
    is_interface: bool = False
    annotations: list[str] = field(default_factory=list)
    file_path: str = ""
    line_number: int = 0
    start_line: int = 0
    end_line: int = 0
    cyclomatic_complexity: int = 1
    lines_of_code: int = 0
    has_tests: bool = False

    def to_node(self) -> MethodNode:
        return MethodNode(
            id=self.method_id,
            method_name=self.method_name,
            block_type=self.block_type,
            signature=self.signature,
            return_type=self.return_type,
            param_types=list(self.param_types),
            file_path=self.file_path,
            line_number=self.line_number,
            start_line=self.start_line,
            end_line=self.end_line,
            is_interface=self.is_interface,
            annotations=list(self.annotations),
            cyclomatic_complexity=self.cyclomatic_complexity,
            lines_of_code=self.lines_of_code,
            has_tests=self.has_tests,
        )


@dataclass
class ClassAnalysis:
    class_name: str
    qualified_name: str
    package_name: str = ""
    block_type: BlockType = BlockType.OTHER
    is_interface: bool = False
    is_abstract: bool = False
    annotations: list[str] = field(default_factory=list)
    implemented_interfaces: list[str] = field(default_factory=list)
    super_class: str | None = None
    method_count: int = 0
    field_count: int = 0
    cohesion: float = 0.0
    coupling: float = 0.0
    design_patterns: list[str] = field(default_factory=list)

    def to_node(self, file_path: str = "") -> ClassNode:
        return ClassNode(
            id=self.qualified_name,
            class_name=self.class_name,
            package_name=self.package_name,
            block_type=self.block_type,
            file_path=file_path,
            is_interface=self.is_interface,
            is_abstract=self.is_abstract,
            implemented_interfaces=list(self.implemented_interfaces),
            super_class=self.super_class,
            annotations=list(self.annotations),
            method_count=self.method_count,
            field_count=self.field_count,
            cohesion=self.cohesion,
            coupling=self.coupling,
            design_patterns=list(self.design_patterns),
        )


@dataclass
class CallRelationship:
    caller_id: str
    callee_id: str
    call_type: CallType = CallType.DIRECT
    line_number: int = 0
    is_conditional: bool = False
    context: str | None = None

    def to_edge(self) -> CallsEdge:
        return CallsEdge(
            caller_id=self.caller_id,
            callee_id=self.callee_id,
            call_type=self.call_type,
            line_number=self.line_number,
            is_conditional=self.is_conditional,
            context=self.context,
        )


@dataclass
class FileAnalysisResult:
    file_path: str
    classes: list[ClassAnalysis] = field(default_factory=list)
    methods: list[MethodAnalysis] = field(default_factory=list)
    call_relationships: list[CallRelationship] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Commit history
# ---------------------------------------------------------------------------

@dataclass
class CommitIntent:
    business_value: float = 0.5
    risk_level: float = 0.5
    urgency: float = 0.5


@dataclass
class CommitAnalysis:
    hash: str
    message: str = ""
    author: str = ""
    keywords: set[str] = field(default_factory=set)
    commit_type: CommitType = CommitType.OTHER
    intent: CommitIntent = field(default_factory=CommitIntent)
    files_changed: list[str] = field(default_factory=list)
    lines_added: int = 0
    lines_deleted: int = 0
    timestamp: str = field(default_factory=now_iso)
