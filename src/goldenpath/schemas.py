"""Pydantic models validating collaborator payloads before they reach the store."""

from __future__ import annotations

from pydantic import BaseModel, Field

from goldenpath.inbound import (
    CallRelationship,
    ClassAnalysis,
    CommitAnalysis,
    CommitIntent,
    FileAnalysisResult,
    MethodAnalysis,
)
from goldenpath.models import BlockType, CallType, ChangeType, CommitType, FileChange


# ---------------------------------------------------------------------------
# Source analysis
# ---------------------------------------------------------------------------

class MethodAnalysisBody(BaseModel):
    method_id: str = Field(..., min_length=1, description="pkg.Class#method(Params)")
    method_name: str = Field(..., min_length=1)
    signature: str = ""
    return_type: str = "void"
    param_types: list[str] = Field(default_factory=list)
    block_type: BlockType = BlockType.OTHER
    is_interface: bool = False
    annotations: list[str] = Field(default_factory=list)
    file_path: str = ""
    line_number: int = Field(default=0, ge=0)
    start_line: int = Field(default=0, ge=0)
    end_line: int = Field(default=0, ge=0)
    cyclomatic_complexity: int = Field(default=1, ge=1)
    lines_of_code: int = Field(default=0, ge=0)
    has_tests: bool = False

    model_config = {"extra": "allow"}

    def to_record(self) -> MethodAnalysis:
        return MethodAnalysis(**self.model_dump(include=set(MethodAnalysis.__dataclass_fields__)))


class ClassAnalysisBody(BaseModel):
    class_name: str = Field(..., min_length=1)
    qualified_name: str = Field(..., min_length=1)
    package_name: str = ""
    block_type: BlockType = BlockType.OTHER
    is_interface: bool = False
    is_abstract: bool = False
    annotations: list[str] = Field(default_factory=list)
    implemented_interfaces: list[str] = Field(default_factory=list)
    super_class: str | None = None
    method_count: int = Field(default=0, ge=0)
    field_count: int = Field(default=0, ge=0)
    cohesion: float = Field(default=0.0, ge=0.0, le=1.0)
    coupling: float = Field(default=0.0, ge=0.0, le=1.0)
    design_patterns: list[str] = Field(default_factory=list)

    model_config = {"extra": "allow"}

    def to_record(self) -> ClassAnalysis:
        return ClassAnalysis(**self.model_dump(include=set(ClassAnalysis.__dataclass_fields__)))


class CallRelationshipBody(BaseModel):
    caller_id: str = Field(..., min_length=1)
    callee_id: str = Field(..., min_length=1)
    call_type: CallType = CallType.DIRECT
    line_number: int = Field(default=0, ge=0)
    is_conditional: bool = False
    context: str | None = None

    def to_record(self) -> CallRelationship:
        return CallRelationship(**self.model_dump())


class FileAnalysisBody(BaseModel):
    file_path: str = Field(..., min_length=1)
    classes: list[ClassAnalysisBody] = Field(default_factory=list)
    methods: list[MethodAnalysisBody] = Field(default_factory=list)
    call_relationships: list[CallRelationshipBody] = Field(default_factory=list)

    def to_record(self) -> FileAnalysisResult:
        return FileAnalysisResult(
            file_path=self.file_path,
            classes=[c.to_record() for c in self.classes],
            methods=[m.to_record() for m in self.methods],
            call_relationships=[r.to_record() for r in self.call_relationships],
        )


class AnalysisBundleBody(BaseModel):
    """A whole project's source analysis: one entry per file."""

    files: list[FileAnalysisBody] = Field(default_factory=list)

    def to_records(self) -> list[FileAnalysisResult]:
        return [f.to_record() for f in self.files]


class FileChangeBody(BaseModel):
    file_path: str = Field(..., min_length=1)
    change_type: ChangeType
    modified_methods: list[str] = Field(default_factory=list)
    added_methods: list[str] = Field(default_factory=list)
    deleted_methods: list[str] = Field(default_factory=list)
    old_path: str | None = None

    def to_record(self) -> FileChange:
        return FileChange(**self.model_dump())


class FileChangeBatchBody(BaseModel):
    """File-level changes to apply to a loaded graph."""

    changes: list[FileChangeBody] = Field(default_factory=list)

    def to_records(self) -> list[FileChange]:
        return [c.to_record() for c in self.changes]


# ---------------------------------------------------------------------------
# Commit history
# ---------------------------------------------------------------------------

class CommitIntentBody(BaseModel):
    business_value: float = Field(default=0.5, ge=0.0, le=1.0)
    risk_level: float = Field(default=0.5, ge=0.0, le=1.0)
    urgency: float = Field(default=0.5, ge=0.0, le=1.0)


class CommitAnalysisBody(BaseModel):
    hash: str = Field(..., min_length=1)
    message: str = ""
    author: str = ""
    keywords: list[str] = Field(default_factory=list)
    commit_type: CommitType = CommitType.OTHER
    intent: CommitIntentBody = Field(default_factory=CommitIntentBody)
    files_changed: list[str] = Field(default_factory=list)
    lines_added: int = Field(default=0, ge=0)
    lines_deleted: int = Field(default=0, ge=0)
    timestamp: str | None = None

    model_config = {"extra": "allow"}

    def to_record(self) -> CommitAnalysis:
        record = CommitAnalysis(
            hash=self.hash,
            message=self.message,
            author=self.author,
            keywords=set(self.keywords),
            commit_type=self.commit_type,
            intent=CommitIntent(**self.intent.model_dump()),
            files_changed=list(self.files_changed),
            lines_added=self.lines_added,
            lines_deleted=self.lines_deleted,
        )
        if self.timestamp:
            record.timestamp = self.timestamp
        return record


class CommitHistoryBody(BaseModel):
    commits: list[CommitAnalysisBody] = Field(default_factory=list)

    def to_records(self) -> list[CommitAnalysis]:
        return [c.to_record() for c in self.commits]
