"""Shared CLI helpers: JSON output and input loading."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

from goldenpath.graph import GraphStore
from goldenpath.inbound import CommitAnalysis, FileAnalysisResult
from goldenpath.models import FileChange
from goldenpath.schemas import AnalysisBundleBody, CommitHistoryBody, FileChangeBatchBody


def _out(data: Any) -> int:
    print(json.dumps(data, indent=2, default=str))
    if isinstance(data, dict) and "error" in data:
        return 1
    return 0


def _read_json(path: str) -> Any:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _load_store(path: str) -> GraphStore:
    """Build a graph store from a source-analysis bundle file.

    Accepts ``{"files": [...]}`` or a bare list of file analyses. Files are
    applied in two passes so that call edges between files resolve.
    """
    data = _read_json(path)
    if isinstance(data, list):
        data = {"files": data}
    results = AnalysisBundleBody.model_validate(data).to_records()
    store = GraphStore()
    with store.locked():
        for result in results:
            store.apply_analysis_result(
                FileAnalysisResult(file_path=result.file_path, classes=result.classes, methods=result.methods)
            )
        for result in results:
            for rel in result.call_relationships:
                store.add_call_edge(rel.to_edge())
    return store


def _load_changes(path: str) -> list[FileChange]:
    data = _read_json(path)
    if isinstance(data, list):
        data = {"changes": data}
    return FileChangeBatchBody.model_validate(data).to_records()


def _load_analyzer(path: str | None) -> Callable[[str], FileAnalysisResult] | None:
    """Look up fresh analyses of changed files from a bundle, by file path."""
    if not path:
        return None
    data = _read_json(path)
    if isinstance(data, list):
        data = {"files": data}
    by_path = {r.file_path: r for r in AnalysisBundleBody.model_validate(data).to_records()}

    def analyze(file_path: str) -> FileAnalysisResult:
        if file_path not in by_path:
            raise LookupError(f"no analysis for {file_path}")
        return by_path[file_path]

    return analyze


def _load_commits(path: str | None) -> list[CommitAnalysis]:
    if not path:
        return []
    data = _read_json(path)
    if isinstance(data, list):
        data = {"commits": data}
    return CommitHistoryBody.model_validate(data).to_records()


def _load_changed(ids: list[str] | None, path: str | None) -> set[str]:
    """Changed method ids from ``--changed`` plus one-per-line ``--changed-file``."""
    changed = set(ids or [])
    if path:
        for line in Path(path).read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if line and not line.startswith("#"):
                changed.add(line)
    return changed
