"""Tests for goldenpath.schemas: payload validation and record conversion."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from conftest import SAMPLE_BUNDLE
from goldenpath.inbound import CommitAnalysis, FileAnalysisResult
from goldenpath.models import BlockType, ChangeType, CommitType
from goldenpath.schemas import (
    AnalysisBundleBody,
    CommitHistoryBody,
    FileChangeBatchBody,
    FileChangeBody,
    MethodAnalysisBody,
)


class TestSourceAnalysis:
    def test_bundle_to_records(self):
        records = AnalysisBundleBody.model_validate({"files": SAMPLE_BUNDLE}).to_records()
        assert len(records) == 3
        assert isinstance(records[0], FileAnalysisResult)
        assert records[0].methods[0].block_type == BlockType.CONTROLLER
        assert records[0].classes[0].qualified_name == "com.shop.web.OrderController"
        assert records[0].call_relationships[0].callee_id.endswith("OrderService#createOrder()")

    def test_extra_fields_allowed_on_methods(self):
        body = MethodAnalysisBody.model_validate(
            {"method_id": "a.B#x()", "method_name": "x", "javadoc": "ignored"},
        )
        assert body.to_record().method_id == "a.B#x()"

    def test_complexity_must_be_positive(self):
        with pytest.raises(ValidationError):
            MethodAnalysisBody.model_validate({"method_id": "a.B#x()", "method_name": "x", "cyclomatic_complexity": 0})

    def test_unknown_block_type_rejected(self):
        with pytest.raises(ValidationError):
            MethodAnalysisBody.model_validate({"method_id": "a.B#x()", "method_name": "x", "block_type": "LAMBDA"})

    def test_method_id_required(self):
        with pytest.raises(ValidationError):
            MethodAnalysisBody.model_validate({"method_name": "x"})


class TestFileChange:
    def test_rename(self):
        change = FileChangeBody.model_validate(
            {"file_path": "b.java", "change_type": "RENAMED", "old_path": "a.java"},
        ).to_record()
        assert change.change_type == ChangeType.RENAMED
        assert change.old_path == "a.java"

    def test_batch_accepts_changes(self):
        changes = FileChangeBatchBody.model_validate({"changes": [
            {"file_path": "a.java", "change_type": "DELETED"},
            {"file_path": "b.java", "change_type": "MODIFIED", "modified_methods": ["b.B#x()"]},
        ]}).to_records()
        assert [c.change_type for c in changes] == [ChangeType.DELETED, ChangeType.MODIFIED]
        assert changes[1].modified_methods == ["b.B#x()"]

    def test_unknown_change_type_rejected(self):
        with pytest.raises(ValidationError):
            FileChangeBody.model_validate({"file_path": "a.java", "change_type": "MOVED"})


class TestCommitHistory:
    def test_commits_to_records(self):
        body = CommitHistoryBody.model_validate({"commits": [
            {"hash": "abc123", "message": "feat: order checkout", "keywords": ["order", "checkout", "order"],
             "commit_type": "FEATURE", "intent": {"business_value": 0.9}, "timestamp": "2024-01-01T00:00:00+00:00"},
        ]})
        [commit] = body.to_records()
        assert isinstance(commit, CommitAnalysis)
        assert commit.keywords == {"order", "checkout"}
        assert commit.commit_type == CommitType.FEATURE
        assert commit.intent.business_value == 0.9
        assert commit.intent.urgency == 0.5
        assert commit.timestamp == "2024-01-01T00:00:00+00:00"

    def test_intent_bounds(self):
        with pytest.raises(ValidationError):
            CommitHistoryBody.model_validate({"commits": [{"hash": "a", "intent": {"risk_level": 1.5}}]})

    def test_hash_required(self):
        with pytest.raises(ValidationError):
            CommitHistoryBody.model_validate({"commits": [{"message": "x"}]})
