"""Tests for CLI dispatch, error handling, and argument parsing."""

from __future__ import annotations

import json
import logging
import os

import pytest

from conftest import C_ID, R_ID, S_ID, SAMPLE_BUNDLE, write_bundle
from goldenpath.cli import _DISPATCH, _out, build_parser, main


@pytest.fixture(autouse=True)
def _isolated(tmp_path, monkeypatch):
    """Run from an empty directory and restore root logging after main()."""
    monkeypatch.chdir(tmp_path)
    for key in [k for k in os.environ if k.startswith("GOLDENPATH_")]:
        monkeypatch.delenv(key)
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def _json(capsys):
    return json.loads(capsys.readouterr().out)


class TestOutErrorHandling:
    def test_out_success(self, capsys):
        assert _out({"ok": True}) == 0
        assert _json(capsys)["ok"] is True

    def test_out_error_dict(self, capsys):
        assert _out({"error": "Something went wrong"}) == 1
        assert _json(capsys)["error"] == "Something went wrong"

    def test_out_list(self, capsys):
        assert _out([1, 2, 3]) == 0

    def test_out_error_in_nested_dict_no_false_positive(self, capsys):
        assert _out({"data": {"error": "nested"}}) == 0


class TestParserStructure:
    def test_analyze_requires_graph(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["analyze"])

    def test_analyze_args(self):
        args = build_parser().parse_args(["analyze", "--graph", "g.json", "--changed", "a", "b", "--timeout", "2"])
        assert args.changed == ["a", "b"]
        assert args.timeout == 2.0
        assert args.metrics is False

    def test_graph_defaults(self):
        args = build_parser().parse_args(["graph", "impact", "--graph", "g.json", "--method-id", "x"])
        assert args.graph_cmd == "impact"
        assert args.depth == 3

    def test_dispatch_covers_commands(self):
        for key in [("analyze", None), ("graph", "stats"), ("graph", "paths"), ("graph", "impact"),
                    ("graph", "propagate"), ("graph", "update"), ("config", "show")]:
            assert key in _DISPATCH

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1

    def test_missing_subcommand(self, capsys):
        assert main(["graph"]) == 1


class TestGraphCommands:
    def test_stats(self, bundle_path, capsys):
        assert main(["graph", "stats", "--graph", bundle_path]) == 0
        out = _json(capsys)
        assert out["method_count"] == 3
        assert out["class_count"] == 3
        assert out["edge_count"] == 2

    def test_bare_list_bundle(self, tmp_path, capsys):
        path = tmp_path / "list.json"
        path.write_text(json.dumps(SAMPLE_BUNDLE))
        assert main(["graph", "stats", "--graph", str(path)]) == 0
        assert _json(capsys)["edge_count"] == 2

    def test_paths(self, bundle_path, capsys):
        assert main(["graph", "paths", "--graph", bundle_path, "--source", C_ID, "--target", R_ID]) == 0
        out = _json(capsys)
        assert out["count"] == 1
        assert out["paths"][0]["methods"] == [C_ID, S_ID, R_ID]
        assert out["paths"][0]["hops"] == 2

    def test_impact(self, bundle_path, capsys):
        assert main(["graph", "impact", "--graph", bundle_path, "--method-id", R_ID, "--depth", "1"]) == 0
        assert _json(capsys)["methods"] == [R_ID, S_ID]

    def test_impact_unknown_method(self, bundle_path, capsys):
        assert main(["graph", "impact", "--graph", bundle_path, "--method-id", "ghost#x()"]) == 1
        assert "not found" in _json(capsys)["error"]

    def test_propagate(self, bundle_path, capsys):
        assert main(["graph", "propagate", "--graph", bundle_path, "--method-id", R_ID]) == 0
        risk = _json(capsys)["risk"]
        assert set(risk) == {R_ID, S_ID, C_ID}
        assert risk[R_ID] > risk[S_ID] > risk[C_ID]

    def test_missing_graph_file(self, capsys):
        assert main(["graph", "stats", "--graph", "missing.json"]) == 1
        assert "Invalid graph file" in _json(capsys)["error"]

    def test_invalid_payload(self, tmp_path, capsys):
        path = write_bundle(tmp_path, [{"file_path": "x.java", "methods": [{"method_name": "x"}]}])
        assert main(["graph", "stats", "--graph", path]) == 1


class TestGraphUpdateCommand:
    REPO_FILE = "src/com/shop/repo/OrderRepository.java"
    SERVICE_FILE = "src/com/shop/service/OrderService.java"

    def _changes(self, tmp_path, changes):
        path = tmp_path / "changes.json"
        path.write_text(json.dumps({"changes": changes}))
        return str(path)

    def test_deleted_file(self, bundle_path, tmp_path, capsys):
        changes = self._changes(tmp_path, [{"file_path": self.REPO_FILE, "change_type": "DELETED"}])
        assert main(["graph", "update", "--graph", bundle_path, "--changes", changes]) == 0
        out = _json(capsys)
        assert out["update"]["success"] is True
        assert out["statistics"]["method_count"] == 2
        assert out["statistics"]["edge_count"] == 1

    def test_modified_file_reanalyzed(self, bundle_path, tmp_path, capsys):
        service = dict(SAMPLE_BUNDLE[1], call_relationships=[])
        analysis = write_bundle(tmp_path, [service], name="analysis.json")
        changes = self._changes(tmp_path, [{"file_path": self.SERVICE_FILE, "change_type": "MODIFIED"}])
        assert main(["graph", "update", "--graph", bundle_path, "--changes", changes, "--analysis", analysis]) == 0
        out = _json(capsys)
        assert out["update"]["success"] is True
        assert out["statistics"]["method_count"] == 3
        assert out["statistics"]["edge_count"] == 1

    def test_missing_analysis_reported_per_file(self, bundle_path, tmp_path, capsys):
        analysis = write_bundle(tmp_path, [], name="analysis.json")
        changes = self._changes(tmp_path, [{"file_path": self.SERVICE_FILE, "change_type": "MODIFIED"}])
        assert main(["graph", "update", "--graph", bundle_path, "--changes", changes, "--analysis", analysis]) == 0
        update = _json(capsys)["update"]
        assert update["success"] is False
        assert update["errors"] == [f"Error updating {self.SERVICE_FILE}: no analysis for {self.SERVICE_FILE}"]

    def test_invalid_change_type(self, bundle_path, tmp_path, capsys):
        changes = self._changes(tmp_path, [{"file_path": self.REPO_FILE, "change_type": "MOVED"}])
        assert main(["graph", "update", "--graph", bundle_path, "--changes", changes]) == 1
        assert "Invalid change file" in _json(capsys)["error"]


class TestAnalyzeCommand:
    def test_analyze(self, bundle_path, capsys):
        assert main(["analyze", "--graph", bundle_path, "--changed", R_ID]) == 0
        out = _json(capsys)
        assert out["total_analyzed_paths"] == 1
        assert out["incomplete"] is False
        assert out["report"]["summary"]["total_paths"] == 1

    def test_changed_file_and_commits(self, bundle_path, tmp_path, capsys):
        changed = tmp_path / "changed.txt"
        changed.write_text(f"# changed methods\n{R_ID}\n\n")
        commits = tmp_path / "commits.json"
        commits.write_text(json.dumps([{"hash": "abc", "keywords": ["order", "create"]}]))
        code = main(["analyze", "--graph", bundle_path, "--changed-file", str(changed), "--commits", str(commits)])
        assert code == 0
        assert _json(capsys)["total_analyzed_paths"] == 1

    def test_no_changed_methods(self, bundle_path, capsys):
        assert main(["analyze", "--graph", bundle_path]) == 1
        assert "No changed methods" in _json(capsys)["error"]

    def test_unknown_changed_method(self, bundle_path, capsys):
        assert main(["analyze", "--graph", bundle_path, "--changed", "ghost#x()"]) == 1
        assert "Nothing to analyze" in _json(capsys)["error"]

    def test_metrics_flag(self, bundle_path, capsys):
        assert main(["analyze", "--graph", bundle_path, "--changed", R_ID, "--metrics"]) == 0
        out = capsys.readouterr().out
        assert 'goldenpath_analyses_total{outcome="complete"} 1' in out


class TestConfigCommand:
    def test_show(self, capsys):
        assert main(["config", "show"]) == 0
        out = _json(capsys)
        assert out["thresholds"]["golden_path_intent_threshold"] == 0.7
        assert out["sources"] == {}

    def test_show_with_file_and_env(self, tmp_path, monkeypatch, capsys):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"max_path_depth": 7}))
        monkeypatch.setenv("GOLDENPATH_MAX_WORKERS", "3")
        assert main(["--config", str(path), "config", "show"]) == 0
        out = _json(capsys)
        assert out["max_path_depth"] == 7
        assert out["max_workers"] == 3
        assert out["sources"] == {"max_path_depth": "config", "max_workers": "env"}
