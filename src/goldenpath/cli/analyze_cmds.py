"""CLI commands: change analysis and configuration."""

from __future__ import annotations

import argparse
import json
import sys

from pydantic import ValidationError

from goldenpath import observability
from goldenpath.analysis_models import PathAnalysisContext
from goldenpath.cli._helpers import _load_changed, _load_commits, _load_store, _out
from goldenpath.config import AnalysisConfig
from goldenpath.paths import InvalidBatchError, PathAnalyzer


def cmd_analyze(args: argparse.Namespace) -> int:
    cfg: AnalysisConfig = args.cfg
    if args.max_depth is not None:
        cfg.max_path_depth = args.max_depth
    try:
        store = _load_store(args.graph)
        commits = _load_commits(args.commits)
        changed = _load_changed(args.changed, args.changed_file)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        return _out({"error": f"Invalid input: {exc}"})
    if not changed:
        return _out({"error": "No changed methods given (use --changed or --changed-file)"})

    context = PathAnalysisContext(changed_methods=changed, commit_history=commits, thresholds=cfg.thresholds)
    try:
        result = PathAnalyzer(store, cfg).analyze_change(context, timeout=args.timeout)
    except InvalidBatchError as exc:
        return _out({"error": f"Nothing to analyze: {exc}"})

    code = _out(result.to_dict())
    if args.metrics:
        sys.stdout.write(observability.generate_metrics())
    return code


def cmd_config_show(args: argparse.Namespace) -> int:
    return _out(args.cfg.to_dict())
