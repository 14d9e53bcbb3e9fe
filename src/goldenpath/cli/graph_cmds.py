"""CLI commands: call graph statistics, paths, impact radius, risk propagation and updates."""

from __future__ import annotations

import argparse
import json

from pydantic import ValidationError

from goldenpath.cli._helpers import _load_analyzer, _load_changes, _load_store, _out
from goldenpath.graph import GraphStore
from goldenpath.scoring import refresh_method_risk_scores


def _store_or_error(args: argparse.Namespace) -> GraphStore | dict:
    try:
        return _load_store(args.graph)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        return {"error": f"Invalid graph file: {exc}"}


def cmd_graph_stats(args: argparse.Namespace) -> int:
    store = _store_or_error(args)
    if isinstance(store, dict):
        return _out(store)
    return _out(store.get_statistics(top_n=args.top).to_dict())


def cmd_graph_paths(args: argparse.Namespace) -> int:
    store = _store_or_error(args)
    if isinstance(store, dict):
        return _out(store)
    max_depth = args.max_depth if args.max_depth is not None else args.cfg.max_path_depth
    paths = store.find_paths(args.source, args.target, max_depth, args.cfg.max_paths)
    return _out({
        "source": args.source,
        "target": args.target,
        "max_depth": max_depth,
        "count": len(paths),
        "paths": [p.to_dict() for p in paths],
    })


def cmd_graph_impact(args: argparse.Namespace) -> int:
    store = _store_or_error(args)
    if isinstance(store, dict):
        return _out(store)
    if not store.has_method(args.method_id):
        return _out({"error": f"Method {args.method_id} not found"})
    nodes = store.get_impact_radius(args.method_id, args.depth)
    return _out({
        "method_id": args.method_id,
        "depth": args.depth,
        "count": len(nodes),
        "methods": [n.id for n in nodes],
    })


def cmd_graph_propagate(args: argparse.Namespace) -> int:
    store = _store_or_error(args)
    if isinstance(store, dict):
        return _out(store)
    if not store.has_method(args.method_id):
        return _out({"error": f"Method {args.method_id} not found"})
    refresh_method_risk_scores(store)
    propagated = store.calculate_risk_propagation(args.method_id, args.depth)
    return _out({
        "method_id": args.method_id,
        "depth": args.depth,
        "risk": {k: round(v, 4) for k, v in propagated.items()},
    })


def cmd_graph_update(args: argparse.Namespace) -> int:
    store = _store_or_error(args)
    if isinstance(store, dict):
        return _out(store)
    try:
        changes = _load_changes(args.changes)
        analyzer = _load_analyzer(args.analysis)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        return _out({"error": f"Invalid change file: {exc}"})
    result = store.incremental_update(changes, analyzer=analyzer)
    return _out({
        "update": result.to_dict(),
        "statistics": store.get_statistics(top_n=args.top).to_dict(),
    })
