"""Argparse parser definition for the goldenpath CLI."""

from __future__ import annotations

import argparse

from goldenpath.defaults import (
    DEFAULT_HOTSPOT_LIMIT,
    DEFAULT_IMPACT_RADIUS_DEPTH,
    DEFAULT_PROPAGATION_DEPTH,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="goldenpath",
        description="Golden Path / Risk Path analysis of code changes over a call graph",
    )
    parser.add_argument("--config", help="JSON config file (default: .goldenpath/config.json)")
    parser.add_argument("--log-level", help="Log level (default: from config, INFO)")
    sub = parser.add_subparsers(dest="command")

    _register_analyze_commands(sub)
    _register_graph_commands(sub)
    _register_config_commands(sub)

    return parser


def _add_graph_arg(p: argparse.ArgumentParser) -> None:
    p.add_argument("--graph", required=True, help="Source-analysis bundle (JSON)")


def _register_analyze_commands(sub: argparse._SubParsersAction) -> None:
    # -- analyze --
    p = sub.add_parser("analyze", help="Classify and rank call paths touched by a change")
    _add_graph_arg(p)
    p.add_argument("--commits", help="Commit history (JSON)")
    p.add_argument("--changed", nargs="*", default=[], help="Changed method ids")
    p.add_argument("--changed-file", help="File with one changed method id per line")
    p.add_argument("--max-depth", type=int, help="Maximum hops per candidate path")
    p.add_argument("--timeout", type=float, help="Batch timeout in seconds")
    p.add_argument("--metrics", action="store_true", help="Print Prometheus metrics after the result")


def _register_graph_commands(sub: argparse._SubParsersAction) -> None:
    # -- graph --
    graph_p = sub.add_parser("graph", help="Call graph queries")
    graph_sub = graph_p.add_subparsers(dest="graph_cmd")

    p = graph_sub.add_parser("stats", help="Counts, risk histogram and hotspots")
    _add_graph_arg(p)
    p.add_argument("--top", type=int, default=DEFAULT_HOTSPOT_LIMIT)

    p = graph_sub.add_parser("paths", help="All call paths between two methods")
    _add_graph_arg(p)
    p.add_argument("--source", required=True)
    p.add_argument("--target", required=True)
    p.add_argument("--max-depth", type=int)

    p = graph_sub.add_parser("impact", help="Methods within N hops in either direction")
    _add_graph_arg(p)
    p.add_argument("--method-id", required=True)
    p.add_argument("--depth", type=int, default=DEFAULT_IMPACT_RADIUS_DEPTH)

    p = graph_sub.add_parser("propagate", help="Spread a method's risk over its callers")
    _add_graph_arg(p)
    p.add_argument("--method-id", required=True)
    p.add_argument("--depth", type=int, default=DEFAULT_PROPAGATION_DEPTH)

    p = graph_sub.add_parser("update", help="Apply file-level changes and report the result")
    _add_graph_arg(p)
    p.add_argument("--changes", required=True, help="File changes (JSON)")
    p.add_argument("--analysis", help="Source analysis of added and modified files (JSON)")
    p.add_argument("--top", type=int, default=DEFAULT_HOTSPOT_LIMIT)


def _register_config_commands(sub: argparse._SubParsersAction) -> None:
    # -- config --
    config_p = sub.add_parser("config", help="Configuration")
    config_sub = config_p.add_subparsers(dest="config_cmd")
    config_sub.add_parser("show", help="Show effective configuration and override sources")
