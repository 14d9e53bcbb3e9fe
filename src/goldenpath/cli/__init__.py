"""CLI for goldenpath: grouped subcommands.

Commands:
  goldenpath analyze
  goldenpath graph {stats, paths, impact, propagate, update}
  goldenpath config show
"""

from __future__ import annotations

import sys

from goldenpath.cli._helpers import _out  # noqa: F401  re-exported for tests
from goldenpath.cli._parser import build_parser
from goldenpath.cli.analyze_cmds import cmd_analyze, cmd_config_show
from goldenpath.cli.graph_cmds import (
    cmd_graph_impact,
    cmd_graph_paths,
    cmd_graph_propagate,
    cmd_graph_stats,
    cmd_graph_update,
)
from goldenpath.config import load_config
from goldenpath.observability import setup_logging


# ===================================================================
# Dispatch
# ===================================================================

_DISPATCH = {
    ("analyze", None): cmd_analyze,
    ("graph", "stats"): cmd_graph_stats,
    ("graph", "paths"): cmd_graph_paths,
    ("graph", "impact"): cmd_graph_impact,
    ("graph", "propagate"): cmd_graph_propagate,
    ("graph", "update"): cmd_graph_update,
    ("config", "show"): cmd_config_show,
}

# Map subcmd attr names to the dispatch key
_SUBCMD_ATTR = {
    "graph": "graph_cmd",
    "config": "config_cmd",
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    if not args.command:
        parser.print_help()
        return 1

    args.cfg = load_config(args.config)
    setup_logging(args.log_level or args.cfg.log_level)

    # Resolve dispatch key
    subcmd_attr = _SUBCMD_ATTR.get(args.command)
    subcmd = getattr(args, subcmd_attr, None) if subcmd_attr else None
    handler = _DISPATCH.get((args.command, subcmd))
    if handler is None:
        parser.print_help()
        return 1

    return handler(args)
