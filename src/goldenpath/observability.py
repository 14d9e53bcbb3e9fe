"""Observability: structured JSON logging and Prometheus-text metrics."""

from __future__ import annotations

import json
import logging
import threading
from collections import defaultdict
from typing import Any


# ---------------------------------------------------------------------------
# Structured JSON logging
# ---------------------------------------------------------------------------

_EXTRA_FIELDS = ("path_id", "method_id", "file_path", "duration_ms", "path_count")


class JsonFormatter(logging.Formatter):
    """Emit log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_dict: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0] is not None:
            log_dict["exception"] = self.formatException(record.exc_info)
        for key in _EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                log_dict[key] = val
        return json.dumps(log_dict, default=str)


def setup_logging(level: str = "INFO") -> None:
    """Configure root logger with JSON output."""
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


# ---------------------------------------------------------------------------
# Prometheus-compatible metrics (no external dependency)
# ---------------------------------------------------------------------------

_analysis_count: dict[str, int] = defaultdict(int)
_analysis_duration: dict[str, float] = defaultdict(float)
_paths_classified: dict[str, int] = defaultdict(int)
_graph_updates: dict[str, int] = defaultdict(int)
_metrics_lock = threading.Lock()


def record_analysis(duration: float, golden: int, risk: int, neutral: int, *, incomplete: bool = False) -> None:
    outcome = "incomplete" if incomplete else "complete"
    with _metrics_lock:
        _analysis_count[outcome] += 1
        _analysis_duration["sum"] += duration
        _analysis_duration["count"] += 1
        _paths_classified["golden"] += golden
        _paths_classified["risk"] += risk
        _paths_classified["neutral"] += neutral


def record_graph_update(affected_nodes: int, errors: int) -> None:
    with _metrics_lock:
        _graph_updates["updates"] += 1
        _graph_updates["affected_nodes"] += affected_nodes
        _graph_updates["errors"] += errors


def reset_metrics() -> None:
    with _metrics_lock:
        for counter in (_analysis_count, _analysis_duration, _paths_classified, _graph_updates):
            counter.clear()


def generate_metrics() -> str:
    """Render metrics in Prometheus text exposition format."""
    with _metrics_lock:
        analyses = dict(_analysis_count)
        duration = dict(_analysis_duration)
        classified = dict(_paths_classified)
        updates = dict(_graph_updates)

    lines: list[str] = []

    lines.append("# HELP goldenpath_analyses_total Path analysis batches by outcome.")
    lines.append("# TYPE goldenpath_analyses_total counter")
    for outcome, count in sorted(analyses.items()):
        lines.append(f'goldenpath_analyses_total{{outcome="{outcome}"}} {count}')

    lines.append("# HELP goldenpath_analysis_duration_seconds Path analysis batch duration.")
    lines.append("# TYPE goldenpath_analysis_duration_seconds summary")
    lines.append(f"goldenpath_analysis_duration_seconds_sum {duration.get('sum', 0.0):.6f}")
    lines.append(f"goldenpath_analysis_duration_seconds_count {int(duration.get('count', 0))}")

    lines.append("# HELP goldenpath_paths_classified_total Analyzed paths by classification.")
    lines.append("# TYPE goldenpath_paths_classified_total counter")
    for path_type, count in sorted(classified.items()):
        lines.append(f'goldenpath_paths_classified_total{{path_type="{path_type}"}} {count}')

    lines.append("# HELP goldenpath_graph_updates_total Incremental graph updates applied.")
    lines.append("# TYPE goldenpath_graph_updates_total counter")
    lines.append(f"goldenpath_graph_updates_total {updates.get('updates', 0)}")
    lines.append(f"goldenpath_graph_affected_nodes_total {updates.get('affected_nodes', 0)}")
    lines.append(f"goldenpath_graph_update_errors_total {updates.get('errors', 0)}")

    return "\n".join(lines) + "\n"
