"""Batch path analysis: concurrent scoring, classification, sorting and reporting.

Each analysis runs against a snapshot of the graph store taken when it
starts, so a result never mixes node states from before and after a
concurrent incremental update. Intent and risk scoring fan out as one task
per path per calculator on a thread pool; the join is bounded by a timeout,
after which unfinished paths are skipped and the result is flagged
``incomplete``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import replace

from goldenpath import observability
from goldenpath.analysis_models import (
    AnalyzedPath,
    IntentWeightResult,
    PathAnalysisContext,
    PathAnalysisResult,
    RiskWeightResult,
)
from goldenpath.config import AnalysisConfig
from goldenpath.graph import GraphStore
from goldenpath.models import CallPath, PathType
from goldenpath.paths.classifier import calculate_priority, determine_path_type, path_confidence
from goldenpath.paths.discovery import discover_candidate_paths
from goldenpath.paths.report import generate_report
from goldenpath.paths.sorter import sort_golden_paths, sort_neutral_paths, sort_risk_paths
from goldenpath.scoring import IntentWeightCalculator, RiskWeightCalculator

log = logging.getLogger("goldenpath.paths")

_MS_PER_SECOND = 1000


class InvalidBatchError(ValueError):
    """Raised before any scoring when a batch cannot be analyzed."""


def validate_batch(paths: Sequence[CallPath]) -> None:
    if not paths:
        raise InvalidBatchError("path batch is empty")
    for path in paths:
        if not path.methods:
            raise InvalidBatchError(f"path {path.id} has no methods")


class PathAnalyzer:
    """Scores, classifies and ranks candidate paths over a graph store."""

    def __init__(self, store: GraphStore, config: AnalysisConfig | None = None) -> None:
        self._store = store
        self._config = config or AnalysisConfig()

    def analyze_change(self, context: PathAnalysisContext, timeout: float | None = None) -> PathAnalysisResult:
        """Discover candidate paths to the changed methods, then analyze them.

        Discovery and scoring read the same store snapshot.
        """
        snapshot = self._store.snapshot()
        paths = discover_candidate_paths(
            snapshot, context.changed_methods, self._config.max_path_depth, self._config.max_paths,
        )
        return self.analyze(paths, context, timeout=timeout, snapshot=snapshot)

    def analyze(
        self,
        paths: Sequence[CallPath],
        context: PathAnalysisContext,
        timeout: float | None = None,
        snapshot: GraphStore | None = None,
    ) -> PathAnalysisResult:
        validate_batch(paths)
        started = time.monotonic()
        timeout = self._config.batch_timeout_seconds if timeout is None else timeout
        thresholds = context.thresholds or self._config.thresholds

        intents, risks, errors, timed_out = self._score(paths, context, timeout, snapshot)

        golden: list[AnalyzedPath] = []
        risky: list[AnalyzedPath] = []
        neutral: list[AnalyzedPath] = []
        skipped: list[str] = []
        for i, path in enumerate(paths):
            if i not in intents or i not in risks:
                skipped.append(path.id)
                continue
            intent, risk = intents[i], risks[i]
            path_type = determine_path_type(path, intent, risk, thresholds)
            analyzed = AnalyzedPath(
                path=replace(path, path_type=path_type, total_weight=intent.total_weight),
                intent_weight=intent,
                risk_weight=risk,
                path_type=path_type,
                priority=calculate_priority(intent, risk),
                confidence=path_confidence(path, intent, risk),
            )
            if path_type == PathType.GOLDEN_PATH:
                golden.append(analyzed)
            elif path_type == PathType.RISK_PATH:
                risky.append(analyzed)
            else:
                neutral.append(analyzed)

        golden = sort_golden_paths(golden)
        risky = sort_risk_paths(risky)
        neutral = sort_neutral_paths(neutral)
        incomplete = timed_out or bool(skipped)

        duration = time.monotonic() - started
        observability.record_analysis(duration, len(golden), len(risky), len(neutral), incomplete=incomplete)
        log.info(
            "Analyzed %d paths: %d golden, %d risk, %d neutral",
            len(paths) - len(skipped), len(golden), len(risky), len(neutral),
            extra={"path_count": len(paths), "duration_ms": round(duration * _MS_PER_SECOND, 1)},
        )
        return PathAnalysisResult(
            golden_paths=golden,
            risk_paths=risky,
            neutral_paths=neutral,
            report=generate_report(golden, risky, neutral, thresholds),
            total_analyzed_paths=len(golden) + len(risky) + len(neutral),
            incomplete=incomplete,
            skipped_path_ids=skipped,
            errors=errors,
        )

    def _score(
        self,
        paths: Sequence[CallPath],
        context: PathAnalysisContext,
        timeout: float,
        snapshot: GraphStore | None = None,
    ) -> tuple[dict[int, IntentWeightResult], dict[int, RiskWeightResult], list[str], bool]:
        """Fan out 2 x N scoring tasks and join them within *timeout* seconds."""
        if snapshot is None:
            snapshot = self._store.snapshot()
        intent_calc = IntentWeightCalculator(snapshot)
        risk_calc = RiskWeightCalculator(snapshot)
        changed = set(context.changed_methods)

        tasks: list[tuple[str, int, Future]] = []
        pool = ThreadPoolExecutor(max_workers=max(1, self._config.max_workers), thread_name_prefix="goldenpath")
        try:
            for i, path in enumerate(paths):
                tasks.append(("intent", i, pool.submit(
                    intent_calc.calculate_path_intent_weight,
                    path, context.commit_history, context.file_analysis_results,
                )))
                tasks.append(("risk", i, pool.submit(
                    risk_calc.calculate_path_risk_weight,
                    path, changed, context.file_analysis_results,
                )))
            _, pending = wait([f for _, _, f in tasks], timeout=timeout)
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

        if pending:
            log.warning(
                "Path analysis timed out after %.1fs with %d task(s) outstanding", timeout, len(pending),
                extra={"path_count": len(paths)},
            )

        intents: dict[int, IntentWeightResult] = {}
        risks: dict[int, RiskWeightResult] = {}
        errors: list[str] = []
        for kind, i, future in tasks:
            if future in pending or future.cancelled():
                continue
            exc = future.exception()
            if exc is not None:
                log.warning("%s scoring failed for %s: %s", kind, paths[i].id, exc, extra={"path_id": paths[i].id})
                errors.append(f"{kind} scoring failed for {paths[i].id}: {exc}")
                continue
            if kind == "intent":
                intents[i] = future.result()
            else:
                risks[i] = future.result()
        return intents, risks, errors, bool(pending)
