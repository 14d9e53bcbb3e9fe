"""Risk weight: composite danger of a path or method.

Four path signals in [0, 1], combined 0.35 / 0.30 / 0.25 / 0.10:
  - architectural:      layer violations, cycles, coupling, single points of failure
  - blast radius:       reach of the changed methods on the path
  - change complexity:  size and complexity of the changed methods
  - data flow:          shared state, concurrency and transactional consistency

Blast radius and change complexity look only at changed methods that lie
on the path; both are exactly 0 when none do.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Collection, Sequence

from goldenpath.analysis_models import (
    MethodRiskWeight,
    RiskAnalysisDetails,
    RiskCalculationContext,
    RiskCategory,
    RiskWeightResult,
)
from goldenpath.defaults import (
    DATA_ACCESS_LAYERS,
    DEFAULT_LAYER_RISK,
    LAYER_HIERARCHY,
    LAYER_RISK,
    PATH_RISK_BANDS,
    UNMAPPED_LAYER_LEVEL,
)
from goldenpath.graph import GraphStore
from goldenpath.inbound import FileAnalysisResult
from goldenpath.models import BlockType, CallPath, MethodNode, RiskLevel
from goldenpath.scoring._constants import (
    _ARCHITECTURAL_WEIGHTS,
    _BAND_MAX,
    _BLAST_COMPLEXITY_NORM,
    _BLAST_OUT_DEGREE_NORM,
    _BLAST_STRUCTURE_WEIGHT,
    _CHANGE_COMPLEXITY_NORM,
    _CHANGE_LENGTH_NORM,
    _CHANGE_LOC_NORM,
    _CHANGE_PARAM_NORM,
    _CHANGED_COUNT_NORM,
    _COMPLEXITY_BANDS,
    _CONCURRENCY_ANNOTATIONS,
    _CONSISTENCY_GUARDED,
    _CONSISTENCY_PARTIAL,
    _CONSISTENCY_UNGUARDED,
    _CRITICAL_IN_DEGREE,
    _CROSS_LAYER_FACTOR_MIN,
    _DATA_FLOW_WEIGHTS,
    _DEFAULT_HISTORY_RISK,
    _ENTRY_POINT_RISK_MIN,
    _FREQUENT_CHANGE_RISK,
    _GLOBAL_STATE_ANNOTATIONS,
    _HIGH_COMPLEXITY,
    _HIGH_FAN_IN,
    _HISTORY_BASE_RISK,
    _HOTSPOT_RISK,
    _MAX_IN_DEGREE_NORM,
    _METHOD_IN_DEGREE_NORM,
    _METHOD_LAYER_SCALE,
    _METHOD_OUT_DEGREE_NORM,
    _METHOD_RISK_WEIGHTS,
    _METHOD_TRANSACTIONAL_BONUS,
    _MITIGATION_AVG_COMPLEXITY,
    _MITIGATION_COVERAGE,
    _OUT_DEGREE_NORM,
    _QUALITY_RISK_MIN,
    _RISK_PATH_LENGTH_NORM,
    _RISK_WEIGHTS,
    _SIZE_BANDS,
    _TRANSACTIONAL_ANNOTATION,
    _UNTESTED_CONFIDENCE,
)
from goldenpath.scoring._helpers import band, clamp, mean, resolved_edges

log = logging.getLogger("goldenpath.scoring")


def classify_risk_level(score: float) -> RiskLevel:
    for bound, level in PATH_RISK_BANDS:
        if score < bound:
            return RiskLevel(level)
    return RiskLevel.CRITICAL


def _level(method: MethodNode) -> int:
    return LAYER_HIERARCHY.get(method.block_type.value, UNMAPPED_LAYER_LEVEL)


def _is_transactional(method: MethodNode) -> bool:
    return method.has_annotation(_TRANSACTIONAL_ANNOTATION)


# ---------------------------------------------------------------------------
# Architectural risk
# ---------------------------------------------------------------------------

def cross_layer_violation_ratio(methods: Sequence[MethodNode]) -> float:
    """Violations per transition: one for an upward call, one for skipping a layer."""
    if len(methods) <= 1:
        return 0.0
    violations = 0
    for current, nxt in zip(methods, methods[1:]):
        a, b = _level(current), _level(nxt)
        if b < a:
            violations += 1
        if abs(b - a) > 1:
            violations += 1
    return min(1.0, violations / (len(methods) - 1))


def circular_dependency_ratio(methods: Sequence[MethodNode]) -> float:
    if not methods:
        return 0.0
    duplicates = len(methods) - len({m.id for m in methods})
    return min(1.0, duplicates / len(methods))


def tight_coupling_risk(path: CallPath, graph: GraphStore | None = None) -> float:
    n = len(path.methods)
    if n <= 1:
        return 0.0
    avg_out = mean(m.out_degree for m in path.methods)
    density = len(resolved_edges(path, graph)) / (n * (n - 1) / 2)
    return (min(1.0, avg_out / _OUT_DEGREE_NORM) + min(1.0, density)) / 2


def single_point_failure_risk(methods: Sequence[MethodNode]) -> float:
    critical = [m for m in methods if m.in_degree > _CRITICAL_IN_DEGREE]
    if not critical:
        return 0.0
    ratio = len(critical) / len(methods)
    max_in = max(m.in_degree for m in methods)
    return (ratio + min(1.0, max_in / _MAX_IN_DEGREE_NORM)) / 2


def architectural_risk_score(path: CallPath, graph: GraphStore | None = None) -> float:
    w = _ARCHITECTURAL_WEIGHTS
    methods = path.methods
    return clamp(
        w["cross_layer"] * cross_layer_violation_ratio(methods)
        + w["circular"] * circular_dependency_ratio(methods)
        + w["coupling"] * tight_coupling_risk(path, graph)
        + w["single_point"] * single_point_failure_risk(methods)
    )


# ---------------------------------------------------------------------------
# Changed-method signals
# ---------------------------------------------------------------------------

def changed_on_path(methods: Sequence[MethodNode], changed_method_ids: Collection[str]) -> list[MethodNode]:
    """Distinct changed methods on the path, in path order."""
    seen: set[str] = set()
    hits = []
    for m in methods:
        if m.id in changed_method_ids and m.id not in seen:
            seen.add(m.id)
            hits.append(m)
    return hits


def method_impact(method: MethodNode) -> float:
    reach = math.log(method.in_degree + 1) / math.log(10)
    structure = min(1.0, (method.cyclomatic_complexity / _BLAST_COMPLEXITY_NORM
                          + method.out_degree / _BLAST_OUT_DEGREE_NORM) / 2)
    return min(1.0, reach + _BLAST_STRUCTURE_WEIGHT * structure)


def blast_radius_score(changed: Sequence[MethodNode]) -> float:
    if not changed:
        return 0.0
    return min(1.0, mean(method_impact(m) for m in changed))


def change_complexity_score(changed: Sequence[MethodNode], path_length: int) -> float:
    if not changed:
        return 0.0
    return mean([
        min(1.0, mean(m.cyclomatic_complexity for m in changed) / _CHANGE_COMPLEXITY_NORM),
        min(1.0, mean(m.lines_of_code for m in changed) / _CHANGE_LOC_NORM),
        min(1.0, mean(len(m.param_types) for m in changed) / _CHANGE_PARAM_NORM),
        min(1.0, path_length / _CHANGE_LENGTH_NORM),
    ])


# ---------------------------------------------------------------------------
# Data-flow risk
# ---------------------------------------------------------------------------

def consistency_risk(methods: Sequence[MethodNode]) -> float:
    data_access = sum(1 for m in methods if m.block_type.value in DATA_ACCESS_LAYERS)
    transactional = sum(1 for m in methods if _is_transactional(m))
    if data_access > 0 and transactional == 0:
        return _CONSISTENCY_UNGUARDED
    if transactional < data_access:
        return _CONSISTENCY_PARTIAL
    return _CONSISTENCY_GUARDED


def data_flow_risk_score(methods: Sequence[MethodNode]) -> float:
    w = _DATA_FLOW_WEIGHTS
    global_state = mean(
        1.0 if m.has_annotation(*_GLOBAL_STATE_ANNOTATIONS) or "static" in m.method_name.lower() else 0.0
        for m in methods
    )
    concurrency = mean(1.0 if m.has_annotation(*_CONCURRENCY_ANNOTATIONS) else 0.0 for m in methods)
    return clamp(
        w["global_state"] * global_state
        + w["concurrency"] * concurrency
        + w["consistency"] * consistency_risk(methods)
    )


# ---------------------------------------------------------------------------
# Details and confidence
# ---------------------------------------------------------------------------

def _risk_details(
    methods: Sequence[MethodNode],
    changed: Sequence[MethodNode],
    cross_layer: float,
) -> RiskAnalysisDetails:
    critical = list(dict.fromkeys(
        m.id for m in methods
        if m.in_degree > _CRITICAL_IN_DEGREE
        or m.cyclomatic_complexity > _HIGH_COMPLEXITY
        or m.block_type == BlockType.CONTROLLER
        or not m.has_tests
    ))

    factors: list[str] = []
    if any(m.cyclomatic_complexity > _HIGH_COMPLEXITY for m in methods):
        factors.append("High cyclomatic complexity")
    if any(not m.has_tests for m in methods):
        factors.append("Missing test coverage")
    if any(m.in_degree > _HIGH_FAN_IN for m in methods):
        factors.append("High fan-in dependency")
    if cross_layer > _CROSS_LAYER_FACTOR_MIN:
        factors.append("Cross-layer call violations")

    suggestions: list[str] = []
    if mean(m.cyclomatic_complexity for m in methods) > _MITIGATION_AVG_COMPLEXITY:
        suggestions.append("Split complex methods to reduce cyclomatic complexity")
    if mean(1.0 if m.has_tests else 0.0 for m in methods) < _MITIGATION_COVERAGE:
        suggestions.append("Add unit tests for untested methods on this path")
    if cross_layer > _CROSS_LAYER_FACTOR_MIN:
        suggestions.append("Route calls through the service layer to restore layering")

    return RiskAnalysisDetails(
        critical_methods=critical,
        risk_factors=factors,
        mitigation_suggestions=suggestions,
        impacted_components=list(dict.fromkeys(m.class_id for m in changed)),
    )


def risk_confidence(methods: Sequence[MethodNode], changed_count: int) -> float:
    return mean([
        min(1.0, len(methods) / _RISK_PATH_LENGTH_NORM),
        min(1.0, changed_count / _CHANGED_COUNT_NORM),
        mean(1.0 if m.has_tests and m.annotations else _UNTESTED_CONFIDENCE for m in methods),
    ])


# ---------------------------------------------------------------------------
# Method-level risk
# ---------------------------------------------------------------------------

def _method_history_risk(method: MethodNode, context: RiskCalculationContext) -> float:
    history = context.project_history
    if history is None:
        return _DEFAULT_HISTORY_RISK
    risk = _HISTORY_BASE_RISK
    if method.id in history.hotspot_methods:
        risk += _HOTSPOT_RISK
    if method.file_path in history.frequently_changed_files:
        risk += _FREQUENT_CHANGE_RISK
    return min(1.0, risk)


def _risk_category(method: MethodNode, total: float) -> RiskCategory:
    if method.block_type == BlockType.CONTROLLER and total > _ENTRY_POINT_RISK_MIN:
        return RiskCategory.ENTRY_POINT_RISK
    if method.cyclomatic_complexity > _HIGH_COMPLEXITY:
        return RiskCategory.COMPLEXITY_RISK
    if method.in_degree > _HIGH_FAN_IN:
        return RiskCategory.DEPENDENCY_RISK
    if not method.has_tests and total > _QUALITY_RISK_MIN:
        return RiskCategory.QUALITY_RISK
    if method.has_annotation(*_CONCURRENCY_ANNOTATIONS):
        return RiskCategory.CONCURRENCY_RISK
    if method.block_type.value in DATA_ACCESS_LAYERS and not _is_transactional(method):
        return RiskCategory.DATA_RISK
    return RiskCategory.GENERAL_RISK


def _criticality(method: MethodNode) -> float:
    return min(1.0, mean([
        method.in_degree / _METHOD_IN_DEGREE_NORM,
        1.0 if method.block_type == BlockType.CONTROLLER else 0.5,
        method.cyclomatic_complexity / _CHANGE_COMPLEXITY_NORM,
        0.2 if method.has_tests else 0.8,
    ]))


# ---------------------------------------------------------------------------
# Calculator
# ---------------------------------------------------------------------------

class RiskWeightCalculator:
    """Pure risk scoring; *graph* resolves path edges when given."""

    def __init__(self, graph: GraphStore | None = None) -> None:
        self._graph = graph

    def calculate_path_risk_weight(
        self,
        path: CallPath,
        changed_method_ids: Collection[str] = (),
        file_analysis_results: Sequence[FileAnalysisResult] = (),
    ) -> RiskWeightResult:
        methods = path.methods
        changed_ids = set(changed_method_ids)
        changed = changed_on_path(methods, changed_ids)

        architectural = architectural_risk_score(path, self._graph)
        blast = blast_radius_score(changed)
        complexity = change_complexity_score(changed, len(methods))
        data_flow = data_flow_risk_score(methods)
        w = _RISK_WEIGHTS
        total = clamp(
            w["architectural"] * architectural
            + w["blast_radius"] * blast
            + w["change_complexity"] * complexity
            + w["data_flow"] * data_flow
        )
        log.debug("Path %s risk %.3f", path.id, total, extra={"path_id": path.id})
        return RiskWeightResult(
            total_risk=total,
            architectural_risk_score=architectural,
            blast_radius_score=blast,
            change_complexity_score=complexity,
            data_flow_risk_score=data_flow,
            risk_level=classify_risk_level(total),
            confidence=risk_confidence(methods, len(changed_ids)),
            details=_risk_details(methods, changed, cross_layer_violation_ratio(methods)),
        )

    def calculate_method_risk_weight(
        self,
        method: MethodNode,
        context: RiskCalculationContext | None = None,
    ) -> MethodRiskWeight:
        context = context or RiskCalculationContext()
        layer = LAYER_RISK.get(method.block_type.value, DEFAULT_LAYER_RISK)
        architectural = clamp(
            layer * _METHOD_LAYER_SCALE
            + (_METHOD_TRANSACTIONAL_BONUS if _is_transactional(method) else 0.0)
        )
        complexity = mean([
            band(method.cyclomatic_complexity, _COMPLEXITY_BANDS, _BAND_MAX),
            band(method.lines_of_code, _SIZE_BANDS, _BAND_MAX),
        ])
        dependency = (min(1.0, method.in_degree / _METHOD_IN_DEGREE_NORM)
                      + min(1.0, method.out_degree / _METHOD_OUT_DEGREE_NORM)) / 2
        history = _method_history_risk(method, context)
        w = _METHOD_RISK_WEIGHTS
        total = clamp(
            w["architectural"] * architectural
            + w["complexity"] * complexity
            + w["dependency"] * dependency
            + w["history"] * history
        )
        return MethodRiskWeight(
            method_id=method.id,
            total_risk=total,
            architectural_risk=architectural,
            complexity_risk=complexity,
            dependency_risk=dependency,
            change_history_risk=history,
            risk_category=_risk_category(method, total),
            criticality=_criticality(method),
        )


def refresh_method_risk_scores(
    store: GraphStore,
    calculator: RiskWeightCalculator | None = None,
    context: RiskCalculationContext | None = None,
) -> dict[str, float]:
    """Score every stored method and write the totals back as its risk score."""
    calculator = calculator or RiskWeightCalculator(store)
    scores: dict[str, float] = {}
    with store.locked():
        for method in store.list_methods():
            scores[method.id] = calculator.calculate_method_risk_weight(method, context).total_risk
            store.update_risk_score(method.id, scores[method.id])
    return scores
