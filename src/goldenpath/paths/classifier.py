"""Path classification, review priority and combined confidence.

Classification is evaluated in a fixed order and the first match wins:
golden, then risk, then neutral. A path that qualifies for both golden and
risk signals is reported as golden. Within neutral, valuable but
moderately risky paths are tagged ``CRITICAL_PATH``.
"""

from __future__ import annotations

from goldenpath.analysis_models import IntentWeightResult, RiskWeightResult
from goldenpath.config import AnalysisThresholds
from goldenpath.defaults import (
    CRITICAL_INTENT_MIN,
    CRITICAL_RISK_MAX,
    CRITICAL_RISK_MIN,
    PRIORITY_BANDS,
)
from goldenpath.models import CallPath, PathPriority, PathType
from goldenpath.paths import signals

_PRIORITY_INTENT_WEIGHT = 0.6
_PRIORITY_SAFETY_WEIGHT = 0.4
_CONFIDENCE_LENGTH_NORM = 10


def is_golden_path(
    path: CallPath,
    intent: IntentWeightResult,
    risk: RiskWeightResult,
    thresholds: AnalysisThresholds,
) -> bool:
    t = thresholds
    if intent.total_weight < t.golden_path_intent_threshold or risk.total_risk > t.golden_path_risk_threshold:
        return False
    strong_scores = (
        intent.business_value_score >= t.golden_business_value_min
        and intent.code_quality_score >= t.golden_code_quality_min
    )
    structural = (
        signals.has_new_endpoint(path)
        or signals.is_core_business_entity(path)
        or signals.has_data_model_changes(path)
    )
    return strong_scores or structural or signals.path_test_coverage(path) >= t.test_coverage_threshold


def is_risk_path(
    path: CallPath,
    intent: IntentWeightResult,
    risk: RiskWeightResult,
    thresholds: AnalysisThresholds,
) -> bool:
    t = thresholds
    if (
        risk.total_risk >= t.risk_path_risk_threshold
        or risk.architectural_risk_score >= t.architectural_risk_threshold
        or risk.blast_radius_score >= t.blast_radius_threshold
        or risk.change_complexity_score >= t.change_complexity_threshold
    ):
        return True
    if (
        signals.has_layer_violation(path)
        or signals.has_circular_dependency(path)
        or signals.path_test_coverage(path) < t.low_test_coverage_threshold
    ):
        return True
    return signals.has_transactional_operations(path) and (
        signals.has_external_api_calls(path) or signals.has_database_operations(path)
    )


def is_critical_path(intent: IntentWeightResult, risk: RiskWeightResult) -> bool:
    return intent.total_weight >= CRITICAL_INTENT_MIN and CRITICAL_RISK_MIN <= risk.total_risk <= CRITICAL_RISK_MAX


def determine_path_type(
    path: CallPath,
    intent: IntentWeightResult,
    risk: RiskWeightResult,
    thresholds: AnalysisThresholds | None = None,
) -> PathType:
    thresholds = thresholds or AnalysisThresholds()
    if is_golden_path(path, intent, risk, thresholds):
        return PathType.GOLDEN_PATH
    if is_risk_path(path, intent, risk, thresholds):
        return PathType.RISK_PATH
    if is_critical_path(intent, risk):
        return PathType.CRITICAL_PATH
    return PathType.NEUTRAL_PATH


def calculate_priority(intent: IntentWeightResult, risk: RiskWeightResult) -> PathPriority:
    combined = _PRIORITY_INTENT_WEIGHT * intent.total_weight + _PRIORITY_SAFETY_WEIGHT * (1.0 - risk.total_risk)
    for bound, level in PRIORITY_BANDS:
        if combined >= bound:
            return PathPriority(level)
    return PathPriority.LOW


def path_confidence(path: CallPath, intent: IntentWeightResult, risk: RiskWeightResult) -> float:
    length_factor = min(1.0, len(path.methods) / _CONFIDENCE_LENGTH_NORM)
    return (length_factor + intent.confidence + risk.confidence) / 3
