"""Aggregate report over classified paths: summary, findings, recommendations."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from goldenpath.analysis_models import (
    AnalyzedPath,
    PathAnalysisReport,
    PathAnalysisSummary,
    QualityMetrics,
)
from goldenpath.config import AnalysisThresholds
from goldenpath.defaults import (
    DOMINANT_FACTOR_LIMIT,
    LONG_METHOD_LINES,
    LOW_COVERAGE_RATIO,
    OPPORTUNITY_KEYWORD_LIMIT,
    PROMOTION_INTENT_MIN,
    PROMOTION_RISK_MAX,
    RISK_FACTOR_LIMIT,
    RISK_REVIEW_LIMIT,
    WELL_TESTED_COVERAGE,
)
from goldenpath.paths import signals
from goldenpath.scoring._helpers import mean


def _ratio(part: int, total: int) -> float:
    return part / total if total else 0.0


def _factor_counts(paths: Sequence[AnalyzedPath]) -> list[tuple[str, int]]:
    counts = Counter(f for p in paths for f in p.risk_weight.details.risk_factors)
    return sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))


def build_summary(
    golden: Sequence[AnalyzedPath],
    risk: Sequence[AnalyzedPath],
    neutral: Sequence[AnalyzedPath],
) -> PathAnalysisSummary:
    all_paths = [*golden, *risk, *neutral]
    total = len(all_paths)
    return PathAnalysisSummary(
        total_paths=total,
        golden_path_count=len(golden),
        risk_path_count=len(risk),
        neutral_path_count=len(neutral),
        golden_path_ratio=_ratio(len(golden), total),
        risk_path_ratio=_ratio(len(risk), total),
        average_intent_weight=mean(p.intent_weight.total_weight for p in all_paths),
        average_risk_weight=mean(p.risk_weight.total_risk for p in all_paths),
        average_confidence=mean(p.confidence for p in all_paths),
    )


def key_findings(
    golden: Sequence[AnalyzedPath],
    risk: Sequence[AnalyzedPath],
    neutral: Sequence[AnalyzedPath],
) -> list[str]:
    all_paths = [*golden, *risk, *neutral]
    findings: list[str] = []
    if golden:
        top = max(p.intent_weight.business_value_score for p in golden)
        findings.append(f"Found {len(golden)} golden path(s); top business value {top:.0%}")
    if risk:
        top = max(p.risk_weight.total_risk for p in risk)
        findings.append(f"Found {len(risk)} risk path(s); highest risk score {top:.2f}")
    dominant = [name for name, _ in _factor_counts(all_paths)[:DOMINANT_FACTOR_LIMIT]]
    if dominant:
        findings.append(f"Dominant risk factors: {', '.join(dominant)}")
    if all_paths:
        coverage = mean(signals.path_test_coverage(p.path) for p in all_paths)
        findings.append(f"Overall test coverage across analyzed paths: {coverage:.0%}")
    violations = sum(1 for p in all_paths if signals.has_layer_violation(p.path))
    if violations:
        findings.append(f"{violations} path(s) contain layer violations")
    endpoints = sum(1 for p in all_paths if signals.is_restful_endpoint(p.path))
    if endpoints:
        findings.append(f"{endpoints} path(s) pass through REST endpoints")
    sensitive = sum(1 for p in all_paths if signals.has_sensitive_annotations(p.path))
    if sensitive:
        findings.append(f"{sensitive} path(s) touch security-sensitive methods")
    return findings


def recommendations(
    golden: Sequence[AnalyzedPath],
    risk: Sequence[AnalyzedPath],
    neutral: Sequence[AnalyzedPath],
    thresholds: AnalysisThresholds,
) -> list[str]:
    all_paths = [*golden, *risk, *neutral]
    recs: list[str] = []
    if risk:
        top = risk[:min(RISK_REVIEW_LIMIT, len(risk))]
        recs.append(f"Review the top {len(top)} risk path(s) first: {', '.join(p.path.id for p in top)}")
    complex_paths = [p for p in all_paths if signals.average_complexity(p.path) > thresholds.complexity_threshold]
    if complex_paths:
        recs.append(
            f"Refactor high-complexity methods on {len(complex_paths)} path(s) "
            f"(average complexity above {thresholds.complexity_threshold})"
        )
    long_paths = [p for p in all_paths if signals.average_method_length(p.path) > LONG_METHOD_LINES]
    if long_paths:
        recs.append(f"Split long methods on {len(long_paths)} path(s) (average above {LONG_METHOD_LINES} lines)")
    untested = [p for p in risk if signals.path_test_coverage(p.path) < LOW_COVERAGE_RATIO]
    if untested:
        recs.append(f"Add tests to {len(untested)} risk path(s) with coverage below {LOW_COVERAGE_RATIO:.0%}")
    if golden:
        recs.append(f"Protect {len(golden)} golden path(s) with regression tests and careful review")
        recs.append("Propagate golden path patterns (layering, validation, tests) to related code")
    promotable = [
        p for p in neutral
        if p.intent_weight.total_weight >= PROMOTION_INTENT_MIN and p.risk_weight.total_risk <= PROMOTION_RISK_MAX
    ]
    if promotable:
        recs.append(f"{len(promotable)} neutral path(s) show golden path potential")
    return recs


def risk_factor_summary(paths: Sequence[AnalyzedPath]) -> list[str]:
    return [f"{name} ({count} occurrences)" for name, count in _factor_counts(paths)[:RISK_FACTOR_LIMIT]]


def opportunity_areas(golden: Sequence[AnalyzedPath]) -> list[str]:
    areas: list[str] = []
    keywords = Counter(k for p in golden for k in p.intent_weight.details.business_keywords)
    top = sorted(keywords.items(), key=lambda kv: (-kv[1], kv[0]))[:OPPORTUNITY_KEYWORD_LIMIT]
    if top:
        areas.append(f"Business keywords in golden paths: {', '.join(k for k, _ in top)}")
    well_tested = [p for p in golden if signals.path_test_coverage(p.path) >= WELL_TESTED_COVERAGE]
    if well_tested:
        areas.append(f"{len(well_tested)} well-tested golden path(s) can serve as reference implementations")
    terms = sorted({t for p in golden for t in signals.business_terms(p.path)})
    if terms:
        areas.append(f"Business operations covered by golden paths: {', '.join(terms)}")
    return areas


def quality_metrics(paths: Sequence[AnalyzedPath]) -> QualityMetrics:
    if not paths:
        return QualityMetrics()
    code_quality = mean(p.intent_weight.code_quality_score for p in paths)
    architectural_health = 1.0 - mean(p.risk_weight.architectural_risk_score for p in paths)
    test_maturity = mean(signals.path_test_coverage(p.path) for p in paths)
    business_alignment = mean(p.intent_weight.business_value_score for p in paths)
    return QualityMetrics(
        code_quality_score=code_quality,
        architectural_health=architectural_health,
        test_maturity=test_maturity,
        business_alignment=business_alignment,
        overall_score=mean([code_quality, architectural_health, test_maturity, business_alignment]),
    )


def generate_report(
    golden: Sequence[AnalyzedPath],
    risk: Sequence[AnalyzedPath],
    neutral: Sequence[AnalyzedPath],
    thresholds: AnalysisThresholds | None = None,
) -> PathAnalysisReport:
    """Build the report from already sorted golden, risk and neutral lists."""
    thresholds = thresholds or AnalysisThresholds()
    all_paths = [*golden, *risk, *neutral]
    return PathAnalysisReport(
        summary=build_summary(golden, risk, neutral),
        key_findings=key_findings(golden, risk, neutral),
        recommendations=recommendations(golden, risk, neutral, thresholds),
        risk_factors=risk_factor_summary(all_paths),
        opportunity_areas=opportunity_areas(golden),
        quality_metrics=quality_metrics(all_paths),
    )
