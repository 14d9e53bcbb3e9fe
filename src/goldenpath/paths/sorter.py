"""Per-class ordering of analyzed paths.

Each sort is a single multi-key sort; the path id is the final ascending
key, so the order never depends on the order paths were supplied in.
"""

from __future__ import annotations

from collections.abc import Iterable

from goldenpath.analysis_models import AnalyzedPath


def golden_score(p: AnalyzedPath) -> float:
    i = p.intent_weight
    return 0.4 * i.business_value_score + 0.3 * i.implementation_completeness_score + 0.3 * i.code_quality_score


def risk_severity(p: AnalyzedPath) -> float:
    r = p.risk_weight
    return 0.4 * r.architectural_risk_score + 0.3 * r.blast_radius_score + 0.3 * r.change_complexity_score


def sort_golden_paths(paths: Iterable[AnalyzedPath]) -> list[AnalyzedPath]:
    """Highest value first, then higher confidence, then lower risk."""
    return sorted(paths, key=lambda p: (
        -golden_score(p),
        -p.confidence,
        p.risk_weight.total_risk,
        p.path.id,
    ))


def sort_risk_paths(paths: Iterable[AnalyzedPath]) -> list[AnalyzedPath]:
    """Most severe first; among equals the more valuable, then more confident."""
    return sorted(paths, key=lambda p: (
        -risk_severity(p),
        -p.intent_weight.business_value_score,
        -p.confidence,
        p.path.id,
    ))


def sort_neutral_paths(paths: Iterable[AnalyzedPath]) -> list[AnalyzedPath]:
    return sorted(paths, key=lambda p: (
        -(p.intent_weight.total_weight - p.risk_weight.total_risk),
        -p.intent_weight.business_value_score,
        -p.confidence,
        p.path.id,
    ))
