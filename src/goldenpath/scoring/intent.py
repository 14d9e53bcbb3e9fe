"""Intent weight: how much durable business value a path or method carries.

Three sub-scores in [0, 1], combined 0.4 / 0.35 / 0.25:
  - business value:  commit keyword overlap, business vocabulary, layer
                     importance and call popularity
  - completeness:    exception handling, tests, validation, logging and
                     resource management coverage
  - code quality:    complexity, duplication, naming and connectivity
"""

from __future__ import annotations

import math
import re
from collections.abc import Sequence

from goldenpath.analysis_models import (
    IntentAnalysisDetails,
    IntentCalculationContext,
    IntentType,
    IntentWeightResult,
    MethodIntentWeight,
)
from goldenpath.defaults import BUSINESS_TERMS, DEFAULT_LAYER_WEIGHT, LAYER_WEIGHTS
from goldenpath.graph import GraphStore
from goldenpath.inbound import CommitAnalysis, FileAnalysisResult
from goldenpath.models import CallPath, MethodNode
from goldenpath.scoring._constants import (
    _BUSINESS_WEIGHTS,
    _COMPLETENESS_WEIGHTS,
    _COMPLEXITY_PENALTIES,
    _COMPLEXITY_PENALTY_MAX,
    _DUPLICATION_CAP,
    _EXCEPTION_ANNOTATIONS,
    _EXCEPTION_NAME_HINTS,
    _HISTORY_SIZE_NORM,
    _INTENT_PATH_LENGTH_NORM,
    _INTENT_TYPE_PREFIXES,
    _INTENT_WEIGHTS,
    _LOGGING_LAYERS,
    _METHOD_QUALITY_BANDS,
    _METHOD_QUALITY_MIN,
    _NAMING_PATTERNS,
    _NO_HISTORY_KEYWORD_SCORE,
    _QUALITY_WEIGHTS,
    _RESOURCE_ANNOTATIONS,
    _UNTESTED_CONFIDENCE,
    _VALIDATION_ANNOTATIONS,
    _VALIDATION_NAME_HINTS,
)
from goldenpath.scoring._helpers import band, clamp, mean, resolved_edges
from goldenpath.scoring.keywords import commit_keywords, path_keywords

_NAMING_RES = [re.compile(p) for p in _NAMING_PATTERNS]


# ---------------------------------------------------------------------------
# Business value
# ---------------------------------------------------------------------------

def keyword_overlap(methods: Sequence[MethodNode], history: Sequence[CommitAnalysis]) -> float:
    if not history:
        return _NO_HISTORY_KEYWORD_SCORE
    keywords = path_keywords(methods)
    return len(keywords & commit_keywords(history)) / max(len(keywords), 1)


def _mentions_business_term(method: MethodNode) -> bool:
    names = (method.method_name.lower(), method.class_name.lower())
    return any(term in name for term in BUSINESS_TERMS for name in names)


def semantic_term_match(methods: Sequence[MethodNode]) -> float:
    return mean(1.0 if _mentions_business_term(m) else 0.0 for m in methods)


def layer_importance(methods: Sequence[MethodNode]) -> float:
    return mean(LAYER_WEIGHTS.get(m.block_type.value, DEFAULT_LAYER_WEIGHT) for m in methods)


def activity_score(methods: Sequence[MethodNode]) -> float:
    """Logarithmic popularity: ln(in_degree + 1) / ln(10), capped at 1 per method."""
    return mean(min(1.0, math.log(m.in_degree + 1) / math.log(10)) for m in methods)


def business_value_score(methods: Sequence[MethodNode], history: Sequence[CommitAnalysis]) -> float:
    w = _BUSINESS_WEIGHTS
    return clamp(
        w["keyword"] * keyword_overlap(methods, history)
        + w["semantic"] * semantic_term_match(methods)
        + w["layer"] * layer_importance(methods)
        + w["activity"] * activity_score(methods)
    )


# ---------------------------------------------------------------------------
# Implementation completeness
# ---------------------------------------------------------------------------

def _name_has(method: MethodNode, hints: tuple[str, ...]) -> bool:
    name = method.method_name.lower()
    return any(h in name for h in hints)


_COMPLETENESS_PREDICATES = {
    "exception_handling": lambda m: m.has_annotation(*_EXCEPTION_ANNOTATIONS) or _name_has(m, _EXCEPTION_NAME_HINTS),
    "test_coverage": lambda m: m.has_tests,
    "parameter_validation": lambda m: m.has_annotation(*_VALIDATION_ANNOTATIONS) or _name_has(m, _VALIDATION_NAME_HINTS),
    "logging": lambda m: m.out_degree > 0 and m.block_type.value in _LOGGING_LAYERS,
    "resource_management": lambda m: m.has_annotation(*_RESOURCE_ANNOTATIONS),
}


def completeness_indicators(methods: Sequence[MethodNode]) -> dict[str, float]:
    """Fraction of methods satisfying each completeness predicate."""
    return {
        name: mean(1.0 if predicate(m) else 0.0 for m in methods)
        for name, predicate in _COMPLETENESS_PREDICATES.items()
    }


def completeness_score(methods: Sequence[MethodNode]) -> float:
    indicators = completeness_indicators(methods)
    return clamp(sum(_COMPLETENESS_WEIGHTS[k] * v for k, v in indicators.items()))


# ---------------------------------------------------------------------------
# Code quality
# ---------------------------------------------------------------------------

def average_complexity(methods: Sequence[MethodNode]) -> float:
    return mean(m.cyclomatic_complexity for m in methods)


def complexity_penalty(methods: Sequence[MethodNode]) -> float:
    return band(average_complexity(methods), _COMPLEXITY_PENALTIES, _COMPLEXITY_PENALTY_MAX)


def duplication_penalty(methods: Sequence[MethodNode]) -> float:
    if not methods:
        return 0.0
    distinct = len({m.signature or m.id for m in methods})
    return (1.0 - distinct / len(methods)) * _DUPLICATION_CAP


def naming_score(methods: Sequence[MethodNode]) -> float:
    return mean(1.0 if any(r.fullmatch(m.method_name) for r in _NAMING_RES) else 0.0 for m in methods)


def connectivity(path: CallPath, graph: GraphStore | None = None) -> float:
    """Resolved edges per hop; 1.0 for a single-method path."""
    if path.hops == 0:
        return 1.0
    return len(resolved_edges(path, graph)) / path.hops


def code_quality_score(path: CallPath, graph: GraphStore | None = None) -> float:
    w = _QUALITY_WEIGHTS
    methods = path.methods
    design_pattern_bonus = 0.0  # reserved
    return clamp(
        1.0
        - w["complexity"] * complexity_penalty(methods)
        - w["duplication"] * duplication_penalty(methods)
        + w["design_pattern"] * design_pattern_bonus
        + w["naming"] * (naming_score(methods) - 0.5)
        + w["connectivity"] * (connectivity(path, graph) - 0.5)
    )


# ---------------------------------------------------------------------------
# Details and confidence
# ---------------------------------------------------------------------------

def _quality_indicators(methods: Sequence[MethodNode]) -> dict[str, str]:
    avg_cc = average_complexity(methods)
    coverage = mean(1.0 if m.has_tests else 0.0 for m in methods)
    if avg_cc <= 5:
        complexity = "low"
    elif avg_cc <= 10:
        complexity = "medium"
    else:
        complexity = "high"
    if coverage >= 0.8:
        tests = "high"
    elif coverage >= 0.5:
        tests = "medium"
    else:
        tests = "low"
    return {"complexity": complexity, "test_coverage": tests}


def intent_confidence(methods: Sequence[MethodNode], history_size: int) -> float:
    return mean([
        min(1.0, len(methods) / _INTENT_PATH_LENGTH_NORM),
        min(1.0, history_size / _HISTORY_SIZE_NORM),
        mean(1.0 if m.has_tests else _UNTESTED_CONFIDENCE for m in methods),
    ])


def classify_intent_type(method_name: str) -> IntentType:
    name = method_name.lower()
    for intent_type, prefixes in _INTENT_TYPE_PREFIXES:
        if name.startswith(prefixes):
            return IntentType(intent_type)
    return IntentType.OTHER


# ---------------------------------------------------------------------------
# Calculator
# ---------------------------------------------------------------------------

class IntentWeightCalculator:
    """Pure intent scoring; *graph* resolves path edges when given."""

    def __init__(self, graph: GraphStore | None = None) -> None:
        self._graph = graph

    def calculate_path_intent_weight(
        self,
        path: CallPath,
        commit_history: Sequence[CommitAnalysis] = (),
        file_analysis_results: Sequence[FileAnalysisResult] = (),
    ) -> IntentWeightResult:
        methods = path.methods
        business = business_value_score(methods, commit_history)
        indicators = completeness_indicators(methods)
        completeness = completeness_score(methods)
        quality = code_quality_score(path, self._graph)
        w = _INTENT_WEIGHTS
        total = clamp(w["business"] * business + w["completeness"] * completeness + w["quality"] * quality)
        return IntentWeightResult(
            total_weight=total,
            business_value_score=business,
            implementation_completeness_score=completeness,
            code_quality_score=quality,
            confidence=intent_confidence(methods, len(commit_history)),
            details=IntentAnalysisDetails(
                path_length=len(methods),
                business_keywords=sorted(path_keywords(methods)),
                quality_indicators=_quality_indicators(methods),
                completeness_indicators=indicators,
            ),
        )

    def calculate_method_intent_weight(
        self,
        method: MethodNode,
        context: IntentCalculationContext | None = None,
    ) -> MethodIntentWeight:
        context = context or IntentCalculationContext()
        business = business_value_score([method], context.commit_history)
        completeness = completeness_score([method])
        quality = band(method.cyclomatic_complexity, _METHOD_QUALITY_BANDS, _METHOD_QUALITY_MIN)
        w = _INTENT_WEIGHTS
        confidence = 0.5
        if method.has_tests:
            confidence += 0.2
        if method.annotations:
            confidence += 0.1
        if method.cyclomatic_complexity <= 10:
            confidence += 0.1
        if method.in_degree > 0:
            confidence += 0.1
        return MethodIntentWeight(
            method_id=method.id,
            weight=clamp(w["business"] * business + w["completeness"] * completeness + w["quality"] * quality),
            business_value=business,
            completeness=completeness,
            quality=quality,
            intent_type=classify_intent_type(method.method_name),
            confidence=min(1.0, confidence),
        )
