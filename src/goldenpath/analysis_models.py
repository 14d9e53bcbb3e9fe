"""Scoring and path-analysis records produced per analysis run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from goldenpath.config import AnalysisThresholds
from goldenpath.inbound import CommitAnalysis, FileAnalysisResult
from goldenpath.models import (
    CallPath,
    PathPriority,
    PathType,
    RiskLevel,
    now_iso,
)


class IntentType(str, Enum):
    QUERY = "QUERY"
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    PROCESS = "PROCESS"
    VALIDATE = "VALIDATE"
    TRANSFORM = "TRANSFORM"
    OTHER = "OTHER"


class RiskCategory(str, Enum):
    ENTRY_POINT_RISK = "ENTRY_POINT_RISK"
    COMPLEXITY_RISK = "COMPLEXITY_RISK"
    DEPENDENCY_RISK = "DEPENDENCY_RISK"
    QUALITY_RISK = "QUALITY_RISK"
    CONCURRENCY_RISK = "CONCURRENCY_RISK"
    DATA_RISK = "DATA_RISK"
    GENERAL_RISK = "GENERAL_RISK"


def _r(x: float) -> float:
    return round(x, 4)


# ---------------------------------------------------------------------------
# Intent
# ---------------------------------------------------------------------------

@dataclass
class IntentAnalysisDetails:
    path_length: int = 0
    business_keywords: list[str] = field(default_factory=list)
    quality_indicators: dict[str, str] = field(default_factory=dict)
    completeness_indicators: dict[str, float] = field(default_factory=dict)


@dataclass
class IntentWeightResult:
    total_weight: float
    business_value_score: float
    implementation_completeness_score: float
    code_quality_score: float
    confidence: float
    details: IntentAnalysisDetails = field(default_factory=IntentAnalysisDetails)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_weight": _r(self.total_weight),
            "business_value": _r(self.business_value_score),
            "implementation_completeness": _r(self.implementation_completeness_score),
            "code_quality": _r(self.code_quality_score),
            "confidence": _r(self.confidence),
            "business_keywords": self.details.business_keywords,
            "quality_indicators": self.details.quality_indicators,
            "completeness_indicators": {k: _r(v) for k, v in self.details.completeness_indicators.items()},
        }


@dataclass
class IntentCalculationContext:
    commit_history: list[CommitAnalysis] = field(default_factory=list)
    file_analysis_results: list[FileAnalysisResult] = field(default_factory=list)


@dataclass
class MethodIntentWeight:
    method_id: str
    weight: float
    business_value: float
    completeness: float
    quality: float
    intent_type: IntentType
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "method_id": self.method_id,
            "weight": _r(self.weight),
            "business_value": _r(self.business_value),
            "completeness": _r(self.completeness),
            "quality": _r(self.quality),
            "intent_type": self.intent_type.value,
            "confidence": _r(self.confidence),
        }


# ---------------------------------------------------------------------------
# Risk
# ---------------------------------------------------------------------------

@dataclass
class RiskAnalysisDetails:
    critical_methods: list[str] = field(default_factory=list)
    risk_factors: list[str] = field(default_factory=list)
    mitigation_suggestions: list[str] = field(default_factory=list)
    impacted_components: list[str] = field(default_factory=list)


@dataclass
class RiskWeightResult:
    total_risk: float
    architectural_risk_score: float
    blast_radius_score: float
    change_complexity_score: float
    data_flow_risk_score: float
    risk_level: RiskLevel
    confidence: float
    details: RiskAnalysisDetails = field(default_factory=RiskAnalysisDetails)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_risk": _r(self.total_risk),
            "architectural_risk": _r(self.architectural_risk_score),
            "blast_radius": _r(self.blast_radius_score),
            "change_complexity": _r(self.change_complexity_score),
            "data_flow_risk": _r(self.data_flow_risk_score),
            "risk_level": self.risk_level.value,
            "confidence": _r(self.confidence),
            "critical_methods": self.details.critical_methods,
            "risk_factors": self.details.risk_factors,
            "mitigation_suggestions": self.details.mitigation_suggestions,
            "impacted_components": self.details.impacted_components,
        }


@dataclass
class ProjectHistory:
    hotspot_methods: set[str] = field(default_factory=set)
    frequently_changed_files: set[str] = field(default_factory=set)


@dataclass
class RiskCalculationContext:
    changed_methods: set[str] = field(default_factory=set)
    file_analysis_results: list[FileAnalysisResult] = field(default_factory=list)
    project_history: ProjectHistory | None = None


@dataclass
class MethodRiskWeight:
    method_id: str
    total_risk: float
    architectural_risk: float
    complexity_risk: float
    dependency_risk: float
    change_history_risk: float
    risk_category: RiskCategory
    criticality: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "method_id": self.method_id,
            "total_risk": _r(self.total_risk),
            "architectural_risk": _r(self.architectural_risk),
            "complexity_risk": _r(self.complexity_risk),
            "dependency_risk": _r(self.dependency_risk),
            "change_history_risk": _r(self.change_history_risk),
            "risk_category": self.risk_category.value,
            "criticality": _r(self.criticality),
        }


# ---------------------------------------------------------------------------
# Path analysis
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AnalyzedPath:
    path: CallPath
    intent_weight: IntentWeightResult
    risk_weight: RiskWeightResult
    path_type: PathType
    priority: PathPriority
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path.to_dict(),
            "path_type": self.path_type.value,
            "priority": self.priority.value,
            "confidence": _r(self.confidence),
            "intent": self.intent_weight.to_dict(),
            "risk": self.risk_weight.to_dict(),
        }


@dataclass
class PathAnalysisSummary:
    total_paths: int = 0
    golden_path_count: int = 0
    risk_path_count: int = 0
    neutral_path_count: int = 0
    golden_path_ratio: float = 0.0
    risk_path_ratio: float = 0.0
    average_intent_weight: float = 0.0
    average_risk_weight: float = 0.0
    average_confidence: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_paths": self.total_paths,
            "golden_path_count": self.golden_path_count,
            "risk_path_count": self.risk_path_count,
            "neutral_path_count": self.neutral_path_count,
            "golden_path_ratio": _r(self.golden_path_ratio),
            "risk_path_ratio": _r(self.risk_path_ratio),
            "average_intent_weight": _r(self.average_intent_weight),
            "average_risk_weight": _r(self.average_risk_weight),
            "average_confidence": _r(self.average_confidence),
        }


@dataclass
class QualityMetrics:
    code_quality_score: float = 0.0
    architectural_health: float = 0.0
    test_maturity: float = 0.0
    business_alignment: float = 0.0
    overall_score: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "code_quality_score": _r(self.code_quality_score),
            "architectural_health": _r(self.architectural_health),
            "test_maturity": _r(self.test_maturity),
            "business_alignment": _r(self.business_alignment),
            "overall_score": _r(self.overall_score),
        }


@dataclass
class PathAnalysisReport:
    summary: PathAnalysisSummary = field(default_factory=PathAnalysisSummary)
    key_findings: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    risk_factors: list[str] = field(default_factory=list)
    opportunity_areas: list[str] = field(default_factory=list)
    quality_metrics: QualityMetrics = field(default_factory=QualityMetrics)

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "key_findings": self.key_findings,
            "recommendations": self.recommendations,
            "risk_factors": self.risk_factors,
            "opportunity_areas": self.opportunity_areas,
            "quality_metrics": self.quality_metrics.to_dict(),
        }


@dataclass
class PathAnalysisContext:
    changed_methods: set[str] = field(default_factory=set)
    commit_history: list[CommitAnalysis] = field(default_factory=list)
    file_analysis_results: list[FileAnalysisResult] = field(default_factory=list)
    thresholds: AnalysisThresholds | None = None


@dataclass
class PathAnalysisResult:
    golden_paths: list[AnalyzedPath] = field(default_factory=list)
    risk_paths: list[AnalyzedPath] = field(default_factory=list)
    neutral_paths: list[AnalyzedPath] = field(default_factory=list)
    report: PathAnalysisReport = field(default_factory=PathAnalysisReport)
    total_analyzed_paths: int = 0
    processing_timestamp: str = field(default_factory=now_iso)
    incomplete: bool = False
    skipped_path_ids: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def all_paths(self) -> list[AnalyzedPath]:
        return self.golden_paths + self.risk_paths + self.neutral_paths

    def to_dict(self) -> dict[str, Any]:
        return {
            "golden_paths": [p.to_dict() for p in self.golden_paths],
            "risk_paths": [p.to_dict() for p in self.risk_paths],
            "neutral_paths": [p.to_dict() for p in self.neutral_paths],
            "report": self.report.to_dict(),
            "total_analyzed_paths": self.total_analyzed_paths,
            "processing_timestamp": self.processing_timestamp,
            "incomplete": self.incomplete,
            "skipped_path_ids": self.skipped_path_ids,
            "errors": self.errors,
        }
