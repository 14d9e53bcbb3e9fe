"""Shared fixtures for goldenpath tests."""

from __future__ import annotations

import json

import pytest

from goldenpath import observability
from goldenpath.analysis_models import (
    AnalyzedPath,
    IntentAnalysisDetails,
    IntentWeightResult,
    RiskAnalysisDetails,
    RiskWeightResult,
)
from goldenpath.graph import GraphStore
from goldenpath.models import (
    BlockType,
    CallPath,
    CallsEdge,
    MethodNode,
    PathPriority,
    PathType,
    RiskLevel,
)


CONTROLLER = "com.shop.web.OrderController"
SERVICE = "com.shop.service.OrderService"
REPOSITORY = "com.shop.repo.OrderRepository"
REPORTS = "com.shop.web.ReportController"

C_ID = f"{CONTROLLER}#createOrder()"
S_ID = f"{SERVICE}#createOrder()"
R_ID = f"{REPOSITORY}#saveOrder()"
X_ID = f"{REPORTS}#listOrders()"


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def make_method(class_id: str, name: str, block_type: BlockType = BlockType.SERVICE, **kwargs) -> MethodNode:
    """A method node with a ``src/...java`` file path derived from its class."""
    kwargs.setdefault("file_path", "src/" + class_id.replace(".", "/") + ".java")
    param_types = kwargs.pop("param_types", [])
    return MethodNode(
        id=MethodNode.generate_id(class_id, name, param_types),
        method_name=name,
        block_type=block_type,
        param_types=param_types,
        **kwargs,
    )


def make_path(path_id: str, methods: list[MethodNode], *, linked: bool = True) -> CallPath:
    """A standalone path; ``linked`` adds a call edge for every hop."""
    edges = [CallsEdge(a.id, b.id) for a, b in zip(methods, methods[1:])] if linked else []
    return CallPath(id=path_id, methods=methods, edges=edges)


def build_sample_store(*, tested: bool = True, complexity: int = 4, annotations: tuple[str, ...] = ()) -> GraphStore:
    """Controller -> service -> repository, plus a second controller calling the service."""
    store = GraphStore()
    common = {"has_tests": tested, "cyclomatic_complexity": complexity, "annotations": list(annotations),
              "lines_of_code": 20}
    store.upsert_method(make_method(CONTROLLER, "createOrder", BlockType.CONTROLLER, **common))
    store.upsert_method(make_method(SERVICE, "createOrder", BlockType.SERVICE, **common))
    store.upsert_method(make_method(REPOSITORY, "saveOrder", BlockType.REPOSITORY, **common))
    store.upsert_method(make_method(REPORTS, "listOrders", BlockType.CONTROLLER, has_tests=True))
    store.add_call_edge(CallsEdge(C_ID, S_ID))
    store.add_call_edge(CallsEdge(S_ID, R_ID))
    store.add_call_edge(CallsEdge(X_ID, S_ID))
    return store


def make_intent(total: float = 0.5, *, business: float = 0.5, completeness: float = 0.5,
                quality: float = 0.5, confidence: float = 0.5,
                keywords: list[str] | None = None) -> IntentWeightResult:
    return IntentWeightResult(
        total_weight=total,
        business_value_score=business,
        implementation_completeness_score=completeness,
        code_quality_score=quality,
        confidence=confidence,
        details=IntentAnalysisDetails(business_keywords=keywords or []),
    )


def make_risk(total: float = 0.2, *, architectural: float = 0.1, blast: float = 0.0, change: float = 0.0,
              data_flow: float = 0.1, confidence: float = 0.5,
              factors: list[str] | None = None) -> RiskWeightResult:
    return RiskWeightResult(
        total_risk=total,
        architectural_risk_score=architectural,
        blast_radius_score=blast,
        change_complexity_score=change,
        data_flow_risk_score=data_flow,
        risk_level=RiskLevel.LOW,
        confidence=confidence,
        details=RiskAnalysisDetails(risk_factors=factors or []),
    )


def make_analyzed(path_id: str, intent: IntentWeightResult, risk: RiskWeightResult, *,
                  path_type: PathType = PathType.NEUTRAL_PATH, confidence: float = 0.5,
                  methods: list[MethodNode] | None = None) -> AnalyzedPath:
    methods = methods or [make_method(SERVICE, "process", has_tests=True)]
    return AnalyzedPath(
        path=make_path(path_id, methods),
        intent_weight=intent,
        risk_weight=risk,
        path_type=path_type,
        priority=PathPriority.MEDIUM,
        confidence=confidence,
    )


def write_bundle(tmp_path, store_files: list[dict], name: str = "graph.json"):
    """Write a source-analysis bundle and return its path as a string."""
    path = tmp_path / name
    path.write_text(json.dumps({"files": store_files}))
    return str(path)


SAMPLE_BUNDLE = [
    {
        "file_path": "src/com/shop/web/OrderController.java",
        "classes": [{"class_name": "OrderController", "qualified_name": CONTROLLER,
                     "package_name": "com.shop.web", "block_type": "CONTROLLER"}],
        "methods": [{"method_id": C_ID, "method_name": "createOrder", "block_type": "CONTROLLER",
                     "has_tests": True, "cyclomatic_complexity": 4}],
        "call_relationships": [{"caller_id": C_ID, "callee_id": S_ID}],
    },
    {
        "file_path": "src/com/shop/service/OrderService.java",
        "classes": [{"class_name": "OrderService", "qualified_name": SERVICE,
                     "package_name": "com.shop.service", "block_type": "SERVICE"}],
        "methods": [{"method_id": S_ID, "method_name": "createOrder", "block_type": "SERVICE",
                     "has_tests": True, "cyclomatic_complexity": 4}],
        "call_relationships": [{"caller_id": S_ID, "callee_id": R_ID}],
    },
    {
        "file_path": "src/com/shop/repo/OrderRepository.java",
        "classes": [{"class_name": "OrderRepository", "qualified_name": REPOSITORY,
                     "package_name": "com.shop.repo", "block_type": "REPOSITORY"}],
        "methods": [{"method_id": R_ID, "method_name": "saveOrder", "block_type": "REPOSITORY",
                     "has_tests": True, "cyclomatic_complexity": 4}],
    },
]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _reset_metrics():
    """Reset metric counters after every test."""
    yield
    observability.reset_metrics()


@pytest.fixture
def store():
    return build_sample_store()


@pytest.fixture
def bundle_path(tmp_path):
    return write_bundle(tmp_path, SAMPLE_BUNDLE)


# ---------------------------------------------------------------------------
# Marker registration and auto-tagging
# ---------------------------------------------------------------------------

def pytest_configure(config):
    config.addinivalue_line("markers", "integration: marks integration tests (bundle files on disk)")


def pytest_collection_modifyitems(items):
    """Auto-mark tests that load a bundle file from disk as integration."""
    for item in items:
        if "bundle_path" in item.fixturenames:
            item.add_marker(pytest.mark.integration)
