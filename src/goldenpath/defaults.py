"""Single source of truth for shared constants and configuration defaults.

Every heuristic table, threshold, or default that appears in more than one
module is defined here. Formula weights that are local to one calculator stay
in ``goldenpath.scoring._constants``.

Lookup tables are keyed by ``BlockType`` value strings and each documents its
fallback for unmapped block types.
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
# Layer tables
# ---------------------------------------------------------------------------

# Business importance of a layer (intent scoring)
LAYER_WEIGHTS: dict[str, float] = {
    "CONTROLLER": 0.9,
    "SERVICE": 0.8,
    "COMPONENT": 0.7,
    "REPOSITORY": 0.6,
    "ENTITY": 0.5,
    "CONFIG": 0.4,
    "DTO": 0.4,
    "VO": 0.4,
    "UTIL": 0.3,
    "OTHER": 0.2,
}
DEFAULT_LAYER_WEIGHT = 0.2

# Call direction order (risk scoring); calls should flow to higher levels
LAYER_HIERARCHY: dict[str, int] = {
    "CONTROLLER": 1,
    "SERVICE": 2,
    "REPOSITORY": 3,
    "ENTITY": 4,
    "UTIL": 5,
}
UNMAPPED_LAYER_LEVEL = 999

# Inherent exposure of a layer (method-level risk scoring)
LAYER_RISK: dict[str, float] = {
    "CONTROLLER": 0.7,
    "SERVICE": 0.5,
    "REPOSITORY": 0.6,
}
DEFAULT_LAYER_RISK = 0.3

# Forbidden direct call directions (caller layer, callee layer)
LAYER_VIOLATIONS: frozenset[tuple[str, str]] = frozenset({
    ("CONTROLLER", "REPOSITORY"),
    ("SERVICE", "CONTROLLER"),
    ("REPOSITORY", "SERVICE"),
})

DATA_ACCESS_LAYERS = frozenset({"REPOSITORY", "MAPPER"})
DATA_MODEL_LAYERS = frozenset({"ENTITY", "DTO", "VO"})

# ---------------------------------------------------------------------------
# Lexicons
# ---------------------------------------------------------------------------

BUSINESS_TERMS: tuple[str, ...] = (
    "create", "update", "delete", "save", "process", "validate", "calculate",
    "generate", "import", "export", "sync", "notify", "schedule", "execute",
    "analyze", "report", "search", "filter", "transform", "convert",
    "business", "service", "manager", "processor", "handler", "controller",
)

CORE_BUSINESS_ENTITIES: tuple[str, ...] = ("User", "Order", "Product", "Payment")

# ---------------------------------------------------------------------------
# Risk bands
# ---------------------------------------------------------------------------

# Node risk histogram: score < bound -> level (first match), else CRITICAL
GRAPH_RISK_BANDS: tuple[tuple[float, str], ...] = (
    (0.3, "low"),
    (0.6, "medium"),
    (0.8, "high"),
)

# Path risk level: score < bound -> level (first match), else CRITICAL
PATH_RISK_BANDS: tuple[tuple[float, str], ...] = (
    (0.4, "low"),
    (0.6, "medium"),
    (0.8, "high"),
)

# Review priority from 0.6 * intent + 0.4 * (1 - risk): score >= bound -> level
PRIORITY_BANDS: tuple[tuple[float, str], ...] = (
    (0.8, "critical"),
    (0.6, "high"),
    (0.4, "medium"),
)

# ---------------------------------------------------------------------------
# Graph traversal
# ---------------------------------------------------------------------------

RISK_DECAY_FACTOR = 0.8
DEFAULT_MAX_PATH_DEPTH = 5
DEFAULT_MAX_PATHS = 500
DEFAULT_IMPACT_RADIUS_DEPTH = 3
DEFAULT_PROPAGATION_DEPTH = 3
DEFAULT_HOTSPOT_LIMIT = 10

# ---------------------------------------------------------------------------
# Classification thresholds
# ---------------------------------------------------------------------------

GOLDEN_INTENT_THRESHOLD = 0.7
GOLDEN_RISK_THRESHOLD = 0.3
GOLDEN_BUSINESS_VALUE_MIN = 0.6
GOLDEN_CODE_QUALITY_MIN = 0.6
RISK_PATH_THRESHOLD = 0.6
ARCHITECTURAL_RISK_THRESHOLD = 0.7
BLAST_RADIUS_THRESHOLD = 0.6
CHANGE_COMPLEXITY_THRESHOLD = 0.7
TEST_COVERAGE_THRESHOLD = 0.7
LOW_TEST_COVERAGE_THRESHOLD = 0.3
COMPLEXITY_THRESHOLD = 15

# Critical path: valuable but moderately risky
CRITICAL_INTENT_MIN = 0.5
CRITICAL_RISK_MIN = 0.4
CRITICAL_RISK_MAX = 0.6

# Neutral paths that could be promoted to golden
PROMOTION_INTENT_MIN = 0.4
PROMOTION_RISK_MAX = 0.5

# ---------------------------------------------------------------------------
# Batch execution
# ---------------------------------------------------------------------------

DEFAULT_MAX_WORKERS = 8
DEFAULT_BATCH_TIMEOUT_SECONDS = 30.0

# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------

RISK_REVIEW_LIMIT = 5
RISK_FACTOR_LIMIT = 10
DOMINANT_FACTOR_LIMIT = 3
OPPORTUNITY_KEYWORD_LIMIT = 5
WELL_TESTED_COVERAGE = 0.8
LOW_COVERAGE_RATIO = 0.5
LONG_METHOD_LINES = 50

# ---------------------------------------------------------------------------
# Configuration sources
# ---------------------------------------------------------------------------

CONFIG_FILE_CANDIDATES: tuple[str, ...] = (".goldenpath/config.json", "goldenpath.json")
ENV_PREFIX = "GOLDENPATH_"
