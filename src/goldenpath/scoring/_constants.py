"""Formula weights and heuristic tables local to the scoring calculators."""

# Intent composite
_INTENT_WEIGHTS = {"business": 0.4, "completeness": 0.35, "quality": 0.25}
_BUSINESS_WEIGHTS = {"keyword": 0.3, "semantic": 0.25, "layer": 0.25, "activity": 0.2}
_COMPLETENESS_WEIGHTS = {
    "exception_handling": 0.3,
    "test_coverage": 0.25,
    "parameter_validation": 0.2,
    "logging": 0.15,
    "resource_management": 0.1,
}
_QUALITY_WEIGHTS = {"complexity": 0.3, "duplication": 0.25, "design_pattern": 0.2, "naming": 0.15, "connectivity": 0.1}

# (max average complexity, penalty); above the last bound -> _COMPLEXITY_PENALTY_MAX
_COMPLEXITY_PENALTIES = ((5, 0.0), (10, 0.2), (15, 0.5))
_COMPLEXITY_PENALTY_MAX = 0.8
_DUPLICATION_CAP = 0.5
_NO_HISTORY_KEYWORD_SCORE = 0.5
_MIN_KEYWORD_LENGTH = 3

_NAMING_PATTERNS = (
    r"[a-z][a-zA-Z0-9]*",
    r"(get|set|is|has|can)[A-Z].*",
    r"(create|update|delete|find|save)[A-Z].*",
)

_EXCEPTION_ANNOTATIONS = ("throws",)
_EXCEPTION_NAME_HINTS = ("try", "handle")
_VALIDATION_ANNOTATIONS = ("valid", "notnull", "nullable")
_VALIDATION_NAME_HINTS = ("validate",)
_LOGGING_LAYERS = frozenset({"SERVICE", "CONTROLLER"})
_RESOURCE_ANNOTATIONS = ("transactional", "closeable", "autowired")

# Confidence normalizers
_INTENT_PATH_LENGTH_NORM = 5
_HISTORY_SIZE_NORM = 50
_RISK_PATH_LENGTH_NORM = 10
_CHANGED_COUNT_NORM = 5
_UNTESTED_CONFIDENCE = 0.5

# Method-level intent: (max complexity, quality); above the last bound -> 0.3
_METHOD_QUALITY_BANDS = ((5, 0.9), (10, 0.7), (15, 0.5))
_METHOD_QUALITY_MIN = 0.3

_INTENT_TYPE_PREFIXES = (
    ("QUERY", ("get", "find", "query", "list", "search", "load", "fetch")),
    ("CREATE", ("create", "save", "add", "insert", "register")),
    ("UPDATE", ("update", "modify", "set", "change", "edit")),
    ("DELETE", ("delete", "remove", "clear", "purge")),
    ("VALIDATE", ("validate", "check", "verify")),
    ("TRANSFORM", ("convert", "transform", "map", "parse", "format")),
    ("PROCESS", ("process", "execute", "handle", "run", "apply")),
)

# Risk composite
_RISK_WEIGHTS = {"architectural": 0.35, "blast_radius": 0.30, "change_complexity": 0.25, "data_flow": 0.10}
_ARCHITECTURAL_WEIGHTS = {"cross_layer": 0.3, "circular": 0.25, "coupling": 0.25, "single_point": 0.2}
_DATA_FLOW_WEIGHTS = {"global_state": 0.4, "concurrency": 0.3, "consistency": 0.3}

_OUT_DEGREE_NORM = 10
_MAX_IN_DEGREE_NORM = 20

_BLAST_COMPLEXITY_NORM = 10
_BLAST_OUT_DEGREE_NORM = 5
_BLAST_STRUCTURE_WEIGHT = 0.5

_CHANGE_COMPLEXITY_NORM = 20
_CHANGE_LOC_NORM = 100
_CHANGE_PARAM_NORM = 10
_CHANGE_LENGTH_NORM = 10

_GLOBAL_STATE_ANNOTATIONS = ("singleton", "component", "bean")
_CONCURRENCY_ANNOTATIONS = ("async", "synchronized", "thread", "concurrent")
_TRANSACTIONAL_ANNOTATION = "transactional"
_CONSISTENCY_UNGUARDED = 0.8
_CONSISTENCY_PARTIAL = 0.5
_CONSISTENCY_GUARDED = 0.2

# Risk details
_CRITICAL_IN_DEGREE = 5
_HIGH_COMPLEXITY = 15
_MITIGATION_COVERAGE = 0.7
_HIGH_FAN_IN = 10
_CROSS_LAYER_FACTOR_MIN = 0.3
_MITIGATION_AVG_COMPLEXITY = 10

# Method-level risk
_METHOD_RISK_WEIGHTS = {"architectural": 0.3, "complexity": 0.25, "dependency": 0.25, "history": 0.2}
_METHOD_LAYER_SCALE = 0.5
_METHOD_TRANSACTIONAL_BONUS = 0.3
_COMPLEXITY_BANDS = ((5, 0.1), (10, 0.3), (15, 0.6))
_SIZE_BANDS = ((20, 0.1), (50, 0.3), (100, 0.6))
_BAND_MAX = 0.9
_METHOD_IN_DEGREE_NORM = 10
_METHOD_OUT_DEGREE_NORM = 8
_DEFAULT_HISTORY_RISK = 0.5
_HISTORY_BASE_RISK = 0.2
_HOTSPOT_RISK = 0.4
_FREQUENT_CHANGE_RISK = 0.4
_ENTRY_POINT_RISK_MIN = 0.6
_QUALITY_RISK_MIN = 0.5
