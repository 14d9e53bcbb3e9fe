"""Path and method scoring on two independent axes.

  - intent: durable business value (business value, completeness, code quality)
  - risk:   engineering danger (architecture, blast radius, change complexity, data flow)

Calculators hold no mutable state and are safe to call concurrently.
"""

from goldenpath.scoring.intent import IntentWeightCalculator, classify_intent_type
from goldenpath.scoring.keywords import path_keywords, split_camel_case
from goldenpath.scoring.risk import (
    RiskWeightCalculator,
    classify_risk_level,
    refresh_method_risk_scores,
)

__all__ = [
    "IntentWeightCalculator",
    "RiskWeightCalculator",
    "classify_intent_type",
    "classify_risk_level",
    "path_keywords",
    "refresh_method_risk_scores",
    "split_camel_case",
]
