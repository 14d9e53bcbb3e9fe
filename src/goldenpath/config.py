"""Analysis configuration: classification thresholds and runtime limits.

Values load from defaults, then a JSON config file (``.goldenpath/config.json``
or ``goldenpath.json``), then ``GOLDENPATH_*`` environment variables, which
take highest priority.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Callable

from goldenpath import defaults

log = logging.getLogger("goldenpath.config")


@dataclass
class AnalysisThresholds:
    golden_path_intent_threshold: float = defaults.GOLDEN_INTENT_THRESHOLD
    golden_path_risk_threshold: float = defaults.GOLDEN_RISK_THRESHOLD
    risk_path_risk_threshold: float = defaults.RISK_PATH_THRESHOLD
    test_coverage_threshold: float = defaults.TEST_COVERAGE_THRESHOLD
    complexity_threshold: int = defaults.COMPLEXITY_THRESHOLD
    golden_business_value_min: float = defaults.GOLDEN_BUSINESS_VALUE_MIN
    golden_code_quality_min: float = defaults.GOLDEN_CODE_QUALITY_MIN
    architectural_risk_threshold: float = defaults.ARCHITECTURAL_RISK_THRESHOLD
    blast_radius_threshold: float = defaults.BLAST_RADIUS_THRESHOLD
    change_complexity_threshold: float = defaults.CHANGE_COMPLEXITY_THRESHOLD
    low_test_coverage_threshold: float = defaults.LOW_TEST_COVERAGE_THRESHOLD

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> AnalysisThresholds:
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in d.items() if k in known})


@dataclass
class AnalysisConfig:
    max_path_depth: int = defaults.DEFAULT_MAX_PATH_DEPTH
    max_paths: int = defaults.DEFAULT_MAX_PATHS
    impact_radius_depth: int = defaults.DEFAULT_IMPACT_RADIUS_DEPTH
    propagation_depth: int = defaults.DEFAULT_PROPAGATION_DEPTH
    max_workers: int = defaults.DEFAULT_MAX_WORKERS
    batch_timeout_seconds: float = defaults.DEFAULT_BATCH_TIMEOUT_SECONDS
    hotspot_limit: int = defaults.DEFAULT_HOTSPOT_LIMIT
    log_level: str = "INFO"
    thresholds: AnalysisThresholds = field(default_factory=AnalysisThresholds)
    sources: dict[str, str] = field(default_factory=dict)   # setting -> config | env

    def to_dict(self) -> dict[str, Any]:
        return {
            "max_path_depth": self.max_path_depth,
            "max_paths": self.max_paths,
            "impact_radius_depth": self.impact_radius_depth,
            "propagation_depth": self.propagation_depth,
            "max_workers": self.max_workers,
            "batch_timeout_seconds": self.batch_timeout_seconds,
            "hotspot_limit": self.hotspot_limit,
            "log_level": self.log_level,
            "thresholds": self.thresholds.to_dict(),
            "sources": dict(self.sources),
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> AnalysisConfig:
        cfg = cls()
        _apply_mapping(cfg, d, source="config")
        return cfg


# ---------------------------------------------------------------------------
# Environment overrides: variable suffix -> (threshold?, attribute, caster)
# ---------------------------------------------------------------------------

_ENV_SETTINGS: dict[str, tuple[bool, str, Callable[[str], Any]]] = {
    "MAX_WORKERS": (False, "max_workers", int),
    "BATCH_TIMEOUT": (False, "batch_timeout_seconds", float),
    "MAX_PATH_DEPTH": (False, "max_path_depth", int),
    "MAX_PATHS": (False, "max_paths", int),
    "LOG_LEVEL": (False, "log_level", str),
    "GOLDEN_INTENT_THRESHOLD": (True, "golden_path_intent_threshold", float),
    "GOLDEN_RISK_THRESHOLD": (True, "golden_path_risk_threshold", float),
    "RISK_THRESHOLD": (True, "risk_path_risk_threshold", float),
}


def _apply_mapping(cfg: AnalysisConfig, data: Mapping[str, Any], *, source: str) -> None:
    scalar = {f.name for f in fields(AnalysisConfig)} - {"thresholds", "sources"}
    for key, value in data.items():
        if key in scalar:
            setattr(cfg, key, value)
            cfg.sources[key] = source
        elif key == "thresholds" and isinstance(value, Mapping):
            merged = {**cfg.thresholds.to_dict(), **value}
            cfg.thresholds = AnalysisThresholds.from_dict(merged)
            for name in value:
                cfg.sources[f"thresholds.{name}"] = source
        else:
            log.debug("Ignoring unknown config key %s", key)


def _read_config_file(path: Path) -> dict[str, Any] | None:
    try:
        with open(path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as exc:
        log.warning("Ignoring unreadable config file %s: %s", path, exc)
        return None
    if not isinstance(data, dict):
        log.warning("Ignoring config file %s: top-level value is not an object", path)
        return None
    return data


def load_config(
    path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> AnalysisConfig:
    """Load config from defaults -> config file -> env vars (highest priority)."""
    env = os.environ if env is None else env

    # 1. Defaults
    cfg = AnalysisConfig()

    # 2. Config file
    candidates = [Path(path)] if path else [Path(p) for p in defaults.CONFIG_FILE_CANDIDATES]
    for candidate in candidates:
        if candidate.exists():
            data = _read_config_file(candidate)
            if data is not None:
                _apply_mapping(cfg, data, source="config")
            break
    else:
        if path:
            log.warning("Config file %s not found, using defaults", path)

    # 3. Environment
    for suffix, (is_threshold, attr, caster) in _ENV_SETTINGS.items():
        raw = env.get(f"{defaults.ENV_PREFIX}{suffix}")
        if raw is None:
            continue
        try:
            value = caster(raw)
        except ValueError:
            log.warning("Ignoring invalid %s%s=%r", defaults.ENV_PREFIX, suffix, raw)
            continue
        if is_threshold:
            setattr(cfg.thresholds, attr, value)
            cfg.sources[f"thresholds.{attr}"] = "env"
        else:
            setattr(cfg, attr, value)
            cfg.sources[attr] = "env"

    return cfg
