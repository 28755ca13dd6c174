"""
Engine configuration loader: supports YAML files, dicts, EngineConfig instances, and defaults.
"""

from __future__ import annotations

import math
from dataclasses import fields, replace
from pathlib import Path
from typing import Any

import yaml

from flowscore.config.data_model import EngineConfig, GradeBand, ScoringWeights

_WEIGHT_KEYS = tuple(f.name for f in fields(ScoringWeights))
_STRING_TUPLE_KEYS = ("mutex_keys", "loop_counter_keys", "loop_break_keys")
_STRING_SET_KEYS = (
    "external_action_subtypes",
    "failure_labels",
    "failure_check_subtypes",
    "email_action_subtypes",
)
_KNOWN_KEYS = frozenset(
    {
        "weights",
        "grades",
        "floor_grade",
        "confidence_min_nodes",
        "slow_action_seconds",
        "co_occurring_triggers",
        "same_subtype_conflicts",
        *_STRING_TUPLE_KEYS,
        *_STRING_SET_KEYS,
    }
)


def default_engine_config() -> EngineConfig:
    """
    Return the default engine configuration.

    Returns:
        EngineConfig with loop 15/8, conflict 8, slow action 5 (threshold 2s),
        missing error handling 10, redundant delay 3, and the standard grade bands.
    """
    return EngineConfig()


def load_engine_config(
    source: EngineConfig | str | Path | dict | None,
) -> EngineConfig:
    """
    Load an EngineConfig from various sources.

    Args:
        source: Can be:
            - EngineConfig instance: returned as-is
            - str or Path: treated as YAML file path
            - dict: overrides merged onto the defaults
            - None: returns default_engine_config()

    Returns:
        EngineConfig instance

    Raises:
        FileNotFoundError: If source is a file path that doesn't exist
        ValueError: If the YAML is invalid, or a key is unknown or has an invalid value
        TypeError: If source has an unsupported type
    """
    if source is None:
        return default_engine_config()

    if isinstance(source, EngineConfig):
        return source

    if isinstance(source, (str, Path)):
        return _load_from_yaml_file(source)

    if isinstance(source, dict):
        return _load_from_dict(source)

    raise TypeError(
        f"Unsupported source type for load_engine_config: {type(source).__name__}"
    )


def _load_from_yaml_file(path: str | Path) -> EngineConfig:
    """Load EngineConfig from a YAML file; settings may sit at the root or under 'engine'."""
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")

    try:
        data = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML file {file_path}: {e}") from e

    if data is None:
        raise ValueError(f"YAML file {file_path} is empty")
    if not isinstance(data, dict):
        raise ValueError(f"YAML file {file_path}: expected dict, got {type(data).__name__}")

    if "engine" in data:
        data = data["engine"]
        if not isinstance(data, dict):
            raise ValueError(f"YAML file {file_path}: 'engine' must be a dict")
    return _load_from_dict(data)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_weights(data: Any) -> ScoringWeights:
    if not isinstance(data, dict):
        raise ValueError(f"Config 'weights' must be a dict, got {type(data).__name__}")
    unknown = sorted(set(data) - set(_WEIGHT_KEYS))
    if unknown:
        raise ValueError(f"Config 'weights' has unknown keys: {', '.join(unknown)}")
    for key, value in data.items():
        if not _is_int(value) or value < 0:
            raise ValueError(f"Config 'weights.{key}' must be a non-negative integer, got {value!r}")
    return replace(ScoringWeights(), **data)


def _parse_grades(data: Any) -> tuple[GradeBand, ...]:
    if not isinstance(data, list) or not data:
        raise ValueError("Config 'grades' must be a non-empty list")
    bands: list[GradeBand] = []
    for entry in data:
        if not isinstance(entry, dict):
            raise ValueError(f"Config 'grades' entries must be dicts, got {type(entry).__name__}")
        min_score = entry.get("min_score")
        grade = entry.get("grade")
        if not _is_int(min_score) or not 0 <= min_score <= 100:
            raise ValueError(f"Config grade 'min_score' must be an integer 0-100, got {min_score!r}")
        if not isinstance(grade, str) or not grade:
            raise ValueError(f"Config grade name must be a non-empty string, got {grade!r}")
        bands.append(GradeBand(min_score, grade))
    scores = [b.min_score for b in bands]
    if scores != sorted(set(scores), reverse=True):
        raise ValueError("Config 'grades' must be listed by strictly descending min_score")
    return tuple(bands)


def _parse_strings(key: str, data: Any) -> tuple[str, ...]:
    if not isinstance(data, list) or not all(isinstance(v, str) for v in data):
        raise ValueError(f"Config '{key}' must be a list of strings")
    return tuple(data)


def _parse_threshold(value: Any) -> float:
    error = ValueError(f"Config 'slow_action_seconds' must be a positive number, got {value!r}")
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise error
    try:
        threshold = float(value)
    except OverflowError:
        raise error from None
    if not math.isfinite(threshold) or threshold <= 0:
        raise error
    return threshold


def _parse_trigger_pairs(data: Any) -> tuple[frozenset[str], ...]:
    if not isinstance(data, list):
        raise ValueError("Config 'co_occurring_triggers' must be a list of pairs")
    pairs: list[frozenset[str]] = []
    for entry in data:
        if (
            not isinstance(entry, list)
            or len(entry) != 2
            or not all(isinstance(v, str) for v in entry)
        ):
            raise ValueError(
                f"Config 'co_occurring_triggers' entries must be [subtype, subtype], got {entry!r}"
            )
        pairs.append(frozenset(entry))
    return tuple(pairs)


def _load_from_dict(data: dict) -> EngineConfig:
    """
    Construct EngineConfig from a dict of overrides; missing keys keep their defaults.

    Raises:
        ValueError: If keys are unknown or values have invalid types
    """
    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

    overrides: dict[str, Any] = {}

    if "weights" in data:
        overrides["weights"] = _parse_weights(data["weights"])

    if "grades" in data:
        overrides["grade_bands"] = _parse_grades(data["grades"])

    if "floor_grade" in data:
        floor_grade = data["floor_grade"]
        if not isinstance(floor_grade, str) or not floor_grade:
            raise ValueError("Config 'floor_grade' must be a non-empty string")
        overrides["floor_grade"] = floor_grade

    if "confidence_min_nodes" in data:
        min_nodes = data["confidence_min_nodes"]
        if not _is_int(min_nodes) or min_nodes < 1:
            raise ValueError(
                f"Config 'confidence_min_nodes' must be a positive integer, got {min_nodes!r}"
            )
        overrides["confidence_min_nodes"] = min_nodes

    if "slow_action_seconds" in data:
        overrides["slow_action_seconds"] = _parse_threshold(data["slow_action_seconds"])

    if "co_occurring_triggers" in data:
        overrides["co_occurring_triggers"] = _parse_trigger_pairs(data["co_occurring_triggers"])

    if "same_subtype_conflicts" in data:
        flag = data["same_subtype_conflicts"]
        if not isinstance(flag, bool):
            raise ValueError("Config 'same_subtype_conflicts' must be a boolean")
        overrides["same_subtype_conflicts"] = flag

    for key in _STRING_TUPLE_KEYS:
        if key in data:
            overrides[key] = _parse_strings(key, data[key])

    for key in _STRING_SET_KEYS:
        if key in data:
            overrides[key] = frozenset(_parse_strings(key, data[key]))

    return replace(default_engine_config(), **overrides)
