"""Engine configuration: weights, thresholds, trigger tables, YAML/dict loading."""

from flowscore.config.data_model import (
    DEFAULT_CO_OCCURRING_TRIGGERS,
    DEFAULT_GRADE_BANDS,
    EngineConfig,
    GradeBand,
    ScoringWeights,
)
from flowscore.config.loader import default_engine_config, load_engine_config

__all__ = [
    "DEFAULT_CO_OCCURRING_TRIGGERS",
    "DEFAULT_GRADE_BANDS",
    "EngineConfig",
    "GradeBand",
    "ScoringWeights",
    "default_engine_config",
    "load_engine_config",
]
