"""flowscore: structural health scoring for marketing-automation workflows."""

from flowscore.analysis import HealthAnalyzer, analyze
from flowscore.graph import GraphValidationError, HealthScoreResult, health_result_to_dict

__version__ = "0.1.0"

__all__ = [
    "GraphValidationError",
    "HealthAnalyzer",
    "HealthScoreResult",
    "analyze",
    "health_result_to_dict",
]
