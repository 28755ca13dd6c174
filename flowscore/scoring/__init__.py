"""Scoring: score/grade/confidence aggregation and ranked suggestions."""

from flowscore.scoring.engine import (
    compute_confidence,
    grade_for_score,
    reconcile_double_counting,
    score,
)
from flowscore.scoring.suggestions import TEMPLATES, SuggestionTemplate, suggest

__all__ = [
    "SuggestionTemplate",
    "TEMPLATES",
    "compute_confidence",
    "grade_for_score",
    "reconcile_double_counting",
    "score",
    "suggest",
]
