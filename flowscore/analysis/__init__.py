"""Health analysis: loop, trigger-conflict, performance and dead-branch detection, HealthAnalyzer."""

from flowscore.analysis.analyzer import HealthAnalyzer, analyze
from flowscore.analysis.conflicts import find_conflicts, has_mutex_guard
from flowscore.analysis.cycles import classify_cycle, find_back_edge_cycles, find_loops
from flowscore.analysis.performance import (
    check_missing_error_handling,
    check_redundant_delay,
    check_slow_action,
    find_performance_issues,
)
from flowscore.analysis.reachability import find_dead_branches, reachable_from_triggers

__all__ = [
    "HealthAnalyzer",
    "analyze",
    "check_missing_error_handling",
    "check_redundant_delay",
    "check_slow_action",
    "classify_cycle",
    "find_back_edge_cycles",
    "find_conflicts",
    "find_dead_branches",
    "find_loops",
    "find_performance_issues",
    "has_mutex_guard",
    "reachable_from_triggers",
]
