"""
ScoringEngine: aggregate detector issues into score, grade, confidence and metadata.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import replace
from typing import Sequence

from flowscore.config.data_model import EngineConfig
from flowscore.graph.graph import WorkflowGraph
from flowscore.graph.health_model import (
    AnalysisMetadata,
    ConflictIssue,
    DeadBranchIssue,
    HealthScoreResult,
    LoopIssue,
    PerformanceIssue,
)

MAX_SCORE = 100

CONFIDENCE_LOW = "low"
CONFIDENCE_MEDIUM = "medium"
CONFIDENCE_HIGH = "high"


def grade_for_score(score: int, config: EngineConfig) -> str:
    """First band whose inclusive lower bound the score reaches, else the floor grade."""
    for band in config.grade_bands:
        if score >= band.min_score:
            return band.grade
    return config.floor_grade


def compute_confidence(graph: WorkflowGraph, config: EngineConfig) -> str:
    """Advisory only: small graphs are low, unrecognized subtypes drop high to medium."""
    if len(graph.nodes) < config.confidence_min_nodes:
        return CONFIDENCE_LOW
    if graph.unrecognized_nodes():
        return CONFIDENCE_MEDIUM
    return CONFIDENCE_HIGH


def already_counted_nodes(
    graph: WorkflowGraph,
    loops: Sequence[LoopIssue],
    conflicts: Sequence[ConflictIssue],
    dead_branches: Sequence[DeadBranchIssue] = (),
) -> frozenset[str]:
    """Nodes already penalized by a reported loop, conflict or dead branch."""
    counted: set[str] = {issue.node_id for issue in dead_branches}
    for loop in loops:
        counted.update(loop.nodes)
    for conflict in conflicts:
        for trigger_id in conflict.triggers:
            counted.update(graph.successors(trigger_id))
    return frozenset(counted)


def reconcile_double_counting(
    graph: WorkflowGraph,
    loops: Sequence[LoopIssue],
    conflicts: Sequence[ConflictIssue],
    performance: Sequence[PerformanceIssue],
    dead_branches: Sequence[DeadBranchIssue] = (),
) -> tuple[PerformanceIssue, ...]:
    """
    missing_error_handling on a node already penalized by a loop, a conflict or a
    dead branch keeps its listing but deducts nothing.
    """
    counted = already_counted_nodes(graph, loops, conflicts, dead_branches)
    reconciled: list[PerformanceIssue] = []
    for issue in performance:
        if issue.issue_type == "missing_error_handling" and issue.node_id in counted:
            issue = replace(issue, points_deducted=0, already_counted=True)
        reconciled.append(issue)
    return tuple(reconciled)


def build_metadata(
    graph: WorkflowGraph,
    loops: Sequence[LoopIssue],
    conflicts: Sequence[ConflictIssue],
    dead_branches: Sequence[DeadBranchIssue] = (),
) -> AnalysisMetadata:
    subtypes = Counter(n.subtype for n in graph.nodes.values() if n.subtype)
    return AnalysisMetadata(
        node_count=len(graph.nodes),
        edge_count=len(graph.edges),
        trigger_count=sum(1 for n in graph.nodes.values() if n.kind == "trigger"),
        unrecognized_nodes=graph.unrecognized_nodes(),
        subtype_counts=tuple(sorted(subtypes.items())),
        has_loops=bool(loops),
        has_trigger_conflicts=bool(conflicts),
        has_dead_branches=bool(dead_branches),
    )


def score(
    loops: Sequence[LoopIssue],
    conflicts: Sequence[ConflictIssue],
    performance: Sequence[PerformanceIssue],
    *,
    graph: WorkflowGraph,
    config: EngineConfig,
    dead_branches: Sequence[DeadBranchIssue] = (),
) -> HealthScoreResult:
    """
    score = max(0, 100 - total points deducted). Suggestions are attached later.
    Deterministic for a fixed graph and config.
    """
    loops = tuple(loops)
    conflicts = tuple(conflicts)
    dead_branches = tuple(dead_branches)
    performance = reconcile_double_counting(graph, loops, conflicts, performance, dead_branches)

    deducted = sum(
        i.points_deducted for i in (*loops, *conflicts, *dead_branches, *performance)
    )
    value = max(0, MAX_SCORE - deducted)

    return HealthScoreResult(
        score=value,
        grade=grade_for_score(value, config),
        confidence=compute_confidence(graph, config),
        loops=loops,
        conflicts=conflicts,
        performance=performance,
        metadata=build_metadata(graph, loops, conflicts, dead_branches),
        dead_branches=dead_branches,
    )
