"""
Health analysis result model: issues, suggestions, metadata and deterministic JSON serialization.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union

Severity = Literal["low", "medium", "high", "critical"]
Level = Literal["low", "medium", "high"]
GuardStatus = Literal["missing", "unverified"]
PerformanceIssueType = Literal["slow_action", "missing_error_handling", "redundant_delay"]

SEVERITIES: tuple[str, ...] = ("critical", "high", "medium", "low")

RESULT_SCHEMA_VERSION = "1.0"


@dataclass(frozen=True)
class LoopIssue:
    """A cycle without a provable exit. nodes starts at the loop entry and does not repeat it."""

    id: str
    severity: Severity
    description: str
    suggestion: str
    points_deducted: int
    nodes: tuple[str, ...]
    guard_status: GuardStatus


@dataclass(frozen=True)
class ConflictIssue:
    """Two root triggers that can fire on the same event without mutual exclusion."""

    id: str
    severity: Severity
    description: str
    suggestion: str
    points_deducted: int
    triggers: tuple[str, str]
    trigger_subtypes: tuple[str, str]


@dataclass(frozen=True)
class PerformanceIssue:
    """A per-node reliability or cost problem."""

    id: str
    severity: Severity
    description: str
    suggestion: str
    points_deducted: int
    node_id: str
    subtype: str
    issue_type: PerformanceIssueType
    already_counted: bool = False


@dataclass(frozen=True)
class DeadBranchIssue:
    """A step no trigger can reach."""

    id: str
    severity: Severity
    description: str
    suggestion: str
    points_deducted: int
    node_id: str
    subtype: str


Issue = Union[LoopIssue, ConflictIssue, PerformanceIssue, DeadBranchIssue]


@dataclass(frozen=True)
class Suggestion:
    """Ranked, human-actionable recommendation."""

    id: str
    template: str
    title: str
    description: str
    impact: Level
    effort: Level
    quick_tip: str


@dataclass(frozen=True)
class AnalysisMetadata:
    """Graph facts the score was computed from."""

    node_count: int
    edge_count: int
    trigger_count: int
    unrecognized_nodes: tuple[str, ...]
    subtype_counts: tuple[tuple[str, int], ...]
    has_loops: bool
    has_trigger_conflicts: bool
    has_dead_branches: bool = False

    def subtype_count(self, subtype: str) -> int:
        for name, count in self.subtype_counts:
            if name == subtype:
                return count
        return 0


@dataclass(frozen=True)
class HealthScoreResult:
    """One analysis run. Never mutated; attaching suggestions yields a new instance."""

    score: int
    grade: str
    confidence: Level
    loops: tuple[LoopIssue, ...]
    conflicts: tuple[ConflictIssue, ...]
    performance: tuple[PerformanceIssue, ...]
    metadata: AnalysisMetadata
    dead_branches: tuple[DeadBranchIssue, ...] = ()
    suggestions: tuple[Suggestion, ...] = ()

    def all_issues(self) -> tuple[Issue, ...]:
        return (*self.loops, *self.conflicts, *self.dead_branches, *self.performance)

    def total_points_deducted(self) -> int:
        return sum(i.points_deducted for i in self.all_issues())

    def issues_summary(self) -> dict[str, int]:
        """Issue counts per severity plus total."""
        summary = {s: 0 for s in SEVERITIES}
        for issue in self.all_issues():
            summary[issue.severity] += 1
        summary["total"] = sum(summary[s] for s in SEVERITIES)
        return summary


def _loop_to_dict(issue: LoopIssue) -> dict:
    return {
        "id": issue.id,
        "nodes": list(issue.nodes),
        "severity": issue.severity,
        "guardStatus": issue.guard_status,
        "description": issue.description,
        "suggestion": issue.suggestion,
        "pointsDeducted": issue.points_deducted,
    }


def _conflict_to_dict(issue: ConflictIssue) -> dict:
    return {
        "id": issue.id,
        "triggers": list(issue.triggers),
        "triggerSubtypes": list(issue.trigger_subtypes),
        "severity": issue.severity,
        "description": issue.description,
        "suggestion": issue.suggestion,
        "pointsDeducted": issue.points_deducted,
    }


def _performance_to_dict(issue: PerformanceIssue) -> dict:
    return {
        "id": issue.id,
        "nodeId": issue.node_id,
        "subtype": issue.subtype,
        "type": issue.issue_type,
        "severity": issue.severity,
        "description": issue.description,
        "suggestion": issue.suggestion,
        "pointsDeducted": issue.points_deducted,
        "alreadyCounted": issue.already_counted,
    }


def _dead_branch_to_dict(issue: DeadBranchIssue) -> dict:
    return {
        "id": issue.id,
        "nodeId": issue.node_id,
        "subtype": issue.subtype,
        "severity": issue.severity,
        "description": issue.description,
        "suggestion": issue.suggestion,
        "pointsDeducted": issue.points_deducted,
    }


def _suggestion_to_dict(s: Suggestion) -> dict:
    return {
        "id": s.id,
        "template": s.template,
        "title": s.title,
        "description": s.description,
        "impact": s.impact,
        "effort": s.effort,
        "quickTip": s.quick_tip,
    }


def health_result_to_dict(result: HealthScoreResult) -> dict:
    """
    Return a JSON-serializable dict in the shape dashboards and reports consume.
    Issue lists keep their id order; the same result always yields the same dict.
    """
    m = result.metadata
    return {
        "schemaVersion": RESULT_SCHEMA_VERSION,
        "score": result.score,
        "grade": result.grade,
        "confidence": result.confidence,
        "loops": [_loop_to_dict(i) for i in result.loops],
        "conflicts": [_conflict_to_dict(i) for i in result.conflicts],
        "deadBranches": [_dead_branch_to_dict(i) for i in result.dead_branches],
        "performance": {
            "score": result.score,
            "confidence": result.confidence,
            "issues": [_performance_to_dict(i) for i in result.performance],
        },
        "suggestions": [_suggestion_to_dict(s) for s in result.suggestions],
        "summary": result.issues_summary(),
        "metadata": {
            "nodeCount": m.node_count,
            "edgeCount": m.edge_count,
            "triggerCount": m.trigger_count,
            "unrecognizedNodes": list(m.unrecognized_nodes),
            "subtypeCounts": {name: count for name, count in m.subtype_counts},
            "hasLoops": m.has_loops,
            "hasTriggerConflicts": m.has_trigger_conflicts,
            "hasDeadBranches": m.has_dead_branches,
        },
    }
