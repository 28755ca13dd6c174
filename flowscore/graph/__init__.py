"""Workflow graph construction and result model."""

from flowscore.graph.builder import build_workflow_graph, load_workflow_export
from flowscore.graph.edges import WorkflowEdge
from flowscore.graph.graph import (
    GraphValidationError,
    WorkflowGraph,
    build_graph,
    workflow_graph_fingerprint,
    workflow_graph_to_dict,
)
from flowscore.graph.health_model import (
    AnalysisMetadata,
    ConflictIssue,
    DeadBranchIssue,
    HealthScoreResult,
    LoopIssue,
    PerformanceIssue,
    Suggestion,
    health_result_to_dict,
)
from flowscore.graph.nodes import NODE_KINDS, WorkflowNode
from flowscore.graph.vocabulary import DEFAULT_VOCABULARY, SubtypeVocabulary

__all__ = [
    "AnalysisMetadata",
    "ConflictIssue",
    "DeadBranchIssue",
    "DEFAULT_VOCABULARY",
    "GraphValidationError",
    "HealthScoreResult",
    "LoopIssue",
    "NODE_KINDS",
    "PerformanceIssue",
    "Suggestion",
    "SubtypeVocabulary",
    "WorkflowEdge",
    "WorkflowGraph",
    "WorkflowNode",
    "build_graph",
    "build_workflow_graph",
    "health_result_to_dict",
    "load_workflow_export",
    "workflow_graph_fingerprint",
    "workflow_graph_to_dict",
]
