"""
Dead branches: steps no trigger can reach, so they never run.
"""

from __future__ import annotations

from flowscore.config.data_model import EngineConfig
from flowscore.graph.graph import WorkflowGraph
from flowscore.graph.health_model import DeadBranchIssue
from flowscore.logs import get_logger

logger = get_logger(__name__)


def reachable_from_triggers(graph: WorkflowGraph) -> frozenset[str]:
    """Every trigger node plus every node reachable from any of them."""
    reachable: set[str] = set()
    for node_id, node in graph.nodes.items():
        if node.kind != "trigger":
            continue
        reachable.add(node_id)
        reachable.update(graph.reachable_from(node_id))
    return frozenset(reachable)


def find_dead_branches(graph: WorkflowGraph, config: EngineConfig) -> tuple[DeadBranchIssue, ...]:
    """
    One medium DeadBranchIssue per non-trigger node outside the trigger-reachable set,
    in export order. A graph without triggers has no entry point to measure from and
    yields nothing.
    """
    if not any(n.kind == "trigger" for n in graph.nodes.values()):
        logger.debug("dead_branches_skipped", reason="no_triggers")
        return ()

    reachable = reachable_from_triggers(graph)
    issues: list[DeadBranchIssue] = []
    for node_id, node in graph.nodes.items():
        if node.kind == "trigger" or node_id in reachable:
            continue
        issues.append(
            DeadBranchIssue(
                id=f"dead-{len(issues) + 1}",
                severity="medium",
                description=f'"{node.label}" is unreachable from every trigger and will never run',
                suggestion="Connect this step to the workflow or remove it",
                points_deducted=config.weights.dead_branch,
                node_id=node_id,
                subtype=node.subtype,
            )
        )

    logger.debug("dead_branches_detected", reachable=len(reachable), dead_branches=len(issues))
    return tuple(issues)
