"""
Trigger conflicts: root triggers whose events can co-occur with no mutual-exclusion guard.

Structural heuristic only: it flags pairs that are plausible to fire together given the
configured co-occurrence table, not an execution trace.
"""

from __future__ import annotations

from flowscore.config.data_model import EngineConfig
from flowscore.graph.graph import WorkflowGraph
from flowscore.graph.health_model import ConflictIssue
from flowscore.graph.nodes import WorkflowNode
from flowscore.logs import get_logger

logger = get_logger(__name__)


def _references_trigger(value: object, trigger: WorkflowNode) -> bool:
    """Guard attribute value names the trigger by id or subtype (string or list of strings)."""
    if isinstance(value, list):
        return any(_references_trigger(v, trigger) for v in value)
    if not isinstance(value, str):
        return False
    cleaned = value.strip()
    if cleaned == trigger.id:
        return True
    normalized = cleaned.lower().replace("-", "_").replace(" ", "_")
    return bool(trigger.subtype) and normalized == trigger.subtype


def has_mutex_guard(
    graph: WorkflowGraph,
    trigger: WorkflowNode,
    other: WorkflowNode,
    config: EngineConfig,
) -> bool:
    """True if a condition downstream of trigger checks whether other has fired."""
    for node_id in graph.reachable_from(trigger.id):
        node = graph.nodes[node_id]
        if node.kind != "condition":
            continue
        if any(_references_trigger(node.attributes.get(key), other) for key in config.mutex_keys):
            return True
    return False


def candidate_triggers(graph: WorkflowGraph) -> list[WorkflowNode]:
    """Root trigger nodes with a recognized subtype, in export order."""
    return [
        graph.nodes[n]
        for n in graph.roots()
        if graph.nodes[n].kind == "trigger" and graph.nodes[n].recognized
    ]


def find_conflicts(graph: WorkflowGraph, config: EngineConfig) -> tuple[ConflictIssue, ...]:
    """One medium ConflictIssue per unordered pair of unguarded co-occurring root triggers."""
    triggers = candidate_triggers(graph)
    issues: list[ConflictIssue] = []

    for i, first in enumerate(triggers):
        for second in triggers[i + 1:]:
            if not config.triggers_co_occur(first.subtype, second.subtype):
                continue
            if has_mutex_guard(graph, first, second, config) or has_mutex_guard(
                graph, second, first, config
            ):
                continue
            issues.append(
                ConflictIssue(
                    id=f"conflict-{len(issues) + 1}",
                    severity="medium",
                    description=(
                        f'Triggers "{first.label}" and "{second.label}" can fire on the same '
                        "event, causing duplicate actions"
                    ),
                    suggestion="Add a delay or mutex condition between triggers, or merge them into one entry point with branching",
                    points_deducted=config.weights.conflict,
                    triggers=(first.id, second.id),
                    trigger_subtypes=(first.subtype, second.subtype),
                )
            )

    logger.debug("conflicts_detected", root_triggers=len(triggers), conflicts=len(issues))
    return tuple(issues)
