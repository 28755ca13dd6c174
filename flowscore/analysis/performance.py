"""
Performance analysis: independent per-node checks over a node and its in/out edges.

Checks: slow_action, missing_error_handling, redundant_delay. A check that hits a
malformed attribute raises TypeError/ValueError; the check is then skipped for that
node only and the run continues.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Mapping

from flowscore.config.data_model import EngineConfig
from flowscore.graph.graph import WorkflowGraph
from flowscore.graph.health_model import PerformanceIssue
from flowscore.graph.nodes import WorkflowNode
from flowscore.logs import get_logger

logger = get_logger(__name__)

ISSUE_SLOW_ACTION = "slow_action"
ISSUE_MISSING_ERROR_HANDLING = "missing_error_handling"
ISSUE_REDUNDANT_DELAY = "redundant_delay"


@dataclass(frozen=True)
class _Finding:
    issue_type: str
    severity: str
    description: str
    suggestion: str
    points_deducted: int


def _execution_seconds(attrs: Mapping[str, object]) -> float | None:
    """Declared execution time in seconds; None when the node declares none."""
    if "execution_time" in attrs:
        value, scale = attrs["execution_time"], 1.0
    elif "execution_time_ms" in attrs:
        value, scale = attrs["execution_time_ms"], 1000.0
    else:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"execution time must be a number, got {type(value).__name__}")
    try:
        seconds = float(value) / scale
    except OverflowError as e:
        raise ValueError(f"execution time is out of range: {e}") from e
    if not math.isfinite(seconds) or seconds < 0:
        raise ValueError(f"execution time must be finite and non-negative, got {value!r}")
    return seconds


def _optional_flag(attrs: Mapping[str, object], key: str) -> bool | None:
    value = attrs.get(key)
    if value is not None and not isinstance(value, bool):
        raise TypeError(f"{key} must be a boolean, got {type(value).__name__}")
    return value


def _normalize_label(label: str) -> str:
    return label.strip().lower().replace("-", "_").replace(" ", "_")


def check_slow_action(
    node: WorkflowNode, graph: WorkflowGraph, config: EngineConfig
) -> _Finding | None:
    if node.kind == "delay":
        return None
    seconds = _execution_seconds(node.attributes)
    if seconds is None or seconds <= config.slow_action_seconds:
        return None
    return _Finding(
        issue_type=ISSUE_SLOW_ACTION,
        severity="medium",
        description=(
            f'"{node.label}" has high execution time ({seconds:.1f}s, '
            f"threshold {config.slow_action_seconds:g}s)"
        ),
        suggestion="Consider batching this step or moving it to async processing",
        points_deducted=config.weights.slow_action,
    )


def is_external_action(node: WorkflowNode, config: EngineConfig) -> bool:
    """Explicit "external" attribute wins; otherwise only recognized subtypes are judged."""
    if node.kind != "action":
        return False
    explicit = _optional_flag(node.attributes, "external")
    if explicit is not None:
        return explicit
    return node.recognized and node.subtype in config.external_action_subtypes


def check_missing_error_handling(
    node: WorkflowNode, graph: WorkflowGraph, config: EngineConfig
) -> _Finding | None:
    if not is_external_action(node, config):
        return None
    if _optional_flag(node.attributes, "has_error_handling"):
        return None
    for e in graph.out_edges(node.id):
        if e.label and _normalize_label(e.label) in config.failure_labels:
            return None
        succ = graph.nodes[e.target]
        if (
            succ.kind == "condition"
            and succ.recognized
            and succ.subtype in config.failure_check_subtypes
        ):
            return None
    return _Finding(
        issue_type=ISSUE_MISSING_ERROR_HANDLING,
        severity="high",
        description=f'No error handling for "{node.label}" ({node.subtype or node.kind})',
        suggestion="Add an If/Else condition after this action to check success/failure, or a fallback action",
        points_deducted=config.weights.missing_error_handling,
    )


def _single_successor(graph: WorkflowGraph, node_id: str) -> str | None:
    out = graph.out_edges(node_id)
    if len(out) != 1 or out[0].target == node_id:
        return None
    return out[0].target


def check_redundant_delay(
    node: WorkflowNode, graph: WorkflowGraph, config: EngineConfig
) -> _Finding | None:
    if node.kind != "delay":
        return None
    next_id = _single_successor(graph, node.id)
    if next_id is None:
        return None
    nxt = graph.nodes[next_id]
    if nxt.kind != "delay" or graph.in_degree(next_id) != 1:
        return None
    # Reported once per chain, at its first delay.
    incoming = graph.in_edges(node.id)
    if len(incoming) == 1:
        prev = graph.nodes[incoming[0].source]
        if prev.kind == "delay" and _single_successor(graph, prev.id) == node.id:
            return None
    return _Finding(
        issue_type=ISSUE_REDUNDANT_DELAY,
        severity="low",
        description=f'Consecutive delays "{node.label}" and "{nxt.label}" with no branch in between',
        suggestion="Combine consecutive delays into a single delay action",
        points_deducted=config.weights.redundant_delay,
    )


Check = Callable[[WorkflowNode, WorkflowGraph, EngineConfig], "_Finding | None"]

CHECKS: tuple[Check, ...] = (
    check_slow_action,
    check_missing_error_handling,
    check_redundant_delay,
)


def find_performance_issues(
    graph: WorkflowGraph, config: EngineConfig
) -> tuple[PerformanceIssue, ...]:
    """Run every check on every node; ids follow node order, then check order."""
    issues: list[PerformanceIssue] = []
    for node in graph.nodes.values():
        for check in CHECKS:
            try:
                finding = check(node, graph, config)
            except (TypeError, ValueError) as e:
                logger.debug(
                    "performance_check_skipped",
                    check=check.__name__,
                    node_id=node.id,
                    reason=str(e),
                )
                continue
            if finding is None:
                continue
            issues.append(
                PerformanceIssue(
                    id=f"perf-{len(issues) + 1}",
                    severity=finding.severity,
                    description=finding.description,
                    suggestion=finding.suggestion,
                    points_deducted=finding.points_deducted,
                    node_id=node.id,
                    subtype=node.subtype,
                    issue_type=finding.issue_type,
                )
            )
    logger.debug("performance_checked", nodes=len(graph.nodes), issues=len(issues))
    return tuple(issues)
