"""
Cycle detection: three-color DFS over the forward adjacency, exit-guard heuristic,
and merging of overlapping cycles into a single loop issue.

Path convention: a loop path starts at the node the back edge points to (the first
cycle node the traversal entered), lists every cycle node once in traversal order,
and does not repeat the start node. Nodes leading into the cycle are not part of it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from flowscore.config.data_model import EngineConfig
from flowscore.graph.graph import WorkflowGraph
from flowscore.graph.health_model import LoopIssue
from flowscore.graph.nodes import WorkflowNode
from flowscore.logs import get_logger

logger = get_logger(__name__)

WHITE = 0
GRAY = 1
BLACK = 2

GUARD_MISSING = "missing"
GUARD_UNVERIFIED = "unverified"


@dataclass(frozen=True)
class _RawCycle:
    order: int
    path: tuple[str, ...]
    guard_status: str


def find_back_edge_cycles(graph: WorkflowGraph) -> list[tuple[str, ...]]:
    """
    Every cycle closed by a DFS back edge, in discovery order.
    DFS starts from each still-white node in export order.
    """
    color = {n: WHITE for n in graph.nodes}
    cycles: list[tuple[str, ...]] = []

    for root in graph.node_ids():
        if color[root] != WHITE:
            continue
        color[root] = GRAY
        path: list[str] = [root]
        position: dict[str, int] = {root: 0}
        pending: list[Iterator[str]] = [iter(graph.successors(root))]

        while pending:
            node = path[-1]
            descended = False
            for succ in pending[-1]:
                if color[succ] == WHITE:
                    color[succ] = GRAY
                    position[succ] = len(path)
                    path.append(succ)
                    pending.append(iter(graph.successors(succ)))
                    descended = True
                    break
                if color[succ] == GRAY:
                    cycles.append(tuple(path[position[succ]:]))
            if not descended:
                color[node] = BLACK
                del position[node]
                path.pop()
                pending.pop()

    return cycles


def _positive_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _non_empty_predicate(value: object) -> bool:
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, dict):
        return bool(value)
    return False


def is_verified_guard(node: WorkflowNode, config: EngineConfig) -> bool:
    """A recognized condition node declaring a bounded counter or an explicit break predicate."""
    if node.kind != "condition" or not node.recognized:
        return False
    attrs = node.attributes
    if any(_positive_int(attrs.get(key)) for key in config.loop_counter_keys):
        return True
    return any(_non_empty_predicate(attrs.get(key)) for key in config.loop_break_keys)


def classify_cycle(
    graph: WorkflowGraph,
    path: tuple[str, ...],
    config: EngineConfig,
) -> str | None:
    """
    None when the cycle has a verified guard (intentional retry/poll loop),
    "missing" when it has no condition node, "unverified" otherwise.
    """
    conditions = [graph.nodes[n] for n in path if graph.nodes[n].kind == "condition"]
    if not conditions:
        return GUARD_MISSING
    if any(is_verified_guard(c, config) for c in conditions):
        return None
    return GUARD_UNVERIFIED


def _merge_overlapping(cycles: list[_RawCycle]) -> list[list[_RawCycle]]:
    """Group cycles that share at least one node; groups ordered by first member."""
    groups: list[tuple[set[str], list[_RawCycle]]] = []
    for cycle in cycles:
        nodes = set(cycle.path)
        touching = [g for g in groups if g[0] & nodes]
        if not touching:
            groups.append((nodes, [cycle]))
            continue
        target = touching[0]
        target[0].update(nodes)
        target[1].append(cycle)
        absorbed = touching[1:]
        for other in absorbed:
            target[0].update(other[0])
            target[1].extend(other[1])
        groups = [g for g in groups if not any(g is other for other in absorbed)]
    merged = [sorted(members, key=lambda c: c.order) for _, members in groups]
    merged.sort(key=lambda members: members[0].order)
    return merged


def _merged_path(members: list[_RawCycle]) -> tuple[str, ...]:
    longest = max(members, key=lambda c: (len(c.path), -c.order))
    path = list(longest.path)
    seen = set(path)
    for member in members:
        for n in member.path:
            if n not in seen:
                seen.add(n)
                path.append(n)
    return tuple(path)


def _describe(graph: WorkflowGraph, path: tuple[str, ...]) -> str:
    labels = [graph.nodes[n].label for n in path]
    return " -> ".join([*labels, labels[0]])


def find_loops(graph: WorkflowGraph, config: EngineConfig) -> tuple[LoopIssue, ...]:
    """
    Loop issues for cycles lacking a provable exit condition.
    Guarded cycles are dropped before merging, so a guarded retry loop never
    hides, or is hidden by, an unguarded one it touches.
    """
    raw: list[_RawCycle] = []
    for order, path in enumerate(find_back_edge_cycles(graph)):
        status = classify_cycle(graph, path, config)
        if status is not None:
            raw.append(_RawCycle(order=order, path=path, guard_status=status))

    issues: list[LoopIssue] = []
    for index, members in enumerate(_merge_overlapping(raw), start=1):
        path = _merged_path(members)
        if any(m.guard_status == GUARD_MISSING for m in members):
            issue = LoopIssue(
                id=f"loop-{index}",
                severity="critical",
                description=f"Infinite loop with no exit condition: {_describe(graph, path)}",
                suggestion="Add a condition step with a counter or exit criteria so the loop stops after a bounded number of iterations",
                points_deducted=config.weights.loop_missing_guard,
                nodes=path,
                guard_status=GUARD_MISSING,
            )
        else:
            issue = LoopIssue(
                id=f"loop-{index}",
                severity="medium",
                description=f"Loop exit cannot be verified: {_describe(graph, path)}",
                suggestion="Declare a bounded counter (e.g. max_iterations) or an explicit exit condition on the loop's condition step",
                points_deducted=config.weights.loop_unverified_guard,
                nodes=path,
                guard_status=GUARD_UNVERIFIED,
            )
        issues.append(issue)

    logger.debug("loops_detected", raw_cycles=len(raw), loop_issues=len(issues))
    return tuple(issues)
