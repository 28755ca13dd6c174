"""
Workflow graph data model, adjacency indices and deterministic JSON serialization.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from flowscore.graph.edges import WorkflowEdge
from flowscore.graph.nodes import WorkflowNode

DEFAULT_SCHEMA_VERSION = "1.0"


class GraphValidationError(ValueError):
    """Raised when a workflow export cannot be turned into a consistent graph."""

    def __init__(
        self,
        message: str,
        *,
        node_id: str | None = None,
        edge_index: int | None = None,
    ) -> None:
        super().__init__(message)
        self.node_id = node_id
        self.edge_index = edge_index


@dataclass(frozen=True)
class WorkflowGraph:
    """
    Immutable workflow graph: nodes keyed by id (export order kept), edges,
    and forward/reverse adjacency built once at construction.
    """

    nodes: Mapping[str, WorkflowNode]
    edges: tuple[WorkflowEdge, ...]
    schema_version: str = DEFAULT_SCHEMA_VERSION
    _out_edges: Mapping[str, tuple[WorkflowEdge, ...]] = field(
        init=False, repr=False, compare=False
    )
    _in_edges: Mapping[str, tuple[WorkflowEdge, ...]] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        nodes = MappingProxyType(dict(self.nodes))
        edges = tuple(self.edges)
        out_edges: dict[str, list[WorkflowEdge]] = {node_id: [] for node_id in nodes}
        in_edges: dict[str, list[WorkflowEdge]] = {node_id: [] for node_id in nodes}
        for index, e in enumerate(edges):
            for endpoint in (e.source, e.target):
                if endpoint not in nodes:
                    raise GraphValidationError(
                        f"Edge {index} ({e.source} -> {e.target}) references unknown node {endpoint!r}",
                        node_id=endpoint,
                        edge_index=index,
                    )
            out_edges[e.source].append(e)
            in_edges[e.target].append(e)
        object.__setattr__(self, "nodes", nodes)
        object.__setattr__(self, "edges", edges)
        object.__setattr__(
            self, "_out_edges", MappingProxyType({k: tuple(v) for k, v in out_edges.items()})
        )
        object.__setattr__(
            self, "_in_edges", MappingProxyType({k: tuple(v) for k, v in in_edges.items()})
        )

    def node_ids(self) -> tuple[str, ...]:
        """Node ids in export order."""
        return tuple(self.nodes)

    def out_edges(self, node_id: str) -> tuple[WorkflowEdge, ...]:
        return self._out_edges.get(node_id, ())

    def in_edges(self, node_id: str) -> tuple[WorkflowEdge, ...]:
        return self._in_edges.get(node_id, ())

    def successors(self, node_id: str) -> list[str]:
        """Targets of edges from node_id (edge order preserved)."""
        return [e.target for e in self.out_edges(node_id)]

    def predecessors(self, node_id: str) -> list[str]:
        """Sources of edges into node_id."""
        return [e.source for e in self.in_edges(node_id)]

    def out_degree(self, node_id: str) -> int:
        return len(self.out_edges(node_id))

    def in_degree(self, node_id: str) -> int:
        return len(self.in_edges(node_id))

    def roots(self) -> tuple[str, ...]:
        """Nodes with in-degree zero, in export order."""
        return tuple(n for n in self.nodes if not self._in_edges[n])

    def unrecognized_nodes(self) -> tuple[str, ...]:
        """Ids of nodes whose subtype is outside the known vocabulary."""
        return tuple(n.id for n in self.nodes.values() if not n.recognized)

    def reachable_from(self, start: str) -> list[str]:
        """Nodes reachable from start (excluding start unless on a cycle), BFS order."""
        seen: set[str] = set()
        order: list[str] = []
        frontier: list[str] = list(self.successors(start))
        while frontier:
            next_frontier: list[str] = []
            for n in frontier:
                if n in seen:
                    continue
                seen.add(n)
                order.append(n)
                next_frontier.extend(self.successors(n))
            frontier = next_frontier
        return order


def build_graph(
    nodes: Iterable[WorkflowNode],
    edges: Iterable[WorkflowEdge],
    schema_version: str = DEFAULT_SCHEMA_VERSION,
) -> WorkflowGraph:
    """
    Build a WorkflowGraph from already-normalized nodes and edges.
    Raises GraphValidationError on duplicate ids or dangling edges.
    """
    by_id: dict[str, WorkflowNode] = {}
    for n in nodes:
        if n.id in by_id:
            raise GraphValidationError(f"Duplicate node id {n.id!r}", node_id=n.id)
        by_id[n.id] = n
    return WorkflowGraph(nodes=by_id, edges=tuple(edges), schema_version=schema_version)


def workflow_graph_to_dict(g: WorkflowGraph) -> dict:
    """
    Return a JSON-serializable dict with deterministic ordering.
    Same WorkflowGraph -> same dict (and same JSON with sort_keys=True).
    """
    nodes_sorted = sorted(g.nodes.values(), key=lambda n: n.id)
    edges_sorted = sorted(g.edges, key=lambda e: (e.source, e.target, e.label or ""))
    return {
        "schema_version": g.schema_version,
        "nodes": [
            {
                "id": n.id,
                "kind": n.kind,
                "subtype": n.subtype,
                "recognized": n.recognized,
                "attributes": dict(n.attributes),
            }
            for n in nodes_sorted
        ],
        "edges": [
            {"from": e.source, "to": e.target, "label": e.label}
            for e in edges_sorted
        ],
    }


def workflow_graph_fingerprint(g: WorkflowGraph) -> str:
    """
    SHA-256 hex digest of the normalized graph; equal graphs share a fingerprint,
    so callers can key cached analysis results on it.
    """
    payload = json.dumps(
        workflow_graph_to_dict(g), sort_keys=True, separators=(",", ":"), default=str
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
