"""
GraphBuilder: validate a raw workflow export and normalize it into a WorkflowGraph.

Input shape: {"nodes": [{id, kind, subtype, attributes}], "edges": [{from, to, label?}]}.
"source"/"target" are accepted for edge endpoints as well. Any other envelope
keys are ignored.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from flowscore.graph.edges import WorkflowEdge
from flowscore.graph.graph import GraphValidationError, WorkflowGraph, build_graph
from flowscore.graph.nodes import NODE_KINDS, WorkflowNode
from flowscore.graph.vocabulary import DEFAULT_VOCABULARY, SubtypeVocabulary
from flowscore.logs import get_logger

logger = get_logger(__name__)


def _require_list(raw: Mapping[str, Any], key: str, *, required: bool) -> list:
    value = raw.get(key)
    if value is None:
        if required:
            raise GraphValidationError(f"Workflow export is missing {key!r}")
        return []
    if not isinstance(value, list):
        raise GraphValidationError(
            f"Workflow export {key!r} must be a list, got {type(value).__name__}"
        )
    return value


def _parse_node(raw_node: object, index: int, vocabulary: SubtypeVocabulary) -> WorkflowNode:
    if not isinstance(raw_node, Mapping):
        raise GraphValidationError(f"Node {index} must be an object, got {type(raw_node).__name__}")

    node_id = raw_node.get("id")
    if isinstance(node_id, int) and not isinstance(node_id, bool):
        node_id = str(node_id)
    if not isinstance(node_id, str) or not node_id.strip():
        raise GraphValidationError(f"Node {index} has a missing or blank id")

    kind = raw_node.get("kind")
    if isinstance(kind, str):
        kind = kind.strip().lower()
    if kind not in NODE_KINDS:
        raise GraphValidationError(
            f"Node {node_id!r} has unknown kind {kind!r}; expected one of {', '.join(NODE_KINDS)}",
            node_id=node_id,
        )

    attributes = raw_node.get("attributes")
    if attributes is None:
        attributes = {}
    if not isinstance(attributes, Mapping):
        raise GraphValidationError(
            f"Node {node_id!r} attributes must be an object, got {type(attributes).__name__}",
            node_id=node_id,
        )

    subtype, recognized = vocabulary.normalize(kind, raw_node.get("subtype"))
    return WorkflowNode(
        id=node_id,
        kind=kind,
        subtype=subtype,
        attributes=attributes,
        recognized=recognized,
    )


def _endpoint(raw_edge: Mapping[str, Any], primary: str, alias: str) -> object:
    value = raw_edge.get(primary)
    if value is None:
        value = raw_edge.get(alias)
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    return value


def _parse_edge(raw_edge: object, index: int) -> WorkflowEdge:
    if not isinstance(raw_edge, Mapping):
        raise GraphValidationError(
            f"Edge {index} must be an object, got {type(raw_edge).__name__}", edge_index=index
        )
    source = _endpoint(raw_edge, "from", "source")
    target = _endpoint(raw_edge, "to", "target")
    if not isinstance(source, str) or not source:
        raise GraphValidationError(f"Edge {index} is missing 'from'", edge_index=index)
    if not isinstance(target, str) or not target:
        raise GraphValidationError(f"Edge {index} is missing 'to'", edge_index=index)
    label = raw_edge.get("label")
    if label is not None and not isinstance(label, str):
        raise GraphValidationError(
            f"Edge {index} label must be a string, got {type(label).__name__}", edge_index=index
        )
    return WorkflowEdge(source=source, target=target, label=label)


def build_workflow_graph(
    raw: Mapping[str, Any],
    vocabulary: SubtypeVocabulary | None = None,
) -> WorkflowGraph:
    """
    Validate and normalize a raw workflow export.

    Raises:
        GraphValidationError: on a non-object export, zero nodes, missing or
            duplicate ids, unknown kinds, malformed attributes or dangling edges.
    """
    if not isinstance(raw, Mapping):
        raise GraphValidationError(
            f"Workflow export must be an object, got {type(raw).__name__}"
        )
    vocab = vocabulary or DEFAULT_VOCABULARY

    raw_nodes = _require_list(raw, "nodes", required=True)
    if not raw_nodes:
        raise GraphValidationError("Workflow export has no nodes")
    raw_edges = _require_list(raw, "edges", required=False)

    nodes = [_parse_node(n, i, vocab) for i, n in enumerate(raw_nodes)]
    edges = [_parse_edge(e, i) for i, e in enumerate(raw_edges)]
    graph = build_graph(nodes, edges)

    unrecognized = graph.unrecognized_nodes()
    logger.debug(
        "workflow_graph_built",
        node_count=len(graph.nodes),
        edge_count=len(graph.edges),
        unrecognized=list(unrecognized),
    )
    return graph


def load_workflow_export(path: str | Path) -> dict:
    """
    Read a workflow export JSON file.

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if the file is not valid JSON
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Workflow file not found: {file_path}")
    try:
        return json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse JSON file {file_path}: {e}") from e
