"""Edge types for workflow graph."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WorkflowEdge:
    """A directed transition between two nodes; label names the branch (e.g. "Yes", "Link Clicked")."""

    source: str
    target: str
    label: str | None = None
