"""Node types for workflow graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal, Mapping

NodeKind = Literal["trigger", "action", "condition", "delay"]

NODE_KINDS: tuple[str, ...] = ("trigger", "action", "condition", "delay")


@dataclass(frozen=True)
class WorkflowNode:
    """A single step of an automation workflow (trigger, action, condition or delay)."""

    id: str
    kind: NodeKind
    subtype: str
    attributes: Mapping[str, Any] = field(default_factory=dict)
    recognized: bool = True

    def __post_init__(self) -> None:
        # Freeze a private copy so callers cannot mutate the node through their dict.
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    @property
    def label(self) -> str:
        """Display name: the export's label attribute, else subtype, else id."""
        value = self.attributes.get("label")
        if isinstance(value, str) and value.strip():
            return value.strip()
        return self.subtype or self.id
