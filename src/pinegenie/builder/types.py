"""Node and edge primitives of a builder strategy graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class NodeType(str, Enum):
    DATA_SOURCE = "data-source"
    INDICATOR = "indicator"
    CONDITION = "condition"
    ACTION = "action"
    RISK = "risk"
    TIMING = "timing"
    MATH = "math"
    LOGIC = "logic"


@dataclass(frozen=True)
class Position:
    x: float = 0.0
    y: float = 0.0

    def offset(self, dx: float = 0.0, dy: float = 0.0) -> Position:
        return Position(x=self.x + dx, y=self.y + dy)


@dataclass(frozen=True)
class Node:
    id: str
    type: NodeType
    label: str = ""
    config: Mapping[str, Any] = field(default_factory=dict)
    position: Position = field(default_factory=Position)

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", NodeType(self.type))
        object.__setattr__(self, "config", dict(self.config or {}))

    @property
    def parameters(self) -> Mapping[str, Any]:
        value = self.config.get("parameters")
        return value if isinstance(value, Mapping) else {}

    @property
    def indicator_id(self) -> str | None:
        value = self.config.get("indicatorId")
        return value if isinstance(value, str) else None


@dataclass(frozen=True)
class Edge:
    id: str
    source: str
    target: str
