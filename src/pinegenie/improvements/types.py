"""Records describing a suggested strategy improvement."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from pinegenie.builder.types import Position
from pinegenie.feedback.types import ImpactLevel


class ImprovementCategory(str, Enum):
    PERFORMANCE = "performance"
    RISK_MANAGEMENT = "risk-management"
    SIGNAL_QUALITY = "signal-quality"
    STRUCTURE = "structure"
    PARAMETERS = "parameters"
    ROBUSTNESS = "robustness"


class ImprovementPriority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class EffortLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class NodeChangeAction(str, Enum):
    ADD = "add"
    REMOVE = "remove"
    MODIFY = "modify"


@dataclass(frozen=True)
class NodeChange:
    action: NodeChangeAction
    node_type: str
    configuration: Mapping[str, Any] = field(default_factory=dict)
    node_id: str | None = None
    position: Position | None = None


@dataclass(frozen=True)
class ParameterChange:
    node_id: str
    parameter: str
    old_value: Any
    new_value: Any
    reasoning: str


@dataclass(frozen=True)
class ImplementationStep:
    step_number: int
    action: str
    description: str
    node_changes: tuple[NodeChange, ...] = ()
    parameter_changes: tuple[ParameterChange, ...] = ()


@dataclass(frozen=True)
class ImplementationGuide:
    steps: tuple[ImplementationStep, ...]
    estimated_time: int
    difficulty: Difficulty
    required_knowledge: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.estimated_time < 0:
            raise ValueError("estimated_time must be >= 0")
        numbers = [step.step_number for step in self.steps]
        if numbers != list(range(1, len(numbers) + 1)):
            raise ValueError("step numbers must count up from 1")


@dataclass(frozen=True)
class ImprovementSuggestion:
    id: str
    title: str
    description: str
    category: ImprovementCategory
    priority: ImprovementPriority
    impact: ImpactLevel
    effort: EffortLevel
    implementation: ImplementationGuide
    expected_benefit: str
    risk_factors: tuple[str, ...] = ()
    prerequisites: tuple[str, ...] = ()
    confidence: float = 0.5

    def __post_init__(self) -> None:
        if not (0.0 <= self.confidence <= 1.0):
            raise ValueError("confidence must be in [0, 1]")
