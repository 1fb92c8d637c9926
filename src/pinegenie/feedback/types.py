"""Record types produced by the strategy feedback analyzers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Sequence

from pinegenie.builder.types import Edge, Node


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ImpactLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


IMPACT_RANK: Mapping[str, int] = {"critical": 4, "high": 3, "medium": 2, "low": 1}


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class UserLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ErrorType(str, Enum):
    MISSING_DATA_SOURCE = "missing-data-source"
    MISSING_ENTRY_CONDITION = "missing-entry-condition"
    MISSING_EXIT_ACTION = "missing-exit-action"
    CIRCULAR_DEPENDENCY = "circular-dependency"
    INVALID_CONNECTION = "invalid-connection"
    INVALID_PARAMETER = "invalid-parameter"
    ORPHANED_NODE = "orphaned-node"
    DUPLICATE_CONNECTION = "duplicate-connection"


class WarningType(str, Enum):
    MISSING_RISK_MANAGEMENT = "missing-risk-management"
    HIGH_COMPLEXITY = "high-complexity"
    PARAMETER_OUT_OF_RANGE = "parameter-out-of-range"
    POTENTIAL_OVERFITTING = "potential-overfitting"
    INSUFFICIENT_DIVERSIFICATION = "insufficient-diversification"
    POOR_SIGNAL_QUALITY = "poor-signal-quality"


class SuggestionType(str, Enum):
    ADD_COMPONENT = "add-component"
    OPTIMIZE_PARAMETER = "optimize-parameter"
    IMPROVE_STRUCTURE = "improve-structure"
    ENHANCE_RISK_MANAGEMENT = "enhance-risk-management"
    SIMPLIFY_STRATEGY = "simplify-strategy"


class SuggestionCategory(str, Enum):
    NEXT_STEP = "next-step"
    IMPROVEMENT = "improvement"
    RISK_MANAGEMENT = "risk-management"
    OPTIMIZATION = "optimization"
    EDUCATION = "education"


class BestPracticeCategory(str, Enum):
    STRATEGY_DESIGN = "strategy-design"
    RISK_MANAGEMENT = "risk-management"
    PARAMETER_SELECTION = "parameter-selection"
    BACKTESTING = "backtesting"
    PORTFOLIO_MANAGEMENT = "portfolio-management"


class EducationalCategory(str, Enum):
    TECHNICAL_ANALYSIS = "technical-analysis"
    RISK_MANAGEMENT = "risk-management"
    STRATEGY_DEVELOPMENT = "strategy-development"
    MARKET_CONCEPTS = "market-concepts"
    TRADING_PSYCHOLOGY = "trading-psychology"


class FixActionType(str, Enum):
    ADD_NODE = "add-node"
    REMOVE_NODE = "remove-node"
    MODIFY_NODE = "modify-node"
    ADD_EDGE = "add-edge"
    REMOVE_EDGE = "remove-edge"


class ChangeType(str, Enum):
    NODE_ADDED = "node-added"
    NODE_REMOVED = "node-removed"
    NODE_MODIFIED = "node-modified"
    EDGE_ADDED = "edge-added"
    EDGE_REMOVED = "edge-removed"


class ImpactAreaName(str, Enum):
    PERFORMANCE = "performance"
    RISK = "risk"
    COMPLEXITY = "complexity"
    MAINTAINABILITY = "maintainability"


@dataclass(frozen=True)
class FixAction:
    type: FixActionType
    description: str
    parameters: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ValidationError:
    id: str
    type: ErrorType
    severity: Severity
    message: str
    description: str
    auto_fixable: bool
    node_id: str | None = None
    edge_id: str | None = None
    fix_action: FixAction | None = None


@dataclass(frozen=True)
class ValidationWarning:
    id: str
    type: WarningType
    message: str
    description: str
    recommendation: str
    impact: ImpactLevel
    node_id: str | None = None
    edge_id: str | None = None


@dataclass(frozen=True)
class ValidationSuggestion:
    id: str
    type: SuggestionType
    message: str
    description: str
    benefit: str
    implementation: str
    priority: Priority


@dataclass(frozen=True)
class ValidationFeedback:
    """Outcome of validating one strategy snapshot.

    ``completeness`` is an integer score in [0, 100]; ``confidence`` is in
    [0, 1]. ``is_valid`` holds exactly when ``errors`` is empty.
    """

    is_valid: bool
    errors: tuple[ValidationError, ...]
    warnings: tuple[ValidationWarning, ...]
    suggestions: tuple[ValidationSuggestion, ...]
    completeness: int
    confidence: float


@dataclass(frozen=True)
class ContextualSuggestion:
    id: str
    title: str
    description: str
    category: SuggestionCategory
    reasoning: str
    confidence: float
    priority: int
    suggested_nodes: tuple[Node, ...] = ()
    suggested_connections: tuple[Edge, ...] = ()


@dataclass(frozen=True)
class BestPracticeRecommendation:
    id: str
    title: str
    description: str
    category: BestPracticeCategory
    importance: ImpactLevel
    implementation: str
    examples: tuple[str, ...] = ()
    learn_more_url: str | None = None


@dataclass(frozen=True)
class ImpactMetric:
    name: str
    current_value: float
    estimated_value: float
    change: float
    unit: str


@dataclass(frozen=True)
class ImpactArea:
    area: ImpactAreaName
    impact: ImpactLevel
    description: str
    metrics: tuple[ImpactMetric, ...] = ()


@dataclass(frozen=True)
class EstimatedChange:
    """Illustrative percentage deltas; not derived from any backtest."""

    return_impact: float
    risk_impact: float
    complexity_impact: float
    confidence: float


@dataclass(frozen=True)
class PerformanceImpactAnalysis:
    overall_impact: ImpactLevel
    impact_areas: tuple[ImpactArea, ...]
    recommendations: tuple[str, ...]
    estimated_change: EstimatedChange
    risk_factors: tuple[str, ...]


@dataclass(frozen=True)
class EducationalTip:
    id: str
    title: str
    content: str
    category: EducationalCategory
    difficulty: UserLevel
    related_concepts: tuple[str, ...] = ()
    examples: tuple[str, ...] = ()


@dataclass(frozen=True)
class StrategyChange:
    """An edit to the graph. Unknown ``type`` strings are kept verbatim."""

    type: ChangeType | str
    node_id: str | None = None
    edge_id: str | None = None
    old_value: Any = None
    new_value: Any = None

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "type", ChangeType(self.type))
        except ValueError:
            object.__setattr__(self, "type", str(self.type))


@dataclass(frozen=True)
class EducationalContext:
    current_nodes: Sequence[Node] = ()
    selected_node: Node | None = None
    user_level: UserLevel = UserLevel.BEGINNER
    focus_area: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "current_nodes", tuple(self.current_nodes or ()))
        object.__setattr__(self, "user_level", UserLevel(self.user_level))
