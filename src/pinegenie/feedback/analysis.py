"""Whole-strategy analysis: gaps, compatibility, risk and performance.

``analyze_strategy`` bundles six independent heuristics over one snapshot.
Every score is an integer in [0, 100] rounded half up; ``confidence`` blends
completeness and compatibility into [0, 1]. Results carry no timestamps, so
identical inputs always give equal outputs.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Any, Final, Mapping, Sequence

from pinegenie.builder.graph import StrategyGraph, is_valid_connection
from pinegenie.builder.types import Edge, Node, NodeType, Position
from pinegenie.feedback.checks import numeric_parameter
from pinegenie.feedback.types import ImpactLevel, Priority
from pinegenie.improvements.types import EffortLevel

LOGGER = logging.getLogger(__name__)

REQUIRED_COMPONENTS: Final[tuple[NodeType, ...]] = (
    NodeType.DATA_SOURCE,
    NodeType.CONDITION,
    NodeType.ACTION,
)
RECOMMENDED_COMPONENTS: Final[tuple[NodeType, ...]] = (NodeType.RISK, NodeType.INDICATOR)

# indicatorId -> (min period, max period, suggested period)
PERIOD_BOUNDS: Final[Mapping[str, tuple[int, int, int]]] = {
    "rsi": (1, 100, 14),
    "sma": (1, 200, 20),
}

SEVERITY_WEIGHTS: Final[Mapping[ImpactLevel, float]] = {
    ImpactLevel.LOW: 0.25,
    ImpactLevel.MEDIUM: 0.5,
    ImpactLevel.HIGH: 0.75,
    ImpactLevel.CRITICAL: 1.0,
}

MAX_INDICATORS_BEFORE_OVERFIT = 5
MAX_NODES_BEFORE_COMPLEX = 15
MAX_INPUTS_PER_NODE = 5
MAX_INDICATORS_BEFORE_SLOW = 8
REDUNDANCY_STEP = 5
MAX_REDUNDANCY_PENALTY = 50
COMPLETENESS_WEIGHT = 0.6
COMPATIBILITY_WEIGHT = 0.4


class RequirementType(str, Enum):
    REQUIRED = "required"
    RECOMMENDED = "recommended"
    OPTIONAL = "optional"


class GapType(str, Enum):
    MISSING_COMPONENT = "missing-component"
    MISSING_CONNECTION = "missing-connection"
    INVALID_PARAMETER = "invalid-parameter"
    LOGIC_ERROR = "logic-error"


class AnalysisCategory(str, Enum):
    PERFORMANCE = "performance"
    RISK = "risk"
    LOGIC = "logic"
    STRUCTURE = "structure"


class RiskLevel(str, Enum):
    VERY_LOW = "very-low"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very-high"


class RiskFactorType(str, Enum):
    OVER_OPTIMIZATION = "over-optimization"
    INSUFFICIENT_DIVERSIFICATION = "insufficient-diversification"
    HIGH_CORRELATION = "high-correlation"
    EXCESSIVE_LEVERAGE = "excessive-leverage"
    POOR_RISK_REWARD = "poor-risk-reward"
    MARKET_TIMING = "market-timing"
    LIQUIDITY = "liquidity"


@dataclass(frozen=True)
class ConnectionRequirement:
    source: str
    target: str
    type: RequirementType
    reason: str


@dataclass(frozen=True)
class CompletenessAnalysis:
    score: int
    missing_components: tuple[NodeType, ...]
    required_connections: tuple[ConnectionRequirement, ...]
    critical_issues: tuple[str, ...]
    warnings: tuple[str, ...]


@dataclass(frozen=True)
class StrategyGap:
    id: str
    type: GapType
    severity: ImpactLevel
    description: str
    recommendation: str
    auto_fixable: bool
    suggested_nodes: tuple[Node, ...] = ()


@dataclass(frozen=True)
class AnalysisImprovement:
    id: str
    category: AnalysisCategory
    title: str
    description: str
    impact: ImpactLevel
    effort: EffortLevel
    implementation: str
    expected_benefit: str


@dataclass(frozen=True)
class NodeCompatibility:
    node_id: str
    compatible: bool
    issues: tuple[str, ...]
    suggestions: tuple[str, ...]


@dataclass(frozen=True)
class ConnectionValidation:
    edge_id: str
    valid: bool
    issues: tuple[str, ...]
    data_flow_correct: bool


@dataclass(frozen=True)
class ParameterConflict:
    node_id: str
    parameter: str
    issue: str
    suggested_value: Any


@dataclass(frozen=True)
class CompatibilityAnalysis:
    node_compatibility: tuple[NodeCompatibility, ...]
    connection_validation: tuple[ConnectionValidation, ...]
    parameter_conflicts: tuple[ParameterConflict, ...]
    overall_compatibility: int


@dataclass(frozen=True)
class RiskFactor:
    id: str
    type: RiskFactorType
    description: str
    severity: ImpactLevel
    likelihood: float
    impact: float
    mitigation: str


@dataclass(frozen=True)
class RiskRecommendation:
    id: str
    description: str
    priority: Priority
    implementation: str
    expected_impact: ImpactLevel


@dataclass(frozen=True)
class RiskAssessment:
    """``score`` is inverted risk: 100 means no risk factor fired."""

    overall_risk: RiskLevel
    risk_factors: tuple[RiskFactor, ...]
    recommendations: tuple[RiskRecommendation, ...]
    score: int


@dataclass(frozen=True)
class PerformanceAnalysis:
    complexity: int
    efficiency: int
    bottlenecks: tuple[str, ...]
    optimization_opportunities: tuple[str, ...]


@dataclass(frozen=True)
class StrategyAnalysis:
    completeness: CompletenessAnalysis
    gaps: tuple[StrategyGap, ...]
    improvements: tuple[AnalysisImprovement, ...]
    compatibility: CompatibilityAnalysis
    risk_assessment: RiskAssessment
    performance: PerformanceAnalysis
    confidence: float


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def required_connections(graph: StrategyGraph) -> list[ConnectionRequirement]:
    """Each data source must feed the first indicator (or, lacking one, the
    first condition); each condition must trigger the first action."""

    requirements: list[ConnectionRequirement] = []
    indicators = graph.nodes_of_type(NodeType.INDICATOR)
    conditions = graph.nodes_of_type(NodeType.CONDITION)
    actions = graph.nodes_of_type(NodeType.ACTION)

    for data_source in graph.nodes_of_type(NodeType.DATA_SOURCE):
        if indicators:
            requirements.append(
                ConnectionRequirement(
                    source=data_source.id,
                    target=indicators[0].id,
                    type=RequirementType.REQUIRED,
                    reason="Data source must feed into indicators or conditions",
                )
            )
        elif conditions:
            requirements.append(
                ConnectionRequirement(
                    source=data_source.id,
                    target=conditions[0].id,
                    type=RequirementType.REQUIRED,
                    reason="Data source must feed into conditions",
                )
            )

    if actions:
        for condition in conditions:
            requirements.append(
                ConnectionRequirement(
                    source=condition.id,
                    target=actions[0].id,
                    type=RequirementType.REQUIRED,
                    reason="Conditions must trigger actions",
                )
            )
    return requirements


def analyze_completeness(graph: StrategyGraph) -> CompletenessAnalysis:
    present = graph.node_types()
    missing = [component for component in REQUIRED_COMPONENTS if component not in present]
    critical_issues = [f"Missing required component: {component.value}" for component in missing]
    warnings = [
        f"Missing recommended component: {component.value}"
        for component in RECOMMENDED_COMPONENTS
        if component not in present
    ]

    requirements = required_connections(graph)
    existing = {(edge.source, edge.target) for edge in graph.edges}
    required = [item for item in requirements if item.type == RequirementType.REQUIRED]
    for requirement in required:
        if (requirement.source, requirement.target) not in existing:
            critical_issues.append(
                f"Missing required connection: {requirement.source} → {requirement.target}"
            )

    total = len(REQUIRED_COMPONENTS) + len(required)
    met = total - len(critical_issues)
    return CompletenessAnalysis(
        score=max(0, round_half_up(met / total * 100)),
        missing_components=tuple(missing),
        required_connections=tuple(requirements),
        critical_issues=tuple(critical_issues),
        warnings=tuple(warnings),
    )


def _missing_component_gap(
    gap_id: str,
    severity: ImpactLevel,
    description: str,
    recommendation: str,
    suggested: Node,
) -> StrategyGap:
    return StrategyGap(
        id=gap_id,
        type=GapType.MISSING_COMPONENT,
        severity=severity,
        description=description,
        recommendation=recommendation,
        auto_fixable=True,
        suggested_nodes=(suggested,),
    )


def identify_gaps(graph: StrategyGraph) -> list[StrategyGap]:
    gaps: list[StrategyGap] = []
    if not graph.has_type(NodeType.DATA_SOURCE):
        gaps.append(
            _missing_component_gap(
                "missing-data-source",
                ImpactLevel.CRITICAL,
                "Strategy lacks a data source for market data",
                "Add a Market Data node to provide price information",
                Node(
                    id="suggested-data-source",
                    type=NodeType.DATA_SOURCE,
                    label="Market Data",
                    config={"symbol": "BTCUSDT", "timeframe": "1h", "source": "binance"},
                    position=Position(x=100, y=100),
                ),
            )
        )
    if not graph.has_type(NodeType.CONDITION):
        gaps.append(
            _missing_component_gap(
                "missing-entry-condition",
                ImpactLevel.HIGH,
                "Strategy lacks entry conditions for trade signals",
                "Add condition nodes to define when to enter trades",
                Node(
                    id="suggested-condition",
                    type=NodeType.CONDITION,
                    label="Entry Condition",
                    config={"operator": "greater_than", "threshold": 0},
                    position=Position(x=300, y=150),
                ),
            )
        )
    if not graph.has_type(NodeType.ACTION):
        gaps.append(
            _missing_component_gap(
                "missing-actions",
                ImpactLevel.CRITICAL,
                "Strategy lacks action nodes to execute trades",
                "Add buy/sell action nodes to execute trading decisions",
                Node(
                    id="suggested-buy-action",
                    type=NodeType.ACTION,
                    label="Buy Order",
                    config={"orderType": "market", "quantity": "25%"},
                    position=Position(x=500, y=100),
                ),
            )
        )
    if not graph.has_type(NodeType.RISK):
        gaps.append(
            _missing_component_gap(
                "missing-risk-management",
                ImpactLevel.HIGH,
                "Strategy lacks risk management components",
                "Add stop-loss and take-profit nodes to manage risk",
                Node(
                    id="suggested-stop-loss",
                    type=NodeType.RISK,
                    label="Stop Loss",
                    config={"stopLoss": 2, "maxRisk": 1},
                    position=Position(x=500, y=200),
                ),
            )
        )

    for orphan in graph.orphaned_nodes():
        gaps.append(
            StrategyGap(
                id=f"orphaned-node-{orphan.id}",
                type=GapType.MISSING_CONNECTION,
                severity=ImpactLevel.MEDIUM,
                description=f'Node "{orphan.label}" is not connected to the strategy flow',
                recommendation="Connect this node to other components or remove it",
                auto_fixable=False,
            )
        )
    return gaps


def suggest_improvements(graph: StrategyGraph) -> list[AnalysisImprovement]:
    improvements: list[AnalysisImprovement] = []
    if len(graph.nodes_of_type(NodeType.INDICATOR)) < 2:
        improvements.append(
            AnalysisImprovement(
                id="add-confirmation-indicator",
                category=AnalysisCategory.LOGIC,
                title="Add Confirmation Indicator",
                description=(
                    "Adding a second indicator can improve signal reliability and reduce false signals"
                ),
                impact=ImpactLevel.MEDIUM,
                effort=EffortLevel.LOW,
                implementation="Add an RSI or MACD indicator to confirm entry signals",
                expected_benefit="Reduced false signals and improved win rate",
            )
        )
    if any(node.config for node in graph.nodes):
        improvements.append(
            AnalysisImprovement(
                id="optimize-parameters",
                category=AnalysisCategory.PERFORMANCE,
                title="Optimize Parameters",
                description="Current parameters may not be optimal for current market conditions",
                impact=ImpactLevel.HIGH,
                effort=EffortLevel.MEDIUM,
                implementation="Run parameter optimization to find better values",
                expected_benefit="Improved strategy performance and profitability",
            )
        )
    if not graph.has_type(NodeType.TIMING):
        improvements.append(
            AnalysisImprovement(
                id="add-time-filter",
                category=AnalysisCategory.RISK,
                title="Add Time Filter",
                description="Restricting trading to specific hours can improve performance",
                impact=ImpactLevel.MEDIUM,
                effort=EffortLevel.LOW,
                implementation="Add a time filter to trade only during high-volume hours",
                expected_benefit="Reduced slippage and improved execution quality",
            )
        )

    # Any quantity other than an all-in "100%" counts as explicit sizing.
    sized = any(
        node.config.get("quantity") and node.config.get("quantity") != "100%"
        for node in graph.nodes_of_type(NodeType.ACTION)
    )
    if not sized:
        improvements.append(
            AnalysisImprovement(
                id="improve-position-sizing",
                category=AnalysisCategory.RISK,
                title="Implement Dynamic Position Sizing",
                description="Fixed position sizes may not be optimal for all market conditions",
                impact=ImpactLevel.HIGH,
                effort=EffortLevel.MEDIUM,
                implementation="Use volatility-based or risk-based position sizing",
                expected_benefit="Better risk management and improved risk-adjusted returns",
            )
        )
    return improvements


def node_compatibility(node: Node, graph: StrategyGraph) -> NodeCompatibility:
    issues: list[str] = []
    suggestions: list[str] = []

    if node.type == NodeType.INDICATOR and not node.config.get("parameters"):
        issues.append("Indicator missing required parameters")
        suggestions.append("Configure indicator parameters for proper functionality")
    if node.type == NodeType.DATA_SOURCE and not graph.outgoing(node.id):
        issues.append("Data source not connected to any consumers")
        suggestions.append("Connect data source to indicators or conditions")
    if node.type == NodeType.ACTION and not graph.incoming(node.id):
        issues.append("Action node not connected to any triggers")
        suggestions.append("Connect conditions or signals to this action")

    return NodeCompatibility(
        node_id=node.id,
        compatible=not issues,
        issues=tuple(issues),
        suggestions=tuple(suggestions),
    )


def validate_connection(edge: Edge, nodes_by_id: Mapping[str, Node]) -> ConnectionValidation:
    source = nodes_by_id.get(edge.source)
    target = nodes_by_id.get(edge.target)
    if source is None or target is None:
        return ConnectionValidation(
            edge_id=edge.id,
            valid=False,
            issues=("Connection references non-existent nodes",),
            data_flow_correct=False,
        )

    flow_ok = is_valid_connection(source.type, target.type)
    issues = () if flow_ok else (f"Invalid data flow: {source.type.value} → {target.type.value}",)
    return ConnectionValidation(edge_id=edge.id, valid=flow_ok, issues=issues, data_flow_correct=flow_ok)


def parameter_conflicts(graph: StrategyGraph) -> list[ParameterConflict]:
    conflicts: list[ParameterConflict] = []
    for node in graph.nodes_of_type(NodeType.INDICATOR):
        bounds = PERIOD_BOUNDS.get(node.indicator_id or "")
        period = numeric_parameter(node, "period")
        if bounds is None or period is None:
            continue
        low, high, suggested = bounds
        if period < low or period > high:
            conflicts.append(
                ParameterConflict(
                    node_id=node.id,
                    parameter="period",
                    issue=f"{node.indicator_id.upper()} period should be between {low} and {high}",
                    suggested_value=suggested,
                )
            )
    return conflicts


def analyze_compatibility(graph: StrategyGraph) -> CompatibilityAnalysis:
    nodes_by_id = {node.id: node for node in graph.nodes}
    per_node = [node_compatibility(node, graph) for node in graph.nodes]
    per_edge = [validate_connection(edge, nodes_by_id) for edge in graph.edges]

    total = len(per_node) + len(per_edge)
    compatible = sum(item.compatible for item in per_node) + sum(item.valid for item in per_edge)
    overall = round_half_up(compatible / total * 100) if total else 100
    return CompatibilityAnalysis(
        node_compatibility=tuple(per_node),
        connection_validation=tuple(per_edge),
        parameter_conflicts=tuple(parameter_conflicts(graph)),
        overall_compatibility=overall,
    )


def _risk_level(risk_score: int) -> RiskLevel:
    if risk_score < 20:
        return RiskLevel.VERY_LOW
    if risk_score < 40:
        return RiskLevel.LOW
    if risk_score < 60:
        return RiskLevel.MEDIUM
    if risk_score < 80:
        return RiskLevel.HIGH
    return RiskLevel.VERY_HIGH


def assess_risk(graph: StrategyGraph) -> RiskAssessment:
    factors: list[RiskFactor] = []
    recommendations: list[RiskRecommendation] = []

    if len(graph.nodes_of_type(NodeType.INDICATOR)) > MAX_INDICATORS_BEFORE_OVERFIT:
        factors.append(
            RiskFactor(
                id="over-optimization",
                type=RiskFactorType.OVER_OPTIMIZATION,
                description="Strategy uses too many indicators, which may lead to over-optimization",
                severity=ImpactLevel.MEDIUM,
                likelihood=0.7,
                impact=0.6,
                mitigation="Reduce the number of indicators and focus on the most effective ones",
            )
        )
    if not graph.has_type(NodeType.RISK):
        factors.append(
            RiskFactor(
                id="insufficient-risk-management",
                type=RiskFactorType.POOR_RISK_REWARD,
                description="Strategy lacks proper risk management components",
                severity=ImpactLevel.HIGH,
                likelihood=0.9,
                impact=0.8,
                mitigation="Add stop-loss and take-profit nodes",
            )
        )
        recommendations.append(
            RiskRecommendation(
                id="add-risk-management",
                description="Add stop-loss and take-profit nodes to manage downside risk",
                priority=Priority.HIGH,
                implementation=(
                    "Create risk management nodes with appropriate stop-loss and take-profit levels"
                ),
                expected_impact=ImpactLevel.HIGH,
            )
        )
    if len(graph.nodes) > MAX_NODES_BEFORE_COMPLEX:
        factors.append(
            RiskFactor(
                id="excessive-complexity",
                type=RiskFactorType.OVER_OPTIMIZATION,
                description="Strategy is overly complex with too many components",
                severity=ImpactLevel.MEDIUM,
                likelihood=0.6,
                impact=0.5,
                mitigation="Simplify the strategy by removing non-essential components",
            )
        )

    # A single factor contributes at most 1.0.
    total_risk = sum(
        factor.likelihood * factor.impact * SEVERITY_WEIGHTS[factor.severity] for factor in factors
    )
    risk_score = round_half_up(total_risk / len(factors) * 100) if factors else 0
    return RiskAssessment(
        overall_risk=_risk_level(risk_score),
        risk_factors=tuple(factors),
        recommendations=tuple(recommendations),
        score=max(0, 100 - risk_score),
    )


def complexity_score(graph: StrategyGraph) -> int:
    parameter_count = sum(len(node.config) for node in graph.nodes)
    raw = len(graph.nodes) * 2 + len(graph.edges) * 1.5 + parameter_count * 0.5
    return min(100, round_half_up(raw))


def efficiency_score(graph: StrategyGraph) -> int:
    """Share of nodes that take part in an edge, less a penalty of five
    points per node whose type repeats an earlier one (capped at 50)."""

    if graph.nodes:
        utilization = len(graph.connected_node_ids()) / len(graph.nodes)
    else:
        utilization = 1.0
    redundancy = len(graph.nodes) - len(graph.node_types())
    penalty = min(MAX_REDUNDANCY_PENALTY, redundancy * REDUNDANCY_STEP)
    return max(0, round_half_up(utilization * 100 - penalty))


def identify_bottlenecks(graph: StrategyGraph) -> list[str]:
    bottlenecks: list[str] = []
    incoming = Counter(edge.target for edge in graph.edges)
    for node_id, count in incoming.items():
        if count > MAX_INPUTS_PER_NODE:
            node = graph.get_node(node_id)
            label = node.label if node is not None else node_id
            bottlenecks.append(f'Node "{label}" has too many inputs ({count})')
    if len(graph.nodes_of_type(NodeType.INDICATOR)) > MAX_INDICATORS_BEFORE_SLOW:
        bottlenecks.append("Too many indicators may slow down strategy execution")
    return bottlenecks


def optimization_opportunities(graph: StrategyGraph) -> list[str]:
    opportunities: list[str] = []
    unused = graph.orphaned_nodes()
    if unused:
        opportunities.append(f"Remove {len(unused)} unused nodes to improve performance")

    indicator_ids = [
        node.indicator_id for node in graph.nodes_of_type(NodeType.INDICATOR) if node.indicator_id
    ]
    if len(indicator_ids) > len(set(indicator_ids)):
        opportunities.append("Consolidate duplicate indicators to reduce complexity")

    if any(node.config for node in graph.nodes):
        opportunities.append("Run parameter optimization to improve strategy performance")
    return opportunities


def analyze_performance(graph: StrategyGraph) -> PerformanceAnalysis:
    return PerformanceAnalysis(
        complexity=complexity_score(graph),
        efficiency=efficiency_score(graph),
        bottlenecks=tuple(identify_bottlenecks(graph)),
        optimization_opportunities=tuple(optimization_opportunities(graph)),
    )


def overall_confidence(completeness: CompletenessAnalysis, compatibility: CompatibilityAnalysis) -> float:
    blended = (
        completeness.score / 100 * COMPLETENESS_WEIGHT
        + compatibility.overall_compatibility / 100 * COMPATIBILITY_WEIGHT
    )
    return round_half_up(blended * 100) / 100


def analyze_strategy(nodes: Sequence[Node], edges: Sequence[Edge]) -> StrategyAnalysis:
    graph = StrategyGraph.of(nodes, edges)
    completeness = analyze_completeness(graph)
    compatibility = analyze_compatibility(graph)
    analysis = StrategyAnalysis(
        completeness=completeness,
        gaps=tuple(identify_gaps(graph)),
        improvements=tuple(suggest_improvements(graph)),
        compatibility=compatibility,
        risk_assessment=assess_risk(graph),
        performance=analyze_performance(graph),
        confidence=overall_confidence(completeness, compatibility),
    )
    LOGGER.debug(
        "Analyzed %d nodes/%d edges: completeness %d, compatibility %d, %d gaps",
        len(graph.nodes),
        len(graph.edges),
        completeness.score,
        compatibility.overall_compatibility,
        len(analysis.gaps),
    )
    return analysis
