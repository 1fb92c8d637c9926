"""Rule-based improvement suggestions for a strategy graph."""

from __future__ import annotations

import logging
from typing import Callable, Final, Sequence

from pinegenie.builder.graph import StrategyGraph
from pinegenie.builder.types import Edge, Node, NodeType, Position
from pinegenie.feedback.checks import numeric_parameter
from pinegenie.feedback.config import DEFAULT_CONFIG, FeedbackConfig
from pinegenie.feedback.types import IMPACT_RANK, ImpactLevel
from pinegenie.improvements.types import (
    Difficulty,
    EffortLevel,
    ImplementationGuide,
    ImplementationStep,
    ImprovementCategory,
    ImprovementPriority,
    ImprovementSuggestion,
    NodeChange,
    NodeChangeAction,
    ParameterChange,
)

LOGGER = logging.getLogger(__name__)

Analyzer = Callable[[StrategyGraph, FeedbackConfig], list[ImprovementSuggestion]]

DEFAULT_PERIODS: Final[dict[str, int]] = {"rsi": 14, "sma": 20}
TREND_FILTER_INDICATORS: Final[frozenset[str]] = frozenset({"sma", "ema"})


def _risk_management(graph: StrategyGraph, config: FeedbackConfig) -> list[ImprovementSuggestion]:
    suggestions: list[ImprovementSuggestion] = []
    actions = graph.nodes_of_type(NodeType.ACTION)
    if not actions:
        return suggestions

    if not graph.has_type(NodeType.RISK):
        suggestions.append(
            ImprovementSuggestion(
                id="add-risk-management",
                title="Add Risk Management",
                description=(
                    "Your strategy lacks proper risk management components like stop-loss "
                    "and take-profit"
                ),
                category=ImprovementCategory.RISK_MANAGEMENT,
                priority=ImprovementPriority.CRITICAL,
                impact=ImpactLevel.HIGH,
                effort=EffortLevel.LOW,
                implementation=ImplementationGuide(
                    steps=(
                        ImplementationStep(
                            step_number=1,
                            action="Add Stop Loss Node",
                            description="Add a stop-loss node to limit potential losses",
                            node_changes=(
                                NodeChange(
                                    action=NodeChangeAction.ADD,
                                    node_type=NodeType.RISK.value,
                                    configuration={"type": "stop-loss", "stopLoss": 2, "maxRisk": 1},
                                    position=Position(x=500, y=200),
                                ),
                            ),
                        ),
                        ImplementationStep(
                            step_number=2,
                            action="Add Take Profit Node",
                            description="Add a take-profit node to secure gains",
                            node_changes=(
                                NodeChange(
                                    action=NodeChangeAction.ADD,
                                    node_type=NodeType.RISK.value,
                                    configuration={
                                        "type": "take-profit",
                                        "takeProfit": 4,
                                        "riskRewardRatio": 2,
                                    },
                                    position=Position(x=500, y=300),
                                ),
                            ),
                        ),
                        ImplementationStep(
                            step_number=3,
                            action="Connect Risk Nodes",
                            description="Connect risk management nodes to your trading actions",
                        ),
                    ),
                    estimated_time=5,
                    difficulty=Difficulty.EASY,
                    required_knowledge=("risk-management", "stop-loss", "take-profit"),
                ),
                expected_benefit=(
                    "Significantly reduced risk of large losses and better capital preservation"
                ),
                prerequisites=("At least one trading action node",),
                confidence=0.95,
            )
        )

    # A string quantity other than "100%" counts as explicit sizing.
    has_position_sizing = any(
        isinstance(node.config.get("quantity"), str) and node.config["quantity"] not in ("", "100%")
        for node in actions
    )
    if not has_position_sizing:
        suggestions.append(
            ImprovementSuggestion(
                id="improve-position-sizing",
                title="Implement Dynamic Position Sizing",
                description=(
                    "Using fixed position sizes may not be optimal for varying market conditions"
                ),
                category=ImprovementCategory.RISK_MANAGEMENT,
                priority=ImprovementPriority.HIGH,
                impact=ImpactLevel.MEDIUM,
                effort=EffortLevel.MEDIUM,
                implementation=ImplementationGuide(
                    steps=(
                        ImplementationStep(
                            step_number=1,
                            action="Modify Action Nodes",
                            description="Update trading actions to use percentage-based position sizing",
                            parameter_changes=tuple(
                                ParameterChange(
                                    node_id=node.id,
                                    parameter="quantity",
                                    old_value=node.config.get("quantity") or "100%",
                                    new_value="25%",
                                    reasoning="Reduce position size to manage risk better",
                                )
                                for node in actions
                            ),
                        ),
                        ImplementationStep(
                            step_number=2,
                            action="Add Position Sizing Logic",
                            description="Consider adding volatility-based position sizing",
                        ),
                    ),
                    estimated_time=10,
                    difficulty=Difficulty.MEDIUM,
                    required_knowledge=("position-sizing", "risk-management", "volatility"),
                ),
                expected_benefit="Better risk-adjusted returns and reduced portfolio volatility",
                risk_factors=("May reduce absolute returns in favorable conditions",),
                prerequisites=("Trading action nodes",),
                confidence=0.8,
            )
        )
    return suggestions


def _signal_quality(graph: StrategyGraph, config: FeedbackConfig) -> list[ImprovementSuggestion]:
    suggestions: list[ImprovementSuggestion] = []
    indicators = graph.nodes_of_type(NodeType.INDICATOR)

    if len(indicators) == 1 and graph.has_type(NodeType.CONDITION):
        anchor = indicators[0].position
        suggestions.append(
            ImprovementSuggestion(
                id="add-confirmation-indicator",
                title="Add Confirmation Indicator",
                description=(
                    "Single-indicator strategies often produce false signals. Adding a "
                    "confirmation indicator can improve signal quality"
                ),
                category=ImprovementCategory.SIGNAL_QUALITY,
                priority=ImprovementPriority.MEDIUM,
                impact=ImpactLevel.MEDIUM,
                effort=EffortLevel.LOW,
                implementation=ImplementationGuide(
                    steps=(
                        ImplementationStep(
                            step_number=1,
                            action="Choose Complementary Indicator",
                            description=(
                                "Select an indicator that complements your existing one "
                                "(e.g., RSI with moving average)"
                            ),
                            node_changes=(
                                NodeChange(
                                    action=NodeChangeAction.ADD,
                                    node_type=NodeType.INDICATOR.value,
                                    configuration={"indicatorId": "sma", "parameters": {"period": 20}},
                                    position=anchor.offset(dy=100),
                                ),
                            ),
                        ),
                        ImplementationStep(
                            step_number=2,
                            action="Add Confirmation Condition",
                            description="Create a condition that requires both indicators to agree",
                            node_changes=(
                                NodeChange(
                                    action=NodeChangeAction.ADD,
                                    node_type=NodeType.CONDITION.value,
                                    configuration={
                                        "operator": "and",
                                        "description": "Both indicators must confirm",
                                    },
                                ),
                            ),
                        ),
                    ),
                    estimated_time=8,
                    difficulty=Difficulty.EASY,
                    required_knowledge=("technical-indicators", "signal-confirmation"),
                ),
                expected_benefit="Reduced false signals and improved win rate",
                risk_factors=("May reduce number of trading opportunities",),
                prerequisites=("At least one indicator and one condition",),
                confidence=0.75,
            )
        )

    has_trend_filter = any(node.indicator_id in TREND_FILTER_INDICATORS for node in indicators)
    if indicators and not has_trend_filter:
        suggestions.append(
            ImprovementSuggestion(
                id="add-trend-filter",
                title="Add Trend Filter",
                description="Trading with the trend typically improves strategy performance",
                category=ImprovementCategory.SIGNAL_QUALITY,
                priority=ImprovementPriority.MEDIUM,
                impact=ImpactLevel.MEDIUM,
                effort=EffortLevel.LOW,
                implementation=ImplementationGuide(
                    steps=(
                        ImplementationStep(
                            step_number=1,
                            action="Add Moving Average",
                            description="Add a longer-period moving average to identify trend direction",
                            node_changes=(
                                NodeChange(
                                    action=NodeChangeAction.ADD,
                                    node_type=NodeType.INDICATOR.value,
                                    configuration={"indicatorId": "sma", "parameters": {"period": 50}},
                                ),
                            ),
                        ),
                        ImplementationStep(
                            step_number=2,
                            action="Add Trend Condition",
                            description="Only take trades in the direction of the trend",
                        ),
                    ),
                    estimated_time=6,
                    difficulty=Difficulty.EASY,
                    required_knowledge=("trend-analysis", "moving-averages"),
                ),
                expected_benefit="Higher win rate by trading with the trend",
                risk_factors=("May miss counter-trend opportunities",),
                prerequisites=("Existing indicators",),
                confidence=0.7,
            )
        )
    return suggestions


def _structure(graph: StrategyGraph, config: FeedbackConfig) -> list[ImprovementSuggestion]:
    suggestions: list[ImprovementSuggestion] = []
    orphans = graph.orphaned_nodes()

    if orphans:
        suggestions.append(
            ImprovementSuggestion(
                id="remove-orphaned-nodes",
                title="Remove Disconnected Nodes",
                description=f"{len(orphans)} nodes are not connected to your strategy flow",
                category=ImprovementCategory.STRUCTURE,
                priority=ImprovementPriority.LOW,
                impact=ImpactLevel.LOW,
                effort=EffortLevel.LOW,
                implementation=ImplementationGuide(
                    steps=(
                        ImplementationStep(
                            step_number=1,
                            action="Review Disconnected Nodes",
                            description="Check if disconnected nodes serve a purpose",
                        ),
                        ImplementationStep(
                            step_number=2,
                            action="Remove or Connect",
                            description="Either connect the nodes to your strategy or remove them",
                            node_changes=tuple(
                                NodeChange(
                                    action=NodeChangeAction.REMOVE,
                                    node_type=node.type.value,
                                    node_id=node.id,
                                )
                                for node in orphans
                            ),
                        ),
                    ),
                    estimated_time=3,
                    difficulty=Difficulty.EASY,
                    required_knowledge=("strategy-flow",),
                ),
                expected_benefit="Cleaner strategy structure and reduced complexity",
                confidence=0.9,
            )
        )

    if len(graph.nodes) > config.complexity_threshold:
        suggestions.append(
            ImprovementSuggestion(
                id="simplify-strategy",
                title="Simplify Strategy Structure",
                description="Your strategy has many components which may lead to over-optimization",
                category=ImprovementCategory.STRUCTURE,
                priority=ImprovementPriority.MEDIUM,
                impact=ImpactLevel.MEDIUM,
                effort=EffortLevel.HIGH,
                implementation=ImplementationGuide(
                    steps=(
                        ImplementationStep(
                            step_number=1,
                            action="Identify Core Components",
                            description="Determine which components are essential for your strategy",
                        ),
                        ImplementationStep(
                            step_number=2,
                            action="Remove Redundant Elements",
                            description="Remove indicators or conditions that provide similar information",
                        ),
                        ImplementationStep(
                            step_number=3,
                            action="Test Simplified Version",
                            description=(
                                "Backtest the simplified strategy to ensure performance is maintained"
                            ),
                        ),
                    ),
                    estimated_time=30,
                    difficulty=Difficulty.HARD,
                    required_knowledge=("strategy-design", "backtesting", "over-optimization"),
                ),
                expected_benefit="More robust strategy with better out-of-sample performance",
                risk_factors=("May reduce in-sample performance",),
                prerequisites=("Backtesting capability",),
                confidence=0.6,
            )
        )
    return suggestions


def uses_default_period(node: Node) -> bool:
    default = DEFAULT_PERIODS.get(node.indicator_id or "")
    return default is not None and numeric_parameter(node, "period") == default


def find_extreme_parameters(nodes: Sequence[Node], config: FeedbackConfig) -> list[tuple[str, str, float]]:
    """Return ``(node_id, parameter, value)`` for periods outside their robust range."""

    bounds = {
        "rsi": (config.rsi_period_min, config.rsi_period_max),
        "sma": (config.sma_period_min, config.sma_period_max),
    }
    extreme: list[tuple[str, str, float]] = []
    for node in nodes:
        limits = bounds.get(node.indicator_id or "")
        period = numeric_parameter(node, "period")
        if limits is None or period is None:
            continue
        if period < limits[0] or period > limits[1]:
            extreme.append((node.id, "period", period))
    return extreme


def _parameters(graph: StrategyGraph, config: FeedbackConfig) -> list[ImprovementSuggestion]:
    suggestions: list[ImprovementSuggestion] = []
    parametric = [node for node in graph.nodes if node.parameters]
    if not parametric:
        return suggestions

    if any(uses_default_period(node) for node in parametric):
        suggestions.append(
            ImprovementSuggestion(
                id="optimize-parameters",
                title="Optimize Indicator Parameters",
                description=(
                    "Your strategy uses default parameters which may not be optimal for current "
                    "market conditions"
                ),
                category=ImprovementCategory.PARAMETERS,
                priority=ImprovementPriority.MEDIUM,
                impact=ImpactLevel.MEDIUM,
                effort=EffortLevel.MEDIUM,
                implementation=ImplementationGuide(
                    steps=(
                        ImplementationStep(
                            step_number=1,
                            action="Run Parameter Optimization",
                            description="Use the built-in parameter optimizer to find better values",
                        ),
                        ImplementationStep(
                            step_number=2,
                            action="Test Parameter Ranges",
                            description="Test different parameter values to find optimal settings",
                        ),
                        ImplementationStep(
                            step_number=3,
                            action="Validate Results",
                            description="Ensure optimized parameters work on out-of-sample data",
                        ),
                    ),
                    estimated_time=20,
                    difficulty=Difficulty.MEDIUM,
                    required_knowledge=("parameter-optimization", "backtesting"),
                ),
                expected_benefit="Improved strategy performance through better parameter selection",
                risk_factors=("Risk of over-optimization to historical data",),
                prerequisites=("Historical data for backtesting",),
                confidence=0.7,
            )
        )

    if find_extreme_parameters(parametric, config):
        suggestions.append(
            ImprovementSuggestion(
                id="review-extreme-parameters",
                title="Review Extreme Parameter Values",
                description="Some parameters have extreme values that may not be robust",
                category=ImprovementCategory.PARAMETERS,
                priority=ImprovementPriority.LOW,
                impact=ImpactLevel.LOW,
                effort=EffortLevel.LOW,
                implementation=ImplementationGuide(
                    steps=(
                        ImplementationStep(
                            step_number=1,
                            action="Review Parameter Values",
                            description="Check if extreme parameter values are justified",
                        ),
                        ImplementationStep(
                            step_number=2,
                            action="Test Alternative Values",
                            description="Try more moderate parameter values",
                        ),
                    ),
                    estimated_time=10,
                    difficulty=Difficulty.EASY,
                    required_knowledge=("parameter-selection",),
                ),
                expected_benefit="More robust strategy performance",
                confidence=0.6,
            )
        )
    return suggestions


def _performance(graph: StrategyGraph, config: FeedbackConfig) -> list[ImprovementSuggestion]:
    suggestions: list[ImprovementSuggestion] = []

    if not graph.has_type(NodeType.TIMING):
        suggestions.append(
            ImprovementSuggestion(
                id="add-time-filter",
                title="Add Trading Time Filter",
                description=(
                    "Restricting trading to specific hours can improve performance and reduce "
                    "slippage"
                ),
                category=ImprovementCategory.PERFORMANCE,
                priority=ImprovementPriority.LOW,
                impact=ImpactLevel.LOW,
                effort=EffortLevel.LOW,
                implementation=ImplementationGuide(
                    steps=(
                        ImplementationStep(
                            step_number=1,
                            action="Add Time Filter Node",
                            description="Add a timing node to restrict trading hours",
                            node_changes=(
                                NodeChange(
                                    action=NodeChangeAction.ADD,
                                    node_type=NodeType.TIMING.value,
                                    configuration={
                                        "startTime": "09:00",
                                        "endTime": "16:00",
                                        "timezone": "UTC",
                                    },
                                ),
                            ),
                        ),
                        ImplementationStep(
                            step_number=2,
                            action="Connect to Conditions",
                            description="Connect the time filter to your entry conditions",
                        ),
                    ),
                    estimated_time=5,
                    difficulty=Difficulty.EASY,
                    required_knowledge=("market-hours", "time-filters"),
                ),
                expected_benefit="Reduced slippage and improved execution quality",
                risk_factors=("May reduce number of trading opportunities",),
                prerequisites=("Entry conditions",),
                confidence=0.6,
            )
        )

    if not any("volume" in node.parameters for node in graph.nodes):
        suggestions.append(
            ImprovementSuggestion(
                id="add-volume-analysis",
                title="Consider Volume Analysis",
                description="Volume can provide additional confirmation for your trading signals",
                category=ImprovementCategory.PERFORMANCE,
                priority=ImprovementPriority.LOW,
                impact=ImpactLevel.LOW,
                effort=EffortLevel.MEDIUM,
                implementation=ImplementationGuide(
                    steps=(
                        ImplementationStep(
                            step_number=1,
                            action="Add Volume Indicator",
                            description="Add a volume-based indicator or condition",
                        ),
                        ImplementationStep(
                            step_number=2,
                            action="Create Volume Confirmation",
                            description="Use volume to confirm your existing signals",
                        ),
                    ),
                    estimated_time=15,
                    difficulty=Difficulty.MEDIUM,
                    required_knowledge=("volume-analysis", "market-structure"),
                ),
                expected_benefit="Better signal quality through volume confirmation",
                risk_factors=("Increased strategy complexity",),
                prerequisites=("Understanding of volume analysis",),
                confidence=0.5,
            )
        )
    return suggestions


def critical_nodes(graph: StrategyGraph, config: FeedbackConfig) -> list[Node]:
    counts = graph.connection_counts()
    return [node for node in graph.nodes if counts[node.id] > config.critical_connection_count]


def _robustness(graph: StrategyGraph, config: FeedbackConfig) -> list[ImprovementSuggestion]:
    suggestions: list[ImprovementSuggestion] = []

    if critical_nodes(graph, config):
        suggestions.append(
            ImprovementSuggestion(
                id="reduce-single-points-of-failure",
                title="Reduce Single Points of Failure",
                description="Your strategy relies heavily on a few critical components",
                category=ImprovementCategory.ROBUSTNESS,
                priority=ImprovementPriority.MEDIUM,
                impact=ImpactLevel.MEDIUM,
                effort=EffortLevel.HIGH,
                implementation=ImplementationGuide(
                    steps=(
                        ImplementationStep(
                            step_number=1,
                            action="Identify Critical Dependencies",
                            description="Review which components are essential for strategy function",
                        ),
                        ImplementationStep(
                            step_number=2,
                            action="Add Redundancy",
                            description="Create alternative paths or backup signals",
                        ),
                        ImplementationStep(
                            step_number=3,
                            action="Test Failure Scenarios",
                            description="Test how strategy performs when critical components fail",
                        ),
                    ),
                    estimated_time=45,
                    difficulty=Difficulty.HARD,
                    required_knowledge=("system-design", "robustness", "failure-analysis"),
                ),
                expected_benefit=(
                    "More resilient strategy that performs better in various market conditions"
                ),
                risk_factors=("Increased complexity",),
                prerequisites=("Advanced strategy design knowledge",),
                confidence=0.6,
            )
        )

    has_regime_detection = any(
        node.config.get("operator") == "regime_change"
        for node in graph.nodes_of_type(NodeType.CONDITION)
    )
    if not has_regime_detection and len(graph.nodes) > config.regime_detection_min_nodes:
        suggestions.append(
            ImprovementSuggestion(
                id="add-regime-detection",
                title="Add Market Regime Detection",
                description="Adapting to different market conditions can improve robustness",
                category=ImprovementCategory.ROBUSTNESS,
                priority=ImprovementPriority.LOW,
                impact=ImpactLevel.MEDIUM,
                effort=EffortLevel.HIGH,
                implementation=ImplementationGuide(
                    steps=(
                        ImplementationStep(
                            step_number=1,
                            action="Implement Regime Detection",
                            description="Add logic to detect trending vs ranging markets",
                        ),
                        ImplementationStep(
                            step_number=2,
                            action="Adapt Strategy Parameters",
                            description="Adjust strategy behavior based on market regime",
                        ),
                    ),
                    estimated_time=60,
                    difficulty=Difficulty.HARD,
                    required_knowledge=(
                        "market-regimes",
                        "adaptive-strategies",
                        "advanced-indicators",
                    ),
                ),
                expected_benefit="Better performance across different market conditions",
                risk_factors=("Significantly increased complexity", "Risk of over-optimization"),
                prerequisites=("Advanced trading knowledge",),
                confidence=0.4,
            )
        )
    return suggestions


ANALYZERS: Final[tuple[Analyzer, ...]] = (
    _risk_management,
    _signal_quality,
    _structure,
    _parameters,
    _performance,
    _robustness,
)


def generate_improvements(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    config: FeedbackConfig | None = None,
) -> list[ImprovementSuggestion]:
    """Run every analyzer and order the results.

    Ordering is by priority rank, then impact rank (critical=4 ... low=1),
    both descending; equal ranks keep analyzer order.
    """

    config = config or DEFAULT_CONFIG
    graph = StrategyGraph.of(nodes, edges)
    suggestions: list[ImprovementSuggestion] = []
    for analyzer in ANALYZERS:
        suggestions.extend(analyzer(graph, config))
    suggestions.sort(
        key=lambda item: (-IMPACT_RANK[item.priority.value], -IMPACT_RANK[item.impact.value])
    )
    LOGGER.debug("Generated %d improvement suggestions", len(suggestions))
    return suggestions
