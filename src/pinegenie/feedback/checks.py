"""Warning and suggestion rules evaluated during validation."""

from __future__ import annotations

from pinegenie.builder.graph import StrategyGraph
from pinegenie.builder.types import Node, NodeType
from pinegenie.feedback.config import FeedbackConfig
from pinegenie.feedback.types import (
    ImpactLevel,
    Priority,
    SuggestionType,
    ValidationSuggestion,
    ValidationWarning,
    WarningType,
)


def numeric_parameter(node: Node, name: str) -> float | None:
    value = node.parameters.get(name)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def check_warnings(graph: StrategyGraph, config: FeedbackConfig) -> list[ValidationWarning]:
    warnings: list[ValidationWarning] = []

    if not graph.has_type(NodeType.RISK) and graph.has_type(NodeType.ACTION):
        warnings.append(
            ValidationWarning(
                id="missing-risk-management",
                type=WarningType.MISSING_RISK_MANAGEMENT,
                message="No risk management detected",
                description="Strategy lacks stop-loss or take-profit components",
                recommendation="Add risk management nodes to protect against losses",
                impact=ImpactLevel.HIGH,
            )
        )

    node_count = len(graph.nodes)
    if node_count > config.complexity_threshold:
        warnings.append(
            ValidationWarning(
                id="high-complexity",
                type=WarningType.HIGH_COMPLEXITY,
                message="Strategy is highly complex",
                description=(
                    f"Strategy has {node_count} nodes "
                    f"(recommended: <{config.complexity_threshold})"
                ),
                recommendation="Consider simplifying by removing non-essential components",
                impact=ImpactLevel.MEDIUM,
            )
        )

    indicator_count = len(graph.nodes_of_type(NodeType.INDICATOR))
    if indicator_count > config.max_indicators:
        warnings.append(
            ValidationWarning(
                id="potential-overfitting",
                type=WarningType.POTENTIAL_OVERFITTING,
                message="Too many indicators may cause overfitting",
                description=(
                    f"Strategy uses {indicator_count} indicators "
                    f"(recommended: <{config.max_indicators})"
                ),
                recommendation="Focus on the most effective indicators and remove redundant ones",
                impact=ImpactLevel.MEDIUM,
            )
        )

    for node in graph.nodes:
        warnings.extend(parameter_warnings(node, config))

    for orphan in graph.orphaned_nodes():
        warnings.append(
            ValidationWarning(
                id=f"orphaned-{orphan.id}",
                type=WarningType.POOR_SIGNAL_QUALITY,
                message="Disconnected node detected",
                description=f'Node "{orphan.label}" is not connected to the strategy',
                recommendation="Connect this node or remove it if not needed",
                impact=ImpactLevel.LOW,
                node_id=orphan.id,
            )
        )

    return warnings


def parameter_warnings(node: Node, config: FeedbackConfig) -> list[ValidationWarning]:
    period = numeric_parameter(node, "period")
    if period is None:
        return []

    if node.indicator_id == "rsi" and not (config.rsi_period_min <= period <= config.rsi_period_max):
        return [
            ValidationWarning(
                id=f"rsi-period-{node.id}",
                type=WarningType.PARAMETER_OUT_OF_RANGE,
                message="RSI period may be suboptimal",
                description=(
                    f"RSI period of {format_number(period)} is outside typical range "
                    f"({format_number(config.rsi_period_min)}-{format_number(config.rsi_period_max)})"
                ),
                recommendation="Consider using RSI period between 10-20 for most strategies",
                impact=ImpactLevel.LOW,
                node_id=node.id,
            )
        ]

    if node.indicator_id == "sma" and period > config.sma_period_max:
        return [
            ValidationWarning(
                id=f"sma-period-{node.id}",
                type=WarningType.PARAMETER_OUT_OF_RANGE,
                message="SMA period is very high",
                description=(
                    f"SMA period of {format_number(period)} may be too slow for most strategies"
                ),
                recommendation="Consider using SMA period between 10-50 for active trading",
                impact=ImpactLevel.LOW,
                node_id=node.id,
            )
        ]

    return []


def has_parameters(node: Node) -> bool:
    return bool(node.parameters)


def generate_suggestions(graph: StrategyGraph) -> list[ValidationSuggestion]:
    suggestions: list[ValidationSuggestion] = []

    if len(graph.nodes_of_type(NodeType.INDICATOR)) == 1:
        suggestions.append(
            ValidationSuggestion(
                id="add-confirmation-indicator",
                type=SuggestionType.ADD_COMPONENT,
                message="Consider adding a confirmation indicator",
                description="A second indicator can help filter false signals",
                benefit="Improved signal quality and reduced false positives",
                implementation="Add an RSI or MACD indicator to confirm entry signals",
                priority=Priority.MEDIUM,
            )
        )

    if any(has_parameters(node) for node in graph.nodes):
        suggestions.append(
            ValidationSuggestion(
                id="optimize-parameters",
                type=SuggestionType.OPTIMIZE_PARAMETER,
                message="Parameters may benefit from optimization",
                description="Current parameters might not be optimal for market conditions",
                benefit="Potentially improved strategy performance",
                implementation="Use the parameter optimization tool to find better values",
                priority=Priority.HIGH,
            )
        )

    if not graph.has_type(NodeType.TIMING):
        suggestions.append(
            ValidationSuggestion(
                id="add-time-filter",
                type=SuggestionType.ADD_COMPONENT,
                message="Consider adding time-based filters",
                description="Trading during specific hours can improve performance",
                benefit="Reduced slippage and better execution quality",
                implementation="Add a time filter to restrict trading to high-volume hours",
                priority=Priority.LOW,
            )
        )

    return suggestions
