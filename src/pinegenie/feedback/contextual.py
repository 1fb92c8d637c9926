"""Next-step suggestions for the selected node or the strategy as a whole."""

from __future__ import annotations

import logging
from typing import Callable, Final, Mapping, Sequence

from pinegenie.builder.graph import StrategyGraph
from pinegenie.builder.types import Edge, Node, NodeType
from pinegenie.feedback.types import ContextualSuggestion, SuggestionCategory

LOGGER = logging.getLogger(__name__)

NEXT_NODE_OFFSET = 200
RISK_NODE_OFFSET = 100

Rule = Callable[[Node, StrategyGraph], list[ContextualSuggestion]]


def _data_source_rules(node: Node, graph: StrategyGraph) -> list[ContextualSuggestion]:
    suggestions: list[ContextualSuggestion] = []
    if not graph.outgoing(node.id):
        suggestions.append(
            ContextualSuggestion(
                id="connect-data-source",
                title="Connect Data Source",
                description="This data source needs to be connected to indicators or conditions",
                category=SuggestionCategory.NEXT_STEP,
                reasoning="Data sources must feed into other components to be useful",
                confidence=0.9,
                priority=10,
            )
        )
    if not graph.has_type(NodeType.INDICATOR):
        suggestions.append(
            ContextualSuggestion(
                id="add-first-indicator",
                title="Add Technical Indicator",
                description="Add an indicator like RSI or SMA to analyze the price data",
                category=SuggestionCategory.NEXT_STEP,
                reasoning="Technical indicators help identify trading opportunities",
                confidence=0.8,
                priority=8,
                suggested_nodes=(
                    Node(
                        id="suggested-rsi",
                        type=NodeType.INDICATOR,
                        label="RSI (14)",
                        config={"indicatorId": "rsi", "parameters": {"period": 14}},
                        position=node.position.offset(dx=NEXT_NODE_OFFSET),
                    ),
                ),
            )
        )
    return suggestions


def _indicator_rules(node: Node, graph: StrategyGraph) -> list[ContextualSuggestion]:
    suggestions: list[ContextualSuggestion] = []
    if not graph.outgoing(node.id):
        suggestions.append(
            ContextualSuggestion(
                id="add-condition-for-indicator",
                title="Add Entry Condition",
                description="Create a condition to use this indicator for trade signals",
                category=SuggestionCategory.NEXT_STEP,
                reasoning="Indicators need conditions to generate trading signals",
                confidence=0.85,
                priority=9,
                suggested_nodes=(
                    Node(
                        id="suggested-condition",
                        type=NodeType.CONDITION,
                        label="Entry Condition",
                        config={"operator": "greater_than", "threshold": 50},
                        position=node.position.offset(dx=NEXT_NODE_OFFSET),
                    ),
                ),
            )
        )
    # An empty parameters mapping still counts as tunable.
    if isinstance(node.config.get("parameters"), Mapping):
        suggestions.append(
            ContextualSuggestion(
                id="optimize-indicator-parameters",
                title="Optimize Parameters",
                description="Fine-tune this indicator's parameters for better performance",
                category=SuggestionCategory.OPTIMIZATION,
                reasoning="Default parameters may not be optimal for current market conditions",
                confidence=0.7,
                priority=5,
            )
        )
    return suggestions


def _condition_rules(node: Node, graph: StrategyGraph) -> list[ContextualSuggestion]:
    suggestions: list[ContextualSuggestion] = []
    if not graph.outgoing(node.id):
        suggestions.append(
            ContextualSuggestion(
                id="add-action-for-condition",
                title="Add Trading Action",
                description="Add a buy or sell action to execute when this condition is met",
                category=SuggestionCategory.NEXT_STEP,
                reasoning="Conditions need actions to execute trades",
                confidence=0.9,
                priority=10,
                suggested_nodes=(
                    Node(
                        id="suggested-buy-action",
                        type=NodeType.ACTION,
                        label="Buy Order",
                        config={"orderType": "market", "quantity": "25%"},
                        position=node.position.offset(dx=NEXT_NODE_OFFSET),
                    ),
                ),
            )
        )
    if len(graph.incoming(node.id)) == 1:
        suggestions.append(
            ContextualSuggestion(
                id="add-confirmation-condition",
                title="Add Confirmation Signal",
                description="Add another condition to confirm this signal and reduce false positives",
                category=SuggestionCategory.IMPROVEMENT,
                reasoning="Multiple confirmations improve signal reliability",
                confidence=0.6,
                priority=4,
            )
        )
    return suggestions


def _action_rules(node: Node, graph: StrategyGraph) -> list[ContextualSuggestion]:
    suggestions: list[ContextualSuggestion] = []
    if not graph.incoming(node.id):
        suggestions.append(
            ContextualSuggestion(
                id="connect-condition-to-action",
                title="Connect Entry Condition",
                description="This action needs a condition to trigger it",
                category=SuggestionCategory.NEXT_STEP,
                reasoning="Actions should be triggered by conditions or signals",
                confidence=0.9,
                priority=10,
            )
        )
    if not graph.has_type(NodeType.RISK) and node.config.get("orderType") != "stop":
        suggestions.append(
            ContextualSuggestion(
                id="add-risk-management",
                title="Add Risk Management",
                description="Add stop-loss and take-profit to protect this position",
                category=SuggestionCategory.RISK_MANAGEMENT,
                reasoning="Risk management is essential for protecting capital",
                confidence=0.8,
                priority=7,
                suggested_nodes=(
                    Node(
                        id="suggested-stop-loss",
                        type=NodeType.RISK,
                        label="Stop Loss",
                        config={"stopLoss": 2, "maxRisk": 1},
                        position=node.position.offset(dy=RISK_NODE_OFFSET),
                    ),
                ),
            )
        )
    return suggestions


def _risk_rules(node: Node, graph: StrategyGraph) -> list[ContextualSuggestion]:
    suggestions: list[ContextualSuggestion] = []
    if not graph.incoming(node.id):
        suggestions.append(
            ContextualSuggestion(
                id="connect-risk-to-action",
                title="Connect to Trading Action",
                description="Connect this risk management to a trading action",
                category=SuggestionCategory.NEXT_STEP,
                reasoning="Risk management should be connected to trading actions",
                confidence=0.8,
                priority=8,
            )
        )
    if node.config.get("stopLoss") or node.config.get("takeProfit"):
        suggestions.append(
            ContextualSuggestion(
                id="optimize-risk-parameters",
                title="Optimize Risk Parameters",
                description="Fine-tune stop-loss and take-profit levels for better risk/reward",
                category=SuggestionCategory.OPTIMIZATION,
                reasoning="Optimal risk parameters improve risk-adjusted returns",
                confidence=0.6,
                priority=5,
            )
        )
    return suggestions


def _no_rules(node: Node, graph: StrategyGraph) -> list[ContextualSuggestion]:
    return []


NODE_RULES: Final[Mapping[NodeType, Rule]] = {
    NodeType.DATA_SOURCE: _data_source_rules,
    NodeType.INDICATOR: _indicator_rules,
    NodeType.CONDITION: _condition_rules,
    NodeType.ACTION: _action_rules,
    NodeType.RISK: _risk_rules,
    NodeType.TIMING: _no_rules,
    NodeType.MATH: _no_rules,
    NodeType.LOGIC: _no_rules,
}


def pipeline_steps() -> tuple[tuple[NodeType, ContextualSuggestion], ...]:
    return (
        (
            NodeType.DATA_SOURCE,
            ContextualSuggestion(
                id="add-data-source",
                title="Start with Data Source",
                description="Add a market data source to begin building your strategy",
                category=SuggestionCategory.NEXT_STEP,
                reasoning="Every strategy needs market data as a foundation",
                confidence=1.0,
                priority=10,
            ),
        ),
        (
            NodeType.INDICATOR,
            ContextualSuggestion(
                id="add-indicator",
                title="Add Technical Indicator",
                description="Add an indicator to analyze the market data",
                category=SuggestionCategory.NEXT_STEP,
                reasoning="Indicators help identify trading opportunities",
                confidence=0.9,
                priority=9,
            ),
        ),
        (
            NodeType.CONDITION,
            ContextualSuggestion(
                id="add-condition",
                title="Add Entry Condition",
                description="Define when to enter trades with a condition node",
                category=SuggestionCategory.NEXT_STEP,
                reasoning="Conditions determine when trading signals are generated",
                confidence=0.9,
                priority=9,
            ),
        ),
        (
            NodeType.ACTION,
            ContextualSuggestion(
                id="add-action",
                title="Add Trading Action",
                description="Add buy/sell actions to execute your trading strategy",
                category=SuggestionCategory.NEXT_STEP,
                reasoning="Actions execute the actual trades",
                confidence=0.9,
                priority=9,
            ),
        ),
    )


def _general_suggestions(graph: StrategyGraph) -> list[ContextualSuggestion]:
    present = graph.node_types()
    for node_type, suggestion in pipeline_steps():
        if node_type not in present:
            return [suggestion]
    return []


def get_contextual_suggestions(
    selected_node: Node | None,
    nodes: Sequence[Node],
    edges: Sequence[Edge],
) -> list[ContextualSuggestion]:
    """Suggest what to do next, highest priority first.

    With a selected node, the rules for its type apply; otherwise the first
    missing stage of data-source, indicator, condition, action is proposed.
    Ties on priority are broken by confidence, then by rule order.
    """

    graph = StrategyGraph.of(nodes, edges)
    if selected_node is not None:
        suggestions = NODE_RULES[selected_node.type](selected_node, graph)
    else:
        suggestions = _general_suggestions(graph)
    suggestions.sort(key=lambda item: (-item.priority, -item.confidence))
    LOGGER.debug("Produced %d contextual suggestions", len(suggestions))
    return suggestions
