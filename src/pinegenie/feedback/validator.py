"""Structural validation of a strategy graph."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from pinegenie.builder.graph import StrategyGraph, is_valid_connection
from pinegenie.builder.types import Edge, Node, NodeType
from pinegenie.feedback.checks import check_warnings, generate_suggestions
from pinegenie.feedback.config import DEFAULT_CONFIG, FeedbackConfig
from pinegenie.feedback.scoring import completeness_score, confidence_score
from pinegenie.feedback.types import (
    ErrorType,
    FixAction,
    FixActionType,
    Severity,
    ValidationError,
    ValidationFeedback,
)

LOGGER = logging.getLogger(__name__)


def _add_node_error(
    error_id: str,
    error_type: ErrorType,
    message: str,
    description: str,
    fix_description: str,
    node_type: NodeType,
    label: str,
    config: dict[str, Any],
) -> ValidationError:
    return ValidationError(
        id=error_id,
        type=error_type,
        severity=Severity.CRITICAL,
        message=message,
        description=description,
        auto_fixable=True,
        fix_action=FixAction(
            type=FixActionType.ADD_NODE,
            description=fix_description,
            parameters={"type": node_type.value, "label": label, "config": config},
        ),
    )


def missing_component_errors(present: frozenset[NodeType]) -> list[ValidationError]:
    """Build fresh errors for absent required node types, in fixed order."""

    errors: list[ValidationError] = []
    if NodeType.DATA_SOURCE not in present:
        errors.append(
            _add_node_error(
                "missing-data-source",
                ErrorType.MISSING_DATA_SOURCE,
                "Strategy requires a data source",
                "Every strategy needs at least one data source to provide market data",
                "Add a Market Data node",
                NodeType.DATA_SOURCE,
                "Market Data",
                {"symbol": "BTCUSDT", "timeframe": "1h"},
            )
        )
    if NodeType.CONDITION not in present:
        errors.append(
            _add_node_error(
                "missing-entry-condition",
                ErrorType.MISSING_ENTRY_CONDITION,
                "Strategy requires entry conditions",
                "Define when to enter trades using condition nodes",
                "Add an entry condition",
                NodeType.CONDITION,
                "Entry Condition",
                {"operator": "greater_than", "threshold": 0},
            )
        )
    if NodeType.ACTION not in present:
        errors.append(
            _add_node_error(
                "missing-exit-action",
                ErrorType.MISSING_EXIT_ACTION,
                "Strategy requires action nodes",
                "Add buy/sell actions to execute trades",
                "Add a buy action",
                NodeType.ACTION,
                "Buy Order",
                {"orderType": "market", "quantity": "25%"},
            )
        )
    return errors


def check_critical_errors(graph: StrategyGraph) -> list[ValidationError]:
    """Evaluate error rules in their fixed order.

    Missing components come first, then one error per detected cycle, then
    per-edge connection checks in edge order.
    """

    errors = missing_component_errors(graph.node_types())

    for cycle in graph.find_cycles():
        errors.append(
            ValidationError(
                id=f"circular-dependency-{'-'.join(cycle)}",
                type=ErrorType.CIRCULAR_DEPENDENCY,
                severity=Severity.HIGH,
                message="Circular dependency detected",
                description=f"Nodes {' → '.join(cycle)} form a circular dependency",
                auto_fixable=False,
            )
        )

    nodes_by_id: Mapping[str, Node] = {node.id: node for node in graph.nodes}
    for edge in graph.edges:
        error = _connection_error(edge, nodes_by_id)
        if error is not None:
            errors.append(error)

    return errors


def _connection_error(edge: Edge, nodes_by_id: Mapping[str, Node]) -> ValidationError | None:
    source = nodes_by_id.get(edge.source)
    target = nodes_by_id.get(edge.target)
    if source is None or target is None:
        return ValidationError(
            id=f"invalid-connection-{edge.id}",
            type=ErrorType.INVALID_CONNECTION,
            severity=Severity.HIGH,
            message="Invalid connection",
            description="Connection references non-existent nodes",
            auto_fixable=True,
            edge_id=edge.id,
            fix_action=FixAction(
                type=FixActionType.REMOVE_EDGE,
                description="Remove invalid connection",
                parameters={"edgeId": edge.id},
            ),
        )
    if not is_valid_connection(source.type, target.type):
        return ValidationError(
            id=f"invalid-flow-{edge.id}",
            type=ErrorType.INVALID_CONNECTION,
            severity=Severity.MEDIUM,
            message="Invalid data flow",
            description=f"{source.type.value} cannot connect to {target.type.value}",
            auto_fixable=False,
            edge_id=edge.id,
        )
    return None


def validate_strategy(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    config: FeedbackConfig | None = None,
) -> ValidationFeedback:
    config = config or DEFAULT_CONFIG
    graph = StrategyGraph.of(nodes, edges)

    errors = check_critical_errors(graph)
    warnings = check_warnings(graph, config)
    suggestions = generate_suggestions(graph)
    completeness = completeness_score(graph)
    confidence = confidence_score(errors, warnings, completeness)

    LOGGER.debug(
        "Validated %d nodes/%d edges: %d errors, %d warnings, %d suggestions",
        len(graph.nodes),
        len(graph.edges),
        len(errors),
        len(warnings),
        len(suggestions),
    )
    return ValidationFeedback(
        is_valid=not errors,
        errors=tuple(errors),
        warnings=tuple(warnings),
        suggestions=tuple(suggestions),
        completeness=completeness,
        confidence=confidence,
    )
