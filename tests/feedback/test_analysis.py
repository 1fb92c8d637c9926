from __future__ import annotations

import pytest

from pinegenie.builder.graph import StrategyGraph
from pinegenie.builder.types import NodeType
from pinegenie.feedback.analysis import RiskLevel, analyze_strategy, efficiency_score, round_half_up
from tests.fixtures.graph_factory import make_complete_strategy, make_edge, make_node


def _ids(items) -> list[str]:
    return [item.id for item in items]


def test_round_half_up_matches_score_rounding() -> None:
    assert round_half_up(20.5) == 21
    assert round_half_up(16.5) == 17
    assert round_half_up(16.49) == 16
    assert round_half_up(0.0) == 0


def test_complete_strategy_analysis() -> None:
    nodes, edges = make_complete_strategy()

    analysis = analyze_strategy(nodes, edges)

    assert analysis.completeness.score == 100
    assert analysis.completeness.missing_components == ()
    assert analysis.completeness.warnings == ()
    assert [(item.source, item.target) for item in analysis.completeness.required_connections] == [
        ("data", "rsi"),
        ("entry", "buy"),
    ]
    assert analysis.gaps == ()
    assert _ids(analysis.improvements) == [
        "add-confirmation-indicator",
        "optimize-parameters",
        "add-time-filter",
    ]
    assert analysis.compatibility.overall_compatibility == 100
    assert analysis.compatibility.parameter_conflicts == ()
    assert analysis.risk_assessment.overall_risk is RiskLevel.VERY_LOW
    assert analysis.risk_assessment.score == 100
    assert analysis.performance.complexity == 21
    assert analysis.performance.efficiency == 100
    assert analysis.performance.bottlenecks == ()
    assert analysis.performance.optimization_opportunities == (
        "Run parameter optimization to improve strategy performance",
    )
    assert analysis.confidence == pytest.approx(1.0)


def test_missing_risk_is_a_gap_and_a_risk_factor() -> None:
    nodes, edges = make_complete_strategy(with_risk=False)

    analysis = analyze_strategy(nodes, edges)

    assert analysis.completeness.score == 100
    assert analysis.completeness.warnings == ("Missing recommended component: risk",)
    assert _ids(analysis.gaps) == ["missing-risk-management"]
    suggested = analysis.gaps[0].suggested_nodes[0]
    assert suggested.type is NodeType.RISK
    assert suggested.config == {"stopLoss": 2, "maxRisk": 1}

    risk = analysis.risk_assessment
    assert _ids(risk.risk_factors) == ["insufficient-risk-management"]
    assert _ids(risk.recommendations) == ["add-risk-management"]
    assert risk.overall_risk is RiskLevel.MEDIUM
    assert risk.score == 46
    assert analysis.performance.complexity == 17


def test_empty_strategy_analysis() -> None:
    analysis = analyze_strategy([], [])

    assert analysis.completeness.score == 0
    assert analysis.completeness.missing_components == (
        NodeType.DATA_SOURCE,
        NodeType.CONDITION,
        NodeType.ACTION,
    )
    assert analysis.completeness.warnings == (
        "Missing recommended component: risk",
        "Missing recommended component: indicator",
    )
    assert _ids(analysis.gaps) == [
        "missing-data-source",
        "missing-entry-condition",
        "missing-actions",
        "missing-risk-management",
    ]
    assert _ids(analysis.improvements) == [
        "add-confirmation-indicator",
        "add-time-filter",
        "improve-position-sizing",
    ]
    assert analysis.compatibility.overall_compatibility == 100
    assert analysis.performance.complexity == 0
    assert analysis.performance.efficiency == 100
    assert analysis.performance.optimization_opportunities == ()
    assert analysis.confidence == pytest.approx(0.4)


def test_missing_required_connections_lower_scores() -> None:
    nodes, _ = make_complete_strategy(with_risk=False)
    edges = [make_edge("rsi", "entry", "e2")]

    analysis = analyze_strategy(nodes, edges)

    assert analysis.completeness.critical_issues == (
        "Missing required connection: data → rsi",
        "Missing required connection: entry → buy",
    )
    assert analysis.completeness.score == 60
    assert _ids(analysis.gaps) == [
        "missing-risk-management",
        "orphaned-node-data",
        "orphaned-node-buy",
    ]
    assert analysis.gaps[1].description == 'Node "Market Data" is not connected to the strategy flow'

    per_node = {item.node_id: item for item in analysis.compatibility.node_compatibility}
    assert per_node["data"].issues == ("Data source not connected to any consumers",)
    assert per_node["buy"].issues == ("Action node not connected to any triggers",)
    assert per_node["rsi"].compatible and per_node["entry"].compatible
    assert analysis.compatibility.overall_compatibility == 60
    assert analysis.confidence == pytest.approx(0.6)

    assert analysis.performance.efficiency == 50
    assert analysis.performance.optimization_opportunities[0] == (
        "Remove 2 unused nodes to improve performance"
    )


def test_connection_validation_reports_flow_and_dangling_edges() -> None:
    nodes = [
        make_node("buy", NodeType.ACTION),
        make_node("ind", NodeType.INDICATOR, config={"indicatorId": "ema", "parameters": {"period": 9}}),
    ]
    edges = [make_edge("buy", "ind", "bad-flow"), make_edge("ind", "ghost", "dangling")]

    validations = analyze_strategy(nodes, edges).compatibility.connection_validation

    assert validations[0].edge_id == "bad-flow"
    assert validations[0].valid is False
    assert validations[0].data_flow_correct is False
    assert validations[0].issues == ("Invalid data flow: action → indicator",)
    assert validations[1].issues == ("Connection references non-existent nodes",)
    assert validations[1].data_flow_correct is False


def test_indicator_without_parameters_is_incompatible() -> None:
    indicator = make_node("ind", NodeType.INDICATOR, config={"indicatorId": "rsi"})

    compatibility = analyze_strategy([indicator], []).compatibility

    assert compatibility.node_compatibility[0].issues == ("Indicator missing required parameters",)
    assert compatibility.overall_compatibility == 0


def test_parameter_conflicts_use_indicator_bounds() -> None:
    nodes = [
        make_node("r1", NodeType.INDICATOR, config={"indicatorId": "rsi", "parameters": {"period": 150}}),
        make_node("r2", NodeType.INDICATOR, config={"indicatorId": "rsi", "parameters": {"period": "14"}}),
        make_node("s1", NodeType.INDICATOR, config={"indicatorId": "sma", "parameters": {"period": 0}}),
        make_node("e1", NodeType.INDICATOR, config={"indicatorId": "ema", "parameters": {"period": 500}}),
    ]

    analysis = analyze_strategy(nodes, [])

    conflicts = analysis.compatibility.parameter_conflicts
    assert [(item.node_id, item.issue, item.suggested_value) for item in conflicts] == [
        ("r1", "RSI period should be between 1 and 100", 14),
        ("s1", "SMA period should be between 1 and 200", 20),
    ]
    assert "Consolidate duplicate indicators to reduce complexity" in (
        analysis.performance.optimization_opportunities
    )


def test_many_components_raise_combined_risk() -> None:
    nodes = [make_node(f"i{index}", NodeType.INDICATOR) for index in range(6)]
    nodes += [make_node(f"m{index}", NodeType.MATH) for index in range(10)]

    risk = analyze_strategy(nodes, []).risk_assessment

    assert _ids(risk.risk_factors) == [
        "over-optimization",
        "insufficient-risk-management",
        "excessive-complexity",
    ]
    assert risk.overall_risk is RiskLevel.LOW
    assert risk.score == 70


def test_bottlenecks_flag_crowded_inputs_and_indicator_count() -> None:
    nodes = [make_node(f"i{index}", NodeType.INDICATOR) for index in range(9)]
    nodes.append(make_node("gate", NodeType.CONDITION, label="Gate"))
    edges = [make_edge(f"i{index}", "gate") for index in range(6)]

    bottlenecks = analyze_strategy(nodes, edges).performance.bottlenecks

    assert bottlenecks == (
        'Node "Gate" has too many inputs (6)',
        "Too many indicators may slow down strategy execution",
    )


def test_repeated_node_types_reduce_efficiency() -> None:
    nodes = [make_node(f"m{index}", NodeType.MATH) for index in range(3)]
    edges = [make_edge("m0", "m1"), make_edge("m1", "m2")]
    assert efficiency_score(StrategyGraph.of(nodes, edges)) == 90


def test_all_in_quantity_is_not_position_sizing() -> None:
    nodes, edges = make_complete_strategy()
    nodes[3] = make_node("buy", NodeType.ACTION, "Buy", {"orderType": "market", "quantity": "100%"}, x=600)

    improvements = analyze_strategy(nodes, edges).improvements

    assert "improve-position-sizing" in _ids(improvements)


def test_analysis_is_idempotent_and_isolated() -> None:
    first = analyze_strategy([], [])
    first.gaps[0].suggested_nodes[0].config["symbol"] = "EDITED"

    second = analyze_strategy([], [])

    assert second.gaps[0].suggested_nodes[0].config["symbol"] == "BTCUSDT"
    nodes, edges = make_complete_strategy(with_risk=False)
    assert analyze_strategy(nodes, edges) == analyze_strategy(nodes, edges)
