from __future__ import annotations

import pytest

from pinegenie.builder.types import NodeType
from pinegenie.feedback.config import FeedbackConfig
from pinegenie.feedback.types import IMPACT_RANK
from pinegenie.improvements.suggester import find_extreme_parameters, generate_improvements
from pinegenie.improvements.types import (
    Difficulty,
    ImplementationGuide,
    ImplementationStep,
    ImprovementPriority,
)
from tests.fixtures.graph_factory import make_complete_strategy, make_edge, make_node


def _ids(suggestions) -> list[str]:
    return [item.id for item in suggestions]


def test_missing_risk_is_critical_and_first() -> None:
    nodes, edges = make_complete_strategy(with_risk=False)

    suggestions = generate_improvements(nodes, edges)

    assert _ids(suggestions) == [
        "add-risk-management",
        "add-confirmation-indicator",
        "add-trend-filter",
        "optimize-parameters",
        "add-time-filter",
        "add-volume-analysis",
    ]
    risk = suggestions[0]
    assert risk.priority is ImprovementPriority.CRITICAL
    steps = risk.implementation.steps
    assert [step.step_number for step in steps] == [1, 2, 3]
    assert steps[0].node_changes[0].configuration == {"type": "stop-loss", "stopLoss": 2, "maxRisk": 1}


def test_ordering_by_priority_then_impact() -> None:
    nodes, edges = make_complete_strategy(with_risk=False)
    nodes.append(make_node("orphan", NodeType.MATH))
    nodes[3] = make_node("buy", NodeType.ACTION, config={"orderType": "market", "quantity": "100%"})

    keys = [
        (IMPACT_RANK[item.priority.value], IMPACT_RANK[item.impact.value])
        for item in generate_improvements(nodes, edges)
    ]
    assert keys == sorted(keys, reverse=True)


def test_position_sizing_uses_action_quantities() -> None:
    nodes, edges = make_complete_strategy()
    nodes[3] = make_node("buy", NodeType.ACTION, config={"orderType": "market", "quantity": "100%"})

    suggestions = {item.id: item for item in generate_improvements(nodes, edges)}

    sizing = suggestions["improve-position-sizing"]
    change = sizing.implementation.steps[0].parameter_changes[0]
    assert (change.node_id, change.old_value, change.new_value) == ("buy", "100%", "25%")
    assert "add-risk-management" not in suggestions


def test_no_actions_no_risk_suggestions() -> None:
    nodes = [make_node("d", NodeType.DATA_SOURCE), make_node("c", NodeType.CONDITION)]
    ids = _ids(generate_improvements(nodes, [make_edge("d", "c")]))
    assert "add-risk-management" not in ids
    assert "improve-position-sizing" not in ids


def test_structure_and_robustness_rules() -> None:
    nodes, edges = make_complete_strategy()
    nodes += [make_node(f"c{index}", NodeType.CONDITION) for index in range(3)]
    edges += [make_edge(f"c{index}", "buy", f"x{index}") for index in range(3)]
    nodes.append(make_node("orphan", NodeType.LOGIC))

    ids = _ids(generate_improvements(nodes, edges))

    assert "remove-orphaned-nodes" in ids
    assert "reduce-single-points-of-failure" in ids
    assert "add-regime-detection" in ids


def test_regime_condition_suppresses_regime_detection() -> None:
    nodes, edges = make_complete_strategy()
    nodes.append(make_node("regime", NodeType.CONDITION, config={"operator": "regime_change"}))
    edges.append(make_edge("rsi", "regime", "e9"))
    assert "add-regime-detection" not in _ids(generate_improvements(nodes, edges))


def test_extreme_parameters_respect_config() -> None:
    rsi = make_node("rsi", NodeType.INDICATOR, config={"indicatorId": "rsi", "parameters": {"period": 3}})
    sma = make_node("sma", NodeType.INDICATOR, config={"indicatorId": "sma", "parameters": {"period": 100}})

    assert find_extreme_parameters([rsi, sma], FeedbackConfig()) == [("rsi", "period", 3)]
    narrow = FeedbackConfig(sma_period_min=10, sma_period_max=50)
    assert find_extreme_parameters([rsi, sma], narrow) == [("rsi", "period", 3), ("sma", "period", 100)]

    ids = _ids(generate_improvements([rsi], []))
    assert "review-extreme-parameters" in ids
    assert "optimize-parameters" not in ids


def test_trend_filter_skipped_with_moving_average() -> None:
    nodes, edges = make_complete_strategy()
    nodes[1] = make_node("rsi", NodeType.INDICATOR, config={"indicatorId": "ema", "parameters": {"period": 50}})
    assert "add-trend-filter" not in _ids(generate_improvements(nodes, edges))


def test_guide_validation() -> None:
    with pytest.raises(ValueError):
        ImplementationGuide(
            steps=(ImplementationStep(step_number=2, action="a", description="b"),),
            estimated_time=1,
            difficulty=Difficulty.EASY,
        )
    with pytest.raises(ValueError):
        ImplementationGuide(steps=(), estimated_time=-1, difficulty=Difficulty.EASY)


def test_improvements_are_repeatable() -> None:
    nodes, edges = make_complete_strategy(with_risk=False)
    assert generate_improvements(nodes, edges) == generate_improvements(nodes, edges)
