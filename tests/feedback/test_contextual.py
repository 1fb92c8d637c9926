from __future__ import annotations

from pinegenie.builder.types import NodeType, Position
from pinegenie.feedback.contextual import NODE_RULES, get_contextual_suggestions
from pinegenie.feedback.types import SuggestionCategory
from tests.fixtures.graph_factory import make_complete_strategy, make_edge, make_node


def _ids(suggestions) -> list[str]:
    return [item.id for item in suggestions]


def test_every_node_type_has_rules() -> None:
    assert set(NODE_RULES) == set(NodeType)


def test_pipeline_order_without_selection() -> None:
    assert _ids(get_contextual_suggestions(None, [], [])) == ["add-data-source"]

    data = make_node("d", NodeType.DATA_SOURCE)
    assert _ids(get_contextual_suggestions(None, [data], [])) == ["add-indicator"]

    indicator = make_node("i", NodeType.INDICATOR)
    assert _ids(get_contextual_suggestions(None, [data, indicator], [])) == ["add-condition"]

    condition = make_node("c", NodeType.CONDITION)
    assert _ids(get_contextual_suggestions(None, [data, indicator, condition], [])) == ["add-action"]

    nodes, edges = make_complete_strategy()
    assert get_contextual_suggestions(None, nodes, edges) == []


def test_unconnected_data_source_suggests_rsi() -> None:
    data = make_node("d", NodeType.DATA_SOURCE, x=50, y=80)

    suggestions = get_contextual_suggestions(data, [data], [])

    assert _ids(suggestions) == ["connect-data-source", "add-first-indicator"]
    suggested = suggestions[1].suggested_nodes[0]
    assert suggested.type is NodeType.INDICATOR
    assert suggested.config == {"indicatorId": "rsi", "parameters": {"period": 14}}
    assert suggested.position == Position(x=250, y=80)


def test_indicator_suggestions() -> None:
    rsi = make_node("rsi", NodeType.INDICATOR, config={"indicatorId": "rsi", "parameters": {}})

    suggestions = get_contextual_suggestions(rsi, [rsi], [])

    assert _ids(suggestions) == ["add-condition-for-indicator", "optimize-indicator-parameters"]
    assert suggestions[1].category is SuggestionCategory.OPTIMIZATION

    bare = make_node("ema", NodeType.INDICATOR, config={"indicatorId": "ema"})
    assert _ids(get_contextual_suggestions(bare, [bare], [])) == ["add-condition-for-indicator"]


def test_condition_with_single_input_and_no_action() -> None:
    nodes, edges = make_complete_strategy()
    entry = nodes[2]
    edges = [edge for edge in edges if edge.id != "e3"]

    suggestions = get_contextual_suggestions(entry, nodes, edges)

    assert _ids(suggestions) == ["add-action-for-condition", "add-confirmation-condition"]
    action = suggestions[0].suggested_nodes[0]
    assert action.config == {"orderType": "market", "quantity": "25%"}


def test_action_without_trigger_or_risk() -> None:
    buy = make_node("buy", NodeType.ACTION, config={"orderType": "market"}, x=600, y=0)

    suggestions = get_contextual_suggestions(buy, [buy], [])

    assert _ids(suggestions) == ["connect-condition-to-action", "add-risk-management"]
    stop = suggestions[1].suggested_nodes[0]
    assert stop.type is NodeType.RISK
    assert stop.position == Position(x=600, y=100)

    stop_order = make_node("stop", NodeType.ACTION, config={"orderType": "stop"})
    assert _ids(get_contextual_suggestions(stop_order, [stop_order], [])) == [
        "connect-condition-to-action"
    ]


def test_risk_node_suggestions() -> None:
    nodes, edges = make_complete_strategy()
    stop = nodes[4]

    suggestions = get_contextual_suggestions(stop, nodes, edges)

    assert _ids(suggestions) == ["connect-risk-to-action", "optimize-risk-parameters"]


def test_connected_risk_node_with_no_levels_has_no_suggestions() -> None:
    risk = make_node("r", NodeType.RISK)
    upstream = make_node("a", NodeType.ACTION)
    assert get_contextual_suggestions(risk, [upstream, risk], [make_edge("a", "r")]) == []


def test_timing_math_logic_have_no_rules() -> None:
    for node_type in (NodeType.TIMING, NodeType.MATH, NodeType.LOGIC):
        node = make_node("x", node_type)
        assert get_contextual_suggestions(node, [node], []) == []


def test_sorted_by_priority_then_confidence() -> None:
    data = make_node("d", NodeType.DATA_SOURCE)
    suggestions = get_contextual_suggestions(data, [data], [])
    keys = [(item.priority, item.confidence) for item in suggestions]
    assert keys == sorted(keys, reverse=True)


def test_editing_suggested_node_config_does_not_leak_into_later_calls() -> None:
    data = make_node("d", NodeType.DATA_SOURCE)
    first = get_contextual_suggestions(data, [data], [])
    first[1].suggested_nodes[0].config["parameters"]["period"] = 99

    second = get_contextual_suggestions(data, [data], [])

    assert second[1].suggested_nodes[0].config["parameters"] == {"period": 14}
    assert get_contextual_suggestions(None, [], [])[0] is not get_contextual_suggestions(None, [], [])[0]
