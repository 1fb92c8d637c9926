from __future__ import annotations

from pinegenie.builder.graph import StrategyGraph, find_cycles, is_valid_connection
from pinegenie.builder.types import NodeType, Position
from tests.fixtures.graph_factory import make_complete_strategy, make_edge, make_node


def test_allowed_connections_follow_pipeline() -> None:
    assert is_valid_connection(NodeType.DATA_SOURCE, NodeType.INDICATOR)
    assert is_valid_connection(NodeType.MATH, NodeType.MATH)
    assert is_valid_connection(NodeType.RISK, NodeType.ACTION)
    assert not is_valid_connection(NodeType.ACTION, NodeType.INDICATOR)
    assert not is_valid_connection(NodeType.INDICATOR, NodeType.DATA_SOURCE)
    assert not is_valid_connection(NodeType.ACTION, NodeType.ACTION)


def test_node_coerces_type_and_exposes_parameters() -> None:
    node = make_node("rsi", "indicator", config={"indicatorId": "rsi", "parameters": {"period": 14}})
    assert node.type is NodeType.INDICATOR
    assert node.parameters == {"period": 14}
    assert node.indicator_id == "rsi"

    bare = make_node("data", NodeType.DATA_SOURCE, config={"parameters": "nope"})
    assert bare.parameters == {}
    assert bare.indicator_id is None


def test_position_offset_returns_new_position() -> None:
    origin = Position(x=10, y=20)
    assert origin.offset(dx=200) == Position(x=210, y=20)
    assert origin.offset(dy=-5) == Position(x=10, y=15)
    assert origin == Position(x=10, y=20)


def test_graph_queries() -> None:
    nodes, edges = make_complete_strategy()
    graph = StrategyGraph.of(nodes, edges)

    assert graph.get_node("rsi") is nodes[1]
    assert graph.get_node("missing") is None
    assert [node.id for node in graph.nodes_of_type(NodeType.RISK)] == ["stop"]
    assert graph.has_type(NodeType.ACTION)
    assert not graph.has_type(NodeType.TIMING)
    assert [edge.id for edge in graph.outgoing("rsi")] == ["e2"]
    assert sorted(edge.id for edge in graph.incoming("buy")) == ["e3", "e4"]
    assert graph.orphaned_nodes() == []
    assert graph.connection_counts()["buy"] == 2


def test_orphaned_nodes_keep_node_order() -> None:
    nodes = [
        make_node("a", NodeType.DATA_SOURCE),
        make_node("lonely", NodeType.TIMING),
        make_node("b", NodeType.INDICATOR),
        make_node("other", NodeType.MATH),
    ]
    graph = StrategyGraph.of(nodes, [make_edge("a", "b")])
    assert [node.id for node in graph.orphaned_nodes()] == ["lonely", "other"]


def test_acyclic_graph_has_no_cycles() -> None:
    nodes, edges = make_complete_strategy()
    assert find_cycles(nodes, edges) == []


def test_two_node_cycle_reported_in_traversal_order() -> None:
    nodes = [make_node("a", NodeType.MATH), make_node("b", NodeType.MATH)]
    edges = [make_edge("a", "b"), make_edge("b", "a")]
    assert find_cycles(nodes, edges) == [["a", "b"]]


def test_self_loop_is_a_cycle() -> None:
    nodes = [make_node("m", NodeType.MATH)]
    assert find_cycles(nodes, [make_edge("m", "m")]) == [["m"]]


def test_cycle_reported_from_entry_point() -> None:
    nodes = [
        make_node("src", NodeType.DATA_SOURCE),
        make_node("x", NodeType.MATH),
        make_node("y", NodeType.MATH),
        make_node("z", NodeType.MATH),
    ]
    edges = [
        make_edge("src", "x"),
        make_edge("x", "y"),
        make_edge("y", "z"),
        make_edge("z", "x"),
    ]
    assert find_cycles(nodes, edges) == [["x", "y", "z"]]


def test_edges_to_unknown_nodes_do_not_break_cycle_search() -> None:
    nodes = [make_node("a", NodeType.MATH)]
    assert find_cycles(nodes, [make_edge("a", "ghost")]) == []


def test_long_chain_has_no_cycles() -> None:
    nodes = [make_node(f"m{index}", NodeType.MATH) for index in range(2500)]
    edges = [make_edge(f"m{index}", f"m{index + 1}") for index in range(2499)]
    assert find_cycles(nodes, edges) == []


def test_long_chain_closing_back_reports_whole_loop() -> None:
    nodes = [make_node(f"m{index}", NodeType.MATH) for index in range(2500)]
    edges = [make_edge(f"m{index}", f"m{index + 1}") for index in range(2499)]
    edges.append(make_edge("m2499", "m0"))

    cycles = find_cycles(nodes, edges)

    assert len(cycles) == 1
    assert cycles[0] == [f"m{index}" for index in range(2500)]


def test_cycles_in_separate_branches_are_both_reported() -> None:
    nodes = [make_node(node_id, NodeType.MATH) for node_id in ("root", "a", "b", "c", "d")]
    edges = [
        make_edge("root", "a"),
        make_edge("a", "b"),
        make_edge("b", "a"),
        make_edge("root", "c"),
        make_edge("c", "d"),
        make_edge("d", "c"),
    ]
    assert find_cycles(nodes, edges) == [["a", "b"], ["c", "d"]]
