from __future__ import annotations

from typing import Any

from pinegenie.builder.types import Edge, Node, NodeType, Position


def make_node(
    node_id: str,
    node_type: NodeType | str,
    label: str | None = None,
    config: dict[str, Any] | None = None,
    x: float = 0.0,
    y: float = 0.0,
) -> Node:
    return Node(
        id=node_id,
        type=NodeType(node_type),
        label=label if label is not None else node_id,
        config=config or {},
        position=Position(x=x, y=y),
    )


def make_edge(source: str, target: str, edge_id: str | None = None) -> Edge:
    return Edge(id=edge_id or f"{source}-{target}", source=source, target=target)


def make_complete_strategy(with_risk: bool = True) -> tuple[list[Node], list[Edge]]:
    """Data -> RSI -> condition -> buy, optionally with a stop-loss feeding the buy."""

    nodes = [
        make_node("data", NodeType.DATA_SOURCE, "Market Data", {"symbol": "BTCUSDT", "timeframe": "1h"}),
        make_node(
            "rsi",
            NodeType.INDICATOR,
            "RSI",
            {"indicatorId": "rsi", "parameters": {"period": 14}},
            x=200,
        ),
        make_node("entry", NodeType.CONDITION, "RSI < 30", {"operator": "less_than", "threshold": 30}, x=400),
        make_node("buy", NodeType.ACTION, "Buy", {"orderType": "market", "quantity": "25%"}, x=600),
    ]
    edges = [
        make_edge("data", "rsi", "e1"),
        make_edge("rsi", "entry", "e2"),
        make_edge("entry", "buy", "e3"),
    ]
    if with_risk:
        nodes.append(make_node("stop", NodeType.RISK, "Stop Loss", {"stopLoss": 2}, x=600, y=100))
        edges.append(make_edge("stop", "buy", "e4"))
    return nodes, edges


def graph_payload(nodes: list[Node], edges: list[Edge]) -> dict[str, Any]:
    return {
        "nodes": [
            {
                "id": node.id,
                "type": node.type.value,
                "label": node.label,
                "config": dict(node.config),
                "position": {"x": node.position.x, "y": node.position.y},
            }
            for node in nodes
        ],
        "edges": [{"id": edge.id, "source": edge.source, "target": edge.target} for edge in edges],
    }
