"""Strategy graph model: nodes, edges, connection rules and loaders."""

from pinegenie.builder.errors import GraphSchemaError
from pinegenie.builder.graph import (
    ALLOWED_CONNECTIONS,
    StrategyGraph,
    find_cycles,
    is_valid_connection,
)
from pinegenie.builder.loader import load_strategy_graph, parse_strategy_graph
from pinegenie.builder.types import Edge, Node, NodeType, Position

__all__ = [
    "ALLOWED_CONNECTIONS",
    "Edge",
    "GraphSchemaError",
    "Node",
    "NodeType",
    "Position",
    "StrategyGraph",
    "find_cycles",
    "is_valid_connection",
    "load_strategy_graph",
    "parse_strategy_graph",
]
