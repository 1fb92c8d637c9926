"""Read-only queries over a (nodes, edges) strategy snapshot."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Final, Iterable, Iterator, Mapping, Sequence

from pinegenie.builder.types import Edge, Node, NodeType

ALLOWED_CONNECTIONS: Final[Mapping[NodeType, frozenset[NodeType]]] = {
    NodeType.DATA_SOURCE: frozenset({NodeType.INDICATOR, NodeType.CONDITION, NodeType.MATH}),
    NodeType.INDICATOR: frozenset({NodeType.CONDITION, NodeType.MATH, NodeType.ACTION}),
    NodeType.CONDITION: frozenset({NodeType.ACTION, NodeType.LOGIC}),
    NodeType.MATH: frozenset({NodeType.CONDITION, NodeType.ACTION, NodeType.MATH}),
    NodeType.LOGIC: frozenset({NodeType.ACTION, NodeType.CONDITION}),
    NodeType.TIMING: frozenset({NodeType.CONDITION, NodeType.ACTION}),
    NodeType.RISK: frozenset({NodeType.ACTION}),
}


def is_valid_connection(source_type: NodeType, target_type: NodeType) -> bool:
    return target_type in ALLOWED_CONNECTIONS.get(source_type, frozenset())


@dataclass(frozen=True)
class StrategyGraph:
    nodes: tuple[Node, ...]
    edges: tuple[Edge, ...]

    @classmethod
    def of(cls, nodes: Iterable[Node], edges: Iterable[Edge]) -> StrategyGraph:
        return cls(nodes=tuple(nodes or ()), edges=tuple(edges or ()))

    def get_node(self, node_id: str | None) -> Node | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def nodes_of_type(self, node_type: NodeType) -> list[Node]:
        return [node for node in self.nodes if node.type == node_type]

    def node_types(self) -> frozenset[NodeType]:
        return frozenset(node.type for node in self.nodes)

    def has_type(self, node_type: NodeType) -> bool:
        return any(node.type == node_type for node in self.nodes)

    def outgoing(self, node_id: str) -> list[Edge]:
        return [edge for edge in self.edges if edge.source == node_id]

    def incoming(self, node_id: str) -> list[Edge]:
        return [edge for edge in self.edges if edge.target == node_id]

    def connected_node_ids(self) -> frozenset[str]:
        ids: set[str] = set()
        for edge in self.edges:
            ids.add(edge.source)
            ids.add(edge.target)
        return frozenset(ids)

    def orphaned_nodes(self) -> list[Node]:
        connected = self.connected_node_ids()
        return [node for node in self.nodes if node.id not in connected]

    def connection_counts(self) -> Counter[str]:
        counts: Counter[str] = Counter()
        for edge in self.edges:
            counts[edge.source] += 1
            counts[edge.target] += 1
        return counts

    def find_cycles(self) -> list[list[str]]:
        return find_cycles(self.nodes, self.edges)


def find_cycles(nodes: Sequence[Node], edges: Sequence[Edge]) -> list[list[str]]:
    """Report directed cycles found by a depth-first walk over the graph.

    The walk is seeded from every node not yet visited, in node order, and
    shares one ``visited`` set across seeds. Whenever an edge leads back to a
    node on the current path, the path from that node to the current node is
    reported, so every cycle is listed in traversal order. A graph with at
    least one cycle always yields at least one report; cycles that are only
    reachable through already-finished nodes are not enumerated separately.

    The walk keeps an explicit stack, so path length is bounded only by memory.
    """

    cycles: list[list[str]] = []
    visited: set[str] = set()
    targets_by_source: dict[str, list[str]] = {}
    for edge in edges:
        targets_by_source.setdefault(edge.source, []).append(edge.target)

    for node in nodes:
        if node.id in visited:
            continue
        visited.add(node.id)
        path = [node.id]
        depth = {node.id: 0}
        stack: list[tuple[str, Iterator[str]]] = [(node.id, iter(targets_by_source.get(node.id, ())))]
        while stack:
            node_id, targets = stack[-1]
            target = next(targets, None)
            if target is None:
                stack.pop()
                path.pop()
                del depth[node_id]
                continue
            if target in depth:
                cycles.append(path[depth[target]:])
                continue
            if target in visited:
                continue
            visited.add(target)
            depth[target] = len(path)
            path.append(target)
            stack.append((target, iter(targets_by_source.get(target, ()))))

    return cycles
