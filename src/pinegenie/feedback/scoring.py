"""Completeness and confidence scores for a validated strategy."""

from __future__ import annotations

from typing import Sequence

from pinegenie.builder.graph import StrategyGraph
from pinegenie.builder.types import NodeType

REQUIRED_COMPONENTS = (NodeType.DATA_SOURCE, NodeType.CONDITION, NodeType.ACTION)

REQUIRED_POINTS = 60
CONNECTION_POINTS = 20
RISK_POINTS = 20
ERROR_PENALTY = 0.2
WARNING_PENALTY = 0.1


def completeness_score(graph: StrategyGraph) -> int:
    present = graph.node_types()
    score = 0
    if all(component in present for component in REQUIRED_COMPONENTS):
        score += REQUIRED_POINTS
    if graph.edges:
        score += CONNECTION_POINTS
    if NodeType.RISK in present:
        score += RISK_POINTS
    return min(100, score)


def confidence_score(errors: Sequence[object], warnings: Sequence[object], completeness: int) -> float:
    confidence = 1.0
    confidence -= len(errors) * ERROR_PENALTY
    confidence -= len(warnings) * WARNING_PENALTY
    confidence *= completeness / 100
    return max(0.0, min(1.0, confidence))
