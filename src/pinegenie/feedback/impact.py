"""Heuristic impact estimates for a single strategy edit.

The metric values are fixed illustrative figures, not results of any
simulation or backtest.
"""

from __future__ import annotations

import logging
from typing import Callable, Final, Mapping, Sequence

from pinegenie.builder.graph import StrategyGraph
from pinegenie.builder.types import Edge, Node, NodeType
from pinegenie.feedback.types import (
    ChangeType,
    EstimatedChange,
    ImpactArea,
    ImpactAreaName,
    ImpactLevel,
    ImpactMetric,
    PerformanceImpactAnalysis,
    StrategyChange,
)

LOGGER = logging.getLogger(__name__)

Analyzer = Callable[[StrategyChange, StrategyGraph], PerformanceImpactAnalysis]


def neutral_analysis() -> PerformanceImpactAnalysis:
    return PerformanceImpactAnalysis(
        overall_impact=ImpactLevel.LOW,
        impact_areas=(),
        recommendations=(),
        estimated_change=EstimatedChange(
            return_impact=0, risk_impact=0, complexity_impact=0, confidence=0.5
        ),
        risk_factors=(),
    )


def _node_added(change: StrategyChange, graph: StrategyGraph) -> PerformanceImpactAnalysis:
    node_count = len(graph.nodes)
    areas = [
        ImpactArea(
            area=ImpactAreaName.COMPLEXITY,
            impact=ImpactLevel.LOW,
            description="Adding one node slightly increases strategy complexity",
            metrics=(
                ImpactMetric(
                    name="Node Count",
                    current_value=node_count,
                    estimated_value=node_count + 1,
                    change=1,
                    unit="nodes",
                ),
            ),
        )
    ]
    recommendations: list[str] = []
    # new_value carries the added node's type.
    if change.new_value == NodeType.INDICATOR.value:
        areas.append(
            ImpactArea(
                area=ImpactAreaName.PERFORMANCE,
                impact=ImpactLevel.MEDIUM,
                description="Adding an indicator may improve signal quality",
                metrics=(
                    ImpactMetric(
                        name="Signal Quality",
                        current_value=70,
                        estimated_value=75,
                        change=5,
                        unit="%",
                    ),
                ),
            )
        )
        recommendations.append("Connect the new indicator to conditions for best results")

    return PerformanceImpactAnalysis(
        overall_impact=ImpactLevel.LOW,
        impact_areas=tuple(areas),
        recommendations=tuple(recommendations),
        estimated_change=EstimatedChange(
            return_impact=2, risk_impact=-1, complexity_impact=5, confidence=0.6
        ),
        risk_factors=(),
    )


def _node_removed(change: StrategyChange, graph: StrategyGraph) -> PerformanceImpactAnalysis:
    removed = graph.get_node(change.node_id)
    if removed is None:
        return neutral_analysis()

    areas: list[ImpactArea] = []
    risk_factors: list[str] = []
    if removed.type == NodeType.RISK:
        risk_factors.append("Removing risk management increases strategy risk")
        areas.append(
            ImpactArea(
                area=ImpactAreaName.RISK,
                impact=ImpactLevel.HIGH,
                description="Removing risk management significantly increases risk",
                metrics=(
                    ImpactMetric(
                        name="Risk Level",
                        current_value=30,
                        estimated_value=60,
                        change=30,
                        unit="%",
                    ),
                ),
            )
        )

    return PerformanceImpactAnalysis(
        overall_impact=ImpactLevel.MEDIUM,
        impact_areas=tuple(areas),
        recommendations=(),
        estimated_change=EstimatedChange(
            return_impact=-5, risk_impact=15, complexity_impact=-5, confidence=0.7
        ),
        risk_factors=tuple(risk_factors),
    )


def _node_modified(change: StrategyChange, graph: StrategyGraph) -> PerformanceImpactAnalysis:
    return PerformanceImpactAnalysis(
        overall_impact=ImpactLevel.LOW,
        impact_areas=(
            ImpactArea(
                area=ImpactAreaName.PERFORMANCE,
                impact=ImpactLevel.LOW,
                description="Parameter changes may affect strategy performance",
                metrics=(
                    ImpactMetric(
                        name="Performance",
                        current_value=100,
                        estimated_value=102,
                        change=2,
                        unit="%",
                    ),
                ),
            ),
        ),
        recommendations=("Monitor performance after parameter changes",),
        estimated_change=EstimatedChange(
            return_impact=1, risk_impact=1, complexity_impact=0, confidence=0.4
        ),
        risk_factors=(),
    )


def _edge_added(change: StrategyChange, graph: StrategyGraph) -> PerformanceImpactAnalysis:
    edge_count = len(graph.edges)
    return PerformanceImpactAnalysis(
        overall_impact=ImpactLevel.LOW,
        impact_areas=(
            ImpactArea(
                area=ImpactAreaName.PERFORMANCE,
                impact=ImpactLevel.LOW,
                description="New connection may improve strategy flow",
                metrics=(
                    ImpactMetric(
                        name="Connectivity",
                        current_value=edge_count,
                        estimated_value=edge_count + 1,
                        change=1,
                        unit="connections",
                    ),
                ),
            ),
        ),
        recommendations=("Ensure the new connection follows logical data flow",),
        estimated_change=EstimatedChange(
            return_impact=1, risk_impact=0, complexity_impact=2, confidence=0.5
        ),
        risk_factors=(),
    )


def _edge_removed(change: StrategyChange, graph: StrategyGraph) -> PerformanceImpactAnalysis:
    edge_count = len(graph.edges)
    return PerformanceImpactAnalysis(
        overall_impact=ImpactLevel.MEDIUM,
        impact_areas=(
            ImpactArea(
                area=ImpactAreaName.PERFORMANCE,
                impact=ImpactLevel.MEDIUM,
                description="Removing connections may break strategy flow",
                metrics=(
                    ImpactMetric(
                        name="Connectivity",
                        current_value=edge_count,
                        estimated_value=edge_count - 1,
                        change=-1,
                        unit="connections",
                    ),
                ),
            ),
        ),
        recommendations=("Verify that strategy still functions after removing connection",),
        estimated_change=EstimatedChange(
            return_impact=-3, risk_impact=5, complexity_impact=-2, confidence=0.6
        ),
        risk_factors=("Broken connections may prevent strategy execution",),
    )


CHANGE_ANALYZERS: Final[Mapping[ChangeType, Analyzer]] = {
    ChangeType.NODE_ADDED: _node_added,
    ChangeType.NODE_REMOVED: _node_removed,
    ChangeType.NODE_MODIFIED: _node_modified,
    ChangeType.EDGE_ADDED: _edge_added,
    ChangeType.EDGE_REMOVED: _edge_removed,
}


def analyze_performance_impact(
    change: StrategyChange,
    nodes: Sequence[Node],
    edges: Sequence[Edge],
) -> PerformanceImpactAnalysis:
    analyzer = CHANGE_ANALYZERS.get(change.type) if isinstance(change.type, ChangeType) else None
    if analyzer is None:
        LOGGER.debug("Unknown change type %r, returning neutral analysis", change.type)
        return neutral_analysis()
    return analyzer(change, StrategyGraph.of(nodes, edges))
