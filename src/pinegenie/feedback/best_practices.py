"""Static best-practice recommendations filtered by strategy state."""

from __future__ import annotations

import logging
from typing import Sequence

from pinegenie.builder.graph import StrategyGraph
from pinegenie.builder.types import Edge, Node, NodeType
from pinegenie.feedback.types import BestPracticeCategory, BestPracticeRecommendation, ImpactLevel

LOGGER = logging.getLogger(__name__)

KEEP_IT_SIMPLE = BestPracticeRecommendation(
    id="keep-it-simple",
    title="Keep Strategies Simple",
    description="Simple strategies are often more robust and easier to understand than complex ones",
    category=BestPracticeCategory.STRATEGY_DESIGN,
    importance=ImpactLevel.HIGH,
    implementation="Focus on 2-3 key indicators and clear entry/exit rules",
    examples=(
        "RSI oversold/overbought with moving average trend filter",
        "MACD crossover with volume confirmation",
        "Bollinger Bands squeeze with momentum confirmation",
    ),
)

TEST_THOROUGHLY = BestPracticeRecommendation(
    id="test-thoroughly",
    title="Test Before Trading",
    description="Always backtest your strategy on historical data before using real money",
    category=BestPracticeCategory.BACKTESTING,
    importance=ImpactLevel.CRITICAL,
    implementation="Use at least 2-3 years of historical data for backtesting",
    examples=(
        "Test on different market conditions (bull, bear, sideways)",
        "Validate on out-of-sample data",
        "Check performance across different timeframes",
    ),
)

ALWAYS_USE_STOPS = BestPracticeRecommendation(
    id="always-use-stops",
    title="Always Use Stop Losses",
    description="Every trade should have a predefined maximum loss limit",
    category=BestPracticeCategory.RISK_MANAGEMENT,
    importance=ImpactLevel.CRITICAL,
    implementation="Set stop losses at 1-3% below entry price for most strategies",
    examples=(
        "Technical stop: Below recent support level",
        "Percentage stop: 2% below entry price",
        "ATR-based stop: 2x Average True Range below entry",
    ),
)

POSITION_SIZING = BestPracticeRecommendation(
    id="position-sizing",
    title="Use Proper Position Sizing",
    description="Never risk more than 1-2% of your account on a single trade",
    category=BestPracticeCategory.RISK_MANAGEMENT,
    importance=ImpactLevel.HIGH,
    implementation="Calculate position size based on stop loss distance and risk tolerance",
    examples=(
        "Fixed percentage: Always risk 1% of account",
        "Volatility-based: Adjust size based on market volatility",
        "Kelly criterion: Optimize based on win rate and average win/loss",
    ),
)

AVOID_OVER_OPTIMIZATION = BestPracticeRecommendation(
    id="avoid-over-optimization",
    title="Avoid Over-Optimization",
    description="Don't optimize parameters too precisely to historical data",
    category=BestPracticeCategory.PARAMETER_SELECTION,
    importance=ImpactLevel.HIGH,
    implementation="Use round numbers and test parameter stability",
    examples=(
        "Use RSI 14 instead of RSI 13.7",
        "Test parameter ranges (RSI 10-20) not just single values",
        "Prefer parameters that work across different time periods",
    ),
)


def _candidates(graph: StrategyGraph) -> list[BestPracticeRecommendation]:
    candidates = [KEEP_IT_SIMPLE, TEST_THOROUGHLY]
    if not graph.has_type(NodeType.RISK):
        candidates.append(ALWAYS_USE_STOPS)
    candidates.append(POSITION_SIZING)
    if graph.has_type(NodeType.INDICATOR):
        candidates.append(AVOID_OVER_OPTIMIZATION)
    return candidates


def is_relevant(recommendation: BestPracticeRecommendation, graph: StrategyGraph) -> bool:
    if recommendation.importance == ImpactLevel.CRITICAL:
        return True
    if recommendation.category == BestPracticeCategory.RISK_MANAGEMENT:
        return not graph.has_type(NodeType.RISK)
    if recommendation.category == BestPracticeCategory.PARAMETER_SELECTION:
        return graph.has_type(NodeType.INDICATOR)
    return True


def get_best_practice_recommendations(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
) -> list[BestPracticeRecommendation]:
    graph = StrategyGraph.of(nodes, edges)
    recommendations = [item for item in _candidates(graph) if is_relevant(item, graph)]
    LOGGER.debug("Selected %d best-practice recommendations", len(recommendations))
    return recommendations
