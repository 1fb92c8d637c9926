"""Educational tips for the current builder context."""

from __future__ import annotations

import logging

from pinegenie.builder.types import Node, NodeType
from pinegenie.feedback.config import DEFAULT_CONFIG, FeedbackConfig
from pinegenie.feedback.types import EducationalCategory, EducationalContext, EducationalTip, UserLevel

LOGGER = logging.getLogger(__name__)

START_SIMPLE = EducationalTip(
    id="start-simple",
    title="Start with Simple Strategies",
    content=(
        "Begin with basic strategies using 1-2 indicators. Complex strategies are harder "
        "to understand and often perform worse."
    ),
    category=EducationalCategory.STRATEGY_DEVELOPMENT,
    difficulty=UserLevel.BEGINNER,
    related_concepts=("indicators", "strategy-design"),
    examples=("RSI oversold/overbought", "Moving average crossover"),
)

UNDERSTAND_RISK = EducationalTip(
    id="understand-risk",
    title="Always Manage Risk",
    content=(
        "Never trade without stop losses. Risk management is more important than finding "
        "winning trades."
    ),
    category=EducationalCategory.RISK_MANAGEMENT,
    difficulty=UserLevel.BEGINNER,
    related_concepts=("stop-loss", "position-sizing"),
)

INDICATOR_COMBINATIONS = EducationalTip(
    id="indicator-combinations",
    title="Combining Indicators",
    content=(
        "Use different types of indicators together: trend-following (MA) with momentum "
        "(RSI) for better signals."
    ),
    category=EducationalCategory.TECHNICAL_ANALYSIS,
    difficulty=UserLevel.INTERMEDIATE,
    related_concepts=("indicators", "signal-quality"),
)

ADD_RISK_MANAGEMENT = EducationalTip(
    id="add-risk-management",
    title="Risk Management is Essential",
    content=(
        "Every strategy should include stop losses and position sizing to protect your capital."
    ),
    category=EducationalCategory.RISK_MANAGEMENT,
    difficulty=UserLevel.BEGINNER,
    related_concepts=("stop-loss", "take-profit", "position-sizing"),
)

RSI_USAGE = EducationalTip(
    id="rsi-usage",
    title="Using RSI Effectively",
    content=(
        "RSI above 70 suggests overbought conditions (potential sell), below 30 suggests "
        "oversold (potential buy). However, in strong trends, RSI can stay extreme for "
        "extended periods."
    ),
    category=EducationalCategory.TECHNICAL_ANALYSIS,
    difficulty=UserLevel.BEGINNER,
    related_concepts=("rsi", "overbought", "oversold"),
)

STOP_LOSS_PLACEMENT = EducationalTip(
    id="stop-loss-placement",
    title="Stop Loss Placement",
    content=(
        "Place stops below recent support (for longs) or above resistance (for shorts). "
        "Avoid placing stops at obvious levels where many other traders might have theirs."
    ),
    category=EducationalCategory.RISK_MANAGEMENT,
    difficulty=UserLevel.INTERMEDIATE,
    related_concepts=("stop-loss", "support", "resistance"),
)


def tips_for_level(level: UserLevel) -> list[EducationalTip]:
    if level == UserLevel.BEGINNER:
        return [START_SIMPLE, UNDERSTAND_RISK]
    return []


def tips_for_strategy(nodes: tuple[Node, ...]) -> list[EducationalTip]:
    present = {node.type for node in nodes}
    tips: list[EducationalTip] = []
    if NodeType.INDICATOR in present:
        tips.append(INDICATOR_COMBINATIONS)
    if NodeType.RISK not in present:
        tips.append(ADD_RISK_MANAGEMENT)
    return tips


def tips_for_selection(node: Node) -> list[EducationalTip]:
    if node.type == NodeType.INDICATOR and node.indicator_id == "rsi":
        return [RSI_USAGE]
    if node.type == NodeType.RISK:
        return [STOP_LOSS_PLACEMENT]
    return []


def get_educational_tips(
    context: EducationalContext,
    config: FeedbackConfig | None = None,
) -> list[EducationalTip]:
    """Collect tips for the user's level, strategy and selection.

    A focus area keeps every tip whose category or related concepts name it;
    without one, only the first ``max_educational_tips`` are returned.
    """

    config = config or DEFAULT_CONFIG
    tips = tips_for_level(context.user_level)
    tips.extend(tips_for_strategy(context.current_nodes))
    if context.selected_node is not None:
        tips.extend(tips_for_selection(context.selected_node))

    if context.focus_area:
        focus = context.focus_area
        tips = [tip for tip in tips if tip.category.value == focus or focus in tip.related_concepts]
    else:
        tips = tips[: config.max_educational_tips]
    LOGGER.debug("Selected %d educational tips", len(tips))
    return tips
