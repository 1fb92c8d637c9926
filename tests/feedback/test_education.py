from __future__ import annotations

from pinegenie.builder.types import NodeType
from pinegenie.feedback.config import FeedbackConfig
from pinegenie.feedback.education import get_educational_tips
from pinegenie.feedback.types import EducationalContext, UserLevel
from tests.fixtures.graph_factory import make_complete_strategy, make_node


def _ids(tips) -> list[str]:
    return [tip.id for tip in tips]


def test_beginner_with_empty_strategy() -> None:
    tips = get_educational_tips(EducationalContext())
    assert _ids(tips) == ["start-simple", "understand-risk", "add-risk-management"]


def test_intermediate_with_selected_rsi() -> None:
    nodes, _ = make_complete_strategy(with_risk=False)
    context = EducationalContext(
        current_nodes=nodes,
        selected_node=nodes[1],
        user_level=UserLevel.INTERMEDIATE,
    )
    assert _ids(get_educational_tips(context)) == [
        "indicator-combinations",
        "add-risk-management",
        "rsi-usage",
    ]


def test_selected_risk_node() -> None:
    nodes, _ = make_complete_strategy()
    context = EducationalContext(current_nodes=nodes, selected_node=nodes[4], user_level="advanced")
    assert _ids(get_educational_tips(context)) == ["indicator-combinations", "stop-loss-placement"]


def test_focus_area_matches_category_or_concept() -> None:
    by_category = EducationalContext(focus_area="risk-management")
    assert _ids(get_educational_tips(by_category)) == ["understand-risk", "add-risk-management"]

    by_concept = EducationalContext(
        current_nodes=[make_node("i", NodeType.INDICATOR)],
        user_level=UserLevel.ADVANCED,
        focus_area="signal-quality",
    )
    assert _ids(get_educational_tips(by_concept)) == ["indicator-combinations"]


def test_tip_count_is_capped_without_focus() -> None:
    config = FeedbackConfig(max_educational_tips=2)
    tips = get_educational_tips(EducationalContext(), config)
    assert _ids(tips) == ["start-simple", "understand-risk"]
