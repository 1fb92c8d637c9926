from __future__ import annotations

from pinegenie.feedback.config import DEFAULT_CONFIG, FeedbackConfig
from pinegenie.feedback.system import FeedbackSystem
from pinegenie.feedback.types import EducationalContext, StrategyChange
from tests.fixtures.graph_factory import make_complete_strategy


def test_system_uses_its_config() -> None:
    nodes, edges = make_complete_strategy()
    strict = FeedbackSystem(FeedbackConfig(complexity_threshold=3))

    assert FeedbackSystem().config is DEFAULT_CONFIG
    assert [warning.id for warning in strict.validate_strategy(nodes, edges).warnings] == ["high-complexity"]
    assert FeedbackSystem().validate_strategy(nodes, edges).warnings == ()


def test_every_analyzer_is_repeatable() -> None:
    nodes, edges = make_complete_strategy(with_risk=False)
    system = FeedbackSystem()
    context = EducationalContext(current_nodes=nodes, selected_node=nodes[1])
    change = StrategyChange(type="node-removed", node_id="rsi")

    calls = [
        lambda: system.validate_strategy(nodes, edges),
        lambda: system.get_contextual_suggestions(nodes[0], nodes, edges),
        lambda: system.get_best_practice_recommendations(nodes, edges),
        lambda: system.analyze_performance_impact(change, nodes, edges),
        lambda: system.get_educational_tips(context),
        lambda: system.generate_improvements(nodes, edges),
        lambda: system.analyze_strategy(nodes, edges),
    ]
    for call in calls:
        assert call() == call()
