"""Single entry point bundling every feedback analyzer over one config."""

from __future__ import annotations

from typing import Sequence

from pinegenie.builder.types import Edge, Node
from pinegenie.feedback.analysis import StrategyAnalysis, analyze_strategy
from pinegenie.feedback.best_practices import get_best_practice_recommendations
from pinegenie.feedback.config import DEFAULT_CONFIG, FeedbackConfig
from pinegenie.feedback.contextual import get_contextual_suggestions
from pinegenie.feedback.education import get_educational_tips
from pinegenie.feedback.impact import analyze_performance_impact
from pinegenie.feedback.types import (
    BestPracticeRecommendation,
    ContextualSuggestion,
    EducationalContext,
    EducationalTip,
    PerformanceImpactAnalysis,
    StrategyChange,
    ValidationFeedback,
)
from pinegenie.feedback.validator import validate_strategy
from pinegenie.improvements.suggester import generate_improvements
from pinegenie.improvements.types import ImprovementSuggestion


class FeedbackSystem:
    """Stateless facade: identical inputs always give identical outputs."""

    def __init__(self, config: FeedbackConfig | None = None) -> None:
        self._config = config or DEFAULT_CONFIG

    @property
    def config(self) -> FeedbackConfig:
        return self._config

    def validate_strategy(self, nodes: Sequence[Node], edges: Sequence[Edge]) -> ValidationFeedback:
        return validate_strategy(nodes, edges, self._config)

    def get_contextual_suggestions(
        self,
        selected_node: Node | None,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
    ) -> list[ContextualSuggestion]:
        return get_contextual_suggestions(selected_node, nodes, edges)

    def get_best_practice_recommendations(
        self, nodes: Sequence[Node], edges: Sequence[Edge]
    ) -> list[BestPracticeRecommendation]:
        return get_best_practice_recommendations(nodes, edges)

    def analyze_performance_impact(
        self,
        change: StrategyChange,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
    ) -> PerformanceImpactAnalysis:
        return analyze_performance_impact(change, nodes, edges)

    def get_educational_tips(self, context: EducationalContext) -> list[EducationalTip]:
        return get_educational_tips(context, self._config)

    def generate_improvements(
        self, nodes: Sequence[Node], edges: Sequence[Edge]
    ) -> list[ImprovementSuggestion]:
        return generate_improvements(nodes, edges, self._config)

    def analyze_strategy(self, nodes: Sequence[Node], edges: Sequence[Edge]) -> StrategyAnalysis:
        return analyze_strategy(nodes, edges)
