from __future__ import annotations

import dataclasses

import pytest

from pinegenie.feedback.best_practices import get_best_practice_recommendations
from pinegenie.feedback.types import ImpactLevel
from tests.fixtures.graph_factory import make_complete_strategy


def test_empty_strategy_recommendations() -> None:
    recommendations = get_best_practice_recommendations([], [])
    assert [item.id for item in recommendations] == [
        "keep-it-simple",
        "test-thoroughly",
        "always-use-stops",
        "position-sizing",
    ]


def test_risk_and_indicators_change_the_selection() -> None:
    nodes, edges = make_complete_strategy()
    recommendations = get_best_practice_recommendations(nodes, edges)
    assert [item.id for item in recommendations] == [
        "keep-it-simple",
        "test-thoroughly",
        "avoid-over-optimization",
    ]


def test_critical_practices_always_included() -> None:
    for with_risk in (True, False):
        nodes, edges = make_complete_strategy(with_risk=with_risk)
        critical = [
            item.id
            for item in get_best_practice_recommendations(nodes, edges)
            if item.importance is ImpactLevel.CRITICAL
        ]
        assert "test-thoroughly" in critical


def test_returned_recommendations_cannot_be_edited() -> None:
    first = get_best_practice_recommendations([], [])

    with pytest.raises(dataclasses.FrozenInstanceError):
        first[0].title = "Edited"
    assert isinstance(first[0].examples, tuple)

    first.clear()
    assert len(get_best_practice_recommendations([], [])) == 4
