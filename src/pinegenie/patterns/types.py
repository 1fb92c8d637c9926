"""Types for strategy archetype patterns and match results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from pinegenie.patterns.errors import PatternCatalogError


class StrategyType(str, Enum):
    TREND_FOLLOWING = "trend-following"
    MEAN_REVERSION = "mean-reversion"
    BREAKOUT = "breakout"
    MOMENTUM = "momentum"
    SCALPING = "scalping"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Pattern:
    id: str
    name: str
    strategy_type: StrategyType
    keywords: Sequence[str]
    required_elements: Sequence[str]
    optional_elements: Sequence[str] = field(default_factory=tuple)
    confidence: float = 1.0
    examples: Sequence[str] = field(default_factory=tuple)
    description: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            raise PatternCatalogError("pattern_id_invalid")
        if not isinstance(self.name, str) or not self.name:
            raise PatternCatalogError("pattern_name_invalid")
        try:
            strategy_type = StrategyType(self.strategy_type)
        except ValueError as exc:
            raise PatternCatalogError("pattern_strategy_type_invalid") from exc

        keywords = _clean_strings(self.keywords, "pattern_keywords_invalid")
        if not keywords:
            raise PatternCatalogError("pattern_keywords_missing")
        required = _clean_strings(self.required_elements, "pattern_required_elements_invalid")
        if not required:
            raise PatternCatalogError("pattern_required_elements_missing")
        optional = _clean_strings(self.optional_elements, "pattern_optional_elements_invalid")
        examples = _clean_strings(self.examples, "pattern_examples_invalid")

        if isinstance(self.confidence, bool) or not isinstance(self.confidence, (int, float)):
            raise PatternCatalogError("pattern_confidence_invalid")
        if not (0.0 < float(self.confidence) <= 1.0):
            raise PatternCatalogError("pattern_confidence_out_of_range")

        object.__setattr__(self, "strategy_type", strategy_type)
        object.__setattr__(self, "keywords", keywords)
        object.__setattr__(self, "required_elements", required)
        object.__setattr__(self, "optional_elements", optional)
        object.__setattr__(self, "examples", examples)
        object.__setattr__(self, "confidence", float(self.confidence))


@dataclass(frozen=True)
class PatternMatch:
    pattern: Pattern
    confidence: float
    matched_keywords: tuple[str, ...]
    missing_elements: tuple[str, ...]


def _clean_strings(values: Sequence[str] | None, code: str) -> tuple[str, ...]:
    if isinstance(values, str):
        raise PatternCatalogError(code)
    items = tuple(values or ())
    for value in items:
        if not isinstance(value, str) or not value:
            raise PatternCatalogError(code)
    return items
