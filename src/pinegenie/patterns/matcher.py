"""Keyword and element based matching of requests against the pattern catalog."""

from __future__ import annotations

import logging
from typing import Sequence

from pinegenie.patterns.catalog import DEFAULT_CATALOG, PatternCatalog, with_pattern
from pinegenie.patterns.elements import contains_keyword, has_element
from pinegenie.patterns.errors import PatternCatalogError
from pinegenie.patterns.tokenizer import tokenize
from pinegenie.patterns.types import Pattern, PatternMatch, StrategyType

LOGGER = logging.getLogger(__name__)

KEYWORD_WEIGHT = 0.6
REQUIRED_WEIGHT = 0.4
OPTIONAL_BONUS = 0.2
DEFAULT_MIN_CONFIDENCE = 0.3


def score_pattern(pattern: Pattern, tokens: Sequence[str], text: str) -> PatternMatch:
    """Score one pattern against lowercased ``tokens`` and ``text``."""

    matched = tuple(keyword for keyword in pattern.keywords if contains_keyword(keyword, tokens, text))
    keyword_ratio = len(matched) / len(pattern.keywords)

    missing = tuple(element for element in pattern.required_elements if not has_element(element, tokens, text))
    required_ratio = (len(pattern.required_elements) - len(missing)) / len(pattern.required_elements)

    optional_bonus = 0.0
    if pattern.optional_elements:
        present = sum(1 for element in pattern.optional_elements if has_element(element, tokens, text))
        optional_bonus = present / len(pattern.optional_elements) * OPTIONAL_BONUS

    base = keyword_ratio * KEYWORD_WEIGHT + required_ratio * REQUIRED_WEIGHT
    confidence = min((base + optional_bonus) * pattern.confidence, 1.0)
    return PatternMatch(
        pattern=pattern,
        confidence=confidence,
        matched_keywords=matched,
        missing_elements=missing,
    )


class PatternMatcher:
    def __init__(
        self,
        catalog: PatternCatalog = DEFAULT_CATALOG,
        min_confidence: float = DEFAULT_MIN_CONFIDENCE,
    ) -> None:
        if isinstance(min_confidence, bool) or not isinstance(min_confidence, (int, float)):
            raise PatternCatalogError("min_confidence_invalid")
        if not (0.0 <= float(min_confidence) < 1.0):
            raise PatternCatalogError("min_confidence_out_of_range")
        self._catalog = catalog
        self._min_confidence = float(min_confidence)

    @property
    def catalog(self) -> PatternCatalog:
        return self._catalog

    @property
    def min_confidence(self) -> float:
        return self._min_confidence

    def find_matches(self, tokens: Sequence[str], original_text: str) -> list[PatternMatch]:
        """Return patterns scoring strictly above ``min_confidence``, best first.

        Ties keep catalog order.
        """

        text = (original_text or "").lower()
        normalized = [token.lower() for token in tokens]
        matches = [
            match
            for match in (score_pattern(pattern, normalized, text) for pattern in self._catalog)
            if match.confidence > self._min_confidence
        ]
        matches.sort(key=lambda match: match.confidence, reverse=True)
        LOGGER.debug("Matched %d of %d patterns", len(matches), len(self._catalog))
        return matches

    def match_text(self, text: str) -> list[PatternMatch]:
        return self.find_matches(tokenize(text), text)

    def best_match(self, text: str) -> PatternMatch | None:
        matches = self.match_text(text)
        return matches[0] if matches else None

    def get_all_patterns(self) -> list[Pattern]:
        return self._catalog.all_patterns()

    def get_patterns_by_type(self, strategy_type: StrategyType | str) -> list[Pattern]:
        return self._catalog.by_type(strategy_type)

    def add_pattern(self, pattern: Pattern) -> None:
        self._catalog = with_pattern(self._catalog, pattern)
