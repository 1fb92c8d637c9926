"""Strategy archetype catalog and natural-language pattern matching."""

from pinegenie.patterns.catalog import DEFAULT_CATALOG, DEFAULT_PATTERNS, PatternCatalog, with_pattern
from pinegenie.patterns.elements import Element, ElementCategory, has_element
from pinegenie.patterns.errors import PatternCatalogError
from pinegenie.patterns.matcher import PatternMatcher, score_pattern
from pinegenie.patterns.parser import load_pattern_catalog
from pinegenie.patterns.tokenizer import tokenize
from pinegenie.patterns.types import Pattern, PatternMatch, StrategyType

__all__ = [
    "DEFAULT_CATALOG",
    "DEFAULT_PATTERNS",
    "Element",
    "ElementCategory",
    "Pattern",
    "PatternCatalog",
    "PatternCatalogError",
    "PatternMatch",
    "PatternMatcher",
    "StrategyType",
    "has_element",
    "load_pattern_catalog",
    "score_pattern",
    "tokenize",
    "with_pattern",
]
