"""Element tags ("category:type") and their keyword evidence tables."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Mapping, Sequence


class ElementCategory(str, Enum):
    INDICATOR = "indicator"
    CONDITION = "condition"
    ACTION = "action"
    TIMEFRAME = "timeframe"


ELEMENT_KEYWORDS: Final[Mapping[ElementCategory, Mapping[str, tuple[str, ...]]]] = {
    ElementCategory.INDICATOR: {
        "moving_average": ("ma", "sma", "ema", "moving average", "average"),
        "rsi": ("rsi", "relative strength"),
        "macd": ("macd", "convergence", "divergence"),
        "bollinger_bands": ("bollinger", "bands", "bb"),
        "stochastic": ("stochastic", "stoch"),
        "trend": ("trend", "trending", "direction"),
        "volatility": ("volatility", "atr", "true range"),
        "multiple": ("and", "with", "plus", "combine"),
    },
    ElementCategory.CONDITION: {
        "crossover": ("cross", "crosses", "above", "below"),
        "level": ("above", "below", "over", "under", "threshold"),
        "breakout": ("break", "breakout", "breakthrough"),
        "touch_band": ("touch", "reaches", "hits"),
        "expansion": ("expand", "expansion", "increase"),
        "multiple": ("and", "when", "if"),
    },
    ElementCategory.ACTION: {
        "buy_sell": ("buy", "sell", "long", "short", "enter", "exit"),
        "quick_entry_exit": ("quick", "fast", "scalp", "short term"),
    },
    ElementCategory.TIMEFRAME: {
        "short": ("1m", "5m", "15m", "minute", "short", "quick"),
        "medium": ("1h", "4h", "hour", "hourly"),
        "long": ("1d", "daily", "day", "long term"),
    },
}


@dataclass(frozen=True)
class Element:
    """A pattern element tag.

    ``category`` is set when the tag prefix names one of the keyword tables;
    ``kind`` is the part after the colon (empty for bare tags such as
    ``"timeframe"``). Tags with an unknown prefix keep ``category=None`` and are
    matched literally.
    """

    raw: str
    category: ElementCategory | None
    kind: str

    @classmethod
    def parse(cls, tag: str) -> Element:
        prefix, _, kind = tag.partition(":")
        try:
            category: ElementCategory | None = ElementCategory(prefix)
        except ValueError:
            category = None
        return cls(raw=tag, category=category, kind=kind)

    def keywords(self) -> tuple[str, ...]:
        if self.category is None:
            return (self.raw,)
        return ELEMENT_KEYWORDS[self.category].get(self.kind, ())


def contains_keyword(keyword: str, tokens: Sequence[str], text: str) -> bool:
    needle = keyword.lower()
    return any(needle in token for token in tokens) or needle in text


def has_element(tag: str, tokens: Sequence[str], text: str) -> bool:
    """Return whether lowercased ``tokens``/``text`` carry evidence for ``tag``."""

    element = Element.parse(tag)
    return any(contains_keyword(keyword, tokens, text) for keyword in element.keywords())
