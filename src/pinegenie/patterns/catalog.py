"""Immutable catalog of strategy archetypes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from pinegenie.patterns.errors import PatternCatalogError
from pinegenie.patterns.types import Pattern, StrategyType


@dataclass(frozen=True)
class PatternCatalog:
    patterns: tuple[Pattern, ...] = ()

    def __post_init__(self) -> None:
        patterns = tuple(self.patterns)
        ids = [pattern.id for pattern in patterns]
        if len(set(ids)) != len(ids):
            raise PatternCatalogError("pattern_id_not_unique")
        object.__setattr__(self, "patterns", patterns)

    def __len__(self) -> int:
        return len(self.patterns)

    def __iter__(self):
        return iter(self.patterns)

    def all_patterns(self) -> list[Pattern]:
        return list(self.patterns)

    def by_type(self, strategy_type: StrategyType | str) -> list[Pattern]:
        try:
            wanted = StrategyType(strategy_type)
        except ValueError as exc:
            raise PatternCatalogError("pattern_strategy_type_invalid") from exc
        return [pattern for pattern in self.patterns if pattern.strategy_type == wanted]

    def get(self, pattern_id: str) -> Pattern:
        for pattern in self.patterns:
            if pattern.id == pattern_id:
                return pattern
        raise PatternCatalogError("pattern_not_found")


def with_pattern(catalog: PatternCatalog, pattern: Pattern) -> PatternCatalog:
    if not isinstance(pattern, Pattern):
        raise PatternCatalogError("pattern_invalid")
    if any(existing.id == pattern.id for existing in catalog.patterns):
        raise PatternCatalogError("pattern_already_registered")
    return PatternCatalog(patterns=(*catalog.patterns, pattern))


def with_patterns(catalog: PatternCatalog, patterns: Iterable[Pattern]) -> PatternCatalog:
    for pattern in patterns:
        catalog = with_pattern(catalog, pattern)
    return catalog


DEFAULT_PATTERNS: tuple[Pattern, ...] = (
    Pattern(
        id="ma_crossover",
        name="Moving Average Crossover",
        strategy_type=StrategyType.TREND_FOLLOWING,
        keywords=("moving average", "ma", "sma", "ema", "crossover", "crosses above", "crosses below"),
        required_elements=("indicator:moving_average", "condition:crossover", "action:buy_sell"),
        optional_elements=("timeframe", "stop_loss", "take_profit"),
        confidence=0.9,
        examples=(
            "Create a strategy where fast MA crosses above slow MA",
            "Buy when 10 SMA crosses above 20 SMA",
            "Moving average crossover strategy",
        ),
        description="Strategy based on moving average crossovers for trend following",
    ),
    Pattern(
        id="trend_following_general",
        name="General Trend Following",
        strategy_type=StrategyType.TREND_FOLLOWING,
        keywords=("trend", "trending", "breakout", "momentum", "follow", "direction"),
        required_elements=("indicator:trend", "action:buy_sell"),
        optional_elements=("timeframe", "confirmation"),
        confidence=0.7,
        examples=(
            "Create a trend following strategy",
            "Follow the trend with momentum indicators",
            "Breakout strategy for trending markets",
        ),
        description="General trend following strategies",
    ),
    Pattern(
        id="rsi_oversold_overbought",
        name="RSI Oversold/Overbought",
        strategy_type=StrategyType.MEAN_REVERSION,
        keywords=("rsi", "oversold", "overbought", "relative strength", "30", "70"),
        required_elements=("indicator:rsi", "condition:level", "action:buy_sell"),
        optional_elements=("threshold", "timeframe"),
        confidence=0.95,
        examples=(
            "Buy when RSI is below 30",
            "RSI oversold overbought strategy",
            "Sell when RSI above 70, buy when RSI below 30",
        ),
        description="Mean reversion strategy using RSI overbought/oversold levels",
    ),
    Pattern(
        id="bollinger_bands_reversion",
        name="Bollinger Bands Mean Reversion",
        strategy_type=StrategyType.MEAN_REVERSION,
        keywords=("bollinger bands", "bb", "bands", "upper band", "lower band", "mean reversion"),
        required_elements=("indicator:bollinger_bands", "condition:touch_band", "action:buy_sell"),
        optional_elements=("period", "standard_deviation"),
        confidence=0.9,
        examples=(
            "Buy when price touches lower Bollinger Band",
            "Sell at upper band, buy at lower band",
            "Bollinger Bands mean reversion strategy",
        ),
        description="Mean reversion strategy using Bollinger Bands",
    ),
    Pattern(
        id="mean_reversion_general",
        name="General Mean Reversion",
        strategy_type=StrategyType.MEAN_REVERSION,
        keywords=("mean reversion", "revert", "bounce", "support", "resistance", "oversold", "overbought"),
        required_elements=("condition:level", "action:buy_sell"),
        optional_elements=("indicator", "threshold"),
        confidence=0.7,
        examples=(
            "Create a mean reversion strategy",
            "Buy oversold, sell overbought",
            "Bounce off support and resistance",
        ),
        description="General mean reversion strategies",
    ),
    Pattern(
        id="price_breakout",
        name="Price Breakout",
        strategy_type=StrategyType.BREAKOUT,
        keywords=("breakout", "break above", "break below", "resistance", "support", "level"),
        required_elements=("condition:breakout", "action:buy_sell"),
        optional_elements=("volume", "confirmation"),
        confidence=0.85,
        examples=(
            "Buy when price breaks above resistance",
            "Breakout strategy above key levels",
            "Trade breakouts with volume confirmation",
        ),
        description="Strategy based on price breakouts above/below key levels",
    ),
    Pattern(
        id="volatility_breakout",
        name="Volatility Breakout",
        strategy_type=StrategyType.BREAKOUT,
        keywords=("volatility", "atr", "range", "expansion", "squeeze"),
        required_elements=("indicator:volatility", "condition:expansion", "action:buy_sell"),
        optional_elements=("period", "multiplier"),
        confidence=0.8,
        examples=(
            "Trade volatility breakouts using ATR",
            "Buy when volatility expands",
            "Range breakout strategy",
        ),
        description="Strategy based on volatility expansion and breakouts",
    ),
    Pattern(
        id="macd_momentum",
        name="MACD Momentum",
        strategy_type=StrategyType.MOMENTUM,
        keywords=("macd", "momentum", "signal line", "histogram", "divergence"),
        required_elements=("indicator:macd", "condition:crossover", "action:buy_sell"),
        optional_elements=("histogram", "zero_line"),
        confidence=0.9,
        examples=(
            "Buy when MACD crosses above signal line",
            "MACD momentum strategy",
            "Trade MACD histogram divergence",
        ),
        description="Momentum strategy using MACD indicator",
    ),
    Pattern(
        id="stochastic_momentum",
        name="Stochastic Momentum",
        strategy_type=StrategyType.MOMENTUM,
        keywords=("stochastic", "stoch", "%k", "%d", "momentum"),
        required_elements=("indicator:stochastic", "condition:crossover", "action:buy_sell"),
        optional_elements=("overbought", "oversold"),
        confidence=0.85,
        examples=(
            "Buy when Stochastic %K crosses above %D",
            "Stochastic momentum strategy",
            "Trade stochastic crossovers",
        ),
        description="Momentum strategy using Stochastic oscillator",
    ),
    Pattern(
        id="quick_scalp",
        name="Quick Scalping",
        strategy_type=StrategyType.SCALPING,
        keywords=("scalp", "scalping", "quick", "fast", "short term", "1m", "5m"),
        required_elements=("timeframe:short", "action:quick_entry_exit"),
        optional_elements=("tight_stops", "small_targets"),
        confidence=0.8,
        examples=(
            "Quick scalping strategy on 1 minute chart",
            "Fast entries and exits for scalping",
            "Short term scalping with tight stops",
        ),
        description="High-frequency scalping strategies",
    ),
    Pattern(
        id="multi_indicator",
        name="Multi-Indicator Strategy",
        strategy_type=StrategyType.CUSTOM,
        keywords=("multiple", "combine", "confirmation", "filter", "and", "with"),
        required_elements=("indicator:multiple", "condition:multiple", "action:buy_sell"),
        optional_elements=("timeframe", "risk_management"),
        confidence=0.7,
        examples=(
            "Combine RSI and MACD for entries",
            "Use multiple indicators for confirmation",
            "Strategy with RSI, MA, and volume",
        ),
        description="Complex strategies using multiple indicators",
    ),
)

DEFAULT_CATALOG = PatternCatalog(patterns=DEFAULT_PATTERNS)
