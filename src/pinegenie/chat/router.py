"""Keyword routing of builder chat messages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from pinegenie.patterns.matcher import PatternMatcher
from pinegenie.patterns.types import PatternMatch

INTENTS = ("build", "validate", "optimize", "explain")

KEYWORD_MAP: dict[str, Iterable[str]] = {
    "validate": ("validate", "check", "error", "broken", "wrong", "debug", "fix"),
    "optimize": ("optimize", "optimise", "improve", "tune", "better", "faster"),
    "explain": ("explain", "what is", "how does", "how do", "why", "teach", "help"),
}


@dataclass(frozen=True)
class RouteResult:
    intent: str
    match: PatternMatch | None = None


def route_request(
    message: str,
    matcher: PatternMatcher | None = None,
    intent_hint: str | None = None,
) -> RouteResult:
    """Classify a chat message.

    Explicit validate/optimize/explain keywords win; otherwise a message that
    matches a strategy pattern is a build request, and anything else falls
    back to ``explain``. The best pattern match is attached whenever one
    exists.
    """

    matcher = matcher or PatternMatcher()
    match = matcher.best_match(message or "")

    if intent_hint and intent_hint in INTENTS:
        return RouteResult(intent=intent_hint, match=match)

    text = (message or "").lower()
    for intent, keywords in KEYWORD_MAP.items():
        if any(keyword in text for keyword in keywords):
            return RouteResult(intent=intent, match=match)

    if match is not None:
        return RouteResult(intent="build", match=match)
    return RouteResult(intent="explain")
