"""Lightweight tokenizer for natural-language strategy requests."""

from __future__ import annotations

import re

_CONTRACTIONS = (
    (re.compile(r"\bcan't\b", re.IGNORECASE), "cannot"),
    (re.compile(r"\bwon't\b", re.IGNORECASE), "will not"),
    (re.compile(r"\blet's\b", re.IGNORECASE), "let us"),
)
_WHITESPACE_RE = re.compile(r"\s+")
_OPERATOR_RE = re.compile(r"([<>=!]+)")
_PERCENT_RE = re.compile(r"(\d+(?:\.\d+)?)\s*%")
_TOKEN_RE = re.compile(r"[<>=!]+|%?[a-z0-9]+(?:\.\d+)?%?")


def normalize_text(text: str) -> str:
    processed = _WHITESPACE_RE.sub(" ", text or "").strip()
    for pattern, replacement in _CONTRACTIONS:
        processed = pattern.sub(replacement, processed)
    processed = processed.lower()
    processed = _OPERATOR_RE.sub(r" \1 ", processed)
    return _PERCENT_RE.sub(r"\1%", processed)


def tokenize(text: str) -> list[str]:
    """Split a request into lowercase word, number, percentage and operator tokens.

    >>> tokenize("Buy when RSI < 30")
    ['buy', 'when', 'rsi', '<', '30']
    """

    return _TOKEN_RE.findall(normalize_text(text))
