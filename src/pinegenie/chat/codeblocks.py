"""Pine Script code block extraction from chat responses."""

from __future__ import annotations

import re

_CODE_BLOCK_RE = re.compile(r"```(?:pinescript|pine)?\n?([\s\S]*?)```", re.IGNORECASE)


def extract_pine_blocks(text: str) -> list[str]:
    """Return the trimmed body of every fenced block, in order of appearance.

    Fences may carry a ``pinescript`` or ``pine`` tag in any letter case.
    """

    return [match.group(1).strip() for match in _CODE_BLOCK_RE.finditer(text or "")]


def extract_pine_code(text: str) -> str | None:
    blocks = extract_pine_blocks(text)
    return blocks[0] if blocks else None
