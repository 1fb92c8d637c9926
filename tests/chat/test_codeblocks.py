from __future__ import annotations

from pinegenie.chat.codeblocks import extract_pine_blocks, extract_pine_code

RESPONSE = """Here is your strategy:

```pinescript
//@version=5
strategy("RSI", overlay=true)
```

And an alternative:

```Pine
indicator("Alt")
```
"""


def test_extracts_tagged_blocks_in_order() -> None:
    assert extract_pine_blocks(RESPONSE) == [
        '//@version=5\nstrategy("RSI", overlay=true)',
        'indicator("Alt")',
    ]
    assert extract_pine_code(RESPONSE) == '//@version=5\nstrategy("RSI", overlay=true)'


def test_untagged_block() -> None:
    assert extract_pine_code("```\nplot(close)\n```") == "plot(close)"


def test_no_block() -> None:
    assert extract_pine_blocks("no code here") == []
    assert extract_pine_code("") is None
