"""Chat-side helpers: code block extraction and request routing."""

from pinegenie.chat.codeblocks import extract_pine_blocks, extract_pine_code
from pinegenie.chat.router import INTENTS, RouteResult, route_request

__all__ = ["INTENTS", "RouteResult", "extract_pine_blocks", "extract_pine_code", "route_request"]
