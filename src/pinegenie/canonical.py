"""JSON payloads for analyzer results.

``to_payload`` turns result dataclasses into plain JSON data with camelCase
keys (``isValid``, ``autoFixable``, ``nodeId``...). Dataclass fields holding
``None`` are omitted. Mapping keys such as node configs are kept verbatim.
Dates render as ISO 8601 strings. ``dumps`` sorts keys so two runs over the
same snapshot can be compared byte for byte.
"""

from __future__ import annotations

import dataclasses
import json
from datetime import date, time
from enum import Enum
from typing import Any, Mapping


def camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def to_payload(value: Any) -> Any:
    if isinstance(value, Enum):
        return to_payload(value.value)
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, (date, time)):
        return value.isoformat()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        payload: dict[str, Any] = {}
        for item in dataclasses.fields(value):
            field_value = getattr(value, item.name)
            if field_value is None:
                continue
            payload[camel_case(item.name)] = to_payload(field_value)
        return payload
    if isinstance(value, Mapping):
        return {str(key): to_payload(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        items = [to_payload(item) for item in value]
        if isinstance(value, (set, frozenset)):
            items.sort(key=str)
        return items
    raise TypeError(f"Unsupported type for payload: {type(value).__name__}")


def dumps(obj: Any, indent: int | None = 2) -> str:
    return json.dumps(to_payload(obj), indent=indent, ensure_ascii=False, sort_keys=True)
