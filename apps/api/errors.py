from __future__ import annotations

from typing import Any

from fastapi import HTTPException

_RECOVERY_HINTS = {
    "graph_invalid": "Fix the nodes/edges payload (unique ids, known node types) and retry.",
    "node_not_found": "Use the id of a node present in the submitted graph.",
    "strategy_type_invalid": "Use one of the listed strategy types.",
    "pattern_catalog_invalid": "Fix the PINEGENIE_PATTERNS catalog file and restart the API.",
    "feedback_config_invalid": "Fix the PINEGENIE_CONFIG file and restart the API.",
    "validation_error": "Fix the request body to match the documented schema and retry.",
}


def _as_dict(value: object) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def build_error_envelope(
    code: str, message: str, details: dict[str, Any] | None = None
) -> dict[str, Any]:
    normalized = _as_dict(details)
    human_message = normalized.get("human_message")
    if not isinstance(human_message, str) or not human_message.strip():
        human_message = message
    return {
        "error_code": code,
        "human_message": human_message,
        "recovery_hint": _RECOVERY_HINTS.get(code, "Check API logs, then retry."),
    }


def build_error_payload(
    code: str, message: str, details: dict[str, Any] | None = None
) -> dict[str, Any]:
    normalized = _as_dict(details)
    envelope = build_error_envelope(code, message, normalized)
    payload = {
        "code": code,
        "message": message,
        "details": normalized,
        "error_envelope": envelope,
    }
    payload["error"] = {
        "code": code,
        "message": message,
        "details": normalized,
        "envelope": envelope,
    }
    return payload


def raise_api_error(
    status_code: int, code: str, message: str, details: dict[str, Any] | None = None
) -> None:
    raise HTTPException(
        status_code=status_code,
        detail=build_error_payload(code, message, details),
    )
