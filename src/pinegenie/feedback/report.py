"""Tabular export of validation findings."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from pinegenie.feedback.errors import FeedbackError
from pinegenie.feedback.types import ValidationFeedback

LOGGER = logging.getLogger(__name__)

FINDINGS_COLUMNS = [
    "kind",
    "id",
    "type",
    "level",
    "message",
    "description",
    "node_id",
    "edge_id",
]


def findings_frame(feedback: ValidationFeedback) -> pd.DataFrame:
    """Flatten errors, warnings and suggestions into one row per finding.

    ``level`` holds the error severity, the warning impact or the suggestion
    priority. Rows keep validation order: errors, then warnings, then
    suggestions.
    """

    rows: list[dict[str, object]] = []
    for error in feedback.errors:
        rows.append(
            {
                "kind": "error",
                "id": error.id,
                "type": error.type.value,
                "level": error.severity.value,
                "message": error.message,
                "description": error.description,
                "node_id": error.node_id,
                "edge_id": error.edge_id,
            }
        )
    for warning in feedback.warnings:
        rows.append(
            {
                "kind": "warning",
                "id": warning.id,
                "type": warning.type.value,
                "level": warning.impact.value,
                "message": warning.message,
                "description": warning.description,
                "node_id": warning.node_id,
                "edge_id": warning.edge_id,
            }
        )
    for suggestion in feedback.suggestions:
        rows.append(
            {
                "kind": "suggestion",
                "id": suggestion.id,
                "type": suggestion.type.value,
                "level": suggestion.priority.value,
                "message": suggestion.message,
                "description": suggestion.description,
                "node_id": None,
                "edge_id": None,
            }
        )
    return pd.DataFrame(rows, columns=FINDINGS_COLUMNS)


def summarize_findings(frame: pd.DataFrame) -> dict[str, int]:
    if frame.empty:
        return {}
    counts = frame.groupby("kind").size()
    return {str(kind): int(count) for kind, count in counts.items()}


def write_findings(frame: pd.DataFrame, path: Path) -> Path:
    out_path = Path(path)
    suffix = out_path.suffix.lower()
    if suffix not in {".csv", ".parquet"}:
        raise FeedbackError(f"report_format_unsupported:{suffix or 'none'}")
    out_path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".csv":
        frame.to_csv(out_path, index=False)
    else:
        frame.to_parquet(out_path, engine="pyarrow", index=False)
    LOGGER.info("Wrote %d findings to %s", len(frame), out_path)
    return out_path
