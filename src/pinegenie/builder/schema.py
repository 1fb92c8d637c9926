"""Pydantic schema for builder graph snapshots."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pinegenie.builder.types import NodeType


class PositionModel(BaseModel):
    x: float = 0.0
    y: float = 0.0

    model_config = ConfigDict(extra="ignore")


class NodeModel(BaseModel):
    id: str = Field(min_length=1)
    type: NodeType
    label: str = ""
    config: dict[str, Any] = Field(default_factory=dict)
    position: PositionModel = Field(default_factory=PositionModel)

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _unwrap_data(cls, value: Any) -> Any:
        # Canvas nodes carry their semantic fields under ``data``; the outer
        # ``type`` is the renderer name and is ignored when ``data.type`` exists.
        if not isinstance(value, dict):
            return value
        data = value.get("data")
        if not isinstance(data, dict):
            return value
        merged = {key: item for key, item in value.items() if key != "data"}
        for key in ("type", "label", "config"):
            if key in data and data[key] is not None:
                merged[key] = data[key]
        if "id" not in merged and "id" in data:
            merged["id"] = data["id"]
        return merged


class EdgeModel(BaseModel):
    id: str = Field(min_length=1)
    source: str
    target: str

    model_config = ConfigDict(extra="ignore")


class GraphModel(BaseModel):
    nodes: list[NodeModel] = Field(default_factory=list)
    edges: list[EdgeModel] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")
