"""Load strategy graph snapshots from JSON or YAML."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from pinegenie.builder.errors import GraphSchemaError
from pinegenie.builder.graph import StrategyGraph
from pinegenie.builder.schema import EdgeModel, GraphModel, NodeModel
from pinegenie.builder.types import Edge, Node, Position
from pinegenie.canonical import to_payload

LOGGER = logging.getLogger(__name__)

_YAML_SUFFIXES = {".yaml", ".yml"}


def load_strategy_graph(path: Path) -> StrategyGraph:
    payload = _read_payload(path)
    graph = parse_strategy_graph(payload)
    LOGGER.info(
        "Loaded strategy graph %s (%d nodes, %d edges)",
        path,
        len(graph.nodes),
        len(graph.edges),
    )
    return graph


def parse_strategy_graph(payload: Any) -> StrategyGraph:
    if not isinstance(payload, dict):
        raise GraphSchemaError("graph_root_invalid")
    try:
        model = GraphModel.model_validate(payload)
    except ValidationError as exc:
        raise GraphSchemaError(f"graph_validation_failed: {exc}") from exc

    node_ids = [node.id for node in model.nodes]
    if len(set(node_ids)) != len(node_ids):
        raise GraphSchemaError("node_id_not_unique")
    edge_ids = [edge.id for edge in model.edges]
    if len(set(edge_ids)) != len(edge_ids):
        raise GraphSchemaError("edge_id_not_unique")

    return StrategyGraph.of(
        (node_from_model(node) for node in model.nodes),
        (edge_from_model(edge) for edge in model.edges),
    )


def node_from_model(model: NodeModel) -> Node:
    return Node(
        id=model.id,
        type=model.type,
        label=model.label,
        config=dict(model.config),
        position=Position(x=model.position.x, y=model.position.y),
    )


def edge_from_model(model: EdgeModel) -> Edge:
    return Edge(id=model.id, source=model.source, target=model.target)


def _read_payload(path: Path) -> Any:
    if not path.exists():
        raise GraphSchemaError(f"graph_not_found:{path}")
    try:
        raw = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise GraphSchemaError(f"graph_encoding_invalid:{path}") from exc
    if path.suffix.lower() in _YAML_SUFFIXES:
        try:
            payload = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise GraphSchemaError(f"graph_yaml_invalid:{path}") from exc
        try:
            to_payload(payload)
        except TypeError as exc:
            raise GraphSchemaError(f"graph_yaml_unsupported_value:{path}") from exc
        return payload
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise GraphSchemaError(f"graph_json_invalid:{path}") from exc
