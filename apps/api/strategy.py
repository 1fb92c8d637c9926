from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Query
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from pinegenie.builder.graph import StrategyGraph
from pinegenie.builder.loader import edge_from_model, node_from_model
from pinegenie.builder.schema import EdgeModel, NodeModel
from pinegenie.builder.types import Node
from pinegenie.canonical import to_payload
from pinegenie.feedback.config import config_from_env
from pinegenie.feedback.errors import FeedbackConfigError
from pinegenie.feedback.report import findings_frame, summarize_findings
from pinegenie.feedback.system import FeedbackSystem
from pinegenie.feedback.types import EducationalContext, StrategyChange, UserLevel
from pinegenie.patterns.catalog import DEFAULT_CATALOG, PatternCatalog
from pinegenie.patterns.errors import PatternCatalogError
from pinegenie.patterns.matcher import PatternMatcher
from pinegenie.patterns.parser import load_pattern_catalog

from .errors import raise_api_error

LOGGER = logging.getLogger(__name__)

router = APIRouter()
PATTERNS_ENV = "PINEGENIE_PATTERNS"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class StrategyRequest(_CamelModel):
    nodes: list[NodeModel] = Field(default_factory=list)
    edges: list[EdgeModel] = Field(default_factory=list)


class SuggestionsRequest(StrategyRequest):
    selected_node_id: str | None = None


class ChangeModel(_CamelModel):
    type: str
    node_id: str | None = None
    edge_id: str | None = None
    old_value: Any = None
    new_value: Any = None


class ImpactRequest(StrategyRequest):
    change: ChangeModel


class TipsRequest(StrategyRequest):
    user_level: UserLevel = UserLevel.BEGINNER
    selected_node_id: str | None = None
    focus_area: str | None = None


class MatchRequest(_CamelModel):
    text: str
    min_confidence: float = Field(default=0.3, ge=0.0, lt=1.0)


def _feedback_system() -> FeedbackSystem:
    try:
        config = config_from_env()
    except FeedbackConfigError as exc:
        LOGGER.error("Invalid feedback config: %s", exc)
        raise_api_error(400, "feedback_config_invalid", "Feedback config is invalid", {"reason": str(exc)})
    return FeedbackSystem(config)


def _catalog() -> PatternCatalog:
    raw = os.getenv(PATTERNS_ENV, "").strip()
    if not raw:
        return DEFAULT_CATALOG
    try:
        return load_pattern_catalog(Path(raw))
    except PatternCatalogError as exc:
        LOGGER.error("Invalid pattern catalog: %s", exc)
        raise_api_error(400, "pattern_catalog_invalid", "Pattern catalog is invalid", {"reason": str(exc)})


def _graph(request: StrategyRequest) -> StrategyGraph:
    node_ids = [node.id for node in request.nodes]
    if len(set(node_ids)) != len(node_ids):
        raise_api_error(422, "graph_invalid", "Node ids must be unique", {"reason": "node_id_not_unique"})
    edge_ids = [edge.id for edge in request.edges]
    if len(set(edge_ids)) != len(edge_ids):
        raise_api_error(422, "graph_invalid", "Edge ids must be unique", {"reason": "edge_id_not_unique"})
    return StrategyGraph.of(
        (node_from_model(node) for node in request.nodes),
        (edge_from_model(edge) for edge in request.edges),
    )


def _selected(graph: StrategyGraph, node_id: str | None) -> Node | None:
    if node_id is None:
        return None
    node = graph.get_node(node_id)
    if node is None:
        raise_api_error(404, "node_not_found", "Selected node is not in the graph", {"node_id": node_id})
    return node


@router.post("/strategy/validate")
def validate(request: StrategyRequest) -> dict[str, Any]:
    graph = _graph(request)
    feedback = _feedback_system().validate_strategy(graph.nodes, graph.edges)
    payload = to_payload(feedback)
    payload["summary"] = summarize_findings(findings_frame(feedback))
    return payload


@router.post("/strategy/suggestions")
def suggestions(request: SuggestionsRequest) -> list[dict[str, Any]]:
    graph = _graph(request)
    selected = _selected(graph, request.selected_node_id)
    return to_payload(_feedback_system().get_contextual_suggestions(selected, graph.nodes, graph.edges))


@router.post("/strategy/best-practices")
def best_practices(request: StrategyRequest) -> list[dict[str, Any]]:
    graph = _graph(request)
    return to_payload(_feedback_system().get_best_practice_recommendations(graph.nodes, graph.edges))


@router.post("/strategy/improvements")
def improvements(request: StrategyRequest) -> list[dict[str, Any]]:
    graph = _graph(request)
    return to_payload(_feedback_system().generate_improvements(graph.nodes, graph.edges))


@router.post("/strategy/analyze")
def analyze(request: StrategyRequest) -> dict[str, Any]:
    graph = _graph(request)
    return to_payload(_feedback_system().analyze_strategy(graph.nodes, graph.edges))


@router.post("/strategy/impact")
def impact(request: ImpactRequest) -> dict[str, Any]:
    graph = _graph(request)
    change = StrategyChange(
        type=request.change.type,
        node_id=request.change.node_id,
        edge_id=request.change.edge_id,
        old_value=request.change.old_value,
        new_value=request.change.new_value,
    )
    return to_payload(_feedback_system().analyze_performance_impact(change, graph.nodes, graph.edges))


@router.post("/strategy/tips")
def tips(request: TipsRequest) -> list[dict[str, Any]]:
    graph = _graph(request)
    context = EducationalContext(
        current_nodes=graph.nodes,
        selected_node=_selected(graph, request.selected_node_id),
        user_level=request.user_level,
        focus_area=request.focus_area,
    )
    return to_payload(_feedback_system().get_educational_tips(context))


@router.post("/patterns/match")
def match_patterns(request: MatchRequest) -> dict[str, Any]:
    matcher = PatternMatcher(catalog=_catalog(), min_confidence=request.min_confidence)
    matches = matcher.match_text(request.text)
    return {"text": request.text, "matches": to_payload(matches)}


@router.get("/patterns")
def list_patterns(strategy_type: str | None = Query(default=None)) -> list[dict[str, Any]]:
    catalog = _catalog()
    if strategy_type is None:
        return to_payload(catalog.all_patterns())
    try:
        patterns = catalog.by_type(strategy_type)
    except PatternCatalogError:
        raise_api_error(
            400,
            "strategy_type_invalid",
            "Unknown strategy type",
            {"strategy_type": strategy_type},
        )
    return to_payload(patterns)
