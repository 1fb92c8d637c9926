from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from apps.api.main import app
from tests.fixtures.graph_factory import graph_payload, make_complete_strategy, make_edge


@pytest.fixture()
def client() -> TestClient:
    return TestClient(app)


def _strategy(with_risk: bool = True) -> dict:
    nodes, edges = make_complete_strategy(with_risk=with_risk)
    return graph_payload(nodes, edges)


def test_health(client: TestClient) -> None:
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert client.get("/api/health").status_code == 200


def test_validate_complete_strategy(client: TestClient) -> None:
    response = client.post("/api/v1/strategy/validate", json=_strategy())

    assert response.status_code == 200
    payload = response.json()
    assert payload["isValid"] is True
    assert payload["errors"] == []
    assert payload["completeness"] == 100
    assert payload["summary"] == {"suggestion": 3}


def test_validate_reports_errors_as_data(client: TestClient) -> None:
    nodes, edges = make_complete_strategy()
    edges.append(make_edge("buy", "ghost", "dangling"))

    response = client.post("/api/strategy/validate", json=graph_payload(nodes, edges))

    assert response.status_code == 200
    payload = response.json()
    assert payload["isValid"] is False
    assert payload["errors"][0]["fixAction"]["type"] == "remove-edge"
    assert payload["summary"]["error"] == 1


def test_validate_accepts_canvas_nodes(client: TestClient) -> None:
    body = {
        "nodes": [
            {"id": "n1", "type": "custom", "data": {"type": "data-source", "label": "BTC"}},
        ],
        "edges": [],
    }
    response = client.post("/api/v1/strategy/validate", json=body)
    assert response.status_code == 200
    ids = [error["id"] for error in response.json()["errors"]]
    assert ids == ["missing-entry-condition", "missing-exit-action"]


def test_duplicate_node_ids_rejected(client: TestClient) -> None:
    body = _strategy()
    body["nodes"].append(dict(body["nodes"][0]))

    response = client.post("/api/v1/strategy/validate", json=body)

    assert response.status_code == 422
    payload = response.json()
    assert payload["code"] == "graph_invalid"
    assert payload["details"] == {"reason": "node_id_not_unique"}
    assert payload["error_envelope"]["error_code"] == "graph_invalid"


def test_unknown_node_type_is_validation_error(client: TestClient) -> None:
    body = {"nodes": [{"id": "n1", "type": "oracle"}], "edges": []}
    response = client.post("/api/v1/strategy/validate", json=body)
    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"


def test_suggestions_for_selected_node(client: TestClient) -> None:
    body = {**_strategy(with_risk=False), "selectedNodeId": "buy"}

    response = client.post("/api/v1/strategy/suggestions", json=body)

    assert response.status_code == 200
    suggestions = response.json()
    assert [item["id"] for item in suggestions] == ["add-risk-management"]
    node = suggestions[0]["suggestedNodes"][0]
    assert node["type"] == "risk"
    assert node["position"] == {"x": 600.0, "y": 100.0}


def test_suggestions_unknown_selected_node(client: TestClient) -> None:
    body = {**_strategy(), "selectedNodeId": "missing"}
    response = client.post("/api/v1/strategy/suggestions", json=body)
    assert response.status_code == 404
    assert response.json()["code"] == "node_not_found"


def test_best_practices_and_improvements(client: TestClient) -> None:
    practices = client.post("/api/v1/strategy/best-practices", json=_strategy())
    assert [item["id"] for item in practices.json()] == [
        "keep-it-simple",
        "test-thoroughly",
        "avoid-over-optimization",
    ]

    improvements = client.post("/api/v1/strategy/improvements", json=_strategy(with_risk=False))
    first = improvements.json()[0]
    assert first["id"] == "add-risk-management"
    assert first["priority"] == "critical"
    assert first["implementation"]["steps"][0]["stepNumber"] == 1


def test_impact_endpoint(client: TestClient) -> None:
    body = {**_strategy(), "change": {"type": "node-removed", "nodeId": "stop"}}
    response = client.post("/api/v1/strategy/impact", json=body)
    assert response.status_code == 200
    payload = response.json()
    assert payload["overallImpact"] == "medium"
    assert payload["impactAreas"][0]["area"] == "risk"

    neutral = client.post(
        "/api/v1/strategy/impact", json={**_strategy(), "change": {"type": "node-renamed"}}
    )
    assert neutral.json()["impactAreas"] == []


def test_tips_endpoint(client: TestClient) -> None:
    body = {**_strategy(with_risk=False), "userLevel": "intermediate", "selectedNodeId": "rsi"}
    response = client.post("/api/v1/strategy/tips", json=body)
    assert [tip["id"] for tip in response.json()] == [
        "indicator-combinations",
        "add-risk-management",
        "rsi-usage",
    ]

    bad_level = client.post("/api/v1/strategy/tips", json={**body, "userLevel": "guru"})
    assert bad_level.status_code == 422


def test_match_and_list_patterns(client: TestClient) -> None:
    response = client.post("/api/v1/patterns/match", json={"text": "Buy when RSI is below 30"})
    assert response.status_code == 200
    assert response.json()["matches"][0]["pattern"]["id"] == "rsi_oversold_overbought"

    scalping = client.get("/api/v1/patterns", params={"strategy_type": "scalping"})
    assert [item["id"] for item in scalping.json()] == ["quick_scalp"]
    assert scalping.json()[0]["strategyType"] == "scalping"

    invalid = client.get("/api/v1/patterns", params={"strategy_type": "arbitrage"})
    assert invalid.status_code == 400
    assert invalid.json()["code"] == "strategy_type_invalid"

    out_of_range = client.post("/api/v1/patterns/match", json={"text": "x", "minConfidence": 1.5})
    assert out_of_range.status_code == 422


def test_custom_pattern_catalog_from_env(
    client: TestClient, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    catalog = tmp_path / "patterns.yaml"
    catalog.write_text(
        """
schema_version: "1"
patterns:
  - id: vwap_reclaim
    name: VWAP Reclaim
    strategy_type: custom
    keywords: [vwap]
    required_elements: ["action:buy_sell"]
""".strip(),
        encoding="utf-8",
    )
    monkeypatch.setenv("PINEGENIE_PATTERNS", str(catalog))

    custom = client.get("/api/v1/patterns", params={"strategy_type": "custom"})
    assert [item["id"] for item in custom.json()] == ["multi_indicator", "vwap_reclaim"]

    monkeypatch.setenv("PINEGENIE_PATTERNS", str(tmp_path / "missing.yaml"))
    broken = client.get("/api/v1/patterns")
    assert broken.status_code == 400
    assert broken.json()["code"] == "pattern_catalog_invalid"


def test_feedback_config_from_env(
    client: TestClient, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    config = tmp_path / "feedback.yaml"
    config.write_text("complexity_threshold: 3\n", encoding="utf-8")
    monkeypatch.setenv("PINEGENIE_CONFIG", str(config))

    response = client.post("/api/v1/strategy/validate", json=_strategy())
    assert [warning["id"] for warning in response.json()["warnings"]] == ["high-complexity"]

    config.write_text("complexity_threshold: nope\n", encoding="utf-8")
    broken = client.post("/api/v1/strategy/validate", json=_strategy())
    assert broken.status_code == 400
    assert broken.json()["code"] == "feedback_config_invalid"


def test_analyze_strategy(client: TestClient) -> None:
    response = client.post("/api/v1/strategy/analyze", json=_strategy(with_risk=False))

    assert response.status_code == 200
    payload = response.json()
    assert payload["completeness"]["score"] == 100
    assert payload["completeness"]["requiredConnections"][0] == {
        "source": "data",
        "target": "rsi",
        "type": "required",
        "reason": "Data source must feed into indicators or conditions",
    }
    gap = payload["gaps"][0]
    assert gap["id"] == "missing-risk-management"
    assert gap["autoFixable"] is True
    assert gap["suggestedNodes"][0]["config"] == {"stopLoss": 2, "maxRisk": 1}
    assert payload["riskAssessment"]["overallRisk"] == "medium"
    assert payload["riskAssessment"]["score"] == 46
    assert payload["compatibility"]["overallCompatibility"] == 100
    assert payload["performance"]["complexity"] == 17
    assert payload["confidence"] == 1.0
