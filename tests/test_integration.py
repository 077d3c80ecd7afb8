import pytest
from fastapi.testclient import TestClient

from src.corridor.data.road_graph import InMemoryRoadGraph
from src.corridor.main import create_app
from src.corridor.models.domain import Node, RoadEdge


def _straight_road() -> InMemoryRoadGraph:
    nodes = [Node(1, 0.0, -0.0045), Node(2, 0.0, 0.0045)]
    pillars = tuple((0.0, round(i * 0.0009, 4)) for i in range(-4, 5))
    return InMemoryRoadGraph(nodes, [RoadEdge(edge_id=1, base_node=1, adj_node=2, pillars=pillars, name="Main Street")])


@pytest.fixture
def api_client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    from src.corridor.services.buffer import service as buffer_service

    graph = _straight_road()
    monkeypatch.setattr(buffer_service, "load_road_graph", lambda: graph)
    return TestClient(create_app())


def test_root_describes_service(api_client: TestClient):
    response = api_client.get("/")
    assert response.status_code == 200
    assert response.json()["buffer"] == "/api/buffer"


def test_health_endpoint(api_client: TestClient):
    response = api_client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_get_buffer(api_client: TestClient):
    response = api_client.get(
        "/api/buffer",
        params={"point": "0.0,0.0", "roadName": "Main St", "thresholdDistance": 500},
    )

    assert response.status_code == 200
    assert "X-Took" in response.headers
    body = response.json()
    assert body["type"] == "FeatureCollection"
    assert body["copyrights"] == ["OpenStreetMap contributors"]
    assert len(body["features"]) == 2
    assert body["features"][1]["geometry"]["coordinates"][-1] == [0.0036, 0.0]


def test_get_buffer_with_direction(api_client: TestClient):
    response = api_client.get(
        "/api/buffer",
        params={"point": "0,0", "roadName": "main street", "thresholdDistance": 500, "direction": "east"},
    )

    assert response.status_code == 200
    features = response.json()["features"]
    assert len(features) == 1
    assert features[0]["geometry"]["coordinates"][-1] == [0.0036, 0.0]


def test_post_buffer_accepts_camel_case_body(api_client: TestClient):
    response = api_client.post(
        "/api/buffer",
        json={"latitude": 0.0, "longitude": 0.0, "roadName": "Main St", "thresholdDistance": 300},
    )

    assert response.status_code == 200
    assert len(response.json()["features"]) == 2


@pytest.mark.parametrize(
    "params, expected_status",
    [
        ({"point": "0,0", "roadName": "Main St", "thresholdDistance": 2000}, 422),
        ({"point": "0,0", "roadName": "Main St", "thresholdDistance": 500, "queryMultiplier": 2}, 400),
        ({"point": "0,0", "roadName": "Main St", "thresholdDistance": 500, "queryMultiplier": 0}, 400),
        ({"point": "nowhere", "roadName": "Main St", "thresholdDistance": 500}, 400),
        ({"point": "95,0", "roadName": "Main St", "thresholdDistance": 500}, 400),
        ({"point": "0,0", "roadName": "Elm Road", "thresholdDistance": 500}, 404),
        ({"point": "0,0", "roadName": "Main St", "thresholdDistance": 1}, 422),
    ],
)
def test_get_buffer_errors(api_client: TestClient, params: dict, expected_status: int):
    response = api_client.get("/api/buffer", params=params)

    assert response.status_code == expected_status
    assert response.json()["detail"]


def test_graph_health_reports_edge_count(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from src.corridor.data import graph_repository

    monkeypatch.setattr(graph_repository, "load_road_graph", _straight_road)

    response = api_client.get("/api/health/graph")

    assert response.status_code == 200
    assert response.json() == {"service": "graph", "healthy": True, "edges": 1}


def test_graph_health_reports_missing_file(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from src.corridor.data import graph_repository

    def _missing():
        raise FileNotFoundError("Road graph file not found: nowhere.geojson")

    monkeypatch.setattr(graph_repository, "load_road_graph", _missing)

    body = api_client.get("/api/health/graph").json()

    assert body["healthy"] is False
    assert "not found" in body["error"]


def test_post_buffer_rejects_non_string_direction(api_client: TestClient):
    response = api_client.post(
        "/api/buffer",
        json={"latitude": 0.0, "longitude": 0.0, "roadName": "Main St", "thresholdDistance": 300, "direction": 5},
    )

    assert response.status_code == 422


def test_get_buffer_uses_configured_query_multiplier(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from src.corridor.config import settings

    monkeypatch.setattr(settings, "default_query_multiplier", 2.0)

    response = api_client.get("/api/buffer", params={"point": "0,0", "roadName": "Main St", "thresholdDistance": 500})

    assert response.status_code == 400
    assert "too high" in response.json()["detail"]
