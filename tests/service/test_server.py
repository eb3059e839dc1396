"""
API Server Tests

Exercised through FastAPI's TestClient; the admin API behind the
subscription endpoint is an httpx.MockTransport.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from chainview.config import ServiceConfig
from chainview_service.client import PreviewClient
from chainview_service.server import app, get_preview_client

from tests.fixtures import preview_payload, rule_payload


@pytest.fixture
def api():
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def override_admin_api(handler):
    config = ServiceConfig(base_url="http://admin.test", access_token="t")
    app.dependency_overrides[get_preview_client] = lambda: PreviewClient(
        config, transport=httpx.MockTransport(handler)
    )


class TestHealth:

    def test_health(self, api):
        assert api.get("/health").json() == {"status": "online"}


class TestGraphEndpoint:

    def test_graph_from_preview(self, api):
        response = api.post("/api/v1/graph", json=preview_payload())
        assert response.status_code == 200
        body = response.json()
        graph = body["graph"]

        assert body["subscriptionName"] == "Main"
        assert body["emptyMessage"] is None
        assert graph["ruleCount"] == 2
        assert graph["availability"] == "present"
        assert len(graph["nodes"]) == (3 + 2) + (3 + 0)
        assert len(graph["edges"]) == (2 + 2) + (2 + 0)

    def test_node_shape(self, api):
        graph = api.post("/api/v1/graph", json=preview_payload()).json()["graph"]
        hop = next(n for n in graph["nodes"] if n["id"] == "hop-0-0")
        assert hop["role"] == "hop"
        assert hop["position"] == {"x": 250.0, "y": 60.0}
        assert hop["kind"] == "template_group"
        assert hop["displayState"] == "active"
        assert hop["payload"]["kind"] == "template_group"
        covered = next(n for n in graph["nodes"] if n["id"] == "user-1")
        assert covered["fullyCovered"] is True
        assert covered["payload"] is None

    def test_bare_rule_array(self, api):
        body = api.post("/api/v1/graph", json=[rule_payload()]).json()
        assert body["graph"]["ruleCount"] == 1
        assert body["subscriptionName"] == ""

    def test_empty_rules(self, api):
        body = api.post("/api/v1/graph", json={"rules": None}).json()
        assert body["graph"]["availability"] == "empty"
        assert body["graph"]["nodes"] == []
        assert body["emptyMessage"] == "No chain proxy rules configured"

    def test_degradations_reported(self, api):
        links = [{"type": "mystery", "name": "?"}]
        body = api.post("/api/v1/graph", json=[rule_payload(links=links)]).json()
        assert body["degradations"] == [
            {"code": "UNKNOWN_HOP_KIND", "message": "unknown hop type 'mystery'", "ruleIndex": 0}
        ]
        hop = next(n for n in body["graph"]["nodes"] if n["id"] == "hop-0-0")
        assert hop["kind"] == "unknown"


class TestOverlayEndpoint:

    def test_flip_near_right_edge(self, api):
        response = api.post("/api/v1/overlay/position", json={
            "anchor": {"left": 1190, "top": 50, "width": 10, "height": 30},
            "viewport": {"width": 1200, "height": 800},
            "overlay": {"width": 400, "height": 300},
            "margin": 20,
        })
        body = response.json()
        assert response.status_code == 200
        assert body["x"] <= 780
        assert body["fits"] is True

    def test_size_from_member_count(self, api):
        body = api.post("/api/v1/overlay/position", json={
            "anchor": {"left": 100, "top": 100, "width": 100, "height": 50},
            "viewport": {"width": 1200, "height": 800},
            "memberCount": 2,
        }).json()
        assert body == {"x": 210.0, "y": 100.0, "width": 400.0, "height": 172.0, "fits": True}

    def test_invalid_viewport(self, api):
        response = api.post("/api/v1/overlay/position", json={
            "anchor": {"left": 0, "top": 0},
            "viewport": {"width": -5, "height": 800},
        })
        assert response.status_code == 422


class TestSubscriptionEndpoint:

    def test_fetch_and_build(self, api):
        def handler(request):
            assert request.url.path == "/api/v1/subcription/9/chain-rules/preview"
            return httpx.Response(200, json={"code": 200, "data": preview_payload()})

        override_admin_api(handler)
        body = api.get("/api/v1/subscriptions/9/graph").json()
        assert body["graph"]["ruleCount"] == 2

    def test_admin_failure_is_bad_gateway(self, api):
        override_admin_api(lambda request: httpx.Response(200, json={"code": 500, "msg": "boom"}))
        response = api.get("/api/v1/subscriptions/9/graph")
        assert response.status_code == 502
        assert response.json()["detail"] == "boom"
