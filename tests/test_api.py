"""Tests for the HTTP surface: POST /context, GET /node-types, GET /health."""

from datetime import timedelta
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from event_context.domain.request import ResolvedRequest
from event_context.main import app, store

from tests.test_node import _NOW, _event_node, _image_node


@pytest.fixture(scope="module")
def client():
    store.add_node("api-test", _event_node("/aktionen/past", _NOW - timedelta(days=1), title="Past"))
    store.add_node("api-test", _event_node("/aktionen/next", _NOW + timedelta(days=3), title="Next"))
    store.add_node("api-test", _image_node("/aktionen/past/photo"))
    with TestClient(app) as client:
        yield client


def _request_id(node_path: str = "/termine", **query) -> int:
    return store.add_request(
        ResolvedRequest(site="api-test", node_path=node_path, locale="en", query=query)
    )


def _frozen():
    return patch("event_context.core.assembler.utc_now", return_value=_NOW)


class TestContextEndpoint:
    def test_event_list(self, client: TestClient) -> None:
        with _frozen():
            resp = client.post(
                "/context",
                json={"request_id": _request_id(), "node_type": "events.Events"},
            )
        assert resp.status_code == 200
        body = resp.json()
        assert "Next" in body["fragments"]["EventList"]
        assert "/aktionen/past/photo/" in body["fragments"]["EventList"]
        assert body["cache"]["dependency"] == {"node_path": "/termine", "descend": 2}
        assert body["cache"]["expire_at"].startswith("2026-01-04T12:00:00")

    def test_event_images(self, client: TestClient) -> None:
        resp = client.post(
            "/context",
            json={"request_id": _request_id("/aktionen/past"), "node_type": "events.Event"},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert "/aktionen/past/photo/" in body["fragments"]["EventImages"]
        assert body["cache"] == {
            "dependency": {"node_path": "/aktionen/past", "descend": 1},
            "expire_at": None,
        }

    def test_embedded_list(self, client: TestClient) -> None:
        with _frozen():
            resp = client.post(
                "/context",
                json={
                    "request_id": _request_id(),
                    "node_type": "events.Events",
                    "embed": {"uri": "/termine/?past"},
                },
            )
        assert resp.status_code == 200
        html = resp.json()["fragments"]["EventList"]
        assert "Next" not in html
        assert "embedded" in html

    def test_malformed_embed_uri_is_bad_request(self, client: TestClient) -> None:
        resp = client.post(
            "/context",
            json={
                "request_id": _request_id(),
                "node_type": "events.Events",
                "embed": {"uri": "http://[::1/termine/"},
            },
        )
        assert resp.status_code == 400
        assert "parse embed URI" in resp.json()["detail"]

    def test_unknown_request_is_not_found(self, client: TestClient) -> None:
        resp = client.post("/context", json={"request_id": 987654, "node_type": "events.Events"})
        assert resp.status_code == 404
        assert "get request" in resp.json()["detail"]

    def test_enumeration_failure_is_server_error(self, client: TestClient) -> None:
        resp = client.post(
            "/context",
            json={"request_id": _request_id("/missing"), "node_type": "events.Event"},
        )
        assert resp.status_code == 500
        assert "fetch images" in resp.json()["detail"]

    def test_unknown_node_type(self, client: TestClient) -> None:
        resp = client.post(
            "/context",
            json={"request_id": _request_id(), "node_type": "core.Document"},
        )
        assert resp.status_code == 404

    def test_invalid_body_rejected(self, client: TestClient) -> None:
        resp = client.post("/context", json={"node_type": "events.Events"})
        assert resp.status_code == 422


class TestNodeTypesAndHealth:
    def test_node_types_registered_on_startup(self, client: TestClient) -> None:
        resp = client.get("/node-types")
        assert resp.status_code == 200
        ids = [nt["id"] for nt in resp.json()["node_types"]]
        assert ids == ["events.Event", "events.Events"]

    def test_start_time_field_is_required(self, client: TestClient) -> None:
        event = client.get("/node-types").json()["node_types"][0]
        start = next(f for f in event["fields"] if f["id"] == "events.StartTime")
        assert start["required"] is True
        assert start["type"] == "DateTime"
        assert event["addable_to"] == ["events.Events"]

    def test_health(self, client: TestClient) -> None:
        body = client.get("/health").json()
        assert body["status"] == "ok"
        assert sorted(body["handled_node_types"]) == ["events.Event", "events.Events"]
        assert "events.Event" in body["registered_node_types"]


class TestRequestsEndpoint:
    def test_registered_request_resolves_in_context(self, client: TestClient) -> None:
        created = client.post(
            "/requests",
            json={"site": "api-test", "node_path": "/termine", "locale": "en", "query": {"upcoming": [""]}},
        )
        assert created.status_code == 201
        request_id = created.json()["request_id"]

        with _frozen():
            resp = client.post("/context", json={"request_id": request_id, "node_type": "events.Events"})
        assert resp.status_code == 200
        html = resp.json()["fragments"]["EventList"]
        assert "Next" in html
        assert "Past events" not in html

    def test_invalid_request_rejected(self, client: TestClient) -> None:
        resp = client.post("/requests", json={"node_path": "/termine"})
        assert resp.status_code == 422
