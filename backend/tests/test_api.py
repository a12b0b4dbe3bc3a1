# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
API tests for workflow routes
Tests CRUD, buffered and streamed runs, and history
"""

from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

from nodeflow.main import create_app
from tests.helpers import parse_frames


@pytest.fixture
def client(test_config):
    """TestClient with lifespan (stores initialized in a temp dir), routes at the root"""
    with TestClient(create_app(replace(test_config, api_prefix=""))) as client:
        yield client


def wire_workflow(name="demo", with_output=True, script="'${input}'.upper()"):
    nodes = [
        {"id": "in", "type": "input", "position": {"x": 0, "y": 0}, "config": {"input": "${input}"}},
        {"id": "up", "type": "lua-script", "position": {"x": 100, "y": 0}, "config": {"script": script}},
    ]
    edges = [{"source": "in", "target": "up"}]
    if with_output:
        nodes.append({"id": "out", "type": "output", "position": {"x": 200, "y": 0}, "config": {"output": "${input}"}})
        edges.append({"source": "up", "target": "out"})
    return {"name": name, "nodes": nodes, "edges": edges}


class TestSystem:
    """Health and version"""

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_version_lists_node_kinds(self, client):
        body = client.get("/system/version").json()
        assert "lua-script" in body["node_kinds"]

    def test_default_api_prefix(self, test_config):
        with TestClient(create_app(test_config)) as client:
            assert client.get("/api/health").status_code == 200
            assert client.get("/api/workflows").json() == []
            assert client.get("/health").status_code == 404


class TestWorkflowCrud:
    """Create, read, update, delete"""

    def test_create_and_get(self, client):
        created = client.post("/workflow", json=wire_workflow()).json()

        assert created["id"]
        assert created["createdAt"] and created["updatedAt"]
        assert created["nodes"][0]["type"] == "input"

        fetched = client.get(f"/workflow/{created['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["name"] == "demo"

    def test_list_newest_first(self, client):
        client.post("/workflow", json=wire_workflow(name="first"))
        client.post("/workflow", json=wire_workflow(name="second"))

        names = [w["name"] for w in client.get("/workflows").json()]
        assert names == ["second", "first"]

    def test_update(self, client):
        created = client.post("/workflow", json=wire_workflow()).json()
        created["name"] = "renamed"

        updated = client.post("/workflow", json=created)

        assert updated.status_code == 200
        assert updated.json()["id"] == created["id"]
        assert updated.json()["createdAt"] == created["createdAt"]
        assert client.get(f"/workflow/{created['id']}").json()["name"] == "renamed"

    def test_update_unknown_is_404(self, client):
        body = wire_workflow()
        body["id"] = "does-not-exist"

        assert client.post("/workflow", json=body).status_code == 404

    def test_malformed_body_is_422(self, client):
        assert client.post("/workflow", json={"nodes": "nope"}).status_code == 422

    def test_get_unknown_is_404(self, client):
        assert client.get("/workflow/missing").status_code == 404

    def test_delete(self, client):
        created = client.post("/workflow", json=wire_workflow()).json()

        assert client.delete(f"/workflow/{created['id']}").status_code == 204
        assert client.get("/workflows").json() == []
        assert client.delete(f"/workflow/{created['id']}").status_code == 404


class TestRuns:
    """Buffered and streamed execution"""

    def test_buffered_run_with_output_node(self, client):
        created = client.post("/workflow", json=wire_workflow()).json()

        response = client.get(f"/workflow/{created['id']}/run", params={"input": "hello"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "HELLO"

        history = client.get(f"/workflow/{created['id']}/history").json()
        assert len(history) == 1
        assert history[0]["workflowId"] == created["id"]
        assert history[0]["status"] == "completed"

    def test_streamed_run_without_output_node(self, client):
        created = client.post("/workflow", json=wire_workflow(with_output=False)).json()

        response = client.get(f"/workflow/{created['id']}/run", params={"input": "abc"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.headers["cache-control"] == "no-cache"
        events = parse_frames(response.text)
        assert events[-1] == {"event": None, "data": "[DONE]"}
        outputs = [e["data"]["data"] for e in events[:-1] if e["data"]["type"] == "output"]
        assert outputs == ["ABC"]

        assert len(client.get(f"/workflow/{created['id']}/history").json()) == 1

    def test_failed_buffered_run_is_500(self, client):
        created = client.post("/workflow", json=wire_workflow(script="1 / 0")).json()

        response = client.get(f"/workflow/{created['id']}/run")

        assert response.status_code == 500
        assert client.get(f"/workflow/{created['id']}/history").json() == []

    def test_run_unknown_workflow_is_404(self, client):
        assert client.get("/workflow/missing/run").status_code == 404

    def test_run_unsaved_workflow_streams_without_recording(self, client):
        response = client.post("/workflow/run", json=wire_workflow())

        assert response.status_code == 200
        events = parse_frames(response.text)
        assert events[0]["data"]["type"] == "node_start"
        assert events[-1]["data"] == "[DONE]"
        assert client.get("/workflow/unknown/history").json() == []

    def test_streamed_failure_ends_with_error_event(self, client):
        response = client.post("/workflow/run", json=wire_workflow(script="undefined_name"))

        events = parse_frames(response.text)
        assert events[-1]["event"] == "error"
        assert "Node execution failed" in events[-1]["data"]

    def test_cyclic_workflow_stream_reports_error(self, client):
        body = wire_workflow(with_output=False)
        body["edges"].append({"source": "up", "target": "in"})

        events = parse_frames(client.post("/workflow/run", json=body).text)

        assert len(events) == 1
        assert events[0]["event"] == "error"
        assert "Cycle detected" in events[0]["data"]
