"""
Integration tests for the HTTP API.

The app runs on an AppContext built from fakes; the TestClient is used as
a context manager so background watcher tasks share one event loop.
"""

import json
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

from web_test_recorder.config import AISettings
from web_test_recorder.exceptions import SpawnError
from web_test_recorder.llm import AIGatewayClient
from web_test_recorder.server import create_app
from web_test_recorder.storage import TestArtifact


@pytest.fixture
def client(app_context):
    with TestClient(create_app(app_context)) as test_client:
        yield test_client


def seed(path, *artifacts):
    """Write test cases straight to the store file."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump({"test_cases": [a.to_dict() for a in artifacts], "story_links": []}, f)


def chat_reply(content):
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})


class TestHealth:
    """Test the health endpoint."""

    def test_health(self, client):
        """Test the service reports itself up."""
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["active_sessions"] == 0
        assert data["ai_configured"] is True


class TestRecordRoutes:
    """Test /api/record."""

    def test_record_and_save(self, client, recording_backend):
        """Test start, poll and save through the API."""
        response = client.post("/api/record/start", json={"url": "https://example.com", "testName": "t1"})
        assert response.status_code == 200
        session_id = response.json()["sessionId"]

        recording_backend.handles[0].artifact_path.write_text("await page.goto('https://example.com');")

        status = client.get(f"/api/record/status/{session_id}").json()
        assert status["running"] is True
        assert status["state"] == "active"
        assert status["code"] == "await page.goto('https://example.com');"

        sessions = client.get("/api/record/sessions").json()["sessions"]
        assert [s["id"] for s in sessions] == [session_id]

        saved = client.post("/api/record/save", json={"sessionId": session_id})
        assert saved.status_code == 200
        test_case = saved.json()["testCase"]
        assert test_case["name"] == "t1"
        assert test_case["status"] == "not run"

        listed = client.get("/api/tests").json()["testCases"]
        assert [t["id"] for t in listed] == [test_case["id"]]

        gone = client.get(f"/api/record/status/{session_id}")
        assert gone.status_code == 404
        assert gone.json()["error_type"] == "session_gone"

    def test_stop(self, client, recording_backend):
        """Test stop discards the session and its artifact."""
        session_id = client.post("/api/record/start", json={"url": "https://example.com"}).json()["sessionId"]
        artifact_path = recording_backend.handles[0].artifact_path
        artifact_path.write_text("x")

        assert client.post("/api/record/stop", json={"sessionId": session_id}).json() == {"success": True}
        assert not artifact_path.exists()
        assert client.post("/api/record/stop", json={"sessionId": session_id}).status_code == 404

    def test_unknown_session(self, client):
        """Test an unknown id is a 404 with a JSON error body."""
        response = client.get("/api/record/status/nope")
        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error_type"] == "session_not_found"

    def test_spawn_failure(self, client, recording_backend):
        """Test a recorder that cannot start is a 500 and leaves no session."""
        recording_backend.spawn_error = SpawnError(
            "Recorder executable not found: playwright", command=["playwright", "codegen"]
        )
        response = client.post("/api/record/start", json={"url": "https://example.com"})
        assert response.status_code == 500
        assert response.json()["error_type"] == "spawn_error"
        assert client.get("/api/health").json()["active_sessions"] == 0

    def test_missing_url(self, client):
        """Test request validation."""
        assert client.post("/api/record/start", json={"url": ""}).status_code == 422

    def test_shutdown_stops_recorders(self, app_context, recording_backend):
        """Test live recorders are stopped when the app shuts down."""
        with TestClient(create_app(app_context)) as test_client:
            test_client.post("/api/record/start", json={"url": "https://example.com"})
        assert recording_backend.handles[0].native.alive is False
        assert len(app_context.registry) == 0


class TestReplayRoute:
    """Test /api/test/run."""

    def test_passing_run(self, client, page):
        """Test every step is reported."""
        response = client.post("/api/test/run", json={
            "url": "https://example.com",
            "steps": [
                {"type": "click", "selector": "#a"},
                {"type": "fill", "selector": "#b", "value": "x", "timeoutMs": 100},
                {"type": "wait", "timeout": 5},
            ],
        })
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["status"] == "passed"
        assert [s["stepIndex"] for s in data["steps"]] == [0, 1, 2]
        assert data["error"] is None
        assert ("fill", "#b", "x", 100) in page.calls

    def test_failing_step(self, client, page):
        """Test a step failure is a completed run with status failed."""
        page.fail_on["#b"] = RuntimeError("element not found")
        data = client.post("/api/test/run", json={
            "url": "https://example.com",
            "steps": [
                {"type": "click", "selector": "#a"},
                {"type": "click", "selector": "#b"},
                {"type": "click", "selector": "#c"},
            ],
        }).json()
        assert data["success"] is True
        assert data["status"] == "failed"
        assert len(data["steps"]) == 2
        assert data["steps"][1]["error"] == "element not found"
        assert data["error"] == "Step 2 (click): element not found"
        assert data["errorType"] == "step_failure"

    def test_navigation_failure(self, client, page):
        """Test a failed initial navigation is reported as unsuccessful."""
        page.goto_error = RuntimeError("net::ERR_CONNECTION_REFUSED")
        data = client.post("/api/test/run", json={"url": "https://example.com", "steps": []}).json()
        assert data["success"] is False
        assert data["errorType"] == "navigation_error"
        assert data["steps"] == []

    def test_unknown_action_type(self, client):
        """Test an unsupported action is rejected before the browser starts."""
        response = client.post("/api/test/run", json={
            "url": "https://example.com",
            "steps": [{"type": "hover", "selector": "#a"}],
        })
        assert response.status_code == 422


class TestTestCaseRoutes:
    """Test /api/tests and /api/stories."""

    def test_crud(self, client, app_context):
        """Test get, update and delete of a stored test case."""
        seed(app_context.store.path, TestArtifact(name="login", code="x", id="t-1"))

        assert client.get("/api/tests/t-1").json()["name"] == "login"

        updated = client.patch("/api/tests/t-1", json={"status": "passed"}).json()
        assert updated["testCase"]["status"] == "passed"

        assert client.delete("/api/tests/t-1").json() == {"success": True}
        missing = client.get("/api/tests/t-1")
        assert missing.status_code == 404
        assert missing.json()["error_type"] == "record_not_found"

    def test_search(self, client, app_context):
        """Test the search query parameter."""
        seed(
            app_context.store.path,
            TestArtifact(name="login", code="", created_at="2024-01-01T00:00:00"),
            TestArtifact(name="checkout", code="", created_at="2024-01-02T00:00:00"),
        )
        names = [t["name"] for t in client.get("/api/tests", params={"search": "check"}).json()["testCases"]]
        assert names == ["checkout"]

    def test_story_links(self, client, app_context):
        """Test linking test cases to a story and reading them back."""
        seed(
            app_context.store.path,
            TestArtifact(name="a", code="", id="a"),
            TestArtifact(name="b", code="", id="b"),
        )
        response = client.post("/api/stories/S-1/tests", json={"testCaseIds": ["a", "b"], "title": "Cart"})
        assert response.json() == {"success": True, "linked": 2}

        linked = client.get("/api/stories/S-1/tests").json()["testCases"]
        assert {t["id"] for t in linked} == {"a", "b"}

        assert client.post("/api/stories/S-1/tests", json={"testCaseIds": ["zzz"]}).status_code == 404


class TestAIRoutes:
    """Test /api/ai."""

    def test_analyze(self, client, ai_endpoint):
        """Test analyze returns the normalized intent."""
        ai_endpoint.replies.append(chat_reply(json.dumps({
            "intent": "User signs in",
            "steps": ["Open page"],
            "assertions": [],
            "confidence": 0.7,
        })))
        data = client.post("/api/ai/analyze", json={"code": "await page.goto('x')"}).json()
        assert data["success"] is True
        assert data["analysis"]["intent"] == "User signs in"
        assert data["analysis"]["confidence"] == 0.7

    def test_generate(self, client, ai_endpoint):
        """Test generate returns plain code."""
        ai_endpoint.replies.append(chat_reply("```json\n{\"code\":\"await page.goto('x')\"}\n```"))
        data = client.post("/api/ai/generate", json={"intent": {"intent": "x"}}).json()
        assert data == {"success": True, "code": "await page.goto('x')"}

    def test_upstream_failure(self, client, ai_endpoint):
        """Test exhausted retries are a 502."""
        ai_endpoint.replies.extend([httpx.ConnectError, httpx.ConnectError])
        response = client.post("/api/ai/generate", json={"intent": {"intent": "x"}})
        assert response.status_code == 502
        body = response.json()
        assert body["error_type"] == "upstream_error"
        assert body["details"]["attempts"] == 2

    def test_not_configured(self, app_context):
        """Test a missing endpoint is a 400 and makes no request."""
        app_context.gateway = AIGatewayClient(AISettings())
        with TestClient(create_app(app_context)) as test_client:
            response = test_client.post("/api/ai/analyze", json={"code": "x"})
            assert test_client.get("/api/health").json()["ai_configured"] is False
        assert response.status_code == 400
        assert response.json()["error_type"] == "configuration_error"


class TestStaticFiles:
    """Test the frontend mount."""

    def test_serves_index(self, app_context):
        """Test index.html is served at the root when the directory exists."""
        static_dir = app_context.settings.server.static_dir
        Path(static_dir).mkdir(parents=True)
        (Path(static_dir) / "index.html").write_text("<h1>Recorder</h1>")

        with TestClient(create_app(app_context)) as test_client:
            assert "Recorder" in test_client.get("/").text
            assert test_client.get("/api/health").status_code == 200
