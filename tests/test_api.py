import asyncio

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from main import app
from mockinterview.api import dependencies
from mockinterview.core.interview_orchestrator import InterviewOrchestrator
from mockinterview.storage.session_store import SessionStore

from fakes import FakeAI, make_progress, make_settings


@pytest.fixture
def ai() -> FakeAI:
    return FakeAI(questions=["Only question?"])


@pytest.fixture
def orchestrator(tmp_path, ai):
    orchestrator = InterviewOrchestrator(
        ai_reasoning=ai,
        store=SessionStore(tmp_path / "api-store"),
        settings=make_settings(),
    )
    dependencies._orchestrator = orchestrator
    yield orchestrator
    dependencies._orchestrator = None


@pytest.fixture
def client(orchestrator) -> TestClient:
    return TestClient(app)


def receive_until(ws, event_type: str, limit: int = 20) -> dict:
    for _ in range(limit):
        message = ws.receive_json()
        if message.get("type") == event_type:
            return message
    raise AssertionError(f"no {event_type} event received")


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_setup_creates_session(client):
    response = client.post("/api/interview/setup", json={"role": "QA Engineer", "difficulty": "Junior"})

    assert response.status_code == 200
    data = response.json()
    assert data["questions"] == ["Only question?"]

    status = client.get(f"/api/interview/{data['session_id']}")
    assert status.status_code == 200
    assert status.json()["state"] == "idle"
    assert status.json()["connected"] is False


def test_setup_reports_question_failure_as_bad_gateway(client, ai):
    ai.questions = []

    response = client.post("/api/interview/setup", json={"role": "QA Engineer"})

    assert response.status_code == 502


def test_setup_requires_role(client):
    response = client.post("/api/interview/setup", json={"role": ""})

    assert response.status_code == 422


def test_unknown_sessions_are_not_found(client):
    assert client.get("/api/interview/missing").status_code == 404
    assert client.get("/api/sessions/missing").status_code == 404
    assert client.delete("/api/sessions/missing").status_code == 404
    assert client.get("/api/sessions").json() == []


def test_draft_endpoints(client, orchestrator):
    assert client.get("/api/drafts/current").status_code == 404
    assert client.post("/api/drafts/current/resume").status_code == 404

    progress = make_progress()
    progress.set_answer(0, "saved answer")
    asyncio.run(orchestrator.store.save_draft(progress.to_draft()))

    draft = client.get("/api/drafts/current")
    assert draft.status_code == 200
    assert draft.json()["answered"] == 1

    resumed = client.post("/api/drafts/current/resume")
    assert resumed.status_code == 200
    assert resumed.json()["state"] == "idle"
    assert resumed.json()["session_id"] == progress.session.session_id

    assert client.delete("/api/drafts/current").json() == {"discarded": True}
    assert client.get("/api/drafts/current").status_code == 404


def test_websocket_interview_runs_to_completion(client):
    setup = client.post("/api/interview/setup", json={"role": "QA Engineer"}).json()
    session_id = setup["session_id"]

    with client.websocket_connect(f"/api/interview/ws/{session_id}") as ws:
        ws.send_json({"type": "open", "granted": True})
        question = receive_until(ws, "question")
        assert question["text"] == "Only question?"

        ws.send_json({"type": "start"})
        assert receive_until(ws, "transcription")["action"] == "start"
        assert receive_until(ws, "state_change")["state"] == "recording"

        ws.send_json({"type": "transcript", "final": ["I test things "], "interim": "care"})
        assert receive_until(ws, "transcript")["text"] == "I test things"

        ws.send_json({"type": "status"})
        status = receive_until(ws, "status")["data"]
        assert status["state"] == "recording"
        assert status["transcript"] == "I test things care"

        ws.send_json({"type": "save_draft"})
        assert receive_until(ws, "error")["code"] == "invalid_state"

        ws.send_json({"type": "next"})
        complete = receive_until(ws, "complete")
        assert complete["session_id"] == session_id
        assert complete["overall_score"] == 7

    sessions = client.get("/api/sessions").json()
    assert [s["session_id"] for s in sessions] == [session_id]
    assert sessions[0]["overall_score"] == 7

    stored = client.get(f"/api/sessions/{session_id}").json()
    assert stored["answers"] == ["I test things"]

    assert client.delete(f"/api/sessions/{session_id}").status_code == 200
    assert client.get("/api/sessions").json() == []


def test_websocket_permission_denied(client):
    session_id = client.post("/api/interview/setup", json={"role": "QA Engineer"}).json()["session_id"]

    with client.websocket_connect(f"/api/interview/ws/{session_id}") as ws:
        ws.send_json({"type": "open", "granted": False, "error": "NotAllowedError"})
        error = receive_until(ws, "error")
        assert error["code"] == "permission_denied"
        assert error["message"] == "NotAllowedError"

        ws.send_json({"type": "start"})
        assert receive_until(ws, "error")["code"] == "invalid_state"


def test_websocket_unknown_session_is_closed(client):
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect("/api/interview/ws/missing") as ws:
            ws.receive_json()

    assert exc.value.code == 4004
