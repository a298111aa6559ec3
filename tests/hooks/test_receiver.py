"""EventReceiver 测试"""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tmuxpanes.hooks.receiver import EventReceiver
from tmuxpanes.hooks.session_watcher import SessionWatcher


@pytest.fixture
def api(manager):
    watcher = SessionWatcher(
        on_session_created=manager.on_session_created,
        on_session_deleted=manager.on_session_deleted,
    )
    app = FastAPI()
    EventReceiver(watcher, manager).setup_routes(app)
    return TestClient(app)


def created_event(session_id: str) -> dict:
    return {
        "type": "session.created",
        "properties": {"info": {"id": session_id, "parentID": "root", "title": "Explore"}},
    }


class TestEventEndpoint:
    def test_created_then_deleted(self, api, manager, fake_tmux):
        response = api.post("/api/event", json=created_event("s1"))

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Event processed"}
        assert manager.get_tracked_sessions() == ["s1"]

        response = api.post("/api/event", json={"type": "session.deleted", "properties": {"info": {"id": "s1"}}})

        assert response.json()["success"] is True
        assert manager.get_tracked_sessions() == []
        assert fake_tmux.killed() == ["%1"]

    def test_handler_error_reported(self, manager):
        watcher = SessionWatcher(on_session_created=AsyncMock(side_effect=RuntimeError("boom")))
        app = FastAPI()
        EventReceiver(watcher, manager).setup_routes(app)

        response = TestClient(app).post("/api/event", json=created_event("s1"))

        assert response.status_code == 200
        assert response.json() == {"success": False, "message": "boom"}

    def test_invalid_body(self, api):
        response = api.post("/api/event", json={"properties": {}})

        assert response.status_code == 422


class TestStatusEndpoint:
    def test_status(self, api):
        api.post("/api/event", json=created_event("s1"))

        data = api.get("/api/status").json()

        assert data["enabled"] is True
        assert data["source_pane_id"] == "%0"
        assert data["sessions"] == {"s1": "%1"}
        assert data["metrics"]["pane.spawn.ok"] == 1
        assert data["metrics"]["sessions.tracked"] == 1
