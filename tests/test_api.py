"""
Tests for the HTTP surface: task board routes, error envelope, weather and health.
"""
from datetime import timedelta

from fastapi.testclient import TestClient

from gardenhub.modules.task_board.application.reconciler import UPDATE_FAILED_MESSAGE
from gardenhub.modules.weather.application.weather_service import WeatherService, get_weather_service
from gardenhub.shared.core.dependencies import get_current_user

from conftest import FIXED_NOW, MEMBER_ID, network_error


def _lane(body, lane_id):
    return next(lane for lane in body["lanes"] if lane["id"] == lane_id)


def _ids(body, lane_id):
    return [task["id"] for task in _lane(body, lane_id)["tasks"]]


def test_board_has_three_lanes(client):
    response = client.get("/api/v1/tasks/board")
    assert response.status_code == 200
    body = response.json()
    assert [lane["title"] for lane in body["lanes"]] == ["OPEN TASKS", "IN PROGRESS", "COMPLETED"]
    assert _ids(body, "open") == ["t1", "t3"]
    assert _ids(body, "assigned") == ["t2"]
    assert body["phase"] == "idle"
    assert response.headers["X-Request-ID"]


def test_drag_flow_over_http(client, task_repository):
    client.post("/api/v1/tasks/board/drag/start", json={"task_id": "t1"})

    hovering = client.post("/api/v1/tasks/board/drag/over", json={"over_id": "assigned"}).json()
    assert hovering["phase"] == "hovering"
    assert "t1" in _ids(hovering, "assigned")

    response = client.post("/api/v1/tasks/board/drag/end", json={"over_id": "assigned"})
    body = response.json()
    assert body["success"]
    assert body["board"]["phase"] == "idle"
    assert task_repository.updates[0]["fields"]["assigned_to"] == MEMBER_ID
    assert task_repository.updates[0]["fields"]["assigned_at"] == FIXED_NOW.isoformat()


def test_failed_drop_returns_banner_and_server_state(client, task_repository):
    client.post("/api/v1/tasks/board/drag/start", json={"task_id": "t3"})
    task_repository.fail_update = network_error()

    body = client.post("/api/v1/tasks/board/drag/end", json={"over_id": "completed"}).json()

    assert not body["success"]
    assert body["error"] == UPDATE_FAILED_MESSAGE
    assert body["error_type"] == "network"
    assert body["board"]["error"] == UPDATE_FAILED_MESSAGE
    assert "t3" in _ids(body["board"], "open")


def test_drop_outside_any_lane(client, task_repository):
    client.post("/api/v1/tasks/board/drag/start", json={"task_id": "t1"})
    body = client.post("/api/v1/tasks/board/drag/end", json={"over_id": None}).json()
    assert body["success"]
    assert task_repository.updates == []


def test_business_rule_violation_renders_error_envelope(client):
    response = client.post("/api/v1/tasks/t2/volunteer")
    assert response.status_code == 409
    error = response.json()["error"]
    assert error["type"] == "validation"
    assert error["details"]["rule"] == "volunteer_requires_open"


def test_member_cannot_create_task(client):
    response = client.post("/api/v1/tasks/", json={"title": "Compost"})
    assert response.status_code == 403


def test_admin_creates_default_task(app, client, admin, task_repository):
    app.dependency_overrides[get_current_user] = lambda: admin
    response = client.post("/api/v1/tasks/defaults/1")
    assert response.status_code == 201
    assert task_repository.created[-1]["title"] == "Weed Control"


def test_default_task_catalogue(client):
    body = client.get("/api/v1/tasks/defaults").json()
    assert len(body) == 10
    assert body[0]["title"] == "Site Cleanup"


def test_missing_token_is_unauthorized(app):
    del app.dependency_overrides[get_current_user]
    response = TestClient(app).get("/api/v1/tasks/board")
    assert response.status_code == 401
    assert response.json()["error"]["type"] == "authentication"


def test_weather_falls_back_when_forecast_fails(app, client):
    class BrokenClient:
        async def get_forecast(self):
            raise network_error()

    service = WeatherService(BrokenClient(), refresh_interval=timedelta(minutes=30), clock=lambda: FIXED_NOW)
    app.dependency_overrides[get_weather_service] = lambda: service

    body = client.get("/api/v1/weather/").json()
    assert body["description"] == "partly cloudy"
    assert body["is_fallback"]
    assert len(body["forecast"]) == 6


def test_health(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
