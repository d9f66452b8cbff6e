import pytest
from fastapi.testclient import TestClient

from api.dependencies import set_service_container
from api.main import create_app
from utils.logger import get_logger
from models.enums import LogCategory


@pytest.fixture
def client(services):
    set_service_container(services)
    with TestClient(create_app()) as test_client:
        yield test_client
    set_service_container(None)


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_get_query_action(client, services):
    response = client.get("/api/v1/gpio", params={"verb": "SET", "name": "lamp", "value": 0.4})

    assert response.status_code == 200
    body = response.json()
    assert body["error"] is False
    assert body["data"]["name"] == "lamp"
    assert body["data"]["value"] == 0.4
    assert services.registry.get_resource("lamp").value == 0.4


def test_post_body_action_accepts_action_alias(client, services):
    response = client.post("/api/v1/gpio", json={"action": "toggle", "name": "fan"})

    assert response.status_code == 200
    assert response.json()["data"]["value"] == 1
    assert services.registry.get_resource("fan").value == 1


def test_scene_over_http(client, services):
    response = client.post("/api/v1/gpio", json={"verb": "SET_SCENE", "name": "evening", "masterValue": 0.5})

    assert response.status_code == 200
    assert response.json()["data"]["kind"] == "SCENE"
    assert services.registry.get_resource("lamp").value == 0.5
    assert services.registry.get_resource("shelf").value == 0.25


def test_read_verbs(client):
    response = client.get("/api/v1/gpio", params={"verb": "GET", "name": "shelf"})
    assert response.status_code == 200
    assert response.json()["data"]["exit_value"] == 0.2

    everything = client.get("/api/v1/gpio", params={"verb": "GET_ALL"}).json()["data"]
    assert {r["name"] for r in everything["resources"]} == {"lamp", "shelf", "fan", "desk_button"}
    assert [s["name"] for s in everything["scenes"]] == ["evening"]
    assert [a["name"] for a in everything["animations"]] == ["heartbeat"]


def test_unknown_name_is_404(client):
    response = client.get("/api/v1/gpio", params={"verb": "TOGGLE", "name": "garage"})

    assert response.status_code == 404
    body = response.json()
    assert body["error"] is True
    assert body["data"]["code"] == "NOT_FOUND"

    assert client.get("/api/v1/gpio", params={"verb": "GET", "name": "garage"}).status_code == 404


def test_invalid_verb_is_400(client):
    response = client.post("/api/v1/gpio", json={"verb": "EXPLODE", "name": "lamp"})

    assert response.status_code == 400
    assert response.json()["data"]["code"] == "ACTION_REJECTED"


def test_inapplicable_action_is_400(client):
    # SET without a value has nothing to apply
    response = client.post("/api/v1/gpio", json={"verb": "SET", "name": "lamp"})
    assert response.status_code == 400


def test_missing_verb_is_422(client):
    response = client.get("/api/v1/gpio", params={"name": "lamp"})

    assert response.status_code == 422
    body = response.json()
    assert body["error"] is True
    assert body["data"]["validation_errors"]


def test_notifications_fire_triggers(client, services):
    response = client.post(
        "/api/v1/notifications",
        json={"notification": "USER_PRESENCE", "sender": "presence", "payload": True}
    )

    assert response.status_code == 200
    assert response.json()["data"] == {"fired": 1}
    assert services.registry.get_resource("fan").value == 1

    response = client.post("/api/v1/notifications", json={"notification": "DOORBELL"})
    assert response.json()["data"] == {"fired": 0}


def test_system_logs_and_status(client, services):
    logger = get_logger()
    logger.set_broadcaster(services.notifier)
    try:
        logger.warn(LogCategory.ACTION, "Something to look at", name="lamp")
    finally:
        logger.set_broadcaster(None)

    logs = client.get("/api/v1/system/logs", params={"limit": 5}).json()
    assert logs["count"] >= 1
    assert logs["logs"][-1]["message"] == "Something to look at (name: lamp)"

    status = client.get("/api/v1/system/status").json()
    assert status["leds_enabled"] is True
    assert status["resources"] == 4
    assert status["running_animations"] == []


def test_without_services_is_503():
    set_service_container(None)
    with TestClient(create_app()) as test_client:
        response = test_client.get("/api/v1/gpio", params={"verb": "GET_ALL"})

    assert response.status_code == 503
    assert response.json()["error"] is True
