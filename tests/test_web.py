"""Tests for the FastAPI transport."""

import pytest
from fastapi.testclient import TestClient

from daretoknow.engine.config import AppConfig
from daretoknow.engine.web import create_app

pytestmark = pytest.mark.integration


@pytest.fixture
def app(provider):
    return create_app(AppConfig(), provider)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


def test_health(client) -> None:
    """The health endpoint answers without a tournament."""
    response = client.get("/v1/api/health")

    assert response.status_code == 200
    assert response.json() == {"isAlive": True}


def test_state_endpoints_without_tournament(client) -> None:
    """Reads return null state, validation reports the missing tournament."""
    assert client.get("/v1/api/tournament").json() is None
    assert client.get("/v1/api/match").json() is None
    assert client.get("/v1/api/tournament/summary").status_code == 400

    validation = client.get("/v1/api/tournament/validation").json()
    assert validation["isValid"] is False


def test_categories(client) -> None:
    """Live categories come from the content provider."""
    assert client.get("/v1/api/categories").json() == {
        "categories": ["Science", "Party"]
    }


def test_join_with_active_match(app, client) -> None:
    """A matching code returns the active match."""
    manager = app.state.manager
    manager.create_tournament("Cup", max_teams=2)
    for name, color in (("Lions", "#FF5733"), ("Tigers", "#33FF57")):
        team = manager.register_team(name, color)
        manager.add_team_member(team.id, "Player")
    manager.start_tournament()
    code = manager.current_match().game_code

    wrong = client.post("/v1/api/join", json={"code": "000000"}).json()
    right = client.post("/v1/api/join", json={"code": code}).json()

    assert wrong == {"success": False, "error": "Invalid game code", "match": None}
    assert right["success"] is True
    assert right["match"]["gameCode"] == code
    assert client.get("/v1/api/tournament").json()["status"] == "ACTIVE"


def test_websocket_commands_broadcast_state(app) -> None:
    """Commands over the socket broadcast state; domain errors reply privately."""
    with TestClient(app) as client:
        with client.websocket_connect("/v1/ws/game") as ws:
            assert ws.receive_json() == {"type": "tournament:state", "payload": None}
            assert ws.receive_json() == {"type": "match:state", "payload": None}

            ws.send_json(
                {"type": "tournament:create", "payload": {"name": "Cup", "maxTeams": 2}}
            )
            state = ws.receive_json()
            assert state["type"] == "tournament:state"
            assert state["payload"]["name"] == "Cup"
            assert state["payload"]["maxTeams"] == 2
            assert ws.receive_json()["type"] == "match:state"

            ws.send_json(
                {"type": "team:register", "payload": {"name": "Lions", "color": "#FF5733"}}
            )
            assert ws.receive_json()["payload"]["teams"][0]["name"] == "Lions"
            ws.receive_json()

            ws.send_json(
                {"type": "team:register", "payload": {"name": "Copy", "color": "#FF5733"}}
            )
            assert ws.receive_json() == {
                "type": "error",
                "payload": "Color already in use: #FF5733",
            }

            ws.send_json({"type": "tournament:validate"})
            validation = ws.receive_json()
            assert validation["type"] == "tournament:validation"
            assert validation["payload"]["isValid"] is False


def test_websocket_rejects_unknown_and_malformed(app) -> None:
    """Unknown commands and bad payloads are reported to the sender."""
    with TestClient(app) as client:
        with client.websocket_connect("/v1/ws/game") as ws:
            ws.receive_json()
            ws.receive_json()

            ws.send_json({"type": "game:teleport"})
            assert ws.receive_json()["payload"] == "Unknown command: game:teleport"

            ws.send_json({"type": "timer:start", "payload": {"duration": "soon"}})
            assert ws.receive_json() == {
                "type": "error",
                "payload": "Invalid payload for timer:start",
            }
