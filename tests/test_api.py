"""Tests for the HTTP endpoints and the mounted game socket."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from litestar import Litestar
from litestar.testing import TestClient

from kaliyo_py.app import create_app
from kaliyo_py.config import GameConfig
from kaliyo_py.plugin import KaliyoPlugin

if TYPE_CHECKING:
    from collections.abc import Iterator

    from kaliyo_py.services.rooms import RoomStore


@pytest.fixture
def app() -> Litestar:
    """Create the application with standard rules."""
    return create_app(game_config=GameConfig())


@pytest.fixture
def client(app: Litestar) -> Iterator[TestClient[Litestar]]:
    """Create a test client for the app."""
    with TestClient(app=app) as client:
        yield client


@pytest.fixture
def room_store(app: Litestar) -> RoomStore:
    """The app's live room registry."""
    return app.plugins.get(KaliyoPlugin).room_store


class TestHealth:
    """Tests for the probe endpoints."""

    def test_health(self, client: TestClient[Litestar]) -> None:
        """Liveness reports healthy with room and connection counts."""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["rooms"] == 0
        assert data["connections"] == 0
        assert "timestamp" in data

    def test_ready_counts_rooms(self, client: TestClient[Litestar], room_store: RoomStore) -> None:
        """Readiness reports the number of live rooms."""
        room_store.create_room("host")

        response = client.get("/ready")

        assert response.status_code == 200
        assert response.json()["ready"] is True
        assert response.json()["rooms"] == 1

    def test_correlation_id_echoed(self, client: TestClient[Litestar]) -> None:
        """A client-supplied correlation id comes back on the response."""
        response = client.get("/health", headers={"X-Correlation-ID": "abc-123"})

        assert response.headers["x-correlation-id"] == "abc-123"


class TestRoomAPI:
    """Tests for room lookups."""

    def test_get_room(self, client: TestClient[Litestar], room_store: RoomStore) -> None:
        """A live room is summarized without game secrets."""
        room = room_store.create_room("host")
        room_store.add_player(room, "host", "Asha")

        response = client.get(f"/api/rooms/{room.code}")

        assert response.status_code == 200
        assert response.json() == {
            "code": room.code,
            "player_count": 1,
            "max_players": 8,
            "is_active": False,
            "host_id": "host",
        }

    def test_get_unknown_room(self, client: TestClient[Litestar]) -> None:
        """Unknown codes are a 404 with a structured error."""
        response = client.get("/api/rooms/0000")

        assert response.status_code == 404
        data = response.json()
        assert data["status"] == "error"
        assert data["code"] == "room_not_found"
        assert data["message"] == "Room 0000 not found"
        assert response.headers["x-correlation-id"]


class TestGameSocket:
    """Tests for the game WebSocket route."""

    def test_create_room_over_socket(self, client: TestClient[Litestar], room_store: RoomStore) -> None:
        """A client can create a room over the socket and the room is visible over HTTP."""
        with client.websocket_connect("/ws/game") as ws:
            ws.send_json({"type": "create_room", "player_name": "Asha"})
            state = ws.receive_json()

            assert state["type"] == "room_state"
            assert state["players"][0]["name"] == "Asha"
            assert state["player_id"] == state["host_id"]

            response = client.get(f"/api/rooms/{state['room_code']}")
            assert response.status_code == 200
            assert response.json()["player_count"] == 1

    def test_unknown_message_over_socket(self, client: TestClient[Litestar]) -> None:
        """Unknown message types get an error reply."""
        with client.websocket_connect("/ws/game") as ws:
            ws.send_json({"type": "dance"})
            error = ws.receive_json()

        assert error == {"type": "error", "code": "unknown_type", "message": "Unknown message type: dance"}
