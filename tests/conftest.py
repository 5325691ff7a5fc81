"""Pytest configuration and fixtures for kaliyo-py tests."""

from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from kaliyo_py.config import GameConfig
from kaliyo_py.game.wordbank import WordBank, WordEntry
from kaliyo_py.realtime.gateway import GameSessionGateway
from kaliyo_py.realtime.manager import ConnectionManager
from kaliyo_py.services.rooms import RoomStore
from kaliyo_py.services.turns import TurnController

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from kaliyo_py.game.models import Room
    from kaliyo_py.realtime.messages import ServerMessage


class RecordingNotifier:
    """Notifier that keeps every message instead of sending it."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str, dict[str, Any]]] = []

    async def broadcast(self, room_code: str, message: ServerMessage, *, exclude: str | None = None) -> None:
        self.events.append(("broadcast", room_code, message.to_dict()))

    async def send(self, connection_id: str, message: ServerMessage) -> None:
        self.events.append(("send", connection_id, message.to_dict()))

    def types(self) -> list[str]:
        """Message types in delivery order."""
        return [payload["type"] for _, _, payload in self.events]

    def of_type(self, message_type: str) -> list[dict[str, Any]]:
        """Payloads of every message of one type."""
        return [payload for _, _, payload in self.events if payload["type"] == message_type]

    def clear(self) -> None:
        self.events.clear()


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Poll until ``predicate`` holds, failing the test after ``timeout`` seconds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            pytest.fail("Condition not reached in time")
        await asyncio.sleep(0.005)


# Config fixtures


@pytest.fixture
def config() -> GameConfig:
    """Standard rules with timers too slow to fire during a test."""
    return GameConfig(tick_interval_seconds=60.0, next_turn_delay_seconds=60.0)


@pytest.fixture
def fast_config() -> GameConfig:
    """Short turns with millisecond ticks for timer tests."""
    return GameConfig(turn_duration_seconds=3, tick_interval_seconds=0.01, next_turn_delay_seconds=0.01)


@pytest.fixture
def word_bank() -> WordBank:
    """Word bank with a single known letter."""
    return WordBank([WordEntry.from_letter("ಕ", "ka")])


# Service fixtures


@pytest.fixture
def store(config: GameConfig) -> RoomStore:
    """Create a fresh RoomStore for each test."""
    return RoomStore(config)


@pytest.fixture
def notifier() -> RecordingNotifier:
    """Create a notifier that records messages."""
    return RecordingNotifier()


@pytest_asyncio.fixture
async def controller(
    store: RoomStore,
    notifier: RecordingNotifier,
    word_bank: WordBank,
    config: GameConfig,
) -> AsyncIterator[TurnController]:
    """Turn controller over the recording notifier; stops any game left running."""
    turns = TurnController(store, notifier, word_bank=word_bank, config=config)
    yield turns
    for room in store.all_rooms():
        await turns.end_game(room.code, "teardown")


@pytest.fixture
def make_room(store: RoomStore) -> Callable[..., Room]:
    """Factory for a room whose players are named after their ids."""

    def _make_room(*player_ids: str) -> Room:
        room = store.create_room(player_ids[0])
        for player_id in player_ids:
            store.add_player(room, player_id, player_id)
        return room

    return _make_room


# Socket fixtures


def make_socket(messages: list[Any] | None = None) -> MagicMock:
    """Create a fake Litestar WebSocket that yields ``messages`` then closes."""
    socket = MagicMock()
    socket.accept = AsyncMock()
    socket.send_text = AsyncMock()

    async def iter_data() -> AsyncIterator[Any]:
        for message in messages or []:
            yield message

    socket.iter_data = iter_data
    return socket


def sent(socket: MagicMock) -> list[dict[str, Any]]:
    """Decode every payload sent to a fake socket."""
    return [json.loads(call.args[0]) for call in socket.send_text.call_args_list]


@pytest.fixture
def manager() -> ConnectionManager:
    """Create a fresh ConnectionManager for each test."""
    return ConnectionManager()


@pytest_asyncio.fixture
async def gateway(
    store: RoomStore,
    manager: ConnectionManager,
    word_bank: WordBank,
    config: GameConfig,
) -> AsyncIterator[GameSessionGateway]:
    """Session gateway wired to real services and fake sockets."""
    turns = TurnController(store, manager, word_bank=word_bank, config=config)
    yield GameSessionGateway(store, turns, manager, config)
    for room in store.all_rooms():
        await turns.end_game(room.code, "teardown")
