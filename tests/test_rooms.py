"""Tests for the room registry."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

import pytest

from kaliyo_py.config import GameConfig
from kaliyo_py.exceptions import IdExhaustionError
from kaliyo_py.services.rooms import RoomStore

if TYPE_CHECKING:
    from collections.abc import Callable

    from kaliyo_py.game.models import Room
    from kaliyo_py.game.wordbank import WordBank


class FixedRandom(random.Random):
    """Random source that always draws the same room code."""

    def randint(self, a: int, b: int) -> int:
        return 4242


class TestRoomCreation:
    """Test room creation and lookup."""

    def test_create_room_registers_idle_room(self, store: RoomStore) -> None:
        """A new room is registered, hosted by its creator and has no game running."""
        room = store.create_room("host")

        assert store.get_room(room.code) is room
        assert room.code in store
        assert room.host_id == "host"
        assert room.players == []
        assert room.game_state.is_active is False
        assert room.game_state.current_drawer_index == -1
        assert room.game_state.team_score == 0
        assert room.game_state.score_goal == 50

    def test_room_codes_are_four_digits(self, store: RoomStore) -> None:
        """Room codes are numeric strings between 1000 and 9999."""
        for i in range(50):
            code = store.create_room(f"host-{i}").code
            assert len(code) == 4
            assert code.isdigit()
            assert 1000 <= int(code) <= 9999

    def test_room_codes_are_unique(self, store: RoomStore) -> None:
        """No two live rooms share a code."""
        codes = {store.create_room(f"host-{i}").code for i in range(200)}

        assert len(codes) == 200
        assert len(store) == 200

    def test_code_generation_gives_up_after_attempts(self) -> None:
        """Code generation fails instead of looping forever when every code collides."""
        store = RoomStore(GameConfig(room_code_attempts=5), rng=FixedRandom())
        store.create_room("first")

        with pytest.raises(IdExhaustionError) as exc_info:
            store.create_room("second")

        assert exc_info.value.attempts == 5
        assert len(store) == 1

    def test_get_unknown_room(self, store: RoomStore) -> None:
        """Looking up an unknown code returns None."""
        assert store.get_room("0000") is None
        assert "0000" not in store


class TestPlayers:
    """Test adding and removing players."""

    def test_add_player_preserves_join_order(self, store: RoomStore) -> None:
        """Players are kept in join order with zero scores."""
        room = store.create_room("a")
        for player_id in ("a", "b", "c"):
            store.add_player(room, player_id, player_id.upper())

        assert [p.id for p in room.players] == ["a", "b", "c"]
        assert [p.name for p in room.players] == ["A", "B", "C"]
        assert all(p.score == 0 for p in room.players)

    def test_remove_player_reports_position(self, store: RoomStore, make_room: Callable[..., Room]) -> None:
        """Removal reports the room and the player's former index."""
        room = make_room("a", "b", "c")

        result = store.remove_player("b")

        assert result is not None
        assert result.room_code == room.code
        assert result.removed_player.id == "b"
        assert result.removed_index == 1
        assert result.room_became_empty is False
        assert result.new_host is None
        assert [p.id for p in room.players] == ["a", "c"]

    def test_host_leaving_promotes_first_remaining(self, store: RoomStore) -> None:
        """When the host leaves, the earliest-joined remaining player becomes host."""
        room = store.create_room("a")
        for player_id in ("a", "b", "c"):
            store.add_player(room, player_id, player_id)

        result = store.remove_player("a")

        assert result is not None
        assert result.new_host is not None
        assert result.new_host.id == "b"
        assert room.host_id == "b"
        assert room.is_host("b")

    def test_non_host_leaving_keeps_host(self, store: RoomStore) -> None:
        """Host is unchanged when someone else leaves."""
        room = store.create_room("a")
        store.add_player(room, "a", "a")
        store.add_player(room, "b", "b")

        result = store.remove_player("b")

        assert result is not None
        assert result.new_host is None
        assert room.host_id == "a"

    def test_last_player_leaving_deletes_room(self, store: RoomStore) -> None:
        """A room is deleted when its last player leaves."""
        room = store.create_room("a")
        store.add_player(room, "a", "a")

        result = store.remove_player("a")

        assert result is not None
        assert result.room_became_empty is True
        assert store.get_room(room.code) is None
        assert len(store) == 0

    def test_remove_unknown_connection(self, store: RoomStore) -> None:
        """Removing a connection that is in no room is a no-op."""
        store.create_room("a")

        assert store.remove_player("nobody") is None
        assert len(store) == 1

    def test_room_to_dict_hides_word(self, store: RoomStore, word_bank: WordBank) -> None:
        """The serialized room never carries the current word."""
        room = store.create_room("a")
        store.add_player(room, "a", "Asha")
        room.game_state.current_word = word_bank.random_entry()

        data = room.to_dict()

        assert data["room_code"] == room.code
        assert data["host_id"] == "a"
        assert data["players"] == [{"id": "a", "name": "Asha", "score": 0}]
        assert "current_word" not in data["settings"]
        assert "ಕ" not in str(data)
