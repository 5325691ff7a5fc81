"""Tests for the game message protocol."""

from __future__ import annotations

import pytest

from kaliyo_py.exceptions import InvalidMessageError
from kaliyo_py.game.models import Player, Room
from kaliyo_py.game.wordbank import WordEntry
from kaliyo_py.realtime.messages import (
    ChatMessage,
    ClearCanvasRequest,
    CreateRoomRequest,
    DrawDataRequest,
    GameMessageType,
    GameOverMessage,
    JoinRoomRequest,
    LeaveRoomRequest,
    NewTurnMessage,
    RoomStateMessage,
    SendGuessRequest,
    SendMessageRequest,
    StartGameRequest,
    YourTurnToDrawMessage,
    parse_client_message,
)


class TestParseClientMessage:
    """Test inbound message validation."""

    def test_create_room(self) -> None:
        """create_room carries the player name."""
        request = parse_client_message({"type": "create_room", "player_name": "Asha"})

        assert request == CreateRoomRequest(player_name="Asha")

    def test_join_room(self) -> None:
        """join_room carries the code and the player name."""
        request = parse_client_message({"type": "join_room", "room_code": "1234", "player_name": "Ravi"})

        assert request == JoinRoomRequest(room_code="1234", player_name="Ravi")

    def test_messages_without_fields(self) -> None:
        """Messages with no payload parse from the type alone."""
        assert parse_client_message({"type": "leave_room"}) == LeaveRoomRequest()
        assert parse_client_message({"type": "clear_canvas"}) == ClearCanvasRequest()

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(30, 30), ("25", 25), (" 40 ", 40), ("many", None), (None, None), (True, None), (12.5, None)],
    )
    def test_start_game_score_goal(self, raw: object, expected: int | None) -> None:
        """The score goal is read as an integer when possible."""
        request = parse_client_message({"type": "start_game", "score_goal": raw})

        assert request == StartGameRequest(score_goal=expected)

    def test_draw_data_keeps_strokes_verbatim(self) -> None:
        """Strokes are passed through untouched."""
        strokes = [{"points": [[0, 0], [5, 5]], "color": "#000", "width": 3}]

        request = parse_client_message({"type": "draw_data", "strokes": strokes})

        assert request == DrawDataRequest(strokes=strokes)

    def test_draw_data_requires_list(self) -> None:
        """Strokes must be a list."""
        with pytest.raises(InvalidMessageError, match="strokes"):
            parse_client_message({"type": "draw_data", "strokes": "line"})

    def test_text_messages(self) -> None:
        """Guesses and chat carry text."""
        assert parse_client_message({"type": "send_guess", "text": "ka"}) == SendGuessRequest(text="ka")
        assert parse_client_message({"type": "send_message", "text": "hi"}) == SendMessageRequest(text="hi")

    @pytest.mark.parametrize(
        "data",
        [
            {"type": "create_room"},
            {"type": "create_room", "player_name": 7},
            {"type": "join_room", "player_name": "Ravi"},
            {"type": "send_guess", "text": None},
        ],
    )
    def test_missing_or_wrong_fields(self, data: dict) -> None:
        """Required string fields must be present and strings."""
        with pytest.raises(InvalidMessageError, match="must be a string"):
            parse_client_message(data)

    @pytest.mark.parametrize("msg_type", ["dance", None, "timer_update"])
    def test_unknown_type(self, msg_type: str | None) -> None:
        """Unknown and server-only types are rejected."""
        with pytest.raises(InvalidMessageError, match="Unknown message type"):
            parse_client_message({"type": msg_type})


class TestServerMessages:
    """Test outbound message serialization."""

    def test_message_type_values(self) -> None:
        """Message types have the expected wire names."""
        assert GameMessageType.CLEAR_CANVAS.value == "clear_canvas"
        assert GameMessageType.CLEAR_CANVAS_UPDATE.value == "clear_canvas_update"
        assert GameMessageType.YOUR_TURN_TO_DRAW.value == "your_turn_to_draw"
        assert GameMessageType.GAME_OVER.value == "game_over"

    def test_room_state_includes_player_id_for_joiner(self) -> None:
        """The joiner's copy of the room state names their own id."""
        room = Room(code="1234", host_id="a", players=[Player(id="a", name="Asha")])

        data = RoomStateMessage(room=room, player_id="a").to_dict()

        assert data["type"] == "room_state"
        assert data["room_code"] == "1234"
        assert data["player_id"] == "a"
        assert "player_id" not in RoomStateMessage(room=room).to_dict()

    def test_new_turn_has_no_word(self) -> None:
        """Turn announcements name the drawer only."""
        data = NewTurnMessage(drawer_id="a", drawer_name="Asha", time_left=90).to_dict()

        assert data == {"type": "new_turn", "drawer_id": "a", "drawer_name": "Asha", "time_left": 90}

    def test_your_turn_to_draw_carries_word(self) -> None:
        """The drawer's private message has the script and transliteration."""
        data = YourTurnToDrawMessage(word=WordEntry.from_letter("ಗ", "ga")).to_dict()

        assert data == {"type": "your_turn_to_draw", "word": {"script": "ಗ", "latin": "ga"}}

    def test_system_chat(self) -> None:
        """System messages come from "System"."""
        data = ChatMessage.system("Asha has joined the room.").to_dict()

        assert data == {
            "type": "chat_message",
            "sender": "System",
            "message": "Asha has joined the room.",
            "kind": "system",
        }

    def test_game_over(self) -> None:
        """Game over carries the reason and the final scores."""
        players = [Player(id="a", name="Asha", score=20), Player(id="b", name="Ravi")]

        data = GameOverMessage(reason="done", final_team_score=20, players=players).to_dict()

        assert data["reason"] == "done"
        assert data["final_team_score"] == 20
        assert data["final_scores"] == [
            {"id": "a", "name": "Asha", "score": 20},
            {"id": "b", "name": "Ravi", "score": 0},
        ]
