"""WebSocket message types and schemas for the guessing game.

Every message is a JSON object with a ``type`` tag. Inbound messages are
parsed into request dataclasses by :func:`parse_client_message`, which rejects
anything that does not match its schema before it reaches the game core.
Outbound messages are dataclasses serialized with ``to_dict()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any, ClassVar

from kaliyo_py.exceptions import InvalidMessageError
from kaliyo_py.game.types import ChatMessageKind

if TYPE_CHECKING:
    from kaliyo_py.game.models import Player, Room
    from kaliyo_py.game.wordbank import WordEntry


class GameMessageType(StrEnum):
    """Types of WebSocket messages."""

    # Client -> Server
    CREATE_ROOM = "create_room"
    JOIN_ROOM = "join_room"
    LEAVE_ROOM = "leave_room"
    START_GAME = "start_game"
    DRAW_DATA = "draw_data"
    CLEAR_CANVAS = "clear_canvas"
    SEND_GUESS = "send_guess"
    SEND_MESSAGE = "send_message"

    # Server -> Client
    ROOM_STATE = "room_state"
    PLAYER_LEFT = "player_left"
    NEW_HOST = "new_host"
    GAME_STARTED = "game_started"
    NEW_TURN = "new_turn"
    YOUR_TURN_TO_DRAW = "your_turn_to_draw"
    CLEAR_CANVAS_UPDATE = "clear_canvas_update"
    DRAWING_UPDATE = "drawing_update"
    TIMER_UPDATE = "timer_update"
    CHAT_MESSAGE = "chat_message"
    GUESS_RESULT = "guess_result"
    SCORE_UPDATE = "score_update"
    GAME_OVER = "game_over"
    ERROR = "error"


# Client -> Server


@dataclass(frozen=True)
class CreateRoomRequest:
    """Request to create a room and join it as host."""

    type: ClassVar[GameMessageType] = GameMessageType.CREATE_ROOM

    player_name: str


@dataclass(frozen=True)
class JoinRoomRequest:
    """Request to join an existing room."""

    type: ClassVar[GameMessageType] = GameMessageType.JOIN_ROOM

    room_code: str
    player_name: str


@dataclass(frozen=True)
class LeaveRoomRequest:
    """Request to leave the current room without closing the socket."""

    type: ClassVar[GameMessageType] = GameMessageType.LEAVE_ROOM


@dataclass(frozen=True)
class StartGameRequest:
    """Host request to start a game.

    ``score_goal`` is None when the client sent something that is not an integer.
    """

    type: ClassVar[GameMessageType] = GameMessageType.START_GAME

    score_goal: int | None


@dataclass(frozen=True)
class DrawDataRequest:
    """Stroke groups from the drawer, forwarded verbatim."""

    type: ClassVar[GameMessageType] = GameMessageType.DRAW_DATA

    strokes: list[Any]


@dataclass(frozen=True)
class ClearCanvasRequest:
    """Drawer request to clear everyone's canvas."""

    type: ClassVar[GameMessageType] = GameMessageType.CLEAR_CANVAS


@dataclass(frozen=True)
class SendGuessRequest:
    """A guess at the current letter."""

    type: ClassVar[GameMessageType] = GameMessageType.SEND_GUESS

    text: str


@dataclass(frozen=True)
class SendMessageRequest:
    """A plain chat message."""

    type: ClassVar[GameMessageType] = GameMessageType.SEND_MESSAGE

    text: str


ClientMessage = (
    CreateRoomRequest
    | JoinRoomRequest
    | LeaveRoomRequest
    | StartGameRequest
    | DrawDataRequest
    | ClearCanvasRequest
    | SendGuessRequest
    | SendMessageRequest
)

CLIENT_MESSAGE_TYPES = frozenset(
    {
        GameMessageType.CREATE_ROOM,
        GameMessageType.JOIN_ROOM,
        GameMessageType.LEAVE_ROOM,
        GameMessageType.START_GAME,
        GameMessageType.DRAW_DATA,
        GameMessageType.CLEAR_CANVAS,
        GameMessageType.SEND_GUESS,
        GameMessageType.SEND_MESSAGE,
    }
)


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        msg = f"Field '{key}' must be a string"
        raise InvalidMessageError(msg)
    return value


def _parse_score_goal(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def parse_client_message(data: dict[str, Any]) -> ClientMessage:
    """Parse a decoded JSON object into a typed client request.

    Args:
        data: The decoded message.

    Returns:
        The request variant for the message's ``type``.

    Raises:
        InvalidMessageError: If the type is unknown or a field has the wrong shape.
    """
    msg_type = data.get("type")
    match msg_type:
        case GameMessageType.CREATE_ROOM:
            return CreateRoomRequest(player_name=_require_str(data, "player_name"))
        case GameMessageType.JOIN_ROOM:
            return JoinRoomRequest(
                room_code=_require_str(data, "room_code"),
                player_name=_require_str(data, "player_name"),
            )
        case GameMessageType.LEAVE_ROOM:
            return LeaveRoomRequest()
        case GameMessageType.START_GAME:
            return StartGameRequest(score_goal=_parse_score_goal(data.get("score_goal")))
        case GameMessageType.DRAW_DATA:
            strokes = data.get("strokes")
            if not isinstance(strokes, list):
                msg = "Field 'strokes' must be a list"
                raise InvalidMessageError(msg)
            return DrawDataRequest(strokes=strokes)
        case GameMessageType.CLEAR_CANVAS:
            return ClearCanvasRequest()
        case GameMessageType.SEND_GUESS:
            return SendGuessRequest(text=_require_str(data, "text"))
        case GameMessageType.SEND_MESSAGE:
            return SendMessageRequest(text=_require_str(data, "text"))
    msg = f"Unknown message type: {msg_type}"
    raise InvalidMessageError(msg)


# Server -> Client


@dataclass
class RoomStateMessage:
    """Full room snapshot sent on join and on roster changes."""

    type: ClassVar[GameMessageType] = GameMessageType.ROOM_STATE

    room: Room
    player_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data: dict[str, Any] = {"type": self.type.value, **self.room.to_dict()}
        if self.player_id is not None:
            data["player_id"] = self.player_id
        return data


@dataclass
class PlayerLeftMessage:
    """Notification that a player left the room."""

    type: ClassVar[GameMessageType] = GameMessageType.PLAYER_LEFT

    player_id: str
    player_name: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"type": self.type.value, "player_id": self.player_id, "player_name": self.player_name}


@dataclass
class NewHostMessage:
    """Notification that host privileges moved to another player."""

    type: ClassVar[GameMessageType] = GameMessageType.NEW_HOST

    host_id: str
    host_name: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"type": self.type.value, "host_id": self.host_id, "host_name": self.host_name}


@dataclass
class GameStartedMessage:
    """Notification that a game started."""

    type: ClassVar[GameMessageType] = GameMessageType.GAME_STARTED

    score_goal: int
    players: list[Player] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": self.type.value,
            "score_goal": self.score_goal,
            "players": [p.to_dict() for p in self.players],
        }


@dataclass
class NewTurnMessage:
    """Announces the drawer of a new turn. Never carries the word."""

    type: ClassVar[GameMessageType] = GameMessageType.NEW_TURN

    drawer_id: str
    drawer_name: str
    time_left: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": self.type.value,
            "drawer_id": self.drawer_id,
            "drawer_name": self.drawer_name,
            "time_left": self.time_left,
        }


@dataclass
class YourTurnToDrawMessage:
    """The secret prompt, sent to the drawer's connection only."""

    type: ClassVar[GameMessageType] = GameMessageType.YOUR_TURN_TO_DRAW

    word: WordEntry

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"type": self.type.value, "word": self.word.to_dict()}


@dataclass
class ClearCanvasMessage:
    """Instruction to clear the canvas."""

    type: ClassVar[GameMessageType] = GameMessageType.CLEAR_CANVAS_UPDATE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"type": self.type.value}


@dataclass
class DrawingUpdateMessage:
    """Drawer strokes relayed to the other participants."""

    type: ClassVar[GameMessageType] = GameMessageType.DRAWING_UPDATE

    strokes: list[Any]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"type": self.type.value, "strokes": self.strokes}


@dataclass
class TimerUpdateMessage:
    """Seconds remaining in the current turn."""

    type: ClassVar[GameMessageType] = GameMessageType.TIMER_UPDATE

    time_left: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"type": self.type.value, "time_left": self.time_left}


@dataclass
class ChatMessage:
    """Chat line; guesses are sent as ordinary chat."""

    type: ClassVar[GameMessageType] = GameMessageType.CHAT_MESSAGE

    sender: str
    message: str
    kind: ChatMessageKind = ChatMessageKind.CHAT

    @classmethod
    def system(cls, message: str) -> ChatMessage:
        """Create a system message.

        Args:
            message: Message text.

        Returns:
            System chat message.
        """
        return cls(sender="System", message=message, kind=ChatMessageKind.SYSTEM)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"type": self.type.value, "sender": self.sender, "message": self.message, "kind": self.kind.value}


@dataclass
class GuessResultMessage:
    """Reveals the word and the award after a correct guess."""

    type: ClassVar[GameMessageType] = GameMessageType.GUESS_RESULT

    player_id: str
    player_name: str
    is_correct: bool
    word: WordEntry
    points_awarded: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": self.type.value,
            "player_id": self.player_id,
            "player_name": self.player_name,
            "is_correct": self.is_correct,
            "word": self.word.to_dict(),
            "points_awarded": self.points_awarded,
        }


@dataclass
class ScoreUpdateMessage:
    """Team score and per-player scores."""

    type: ClassVar[GameMessageType] = GameMessageType.SCORE_UPDATE

    team_score: int
    players: list[Player] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": self.type.value,
            "team_score": self.team_score,
            "players": [p.to_dict() for p in self.players],
        }


@dataclass
class GameOverMessage:
    """End of game with the reason and final scores."""

    type: ClassVar[GameMessageType] = GameMessageType.GAME_OVER

    reason: str
    final_team_score: int
    players: list[Player] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": self.type.value,
            "reason": self.reason,
            "final_team_score": self.final_team_score,
            "final_scores": [p.to_dict() for p in self.players],
        }


@dataclass
class ErrorMessage:
    """Error sent to the originating connection only."""

    type: ClassVar[GameMessageType] = GameMessageType.ERROR

    code: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"type": self.type.value, "code": self.code, "message": self.message}


ServerMessage = (
    RoomStateMessage
    | PlayerLeftMessage
    | NewHostMessage
    | GameStartedMessage
    | NewTurnMessage
    | YourTurnToDrawMessage
    | ClearCanvasMessage
    | DrawingUpdateMessage
    | TimerUpdateMessage
    | ChatMessage
    | GuessResultMessage
    | ScoreUpdateMessage
    | GameOverMessage
    | ErrorMessage
)
