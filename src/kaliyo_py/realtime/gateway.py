"""WebSocket session gateway for the guessing game.

Checks every client request against the room, role and game-state rules
before it reaches the room store or the turn controller, and routes the
results back out to the right connections.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import structlog
from litestar import Router, WebSocket, websocket

from kaliyo_py.config import GameConfig
from kaliyo_py.exceptions import (
    ForbiddenError,
    InsufficientPlayersError,
    InvalidMessageError,
    InvalidStateError,
    KaliyoError,
    RoomNotFoundError,
)
from kaliyo_py.realtime.messages import (
    CLIENT_MESSAGE_TYPES,
    ChatMessage,
    ClearCanvasMessage,
    ClearCanvasRequest,
    CreateRoomRequest,
    DrawDataRequest,
    DrawingUpdateMessage,
    ErrorMessage,
    JoinRoomRequest,
    LeaveRoomRequest,
    NewHostMessage,
    PlayerLeftMessage,
    RoomStateMessage,
    SendGuessRequest,
    SendMessageRequest,
    StartGameRequest,
    parse_client_message,
)

if TYPE_CHECKING:
    from kaliyo_py.game.models import Room
    from kaliyo_py.realtime.manager import ConnectionManager
    from kaliyo_py.services.rooms import RoomStore
    from kaliyo_py.services.turns import TurnController

logger = structlog.get_logger(__name__)


class GameSessionGateway:
    """Boundary between game sockets and the game core.

    Create, join and start-game failures are answered with an ``error``
    message to the requester. Drawing, clearing and guessing out of turn are
    dropped silently, since such messages arrive continuously.
    """

    def __init__(
        self,
        store: RoomStore,
        turns: TurnController,
        manager: ConnectionManager,
        config: GameConfig | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            store: The room registry.
            turns: The turn controller.
            manager: Connection tracking and fan-out.
            config: Game rules. Uses defaults if None.
        """
        self._store = store
        self._turns = turns
        self._manager = manager
        self._config = config or GameConfig()
        self._handlers = {
            CreateRoomRequest: self._handle_create_room,
            JoinRoomRequest: self._handle_join_room,
            LeaveRoomRequest: self._handle_leave_room,
            StartGameRequest: self._handle_start_game,
            DrawDataRequest: self._handle_draw_data,
            ClearCanvasRequest: self._handle_clear_canvas,
            SendGuessRequest: self._handle_send_guess,
            SendMessageRequest: self._handle_send_message,
        }

    async def handle_connection(self, socket: WebSocket) -> None:
        """Serve one game socket until it closes.

        Args:
            socket: The WebSocket connection.
        """
        await socket.accept()
        client = self._manager.register(socket)

        try:
            await self._receive_loop(socket, client.connection_id)
        except Exception:
            logger.exception("WebSocket error", connection_id=client.connection_id)
        finally:
            await self.handle_disconnect(client.connection_id)

    async def _receive_loop(self, socket: WebSocket, connection_id: str) -> None:
        """Main receive loop for WebSocket messages.

        Args:
            socket: The WebSocket connection.
            connection_id: The connection's id.
        """
        async for message in socket.iter_data():
            try:
                data = json.loads(message) if isinstance(message, str | bytes) else message
            except json.JSONDecodeError:
                await self._send_error(connection_id, "invalid_json", "Invalid JSON message")
                continue

            if not isinstance(data, dict):
                await self._send_error(connection_id, "invalid_json", "Message must be a JSON object")
                continue

            try:
                await self.handle_message(connection_id, data)
            except Exception:
                logger.exception(
                    "Error handling message",
                    message_type=data.get("type"),
                    connection_id=connection_id,
                )
                await self._send_error(connection_id, "internal_error", "Internal server error")

    async def handle_message(self, connection_id: str, data: dict[str, Any]) -> None:
        """Validate an inbound message and route it to its handler.

        Args:
            connection_id: The sending connection.
            data: The decoded message.
        """
        msg_type = data.get("type")
        if not msg_type:
            await self._send_error(connection_id, "missing_type", "Message type required")
            return

        try:
            request = parse_client_message(data)
        except InvalidMessageError as e:
            known = isinstance(msg_type, str) and msg_type in CLIENT_MESSAGE_TYPES
            code = "invalid_message" if known else "unknown_type"
            await self._send_error(connection_id, code, str(e))
            return

        handler = self._handlers[type(request)]
        await handler(connection_id, request)

    async def handle_disconnect(self, connection_id: str) -> None:
        """Clean up after a socket closes.

        Args:
            connection_id: The closed connection.
        """
        await self._leave_room(connection_id)
        self._manager.unregister(connection_id)

    # Room Management

    async def _handle_create_room(self, connection_id: str, request: CreateRoomRequest) -> None:
        """Create a room with the sender as host."""
        name = request.player_name.strip()
        if not name:
            await self._send_error(connection_id, "create_failed", "Player name is required.")
            return
        if self._manager.room_of(connection_id) is not None:
            await self._send_error(connection_id, "create_failed", "Already in a room.")
            return

        try:
            room = self._store.create_room(connection_id)
        except KaliyoError as e:
            logger.warning("Create room failed", connection_id=connection_id, error=str(e))
            await self._send_error(connection_id, "create_failed", str(e))
            return

        self._store.add_player(room, connection_id, name)
        self._manager.bind(connection_id, room.code)

        await self._manager.send(connection_id, RoomStateMessage(room=room, player_id=connection_id))

    async def _handle_join_room(self, connection_id: str, request: JoinRoomRequest) -> None:
        """Add the sender to an existing room."""
        name = request.player_name.strip()
        room_code = request.room_code.strip()
        if not name or not room_code:
            await self._send_error(connection_id, "join_failed", "Missing room code or player name.")
            return
        if self._manager.room_of(connection_id) is not None:
            await self._send_error(connection_id, "join_failed", "Already in a room.")
            return

        room = self._store.get_room(room_code)
        if room is None:
            logger.info("Join rejected, room not found", room_code=room_code, connection_id=connection_id)
            await self._send_error(connection_id, "join_failed", "Room not found.")
            return
        if len(room.players) >= self._config.max_players:
            logger.info(
                "Join rejected, room full",
                room_code=room_code,
                player_count=len(room.players),
                max_players=self._config.max_players,
            )
            await self._send_error(connection_id, "join_failed", "Room is full.")
            return

        self._store.add_player(room, connection_id, name)
        self._manager.bind(connection_id, room.code)

        await self._manager.send(connection_id, RoomStateMessage(room=room, player_id=connection_id))
        await self._manager.broadcast(room.code, RoomStateMessage(room=room), exclude=connection_id)
        await self._manager.broadcast(room.code, ChatMessage.system(f"{name} has joined the room."))

    async def _handle_leave_room(self, connection_id: str, request: LeaveRoomRequest) -> None:
        """Leave the current room while keeping the socket open."""
        await self._leave_room(connection_id)

    async def _leave_room(self, connection_id: str) -> None:
        """Remove a connection's player and repair the room it left.

        Args:
            connection_id: The departing connection.
        """
        result = self._store.remove_player(connection_id)
        self._manager.unbind(connection_id)
        if result is None:
            return

        if result.room_became_empty:
            logger.info("Room closed, last player left", room_code=result.room_code)
            return

        room = self._store.get_room(result.room_code)
        if room is None:
            return

        await self._manager.broadcast(
            room.code,
            PlayerLeftMessage(player_id=result.removed_player.id, player_name=result.removed_player.name),
        )
        if result.new_host is not None:
            await self._manager.broadcast(
                room.code,
                NewHostMessage(host_id=result.new_host.id, host_name=result.new_host.name),
            )
        await self._manager.broadcast(room.code, RoomStateMessage(room=room))

        await self._turns.handle_player_disconnect(
            room.code,
            result.removed_player.id,
            removed_index=result.removed_index,
        )

    # Game Flow

    async def _handle_start_game(self, connection_id: str, request: StartGameRequest) -> None:
        """Start a game on the host's request."""
        try:
            room = self._require_room(connection_id)
            self._check_can_start(room, connection_id, request.score_goal)
            await self._turns.start_game(room.code, request.score_goal)
        except KaliyoError as e:
            logger.warning("Start game rejected", connection_id=connection_id, error=str(e))
            await self._send_error(connection_id, "start_failed", str(e))

    def _check_can_start(self, room: Room, connection_id: str, score_goal: int | None) -> None:
        """Raise if the sender may not start a game in this room right now."""
        if not room.is_host(connection_id):
            msg = "Only the host can start the game."
            raise ForbiddenError(msg)
        if room.game_state.is_active:
            msg = "Game is already in progress."
            raise InvalidStateError(msg)
        if len(room.players) < self._config.min_players:
            raise InsufficientPlayersError(self._config.min_players, len(room.players))
        if score_goal is None or score_goal < self._config.min_score_goal:
            msg = f"Invalid score goal (minimum {self._config.min_score_goal})."
            raise InvalidMessageError(msg)

    async def _handle_draw_data(self, connection_id: str, request: DrawDataRequest) -> None:
        """Relay the drawer's strokes to everyone else."""
        room = self._drawer_room(connection_id)
        if room is None:
            return
        await self._manager.broadcast(room.code, DrawingUpdateMessage(strokes=request.strokes), exclude=connection_id)

    async def _handle_clear_canvas(self, connection_id: str, request: ClearCanvasRequest) -> None:
        """Clear every canvas on the drawer's request."""
        room = self._drawer_room(connection_id)
        if room is None:
            return
        await self._manager.broadcast(room.code, ClearCanvasMessage())

    async def _handle_send_guess(self, connection_id: str, request: SendGuessRequest) -> None:
        """Pass a guess to the turn controller."""
        room = self._current_room(connection_id)
        if room is None or not room.game_state.is_active or room.is_drawer(connection_id):
            logger.debug("Guess dropped", connection_id=connection_id)
            return
        if not request.text.strip():
            return
        await self._turns.handle_guess(room.code, connection_id, request.text)

    async def _handle_send_message(self, connection_id: str, request: SendMessageRequest) -> None:
        """Broadcast a plain chat message."""
        text = request.text.strip()
        room = self._current_room(connection_id)
        if room is None or not text:
            return
        player = room.get_player(connection_id)
        if player is None:
            return
        await self._manager.broadcast(room.code, ChatMessage(sender=player.name, message=text))

    # Utility Methods

    def _current_room(self, connection_id: str) -> Room | None:
        """The room the connection is bound to, if it still exists."""
        room_code = self._manager.room_of(connection_id)
        if room_code is None:
            return None
        return self._store.get_room(room_code)

    def _require_room(self, connection_id: str) -> Room:
        """The connection's room, raising if it has none."""
        room_code = self._manager.room_of(connection_id)
        if room_code is None:
            msg = "Not in a room."
            raise InvalidStateError(msg)
        room = self._store.get_room(room_code)
        if room is None:
            raise RoomNotFoundError(room_code)
        return room

    def _drawer_room(self, connection_id: str) -> Room | None:
        """The connection's room if a game is running and it is drawing."""
        room = self._current_room(connection_id)
        if room is None or not room.is_drawer(connection_id):
            logger.debug("Drawer-only message dropped", connection_id=connection_id)
            return None
        return room

    async def _send_error(self, connection_id: str, code: str, message: str) -> None:
        """Send an error message to one connection.

        Args:
            connection_id: The originating connection.
            code: Error code.
            message: Error message.
        """
        await self._manager.send(connection_id, ErrorMessage(code=code, message=message))


def create_game_websocket_router(path: str, gateway: GameSessionGateway) -> Router:
    """Create a WebSocket router for the game.

    Args:
        path: Base path for WebSocket routes.
        gateway: The session gateway serving each socket.

    Returns:
        A Litestar Router with the game socket mounted at ``{path}/game``.
    """

    @websocket(path="/game")
    async def game_websocket(socket: WebSocket) -> None:
        """WebSocket endpoint for the game.

        Args:
            socket: The WebSocket connection.
        """
        await gateway.handle_connection(socket)

    return Router(path=path, route_handlers=[game_websocket], tags=["Game WebSocket"])
