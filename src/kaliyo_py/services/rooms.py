"""Room registry for the guessing game."""

from __future__ import annotations

import random

import structlog

from kaliyo_py.config import GameConfig
from kaliyo_py.exceptions import IdExhaustionError
from kaliyo_py.game.models import GameState, Player, RemovalResult, Room

logger = structlog.get_logger(__name__)

ROOM_CODE_MIN = 1000
ROOM_CODE_MAX = 9999


class RoomStore:
    """In-memory store of live rooms.

    Provides:
    - Room creation with unique 4-digit codes
    - Lookup by code
    - Adding players and removing them on disconnect, with host hand-off

    The store never touches turn state; callers repair the game after a
    removal using the returned :class:`RemovalResult`.
    """

    def __init__(self, config: GameConfig | None = None, *, rng: random.Random | None = None) -> None:
        """Initialize the room store.

        Args:
            config: Game configuration. Uses defaults if None.
            rng: Random source for room codes, injectable for tests.
        """
        self._config = config or GameConfig()
        self._rng = rng or random.Random()
        self._rooms: dict[str, Room] = {}

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, code: object) -> bool:
        return code in self._rooms

    def create_room(self, host_id: str) -> Room:
        """Create and register a new room.

        Args:
            host_id: Connection id of the creating player.

        Returns:
            The created room, with an inert game state.

        Raises:
            IdExhaustionError: If no unused code was found within the retry budget.
        """
        code = self._generate_room_code()
        room = Room(
            code=code,
            host_id=host_id,
            game_state=GameState(score_goal=self._config.default_score_goal),
        )
        self._rooms[code] = room

        logger.info("Room created", room_code=code, host_id=host_id)
        return room

    def get_room(self, code: str) -> Room | None:
        """Get a room by code.

        Args:
            code: The room code.

        Returns:
            The room, or None if no live room has this code.
        """
        return self._rooms.get(code)

    def all_rooms(self) -> list[Room]:
        """Get all live rooms."""
        return list(self._rooms.values())

    def add_player(self, room: Room, connection_id: str, name: str) -> Player:
        """Append a player to a room.

        Capacity and existence checks are the caller's responsibility.

        Args:
            room: The room to join.
            connection_id: Connection id of the joining socket.
            name: Display name.

        Returns:
            The created player.
        """
        player = Player(id=connection_id, name=name)
        room.players.append(player)

        logger.info(
            "Player joined room",
            room_code=room.code,
            player_id=connection_id,
            player_name=name,
            player_count=len(room.players),
        )
        return player

    def remove_player(self, connection_id: str) -> RemovalResult | None:
        """Remove a player from whichever room holds them.

        Deletes the room if it becomes empty and promotes the next player to
        host if the host left.

        Args:
            connection_id: Connection id of the departing player.

        Returns:
            Details of the removal, or None if the connection is in no room.
        """
        for code, room in list(self._rooms.items()):
            index = room.index_of(connection_id)
            if index == -1:
                continue

            removed = room.players.pop(index)
            logger.info("Player removed from room", room_code=code, player_id=connection_id, player_name=removed.name)

            result = RemovalResult(room_code=code, removed_player=removed, removed_index=index)
            if not room.players:
                self.delete_room(code)
                result.room_became_empty = True
            elif room.host_id == connection_id:
                new_host = room.players[0]
                room.host_id = new_host.id
                result.new_host = new_host
                logger.info("Host transferred", room_code=code, host_id=new_host.id, host_name=new_host.name)
            return result

        return None

    def delete_room(self, code: str) -> None:
        """Delete a room.

        Args:
            code: The room to delete.
        """
        room = self._rooms.pop(code, None)
        if room:
            logger.info("Room deleted", room_code=code)

    def _generate_room_code(self) -> str:
        """Generate a room code not used by any live room.

        Returns:
            A 4-digit numeric code.

        Raises:
            IdExhaustionError: If every attempt collided.
        """
        attempts = self._config.room_code_attempts
        for _ in range(attempts):
            code = str(self._rng.randint(ROOM_CODE_MIN, ROOM_CODE_MAX))
            if code not in self._rooms:
                return code
        logger.error("Room code space exhausted", attempts=attempts, live_rooms=len(self._rooms))
        raise IdExhaustionError(attempts)
