"""Read-only REST endpoints for game rooms."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from litestar import Controller, get

from kaliyo_py.config import GameConfig  # noqa: TC001
from kaliyo_py.exceptions import RoomNotFoundError
from kaliyo_py.services.rooms import RoomStore  # noqa: TC001


@dataclass
class RoomSummaryDTO:
    """Public facts about a room, enough for a lobby to decide whether to join."""

    code: str
    player_count: int
    max_players: int
    is_active: bool
    host_id: str


class RoomController(Controller):
    """Controller for room lookups."""

    path = "/rooms"
    tags: ClassVar[list[str]] = ["Rooms"]

    @get("/{code:str}")
    async def get_room(self, code: str, room_store: RoomStore, game_config: GameConfig) -> RoomSummaryDTO:
        """Look up a room by its join code.

        Args:
            code: The 4-digit room code.
            room_store: Injected room registry.
            game_config: Injected game rules.

        Returns:
            The room summary. Never includes the current word.

        Raises:
            RoomNotFoundError: If no live room has this code.
        """
        room = room_store.get_room(code)
        if room is None:
            raise RoomNotFoundError(code)

        return RoomSummaryDTO(
            code=room.code,
            player_count=len(room.players),
            max_players=game_config.max_players,
            is_active=room.game_state.is_active,
            host_id=room.host_id,
        )
