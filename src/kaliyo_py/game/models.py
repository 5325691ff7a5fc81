"""Game data models.

This module defines the in-memory entities of the guessing game: players,
rooms and the per-room game state driven by the turn controller.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from kaliyo_py.config import GameConfig
from kaliyo_py.game.types import TurnPhase
from kaliyo_py.game.wordbank import WordEntry


@dataclass
class Player:
    """A participant in a room.

    Attributes:
        id: Connection identifier of the player's socket.
        name: Display name shown to other players.
        score: Points this player has earned in the current game.
    """

    id: str
    name: str
    score: int = 0

    def award_points(self, points: int) -> None:
        """Add points to the player's score.

        Args:
            points: Number of points to award.
        """
        self.score += points

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"id": self.id, "name": self.name, "score": self.score}


@dataclass
class GameState:
    """Turn and scoring state of a room.

    ``timer_task`` is set only while a turn is running; ``next_turn_task`` only
    during the pause after a correct guess. Both are cleared by the turn
    controller's single cancellation helper.

    Attributes:
        is_active: Whether a game is in progress.
        current_drawer_index: Index into the room's players (-1 before the first turn).
        current_drawer_id: Player id of the drawer, or None between games.
        current_word: The prompt being drawn, or None between games.
        turn_resolved: Whether the current word was guessed or revealed; later
            guesses in the turn are chat only.
        time_left_seconds: Seconds left in the current turn.
        turn_started_at: When the current turn started.
        score_goal: Team score that wins the game.
        team_score: Cooperative score of the room.
        turn_number: Turns started since the room was created.
        timer_task: Running countdown task.
        next_turn_task: Pending delayed start of the next turn.
    """

    is_active: bool = False
    current_drawer_index: int = -1
    current_drawer_id: str | None = None
    current_word: WordEntry | None = None
    turn_resolved: bool = False
    time_left_seconds: int = 0
    turn_started_at: datetime | None = None
    score_goal: int = GameConfig.default_score_goal
    team_score: int = 0
    turn_number: int = 0
    timer_task: asyncio.Task[None] | None = field(default=None, repr=False)
    next_turn_task: asyncio.Task[None] | None = field(default=None, repr=False)

    @property
    def phase(self) -> TurnPhase:
        """Current phase of the turn state machine."""
        return TurnPhase.TURN_IN_PROGRESS if self.is_active else TurnPhase.IDLE

    def to_dict(self) -> dict[str, Any]:
        """Public view of the state; never includes the word or task handles."""
        return {
            "is_active": self.is_active,
            "phase": self.phase.value,
            "current_drawer_id": self.current_drawer_id,
            "time_left": self.time_left_seconds,
            "score_goal": self.score_goal,
            "team_score": self.team_score,
        }


@dataclass
class Room:
    """An isolated game session.

    Player order is join order and drives the drawing rotation.

    Attributes:
        code: Unique 4-digit join code.
        host_id: Player id of the host.
        players: Players in join order.
        game_state: Turn and scoring state.
    """

    code: str
    host_id: str
    players: list[Player] = field(default_factory=list)
    game_state: GameState = field(default_factory=GameState)

    def get_player(self, player_id: str) -> Player | None:
        """Get a player by id.

        Args:
            player_id: Player id to find.

        Returns:
            Player if found, None otherwise.
        """
        return next((p for p in self.players if p.id == player_id), None)

    def index_of(self, player_id: str) -> int:
        """Position of a player in the rotation, or -1 if absent."""
        return next((i for i, p in enumerate(self.players) if p.id == player_id), -1)

    def is_host(self, player_id: str) -> bool:
        """Check if a player is the host."""
        return self.host_id == player_id

    def is_drawer(self, player_id: str) -> bool:
        """Check if a player is drawing the current turn."""
        return self.game_state.is_active and self.game_state.current_drawer_id == player_id

    def to_dict(self) -> dict[str, Any]:
        """Serialize the room for clients without internal turn details."""
        return {
            "room_code": self.code,
            "host_id": self.host_id,
            "players": [p.to_dict() for p in self.players],
            "settings": self.game_state.to_dict(),
        }


@dataclass
class RemovalResult:
    """Outcome of removing a player from whichever room held them.

    Attributes:
        room_code: Code of the room the player was in.
        removed_player: The player that was removed.
        removed_index: The player's position in the rotation before removal.
        room_became_empty: Whether the room was deleted as a result.
        new_host: The newly promoted host, if the host left.
    """

    room_code: str
    removed_player: Player
    removed_index: int
    room_became_empty: bool = False
    new_host: Player | None = None
