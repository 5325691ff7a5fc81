"""Turn and timer state machine for the guessing game.

Each room moves between two phases: idle (no game) and a turn in progress.
Turns advance on a correct guess (after a short pause) or when the countdown
reaches zero, and the game returns to idle when the team reaches its goal or
the roster drops below the minimum.

All methods take a room code rather than a :class:`Room` and look the room up
again at every step, including inside timer callbacks, so that a room torn
down by a concurrent disconnect is seen as gone instead of being mutated
through a stale reference.
"""

from __future__ import annotations

import asyncio
import contextvars
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Protocol

import structlog

from kaliyo_py.config import GameConfig
from kaliyo_py.exceptions import InsufficientPlayersError, InvalidStateError, RoomNotFoundError
from kaliyo_py.game.scoring import calculate_points, is_correct_guess
from kaliyo_py.game.wordbank import WordBank
from kaliyo_py.realtime.messages import (
    ChatMessage,
    ClearCanvasMessage,
    GameOverMessage,
    GameStartedMessage,
    GuessResultMessage,
    NewTurnMessage,
    ScoreUpdateMessage,
    TimerUpdateMessage,
    YourTurnToDrawMessage,
)

if TYPE_CHECKING:
    from collections.abc import Coroutine

    from kaliyo_py.game.models import Room
    from kaliyo_py.realtime.messages import ServerMessage
    from kaliyo_py.services.rooms import RoomStore

logger = structlog.get_logger(__name__)

NOT_ENOUGH_PLAYERS_REASON = "Not enough players to continue."


def _spawn(coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
    """Start a room task with an empty context.

    Room tasks outlive the socket that triggered them and must not log under
    its bound correlation id.
    """
    return asyncio.create_task(coro, context=contextvars.Context())


class RoomNotifier(Protocol):
    """Delivers server messages to the participants of a room."""

    async def broadcast(self, room_code: str, message: ServerMessage, *, exclude: str | None = None) -> None:
        """Send a message to every connection in a room, optionally skipping one."""
        ...

    async def send(self, connection_id: str, message: ServerMessage) -> None:
        """Send a message to a single connection."""
        ...


@dataclass(frozen=True)
class GuessOutcome:
    """Result of a guess that was evaluated.

    Attributes:
        player_id: The guesser.
        is_correct: Whether the guess matched the current letter.
        points_awarded: Points added to the team score (0 when wrong).
        team_score: Team score after the guess.
        game_over: Whether the guess won the game.
    """

    player_id: str
    is_correct: bool
    points_awarded: int = 0
    team_score: int = 0
    game_over: bool = False


class TurnController:
    """Runs games: starts them, rotates drawers, counts down turns and scores guesses."""

    def __init__(
        self,
        store: RoomStore,
        notifier: RoomNotifier,
        word_bank: WordBank | None = None,
        config: GameConfig | None = None,
    ) -> None:
        """Initialize the turn controller.

        Args:
            store: Room registry shared with the session gateway.
            notifier: Fan-out used for every message the game emits.
            word_bank: Source of prompts. Uses the built-in letters if None.
            config: Game rules and timings. Uses defaults if None.
        """
        self._store = store
        self._notifier = notifier
        self._word_bank = word_bank or WordBank()
        self._config = config or GameConfig()

    @property
    def config(self) -> GameConfig:
        """Rules and timings in effect."""
        return self._config

    # Game Flow

    async def start_game(self, room_code: str, score_goal: int | None = None) -> None:
        """Start a game and its first turn.

        Args:
            room_code: The room to start.
            score_goal: Team score that wins. Falls back to the default when
                missing or not a positive integer.

        Raises:
            RoomNotFoundError: If the room doesn't exist.
            InvalidStateError: If a game is already running.
            InsufficientPlayersError: If the room has too few players.
        """
        room = self._store.get_room(room_code)
        if room is None:
            raise RoomNotFoundError(room_code)

        state = room.game_state
        if state.is_active:
            msg = "Game is already in progress"
            raise InvalidStateError(msg)
        if len(room.players) < self._config.min_players:
            raise InsufficientPlayersError(self._config.min_players, len(room.players))

        self._cancel_and_clear(room)
        for player in room.players:
            player.score = 0

        state.is_active = True
        state.score_goal = self._resolve_score_goal(score_goal)
        state.team_score = 0
        state.current_drawer_index = -1
        state.current_drawer_id = None
        state.current_word = None
        state.turn_resolved = False
        state.time_left_seconds = 0
        state.turn_started_at = None

        logger.info(
            "Game started",
            room_code=room_code,
            score_goal=state.score_goal,
            player_count=len(room.players),
        )

        await self._notifier.broadcast(
            room_code,
            GameStartedMessage(score_goal=state.score_goal, players=list(room.players)),
        )
        await self.start_new_turn(room_code)

    async def start_new_turn(self, room_code: str) -> None:
        """Hand the pen to the next player and start the countdown.

        Does nothing if the room is gone, idle or empty; this is expected when
        a delayed or timer-driven call races a disconnect.

        Args:
            room_code: The room whose turn advances.
        """
        room = self._store.get_room(room_code)
        if room is None:
            logger.debug("Skipping new turn, room is gone", room_code=room_code)
            return

        state = room.game_state
        if not state.is_active or not room.players:
            logger.debug(
                "Skipping new turn, game not running",
                room_code=room_code,
                is_active=state.is_active,
                player_count=len(room.players),
            )
            return

        self._cancel_and_clear(room)

        state.current_drawer_index = (state.current_drawer_index + 1) % len(room.players)
        drawer = room.players[state.current_drawer_index]
        state.current_drawer_id = drawer.id
        state.current_word = self._word_bank.random_entry()
        state.turn_resolved = False
        state.time_left_seconds = self._config.turn_duration_seconds
        state.turn_started_at = datetime.now(UTC)
        state.turn_number += 1
        state.timer_task = _spawn(self._run_turn_timer(room_code))

        logger.info(
            "Turn started",
            room_code=room_code,
            turn=state.turn_number,
            drawer_id=drawer.id,
            drawer_name=drawer.name,
        )

        await self._notifier.broadcast(
            room_code,
            NewTurnMessage(drawer_id=drawer.id, drawer_name=drawer.name, time_left=state.time_left_seconds),
        )
        await self._notifier.send(drawer.id, YourTurnToDrawMessage(word=state.current_word))
        await self._notifier.broadcast(room_code, ClearCanvasMessage())

    async def handle_guess(self, room_code: str, player_id: str, guess_text: str) -> GuessOutcome | None:
        """Evaluate a guess and score it.

        The guess is shown to the room as ordinary chat whether or not it is
        correct. Once the word has been guessed or revealed, further guesses in
        the same turn are chat only. Guesses are ignored outright when no game
        is running, there is no word to guess, or the guesser is the drawer.

        Args:
            room_code: The room the guess was made in.
            player_id: The guessing player.
            guess_text: The raw guess.

        Returns:
            The evaluated outcome, or None if the guess was ignored.
        """
        room = self._store.get_room(room_code)
        if room is None:
            return None

        state = room.game_state
        if not state.is_active or state.current_word is None or player_id == state.current_drawer_id:
            return None

        player = room.get_player(player_id)
        if player is None:
            return None

        word = state.current_word
        messages: list[ServerMessage] = [ChatMessage(sender=player.name, message=guess_text)]

        if state.turn_resolved or not is_correct_guess(word, guess_text):
            for message in messages:
                await self._notifier.broadcast(room_code, message)
            return GuessOutcome(player_id=player_id, is_correct=False, team_score=state.team_score)

        self._cancel_and_clear(room)
        points = calculate_points(
            state.time_left_seconds,
            self._config.turn_duration_seconds,
            self._config.base_points,
        )
        player.award_points(points)
        state.team_score += points
        state.turn_resolved = True

        logger.info(
            "Correct guess",
            room_code=room_code,
            player_id=player_id,
            player_name=player.name,
            points=points,
            team_score=state.team_score,
        )

        messages.append(
            GuessResultMessage(
                player_id=player.id,
                player_name=player.name,
                is_correct=True,
                word=word,
                points_awarded=points,
            )
        )
        messages.append(ScoreUpdateMessage(team_score=state.team_score, players=list(room.players)))

        game_over = state.team_score >= state.score_goal
        if game_over:
            messages.append(self._finish_game(room, f"{player.name} made the winning guess!"))
        else:
            state.next_turn_task = _spawn(self._start_turn_after_delay(room_code))

        for message in messages:
            await self._notifier.broadcast(room_code, message)

        return GuessOutcome(
            player_id=player_id,
            is_correct=True,
            points_awarded=points,
            team_score=state.team_score,
            game_over=game_over,
        )

    async def end_game(self, room_code: str, reason: str) -> bool:
        """End the game in a room.

        Calling this on a room that is already idle only makes sure no timer
        is left behind; it does not announce the end a second time.

        Args:
            room_code: The room to stop.
            reason: Why the game ended, shown to players.

        Returns:
            True if a running game was ended, False if there was nothing to end.
        """
        room = self._store.get_room(room_code)
        if room is None:
            return False

        if not room.game_state.is_active:
            self._cancel_and_clear(room)
            logger.debug("End game ignored, no game running", room_code=room_code)
            return False

        await self._notifier.broadcast(room_code, self._finish_game(room, reason))
        return True

    async def handle_player_disconnect(
        self,
        room_code: str,
        player_id: str,
        *,
        removed_index: int | None = None,
    ) -> None:
        """Repair the game after a player was removed from the room.

        Must run after :meth:`RoomStore.remove_player` has updated the roster.

        Args:
            room_code: The room the player left.
            player_id: The departed player.
            removed_index: The player's position in the rotation before removal.
        """
        room = self._store.get_room(room_code)
        if room is None or not room.game_state.is_active:
            return

        state = room.game_state
        if len(room.players) < self._config.min_players:
            await self.end_game(room_code, NOT_ENOUGH_PLAYERS_REASON)
            return

        if state.current_drawer_id == player_id:
            logger.info("Drawer left, starting next turn", room_code=room_code, player_id=player_id)
            self._cancel_and_clear(room)
            if removed_index is not None:
                # The player who followed the drawer now sits at removed_index.
                state.current_drawer_index = removed_index - 1
            await self.start_new_turn(room_code)
            return

        if state.current_drawer_id is not None:
            drawer_index = room.index_of(state.current_drawer_id)
            if drawer_index != -1:
                state.current_drawer_index = drawer_index

    # Timers

    async def _run_turn_timer(self, room_code: str) -> None:
        """Count the current turn down one tick at a time.

        Stops silently as soon as it is no longer the room's timer.

        Args:
            room_code: The room being timed.
        """
        try:
            while True:
                await asyncio.sleep(self._config.tick_interval_seconds)

                room = self._timed_room(room_code)
                if room is None:
                    return

                state = room.game_state
                if state.time_left_seconds <= 0:
                    await self._expire_turn(room)
                    return

                state.time_left_seconds -= 1
                await self._notifier.broadcast(room_code, TimerUpdateMessage(time_left=state.time_left_seconds))

                room = self._timed_room(room_code)
                if room is None:
                    return
                if room.game_state.time_left_seconds <= 0:
                    await self._expire_turn(room)
                    return
        except Exception:
            logger.exception("Turn timer failed", room_code=room_code)

    def _timed_room(self, room_code: str) -> Room | None:
        """Re-fetch a room for the calling timer, or None if the timer is stale."""
        room = self._store.get_room(room_code)
        if room is None:
            return None
        state = room.game_state
        if not state.is_active or state.timer_task is not asyncio.current_task():
            return None
        return room

    async def _expire_turn(self, room: Room) -> None:
        """Reveal the letter after a timeout and move on."""
        state = room.game_state
        word = state.current_word
        turn_number = state.turn_number
        self._cancel_and_clear(room)
        state.turn_resolved = True

        logger.info("Turn timed out", room_code=room.code, turn=turn_number)

        script = word.display_form if word else "?"
        latin = word.transliteration if word else "?"
        await self._notifier.broadcast(
            room.code,
            ChatMessage.system(f"Time's up! The letter was {script} ({latin})."),
        )

        current = self._store.get_room(room.code)
        if current is None or current.game_state.turn_number != turn_number:
            return
        await self.start_new_turn(room.code)

    async def _start_turn_after_delay(self, room_code: str) -> None:
        """Start the next turn once the post-guess pause has elapsed."""
        await asyncio.sleep(self._config.next_turn_delay_seconds)
        room = self._store.get_room(room_code)
        if room is None or room.game_state.next_turn_task is not asyncio.current_task():
            return
        try:
            await self.start_new_turn(room_code)
        except Exception:
            logger.exception("Delayed turn start failed", room_code=room_code)

    def _cancel_and_clear(self, room: Room) -> None:
        """Cancel and forget the room's countdown and any pending next turn.

        Safe to call repeatedly. A task calling this on itself is only
        forgotten, not cancelled, so it can finish its own work.
        """
        state = room.game_state
        current = asyncio.current_task()
        for task in (state.timer_task, state.next_turn_task):
            if task is not None and task is not current and not task.done():
                task.cancel()
        state.timer_task = None
        state.next_turn_task = None

    def _finish_game(self, room: Room, reason: str) -> GameOverMessage:
        """Return the room to idle and build the game-over announcement.

        Team score and drawer index are kept for the end-of-game display.
        """
        self._cancel_and_clear(room)
        state = room.game_state
        state.is_active = False
        state.current_drawer_id = None
        state.current_word = None
        state.turn_resolved = False
        state.time_left_seconds = 0
        state.turn_started_at = None

        logger.info("Game ended", room_code=room.code, reason=reason, team_score=state.team_score)
        return GameOverMessage(reason=reason, final_team_score=state.team_score, players=list(room.players))

    def _resolve_score_goal(self, score_goal: int | None) -> int:
        if isinstance(score_goal, int) and not isinstance(score_goal, bool) and score_goal > 0:
            return score_goal
        return self._config.default_score_goal
