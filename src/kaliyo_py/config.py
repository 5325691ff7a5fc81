"""Game configuration for kaliyo-py.

Defaults are the standard game rules; every value can be overridden through
environment variables for deployments and tests.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    return int(raw) if raw else default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    return float(raw) if raw else default


@dataclass(frozen=True)
class GameConfig:
    """Rules and timings shared by every room.

    Attributes:
        max_players: Room capacity enforced when joining.
        min_players: Minimum roster size to start or continue a game.
        default_score_goal: Team score goal used when none is supplied.
        min_score_goal: Smallest score goal a host may choose.
        turn_duration_seconds: Countdown length of each turn.
        tick_interval_seconds: Wall-clock length of one countdown tick.
        next_turn_delay_seconds: Pause between a correct guess and the next turn.
        base_points: Flat award for a correct guess; the time bonus tops out at the same value.
        room_code_attempts: Retries allowed when generating a unique room code.
    """

    max_players: int = 8
    min_players: int = 2
    default_score_goal: int = 50
    min_score_goal: int = 10
    turn_duration_seconds: int = 90
    tick_interval_seconds: float = 1.0
    next_turn_delay_seconds: float = 2.0
    base_points: int = 10
    room_code_attempts: int = 100

    @classmethod
    def from_env(cls) -> GameConfig:
        """Create a configuration from environment variables.

        Environment variables:
            KALIYO_MAX_PLAYERS: Room capacity (default: 8).
            KALIYO_MIN_PLAYERS: Minimum players per game (default: 2).
            KALIYO_DEFAULT_SCORE_GOAL: Default team goal (default: 50).
            KALIYO_MIN_SCORE_GOAL: Minimum team goal (default: 10).
            KALIYO_TURN_DURATION: Seconds per turn (default: 90).
            KALIYO_TICK_INTERVAL: Seconds per countdown tick (default: 1.0).
            KALIYO_NEXT_TURN_DELAY: Seconds between a correct guess and the next turn (default: 2.0).
            KALIYO_BASE_POINTS: Base award for a correct guess (default: 10).
            KALIYO_ROOM_CODE_ATTEMPTS: Room code generation retries (default: 100).

        Returns:
            GameConfig configured from environment.
        """
        return cls(
            max_players=_env_int("KALIYO_MAX_PLAYERS", cls.max_players),
            min_players=_env_int("KALIYO_MIN_PLAYERS", cls.min_players),
            default_score_goal=_env_int("KALIYO_DEFAULT_SCORE_GOAL", cls.default_score_goal),
            min_score_goal=_env_int("KALIYO_MIN_SCORE_GOAL", cls.min_score_goal),
            turn_duration_seconds=_env_int("KALIYO_TURN_DURATION", cls.turn_duration_seconds),
            tick_interval_seconds=_env_float("KALIYO_TICK_INTERVAL", cls.tick_interval_seconds),
            next_turn_delay_seconds=_env_float("KALIYO_NEXT_TURN_DELAY", cls.next_turn_delay_seconds),
            base_points=_env_int("KALIYO_BASE_POINTS", cls.base_points),
            room_code_attempts=_env_int("KALIYO_ROOM_CODE_ATTEMPTS", cls.room_code_attempts),
        )


def env_flag(name: str) -> bool:
    """Read a boolean switch from the environment.

    Args:
        name: Environment variable name.

    Returns:
        True for "true", "1" or "yes" (case-insensitive).
    """
    return os.environ.get(name, "").lower() in ("true", "1", "yes")
