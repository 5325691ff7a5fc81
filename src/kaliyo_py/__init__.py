"""Kaliyo-py: a Litestar server for a cooperative letter drawing-and-guessing game.

One player draws a Kannada letter while the others guess it in chat; every
correct guess adds to a shared team score, and the room wins together when it
reaches its goal. All state lives in memory.

Key Components:
    - Game: Player, Room, GameState, WordBank and the scoring rules
    - Services: RoomStore (room registry) and TurnController (turn state machine)
    - Realtime: ConnectionManager and GameSessionGateway for the game socket
    - Web: health probes and room lookups
    - Plugin: KaliyoPlugin for Litestar integration

Quick Start:
    >>> from litestar import Litestar
    >>> from kaliyo_py import KaliyoPlugin, KaliyoConfig
    >>>
    >>> app = Litestar(plugins=[KaliyoPlugin(KaliyoConfig())])
"""

from __future__ import annotations

from kaliyo_py.config import GameConfig
from kaliyo_py.exceptions import (
    ForbiddenError,
    IdExhaustionError,
    InsufficientPlayersError,
    InvalidMessageError,
    InvalidStateError,
    KaliyoError,
    RoomNotFoundError,
)
from kaliyo_py.game import GameState, Player, Room, WordBank, WordEntry
from kaliyo_py.plugin import KaliyoConfig, KaliyoPlugin
from kaliyo_py.realtime import ConnectionManager, GameSessionGateway
from kaliyo_py.services import RoomStore, TurnController

__all__ = [
    "ConnectionManager",
    "ForbiddenError",
    "GameConfig",
    "GameSessionGateway",
    "GameState",
    "IdExhaustionError",
    "InsufficientPlayersError",
    "InvalidMessageError",
    "InvalidStateError",
    "KaliyoConfig",
    "KaliyoError",
    "KaliyoPlugin",
    "Player",
    "Room",
    "RoomNotFoundError",
    "RoomStore",
    "TurnController",
    "WordBank",
    "WordEntry",
]

__version__ = "0.1.0"
