"""Real-time WebSocket module for kaliyo-py.

Connection tracking, the game message protocol and the session gateway that
sits between game sockets and the turn controller.
"""

from __future__ import annotations

from kaliyo_py.realtime.gateway import GameSessionGateway, create_game_websocket_router
from kaliyo_py.realtime.manager import ConnectedClient, ConnectionManager
from kaliyo_py.realtime.messages import (
    ClientMessage,
    ErrorMessage,
    GameMessageType,
    ServerMessage,
    parse_client_message,
)

__all__ = [
    "ClientMessage",
    "ConnectedClient",
    "ConnectionManager",
    "ErrorMessage",
    "GameMessageType",
    "GameSessionGateway",
    "ServerMessage",
    "create_game_websocket_router",
    "parse_client_message",
]
