"""Connection manager for game WebSocket sessions."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from litestar import WebSocket

    from kaliyo_py.realtime.messages import ServerMessage

logger = structlog.get_logger(__name__)


@dataclass
class ConnectedClient:
    """A live socket and the room it is bound to, if any."""

    connection_id: str
    websocket: WebSocket
    room_code: str | None = None
    connected_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class ConnectionManager:
    """Tracks game sockets and fans messages out to rooms.

    Every socket gets an opaque connection id on registration; that id is also
    the player's id once the socket joins a room. All methods run on the
    event loop thread, so membership changes are atomic between awaits.
    """

    def __init__(self) -> None:
        """Initialize the connection manager."""
        self._clients: dict[str, ConnectedClient] = {}
        self._rooms: dict[str, set[str]] = {}

    def register(self, websocket: WebSocket) -> ConnectedClient:
        """Register a newly accepted socket.

        Args:
            websocket: The WebSocket connection.

        Returns:
            The tracked client with its new connection id.
        """
        client = ConnectedClient(connection_id=uuid4().hex, websocket=websocket)
        self._clients[client.connection_id] = client

        logger.info("Client connected", connection_id=client.connection_id, total_connections=len(self._clients))
        return client

    def unregister(self, connection_id: str) -> ConnectedClient | None:
        """Forget a socket and its room binding.

        Args:
            connection_id: The connection to drop.

        Returns:
            The client that was removed, or None if unknown.
        """
        self.unbind(connection_id)
        client = self._clients.pop(connection_id, None)
        if client:
            logger.info("Client disconnected", connection_id=connection_id, total_connections=len(self._clients))
        return client

    def bind(self, connection_id: str, room_code: str) -> None:
        """Attach a connection to a room's broadcast group.

        Args:
            connection_id: The connection joining.
            room_code: The room joined.
        """
        client = self._clients.get(connection_id)
        if client is None:
            return
        self.unbind(connection_id)
        client.room_code = room_code
        self._rooms.setdefault(room_code, set()).add(connection_id)

    def unbind(self, connection_id: str) -> str | None:
        """Detach a connection from its room's broadcast group.

        Args:
            connection_id: The connection leaving.

        Returns:
            The room code it was bound to, if any.
        """
        client = self._clients.get(connection_id)
        if client is None or client.room_code is None:
            return None

        room_code = client.room_code
        client.room_code = None
        members = self._rooms.get(room_code)
        if members is not None:
            members.discard(connection_id)
            if not members:
                del self._rooms[room_code]
        return room_code

    def get_client(self, connection_id: str) -> ConnectedClient | None:
        """Get a tracked client by connection id."""
        return self._clients.get(connection_id)

    def room_of(self, connection_id: str) -> str | None:
        """Get the room code a connection is bound to."""
        client = self._clients.get(connection_id)
        return client.room_code if client else None

    def connections_in(self, room_code: str) -> list[str]:
        """Get the connection ids bound to a room."""
        return list(self._rooms.get(room_code, ()))

    async def broadcast(self, room_code: str, message: ServerMessage, *, exclude: str | None = None) -> None:
        """Broadcast a message to every connection in a room.

        Args:
            room_code: The room to broadcast to.
            message: The message to send.
            exclude: Optional connection id to skip (usually the sender).
        """
        payload = json.dumps(message.to_dict(), ensure_ascii=False)

        tasks = []
        for connection_id in self.connections_in(room_code):
            if connection_id == exclude:
                continue
            client = self._clients.get(connection_id)
            if client:
                tasks.append(self._send_text(client, payload))

        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def send(self, connection_id: str, message: ServerMessage) -> bool:
        """Send a message to a single connection.

        Args:
            connection_id: The target connection.
            message: The message to send.

        Returns:
            True if sent successfully, False otherwise.
        """
        client = self._clients.get(connection_id)
        if not client:
            return False
        return await self._send_text(client, json.dumps(message.to_dict(), ensure_ascii=False))

    async def _send_text(self, client: ConnectedClient, payload: str) -> bool:
        """Internal method to send a serialized message to a client.

        Args:
            client: The connected client.
            payload: The JSON message string.

        Returns:
            True if sent successfully, False otherwise.
        """
        try:
            await client.websocket.send_text(payload)
        except Exception:
            logger.warning(
                "Failed to send message",
                connection_id=client.connection_id,
                room_code=client.room_code,
                exc_info=True,
            )
            return False
        return True

    @property
    def active_rooms(self) -> int:
        """Get the number of rooms with at least one bound connection."""
        return len(self._rooms)

    @property
    def total_connections(self) -> int:
        """Get the total number of connected sockets."""
        return len(self._clients)
