"""Health check endpoints for kaliyo-py.

Provides /health and /ready endpoints for container orchestration
and load balancer health checks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, ClassVar

from litestar import Controller, get

from kaliyo_py.realtime.manager import ConnectionManager  # noqa: TC001
from kaliyo_py.services.rooms import RoomStore  # noqa: TC001


class HealthStatus(StrEnum):
    """Health check status values."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


@dataclass
class HealthResponse:
    """Health check response."""

    status: HealthStatus
    version: str = "0.1.0"
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())
    rooms: int = 0
    connections: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "status": self.status.value,
            "version": self.version,
            "timestamp": self.timestamp,
            "rooms": self.rooms,
            "connections": self.connections,
        }


class HealthController(Controller):
    """Liveness and readiness probes.

    The server keeps all state in memory, so it is ready as soon as the room
    store exists; the probes also report how busy it is.
    """

    path = ""
    include_in_schema: ClassVar[bool] = True
    tags: ClassVar[list[str]] = ["Health"]

    @get("/health")
    async def health(self, room_store: RoomStore, connection_manager: ConnectionManager) -> dict[str, Any]:
        """Liveness probe endpoint.

        Returns:
            Health status with live room and connection counts.
        """
        response = HealthResponse(
            status=HealthStatus.HEALTHY,
            rooms=len(room_store),
            connections=connection_manager.total_connections,
        )
        return response.to_dict()

    @get("/ready")
    async def ready(self, room_store: RoomStore) -> dict[str, Any]:
        """Readiness probe endpoint.

        Returns:
            Readiness flag and the number of live rooms.
        """
        return {
            "ready": True,
            "timestamp": datetime.now(UTC).isoformat(),
            "rooms": len(room_store),
        }
