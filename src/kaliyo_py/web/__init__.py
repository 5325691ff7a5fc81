"""HTTP layer for kaliyo-py: probes and room lookups."""

from __future__ import annotations

from litestar import Router

from kaliyo_py.web.health import HealthController
from kaliyo_py.web.rooms import RoomController, RoomSummaryDTO


def create_router(path: str = "/api") -> Router:
    """Create the REST API router.

    Args:
        path: The base path for all API routes. Defaults to "/api".

    Returns:
        A Litestar Router with the room endpoints mounted under ``path``.
    """
    return Router(path=path, route_handlers=[RoomController])


__all__ = ["HealthController", "RoomController", "RoomSummaryDTO", "create_router"]
