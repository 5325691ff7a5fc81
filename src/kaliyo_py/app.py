"""Main Litestar application for kaliyo-py.

This module provides the application factory and the configured app instance
for running the game server standalone::

    uvicorn kaliyo_py.app:app
"""

from __future__ import annotations

from litestar import Litestar
from litestar.openapi import OpenAPIConfig
from litestar.openapi.plugins import SwaggerRenderPlugin

from kaliyo_py.config import GameConfig, env_flag
from kaliyo_py.core.error_handling import get_exception_handlers
from kaliyo_py.core.logging import configure_logging, get_middleware
from kaliyo_py.plugin import KaliyoConfig, KaliyoPlugin


def create_app(
    *,
    game_config: GameConfig | None = None,
    enable_api: bool = True,
    debug: bool = False,
    json_logs: bool = False,
) -> Litestar:
    """Create and configure the Litestar application.

    Args:
        game_config: Game rules. Read from the environment when None.
        enable_api: Whether to mount the REST room endpoints.
        debug: Whether to enable debug mode and debug logging.
        json_logs: Whether to output logs as JSON (for production).

    Returns:
        Configured Litestar application instance.
    """
    configure_logging(debug=debug, json_logs=json_logs)

    return Litestar(
        plugins=[KaliyoPlugin(KaliyoConfig(game_config=game_config, enable_api=enable_api))],
        debug=debug,
        middleware=get_middleware(),
        exception_handlers=get_exception_handlers(),
        openapi_config=OpenAPIConfig(
            title="kaliyo-py API",
            version="0.1.0",
            description="Real-time cooperative drawing and guessing game server",
            path="/schema",
            render_plugins=[SwaggerRenderPlugin(path="/swagger")],
            use_handler_docstrings=True,
        ),
    )


# Default application instance for uvicorn
# Use KALIYO_DEBUG=true for dev mode and KALIYO_JSON_LOGS=true for JSON logs
app = create_app(debug=env_flag("KALIYO_DEBUG"), json_logs=env_flag("KALIYO_JSON_LOGS"))
