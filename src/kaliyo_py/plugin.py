"""Litestar plugin for kaliyo-py integration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from litestar.di import Provide
from litestar.plugins import InitPluginProtocol

from kaliyo_py.config import GameConfig
from kaliyo_py.game.wordbank import WordBank
from kaliyo_py.realtime.gateway import GameSessionGateway, create_game_websocket_router
from kaliyo_py.realtime.manager import ConnectionManager
from kaliyo_py.services.rooms import RoomStore
from kaliyo_py.services.turns import TurnController
from kaliyo_py.web import HealthController, create_router

if TYPE_CHECKING:
    from litestar.config.app import AppConfig


@dataclass
class KaliyoConfig:
    """Configuration for the Kaliyo plugin.

    Attributes:
        game_config: Rules and timings for every room. Read from the
            environment when None.
        word_bank: Prompt source. Uses the built-in letters when None.
        enable_api: Whether to mount the REST room endpoints.
        api_path: Base path for REST routes.
        ws_path: Base path for WebSocket routes; the game socket is at
            ``{ws_path}/game``.

    Example:
        >>> config = KaliyoConfig(game_config=GameConfig(turn_duration_seconds=60), ws_path="/socket")
    """

    game_config: GameConfig | None = None
    word_bank: WordBank | None = field(default=None, repr=False)
    enable_api: bool = True
    api_path: str = "/api"
    ws_path: str = "/ws"


class KaliyoPlugin(InitPluginProtocol):
    """Litestar plugin that wires up the guessing game.

    On app init it builds one room store, connection manager, turn controller
    and session gateway, registers them for dependency injection and mounts
    the game socket, the probes and (optionally) the REST endpoints.

    Example:
        >>> from litestar import Litestar
        >>> from kaliyo_py import KaliyoConfig, KaliyoPlugin
        >>>
        >>> app = Litestar(plugins=[KaliyoPlugin(KaliyoConfig())])
    """

    def __init__(self, config: KaliyoConfig | None = None) -> None:
        """Initialize the plugin with optional configuration.

        Args:
            config: Plugin configuration. Defaults are used if None.
        """
        self._config = config or KaliyoConfig()
        self._game_config: GameConfig | None = None
        self._room_store: RoomStore | None = None
        self._connection_manager: ConnectionManager | None = None
        self._turn_controller: TurnController | None = None
        self._gateway: GameSessionGateway | None = None

    def on_app_init(self, app_config: AppConfig) -> AppConfig:
        """Build the game services and register routes and dependencies.

        Args:
            app_config: The Litestar application configuration object.

        Returns:
            The modified application configuration.
        """
        game_config = self._config.game_config or GameConfig.from_env()
        self._game_config = game_config
        self._room_store = RoomStore(game_config)
        self._connection_manager = ConnectionManager()
        self._turn_controller = TurnController(
            self._room_store,
            self._connection_manager,
            word_bank=self._config.word_bank or WordBank(),
            config=game_config,
        )
        self._gateway = GameSessionGateway(
            self._room_store,
            self._turn_controller,
            self._connection_manager,
            game_config,
        )

        def provide_game_config() -> GameConfig:
            """Dependency provider for GameConfig."""
            return self.game_config

        def provide_room_store() -> RoomStore:
            """Dependency provider for RoomStore."""
            return self.room_store

        def provide_connection_manager() -> ConnectionManager:
            """Dependency provider for ConnectionManager."""
            return self.connection_manager

        def provide_turn_controller() -> TurnController:
            """Dependency provider for TurnController."""
            return self.turn_controller

        app_config.dependencies["game_config"] = Provide(provide_game_config, sync_to_thread=False)
        app_config.dependencies["room_store"] = Provide(provide_room_store, sync_to_thread=False)
        app_config.dependencies["connection_manager"] = Provide(provide_connection_manager, sync_to_thread=False)
        app_config.dependencies["turn_controller"] = Provide(provide_turn_controller, sync_to_thread=False)

        app_config.route_handlers.append(HealthController)
        app_config.route_handlers.append(create_game_websocket_router(self._config.ws_path, self._gateway))
        if self._config.enable_api:
            app_config.route_handlers.append(create_router(self._config.api_path))

        return app_config

    @property
    def game_config(self) -> GameConfig:
        """Get the rules in effect.

        Raises:
            RuntimeError: If on_app_init has not run yet.
        """
        if self._game_config is None:
            msg = "Plugin not initialized. Call on_app_init first."
            raise RuntimeError(msg)
        return self._game_config

    @property
    def room_store(self) -> RoomStore:
        """Get the room registry.

        Raises:
            RuntimeError: If on_app_init has not run yet.
        """
        if self._room_store is None:
            msg = "Plugin not initialized. Call on_app_init first."
            raise RuntimeError(msg)
        return self._room_store

    @property
    def connection_manager(self) -> ConnectionManager:
        """Get the connection manager.

        Raises:
            RuntimeError: If on_app_init has not run yet.
        """
        if self._connection_manager is None:
            msg = "Plugin not initialized. Call on_app_init first."
            raise RuntimeError(msg)
        return self._connection_manager

    @property
    def turn_controller(self) -> TurnController:
        """Get the turn controller.

        Raises:
            RuntimeError: If on_app_init has not run yet.
        """
        if self._turn_controller is None:
            msg = "Plugin not initialized. Call on_app_init first."
            raise RuntimeError(msg)
        return self._turn_controller

    @property
    def gateway(self) -> GameSessionGateway:
        """Get the session gateway.

        Raises:
            RuntimeError: If on_app_init has not run yet.
        """
        if self._gateway is None:
            msg = "Plugin not initialized. Call on_app_init first."
            raise RuntimeError(msg)
        return self._gateway
