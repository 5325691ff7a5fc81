"""Minimal example embedding the guessing game in your own Litestar app.

The plugin builds the room store, turn controller and session gateway, and
mounts:
    - the game socket at /play/game
    - the probes at /health and /ready
    - room lookups at /api/rooms/{code}

Running the Application:
    python examples/app.py

Then connect a WebSocket client to ws://127.0.0.1:8000/play/game and send:
    {"type": "create_room", "player_name": "Asha"}

A second client joins with the returned room code:
    {"type": "join_room", "room_code": "1234", "player_name": "Ravi"}

and the host starts the game:
    {"type": "start_game", "score_goal": 30}
"""

from __future__ import annotations

from litestar import Litestar

from kaliyo_py import GameConfig, KaliyoConfig, KaliyoPlugin

app = Litestar(
    plugins=[
        KaliyoPlugin(
            KaliyoConfig(
                # Shorter turns and smaller rooms than the defaults
                game_config=GameConfig(turn_duration_seconds=60, max_players=6),
                enable_api=True,
                api_path="/api",
                # Game socket lives at /play/game
                ws_path="/play",
            )
        )
    ],
    debug=True,
)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="127.0.0.1",
        port=8000,
        log_level="info",
    )
