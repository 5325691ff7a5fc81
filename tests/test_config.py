"""Tests for environment-driven configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kaliyo_py.config import GameConfig, env_flag
from kaliyo_py.game.models import GameState

if TYPE_CHECKING:
    import pytest


class TestGameConfig:
    """Test GameConfig defaults and overrides."""

    def test_defaults(self) -> None:
        """Defaults are the standard game rules."""
        config = GameConfig()

        assert config.max_players == 8
        assert config.min_players == 2
        assert config.default_score_goal == 50
        assert config.min_score_goal == 10
        assert config.turn_duration_seconds == 90
        assert config.next_turn_delay_seconds == 2.0

    def test_from_env_without_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """With no variables set, from_env matches the defaults."""
        for name in ("KALIYO_MAX_PLAYERS", "KALIYO_TURN_DURATION", "KALIYO_TICK_INTERVAL"):
            monkeypatch.delenv(name, raising=False)

        assert GameConfig.from_env() == GameConfig()

    def test_from_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Environment variables override the defaults."""
        monkeypatch.setenv("KALIYO_MAX_PLAYERS", "4")
        monkeypatch.setenv("KALIYO_TURN_DURATION", "60")
        monkeypatch.setenv("KALIYO_NEXT_TURN_DELAY", "0.5")

        config = GameConfig.from_env()

        assert config.max_players == 4
        assert config.turn_duration_seconds == 60
        assert config.next_turn_delay_seconds == 0.5
        assert config.min_players == 2


def test_env_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    """Truthy switch values are recognised case-insensitively."""
    monkeypatch.setenv("KALIYO_DEBUG", "Yes")
    assert env_flag("KALIYO_DEBUG") is True

    monkeypatch.setenv("KALIYO_DEBUG", "off")
    assert env_flag("KALIYO_DEBUG") is False

    monkeypatch.delenv("KALIYO_DEBUG")
    assert env_flag("KALIYO_DEBUG") is False


def test_new_room_goal_matches_config_default() -> None:
    """A fresh game state starts with the configured default goal."""
    assert GameState().score_goal == GameConfig().default_score_goal
