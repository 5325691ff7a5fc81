"""Type definitions for the guessing game."""

from __future__ import annotations

from enum import StrEnum


class ChatMessageKind(StrEnum):
    """Kind of chat message shown in the room chat."""

    CHAT = "chat"
    SYSTEM = "system"


class TurnPhase(StrEnum):
    """Phase of a room's turn state machine."""

    IDLE = "idle"
    TURN_IN_PROGRESS = "turn_in_progress"
