"""Game domain for kaliyo-py.

Contains the room and player models, the word bank of Kannada letters and
the guess scoring rules.
"""

from __future__ import annotations

__all__ = [
    "ChatMessageKind",
    "GameState",
    "Player",
    "RemovalResult",
    "Room",
    "TurnPhase",
    "WordBank",
    "WordEntry",
    "calculate_points",
    "is_correct_guess",
    "normalize_guess",
]

from kaliyo_py.game.models import GameState, Player, RemovalResult, Room
from kaliyo_py.game.scoring import calculate_points, is_correct_guess, normalize_guess
from kaliyo_py.game.types import ChatMessageKind, TurnPhase
from kaliyo_py.game.wordbank import WordBank, WordEntry
