"""Game services for kaliyo-py."""

from kaliyo_py.services.rooms import RoomStore
from kaliyo_py.services.turns import GuessOutcome, RoomNotifier, TurnController

__all__ = ["GuessOutcome", "RoomNotifier", "RoomStore", "TurnController"]
