"""Custom exceptions for kaliyo-py."""

from __future__ import annotations


class KaliyoError(Exception):
    """Base exception class for all kaliyo-py errors.

    Attributes:
        code: Stable machine-readable error code sent to clients.
    """

    code: str = "error"


class RoomNotFoundError(KaliyoError):
    """Raised when a room code does not resolve to a live room.

    Attributes:
        room_code: The code that was looked up.
    """

    code = "room_not_found"

    def __init__(self, room_code: str) -> None:
        """Initialize the exception with the room code.

        Args:
            room_code: The code that was not found.
        """
        self.room_code = room_code
        super().__init__(f"Room {room_code} not found")


class InvalidStateError(KaliyoError):
    """Raised when an action is attempted in a state that forbids it."""

    code = "invalid_state"


class InsufficientPlayersError(KaliyoError):
    """Raised when an action requires more players than the room has.

    Attributes:
        required: Minimum number of players needed.
        available: Number of players currently in the room.
    """

    code = "insufficient_players"

    def __init__(self, required: int, available: int) -> None:
        """Initialize the exception.

        Args:
            required: Minimum number of players needed.
            available: Number of players currently in the room.
        """
        self.required = required
        self.available = available
        super().__init__(f"Need at least {required} players to start (currently {available})")


class ForbiddenError(KaliyoError):
    """Raised when the actor lacks the role an action requires."""

    code = "forbidden"


class IdExhaustionError(KaliyoError):
    """Raised when no unused room code could be generated.

    Attributes:
        attempts: Number of candidate codes that were tried.
    """

    code = "id_exhaustion"

    def __init__(self, attempts: int) -> None:
        """Initialize the exception.

        Args:
            attempts: Number of candidate codes that were tried.
        """
        self.attempts = attempts
        super().__init__(f"Could not generate a unique room code after {attempts} attempts")


class InvalidMessageError(KaliyoError):
    """Raised when an inbound message does not match its schema."""

    code = "invalid_message"
