"""Guess evaluation and scoring."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kaliyo_py.game.wordbank import WordEntry


def normalize_guess(text: str) -> str:
    """Trim surrounding whitespace and case-fold a guess."""
    return text.strip().casefold()


def is_correct_guess(entry: WordEntry, guess_text: str) -> bool:
    """Check a guess against an entry's accepted answers.

    Matching is exact after normalization; there is no fuzzy matching.

    Args:
        entry: The prompt being drawn.
        guess_text: The raw guess.

    Returns:
        True if the guess equals any accepted answer.
    """
    guess = normalize_guess(guess_text)
    if not guess:
        return False
    return guess in {normalize_guess(answer) for answer in entry.accepted_answers}


def calculate_points(time_left: int, turn_duration: int, base_points: int = 10) -> int:
    """Calculate the award for a correct guess.

    A flat base plus a bonus that decays linearly with elapsed time, so an
    instant guess earns ``2 * base_points`` and a last-second guess earns
    ``base_points``.

    Args:
        time_left: Seconds remaining in the turn.
        turn_duration: Total seconds in a turn.
        base_points: Flat award for any correct guess.

    Returns:
        Points to award.
    """
    if turn_duration <= 0:
        return base_points
    time_factor = min(1.0, max(0.0, time_left / turn_duration))
    return base_points + round(base_points * time_factor)
