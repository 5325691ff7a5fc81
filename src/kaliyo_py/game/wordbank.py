"""Word bank of Kannada letters for the guessing game."""

from __future__ import annotations

import random
import unicodedata
from dataclasses import dataclass, field

import structlog

logger = structlog.get_logger(__name__)


def simplify_ascii(text: str) -> str:
    """Strip diacritics so that e.g. "ṭha" becomes "tha".

    Args:
        text: Transliteration that may contain combining marks.

    Returns:
        The text reduced to its ASCII letters.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).encode("ascii", "ignore").decode()


@dataclass(frozen=True)
class WordEntry:
    """One prompt: a displayable letter and the guesses that count as correct.

    Attributes:
        display_form: The letter shown to the drawer and revealed to guessers.
        transliteration: Latin transliteration of the letter.
        accepted_answers: Lowercased strings accepted as a correct guess.
    """

    display_form: str
    transliteration: str
    accepted_answers: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_letter(cls, script: str, latin: str) -> WordEntry:
        """Build an entry accepting the script, the transliteration and its ASCII form.

        The ASCII form drops vowel-length marks, so "e" is accepted for both
        ಎ (e) and ಏ (ē), and "o" for both ಒ and ಓ.

        Args:
            script: The Kannada letter.
            latin: Its transliteration.

        Returns:
            The word entry.
        """
        answers = {script.strip().casefold(), latin.strip().casefold()}
        simplified = simplify_ascii(latin).strip().casefold()
        if simplified:
            answers.add(simplified)
        return cls(display_form=script, transliteration=latin, accepted_answers=frozenset(answers))

    def to_dict(self) -> dict[str, str]:
        """Convert to the wire form sent to the drawer and on reveal."""
        return {"script": self.display_form, "latin": self.transliteration}


KANNADA_LETTERS: tuple[tuple[str, str], ...] = (
    # Vowels (swara)
    ("ಅ", "a"),
    ("ಆ", "aa"),
    ("ಇ", "i"),
    ("ಈ", "ee"),
    ("ಉ", "u"),
    ("ಊ", "oo"),
    ("ಋ", "ru"),
    ("ಎ", "e"),
    ("ಏ", "ē"),
    ("ಐ", "ai"),
    ("ಒ", "o"),
    ("ಓ", "ō"),
    ("ಔ", "au"),
    # Consonants (vyanjana)
    ("ಕ", "ka"),
    ("ಖ", "kha"),
    ("ಗ", "ga"),
    ("ಘ", "gha"),
    ("ಚ", "cha"),
    ("ಛ", "chha"),
    ("ಜ", "ja"),
    ("ಝ", "jha"),
    ("ಟ", "ṭa"),
    ("ಠ", "ṭha"),
    ("ಡ", "ḍa"),
    ("ಢ", "ḍha"),
    ("ತ", "ta"),
    ("ಥ", "tha"),
    ("ದ", "da"),
    ("ಧ", "dha"),
    ("ನ", "na"),
    ("ಪ", "pa"),
    ("ಫ", "pha"),
    ("ಬ", "ba"),
    ("ಭ", "bha"),
    ("ಮ", "ma"),
    ("ಯ", "ya"),
    ("ರ", "ra"),
    ("ಲ", "la"),
    ("ವ", "va"),
    ("ಶ", "sha"),
    ("ಷ", "ṣha"),
    ("ಸ", "sa"),
    ("ಹ", "ha"),
    ("ಳ", "ḷa"),
)


class WordBank:
    """Immutable table of prompts with uniform random selection.

    Selection is independent of history: the same letter may come up on
    consecutive turns.

    Attributes:
        entries: All prompts, in table order.
    """

    def __init__(self, entries: list[WordEntry] | None = None, *, rng: random.Random | None = None) -> None:
        """Initialize the word bank.

        Args:
            entries: Custom prompts. If None, uses the built-in Kannada letters.
            rng: Random source, injectable for deterministic tests.
        """
        if entries is None:
            entries = [WordEntry.from_letter(script, latin) for script, latin in KANNADA_LETTERS]
        if not entries:
            msg = "Word bank needs at least one entry"
            raise ValueError(msg)
        self.entries: tuple[WordEntry, ...] = tuple(entries)
        self._rng = rng or random.Random()
        logger.debug("Word bank loaded", entry_count=len(self.entries))

    def __len__(self) -> int:
        return len(self.entries)

    def random_entry(self) -> WordEntry:
        """Pick a prompt uniformly at random.

        Returns:
            The selected word entry.
        """
        return self._rng.choice(self.entries)

    def find(self, display_form: str) -> WordEntry | None:
        """Look up an entry by its display form.

        Args:
            display_form: The letter to find.

        Returns:
            The entry, or None if the letter is not in the bank.
        """
        return next((e for e in self.entries if e.display_form == display_form), None)
