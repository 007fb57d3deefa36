"""Alphabets: ordered sets of candidate characters.

The order of an alphabet matters. When two glyphs score exactly the same
against a chunk, the one that appears first in the alphabet wins.
"""

import string
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from img2ascii.exceptions import (
    DuplicateCharacterError,
    EmptyAlphabetError,
    UnknownAlphabetError,
)

BUILTIN_ALPHABETS: dict[str, str] = {
    "alphabet": "".join(chr(c) for c in range(32, 127)),
    "letters": string.ascii_letters,
    "lowercase": string.ascii_lowercase,
    "uppercase": string.ascii_uppercase,
    "minimal": " .:-=+*#%@",
    "symbols": " !\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~",
}


@dataclass(frozen=True)
class Alphabet:
    """An ordered set of distinct characters.

    Attributes:
        chars: Characters in priority order
    """

    chars: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.chars:
            raise EmptyAlphabetError()
        seen: set[str] = set()
        for char in self.chars:
            if len(char) != 1:
                raise ValueError(f"Alphabet entries must be single characters, got {char!r}")
            if char in seen:
                raise DuplicateCharacterError(char)
            seen.add(char)

    @classmethod
    def from_string(cls, text: str) -> "Alphabet":
        """Create an alphabet from a string, rejecting duplicates."""
        return cls(chars=tuple(text))

    @classmethod
    def from_text(cls, text: str) -> "Alphabet":
        """Create an alphabet from free-form text.

        Line breaks are dropped and repeated characters keep their first
        position, so any text file can serve as an alphabet.
        """
        unique = dict.fromkeys(ch for ch in text if ch not in "\r\n")
        return cls(chars=tuple(unique))

    @classmethod
    def builtin(cls, name: str) -> "Alphabet":
        """Get one of the built-in alphabets by name.

        Raises:
            UnknownAlphabetError: If no built-in alphabet has that name
        """
        try:
            return cls.from_string(BUILTIN_ALPHABETS[name])
        except KeyError:
            raise UnknownAlphabetError(name) from None

    @classmethod
    def resolve(cls, source: str) -> "Alphabet":
        """Resolve a built-in alphabet name or a path to a text file.

        Args:
            source: Built-in name (e.g. "minimal") or file path

        Returns:
            The resolved alphabet

        Raises:
            UnknownAlphabetError: If source is neither a name nor an existing file
        """
        if source in BUILTIN_ALPHABETS:
            return cls.builtin(source)

        path = Path(source)
        if not path.is_file():
            raise UnknownAlphabetError(source)
        return cls.from_text(path.read_text(encoding="utf-8"))

    def __iter__(self) -> Iterator[str]:
        return iter(self.chars)

    def __len__(self) -> int:
        return len(self.chars)

    def __contains__(self, char: object) -> bool:
        return char in self.chars

    def __str__(self) -> str:
        return "".join(self.chars)

    def index(self, char: str) -> int:
        """Position of a character in the alphabet."""
        return self.chars.index(char)
