"""
String scanner used by the template parser.

A cursor over an immutable string with anchored matching, modeled on
Ruby's StringScanner. Knows nothing about template syntax.
"""
from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Optional, Tuple, Union

from .errors import OutOfRange

PatternLike = Union[str, "re.Pattern[str]"]


@dataclass(frozen=True)
class Match:
    """Result of an anchored match: the matched text and its capture groups."""
    text: str
    groups: Tuple[Optional[str], ...] = ()

    def group(self, index: int) -> Optional[str]:
        if index == 0:
            return self.text
        return self.groups[index - 1]


@dataclass(frozen=True)
class UntilMatch:
    """Result of a forward search.

    ``consumed`` is everything from the cursor up to and including the match,
    ``text`` is the match itself.
    """
    consumed: str
    text: str
    groups: Tuple[Optional[str], ...] = ()

    @property
    def before(self) -> str:
        return self.consumed[: len(self.consumed) - len(self.text)]


def _compile(pattern: PatternLike) -> re.Pattern[str]:
    if isinstance(pattern, str):
        return re.compile(pattern)
    return pattern


class Scanner:
    def __init__(self, text: str):
        self._text = text
        self._pos = 0

    def __len__(self) -> int:
        return len(self._text)

    def __repr__(self) -> str:
        return f"Scanner(pos={self._pos}, len={len(self._text)})"

    @property
    def text(self) -> str:
        return self._text

    @property
    def pos(self) -> int:
        return self._pos

    @pos.setter
    def pos(self, value: int) -> None:
        self.set_pos(value)

    def set_pos(self, pos: int) -> None:
        if pos < 0 or pos > len(self._text):
            raise OutOfRange(f"pos {pos} is outside the allowed range of [0, {len(self._text)}]")
        self._pos = pos

    # -----------------------------
    # Matching
    # -----------------------------
    def check(self, pattern: PatternLike) -> Optional[Match]:
        """Match ``pattern`` exactly at the cursor without moving it."""
        m = _compile(pattern).match(self._text, self._pos)
        if m is None:
            return None
        return Match(m.group(0), m.groups())

    def scan(self, pattern: PatternLike) -> Optional[Match]:
        """Match ``pattern`` exactly at the cursor and advance past it."""
        m = self.check(pattern)
        if m is not None:
            self._pos += len(m.text)
        return m

    def check_until(self, pattern: PatternLike) -> Optional[UntilMatch]:
        """Find the first occurrence of ``pattern`` after the cursor without moving it."""
        m = _compile(pattern).search(self._text, self._pos)
        if m is None:
            return None
        return UntilMatch(self._text[self._pos:m.end()], m.group(0), m.groups())

    def scan_until(self, pattern: PatternLike) -> Optional[UntilMatch]:
        """Find the first occurrence of ``pattern`` and advance just past it."""
        m = self.check_until(pattern)
        if m is not None:
            self._pos += len(m.consumed)
        return m

    # -----------------------------
    # Position helpers
    # -----------------------------
    def substring(self, start: int, end: int) -> str:
        n = len(self._text)
        if start < 0 or start >= n:
            raise OutOfRange(f"start index {start} is outside the allowed range of [0, {n})")
        if end < 0 or end > n:
            raise OutOfRange(f"end index {end} is outside the allowed range of [0, {n}]")
        if start >= end:
            raise OutOfRange(f"start index {start} is >= end index {end}")
        return self._text[start:end]

    def at_start_of_line(self) -> bool:
        return self._pos == 0 or self._text[self._pos - 1] == "\n"

    def done(self) -> bool:
        return self._pos == len(self._text)

    def line_col(self, pos: Optional[int] = None) -> Tuple[int, int]:
        """1-based line and column of ``pos`` (the cursor by default)."""
        if pos is None:
            pos = self._pos
        line = self._text.count("\n", 0, pos) + 1
        column = pos - (self._text.rfind("\n", 0, pos) + 1) + 1
        return line, column


__all__ = ["Scanner", "Match", "UntilMatch"]
