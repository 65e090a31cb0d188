"""
Pattern scanning and offset-to-position resolution shared by both engines.
"""

from dataclasses import dataclass
from typing import Iterator, NamedTuple, Optional, Union
import re

from outrider.core.errors import PatternError


class Position(NamedTuple):
    """1-based line and column of a character offset."""
    line: int
    column: int


@dataclass(frozen=True)
class Match:
    """A single pattern occurrence in file text."""
    text: str
    offset: int
    line: int
    column: int


PATTERN_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
}


def resolve_position(text: str, offset: int) -> Position:
    """
    Map a zero-based offset in ``text`` to a 1-based (line, column).

    The line is one plus the number of newlines before the offset; the
    column is the distance from the last newline before the offset.
    """
    line = text.count("\n", 0, offset) + 1
    column = offset - text.rfind("\n", 0, offset)
    return Position(line, column)


def compile_pattern(name: str, source: Union[str, re.Pattern], flags: str = "") -> re.Pattern:
    """
    Compile a textual pattern with single-letter flags (``i``, ``m``, ``s``, ``x``).

    Patterns are compiled in ASCII mode, so ``\\w``, ``\\b`` and ``\\d`` keep
    their JavaScript meaning.

    Raises:
        PatternError: if the flags are unknown or the expression is invalid.
    """
    if isinstance(source, re.Pattern):
        return source

    value = re.ASCII
    for letter in flags or "":
        if letter not in PATTERN_FLAGS:
            raise PatternError(name, source, f"unknown flag {letter!r}")
        value |= PATTERN_FLAGS[letter]

    try:
        return re.compile(source, value)
    except (re.error, TypeError) as e:
        raise PatternError(name, str(source), str(e)) from e


def scan(pattern: Optional[re.Pattern], text: str) -> Iterator[Match]:
    """
    Yield every non-overlapping occurrence of ``pattern`` in ``text``.

    Each call starts a fresh search from offset 0; no cursor state is kept
    on the pattern or anywhere else between calls.
    """
    if pattern is None:
        return
    for match in pattern.finditer(text):
        line, column = resolve_position(text, match.start())
        yield Match(
            text=match.group(0),
            offset=match.start(),
            line=line,
            column=column,
        )
