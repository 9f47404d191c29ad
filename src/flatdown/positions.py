#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flatdown/positions.py
"""Position and range primitives for the flattened text buffer.

Coordinates address the flattened output by line and by *byte* column. The
renderer's bookkeeping is 1-indexed: the first byte of the first line sits at
``Position(line=1, character=1)``. A range's ``end`` is the column right after
the last byte it covers.

Columns are always measured in UTF-8 bytes, never in characters, because the
display layers that consume the output address text by byte offset.

"""

from __future__ import annotations

from dataclasses import dataclass


def byte_length(text: str) -> int:
    """Return the UTF-8 encoded length of ``text``.

    Parameters
    ----------
    text : str
        Text to measure

    Returns
    -------
    int
        Number of bytes in the UTF-8 encoding of ``text``

    Examples
    --------
        >>> byte_length("abc")
        3
        >>> byte_length("•")
        3

    """
    return len(text.encode("utf-8"))


@dataclass(frozen=True)
class Position:
    """A line/byte-column position in the flattened text.

    Parameters
    ----------
    line : int
        Line number
    character : int
        Byte column within ``line``

    """

    line: int
    character: int

    def __post_init__(self) -> None:
        """Reject negative coordinates."""
        if self.line < 0 or self.character < 0:
            raise ValueError(f"Position coordinates must be non-negative, got ({self.line}, {self.character})")

    def shifted(self, delta: Position) -> Position:
        """Return this position moved by ``delta`` on both axes."""
        return Position(line=self.line + delta.line, character=self.character + delta.character)

    def to_dict(self) -> dict[str, int]:
        return {"line": self.line, "character": self.character}

    @classmethod
    def from_dict(cls, data: dict[str, int]) -> Position:
        return cls(line=int(data["line"]), character=int(data["character"]))


@dataclass(frozen=True)
class Range:
    """A span between two positions.

    Parameters
    ----------
    start : Position
        Position of the first byte covered by the range
    end : Position
        Position right after the last byte covered by the range

    """

    start: Position
    end: Position

    def shifted(self, delta: Position) -> Range:
        """Return this range with both ends moved by ``delta``."""
        return Range(start=self.start.shifted(delta), end=self.end.shifted(delta))

    def to_dict(self) -> dict[str, dict[str, int]]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, dict[str, int]]) -> Range:
        return cls(start=Position.from_dict(data["start"]), end=Position.from_dict(data["end"]))


def text_range(start_line: int, start_character: int, end_line: int, end_character: int) -> Range:
    """Build a :class:`Range` from four integers.

    Shorthand used by callers that assemble ranges by hand, mostly tests and
    consumers that deserialize coordinates.
    """
    return Range(Position(start_line, start_character), Position(end_line, end_character))
