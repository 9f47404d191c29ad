#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Unit tests for positions and ranges."""

import pytest

from flatdown.positions import Position, Range, byte_length, text_range


@pytest.mark.unit
class TestByteLength:
    """Test UTF-8 byte measurement."""

    def test_ascii(self) -> None:
        assert byte_length("abc") == 3

    def test_empty(self) -> None:
        assert byte_length("") == 0

    def test_multibyte(self) -> None:
        """Test that columns count bytes, not characters."""
        assert byte_length("•") == 3
        assert byte_length("日本") == 6
        assert byte_length("é") == 2
        assert byte_length("😀") == 4


@pytest.mark.unit
class TestPosition:
    """Test the Position value type."""

    def test_fields(self) -> None:
        position = Position(line=2, character=5)
        assert position.line == 2
        assert position.character == 5

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            Position(line=-1, character=1)
        with pytest.raises(ValueError):
            Position(line=1, character=-3)

    def test_zero_allowed(self) -> None:
        """Test that zero is a valid coordinate (shift deltas use it)."""
        assert Position(0, 0) == Position(line=0, character=0)

    def test_shifted(self) -> None:
        assert Position(1, 4).shifted(Position(2, 3)) == Position(3, 7)

    def test_frozen(self) -> None:
        position = Position(1, 1)
        with pytest.raises(AttributeError):
            position.line = 5  # type: ignore[misc]

    def test_dict_form(self) -> None:
        position = Position(3, 9)
        assert position.to_dict() == {"line": 3, "character": 9}
        assert Position.from_dict({"line": 3, "character": 9}) == position


@pytest.mark.unit
class TestRange:
    """Test the Range value type."""

    def test_text_range_shorthand(self) -> None:
        assert text_range(1, 2, 3, 4) == Range(start=Position(1, 2), end=Position(3, 4))

    def test_shifted_moves_both_ends(self) -> None:
        shifted = text_range(1, 1, 1, 5).shifted(Position(2, 3))
        assert shifted == text_range(3, 4, 3, 8)

    def test_dict_form(self) -> None:
        data = {"start": {"line": 1, "character": 1}, "end": {"line": 2, "character": 7}}
        assert text_range(1, 1, 2, 7).to_dict() == data
        assert Range.from_dict(data) == text_range(1, 1, 2, 7)

    def test_from_dict_missing_key(self) -> None:
        with pytest.raises(KeyError):
            Range.from_dict({"start": {"line": 1, "character": 1}})
