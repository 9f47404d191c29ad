#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Unit tests for lexer and renderer options."""

from dataclasses import fields

import pytest

from flatdown.options import LexerOptions, RendererOptions


@pytest.mark.unit
class TestLexerOptions:
    """Test LexerOptions defaults, validation and plugin selection."""

    def test_defaults_enable_every_extension(self) -> None:
        options = LexerOptions()
        assert options.gfm
        assert options.plugins == ["strikethrough", "table", "task_lists", "url"]

    def test_gfm_off_disables_plugins(self) -> None:
        assert LexerOptions(gfm=False).plugins == []

    def test_single_flag(self) -> None:
        assert "table" not in LexerOptions(parse_tables=False).plugins
        assert "url" not in LexerOptions(parse_autolinks=False).plugins

    @pytest.mark.parametrize("name", ["gfm", "parse_tables", "parse_task_lists"])
    def test_non_bool_rejected(self, name: str) -> None:
        with pytest.raises(ValueError, match="must be a bool"):
            LexerOptions(**{name: "yes"})

    def test_create_updated(self) -> None:
        original = LexerOptions()
        updated = original.create_updated(parse_strikethrough=False)
        assert original.parse_strikethrough
        assert not updated.parse_strikethrough

    def test_create_updated_validates(self) -> None:
        with pytest.raises(ValueError):
            LexerOptions().create_updated(gfm=1)

    def test_every_field_has_help(self) -> None:
        for f in fields(LexerOptions):
            assert f.metadata.get("help"), f.name

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            LexerOptions().gfm = False  # type: ignore[misc]


@pytest.mark.unit
class TestRendererOptions:
    """Test RendererOptions defaults and validation."""

    def test_defaults(self) -> None:
        options = RendererOptions()
        assert options.bullet_char == "•"
        assert options.quote_prefix == "> "

    def test_byte_widths(self) -> None:
        options = RendererOptions()
        assert options.bullet_width == 3
        assert options.quote_shift == 2

    def test_custom_widths(self) -> None:
        options = RendererOptions(bullet_char="*", quote_prefix="│ ")
        assert options.bullet_width == 1
        assert options.quote_shift == 4

    @pytest.mark.parametrize("value", ["", "a\nb", "\r"])
    def test_bad_bullet_rejected(self, value: str) -> None:
        with pytest.raises(ValueError):
            RendererOptions(bullet_char=value)

    def test_non_string_rejected(self) -> None:
        with pytest.raises(ValueError, match="must be a string"):
            RendererOptions(quote_prefix=2)  # type: ignore[arg-type]

    def test_field_names(self) -> None:
        assert RendererOptions.field_names() == ("bullet_char", "quote_prefix")
