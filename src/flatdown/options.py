#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for tokenizing and flattening Markdown.

Both option classes are frozen dataclasses. Use
:meth:`CloneFrozenMixin.create_updated` to derive a modified copy.
"""
# src/flatdown/options.py

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from flatdown.constants import (
    DEFAULT_BULLET_CHAR,
    DEFAULT_GFM,
    DEFAULT_PARSE_AUTOLINKS,
    DEFAULT_PARSE_STRIKETHROUGH,
    DEFAULT_PARSE_TABLES,
    DEFAULT_PARSE_TASK_LISTS,
    DEFAULT_QUOTE_PREFIX,
    PLUGIN_STRIKETHROUGH,
    PLUGIN_TABLE,
    PLUGIN_TASK_LISTS,
    PLUGIN_URL,
)
from flatdown.positions import byte_length


class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities.

    This mixin adds the ability to create modified copies of frozen dataclass
    instances, which is useful for immutable configuration objects.
    """

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)  # type: ignore[type-var]

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        """Return the names of the dataclass fields, in declaration order."""
        return tuple(f.name for f in fields(cls))  # type: ignore[arg-type]


@dataclass(frozen=True)
class LexerOptions(CloneFrozenMixin):
    """Configuration options for the Markdown tokenizer.

    Parameters
    ----------
    gfm : bool, default True
        Whether to enable GitHub-flavored extensions at all. When False, every
        ``parse_*`` flag below is ignored and plain CommonMark rules apply.
    parse_strikethrough : bool, default True
        Whether to parse strikethrough syntax (~~text~~).
    parse_tables : bool, default True
        Whether to parse table syntax (GFM pipe tables).
    parse_task_lists : bool, default True
        Whether to parse task list checkboxes (- [ ] and - [x]).
    parse_autolinks : bool, default True
        Whether bare ``http(s)://`` URLs become links.

    """

    gfm: bool = field(
        default=DEFAULT_GFM,
        metadata={"help": "Enable GitHub-flavored Markdown extensions"},
    )
    parse_strikethrough: bool = field(
        default=DEFAULT_PARSE_STRIKETHROUGH,
        metadata={"help": "Parse ~~strikethrough~~ spans"},
    )
    parse_tables: bool = field(
        default=DEFAULT_PARSE_TABLES,
        metadata={"help": "Parse pipe tables"},
    )
    parse_task_lists: bool = field(
        default=DEFAULT_PARSE_TASK_LISTS,
        metadata={"help": "Parse task list checkboxes"},
    )
    parse_autolinks: bool = field(
        default=DEFAULT_PARSE_AUTOLINKS,
        metadata={"help": "Turn bare URLs into links"},
    )

    def __post_init__(self) -> None:
        """Reject non-boolean flags."""
        for name in self.field_names():
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ValueError(f"LexerOptions.{name} must be a bool, got {type(value).__name__}")

    @property
    def plugins(self) -> list[str]:
        """Names of the mistune plugins these options enable."""
        if not self.gfm:
            return []
        plugins = []
        if self.parse_strikethrough:
            plugins.append(PLUGIN_STRIKETHROUGH)
        if self.parse_tables:
            plugins.append(PLUGIN_TABLE)
        if self.parse_task_lists:
            plugins.append(PLUGIN_TASK_LISTS)
        if self.parse_autolinks:
            plugins.append(PLUGIN_URL)
        return plugins


@dataclass(frozen=True)
class RendererOptions(CloneFrozenMixin):
    """Configuration options for the flattening renderer.

    Parameters
    ----------
    bullet_char : str, default "•"
        Glyph that labels unordered list items. Its UTF-8 byte width sets the
        label column width.
    quote_prefix : str, default "> "
        Prefix added to every line of a block quote. Attributes inside the
        quote shift right by its byte length.

    """

    bullet_char: str = field(
        default=DEFAULT_BULLET_CHAR,
        metadata={"help": "Glyph used for unordered list items"},
    )
    quote_prefix: str = field(
        default=DEFAULT_QUOTE_PREFIX,
        metadata={"help": "Prefix for block quote lines"},
    )

    def __post_init__(self) -> None:
        """Validate that glyphs are non-empty and fit on one line."""
        for name in ("bullet_char", "quote_prefix"):
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ValueError(f"RendererOptions.{name} must be a string, got {type(value).__name__}")
            if not value:
                raise ValueError(f"RendererOptions.{name} must not be empty")
            if "\n" in value or "\r" in value:
                raise ValueError(f"RendererOptions.{name} must be a single line, got {value!r}")

    @property
    def quote_shift(self) -> int:
        """Byte width of :attr:`quote_prefix`."""
        return byte_length(self.quote_prefix)

    @property
    def bullet_width(self) -> int:
        """Byte width of :attr:`bullet_char`."""
        return byte_length(self.bullet_char)
