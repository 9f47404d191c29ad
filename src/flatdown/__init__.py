"""flatdown - flatten Markdown into display lines and attribute spans.

flatdown tokenizes Markdown with mistune and renders the token tree into two
aligned artifacts: a list of plain display lines with the markup removed, and
a list of attribute spans that locate titles, emphasis, links, code and rules
in those lines. Coordinates are 1-indexed lines and UTF-8 byte columns, ready
for display layers that highlight text by byte offset.

Examples
--------
Flatten Markdown source:

    >>> from flatdown import parse_markdown
    >>> result = parse_markdown("# Title\\n\\nSome *emphasis* here")
    >>> result.text
    ['# Title', 'Some emphasis here']

Render a token tree built by hand:

    >>> from flatdown import render_tokens
    >>> from flatdown.tokens import Paragraph, Strong, Text
    >>> render_tokens([Paragraph(tokens=[Strong(tokens=[Text(text="bold")])])]).text
    ['bold']

See Also
--------
flatdown.renderer : the flattening renderer
flatdown.lexer : mistune-backed tokenizer

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "flatdown requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from flatdown.api import parse_markdown, render_tokens  # noqa: E402
from flatdown.attrs import (  # noqa: E402
    TEXT_ATTR_TYPES,
    FencedAttr,
    HorizontalRuleAttr,
    SpanAttr,
    TextAttrItem,
    TitleAttr,
)
from flatdown.exceptions import (  # noqa: E402
    ConfigurationError,
    FlatdownError,
    InternalRenderError,
    UnsupportedTokenError,
    ValidationError,
)
from flatdown.lexer import MarkdownLexer  # noqa: E402
from flatdown.options import LexerOptions, RendererOptions  # noqa: E402
from flatdown.positions import Position, Range  # noqa: E402
from flatdown.renderer import FlatteningRenderer, RenderResult  # noqa: E402

__all__ = [
    "__version__",
    "parse_markdown",
    "render_tokens",
    "FlatteningRenderer",
    "RenderResult",
    "MarkdownLexer",
    "LexerOptions",
    "RendererOptions",
    "Position",
    "Range",
    "TEXT_ATTR_TYPES",
    "TextAttrItem",
    "FencedAttr",
    "TitleAttr",
    "HorizontalRuleAttr",
    "SpanAttr",
    "FlatdownError",
    "ValidationError",
    "ConfigurationError",
    "UnsupportedTokenError",
    "InternalRenderError",
]
