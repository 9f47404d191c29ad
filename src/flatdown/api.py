#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flatdown/api.py
"""Public entry points for flattening Markdown.

``parse_markdown`` tokenizes and renders Markdown source in one call.
``render_tokens`` renders a token tree that was built elsewhere. Both drop
trailing blank lines from the output and report unsupported constructs as
:class:`~flatdown.exceptions.InternalRenderError`; every other exception
propagates unchanged.

"""

from __future__ import annotations

import logging
from typing import Sequence

from flatdown.exceptions import InternalRenderError, UnsupportedTokenError
from flatdown.lexer import MarkdownLexer
from flatdown.logging_utils import debug_timer
from flatdown.options import LexerOptions, RendererOptions
from flatdown.renderer import FlatteningRenderer, RenderResult, drop_trailing_blank_lines
from flatdown.tokens import Token

logger = logging.getLogger(__name__)


def _render(tokens: Sequence[Token], options: RendererOptions | None) -> RenderResult:
    with debug_timer(logger, "Rendering"):
        result = FlatteningRenderer(options).render(tokens)
    return RenderResult(text=drop_trailing_blank_lines(result.text), attrs=result.attrs)


def parse_markdown(
    markdown: str,
    options: RendererOptions | None = None,
    lexer_options: LexerOptions | None = None,
) -> RenderResult:
    r"""Flatten Markdown source into display lines and attribute spans.

    Parameters
    ----------
    markdown : str
        Markdown text
    options : RendererOptions or None, default = None
        Rendering options
    lexer_options : LexerOptions or None, default = None
        Tokenizer options; GitHub-flavored rules by default

    Returns
    -------
    RenderResult
        Lines with trailing blank lines removed, and their attributes

    Raises
    ------
    InternalRenderError
        If the source contains raw HTML, a link reference definition or a
        backslash escape. The message ends with the full input.

    Examples
    --------
    >>> from flatdown import parse_markdown
    >>> parse_markdown("foo\n\nbar\nbaz").text
    ['foo', '', 'bar', 'baz']
    >>> parse_markdown("# h1 title1").attrs
    [TitleAttr(range=Range(start=Position(line=1, character=1), end=Position(line=1, character=12)), depth=1, type='title')]

    """
    tokens = MarkdownLexer(lexer_options).lex(markdown)
    try:
        return _render(tokens, options)
    except UnsupportedTokenError as e:
        logger.debug("Unsupported token %r in input", e.token_type)
        raise InternalRenderError.from_unsupported(e, markdown) from e


def render_tokens(tokens: Sequence[Token], options: RendererOptions | None = None) -> RenderResult:
    """Flatten an already tokenized tree.

    Parameters
    ----------
    tokens : sequence of Token
        Block-level tokens
    options : RendererOptions or None, default = None
        Rendering options

    Returns
    -------
    RenderResult
        Lines with trailing blank lines removed, and their attributes

    Raises
    ------
    InternalRenderError
        If the tree contains an ``html``, ``def`` or ``escape`` token. The
        message ends with the source text of that token.

    """
    try:
        return _render(tokens, options)
    except UnsupportedTokenError as e:
        raise InternalRenderError.from_unsupported(e, e.raw) from e
