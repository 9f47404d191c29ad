#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flatdown/lexer.py
"""Markdown tokenizer built on mistune.

This module parses Markdown with mistune in AST mode and converts mistune's
token dictionaries into the closed token tree defined in
:mod:`flatdown.tokens`. A few mistune rules are overridden so that constructs
the flattening renderer refuses to render still show up as tokens instead of
being folded silently into the surrounding text:

- link reference definitions become :class:`~flatdown.tokens.Definition`
- backslash escapes become :class:`~flatdown.tokens.Escape`
- tables keep their raw source text

The converted sequences are also normalized so that blank-line handling
matches what the renderer expects from its tokenizer.

"""

from __future__ import annotations

import logging
from typing import Any, Callable, Match, Optional

import mistune
from mistune.block_parser import BlockParser
from mistune.core import BlockState, InlineState
from mistune.inline_parser import InlineParser

from flatdown.constants import PLUGIN_TABLE
from flatdown.logging_utils import debug_timer
from flatdown.options import LexerOptions
from flatdown.tokens import (
    BlockQuote,
    CodeBlock,
    CodeSpan,
    Definition,
    Emphasis,
    Escape,
    Heading,
    Html,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
    Paragraph,
    Space,
    Strikethrough,
    Strong,
    Table,
    Text,
    ThematicBreak,
    Token,
    plain_text,
)

logger = logging.getLogger(__name__)

BLANK_LINE_RAW = "\n\n"

# Blocks whose source already consumes the blank lines that follow them.
_SWALLOWS_BLANK_LINES = (Heading, ThematicBreak)

ParseFunc = Callable[[Any, Match[str], Any], Optional[int]]


def _parse_definition(block: BlockParser, m: Match[str], state: BlockState) -> Optional[int]:
    """Parse a link reference definition and keep it as a ``def`` token.

    mistune stores definitions in ``state.env`` and emits nothing. The stored
    data is still needed to resolve reference links, so the built-in parser
    runs first and the token is added on top of it.
    """
    last_token = state.last_token()
    continues_paragraph = bool(last_token and last_token["type"] == "paragraph")
    end_pos = block.parse_ref_link(m, state)
    if end_pos and not continues_paragraph:
        state.append_token({"type": "def", "raw": state.src[m.start() : end_pos]})
    return end_pos


def _parse_escape(inline: InlineParser, m: Match[str], state: InlineState) -> int:
    """Keep backslash escapes as ``escape`` tokens instead of plain text."""
    state.append_token({"type": "escape", "raw": m.group(0)})
    return m.end()


def _keep_table_source(parse_func: ParseFunc) -> ParseFunc:
    """Wrap a mistune table parser so the table token records its source text."""

    def parse(block: BlockParser, m: Match[str], state: BlockState) -> Optional[int]:
        token_count = len(state.tokens)
        end_pos = parse_func(block, m, state)
        if end_pos and len(state.tokens) > token_count and state.tokens[-1]["type"] == "table":
            state.tokens[-1]["raw"] = state.src[m.start() : end_pos]
        return end_pos

    return parse


class MarkdownLexer:
    r"""Tokenize Markdown into a :mod:`flatdown.tokens` tree.

    Parameters
    ----------
    options : LexerOptions or None, default = None
        Tokenizer configuration; GitHub-flavored rules are on by default

    Examples
    --------
    Basic tokenizing:

        >>> lexer = MarkdownLexer()
        >>> tokens = lexer.lex("# Hello\\n\\nThis is **bold**.")
        >>> [token.type for token in tokens]
        ['heading', 'paragraph']

    """

    def __init__(self, options: LexerOptions | None = None):
        """Initialize the lexer and build the underlying mistune parser."""
        self.options: LexerOptions = options or LexerOptions()
        self._markdown = self._create_markdown()

    def _create_markdown(self) -> mistune.Markdown:
        """Create the mistune parser with the configured plugins and rule overrides."""
        plugins = self.options.plugins
        markdown = mistune.create_markdown(plugins=plugins, renderer=None)

        markdown.block.register("ref_link", None, _parse_definition)
        markdown.inline.register("escape", None, _parse_escape)

        if PLUGIN_TABLE in plugins:
            from mistune.plugins.table import parse_nptable, parse_table

            markdown.block.register("table", None, _keep_table_source(parse_table))
            markdown.block.register("nptable", None, _keep_table_source(parse_nptable))

        logger.debug("Created mistune parser with plugins: %s", ", ".join(plugins) or "none")
        return markdown

    def lex(self, markdown: str) -> list[Token]:
        """Tokenize Markdown source.

        Parameters
        ----------
        markdown : str
            Markdown text

        Returns
        -------
        list of Token
            Top-level block tokens

        """
        with debug_timer(logger, "Tokenizing"):
            raw_tokens, _state = self._markdown.parse(markdown)

        # renderer=None always yields the token list
        assert isinstance(raw_tokens, list)
        tokens = self._process_tokens(raw_tokens)
        logger.debug("Tokenized %d characters into %d top-level tokens", len(markdown), len(tokens))
        return tokens

    def _process_tokens(self, tokens: list[dict[str, Any]], in_list_item: bool = False) -> list[Token]:
        """Process a sequence of mistune block tokens.

        Parameters
        ----------
        tokens : list of dict
            Mistune token dictionaries
        in_list_item : bool, default = False
            Whether the sequence is the content of a list item, where
            paragraphs become block-level text

        Returns
        -------
        list of Token
            Normalized block tokens

        """
        nodes: list[Token] = []

        for token in tokens:
            if token.get("type") == "blank_line":
                if not nodes or isinstance(nodes[-1], (Space, *_SWALLOWS_BLANK_LINES)):
                    continue
                nodes.append(Space(raw=BLANK_LINE_RAW))
                continue

            node = self._process_token(token, in_list_item)
            if node is None:
                continue

            # mistune lists swallow their trailing blank lines; put the break back
            if nodes and isinstance(nodes[-1], List):
                nodes.append(Space(raw=BLANK_LINE_RAW))
            nodes.append(node)

        return nodes

    def _process_token(self, token: dict[str, Any], in_list_item: bool = False) -> Token | None:
        """Process a single mistune block token.

        Parameters
        ----------
        token : dict
            Mistune token dictionary with 'type' and other fields
        in_list_item : bool, default = False
            Whether the token sits directly inside a list item

        Returns
        -------
        Token or None
            Resulting token, or None for output that has no counterpart

        """
        token_type = token.get("type", "")

        if token_type == "heading":
            return self._process_heading(token)
        elif token_type in ("paragraph", "block_text"):
            if in_list_item or token_type == "block_text":
                return self._process_block_text(token)
            return Paragraph(tokens=self._process_inline_tokens(token.get("children", [])))
        elif token_type == "block_code":
            return self._process_code_block(token)
        elif token_type == "block_quote":
            return BlockQuote(tokens=self._process_tokens(token.get("children", [])))
        elif token_type == "list":
            return self._process_list(token)
        elif token_type == "table":
            return Table(raw=token.get("raw", ""))
        elif token_type == "thematic_break":
            return ThematicBreak()
        elif token_type == "block_html":
            return Html(raw=token.get("raw", ""), block=True)
        elif token_type == "def":
            return Definition(raw=token.get("raw", ""))

        logger.warning("Skipping unsupported mistune block token: %s", token_type)
        return None

    def _process_heading(self, token: dict[str, Any]) -> Heading:
        """Process heading token.

        Parameters
        ----------
        token : dict
            Heading token with 'level' and 'children'

        Returns
        -------
        Heading
            Heading token

        """
        level = token.get("attrs", {}).get("level", 1)
        return Heading(depth=level, tokens=self._process_inline_tokens(token.get("children", [])))

    def _process_block_text(self, token: dict[str, Any]) -> Text:
        """Process a list item paragraph into block-level text with inline children."""
        children = self._process_inline_tokens(token.get("children", []))
        return Text(text=plain_text(children), tokens=children)

    def _process_code_block(self, token: dict[str, Any]) -> CodeBlock:
        """Process code block token.

        Parameters
        ----------
        token : dict
            Code block token with 'raw' and optional 'attrs'

        Returns
        -------
        CodeBlock
            Code block token; ``lang`` is the full info string

        """
        code = token.get("raw", "")
        if code.endswith("\n"):
            code = code[:-1]
        info = token.get("attrs", {}).get("info")
        return CodeBlock(text=code, lang=info or None, raw=token.get("raw", ""))

    def _process_list(self, token: dict[str, Any]) -> List:
        """Process list token.

        Parameters
        ----------
        token : dict
            List token with 'children', 'tight' and 'attrs' (ordered, start)

        Returns
        -------
        List
            List token

        """
        attrs = token.get("attrs", {})
        loose = not token.get("tight", True)
        items = [self._process_list_item(child, loose) for child in token.get("children", [])]
        return List(items=items, ordered=attrs.get("ordered", False), start=attrs.get("start", 1), loose=loose)

    def _process_list_item(self, token: dict[str, Any], loose: bool) -> ListItem:
        """Process list item token.

        Parameters
        ----------
        token : dict
            List item token with 'children'; task items carry 'checked'
        loose : bool
            Whether the enclosing list is loose

        Returns
        -------
        ListItem
            List item token

        """
        checked: Optional[bool] = None
        if token.get("type") == "task_list_item":
            checked = bool(token.get("attrs", {}).get("checked", False))
        children = self._process_tokens(token.get("children", []), in_list_item=True)
        return ListItem(tokens=children, checked=checked, loose=loose)

    def _process_inline_tokens(self, tokens: list[dict[str, Any]]) -> list[Token]:
        """Process inline tokens.

        Adjacent text, including soft breaks, is merged into one :class:`Text`.

        Parameters
        ----------
        tokens : list of dict
            Inline token dictionaries

        Returns
        -------
        list of Token
            Inline tokens

        """
        nodes: list[Token] = []

        for token in tokens:
            node = self._process_inline_token(token)
            if node is None:
                continue
            if isinstance(node, Text) and nodes and isinstance(nodes[-1], Text):
                previous = nodes[-1]
                nodes[-1] = Text(text=previous.text + node.text, raw=previous.raw + node.raw)
            else:
                nodes.append(node)

        return nodes

    def _handle_text_token(self, token: dict[str, Any]) -> Text:
        """Handle text token."""
        content = token.get("raw", "")
        return Text(text=content, raw=content)

    def _handle_softbreak_token(self, token: dict[str, Any]) -> Text:
        """Handle softbreak token."""
        return Text(text="\n", raw="\n")

    def _handle_linebreak_token(self, token: dict[str, Any]) -> LineBreak:
        """Handle linebreak token."""
        return LineBreak(raw="\n")

    def _handle_strong_token(self, token: dict[str, Any]) -> Strong:
        """Handle strong token."""
        return Strong(tokens=self._process_inline_tokens(token.get("children", [])))

    def _handle_emphasis_token(self, token: dict[str, Any]) -> Emphasis:
        """Handle emphasis token."""
        return Emphasis(tokens=self._process_inline_tokens(token.get("children", [])))

    def _handle_strikethrough_token(self, token: dict[str, Any]) -> Strikethrough:
        """Handle strikethrough token."""
        return Strikethrough(tokens=self._process_inline_tokens(token.get("children", [])))

    def _handle_codespan_token(self, token: dict[str, Any]) -> CodeSpan:
        """Handle codespan token."""
        content = token.get("raw", "")
        return CodeSpan(text=content, raw=content)

    def _handle_link_token(self, token: dict[str, Any]) -> Link:
        """Handle link token."""
        attrs = token.get("attrs", {})
        children = self._process_inline_tokens(token.get("children", []))
        return Link(href=attrs.get("url", ""), text=plain_text(children), tokens=children, title=attrs.get("title"))

    def _handle_image_token(self, token: dict[str, Any]) -> Image:
        """Handle image token."""
        attrs = token.get("attrs", {})
        # Alt text is in children, not attrs
        alt_text = plain_text(self._process_inline_tokens(token.get("children", [])))
        return Image(href=attrs.get("url", ""), text=alt_text, title=attrs.get("title"))

    def _handle_inline_html_token(self, token: dict[str, Any]) -> Html:
        """Handle inline_html token."""
        return Html(raw=token.get("raw", ""))

    def _handle_escape_token(self, token: dict[str, Any]) -> Escape:
        """Handle escape token."""
        return Escape(raw=token.get("raw", ""))

    def _process_inline_token(self, token: dict[str, Any]) -> Token | None:
        """Process a single inline token.

        Parameters
        ----------
        token : dict
            Inline token dictionary

        Returns
        -------
        Token or None
            Inline token

        """
        token_type = token.get("type", "")

        # Dispatch to appropriate handler
        handler_map: dict[str, Any] = {
            "text": self._handle_text_token,
            "softbreak": self._handle_softbreak_token,
            "linebreak": self._handle_linebreak_token,
            "strong": self._handle_strong_token,
            "emphasis": self._handle_emphasis_token,
            "strikethrough": self._handle_strikethrough_token,
            "codespan": self._handle_codespan_token,
            "link": self._handle_link_token,
            "image": self._handle_image_token,
            "inline_html": self._handle_inline_html_token,
            "escape": self._handle_escape_token,
        }

        handler = handler_map.get(token_type)
        if handler:
            return handler(token)

        logger.warning("Skipping unsupported mistune inline token: %s", token_type)
        return None


def lex_markdown(markdown: str, options: LexerOptions | None = None) -> list[Token]:
    r"""Tokenize Markdown in one step.

    Parameters
    ----------
    markdown : str
        Markdown text
    options : LexerOptions or None, default = None
        Tokenizer configuration

    Returns
    -------
    list of Token
        Top-level block tokens

    Examples
    --------
    >>> from flatdown.lexer import lex_markdown
    >>> tokens = lex_markdown("# Hello\\n\\nWorld")
    >>> len(tokens)
    2

    """
    return MarkdownLexer(options).lex(markdown)
