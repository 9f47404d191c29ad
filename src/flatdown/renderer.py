#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flatdown/renderer.py
"""Flattening renderer from a token tree to display lines and attributes.

This module provides the FlatteningRenderer class which walks a token tree
depth-first and produces two aligned artifacts:

- a list of plain display lines with Markdown markup removed or replaced by
  display equivalents (list bullets, quote prefixes)
- a list of attribute spans locating titles, emphasis, links, code and rules
  in those lines

Coordinates are 1-indexed lines and 1-indexed UTF-8 byte columns. Block quotes
and list items are rendered by a fresh sub-renderer into an independent
buffer; the sub-result is then copied into the parent with every attribute
shifted by the position it lands at.

"""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass, field, replace
from typing import Any, Sequence

from flatdown.attrs import (
    FencedAttr,
    HorizontalRuleAttr,
    SpanAttr,
    SpanAttrType,
    TextAttrItem,
    TitleAttr,
    attr_to_dict,
    shift_attr,
)
from flatdown.constants import CHECKBOX_CHECKED, CHECKBOX_UNCHECKED, CHECKBOX_WIDTH, HEADING_MARKER
from flatdown.exceptions import UnsupportedTokenError
from flatdown.options import RendererOptions
from flatdown.positions import Position, Range, byte_length
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
)
from flatdown.visitors import TokenVisitor

logger = logging.getLogger(__name__)

# Whitespace right after a newline; list item source carries continuation indent
_CONTINUATION_INDENT = re.compile(r"(?<=\n)\s+")


@dataclass
class RenderResult:
    """Output of one render pass.

    Parameters
    ----------
    text : list of str
        Flattened lines, one entry per output line
    attrs : list of TextAttrItem
        Attribute spans addressing ``text``

    """

    text: list[str] = field(default_factory=list)
    attrs: list[TextAttrItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON wire form."""
        return {"text": list(self.text), "attrs": [attr_to_dict(attr) for attr in self.attrs]}


def drop_trailing_blank_lines(lines: Sequence[str]) -> list[str]:
    """Return ``lines`` without the empty or whitespace-only lines at its end.

    Parameters
    ----------
    lines : sequence of str
        Lines to trim

    Returns
    -------
    list of str
        A new list; blank lines before the last non-blank line are kept

    Examples
    --------
        >>> drop_trailing_blank_lines(["a", "", "b", "", "  "])
        ['a', '', 'b']

    """
    end = len(lines)
    while end > 0 and not lines[end - 1].strip():
        end -= 1
    return list(lines[:end])


class FlatteningRenderer(TokenVisitor):
    """Render a token tree into flat lines and attribute spans.

    A renderer owns its buffers for exactly one :meth:`render` call. Nested
    block content is rendered by new instances, never by re-entering this one.

    Parameters
    ----------
    options : RendererOptions or None, default = None
        Rendering options (bullet glyph, quote prefix)

    Examples
    --------
    Basic usage:

        >>> from flatdown.tokens import Heading, Text
        >>> result = FlatteningRenderer().render([Heading(depth=1, tokens=[Text(text="Title")])])
        >>> result.text
        ['# Title', '']
        >>> result.attrs[0].depth
        1

    """

    def __init__(self, options: RendererOptions | None = None):
        """Initialize the renderer with empty buffers."""
        self.options: RendererOptions = options or RendererOptions()
        self.text: list[str] = []
        self.attrs: list[TextAttrItem] = []
        self._rendered = False

    def render(self, tokens: Sequence[Token]) -> RenderResult:
        """Render ``tokens`` and return the flattened result.

        Trailing blank lines are kept; callers that present the result trim
        them with :func:`drop_trailing_blank_lines`.

        Parameters
        ----------
        tokens : sequence of Token
            Block-level tokens, possibly empty

        Returns
        -------
        RenderResult
            Lines and attributes

        Raises
        ------
        UnsupportedTokenError
            If the tree contains an ``html``, ``def`` or ``escape`` token
        RuntimeError
            If this renderer was already used

        """
        if self._rendered:
            raise RuntimeError("FlatteningRenderer instances cannot be reused; create a new renderer per pass")
        self._rendered = True

        self.render_tokens(tokens)
        return RenderResult(text=list(self.text), attrs=list(self.attrs))

    # ------------------------------------------------------------------
    # Buffer primitives
    # ------------------------------------------------------------------

    def end_of_buffer(self, exclusive: bool = False) -> Position:
        """Return the position right after the last byte of the buffer.

        Parameters
        ----------
        exclusive : bool, default = False
            Add one more column

        Returns
        -------
        Position
            ``(len(text), byte_length(text[-1]) + 1)``; an empty buffer
            reports line 1, column 1

        """
        extra = 1 if exclusive else 0
        if not self.text:
            return Position(line=1, character=1 + extra)
        return Position(line=len(self.text), character=byte_length(self.text[-1]) + 1 + extra)

    def append_text(self, raw: str) -> Range:
        """Append text to the buffer and return the range it occupies.

        HTML entities are decoded first. The first line of ``raw`` joins the
        current last line; every further line starts a new buffer line.

        Parameters
        ----------
        raw : str
            Text to append

        Returns
        -------
        Range
            Span from the end of the buffer before the append to the end after

        """
        top, *rest = html.unescape(raw).split("\n")
        if not self.text:
            self.text.append(top)
            self.text.extend(rest)
            return Range(start=Position(line=1, character=1), end=self.end_of_buffer())

        start = self.end_of_buffer()
        self.text[-1] += top
        self.text.extend(rest)
        return Range(start=start, end=self.end_of_buffer())

    def render_tokens(self, tokens: Sequence[Token]) -> Range:
        """Render every token in order and return the range they cover."""
        start = self.end_of_buffer()
        for token in tokens:
            token.accept(self)
        return Range(start=start, end=self.end_of_buffer())

    def _push_blank_line(self) -> None:
        self.text.append("")

    def _render_nested(self, tokens: Sequence[Token]) -> RenderResult:
        """Render ``tokens`` into an independent buffer."""
        result = FlatteningRenderer(self.options).render(tokens)
        logger.debug("Nested render produced %d lines and %d attrs", len(result.text), len(result.attrs))
        return result

    def _merge(self, lines: Sequence[str], attrs: Sequence[TextAttrItem], delta: Position) -> None:
        """Append ``lines`` and ``attrs`` shifted by ``delta`` to this buffer."""
        self.text.extend(lines)
        self.attrs.extend(shift_attr(attr, delta) for attr in attrs)

    def _render_span(self, kind: SpanAttrType, tokens: Sequence[Token]) -> None:
        text_range = self.render_tokens(tokens)
        self.attrs.append(SpanAttr(type=kind, range=text_range))

    # ------------------------------------------------------------------
    # Block tokens
    # ------------------------------------------------------------------

    def visit_heading(self, token: Heading) -> None:
        """Render a heading with its ``#`` marker and record a title span.

        The title span starts at the marker and ends right after the content.
        """
        start = self.append_text(HEADING_MARKER * token.depth + " ").start
        end = self.render_tokens(token.tokens).end
        self._push_blank_line()
        self.attrs.append(TitleAttr(range=Range(start=start, end=end), depth=token.depth))

    def visit_paragraph(self, token: Paragraph) -> None:
        """Render paragraph content followed by a blank line."""
        self.render_tokens(token.tokens)
        self._push_blank_line()

    def visit_space(self, token: Space) -> None:
        """Render a blank-line run, minus the newline that ended the previous line."""
        raw = token.raw[:-1] if token.raw.endswith("\n") else token.raw
        self.append_text(raw)

    def visit_code_block(self, token: CodeBlock) -> None:
        """Render the code body and record a fenced span over it."""
        text_range = self.append_text(token.text)
        self.attrs.append(FencedAttr(range=text_range, lang=token.lang or ""))
        self._push_blank_line()

    def visit_block_quote(self, token: BlockQuote) -> None:
        """Render quoted content with every line prefixed.

        The content is rendered on its own, trailing blank lines are dropped,
        and the remaining lines are prefixed and appended. Attributes move down
        by the current line count and right by the prefix width.
        """
        nested = self._render_nested(token.tokens)
        prefix = self.options.quote_prefix
        quoted = [prefix + line for line in drop_trailing_blank_lines(nested.text)]
        self._merge(quoted, nested.attrs, Position(line=len(self.text), character=self.options.quote_shift))
        self._push_blank_line()

    def visit_thematic_break(self, token: ThematicBreak) -> None:
        """Push a blank line and mark the line before it as a rule."""
        self._push_blank_line()
        self.attrs.append(HorizontalRuleAttr(line=len(self.text) - 1))

    def visit_table(self, token: Table) -> None:
        """Pass the table source through unchanged."""
        self.append_text(token.raw)

    def visit_list(self, token: List) -> None:
        """Render list items with aligned labels.

        Every item is rendered on its own. Its first line gets the label,
        checkbox column and a space; later lines are indented to the same
        width. Labels share one width across the list: ordered labels are
        right-justified numbers, unordered labels are the bullet glyph. The
        checkbox column exists only when some item is a task.
        """
        if token.ordered:
            label_width = len(str(len(token.items))) + 1
        else:
            label_width = self.options.bullet_width
        checkbox_width = CHECKBOX_WIDTH if any(item.task for item in token.items) else 0
        indent = label_width + checkbox_width + 1

        for index, item in enumerate(token.items, start=1):
            nested = self._render_nested([item])
            head, *tail = nested.text or [""]

            label = f"{index}.".rjust(label_width) if token.ordered else self.options.bullet_char
            if item.checked is None:
                checkbox = " " * checkbox_width
            else:
                checkbox = CHECKBOX_CHECKED if item.checked else CHECKBOX_UNCHECKED

            lines = [f"{label}{checkbox} {head}"]
            lines.extend(" " * indent + line for line in tail)
            # item attrs start at the item's own first line, not line 0 of the list
            self._merge(lines, nested.attrs, Position(line=len(self.text), character=indent))

    def visit_list_item(self, token: ListItem) -> None:
        """Render item content into the current buffer.

        Nested lists are rendered on their own and appended below the current
        line. Text has the continuation indent of its source lines removed.
        """
        for child in token.tokens:
            if isinstance(child, List):
                nested = self._render_nested([child])
                self._merge(nested.text, nested.attrs, Position(line=len(self.text), character=0))
            elif isinstance(child, Text):
                self._render_item_text(child)
            else:
                child.accept(self)

    def _render_item_text(self, token: Text) -> None:
        if token.tokens is None:
            self.append_text(_CONTINUATION_INDENT.sub("", token.text))
            return
        children = [
            replace(child, text=_CONTINUATION_INDENT.sub("", child.text)) if isinstance(child, Text) else child
            for child in token.tokens
        ]
        self.render_tokens(children)

    def visit_html(self, token: Html) -> None:
        raise UnsupportedTokenError(token.type, token.raw)

    def visit_definition(self, token: Definition) -> None:
        raise UnsupportedTokenError(token.type, token.raw)

    # ------------------------------------------------------------------
    # Inline tokens
    # ------------------------------------------------------------------

    def visit_text(self, token: Text) -> None:
        """Append text; block-level text renders its inline children instead."""
        if token.tokens is not None:
            self.render_tokens(token.tokens)
        else:
            self.append_text(token.text)

    def visit_escape(self, token: Escape) -> None:
        raise UnsupportedTokenError(token.type, token.raw)

    def visit_line_break(self, token: LineBreak) -> None:
        self._push_blank_line()

    def visit_strong(self, token: Strong) -> None:
        self._render_span("bold", token.tokens)

    def visit_emphasis(self, token: Emphasis) -> None:
        self._render_span("italic", token.tokens)

    def visit_strikethrough(self, token: Strikethrough) -> None:
        self._render_span("strike", token.tokens)

    def visit_link(self, token: Link) -> None:
        """Render ``[label](href "title")`` with link, url and title spans."""
        self.append_text("[")
        if token.tokens:
            label_range = self.render_tokens(token.tokens)
        else:
            label_range = self.append_text(token.text)
        self.attrs.append(SpanAttr(type="link", range=label_range))
        self._render_target(token.href, token.title)

    def visit_image(self, token: Image) -> None:
        """Render ``![alt](href "title")``; the alt text is always plain."""
        self.append_text("![")
        self.attrs.append(SpanAttr(type="link", range=self.append_text(token.text)))
        self._render_target(token.href, token.title)

    def _render_target(self, href: str, title: str | None) -> None:
        self.append_text("](")
        self.attrs.append(SpanAttr(type="url", range=self.append_text(href)))
        if title:
            self.append_text(" ")
            # depth 0 marks a link or image title
            self.attrs.append(TitleAttr(range=self.append_text(title), depth=0))
        self.append_text(")")

    def visit_code_span(self, token: CodeSpan) -> None:
        """Render a code span between backtick delimiters."""
        self.attrs.append(SpanAttr(type="codespanDelimiter", range=self.append_text("`")))
        self.attrs.append(SpanAttr(type="codespan", range=self.append_text(token.text)))
        self.attrs.append(SpanAttr(type="codespanDelimiter", range=self.append_text("`")))
