#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flatdown/tokens.py
"""Token tree consumed by the flattening renderer.

The tokenizer turns Markdown source into a tree of typed tokens. Each token
class below corresponds to exactly one token kind, identified by its ``type``
class attribute:

Block-level tokens:
    - Space (``space``), CodeBlock (``code``), Heading (``heading``)
    - Table (``table``), ThematicBreak (``hr``), BlockQuote (``blockquote``)
    - List (``list``), ListItem (``list_item``), Paragraph (``paragraph``)
    - Html (``html``), Definition (``def``)

Inline tokens:
    - Text (``text``), Escape (``escape``), Image (``image``), Link (``link``)
    - Strong (``strong``), Emphasis (``em``), CodeSpan (``codespan``)
    - LineBreak (``br``), Strikethrough (``del``)

``Text`` doubles as a block-level token inside list items, where it may carry
inline children of its own.

All tokens support the visitor pattern through :meth:`Token.accept`.

"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional

_ESCAPED_CHAR = re.compile(r"\\(.)")


class Token(ABC):
    """Base class for all tokens.

    Attributes
    ----------
    type : str
        Token kind name
    raw : str
        Source text the token was produced from, when known

    """

    type: ClassVar[str]
    raw: str

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this token.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result of the visitor's processing

        """
        ...


@dataclass
class Space(Token):
    """Run of blank lines between blocks.

    Parameters
    ----------
    raw : str
        The newlines making up the run, including the one ending the previous line

    """

    type: ClassVar[str] = "space"

    raw: str = "\n"

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_space(self)


@dataclass
class CodeBlock(Token):
    """Fenced or indented code block.

    Parameters
    ----------
    text : str
        Code body without fences and without the final newline
    lang : str or None, default = None
        Info string of the fence

    """

    type: ClassVar[str] = "code"

    text: str
    lang: Optional[str] = None
    raw: str = ""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_code_block(self)


@dataclass
class Heading(Token):
    """ATX or setext heading.

    Parameters
    ----------
    depth : int
        Heading level (1-6)
    tokens : list of Token
        Inline content

    """

    type: ClassVar[str] = "heading"

    depth: int
    tokens: list[Token] = field(default_factory=list)
    raw: str = ""

    def __post_init__(self) -> None:
        """Validate heading depth is between 1 and 6."""
        if not 1 <= self.depth <= 6:
            raise ValueError(f"Heading depth must be 1-6, got {self.depth}")

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_heading(self)


@dataclass
class Table(Token):
    """Pipe table, carried as its raw source text."""

    type: ClassVar[str] = "table"

    raw: str = ""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_table(self)


@dataclass
class ThematicBreak(Token):
    """Horizontal rule."""

    type: ClassVar[str] = "hr"

    raw: str = ""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_thematic_break(self)


@dataclass
class BlockQuote(Token):
    """Block quote containing block-level tokens."""

    type: ClassVar[str] = "blockquote"

    tokens: list[Token] = field(default_factory=list)
    raw: str = ""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_block_quote(self)


@dataclass
class ListItem(Token):
    """Item of a list.

    Parameters
    ----------
    tokens : list of Token
        Item content; paragraphs appear as block-level :class:`Text`
    checked : bool or None, default = None
        Task list state; None when the item is not a task
    loose : bool, default = False
        Whether the enclosing list is loose

    """

    type: ClassVar[str] = "list_item"

    tokens: list[Token] = field(default_factory=list)
    checked: Optional[bool] = None
    loose: bool = False
    raw: str = ""

    @property
    def task(self) -> bool:
        """Whether the item declares a checkbox state."""
        return self.checked is not None

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_list_item(self)


@dataclass
class List(Token):
    """Ordered or unordered list.

    Parameters
    ----------
    items : list of ListItem
        List items
    ordered : bool, default = False
        Whether the list is numbered
    start : int, default = 1
        Number of the first item in the source
    loose : bool, default = False
        Whether items are separated by blank lines

    """

    type: ClassVar[str] = "list"

    items: list[ListItem] = field(default_factory=list)
    ordered: bool = False
    start: int = 1
    loose: bool = False
    raw: str = ""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_list(self)


@dataclass
class Paragraph(Token):
    """Paragraph of inline tokens."""

    type: ClassVar[str] = "paragraph"

    tokens: list[Token] = field(default_factory=list)
    raw: str = ""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_paragraph(self)


@dataclass
class Html(Token):
    """Raw HTML, either a block or an inline tag.

    Parameters
    ----------
    raw : str
        The HTML source
    block : bool, default = False
        True for an HTML block

    """

    type: ClassVar[str] = "html"

    raw: str = ""
    block: bool = False

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_html(self)


@dataclass
class Definition(Token):
    """Link reference definition (``[label]: href "title"``)."""

    type: ClassVar[str] = "def"

    raw: str = ""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_definition(self)


@dataclass
class Text(Token):
    """Plain text.

    Parameters
    ----------
    text : str
        The text, HTML entities not yet decoded
    tokens : list of Token or None, default = None
        Inline children when the text is a block inside a list item

    """

    type: ClassVar[str] = "text"

    text: str
    tokens: Optional[list[Token]] = None
    raw: str = ""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_text(self)


@dataclass
class Escape(Token):
    """Backslash escape such as ``\\*``."""

    type: ClassVar[str] = "escape"

    raw: str = ""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_escape(self)


@dataclass
class Image(Token):
    """Inline image.

    Parameters
    ----------
    href : str
        Image source
    text : str
        Alt text
    title : str or None, default = None
        Optional title

    """

    type: ClassVar[str] = "image"

    href: str
    text: str = ""
    title: Optional[str] = None
    raw: str = ""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_image(self)


@dataclass
class Link(Token):
    """Inline link.

    Parameters
    ----------
    href : str
        Link target
    text : str, default = ""
        Plain label text, used when ``tokens`` is empty
    tokens : list of Token
        Rendered label content
    title : str or None, default = None
        Optional title

    """

    type: ClassVar[str] = "link"

    href: str
    text: str = ""
    tokens: list[Token] = field(default_factory=list)
    title: Optional[str] = None
    raw: str = ""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_link(self)


@dataclass
class Strong(Token):
    """Strong emphasis (bold)."""

    type: ClassVar[str] = "strong"

    tokens: list[Token] = field(default_factory=list)
    raw: str = ""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_strong(self)


@dataclass
class Emphasis(Token):
    """Emphasis (italic)."""

    type: ClassVar[str] = "em"

    tokens: list[Token] = field(default_factory=list)
    raw: str = ""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_emphasis(self)


@dataclass
class CodeSpan(Token):
    """Inline code span."""

    type: ClassVar[str] = "codespan"

    text: str
    raw: str = ""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_code_span(self)


@dataclass
class LineBreak(Token):
    """Hard line break."""

    type: ClassVar[str] = "br"

    raw: str = ""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_line_break(self)


@dataclass
class Strikethrough(Token):
    """GFM strikethrough."""

    type: ClassVar[str] = "del"

    tokens: list[Token] = field(default_factory=list)
    raw: str = ""

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_strikethrough(self)


TOKEN_CLASSES: tuple[type[Token], ...] = (
    Space,
    CodeBlock,
    Heading,
    Table,
    ThematicBreak,
    BlockQuote,
    List,
    ListItem,
    Paragraph,
    Html,
    Text,
    Definition,
    Escape,
    Image,
    Link,
    Strong,
    Emphasis,
    CodeSpan,
    LineBreak,
    Strikethrough,
)

TOKEN_TYPES: tuple[str, ...] = tuple(cls.type for cls in TOKEN_CLASSES)


def plain_text(tokens: list[Token]) -> str:
    """Concatenate the text carried by ``tokens`` and their descendants.

    Used where only a plain label is wanted, such as image alt text. Raw HTML
    is kept as written and hard breaks become newlines.
    """
    parts: list[str] = []
    for token in tokens:
        if isinstance(token, (Text, CodeSpan)):
            parts.append(token.text)
        elif isinstance(token, Image):
            parts.append(token.text)
        elif isinstance(token, Escape):
            parts.append(_ESCAPED_CHAR.sub(r"\1", token.raw))
        elif isinstance(token, Html):
            parts.append(token.raw)
        elif isinstance(token, LineBreak):
            parts.append("\n")
        elif isinstance(token, (Strong, Emphasis, Strikethrough, Link)):
            parts.append(plain_text(token.tokens))
    return "".join(parts)
