#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flatdown/visitors.py
"""Visitor base class for token tree traversal.

Every token kind has exactly one abstract ``visit_*`` method here. A visitor
that forgets a kind cannot be instantiated, so adding a token kind without
teaching every renderer about it fails at construction time rather than
mid-render.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

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
)


class TokenVisitor(ABC):
    """Abstract base class for token visitors.

    Subclasses implement one ``visit_*`` method per token kind and are driven
    through :meth:`flatdown.tokens.Token.accept`.

    Examples
    --------
    Collect the text of every top-level text token:

        >>> class TextCollector(TokenVisitor):
        ...     def __init__(self):
        ...         self.parts = []
        ...
        ...     def visit_text(self, token):
        ...         self.parts.append(token.text)
        ...
        ...     # ... remaining visit_* methods
        >>> collector = TextCollector()
        >>> for token in tokens:
        ...     token.accept(collector)

    """

    @abstractmethod
    def visit_space(self, token: Space) -> Any:
        """Visit a Space token.

        Parameters
        ----------
        token : Space
            The blank-line run to visit

        Returns
        -------
        Any
            Result of processing this token

        """
        pass

    @abstractmethod
    def visit_code_block(self, token: CodeBlock) -> Any:
        """Visit a CodeBlock token.

        Parameters
        ----------
        token : CodeBlock
            The code block to visit

        Returns
        -------
        Any
            Result of processing this token

        """
        pass

    @abstractmethod
    def visit_heading(self, token: Heading) -> Any:
        """Visit a Heading token.

        Parameters
        ----------
        token : Heading
            The heading to visit

        Returns
        -------
        Any
            Result of processing this token

        """
        pass

    @abstractmethod
    def visit_table(self, token: Table) -> Any:
        """Visit a Table token."""
        pass

    @abstractmethod
    def visit_thematic_break(self, token: ThematicBreak) -> Any:
        """Visit a ThematicBreak token."""
        pass

    @abstractmethod
    def visit_block_quote(self, token: BlockQuote) -> Any:
        """Visit a BlockQuote token.

        Parameters
        ----------
        token : BlockQuote
            The block quote to visit

        Returns
        -------
        Any
            Result of processing this token

        """
        pass

    @abstractmethod
    def visit_list(self, token: List) -> Any:
        """Visit a List token.

        Parameters
        ----------
        token : List
            The list to visit

        Returns
        -------
        Any
            Result of processing this token

        """
        pass

    @abstractmethod
    def visit_list_item(self, token: ListItem) -> Any:
        """Visit a ListItem token.

        Parameters
        ----------
        token : ListItem
            The list item to visit

        Returns
        -------
        Any
            Result of processing this token

        """
        pass

    @abstractmethod
    def visit_paragraph(self, token: Paragraph) -> Any:
        """Visit a Paragraph token."""
        pass

    @abstractmethod
    def visit_html(self, token: Html) -> Any:
        """Visit an Html token."""
        pass

    @abstractmethod
    def visit_definition(self, token: Definition) -> Any:
        """Visit a Definition token."""
        pass

    @abstractmethod
    def visit_text(self, token: Text) -> Any:
        """Visit a Text token.

        Parameters
        ----------
        token : Text
            The text to visit

        Returns
        -------
        Any
            Result of processing this token

        """
        pass

    @abstractmethod
    def visit_escape(self, token: Escape) -> Any:
        """Visit an Escape token."""
        pass

    @abstractmethod
    def visit_image(self, token: Image) -> Any:
        """Visit an Image token.

        Parameters
        ----------
        token : Image
            The image to visit

        Returns
        -------
        Any
            Result of processing this token

        """
        pass

    @abstractmethod
    def visit_link(self, token: Link) -> Any:
        """Visit a Link token.

        Parameters
        ----------
        token : Link
            The link to visit

        Returns
        -------
        Any
            Result of processing this token

        """
        pass

    @abstractmethod
    def visit_strong(self, token: Strong) -> Any:
        """Visit a Strong token."""
        pass

    @abstractmethod
    def visit_emphasis(self, token: Emphasis) -> Any:
        """Visit an Emphasis token."""
        pass

    @abstractmethod
    def visit_code_span(self, token: CodeSpan) -> Any:
        """Visit a CodeSpan token."""
        pass

    @abstractmethod
    def visit_line_break(self, token: LineBreak) -> Any:
        """Visit a LineBreak token."""
        pass

    @abstractmethod
    def visit_strikethrough(self, token: Strikethrough) -> Any:
        """Visit a Strikethrough token."""
        pass
