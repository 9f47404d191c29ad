#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Unit tests for the mistune-based Markdown tokenizer."""

import logging

import pytest

from flatdown.lexer import MarkdownLexer, lex_markdown
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
    Paragraph,
    Space,
    Strikethrough,
    Strong,
    Table,
    Text,
    ThematicBreak,
)


def types(tokens) -> list:
    return [token.type for token in tokens]


@pytest.mark.unit
class TestBlockTokens:
    """Test block-level tokenizing."""

    def test_empty_input(self) -> None:
        assert lex_markdown("") == []

    def test_heading_then_paragraph(self) -> None:
        tokens = lex_markdown("# Hello\n\nWorld")
        assert types(tokens) == ["heading", "paragraph"]
        assert tokens[0].depth == 1
        assert tokens[1].tokens == [Text(text="World", raw="World")]

    @pytest.mark.parametrize("depth", range(1, 7))
    def test_heading_depths(self, depth: int) -> None:
        tokens = lex_markdown("#" * depth + " Title")
        assert isinstance(tokens[0], Heading)
        assert tokens[0].depth == depth

    def test_paragraphs_separated_by_space(self) -> None:
        tokens = lex_markdown("foo\n\nbar")
        assert types(tokens) == ["paragraph", "space", "paragraph"]
        assert tokens[1] == Space(raw="\n\n")

    def test_soft_break_merges_text(self) -> None:
        tokens = lex_markdown("bar\nbaz")
        assert tokens == [Paragraph(tokens=[Text(text="bar\nbaz", raw="bar\nbaz")])]

    def test_fenced_code(self) -> None:
        tokens = lex_markdown("```typescript\nconsole.log();\n```")
        assert tokens == [CodeBlock(text="console.log();", lang="typescript", raw="console.log();\n")]

    def test_fenced_code_without_info(self) -> None:
        (token,) = lex_markdown("```\nx\ny\n```")
        assert isinstance(token, CodeBlock)
        assert token.text == "x\ny"
        assert token.lang is None

    def test_thematic_break(self) -> None:
        assert types(lex_markdown("***")) == ["hr"]

    def test_block_quote(self) -> None:
        (token,) = lex_markdown("> quoted *text*")
        assert isinstance(token, BlockQuote)
        assert isinstance(token.tokens[0], Paragraph)
        assert isinstance(token.tokens[0].tokens[1], Emphasis)

    def test_block_html(self) -> None:
        (token,) = lex_markdown("<div>\nhi\n</div>")
        assert isinstance(token, Html)
        assert token.block
        assert token.raw.startswith("<div>")

    def test_definition_is_kept(self) -> None:
        tokens = lex_markdown("[a]: https://example.com")
        definitions = [token for token in tokens if isinstance(token, Definition)]
        assert len(definitions) == 1
        assert definitions[0].raw.startswith("[a]: https://example.com")

    def test_definition_continuing_paragraph_is_text(self) -> None:
        tokens = lex_markdown("para\n[a]: https://example.com")
        assert types(tokens) == ["paragraph"]

    def test_definition_still_resolves_reference_links(self) -> None:
        tokens = lex_markdown("[site][a]\n\n[a]: https://example.com")
        link = tokens[0].tokens[0]
        assert isinstance(link, Link)
        assert link.href == "https://example.com"
        assert isinstance(tokens[-1], Definition)

    def test_table_keeps_source(self) -> None:
        source = "| a | b |\n| - | - |\n| 1 | 2 |"
        (token,) = lex_markdown(source)
        assert isinstance(token, Table)
        assert token.raw.rstrip("\n") == source


@pytest.mark.unit
class TestListTokens:
    """Test list tokenizing."""

    def test_unordered_list(self) -> None:
        (token,) = lex_markdown("- item 1\n- item 2")
        assert isinstance(token, List)
        assert not token.ordered
        assert len(token.items) == 2
        text = token.items[0].tokens[0]
        assert isinstance(text, Text)
        assert text.text == "item 1"
        assert text.tokens is not None

    def test_ordered_list(self) -> None:
        (token,) = lex_markdown("3. a\n4. b")
        assert token.ordered
        assert token.start == 3

    def test_nested_list(self) -> None:
        (token,) = lex_markdown("- item 1\n     - chitem 1")
        children = token.items[0].tokens
        assert types(children) == ["text", "list"]

    def test_task_list(self) -> None:
        (token,) = lex_markdown("- [x] done\n- [ ] todo\n- plain")
        assert [item.checked for item in token.items] == [True, False, None]

    def test_task_list_disabled(self) -> None:
        (token,) = lex_markdown("- [x] done", LexerOptions(parse_task_lists=False))
        assert token.items[0].checked is None

    def test_loose_list(self) -> None:
        (token,) = lex_markdown("- a\n\n- b")
        assert token.loose
        assert all(item.loose for item in token.items)

    def test_space_restored_after_list(self) -> None:
        tokens = lex_markdown("- a\n\nnext")
        assert types(tokens) == ["list", "space", "paragraph"]


@pytest.mark.unit
class TestInlineTokens:
    """Test inline tokenizing."""

    def test_emphasis_family(self) -> None:
        (paragraph,) = lex_markdown("**b** *i* ~~s~~")
        kinds = [type(token) for token in paragraph.tokens if not isinstance(token, Text)]
        assert kinds == [Strong, Emphasis, Strikethrough]

    def test_strikethrough_disabled(self) -> None:
        (paragraph,) = lex_markdown("~~s~~", LexerOptions(parse_strikethrough=False))
        assert types(paragraph.tokens) == ["text"]

    def test_code_span(self) -> None:
        (paragraph,) = lex_markdown("`x`")
        assert paragraph.tokens == [CodeSpan(text="x", raw="x")]

    def test_hard_line_break(self) -> None:
        (paragraph,) = lex_markdown("a  \nb")
        assert [type(token) for token in paragraph.tokens] == [Text, LineBreak, Text]

    def test_link(self) -> None:
        (paragraph,) = lex_markdown('[site](https://x.y "T")')
        (link,) = paragraph.tokens
        assert isinstance(link, Link)
        assert link.href == "https://x.y"
        assert link.text == "site"
        assert link.title == "T"

    def test_image(self) -> None:
        (paragraph,) = lex_markdown("![alt](a.png)")
        (image,) = paragraph.tokens
        assert image == Image(href="a.png", text="alt")

    def test_autolink(self) -> None:
        (paragraph,) = lex_markdown("see https://example.com")
        assert isinstance(paragraph.tokens[-1], Link)
        assert paragraph.tokens[-1].href == "https://example.com"

    def test_autolink_disabled(self) -> None:
        (paragraph,) = lex_markdown("see https://example.com", LexerOptions(parse_autolinks=False))
        assert types(paragraph.tokens) == ["text"]

    def test_inline_html(self) -> None:
        (paragraph,) = lex_markdown("a <b>x</b>")
        assert any(isinstance(token, Html) and not token.block for token in paragraph.tokens)

    def test_escape_is_kept(self) -> None:
        (paragraph,) = lex_markdown("a \\* b")
        escapes = [token for token in paragraph.tokens if isinstance(token, Escape)]
        assert escapes == [Escape(raw="\\*")]

    def test_entities_left_encoded(self) -> None:
        (paragraph,) = lex_markdown("a &amp; b")
        assert paragraph.tokens[0].text == "a &amp; b"


@pytest.mark.unit
class TestLexerOptions:
    """Test how options shape the mistune parser."""

    def test_no_gfm_disables_every_extension(self) -> None:
        lexer = MarkdownLexer(LexerOptions(gfm=False))
        (paragraph,) = lexer.lex("~~s~~ https://example.com")
        assert types(paragraph.tokens) == ["text"]

    def test_no_gfm_table_is_paragraph(self) -> None:
        tokens = lex_markdown("| a |\n| - |", LexerOptions(gfm=False))
        assert types(tokens) == ["paragraph"]

    def test_lexer_is_reusable(self) -> None:
        lexer = MarkdownLexer()
        assert types(lexer.lex("# a")) == ["heading"]
        assert types(lexer.lex("b")) == ["paragraph"]

    def test_unknown_mistune_token_is_skipped(self, caplog) -> None:
        lexer = MarkdownLexer()
        with caplog.at_level(logging.WARNING, logger="flatdown.lexer"):
            assert lexer._process_token({"type": "footnotes"}) is None
            assert lexer._process_inline_token({"type": "footnote_ref"}) is None
        assert "footnotes" in caplog.text
        assert "footnote_ref" in caplog.text
