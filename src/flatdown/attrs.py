#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/flatdown/attrs.py
"""Attribute spans emitted alongside the flattened text.

An attribute marks where a structural or stylistic feature sits in the
flattened output. The set of attribute kinds is closed:

    - ``fenced``: fenced code body, with its language tag
    - ``title``: heading text with its depth; depth 0 marks a link/image title
    - ``horizontalrule``: zero-width marker on a single line
    - ``bold``, ``strike``, ``italic``, ``link``, ``url``, ``codespan``,
      ``codespanDelimiter``: plain ranges

Every kind belongs to exactly one variant class, and the variants together
cover :data:`TEXT_ATTR_TYPES` exactly.

"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Literal, Union, get_args

from flatdown.exceptions import ValidationError
from flatdown.positions import Position, Range

TextAttrType = Literal[
    "fenced",
    "title",
    "horizontalrule",
    "bold",
    "strike",
    "italic",
    "link",
    "url",
    "codespan",
    "codespanDelimiter",
]

SpanAttrType = Literal["bold", "strike", "italic", "link", "url", "codespan", "codespanDelimiter"]

TEXT_ATTR_TYPES: tuple[str, ...] = (
    "fenced",
    "title",
    "horizontalrule",
    "bold",
    "strike",
    "italic",
    "link",
    "url",
    "codespan",
    "codespanDelimiter",
)


@dataclass(frozen=True)
class FencedAttr:
    """Fenced code block body.

    Parameters
    ----------
    range : Range
        Span of the code body lines, fences excluded
    lang : str, default = ""
        Info string of the fence, empty when none was given

    """

    KINDS: ClassVar[tuple[str, ...]] = ("fenced",)

    range: Range
    lang: str = ""
    type: Literal["fenced"] = field(default="fenced", init=False)


@dataclass(frozen=True)
class TitleAttr:
    """Heading text, or the title of a link or image.

    Parameters
    ----------
    range : Range
        Span of the title, including the ``#`` marker for headings
    depth : int
        Heading depth (1-6); 0 for link and image titles

    """

    KINDS: ClassVar[tuple[str, ...]] = ("title",)

    range: Range
    depth: int
    type: Literal["title"] = field(default="title", init=False)


@dataclass(frozen=True)
class HorizontalRuleAttr:
    """Zero-width horizontal rule marker on a single line."""

    KINDS: ClassVar[tuple[str, ...]] = ("horizontalrule",)

    line: int
    type: Literal["horizontalrule"] = field(default="horizontalrule", init=False)


@dataclass(frozen=True)
class SpanAttr:
    """Range-only attribute (emphasis family, links, urls and code spans).

    Parameters
    ----------
    type : str
        One of the range-only kinds listed in :attr:`KINDS`
    range : Range
        Span the attribute covers

    """

    KINDS: ClassVar[tuple[str, ...]] = get_args(SpanAttrType)

    type: SpanAttrType
    range: Range

    def __post_init__(self) -> None:
        """Reject kinds that belong to another variant or to no variant."""
        if self.type not in self.KINDS:
            raise ValueError(f"'{self.type}' is not a range-only attribute kind")


TextAttrItem = Union[FencedAttr, TitleAttr, HorizontalRuleAttr, SpanAttr]

ATTR_VARIANTS: tuple[type, ...] = get_args(TextAttrItem)


def shift_attr(attr: TextAttrItem, delta: Position) -> TextAttrItem:
    """Return ``attr`` moved by ``delta``.

    Horizontal rules carry only a line, so they move by ``delta.line``; every
    other kind moves both ends of its range on both axes.

    Parameters
    ----------
    attr : TextAttrItem
        Attribute to move
    delta : Position
        Offset to add

    Returns
    -------
    TextAttrItem
        A new attribute of the same kind

    """
    if isinstance(attr, HorizontalRuleAttr):
        return replace(attr, line=attr.line + delta.line)
    return replace(attr, range=attr.range.shifted(delta))


def attr_to_dict(attr: TextAttrItem) -> dict[str, Any]:
    """Serialize an attribute to its JSON wire form."""
    if isinstance(attr, HorizontalRuleAttr):
        return {"type": attr.type, "line": attr.line}
    data: dict[str, Any] = {"type": attr.type, "range": attr.range.to_dict()}
    if isinstance(attr, FencedAttr):
        data["lang"] = attr.lang
    elif isinstance(attr, TitleAttr):
        data["depth"] = attr.depth
    return data


def attr_from_dict(data: dict[str, Any]) -> TextAttrItem:
    """Parse an attribute from its JSON wire form.

    Raises
    ------
    ValidationError
        If the kind is unknown or a required field is missing

    """
    kind = data.get("type")
    if kind not in TEXT_ATTR_TYPES:
        raise ValidationError(f"Unknown attribute kind: {kind!r}", parameter_name="type", parameter_value=kind)
    try:
        if kind == "horizontalrule":
            return HorizontalRuleAttr(line=int(data["line"]))
        text_range = Range.from_dict(data["range"])
        if kind == "fenced":
            return FencedAttr(range=text_range, lang=str(data.get("lang", "")))
        if kind == "title":
            return TitleAttr(range=text_range, depth=int(data["depth"]))
        return SpanAttr(type=kind, range=text_range)
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(
            f"Malformed '{kind}' attribute: {e}", parameter_name="attr", parameter_value=data, original_error=e
        ) from e


def attr_sort_key(attr: TextAttrItem) -> tuple[Any, ...]:
    """Sort key ordering attributes by kind, payload, then position.

    Fenced blocks order by language and title spans by depth before their
    start position; horizontal rules order by line.
    """
    if isinstance(attr, HorizontalRuleAttr):
        return (attr.type, "", attr.line, 0)
    start = attr.range.start
    if isinstance(attr, FencedAttr):
        return (attr.type, attr.lang, start.line, start.character)
    if isinstance(attr, TitleAttr):
        return (attr.type, attr.depth, start.line, start.character)
    return (attr.type, "", start.line, start.character)


def sort_attrs(attrs: list[TextAttrItem]) -> list[TextAttrItem]:
    """Return ``attrs`` in :func:`attr_sort_key` order."""
    return sorted(attrs, key=attr_sort_key)
