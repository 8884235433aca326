#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/panwalk/ast/nodes.py
"""AST node classes for the pandoc document model.

This module defines the closed set of node classes that make up a pandoc
document tree as it appears in pandoc's JSON representation. Every node
class corresponds to one pandoc constructor and carries that constructor's
name as its ``tag``; the ``name`` property exposes it so filters can match
on kind names ("Header", "Str", "Emph", ...).

Node Hierarchy
--------------
All element nodes inherit from Node.

The root:
    - Document

Metadata values:
    - MetaMap, MetaList, MetaBool, MetaString, MetaInlines, MetaBlocks

Block-level nodes:
    - Plain, Para, LineBlock, CodeBlock, RawBlock, BlockQuote
    - OrderedList, BulletList, DefinitionList, Header, HorizontalRule
    - Table, Figure, Div, Null

Inline nodes:
    - Str, Emph, Underline, Strong, Strikeout, Superscript, Subscript
    - SmallCaps, Quoted, Cite, Code, Space, SoftBreak, LineBreak
    - Math, RawInline, Link, Image, Note, Span

Helper records (Attr, ListAttributes, Citation, Caption, ColSpec, Cell,
Row, TableHead, TableBody, TableFoot) are plain dataclasses, not nodes:
they have no kind name and are never handed to filter actions, but the
nodes they hold are.

"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field
from typing import ClassVar, Iterator, Optional, Union

from panwalk.constants import (
    DEFAULT_PANDOC_API_VERSION,
    Alignment,
    CitationMode,
    ListNumberDelim,
    ListNumberStyle,
    MathType,
    QuoteType,
)


# ============================================================================
# Helper Records
# ============================================================================


@dataclass
class Attr:
    """Identifier, classes and key/value attributes of an element.

    Parameters
    ----------
    identifier : str, default = ""
        Element identifier (``#id``)
    classes : list of str, default = empty list
        Class names (``.class``)
    attributes : list of (str, str), default = empty list
        Ordered key/value pairs

    """

    identifier: str = ""
    classes: list[str] = field(default_factory=list)
    attributes: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class ListAttributes:
    """Numbering of an ordered list: start number, style and delimiter."""

    start: int = 1
    style: ListNumberStyle = "DefaultStyle"
    delimiter: ListNumberDelim = "DefaultDelim"


@dataclass
class Citation:
    """A single citation inside a Cite element.

    Parameters
    ----------
    id : str
        Citation key
    prefix : list of Inline, default = empty list
        Inlines before the citation
    suffix : list of Inline, default = empty list
        Inlines after the citation
    mode : CitationMode, default = "NormalCitation"
        How the citation is rendered
    note_num : int, default = 0
        Note number assigned by pandoc
    hash : int, default = 0
        Hash assigned by pandoc

    """

    id: str
    prefix: list[Inline] = field(default_factory=list)
    suffix: list[Inline] = field(default_factory=list)
    mode: CitationMode = "NormalCitation"
    note_num: int = 0
    hash: int = 0


@dataclass
class Caption:
    """Table or figure caption with an optional short form."""

    long: list[Block] = field(default_factory=list)
    short: Optional[list[Inline]] = None


@dataclass
class ColSpec:
    """Column specification: alignment and relative width (None for default width)."""

    alignment: Alignment = "AlignDefault"
    width: Optional[float] = None


@dataclass
class Cell:
    """Table cell.

    Parameters
    ----------
    content : list of Block, default = empty list
        Cell contents
    alignment : Alignment, default = "AlignDefault"
        Cell alignment
    row_span : int, default = 1
        Number of rows the cell spans
    col_span : int, default = 1
        Number of columns the cell spans
    attr : Attr, default = empty Attr
        Cell attributes

    """

    content: list[Block] = field(default_factory=list)
    alignment: Alignment = "AlignDefault"
    row_span: int = 1
    col_span: int = 1
    attr: Attr = field(default_factory=Attr)


@dataclass
class Row:
    """Table row."""

    cells: list[Cell] = field(default_factory=list)
    attr: Attr = field(default_factory=Attr)


@dataclass
class TableHead:
    """Header rows of a table."""

    rows: list[Row] = field(default_factory=list)
    attr: Attr = field(default_factory=Attr)


@dataclass
class TableBody:
    """Body section of a table.

    Parameters
    ----------
    body : list of Row, default = empty list
        Body rows
    head : list of Row, default = empty list
        Intermediate head rows of this section
    row_head_columns : int, default = 0
        Number of leading columns holding row headers
    attr : Attr, default = empty Attr
        Section attributes

    """

    body: list[Row] = field(default_factory=list)
    head: list[Row] = field(default_factory=list)
    row_head_columns: int = 0
    attr: Attr = field(default_factory=Attr)


@dataclass
class TableFoot:
    """Footer rows of a table."""

    rows: list[Row] = field(default_factory=list)
    attr: Attr = field(default_factory=Attr)


# ============================================================================
# Base Classes
# ============================================================================


class Node(ABC):
    """Base class for all pandoc AST element nodes.

    Each concrete subclass sets ``tag`` to the pandoc constructor name it
    represents.

    """

    tag: ClassVar[str] = ""

    @property
    def name(self) -> str:
        """Return the kind name of this node (e.g. ``"Header"``)."""
        return self.tag


class Block(Node):
    """Base class for block-level nodes."""


class Inline(Node):
    """Base class for inline nodes."""


class MetaValue(Node):
    """Base class for document metadata values."""


# ============================================================================
# Document Root
# ============================================================================


@dataclass
class Document(Node):
    """Root node of a pandoc document.

    The Document is the shape that carries metadata: ``Filter.apply`` reads
    ``meta`` from it when no explicit metadata is given.

    Parameters
    ----------
    blocks : list of Block, default = empty list
        Top-level blocks of the document
    meta : dict of str to MetaValue, default = empty dict
        Document metadata (title, author, ...)
    api_version : tuple of int, default = (1, 23, 1)
        pandoc-api-version the document was produced with

    """

    tag: ClassVar[str] = "Pandoc"

    blocks: list[Block] = field(default_factory=list)
    meta: dict[str, MetaValue] = field(default_factory=dict)
    api_version: tuple[int, ...] = DEFAULT_PANDOC_API_VERSION


# ============================================================================
# Metadata Values
# ============================================================================


@dataclass
class MetaMap(MetaValue):
    """Mapping of metadata keys to values."""

    tag: ClassVar[str] = "MetaMap"

    entries: dict[str, MetaValue] = field(default_factory=dict)


@dataclass
class MetaList(MetaValue):
    """List of metadata values."""

    tag: ClassVar[str] = "MetaList"

    items: list[MetaValue] = field(default_factory=list)


@dataclass
class MetaBool(MetaValue):
    """Boolean metadata value."""

    tag: ClassVar[str] = "MetaBool"

    value: bool = False


@dataclass
class MetaString(MetaValue):
    """Plain string metadata value."""

    tag: ClassVar[str] = "MetaString"

    text: str = ""


@dataclass
class MetaInlines(MetaValue):
    """Metadata value made of inline content."""

    tag: ClassVar[str] = "MetaInlines"

    content: list[Inline] = field(default_factory=list)


@dataclass
class MetaBlocks(MetaValue):
    """Metadata value made of block content."""

    tag: ClassVar[str] = "MetaBlocks"

    content: list[Block] = field(default_factory=list)


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass
class Plain(Block):
    """Plain text block, not a paragraph (e.g. tight list items)."""

    tag: ClassVar[str] = "Plain"

    content: list[Inline] = field(default_factory=list)


@dataclass
class Para(Block):
    """Paragraph of inline content."""

    tag: ClassVar[str] = "Para"

    content: list[Inline] = field(default_factory=list)


@dataclass
class LineBlock(Block):
    """Block of lines whose line breaks are significant, one inline list per line."""

    tag: ClassVar[str] = "LineBlock"

    lines: list[list[Inline]] = field(default_factory=list)


@dataclass
class CodeBlock(Block):
    """Code block with attributes.

    Parameters
    ----------
    text : str
        Literal code
    attr : Attr, default = empty Attr
        Attributes; the first class usually names the language

    """

    tag: ClassVar[str] = "CodeBlock"

    text: str = ""
    attr: Attr = field(default_factory=Attr)


@dataclass
class RawBlock(Block):
    """Raw block passed through to a specific output format."""

    tag: ClassVar[str] = "RawBlock"

    format: str = ""
    text: str = ""


@dataclass
class BlockQuote(Block):
    """Block quote containing blocks."""

    tag: ClassVar[str] = "BlockQuote"

    content: list[Block] = field(default_factory=list)


@dataclass
class OrderedList(Block):
    """Ordered list.

    Parameters
    ----------
    items : list of list of Block, default = empty list
        One block list per list item
    list_attributes : ListAttributes, default = ListAttributes()
        Start number, numbering style and delimiter

    """

    tag: ClassVar[str] = "OrderedList"

    items: list[list[Block]] = field(default_factory=list)
    list_attributes: ListAttributes = field(default_factory=ListAttributes)


@dataclass
class BulletList(Block):
    """Bullet list, one block list per item."""

    tag: ClassVar[str] = "BulletList"

    items: list[list[Block]] = field(default_factory=list)


@dataclass
class DefinitionList(Block):
    """Definition list.

    Each item pairs a term (inline list) with one or more definitions
    (each a block list).

    """

    tag: ClassVar[str] = "DefinitionList"

    items: list[tuple[list[Inline], list[list[Block]]]] = field(default_factory=list)


@dataclass
class Header(Block):
    """Header with a level and inline content.

    Parameters
    ----------
    level : int
        Header level, 1 being the top level
    content : list of Inline, default = empty list
        Header text
    attr : Attr, default = empty Attr
        Header attributes

    """

    tag: ClassVar[str] = "Header"

    level: int = 1
    content: list[Inline] = field(default_factory=list)
    attr: Attr = field(default_factory=Attr)


@dataclass
class HorizontalRule(Block):
    """Horizontal rule."""

    tag: ClassVar[str] = "HorizontalRule"


@dataclass
class Table(Block):
    """Table in the pandoc 1.21+ layout.

    Parameters
    ----------
    head : TableHead, default = empty TableHead
        Header rows
    bodies : list of TableBody, default = empty list
        Table body sections
    foot : TableFoot, default = empty TableFoot
        Footer rows
    caption : Caption, default = empty Caption
        Table caption
    col_specs : list of ColSpec, default = empty list
        One specification per column
    attr : Attr, default = empty Attr
        Table attributes

    """

    tag: ClassVar[str] = "Table"

    head: TableHead = field(default_factory=TableHead)
    bodies: list[TableBody] = field(default_factory=list)
    foot: TableFoot = field(default_factory=TableFoot)
    caption: Caption = field(default_factory=Caption)
    col_specs: list[ColSpec] = field(default_factory=list)
    attr: Attr = field(default_factory=Attr)

    def iter_rows(self) -> Iterator[Row]:
        """Yield every row in document order: head, each body, then foot."""
        yield from self.head.rows
        for body in self.bodies:
            yield from body.head
            yield from body.body
        yield from self.foot.rows


@dataclass
class Figure(Block):
    """Figure with caption and block content (pandoc-api-version 1.23+)."""

    tag: ClassVar[str] = "Figure"

    content: list[Block] = field(default_factory=list)
    caption: Caption = field(default_factory=Caption)
    attr: Attr = field(default_factory=Attr)


@dataclass
class Div(Block):
    """Generic block container with attributes."""

    tag: ClassVar[str] = "Div"

    content: list[Block] = field(default_factory=list)
    attr: Attr = field(default_factory=Attr)


@dataclass
class Null(Block):
    """Nothing."""

    tag: ClassVar[str] = "Null"


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass
class Str(Inline):
    """Text string, the leaf text unit of the tree."""

    tag: ClassVar[str] = "Str"

    text: str = ""


@dataclass
class Emph(Inline):
    """Emphasized text."""

    tag: ClassVar[str] = "Emph"

    content: list[Inline] = field(default_factory=list)


@dataclass
class Underline(Inline):
    """Underlined text."""

    tag: ClassVar[str] = "Underline"

    content: list[Inline] = field(default_factory=list)


@dataclass
class Strong(Inline):
    """Strongly emphasized text."""

    tag: ClassVar[str] = "Strong"

    content: list[Inline] = field(default_factory=list)


@dataclass
class Strikeout(Inline):
    """Struck-out text."""

    tag: ClassVar[str] = "Strikeout"

    content: list[Inline] = field(default_factory=list)


@dataclass
class Superscript(Inline):
    """Superscripted text."""

    tag: ClassVar[str] = "Superscript"

    content: list[Inline] = field(default_factory=list)


@dataclass
class Subscript(Inline):
    """Subscripted text."""

    tag: ClassVar[str] = "Subscript"

    content: list[Inline] = field(default_factory=list)


@dataclass
class SmallCaps(Inline):
    """Small caps text."""

    tag: ClassVar[str] = "SmallCaps"

    content: list[Inline] = field(default_factory=list)


@dataclass
class Quoted(Inline):
    """Quoted text.

    Parameters
    ----------
    quote_type : QuoteType, default = "DoubleQuote"
        Single or double quotes
    content : list of Inline, default = empty list
        Quoted inlines

    """

    tag: ClassVar[str] = "Quoted"

    quote_type: QuoteType = "DoubleQuote"
    content: list[Inline] = field(default_factory=list)


@dataclass
class Cite(Inline):
    """Citation: the parsed citations plus the inlines they were written as."""

    tag: ClassVar[str] = "Cite"

    citations: list[Citation] = field(default_factory=list)
    content: list[Inline] = field(default_factory=list)


@dataclass
class Code(Inline):
    """Inline code."""

    tag: ClassVar[str] = "Code"

    text: str = ""
    attr: Attr = field(default_factory=Attr)


@dataclass
class Space(Inline):
    """Inter-word space."""

    tag: ClassVar[str] = "Space"


@dataclass
class SoftBreak(Inline):
    """Soft line break."""

    tag: ClassVar[str] = "SoftBreak"


@dataclass
class LineBreak(Inline):
    """Hard line break."""

    tag: ClassVar[str] = "LineBreak"


@dataclass
class Math(Inline):
    """TeX math, displayed or inline."""

    tag: ClassVar[str] = "Math"

    text: str = ""
    math_type: MathType = "InlineMath"


@dataclass
class RawInline(Inline):
    """Raw inline content passed through to a specific output format."""

    tag: ClassVar[str] = "RawInline"

    format: str = ""
    text: str = ""


@dataclass
class Link(Inline):
    """Hyperlink.

    Parameters
    ----------
    url : str
        Link target
    content : list of Inline, default = empty list
        Link text
    title : str, default = ""
        Link title
    attr : Attr, default = empty Attr
        Link attributes

    """

    tag: ClassVar[str] = "Link"

    url: str = ""
    content: list[Inline] = field(default_factory=list)
    title: str = ""
    attr: Attr = field(default_factory=Attr)


@dataclass
class Image(Inline):
    """Image: alt text as inlines, plus source URL and title."""

    tag: ClassVar[str] = "Image"

    url: str = ""
    content: list[Inline] = field(default_factory=list)
    title: str = ""
    attr: Attr = field(default_factory=Attr)


@dataclass
class Note(Inline):
    """Footnote or endnote holding block content."""

    tag: ClassVar[str] = "Note"

    content: list[Block] = field(default_factory=list)


@dataclass
class Span(Inline):
    """Generic inline container with attributes."""

    tag: ClassVar[str] = "Span"

    content: list[Inline] = field(default_factory=list)
    attr: Attr = field(default_factory=Attr)


# ============================================================================
# Kind Registry and Child Access
# ============================================================================

# Every element class by kind name; the root is not an element and is excluded
NODE_CLASSES: dict[str, type[Node]] = {
    cls.tag: cls
    for cls in (
        MetaMap,
        MetaList,
        MetaBool,
        MetaString,
        MetaInlines,
        MetaBlocks,
        Plain,
        Para,
        LineBlock,
        CodeBlock,
        RawBlock,
        BlockQuote,
        OrderedList,
        BulletList,
        DefinitionList,
        Header,
        HorizontalRule,
        Table,
        Figure,
        Div,
        Null,
        Str,
        Emph,
        Underline,
        Strong,
        Strikeout,
        Superscript,
        Subscript,
        SmallCaps,
        Quoted,
        Cite,
        Code,
        Space,
        SoftBreak,
        LineBreak,
        Math,
        RawInline,
        Link,
        Image,
        Note,
        Span,
    )
}

# Nodes whose only children live in a single ``content`` list
_CONTENT_NODES = (
    MetaInlines,
    MetaBlocks,
    Plain,
    Para,
    BlockQuote,
    Header,
    Figure,
    Div,
    Emph,
    Underline,
    Strong,
    Strikeout,
    Superscript,
    Subscript,
    SmallCaps,
    Quoted,
    Link,
    Image,
    Note,
    Span,
)

ChildSlot = Union[list, dict]

# Anything the walker and codec accept as a tree: a node (usually a Document) or a list of nodes
Tree = Union[Node, list]


def _iter_caption_slots(caption: Caption) -> Iterator[ChildSlot]:
    if caption.short is not None:
        yield caption.short
    yield caption.long


def iter_child_slots(node: Node) -> Iterator[ChildSlot]:
    """Yield the containers holding a node's direct children, in document order.

    A slot is either a list of nodes (a sequence whose members can be
    removed, replaced or spliced) or a dict mapping metadata keys to single
    nodes. Helper records are looked through: a Table yields the block
    list of every cell, a Cite the prefix and suffix of every citation.

    Parameters
    ----------
    node : Node
        The node whose child containers to yield

    Yields
    ------
    list or dict
        The live containers; mutating them mutates the tree

    Examples
    --------
    >>> para = Para(content=[Str("a"), Space(), Str("b")])
    >>> [len(slot) for slot in iter_child_slots(para)]
    [3]

    """
    if isinstance(node, Document):
        yield node.meta
        yield node.blocks
    elif isinstance(node, MetaMap):
        yield node.entries
    elif isinstance(node, MetaList):
        yield node.items
    elif isinstance(node, Figure):
        yield from _iter_caption_slots(node.caption)
        yield node.content
    elif isinstance(node, _CONTENT_NODES):
        yield node.content
    elif isinstance(node, LineBlock):
        yield from node.lines
    elif isinstance(node, (OrderedList, BulletList)):
        yield from node.items
    elif isinstance(node, DefinitionList):
        for term, definitions in node.items:
            yield term
            yield from definitions
    elif isinstance(node, Cite):
        for citation in node.citations:
            yield citation.prefix
            yield citation.suffix
        yield node.content
    elif isinstance(node, Table):
        yield from _iter_caption_slots(node.caption)
        for row in node.iter_rows():
            for cell in row.cells:
                yield cell.content


__all__ = [
    "Attr",
    "ListAttributes",
    "Citation",
    "Caption",
    "ColSpec",
    "Cell",
    "Row",
    "TableHead",
    "TableBody",
    "TableFoot",
    "Node",
    "Block",
    "Inline",
    "MetaValue",
    "Document",
    "MetaMap",
    "MetaList",
    "MetaBool",
    "MetaString",
    "MetaInlines",
    "MetaBlocks",
    "Plain",
    "Para",
    "LineBlock",
    "CodeBlock",
    "RawBlock",
    "BlockQuote",
    "OrderedList",
    "BulletList",
    "DefinitionList",
    "Header",
    "HorizontalRule",
    "Table",
    "Figure",
    "Div",
    "Null",
    "Str",
    "Emph",
    "Underline",
    "Strong",
    "Strikeout",
    "Superscript",
    "Subscript",
    "SmallCaps",
    "Quoted",
    "Cite",
    "Code",
    "Space",
    "SoftBreak",
    "LineBreak",
    "Math",
    "RawInline",
    "Link",
    "Image",
    "Note",
    "Span",
    "NODE_CLASSES",
    "ChildSlot",
    "Tree",
    "iter_child_slots",
]
