#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/panwalk/ast/serialization.py
"""Pandoc JSON serialization and deserialization for AST nodes.

This module converts between pandoc's JSON representation of a document
(``pandoc -t json``) and the typed node classes of ``panwalk.ast.nodes``.

The JSON layout is pandoc's own:
- Elements are objects ``{"t": <constructor>, "c": <contents>}``; nullary
  elements such as ``Space`` omit ``"c"``
- Documents are objects with ``pandoc-api-version``, ``meta`` and ``blocks``
- Tables use the layout introduced with pandoc-api-version 1.21

Examples
--------
Decode a document read from pandoc:

    >>> from panwalk.ast.serialization import json_to_ast
    >>> doc = json_to_ast(json_str)
    >>> doc.blocks[0].name
    'Para'

Encode it back to a single line of JSON:

    >>> from panwalk.ast.serialization import ast_to_json
    >>> ast_to_json(doc)
    '{"pandoc-api-version":[1,23,1],"meta":{},"blocks":[...]}'

"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional, Union

from packaging.version import InvalidVersion, Version

from panwalk.ast.nodes import (
    Attr,
    Block,
    BlockQuote,
    BulletList,
    Caption,
    Cell,
    Citation,
    Cite,
    Code,
    CodeBlock,
    ColSpec,
    DefinitionList,
    Div,
    Document,
    Emph,
    Figure,
    Header,
    HorizontalRule,
    Image,
    Inline,
    LineBlock,
    LineBreak,
    Link,
    ListAttributes,
    Math,
    MetaBlocks,
    MetaBool,
    MetaInlines,
    MetaList,
    MetaMap,
    MetaString,
    MetaValue,
    Node,
    Note,
    Null,
    OrderedList,
    Para,
    Plain,
    Quoted,
    RawBlock,
    RawInline,
    Row,
    SmallCaps,
    SoftBreak,
    Space,
    Span,
    Str,
    Strikeout,
    Strong,
    Subscript,
    Superscript,
    Table,
    TableBody,
    TableFoot,
    TableHead,
    Tree,
    Underline,
)
from panwalk.constants import (
    PANDOC_API_VERSION_KEY,
    PANDOC_BLOCKS_KEY,
    PANDOC_CONTENT_KEY,
    PANDOC_META_KEY,
    PANDOC_TAG_KEY,
)
from panwalk.exceptions import ApiVersionError, MalformedInputError
from panwalk.options import WalkOptions

logger = logging.getLogger(__name__)

# ============================================================================
# Helper Records
# ============================================================================


def _expect_list(value: Any, what: str) -> list:
    if not isinstance(value, list):
        raise MalformedInputError(f"Expected a list for {what}, got {type(value).__name__}", parsing_stage="ast")
    return value


def _enum(value: Any) -> str:
    """Decode a nullary constructor used as an enumeration value ({"t": "AlignLeft"})."""
    return str(value[PANDOC_TAG_KEY])


def _enum_to_dict(value: str) -> dict[str, Any]:
    return {PANDOC_TAG_KEY: value}


def _decode_attr(data: Any) -> Attr:
    identifier, classes, attributes = data
    return Attr(
        identifier=str(identifier),
        classes=[str(c) for c in _expect_list(classes, "attribute classes")],
        attributes=[(str(k), str(v)) for k, v in _expect_list(attributes, "attribute pairs")],
    )


def _encode_attr(attr: Attr) -> list[Any]:
    return [attr.identifier, list(attr.classes), [[k, v] for k, v in attr.attributes]]


def _decode_citation(data: dict[str, Any]) -> Citation:
    return Citation(
        id=data["citationId"],
        prefix=_decode_inlines(data.get("citationPrefix", [])),
        suffix=_decode_inlines(data.get("citationSuffix", [])),
        mode=_enum(data["citationMode"]),  # type: ignore[arg-type]
        note_num=int(data.get("citationNoteNum", 0)),
        hash=int(data.get("citationHash", 0)),
    )


def _encode_citation(citation: Citation) -> dict[str, Any]:
    return {
        "citationId": citation.id,
        "citationPrefix": _encode_nodes(citation.prefix),
        "citationSuffix": _encode_nodes(citation.suffix),
        "citationMode": _enum_to_dict(citation.mode),
        "citationNoteNum": citation.note_num,
        "citationHash": citation.hash,
    }


def _decode_caption(data: Any) -> Caption:
    short, long = data
    return Caption(long=_decode_blocks(long), short=None if short is None else _decode_inlines(short))


def _encode_caption(caption: Caption) -> list[Any]:
    short = None if caption.short is None else _encode_nodes(caption.short)
    return [short, _encode_nodes(caption.long)]


def _decode_col_spec(data: Any) -> ColSpec:
    alignment, width = data
    width_value = None if _enum(width) == "ColWidthDefault" else float(width[PANDOC_CONTENT_KEY])
    return ColSpec(alignment=_enum(alignment), width=width_value)  # type: ignore[arg-type]


def _encode_col_spec(spec: ColSpec) -> list[Any]:
    if spec.width is None:
        width: dict[str, Any] = _enum_to_dict("ColWidthDefault")
    else:
        width = {PANDOC_TAG_KEY: "ColWidth", PANDOC_CONTENT_KEY: spec.width}
    return [_enum_to_dict(spec.alignment), width]


def _decode_cell(data: Any) -> Cell:
    attr, alignment, row_span, col_span, content = data
    return Cell(
        content=_decode_blocks(content),
        alignment=_enum(alignment),  # type: ignore[arg-type]
        row_span=int(row_span),
        col_span=int(col_span),
        attr=_decode_attr(attr),
    )


def _encode_cell(cell: Cell) -> list[Any]:
    return [
        _encode_attr(cell.attr),
        _enum_to_dict(cell.alignment),
        cell.row_span,
        cell.col_span,
        _encode_nodes(cell.content),
    ]


def _decode_row(data: Any) -> Row:
    attr, cells = data
    return Row(cells=[_decode_cell(c) for c in _expect_list(cells, "row cells")], attr=_decode_attr(attr))


def _encode_row(row: Row) -> list[Any]:
    return [_encode_attr(row.attr), [_encode_cell(c) for c in row.cells]]


def _decode_rows(data: Any) -> list[Row]:
    return [_decode_row(r) for r in _expect_list(data, "table rows")]


def _decode_table_body(data: Any) -> TableBody:
    attr, row_head_columns, head, body = data
    return TableBody(
        body=_decode_rows(body),
        head=_decode_rows(head),
        row_head_columns=int(row_head_columns),
        attr=_decode_attr(attr),
    )


def _encode_table_body(body: TableBody) -> list[Any]:
    return [
        _encode_attr(body.attr),
        body.row_head_columns,
        [_encode_row(r) for r in body.head],
        [_encode_row(r) for r in body.body],
    ]


# ============================================================================
# Element Deserialization
# ============================================================================


def _decode_inlines(data: Any) -> list[Inline]:
    return [_decode_element(item) for item in _expect_list(data, "inline list")]  # type: ignore[misc]


def _decode_blocks(data: Any) -> list[Block]:
    return [_decode_element(item) for item in _expect_list(data, "block list")]  # type: ignore[misc]


def _decode_block_lists(data: Any) -> list[list[Block]]:
    return [_decode_blocks(item) for item in _expect_list(data, "list items")]


def _decode_meta_map(data: Any) -> dict[str, MetaValue]:
    if not isinstance(data, dict):
        raise MalformedInputError(f"Expected an object for metadata, got {type(data).__name__}", parsing_stage="ast")
    return {str(key): _decode_element(value) for key, value in data.items()}  # type: ignore[misc]


def _decode_ordered_list(c: Any) -> OrderedList:
    (start, style, delimiter), items = c
    return OrderedList(
        items=_decode_block_lists(items),
        list_attributes=ListAttributes(start=int(start), style=_enum(style), delimiter=_enum(delimiter)),  # type: ignore[arg-type]
    )


def _decode_definition_list(c: Any) -> DefinitionList:
    items = []
    for term, definitions in _expect_list(c, "definition list items"):
        items.append((_decode_inlines(term), _decode_block_lists(definitions)))
    return DefinitionList(items=items)


def _decode_header(c: Any) -> Header:
    level, attr, content = c
    return Header(level=int(level), content=_decode_inlines(content), attr=_decode_attr(attr))


def _decode_table(c: Any) -> Table:
    attr, caption, col_specs, (head_attr, head_rows), bodies, (foot_attr, foot_rows) = c
    return Table(
        head=TableHead(rows=_decode_rows(head_rows), attr=_decode_attr(head_attr)),
        bodies=[_decode_table_body(b) for b in _expect_list(bodies, "table bodies")],
        foot=TableFoot(rows=_decode_rows(foot_rows), attr=_decode_attr(foot_attr)),
        caption=_decode_caption(caption),
        col_specs=[_decode_col_spec(s) for s in _expect_list(col_specs, "column specs")],
        attr=_decode_attr(attr),
    )


def _decode_figure(c: Any) -> Figure:
    attr, caption, content = c
    return Figure(content=_decode_blocks(content), caption=_decode_caption(caption), attr=_decode_attr(attr))


def _decode_link(cls: type[Link] | type[Image], c: Any) -> Link | Image:
    attr, content, (url, title) = c
    return cls(url=str(url), content=_decode_inlines(content), title=str(title), attr=_decode_attr(attr))


def _decode_cite(c: Any) -> Cite:
    citations, content = c
    return Cite(
        citations=[_decode_citation(item) for item in _expect_list(citations, "citations")],
        content=_decode_inlines(content),
    )


def _decode_attr_text(cls: type[Code] | type[CodeBlock], c: Any) -> Code | CodeBlock:
    attr, text = c
    return cls(text=str(text), attr=_decode_attr(attr))


def _decode_attr_content(cls: type[Div] | type[Span], c: Any) -> Div | Span:
    attr, content = c
    decode = _decode_blocks if cls is Div else _decode_inlines
    return cls(content=decode(content), attr=_decode_attr(attr))  # type: ignore[arg-type]


def _decode_raw(cls: type[RawInline] | type[RawBlock], c: Any) -> RawInline | RawBlock:
    raw_format, text = c
    return cls(format=str(raw_format), text=str(text))


def _decode_quoted(c: Any) -> Quoted:
    quote_type, content = c
    return Quoted(quote_type=_enum(quote_type), content=_decode_inlines(content))  # type: ignore[arg-type]


def _decode_math(c: Any) -> Math:
    math_type, text = c
    return Math(text=str(text), math_type=_enum(math_type))  # type: ignore[arg-type]


def _decode_meta_bool(c: Any) -> MetaBool:
    if not isinstance(c, bool):
        raise MalformedInputError(f"Expected a boolean for MetaBool, got {type(c).__name__}", parsing_stage="ast")
    return MetaBool(value=c)


def _decode_string(cls: type[Str] | type[MetaString], c: Any) -> Str | MetaString:
    if not isinstance(c, str):
        raise MalformedInputError(f"Expected a string for {cls.tag}, got {type(c).__name__}", parsing_stage="ast")
    return cls(text=c)


# Dispatch table mapping pandoc constructor names to deserializer functions
_DESERIALIZATION_DISPATCH: dict[str, Callable[[Any], Node]] = {
    "MetaMap": lambda c: MetaMap(entries=_decode_meta_map(c)),
    "MetaList": lambda c: MetaList(items=[_decode_element(v) for v in _expect_list(c, "MetaList")]),  # type: ignore[misc]
    "MetaBool": _decode_meta_bool,
    "MetaString": lambda c: _decode_string(MetaString, c),
    "MetaInlines": lambda c: MetaInlines(content=_decode_inlines(c)),
    "MetaBlocks": lambda c: MetaBlocks(content=_decode_blocks(c)),
    "Plain": lambda c: Plain(content=_decode_inlines(c)),
    "Para": lambda c: Para(content=_decode_inlines(c)),
    "LineBlock": lambda c: LineBlock(lines=[_decode_inlines(line) for line in _expect_list(c, "LineBlock")]),
    "CodeBlock": lambda c: _decode_attr_text(CodeBlock, c),
    "RawBlock": lambda c: _decode_raw(RawBlock, c),
    "BlockQuote": lambda c: BlockQuote(content=_decode_blocks(c)),
    "OrderedList": _decode_ordered_list,
    "BulletList": lambda c: BulletList(items=_decode_block_lists(c)),
    "DefinitionList": _decode_definition_list,
    "Header": _decode_header,
    "HorizontalRule": lambda c: HorizontalRule(),
    "Table": _decode_table,
    "Figure": _decode_figure,
    "Div": lambda c: _decode_attr_content(Div, c),
    "Null": lambda c: Null(),
    "Str": lambda c: _decode_string(Str, c),
    "Emph": lambda c: Emph(content=_decode_inlines(c)),
    "Underline": lambda c: Underline(content=_decode_inlines(c)),
    "Strong": lambda c: Strong(content=_decode_inlines(c)),
    "Strikeout": lambda c: Strikeout(content=_decode_inlines(c)),
    "Superscript": lambda c: Superscript(content=_decode_inlines(c)),
    "Subscript": lambda c: Subscript(content=_decode_inlines(c)),
    "SmallCaps": lambda c: SmallCaps(content=_decode_inlines(c)),
    "Quoted": _decode_quoted,
    "Cite": _decode_cite,
    "Code": lambda c: _decode_attr_text(Code, c),
    "Space": lambda c: Space(),
    "SoftBreak": lambda c: SoftBreak(),
    "LineBreak": lambda c: LineBreak(),
    "Math": _decode_math,
    "RawInline": lambda c: _decode_raw(RawInline, c),
    "Link": lambda c: _decode_link(Link, c),
    "Image": lambda c: _decode_link(Image, c),
    "Note": lambda c: Note(content=_decode_blocks(c)),
    "Span": lambda c: _decode_attr_content(Span, c),
}


def _decode_element(data: Any) -> Node:
    """Decode one ``{"t": ..., "c": ...}`` object into a node.

    Raises
    ------
    MalformedInputError
        If the object is not an element, names an unknown constructor, or
        its contents do not have the constructor's shape

    """
    if not isinstance(data, dict) or PANDOC_TAG_KEY not in data:
        raise MalformedInputError(f"Expected a pandoc element object, got {data!r:.80}", parsing_stage="ast")

    tag = data[PANDOC_TAG_KEY]
    deserializer = _DESERIALIZATION_DISPATCH.get(tag)
    if deserializer is None:
        raise MalformedInputError(f"Unknown node type: {tag}", parsing_stage="ast")

    try:
        return deserializer(data.get(PANDOC_CONTENT_KEY))
    except (TypeError, ValueError, KeyError, IndexError, AttributeError) as e:
        raise MalformedInputError(f"Malformed {tag} element: {e}", parsing_stage="ast", original_error=e) from e


def _check_api_version(version: tuple[int, ...], options: WalkOptions) -> None:
    version_str = ".".join(str(part) for part in version)
    try:
        parsed = Version(version_str)
    except InvalidVersion as e:
        raise MalformedInputError(
            f"Invalid pandoc-api-version: {version_str}", parsing_stage="ast", original_error=e
        ) from e

    if parsed not in options.api_version_specifier:
        raise ApiVersionError(version_str, options.supported_api_versions)
    logger.debug("Pandoc API version %s accepted by %s", version_str, options.supported_api_versions)


def _decode_document(data: dict[str, Any], options: WalkOptions) -> Document:
    try:
        version = tuple(int(part) for part in _expect_list(data[PANDOC_API_VERSION_KEY], "pandoc-api-version"))
    except (TypeError, ValueError) as e:
        raise MalformedInputError(
            f"Invalid pandoc-api-version: {data[PANDOC_API_VERSION_KEY]!r}", parsing_stage="ast", original_error=e
        ) from e

    if options.validate_api_version:
        _check_api_version(version, options)

    if PANDOC_BLOCKS_KEY not in data:
        raise MalformedInputError("Document is missing the 'blocks' field", parsing_stage="ast")

    return Document(
        blocks=_decode_blocks(data[PANDOC_BLOCKS_KEY]),
        meta=_decode_meta_map(data.get(PANDOC_META_KEY, {})),
        api_version=version,
    )


def dict_to_ast(data: Any, options: Optional[WalkOptions] = None) -> Tree:
    """Convert decoded pandoc JSON into typed nodes.

    Accepts a full document, a single element, or a list of elements.

    Parameters
    ----------
    data : Any
        The value produced by ``json.loads`` on pandoc output
    options : WalkOptions, optional
        Controls the pandoc-api-version check; defaults to ``WalkOptions()``

    Returns
    -------
    Document, Node or list of Node
        The decoded tree

    Raises
    ------
    ApiVersionError
        If the document's pandoc-api-version is outside the supported range
    MalformedInputError
        If the data is not a pandoc AST

    Examples
    --------
    >>> dict_to_ast({"t": "Str", "c": "Hello"})
    Str(text='Hello')

    """
    if options is None:
        options = WalkOptions()

    if isinstance(data, dict) and PANDOC_API_VERSION_KEY in data:
        return _decode_document(data, options)

    if isinstance(data, list):
        if len(data) == 2 and isinstance(data[0], dict) and "unMeta" in data[0]:
            raise MalformedInputError(
                "Pre-1.18 pandoc JSON layout ([{'unMeta': ...}, [...]]) is not supported", parsing_stage="ast"
            )
        return [_decode_element(item) for item in data]

    return _decode_element(data)


# ============================================================================
# Element Serialization
# ============================================================================


def _encode_nodes(nodes: list) -> list[Any]:
    return [_encode_element(node) for node in nodes]


def _encode_table(node: Table) -> list[Any]:
    return [
        _encode_attr(node.attr),
        _encode_caption(node.caption),
        [_encode_col_spec(s) for s in node.col_specs],
        [_encode_attr(node.head.attr), [_encode_row(r) for r in node.head.rows]],
        [_encode_table_body(b) for b in node.bodies],
        [_encode_attr(node.foot.attr), [_encode_row(r) for r in node.foot.rows]],
    ]


def _encode_link(node: Link | Image) -> list[Any]:
    return [_encode_attr(node.attr), _encode_nodes(node.content), [node.url, node.title]]


# Dispatch table mapping node classes to functions producing the "c" value.
# Nullary constructors map to None and are written without "c".
_SERIALIZATION_DISPATCH: dict[type, Optional[Callable[[Any], Any]]] = {
    MetaMap: lambda n: {key: _encode_element(value) for key, value in n.entries.items()},
    MetaList: lambda n: _encode_nodes(n.items),
    MetaBool: lambda n: n.value,
    MetaString: lambda n: n.text,
    MetaInlines: lambda n: _encode_nodes(n.content),
    MetaBlocks: lambda n: _encode_nodes(n.content),
    Plain: lambda n: _encode_nodes(n.content),
    Para: lambda n: _encode_nodes(n.content),
    LineBlock: lambda n: [_encode_nodes(line) for line in n.lines],
    CodeBlock: lambda n: [_encode_attr(n.attr), n.text],
    RawBlock: lambda n: [n.format, n.text],
    BlockQuote: lambda n: _encode_nodes(n.content),
    OrderedList: lambda n: [
        [
            n.list_attributes.start,
            _enum_to_dict(n.list_attributes.style),
            _enum_to_dict(n.list_attributes.delimiter),
        ],
        [_encode_nodes(item) for item in n.items],
    ],
    BulletList: lambda n: [_encode_nodes(item) for item in n.items],
    DefinitionList: lambda n: [
        [_encode_nodes(term), [_encode_nodes(d) for d in definitions]] for term, definitions in n.items
    ],
    Header: lambda n: [n.level, _encode_attr(n.attr), _encode_nodes(n.content)],
    HorizontalRule: None,
    Table: _encode_table,
    Figure: lambda n: [_encode_attr(n.attr), _encode_caption(n.caption), _encode_nodes(n.content)],
    Div: lambda n: [_encode_attr(n.attr), _encode_nodes(n.content)],
    Null: None,
    Str: lambda n: n.text,
    Emph: lambda n: _encode_nodes(n.content),
    Underline: lambda n: _encode_nodes(n.content),
    Strong: lambda n: _encode_nodes(n.content),
    Strikeout: lambda n: _encode_nodes(n.content),
    Superscript: lambda n: _encode_nodes(n.content),
    Subscript: lambda n: _encode_nodes(n.content),
    SmallCaps: lambda n: _encode_nodes(n.content),
    Quoted: lambda n: [_enum_to_dict(n.quote_type), _encode_nodes(n.content)],
    Cite: lambda n: [[_encode_citation(c) for c in n.citations], _encode_nodes(n.content)],
    Code: lambda n: [_encode_attr(n.attr), n.text],
    Space: None,
    SoftBreak: None,
    LineBreak: None,
    Math: lambda n: [_enum_to_dict(n.math_type), n.text],
    RawInline: lambda n: [n.format, n.text],
    Link: _encode_link,
    Image: _encode_link,
    Note: lambda n: _encode_nodes(n.content),
    Span: lambda n: [_encode_attr(n.attr), _encode_nodes(n.content)],
}


def _encode_element(node: Node) -> dict[str, Any]:
    node_class = type(node)
    if node_class not in _SERIALIZATION_DISPATCH:
        raise ValueError(f"Unknown node type for serialization: {node_class.__name__}")

    serializer = _SERIALIZATION_DISPATCH[node_class]
    if serializer is None:
        return {PANDOC_TAG_KEY: node.tag}
    return {PANDOC_TAG_KEY: node.tag, PANDOC_CONTENT_KEY: serializer(node)}


def ast_to_dict(tree: Tree) -> Any:
    """Convert a tree into pandoc's JSON data layout.

    Parameters
    ----------
    tree : Document, Node or list of Node
        The tree to convert

    Returns
    -------
    dict or list
        Data ready for ``json.dumps``

    Raises
    ------
    ValueError
        If the tree contains an object that is not a pandoc node

    Examples
    --------
    >>> ast_to_dict(Emph(content=[Str("hi")]))
    {'t': 'Emph', 'c': [{'t': 'Str', 'c': 'hi'}]}

    """
    if isinstance(tree, Document):
        return {
            PANDOC_API_VERSION_KEY: list(tree.api_version),
            PANDOC_META_KEY: {key: _encode_element(value) for key, value in tree.meta.items()},
            PANDOC_BLOCKS_KEY: _encode_nodes(tree.blocks),
        }
    if isinstance(tree, list):
        return _encode_nodes(tree)
    return _encode_element(tree)


def ast_to_json(tree: Tree, options: Optional[WalkOptions] = None) -> str:
    """Serialize a tree to a single line of pandoc JSON.

    Parameters
    ----------
    tree : Document, Node or list of Node
        The tree to serialize
    options : WalkOptions, optional
        ``ensure_ascii`` controls escaping of non-ASCII characters

    Returns
    -------
    str
        Compact JSON without a trailing newline

    """
    if options is None:
        options = WalkOptions()
    return json.dumps(ast_to_dict(tree), ensure_ascii=options.ensure_ascii, separators=(",", ":"))


def json_to_ast(json_str: Union[str, bytes], options: Optional[WalkOptions] = None) -> Tree:
    """Deserialize pandoc JSON text into typed nodes.

    Parameters
    ----------
    json_str : str or bytes
        One JSON value as produced by ``pandoc -t json``
    options : WalkOptions, optional
        Controls the pandoc-api-version check

    Returns
    -------
    Document, Node or list of Node
        The decoded tree

    Raises
    ------
    MalformedInputError
        If the text is not valid JSON (``parsing_stage="json"``) or not a
        pandoc AST (``parsing_stage="ast"``)
    ApiVersionError
        If the document's pandoc-api-version is not supported

    """
    try:
        data = json.loads(json_str)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedInputError(f"Invalid JSON input: {e}", parsing_stage="json", original_error=e) from e

    return dict_to_ast(data, options)


__all__ = [
    "ast_to_dict",
    "ast_to_json",
    "dict_to_ast",
    "json_to_ast",
]
