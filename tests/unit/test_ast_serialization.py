#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for pandoc JSON serialization and deserialization."""
import json

import pytest

from panwalk.ast import (
    Attr,
    BulletList,
    Code,
    ColSpec,
    Document,
    Emph,
    Figure,
    Header,
    HorizontalRule,
    Link,
    Math,
    MetaBool,
    MetaInlines,
    MetaMap,
    MetaString,
    OrderedList,
    Para,
    Plain,
    Space,
    Str,
    Superscript,
    Table,
)
from panwalk.ast.serialization import ast_to_dict, ast_to_json, dict_to_ast, json_to_ast
from panwalk.exceptions import ApiVersionError, MalformedInputError, ParsingError
from panwalk.options import WalkOptions


def _table_dict() -> dict:
    """Return a one-column table with a header cell and one body cell."""

    def cell(text):
        return [["", [], []], {"t": "AlignDefault"}, 1, 1, [{"t": "Plain", "c": [{"t": "Str", "c": text}]}]]

    return {
        "t": "Table",
        "c": [
            ["tbl", [], []],
            [None, [{"t": "Plain", "c": [{"t": "Str", "c": "Caption"}]}]],
            [[{"t": "AlignLeft"}, {"t": "ColWidthDefault"}]],
            [["", [], []], [[["", [], []], [cell("Head")]]]],
            [[["", [], []], 0, [], [[["", [], []], [cell("Body")]]]]],
            [["", [], []], []],
        ],
    }


@pytest.mark.unit
class TestDocumentDecoding:
    """Test decoding of complete pandoc documents."""

    def test_decode_sample_document(self, sample_document_dict) -> None:
        """Test decoding blocks and metadata of a document."""
        doc = dict_to_ast(sample_document_dict)

        assert isinstance(doc, Document)
        assert doc.api_version == (1, 23, 1)
        assert [b.name for b in doc.blocks] == ["Header", "Para", "Header", "BulletList"]
        assert doc.meta["title"] == MetaInlines(content=[Str("Sample")])
        assert doc.meta["draft"] == MetaBool(True)

    def test_decode_header_fields(self, sample_document) -> None:
        """Test decoding header level, identifier and content."""
        header = sample_document.blocks[0]

        assert isinstance(header, Header)
        assert header.level == 1
        assert header.attr == Attr(identifier="intro")
        assert header.content == [Str("Intro")]

    def test_decode_inline_markup(self, sample_document) -> None:
        """Test decoding nested inline elements."""
        para = sample_document.blocks[1]

        assert para.content[2] == Emph(content=[Str("world")])
        assert para.content[7] == Superscript(content=[Str("2")])
        assert isinstance(para.content[1], Space)

    def test_decode_bullet_list(self, sample_document) -> None:
        """Test decoding list items and inline code."""
        bullets = sample_document.blocks[3]

        assert isinstance(bullets, BulletList)
        assert len(bullets.items) == 2
        assert bullets.items[1][0].content[2] == Code(text="code")

    def test_missing_meta_defaults_to_empty(self) -> None:
        """Test that a document without a meta field decodes with empty metadata."""
        doc = dict_to_ast({"pandoc-api-version": [1, 22], "blocks": []})

        assert doc.meta == {}

    def test_missing_blocks_is_malformed(self) -> None:
        """Test that a document without blocks is rejected."""
        with pytest.raises(MalformedInputError, match="blocks"):
            dict_to_ast({"pandoc-api-version": [1, 23, 1], "meta": {}})

    def test_legacy_layout_is_rejected(self) -> None:
        """Test that the pre-1.18 two-element layout is rejected."""
        with pytest.raises(MalformedInputError, match="Pre-1.18"):
            dict_to_ast([{"unMeta": {}}, []])


@pytest.mark.unit
class TestApiVersion:
    """Test pandoc-api-version validation."""

    def test_unsupported_version_rejected(self) -> None:
        """Test that a version outside the supported range raises ApiVersionError."""
        with pytest.raises(ApiVersionError) as exc_info:
            dict_to_ast({"pandoc-api-version": [1, 17, 5, 4], "meta": {}, "blocks": []})

        assert exc_info.value.version == "1.17.5.4"
        assert isinstance(exc_info.value, MalformedInputError)

    def test_newer_version_rejected(self) -> None:
        """Test that a version above the supported range raises ApiVersionError."""
        with pytest.raises(ApiVersionError):
            dict_to_ast({"pandoc-api-version": [1, 24], "meta": {}, "blocks": []})

    def test_validation_can_be_disabled(self) -> None:
        """Test that validation is skipped when turned off in options."""
        options = WalkOptions(validate_api_version=False)

        doc = dict_to_ast({"pandoc-api-version": [1, 17, 5, 4], "meta": {}, "blocks": []}, options)

        assert doc.api_version == (1, 17, 5, 4)

    def test_custom_supported_range(self) -> None:
        """Test that a custom specifier narrows the accepted versions."""
        options = WalkOptions(supported_api_versions=">=1.23")

        with pytest.raises(ApiVersionError):
            dict_to_ast({"pandoc-api-version": [1, 22, 2], "meta": {}, "blocks": []}, options)

    def test_non_numeric_version_is_malformed(self) -> None:
        """Test that a non-numeric version is malformed input."""
        with pytest.raises(MalformedInputError):
            dict_to_ast({"pandoc-api-version": ["one"], "meta": {}, "blocks": []})


@pytest.mark.unit
class TestElementDecoding:
    """Test decoding individual elements and element lists."""

    def test_decode_single_element(self) -> None:
        """Test decoding a bare element."""
        assert dict_to_ast({"t": "Str", "c": "Hello"}) == Str("Hello")

    def test_decode_nullary_element(self) -> None:
        """Test decoding elements without content."""
        assert dict_to_ast({"t": "HorizontalRule"}) == HorizontalRule()

    def test_decode_element_list(self) -> None:
        """Test decoding a list of elements."""
        nodes = dict_to_ast([{"t": "Str", "c": "a"}, {"t": "Space"}, {"t": "Str", "c": "b"}])

        assert nodes == [Str("a"), Space(), Str("b")]

    def test_decode_ordered_list_attributes(self) -> None:
        """Test decoding ordered list numbering."""
        node = dict_to_ast(
            {
                "t": "OrderedList",
                "c": [[3, {"t": "LowerRoman"}, {"t": "OneParen"}], [[{"t": "Plain", "c": []}]]],
            }
        )

        assert isinstance(node, OrderedList)
        assert node.list_attributes.start == 3
        assert node.list_attributes.style == "LowerRoman"
        assert node.list_attributes.delimiter == "OneParen"

    def test_decode_link(self) -> None:
        """Test decoding link target, title and text."""
        node = dict_to_ast({"t": "Link", "c": [["", ["ext"], []], [{"t": "Str", "c": "x"}], ["https://x.org", "X"]]})

        assert node == Link(url="https://x.org", content=[Str("x")], title="X", attr=Attr(classes=["ext"]))

    def test_decode_math(self) -> None:
        """Test decoding math type and text."""
        node = dict_to_ast({"t": "Math", "c": [{"t": "DisplayMath"}, "e=mc^2"]})

        assert node == Math(text="e=mc^2", math_type="DisplayMath")

    def test_decode_table(self) -> None:
        """Test decoding the 1.21+ table layout."""
        table = dict_to_ast(_table_dict())

        assert isinstance(table, Table)
        assert table.attr.identifier == "tbl"
        assert table.col_specs == [ColSpec(alignment="AlignLeft", width=None)]
        assert table.caption.short is None
        rows = list(table.iter_rows())
        assert rows[0].cells[0].content == [Plain(content=[Str("Head")])]
        assert rows[1].cells[0].content == [Plain(content=[Str("Body")])]

    def test_decode_figure(self) -> None:
        """Test decoding a figure with caption."""
        node = dict_to_ast(
            {
                "t": "Figure",
                "c": [["fig", [], []], [None, [{"t": "Plain", "c": [{"t": "Str", "c": "Cap"}]}]], [{"t": "Para", "c": []}]],
            }
        )

        assert isinstance(node, Figure)
        assert node.caption.long == [Plain(content=[Str("Cap")])]
        assert node.content == [Para()]

    def test_decode_nested_meta(self) -> None:
        """Test decoding nested metadata maps."""
        node = dict_to_ast({"t": "MetaMap", "c": {"name": {"t": "MetaString", "c": "Ada"}}})

        assert node == MetaMap(entries={"name": MetaString("Ada")})


@pytest.mark.unit
class TestMalformedInput:
    """Test rejection of input that is not a pandoc AST."""

    def test_unknown_tag(self) -> None:
        """Test that unknown constructors are rejected."""
        with pytest.raises(MalformedInputError, match="Unknown node type: Frobnicate"):
            dict_to_ast({"t": "Frobnicate", "c": []})

    def test_non_element_value(self) -> None:
        """Test that values without a tag are rejected."""
        with pytest.raises(MalformedInputError):
            dict_to_ast(42)

    def test_wrong_content_shape(self) -> None:
        """Test that contents with the wrong shape are rejected with the cause chained."""
        with pytest.raises(MalformedInputError) as exc_info:
            dict_to_ast({"t": "Header", "c": [1]})

        assert exc_info.value.parsing_stage == "ast"
        assert exc_info.value.original_error is not None

    def test_wrong_string_type(self) -> None:
        """Test that a Str with non-string contents is rejected."""
        with pytest.raises(MalformedInputError):
            dict_to_ast({"t": "Str", "c": 5})

    def test_nested_error_propagates(self) -> None:
        """Test that an error deep in the tree surfaces as MalformedInputError."""
        with pytest.raises(MalformedInputError, match="Unknown node type"):
            dict_to_ast({"t": "Para", "c": [{"t": "Emph", "c": [{"t": "Nope"}]}]})

    def test_invalid_json(self) -> None:
        """Test that invalid JSON text is rejected at the json stage."""
        with pytest.raises(MalformedInputError) as exc_info:
            json_to_ast("{not json")

        assert exc_info.value.parsing_stage == "json"
        assert isinstance(exc_info.value.original_error, json.JSONDecodeError)
        assert isinstance(exc_info.value, ParsingError)


@pytest.mark.unit
class TestSerialization:
    """Test encoding typed nodes back to pandoc JSON."""

    def test_nullary_elements_omit_content(self) -> None:
        """Test that nullary constructors are written without a "c" key."""
        assert ast_to_dict(Space()) == {"t": "Space"}

    def test_encode_header(self) -> None:
        """Test the header layout: level, attributes, content."""
        data = ast_to_dict(Header(level=2, content=[Str("Hi")], attr=Attr(identifier="hi", attributes=[("k", "v")])))

        assert data == {"t": "Header", "c": [2, ["hi", [], [["k", "v"]]], [{"t": "Str", "c": "Hi"}]]}

    def test_encode_document_layout(self) -> None:
        """Test the top-level document keys."""
        doc = Document(blocks=[Para(content=[Str("x")])], meta={"draft": MetaBool(True)})

        data = ast_to_dict(doc)

        assert data == {
            "pandoc-api-version": [1, 23, 1],
            "meta": {"draft": {"t": "MetaBool", "c": True}},
            "blocks": [{"t": "Para", "c": [{"t": "Str", "c": "x"}]}],
        }

    def test_sample_document_survives_unchanged(self, sample_document_dict) -> None:
        """Test that decoding then encoding reproduces pandoc's own output."""
        assert ast_to_dict(dict_to_ast(sample_document_dict)) == sample_document_dict

    def test_table_survives_unchanged(self) -> None:
        """Test that the table layout is reproduced exactly."""
        assert ast_to_dict(dict_to_ast(_table_dict())) == _table_dict()

    def test_json_is_single_line(self, sample_document) -> None:
        """Test that the JSON output is compact and on one line."""
        text = ast_to_json(sample_document)

        assert "\n" not in text
        assert ", " not in text

    def test_non_ascii_preserved_by_default(self) -> None:
        """Test that non-ASCII text is written as-is unless ensure_ascii is set."""
        node = Str("café")

        assert ast_to_json(node) == '{"t":"Str","c":"café"}'
        assert ast_to_json(node, WalkOptions(ensure_ascii=True)) == '{"t":"Str","c":"caf\\u00e9"}'

    def test_non_node_rejected(self) -> None:
        """Test that objects which are not nodes cannot be serialized."""
        with pytest.raises(ValueError, match="Unknown node type"):
            ast_to_dict([Str("a"), "b"])
