#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the read, walk and write entry points."""
import io
import json
import sys

import pytest

from panwalk.api import ensure_utf8_output, pandoc_filter, pandoc_walk, read_ast, write_ast
from panwalk.ast import Document, Emph, Para, Str
from panwalk.exceptions import ApiVersionError, ConfigurationError, MalformedInputError
from panwalk.options import WalkOptions


def _flatten(node):
    if node.level >= 2:
        return Para(content=[Emph(content=node.content)])


@pytest.mark.unit
class TestReadWrite:
    """Test reading and writing pandoc JSON streams."""

    def test_read_text_stream(self, sample_document_json) -> None:
        """Test reading a document from a text stream."""
        doc = read_ast(io.StringIO(sample_document_json))

        assert isinstance(doc, Document)
        assert len(doc.blocks) == 4

    def test_read_binary_stream(self, sample_document_json) -> None:
        """Test reading UTF-8 bytes."""
        doc = read_ast(io.BytesIO(sample_document_json.encode("utf-8")))

        assert isinstance(doc, Document)

    def test_read_defaults_to_stdin(self, monkeypatch, sample_document_json) -> None:
        """Test that stdin is read when no stream is given."""
        monkeypatch.setattr(sys, "stdin", io.StringIO(sample_document_json))

        assert isinstance(read_ast(), Document)

    def test_read_stdin_bytes_ignore_locale(self, monkeypatch, accented_document_bytes) -> None:
        """Test that stdin bytes are decoded as UTF-8 even when stdin text uses latin-1."""
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(accented_document_bytes), encoding="latin-1"))

        doc = read_ast()

        assert doc.blocks[0].content[0].text == "café"

    def test_read_malformed(self) -> None:
        """Test that invalid JSON raises MalformedInputError."""
        with pytest.raises(MalformedInputError):
            read_ast(io.StringIO("[1, 2"))

    def test_write_single_line(self) -> None:
        """Test that output is one line of JSON followed by a newline."""
        out = io.StringIO()

        write_ast(Document(blocks=[Para(content=[Str("é")])]), out)

        text = out.getvalue()
        assert text.endswith("\n")
        assert text.count("\n") == 1
        assert "é" in text
        assert json.loads(text)["blocks"] == [{"t": "Para", "c": [{"t": "Str", "c": "é"}]}]

    def test_write_binary_stream(self) -> None:
        """Test that binary streams receive UTF-8 bytes."""
        out = io.BytesIO()

        write_ast(Str("é"), out)

        assert out.getvalue() == '{"t":"Str","c":"é"}\n'.encode("utf-8")


@pytest.mark.unit
class TestPandocWalk:
    """Test read-and-walk."""

    def test_walk_with_pairs(self, sample_document_json) -> None:
        """Test applying key/action pairs to a document read from a stream."""
        doc = pandoc_walk("Header", _flatten, stdin=io.StringIO(sample_document_json), format="html")

        assert doc.blocks[2] == Para(content=[Emph(content=[Str("Details")])])

    def test_walk_with_mapping(self, sample_document_json) -> None:
        """Test applying a mapping of named actions."""
        doc = pandoc_walk(
            {"Superscript|Subscript": lambda node: []}, stdin=io.StringIO(sample_document_json), format=""
        )

        assert all(node.name != "Superscript" for node in doc.blocks[1].content)

    def test_format_passed_to_actions(self, sample_document_json) -> None:
        """Test that the explicit format reaches plain actions."""
        formats = set()

        pandoc_walk(
            lambda node, format, meta: formats.add(format), stdin=io.StringIO(sample_document_json), format="latex"
        )

        assert formats == {"latex"}

    def test_format_from_argv(self, monkeypatch, sample_document_json) -> None:
        """Test that the first command-line argument is the default format, as pandoc passes it."""
        monkeypatch.setattr(sys, "argv", ["filter.py", "docx"])
        formats = set()

        pandoc_walk(lambda node, format, meta: formats.add(format), stdin=io.StringIO(sample_document_json))

        assert formats == {"docx"}

    def test_format_from_options(self, monkeypatch, sample_document_json) -> None:
        """Test that options supply the format when there is no argument."""
        monkeypatch.setattr(sys, "argv", ["filter.py"])
        formats = set()

        pandoc_walk(
            lambda node, format, meta: formats.add(format),
            stdin=io.StringIO(sample_document_json),
            options=WalkOptions(format="rst"),
        )

        assert formats == {"rst"}

    def test_metadata_passed_to_actions(self, sample_document_json) -> None:
        """Test that plain actions receive the document metadata."""
        keys = []

        pandoc_walk(
            lambda node, format, meta: keys.append(sorted(meta)), stdin=io.StringIO(sample_document_json), format=""
        )

        assert keys[0] == ["draft", "title"]

    def test_bad_filter_fails_before_reading(self) -> None:
        """Test that a configuration error is raised without consuming input."""
        stdin = io.StringIO("{}")

        with pytest.raises(ConfigurationError):
            pandoc_walk(42, stdin=stdin, format="")

        assert stdin.tell() == 0

    def test_malformed_input_propagates(self) -> None:
        """Test that malformed input errors reach the caller unchanged."""
        with pytest.raises(MalformedInputError):
            pandoc_walk(lambda node, format, meta: None, stdin=io.StringIO("not json"), format="")

    def test_unsupported_version_propagates(self) -> None:
        """Test that an unsupported pandoc-api-version is reported."""
        stdin = io.StringIO(json.dumps({"pandoc-api-version": [1, 16], "meta": {}, "blocks": []}))

        with pytest.raises(ApiVersionError):
            pandoc_walk(lambda node, format, meta: None, stdin=stdin, format="", options=WalkOptions())


@pytest.mark.unit
class TestPandocFilter:
    """Test read-walk-and-print."""

    def test_filter_writes_result(self, sample_document_json) -> None:
        """Test that the filtered document is written as one JSON line."""
        out = io.StringIO()

        pandoc_filter("Header", _flatten, stdin=io.StringIO(sample_document_json), stdout=out, format="html")

        data = json.loads(out.getvalue())
        assert [b["t"] for b in data["blocks"]] == ["Header", "Para", "Para", "BulletList"]
        assert data["pandoc-api-version"] == [1, 23, 1]
        assert data["meta"]["draft"] == {"t": "MetaBool", "c": True}

    def test_noop_filter_reproduces_input(self, sample_document_dict, sample_document_json) -> None:
        """Test that a filter which changes nothing writes the same document back."""
        out = io.StringIO()

        pandoc_filter(
            lambda node, format, meta: None, stdin=io.StringIO(sample_document_json), stdout=out, format=""
        )

        assert json.loads(out.getvalue()) == sample_document_dict

    def test_filter_to_stdout(self, monkeypatch, capsys, sample_document_json) -> None:
        """Test that stdout is used when no output stream is given."""
        monkeypatch.setattr(sys, "stdin", io.StringIO(sample_document_json))

        pandoc_filter({"Str": lambda node: Str(node.text.upper())}, format="")

        data = json.loads(capsys.readouterr().out)
        assert data["blocks"][0]["c"][2] == [{"t": "Str", "c": "INTRO"}]

    def test_stdout_switched_to_utf8(self, monkeypatch) -> None:
        """Test that an ASCII stdout is switched to UTF-8 before writing."""
        raw = io.BytesIO()
        stdout = io.TextIOWrapper(raw, encoding="ascii")
        monkeypatch.setattr(sys, "stdout", stdout)

        write_ast(Str("café"))

        assert stdout.encoding == "utf-8"
        assert raw.getvalue() == '{"t":"Str","c":"café"}\n'.encode("utf-8")

    def test_explicit_stdout_switched_to_utf8(self, monkeypatch) -> None:
        """Test that passing sys.stdout explicitly is handled like the default."""
        raw = io.BytesIO()
        monkeypatch.setattr(sys, "stdout", io.TextIOWrapper(raw, encoding="ascii"))

        write_ast(Str("café"), sys.stdout)

        assert raw.getvalue() == '{"t":"Str","c":"café"}\n'.encode("utf-8")


@pytest.mark.unit
class TestEnsureUtf8Output:
    """Test switching text streams to UTF-8."""

    def test_reconfigures_other_encoding(self) -> None:
        """Test that a latin-1 text stream is switched to UTF-8."""
        stream = io.TextIOWrapper(io.BytesIO(), encoding="latin-1")

        assert ensure_utf8_output(stream) is stream
        assert stream.encoding == "utf-8"

    def test_leaves_other_streams_alone(self) -> None:
        """Test that streams without an encoding to change are returned unchanged."""
        stream = io.StringIO()

        assert ensure_utf8_output(stream) is stream


@pytest.mark.unit
class TestFilterProcessEncoding:
    """Test a filter script run under a non-UTF-8 stdio encoding."""

    SCRIPT = "from panwalk import pandoc_filter; pandoc_filter(lambda node, format, meta: None, format='')"

    @pytest.mark.parametrize("io_encoding", ["latin-1", "ascii"])
    def test_accented_text_round_trips(self, run_python, accented_document_bytes, io_encoding) -> None:
        """Test that UTF-8 input comes back as the same UTF-8, not double-encoded."""
        result = run_python(["-c", self.SCRIPT], accented_document_bytes, io_encoding)

        assert result.returncode == 0, result.stderr.decode("utf-8", "replace")
        assert b"caf\xc3\xa9" in result.stdout
        assert b"\xc3\x83" not in result.stdout
        assert json.loads(result.stdout.decode("utf-8")) == json.loads(accented_document_bytes.decode("utf-8"))
