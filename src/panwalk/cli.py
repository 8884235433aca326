#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Command-line interface for panwalk.

Reads a pandoc JSON document, optionally runs filters over it, and writes
the result as JSON, as plain text, or as an outline of its node kinds.

Environment Variable Support
----------------------------
Options default to ``PANWALK_<OPTION_NAME>`` environment variables
(``PANWALK_FORMAT``, ``PANWALK_LOG_LEVEL``, ...). Command-line
arguments always override environment variables.

Examples
--------
Show the structure of a document::

    $ pandoc -t json README.md | panwalk --outline --rich

Run a filter defined in a module and pipe the result back into pandoc::

    $ pandoc -t json in.md | panwalk -f myfilters:flatten -F html | pandoc -f json -o out.html

Run a filter defined in a script file::

    $ panwalk doc.json -f ./filters.py:drop_notes -o filtered.json

Extract plain text::

    $ pandoc -t json in.md | panwalk --text

"""

from __future__ import annotations

import argparse
import importlib
import importlib.util
import logging
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import IO, Any, Optional, Sequence

from rich.console import Console
from rich.text import Text
from rich.tree import Tree as RichTree

from panwalk.api import ensure_utf8_output, read_ast, write_ast
from panwalk.ast.nodes import (
    Code,
    CodeBlock,
    Header,
    Image,
    Link,
    Math,
    MetaBool,
    MetaString,
    Node,
    RawBlock,
    RawInline,
    Str,
    Tree,
)
from panwalk.ast.utils import stringify
from panwalk.ast.walker import iter_nodes_with_depth
from panwalk.constants import (
    EXIT_CONFIGURATION_ERROR,
    EXIT_INPUT_ERROR,
    EXIT_SUCCESS,
    EXIT_TRANSFORM_ERROR,
)
from panwalk.exceptions import ConfigurationError, ParsingError, TransformError
from panwalk.filter import Filter
from panwalk.logging_utils import configure_logging
from panwalk.options import WalkOptions

logger = logging.getLogger(__name__)

_OUTLINE_TEXT_LIMIT = 40


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``panwalk`` command."""
    parser = argparse.ArgumentParser(
        prog="panwalk",
        description="Walk, filter and inspect pandoc JSON documents.",
        epilog="Options default to PANWALK_<OPTION> environment variables.",
    )
    parser.add_argument("input", nargs="?", default="-", help="Pandoc JSON file to read ('-' for stdin, the default)")
    parser.add_argument("-o", "--out", help="Write output to this file instead of stdout")
    parser.add_argument(
        "-F",
        "--format",
        default=None,
        help="Target format passed to filter actions (default: $PANWALK_FORMAT or empty)",
    )
    parser.add_argument(
        "-f",
        "--filter",
        dest="filters",
        action="append",
        default=[],
        metavar="MODULE:ATTR",
        help="Filter to apply, as module:attribute or path/to/file.py:attribute; may be repeated",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--text", action="store_true", help="Print the plain text of the document instead of JSON")
    mode.add_argument("--outline", action="store_true", help="Print an outline of node kinds instead of JSON")

    parser.add_argument("--rich", action="store_true", help="Render the outline with rich formatting")
    parser.add_argument(
        "--no-validate-api-version",
        action="store_true",
        help="Accept documents whatever their pandoc-api-version",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: $PANWALK_LOG_LEVEL or WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log output to this file")
    parser.add_argument("--trace", action="store_true", help="Log with timestamps and logger names")
    return parser


def _import_target(module_ref: str) -> Any:
    if module_ref.endswith(".py") or Path(module_ref).is_file():
        path = Path(module_ref)
        spec = importlib.util.spec_from_file_location(path.stem, path)
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot load filter file {module_ref}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module
    return importlib.import_module(module_ref)


def load_filter(reference: str) -> Filter:
    """Load a filter from a ``module:attribute`` reference.

    The module part is a dotted module name or a path to a ``.py`` file.
    The attribute may be a Filter, a plain action, a mapping of named
    actions, or a list/tuple accepted by ``Filter.from_args``.

    Parameters
    ----------
    reference : str
        Reference such as ``"myfilters:flatten"`` or ``"./f.py:FILTER"``

    Returns
    -------
    Filter
        The loaded filter

    Raises
    ------
    ConfigurationError
        If the reference is malformed, cannot be imported, or does not name
        something a filter can be built from

    """
    module_ref, sep, attr_path = reference.rpartition(":")
    if not sep or not module_ref or not attr_path:
        raise ConfigurationError(
            f"Filter reference must look like module:attribute, got {reference!r}",
            parameter_name="filter",
            parameter_value=reference,
        )

    try:
        target: Any = _import_target(module_ref)
        for part in attr_path.split("."):
            target = getattr(target, part)
    except (ImportError, AttributeError, OSError) as e:
        raise ConfigurationError(
            f"Cannot load filter {reference!r}: {e}", parameter_name="filter", parameter_value=reference, original_error=e
        ) from e

    if isinstance(target, Filter):
        return target
    if isinstance(target, Mapping):
        return Filter.from_named_actions(target)
    if isinstance(target, (list, tuple)):
        return Filter.from_args(*target)
    if callable(target):
        return Filter.from_actions([target])
    raise ConfigurationError(
        f"Filter {reference!r} is a {type(target).__name__}, not a Filter, action, mapping or list",
        parameter_name="filter",
        parameter_value=target,
    )


def _shorten(text: str) -> str:
    if len(text) > _OUTLINE_TEXT_LIMIT:
        text = text[: _OUTLINE_TEXT_LIMIT - 3] + "..."
    return repr(text)


def describe_node(node: Node) -> str:
    """Return a one-line outline label for a node: its kind plus a short detail."""
    if isinstance(node, (Str, MetaString, Code, CodeBlock, Math)):
        return f"{node.name} {_shorten(node.text)}"
    if isinstance(node, (RawInline, RawBlock)):
        return f"{node.name} ({node.format}) {_shorten(node.text)}"
    if isinstance(node, Header):
        return f"{node.name} level={node.level}"
    if isinstance(node, (Link, Image)):
        return f"{node.name} {node.url}"
    if isinstance(node, MetaBool):
        return f"{node.name} {node.value}"
    return node.name


def _root_label(tree: Tree) -> str:
    return tree.name if isinstance(tree, Node) else "[list]"


def render_outline(tree: Tree, stream: IO[str]) -> None:
    """Write an indented outline of a tree's nodes, two spaces per level."""
    stream.write(_root_label(tree) + "\n")
    for node, depth in iter_nodes_with_depth(tree):
        stream.write("  " * depth + describe_node(node) + "\n")


def render_outline_rich(tree: Tree, console: Console) -> None:
    """Print the outline of a tree as a rich tree."""
    root = RichTree(Text(_root_label(tree), style="bold"))
    branches = [root]
    for node, depth in iter_nodes_with_depth(tree):
        branch = branches[depth - 1].add(Text(describe_node(node)))
        del branches[depth:]
        branches.append(branch)
    console.print(root)


def _write_output(args: argparse.Namespace, tree: Tree, options: WalkOptions, stream: IO[str]) -> None:
    if args.text:
        stream.write(stringify(tree) + "\n")
    elif args.outline and args.rich:
        render_outline_rich(tree, Console(file=stream))
    elif args.outline:
        render_outline(tree, stream)
    else:
        write_ast(tree, stream, options)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the ``panwalk`` command.

    Parameters
    ----------
    argv : sequence of str, optional
        Arguments without the program name, defaults to ``sys.argv[1:]``

    Returns
    -------
    int
        Exit code: 0 on success, 1 on an invalid filter result, 2 on bad
        input, 3 on bad configuration

    """
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level, log_file=args.log_file, trace_mode=args.trace)

    try:
        options = WalkOptions.from_env(
            format=args.format,
            validate_api_version=False if args.no_validate_api_version else None,
        )
        filters = [load_filter(reference) for reference in args.filters]
    except ConfigurationError as e:
        logger.error(e.message)
        return EXIT_CONFIGURATION_ERROR

    try:
        if args.input == "-":
            tree = read_ast(None, options)
        else:
            with open(args.input, "rb") as f:
                tree = read_ast(f, options)
    except OSError as e:
        logger.error(f"Cannot read {args.input}: {e}")
        return EXIT_INPUT_ERROR
    except ParsingError as e:
        logger.error(e.message)
        return EXIT_INPUT_ERROR

    try:
        for index, walk_filter in enumerate(filters, start=1):
            logger.info(f"Applying filter {index}/{len(filters)}: {args.filters[index - 1]}")
            walk_filter.apply(tree, options.format)
    except TransformError as e:
        logger.error(e.message)
        return EXIT_TRANSFORM_ERROR

    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            _write_output(args, tree, options, f)
    else:
        _write_output(args, tree, options, ensure_utf8_output(sys.stdout))

    return EXIT_SUCCESS


__all__ = ["create_parser", "describe_node", "load_filter", "main", "render_outline", "render_outline_rich"]
