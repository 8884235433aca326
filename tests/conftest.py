#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Pytest configuration and shared fixtures for the panwalk test suite.

This module registers the test markers and provides sample pandoc JSON
documents, as produced by ``pandoc -t json``, for the unit tests.
"""

import json
import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Any

import pytest

from panwalk.ast.serialization import dict_to_ast


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


def _str(text: str) -> dict[str, Any]:
    return {"t": "Str", "c": text}


_SPACE = {"t": "Space"}


@pytest.fixture
def sample_document_dict() -> dict[str, Any]:
    """Return a small pandoc document covering metadata, headers, lists and inline markup.

    Equivalent to::

        ---
        title: Sample
        draft: true
        ---
        # Intro
        Hello *world* and x^2^.
        ## Details
        - one
        - two `code`

    """
    return {
        "pandoc-api-version": [1, 23, 1],
        "meta": {
            "title": {"t": "MetaInlines", "c": [_str("Sample")]},
            "draft": {"t": "MetaBool", "c": True},
        },
        "blocks": [
            {"t": "Header", "c": [1, ["intro", [], []], [_str("Intro")]]},
            {
                "t": "Para",
                "c": [
                    _str("Hello"),
                    _SPACE,
                    {"t": "Emph", "c": [_str("world")]},
                    _SPACE,
                    _str("and"),
                    _SPACE,
                    _str("x"),
                    {"t": "Superscript", "c": [_str("2")]},
                    _str("."),
                ],
            },
            {"t": "Header", "c": [2, ["details", [], []], [_str("Details")]]},
            {
                "t": "BulletList",
                "c": [
                    [{"t": "Plain", "c": [_str("one")]}],
                    [{"t": "Plain", "c": [_str("two"), _SPACE, {"t": "Code", "c": [["", [], []], "code"]}]}],
                ],
            },
        ],
    }


@pytest.fixture
def sample_document_json(sample_document_dict) -> str:
    """Return the sample document as pandoc JSON text."""
    return json.dumps(sample_document_dict)


@pytest.fixture
def sample_document(sample_document_dict):
    """Return the sample document decoded into typed nodes."""
    return dict_to_ast(sample_document_dict)


@pytest.fixture
def accented_document_bytes(sample_document_dict) -> bytes:
    """Return a one-paragraph document containing ``café`` as raw UTF-8 JSON."""
    data = {
        "pandoc-api-version": sample_document_dict["pandoc-api-version"],
        "meta": {},
        "blocks": [{"t": "Para", "c": [_str("café")]}],
    }
    return json.dumps(data, ensure_ascii=False).encode("utf-8")


@pytest.fixture
def run_python():
    """Return a runner for ``python <args>`` with panwalk importable and a chosen stdio encoding."""
    import panwalk

    package_root = str(Path(panwalk.__file__).resolve().parents[1])

    def run(args: list[str], stdin: bytes, io_encoding: str) -> subprocess.CompletedProcess:
        env = {key: value for key, value in os.environ.items() if not key.startswith("PANWALK_")}
        env["PYTHONIOENCODING"] = io_encoding
        env["PYTHONPATH"] = os.pathsep.join(filter(None, [package_root, env.get("PYTHONPATH")]))
        return subprocess.run(
            [sys.executable, *args], input=stdin, capture_output=True, env=env, timeout=60, check=False
        )

    return run


@pytest.fixture(autouse=True)
def _reset_root_logger():
    """Restore root logger handlers changed by ``configure_logging`` during a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
