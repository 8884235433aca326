#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for panwalk.

This module centralizes the hardcoded values shared across the library:
pandoc JSON layout keys, supported API versions, filter construction
defaults and command-line exit codes.
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

QuoteType = Literal["SingleQuote", "DoubleQuote"]
MathType = Literal["DisplayMath", "InlineMath"]
CitationMode = Literal["AuthorInText", "SuppressAuthor", "NormalCitation"]
ListNumberStyle = Literal["DefaultStyle", "Example", "Decimal", "LowerRoman", "UpperRoman", "LowerAlpha", "UpperAlpha"]
ListNumberDelim = Literal["DefaultDelim", "Period", "OneParen", "TwoParens"]
Alignment = Literal["AlignLeft", "AlignRight", "AlignCenter", "AlignDefault"]

# =============================================================================
# Pandoc JSON Layout
# =============================================================================

# Keys of an encoded element: {"t": <constructor>, "c": <contents>}
PANDOC_TAG_KEY = "t"
PANDOC_CONTENT_KEY = "c"

# Keys of an encoded document
PANDOC_API_VERSION_KEY = "pandoc-api-version"
PANDOC_META_KEY = "meta"
PANDOC_BLOCKS_KEY = "blocks"

# API version written for documents built in Python (pandoc 3.x)
DEFAULT_PANDOC_API_VERSION: tuple[int, ...] = (1, 23, 1)

# PEP 440 specifier of the pandoc-api-version values the codec understands.
# 1.21 introduced the current table layout, 1.23 added Figure.
DEFAULT_SUPPORTED_API_VERSIONS = ">=1.21,<1.24"
DEFAULT_VALIDATE_API_VERSION = True
DEFAULT_ENSURE_ASCII = False

# =============================================================================
# Filter Construction
# =============================================================================

# Separator between alternative kind names in a named-action key ("Emph|Strong")
NAME_SEPARATOR = "|"

# Target format passed to actions when none is given
DEFAULT_FORMAT = ""

# =============================================================================
# Environment and Command Line
# =============================================================================

ENV_PREFIX = "PANWALK_"

# Used when neither --log-level nor PANWALK_LOG_LEVEL is set
DEFAULT_LOG_LEVEL = "WARNING"

EXIT_SUCCESS = 0
EXIT_TRANSFORM_ERROR = 1
EXIT_INPUT_ERROR = 2
EXIT_CONFIGURATION_ERROR = 3
