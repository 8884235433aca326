#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/panwalk/options.py
"""Options controlling how pandoc JSON is read, walked and written.

Options are frozen dataclasses: build one, then derive variants with
``create_updated``. Defaults can be supplied through ``PANWALK_*``
environment variables via ``WalkOptions.from_env``.

Examples
--------
    >>> options = WalkOptions(format="html")
    >>> strict = options.create_updated(supported_api_versions=">=1.23")

"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping, Optional

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from packaging.specifiers import InvalidSpecifier, SpecifierSet

from panwalk.constants import (
    DEFAULT_ENSURE_ASCII,
    DEFAULT_FORMAT,
    DEFAULT_SUPPORTED_API_VERSIONS,
    DEFAULT_VALIDATE_API_VERSION,
    ENV_PREFIX,
)
from panwalk.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("true", "1", "yes", "on")


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class WalkOptions(CloneFrozenMixin):
    """Options for reading, filtering and writing pandoc JSON documents.

    Parameters
    ----------
    format : str, default = ""
        Target output format handed to every action (pandoc passes it as
        the first argument to a filter program)
    validate_api_version : bool, default = True
        Whether to check a document's pandoc-api-version when decoding
    supported_api_versions : str, default = ">=1.21,<1.24"
        PEP 440 specifier set the pandoc-api-version must satisfy
    ensure_ascii : bool, default = False
        Whether to escape non-ASCII characters in JSON output

    Raises
    ------
    ConfigurationError
        If ``supported_api_versions`` is not a valid specifier set

    """

    format: str = field(
        default=DEFAULT_FORMAT,
        metadata={"help": "Target output format passed to filter actions", "importance": "core"},
    )
    validate_api_version: bool = field(
        default=DEFAULT_VALIDATE_API_VERSION,
        metadata={"help": "Reject documents with an unsupported pandoc-api-version", "importance": "advanced"},
    )
    supported_api_versions: str = field(
        default=DEFAULT_SUPPORTED_API_VERSIONS,
        metadata={"help": "PEP 440 specifier of accepted pandoc-api-version values", "importance": "advanced"},
    )
    ensure_ascii: bool = field(
        default=DEFAULT_ENSURE_ASCII,
        metadata={"help": "Escape non-ASCII characters in JSON output", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate the API version specifier.

        Raises
        ------
        ConfigurationError
            If the specifier cannot be parsed.

        """
        try:
            SpecifierSet(self.supported_api_versions)
        except InvalidSpecifier as e:
            raise ConfigurationError(
                f"Invalid supported_api_versions specifier: {self.supported_api_versions!r}",
                parameter_name="supported_api_versions",
                parameter_value=self.supported_api_versions,
                original_error=e,
            ) from e

    @property
    def api_version_specifier(self) -> SpecifierSet:
        """Return ``supported_api_versions`` as a parsed specifier set."""
        return SpecifierSet(self.supported_api_versions)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> WalkOptions:
        """Build options from ``PANWALK_*`` environment variables.

        Each field maps to ``PANWALK_<FIELD_NAME>``; boolean fields accept
        true/1/yes/on. Keyword overrides that are not None win over the
        environment.

        Parameters
        ----------
        environ : Mapping[str, str], optional
            Environment to read, defaults to ``os.environ``
        **overrides : Any
            Explicit field values (None values are ignored)

        Returns
        -------
        WalkOptions
            Options with environment defaults applied

        """
        if environ is None:
            environ = os.environ

        values: dict[str, Any] = {}
        for f in fields(cls):
            env_key = f"{ENV_PREFIX}{f.name.upper()}"
            env_value = environ.get(env_key)
            if env_value is None:
                continue
            if isinstance(f.default, bool):
                values[f.name] = env_value.strip().lower() in _TRUE_VALUES
            else:
                values[f.name] = env_value
            logger.debug("Using %s from environment", env_key)

        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


__all__ = ["CloneFrozenMixin", "WalkOptions"]
