#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/panwalk/logging_utils.py
"""Logging setup for the panwalk command.

Library modules only create ``logging.getLogger(__name__)`` loggers; this
module attaches handlers for the command line. Handlers always write to
stderr, since stdout carries the pandoc JSON document when panwalk runs as
a filter.

The level comes from the ``--log-level`` option, else from the
``PANWALK_LOG_LEVEL`` environment variable, else WARNING.

"""

from __future__ import annotations

import logging
import os
import sys
from typing import Mapping, Optional

from panwalk.constants import DEFAULT_LOG_LEVEL, ENV_PREFIX

LOG_LEVEL_ENV_VAR = f"{ENV_PREFIX}LOG_LEVEL"

_PLAIN_FORMAT = "%(levelname)s: %(message)s"
_TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
_TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marks handlers installed here so reconfiguring replaces only those
_HANDLER_MARKER = "_panwalk_handler"


def resolve_log_level(log_level: int | str | None = None, environ: Optional[Mapping[str, str]] = None) -> int:
    """Turn a level name, number or None into a numeric logging level.

    Parameters
    ----------
    log_level : int, str or None
        Numeric level or level name (case-insensitive). None means
        ``PANWALK_LOG_LEVEL`` from the environment, else WARNING.
    environ : Mapping[str, str], optional
        Environment to read, defaults to ``os.environ``

    Returns
    -------
    int
        The numeric level; unknown names resolve to INFO

    """
    if log_level is None:
        if environ is None:
            environ = os.environ
        log_level = environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL)
    if isinstance(log_level, int):
        return log_level

    level = logging.getLevelName(str(log_level).strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _make_handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    setattr(handler, _HANDLER_MARKER, True)
    return handler


def configure_logging(
    log_level: int | str | None = None,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
    environ: Optional[Mapping[str, str]] = None,
) -> logging.Logger:
    """Attach panwalk's stderr (and optional file) handlers to the root logger.

    Handlers installed by an earlier call are removed first; handlers
    installed by anything else are left alone.

    Parameters
    ----------
    log_level : int, str or None
        See ``resolve_log_level``
    log_file : str, optional
        Also append log output to this file
    trace_mode : bool, default False
        Include timestamps and logger names in each record
    environ : Mapping[str, str], optional
        Environment used to resolve a missing level

    Returns
    -------
    logging.Logger
        The root logger

    """
    level = resolve_log_level(log_level, environ)

    root_logger = logging.getLogger()
    for handler in [h for h in root_logger.handlers if getattr(h, _HANDLER_MARKER, False)]:
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(level)

    if trace_mode:
        formatter = logging.Formatter(_TRACE_FORMAT, datefmt=_TRACE_DATE_FORMAT)
    else:
        formatter = logging.Formatter(_PLAIN_FORMAT)

    root_logger.addHandler(_make_handler(logging.StreamHandler(sys.stderr), level, formatter))

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as e:
            root_logger.warning("Could not open log file %s: %s", log_file, e)
        else:
            root_logger.addHandler(_make_handler(file_handler, level, formatter))
            logging.getLogger(__name__).debug("Logging to file: %s", log_file)

    return root_logger


__all__ = ["LOG_LEVEL_ENV_VAR", "configure_logging", "resolve_log_level"]
