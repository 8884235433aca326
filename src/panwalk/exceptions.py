#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the panwalk library.

This module defines specialized exception classes for the error conditions
that can occur while decoding pandoc JSON, building filters and walking
document trees.

Exception Hierarchy
-------------------
- PanwalkError (base exception)

  - ValidationError (parameter/option validation)
    - ConfigurationError (invalid filter construction or options)

  - ParsingError (input decoding failures)
    - MalformedInputError (invalid JSON or invalid pandoc AST)
      - ApiVersionError (unsupported pandoc-api-version)

  - TransformError (invalid action results during tree walking)

Exceptions raised by user-supplied actions are never wrapped in any of the
above; they propagate to the caller unchanged.

"""

from typing import Any


class PanwalkError(Exception):
    """Base exception class for all panwalk-specific errors.

    Catching this will catch all library-specific errors, but not errors
    raised by user-supplied filter actions.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(PanwalkError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    Attributes
    ----------
    parameter_name : str or None
        The name of the problematic parameter
    parameter_value : any
        The value that caused the error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class ConfigurationError(ValidationError):
    """Exception raised when a filter or options object is misconfigured.

    Raised at construction time, before any tree is touched: a filter built
    from a non-callable action, an empty kind-name key, or an options object
    holding an unparseable value.

    Parameters
    ----------
    message : str
        Description of the configuration problem
    parameter_name : str, optional
        Name of the offending parameter
    parameter_value : any, optional
        The offending value (e.g. the non-callable action)
    original_error : Exception, optional
        The original exception that caused this error

    """


class ParsingError(PanwalkError):
    """Exception raised when decoding input fails.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        The stage of decoding where the error occurred ("json", "ast")
    original_error : Exception, optional
        The underlying exception that caused the parsing failure

    Attributes
    ----------
    parsing_stage : str or None
        Where in the decoding process the error occurred

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error."""
        super().__init__(message, original_error)
        self.parsing_stage = parsing_stage


class MalformedInputError(ParsingError):
    """Exception raised when input is not valid JSON or not a valid pandoc AST.

    Parameters
    ----------
    message : str
        Description of what is malformed
    parsing_stage : str, optional
        "json" for JSON syntax errors, "ast" for structural errors
    original_error : Exception, optional
        The underlying decoder exception

    """


class ApiVersionError(MalformedInputError):
    """Exception raised when a document's pandoc-api-version is not supported.

    Parameters
    ----------
    version : str
        The version found in the document
    supported : str
        The specifier set the version was checked against
    message : str, optional
        Custom error message. If not provided, generates a default message

    """

    def __init__(self, version: str, supported: str, message: str | None = None):
        """Initialize the API version error."""
        if message is None:
            message = f"Pandoc API version {version} does not match supported versions {supported}"
        super().__init__(message, parsing_stage="ast")
        self.version = version
        self.supported = supported


class TransformError(PanwalkError):
    """Exception raised when tree walking cannot apply an action's result.

    Actions must return None, a node, or a list of nodes. Any other value
    stops the walk with this error.

    Parameters
    ----------
    message : str
        Description of the transform failure
    node_name : str, optional
        Kind name of the node whose action returned the bad result
    original_error : Exception, optional
        The underlying exception, if any

    Attributes
    ----------
    node_name : str or None
        Kind name of the node being processed

    """

    def __init__(self, message: str, node_name: str | None = None, original_error: Exception | None = None):
        """Initialize the transform error."""
        super().__init__(message, original_error)
        self.node_name = node_name


__all__ = [
    "PanwalkError",
    "ValidationError",
    "ConfigurationError",
    "ParsingError",
    "MalformedInputError",
    "ApiVersionError",
    "TransformError",
]
