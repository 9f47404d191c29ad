#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the flatdown library.

This module defines the exception classes raised while tokenizing Markdown and
flattening the token tree. Errors that do not originate in flatdown itself
(for example a failure inside the tokenizer) are not wrapped and propagate to
the caller unchanged.

Exception Hierarchy
-------------------
- FlatdownError (base exception)

  - ValidationError (parameter/option validation)
    - ConfigurationError (invalid configuration files)

  - UnsupportedTokenError (token kinds the renderer does not handle)

  - InternalRenderError (unsupported construct surfaced to the user)

"""

from typing import Any

REPORT_MESSAGE = (
    "Internal error: Please report this issue to the flatdown maintainers with the following error messages."
)


class FlatdownError(Exception):
    """Base exception class for all flatdown-specific errors.

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


class ValidationError(FlatdownError):
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
    """Exception raised when a configuration file cannot be loaded or applied.

    Parameters
    ----------
    message : str
        Description of the configuration problem
    config_path : str, optional
        Path of the offending configuration file
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, config_path: str | None = None, original_error: Exception | None = None):
        """Initialize the configuration error."""
        super().__init__(message, parameter_name="config", parameter_value=config_path, original_error=original_error)
        self.config_path = config_path


class UnsupportedTokenError(FlatdownError):
    """Exception raised when the renderer meets a token kind it does not render.

    Raw HTML, link reference definitions and backslash escapes have no
    flattened representation. Rendering them would silently misplace every
    attribute that follows, so the whole render fails instead.

    Parameters
    ----------
    token_type : str
        Kind of the offending token (``"html"``, ``"def"`` or ``"escape"``)
    raw : str
        Source text of the offending token

    """

    def __init__(self, token_type: str, raw: str = ""):
        """Initialize the error with the token kind and its source text."""
        super().__init__(f"Not implemented yet: {token_type}")
        self.token_type = token_type
        self.raw = raw


class InternalRenderError(FlatdownError):
    """Exception raised by the public entry points for unsupported constructs.

    The message combines the original failure, a stable request to report the
    problem and the input that triggered it, so the report can be reproduced.

    Parameters
    ----------
    message : str
        Full diagnostic message
    source : str
        The Markdown input (or offending token source) that failed to render
    original_error : Exception, optional
        The :class:`UnsupportedTokenError` being wrapped

    """

    def __init__(self, message: str, source: str, original_error: Exception | None = None):
        """Initialize the error with the diagnostic and the failing input."""
        super().__init__(message, original_error=original_error)
        self.source = source

    @classmethod
    def from_unsupported(cls, error: UnsupportedTokenError, source: str) -> "InternalRenderError":
        """Wrap an :class:`UnsupportedTokenError` with the report message and input."""
        return cls(f"{error.message}\n{REPORT_MESSAGE}\n{source}", source=source, original_error=error)
