"""
Error handling for the restbind CLI.

Command failures are raised as ``CLIError`` subclasses carrying an error
code and an optional hint; ``handle_cli_exception`` turns them (and
generation errors) into a message on stderr and a non-zero exit status.
"""

import os
import sys
from typing import Any, Dict, Optional

RERAISE_ENV = "RESTBIND_CLI_RERAISE"


class CLIError(Exception):
    """
    Base exception for CLI operations.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code
        hint: Optional suggestion for resolving the error
        context: Additional metadata about the error
    """

    def __init__(
        self,
        message: str,
        *,
        code: str,
        hint: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.hint = hint
        self.context = context or {}

    def __str__(self) -> str:
        return self.message


class CLIFileNotFoundError(CLIError):
    """Descriptor set or config file does not exist."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("code", "CLI_FILE_NOT_FOUND")
        super().__init__(message, **kwargs)


class CLIInputError(CLIError):
    """Input that cannot be decoded, or a requested file missing from it."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("code", "CLI_INPUT_ERROR")
        super().__init__(message, **kwargs)


class CLIOutputError(CLIError):
    """Generated modules could not be written."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("code", "CLI_OUTPUT_ERROR")
        super().__init__(message, **kwargs)


def format_cli_error(exc: BaseException) -> str:
    """
    Format an exception for CLI display.

    Generation errors know how to format themselves; ``CLIError`` gets its
    code and hint; anything else is shown with its type name.
    """
    formatter = getattr(exc, "format", None)
    if callable(formatter):
        return f"Error: {formatter()}"
    if isinstance(exc, CLIError):
        lines = [f"Error [{exc.code}]: {exc.message}"]
        if exc.hint:
            lines.append(f"Hint: {exc.hint}")
        return "\n".join(lines)
    return f"Error: {exc.__class__.__name__}: {exc}"


def _env_flag(name: str) -> bool:
    val = os.getenv(name)
    if val is None:
        return False
    return val.strip().lower() in {"1", "true", "yes", "on"}


def cli_reraise_enabled() -> bool:
    """Whether exceptions should propagate instead of exiting (RESTBIND_CLI_RERAISE)."""
    return _env_flag(RERAISE_ENV)


def handle_cli_exception(exc: BaseException, *, exit_code: int = 1) -> None:
    """
    Print ``exc`` to stderr and exit with ``exit_code``.

    Note:
        This function calls sys.exit() and does not return, unless
        re-raising is enabled.
    """
    if cli_reraise_enabled():
        raise exc
    print(format_cli_error(exc), file=sys.stderr)
    sys.exit(exit_code)


__all__ = [
    "CLIError",
    "CLIFileNotFoundError",
    "CLIInputError",
    "CLIOutputError",
    "format_cli_error",
    "cli_reraise_enabled",
    "handle_cli_exception",
]
