"""
Error taxonomy and user-facing rendering.

Six closed error kinds, all subclasses of ``SuiupError``.  Core code
raises them; the CLI layer renders them with ``user_friendly_error``
and exits 1.

    with error_context(ConfigError, "Failed to read configuration file"):
        raw = path.read_text(encoding="utf-8")
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Iterator

import click
import pydantic


class SuiupError(Exception):
    """Base class for every error the core surfaces to users."""

    label = "Error:"
    color = "red"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__

    def render(self, *, color: bool = True) -> str:
        """Label + message, optionally ANSI-styled."""
        label = click.style(self.label, fg=self.color, bold=True) if color else self.label
        return f"{label} {self.message}"


class ConfigError(SuiupError):
    """Raised when the configuration file is missing, unreadable or invalid."""

    label = "Configuration Error:"


class InstallationError(SuiupError):
    """Raised when an install step cannot complete."""

    label = "Installation Error:"


class ValidationError(SuiupError):
    """Raised when user input fails a validator."""

    label = "Validation Error:"
    color = "yellow"


class NetworkError(SuiupError):
    """Raised when a release or asset cannot be fetched."""

    label = "Network Error:"


class FileSystemError(SuiupError):
    """Raised when the cache or install directories cannot be read or written."""

    label = "File System Error:"


class VersionError(SuiupError):
    """Raised when a requested version does not exist or cannot be parsed."""

    label = "Version Error:"
    color = "yellow"


# Exceptions that error_context() converts into a SuiupError kind.
_WRAPPED = (OSError, ValueError, json.JSONDecodeError, pydantic.ValidationError)


@contextmanager
def error_context(kind: type[SuiupError], context: str) -> Iterator[None]:
    """Convert low-level failures raised inside the block into ``kind``.

    The original exception is chained as ``__cause__`` so ``--debug``
    tracebacks keep the detail; the message users see is ``context``.
    ``SuiupError`` raised inside the block passes through untouched.
    """
    try:
        yield
    except SuiupError:
        raise
    except _WRAPPED as exc:
        raise kind(context) from exc


def user_friendly_error(err: BaseException, *, color: bool = True) -> str:
    """Render any exception as a single user-facing line."""
    if isinstance(err, SuiupError):
        return err.render(color=color)
    label = click.style("Error:", fg="red", bold=True) if color else "Error:"
    return f"{label} {err}"


# ── Presentation helpers ────────────────────────────────────────


def print_success(message: str) -> None:
    click.echo(f"{click.style('✓', fg='green', bold=True)} {message}")


def print_warning(message: str) -> None:
    click.echo(f"{click.style('⚠', fg='yellow', bold=True)} {message}")


def print_info(message: str) -> None:
    click.echo(f"{click.style('ℹ', fg='blue', bold=True)} {message}")


def suggest_fix(suggestion: str) -> None:
    """Print a follow-up hint after a failed command."""
    click.echo()
    click.echo(f"{click.style('💡 Suggestion:', fg='cyan', bold=True)} {suggestion}")
    click.echo(f"{click.style('Try:', fg='green')} suiup config --help")
