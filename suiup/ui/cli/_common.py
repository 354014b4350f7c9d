"""Shared helpers for the CLI commands."""

from __future__ import annotations

import functools
import logging
import sys
from typing import Any, Callable

import click

from suiup.core.errors import SuiupError, user_friendly_error

logger = logging.getLogger(__name__)


def fail(err: BaseException) -> None:
    """Echo ``err`` to stderr as one user-facing line and exit 1."""
    click.echo(user_friendly_error(err), err=True)
    sys.exit(1)


def handle_errors(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Turn core errors raised by a command into exit code 1."""

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except SuiupError as e:
            logger.debug("%s failed", fn.__name__, exc_info=True)
            fail(e)

    return wrapper
