"""
Logging configuration, set up once by main.py.

Every module does ``logger = logging.getLogger(__name__)`` and inherits
this config.  User-facing output goes through click; logging is for
diagnostics on stderr.

Levels are resolved in precedence order:
    --debug  >  --verbose  >  --quiet  >  SUIUP_LOG_LEVEL  >  WARNING

Optional file output via SUIUP_LOG_FILE / SUIUP_LOG_FILE_LEVEL.
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LOG_LEVEL = "SUIUP_LOG_LEVEL"
ENV_LOG_FILE = "SUIUP_LOG_FILE"
ENV_LOG_FILE_LEVEL = "SUIUP_LOG_FILE_LEVEL"

_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d | %(message)s"

# (upper bound level, format, datefmt), first match wins
_CONSOLE_FORMATS = (
    (logging.DEBUG, _DETAILED, "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
)
_PLAIN_FORMAT = "%(message)s"

_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# urllib3 comes in with pip-installed environments, not with suiup itself
_NOISY_LOGGERS = ("urllib3", "charset_normalizer")


def resolve_level(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LOG_LEVEL, "WARNING")


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    for bound, fmt, datefmt in _CONSOLE_FORMATS:
        if level <= bound:
            handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
            break
    else:
        handler.setFormatter(logging.Formatter(_PLAIN_FORMAT))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_DETAILED, datefmt=_FILE_DATEFMT))
    return handler


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Replace the root logger's handlers with suiup's.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Also log to this file when set.
        log_file_level: Level for the file; defaults to ``level``.
        quiet_third_party: Hold urllib3 and friends at WARNING unless the
            console runs at DEBUG.
    """
    console_level = _parse_level(level)
    handlers = [_console_handler(console_level)]

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handlers.append(_file_handler(log_file, file_level))

    root = logging.getLogger()
    root.handlers[:] = handlers
    root.setLevel(min(h.level for h in handlers))

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def setup_from_flags(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> None:
    """``setup_logging`` driven by CLI flags and the SUIUP_LOG_* variables."""
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_LOG_FILE),
        log_file_level=os.environ.get(ENV_LOG_FILE_LEVEL),
        quiet_third_party=not debug,
    )


def _parse_level(level: str | None) -> int:
    """Level name to its numeric value; unknown names mean WARNING."""
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
