"""
L1 Domain — Size helpers (pure).

Human-readable byte counts and MiB truncation used by the cache reports.
"""

from __future__ import annotations

from suiup.core.models.config import MIB

_UNITS = ("B", "KB", "MB", "GB", "TB", "PB", "EB")


def format_file_size(size: int) -> str:
    """Format a byte count with base-1024 units.

    Two decimals below 10, one below 100, none above::

        >>> format_file_size(1536)
        '1.50 KB'
        >>> format_file_size(250 * 1024 * 1024)
        '250 MB'
    """
    if size <= 0:
        return "0 B"

    exponent = 0
    while exponent < len(_UNITS) - 1 and size >= 1024 ** (exponent + 1):
        exponent += 1
    value = size / 1024**exponent
    unit = _UNITS[exponent]

    if value < 10:
        return f"{value:.2f} {unit}"
    if value < 100:
        return f"{value:.1f} {unit}"
    return f"{value:.0f} {unit}"


def to_mb(size_bytes: int) -> int:
    """Truncating conversion to whole MiB."""
    return size_bytes // MIB
