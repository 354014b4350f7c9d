"""
L1 Domain — Input validation (pure).

Stateless predicates shared by the config store (write-time checks and
``config validate``) and the component spec parser.  Each returns None
on success and raises ``ValidationError`` with a message listing the
valid alternatives otherwise.

The only side effect is the probe file written by
``validate_path_writable``.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from urllib.parse import urlsplit

from suiup.core.errors import ValidationError
from suiup.core.models.component import BinaryName, Network
from suiup.core.models.config import GIB, MIB

logger = logging.getLogger(__name__)

# Tried in order; the first match wins.
_VERSION_PATTERNS = (
    re.compile(r"^(testnet|devnet|mainnet)-\d+\.\d+\.\d+(-[a-zA-Z0-9]+(\.\d+)?)?$"),  # network-version
    re.compile(r"^\d+\.\d+\.\d+(-[a-zA-Z0-9]+(\.\d+)?)?$"),  # semver
    re.compile(r"^(latest|nightly)$"),  # special
    re.compile(r"^[a-f0-9]{7,40}$"),  # git hash
)

_WRITE_PROBE = ".suiup_write_test"

MIN_CACHE_SIZE = 100 * MIB
MAX_CACHE_SIZE = 100 * GIB
MIN_CACHE_DAYS = 1
MAX_CACHE_DAYS = 365

GITHUB_TOKEN_PREFIXES = ("ghp_", "gho_", "ghu_", "ghs_", "ghr_")
GITHUB_TOKEN_MIN_LENGTH = 20


def validate_network(network: str) -> None:
    Network.try_from_str(network)


def validate_binary_name(binary: str) -> None:
    BinaryName.try_from_str(binary)


def validate_version_format(version: str) -> None:
    """Accept semver, ``<network>-<semver>``, ``latest``/``nightly`` or a git hash."""
    if not version:
        raise ValidationError("Version cannot be empty")

    for pattern in _VERSION_PATTERNS:
        if pattern.match(version):
            return

    raise ValidationError(
        f"Invalid version format: '{version}'. Expected formats:\n"
        "- Semantic version: 1.2.3, 1.2.3-alpha\n"
        "- Network version: testnet-1.2.3, devnet-1.2.3\n"
        "- Special: latest, nightly\n"
        "- Git hash: a1b2c3d"
    )


def validate_url(url: str) -> None:
    """Require an http(s) URL with a host."""
    try:
        parsed = urlsplit(url)
        host = parsed.hostname
    except ValueError:
        raise ValidationError(f"Invalid URL format: {url}") from None

    if not parsed.scheme:
        raise ValidationError(f"Invalid URL format: {url}")
    if parsed.scheme not in ("http", "https"):
        raise ValidationError("URL must use http or https scheme")
    if not host:
        raise ValidationError("URL must have a valid host")


def validate_path_exists(path: str) -> None:
    if not Path(path).exists():
        raise ValidationError(f"Path does not exist: {path}")


def validate_path_writable(path: str) -> None:
    """Check that ``path`` could be created: its parent exists and is writable.

    Writes and removes a zero-byte probe file in the parent directory.
    """
    target = Path(path)
    parent = target.parent
    if parent == target:
        raise ValidationError(f"Invalid path: {path}")

    if not parent.exists():
        raise ValidationError(f"Parent directory does not exist: {parent}")

    probe = parent / _WRITE_PROBE
    try:
        probe.write_bytes(b"")
    except OSError:
        raise ValidationError(f"Directory is not writable: {parent}") from None

    try:
        probe.unlink()
    except OSError as e:
        logger.debug("Could not remove write probe %s: %s", probe, e)


def validate_number_range(value: int, min_value: int, max_value: int, field_name: str) -> None:
    if value < min_value or value > max_value:
        raise ValidationError(
            f"{field_name} must be between {min_value} and {max_value} (got: {value})"
        )


def validate_cache_size(size_bytes: int) -> None:
    validate_number_range(size_bytes, MIN_CACHE_SIZE, MAX_CACHE_SIZE, "Cache size")


def validate_cache_days(days: int) -> None:
    validate_number_range(days, MIN_CACHE_DAYS, MAX_CACHE_DAYS, "Cache days")


def validate_github_token(token: str) -> None:
    """Known GitHub prefix AND at least 20 characters."""
    if token.startswith(GITHUB_TOKEN_PREFIXES) and len(token) >= GITHUB_TOKEN_MIN_LENGTH:
        return
    raise ValidationError(
        "Invalid GitHub token format. GitHub tokens should start with "
        "'ghp_', 'gho_', 'ghu_', 'ghs_', or 'ghr_' and be at least "
        f"{GITHUB_TOKEN_MIN_LENGTH} characters long."
    )
