"""
Filesystem locations for config, cache, data and installed binaries.

Pure lookups: every call re-reads the environment, nothing is cached
and nothing is created here.  Tests relocate the whole tree by
pointing ``XDG_CONFIG_HOME`` / ``XDG_CACHE_HOME`` / ``XDG_DATA_HOME``
(Unix) or ``APPDATA`` / ``TEMP`` / ``LOCALAPPDATA`` (Windows) at a
temporary directory.

Layout (Unix defaults)::

    ~/.config/suiup/config.json
    ~/.cache/suiup/releases/               ← downloaded archives
    ~/.local/share/suiup/binaries/<net>/   ← unpacked binaries per network
    ~/.local/share/suiup/installed_binaries.json
    ~/.local/share/suiup/tool_status.json
    ~/.local/bin/                          ← default install dir
"""

from __future__ import annotations

import os
import platform
import tempfile
from pathlib import Path

APP_NAME = "suiup"

CONFIG_FILE = "config.json"
RELEASES_DIR = "releases"
BINARIES_DIR = "binaries"
INSTALLED_BINARIES_FILE = "installed_binaries.json"
TOOL_STATUS_FILE = "tool_status.json"


def _is_windows() -> bool:
    return platform.system() == "Windows"


def _env_dir(var: str, fallback: Path) -> Path:
    value = os.environ.get(var)
    return Path(value) if value else fallback


def config_dir() -> Path:
    if _is_windows():
        base = _env_dir("APPDATA", Path.home() / "AppData" / "Roaming")
    else:
        base = _env_dir("XDG_CONFIG_HOME", Path.home() / ".config")
    return base / APP_NAME


def config_file_path() -> Path:
    """Path to the persisted ``SuiupConfig`` JSON document."""
    return config_dir() / CONFIG_FILE


def cache_root() -> Path:
    """Root of the download cache.

    ``TEMP`` on Windows, ``XDG_CACHE_HOME`` (else ``~/.cache``) elsewhere.
    """
    if _is_windows():
        base = _env_dir("TEMP", Path(tempfile.gettempdir()))
    else:
        base = _env_dir("XDG_CACHE_HOME", Path.home() / ".cache")
    return base / APP_NAME


def release_archive_dir() -> Path:
    """Directory holding downloaded release archives (owned by the cache manager)."""
    return cache_root() / RELEASES_DIR


def data_dir() -> Path:
    if _is_windows():
        base = _env_dir("LOCALAPPDATA", Path.home() / "AppData" / "Local")
    else:
        base = _env_dir("XDG_DATA_HOME", Path.home() / ".local" / "share")
    return base / APP_NAME


def binaries_dir() -> Path:
    """Managed binary store, one sub-directory per network bucket."""
    return data_dir() / BINARIES_DIR


def installed_binaries_file() -> Path:
    return data_dir() / INSTALLED_BINARIES_FILE


def tool_status_file() -> Path:
    return data_dir() / TOOL_STATUS_FILE


def default_install_dir() -> Path:
    """Platform default directory that receives the active binaries."""
    if _is_windows():
        return _env_dir("LOCALAPPDATA", Path.home() / "AppData" / "Local") / "bin"
    return Path.home() / ".local" / "bin"
