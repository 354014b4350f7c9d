"""
SuiupConfig — the persisted user configuration document.

Serialized to ``config.json`` (see ``suiup.core.paths``).  Missing keys
are filled from the per-field default functions on load; unknown keys
are rejected.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from suiup.core.paths import default_install_dir

MIB = 1024 * 1024
GIB = 1024 * MIB


def default_mirror_url() -> str:
    return "https://github.com"


def default_cache_days() -> int:
    return 30


def default_auto_cleanup() -> bool:
    return False


def default_max_cache_size() -> int:
    return GIB


def default_default_network() -> str:
    return "testnet"


def default_install_path() -> str:
    """Platform default install dir, recomputed from the environment on every call."""
    return str(default_install_dir())


def default_disable_update_warnings() -> bool:
    return False


def default_github_token() -> str | None:
    return None


class SuiupConfig(BaseModel):
    """User configuration.

    ``install_path`` starts unset (meaning: platform default).  Clearing it
    with ``config unset`` re-materializes ``default_install_path()``
    instead, see ``ConfigStore.unset``.
    """

    model_config = ConfigDict(extra="forbid", strict=True)

    mirror_url: str = Field(default_factory=default_mirror_url)
    cache_days: int = Field(default_factory=default_cache_days, ge=0)
    auto_cleanup: bool = Field(default_factory=default_auto_cleanup)
    max_cache_size: int = Field(default_factory=default_max_cache_size, ge=0)
    default_network: str = Field(default_factory=default_default_network)
    install_path: str | None = None
    disable_update_warnings: bool = Field(default_factory=default_disable_update_warnings)
    github_token: str | None = Field(default_factory=default_github_token)


# Value each key takes after ``config unset <key>``.
UNSET_DEFAULTS = {
    "mirror_url": default_mirror_url,
    "cache_days": default_cache_days,
    "auto_cleanup": default_auto_cleanup,
    "max_cache_size": default_max_cache_size,
    "default_network": default_default_network,
    "install_path": default_install_path,
    "disable_update_warnings": default_disable_update_warnings,
    "github_token": default_github_token,
}

CONFIG_KEYS: tuple[str, ...] = tuple(SuiupConfig.model_fields)
