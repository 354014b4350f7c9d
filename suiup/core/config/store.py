"""
Configuration store — load, mutate and persist ``SuiupConfig``.

The whole document is rewritten (atomically) on every mutation.  There
is no inter-process lock: the last writer wins, and callers must not
mutate the config from several processes at once.

Typical use::

    store = ConfigStore.load()
    store.set("cache_days", ConfigValue.from_string("cache_days", "7"))
    store.get("cache_days")          # "7"
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import click
import pydantic

from suiup.core.errors import ConfigError, FileSystemError, ValidationError, error_context
from suiup.core.models.config import CONFIG_KEYS, MIB, UNSET_DEFAULTS, SuiupConfig
from suiup.core.paths import config_file_path
from suiup.core.persistence.json_file import write_json_atomic
from suiup.core.services.install.domain import validation

logger = logging.getLogger(__name__)

ValueKind = Literal["string", "number", "boolean"]

_KEY_KINDS: dict[str, ValueKind] = {
    "mirror_url": "string",
    "default_network": "string",
    "install_path": "string",
    "github_token": "string",
    "cache_days": "number",
    "max_cache_size": "number",
    "auto_cleanup": "boolean",
    "disable_update_warnings": "boolean",
}

# Optional string keys: the literal "default" clears them.
_OPTIONAL_KEYS = frozenset({"install_path", "github_token"})
DEFAULT_SENTINEL = "default"

_NUMBER_RE = re.compile(r"\+?[0-9]+")


def _unknown_key(key: str) -> ConfigError:
    return ConfigError(f"Unknown configuration key: {key}")


@dataclass(frozen=True)
class ConfigValue:
    """A raw CLI value re-parsed into the kind its key expects."""

    kind: ValueKind
    value: str | int | bool

    @classmethod
    def from_string(cls, key: str, raw: str) -> ConfigValue:
        kind = _KEY_KINDS.get(key)
        if kind is None:
            raise _unknown_key(key)

        if kind == "number":
            if not _NUMBER_RE.fullmatch(raw):
                raise ValidationError(f"Invalid number value for {key}: {raw}")
            return cls("number", int(raw))

        if kind == "boolean":
            if raw not in ("true", "false"):
                raise ValidationError(
                    f"Invalid boolean value for {key}: {raw}. Use 'true' or 'false'"
                )
            return cls("boolean", raw == "true")

        return cls("string", raw)

    def __str__(self) -> str:
        if self.kind == "boolean":
            return "true" if self.value else "false"
        return str(self.value)


def _display(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def mask_token(token: str | None) -> str:
    """Show at most the first 8 characters of a token."""
    if token is None:
        return "not set"
    return f"{token[:8]}..." if len(token) > 8 else token


class ConfigStore:
    """Owner of the on-disk configuration document."""

    def __init__(self, config: SuiupConfig | None = None, path: Path | None = None) -> None:
        self.path = path or config_file_path()
        self._config = config or SuiupConfig()

    # ── Lifecycle ───────────────────────────────────────────────

    @classmethod
    def load(cls, path: Path | None = None) -> ConfigStore:
        """Read the config file, creating it with defaults when missing.

        Raises:
            ConfigError: unreadable file, invalid JSON, or a document that
                does not match the schema.  The file is left untouched.
        """
        path = path or config_file_path()

        if not path.exists():
            logger.info("No config at %s, writing defaults", path)
            store = cls(SuiupConfig(), path)
            with error_context(ConfigError, "Failed to create default configuration file"):
                store.save()
            return store

        with error_context(ConfigError, "Failed to read configuration file"):
            raw = path.read_text(encoding="utf-8")

        try:
            data = json.loads(raw)
            config = SuiupConfig.model_validate(data)
        except (json.JSONDecodeError, pydantic.ValidationError) as e:
            raise ConfigError(
                "Configuration file contains invalid JSON. "
                "Try 'suiup config reset' to restore defaults"
            ) from e

        logger.debug("Loaded config from %s", path)
        return cls(config, path)

    def save(self) -> None:
        with error_context(FileSystemError, "Failed to write configuration file"):
            write_json_atomic(self.path, self._config.model_dump(mode="json"))

    # ── Read ────────────────────────────────────────────────────

    def get_config(self) -> SuiupConfig:
        """Snapshot for other components (a copy, not the live document)."""
        return self._config.model_copy()

    def get(self, key: str) -> str:
        """Display value for ``key``."""
        if key not in _KEY_KINDS:
            raise _unknown_key(key)

        value = getattr(self._config, key)
        if key == "install_path":
            return value if value is not None else DEFAULT_SENTINEL
        if key == "github_token":
            return mask_token(value)
        return _display(value)

    def list(self) -> dict[str, str]:
        """All keys with list-view values (``max_cache_size`` in MB)."""
        values = {key: self.get(key) for key in CONFIG_KEYS}
        values["max_cache_size"] = f"{self._config.max_cache_size // MIB} MB"
        return values

    # ── Mutate ──────────────────────────────────────────────────

    def set(self, key: str, value: ConfigValue | str) -> None:
        """Validate and store a value, then persist the whole document."""
        if key not in _KEY_KINDS:
            raise _unknown_key(key)
        if isinstance(value, str):
            value = ConfigValue.from_string(key, value)

        expected = _KEY_KINDS[key]
        if value.kind != expected:
            raise ValidationError(
                f"Configuration key '{key}' expects a {expected} value, got {value.kind}"
            )

        self.validate_value(key, value)

        new_value = value.value
        if key in _OPTIONAL_KEYS and new_value == DEFAULT_SENTINEL:
            new_value = None
        elif key == "github_token" and new_value == "":
            new_value = None

        setattr(self._config, key, new_value)
        self.save()
        logger.info("Config %s updated", key)

    def unset(self, key: str) -> None:
        """Re-materialize the key's default (computed now, not cached)."""
        default_fn = UNSET_DEFAULTS.get(key)
        if default_fn is None:
            raise _unknown_key(key)
        setattr(self._config, key, default_fn())
        self.save()
        logger.info("Config %s reset to default", key)

    def reset(self, confirmed: bool = False) -> bool:
        """Rewrite the document with defaults.

        Without ``confirmed`` the user is prompted; any answer not starting
        with ``y``/``Y`` aborts.

        Returns:
            True if the config was reset, False if the user declined.
        """
        if not confirmed:
            answer = click.prompt(
                "Are you sure you want to reset configuration to defaults? [y/N]",
                default="",
                show_default=False,
                prompt_suffix=" ",
            )
            if not answer.strip().lower().startswith("y"):
                logger.info("Config reset declined")
                return False

        self._config = SuiupConfig()
        self.save()
        logger.info("Config reset to defaults")
        return True

    # ── Validation ──────────────────────────────────────────────

    def validate_value(self, key: str, value: ConfigValue) -> None:
        """Per-key write-time checks.  Raises ``ValidationError``."""
        v = value.value
        if key == "mirror_url":
            validation.validate_url(str(v))
        elif key == "cache_days":
            validation.validate_cache_days(int(v))
        elif key == "max_cache_size":
            validation.validate_cache_size(int(v))
        elif key == "default_network":
            validation.validate_network(str(v))
        elif key == "install_path":
            if v != DEFAULT_SENTINEL:
                validation.validate_path_writable(str(v))
        elif key == "github_token":
            if v and v != DEFAULT_SENTINEL:
                validation.validate_github_token(str(v))

    def collect_errors(self) -> list[str]:
        """Run every field validator against the current document."""
        cfg = self._config
        checks = [
            ("mirror_url", lambda: validation.validate_url(cfg.mirror_url)),
            ("cache_days", lambda: validation.validate_cache_days(cfg.cache_days)),
            ("max_cache_size", lambda: validation.validate_cache_size(cfg.max_cache_size)),
            ("default_network", lambda: validation.validate_network(cfg.default_network)),
        ]
        if cfg.install_path is not None:
            checks.append(
                ("install_path", lambda: validation.validate_path_writable(cfg.install_path))
            )
        if cfg.github_token:
            checks.append(
                ("github_token", lambda: validation.validate_github_token(cfg.github_token))
            )

        errors: list[str] = []
        for key, check in checks:
            try:
                check()
            except ValidationError as e:
                errors.append(f"{key}: {e.message}")
        return errors

    def validate(self) -> None:
        """Raise ``ConfigError`` if any field fails validation."""
        errors = self.collect_errors()
        if errors:
            raise ConfigError(
                f"Configuration validation failed with {len(errors)} error(s)"
            )
