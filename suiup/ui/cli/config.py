"""
CLI commands for the configuration store.

Thin wrappers over ``suiup.core.config.store.ConfigStore``.
"""

from __future__ import annotations

import json
import sys
from typing import TYPE_CHECKING

import click

from suiup.core.errors import print_success, print_warning, suggest_fix
from suiup.ui.cli._common import handle_errors

if TYPE_CHECKING:
    from suiup.core.config.store import ConfigStore


def _load() -> ConfigStore:
    from suiup.core.config.store import ConfigStore

    return ConfigStore.load()


@click.group()
def config() -> None:
    """Config — get, set, unset, list, reset, validate."""


# ── Read ────────────────────────────────────────────────────────


@config.command()
@click.argument("key")
@handle_errors
def get(key: str) -> None:
    """Show the value of KEY."""
    click.echo(_load().get(key))


@config.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@handle_errors
def list_config(as_json: bool) -> None:
    """List every configuration key."""
    values = _load().list()

    if as_json:
        click.echo(json.dumps(values, indent=2))
        return

    click.secho("⚙️  Configuration:", fg="cyan", bold=True)
    for key, value in values.items():
        click.echo(f"   {key:<24} {value}")


# ── Mutate ──────────────────────────────────────────────────────


@config.command("set")
@click.argument("key")
@click.argument("value")
@handle_errors
def set_value(key: str, value: str) -> None:
    """Set KEY to VALUE (use "default" to clear optional keys)."""
    from suiup.core.config.store import ConfigValue

    store = _load()
    store.set(key, ConfigValue.from_string(key, value))
    print_success(f"Set {key} = {store.get(key)}")


@config.command()
@click.argument("key")
@handle_errors
def unset(key: str) -> None:
    """Restore KEY to its default value."""
    store = _load()
    store.unset(key)
    print_success(f"Reset {key} to default: {store.get(key)}")


@config.command()
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt.")
@handle_errors
def reset(yes: bool) -> None:
    """Reset the whole configuration to defaults."""
    from suiup.core.config.store import ConfigStore

    # No load(): a malformed file must still be resettable.
    if ConfigStore().reset(confirmed=yes):
        print_success("Configuration reset to defaults")
    else:
        click.echo("Reset cancelled.")


@config.command()
@handle_errors
def validate() -> None:
    """Check every configuration value."""
    store = _load()
    errors = store.collect_errors()

    if not errors:
        print_success("Configuration is valid")
        return

    print_warning(f"Configuration validation failed with {len(errors)} error(s):")
    for err in errors:
        click.secho(f"   ❌ {err}", fg="red")
    suggest_fix("Fix the values above with 'suiup config set <key> <value>'")
    sys.exit(1)
