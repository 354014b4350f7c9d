"""
CLI command for installing components.

Parses the descriptor, then hands off to the install dispatcher.
"""

from __future__ import annotations

import json
import os

import click

from suiup.core.models.component import BinaryName
from suiup.ui.cli._common import handle_errors


@click.command()
@click.argument("component")
@click.option("--nightly", is_flag=False, flag_value="main", default=None, metavar="[BRANCH]",
              help="Build from a source branch (default branch: main).")
@click.option("--debug", "debug_build", is_flag=True, help="Install a debug build.")
@click.option("--yes", "-y", is_flag=True, help="Overwrite existing binaries without asking.")
@click.option("--path", default=None, type=click.Path(file_okay=False),
              help="Install directory (default: config install_path).")
@click.option("--enable", is_flag=True, help="Mark the tool as enabled after install.")
@click.option("--disable", is_flag=True, help="Mark the tool as disabled after install.")
@click.option("--auto-detect", is_flag=True, help="Reuse the version of an existing install.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Also print the result as JSON.")
@handle_errors
def install(
    component: str,
    nightly: str | None,
    debug_build: bool,
    yes: bool,
    path: str | None,
    enable: bool,
    disable: bool,
    auto_detect: bool,
    as_json: bool,
) -> None:
    """Install COMPONENT, e.g. ``primary``, ``primary@testnet-1.39.3``.

    Components: primary, package-registry, storage, site-builder.
    """
    from suiup.core.services.install.domain.component_spec import parse_component
    from suiup.core.services.install.orchestration.dispatcher import (
        InstallOptions,
        install_component,
        load_config_or_default,
    )

    config = load_config_or_default()
    spec = parse_component(component, config.default_network)

    options = InstallOptions(
        nightly=nightly,
        debug=debug_build,
        yes=yes,
        path=path,
        enable=enable,
        disable=disable,
        auto_detect=auto_detect,
        github_token=config.github_token or os.environ.get("GITHUB_TOKEN") or None,
    )

    click.secho(f"📦 Installing {spec}...", fg="cyan")
    result = install_component(spec, options, config=config)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))


@click.command("list")
def list_components() -> None:
    """List the components suiup can install."""
    click.secho("📦 Available components:", fg="cyan", bold=True)
    for name in BinaryName.all():
        click.echo(f"   {name.value:<18} {name.repo.value}")
