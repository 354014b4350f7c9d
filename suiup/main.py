"""
suiup — CLI entrypoint.

Usage:
    suiup --help
    suiup install primary@testnet
    suiup cleanup --smart --dry-run
    suiup config list
"""

from __future__ import annotations

import click

from suiup import __version__
from suiup.core.observability.logging_config import setup_from_flags


@click.group()
@click.version_option(version=__version__, prog_name="suiup")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool) -> None:
    """suiup — install and manage the Sui tool family."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug

    setup_from_flags(debug=debug, verbose=verbose, quiet=quiet)


# ── Register sub-groups ─────────────────────────────────────────

from suiup.ui.cli.cleanup import cleanup
from suiup.ui.cli.config import config
from suiup.ui.cli.install import install, list_components

cli.add_command(install)
cli.add_command(list_components)
cli.add_command(cleanup)
cli.add_command(config)


if __name__ == "__main__":
    cli()
