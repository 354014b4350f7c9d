"""
CLI command for the release archive cache.

Thin wrapper over ``suiup.core.services.install.execution.cache``.
"""

from __future__ import annotations

import json

import click

from suiup.core.models.config import default_cache_days
from suiup.ui.cli._common import handle_errors


def _default_days() -> int:
    from suiup.core.config.store import ConfigStore
    from suiup.core.errors import SuiupError

    try:
        return ConfigStore.load().get_config().cache_days
    except SuiupError:
        return default_cache_days()


@click.command()
@click.option("--days", "-d", type=click.IntRange(min=0), default=None,
              help="Remove archives older than this many days (default: config cache_days).")
@click.option("--all", "all_files", is_flag=True, help="Remove every cached archive.")
@click.option("--dry-run", "-n", is_flag=True, help="Show what would be removed.")
@click.option("--stats", "-s", is_flag=True, help="Only show cache statistics.")
@click.option("--smart", is_flag=True, help="Size-bounded cleanup, oldest archives first.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Also print the report as JSON.")
@handle_errors
def cleanup(
    days: int | None,
    all_files: bool,
    dry_run: bool,
    stats: bool,
    smart: bool,
    as_json: bool,
) -> None:
    """Clean up cached release archives."""
    from suiup.core.services.install.execution.cache import handle_cleanup_advanced

    if all_files and days is not None:
        raise click.UsageError("--all cannot be used together with --days")

    if days is None:
        days = _default_days()

    report = handle_cleanup_advanced(all_files, days, dry_run, stats, smart)

    if as_json and report is not None:
        click.echo(json.dumps(report.to_dict(), indent=2))
