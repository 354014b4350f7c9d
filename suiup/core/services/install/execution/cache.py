"""
L4 Execution — Release archive cache.

The downloader writes archives under ``release_archive_dir()``; this
module measures and sweeps that tree.  Two sweep strategies:

- **age-based** (``handle_cleanup``): top-level files of the cache root
  only.  Nested sub-directories are left alone.
- **smart** (``smart_cleanup``): every regular file, recursively, oldest
  first, removed while the cache is over its size limit and afterwards
  only when older than the age limit.

Symlinks are never followed and never removed.  Sizes are compared in
whole MiB (truncating division).
"""

from __future__ import annotations

import logging
import os
import shutil
import time
from pathlib import Path
from typing import Iterator

import click

from suiup.core.errors import FileSystemError, SuiupError, error_context, print_warning
from suiup.core.models.cache import CacheConfig, CacheStats, CleanupReport, FileEntry
from suiup.core.paths import release_archive_dir
from suiup.core.services.install.domain.size_format import format_file_size, to_mb

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400


def load_cache_policy() -> CacheConfig:
    """Project the cache policy from the user config, or the built-in default."""
    from suiup.core.config.store import ConfigStore

    try:
        return CacheConfig.from_config(ConfigStore.load().get_config())
    except SuiupError as e:
        logger.debug("Config unavailable (%s), using default cache policy", e)
        return CacheConfig.default()


# ── Traversal ───────────────────────────────────────────────────


def _scan(directory: Path) -> list[os.DirEntry]:
    with error_context(FileSystemError, f"Failed to read cache directory: {directory}"):
        with os.scandir(directory) as it:
            return sorted(it, key=lambda e: e.name)


def _iter_regular_files(directory: Path) -> Iterator[os.DirEntry]:
    """Yield regular files below ``directory``, depth first, name order."""
    for entry in _scan(directory):
        if entry.is_symlink():
            continue
        if entry.is_dir(follow_symlinks=False):
            yield from _iter_regular_files(Path(entry.path))
        elif entry.is_file(follow_symlinks=False):
            yield entry


def get_cache_stats(cache_dir: Path | None = None) -> CacheStats:
    """Recursive size and regular-file count of the cache root.

    A missing root reports zero files and zero bytes.
    """
    root = cache_dir or release_archive_dir()
    if not root.exists():
        return CacheStats(total_size_bytes=0, file_count=0, directory_path=root)

    total = 0
    count = 0
    for entry in _iter_regular_files(root):
        try:
            total += entry.stat(follow_symlinks=False).st_size
        except OSError as e:
            logger.debug("Skipping unreadable cache file %s: %s", entry.path, e)
            continue
        count += 1

    return CacheStats(total_size_bytes=total, file_count=count, directory_path=root)


def collect_file_entries(cache_dir: Path, now: float | None = None) -> list[FileEntry]:
    """Every regular file as a ``FileEntry``, sorted oldest first.

    Files whose metadata cannot be read are skipped, as are files with a
    modification time in the future.  Ties are broken by path.
    """
    now = time.time() if now is None else now
    entries: list[FileEntry] = []
    for entry in _iter_regular_files(cache_dir):
        try:
            st = entry.stat(follow_symlinks=False)
        except OSError as e:
            logger.warning("Cannot read %s: %s", entry.path, e)
            continue
        age = now - st.st_mtime
        if age < 0:
            continue
        entries.append(FileEntry(
            path=Path(entry.path),
            size=st.st_size,
            modified_time=st.st_mtime,
            age=age,
        ))

    entries.sort(key=lambda e: (e.modified_time, str(e.path)))
    return entries


# ── Output ──────────────────────────────────────────────────────


def print_stats_block(
    stats: CacheStats,
    policy: CacheConfig,
    *,
    show_limit_status: bool = False,
) -> None:
    click.echo("=== Cache Statistics ===")
    click.echo(f"Directory: {stats.directory_path}")
    click.echo(f"Total files: {stats.file_count}")
    click.echo(f"Total size: {format_file_size(stats.total_size_bytes)}")
    click.echo(f"Size limit: {policy.max_size_mb} MB")
    if show_limit_status:
        if stats.size_mb > policy.max_size_mb:
            click.secho("⚠️  Cache size exceeds limit!", fg="yellow")
        else:
            click.secho("✅ Cache size within limits", fg="green")
    click.echo("========================")


def _print_removal(entry_path: Path, days_old: int, size: int, dry_run: bool) -> None:
    verb = "Would remove" if dry_run else "Removing"
    click.echo(f"{verb}: {entry_path} ({days_old} days old, {format_file_size(size)})")


def _remove_file(path: Path) -> None:
    with error_context(FileSystemError, f"Failed to remove cached file: {path}"):
        path.unlink()
    logger.info("Removed cached archive %s", path)


# ── Sweeps ──────────────────────────────────────────────────────


def handle_cleanup(
    all_files: bool,
    days: int,
    dry_run: bool,
    *,
    cache_dir: Path | None = None,
    policy: CacheConfig | None = None,
) -> CleanupReport:
    """Age-based sweep of the cache root (top level only).

    Args:
        all_files: Remove the whole tree and recreate an empty root.
        days: Files older than this many days are removed.
        dry_run: Report what would happen without touching the disk.
        cache_dir: Override the cache root.
        policy: Override the cache policy shown in the stats block.
    """
    root = cache_dir or release_archive_dir()
    policy = policy or load_cache_policy()
    report = CleanupReport(dry_run=dry_run)

    try:
        print_stats_block(get_cache_stats(root), policy)
    except FileSystemError as e:
        click.echo(f"Warning: Could not get cache statistics: {e.message}")

    if not root.exists():
        click.echo("Release archives directory does not exist, nothing to clean up.")
        return report

    if all_files:
        report.cleared_all = True
        report.freed_bytes = get_cache_stats(root).total_size_bytes
        if dry_run:
            click.echo("Would remove all release archives in cache directory (dry run)")
            report.remaining_bytes = report.freed_bytes
            return report
        click.echo("Removing all release archives in cache directory...")
        with error_context(FileSystemError, f"Failed to clear cache directory: {root}"):
            shutil.rmtree(root)
            root.mkdir(parents=True, exist_ok=True)
        logger.info("Cleared cache directory %s", root)
        click.echo("Cache cleared successfully.")
        return report

    cutoff = days * SECONDS_PER_DAY
    now = time.time()

    for entry in _scan(root):
        if entry.is_symlink() or not entry.is_file(follow_symlinks=False):
            continue
        with error_context(FileSystemError, f"Failed to read metadata for {entry.path}"):
            st = entry.stat(follow_symlinks=False)
        age = now - st.st_mtime
        if age <= cutoff:
            continue

        path = Path(entry.path)
        _print_removal(path, int(age // SECONDS_PER_DAY), st.st_size, dry_run)
        if not dry_run:
            _remove_file(path)
        report.removed.append(path)
        report.freed_bytes += st.st_size

    if report.removed:
        if dry_run:
            click.echo(
                f"Would remove {report.files_removed} files totaling "
                f"{format_file_size(report.freed_bytes)} (dry run)"
            )
        else:
            click.echo(
                f"Cleanup complete. {report.files_removed} files removed, "
                f"{format_file_size(report.freed_bytes)} freed"
            )

    remaining = get_cache_stats(root).total_size_bytes
    report.remaining_bytes = remaining - report.freed_bytes if dry_run else remaining
    if report.removed and not dry_run:
        click.echo(f"New cache size: {format_file_size(remaining)}")
    return report


def smart_cleanup(
    max_age_days: int,
    dry_run: bool,
    *,
    cache_dir: Path | None = None,
    policy: CacheConfig | None = None,
) -> CleanupReport:
    """Size-bounded recursive sweep, oldest files first.

    While the running total is above ``policy.max_size_mb`` every file is
    removed regardless of age; once below, only files older than
    ``max_age_days`` go.  The kept set is therefore always the newest
    suffix of the files ordered by modification time.
    """
    root = cache_dir or release_archive_dir()
    policy = policy or load_cache_policy()
    report = CleanupReport(dry_run=dry_run)

    click.echo("Running smart cleanup strategy...")
    if not root.exists():
        click.echo("Release archives directory does not exist, nothing to clean up.")
        report.within_limit = True
        return report

    entries = collect_file_entries(root)
    remaining = sum(e.size for e in entries)

    click.echo(f"Current cache size: {to_mb(remaining)} MB")
    click.echo(f"Size limit: {policy.max_size_mb} MB")

    cutoff = max_age_days * SECONDS_PER_DAY
    for entry in entries:
        over_limit = to_mb(remaining) > policy.max_size_mb
        if not over_limit and entry.age <= cutoff:
            continue

        _print_removal(entry.path, entry.days_old, entry.size, dry_run)
        if not dry_run:
            _remove_file(entry.path)
        report.removed.append(entry.path)
        report.freed_bytes += entry.size
        remaining -= entry.size

    report.remaining_bytes = remaining
    report.within_limit = to_mb(remaining) <= policy.max_size_mb

    if dry_run:
        click.echo(
            f"Would remove {report.files_removed} files totaling "
            f"{format_file_size(report.freed_bytes)} (dry run)"
        )
        return report

    click.echo(
        f"Smart cleanup complete. {report.files_removed} files removed, "
        f"{format_file_size(report.freed_bytes)} freed"
    )
    click.echo(f"New cache size: {to_mb(remaining)} MB")
    if report.within_limit:
        click.secho("✅ Cache size now within limits", fg="green")
    else:
        click.secho(
            "⚠️  Cache size still exceeds limits - consider more aggressive cleanup",
            fg="yellow",
        )
    return report


def handle_cleanup_advanced(
    all_files: bool,
    days: int,
    dry_run: bool,
    stats: bool,
    smart: bool,
    *,
    cache_dir: Path | None = None,
    policy: CacheConfig | None = None,
) -> CleanupReport | None:
    """``cleanup`` entry point: stats only, smart sweep, or age-based sweep."""
    if stats:
        policy = policy or load_cache_policy()
        print_stats_block(get_cache_stats(cache_dir), policy, show_limit_status=True)
        return None

    if smart:
        return smart_cleanup(days, dry_run, cache_dir=cache_dir, policy=policy)

    return handle_cleanup(all_files, days, dry_run, cache_dir=cache_dir, policy=policy)


def auto_cleanup_cache(policy: CacheConfig, *, cache_dir: Path | None = None) -> bool:
    """Post-install hook: age-based sweep when the cache is over its size limit.

    Never raises; failures are reported as warnings.

    Returns:
        True if a sweep ran and finished.
    """
    if not policy.auto_cleanup_enabled:
        return False

    try:
        stats = get_cache_stats(cache_dir)
        if stats.size_mb <= policy.max_size_mb:
            return False

        click.echo(
            f"Cache size ({stats.size_mb} MB) exceeds limit "
            f"({policy.max_size_mb} MB), running auto cleanup..."
        )
        logger.info("Auto cleanup triggered: %d MB > %d MB", stats.size_mb, policy.max_size_mb)
        handle_cleanup(
            False, policy.max_age_days, False, cache_dir=cache_dir, policy=policy,
        )
        return True
    except (SuiupError, OSError) as e:
        logger.warning("Auto cleanup failed: %s", e)
        print_warning(f"Auto cleanup failed: {e}")
        return False
