"""
Tests for the release archive cache — stats, age-based and smart sweeps,
and the post-install auto cleanup hook.
"""

import os
from pathlib import Path

import pytest

from suiup.core.errors import FileSystemError
from suiup.core.models.cache import CacheConfig
from suiup.core.models.config import GIB, MIB, SuiupConfig
from suiup.core.services.install.domain.size_format import format_file_size, to_mb
from suiup.core.services.install.execution import cache
from suiup.core.services.install.execution.cache import (
    SECONDS_PER_DAY,
    auto_cleanup_cache,
    collect_file_entries,
    get_cache_stats,
    handle_cleanup,
    handle_cleanup_advanced,
    smart_cleanup,
)

SMALL = CacheConfig(max_size_mb=1, max_age_days=30, auto_cleanup_enabled=True)


# ── Size formatting ─────────────────────────────────────────────


class TestFormatFileSize:
    @pytest.mark.parametrize("size, expected", [
        (0, "0 B"),
        (512, "512 B"),
        (1536, "1.50 KB"),
        (10 * 1024, "10.0 KB"),
        (250 * MIB, "250 MB"),
        (GIB, "1.00 GB"),
    ])
    def test_units_and_precision(self, size, expected):
        assert format_file_size(size) == expected

    def test_to_mb_truncates(self):
        assert to_mb(MIB - 1) == 0
        assert to_mb(2 * MIB + 5) == 2


# ── Stats ───────────────────────────────────────────────────────


class TestCacheStats:
    def test_missing_root(self, tmp_path: Path):
        root = tmp_path / "nope"
        stats = get_cache_stats(root)
        assert stats.file_count == 0
        assert stats.total_size_bytes == 0
        assert stats.directory_path == root

    def test_counts_nested_files(self, cache_dir, make_file):
        make_file(cache_dir / "a.tgz", size=100)
        make_file(cache_dir / "sub" / "b.tgz", size=50)
        stats = get_cache_stats(cache_dir)
        assert stats.file_count == 2
        assert stats.total_size_bytes == 150

    def test_symlinks_not_counted(self, cache_dir, make_file, tmp_path):
        target = make_file(tmp_path / "outside.bin", size=1000)
        os.symlink(target, cache_dir / "link.bin")
        assert get_cache_stats(cache_dir).file_count == 0

    def test_default_root_follows_xdg_cache_home(self, isolated_env):
        stats = get_cache_stats()
        assert stats.directory_path == isolated_env / ".cache" / "suiup" / "releases"


# ── Age-based sweep ─────────────────────────────────────────────


class TestHandleCleanup:
    def test_empty_dry_run_prints_only_stats(self, cache_dir, capsys):
        report = handle_cleanup(False, 30, True, cache_dir=cache_dir, policy=SMALL)
        out = capsys.readouterr().out.strip().splitlines()
        assert out[0] == "=== Cache Statistics ==="
        assert out[-1].startswith("=====")
        assert len(out) == 6
        assert report.files_removed == 0

    def test_removes_only_old_files(self, cache_dir, make_file):
        old = make_file(cache_dir / "old.tgz", days=40)
        new = make_file(cache_dir / "new.tgz", days=1)

        report = handle_cleanup(False, 30, False, cache_dir=cache_dir, policy=SMALL)

        assert not old.exists()
        assert new.exists()
        assert report.removed == [old]

    def test_remaining_files_within_age(self, cache_dir, make_file):
        for i, days in enumerate([0, 3, 9, 11, 45]):
            make_file(cache_dir / f"f{i}.tgz", days=days)

        handle_cleanup(False, 10, False, cache_dir=cache_dir, policy=SMALL)

        now = max(p.stat().st_mtime for p in cache_dir.iterdir())
        for p in cache_dir.iterdir():
            assert now - p.stat().st_mtime <= 10 * SECONDS_PER_DAY
        assert sorted(p.name for p in cache_dir.iterdir()) == ["f0.tgz", "f1.tgz", "f2.tgz"]

    def test_sweep_is_shallow(self, cache_dir, make_file):
        nested = make_file(cache_dir / "nested" / "old.tgz", days=90)
        handle_cleanup(False, 30, False, cache_dir=cache_dir, policy=SMALL)
        assert nested.exists()

    def test_symlink_never_removed(self, cache_dir, make_file, tmp_path):
        target = make_file(tmp_path / "outside.bin", days=90)
        link = cache_dir / "link.bin"
        os.symlink(target, link)
        handle_cleanup(False, 30, False, cache_dir=cache_dir, policy=SMALL)
        assert link.is_symlink()
        assert target.exists()

    def test_dry_run_leaves_tree_untouched(self, cache_dir, make_file, tree_snapshot, capsys):
        make_file(cache_dir / "old.tgz", days=40)
        make_file(cache_dir / "new.tgz", days=1)
        before = tree_snapshot(cache_dir)

        report = handle_cleanup(False, 30, True, cache_dir=cache_dir, policy=SMALL)

        assert tree_snapshot(cache_dir) == before
        assert report.files_removed == 1
        out = capsys.readouterr().out
        assert "Would remove:" in out
        assert "(dry run)" in out

    def test_all_clears_and_recreates_root(self, cache_dir, make_file):
        make_file(cache_dir / "a.tgz", size=10)
        make_file(cache_dir / "sub" / "b.tgz", size=20)

        report = handle_cleanup(True, 30, False, cache_dir=cache_dir, policy=SMALL)

        assert cache_dir.is_dir()
        assert list(cache_dir.iterdir()) == []
        assert report.cleared_all
        assert report.freed_bytes == 30

    def test_all_dry_run(self, cache_dir, make_file, tree_snapshot, capsys):
        make_file(cache_dir / "a.tgz", size=10)
        before = tree_snapshot(cache_dir)

        handle_cleanup(True, 30, True, cache_dir=cache_dir, policy=SMALL)

        assert tree_snapshot(cache_dir) == before
        assert "Would remove all release archives" in capsys.readouterr().out

    def test_missing_root(self, tmp_path, capsys):
        report = handle_cleanup(False, 30, False, cache_dir=tmp_path / "nope", policy=SMALL)
        assert report.files_removed == 0
        assert not (tmp_path / "nope").exists()
        assert "nothing to clean up" in capsys.readouterr().out


# ── Smart sweep ─────────────────────────────────────────────────


class TestSmartCleanup:
    def test_two_gib_over_one_gib_limit(self, cache_dir, make_file, capsys):
        policy = CacheConfig.from_config(SuiupConfig(max_cache_size=GIB))
        files = [
            make_file(cache_dir / f"archive-{i}.tgz", size=512 * MIB, days=4 - i)
            for i in range(4)
        ]

        report = smart_cleanup(30, False, cache_dir=cache_dir, policy=policy)

        assert not files[0].exists()
        assert not files[1].exists()
        assert files[2].exists() and files[3].exists()
        assert report.within_limit is True
        assert get_cache_stats(cache_dir).total_size_bytes <= GIB
        assert "Cache size now within limits" in capsys.readouterr().out

    def test_kept_set_is_newest_suffix(self, cache_dir, make_file):
        sizes = [MIB, MIB // 2, 2 * MIB, MIB, MIB // 4, MIB // 2]
        for i, size in enumerate(sizes):
            make_file(cache_dir / ("d" if i % 2 else "") / f"f{i}", size=size, days=10 - i)
        ordered = [e.path for e in collect_file_entries(cache_dir)]

        smart_cleanup(30, False, cache_dir=cache_dir, policy=CacheConfig(2, 30, True))

        kept = [p for p in ordered if p.exists()]
        assert kept == ordered[len(ordered) - len(kept):]
        assert to_mb(sum(p.stat().st_size for p in kept)) <= 2

    def test_under_limit_removes_only_old(self, cache_dir, make_file):
        old = make_file(cache_dir / "deep" / "old.tgz", days=40)
        new = make_file(cache_dir / "new.tgz", days=1)

        report = smart_cleanup(30, False, cache_dir=cache_dir, policy=SMALL)

        assert not old.exists()
        assert new.exists()
        assert report.within_limit is True

    def test_dry_run_leaves_tree_untouched(self, cache_dir, make_file, tree_snapshot, capsys):
        for i in range(3):
            make_file(cache_dir / f"f{i}", size=MIB, days=3 - i)
        before = tree_snapshot(cache_dir)

        report = smart_cleanup(30, True, cache_dir=cache_dir, policy=SMALL)

        assert tree_snapshot(cache_dir) == before
        assert report.files_removed == 2
        assert "Would remove 2 files totaling 2.00 MB (dry run)" in capsys.readouterr().out

    def test_missing_root(self, tmp_path, capsys):
        report = smart_cleanup(30, False, cache_dir=tmp_path / "nope", policy=SMALL)
        assert report.within_limit is True
        assert "nothing to clean up" in capsys.readouterr().out

    def test_future_files_are_skipped(self, cache_dir, make_file):
        make_file(cache_dir / "future", seconds=-3600)
        make_file(cache_dir / "past", days=1)
        assert [e.path.name for e in collect_file_entries(cache_dir)] == ["past"]


# ── Dispatcher and auto cleanup ─────────────────────────────────


class TestAdvanced:
    def test_stats_short_circuits(self, cache_dir, make_file, capsys):
        make_file(cache_dir / "old.tgz", days=90)
        result = handle_cleanup_advanced(False, 30, False, True, True, cache_dir=cache_dir, policy=SMALL)
        assert result is None
        assert (cache_dir / "old.tgz").exists()
        assert "Cache size within limits" in capsys.readouterr().out

    def test_smart_selected(self, cache_dir, capsys):
        handle_cleanup_advanced(False, 30, True, False, True, cache_dir=cache_dir, policy=SMALL)
        assert "Running smart cleanup strategy..." in capsys.readouterr().out

    def test_age_based_by_default(self, cache_dir, make_file):
        make_file(cache_dir / "old.tgz", days=90)
        report = handle_cleanup_advanced(False, 30, False, False, False, cache_dir=cache_dir, policy=SMALL)
        assert report.files_removed == 1


class TestAutoCleanup:
    def test_disabled(self, cache_dir, make_file):
        make_file(cache_dir / "big", size=5 * MIB, days=90)
        policy = CacheConfig(max_size_mb=1, max_age_days=30, auto_cleanup_enabled=False)
        assert auto_cleanup_cache(policy, cache_dir=cache_dir) is False
        assert (cache_dir / "big").exists()

    def test_under_limit(self, cache_dir, make_file):
        make_file(cache_dir / "small", size=1024, days=90)
        assert auto_cleanup_cache(SMALL, cache_dir=cache_dir) is False
        assert (cache_dir / "small").exists()

    def test_over_limit_runs_age_sweep(self, cache_dir, make_file):
        old = make_file(cache_dir / "old", size=2 * MIB, days=40)
        new = make_file(cache_dir / "new", size=MIB, days=1)

        assert auto_cleanup_cache(SMALL, cache_dir=cache_dir) is True
        assert not old.exists()
        assert new.exists()

    def test_errors_are_warnings(self, cache_dir, monkeypatch, capsys):
        def boom(*args, **kwargs):
            raise FileSystemError("disk on fire")

        monkeypatch.setattr(cache, "get_cache_stats", boom)
        assert auto_cleanup_cache(SMALL, cache_dir=cache_dir) is False
        assert "Auto cleanup failed: disk on fire" in capsys.readouterr().out


class TestCachePolicy:
    def test_from_config_uses_mib(self):
        policy = CacheConfig.from_config(SuiupConfig(max_cache_size=3 * MIB + 7, cache_days=5))
        assert policy.max_size_mb == 3
        assert policy.max_age_days == 5

    def test_load_falls_back_to_default(self, isolated_env):
        cfg = isolated_env / ".config" / "suiup" / "config.json"
        cfg.parent.mkdir(parents=True)
        cfg.write_text("{not json")
        assert cache.load_cache_policy() == CacheConfig.default()
