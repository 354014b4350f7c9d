"""
Shared test fixtures and configuration.

Every test runs against a private config/cache/data tree under
``tmp_path``; monkeypatch restores the environment afterwards.
"""

import os
import time
from pathlib import Path
from typing import Callable

import pytest

DAY = 86400


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every suiup location at a temporary home."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(home / ".cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(home / ".local" / "share"))
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("SUIUP_LOG_LEVEL", raising=False)
    monkeypatch.delenv("SUIUP_LOG_FILE", raising=False)
    monkeypatch.delenv("SUIUP_LOG_FILE_LEVEL", raising=False)
    return home


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """An empty release archive directory."""
    path = tmp_path / "releases"
    path.mkdir()
    return path


@pytest.fixture
def make_file() -> Callable[..., Path]:
    """Factory: create a (sparse) file of ``size`` bytes aged ``days`` days."""

    def _make(path: Path, size: int = 16, days: float = 0, seconds: float = 0) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as fh:
            fh.truncate(size)
        mtime = time.time() - days * DAY - seconds
        os.utime(path, (mtime, mtime))
        return path

    return _make


def snapshot(root: Path) -> dict[str, tuple[int, float]]:
    """Relative path → (size, mtime) of every file under ``root``."""
    return {
        str(p.relative_to(root)): (p.stat().st_size, p.stat().st_mtime)
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


@pytest.fixture
def tree_snapshot() -> Callable[[Path], dict[str, tuple[int, float]]]:
    return snapshot
