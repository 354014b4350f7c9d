"""
Cache models — policy projection, statistics and sweep reports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from suiup.core.models.config import MIB, SuiupConfig


@dataclass(frozen=True)
class CacheConfig:
    """Cleanup policy, projected from ``SuiupConfig`` at each use."""

    max_size_mb: int
    max_age_days: int
    auto_cleanup_enabled: bool

    @classmethod
    def from_config(cls, config: SuiupConfig) -> CacheConfig:
        return cls(
            max_size_mb=config.max_cache_size // MIB,
            max_age_days=config.cache_days,
            auto_cleanup_enabled=config.auto_cleanup,
        )

    @classmethod
    def default(cls) -> CacheConfig:
        """Fallback policy when the config file cannot be loaded."""
        return cls(max_size_mb=1024, max_age_days=30, auto_cleanup_enabled=True)


@dataclass(frozen=True)
class CacheStats:
    total_size_bytes: int
    file_count: int
    directory_path: Path

    @property
    def size_mb(self) -> int:
        return self.total_size_bytes // MIB

    def to_dict(self) -> dict:
        return {
            "total_size_bytes": self.total_size_bytes,
            "file_count": self.file_count,
            "directory_path": str(self.directory_path),
        }


@dataclass(frozen=True)
class FileEntry:
    """A regular file seen by the smart sweep.  ``age`` is in seconds."""

    path: Path
    size: int
    modified_time: float
    age: float

    @property
    def days_old(self) -> int:
        return int(self.age // 86400)


@dataclass
class CleanupReport:
    """Outcome of one sweep (real or dry-run)."""

    dry_run: bool = False
    removed: list[Path] = field(default_factory=list)
    freed_bytes: int = 0
    remaining_bytes: int = 0
    within_limit: bool | None = None
    cleared_all: bool = False

    @property
    def files_removed(self) -> int:
        return len(self.removed)

    def to_dict(self) -> dict:
        return {
            "dry_run": self.dry_run,
            "removed": [str(p) for p in self.removed],
            "files_removed": self.files_removed,
            "freed_bytes": self.freed_bytes,
            "remaining_bytes": self.remaining_bytes,
            "within_limit": self.within_limit,
            "cleared_all": self.cleared_all,
        }
