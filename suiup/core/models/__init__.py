"""
Domain models — dataclasses and Pydantic types for suiup.

    from suiup.core.models import ComponentSpec, SuiupConfig, CacheStats
"""

from suiup.core.models.cache import CacheConfig, CacheStats, CleanupReport, FileEntry
from suiup.core.models.component import (
    STANDALONE,
    BinaryName,
    ComponentSpec,
    Network,
    Repo,
)
from suiup.core.models.config import SuiupConfig
from suiup.core.models.install import InstalledBinary, ToolStatus

__all__ = [
    "STANDALONE",
    "BinaryName",
    "CacheConfig",
    "CacheStats",
    "CleanupReport",
    "ComponentSpec",
    "FileEntry",
    "InstalledBinary",
    "Network",
    "Repo",
    "SuiupConfig",
    "ToolStatus",
]
