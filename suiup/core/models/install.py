"""
Install records — what is on disk, and the per-tool enable flag.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class InstalledBinary(BaseModel):
    """One entry of ``installed_binaries.json``."""

    binary_name: str
    network_release: str
    version: str
    debug: bool = False
    path: str | None = None


class InstalledBinariesDocument(BaseModel):
    binaries: list[InstalledBinary] = Field(default_factory=list)


class ToolStatus(BaseModel):
    """Enable/disable flag for a managed component."""

    name: str
    enabled: bool = True


class ToolStatusDocument(BaseModel):
    tools: dict[str, ToolStatus] = Field(default_factory=dict)
