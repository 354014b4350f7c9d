"""
L4 Execution — Per-tool enable/disable flag.

Persisted in ``tool_status.json`` next to the binaries directory so the
flag survives a reinstall.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from suiup.core.errors import FileSystemError, error_context
from suiup.core.models.install import ToolStatus, ToolStatusDocument
from suiup.core.paths import tool_status_file
from suiup.core.persistence.json_file import load_model, save_model

logger = logging.getLogger(__name__)


def get_tool_status(name: str, path: Path | None = None) -> ToolStatus:
    """Stored status for ``name``; tools never toggled are enabled."""
    doc = load_model(path or tool_status_file(), ToolStatusDocument)
    return doc.tools.get(name, ToolStatus(name=name))


def set_tool_status(name: str, enabled: bool, path: Path | None = None) -> ToolStatus:
    """Persist the flag for ``name``.

    Raises:
        FileSystemError: the status file could not be written.
    """
    path = path or tool_status_file()
    state = "enabled" if enabled else "disabled"
    click.echo(f"Setting {name} tool status to: {state}")

    doc = load_model(path, ToolStatusDocument)
    status = ToolStatus(name=name, enabled=enabled)
    doc.tools[name] = status
    with error_context(FileSystemError, f"Failed to save tool status for {name}"):
        save_model(doc, path)
    logger.info("Tool %s %s", name, state)
    return status
