"""
L4 Execution — Installed binaries registry.

Bookkeeping of what has been installed, kept in
``installed_binaries.json`` under the data dir.  The file is
rebuildable: a missing or corrupt document reads as empty.
"""

from __future__ import annotations

import logging
from pathlib import Path

from suiup.core.models.install import InstalledBinariesDocument, InstalledBinary
from suiup.core.paths import installed_binaries_file
from suiup.core.persistence.json_file import load_model, save_model

logger = logging.getLogger(__name__)


class InstalledBinaries:
    """Read/append view over ``installed_binaries.json``."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or installed_binaries_file()
        self._doc = load_model(self.path, InstalledBinariesDocument)

    def binaries(self) -> list[InstalledBinary]:
        return list(self._doc.binaries)

    def add(self, binary: InstalledBinary) -> None:
        """Record an install, replacing any entry for the same name/network/version."""
        self._doc.binaries = [
            b for b in self._doc.binaries
            if (b.binary_name, b.network_release, b.version)
            != (binary.binary_name, binary.network_release, binary.version)
        ]
        self._doc.binaries.append(binary)
        save_model(self._doc, self.path)
        logger.debug(
            "Registered %s %s (%s)",
            binary.binary_name, binary.version, binary.network_release,
        )

    def find_version(self, name: str, network: str) -> str | None:
        """Version of an existing install of ``name``, preferring ``network``.

        Falls back to an install on any network; None when there is none.
        """
        for binary in self._doc.binaries:
            if binary.binary_name == name and binary.network_release == network:
                return binary.version
        for binary in self._doc.binaries:
            if binary.binary_name == name:
                return binary.version
        return None
