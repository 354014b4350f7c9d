"""
L5 Orchestration — top-level install coordination.
"""

from suiup.core.services.install.orchestration.dispatcher import (  # noqa: F401
    InstallOptions,
    InstallResult,
    install_component,
)
