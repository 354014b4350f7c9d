"""
L5 Orchestration — Install dispatch.

Takes a parsed ``ComponentSpec`` plus CLI flags, prepares directories,
enforces the flag guards, and routes to one of the backend install
sources:

    nightly branch  → backend.install_from_nightly
    primary/storage → backend.install_from_release (requested network)
    site-builder    → backend.install_from_release (mainnet)
    package-registry→ backend.install_standalone

After a successful install the tool status flag is applied and the
cache auto-cleanup hook runs (its failures are warnings only).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from suiup.core.errors import (
    FileSystemError,
    InstallationError,
    SuiupError,
    error_context,
    print_info,
    print_success,
    print_warning,
)
from suiup.core.models.cache import CacheConfig
from suiup.core.models.component import BinaryName, ComponentSpec, Network
from suiup.core.models.config import SuiupConfig
from suiup.core.paths import binaries_dir, default_install_dir
from suiup.core.services.install.execution.backends import (
    GitHubReleaseBackend,
    InstallBackend,
)
from suiup.core.services.install.execution.cache import auto_cleanup_cache
from suiup.core.services.install.execution.registry import InstalledBinaries
from suiup.core.services.install.execution.tool_status import set_tool_status

logger = logging.getLogger(__name__)

ROUTE_NIGHTLY = "nightly"
ROUTE_RELEASE = "release"
ROUTE_STANDALONE = "standalone"


@dataclass
class InstallOptions:
    """Flags of ``suiup install``."""

    nightly: str | None = None
    debug: bool = False
    yes: bool = False
    path: str | None = None
    enable: bool = False
    disable: bool = False
    auto_detect: bool = False
    github_token: str | None = None


@dataclass
class InstallResult:
    spec: ComponentSpec
    route: str
    network: str
    version: str | None
    install_dir: Path
    cleanup_ran: bool = False

    def to_dict(self) -> dict:
        return {
            "spec": self.spec.to_dict(),
            "route": self.route,
            "network": self.network,
            "version": self.version,
            "install_dir": str(self.install_dir),
            "cleanup_ran": self.cleanup_ran,
        }


def load_config_or_default() -> SuiupConfig:
    """User config, or built-in defaults when it cannot be loaded."""
    from suiup.core.config.store import ConfigStore

    try:
        return ConfigStore.load().get_config()
    except SuiupError as e:
        logger.warning("Using default configuration: %s", e)
        return SuiupConfig()


def resolve_install_dir(path: str | None, config: SuiupConfig) -> Path:
    """CLI ``--path`` > config ``install_path`` > platform default."""
    if path:
        return Path(path).expanduser()
    if config.install_path:
        return Path(config.install_path).expanduser()
    return default_install_dir()


def check_guards(spec: ComponentSpec, options: InstallOptions, version: str | None) -> None:
    """Reject flag combinations the backends cannot honour."""
    if options.debug and spec.name is not BinaryName.PRIMARY and options.nightly is None:
        raise InstallationError(
            f"Debug flag is only available for the `{BinaryName.PRIMARY}` binary"
        )
    if options.nightly is not None and version is not None:
        raise InstallationError(
            "Cannot install from nightly and a release at the same time. "
            "Remove the version or the nightly flag"
        )
    if options.enable and options.disable:
        raise InstallationError("--enable and --disable cannot be used together")


def install_component(
    spec: ComponentSpec,
    options: InstallOptions | None = None,
    *,
    backend: InstallBackend | None = None,
    config: SuiupConfig | None = None,
    registry: InstalledBinaries | None = None,
    store_dir: Path | None = None,
    cache_dir: Path | None = None,
) -> InstallResult:
    """Install one component.

    Args:
        spec: Parsed descriptor (see ``parse_component``).
        options: CLI flags.
        backend: Install source; defaults to ``GitHubReleaseBackend``.
        config: Config snapshot; loaded from disk when omitted.
        registry: Installed binaries registry (for ``auto_detect``).
        store_dir: Override of ``binaries_dir()``.
        cache_dir: Override of the release cache for the auto-cleanup hook.

    Raises:
        InstallationError: guard violation or backend failure.
        FileSystemError: directories could not be created.
    """
    options = options or InstallOptions()
    config = config or load_config_or_default()
    version = spec.version

    if options.auto_detect and version is None and options.nightly is None:
        registry = registry or InstalledBinaries()
        version = registry.find_version(spec.name.value, spec.network)
        if version:
            print_info(f"Auto-detected existing version: {version}")

    check_guards(spec, options, version)

    install_dir = resolve_install_dir(options.path, config)
    store = store_dir or binaries_dir()
    bucket = spec.name.network_bucket(spec.network)
    with error_context(FileSystemError, f"Failed to create installation directory {install_dir}"):
        install_dir.mkdir(parents=True, exist_ok=True)
    with error_context(FileSystemError, f"Failed to create binaries directory {store}"):
        (store / bucket).mkdir(parents=True, exist_ok=True)

    token = options.github_token or config.github_token
    if backend is None:
        backend = GitHubReleaseBackend(
            config.mirror_url,
            install_dir,
            github_token=token,
            store_dir=store,
            registry=registry,
        )

    name = spec.name
    with error_context(InstallationError, f"Installation of {name} failed"):
        if options.nightly is not None:
            route, network = ROUTE_NIGHTLY, options.nightly
            logger.info("Installing %s from branch %s", name, options.nightly)
            backend.install_from_nightly(name, options.nightly, options.debug, options.yes)
        elif name is BinaryName.PACKAGE_REGISTRY:
            route, network = ROUTE_STANDALONE, bucket
            logger.info("Installing %s standalone (version=%s)", name, version)
            backend.install_standalone(version, name.repo, options.yes)
        else:
            route = ROUTE_RELEASE
            network = Network.MAINNET.value if name is BinaryName.SITE_BUILDER else spec.network
            logger.info("Installing %s release for %s (version=%s)", name, network, version)
            backend.install_from_release(
                name, network, version, options.debug, options.yes, name.repo, token,
            )

    if options.enable:
        set_tool_status(name.value, True)
    elif options.disable:
        set_tool_status(name.value, False)

    result = InstallResult(
        spec=spec,
        route=route,
        network=network,
        version=version,
        install_dir=install_dir,
    )

    try:
        result.cleanup_ran = auto_cleanup_cache(
            CacheConfig.from_config(config), cache_dir=cache_dir,
        )
    except Exception as e:  # the hook must never fail an install
        logger.warning("Auto cleanup failed: %s", e)
        print_warning(f"Auto cleanup failed: {e}")

    print_success("Installation completed successfully!")
    return result
