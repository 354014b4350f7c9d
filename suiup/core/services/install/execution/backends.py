"""
L4 Execution — Install backends (download, unpack, build).

The dispatcher only knows the ``InstallBackend`` protocol.  The default
``GitHubReleaseBackend`` fetches release assets through the GitHub API
of the configured mirror, stores the archive in the release cache,
unpacks it into the network bucket under ``binaries_dir()`` and copies
the executable into the install dir.  Nightly installs build from a
branch with ``cargo install``.
"""

from __future__ import annotations

import http.client
import json
import logging
import platform
import shutil
import stat
import subprocess
import tarfile
import urllib.error
import urllib.request
import zipfile
from pathlib import Path
from typing import Any, Protocol

import click

from suiup import __version__
from suiup.core.errors import (
    FileSystemError,
    InstallationError,
    NetworkError,
    VersionError,
    error_context,
)
from suiup.core.models.component import BinaryName, Repo
from suiup.core.models.install import InstalledBinary
from suiup.core.paths import binaries_dir, release_archive_dir
from suiup.core.services.install.execution.registry import InstalledBinaries

logger = logging.getLogger(__name__)

_OS_TAGS = {"linux": "ubuntu", "darwin": "macos", "windows": "windows"}
_ARCH_TAGS = {"x86_64": "x86_64", "amd64": "x86_64", "aarch64": "arm64", "arm64": "arm64"}


class InstallBackend(Protocol):
    """Collaborator that actually puts binaries on disk."""

    def install_from_release(
        self,
        name: BinaryName,
        network: str,
        version: str | None,
        debug: bool,
        yes: bool,
        repo: Repo,
        github_token: str | None,
    ) -> None: ...

    def install_from_nightly(
        self,
        name: BinaryName,
        branch: str,
        debug: bool,
        yes: bool,
    ) -> None: ...

    def install_standalone(
        self,
        version: str | None,
        repo: Repo,
        yes: bool,
    ) -> None: ...


def _platform_tags() -> tuple[str, str]:
    system = platform.system().lower()
    machine = platform.machine().lower()
    return _OS_TAGS.get(system, system), _ARCH_TAGS.get(machine, machine)


def _api_base(mirror_url: str) -> str:
    """GitHub API root for a mirror (``/api/v3`` on non-github.com hosts)."""
    mirror = mirror_url.rstrip("/")
    if mirror in ("https://github.com", "http://github.com"):
        return "https://api.github.com"
    return f"{mirror}/api/v3"


class GitHubReleaseBackend:
    """Release installs from GitHub (or a GitHub-compatible mirror).

    Args:
        mirror_url: Base URL of the code host (``SuiupConfig.mirror_url``).
        install_dir: Directory that receives the active executable.
        github_token: Default token for API calls.
        cache_dir: Override of ``release_archive_dir()``.
        store_dir: Override of ``binaries_dir()``.
        registry: Override of the installed binaries registry.
        timeout: HTTP timeout in seconds.
    """

    def __init__(
        self,
        mirror_url: str,
        install_dir: Path,
        *,
        github_token: str | None = None,
        cache_dir: Path | None = None,
        store_dir: Path | None = None,
        registry: InstalledBinaries | None = None,
        timeout: int = 60,
    ) -> None:
        self.mirror_url = mirror_url.rstrip("/")
        self.install_dir = install_dir
        self.github_token = github_token
        self.cache_dir = cache_dir or release_archive_dir()
        self.store_dir = store_dir or binaries_dir()
        self.registry = registry or InstalledBinaries()
        self.timeout = timeout

    # ── InstallBackend ──────────────────────────────────────────

    def install_from_release(
        self,
        name: BinaryName,
        network: str,
        version: str | None,
        debug: bool,
        yes: bool,
        repo: Repo,
        github_token: str | None,
    ) -> None:
        token = github_token or self.github_token
        release = self._find_release(repo, network=network, version=version, token=token)
        tag = release.get("tag_name", "")
        resolved = _version_from_tag(tag)
        click.echo(f"Installing {name} {resolved} ({network}) from {repo.value}...")

        asset = self._match_asset(release, repo)
        archive = self._download(asset, token)
        exe = f"{name.executable}-debug" if debug else name.executable
        bucket = self.store_dir / name.network_bucket(network)
        unpacked = self._unpack(archive, exe, bucket / f"{name.executable}-v{resolved}")
        target = self._activate(unpacked, name.executable, yes)

        self.registry.add(InstalledBinary(
            binary_name=name.value,
            network_release=name.network_bucket(network),
            version=resolved,
            debug=debug,
            path=str(target),
        ))

    def install_standalone(self, version: str | None, repo: Repo, yes: bool) -> None:
        self.install_from_release(
            BinaryName.PACKAGE_REGISTRY,
            "standalone",
            version,
            False,
            yes,
            repo,
            None,
        )

    def install_from_nightly(
        self,
        name: BinaryName,
        branch: str,
        debug: bool,
        yes: bool,
    ) -> None:
        cargo = shutil.which("cargo")
        if not cargo:
            raise InstallationError(
                "cargo is required for --nightly installs. Install Rust from https://rustup.rs"
            )

        root = self.store_dir / branch
        cmd = [
            cargo, "install",
            "--git", f"{self.mirror_url}/{name.repo.value}.git",
            "--branch", branch,
            "--root", str(root),
            "--locked",
            "--force",
            name.executable,
        ]
        if debug:
            cmd.insert(2, "--debug")

        click.echo(f"Building {name} from branch '{branch}' (this can take a while)...")
        logger.info("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise InstallationError(f"Failed to run cargo: {e}") from e
        if result.returncode != 0:
            logger.debug("cargo stderr:\n%s", result.stderr)
            tail = result.stderr.strip().splitlines()[-1:] or ["unknown error"]
            raise InstallationError(f"Build from branch '{branch}' failed: {tail[0]}")

        built = root / "bin" / _exe_name(name.executable)
        target = self._activate(built, name.executable, yes)
        self.registry.add(InstalledBinary(
            binary_name=name.value,
            network_release=branch,
            version="nightly",
            debug=debug,
            path=str(target),
        ))

    # ── Release lookup ──────────────────────────────────────────

    def _get_json(self, url: str, token: str | None) -> Any:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": f"suiup/{__version__}",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        req = urllib.request.Request(url, headers=headers)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                return json.loads(resp.read())
        except urllib.error.HTTPError as e:
            if e.code == 404:
                raise VersionError(f"Release not found: {url}") from e
            if e.code in (401, 403):
                raise NetworkError(
                    f"GitHub API refused the request ({e.code}). "
                    "Set a token with 'suiup config set github_token <token>'"
                ) from e
            raise NetworkError(f"GitHub API request failed ({e.code}): {url}") from e
        except (urllib.error.URLError, TimeoutError) as e:
            raise NetworkError(f"Could not reach {url}: {e}") from e

    def _find_release(
        self,
        repo: Repo,
        *,
        network: str,
        version: str | None,
        token: str | None,
    ) -> dict:
        base = f"{_api_base(self.mirror_url)}/repos/{repo.value}/releases"
        standalone = network == "standalone"

        if version and version not in ("latest", "nightly"):
            if standalone or version.startswith(f"{network}-"):
                tag = version if version.startswith(("v", f"{network}-")) else f"v{version}"
            else:
                tag = f"{network}-v{version}"
            return self._get_json(f"{base}/tags/{tag}", token)

        if standalone:
            return self._get_json(f"{base}/latest", token)

        releases = self._get_json(f"{base}?per_page=100", token)
        for release in releases:
            if release.get("tag_name", "").startswith(f"{network}-"):
                return release
        raise VersionError(f"No {network} release found in {repo.value}")

    def _match_asset(self, release: dict, repo: Repo) -> dict:
        os_tag, arch = _platform_tags()
        assets = release.get("assets", [])
        for asset in assets:
            asset_name = asset.get("name", "").lower()
            if os_tag in asset_name and arch in asset_name:
                return asset

        available = ", ".join(a.get("name", "?") for a in assets[:10]) or "none"
        raise InstallationError(
            f"No {os_tag}-{arch} asset in {repo.value} {release.get('tag_name', '')} "
            f"(available: {available})"
        )

    # ── Download / unpack ───────────────────────────────────────

    def _download(self, asset: dict, token: str | None) -> Path:
        """Fetch an asset into the release cache (reusing a cached copy)."""
        dest = self.cache_dir / asset["name"]
        if dest.is_file() and dest.stat().st_size == asset.get("size", dest.stat().st_size):
            click.echo(f"Using cached archive {dest.name}")
            return dest

        url = asset["browser_download_url"]
        if self.mirror_url != "https://github.com":
            url = url.replace("https://github.com", self.mirror_url, 1)

        headers = {"User-Agent": f"suiup/{__version__}", "Accept": "application/octet-stream"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        with error_context(FileSystemError, f"Failed to create cache directory: {self.cache_dir}"):
            self.cache_dir.mkdir(parents=True, exist_ok=True)

        partial = dest.with_name(dest.name + ".part")
        click.echo(f"Downloading {asset['name']}...")
        done = False
        try:
            req = urllib.request.Request(url, headers=headers)
            with urllib.request.urlopen(req, timeout=self.timeout) as resp, open(partial, "wb") as fh:
                shutil.copyfileobj(resp, fh)
            partial.replace(dest)
            done = True
        except (urllib.error.URLError, http.client.HTTPException, ConnectionError, TimeoutError) as e:
            raise NetworkError(f"Download failed for {asset['name']}: {e}") from e
        except OSError as e:
            raise FileSystemError(f"Failed to write {partial}: {e}") from e
        finally:
            if not done:
                partial.unlink(missing_ok=True)
        logger.info("Cached %s (%d bytes)", dest, dest.stat().st_size)
        return dest

    def _unpack(self, archive: Path, exe: str, dest_dir: Path) -> Path:
        """Extract ``exe`` from ``archive`` into ``dest_dir``; return its path."""
        wanted = _exe_name(exe)
        target = dest_dir / wanted
        try:
            self._extract(archive, wanted, dest_dir, target)
        except (tarfile.TarError, zipfile.BadZipFile) as e:
            raise InstallationError(f"Corrupt release archive {archive.name}: {e}") from e
        return target

    def _extract(self, archive: Path, wanted: str, dest_dir: Path, target: Path) -> None:
        with error_context(FileSystemError, f"Failed to unpack {archive.name}"):
            dest_dir.mkdir(parents=True, exist_ok=True)
            name = archive.name.lower()
            if name.endswith((".tgz", ".tar.gz")):
                with tarfile.open(archive, "r:gz") as tar:
                    member = _find_member(tar.getnames(), wanted)
                    src = tar.extractfile(member)
                    if src is None:
                        raise InstallationError(f"{wanted} is not a file in {archive.name}")
                    with src, open(target, "wb") as fh:
                        shutil.copyfileobj(src, fh)
            elif name.endswith(".zip"):
                with zipfile.ZipFile(archive) as zf:
                    member = _find_member(zf.namelist(), wanted)
                    with zf.open(member) as src, open(target, "wb") as fh:
                        shutil.copyfileobj(src, fh)
            else:
                shutil.copy2(archive, target)
            target.chmod(target.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    def _activate(self, source: Path, executable: str, yes: bool) -> Path:
        """Copy ``source`` into the install dir as the active binary."""
        if not source.is_file():
            raise InstallationError(f"Built binary not found: {source}")
        target = self.install_dir / _exe_name(executable)
        if target.exists() and not yes:
            if not click.confirm(f"{target} exists. Overwrite?", default=True):
                raise InstallationError("Installation aborted by user")
        with error_context(FileSystemError, f"Failed to copy binary to {target}"):
            self.install_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, target)
        click.echo(f"Installed {executable} to {target}")
        return target


def _exe_name(name: str) -> str:
    return f"{name}.exe" if platform.system() == "Windows" else name


def _version_from_tag(tag: str) -> str:
    """``testnet-v1.39.3`` → ``1.39.3``; ``v0.0.8`` → ``0.0.8``."""
    version = tag.rsplit("-v", 1)[-1] if "-v" in tag else tag
    return version.lstrip("v")


def _find_member(names: list[str], wanted: str) -> str:
    for member in names:
        if Path(member).name == wanted:
            return member
    raise InstallationError(f"{wanted} not found in release archive")
