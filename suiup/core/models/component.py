"""
Component model — the closed sets of binaries and networks, and the
parsed ``name@network-version`` descriptor.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from suiup.core.errors import ValidationError

# Network bucket for components whose releases are not network-scoped.
STANDALONE = "standalone"


class Network(StrEnum):
    """Release channels."""

    TESTNET = "testnet"
    DEVNET = "devnet"
    MAINNET = "mainnet"

    @classmethod
    def all(cls) -> list[Network]:
        return list(cls)

    @classmethod
    def try_from_str(cls, value: str) -> Network:
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(n.value for n in cls.all())
            raise ValidationError(
                f"Invalid network: '{value}'. Valid networks are: {valid}"
            ) from None


class Repo(StrEnum):
    """GitHub repositories that publish the release archives."""

    SUI = "MystenLabs/sui"
    MVR = "MystenLabs/mvr"
    WALRUS = "MystenLabs/walrus"
    WALRUS_SITES = "MystenLabs/walrus-sites"


class BinaryName(StrEnum):
    """The four managed components."""

    PRIMARY = "primary"
    PACKAGE_REGISTRY = "package-registry"
    STORAGE = "storage"
    SITE_BUILDER = "site-builder"

    @classmethod
    def all(cls) -> list[BinaryName]:
        return list(cls)

    @classmethod
    def try_from_str(cls, value: str) -> BinaryName:
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(b.value for b in cls.all())
            raise ValidationError(
                f"Invalid binary: '{value}'. Valid binaries are: {valid}"
            ) from None

    @property
    def repo(self) -> Repo:
        return _REPOS[self]

    @property
    def executable(self) -> str:
        """File name of the binary inside a release archive."""
        return _EXECUTABLES[self]

    def network_bucket(self, network: str) -> str:
        """Sub-directory of ``binaries_dir()`` this component installs into.

        primary and storage follow the requested network, site-builder is
        only published for mainnet, package-registry is not network-scoped.
        """
        if self is BinaryName.SITE_BUILDER:
            return Network.MAINNET.value
        if self is BinaryName.PACKAGE_REGISTRY:
            return STANDALONE
        return network


_REPOS: dict[BinaryName, Repo] = {
    BinaryName.PRIMARY: Repo.SUI,
    BinaryName.PACKAGE_REGISTRY: Repo.MVR,
    BinaryName.STORAGE: Repo.WALRUS,
    BinaryName.SITE_BUILDER: Repo.WALRUS_SITES,
}

_EXECUTABLES: dict[BinaryName, str] = {
    BinaryName.PRIMARY: "sui",
    BinaryName.PACKAGE_REGISTRY: "mvr",
    BinaryName.STORAGE: "walrus",
    BinaryName.SITE_BUILDER: "site-builder",
}


@dataclass(frozen=True)
class ComponentSpec:
    """A parsed component descriptor: ``{name, network, version}``."""

    name: BinaryName
    network: str
    version: str | None = None

    def __str__(self) -> str:
        if self.network == STANDALONE:
            return f"{self.name}@{self.version}" if self.version else str(self.name)
        if self.version:
            return f"{self.name}@{self.network}-{self.version}"
        return f"{self.name}@{self.network}"

    def to_dict(self) -> dict:
        return {
            "name": self.name.value,
            "network": self.network,
            "version": self.version,
        }
