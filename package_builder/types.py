"""Shared type definitions for package_builder.

This module contains enums and dataclasses shared across subpackages to
avoid circular imports.
"""

from dataclasses import dataclass
from enum import Enum


class Platform(str, Enum):
    """Operating system a package is built for."""

    DARWIN = "darwin"
    LINUX = "linux"


class InitSystem(str, Enum):
    """Service manager the package installs into."""

    LAUNCHD = "launchd"
    SYSTEMD = "systemd"
    UPSTART = "upstart"


class PackageFormat(str, Enum):
    """Installer archive format."""

    PKG = "pkg"
    DEB = "deb"
    RPM = "rpm"


@dataclass(frozen=True)
class Target:
    """A buildable artifact kind.

    Targets are value objects: two targets with the same platform, init
    system and package format are equal.
    """

    platform: Platform
    init: InitSystem
    package: PackageFormat

    def __str__(self) -> str:
        return f"{self.platform.value}-{self.init.value}-{self.package.value}"

    @property
    def extension(self) -> str:
        """File extension of the produced package."""
        return self.package.value


@dataclass
class ArtifactInfo:
    """Information about a produced package file."""

    filename: str
    target: str
    path: str
    size_bytes: int
    sha256: str


__all__ = [
    "ArtifactInfo",
    "InitSystem",
    "PackageFormat",
    "Platform",
    "Target",
]
