"""Error types for package_builder.

Every error carries a short machine-readable ``code`` alongside the message.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from package_builder.types import Target


class PackageBuilderError(Exception):
    """Base error for package builder operations."""

    def __init__(self, message: str, code: str = "package_builder_error") -> None:
        super().__init__(message)
        self.code = code


class ConfigurationError(PackageBuilderError):
    """Raised when build options are missing or invalid."""

    def __init__(self, message: str, code: str = "config_error") -> None:
        super().__init__(message, code=code)


class CertPinError(ConfigurationError):
    """Raised when a certificate pin is not valid hex."""

    def __init__(self, pin: str, reason: str = "") -> None:
        message = f"unable to parse cert pins: {pin!r} is not valid hex"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, code="invalid_cert_pin")
        self.pin = pin


class UnknownTargetError(ConfigurationError):
    """Raised when a target token is not in the known vocabulary."""

    def __init__(self, token: str) -> None:
        super().__init__(f"Unknown target: {token}", code="unknown_target")
        self.token = token


class WorkspaceError(ConfigurationError):
    """Raised when the cache or output directory cannot be prepared."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message, code="workspace_error")
        self.path = path


class EngineError(PackageBuilderError):
    """Raised by the packaging engine when it cannot produce a package."""

    def __init__(
        self,
        message: str,
        exit_code: int | None = None,
        code: str = "engine_error",
    ) -> None:
        super().__init__(message, code=code)
        self.exit_code = exit_code


class BuildError(PackageBuilderError):
    """Raised when building a single target fails.

    Attributes:
        target: The target whose build failed.
        stage: Which step failed (``create_output``, ``build`` or ``describe``).
    """

    def __init__(self, message: str, target: Target, stage: str) -> None:
        super().__init__(f"{target}: {message}", code="build_failed")
        self.target = target
        self.stage = stage


__all__ = [
    "BuildError",
    "CertPinError",
    "ConfigurationError",
    "EngineError",
    "PackageBuilderError",
    "UnknownTargetError",
    "WorkspaceError",
]
