"""Packaging engine interface and the default command-line engine.

This module handles:
- The PackageEngine protocol the orchestrator builds against
- Composing the external packager command line from build options
- Executing the packager with its stdout streamed into the package file
- Enforcing an optional per-call timeout

The engine owns package construction: init scripts, binaries, signing and
the archive format are all its concern.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from typing import TYPE_CHECKING, BinaryIO, Protocol

from package_builder.errors import EngineError

if TYPE_CHECKING:
    from package_builder.options import BuildOptions
    from package_builder.types import Target

logger = logging.getLogger(__name__)

# Keep the end of the packager's stderr in error messages
STDERR_TAIL_BYTES = 2048

# (flag, BuildOptions attribute) in command order
_STRING_FLAGS = [
    ("--hostname", "hostname"),
    ("--package_version", "package_version"),
    ("--osquery_version", "osquery_version"),
    ("--launcher_version", "launcher_version"),
    ("--extension_version", "extension_version"),
    ("--enroll_secret", "enroll_secret"),
    ("--update_channel", "update_channel"),
    ("--control_hostname", "control_hostname"),
    ("--identifier", "identifier"),
    ("--cert_pins", "cert_pins"),
    ("--root_pem", "root_pem"),
    ("--signing_key", "signing_key"),
]
_BOOL_FLAGS = [
    ("--insecure", "insecure"),
    ("--insecure_grpc", "insecure_grpc"),
    ("--autoupdate", "autoupdate"),
    ("--control", "control"),
    ("--disable_control_tls", "disable_control_tls"),
    ("--with_initial_runner", "initial_runner"),
    ("--omit_secret", "omit_secret"),
]


class PackageEngine(Protocol):
    """Builds one package artifact.

    Implementations must either write a complete package for ``target`` to
    ``output`` or raise.
    """

    def build(self, options: BuildOptions, output: BinaryIO, target: Target) -> None:
        ...


def compose_engine_command(
    executable: str,
    options: BuildOptions,
    target: Target,
) -> list[str]:
    """Compose the packager command line.

    Args:
        executable: Packager executable.
        options: Build options.
        target: Target to build.

    Returns:
        Command as list of strings suitable for subprocess.
    """
    cmd = [executable, "build", "--target", str(target)]
    cmd.extend(["--cache_dir", str(options.cache_dir)])

    for flag, attr in _STRING_FLAGS:
        value = getattr(options, attr)
        if value:
            cmd.extend([flag, value])

    for flag, attr in _BOOL_FLAGS:
        if getattr(options, attr):
            cmd.append(flag)

    return cmd


def redact_command(cmd: list[str]) -> str:
    """Render a command for logging with the enroll secret masked."""
    shown = list(cmd)
    for i, part in enumerate(shown[:-1]):
        if part == "--enroll_secret":
            shown[i + 1] = "****"
    return shlex.join(shown)


class CommandEngine:
    """Runs an external packager once per target.

    The packager writes the finished package to stdout, which is redirected
    into the output file. Its stderr is captured for error reporting.
    """

    def __init__(self, executable: str, timeout: int | None = None) -> None:
        self.executable = executable
        self.timeout = timeout

    def build(self, options: BuildOptions, output: BinaryIO, target: Target) -> None:
        """Run the packager for one target.

        Raises:
            EngineError: If the packager cannot be started, times out or
                exits non-zero.
        """
        cmd = compose_engine_command(self.executable, options, target)
        logger.info("Executing packager: %s", redact_command(cmd))

        try:
            result = subprocess.run(
                cmd,
                stdout=output,
                stderr=subprocess.PIPE,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise EngineError(
                f"packager timed out after {self.timeout} seconds",
                exit_code=-1,
                code="engine_timeout",
            ) from e
        except OSError as e:
            raise EngineError(
                f"Failed to execute packager: {e}",
                code="execution_error",
            ) from e

        if result.returncode != 0:
            stderr = (result.stderr or b"")[-STDERR_TAIL_BYTES:]
            detail = stderr.decode("utf-8", errors="replace").strip()
            message = f"packager failed with exit code {result.returncode}"
            if detail:
                message = f"{message}: {detail}"
            logger.error(message)
            raise EngineError(message, exit_code=result.returncode)


__all__ = [
    "CommandEngine",
    "PackageEngine",
    "compose_engine_command",
    "redact_command",
]
