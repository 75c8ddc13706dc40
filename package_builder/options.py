"""Build options and their validation.

BuildOptions is the immutable bundle describing what agent configuration is
embedded in every package produced by one invocation. Validation runs before
any directory is created, so a bad hostname or pin fails fast.
"""

from __future__ import annotations

import binascii
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from package_builder.errors import CertPinError, ConfigurationError

if TYPE_CHECKING:
    from package_builder.config import Settings

logger = logging.getLogger(__name__)


class BuildOptions(BaseModel):
    """Parameters shared read-only by every target build.

    Attributes:
        package_version: Version of the resulting package (blank: autodetect).
        osquery_version: osquery channel or filesystem path.
        launcher_version: launcher channel or filesystem path.
        extension_version: osquery extension channel or filesystem path.
        hostname: Hostname of the gRPC server.
        enroll_secret: Enrollment secret.
        cert_pins: Comma separated hex SHA256 SPKI pins, as given.
        root_pem: Path to a PEM bundle of root certificates.
        cache_dir: Download cache shared by all target builds.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    package_version: str = ""
    osquery_version: str = "stable"
    launcher_version: str = "stable"
    extension_version: str = "stable"

    hostname: str = Field(min_length=1)
    enroll_secret: str = ""
    cert_pins: str = ""
    root_pem: str = ""
    insecure: bool = False
    insecure_grpc: bool = False

    autoupdate: bool = False
    update_channel: str = ""
    control: bool = False
    control_hostname: str = ""
    disable_control_tls: bool = False
    initial_runner: bool = False
    omit_secret: bool = False

    identifier: str = "launcher"

    cache_dir: Path
    signing_key: str = ""

    @property
    def pins(self) -> list[str]:
        """Non-empty certificate pins."""
        return [p for p in self.cert_pins.split(",") if p]


def validate_hostname(hostname: str) -> str:
    """Ensure a server hostname was given.

    Raises:
        ConfigurationError: If the hostname is empty.
    """
    if not hostname:
        raise ConfigurationError("Hostname undefined")
    return hostname


def parse_cert_pins(raw: str) -> list[str]:
    """Split and validate a comma separated list of hex pins.

    An empty string yields a single empty token, which is accepted.

    Args:
        raw: Raw flag value.

    Returns:
        The tokens, in order.

    Raises:
        CertPinError: If a token is not valid hex.
    """
    tokens = raw.split(",")
    for pin in tokens:
        try:
            binascii.unhexlify(pin)
        except (binascii.Error, ValueError) as e:
            raise CertPinError(pin, str(e)) from e
    return tokens


def validate_settings(settings: Settings) -> None:
    """Check the settings invariants that need no filesystem access."""
    validate_hostname(settings.hostname)
    parse_cert_pins(settings.cert_pins)


def build_options(settings: Settings, cache_dir: Path) -> BuildOptions:
    """Assemble the immutable build options for one invocation.

    Args:
        settings: Effective settings.
        cache_dir: Prepared download cache directory.

    Returns:
        BuildOptions instance.

    Raises:
        ConfigurationError: If the hostname is empty or a pin is malformed.
    """
    validate_settings(settings)
    options = BuildOptions(
        package_version=settings.package_version,
        osquery_version=settings.osquery_version,
        launcher_version=settings.launcher_version,
        extension_version=settings.extension_version,
        hostname=settings.hostname,
        enroll_secret=settings.enroll_secret,
        cert_pins=settings.cert_pins,
        root_pem=settings.root_pem,
        insecure=settings.insecure,
        insecure_grpc=settings.insecure_grpc,
        autoupdate=settings.autoupdate,
        update_channel=settings.update_channel,
        control=settings.control,
        control_hostname=settings.control_hostname,
        disable_control_tls=settings.disable_control_tls,
        initial_runner=settings.with_initial_runner,
        omit_secret=settings.omit_secret,
        identifier=settings.identifier,
        cache_dir=cache_dir,
        signing_key=settings.mac_package_signing_key,
    )
    logger.debug(
        "Build options: hostname=%s identifier=%s pins=%d",
        options.hostname,
        options.identifier,
        len(options.pins),
    )
    return options


__all__ = [
    "BuildOptions",
    "build_options",
    "parse_cert_pins",
    "validate_hostname",
    "validate_settings",
]
