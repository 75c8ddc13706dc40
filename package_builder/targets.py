"""Target resolution.

Maps the human-readable ``--targets`` value to the concrete list of
(platform, init system, package format) triples to build.
"""

from __future__ import annotations

import logging

from package_builder.errors import UnknownTargetError
from package_builder.types import InitSystem, PackageFormat, Platform, Target

logger = logging.getLogger(__name__)

DARWIN_LAUNCHD_PKG = Target(Platform.DARWIN, InitSystem.LAUNCHD, PackageFormat.PKG)
LINUX_SYSTEMD_RPM = Target(Platform.LINUX, InitSystem.SYSTEMD, PackageFormat.RPM)
LINUX_SYSTEMD_DEB = Target(Platform.LINUX, InitSystem.SYSTEMD, PackageFormat.DEB)
LINUX_UPSTART_DEB = Target(Platform.LINUX, InitSystem.UPSTART, PackageFormat.DEB)

# Built when no targets are given, in this order
DEFAULT_TARGETS: tuple[Target, ...] = (
    DARWIN_LAUNCHD_PKG,
    LINUX_SYSTEMD_RPM,
    LINUX_SYSTEMD_DEB,
    LINUX_UPSTART_DEB,
)

# Tokens accepted in --targets; matched case-sensitively
TARGET_TOKENS: dict[str, Target] = {
    "rpm": LINUX_SYSTEMD_RPM,
    "deb": LINUX_SYSTEMD_DEB,
    "darwin": DARWIN_LAUNCHD_PKG,
}


def resolve_targets(spec: str) -> list[Target]:
    """Resolve a comma separated target specification.

    Repeated tokens yield repeated targets.

    Args:
        spec: Target specification, e.g. ``"darwin,rpm"``. Empty selects
            DEFAULT_TARGETS.

    Returns:
        Targets in specification order.

    Raises:
        UnknownTargetError: If any token is not in TARGET_TOKENS. No partial
            result is returned.
    """
    if not spec:
        return list(DEFAULT_TARGETS)

    targets: list[Target] = []
    for token in spec.split(","):
        try:
            targets.append(TARGET_TOKENS[token])
        except KeyError:
            raise UnknownTargetError(token) from None

    logger.debug("Resolved targets %r to %s", spec, [str(t) for t in targets])
    return targets


__all__ = ["DEFAULT_TARGETS", "TARGET_TOKENS", "resolve_targets"]
