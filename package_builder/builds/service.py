"""Build service module.

This module provides the high-level build API:
- build_all(): build every target in order, stopping at the first failure
- make_packages(): main entry point - validate, prepare workspace, resolve
  targets and build

Targets are built one at a time. A failure aborts the run; packages already
written stay in the output directory, and so does the file of the failing
target.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from package_builder.builds.artifacts import artifact_filename, describe_artifact
from package_builder.errors import BuildError
from package_builder.options import build_options, validate_settings
from package_builder.targets import resolve_targets
from package_builder.workspace import prepare_workspace

if TYPE_CHECKING:
    from package_builder.builds.engine import PackageEngine
    from package_builder.config import Settings
    from package_builder.options import BuildOptions
    from package_builder.types import ArtifactInfo, Target

logger = logging.getLogger(__name__)


@dataclass
class BuildReport:
    """Result of a make run.

    Attributes:
        output_dir: Directory holding the packages.
        artifacts: Produced packages, in build order.
    """

    output_dir: Path
    artifacts: list[ArtifactInfo] = field(default_factory=list)


def build_target(
    options: BuildOptions,
    target: Target,
    output_dir: Path,
    engine: PackageEngine,
) -> ArtifactInfo:
    """Build a single target into ``output_dir``.

    Raises:
        BuildError: If the output file cannot be created or the engine fails.
    """
    output_path = output_dir / artifact_filename(target)
    logger.info("Building %s -> %s", target, output_path)

    try:
        output_file = output_path.open("wb")
    except OSError as e:
        raise BuildError(
            f"Failed to make package output file: {e}",
            target=target,
            stage="create_output",
        ) from e

    with output_file:
        try:
            engine.build(options, output_file, target)
        except Exception as e:
            logger.error("Build of %s failed: %s", target, e)
            raise BuildError(
                f"could not generate packages: {e}",
                target=target,
                stage="build",
            ) from e

    try:
        artifact = describe_artifact(output_path, target)
    except OSError as e:
        raise BuildError(
            f"could not read package output file: {e}",
            target=target,
            stage="describe",
        ) from e
    logger.info(
        "Built %s (%d bytes, sha256=%s)",
        artifact.filename,
        artifact.size_bytes,
        artifact.sha256[:16],
    )
    return artifact


def build_all(
    options: BuildOptions,
    targets: list[Target],
    output_dir: Path,
    engine: PackageEngine,
) -> list[ArtifactInfo]:
    """Build every target in order.

    Args:
        options: Build options shared by all targets.
        targets: Targets to build; duplicates are built again.
        output_dir: Existing directory receiving the packages.
        engine: Packaging engine.

    Returns:
        ArtifactInfo for each target, in order.

    Raises:
        BuildError: On the first failing target. Later targets are not
            attempted.
    """
    artifacts: list[ArtifactInfo] = []
    for target in targets:
        artifacts.append(build_target(options, target, output_dir, engine))
    return artifacts


def make_packages(settings: Settings, engine: PackageEngine) -> BuildReport:
    """Run a complete make invocation.

    Options are validated before any directory is created. A generated
    cache directory is removed when this returns or raises; a generated
    output directory is kept.

    Args:
        settings: Effective settings.
        engine: Packaging engine.

    Returns:
        BuildReport with the output directory and produced packages.

    Raises:
        ConfigurationError: For invalid options, targets or directories.
        BuildError: If a target fails to build.
    """
    validate_settings(settings)

    with prepare_workspace(
        cache_dir=settings.cache_dir,
        output_dir=settings.output_dir,
        tmp_dir=settings.tmp_dir,
    ) as workspace:
        options = build_options(settings, workspace.cache_dir)
        targets = resolve_targets(settings.targets)
        logger.info("Building %d target(s)", len(targets))

        artifacts = build_all(options, targets, workspace.output_dir, engine)

    return BuildReport(output_dir=workspace.output_dir, artifacts=artifacts)


__all__ = ["BuildReport", "build_all", "build_target", "make_packages"]
