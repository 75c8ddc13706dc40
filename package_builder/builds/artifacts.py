"""Package artifact naming and description.

This module handles:
- Naming the output file of each target
- Computing checksums of produced packages
- Rendering a JSON summary of a build run
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict
from pathlib import Path

from package_builder.types import ArtifactInfo, Target

ARTIFACT_PREFIX = "launcher"

# Default chunk size for hashing
HASH_CHUNK_SIZE = 64 * 1024  # 64KB


def artifact_filename(target: Target) -> str:
    """Return the output file name for a target.

    Example: ``launcher.darwin-launchd-pkg.pkg``.
    """
    return f"{ARTIFACT_PREFIX}.{target}.{target.extension}"


def compute_file_hash(
    file_path: Path,
    chunk_size: int = HASH_CHUNK_SIZE,
) -> str:
    """Compute SHA-256 hash of a file.

    Args:
        file_path: Path to the file.
        chunk_size: Size of chunks for streaming hash.

    Returns:
        SHA-256 hex digest.
    """
    sha256 = hashlib.sha256()
    with file_path.open("rb") as f:
        while chunk := f.read(chunk_size):
            sha256.update(chunk)
    return sha256.hexdigest()


def describe_artifact(path: Path, target: Target) -> ArtifactInfo:
    """Build an ArtifactInfo for a finished package file."""
    return ArtifactInfo(
        filename=path.name,
        target=str(target),
        path=str(path),
        size_bytes=path.stat().st_size,
        sha256=compute_file_hash(path),
    )


def render_summary(output_dir: Path, artifacts: list[ArtifactInfo]) -> str:
    """Render the result of a build run as JSON.

    Args:
        output_dir: Directory holding the packages.
        artifacts: Produced packages, in build order.

    Returns:
        JSON string with ``output_dir`` and ``artifacts`` keys.
    """
    data = {
        "output_dir": str(output_dir),
        "artifacts": [asdict(a) for a in artifacts],
    }
    return json.dumps(data, indent=2)


__all__ = [
    "artifact_filename",
    "compute_file_hash",
    "describe_artifact",
    "render_summary",
]
