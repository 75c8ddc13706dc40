"""Workspace management for a build invocation.

This module handles:
- Choosing the download cache directory (caller supplied or temporary)
- Choosing the package output directory (caller supplied or temporary)
- Removing a temporary cache directory on every exit path

A temporary output directory is never removed: it holds the packages.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from package_builder.errors import WorkspaceError

logger = logging.getLogger(__name__)

CACHE_DIR_PREFIX = "download_cache"
OUTPUT_DIR_PREFIX = "launcher-package"
DIR_MODE = 0o755


@dataclass(frozen=True)
class Workspace:
    """Directories used by one invocation.

    Attributes:
        cache_dir: Download cache shared by all target builds.
        output_dir: Directory receiving the package files.
        cache_is_temporary: Cache dir was generated and is removed on exit.
        output_is_temporary: Output dir was generated (kept on exit).
    """

    cache_dir: Path
    output_dir: Path
    cache_is_temporary: bool = False
    output_is_temporary: bool = False


def _make_temp_dir(prefix: str, tmp_dir: Path | None) -> Path:
    try:
        return Path(tempfile.mkdtemp(prefix=prefix, dir=tmp_dir))
    except OSError as e:
        raise WorkspaceError(
            f"could not create temp dir for {prefix}: {e}", path=tmp_dir
        ) from e


def _ensure_dir(path: Path) -> Path:
    try:
        path.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
    except OSError as e:
        raise WorkspaceError(f"mkdir {path}: {e}", path=path) from e
    if not path.is_dir():
        raise WorkspaceError(f"not a directory: {path}", path=path)
    return path


@contextmanager
def prepare_workspace(
    cache_dir: Path | str | None = None,
    output_dir: Path | str | None = None,
    tmp_dir: Path | None = None,
) -> Iterator[Workspace]:
    """Establish the cache and output directories.

    Args:
        cache_dir: Caller supplied cache directory. Empty or None allocates a
            temporary one that is removed when the context exits.
        output_dir: Caller supplied output directory. Empty or None allocates
            a temporary one that outlives the context.
        tmp_dir: Parent for generated directories (system default if None).

    Yields:
        Workspace with both directories present.

    Raises:
        WorkspaceError: If a directory cannot be created or the cache
            directory is not writable.
    """
    temp_cache: Path | None = None
    if cache_dir:
        cache_path = _ensure_dir(Path(cache_dir))
    else:
        temp_cache = _make_temp_dir(CACHE_DIR_PREFIX, tmp_dir)
        cache_path = temp_cache
        logger.debug("Allocated temporary cache dir: %s", cache_path)

    try:
        if not os.access(cache_path, os.W_OK):
            raise WorkspaceError(
                f"cache dir is not writable: {cache_path}", path=cache_path
            )

        if output_dir:
            output_path = _ensure_dir(Path(output_dir))
        else:
            output_path = _ensure_dir(_make_temp_dir(OUTPUT_DIR_PREFIX, tmp_dir))

        workspace = Workspace(
            cache_dir=cache_path,
            output_dir=output_path,
            cache_is_temporary=temp_cache is not None,
            output_is_temporary=not output_dir,
        )
        logger.info("Cache directory: %s", workspace.cache_dir)
        logger.info("Output directory: %s", workspace.output_dir)
        yield workspace
    finally:
        if temp_cache is not None:
            logger.debug("Removing temporary cache dir: %s", temp_cache)
            shutil.rmtree(temp_cache, ignore_errors=True)


__all__ = ["Workspace", "prepare_workspace"]
