"""Tests for workspace module."""

import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from package_builder.errors import WorkspaceError
from package_builder.workspace import (
    CACHE_DIR_PREFIX,
    OUTPUT_DIR_PREFIX,
    prepare_workspace,
)


class TestSuppliedDirectories:
    """Tests for caller supplied directories."""

    def test_existing_dirs_kept(self, tmp_path: Path):
        """Supplied directories should survive the context."""
        cache = tmp_path / "cache"
        output = tmp_path / "out"
        cache.mkdir()
        output.mkdir()

        with prepare_workspace(cache, output) as ws:
            assert ws.cache_dir == cache
            assert ws.output_dir == output
            assert ws.cache_is_temporary is False
            assert ws.output_is_temporary is False

        assert cache.is_dir()
        assert output.is_dir()

    def test_missing_dirs_created(self, tmp_path: Path):
        """Supplied directories should be created with parents."""
        cache = tmp_path / "a" / "cache"
        output = tmp_path / "b" / "out"

        with prepare_workspace(str(cache), str(output)) as ws:
            assert ws.cache_dir.is_dir()
            assert ws.output_dir.is_dir()

        assert cache.is_dir()
        assert output.is_dir()

    def test_supplied_cache_kept_after_error(self, tmp_path: Path):
        """A supplied cache dir should survive a failure inside the context."""
        cache = tmp_path / "cache"
        with pytest.raises(RuntimeError):
            with prepare_workspace(cache, tmp_path / "out"):
                raise RuntimeError("boom")
        assert cache.is_dir()

    def test_output_path_is_a_file(self, tmp_path: Path):
        """A file where the output dir should be is a workspace error."""
        blocker = tmp_path / "out"
        blocker.write_text("not a dir")

        with pytest.raises(WorkspaceError) as exc_info:
            with prepare_workspace(tmp_path / "cache", blocker):
                pass
        assert exc_info.value.path == blocker
        assert exc_info.value.code == "workspace_error"

    def test_cache_path_under_a_file(self, tmp_path: Path):
        """An uncreatable cache dir is a workspace error."""
        blocker = tmp_path / "file"
        blocker.write_text("x")

        with pytest.raises(WorkspaceError):
            with prepare_workspace(blocker / "cache", tmp_path / "out"):
                pass


class TestTemporaryDirectories:
    """Tests for generated directories."""

    def test_temp_cache_removed(self, tmp_path: Path):
        """A generated cache dir should be removed on exit."""
        with prepare_workspace(None, tmp_path / "out", tmp_dir=tmp_path) as ws:
            cache = ws.cache_dir
            assert ws.cache_is_temporary is True
            assert cache.is_dir()
            assert cache.name.startswith(CACHE_DIR_PREFIX)
            (cache / "osquery.tar.gz").write_bytes(b"data")

        assert not cache.exists()

    def test_temp_cache_removed_on_error(self, tmp_path: Path):
        """A generated cache dir should be removed when the body raises."""
        with pytest.raises(RuntimeError):
            with prepare_workspace("", tmp_path / "out", tmp_dir=tmp_path) as ws:
                cache = ws.cache_dir
                raise RuntimeError("boom")

        assert not cache.exists()

    def test_temp_output_kept(self, tmp_path: Path):
        """A generated output dir should outlive the context."""
        with prepare_workspace(tmp_path / "cache", None, tmp_dir=tmp_path) as ws:
            output = ws.output_dir
            assert ws.output_is_temporary is True
            assert output.name.startswith(OUTPUT_DIR_PREFIX)

        assert output.is_dir()
        assert output.parent == tmp_path

    def test_temp_cache_removed_when_output_fails(self, tmp_path: Path):
        """The generated cache dir should be removed if output setup fails."""
        blocker = tmp_path / "out"
        blocker.write_text("x")
        created: list[Path] = []
        real_mkdtemp = tempfile.mkdtemp

        def recording_mkdtemp(*args, **kwargs):
            path = real_mkdtemp(*args, **kwargs)
            created.append(Path(path))
            return path

        with patch(
            "package_builder.workspace.tempfile.mkdtemp", side_effect=recording_mkdtemp
        ):
            with pytest.raises(WorkspaceError):
                with prepare_workspace(None, blocker, tmp_dir=tmp_path):
                    pass

        assert len(created) == 1
        assert not created[0].exists()

    def test_temp_dir_creation_failure(self, tmp_path: Path):
        """Failure to allocate a temp dir is a workspace error."""
        with patch(
            "package_builder.workspace.tempfile.mkdtemp",
            side_effect=OSError("no space left"),
        ):
            with pytest.raises(WorkspaceError) as exc_info:
                with prepare_workspace(None, tmp_path / "out"):
                    pass
        assert "no space left" in str(exc_info.value)

    def test_unwritable_cache(self, tmp_path: Path):
        """A cache dir that is not writable is a workspace error."""
        with patch("package_builder.workspace.os.access", return_value=False):
            with pytest.raises(WorkspaceError) as exc_info:
                with prepare_workspace(tmp_path / "cache", tmp_path / "out"):
                    pass
        assert "not writable" in str(exc_info.value)
