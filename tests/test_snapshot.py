"""Tests for stagegate.snapshot.StagingArea."""

from pathlib import Path

import pytest

from conftest import git, stage
from stagegate.config import HookConfig
from stagegate.errors import GitError, SnapshotError
from stagegate.gate_types import StagedFile
from stagegate.git import select_files
from stagegate.snapshot import StagingArea, default_staging_root


class TestStagingArea:
    """Snapshot contents and lifecycle."""

    def test_snapshot_holds_staged_not_working_tree(self, repo: Path, tmp_path: Path):
        stage(repo, "src/App.php", "<?php // staged\n")
        (repo / "src" / "App.php").write_text("<?php // edited after add\n")
        root = tmp_path / "staging"

        with StagingArea(root, cwd=repo) as staging:
            staging.add_all(select_files(HookConfig(), repo))
            assert (root / "src" / "App.php").read_text() == "<?php // staged\n"
            assert staging.files == ["src/App.php"]

    def test_partially_staged_file_uses_index_content(self, repo: Path, tmp_path: Path):
        stage(repo, "a.php", "<?php\n$a = 1;\n")
        git(repo, "commit", "-q", "-m", "add a")
        stage(repo, "a.php", "<?php\n$a = 2;\n")
        (repo / "a.php").write_text("<?php\n$a = 2;\n$b = 3;\n")

        with StagingArea(tmp_path / "staging", cwd=repo) as staging:
            staging.add_all(select_files(HookConfig(), repo))
            assert (staging.root / "a.php").read_text() == "<?php\n$a = 2;\n"

    def test_binary_content_is_byte_identical(self, repo: Path, tmp_path: Path):
        data = bytes(range(256)) * 4
        (repo / "blob.php").write_bytes(data)
        git(repo, "add", "blob.php")

        with StagingArea(tmp_path / "staging", cwd=repo) as staging:
            staging.add_all(select_files(HookConfig(), repo))
            assert (staging.root / "blob.php").read_bytes() == data

    def test_stale_directory_is_replaced(self, repo: Path, tmp_path: Path):
        root = tmp_path / "staging"
        (root / "old").mkdir(parents=True)
        (root / "old" / "leftover.php").write_text("<?php // stale\n")

        with StagingArea(root, cwd=repo):
            assert root.is_dir()
            assert list(root.iterdir()) == []

    def test_removed_on_normal_exit(self, repo: Path, tmp_path: Path):
        root = tmp_path / "staging"
        with StagingArea(root, cwd=repo):
            assert root.exists()
        assert not root.exists()

    def test_removed_when_exception_propagates(self, repo: Path, tmp_path: Path):
        root = tmp_path / "staging"
        with pytest.raises(GitError):
            with StagingArea(root, cwd=repo) as staging:
                staging.add(StagedFile("a.php", "f" * 40, "A"))
        assert not root.exists()

    def test_refuses_paths_outside_root(self, repo: Path, tmp_path: Path):
        with StagingArea(tmp_path / "staging", cwd=repo) as staging:
            with pytest.raises(SnapshotError):
                staging.add(StagedFile("../escape.php", "f" * 40, "A"))
        assert not (tmp_path / "escape.php").exists()


def test_default_staging_root_inside_git_dir(tmp_path: Path):
    assert default_staging_root(tmp_path / ".git") == tmp_path / ".git" / "stagegate-staging"
