"""
Tests for the two-phase content relocation.
"""

from unittest.mock import MagicMock

import pytest

from trenza.exit_codes import RelocationError
from trenza.infra.git_client import GitClient, GitCommandError, GitResult
from trenza.services.relocation_service import (
    STAGING_DIR,
    entries_to_move,
    relocate_contents,
)
from conftest import create_repo, git, requires_git


def _merge_into(target, source, branch="main"):
    """Bring ``source`` into ``target``'s top level the way the merger does."""
    git(target, "remote", "add", source.name, str(source))
    git(target, "fetch", source.name)
    git(target, "merge", f"{source.name}/{branch}", "--allow-unrelated-histories")


@pytest.fixture
def target(tmp_path):
    path = tmp_path / "joined"
    path.mkdir()
    git(path, "init")
    return path


class TestEntriesToMove:

    def test_skips_git_staging_and_exclusions(self, tmp_path):
        for name in [".git", STAGING_DIR, "placed", "b.txt", "a"]:
            (tmp_path / name).mkdir()

        assert entries_to_move(tmp_path, {"placed"}) == ["a", "b.txt"]


class TestRelocateContentsMocked:

    def test_nothing_to_move_skips_commits(self, tmp_path):
        (tmp_path / ".git").mkdir()
        mock_git = MagicMock(spec=GitClient)

        moved = relocate_contents(tmp_path, "empty", set(), mock_git)

        assert moved == []
        assert not (tmp_path / STAGING_DIR).exists()
        mock_git.mv.assert_not_called()
        mock_git.commit.assert_not_called()

    def test_call_sequence(self, tmp_path):
        (tmp_path / ".git").mkdir()
        (tmp_path / "src").mkdir()
        (tmp_path / "README.md").write_text("x")
        mock_git = MagicMock(spec=GitClient)

        relocate_contents(tmp_path, "group/repo", set(), mock_git, commit_message="Move {alias}")

        mock_git.mv.assert_any_call(tmp_path, ["README.md", "src"], f"{STAGING_DIR}/")
        mock_git.commit.assert_called_once_with(tmp_path, "Move group/repo")
        mock_git.mv.assert_called_with(tmp_path, [STAGING_DIR], "group/repo")
        mock_git.commit_amend.assert_called_once_with(tmp_path)
        assert (tmp_path / "group").is_dir()

    def test_move_failure_raises(self, tmp_path):
        (tmp_path / "file").write_text("x")
        mock_git = MagicMock(spec=GitClient)
        mock_git.mv.side_effect = GitCommandError(GitResult(args=["git", "mv"], returncode=128, stderr="bad source"), tmp_path)

        with pytest.raises(RelocationError) as excinfo:
            relocate_contents(tmp_path, "repo", set(), mock_git)

        assert "bad source" in str(excinfo.value.__cause__)


@requires_git
class TestRelocateContentsReal:

    def test_ordinary_case(self, tmp_path, target):
        source = create_repo(tmp_path / "alpha", {"README.md": "alpha\n", "src/main.c": "int main;\n"})
        _merge_into(target, source)

        moved = relocate_contents(target, "alpha", set(), GitClient())

        assert moved == ["README.md", "src"]
        assert (target / "alpha" / "README.md").read_text() == "alpha\n"
        assert (target / "alpha" / "src" / "main.c").exists()
        assert not (target / STAGING_DIR).exists()
        assert not (target / "README.md").exists()
        tracked = git(target, "ls-files").split()
        assert all(STAGING_DIR not in path for path in tracked)

    def test_self_collision(self, tmp_path, target):
        source = create_repo(tmp_path / "repoX", {"repoX/inner.txt": "inner\n", "top.txt": "top\n"})
        _merge_into(target, source)

        relocate_contents(target, "repoX", set(), GitClient())

        assert (target / "repoX" / "repoX" / "inner.txt").read_text() == "inner\n"
        assert (target / "repoX" / "top.txt").exists()
        assert not (target / STAGING_DIR).exists()

    def test_single_commit_per_relocation(self, tmp_path, target):
        source = create_repo(tmp_path / "alpha", {"README.md": "alpha\n"})
        _merge_into(target, source)

        relocate_contents(target, "alpha", set(), GitClient())

        subjects = git(target, "log", "--format=%s").splitlines()
        assert subjects == ["Move alpha repo contents", "Initial alpha"]

    def test_history_follows_rename(self, tmp_path, target):
        source = create_repo(tmp_path / "alpha", {"README.md": "alpha\n"})
        _merge_into(target, source)

        relocate_contents(target, "alpha", set(), GitClient())

        log = git(target, "log", "--follow", "--format=%s", "--", "alpha/README.md").splitlines()
        assert "Initial alpha" in log

    def test_exclusions_not_moved(self, tmp_path, target):
        first = create_repo(tmp_path / "first", {"a.txt": "a\n"})
        _merge_into(target, first)
        relocate_contents(target, "first", set(), GitClient())

        second = create_repo(tmp_path / "second", {"b.txt": "b\n"})
        _merge_into(target, second)
        moved = relocate_contents(target, "group/second", {"first"}, GitClient())

        assert moved == ["b.txt"]
        assert (target / "first" / "a.txt").exists()
        assert (target / "group" / "second" / "b.txt").exists()

    def test_entry_starting_with_dash(self, tmp_path, target):
        source = create_repo(tmp_path / "alpha", {"-n": "dash\n", "README.md": "alpha\n"})
        _merge_into(target, source)

        moved = relocate_contents(target, "alpha", set(), GitClient())

        assert moved == ["-n", "README.md"]
        assert (target / "alpha" / "-n").read_text() == "dash\n"
        assert not (target / "-n").exists()
