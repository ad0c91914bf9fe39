"""
Shared fixtures for trenza tests.

Git-backed fixtures build real repositories in tmp_path. Tests that use
them are skipped when git is not installed.
"""

import os
import shutil
import subprocess
from pathlib import Path

import pytest

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


@pytest.fixture(autouse=True)
def isolated_env(tmp_path_factory, monkeypatch):
    """Keep user config and git identity out of the tests."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    for key in list(os.environ):
        if key.startswith("TRENZA_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")
    return home


def git(path: Path, *args: str) -> str:
    """Run git in ``path`` and return stdout, failing the test on error."""
    result = subprocess.run(
        ["git", "-C", str(path)] + list(args),
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


def create_repo(path: Path, files: dict, branch: str = "main", message: str = None) -> Path:
    """Create a git repository at ``path`` with one commit containing ``files``."""
    path.mkdir(parents=True)
    git(path, "init")
    git(path, "symbolic-ref", "HEAD", f"refs/heads/{branch}")
    for name, content in files.items():
        file_path = path / name
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)
    git(path, "add", ".")
    git(path, "commit", "-m", message or f"Initial {path.name}")
    return path


@pytest.fixture
def make_repo():
    return create_repo
