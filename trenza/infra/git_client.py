"""
Git client infrastructure for trenza.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from the merge logic
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class GitResult:
    """Captured result of one git invocation."""
    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class GitCommandError(Exception):
    """A git command exited with a nonzero status."""

    def __init__(self, result: GitResult, cwd: PathLike):
        self.result = result
        self.cwd = str(cwd)
        stderr = result.stderr.strip() or result.stdout.strip()
        super().__init__(
            f"failed to run command `{' '.join(result.args)}` in {self.cwd}: {stderr}"
        )

    @property
    def returncode(self) -> int:
        return self.result.returncode

    @property
    def stderr(self) -> str:
        return self.result.stderr


class GitClient:
    """
    Abstraction over git commands.

    Every call blocks until git exits. Commands run with an argument list
    (never through a shell), so aliases and paths containing spaces or
    ``@`` are passed through untouched.

    Example:
        client = GitClient()
        client.init("/tmp/joined")
        client.remote_add("/tmp/joined", "libs/foo", "/src/libs/foo")
    """

    def __init__(self, executable: str = "git", timeout: Optional[int] = None):
        """
        Initialize GitClient.

        Args:
            executable: Name or path of the git binary
            timeout: Command timeout in seconds (default: None, wait forever)
        """
        self.executable = executable
        self.timeout = timeout

    def run(self, cwd: PathLike, args: Sequence[str], check: bool = True) -> GitResult:
        """
        Run a git command.

        Args:
            cwd: Working directory
            args: Arguments after the git executable
            check: Raise GitCommandError on non-zero exit

        Returns:
            GitResult with stdout, stderr and returncode
        """
        cmd = [self.executable] + list(args)
        logger.debug("Running in %s: %s", cwd, " ".join(cmd))
        completed = subprocess.run(
            cmd,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=self.timeout,
        )
        result = GitResult(
            args=cmd,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        if check and not result.ok:
            raise GitCommandError(result, cwd)
        return result

    def init(self, path: PathLike) -> GitResult:
        """Initialize an empty repository in ``path``."""
        return self.run(path, ["init"])

    def remote_add(self, path: PathLike, name: str, url: PathLike) -> GitResult:
        """Register ``url`` as remote ``name``."""
        return self.run(path, ["remote", "add", name, str(url)])

    def fetch(self, path: PathLike, remote: str) -> GitResult:
        """Fetch all refs of ``remote``."""
        return self.run(path, ["fetch", remote])

    def merge(self, path: PathLike, ref: str, allow_unrelated_histories: bool = False) -> GitResult:
        """Merge ``ref`` into the current branch."""
        args = ["merge", ref]
        if allow_unrelated_histories:
            args.append("--allow-unrelated-histories")
        return self.run(path, args)

    def mv(self, path: PathLike, sources: Sequence[str], destination: str) -> GitResult:
        """Move or rename tracked paths, keeping them as renames in the index."""
        return self.run(path, ["mv", "--", *sources, destination])

    def commit(self, path: PathLike, message: str) -> GitResult:
        return self.run(path, ["commit", "-m", message])

    def commit_amend(self, path: PathLike) -> GitResult:
        """Fold the staged changes into HEAD, keeping its message."""
        return self.run(path, ["commit", "--amend", "--no-edit"])

    def remote_branches(self, path: PathLike) -> str:
        """Return the raw ``git branch -r`` listing."""
        return self.run(path, ["branch", "-r"]).stdout

    def checkout(self, path: PathLike, branch: str) -> GitResult:
        return self.run(path, ["checkout", branch])

    def checkout_new_branch(self, path: PathLike, branch: str, start_point: str) -> GitResult:
        """Create ``branch`` at ``start_point`` and check it out."""
        return self.run(path, ["checkout", "-b", branch, start_point])
