"""
Branch resolution for source repositories.

Before a repository is merged, the ref to merge has to exist as a local
branch in the source repository so that fetching it as a remote makes it
available as ``<alias>/<ref>``. Two strategies exist:

- ExplicitBranchResolver: the same branch name for every repository
- ManifestBranchResolver: the branch or tag a manifest checkout points at,
  read from the ``m/<manifest> -> <ref>`` line of ``git branch -r``

The strategy is picked once per run with ``select_resolver()``.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Optional, Pattern, Union

from ..domain.repository import BranchResolution, SourceRepository
from ..exit_codes import BranchResolutionError
from ..infra.git_client import GitClient, GitCommandError

logger = logging.getLogger(__name__)

MANIFEST_BRANCH_PATTERN = r"m/\S* -> (\S*)"
TAG_BRANCH = "tmp_join_branch"


class BranchResolver(ABC):
    """Determines, per source repository, which ref to merge."""

    def __init__(self, git: GitClient):
        self.git = git

    @abstractmethod
    def resolve(self, repo: SourceRepository) -> BranchResolution:
        """
        Prepare the merge ref inside ``repo``.

        May check out a different branch in the source repository.

        Raises:
            BranchResolutionError: If no ref can be prepared
        """

    def _checkout(self, repo: SourceRepository, branch: str) -> None:
        try:
            self.git.checkout(repo.path, branch)
        except GitCommandError as e:
            raise BranchResolutionError(
                f"Failed to check out branch {branch} in {repo.path}"
            ) from e


class ExplicitBranchResolver(BranchResolver):
    """Checks out the same, caller-supplied branch in every repository."""

    def __init__(self, git: GitClient, branch: str):
        super().__init__(git)
        self.branch = branch

    def resolve(self, repo: SourceRepository) -> BranchResolution:
        self._checkout(repo, self.branch)
        return BranchResolution(ref=self.branch)


class ManifestBranchResolver(BranchResolver):
    """
    Uses the branch or tag that the manifest remote points at.

    A pointer such as ``m/main -> origin/release-1.0`` names a branch: the
    part after the last ``/`` is checked out. A pointer without a ``/``,
    such as ``m/main -> v1.2``, names a tag: a temporary branch is created
    on it and merged instead.
    """

    def __init__(
        self,
        git: GitClient,
        pattern: Union[str, Pattern[str]] = MANIFEST_BRANCH_PATTERN,
        tag_branch: str = TAG_BRANCH,
    ):
        super().__init__(git)
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        self.tag_branch = tag_branch

    def manifest_ref(self, remote_branches: str) -> Optional[str]:
        """Return the ref the manifest pointer targets, or None if there is none."""
        match = self.pattern.search(remote_branches)
        if not match:
            return None
        return match.group(1)

    def resolve(self, repo: SourceRepository) -> BranchResolution:
        try:
            remote_branches = self.git.remote_branches(repo.path)
        except GitCommandError as e:
            raise BranchResolutionError(
                f"Failed to list remote branches in {repo.path}"
            ) from e

        target = self.manifest_ref(remote_branches)
        if not target:
            raise BranchResolutionError(f"Failed to find manifest branch in {repo.path}")

        if '/' in target:
            branch = target.rsplit('/', 1)[1]
            if not branch:
                raise BranchResolutionError(
                    f"Failed to identify manifest branch from {target!r} in {repo.path}"
                )
            self._checkout(repo, branch)
            return BranchResolution(ref=branch)

        # The manifest points to a tag
        try:
            self.git.checkout_new_branch(repo.path, self.tag_branch, target)
        except GitCommandError:
            # TODO: verify the existing branch still points at the tag before reusing it
            logger.warning(
                "Join branch %s created from tag already exists in %s, continuing...",
                self.tag_branch, repo.path,
            )
        return BranchResolution(ref=self.tag_branch, from_tag=True)


def select_resolver(
    git: GitClient,
    branch: Optional[str] = None,
    pattern: Union[str, Pattern[str]] = MANIFEST_BRANCH_PATTERN,
    tag_branch: str = TAG_BRANCH,
) -> BranchResolver:
    """Pick the strategy for a whole run: explicit if a branch was given."""
    if branch:
        return ExplicitBranchResolver(git, branch)
    return ManifestBranchResolver(git, pattern=pattern, tag_branch=tag_branch)
