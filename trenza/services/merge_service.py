"""
Sequential merging of source repositories into the joined repository.

RepoMerger works through the sorted repository list one at a time:
resolve the merge ref, register the repository as a remote, fetch it,
merge it with unrelated histories allowed, relocate its content, and
remember its top-level directory so later relocations leave it alone.
"""

import logging
from pathlib import Path
from typing import Generator, Optional, Sequence, Set, Union

from ..domain.operation import JoinSummary, MergeDetail, OperationStatus
from ..domain.repository import SourceRepository
from ..exit_codes import RemoteError
from ..infra.git_client import GitClient, GitCommandError
from .branch_resolver import BranchResolver
from .relocation_service import DEFAULT_COMMIT_MESSAGE, relocate_contents

logger = logging.getLogger(__name__)


class RepoMerger:
    """
    Merges source repositories into one target, one after another.

    The merger owns the exclusion set: the top-level names already occupied
    by merged repositories. It only ever grows, by one entry per merged
    repository, and is handed to the relocator read-only.

    Example:
        merger = RepoMerger(target, resolver, git)
        for message in merger.merge_repos(repos):
            print(message)  # "[1/3] Merging libs/foo..."

        result = merger.last_result
        print(f"Merged {result.merged} repos")
    """

    def __init__(
        self,
        target: Union[str, Path],
        resolver: BranchResolver,
        git: Optional[GitClient] = None,
        commit_message: str = DEFAULT_COMMIT_MESSAGE,
        root: Union[str, Path] = "",
    ):
        self.target = Path(target)
        self.resolver = resolver
        self.git = git or resolver.git
        self.commit_message = commit_message
        self.root = str(root)
        self.exclusions: Set[str] = set()
        self.last_result: Optional[JoinSummary] = None

    def merge_repos(
        self,
        repos: Sequence[SourceRepository],
    ) -> Generator[str, None, JoinSummary]:
        """
        Merge ``repos`` in order.

        The first failure aborts the run; nothing is rolled back.

        Yields:
            Progress messages

        Returns:
            JoinSummary with one detail per merged repository
        """
        result = JoinSummary(root=self.root, target=str(self.target))
        self.last_result = result

        for index, repo in enumerate(repos, start=1):
            yield f"[{index}/{len(repos)}] Merging {repo.alias}..."
            try:
                detail = self.merge_repo(repo)
            except Exception as e:
                result.add_detail(MergeDetail(
                    repo_path=str(repo.path),
                    alias=repo.alias,
                    status=OperationStatus.FAILED,
                    error=str(e),
                ))
                raise
            result.add_detail(detail)

        return result

    def merge_repo(self, repo: SourceRepository) -> MergeDetail:
        """Merge and relocate a single repository."""
        logger.debug("Merging repo %s", repo.alias)

        resolution = self.resolver.resolve(repo)
        logger.debug("Using merge branch %s in source repository", resolution.ref)

        self._merge_remote(repo, resolution.ref)

        relocate_contents(
            self.target,
            repo.alias,
            self.exclusions,
            self.git,
            commit_message=self.commit_message,
        )

        # Exclude the merged repository from moves in subsequent merges
        self.exclusions.add(repo.top_level)

        logger.info("Merged repository %s (%s)", repo.alias, repo.path)
        return MergeDetail(
            repo_path=str(repo.path),
            alias=repo.alias,
            status=OperationStatus.SUCCESS,
            ref=resolution.ref,
            from_tag=resolution.from_tag,
        )

    def _merge_remote(self, repo: SourceRepository, ref: str) -> None:
        merge_ref = f"{repo.alias}/{ref}"
        try:
            self.git.remote_add(self.target, repo.alias, repo.path)
        except GitCommandError as e:
            raise RemoteError(f"Failed to add remote {repo.alias}") from e
        try:
            self.git.fetch(self.target, repo.alias)
        except GitCommandError as e:
            raise RemoteError(f"Failed to fetch remote {repo.alias}") from e
        try:
            self.git.merge(self.target, merge_ref, allow_unrelated_histories=True)
        except GitCommandError as e:
            raise RemoteError(f"Failed to merge {merge_ref}") from e


def plan_merge(repos: Sequence[SourceRepository], root: str, target: str) -> JoinSummary:
    """Describe what a join would do without touching any repository."""
    result = JoinSummary(root=root, target=target, dry_run=True)
    for repo in repos:
        result.add_detail(MergeDetail(
            repo_path=str(repo.path),
            alias=repo.alias,
            status=OperationStatus.DRY_RUN,
        ))
    return result
