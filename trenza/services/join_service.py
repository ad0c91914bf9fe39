"""
Join service for trenza.

Top-level orchestration of ``trenza join``: discover the repositories below
a root, create the joined repository next to it, and merge every
repository into it. Failures of each stage are re-raised with context so
the CLI can print the whole chain.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Generator, Optional

from ..config import get_setting, load_config
from ..domain.operation import JoinSummary
from ..exit_codes import CommandError, GENERAL_ERROR, JoinError
from ..infra.git_client import GitClient
from .branch_resolver import MANIFEST_BRANCH_PATTERN, TAG_BRANCH, select_resolver
from .discovery_service import find_repositories
from .merge_service import RepoMerger, plan_merge
from .relocation_service import DEFAULT_COMMIT_MESSAGE
from .target_service import create_joined_repo, joined_repo_path

logger = logging.getLogger(__name__)


@dataclass
class JoinOptions:
    """Options for a join run."""
    root: str
    suffix: str = "_joined"
    branch: Optional[str] = None
    dry_run: bool = False


def _wrap(message: str, exc: Exception) -> JoinError:
    exit_code = exc.exit_code if isinstance(exc, CommandError) else GENERAL_ERROR
    return JoinError(message, exit_code)


class JoinService:
    """
    Service joining all repositories below a root into one repository.

    Example:
        service = JoinService()
        options = JoinOptions(root="/src/checkout", branch="main")

        for progress in service.join(options):
            print(progress)

        result = service.last_result
        print(f"Merged {result.merged} repos into {result.target}")
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        git_client: Optional[GitClient] = None
    ):
        """
        Initialize JoinService.

        Args:
            config: Configuration dict (loads default if None)
            git_client: GitClient instance (created from config if None)
        """
        self.config = config or load_config()
        self.git = git_client or GitClient(
            executable=get_setting(self.config, 'git', 'executable') or 'git',
            timeout=self.config.get('git', {}).get('timeout'),
        )
        self.last_result: Optional[JoinSummary] = None

    def join(self, options: JoinOptions) -> Generator[str, None, JoinSummary]:
        """
        Merge every repository below ``options.root`` into ``root + suffix``.

        Yields:
            Progress messages

        Returns:
            JoinSummary with one detail per repository

        Raises:
            JoinError: Wrapping the failure of the stage that broke the run
        """
        # Remotes are registered from inside the target, so paths must be absolute
        root = str(Path(options.root).expanduser().absolute())
        target = joined_repo_path(root, options.suffix)
        logger.info("Repositories below %s will be merged to %s", root, target)

        try:
            repos = find_repositories(root)
        except Exception as e:
            raise _wrap("failed to find repositories", e) from e
        yield f"Found {len(repos)} repositories to merge"

        if options.dry_run:
            if target.exists():
                yield f"Target {target} already exists, a real run would fail"
            result = plan_merge(repos, root, str(target))
            self.last_result = result
            return result

        try:
            create_joined_repo(target, self.git)
        except Exception as e:
            raise _wrap("failed to create target repository", e) from e

        resolver = select_resolver(
            self.git,
            branch=str(options.branch) if options.branch is not None else None,
            pattern=get_setting(self.config, 'manifest', 'pattern') or MANIFEST_BRANCH_PATTERN,
            tag_branch=get_setting(self.config, 'manifest', 'tag_branch') or TAG_BRANCH,
        )
        merger = RepoMerger(
            target,
            resolver,
            self.git,
            commit_message=get_setting(self.config, 'join', 'commit_message') or DEFAULT_COMMIT_MESSAGE,
            root=root,
        )

        try:
            result = yield from merger.merge_repos(repos)
        except Exception as e:
            self.last_result = merger.last_result
            raise _wrap("failed to merge repositories", e) from e

        self.last_result = result
        return result
