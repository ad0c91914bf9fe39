"""
Relocation of freshly merged repository content.

After ``git merge --allow-unrelated-histories`` a source repository's files
land at the top level of the joined repository, next to the directories of
repositories merged earlier. They are moved into the repository's alias
directory in two steps:

1. every new top-level entry is ``git mv``-ed into a staging directory and
   committed
2. the staging directory is renamed to the alias and the rename is amended
   into the same commit

Going through the staging directory makes repositories that contain a
directory with their own name (``googletest/googletest``) work: ``git mv
googletest googletest`` has no sensible meaning, ``git mv <staging>
googletest`` does.
"""

import logging
from pathlib import Path
from typing import AbstractSet, List, Union

from ..exit_codes import RelocationError
from ..infra.git_client import GitClient, GitCommandError

logger = logging.getLogger(__name__)

STAGING_DIR = "z_tmp_unique_target_directory_@@@"
ALWAYS_SKIPPED = frozenset({'.git', STAGING_DIR})
DEFAULT_COMMIT_MESSAGE = "Move {alias} repo contents"


def entries_to_move(target: Path, exclusions: AbstractSet[str]) -> List[str]:
    """Top-level names in ``target`` that belong to the repository just merged."""
    return sorted(
        entry.name
        for entry in target.iterdir()
        if entry.name not in ALWAYS_SKIPPED and entry.name not in exclusions
    )


def relocate_contents(
    target: Union[str, Path],
    alias: str,
    exclusions: AbstractSet[str],
    git: GitClient,
    commit_message: str = DEFAULT_COMMIT_MESSAGE,
) -> List[str]:
    """
    Move the newly merged top-level entries of ``target`` into ``alias``.

    Args:
        target: Working tree of the joined repository
        alias: Final directory of the repository's content, may contain ``/``
        exclusions: Top-level names of repositories placed earlier; read only
        git: Git client
        commit_message: Template for the move commit, ``{alias}`` is filled in

    Returns:
        The top-level names that were moved

    Raises:
        RelocationError: If a move, commit or directory creation fails
    """
    target = Path(target)
    staging = target / STAGING_DIR
    final = target / alias

    try:
        staging.mkdir(parents=True, exist_ok=True)
        entries = entries_to_move(target, exclusions)
    except OSError as e:
        raise RelocationError(f"Failed to prepare staging directory in {target}") from e

    if not entries:
        logger.warning("Repository %s brought no content to move", alias)
        staging.rmdir()
        return []

    logger.debug("Files to move to %s:", alias)
    for name in entries:
        logger.debug("  %s", name)

    try:
        git.mv(target, entries, f"{STAGING_DIR}/")
        git.commit(target, commit_message.format(alias=alias))
    except GitCommandError as e:
        raise RelocationError(f"Failed to move {alias} contents to staging directory") from e

    if '/' in alias:
        try:
            final.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RelocationError(f"Failed to create parent directory of {final}") from e

    try:
        git.mv(target, [STAGING_DIR], alias)
        git.commit_amend(target)
    except GitCommandError as e:
        raise RelocationError(f"Failed to move {alias} contents to {final}") from e

    return entries
