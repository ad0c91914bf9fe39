"""
Creation of the joined (destination) repository.
"""

import logging
from pathlib import Path
from typing import Union

from ..exit_codes import InitializationError
from ..infra.git_client import GitClient, GitCommandError

logger = logging.getLogger(__name__)


def joined_repo_path(root: Union[str, Path], suffix: str) -> Path:
    """Destination path: the root path with ``suffix`` appended to its name."""
    return Path(f"{str(root).rstrip('/')}{suffix}")


def create_joined_repo(target: Union[str, Path], git: GitClient) -> Path:
    """
    Create ``target`` as a new directory and ``git init`` it.

    Merging into an existing destination is not supported, so the directory
    must not exist yet.

    Raises:
        InitializationError: If the target exists or cannot be initialized
    """
    target = Path(target)
    try:
        target.mkdir()
    except FileExistsError as e:
        raise InitializationError(f"Target repository already exists: {target}") from e
    except OSError as e:
        raise InitializationError(f"Failed to create {target}: {e.strerror}") from e

    try:
        git.init(target)
    except GitCommandError as e:
        raise InitializationError(f"Failed to initialize repository in {target}") from e

    logger.debug("Initialized joined repository at %s", target)
    return target
