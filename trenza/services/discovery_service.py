"""
Repository discovery for trenza.

Finds every git repository below a root directory and returns them in a
deterministic order, which fixes the order they are merged in.
"""

import logging
import os
from pathlib import Path
from typing import List, Union

from ..domain.repository import SourceRepository
from ..exit_codes import DiscoveryError

logger = logging.getLogger(__name__)

GIT_MARKER = '.git'


def find_repositories(root: Union[str, Path]) -> List[SourceRepository]:
    """
    Find all git repositories below ``root``.

    The root itself is not a candidate. Repositories nested inside another
    repository's working tree are returned as separate entries; the
    ``.git`` directories themselves are never descended into.

    Args:
        root: Directory to scan

    Returns:
        Repositories sorted ascending by path string, without duplicates

    Raises:
        DiscoveryError: If the root is missing or a directory cannot be read
    """
    root = Path(root)
    if not root.is_dir():
        raise DiscoveryError(f"Root directory not found: {root}")

    def on_error(exc: OSError) -> None:
        raise DiscoveryError(f"Failed to scan {exc.filename}: {exc.strerror}") from exc

    found = set()
    for dirpath, dirs, files in os.walk(root, onerror=on_error):
        current = Path(dirpath)
        if GIT_MARKER in dirs:
            # Once we find a .git dir, don't go deeper into it
            dirs[:] = [d for d in dirs if d != GIT_MARKER]
            if current != root:
                found.add(current)
        elif GIT_MARKER in files and current != root:
            found.add(current)
        dirs.sort()

    repos = [
        SourceRepository.from_path(root, path)
        for path in sorted(found, key=str)
    ]
    logger.debug("Found %d repositories below %s", len(repos), root)
    return repos
