"""
trenza - Join git repositories into one monorepo.

Every git repository found below a root directory is merged into a new
repository created next to it, with its full history, and its content
moved into a subdirectory named after its path below the root.

Quick Start:
    from trenza import JoinOptions, JoinService

    service = JoinService()
    for message in service.join(JoinOptions(root="~/checkout", branch="main")):
        print(message)

    print(service.last_result.merged)

Command line:
    trenza join ~/checkout --branch main
"""

__version__ = "0.1.0"

# Domain objects
from .domain import (
    SourceRepository,
    BranchResolution,
    OperationStatus,
    MergeDetail,
    JoinSummary,
)

# Services
from .services import (
    find_repositories,
    create_joined_repo,
    select_resolver,
    relocate_contents,
    RepoMerger,
    JoinOptions,
    JoinService,
)

# Configuration
from .config import load_config, save_config

__all__ = [
    "__version__",
    "SourceRepository",
    "BranchResolution",
    "OperationStatus",
    "MergeDetail",
    "JoinSummary",
    "find_repositories",
    "create_joined_repo",
    "select_resolver",
    "relocate_contents",
    "RepoMerger",
    "JoinOptions",
    "JoinService",
    "load_config",
    "save_config",
]
