"""
Service layer for trenza.

Services contain the merge logic and orchestrate domain objects.
They use the infrastructure layer for git access.

- discovery_service: Finding repositories below a root
- target_service: Creating the joined repository
- branch_resolver: Choosing the ref to merge per repository
- relocation_service: Moving merged content into its alias directory
- merge_service: The sequential merge loop (RepoMerger)
- join_service: The whole join run (JoinService)
"""

from .discovery_service import find_repositories
from .target_service import create_joined_repo, joined_repo_path
from .branch_resolver import (
    BranchResolver,
    ExplicitBranchResolver,
    ManifestBranchResolver,
    select_resolver,
)
from .relocation_service import STAGING_DIR, relocate_contents
from .merge_service import RepoMerger, plan_merge
from .join_service import JoinOptions, JoinService

__all__ = [
    'find_repositories',
    'create_joined_repo',
    'joined_repo_path',
    'BranchResolver',
    'ExplicitBranchResolver',
    'ManifestBranchResolver',
    'select_resolver',
    'STAGING_DIR',
    'relocate_contents',
    'RepoMerger',
    'plan_merge',
    'JoinOptions',
    'JoinService',
]
