"""
Domain layer for trenza.

Contains pure domain objects with no I/O or side effects:
- SourceRepository: A repository discovered below the scan root
- BranchResolution: The ref chosen for merging one repository
- MergeDetail / JoinSummary: Results of a join run
"""

from .repository import SourceRepository, BranchResolution
from .operation import OperationStatus, MergeDetail, JoinSummary

__all__ = [
    'SourceRepository',
    'BranchResolution',
    'OperationStatus',
    'MergeDetail',
    'JoinSummary',
]
