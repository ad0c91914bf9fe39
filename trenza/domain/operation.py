"""
Operation result domain objects for trenza.

Provides standardized result types for the join operation, one detail per
source repository plus a summary for the whole run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class OperationStatus(Enum):
    """Status of an individual repository merge."""
    SUCCESS = "success"
    FAILED = "failed"
    DRY_RUN = "dry_run"


@dataclass
class MergeDetail:
    """
    Details of merging one source repository.

    Used to track what happened to each repo during the join.
    """
    repo_path: str
    alias: str
    status: OperationStatus
    ref: Optional[str] = None
    from_tag: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            'path': self.repo_path,
            'alias': self.alias,
            'status': self.status.value,
        }
        if self.ref:
            result['ref'] = self.ref
            result['from_tag'] = self.from_tag
        if self.error:
            result['error'] = self.error
        return result


@dataclass
class JoinSummary:
    """
    Summary of joining all repositories below a root.

    Collects statistics and details as the merger works through the
    sorted repository list.
    """
    root: str
    target: str
    total: int = 0
    merged: int = 0
    failed: int = 0
    dry_run: bool = False
    details: List[MergeDetail] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """True if no failures occurred."""
        return self.failed == 0

    def add_detail(self, detail: MergeDetail) -> None:
        """Add a merge detail and update counts."""
        self.details.append(detail)
        self.total += 1

        if detail.status in (OperationStatus.SUCCESS, OperationStatus.DRY_RUN):
            self.merged += 1
        elif detail.status == OperationStatus.FAILED:
            self.failed += 1
            if detail.error:
                self.errors.append(f"{detail.alias}: {detail.error}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'type': 'summary',
            'root': self.root,
            'target': self.target,
            'total': self.total,
            'merged': self.merged,
            'failed': self.failed,
            'dry_run': self.dry_run,
            'errors': self.errors,
        }
