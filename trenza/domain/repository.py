"""
Source repository domain objects for trenza.

SourceRepository represents one discovered repository below the scan root.
It is immutable; the alias doubles as remote name and target directory.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SourceRepository:
    """
    A repository found below the scan root.

    Attributes:
        path: Absolute path of the repository's working tree
        alias: Path relative to the scan root, joined with ``/``. Used both
            as the remote name in the joined repository and as the
            directory the repository's content ends up in.
    """
    path: Path
    alias: str

    @classmethod
    def from_path(cls, root: Path, path: Path) -> 'SourceRepository':
        """Build a repository whose alias is ``path`` relative to ``root``."""
        alias = path.relative_to(root).as_posix()
        if alias in ('', '.'):
            raise ValueError(f"Repository path {path} is the scan root itself")
        return cls(path=path, alias=alias)

    @property
    def top_level(self) -> str:
        """First segment of the alias, the entry it occupies in the joined root."""
        return self.alias.split('/', 1)[0]


@dataclass(frozen=True)
class BranchResolution:
    """
    Ref chosen for merging one repository.

    ``ref`` is merged as ``<alias>/<ref>`` after fetching. ``from_tag`` is set
    when the manifest pointed at a tag and ``ref`` is the temporary branch
    created on top of it.
    """
    ref: str
    from_tag: bool = False
