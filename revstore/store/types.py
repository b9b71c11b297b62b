from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime
    from pathlib import PurePosixPath

    from revstore.config import StoreSettings
    from revstore.iter_collections import GitCommit

from revstore.constraints import EnsureRelativePosixPath

_ensure_relpath = EnsureRelativePosixPath()


@dataclass(frozen=True)
class FileChange:
    """New content of a single file

    ``path`` is relative to the tree root, slash-separated, and is
    normalized to a ``PurePosixPath`` on construction. Invalid paths
    (absolute, pointing outside the tree, or into ``.git``) raise a
    ``ConstraintError``.
    """

    path: PurePosixPath
    data: bytes

    def __post_init__(self):
        object.__setattr__(self, 'path', _ensure_relpath(self.path))


@dataclass(frozen=True)
class Signature:
    """Identity used as author and committer of a new revision"""

    name: str
    email: str
    when: datetime | None = None
    """Date of the revision, the time of the commit if not given"""

    @classmethod
    def from_settings(cls, settings: StoreSettings) -> Signature:
        """Return the configured fallback identity"""
        return cls(settings.committer_name, settings.committer_email)


@dataclass(frozen=True)
class Revision:
    """An immutable snapshot of a repository (a commit)"""

    id: str
    author_name: str
    author_email: str
    message: str
    parent_ids: tuple[str, ...]
    """Identifiers of all parents, the primary ancestor first"""
    timestamp: datetime
    """Timezone-aware date of authorship"""

    @classmethod
    def from_gitcommit(cls, commit: GitCommit) -> Revision:
        return cls(
            id=commit.id,
            author_name=commit.author_name,
            author_email=commit.author_email,
            message=commit.message,
            parent_ids=commit.parent_ids,
            timestamp=commit.author_date,
        )


@dataclass(frozen=True)
class Tag:
    name: str
    revision: str
    """Identifier of the tagged revision"""


@dataclass(frozen=True)
class FileInfo:
    """Metadata of a file or directory at a revision"""

    name: str
    """Path relative to the tree root, ``/`` for the root itself"""
    size: int
    """Size in bytes, 0 for directories"""
    is_dir: bool
    mode: int
    """Git mode, e.g. ``0o100644`` for a regular file"""


@dataclass(frozen=True)
class RevisionFile:
    """A file at a revision, with its content"""

    info: FileInfo
    revision: Revision
    data: bytes
