from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import PurePosixPath

    from revstore.repo.origin import OriginRepo


# TODO: Could be `StrEnum`, came with PY3.11
class GitTreeItemType(Enum):
    """Enumeration of item types of Git trees"""

    file = 'file'
    executablefile = 'executablefile'
    symlink = 'symlink'
    directory = 'directory'
    submodule = 'submodule'


# octal mode strings, as reported by `git ls-tree`
git_mode_type_map = {
    '100644': GitTreeItemType.file,
    '100755': GitTreeItemType.executablefile,
    '040000': GitTreeItemType.directory,
    '120000': GitTreeItemType.symlink,
    '160000': GitTreeItemType.submodule,
}


@dataclass(frozen=True)
class Treeish:
    """A tree of an origin, identified by a revision

    ``treeish`` is anything Git can resolve to a tree: a tree or commit
    identifier, or a branch or tag name.
    """

    repo: OriginRepo
    treeish: str


@dataclass(frozen=True)
class GitTreeItem:
    """File, directory, symlink, or submodule in a Git tree"""

    tree: Treeish
    relpath: PurePosixPath
    """Path relative to the root of ``tree``"""
    gitsha: str
    """Identifier of the blob or tree object (or commit, for a submodule)"""
    mode: str
    """Octal Git mode, e.g. ``100644``"""
    size: int | None = None
    """Size of a blob in bytes, ``None`` for other item types"""

    @property
    def gittype(self) -> GitTreeItemType:
        return git_mode_type_map[self.mode]
