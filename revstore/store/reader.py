from __future__ import annotations

from pathlib import PurePosixPath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from revstore.config import StoreSettings
    from revstore.repo import (
        GitTreeItem,
        OriginRepo,
    )

from revstore.consts import ROOT_PATH
from revstore.constraints import EnsureRelativePosixPath
from revstore.exceptions import (
    NotFound,
    failure_context,
)
from revstore.iter_collections import (
    iter_gitlog,
    iter_gittree,
)
from revstore.repo import (
    GitTreeItemType,
    Treeish,
)
from revstore.store.types import (
    FileInfo,
    Revision,
    RevisionFile,
)

_ensure_relpath = EnsureRelativePosixPath()

_root_mode = 0o40000


class RevisionReader:
    """Reads revisions, file content, and file metadata from an origin

    Revisions can be given by any revision identifier (commit, branch, tag).
    An empty revision refers to the tip of the primary branch.

    Paths are relative to the tree root, a leading ``/`` is ignored. The
    root itself (``/``) is always reported as a directory, even for an
    empty tree.
    """

    def __init__(self, origin: OriginRepo, settings: StoreSettings):
        self._origin = origin
        self._settings = settings

    def _resolve(self, rev: str) -> str:
        return self._origin.resolve_commit(
            rev or self._settings.primary_branch,
            timeout=self._settings.command_timeout,
        )

    def get_revision(self, rev: str = '') -> Revision:
        """Return the revision ``rev``, or raise ``NotFound``"""
        commit_id = self._resolve(rev)
        with failure_context('get revision', revision=commit_id):
            commit = next(
                iter_gitlog(
                    self._origin.path,
                    [commit_id],
                    walk=False,
                    timeout=self._settings.command_timeout,
                )
            )
        return Revision.from_gitcommit(commit)

    def list_files_at(self, rev: str = '') -> list[FileInfo]:
        """Report all files and directories of the tree at ``rev``"""
        commit_id = self._resolve(rev)
        with failure_context('list files', revision=commit_id):
            return [
                _get_fileinfo(item)
                for item in iter_gittree(
                    Treeish(self._origin, commit_id),
                    timeout=self._settings.command_timeout,
                )
            ]

    def stat_file_at(self, rev: str, path: str | PurePosixPath) -> FileInfo:
        """Report on a single file or directory at ``rev``

        Raises ``NotFound`` if ``path`` does not exist at ``rev``.
        """
        commit_id = self._resolve(rev)
        relpath = _get_relpath(path)
        if relpath is None:
            return FileInfo(name=ROOT_PATH, size=0, is_dir=True, mode=_root_mode)
        return _get_fileinfo(self._get_item(commit_id, relpath))

    def get_file_data_at(self, rev: str, path: str | PurePosixPath) -> bytes:
        """Return the content of a file at ``rev``

        Raises ``NotFound`` if there is no file at ``path`` at ``rev``.
        """
        commit_id = self._resolve(rev)
        return self._get_data(self._get_file_item(commit_id, path))

    def get_file_at(self, rev: str, path: str | PurePosixPath) -> RevisionFile:
        """Return a file with its metadata and revision at ``rev``

        Raises ``NotFound`` if there is no file at ``path`` at ``rev``.
        """
        revision = self.get_revision(rev)
        item = self._get_file_item(revision.id, path)
        return RevisionFile(
            info=_get_fileinfo(item),
            revision=revision,
            data=self._get_data(item),
        )

    def _get_item(self, commit_id: str, relpath: PurePosixPath) -> GitTreeItem:
        with failure_context('stat file', revision=commit_id, path=relpath):
            for item in iter_gittree(
                Treeish(self._origin, commit_id),
                recursion='none',
                paths=(relpath,),
                timeout=self._settings.command_timeout,
            ):
                # paths are patterns for Git, take the exact match only
                if item.relpath == relpath:
                    return item
        raise NotFound('path', relpath)

    def _get_file_item(
        self,
        commit_id: str,
        path: str | PurePosixPath,
    ) -> GitTreeItem:
        relpath = _get_relpath(path)
        if relpath is None:
            raise NotFound('file', path)
        item = self._get_item(commit_id, relpath)
        if item.gittype in (GitTreeItemType.directory, GitTreeItemType.submodule):
            raise NotFound('file', path)
        return item

    def _get_data(self, item: GitTreeItem) -> bytes:
        with failure_context('read file', path=item.relpath):
            return self._origin.get_blob(
                item.gitsha,
                timeout=self._settings.command_timeout,
            )


def _get_relpath(path: str | PurePosixPath) -> PurePosixPath | None:
    """Return a path relative to the tree root, ``None`` for the root"""
    path = str(path).lstrip('/')
    if path in ('', '.'):
        return None
    return _ensure_relpath(path)


def _get_fileinfo(item: GitTreeItem) -> FileInfo:
    return FileInfo(
        name=str(item.relpath),
        size=item.size or 0,
        is_dir=item.gittype == GitTreeItemType.directory,
        mode=int(item.mode, 8),
    )
