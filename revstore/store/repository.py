from __future__ import annotations

import logging
from typing import (
    TYPE_CHECKING,
    Callable,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import (
        Path,
        PurePosixPath,
    )

    from revstore.config import StoreSettings
    from revstore.repo import OriginRepo
    from revstore.store.pool import ExclusiveAccessPool
    from revstore.store.types import (
        FileChange,
        FileInfo,
        Revision,
        RevisionFile,
        Tag,
    )

from revstore.exceptions import failure_context
from revstore.store.branches import BranchManager
from revstore.store.history import HistoryTraverser
from revstore.store.reader import RevisionReader
from revstore.store.save import SaveProtocol
from revstore.store.sync import RepositorySynchronizer
from revstore.store.tags import TagManager
from revstore.store.types import Signature

lgr = logging.getLogger('revstore.store')


class DocumentRepository:
    """Handle for a single document repository

    A handle is obtained from :meth:`DocumentStore.get_repository`, and
    combines an origin with its working copy. All mutating methods hold
    exclusive access to the repository for their entire duration. Methods
    that only read are served by the origin, and do not wait for a
    mutation to complete.

    For all methods that accept a ``committer``, ``None`` selects the
    identity configured in the settings.
    """

    def __init__(
        self,
        name: str,
        origin: OriginRepo,
        workcopy_path: Path,
        settings: StoreSettings,
        pool: ExclusiveAccessPool,
    ):
        self.name = name
        self.origin = origin
        self._settings = settings
        self._sync = RepositorySynchronizer(origin, workcopy_path, settings, pool)
        self._branches = BranchManager(self._sync)
        self._tags = TagManager(self._sync)
        self._save = SaveProtocol(self._sync, self._branches)
        self._history = HistoryTraverser(origin, settings)
        self._reader = RevisionReader(origin, settings)

    def __str__(self):
        return f'{self.__class__.__name__}({self.name})'

    def __repr__(self):
        return f'{self.__class__.__name__}({self.name!r})'

    @property
    def workcopy_path(self) -> Path:
        return self._sync.workcopy_path

    def _signature(self, committer: Signature | None) -> Signature:
        if committer is None:
            return Signature.from_settings(self._settings)
        return committer

    #
    # mutations
    #
    def save(
        self,
        committer: Signature | None,
        message: str,
        old_branch: str,
        new_branch: str,
        files: Iterable[FileChange],
    ) -> str:
        """Save ``files`` as a new revision on ``new_branch``

        See :meth:`SaveProtocol.save`.
        """
        with failure_context('save', repository=self.name):
            return self._save.save(
                self._signature(committer),
                message,
                old_branch,
                new_branch,
                files,
            )

    def checkout_and_save(
        self,
        committer: Signature | None,
        message: str,
        revision: str,
        new_branch: str,
        files: Iterable[FileChange],
    ) -> str:
        """Save ``files`` on top of ``revision``, on a new branch

        See :meth:`SaveProtocol.checkout_and_save`.
        """
        with failure_context('checkout and save', repository=self.name):
            return self._save.checkout_and_save(
                self._signature(committer),
                message,
                revision,
                new_branch,
                files,
            )

    def clean_push(
        self,
        committer: Signature | None,
        message: str,
        branch: str,
        files: Iterable[FileChange] = (),
    ) -> str:
        """Replace the content of ``branch`` with ``files``

        See :meth:`SaveProtocol.clean_push`.
        """
        with failure_context('clean push', repository=self.name):
            return self._save.clean_push(
                self._signature(committer),
                message,
                branch,
                files,
            )

    def create_branch(self, from_branch: str, new_branch: str) -> str:
        """Create ``new_branch`` at the tip of ``from_branch``

        Raises ``BranchAlreadyExists`` if ``new_branch`` exists in the
        origin, and ``NotFound`` if ``from_branch`` does not.
        """
        with failure_context('create branch', repository=self.name):
            return self._branches.create_branch(from_branch, new_branch)

    def checkout(self, ref: str) -> None:
        """Bring the working copy to ``ref``

        A branch ``ref`` is checked out and aligned with the origin. Any
        other revision is checked out as a detached ``HEAD``. An empty
        ``ref`` refers to the primary branch.

        Raises ``NotFound`` if ``ref`` cannot be resolved in the origin.
        """
        sync = self._sync
        settings = self._settings
        ref = ref or settings.primary_branch
        with failure_context('checkout', repository=self.name, ref=ref):
            with sync.exclusive():
                if self.origin.branch_exists(
                    ref,
                    timeout=settings.command_timeout,
                ):
                    sync.discard_local_changes(ref)
                    sync.align(ref)
                    return
                commit = self.origin.resolve_commit(
                    ref,
                    timeout=settings.command_timeout,
                )
                wc = sync.align(settings.primary_branch)
                wc.checkout(commit, detach=True, timeout=settings.pull_timeout)
                lgr.debug('Detached %s at %s', wc, commit)

    def push_tag(
        self,
        tag: str,
        from_revision: str = '',
        *,
        override: bool = False,
    ) -> str:
        """Create ``tag`` at ``from_revision``, see :meth:`TagManager.push_tag`"""
        with failure_context('push tag', repository=self.name):
            return self._tags.push_tag(tag, from_revision, override=override)

    def delete_tag(self, tag: str) -> None:
        with failure_context('delete tag', repository=self.name):
            self._tags.delete_tag(tag)

    #
    # queries
    #
    def tag_exists(self, tag: str) -> bool:
        return self._tags.tag_exists(tag)

    def list_tags(self) -> list[Tag]:
        return self._tags.list_tags()

    def get_branches(self) -> list[str]:
        """Names of all branches in the origin"""
        return self.origin.list_branches(timeout=self._settings.command_timeout)

    def commits(
        self,
        branch: str = '',
        message_filter: Callable[[str], bool] | None = None,
    ) -> list[Revision]:
        """See :meth:`HistoryTraverser.list_commits`"""
        return self._history.list_commits(branch, message_filter)

    def get_revision(self, rev: str = '') -> Revision:
        return self._reader.get_revision(rev)

    def get_file_at(self, rev: str, path: str | PurePosixPath) -> RevisionFile:
        return self._reader.get_file_at(rev, path)

    def get_file_data_at(self, rev: str, path: str | PurePosixPath) -> bytes:
        return self._reader.get_file_data_at(rev, path)

    def list_files_at(self, rev: str = '') -> list[FileInfo]:
        return self._reader.list_files_at(rev)

    def stat_file_at(self, rev: str, path: str | PurePosixPath) -> FileInfo:
        return self._reader.stat_file_at(rev, path)
