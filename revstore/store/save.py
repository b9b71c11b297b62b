from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from revstore.repo import WorkingCopy
    from revstore.store.branches import BranchManager
    from revstore.store.sync import RepositorySynchronizer
    from revstore.store.types import (
        FileChange,
        Signature,
    )

from revstore.exceptions import failure_context

lgr = logging.getLogger('revstore.store')


class SaveProtocol:
    """Turns a set of file changes into a new revision in the origin

    Each save holds exclusive access to the repository, and performs these
    steps strictly in order: align the working copy with the origin,
    (optionally) create a new branch, write the files, stage all
    changes, commit, push, and read the new branch tip back from the
    origin.
    """

    def __init__(self, sync: RepositorySynchronizer, branches: BranchManager):
        self._sync = sync
        self._branches = branches

    def save(
        self,
        committer: Signature,
        message: str,
        old_branch: str,
        new_branch: str,
        files: Iterable[FileChange],
    ) -> str:
        """Save ``files`` on top of ``old_branch``, as a commit on ``new_branch``

        If the branch names differ, ``new_branch`` must not exist in the
        origin (``BranchAlreadyExists``), and is created at the tip of
        ``old_branch``.

        Returns the identifier of the new revision.
        """
        files = tuple(files)
        sync = self._sync
        with sync.exclusive():
            if old_branch != new_branch:
                # reject before any local change is made
                self._branches.check_available(new_branch)
            sync.discard_local_changes(old_branch)
            wc = sync.align(old_branch)
            if old_branch != new_branch:
                self._branches.prepare(wc, old_branch, new_branch)
            return self._commit_and_push(wc, committer, message, new_branch, files)

    def checkout_and_save(
        self,
        committer: Signature,
        message: str,
        revision: str,
        new_branch: str,
        files: Iterable[FileChange],
    ) -> str:
        """Save ``files`` on top of ``revision``, as a commit on a new branch

        An empty ``revision`` refers to the tip of the primary branch.
        ``new_branch`` must not exist in the origin.

        Returns the identifier of the new revision.
        """
        files = tuple(files)
        sync = self._sync
        settings = sync.settings
        with sync.exclusive():
            start = sync.origin.resolve_commit(
                revision or settings.primary_branch,
                timeout=settings.command_timeout,
            )
            self._branches.check_available(new_branch)
            sync.discard_local_changes(settings.primary_branch)
            wc = sync.align(settings.primary_branch)
            self._branches.prepare(wc, start, new_branch)
            return self._commit_and_push(wc, committer, message, new_branch, files)

    def clean_push(
        self,
        committer: Signature,
        message: str,
        branch: str,
        files: Iterable[FileChange],
    ) -> str:
        """Replace the entire content of ``branch`` with ``files``

        The tree of the new revision contains exactly the given files.

        Returns the identifier of the new revision.
        """
        files = tuple(files)
        sync = self._sync
        with sync.exclusive():
            sync.discard_local_changes(branch)
            wc = sync.align(branch)
            with failure_context('remove tracked files', branch=branch):
                wc.remove_tracked(timeout=sync.settings.command_timeout)
            return self._commit_and_push(wc, committer, message, branch, files)

    def _commit_and_push(
        self,
        wc: WorkingCopy,
        committer: Signature,
        message: str,
        branch: str,
        files: tuple[FileChange, ...],
    ) -> str:
        settings = self._sync.settings
        write_files(wc, files)
        with failure_context('commit', branch=branch):
            wc.stage_all(timeout=settings.command_timeout)
            wc.commit(
                message,
                name=committer.name,
                email=committer.email,
                date=committer.when,
                timeout=settings.command_timeout,
            )
        with failure_context('push', branch=branch):
            wc.push(f'HEAD:refs/heads/{branch}', timeout=settings.pull_timeout)
        # read back from the origin, the returned id must be durable
        revision = self._sync.origin.get_branch_commit(
            branch,
            timeout=settings.command_timeout,
        )
        lgr.debug('Saved %s on branch %r as %s', self._sync.origin, branch, revision)
        return revision


def write_files(wc: WorkingCopy, files: Iterable[FileChange]) -> None:
    """Write file content into a working copy, creating directories as needed"""
    for change in files:
        target = wc.path.joinpath(*change.path.parts)
        with failure_context('write file', path=change.path):
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(change.data)
