from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from revstore.repo import WorkingCopy
    from revstore.store.sync import RepositorySynchronizer

from revstore.constraints import EnsureRefName
from revstore.exceptions import (
    BranchAlreadyExists,
    failure_context,
)

lgr = logging.getLogger('revstore.store')

_ensure_branch = EnsureRefName('branch')


class BranchManager:
    """Creates branches, refusing to reuse a name that exists in the origin"""

    def __init__(self, sync: RepositorySynchronizer):
        self._sync = sync

    def check_available(self, name: str) -> None:
        """Raise ``BranchAlreadyExists`` if the origin has a branch ``name``

        An invalid branch name raises a ``ConstraintError``.
        """
        _ensure_branch(name)
        if self._sync.origin.branch_exists(
            name,
            timeout=self._sync.settings.command_timeout,
        ):
            raise BranchAlreadyExists(name)

    def prepare(self, wc: WorkingCopy, start: str, name: str) -> None:
        """Create and check out branch ``name`` at ``start`` in a working copy

        ``start`` is the branch or commit the new branch is based on. A local
        branch ``name`` that does not exist in the origin is a leftover and
        is replaced.
        """
        self.check_available(name)
        timeout = self._sync.settings.pull_timeout
        with failure_context('create branch', branch=name, start=start):
            if wc.local_branch_exists(name, timeout=timeout):
                lgr.debug('Deleting stale local branch %r in %s', name, wc)
                wc.delete_local_branch(name, timeout=timeout)
            wc.checkout_new_branch(name, start, timeout=timeout)

    def create_branch(self, from_branch: str, new_branch: str) -> str:
        """Create ``new_branch`` in the origin at the tip of ``from_branch``

        Returns the identifier of the tip revision of the new branch.
        """
        sync = self._sync
        with sync.exclusive():
            self.check_available(new_branch)
            sync.discard_local_changes(from_branch)
            wc = sync.align(from_branch)
            self.prepare(wc, from_branch, new_branch)
            with failure_context('push branch', branch=new_branch):
                wc.push(
                    f'refs/heads/{new_branch}',
                    timeout=sync.settings.pull_timeout,
                )
            return sync.origin.get_branch_commit(
                new_branch,
                timeout=sync.settings.command_timeout,
            )
