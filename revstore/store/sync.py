from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path

    from revstore.config import StoreSettings
    from revstore.repo import OriginRepo
    from revstore.store.pool import ExclusiveAccessPool

from revstore.consts import (
    INDEX_LOCK_RELPATH,
    ORIGIN_REMOTE,
)
from revstore.exceptions import (
    NotFound,
    failure_context,
)
from revstore.repo import (
    WorkingCopy,
    rmtree,
)

lgr = logging.getLogger('revstore.store')


class RepositorySynchronizer:
    """Brings the working copy of a repository in line with its origin

    The working copy at ``workcopy_path`` is created on demand by cloning
    ``origin``. If it exists, it is updated by fetching from the origin.
    Any local commit or file modification is discarded, never merged.

    All mutating operations on a repository must be performed while holding
    exclusive access (see :meth:`exclusive`).
    """

    def __init__(
        self,
        origin: OriginRepo,
        workcopy_path: Path,
        settings: StoreSettings,
        pool: ExclusiveAccessPool,
    ):
        self.origin = origin
        self.workcopy_path = workcopy_path
        self.settings = settings
        self._pool = pool

    @property
    def key(self) -> str:
        """Key of the repository in an :class:`ExclusiveAccessPool`"""
        return str(self.origin.path)

    @contextmanager
    def exclusive(self) -> Generator[None]:
        """Context manager for exclusive access to the working copy

        Any stale index lock that is left in the working copy is removed
        on exit, before exclusive access is released.
        """
        with self._pool.hold(self.key):
            try:
                yield
            finally:
                self.clear_index_lock()

    def clear_index_lock(self) -> None:
        """Remove a leftover index lock of an interrupted Git process

        A failure to remove it is logged, but not raised.
        """
        lock = self.workcopy_path / '.git' / INDEX_LOCK_RELPATH
        try:
            if lock.exists():
                lock.unlink()
                lgr.info('Removed stale index lock %s', lock)
        except OSError as e:
            lgr.warning('Cannot remove stale index lock %s: %s', lock, e)

    def get_workcopy(self) -> WorkingCopy | None:
        """Return the working copy, or ``None`` if it does not exist

        A directory at the working copy location that is not a valid clone
        (e.g. left behind by an interrupted clone) is removed.
        """
        if not self.workcopy_path.exists():
            return None
        try:
            return WorkingCopy(self.workcopy_path)
        except ValueError:
            lgr.info('Removing invalid working copy at %s', self.workcopy_path)
            with failure_context('remove working copy', path=self.workcopy_path):
                rmtree(self.workcopy_path)
            return None

    def align(self, branch: str) -> WorkingCopy:
        """Make the working copy match the origin's ``branch``

        On return, the working copy exists, has ``branch`` checked out, and
        its tip equals the origin's tip of ``branch``. There are no
        modified or untracked files.

        Raises ``NotFound`` if the origin has no such branch.
        """
        with failure_context(
            'align',
            path=self.workcopy_path,
            branch=branch,
        ):
            if not self.origin.branch_exists(
                branch,
                timeout=self.settings.command_timeout,
            ):
                raise NotFound('branch', branch)
            wc = self.get_workcopy()
            if wc is None:
                return self._clone(branch)

            timeout = self.settings.pull_timeout
            lgr.debug('Fetch %s into %s', self.origin, wc)
            wc.fetch(timeout=timeout)
            if wc.local_branch_exists(branch, timeout=timeout):
                wc.checkout(branch, timeout=timeout)
            else:
                wc.checkout_new_branch(
                    branch,
                    f'{ORIGIN_REMOTE}/{branch}',
                    timeout=timeout,
                )
            wc.reset_hard(f'{ORIGIN_REMOTE}/{branch}', timeout=timeout)
            wc.clean(timeout=timeout)
            lgr.debug('Aligned %s with %s at branch %r', wc, self.origin, branch)
            return wc

    def _clone(self, branch: str) -> WorkingCopy:
        lgr.info('Cloning %s into %s', self.origin, self.workcopy_path)
        self.workcopy_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            return WorkingCopy.clone_from(
                self.origin,
                self.workcopy_path,
                branch=branch,
                timeout=self.settings.clone_timeout,
            )
        except Exception:
            # a partial clone must not be mistaken for a working copy
            if self.workcopy_path.exists():
                try:
                    rmtree(self.workcopy_path)
                except OSError as e:
                    lgr.warning(
                        'Cannot remove partial clone at %s: %s',
                        self.workcopy_path,
                        e,
                    )
            raise

    def discard_local_changes(self, branch: str) -> None:
        """Reset a local ``branch`` to the last known state of the origin

        This does nothing, if there is no working copy, or no local
        ``branch`` in it.
        """
        wc = self.get_workcopy()
        if wc is None:
            return
        timeout = self.settings.pull_timeout
        with failure_context(
            'discard local changes',
            path=self.workcopy_path,
            branch=branch,
        ):
            if not wc.local_branch_exists(branch, timeout=timeout):
                return
            if not wc.remote_branch_exists(branch, timeout=timeout):
                # nothing known to reset to. `align()` will sort this out
                return
            upstream = f'{ORIGIN_REMOTE}/{branch}'
            if wc.current_branch(timeout=timeout) == branch:
                wc.reset_hard(upstream, timeout=timeout)
            else:
                wc.move_branch(branch, upstream, timeout=timeout)
            lgr.debug('Discarded local changes of branch %r in %s', branch, wc)
