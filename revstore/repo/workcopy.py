from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING
from weakref import WeakValueDictionary

if TYPE_CHECKING:
    from datetime import datetime

    from revstore.repo.origin import OriginRepo

from revstore.consts import (
    DEFAULT_TIMEOUT,
    ORIGIN_REMOTE,
)
from revstore.repo.gitmanaged import GitManaged
from revstore.runners import (
    CommandError,
    call_git,
    call_git_oneline,
)


class WorkingCopy(GitManaged):
    """Disposable, non-bare clone of an :class:`OriginRepo`

    A working copy is used to materialize file changes before they are
    committed and pushed to its origin, which is known under the remote
    name ``origin``. It holds no information that is not also in the origin,
    once a save has completed, and may be deleted at any time.

    All methods take an optional ``timeout`` (in seconds) that bounds the
    runtime of the Git process they execute.
    """

    # flyweights
    _unique_instances: WeakValueDictionary = WeakValueDictionary()

    def __init__(self, path: Path):
        """
        ``path`` is the root directory of an existing clone.
        """
        try:
            toplevel = call_git_oneline(
                [
                    '-C',
                    str(path),
                    'rev-parse',
                    '--path-format=absolute',
                    '--show-toplevel',
                ],
                timeout=DEFAULT_TIMEOUT,
            )
        except CommandError as e:
            msg = f'{path} does not point to an existing Git worktree/checkout'
            raise ValueError(msg) from e
        if Path(toplevel) != path.resolve():
            msg = f'{path} is not the root of a Git worktree/checkout'
            raise ValueError(msg)
        super().__init__(path)

    def _git(self, args: list[str], timeout: float | None) -> None:
        call_git(args, cwd=self.path, capture_output=True, timeout=timeout)

    def fetch(self, *, timeout: float | None = None) -> None:
        """Fetch all branches and tags, mirroring deletions in the origin

        Remote-tracking branches of branches deleted in the origin are
        removed, and local tags are made to match the origin's tags.
        """
        self._git(
            ['fetch', '--quiet', '--prune', '--prune-tags', '--force', ORIGIN_REMOTE],
            timeout,
        )

    def checkout(
        self,
        ref: str,
        *,
        detach: bool = False,
        timeout: float | None = None,
    ) -> None:
        """Check out ``ref``, discarding any local modifications"""
        self._git(
            [
                'checkout',
                '--quiet',
                '--force',
                *(('--detach',) if detach else ()),
                ref,
                '--',
            ],
            timeout,
        )

    def checkout_new_branch(
        self,
        name: str,
        start: str,
        *,
        timeout: float | None = None,
    ) -> None:
        """Create and check out a new local branch at ``start``"""
        self._git(
            ['checkout', '--quiet', '--force', '--no-track', '-b', name, start],
            timeout,
        )

    def set_head_branch(self, name: str, *, timeout: float | None = None) -> None:
        """Point ``HEAD`` to a (possibly unborn) branch, without a checkout"""
        self._git(['symbolic-ref', 'HEAD', f'refs/heads/{name}'], timeout)

    def current_branch(self, *, timeout: float | None = None) -> str | None:
        """Name of the checked out branch, or ``None`` for a detached ``HEAD``"""
        try:
            return call_git_oneline(
                ['symbolic-ref', '--quiet', '--short', 'HEAD'],
                cwd=self.path,
                timeout=timeout,
            )
        except CommandError as e:
            if e.returncode == 1:
                return None
            raise

    def reset_hard(self, target: str, *, timeout: float | None = None) -> None:
        """Reset the checked out branch, the index, and all files to ``target``"""
        self._git(['reset', '--quiet', '--hard', target], timeout)

    def clean(self, *, timeout: float | None = None) -> None:
        """Remove all untracked and ignored files and directories"""
        self._git(['clean', '--quiet', '-ffdx'], timeout)

    def local_branch_exists(self, name: str, *, timeout: float | None = None) -> bool:
        return self.ref_exists(f'refs/heads/{name}', timeout=timeout)

    def remote_branch_exists(
        self,
        name: str,
        *,
        timeout: float | None = None,
    ) -> bool:
        """Whether the last fetch has seen ``name`` in the origin"""
        return self.ref_exists(f'refs/remotes/{ORIGIN_REMOTE}/{name}', timeout=timeout)

    def delete_local_branch(self, name: str, *, timeout: float | None = None) -> None:
        """Delete a local branch, regardless of its merge status"""
        self._git(['branch', '--quiet', '-D', name], timeout)

    def move_branch(
        self,
        name: str,
        target: str,
        *,
        timeout: float | None = None,
    ) -> None:
        """Point a local branch that is not checked out to ``target``"""
        self._git(['branch', '--quiet', '--force', name, target], timeout)

    def stage_all(self, *, timeout: float | None = None) -> None:
        """Stage all modifications, additions, and deletions"""
        self._git(['add', '--all', '--', '.'], timeout)

    def remove_tracked(self, *, timeout: float | None = None) -> None:
        """Remove all tracked files from the index and the working tree"""
        self._git(
            ['rm', '-r', '--quiet', '--force', '--ignore-unmatch', '--', '.'],
            timeout,
        )

    def commit(
        self,
        message: str,
        *,
        name: str,
        email: str,
        date: datetime | None = None,
        timeout: float | None = None,
    ) -> None:
        """Commit the staged changes

        ``name`` and ``email`` are used as the identity of author and
        committer. ``date`` (if given) sets the author date. A commit is
        made even if nothing changed.
        """
        cmd = [
            '-c',
            f'user.name={name}',
            '-c',
            f'user.email={email}',
            'commit',
            '--quiet',
            '--no-gpg-sign',
            '--no-verify',
            '--allow-empty',
            '--allow-empty-message',
            f'--message={message}',
        ]
        if date is not None:
            cmd.append(f'--date={date.isoformat()}')
        self._git(cmd, timeout)

    def push(self, refspec: str, *, timeout: float | None = None) -> None:
        """Push ``refspec`` to the origin

        Only fast-forward updates succeed, unless ``refspec`` starts with ``+``.
        """
        self._git(['push', '--quiet', ORIGIN_REMOTE, refspec], timeout)

    def push_delete(self, ref: str, *, timeout: float | None = None) -> None:
        """Delete a reference (e.g. ``refs/tags/v1``) in the origin"""
        self._git(['push', '--quiet', ORIGIN_REMOTE, '--delete', ref], timeout)

    def create_tag(
        self,
        name: str,
        commit: str,
        *,
        timeout: float | None = None,
    ) -> None:
        self._git(['tag', name, commit], timeout)

    def delete_local_tag(self, name: str, *, timeout: float | None = None) -> None:
        self._git(['tag', '--delete', name], timeout)

    def local_tag_exists(self, name: str, *, timeout: float | None = None) -> bool:
        return self.ref_exists(f'refs/tags/{name}', timeout=timeout)

    @classmethod
    def clone_from(
        cls,
        origin: OriginRepo,
        path: Path,
        *,
        branch: str | None = None,
        timeout: float | None = None,
    ) -> WorkingCopy:
        """Clone ``origin`` into ``path``, which must not exist or be empty

        If ``branch`` is given, it is checked out, otherwise the branch the
        origin's ``HEAD`` points to.
        """
        cmd = ['clone', '--quiet', f'--origin={ORIGIN_REMOTE}']
        if branch is not None:
            cmd.append(f'--branch={branch}')
        call_git(
            [*cmd, '--', str(origin.path), str(path)],
            capture_output=True,
            timeout=timeout,
        )
        return cls(path)
