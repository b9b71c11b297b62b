from __future__ import annotations

from pathlib import Path

from revstore.consts import DEFAULT_TIMEOUT
from revstore.exceptions import NotFound
from revstore.repo.flyweight import (
    Flyweighted,
    PathBasedFlyweight,
)
from revstore.runners import (
    CommandError,
    TimeoutExceeded,
    call_git_lines,
    call_git_oneline,
    call_git_success,
)


class GitManaged(Flyweighted, metaclass=PathBasedFlyweight):
    """Base class for Git-managed locations

    This class hosts the implementations common to the bare origin
    repository and the working copy: identity, validity, and
    reference queries.
    """

    def __init__(self, path: Path):
        self.reset()
        self._path = path.absolute()

    def reset(self) -> None:
        """Reset instance, drop all cached properties"""
        self._git_dir: Path | None = None

    def __str__(self):
        return f'{self.__class__.__name__}({self._path})'

    def __repr__(self):
        return f'{self.__class__.__name__}({self._path!r})'

    def flyweight_valid(self) -> bool:
        """Test continued validity of an instance

        The test is performed by running ``git rev-parse --git-dir``, which
        would fail if the location is not (or no longer) managed by Git.

        If the instance is found to be invalid the :meth:`reset` method
        will be called.
        """
        try:
            valid = call_git_success(
                ['rev-parse', '--git-dir'],
                cwd=self.path,
                capture_output=True,
                timeout=DEFAULT_TIMEOUT,
            )
        except (FileNotFoundError, NotADirectoryError):
            valid = False

        if valid is True:
            return True

        self.reset()
        return False

    @property
    def path(self) -> Path:
        """Absolute path of the Git-managed location"""
        return self._path

    @property
    def git_dir(self) -> Path:
        """Path to the associated ``.git`` directory"""
        if self._git_dir is None:
            self._git_dir = Path(
                call_git_oneline(
                    ['rev-parse', '--path-format=absolute', '--git-dir'],
                    cwd=self._path,
                )
            )
        return self._git_dir

    def ref_exists(self, ref: str, *, timeout: float | None = None) -> bool:
        """Whether a full reference (e.g. ``refs/heads/main``) exists"""
        return call_git_success(
            ['show-ref', '--verify', '--quiet', ref],
            cwd=self._path,
            timeout=timeout,
        )

    def list_refs(
        self,
        prefix: str,
        *,
        timeout: float | None = None,
    ) -> list[tuple[str, str]]:
        """Report ``(name, commit)`` for all references under ``prefix``

        ``prefix`` is a full reference prefix like ``refs/tags/``, and
        ``name`` is reported with this prefix removed. For annotated tags,
        ``commit`` is the identifier of the tagged commit, not of the tag
        object.
        """
        lines = call_git_lines(
            [
                'for-each-ref',
                '--format=%(refname)%00%(objectname)%00%(*objectname)',
                prefix,
            ],
            cwd=self._path,
            timeout=timeout,
        )
        refs = []
        for line in lines:
            refname, objname, peeled = line.split('\0')
            refs.append((refname[len(prefix) :], peeled or objname))
        return refs

    def resolve_commit(
        self,
        rev: str,
        *,
        kind: str = 'revision',
        timeout: float | None = None,
    ) -> str:
        """Return the full commit identifier for any revision specification

        Raises
        ------
        NotFound
          If ``rev`` does not identify a commit. ``kind`` is used to label
          the unresolvable entity in the error.
        """
        # a leading dash would be taken as an option
        if not rev or rev.startswith('-'):
            raise NotFound(kind, rev)
        try:
            return call_git_oneline(
                ['rev-parse', '--verify', '--quiet', f'{rev}^{{commit}}'],
                cwd=self._path,
                timeout=timeout,
            )
        except TimeoutExceeded:
            raise
        except CommandError as e:
            raise NotFound(kind, rev) from e
