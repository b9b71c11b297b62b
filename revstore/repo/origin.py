from __future__ import annotations

from pathlib import Path
from weakref import WeakValueDictionary

from revstore.consts import (
    DEFAULT_PRIMARY_BRANCH,
    DEFAULT_TIMEOUT,
)
from revstore.repo.gitmanaged import GitManaged
from revstore.runners import (
    CommandError,
    call_git,
    call_git_bytes,
    call_git_lines,
)


class OriginRepo(GitManaged):
    """Bare repository that is the authoritative store of a document repository

    All reads of published state (branches, tags, revisions, file content)
    are performed against this repository.
    """

    # flyweights
    _unique_instances: WeakValueDictionary = WeakValueDictionary()

    def __init__(self, path: Path):
        """
        ``path`` is the path to an existing bare repository (Git dir).
        """
        try:
            git_dir, is_bare = call_git_lines(
                [
                    '-C',
                    str(path),
                    'rev-parse',
                    '--path-format=absolute',
                    '--git-dir',
                    '--is-bare-repository',
                ],
                timeout=DEFAULT_TIMEOUT,
            )
        except CommandError as e:
            msg = f'{path} does not point to an existing Git repository'
            raise ValueError(msg) from e
        if is_bare != 'true' or Path(git_dir) != path.resolve():
            msg = f'{path} does not point to an existing bare Git repository'
            raise ValueError(msg)
        super().__init__(path)

    def branch_exists(self, name: str, *, timeout: float | None = None) -> bool:
        return self.ref_exists(f'refs/heads/{name}', timeout=timeout)

    def list_branches(self, *, timeout: float | None = None) -> list[str]:
        """Names of all branches"""
        return [name for name, _ in self.list_refs('refs/heads/', timeout=timeout)]

    def get_branch_commit(self, name: str, *, timeout: float | None = None) -> str:
        """Commit identifier of a branch tip

        Raises ``NotFound`` if there is no such branch.
        """
        return self.resolve_commit(
            f'refs/heads/{name}',
            kind='branch',
            timeout=timeout,
        )

    def tag_exists(self, name: str, *, timeout: float | None = None) -> bool:
        return self.ref_exists(f'refs/tags/{name}', timeout=timeout)

    def list_tags(self, *, timeout: float | None = None) -> list[tuple[str, str]]:
        """``(name, commit)`` for all tags, sorted by name"""
        return sorted(self.list_refs('refs/tags/', timeout=timeout))

    def get_tag_commit(self, name: str, *, timeout: float | None = None) -> str:
        """Commit identifier a tag points to

        Raises ``NotFound`` if there is no such tag.
        """
        return self.resolve_commit(
            f'refs/tags/{name}',
            kind='tag',
            timeout=timeout,
        )

    def get_blob(self, object_id: str, *, timeout: float | None = None) -> bytes:
        """Content of a blob object, verbatim"""
        return call_git_bytes(
            ['cat-file', 'blob', object_id],
            cwd=self.path,
            timeout=timeout,
        )

    @classmethod
    def init_at(
        cls,
        path: Path,
        initial_branch: str = DEFAULT_PRIMARY_BRANCH,
        *,
        timeout: float | None = None,
    ) -> OriginRepo:
        """Initialize a bare repository in an existing directory

        ``initial_branch`` is the name of the (unborn) branch ``HEAD`` points
        to. There is no test for an existing repository at ``path``.
        """
        call_git(
            ['init', '--bare', '--quiet', f'--initial-branch={initial_branch}'],
            cwd=path,
            capture_output=True,
            timeout=timeout,
        )
        return cls(path)
