from __future__ import annotations

from pathlib import (
    PurePath,
    PurePosixPath,
)
from typing import Any

from revstore.constraints.constraint import Constraint


class EnsureRelativePosixPath(Constraint):
    """Convert input to a relative ``PurePosixPath`` within a tree

    The path must be non-empty, relative, and must not point outside the
    tree (no ``..`` components). Components that are empty or ``.`` are
    dropped. If ``allow_git`` is false (default), paths within a ``.git``
    directory are rejected too.
    """

    def __init__(self, *, allow_git: bool = False):
        self._allow_git = allow_git

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(allow_git={self._allow_git!r})'

    @property
    def input_synopsis(self) -> str:
        return 'relative POSIX path'

    def __call__(self, value: Any) -> PurePosixPath:
        if isinstance(value, PurePath):
            value = value.as_posix()
        if not isinstance(value, str):
            self.raise_for(value, 'is not a path')
        if value.startswith('/'):
            self.raise_for(value, 'is not a relative path')
        path = PurePosixPath(value)
        if path.parts in ((), ('.',)):
            self.raise_for(value, 'is empty')
        if '..' in path.parts:
            self.raise_for(value, 'points outside the tree')
        if not self._allow_git and '.git' in path.parts:
            self.raise_for(value, 'points into a .git directory')
        return path


class EnsureRepositoryId(EnsureRelativePosixPath):
    """Convert input to the identifier of a repository

    In addition to the rules of :class:`EnsureRelativePosixPath`, no
    component may end in ``suffix``. Repositories are stored under their
    identifier plus ``suffix``. Hence, with this rule, the storage location
    of one repository can never be inside that of another.
    """

    def __init__(self, suffix: str = '.git'):
        super().__init__()
        self._suffix = suffix

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self._suffix!r})'

    @property
    def input_synopsis(self) -> str:
        return f'relative POSIX path, no component ending in {self._suffix}'

    def __call__(self, value: Any) -> PurePosixPath:
        path = super().__call__(value)
        if any(p.endswith(self._suffix) for p in path.parts):
            self.raise_for(
                value,
                'has a component ending in {suffix}',
                suffix=self._suffix,
            )
        return path
