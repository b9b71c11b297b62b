from __future__ import annotations

from typing import Any

from revstore.constraints.constraint import Constraint
from revstore.runners import call_git_success


class EnsureRefName(Constraint):
    """Ensure an input is a valid branch or tag name

    Validation is performed by ``git check-ref-format``, hence any name
    accepted here is accepted by Git as a short ref name. Additionally, names
    starting with ``-`` are rejected, because they would be taken as an
    option by any Git command that receives them.
    """

    def __init__(self, kind: str = 'branch'):
        self._kind = kind
        self._prefix = 'refs/tags/' if kind == 'tag' else 'refs/heads/'

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self._kind!r})'

    @property
    def input_synopsis(self) -> str:
        return f'{self._kind} name'

    def __call__(self, value: Any) -> str:
        if not isinstance(value, str) or not value:
            self.raise_for(value, 'is not a {kind} name', kind=self._kind)
        if value.startswith('-') or not call_git_success(
            ['check-ref-format', f'{self._prefix}{value}'],
            capture_output=True,
        ):
            self.raise_for(value, 'is not a valid {kind} name', kind=self._kind)
        return value
