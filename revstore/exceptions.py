"""Error taxonomy

All errors raised by store operations are either one of the
:class:`RevstoreError` subclasses defined here, a
:class:`~datasalad.runners.CommandError` for a failed git call (available
under the alias :data:`ExternalProcessFailure`), or its
:class:`TimeoutExceeded` subclass.

Errors are enriched with the name of the failed operation and its targets
while they propagate (see :func:`failure_context`). They are never retried
or discarded.

.. currentmodule:: revstore.exceptions
.. autosummary::
   :toctree: generated

   RevstoreError
   NotFound
   BranchAlreadyExists
   TagAlreadyExists
   RepositoryAlreadyExists
   IOFailure
   ExternalProcessFailure
   TimeoutExceeded
   failure_context
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import (
    TYPE_CHECKING,
    Any,
)

if TYPE_CHECKING:
    from collections.abc import Generator

from datasalad.runners import CommandError

ExternalProcessFailure = CommandError
"""A git process exited with a non-zero status

This is the ``CommandError`` exception of ``datasalad``. It carries the
command, its exit code, captured ``stdout``/``stderr``, and the working
directory of the failed call.
"""


class RevstoreError(Exception):
    """Base class of all domain errors"""


class NotFound(RevstoreError, LookupError):  # noqa: N818
    """A repository, revision, branch, tag, or path does not exist"""

    def __init__(self, kind: str, name: Any, msg: str | None = None):
        super().__init__(msg or f'{kind} not found [name: {name}]')
        self.kind = kind
        self.name = name


class BranchAlreadyExists(RevstoreError):  # noqa: N818
    """A branch that is to be created exists at the origin already"""

    def __init__(self, name: str):
        super().__init__(f'branch already exists [name: {name}]')
        self.name = name


class TagAlreadyExists(RevstoreError):  # noqa: N818
    """A tag that is to be created exists, and no override was requested"""

    def __init__(self, name: str):
        super().__init__(f'tag already exists [name: {name}]')
        self.name = name


class RepositoryAlreadyExists(RevstoreError):  # noqa: N818
    """An origin repository is to be initialized at an occupied location"""

    def __init__(self, name: str):
        super().__init__(f'repository already exists [name: {name}]')
        self.name = name


class IOFailure(RevstoreError, OSError):
    """A local filesystem operation failed

    The underlying ``OSError`` is available as ``__cause__``.
    """


class TimeoutExceeded(CommandError):  # noqa: N818
    """A git call did not complete within its time limit

    The process has been killed. Any output captured until then is
    available via ``stdout`` and ``stderr``.
    """

    def __init__(self, *args, timeout: float | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.timeout = timeout


def _format_context(operation: str, targets: dict[str, Any]) -> str:
    details = ', '.join(f'{k}: {v}' for k, v in targets.items() if v is not None)
    return f'{operation} [{details}]' if details else operation


@contextmanager
def failure_context(operation: str, **targets: Any) -> Generator[None]:
    """Annotate errors raised within the context with an operation label

    ``operation`` names the failed step, and ``targets`` identify what it
    was applied to (repository, branch, path, ...). Targets with a ``None``
    value are not reported.

    - a ``CommandError`` (and hence a ``TimeoutExceeded``) keeps its type,
      and gets the label prepended to its ``msg``
    - an ``OSError`` is replaced by an :class:`IOFailure` that carries the
      label, and is chained to the original error
    - :class:`RevstoreError` instances propagate verbatim, their message
      already identifies the affected entity
    """
    try:
        yield
    except RevstoreError:
        raise
    except CommandError as e:
        label = _format_context(operation, targets)
        e.msg = f'{label}: {e.msg}' if e.msg else label
        raise
    except OSError as e:
        label = _format_context(operation, targets)
        raise IOFailure(f'{label}: {e}') from e
