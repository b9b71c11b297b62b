from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import (
        Generator,
        Iterable,
    )
    from pathlib import Path

from revstore.iter_collections.utils import git_log

# unit separator, cannot be part of any name, email, or identifier
_field_sep = '\x1f'
_log_format = _field_sep.join(('%H', '%P', '%an', '%ae', '%aI', '%B'))


@dataclass(frozen=True)
class GitCommit:
    """Record of a commit"""

    id: str
    parent_ids: tuple[str, ...]
    """Identifiers of all parents, first parent first"""
    author_name: str
    author_email: str
    author_date: datetime
    """Timezone-aware date of authorship"""
    message: str
    """Full message without trailing newlines"""


def iter_gitlog(
    path: Path,
    revisions: Iterable[str],
    *,
    walk: bool = True,
    timeout: float | None = None,
) -> Generator[GitCommit]:
    """Uses ``git log`` to report commit records

    Parameters
    ----------
    path: Path
      Path of the Git repository to report on.
    revisions: iterable
      Commits to start from. Each commit is reported once, even if it is
      reachable from several starting points.
    walk: bool, optional
      If ``True`` (default), all commits reachable from ``revisions`` are
      reported. Otherwise, only the commits given as ``revisions``.
    timeout: float, optional
      Time limit (in seconds) for the ``git log`` call.

    Yields
    ------
    :class:`GitCommit`
      In the order reported by Git. No particular order must be assumed.
    """
    revisions = list(revisions)
    if not revisions:
        return
    args = [f'--format={_log_format}']
    if not walk:
        args.append('--no-walk=unsorted')
    for rec in git_log(path, *args, *revisions, '--', timeout=timeout):
        yield _get_commit(rec)


def _get_commit(rec: str) -> GitCommit:
    id_, parents, name, email, date, message = rec.split(_field_sep, maxsplit=5)
    return GitCommit(
        id=id_,
        parent_ids=tuple(parents.split()),
        author_name=name,
        author_email=email,
        author_date=datetime.fromisoformat(date),
        message=message.rstrip('\n'),
    )
