from __future__ import annotations

from collections import deque
from typing import (
    TYPE_CHECKING,
    Callable,
)

if TYPE_CHECKING:
    from revstore.config import StoreSettings
    from revstore.repo import OriginRepo

from revstore.exceptions import (
    NotFound,
    failure_context,
)
from revstore.iter_collections import iter_gitlog
from revstore.store.types import Revision


class HistoryTraverser:
    """Lists the revisions of one or all branches of an origin"""

    def __init__(self, origin: OriginRepo, settings: StoreSettings):
        self._origin = origin
        self._settings = settings

    def list_commits(
        self,
        branch: str = '',
        message_filter: Callable[[str], bool] | None = None,
    ) -> list[Revision]:
        """Report all revisions reachable from a branch tip, newest first

        If ``branch`` is empty, the revisions of all branches are reported.
        Each revision is reported once, also when several branches share it.

        ``message_filter`` is called with the message of each revision, and
        only revisions it returns ``True`` for are reported. The parents of
        a rejected revision are still visited. Without a filter, all
        revisions are reported.

        Raises ``NotFound`` if there is no such ``branch``.
        """
        origin = self._origin
        timeout = self._settings.command_timeout
        with failure_context('list commits', branch=branch or None):
            if branch:
                if not origin.branch_exists(branch, timeout=timeout):
                    raise NotFound('branch', branch)
                branches = [branch]
            else:
                branches = origin.list_branches(timeout=timeout)
            tips = [origin.get_branch_commit(b, timeout=timeout) for b in branches]
            # all commit records in one go, the walk below is over this index
            index = {
                c.id: c
                for c in iter_gitlog(
                    origin.path,
                    sorted(set(tips)),
                    timeout=timeout,
                )
            }

        revisions = []
        seen: set[str] = set()
        for tip in tips:
            queue = deque([tip])
            while queue:
                commit_id = queue.popleft()
                if commit_id in seen:
                    continue
                seen.add(commit_id)
                commit = index[commit_id]
                if message_filter is None or message_filter(commit.message):
                    revisions.append(Revision.from_gitcommit(commit))
                queue.extend(p for p in commit.parent_ids if p not in seen)
        revisions.sort(key=lambda r: r.timestamp, reverse=True)
        return revisions
