from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from revstore.store.sync import RepositorySynchronizer

from revstore.constraints import EnsureRefName
from revstore.exceptions import (
    NotFound,
    TagAlreadyExists,
    failure_context,
)
from revstore.store.types import Tag

lgr = logging.getLogger('revstore.store')

_ensure_tag = EnsureRefName('tag')


class TagManager:
    """Creates and deletes tags in a working copy and its origin

    Tags are never moved. Overriding a tag deletes it first, and creates it
    again.
    """

    def __init__(self, sync: RepositorySynchronizer):
        self._sync = sync

    def push_tag(self, tag: str, from_revision: str, *, override: bool = False) -> str:
        """Create ``tag`` at ``from_revision`` in the origin

        An empty ``from_revision`` refers to the tip of the primary branch.
        If the tag exists, it is replaced when ``override`` is set, and
        ``TagAlreadyExists`` is raised otherwise.

        Returns the identifier of the tagged revision.
        """
        _ensure_tag(tag)
        sync = self._sync
        settings = sync.settings
        with sync.exclusive():
            commit = sync.origin.resolve_commit(
                from_revision or settings.primary_branch,
                timeout=settings.command_timeout,
            )
            exists = sync.origin.tag_exists(tag, timeout=settings.command_timeout)
            if exists and not override:
                raise TagAlreadyExists(tag)
            wc = sync.align(settings.primary_branch)
            with failure_context('push tag', tag=tag, revision=commit):
                if exists:
                    lgr.debug('Overriding tag %r', tag)
                    self._delete(wc, tag)
                wc.create_tag(tag, commit, timeout=settings.command_timeout)
                wc.push(f'refs/tags/{tag}', timeout=settings.pull_timeout)
            return sync.origin.get_tag_commit(
                tag,
                timeout=settings.command_timeout,
            )

    def delete_tag(self, tag: str) -> None:
        """Delete ``tag`` in the working copy and in the origin

        Raises ``NotFound`` if the origin has no such tag.
        """
        sync = self._sync
        settings = sync.settings
        with sync.exclusive():
            if not sync.origin.tag_exists(tag, timeout=settings.command_timeout):
                raise NotFound('tag', tag)
            wc = sync.align(settings.primary_branch)
            with failure_context('delete tag', tag=tag):
                self._delete(wc, tag)

    def _delete(self, wc, tag: str) -> None:
        settings = self._sync.settings
        if wc.local_tag_exists(tag, timeout=settings.command_timeout):
            wc.delete_local_tag(tag, timeout=settings.command_timeout)
        wc.push_delete(f'refs/tags/{tag}', timeout=settings.pull_timeout)

    def tag_exists(self, tag: str) -> bool:
        return self._sync.origin.tag_exists(
            tag,
            timeout=self._sync.settings.command_timeout,
        )

    def list_tags(self) -> list[Tag]:
        """All tags of the origin, sorted by name"""
        return [
            Tag(name, commit)
            for name, commit in self._sync.origin.list_tags(
                timeout=self._sync.settings.command_timeout,
            )
        ]
