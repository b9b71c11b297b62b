from __future__ import annotations

import logging
from os import name as os_name
from typing import (
    TYPE_CHECKING,
)

if TYPE_CHECKING:
    from collections.abc import Hashable

    from datasalad.settings import Setting

from datasalad.itertools import (
    decode_bytes,
    itemize,
)
from datasalad.settings import CachingSource

from revstore.config.item import ConfigItem
from revstore.runners import (
    CommandError,
    call_git,
    call_git_bytes,
)

lgr = logging.getLogger('revstore.config')

# a repository in the working directory must not contribute to the
# scopes read here, hence git is pointed to a GITDIR that cannot exist
_no_git_dir = 'b:\\nul' if os_name == 'nt' else '/dev/null'


class GitConfig(CachingSource):
    """Source for a file-based scope of Git's configuration

    All items of the ``scope`` (set by derived classes) are read with a
    single ``git config --list`` call on first access, and are cached.
    Setting and adding items writes to the scope's file immediately, in
    addition to updating the cache.

    Keys are normalized like Git does it: section and variable names are
    lower-cased, subsections are kept as-is.
    """

    scope = ''

    def __str__(self) -> str:
        return self.__class__.__name__

    def _git_config(self, *args: str) -> list[str]:
        return [f'--git-dir={_no_git_dir}', 'config', f'--{self.scope}', *args]

    def _load(self) -> None:
        try:
            dump = call_git_bytes(self._git_config('--list', '-z'))
        except CommandError:
            # there is no file for this scope, nothing to load
            lgr.debug('No git-config %s scope to load', self.scope)
            return
        loaded: dict[str, list[str]] = {}
        for rec in itemize(decode_bytes([dump]), sep='\0', keep_ends=False):
            key, value = _gitcfg_rec_to_keyvalue(rec)
            if key is None:
                lgr.debug('Ignoring non-standard git-config output: %r', rec)
                continue
            loaded.setdefault(key, []).append(value)
        for key, values in loaded.items():
            self.setall(key, tuple(ConfigItem(v) for v in values))

    # all accessors normalize keys, such that they match what Git reports
    def __contains__(self, key: Hashable) -> bool:
        return _normalize_key(key) in self.keys()

    def _get_item(self, key: Hashable) -> Setting:
        return super()._get_item(_normalize_key(key))

    def _getall(self, key: Hashable) -> tuple[Setting, ...]:
        return super()._getall(_normalize_key(key))

    def _setall(self, key: Hashable, values: tuple[Setting, ...]) -> None:
        super()._setall(_normalize_key(key), values)

    def _set_item(self, key: Hashable, value: Setting) -> None:
        key = _normalize_key(key)
        call_git(
            self._git_config('--replace-all', key, str(value.value)),
            capture_output=True,
        )
        super()._set_item(key, value)

    def _add(self, key: Hashable, value: Setting) -> None:
        key = _normalize_key(key)
        call_git(
            self._git_config('--add', key, str(value.value)),
            capture_output=True,
        )
        super()._add(key, value)

    def _del_item(self, key: Hashable) -> None:
        key = _normalize_key(key)
        call_git(self._git_config('--unset-all', key), capture_output=True)
        super()._del_item(key)


class SystemGitConfig(GitConfig):
    """Source for Git's ``system`` configuration scope"""

    scope = 'system'


class GlobalGitConfig(GitConfig):
    """Source for Git's ``global`` configuration scope

    The location of the file can be set with ``GIT_CONFIG_GLOBAL``.
    """

    scope = 'global'


def _gitcfg_rec_to_keyvalue(rec: str) -> tuple[str | None, str]:
    """Split a record of a zero-byte delimited git-config dump

    A record is a key, followed by a newline and the value. A key with no
    value is a boolean flag that Git reports as ``true``. The key is
    ``None`` for a record without a valid key.
    """
    key, newline, value = rec.partition('\n')
    if '.' not in key.strip('.'):
        return None, value
    return _normalize_key(key), value if newline else 'true'


def _normalize_key(key: Hashable) -> str:
    section, _, rest = str(key).partition('.')
    subsection, _, name = rest.rpartition('.')
    return '.'.join(p for p in (section.lower(), subsection, name.lower()) if p)
