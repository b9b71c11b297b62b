from __future__ import annotations

from contextlib import contextmanager
from typing import (
    TYPE_CHECKING,
)

if TYPE_CHECKING:
    from collections.abc import (
        Collection,
        Generator,
        Hashable,
    )

from datasalad.settings import (
    Setting,
    WritableMultivalueSource,
)

from revstore.config.item import ConfigItem
from revstore.config.utils import (
    get_gitconfig_items_from_env,
    set_gitconfig_items_in_env,
)


class GitEnvironment(WritableMultivalueSource):
    """Source for Git's ``command`` scope, declared in the process environment

    Items are read from, and written to ``GIT_CONFIG_COUNT``,
    ``GIT_CONFIG_KEY_<n>``, and ``GIT_CONFIG_VALUE_<n>``. Git child
    processes inherit these variables, hence any item set here is in effect
    for all subsequent Git calls.

    Nothing is cached, every access inspects the environment.
    """

    item_type = ConfigItem

    def __str__(self) -> str:
        return self.__class__.__name__

    def _reinit(self) -> None:
        pass

    def _load(self) -> None:
        pass

    def _get_keys(self) -> Collection:
        return get_gitconfig_items_from_env().keys()

    def _getall(self, key: Hashable) -> tuple[Setting, ...]:
        values = get_gitconfig_items_from_env()[str(key)]
        if not isinstance(values, tuple):
            values = (values,)
        return tuple(self.item_type(v) for v in values)

    def _get_item(self, key: Hashable) -> Setting:
        # the last declaration wins, like with Git
        return self._getall(key)[-1]

    def _setall(self, key: Hashable, values: tuple[Setting, ...]) -> None:
        _update_env(str(key), tuple(str(v.value) for v in values))

    def _set_item(self, key: Hashable, value: Setting) -> None:
        _update_env(str(key), str(value.value))

    def _del_item(self, key: Hashable) -> None:
        _update_env(str(key), None)

    @contextmanager
    def overrides(
        self,
        overrides: dict[Hashable, Setting | tuple[Setting, ...]],
    ) -> Generator[None]:
        """Context manager to temporarily set configuration items

        On exit, items that were not set before are removed, and all others
        get their previous values back.
        """
        previous = {k: self.getall(k) if k in self else None for k in overrides}
        for k, v in overrides.items():
            self.setall(k, v if isinstance(v, tuple) else (v,))
        try:
            yield
        finally:
            for k, values in previous.items():
                if values is None:
                    del self[k]
                else:
                    self.setall(k, values)


def _update_env(key: str, value: str | tuple[str, ...] | None) -> None:
    """Set (or remove, if ``value`` is ``None``) a single key"""
    items = get_gitconfig_items_from_env()
    if value is None:
        del items[key]
    else:
        items[key] = value
    set_gitconfig_items_in_env(items)
