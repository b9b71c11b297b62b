from __future__ import annotations

from contextlib import contextmanager
from typing import (
    TYPE_CHECKING,
    Any,
)

if TYPE_CHECKING:
    from collections.abc import (
        Generator,
        Hashable,
        Iterable,
    )

    from datasalad.settings import Source

from datasalad.settings import (
    Setting,
    Settings,
    UnsetValue,
)

from revstore.config.defaults import (
    ImplementationDefaults,
    get_defaults,
)
from revstore.config.git import (
    GlobalGitConfig,
    SystemGitConfig,
)
from revstore.config.gitenv import GitEnvironment
from revstore.config.item import ConfigItem


class ConfigManager(Settings):
    """Query of configuration across Git's scopes and implementation defaults

    The sources are, from highest to lowest precedence:

    - ``git-command``: :class:`GitEnvironment`
    - ``git-global``: :class:`GlobalGitConfig`
    - ``git-system``: :class:`SystemGitConfig`
    - ``defaults``: :class:`ImplementationDefaults`
    """

    def __init__(self, defaults: ImplementationDefaults):
        super().__init__(
            {
                # Git calls the scope of items from the environment 'command'
                'git-command': GitEnvironment(),
                'git-global': GlobalGitConfig(),
                'git-system': SystemGitConfig(),
                'defaults': defaults,
            }
        )
        # plain defaults come back with the same item type as any other value
        for source in self.sources.values():
            source.item_type = ConfigItem

    def __str__(self) -> str:
        # sources without content are not shown
        return self._describe(s for s in self.sources.values() if len(s))

    def __repr__(self) -> str:
        return self._describe(self.sources.values())

    def _describe(self, sources: Iterable[Source]) -> str:
        return f'{self.__class__.__name__}({"<<".join(str(s) for s in sources)})'

    @contextmanager
    def overrides(
        self,
        overrides: dict[Hashable, Setting | tuple[Setting, ...]],
    ) -> Generator[ConfigManager]:
        """Context manager to temporarily set configuration items

        The items are posted to the ``git-command`` scope, hence they are in
        effect for Git child processes too.
        """
        with self.sources['git-command'].overrides(overrides):
            yield self

    def get(self, key: Hashable, default: Any = None) -> Setting:
        """Return the effective setting of ``key``, or a ``default``

        ``default`` is also reported, when the effective setting has no
        value (``UnsetValue``). A plain ``default`` is wrapped into a
        :class:`ConfigItem`.
        """
        if key not in self:
            return self._get_default_setting(default)
        setting = self[key]
        if setting.pristine_value is UnsetValue:
            setting.update(self._get_default_setting(default))
        return setting


_manager: ConfigManager | None = None


def get_manager() -> ConfigManager:
    """Return the process-wide :class:`ConfigManager` instance"""
    global _manager  # noqa: PLW0603
    if _manager is None:
        _manager = ConfigManager(get_defaults())
    return _manager
