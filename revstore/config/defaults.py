from __future__ import annotations

from pathlib import Path
from tempfile import gettempdir

from datasalad.settings import (
    Defaults,
)

from revstore.config.item import ConfigItem as Item
from revstore.consts import (
    DEFAULT_PRIMARY_BRANCH,
    DEFAULT_TIMEOUT,
)


class ImplementationDefaults(Defaults):
    """Source for registering implementation defaults of settings

    This is a in-memory only source that is populated by any
    implementations that want to expose their configuration
    options."""

    def __str__(self):
        return 'ImplementationDefaults'


__the_defaults: ImplementationDefaults | None = None


def get_defaults() -> ImplementationDefaults:
    """Return a a process-unique `ImplementationDefault` instance

    This function can be used obtain a :class:`ImplementationDefaults`
    instance for setting and/or getting defaults for settings.
    """
    global __the_defaults  # noqa: PLW0603
    if __the_defaults is None:
        __the_defaults = ImplementationDefaults()
        register_defaults_store(__the_defaults)
    return __the_defaults


def register_defaults_store(defaults: ImplementationDefaults) -> None:
    for k, v in _storecfg.items():
        defaults[k] = v


def positive_float(val) -> float:
    num = float(val)
    if num <= 0:
        msg = f'{val!r} is not a positive number'
        raise ValueError(msg)
    return num


_storecfg = {
    'revstore.origin-root': Item('/revstore-data', coercer=Path),
    'revstore.workcopy-root': Item(
        str(Path(gettempdir(), 'revstore-work-data')),
        coercer=Path,
    ),
    'revstore.primary-branch': Item(DEFAULT_PRIMARY_BRANCH),
    'revstore.clone-timeout': Item(str(DEFAULT_TIMEOUT), coercer=positive_float),
    'revstore.pull-timeout': Item(str(DEFAULT_TIMEOUT), coercer=positive_float),
    'revstore.command-timeout': Item(str(DEFAULT_TIMEOUT), coercer=positive_float),
    # identity used when a caller does not supply one. It is only ever
    # passed to individual git calls, never written to any git config
    'user.name': Item('revstore'),
    'user.email': Item('revstore@localhost'),
}
