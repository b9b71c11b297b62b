from __future__ import annotations

from os import environ
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


def get_gitconfig_items_from_env() -> dict[str, str | tuple[str, ...]]:
    """Parse git-config ENV (``GIT_CONFIG_COUNT|KEY|VALUE``) and return as dict

    This implementation does not use ``git-config`` directly, but aims to
    mimic its behavior with respect to parsing the environment as much
    as possible.

    Raises
    ------
    ValueError
      Whenever ``git-config`` would also error.
    """
    items: dict[str, str | tuple[str, ...]] = {}
    count = _get_env_count()
    for i in range(count):
        key_var = f'GIT_CONFIG_KEY_{i}'
        value_var = f'GIT_CONFIG_VALUE_{i}'
        key = environ.get(key_var)
        if not key:
            msg = f'missing config key {key_var}'
            raise ValueError(msg)
        value = environ.get(value_var)
        if value is None:
            msg = f'missing config value {value_var}'
            raise ValueError(msg)
        present = items.get(key)
        if present is None:
            items[key] = value
        elif isinstance(present, tuple):
            items[key] = (*present, value)
        else:
            items[key] = (present, value)
    return items


def set_gitconfig_items_in_env(items: Mapping[str, str | tuple[str, ...]]):
    """Set git-config ENV (``GIT_CONFIG_COUNT|KEY|VALUE``) from a mapping

    Any existing declaration of configuration items in the environment is
    replaced. Any ENV variable of a *valid* existing declaration is removed,
    before the set configuration items are posted in the ENV.

    Multi-value configuration keys are supported (values provided as tuple).

    No verification (e.g., of syntax compliance) is performed.
    """
    _clean_env_from_gitconfig_items()

    count = 0
    for key, values in items.items():
        # homogeneous processing of multiple value items, and single values
        for v in values if isinstance(values, tuple) else (values,):
            environ[f'GIT_CONFIG_KEY_{count}'] = key
            environ[f'GIT_CONFIG_VALUE_{count}'] = str(v)
            count += 1
    if count:
        environ['GIT_CONFIG_COUNT'] = str(count)


def _get_env_count() -> int:
    count = environ.get('GIT_CONFIG_COUNT', '0')
    try:
        num = int(count)
    except ValueError as e:
        msg = f'bogus count in GIT_CONFIG_COUNT: {count!r}'
        raise ValueError(msg) from e
    if num < 0:
        msg = f'bogus count in GIT_CONFIG_COUNT: {count!r}'
        raise ValueError(msg)
    return num


def _clean_env_from_gitconfig_items():
    # we only care about intact specifications here, if there was cruft
    # to start with, we have no responsibilities
    try:
        count = _get_env_count()
    except ValueError:
        return

    for i in range(count):
        environ.pop(f'GIT_CONFIG_KEY_{i}', None)
        environ.pop(f'GIT_CONFIG_VALUE_{i}', None)

    environ.pop('GIT_CONFIG_COUNT', None)
