from __future__ import annotations

from dataclasses import (
    dataclass,
    fields,
)
from pathlib import Path
from typing import (
    TYPE_CHECKING,
    Any,
)

if TYPE_CHECKING:
    from revstore.config.manager import ConfigManager

from revstore.config.defaults import positive_float
from revstore.config.manager import get_manager

# configuration key for each settings field
_field_keys = {
    'origin_root': 'revstore.origin-root',
    'workcopy_root': 'revstore.workcopy-root',
    'primary_branch': 'revstore.primary-branch',
    'clone_timeout': 'revstore.clone-timeout',
    'pull_timeout': 'revstore.pull-timeout',
    'command_timeout': 'revstore.command-timeout',
    'committer_name': 'user.name',
    'committer_email': 'user.email',
}

_field_coercers = {
    'origin_root': Path,
    'workcopy_root': Path,
    'primary_branch': str,
    'clone_timeout': positive_float,
    'pull_timeout': positive_float,
    'command_timeout': positive_float,
    'committer_name': str,
    'committer_email': str,
}


@dataclass(frozen=True)
class StoreSettings:
    """Effective settings of a document store

    An instance is created once at process start, typically via
    :meth:`from_config`, and is passed to every component that needs
    any of these values. Components never query the configuration
    manager themselves.
    """

    origin_root: Path
    """Directory with all (bare) origin repositories"""
    workcopy_root: Path
    """Directory with all working copies"""
    primary_branch: str
    """Branch used when no branch or revision is given"""
    clone_timeout: float
    """Time limit (seconds) for cloning an origin into a working copy"""
    pull_timeout: float
    """Time limit (seconds) for fetch, checkout, reset, and push"""
    command_timeout: float
    """Time limit (seconds) for any other git call"""
    committer_name: str
    """Name of the committer, if a caller supplies no identity"""
    committer_email: str
    """Email of the committer, if a caller supplies no identity"""

    @classmethod
    def from_config(
        cls,
        manager: ConfigManager | None = None,
        **overrides: Any,
    ) -> StoreSettings:
        """Create settings from configuration

        Values are read from ``manager`` (the process-wide manager returned
        by :func:`get_manager` by default). Any keyword argument matching a
        field name takes precedence over the configuration.
        """
        unknown = set(overrides).difference(f.name for f in fields(cls))
        if unknown:
            msg = f'unknown settings {sorted(unknown)!r}'
            raise TypeError(msg)
        if manager is None:
            manager = get_manager()
        values = {}
        for name, key in _field_keys.items():
            val = overrides[name] if name in overrides else manager.get(key).value
            if val is None:
                msg = f'no value for setting {key!r}'
                raise ValueError(msg)
            values[name] = _field_coercers[name](val)
        return cls(**values)
