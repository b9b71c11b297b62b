"""Configuration management

This module provides the standard facilities for configuration management
and query. It is built on `datasalad.settings
<https://datasalad.readthedocs.io/latest/generated/datasalad.settings.html>`__.

The key piece is the :class:`ConfigManager` that supports querying for
configuration settings across multiple sources (Git's ``command``,
``global``, and ``system`` scopes, and implementation defaults). It also
offers a context manager to temporarily override particular configuration
items.

Usage
-----

No component of a document store queries a configuration manager directly.
Instead, the effective configuration is resolved once, typically at process
start, into an immutable :class:`StoreSettings` value via
:meth:`StoreSettings.from_config`. This value is then passed to all
components explicitly.

If and when a common manager instance is needed, it must be obtained by
calling :func:`get_manager`. Subsequent calls will return the same instance.
The same pattern is applied to obtain a common instance of
:class:`ImplementationDefaults` via :func:`get_defaults`. This instance
holds the defaults of all configuration settings supported by this
package:

- ``revstore.origin-root``: directory with all origin repositories
- ``revstore.workcopy-root``: directory with all working copies
- ``revstore.primary-branch``: branch used when no branch is given
- ``revstore.clone-timeout``, ``revstore.pull-timeout``,
  ``revstore.command-timeout``: time limits in seconds
- ``user.name``, ``user.email``: fallback committer identity


.. currentmodule:: revstore.config
.. autosummary::
   :toctree: generated

   ConfigItem
   ConfigManager
   GitConfig
   SystemGitConfig
   GlobalGitConfig
   GitEnvironment
   ImplementationDefaults
   StoreSettings
   UnsetValue
   get_defaults
   get_manager
"""

__all__ = [
    'ConfigItem',
    'ConfigManager',
    'GitConfig',
    'SystemGitConfig',
    'GlobalGitConfig',
    'GitEnvironment',
    'ImplementationDefaults',
    'StoreSettings',
    'UnsetValue',
    'get_defaults',
    'get_manager',
]

from datasalad.settings import UnsetValue

from .defaults import (
    ImplementationDefaults,
    get_defaults,
)
from .git import (
    GitConfig,
    GlobalGitConfig,
    SystemGitConfig,
)
from .gitenv import GitEnvironment
from .item import ConfigItem
from .manager import (
    ConfigManager,
    get_manager,
)
from .settings import StoreSettings
