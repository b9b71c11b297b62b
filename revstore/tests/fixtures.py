"""Collection of fixtures for facilitation test implementations"""

from __future__ import annotations

from tempfile import NamedTemporaryFile
from typing import (
    TYPE_CHECKING,
)

if TYPE_CHECKING:
    from pathlib import Path

import pytest

from revstore.config import (
    StoreSettings,
    get_manager,
)
from revstore.runners import call_git
from revstore.store import (
    DocumentStore,
    FileChange,
)
from revstore.tests.utils import (
    signature_at,
    tester_email,
    tester_name,
)

magic_marker = '6d4bd6c2-7f1e-4a0e-9a55-3f2f1e0c9b7d'
standard_gitconfig = f"""\
[revstore "magic"]
    test-marker = {magic_marker}
[user]
    name = {tester_name}
    email = {tester_email}
"""


@pytest.fixture(autouse=False, scope='function')  # noqa: PT003
def cfgman(monkeypatch):
    """Yield a configuration manager with a test-specific global scope

    Any test using this fixture will be skipped for Git versions earlier
    than 2.32, because the `GIT_CONFIG_GLOBAL` environment variable used
    here was only introduced with that version.
    """
    manager = get_manager()
    ggc = manager.sources['git-global']
    with NamedTemporaryFile(
        'w',
        prefix='revstore_gitcfg_global_',
        delete=False,
    ) as tf:
        tf.write(standard_gitconfig)
        # we must close, because windows does not like the file being open
        # already when ConfigManager would open it for reading
        tf.close()
        with monkeypatch.context() as m:
            m.setenv('GIT_CONFIG_GLOBAL', tf.name)
            ggc = manager.sources['git-global']
            ggc.reinit()
            ggc.load()
            if (
                ggc['revstore.magic.test-marker'].pristine_value != magic_marker
            ):  # pragma: no cover
                pytest.skip(
                    'Cannot establish isolated global Git config scope '
                    '(possibly Git too old (needs v2.32)'
                )
            yield manager
    # reload to put the previous config in effect again
    ggc.reinit()
    ggc.load()


@pytest.fixture(autouse=True, scope='function')  # noqa: PT003
def verify_pristine_gitconfig_global():
    """No test must modify a user's global Git config.

    If such modifications are needed, a custom configuration setup
    limited to the scope of the test requiring it must be arranged.
    """
    from revstore.config import GlobalGitConfig

    def get_ggc_state():
        ggc = GlobalGitConfig()
        return {k: ggc[k].pristine_value for k in ggc}

    pre = get_ggc_state()
    yield
    if pre != get_ggc_state():  # pragma: no cover
        msg = (
            'Global Git config modification detected. '
            'Test must be modified to use a temporary configuration target. '
            'Hint: use the `cfgman` fixture.'
        )
        raise AssertionError(msg)


@pytest.fixture(autouse=False, scope='function')  # noqa: PT003
def gitrepo(tmp_path_factory) -> Path:
    """Return the path to an initialized Git repository"""
    # must use the factory to get a unique path even when a concrete
    # test also uses `tmp_path`
    path = tmp_path_factory.mktemp('gitrepo')
    call_git(
        ['init'],
        cwd=path,
        capture_output=True,
    )
    return path


@pytest.fixture(autouse=False, scope='function')  # noqa: PT003
def baregitrepo(tmp_path_factory) -> Path:
    """Return the path to an initialized, bare Git repository"""
    path = tmp_path_factory.mktemp('gitrepo')
    call_git(
        ['init', '--bare'],
        cwd=path,
        capture_output=True,
    )
    return path


@pytest.fixture(autouse=False, scope='function')  # noqa: PT003
def store_settings(tmp_path_factory, cfgman) -> StoreSettings:
    """Return settings with origin and working copy roots in temp directories"""
    root = tmp_path_factory.mktemp('revstore')
    return StoreSettings.from_config(
        cfgman,
        origin_root=root / 'origins',
        workcopy_root=root / 'workcopies',
        primary_branch='master',
        clone_timeout=30,
        pull_timeout=30,
        command_timeout=30,
    )


@pytest.fixture(autouse=False, scope='function')  # noqa: PT003
def docstore(store_settings) -> DocumentStore:
    """Return a document store without any repository"""
    return DocumentStore(store_settings)


@pytest.fixture(autouse=False, scope='function')  # noqa: PT003
def docrepo(docstore):
    """Return the handle of an initialized repository ``docs``

    The initial commit is dated at ``epoch`` and contains ``readme.txt``
    (content ``hello``) and an empty ``.gitignore``.
    """
    return docstore.init_repository(
        'docs',
        committer=signature_at(0),
        files=[FileChange('readme.txt', b'hello')],
    )
