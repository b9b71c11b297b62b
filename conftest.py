"""Fixture setup"""

__all__ = [
    'cfgman',
    'baregitrepo',
    'docrepo',
    'docstore',
    'gitrepo',
    'store_settings',
    'verify_pristine_gitconfig_global',
]


from revstore.tests.fixtures import (
    # function-scope temporary, bare Git repo
    baregitrepo,
    # function-scope config manager
    cfgman,
    # function-scope initialized document repository
    docrepo,
    # function-scope document store in a temporary directory
    docstore,
    # function-scope temporary Git repo
    gitrepo,
    # function-scope store settings with temporary roots
    store_settings,
    # verify no test leave contaminated config behind
    verify_pristine_gitconfig_global,
)
