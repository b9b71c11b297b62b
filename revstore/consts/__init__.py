"""Assorted common constants"""

__all__ = [
    'UnsetValue',
    'DEFAULT_PRIMARY_BRANCH',
    'DEFAULT_TIMEOUT',
    'GITIGNORE_RELPATH',
    'INDEX_LOCK_RELPATH',
    'INITIAL_COMMIT_MESSAGE',
    'ORIGIN_REMOTE',
    'REPOSITORY_SUFFIX',
    'ROOT_PATH',
]

from datasalad.settings import UnsetValue

DEFAULT_PRIMARY_BRANCH = 'master'
"""Branch that receives the initial commit of a new repository"""

DEFAULT_TIMEOUT = 60.0
"""Default limit (in seconds) for clone, pull, and any other git call"""

ORIGIN_REMOTE = 'origin'
"""Name of the remote that points a working copy to its origin"""

REPOSITORY_SUFFIX = '.git'
"""Appended to a repository identifier to get the directory of its origin
and of its working copy
"""

INITIAL_COMMIT_MESSAGE = 'Initial commit'

GITIGNORE_RELPATH = '.gitignore'
"""File that is always part of an initial commit"""

INDEX_LOCK_RELPATH = 'index.lock'
"""Lock file of the index, relative to a working copy's GITDIR

An interrupted git process may leave it behind, blocking all subsequent
index modifications.
"""

ROOT_PATH = '/'
"""Synthetic path of the tree root of any revision"""
