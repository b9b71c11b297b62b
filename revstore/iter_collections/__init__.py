"""Iterators for Git tree listings and commit records

The iterators provided here run a single Git command for a repository, and
report its (zero-byte delimited) output as a sequence of dataclass
instances.

.. currentmodule:: revstore.iter_collections
.. autosummary::
   :toctree: generated

   GitCommit
   iter_gitlog
   iter_gittree
"""

__all__ = [
    'GitCommit',
    'iter_gitlog',
    'iter_gittree',
]

from .gitlog import (
    GitCommit,
    iter_gitlog,
)
from .gittree import iter_gittree
