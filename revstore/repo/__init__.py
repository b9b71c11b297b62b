"""Handles for the on-disk repositories of a document repository

Each document repository is made of two Git repositories:

- an :class:`OriginRepo`, a bare repository that is the durable,
  authoritative revision store
- a :class:`WorkingCopy`, a disposable, non-bare clone of the origin that
  is used to materialize file changes before they are committed and pushed
  back

Both classes implement the "flyweight" pattern. This means that, within the
same process, creating instances always yields the same instance for the
same path location, as long as it remains a valid Git repository.

.. currentmodule:: revstore.repo
.. autosummary::
   :toctree: generated

   OriginRepo
   WorkingCopy
   GitTreeItem
   GitTreeItemType
   Treeish
"""

__all__ = [
    'OriginRepo',
    'WorkingCopy',
    'GitTreeItem',
    'GitTreeItemType',
    'Treeish',
    'rmtree',
]

from .origin import OriginRepo
from .tree_item import (
    GitTreeItem,
    GitTreeItemType,
    Treeish,
)
from .utils import rmtree
from .workcopy import WorkingCopy
