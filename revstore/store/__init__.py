"""Document repositories, and the components that implement their operations

A :class:`DocumentStore` manages any number of repositories, and hands out
a :class:`DocumentRepository` handle for each. The handle delegates to
components with a single concern each:

- :class:`ExclusiveAccessPool` serializes all mutating operations on a
  repository
- :class:`RepositorySynchronizer` aligns the working copy with the origin
- :class:`BranchManager` and :class:`TagManager` create (and delete) refs
- :class:`SaveProtocol` turns file changes into a pushed revision
- :class:`HistoryTraverser` lists revisions across branches
- :class:`RevisionReader` reads revisions and files from the origin

All components receive the :class:`~revstore.config.StoreSettings` value
and the pool they need explicitly.

.. currentmodule:: revstore.store
.. autosummary::
   :toctree: generated

   DocumentStore
   DocumentRepository
   ExclusiveAccessPool
   RepositorySynchronizer
   BranchManager
   TagManager
   SaveProtocol
   HistoryTraverser
   RevisionReader
   FileChange
   Signature
   Revision
   Tag
   FileInfo
   RevisionFile
   TaskResult
   run_concurrently
"""

__all__ = [
    'DocumentStore',
    'DocumentRepository',
    'ExclusiveAccessPool',
    'RepositorySynchronizer',
    'BranchManager',
    'TagManager',
    'SaveProtocol',
    'HistoryTraverser',
    'RevisionReader',
    'FileChange',
    'Signature',
    'Revision',
    'Tag',
    'FileInfo',
    'RevisionFile',
    'TaskResult',
    'run_concurrently',
]

from .branches import BranchManager
from .history import HistoryTraverser
from .pool import ExclusiveAccessPool
from .reader import RevisionReader
from .repository import DocumentRepository
from .save import SaveProtocol
from .store import DocumentStore
from .sync import RepositorySynchronizer
from .tags import TagManager
from .tasks import (
    TaskResult,
    run_concurrently,
)
from .types import (
    FileChange,
    FileInfo,
    Revision,
    RevisionFile,
    Signature,
    Tag,
)
