"""Validation and coercion of names and paths

Each :class:`Constraint` validates one aspect of an input value, and is
called with the value to return it coerced to the target type.

Violations are reported via :class:`ConstraintError`, a ``ValueError``
that carries the constraint, the offending value, and a message template
that is interpolated on access.

.. currentmodule:: revstore.constraints
.. autosummary::
   :toctree: generated

   Constraint
   ConstraintError
   EnsureRefName
   EnsureRelativePosixPath
   EnsureRepositoryId
"""

__all__ = [
    'Constraint',
    'ConstraintError',
    'EnsureRefName',
    'EnsureRelativePosixPath',
    'EnsureRepositoryId',
]


from .constraint import Constraint
from .exceptions import (
    ConstraintError,
)
from .path import (
    EnsureRelativePosixPath,
    EnsureRepositoryId,
)
from .refname import EnsureRefName
