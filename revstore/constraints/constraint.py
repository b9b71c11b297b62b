"""Base class for constraints"""

from __future__ import annotations

from abc import (
    ABC,
    abstractmethod,
)
from typing import Any

from revstore.constraints.exceptions import ConstraintError


class Constraint(ABC):
    """Base class for value coercion/validation.

    A constraint is called with a value, and returns the value coerced to
    the target type. Any violation is reported with a ``ConstraintError``.
    """

    def __str__(self) -> str:
        return f'Constraint[{self.input_synopsis}]'

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}()'

    def raise_for(self, value: Any, msg: str, **ctx: Any) -> None:
        """Raise a ``ConstraintError`` for ``value``, violating this constraint

        ``msg`` is a message template, ``ctx`` provides the values for its
        placeholders. A ``__caused_by__`` item in ``ctx`` is reported as
        the underlying error(s).
        """
        raise ConstraintError(self, value, msg, ctx or None)

    @property
    @abstractmethod
    def input_synopsis(self) -> str:
        """Brief, single line summary of valid input"""

    @abstractmethod
    def __call__(self, value: Any):
        """Validate and coerce ``value``, raise ``ConstraintError`` on failure"""
