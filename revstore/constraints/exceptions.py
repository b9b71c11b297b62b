from __future__ import annotations

from types import MappingProxyType
from typing import (
    Any,
)


class ConstraintError(ValueError):
    """Exception type raised by constraints when their conditions are violated

    The message template ``msg`` can contain keyword placeholders in Python's
    ``format()`` syntax. They are interpolated on access with the values in
    ``ctx``, plus ``__value__`` (the offending value). Underlying errors can
    be given as ``__caused_by__`` in ``ctx``.
    """

    def __init__(
        self,
        constraint,
        value: Any,
        msg: str,
        ctx: dict[str, Any] | None = None,
    ):
        # `msg` goes first into `.args`, where `ValueError` would have it
        super().__init__(msg, constraint, value, ctx)

    @property
    def msg(self) -> str:
        """The interpolated message on the constraint violation"""
        ctx = dict(self.context)
        ctx['__value__'] = self.value
        return self.args[0].format(**ctx)

    @property
    def constraint(self):
        """The violated constraint"""
        return self.args[1]

    @property
    def value(self):
        """The value that violated the constraint"""
        return self.args[2]

    @property
    def caused_by(self) -> tuple[Exception, ...] | None:
        cb = self.context.get('__caused_by__', None)
        if cb is None:
            return None
        if isinstance(cb, Exception):
            return (cb,)
        return tuple(cb)

    @property
    def context(self) -> MappingProxyType:
        return MappingProxyType(self.args[3] or {})

    def __str__(self) -> str:
        return f'{self.value!r} {self.msg}'

    def __repr__(self) -> str:
        # rematch constructor arg-order
        return '{0}({2!r}, {3!r}, {1!r}, {4!r})'.format(
            self.__class__.__name__,
            *self.args,
        )
