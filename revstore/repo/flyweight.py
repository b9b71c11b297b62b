from __future__ import annotations

import threading
from abc import abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class PathBasedFlyweight(type):
    """Metaclass for a path-based flyweight pattern

    See `https://en.wikipedia.org/wiki/Flyweight_pattern`_ for information
    on the pattern.

    Creating an instance of a class with this metaclass returns the instance
    that already exists for the same absolute path, as long as this instance
    reports to be valid (see :meth:`Flyweighted.flyweight_valid`). Otherwise
    a new instance is created and registered.

    Classes using this metaclass need a class attribute ``_unique_instances``,
    which should be a ``WeakValueDictionary``.
    """

    # one lock for all instantiations. It only guards the registry, any
    # Git call to validate or construct an instance runs without it
    _lock = threading.Lock()

    # the only constructor argument that determines the identity of an
    # instance is its `path`
    def __call__(cls, path: Path):
        id_ = path.absolute()

        with cls._lock:
            known = cls._unique_instances.get(id_, None)  # type: ignore
        if known is not None and known.flyweight_valid():
            return known

        # construction may raise, in which case nothing is registered
        instance = type.__call__(cls, path)
        with cls._lock:
            current = cls._unique_instances.get(id_, None)  # type: ignore
            if current is not None and current is not known:
                # another thread registered a fresh instance meanwhile.
                # Two threads asking for the same path must not end up
                # with two different instances
                return current
            cls._unique_instances[id_] = instance  # type: ignore
        return instance


class Flyweighted:
    def __hash__(self):
        # include the class name to distinguish from a hash of the path
        return hash((self.__class__.__name__, self.path))

    @property
    @abstractmethod
    def path(self) -> Path:
        """Path that identifies the instance"""

    @abstractmethod
    def flyweight_valid(self) -> bool:
        """Tests a cached instance whether it continues to be good to reuse

        This test runs on every object creation and should be kept as cheap as
        possible.
        """
