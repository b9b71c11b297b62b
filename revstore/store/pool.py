from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import (
    TYPE_CHECKING,
)

if TYPE_CHECKING:
    from collections.abc import Generator

lgr = logging.getLogger('revstore.store')


class ExclusiveAccessPool:
    """Registry of per-key mutual-exclusion locks

    Locks are created on first use of a key and are kept for the lifetime
    of the pool. Keys are the origin paths of repositories, hence the
    number of locks is bounded by the number of managed repositories.

    An operation must never hold more than one key at a time.
    """

    def __init__(self):
        # guards the lock registry, never held while waiting for a key
        self._registry_lock = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def _get_lock(self, key: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def acquire(self, key: str) -> None:
        """Block until no other operation holds ``key``, then hold it"""
        self._get_lock(key).acquire()
        lgr.debug('Acquired exclusive access to %s', key)

    def release(self, key: str) -> None:
        """Release ``key``, letting one waiting operation (if any) proceed

        Raises ``RuntimeError`` if ``key`` is not held.
        """
        self._get_lock(key).release()
        lgr.debug('Released exclusive access to %s', key)

    def locked(self, key: str) -> bool:
        """Whether ``key`` is currently held by any operation"""
        return self._get_lock(key).locked()

    @contextmanager
    def hold(self, key: str) -> Generator[None]:
        """Context manager to hold ``key`` for the duration of the context

        ``key`` is released on exit, regardless of any error.
        """
        self.acquire(key)
        try:
            yield
        finally:
            self.release(key)
