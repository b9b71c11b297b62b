from __future__ import annotations

import logging
from concurrent.futures import (
    ThreadPoolExecutor,
    as_completed,
)
from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

lgr = logging.getLogger('revstore.store')


@dataclass(frozen=True)
class TaskResult:
    """Outcome of a single call executed by :func:`run_concurrently`

    Exactly one of ``value`` and ``error`` is meaningful: ``error`` is
    ``None`` for a successful call.
    """

    name: str
    value: Any = None
    error: Exception | None = None

    @property
    def success(self) -> bool:
        return self.error is None


def run_concurrently(
    calls: Iterable[tuple[str, Callable[[], Any]]],
    max_workers: int | None = None,
) -> list[TaskResult]:
    """Execute callables in a thread pool and collect their outcomes

    ``calls`` are ``(name, callable)`` pairs. Each callable is executed
    without arguments. Its return value, or the exception it raised, is
    reported as a :class:`TaskResult`. No exception of a call propagates.

    Results are returned in the order of ``calls``.
    """
    calls = list(calls)
    results: list[TaskResult | None] = [None] * len(calls)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(func): (i, name) for i, (name, func) in enumerate(calls)
        }
        for future in as_completed(futures):
            i, name = futures[future]
            try:
                results[i] = TaskResult(name, value=future.result())
            except Exception as e:  # noqa: BLE001
                lgr.debug('Task %r failed: %s', name, e)
                results[i] = TaskResult(name, error=e)
    return results  # type: ignore[return-value]
