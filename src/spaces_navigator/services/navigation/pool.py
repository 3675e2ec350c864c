"""Bounded worker pool for concurrent per-item lookups.

Each unit of work is handed to exactly one worker. Workers append their
findings to a shared ``FetchResults`` collection, which separates
selectable results from unselectable ones.
"""

from __future__ import annotations

import queue
import threading
from collections.abc import Callable, Sequence
from typing import Generic, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")
U = TypeVar("U")

DEFAULT_MAX_WORKERS = 20


class FetchResults(Generic[T]):
    """Thread-safe result collection with two buckets."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.selectable: list[T] = []
        self.unselectable: list[T] = []

    def add(self, result: T) -> None:
        with self._lock:
            self.selectable.append(result)

    def add_unselectable(self, result: T) -> None:
        with self._lock:
            self.unselectable.append(result)


class BoundedFetchPool:
    """Runs one callable per unit with at most ``max_workers`` threads.

    Example:
        >>> pool = BoundedFetchPool(max_workers=20)
        >>> results = pool.run(spaces, lambda space, out: out.add(space.name))
        >>> sorted(results.selectable)
        ['eu-west', 'us-east']
    """

    def __init__(self, max_workers: int | None = DEFAULT_MAX_WORKERS) -> None:
        """Initialize the pool.

        Args:
            max_workers: Upper bound on concurrent workers, or None for one
                worker per unit.
        """
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._max_workers = max_workers

    def worker_count(self, units: int) -> int:
        """Number of workers started for ``units`` units of work."""
        if self._max_workers is None:
            return units
        return min(self._max_workers, units)

    def run(
        self,
        units: Sequence[U],
        work: Callable[[U, FetchResults[T]], None],
    ) -> FetchResults[T]:
        """Process every unit and wait for all workers to finish.

        ``work`` is expected to record its own failures as results. An
        exception escaping ``work`` does not stop the other units; the first
        one is re-raised after every worker has finished.

        Args:
            units: Units of work.
            work: Callable receiving a unit and the shared results.

        Returns:
            The collected results.
        """
        results: FetchResults[T] = FetchResults()
        pending: queue.Queue[U] = queue.Queue()
        for unit in units:
            pending.put_nowait(unit)

        errors: list[Exception] = []
        errors_lock = threading.Lock()

        def drain() -> None:
            while True:
                try:
                    unit = pending.get_nowait()
                except queue.Empty:
                    return
                try:
                    work(unit, results)
                except Exception as e:
                    logger.debug("fetch_pool_work_failed", error=str(e))
                    with errors_lock:
                        errors.append(e)

        workers = [
            threading.Thread(target=drain, name=f"fetch-pool-{i}", daemon=True)
            for i in range(self.worker_count(len(units)))
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

        if errors:
            raise errors[0]
        return results
