"""Bounded worker pool.

A Condition-guarded slot counter gates a ThreadPoolExecutor: the dispatching
thread blocks in submit() until one of the `capacity` slots is free, the task
runs on a pool thread and the slot is released in a finally block whatever the
task does. Submitted futures are tracked so join() can wait for the set to
drain.
"""

import concurrent.futures
import logging
import threading
from typing import Any, Callable, Optional, Set

from cac.config.models import default_workers


class WorkerPool:
    """Runs at most `capacity` tasks concurrently.

    Args:
        capacity: Number of slots. Defaults to the CPU count.
    """

    def __init__(self, capacity: Optional[int] = None):
        capacity = capacity if capacity is not None else default_workers()
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self.logger = logging.getLogger(__name__)

        self._slots = threading.Condition()
        self._in_flight = 0
        self._peak_in_flight = 0

        self._futures: Set[concurrent.futures.Future] = set()
        self._futures_lock = threading.Lock()
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=capacity, thread_name_prefix="cac-worker"
        )

    @property
    def in_flight(self) -> int:
        with self._slots:
            return self._in_flight

    @property
    def peak_in_flight(self) -> int:
        with self._slots:
            return self._peak_in_flight

    def acquire(self) -> None:
        """Blocks until a slot is free, then takes it."""
        with self._slots:
            while self._in_flight >= self.capacity:
                self._slots.wait()
            self._in_flight += 1
            self._peak_in_flight = max(self._peak_in_flight, self._in_flight)

    def release(self) -> None:
        with self._slots:
            if self._in_flight <= 0:
                raise RuntimeError("release() called without a matching acquire()")
            self._in_flight -= 1
            self._slots.notify()

    def submit(self, fn: Callable[..., Any], *args: Any) -> concurrent.futures.Future:
        """Acquires a slot, then runs fn(*args) on a pool thread (fire-and-forget)."""
        self.acquire()

        def _run():
            try:
                return fn(*args)
            finally:
                self.release()

        try:
            future = self._executor.submit(_run)
        except RuntimeError:
            self.release()
            raise

        with self._futures_lock:
            self._futures.add(future)
        future.add_done_callback(self._forget)
        return future

    def _forget(self, future: concurrent.futures.Future) -> None:
        with self._futures_lock:
            self._futures.discard(future)
        if not future.cancelled() and future.exception() is not None:
            self.logger.error(f"Worker task failed with exception: {future.exception()}")

    def join(self) -> None:
        """Blocks until every submitted task has finished."""
        while True:
            with self._futures_lock:
                pending = set(self._futures)
            if not pending:
                return
            concurrent.futures.wait(pending)

    def shutdown(self) -> None:
        self.join()
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "WorkerPool":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.shutdown()
        return False
