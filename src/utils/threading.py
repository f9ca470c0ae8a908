"""Background work helpers for EVE Settings Manager.

Provides a bounded worker pool for remote lookups and a task wrapper
for running long operations off the caller's thread.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, List, Optional, Sequence, TypeVar


T = TypeVar("T")
R = TypeVar("R")

logger = logging.getLogger("eve_settings.threading")


def map_limit(
    items: Sequence[T],
    limit: int,
    fn: Callable[[T, int], R]
) -> List[Optional[R]]:
    """
    Apply fn to every item using at most ``limit`` worker threads.

    Each worker pulls the next index from a shared counter until the
    items are exhausted. Results keep the input order. An exception in
    fn is logged and leaves that item's slot as None; it does not stop
    the other workers.

    Args:
        items: Items to process
        limit: Maximum number of concurrent workers
        fn: Callable taking (item, index)

    Returns:
        Results in input order
    """
    results: List[Optional[R]] = [None] * len(items)
    if not items:
        return results

    next_index = 0
    index_lock = threading.Lock()

    def worker() -> None:
        nonlocal next_index
        while True:
            with index_lock:
                if next_index >= len(items):
                    return
                idx = next_index
                next_index += 1
            try:
                results[idx] = fn(items[idx], idx)
            except Exception as e:
                logger.warning(f"Worker task {idx} failed: {e}")
                results[idx] = None

    workers = [
        threading.Thread(target=worker, daemon=True)
        for _ in range(max(1, min(limit, len(items))))
    ]
    for thread in workers:
        thread.start()
    for thread in workers:
        thread.join()

    return results


class TaskStatus(Enum):
    """Status of a background task."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class TaskResult(Generic[T]):
    """Result of a background task."""
    status: TaskStatus
    result: Optional[T] = None
    error: Optional[Exception] = None


class ThreadedTask(Generic[T]):
    """
    Runs a callable in a background thread.

    Usage:
        task = ThreadedTask(resolver.resolve, args=(server, pending))
        task.start()
        ...
        outcome = task.get_result(timeout=30)
    """

    def __init__(
        self,
        target: Callable[..., T],
        args: tuple = (),
        kwargs: Optional[dict] = None,
        on_complete: Optional[Callable[[TaskResult[T]], None]] = None
    ):
        """
        Initialize a threaded task.

        Args:
            target: Callable to run in background
            args: Positional arguments for target
            kwargs: Keyword arguments for target
            on_complete: Callback when task finishes (called from worker thread)
        """
        self._target = target
        self._args = args
        self._kwargs = kwargs or {}
        self._on_complete = on_complete

        self._thread: Optional[threading.Thread] = None
        self._result: Optional[TaskResult[T]] = None
        self._status = TaskStatus.PENDING

    @property
    def status(self) -> TaskStatus:
        """Current task status."""
        return self._status

    @property
    def is_running(self) -> bool:
        """True if task is currently running."""
        return self._status == TaskStatus.RUNNING

    def start(self) -> None:
        """Start the background task."""
        if self._status != TaskStatus.PENDING:
            raise RuntimeError("Task already started")

        self._status = TaskStatus.RUNNING
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        """Internal method that runs in the background thread."""
        try:
            result = self._target(*self._args, **self._kwargs)
            self._result = TaskResult(status=TaskStatus.COMPLETED, result=result)
            self._status = TaskStatus.COMPLETED
        except Exception as e:
            self._result = TaskResult(status=TaskStatus.FAILED, error=e)
            self._status = TaskStatus.FAILED

        if self._on_complete:
            self._on_complete(self._result)

    def get_result(self, timeout: Optional[float] = None) -> TaskResult[T]:
        """
        Wait for task completion and return result.

        Args:
            timeout: Maximum time to wait (None = forever)

        Returns:
            TaskResult with status and result/error

        Raises:
            TimeoutError: If timeout expires before task completes
        """
        if self._thread:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                raise TimeoutError("Task did not complete within timeout")

        return self._result or TaskResult(status=TaskStatus.PENDING)
