from __future__ import annotations

__all__ = ["DEFAULT_PROCESSES", "parallel_map"]

from multiprocessing.pool import ThreadPool
from typing import Callable, Iterable, TypeVar

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_PROCESSES = 8


def parallel_map(function: Callable[[T], R], items: Iterable[T], processes: int) -> list[R]:
    """Apply `function` to every item on a pool of threads and wait for all of them.

    The results are in the order of the items. With a single process or a single item, the work
    runs in the calling thread.
    """
    items = list(items)
    if processes <= 1 or len(items) <= 1:
        return [function(item) for item in items]

    with ThreadPool(min(processes, len(items))) as pool:
        return pool.map(function, items)
