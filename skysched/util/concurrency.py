import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

# Below this many items the pool start-up costs more than it saves.
DEFAULT_PARALLEL_THRESHOLD = 10


def parallel_map(
    func: Callable[[T], R],
    items: Iterable[T],
    max_workers: int | None = None,
    threshold: int = DEFAULT_PARALLEL_THRESHOLD,
) -> list[R]:
    """Apply ``func`` to every item and return results in input order.

    Each call must be independent of the others. Small inputs run in-line;
    larger ones fan out over a thread pool. ``executor.map`` yields results in
    submission order, so completion order never leaks into the output.
    """
    items = list(items)
    if len(items) <= threshold or max_workers == 1:
        return [func(item) for item in items]
    logger.debug("fanning out %d items (max_workers=%s)", len(items), max_workers)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(func, items))
