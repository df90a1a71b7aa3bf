"""Bounded thread pool for running independent per-item tasks."""
import concurrent.futures
import logging
from typing import Callable, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def run_with_concurrency(
    items: Sequence[T],
    fn: Callable[[T, int], R],
    max_concurrency: int,
    label: Optional[Callable[[T], str]] = None,
) -> list[R]:
    """
    Run fn(item, index) for every item with at most max_concurrency in flight.

    A failing call is logged and left out of the results, so siblings are
    unaffected; callers must not assume one result per item.

    Args:
        items: Inputs, processed in any order.
        fn: Called as fn(item, index).
        max_concurrency: Worker thread count (at least 1 is used).
        label: Optional name for an item, used in failure logs.

    Returns:
        Results of the successful calls, in input order.

    Example:
        >>> run_with_concurrency([1, 2, 3], lambda x, i: x * 10, 2)
        [10, 20, 30]
    """
    if not items:
        return []

    outcomes: dict[int, R] = {}
    workers = max(1, min(max_concurrency, len(items)))

    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            executor.submit(fn, item, index): index
            for index, item in enumerate(items)
        }
        for future in concurrent.futures.as_completed(futures):
            index = futures[future]
            try:
                outcomes[index] = future.result()
            except Exception as e:
                name = label(items[index]) if label else f"item {index}"
                logger.warning(f"Task for {name} failed: {type(e).__name__}: {e}")

    return [outcomes[i] for i in sorted(outcomes)]
