"""Bounded async fan-out shared by aggregation, validation and summarization."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from topic_news.core.logging import get_logger
from topic_news.utils.error_logger import log_processing_error

logger = get_logger(__name__)

ItemT = TypeVar("ItemT")
ResultT = TypeVar("ResultT")


def effective_concurrency(limit: int, item_count: int) -> int:
    """Clamp ``limit`` to ``min(limit, max(1, item_count))`` and at least 1."""
    return max(1, min(limit, max(1, item_count)))


async def run_bounded(
    items: Sequence[ItemT],
    operation: Callable[[ItemT], Awaitable[ResultT]],
    *,
    concurrency: int,
    component: str = "worker_pool",
) -> list[ResultT | None]:
    """Run ``operation`` over every item with at most ``concurrency`` in flight.

    Exactly ``effective_concurrency(concurrency, len(items))`` worker coroutines
    are started; each pulls the next unclaimed index until the list is drained.
    Every item is attempted once. Results are merged after the workers join and
    returned in input order, so callers never append to shared state concurrently.

    Operations are expected to handle their own failures. An exception that
    still escapes is logged and recorded as ``None`` for that slot; it never
    stops the remaining items.

    Args:
        items: Work items, processed in claim order.
        operation: Async callable applied to each item.
        concurrency: Upper bound on simultaneously running operations.
        component: Name used when logging escaped failures.

    Returns:
        One result per item, ``None`` where the operation raised.
    """
    if not items:
        return []

    results: list[ResultT | None] = [None] * len(items)
    next_index = 0

    async def worker() -> None:
        nonlocal next_index
        while True:
            # Claim happens between awaits, so no two workers take the same index
            index = next_index
            if index >= len(items):
                return
            next_index += 1
            try:
                results[index] = await operation(items[index])
            except Exception as exc:  # noqa: BLE001
                log_processing_error(
                    component,
                    item_id=index,
                    error=exc,
                    operation="bounded_operation",
                )

    worker_count = effective_concurrency(concurrency, len(items))
    logger.debug(
        "Running %s items with %s workers",
        len(items),
        worker_count,
        extra={"component": component, "operation": "run_bounded"},
    )
    await asyncio.gather(*(worker() for _ in range(worker_count)))
    return results
