# src/tdocs/batch.py
"""
Bounded-concurrency task runner.

A fixed pool of asyncio workers drains a queue of items. A failing item is
logged and dropped; it never cancels its siblings. The returned list holds the
successful results in input order.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Sequence, TypeVar

logger = logging.getLogger("tdocs.batch")

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_CONCURRENCY = 10


async def execute_in_batches(
    items: Sequence[T],
    processor: Callable[[T], Awaitable[R]],
    concurrency: int = DEFAULT_CONCURRENCY,
) -> List[R]:
    if not items:
        return []

    queue: asyncio.Queue = asyncio.Queue()
    for index, item in enumerate(items):
        queue.put_nowait((index, item))

    results: Dict[int, R] = {}

    async def worker() -> None:
        while True:
            try:
                index, item = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            try:
                results[index] = await processor(item)
            except Exception as e:
                logger.error("Task %d failed: %s", index, e, exc_info=logger.isEnabledFor(logging.DEBUG))
            finally:
                queue.task_done()

    workers = [asyncio.create_task(worker()) for _ in range(min(max(1, concurrency), len(items)))]
    await asyncio.gather(*workers)

    return [results[i] for i in sorted(results)]
