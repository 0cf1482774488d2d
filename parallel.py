"""Split a 1-D index range across a fixed number of worker threads.

Every transform chooses its partition axis so that no two chunks write to
the same bytes; the executor therefore takes no locks.
"""

from __future__ import annotations

import concurrent.futures
import logging
from typing import Callable, Iterator

from errors import InvalidArgumentError, NullArgumentError

logger = logging.getLogger(__name__)


def chunk_bounds(total: int, threads: int) -> Iterator[tuple[int, int]]:
    """Yield ``threads`` contiguous ``(start, end)`` ranges covering ``[0, total)``.

    Chunks are ``ceil(total / threads)`` wide; trailing chunks are clamped to
    ``total`` and may be empty.
    """
    if threads < 1:
        raise InvalidArgumentError("threads must be at least 1.")
    total = max(total, 0)
    step = -(-total // threads)
    for i in range(threads):
        yield min(i * step, total), min((i + 1) * step, total)


def run(total: int, threads: int, body: Callable[[int, int], None]) -> None:
    """Call ``body(start, end)`` for every chunk, one thread per chunk.

    Blocks until all workers finish. The first exception raised by a worker
    is re-raised here once the pool has shut down.
    """
    if body is None:
        raise NullArgumentError("body")
    chunks = list(chunk_bounds(total, threads))
    logger.debug("Dispatching %d units over %d threads: %s", total, threads, chunks)

    with concurrent.futures.ThreadPoolExecutor(max_workers=threads) as pool:
        futures = [pool.submit(body, start, end) for start, end in chunks]
        concurrent.futures.wait(futures)

    for future in futures:
        future.result()
