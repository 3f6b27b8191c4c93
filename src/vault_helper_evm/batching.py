"""
Chunked fan-out/fan-in for batched contract reads.

A single Helper call over hundreds of tokens can exceed the gas or
response-size limits of ``eth_call``. These functions split the subjects
into fixed-size batches, run one query per batch concurrently and stitch
the results back together in input order.
"""

import asyncio
import logging
import threading
from collections.abc import Awaitable, Callable, Sequence
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import TypeVar

from ._exceptions import InvalidArgumentError, QueryFailure

logger = logging.getLogger(__name__)

S = TypeVar("S")
R = TypeVar("R")

# Batch size used by the Helper for balance reads
DEFAULT_BATCH_SIZE = 30

# Upper bound on threads used by execute_batched_sync
DEFAULT_MAX_WORKERS = 8


def chunk(items: Sequence[S], size: int) -> list[list[S]]:
    """
    Split items into consecutive lists of ``size`` elements.

    The last list holds the remainder. An empty input gives no chunks.

    Raises:
        InvalidArgumentError: If size is less than 1
    """
    if size < 1:
        raise InvalidArgumentError(f"Size needs to be positive: {size}")

    return [list(items[i : i + size]) for i in range(0, len(items), size)]


class _BatchCancelled(Exception):
    """A batch query cancelled itself."""


def _bounds(batch_index: int, batch_size: int, batch: list) -> tuple[int, int]:
    start = batch_index * batch_size
    return start, start + len(batch)


def _collect(
    batches: list[list[S]],
    batch_size: int,
    results: list[list[R]],
    strict: bool,
) -> list[R]:
    """Flatten per-batch results in batch order, checking lengths if strict."""
    flat: list[R] = []
    for index, (batch, rows) in enumerate(zip(batches, results)):
        rows = list(rows)
        if strict and len(rows) != len(batch):
            start, stop = _bounds(index, batch_size, batch)
            raise QueryFailure(
                index,
                start,
                stop,
                f"expected {len(batch)} results, got {len(rows)}",
            )
        flat.extend(rows)
    return flat


async def execute_batched(
    subjects: Sequence[S],
    batch_size: int,
    query_fn: Callable[[list[S]], Awaitable[list[R]]],
    *,
    strict: bool = True,
) -> list[R]:
    """
    Run ``query_fn`` once per batch of subjects, concurrently.

    Results come back in the same order as ``subjects`` regardless of which
    batch finishes first. If any batch fails, the batches still in flight are
    cancelled and a QueryFailure is raised for the failing batch.

    Args:
        subjects: Ordered query subjects (e.g. token addresses)
        batch_size: Maximum number of subjects per query
        query_fn: Coroutine function taking one batch and returning its results
        strict: Require each batch to return exactly one result per subject

    Returns:
        Flattened results, index-aligned with ``subjects``

    Raises:
        InvalidArgumentError: If batch_size is less than 1
        QueryFailure: If any batch query fails (original error as __cause__)

    Example:
        >>> async def fetch(batch):
        ...     return await contract.functions.tokensBalances(owner, batch).call()
        >>>
        >>> balances = await execute_batched(tokens, 30, fetch)
    """
    batches = chunk(subjects, batch_size)
    if not batches:
        return []

    logger.debug("Dispatching %d subjects in %d batches of up to %d", len(subjects), len(batches), batch_size)

    stopping = False

    # Wrapped so a query_fn that raises before returning an awaitable fails inside its own task
    async def _run(batch: list[S]) -> list[R]:
        try:
            return await query_fn(batch)
        except asyncio.CancelledError as exc:
            if stopping:
                raise
            # Raised by query_fn itself rather than by this executor
            raise _BatchCancelled("cancelled") from exc

    tasks = [asyncio.ensure_future(_run(batch)) for batch in batches]

    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        stopping = True
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    # Retrieve every exception so none is reported as unobserved
    failures = [
        (index, task.exception())
        for index, task in enumerate(tasks)
        if task in done and not task.cancelled() and task.exception() is not None
    ]
    if failures:
        stopping = True
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

        index, exc = failures[0]
        start, stop = _bounds(index, batch_size, batches[index])
        logger.warning("Batch %d of %d failed: %s", index, len(batches), exc)
        raise QueryFailure(index, start, stop, str(exc) or type(exc).__name__) from exc

    return _collect(batches, batch_size, [task.result() for task in tasks], strict)


def execute_batched_sync(
    subjects: Sequence[S],
    batch_size: int,
    query_fn: Callable[[list[S]], list[R]],
    *,
    strict: bool = True,
    max_workers: int | None = None,
) -> list[R]:
    """
    Sync version of execute_batched backed by a thread pool.

    Once a batch fails, batches that have not started yet are skipped
    without calling ``query_fn``. Batches already running are allowed to
    finish and their results are discarded.

    Raises:
        InvalidArgumentError: If batch_size or max_workers is less than 1
        QueryFailure: If any batch query fails (original error as __cause__)
    """
    if max_workers is not None and max_workers < 1:
        raise InvalidArgumentError(f"max_workers needs to be positive: {max_workers}")

    batches = chunk(subjects, batch_size)
    if not batches:
        return []

    workers = min(len(batches), max_workers if max_workers is not None else DEFAULT_MAX_WORKERS)
    logger.debug(
        "Dispatching %d subjects in %d batches of up to %d on %d threads",
        len(subjects),
        len(batches),
        batch_size,
        workers,
    )

    stop = threading.Event()

    # Set before the failing future completes, so queued batches see it when they start
    def _run(batch: list[S]) -> list[R] | None:
        if stop.is_set():
            return None
        try:
            return query_fn(batch)
        except Exception:
            stop.set()
            raise

    executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="vault-helper-batch")
    try:
        futures: list[Future] = [executor.submit(_run, batch) for batch in batches]
        done, _ = wait(futures, return_when=FIRST_EXCEPTION)

        failures = [
            (index, future.exception())
            for index, future in enumerate(futures)
            if future in done and future.exception() is not None
        ]
        if failures:
            index, exc = failures[0]
            start, stop = _bounds(index, batch_size, batches[index])
            logger.warning("Batch %d of %d failed: %s", index, len(batches), exc)
            raise QueryFailure(index, start, stop, str(exc) or type(exc).__name__) from exc

        return _collect(batches, batch_size, [future.result() for future in futures], strict)
    finally:
        executor.shutdown(wait=True, cancel_futures=True)
