"""Tests for chunked fan-out/fan-in execution."""

import asyncio
import math
import threading

import pytest

from vault_helper_evm import (
    InvalidArgumentError,
    QueryFailure,
    chunk,
    execute_batched,
    execute_batched_sync,
)


async def _identity(batch: list) -> list:
    return list(batch)


class TestChunk:
    """Tests for chunk."""

    @pytest.mark.parametrize("size", [1, 2, 3, 7, 10, 11, 100])
    def test_chunks_reassemble_to_input(self, size: int) -> None:
        """Concatenating chunks reproduces the input exactly."""
        items = list(range(10))
        chunks = chunk(items, size)

        assert [x for c in chunks for x in c] == items
        assert all(len(c) == size for c in chunks[:-1])
        assert 1 <= len(chunks[-1]) <= size

    def test_remainder_in_last_chunk(self) -> None:
        chunks = chunk(list(range(75)), 30)
        assert [len(c) for c in chunks] == [30, 30, 15]

    def test_exact_multiple(self) -> None:
        chunks = chunk(list(range(60)), 30)
        assert [len(c) for c in chunks] == [30, 30]

    def test_empty_input(self) -> None:
        assert chunk([], 5) == []

    def test_accepts_tuple(self) -> None:
        assert chunk(("a", "b", "c"), 2) == [["a", "b"], ["c"]]

    @pytest.mark.parametrize("size", [0, -1])
    def test_invalid_size(self, size: int) -> None:
        with pytest.raises(InvalidArgumentError, match="positive"):
            chunk([1, 2, 3], size)


class TestExecuteBatched:
    """Tests for the async executor."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("n,size", [(1, 1), (5, 1), (5, 2), (30, 30), (31, 30), (100, 7)])
    async def test_identity_preserves_order(self, n: int, size: int) -> None:
        subjects = [f"t{i}" for i in range(n)]
        assert await execute_batched(subjects, size, _identity) == subjects

    @pytest.mark.asyncio
    async def test_empty_input_dispatches_nothing(self) -> None:
        calls: list[list] = []

        async def query(batch):
            calls.append(batch)
            return batch

        assert await execute_batched([], 5, query) == []
        assert calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("size", [0, -3])
    async def test_invalid_batch_size(self, size: int) -> None:
        calls: list[list] = []

        async def query(batch):
            calls.append(batch)
            return batch

        with pytest.raises(InvalidArgumentError):
            await execute_batched([1, 2, 3], size, query)
        assert calls == []

    @pytest.mark.asyncio
    async def test_invalid_batch_size_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            await execute_batched([], 0, _identity)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("n,size", [(1, 1), (10, 3), (75, 30), (90, 30), (29, 30)])
    async def test_dispatch_count(self, n: int, size: int) -> None:
        calls: list[list] = []

        async def query(batch):
            calls.append(batch)
            return batch

        await execute_batched(list(range(n)), size, query)
        assert len(calls) == math.ceil(n / size)

    @pytest.mark.asyncio
    async def test_seventy_five_tokens_in_batches_of_thirty(self) -> None:
        subjects = [f"t{i}" for i in range(1, 76)]
        sizes: list[int] = []

        async def query(batch):
            sizes.append(len(batch))
            return [s.upper() for s in batch]

        result = await execute_batched(subjects, 30, query)

        assert sorted(sizes) == [15, 30, 30]
        assert len(result) == 75
        assert result == [s.upper() for s in subjects]

    @pytest.mark.asyncio
    async def test_order_independent_of_completion(self) -> None:
        """Later batches finishing first does not reorder results."""
        subjects = list(range(12))
        finished: list[int] = []

        async def query(batch):
            # First batch sleeps longest
            await asyncio.sleep(0.01 * (4 - batch[0] // 3))
            finished.append(batch[0])
            return [x * 10 for x in batch]

        result = await execute_batched(subjects, 3, query)

        assert finished == [9, 6, 3, 0]
        assert result == [x * 10 for x in subjects]

    @pytest.mark.asyncio
    async def test_batches_run_concurrently(self) -> None:
        """All batches are in flight before any completes."""
        started = 0
        all_started = asyncio.Event()

        async def query(batch):
            nonlocal started
            started += 1
            if started == 4:
                all_started.set()
            await asyncio.wait_for(all_started.wait(), timeout=1)
            return batch

        result = await execute_batched(list(range(8)), 2, query)
        assert result == list(range(8))

    @pytest.mark.asyncio
    async def test_failure_propagates(self) -> None:
        """One failing batch fails the whole call."""
        cause = RuntimeError("execution reverted")

        async def query(batch):
            if batch[0] == 30:
                raise cause
            return batch

        with pytest.raises(QueryFailure) as exc_info:
            await execute_batched(list(range(75)), 30, query)

        err = exc_info.value
        assert err.batch_index == 1
        assert (err.start, err.stop) == (30, 60)
        assert err.__cause__ is cause
        assert "execution reverted" in str(err)
        assert "subjects[30:60]" in str(err)

    @pytest.mark.asyncio
    async def test_failure_in_last_partial_batch(self) -> None:
        async def query(batch):
            if len(batch) < 30:
                raise ConnectionError("timeout")
            return batch

        with pytest.raises(QueryFailure) as exc_info:
            await execute_batched(list(range(75)), 30, query)

        assert exc_info.value.batch_index == 2
        assert (exc_info.value.start, exc_info.value.stop) == (60, 75)
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_failure_cancels_pending_batches(self) -> None:
        cancelled: list[int] = []
        never = asyncio.Event()

        async def query(batch):
            if batch[0] == 0:
                await asyncio.sleep(0)
                raise RuntimeError("boom")
            try:
                await never.wait()
            except asyncio.CancelledError:
                cancelled.append(batch[0])
                raise
            return batch

        with pytest.raises(QueryFailure):
            await execute_batched(list(range(6)), 2, query)

        assert sorted(cancelled) == [2, 4]

    @pytest.mark.asyncio
    async def test_batch_cancelling_itself_is_a_failure(self) -> None:
        """A query that raises CancelledError on its own fails the call like any other error."""
        cancelled: list[int] = []

        async def query(batch):
            if batch[0] == 2:
                await asyncio.sleep(0)
                raise asyncio.CancelledError()
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                cancelled.append(batch[0])
                raise
            return batch

        with pytest.raises(QueryFailure, match="cancelled") as exc_info:
            await execute_batched([0, 1, 2, 3], 2, query)

        assert exc_info.value.batch_index == 1
        assert (exc_info.value.start, exc_info.value.stop) == (2, 4)
        assert cancelled == [0]

    @pytest.mark.asyncio
    async def test_synchronous_raise_in_query_fn(self) -> None:
        """query_fn raising before returning an awaitable is still a QueryFailure."""

        def query(batch):
            raise TypeError("bad call")

        with pytest.raises(QueryFailure) as exc_info:
            await execute_batched([1, 2, 3], 2, query)

        assert exc_info.value.batch_index == 0
        assert isinstance(exc_info.value.__cause__, TypeError)

    @pytest.mark.asyncio
    async def test_caller_cancellation_cancels_batches(self) -> None:
        cancelled: list[int] = []
        entered = asyncio.Event()

        async def query(batch):
            entered.set()
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                cancelled.append(batch[0])
                raise
            return batch

        task = asyncio.ensure_future(execute_batched(list(range(4)), 2, query))
        await entered.wait()
        await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert sorted(cancelled) == [0, 2]

    @pytest.mark.asyncio
    async def test_length_mismatch_strict(self) -> None:
        async def query(batch):
            return batch[:-1]

        with pytest.raises(QueryFailure, match="expected 2 results, got 1") as exc_info:
            await execute_batched([1, 2, 3, 4], 2, query)

        assert exc_info.value.batch_index == 0

    @pytest.mark.asyncio
    async def test_length_mismatch_not_strict(self) -> None:
        async def query(batch):
            return [batch[0]]

        assert await execute_batched([1, 2, 3, 4, 5], 2, query, strict=False) == [1, 3, 5]


class TestExecuteBatchedSync:
    """Tests for the thread pool executor."""

    @pytest.mark.parametrize("n,size", [(1, 1), (5, 2), (30, 30), (75, 30), (100, 7)])
    def test_identity_preserves_order(self, n: int, size: int) -> None:
        subjects = [f"t{i}" for i in range(n)]
        assert execute_batched_sync(subjects, size, list) == subjects

    def test_empty_input_dispatches_nothing(self) -> None:
        calls: list[list] = []

        def query(batch):
            calls.append(batch)
            return batch

        assert execute_batched_sync([], 3, query) == []
        assert calls == []

    def test_invalid_batch_size(self) -> None:
        with pytest.raises(InvalidArgumentError):
            execute_batched_sync([1, 2], 0, list)

    def test_seventy_five_tokens_in_batches_of_thirty(self) -> None:
        lock = threading.Lock()
        sizes: list[int] = []

        def query(batch):
            with lock:
                sizes.append(len(batch))
            return batch

        subjects = list(range(75))
        assert execute_batched_sync(subjects, 30, query) == subjects
        assert sorted(sizes) == [15, 30, 30]

    def test_runs_on_worker_threads(self) -> None:
        barrier = threading.Barrier(3, timeout=1)

        def query(batch):
            barrier.wait()
            return batch

        assert execute_batched_sync(list(range(6)), 2, query) == list(range(6))

    def test_max_workers_limits_threads(self) -> None:
        lock = threading.Lock()
        names: set[str] = set()

        def query(batch):
            with lock:
                names.add(threading.current_thread().name)
            return batch

        execute_batched_sync(list(range(20)), 1, query, max_workers=2)
        assert 1 <= len(names) <= 2

    def test_failure_propagates(self) -> None:
        cause = ValueError("decode error")

        def query(batch):
            if batch[0] == 30:
                raise cause
            return batch

        with pytest.raises(QueryFailure) as exc_info:
            execute_batched_sync(list(range(75)), 30, query)

        assert exc_info.value.batch_index == 1
        assert (exc_info.value.start, exc_info.value.stop) == (30, 60)
        assert exc_info.value.__cause__ is cause

    def test_length_mismatch_strict(self) -> None:
        with pytest.raises(QueryFailure, match="expected 3 results, got 0"):
            execute_batched_sync([1, 2, 3], 3, lambda batch: [])

    def test_failure_skips_batches_not_yet_started(self) -> None:
        """With one worker, batches queued behind a failure never reach query_fn."""
        started: list[int] = []

        def query(batch):
            started.append(batch[0])
            if batch[0] == 0:
                raise RuntimeError("boom")
            return batch

        with pytest.raises(QueryFailure) as exc_info:
            execute_batched_sync(list(range(100)), 1, query, max_workers=1)

        assert exc_info.value.batch_index == 0
        assert started == [0]

    @pytest.mark.parametrize("max_workers", [0, -1])
    def test_invalid_max_workers(self, max_workers: int) -> None:
        with pytest.raises(InvalidArgumentError, match="max_workers"):
            execute_batched_sync([1, 2], 1, list, max_workers=max_workers)
