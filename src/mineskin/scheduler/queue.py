"""Spaced FIFO job queue -- one instance per request channel.

A :class:`JobQueue` hands submitted jobs to an async handler one at a
time, in submission order, and keeps at least ``interval`` seconds between
the start of one job and the start of the next.  The next job is only
started once the previous one has settled, so a queue never has more than
one job in flight and a burst of *N* submissions takes at least
``(N - 1) * interval`` seconds to drain.

The worker task is started lazily by the first :meth:`JobQueue.submit`
so queues can be built outside a running event loop.

Example::

    queue = JobQueue(transport.issue, interval=1.0, name="get")
    response = await queue.submit(descriptor)
    ...
    queue.end()
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from mineskin.exceptions import QueueClosedError

logger = logging.getLogger(__name__)

J = TypeVar("J")
R = TypeVar("R")


class JobQueue(Generic[J, R]):
    """Serialises jobs onto *handler* with a minimum start-to-start spacing.

    Args:
        handler: Async callable that performs one job and returns its
            result.  Exceptions it raises are delivered to the submitter
            unchanged.
        interval: Minimum number of seconds between the start of two
            consecutive jobs.
        name: Channel name used in log messages.
    """

    def __init__(
        self,
        handler: Callable[[J], Awaitable[R]],
        interval: float,
        name: str = "",
    ) -> None:
        self._handler = handler
        self._interval = interval
        self._name = name
        self._jobs: deque[tuple[J, asyncio.Future[R]]] = deque()
        self._wakeup: Optional[asyncio.Event] = None
        self._worker: Optional[asyncio.Task[None]] = None
        self._ended = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def pending(self) -> int:
        """Number of jobs waiting to be started."""
        return len(self._jobs)

    @property
    def closed(self) -> bool:
        """Whether :meth:`end` has been called."""
        return self._ended

    async def submit(self, job: J) -> R:
        """Queue *job* and wait for the handler's result.

        Raises:
            QueueClosedError: If the queue was ended before the job started.
            Exception: Whatever the handler raised for this job.
        """
        if self._ended:
            raise QueueClosedError(f"Job queue '{self._name}' has been ended")

        loop = asyncio.get_running_loop()
        future: asyncio.Future[R] = loop.create_future()
        self._jobs.append((job, future))
        self._ensure_worker()
        assert self._wakeup is not None
        self._wakeup.set()
        return await future

    def end(self) -> None:
        """Stop starting queued jobs.

        A job that is already running completes normally.  Jobs still
        waiting are rejected with :class:`QueueClosedError`.  Calling this
        more than once has no further effect.
        """
        if self._ended:
            return
        self._ended = True

        dropped = 0
        while self._jobs:
            _, future = self._jobs.popleft()
            if not future.done():
                future.set_exception(
                    QueueClosedError(f"Job queue '{self._name}' has been ended")
                )
                dropped += 1
        if dropped:
            logger.debug("Queue %s ended, rejected %d waiting job(s)", self._name, dropped)

        if self._wakeup is not None:
            self._wakeup.set()

    async def wait_closed(self) -> None:
        """Wait until the worker has stopped after :meth:`end`.

        Returns once the job that was running when the queue was ended has
        settled.  Returns immediately if no worker was ever started.
        """
        worker = self._worker
        if worker is None or worker.done():
            return
        await asyncio.gather(worker, return_exceptions=True)

    # ------------------------------------------------------------------ #
    # Worker
    # ------------------------------------------------------------------ #

    def _ensure_worker(self) -> None:
        if self._wakeup is None:
            self._wakeup = asyncio.Event()
        if self._worker is None or self._worker.done():
            self._worker = asyncio.get_running_loop().create_task(
                self._run(), name=f"mineskin-queue-{self._name}"
            )

    async def _run(self) -> None:
        assert self._wakeup is not None
        loop = asyncio.get_running_loop()
        next_start = 0.0

        while not self._ended:
            if not self._jobs:
                self._wakeup.clear()
                await self._wakeup.wait()
                continue

            delay = next_start - loop.time()
            if delay > 0:
                await self._sleep(delay)
                continue

            job, future = self._jobs.popleft()
            if future.cancelled():
                continue

            started = loop.time()
            next_start = started + self._interval
            logger.debug("Queue %s issuing job (%d waiting)", self._name, len(self._jobs))
            try:
                result = await self._handler(job)
            except asyncio.CancelledError:
                if not future.done():
                    future.cancel()
                raise
            except Exception as exc:
                if not future.done():
                    future.set_exception(exc)
            else:
                if not future.done():
                    future.set_result(result)

    async def _sleep(self, delay: float) -> None:
        """Wait *delay* seconds, returning early when the queue is ended."""
        assert self._wakeup is not None
        self._wakeup.clear()
        if self._ended:
            return
        try:
            await asyncio.wait_for(self._wakeup.wait(), timeout=delay)
        except asyncio.TimeoutError:
            pass


def describe(queue: JobQueue[Any, Any]) -> dict[str, Any]:
    """Return a snapshot of *queue* for diagnostics."""
    return {
        "name": queue.name,
        "interval": queue.interval,
        "pending": queue.pending,
        "closed": queue.closed,
    }
