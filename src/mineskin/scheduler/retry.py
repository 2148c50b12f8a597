"""Bounded retry for generate requests.

Generate requests are retried when the failure looks transient: the API
answered with a 5xx status, or with an unexpected sub-400 status on the
error path.  4xx responses (including 429) mean the request itself was
rejected and are raised on the first attempt; the queue spacing is what
keeps the client under the rate limit.

Failures without a status code (timeouts, refused connections) are not
retried either.
"""

from __future__ import annotations

import logging
from typing import TypeVar

from mineskin.exceptions import MineSkinError
from mineskin.scheduler.queue import JobQueue

logger = logging.getLogger(__name__)

J = TypeVar("J")
R = TypeVar("R")


def is_retryable(exc: BaseException) -> bool:
    """Return ``True`` if *exc* is a failure worth submitting again."""
    if not isinstance(exc, MineSkinError):
        return False
    code = exc.status_code
    if code is None:
        # TODO: consider retrying pure network failures once the API's
        # behaviour on duplicate generate submissions is confirmed.
        return False
    return code < 400 or code >= 500


async def submit_with_retry(queue: JobQueue[J, R], job: J, retries: int) -> R:
    """Submit *job* to *queue*, re-submitting up to *retries* times on transient errors.

    Every retry goes back through :meth:`JobQueue.submit`, so it waits its
    turn and respects the queue's spacing like any other job.

    Args:
        queue: The queue to submit to (the generate channel).
        job: The request to submit.
        retries: How many times the job may be re-submitted after the
            first attempt.

    Returns:
        The handler's result for the first successful attempt.

    Raises:
        MineSkinError: The last failure once the budget is used up, or the
            first non-retryable failure.
    """
    while True:
        try:
            return await queue.submit(job)
        except MineSkinError as exc:
            if retries <= 0 or not is_retryable(exc):
                raise
            retries -= 1
            logger.debug(
                "Retrying on %s after HTTP %s (%d retries left)",
                queue.name,
                exc.status_code,
                retries,
            )
