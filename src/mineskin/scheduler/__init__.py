"""Request scheduling for mineskin.

Provides :class:`JobQueue`, a spaced single-worker FIFO used once per
request channel, and :func:`submit_with_retry`, the retry policy applied to
the generate channel.

The client builds two queues: ``generate`` (slow spacing, POST requests)
and ``get`` (fast spacing, lookups).  They run independently of each other.
"""

from mineskin.scheduler.queue import JobQueue
from mineskin.scheduler.retry import is_retryable, submit_with_retry

__all__ = ["JobQueue", "is_retryable", "submit_with_retry"]
