"""Self-populating in-memory cache with access and write expiry.

:class:`AsyncLoadingCache` maps string keys to values and fills itself on a
miss by awaiting a loader coroutine.  Concurrent ``get`` calls for a key
whose load is still running share that one load, so the loader never runs
twice in parallel for the same key.

Entries expire after ``expire_after_access`` seconds without a read, or
``expire_after_write`` seconds after they were stored, whichever comes
first.  Expired entries are skipped on read and purged by a background
sweep every ``expiration_interval`` seconds, so keys that are never asked
for again do not pile up.

Only non-``None`` loader results are stored: ``None`` means "absent" and is
returned to the caller without being cached.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")

Loader = Callable[[str], Awaitable[Optional[V]]]
LoadListener = Callable[[str, V], None]


@dataclass
class _Entry(Generic[V]):
    value: V
    written_at: float
    accessed_at: float
    seq: int = 0


class AsyncLoadingCache(Generic[V]):
    """Memoizing key/value store that loads missing keys through *loader*.

    Args:
        loader: Coroutine function called with a key on a miss.  Its
            result is stored unless it is ``None``; exceptions propagate
            to every caller waiting on that key and nothing is stored.
        expire_after_access: Seconds an entry may go unread, or ``None``.
        expire_after_write: Seconds an entry lives after being stored,
            or ``None``.
        expiration_interval: Seconds between background sweeps.
        name: Cache name used in log messages.
        clock: Monotonic time source, replaceable in tests.

    Example::

        skins = AsyncLoadingCache(fetch_skin, expire_after_write=300)
        skin = await skins.get("4dd8993d7368409bba7f81222940c78a")
    """

    def __init__(
        self,
        loader: Loader[V],
        *,
        expire_after_access: Optional[float] = None,
        expire_after_write: Optional[float] = None,
        expiration_interval: float = 30.0,
        name: str = "",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loader = loader
        self._expire_after_access = expire_after_access
        self._expire_after_write = expire_after_write
        self._expiration_interval = expiration_interval
        self._name = name
        self._clock = clock

        self._entries: dict[str, _Entry[V]] = {}
        self._loading: dict[str, asyncio.Task[Optional[V]]] = {}
        self._listeners: list[LoadListener[V]] = []
        self._sweeper: Optional[asyncio.Task[None]] = None
        self._ended = False
        self._hits = 0
        self._misses = 0
        self._loads = 0
        self._write_seq = 0

    @property
    def name(self) -> str:
        return self._name

    # ------------------------------------------------------------------ #
    # Lookup
    # ------------------------------------------------------------------ #

    async def get(self, key: str) -> Optional[V]:
        """Return the value for *key*, loading it on a miss.

        Returns:
            The cached or freshly loaded value, or ``None`` if the loader
            reported the key as absent.

        Raises:
            Exception: Whatever the loader raised.  The failure is not
                cached; the next call loads again.
        """
        self._start_sweeper()

        entry = self._live_entry(key)
        if entry is not None:
            self._hits += 1
            entry.accessed_at = self._clock()
            return entry.value

        task = self._loading.get(key)
        if task is None:
            self._misses += 1
            task = asyncio.get_running_loop().create_task(self._load(key))
            self._loading[key] = task
        # shield: a cancelled caller must not cancel the load other callers share
        return await asyncio.shield(task)

    def get_if_present(self, key: str) -> Optional[V]:
        """Return the live value for *key* without loading, or ``None``."""
        entry = self._live_entry(key)
        if entry is None:
            return None
        entry.accessed_at = self._clock()
        return entry.value

    def put(self, key: str, value: V) -> None:
        """Store *value* under *key*, replacing any entry and resetting its expiry.

        A load of *key* still running when this is called does not overwrite
        *value*; its callers receive *value* instead.
        """
        self._start_sweeper()
        now = self._clock()
        self._write_seq += 1
        self._entries[key] = _Entry(
            value=value, written_at=now, accessed_at=now, seq=self._write_seq
        )

    def invalidate(self, key: str) -> None:
        """Remove the entry for *key*, if any."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Remove all entries.  Loads in progress are not affected."""
        self._entries.clear()

    def add_load_listener(self, listener: LoadListener[V]) -> None:
        """Register *listener* to be called with ``(key, value)`` after each successful load.

        Listeners run before the waiting callers resume and are not called
        for ``None`` results.
        """
        self._listeners.append(listener)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._live_entry(key) is not None

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``name``, ``size``, ``loading`` (keys with a
            load in progress), ``hits``, ``misses`` and ``loads``.
        """
        return {
            "name": self._name,
            "size": len(self._entries),
            "loading": len(self._loading),
            "hits": self._hits,
            "misses": self._misses,
            "loads": self._loads,
        }

    # ------------------------------------------------------------------ #
    # Expiry
    # ------------------------------------------------------------------ #

    def sweep(self) -> int:
        """Purge every expired entry and return how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if self._is_expired(entry, now)]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Cache %s purged %d expired entries", self._name, len(expired))
        return len(expired)

    def end(self) -> None:
        """Stop the background sweep.

        Entries and loads in progress are left alone and the cache keeps
        answering ``get`` calls.  Calling this more than once is harmless.
        """
        self._ended = True
        if self._sweeper is not None:
            self._sweeper.cancel()
            self._sweeper = None

    def _is_expired(self, entry: _Entry[V], now: float) -> bool:
        if (
            self._expire_after_access is not None
            and now - entry.accessed_at > self._expire_after_access
        ):
            return True
        if (
            self._expire_after_write is not None
            and now - entry.written_at > self._expire_after_write
        ):
            return True
        return False

    def _live_entry(self, key: str) -> Optional[_Entry[V]]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._is_expired(entry, self._clock()):
            del self._entries[key]
            return None
        return entry

    def _start_sweeper(self) -> None:
        if self._ended or (self._sweeper is not None and not self._sweeper.done()):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._sweeper = loop.create_task(
            self._sweep_periodically(), name=f"mineskin-cache-sweep-{self._name}"
        )

    async def _sweep_periodically(self) -> None:
        while True:
            await asyncio.sleep(self._expiration_interval)
            self.sweep()

    # ------------------------------------------------------------------ #
    # Loading
    # ------------------------------------------------------------------ #

    async def _load(self, key: str) -> Optional[V]:
        seq = self._write_seq
        try:
            logger.debug("Cache %s loading %s", self._name, key)
            self._loads += 1
            value = await self._loader(key)
            written = self._entries.get(key)
            if written is not None and written.seq > seq:
                # put() during the load wins over the loaded value
                logger.debug("Cache %s dropped load of %s superseded by put", self._name, key)
                return written.value
            if value is not None:
                self.put(key, value)
                for listener in self._listeners:
                    listener(key, value)
            return value
        finally:
            self._loading.pop(key, None)
