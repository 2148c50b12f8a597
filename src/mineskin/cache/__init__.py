"""In-memory lookup caching for mineskin.

This package provides :class:`AsyncLoadingCache`, a self-populating cache
that loads missing keys through a coroutine, de-duplicates concurrent loads
of the same key, and expires entries by idle time and by age.
:func:`cross_reference` links two caches that hold the same entities under
different keys (user uuid and user name).

The caches are built and owned by :class:`~mineskin.client.MineSkinClient`
and configured by :class:`~mineskin.models.CacheConfig`.
"""

from mineskin.cache.cross_reference import cross_reference, normalize_name
from mineskin.cache.loading_cache import AsyncLoadingCache

__all__ = ["AsyncLoadingCache", "cross_reference", "normalize_name"]
