"""Keep two caches that address the same entities by different keys in sync.

Users can be looked up by uuid and by name.  When one of the two caches
loads a valid user, :func:`cross_reference` makes it store that user in the
other cache as well, so the other lookup is answered without another round
trip to the API.

The link is made with load listeners after both caches have been built,
which avoids each cache's loader needing a reference to the other cache at
construction time.
"""

from __future__ import annotations

from typing import Callable, Optional, TypeVar

from mineskin.cache.loading_cache import AsyncLoadingCache, LoadListener

V = TypeVar("V")


def normalize_name(name: str) -> str:
    """Return the cache key for a user name (names are case-insensitive)."""
    return name.lower()


def cross_reference(
    by_id: AsyncLoadingCache[V],
    by_name: AsyncLoadingCache[V],
    id_key: Callable[[V], Optional[str]],
    name_key: Callable[[V], Optional[str]],
    is_valid: Callable[[V], bool],
) -> None:
    """Link *by_id* and *by_name* so a valid load through either fills the other.

    Args:
        by_id: Cache keyed by stable identifier.
        by_name: Cache keyed by normalized name.
        id_key: Returns the identifier key of a value.
        name_key: Returns the (already normalized) name key of a value.
        is_valid: Only values for which this returns ``True`` are copied.
    """

    def _copy_to(
        target: AsyncLoadingCache[V], key_of: Callable[[V], Optional[str]]
    ) -> LoadListener[V]:
        def _listener(_key: str, value: V) -> None:
            if not is_valid(value):
                return
            key = key_of(value)
            if key:
                target.put(key, value)

        return _listener

    by_id.add_load_listener(_copy_to(by_name, name_key))
    by_name.add_load_listener(_copy_to(by_id, id_key))
