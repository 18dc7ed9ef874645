"""In-process cache for upstream API responses.

Each HTTP client owns its own ``ResponseCache``. Batch jobs use the
default unbounded cache since the process is short-lived; anything that
stays up (the local API server) should pass ``max_entries`` and/or
``ttl_seconds`` so entries are evicted.
"""

import logging
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Mapping, Optional
from urllib.parse import urlencode

logger = logging.getLogger(__name__)


def make_cache_key(endpoint: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """Build a cache key from endpoint path and query parameters.

    Parameter order does not matter:
        >>> make_cache_key("/bill/118/hr", {"offset": 0, "limit": 50})
        '/bill/118/hr?limit=50&offset=0'
    """
    if not params:
        return f"{endpoint}?"
    query = urlencode(sorted((str(k), str(v)) for k, v in params.items()))
    return f"{endpoint}?{query}"


class ResponseCache:
    """LRU + TTL response cache.

    Args:
        max_entries: Evict least-recently-used entries beyond this size
            (None = unbounded)
        ttl_seconds: Expire entries after this many seconds (None = never)
        clock: Monotonic time source, injectable for tests
    """

    def __init__(
        self,
        max_entries: Optional[int] = None,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value or None if missing/expired."""
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            logger.debug(f"Cache miss: {key}")
            return None

        if entry["expiry"] is not None and self._clock() >= entry["expiry"]:
            del self._entries[key]
            self.misses += 1
            logger.debug(f"Cache expired: {key}")
            return None

        self._entries.move_to_end(key)
        self.hits += 1
        logger.debug(f"Cache hit: {key}")
        return entry["value"]

    def set(self, key: str, value: Any) -> None:
        expiry = self._clock() + self.ttl_seconds if self.ttl_seconds is not None else None
        self._entries[key] = {"value": value, "expiry": expiry}
        self._entries.move_to_end(key)

        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted {evicted}")

    def invalidate(self, pattern: Optional[str] = None) -> int:
        """Drop entries whose key contains ``pattern`` (all when None).

        Returns:
            Number of entries removed
        """
        if pattern is None:
            count = len(self._entries)
            self._entries.clear()
            logger.info(f"Cleared entire cache ({count} entries)")
            return count

        keys = [k for k in self._entries if pattern in k]
        for key in keys:
            del self._entries[key]
        logger.info(f"Invalidated {len(keys)} cache entries matching '{pattern}'")
        return len(keys)

    def stats(self) -> Dict[str, Any]:
        return {
            "entries": len(self._entries),
            "max_entries": self.max_entries,
            "ttl_seconds": self.ttl_seconds,
            "hits": self.hits,
            "misses": self.misses,
        }
