"""
In-memory result cache keyed by normalized address.

Providers can rank candidates differently from one call to the next; caching
the finished report keeps repeated searches for the same address stable.
Entries are evicted least-recently-used beyond `max_entries` and expire after
`ttl` seconds (0 disables expiry).
"""

import logging
import threading
import time
from collections import OrderedDict
from typing import Callable, Optional, Tuple

from house_facing.core import settings
from house_facing.inference.base import FacingReport

logger = logging.getLogger(__name__)


class ResultCache:
    """
    Bounded, thread-safe mapping of normalized address to FacingReport.

    Usage:
        cache = ResultCache(max_entries=100, ttl=3600)
        cache.put("123 main st", report)
        cache.get("123 main st")
    """

    def __init__(
        self,
        max_entries: Optional[int] = None,
        ttl: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_entries = settings.RESULT_CACHE_MAX_ENTRIES if max_entries is None else max_entries
        self.ttl = settings.RESULT_CACHE_TTL if ttl is None else ttl
        if self.max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[float, FacingReport]]" = OrderedDict()
        self._lock = threading.Lock()

    def _expired(self, stored_at: float) -> bool:
        return self.ttl > 0 and self._clock() - stored_at >= self.ttl

    def get(self, key: str) -> Optional[FacingReport]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            stored_at, report = entry
            if self._expired(stored_at):
                del self._entries[key]
                logger.debug(f"Cache entry expired for {key!r}")
                return None

            self._entries.move_to_end(key)
            return report

    def put(self, key: str, report: FacingReport) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), report)
            self._entries.move_to_end(key)

            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted cache entry {evicted!r}")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
