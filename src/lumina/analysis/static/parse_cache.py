"""Content-addressed LRU cache for extracted code structures.

Keys are SHA-256 digests of the exact source text, so byte-identical
input always hits and any edit (whitespace included) misses. The cache
lives for the process; ``clear()`` is the only reset.

Thread-safe: the HTTP layer runs the pipeline in worker threads, so a
single lock guards lookup, insert, and clear. Every operation is O(1).
"""

from __future__ import annotations

import hashlib
import logging
import threading
from collections import OrderedDict

from lumina.analysis.static.schemas import CodeStructure
from lumina.constants import DIGEST_LOG_CHARS, PARSE_CACHE_CAPACITY

logger = logging.getLogger(__name__)


def compute_digest(source: str) -> str:
    """SHA-256 hex digest of the UTF-8 encoded source text."""
    return hashlib.sha256(
        source.encode("utf-8", errors="surrogatepass")
    ).hexdigest()


class ParseCache:
    """Fixed-capacity store evicting the least recently used entry.

    Usage::

        cache = ParseCache(capacity=50)
        structure = cache.lookup(digest)
        if structure is None:
            cache.insert(digest, extract_structure(root))
    """

    def __init__(self, capacity: int = PARSE_CACHE_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        # Ordered oldest → newest access
        self._entries: OrderedDict[str, CodeStructure] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, digest: object) -> bool:
        """Membership test that leaves recency untouched."""
        with self._lock:
            return digest in self._entries

    def lookup(self, digest: str) -> CodeStructure | None:
        """Return the cached structure and mark it most recently used."""
        with self._lock:
            structure = self._entries.get(digest)
            if structure is None:
                self._misses += 1
                return None
            self._entries.move_to_end(digest)
            self._hits += 1
            return structure

    def insert(self, digest: str, structure: CodeStructure) -> None:
        """Add or replace an entry, evicting the LRU entry when full."""
        with self._lock:
            if digest in self._entries:
                del self._entries[digest]
            elif len(self._entries) >= self._capacity:
                evicted, _ = self._entries.popitem(last=False)
                self._evictions += 1
                logger.debug(
                    "event=parse_cache_evict digest=%s",
                    evicted[:DIGEST_LOG_CHARS],
                )
            self._entries[digest] = structure

    def clear(self) -> int:
        """Drop every entry and reset counters; returns entries dropped."""
        with self._lock:
            dropped = len(self._entries)
            self._entries.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0
        logger.info("event=parse_cache_clear dropped=%d", dropped)
        return dropped

    def stats(self) -> dict[str, int]:
        """Snapshot of size and hit/miss/eviction counters."""
        with self._lock:
            return {
                "size": len(self._entries),
                "capacity": self._capacity,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }
