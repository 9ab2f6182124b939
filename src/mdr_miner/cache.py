"""DistanceCache: LRU-backed memo for structural edit distances.

Maps an unordered pair of flattened structural signatures to the distance
already computed for them.  Because the distance is symmetric the key is
stored with the smaller signature first, so ``(a, b)`` and ``(b, a)`` share
one entry.  LRU eviction occurs silently when ``max_size`` is exceeded.

A cache belongs to exactly one mining run.  ``MDRMiner.mine()`` creates a new
instance per call and clears it before returning; there is no module-level
cache, so distances never leak between unrelated documents.

Example::

    from mdr_miner.cache import DistanceCache

    cache = DistanceCache(max_size=1024)
    cache.put("<li></li>", "<li><b></b></li>", 0.5)
    cache.get("<li><b></b></li>", "<li></li>")   # 0.5
"""

from __future__ import annotations

from cachetools import LRUCache

__all__ = ["DistanceCache"]


class DistanceCache:
    """Per-run LRU memo keyed by a pair of flattened signatures.

    Args:
        max_size: Maximum number of signature pairs to hold.  Defaults to
            4096.  When exceeded, the least-recently-used pair is evicted.
    """

    def __init__(self, max_size: int = 4096) -> None:
        self._cache: LRUCache[tuple[str, str], float] = LRUCache(maxsize=max_size)
        self._hits = 0
        self._misses = 0

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def max_size(self) -> int:
        """The maximum number of entries this cache can hold."""
        return int(self._cache.maxsize)

    @property
    def curr_size(self) -> int:
        """The current number of entries stored in the cache."""
        return int(self._cache.currsize)

    @property
    def hits(self) -> int:
        return self._hits

    @property
    def misses(self) -> int:
        return self._misses

    # ------------------------------------------------------------------
    # Lookup / store
    # ------------------------------------------------------------------

    @staticmethod
    def _key(sig_a: str, sig_b: str) -> tuple[str, str]:
        return (sig_a, sig_b) if sig_a <= sig_b else (sig_b, sig_a)

    def get(self, sig_a: str, sig_b: str) -> float | None:
        """Return the cached distance for the pair, or None on a miss."""
        value = self._cache.get(self._key(sig_a, sig_b))
        if value is None:
            self._misses += 1
        else:
            self._hits += 1
        return value

    def put(self, sig_a: str, sig_b: str, distance: float) -> None:
        self._cache[self._key(sig_a, sig_b)] = distance

    def clear(self) -> None:
        """Drop every entry and reset the hit/miss counters."""
        self._cache.clear()
        self._hits = 0
        self._misses = 0
