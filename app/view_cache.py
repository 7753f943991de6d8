"""
View Cache Module
In-process cache for precomputed listing and detail views.

A fixed set of named regions, each an independent key space with its own
lock. Entries expire a fixed TTL after they were written (checked lazily on
read) and every region holds at most ``max_entries`` entries, evicting the
least recently used one first.
"""

import copy
import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Hashable, Iterable, Optional

from constants import CACHE_MAX_ENTRIES, CACHE_REGIONS, CACHE_TTL_SECONDS
from metrics import cache_evictions_total, cache_invalidations_total, cache_requests_total

logger = logging.getLogger(__name__)

# Key used by singleton regions (e.g. the full listing)
UNIT_KEY = "__all__"

_MISSING = object()


class _Region:
    """
    One region: an LRU-ordered mapping of key -> (value, written_at).

    ``generation`` increases on every invalidation; a load that started in
    an older generation must not be stored.
    """

    __slots__ = ("name", "entries", "lock", "generation")

    def __init__(self, name: str) -> None:
        self.name = name
        self.entries: "OrderedDict[Hashable, tuple]" = OrderedDict()
        self.lock = threading.Lock()
        self.generation = 0


class ViewCache:
    """
    Named-region view cache with TTL expiry and per-region LRU capacity.

    Args:
        ttl_seconds: Time to live of every entry, measured from its write
        max_entries: Capacity of each region
        regions: Region names; lookups against any other name raise KeyError
        clock: Monotonic time source (injectable for tests)
    """

    def __init__(
        self,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        max_entries: int = CACHE_MAX_ENTRIES,
        regions: Iterable[str] = CACHE_REGIONS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._regions: Dict[str, _Region] = {name: _Region(name) for name in regions}
        self._stats_lock = threading.Lock()
        self._stats = {
            "hits": 0,
            "misses": 0,
            "sets": 0,
            "evictions": 0,
            "invalidations": 0,
            "discarded_loads": 0,
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _region(self, name: str) -> _Region:
        try:
            return self._regions[name]
        except KeyError:
            raise KeyError(f"Unknown cache region: {name}")

    def _generation(self, name: str) -> int:
        reg = self._region(name)
        with reg.lock:
            return reg.generation

    def _count(self, stat: str, amount: int = 1) -> None:
        with self._stats_lock:
            self._stats[stat] += amount

    def _expired(self, written_at: float, now: float) -> bool:
        return now - written_at >= self.ttl_seconds

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def regions(self):
        return tuple(self._regions)

    def get(self, region: str, key: Hashable = UNIT_KEY, default: Any = None) -> Any:
        """
        Return the cached value for *key* in *region*, or *default* on miss.

        An entry older than the TTL is a miss and is dropped on the spot.
        Values are returned as copies so callers cannot mutate cached state.
        """
        value = self._lookup(region, key)
        if value is _MISSING:
            return default
        return value

    def contains(self, region: str, key: Hashable = UNIT_KEY) -> bool:
        """True when *key* holds a live (unexpired) entry, without touching stats or recency"""
        reg = self._region(region)
        now = self._clock()
        with reg.lock:
            entry = reg.entries.get(key)
            return entry is not None and not self._expired(entry[1], now)

    def _lookup(self, region: str, key: Hashable) -> Any:
        reg = self._region(region)
        now = self._clock()
        with reg.lock:
            entry = reg.entries.get(key)
            if entry is not None and self._expired(entry[1], now):
                del reg.entries[key]
                entry = None
            if entry is not None:
                reg.entries.move_to_end(key, last=True)
                value = entry[0]
            else:
                value = _MISSING

        if value is _MISSING:
            self._count("misses")
            cache_requests_total.labels(region=region, result="miss").inc()
            logger.debug(f"Cache MISS: {region}:{key}")
            return _MISSING

        self._count("hits")
        cache_requests_total.labels(region=region, result="hit").inc()
        logger.debug(f"Cache HIT: {region}:{key}")
        return copy.deepcopy(value)

    def put(self, region: str, key: Hashable, value: Any) -> None:
        """Store *value* under *key*, evicting least recently used entries past capacity"""
        self._store(region, key, value)

    def _store(self, region: str, key: Hashable, value: Any, generation: Optional[int] = None) -> bool:
        reg = self._region(region)
        stored = copy.deepcopy(value)
        now = self._clock()
        evicted = 0
        with reg.lock:
            if generation is not None and reg.generation != generation:
                discarded = True
            else:
                discarded = False
                reg.entries[key] = (stored, now)
                reg.entries.move_to_end(key, last=True)
                while len(reg.entries) > self.max_entries:
                    reg.entries.popitem(last=False)
                    evicted += 1

        if discarded:
            self._count("discarded_loads")
            logger.debug(f"Cache DISCARD: {region}:{key} (invalidated while loading)")
            return False

        self._count("sets")
        logger.debug(f"Cache SET: {region}:{key} (TTL: {self.ttl_seconds}s)")
        if evicted:
            self._count("evictions", evicted)
            cache_evictions_total.labels(region=region).inc(evicted)
            logger.debug(f"Cache EVICT: {region} ({evicted} least recently used)")
        return True

    def evict(self, region: str, key: Hashable = _MISSING) -> int:
        """
        Drop one entry, or the whole region when no key is given.

        Returns:
            Number of entries removed
        """
        reg = self._region(region)
        with reg.lock:
            reg.generation += 1
            if key is _MISSING:
                removed = len(reg.entries)
                reg.entries.clear()
            else:
                removed = 1 if reg.entries.pop(key, None) is not None else 0

        self._count("invalidations")
        cache_invalidations_total.labels(region=region).inc()
        if key is _MISSING:
            logger.info(f"Cache INVALIDATE: {region} ({removed} entries)")
        else:
            logger.debug(f"Cache INVALIDATE: {region}:{key} ({removed} entries)")
        return removed

    def evict_regions(self, regions: Iterable[str]) -> int:
        """Clear several regions in full; returns the total number of entries removed"""
        return sum(self.evict(region) for region in regions)

    def get_or_load(self, region: str, key: Hashable, loader: Callable[[], Any]) -> Any:
        """
        Cache-through read: return the cached value, or compute it with
        *loader*, store it and return it.

        The loader runs outside the region lock; two concurrent misses may
        both compute, the later write wins. A result whose load overlapped an
        invalidation of the region is returned but not stored.
        """
        value = self._lookup(region, key)
        if value is not _MISSING:
            return value
        generation = self._generation(region)
        value = loader()
        self._store(region, key, value, generation=generation)
        return copy.deepcopy(value)

    def size(self, region: str) -> int:
        """Physical entry count of a region (expired entries included until read)"""
        reg = self._region(region)
        with reg.lock:
            return len(reg.entries)

    def clear(self) -> None:
        """Drop every entry of every region"""
        for region in self._regions:
            self.evict(region)

    def stats(self) -> Dict:
        """Cache statistics (hits, misses, sets, evictions, invalidations) plus region sizes"""
        with self._stats_lock:
            stats = dict(self._stats)
        stats["regions"] = {name: self.size(name) for name in self._regions}
        stats["ttl_seconds"] = self.ttl_seconds
        stats["max_entries"] = self.max_entries
        return stats

    def reset_stats(self) -> None:
        with self._stats_lock:
            for key in self._stats:
                self._stats[key] = 0


def build_view_cache(settings: Optional[Dict] = None, clock: Callable[[], float] = time.monotonic) -> ViewCache:
    """Create a ViewCache from the ``cache`` settings section"""
    cache_settings = (settings or {}).get("cache", {})
    return ViewCache(
        ttl_seconds=float(cache_settings.get("ttl_seconds", CACHE_TTL_SECONDS)),
        max_entries=int(cache_settings.get("max_entries", CACHE_MAX_ENTRIES)),
        clock=clock,
    )
