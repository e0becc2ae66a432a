"""PriceCache: Single-entry price cache with a time-to-live.

The cache holds the last good price and when it was fetched. An entry is
fresh while its age is below the TTL and stale afterwards; a stale entry is
kept so it can still serve as a fallback.

Invalidation drops the timestamp but keeps the value, so the entry reads as
stale until the next successful fetch overwrites it.

.. code-block:: python

    >>> cache = PriceCache(ttl_seconds=300)
    >>> cache.put(3000.0, now=1000.0)
    >>> cache.is_fresh(now=1299.0)
    True
    >>> cache.is_fresh(now=1300.0)
    False
    >>> cache.invalidate()
    >>> cache.get().value
    3000.0
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CacheEntry:
    """A cached price.

    :ivar value: Cached price.
    :ivar fetched_at: Clock reading when the price was fetched, or None
        once the entry has been invalidated.
    :ivar ttl: Time-to-live in seconds.
    """

    value: float
    fetched_at: float | None
    ttl: float


class PriceCache:
    """Holds at most one price. Time is always supplied by the caller.

    :ivar ttl_seconds: How long a fetched price stays fresh.
    """

    def __init__(self, ttl_seconds: float) -> None:
        """Initialize an empty cache.

        :param ttl_seconds: Time-to-live in seconds.
        :raises ValueError: If ttl_seconds is negative.
        """
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must not be negative")
        self.ttl_seconds = ttl_seconds
        self._entry: CacheEntry | None = None

    def get(self) -> CacheEntry | None:
        """Get the current entry, fresh or stale.

        :returns: The entry, or None if nothing was ever cached.
        """
        return self._entry

    def is_fresh(self, now: float) -> bool:
        """Check whether the entry exists and is younger than the TTL.

        :param now: Current clock reading.
        :returns: True if a fresh value is available.
        """
        entry = self._entry
        if entry is None or entry.fetched_at is None:
            return False
        return now - entry.fetched_at < entry.ttl

    def put(self, value: float, now: float) -> None:
        """Store a new price, making the cache fresh.

        :param value: Newly fetched price.
        :param now: Clock reading at fetch time.
        """
        self._entry = CacheEntry(value=value, fetched_at=now, ttl=self.ttl_seconds)

    def invalidate(self) -> None:
        """Force the next freshness check to fail, keeping the value."""
        if self._entry is not None:
            self._entry = CacheEntry(
                value=self._entry.value, fetched_at=None, ttl=self._entry.ttl
            )

    def age(self, now: float) -> float | None:
        """Get the age of the cached price.

        :param now: Current clock reading.
        :returns: Age in seconds, or None if empty or invalidated.
        """
        entry = self._entry
        if entry is None or entry.fetched_at is None:
            return None
        return now - entry.fetched_at
