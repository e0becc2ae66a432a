"""PriceOracle: Cached ETH/USD price with a layered fallback chain.

Each get_price() call walks these steps in order and returns the first answer:

    1. fresh cache      cached price younger than the TTL, no network traffic
    2. live fetch       first valid price from the feeds in priority order,
                        written back to the cache
    3. stale cache      last fetched price, however old; timestamp untouched
    4. static fallback  configured ETH_FALLBACK_PRICE
    5. fail             OracleUnavailable with every feed's failure reason

Concurrent callers that miss the cache share a single live fetch.

.. code-block:: python

    async with PriceOracle(OracleConfig.from_env()) as oracle:
        price = await oracle.get_price()
        status = oracle.get_cache_status()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .Clock import Clock, SystemClock
from .FeedFetcher import FeedFetcher
from .FeedHealth import FeedHealth, FeedStatus
from .FeedRegistry import FeedRegistry
from .OracleConfig import OracleConfig
from .PriceCache import PriceCache
from .SingleFlight import SingleFlight
from .feeds import AllFeedsFailed, ProviderError

logger = logging.getLogger(__name__)

# Cache key of the single pair served by the oracle.
PAIR_KEY = "eth/usd"


class OracleUnavailable(Exception):
    """No price could be produced: feeds failed, cache empty, no fallback.

    Callers must treat this as "cannot price right now" and refuse the
    operation rather than proceed with a zero or undefined amount.

    :ivar errors: Per-feed failures from the last live fetch.
    """

    def __init__(self, errors: list[ProviderError]):
        self.errors = list(errors)
        details = "; ".join(str(e) for e in self.errors) or "no feeds configured"
        super().__init__(f"Failed to get ETH price from any source: {details}")


@dataclass(frozen=True)
class CacheStatus:
    """Snapshot of the oracle's cache.

    :ivar has_value: A price has been fetched at some point.
    :ivar is_fresh: The cached price is younger than the TTL.
    :ivar age_seconds: Age of the cached price, None if empty or invalidated.
    :ivar ttl_seconds: Configured time-to-live.
    :ivar current_value: Cached price, fresh or stale.
    """

    has_value: bool
    is_fresh: bool
    age_seconds: float | None
    ttl_seconds: float
    current_value: float | None

    def to_dict(self) -> dict[str, Any]:
        """Render the status as a JSON-friendly diagnostics object."""
        return {
            "hasValue": self.has_value,
            "isFresh": self.is_fresh,
            "ageSeconds": self.age_seconds,
            "ttlSeconds": self.ttl_seconds,
            "currentValue": self.current_value,
        }


class PriceOracle:
    """Serves the ETH/USD price from cache, feeds or fallbacks.

    :ivar config: Oracle settings.
    :ivar registry: Feeds queried on a cache miss.
    :ivar fetcher: Feed fetcher used for live fetches.
    :ivar clock: Time source for cache freshness.
    """

    def __init__(
        self,
        config: OracleConfig | None = None,
        registry: FeedRegistry | None = None,
        fetcher: FeedFetcher | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the oracle.

        :param config: Oracle settings (default: OracleConfig()).
        :param registry: Feeds to query (default: the feeds named in config).
        :param fetcher: Fetcher to use (default: a new FeedFetcher with the
            configured timeout and its own HTTP client).
        :param clock: Time source (default: SystemClock()).
        """
        self.config = config or OracleConfig()
        if registry is None:
            registry = FeedRegistry.from_names(self.config.feeds)
        self.registry = registry
        self.fetcher = fetcher or FeedFetcher(
            timeout=self.config.fetch_timeout,
            health=FeedHealth(self.registry.names()),
        )
        self.clock = clock or SystemClock()

        self._cache = PriceCache(self.config.cache_ttl_seconds)
        self._flight: SingleFlight[float] = SingleFlight()

        logger.info(
            f"PriceOracle initialized: feeds={self.registry.names()}, "
            f"ttl={self.config.cache_ttl_seconds}s, "
            f"timeout={self.fetcher.timeout}s, "
            f"static_fallback={self.config.static_fallback_price}"
        )

    async def __aenter__(self) -> PriceOracle:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release the fetcher's HTTP client."""
        await self.fetcher.aclose()

    async def get_price(self) -> float:
        """Get the ETH/USD price.

        :returns: Fresh, stale or static fallback price; always positive.
        :raises OracleUnavailable: If every step of the fallback chain failed.
        """
        errors: list[ProviderError] = []

        price = self._from_fresh_cache()
        if price is None:
            price = await self._from_live_fetch(errors)
        if price is None:
            price = self._from_stale_cache()
        if price is None:
            price = self._from_static_fallback()
        if price is None:
            logger.error(f"No ETH price available: {len(errors)} feed(s) failed")
            raise OracleUnavailable(errors)
        return price

    async def refresh_price(self) -> float:
        """Invalidate the cache and get the price again.

        :returns: Same as get_price(), with a live fetch guaranteed.
        :raises OracleUnavailable: If every step of the fallback chain failed.
        """
        self.clear_cache()
        return await self.get_price()

    def clear_cache(self) -> None:
        """Force the next get_price() to fetch live.

        The cached value is kept as a stale fallback.
        """
        self._cache.invalidate()
        logger.info("ETH price cache cleared")

    def get_cache_status(self) -> CacheStatus:
        """Describe the cache without touching it.

        :returns: CacheStatus snapshot.
        """
        now = self.clock.now()
        entry = self._cache.get()
        return CacheStatus(
            has_value=entry is not None,
            is_fresh=self._cache.is_fresh(now),
            age_seconds=self._cache.age(now),
            ttl_seconds=self._cache.ttl_seconds,
            current_value=entry.value if entry is not None else None,
        )

    def get_feed_health(self) -> dict[str, FeedStatus]:
        """Get per-feed success and failure counters.

        :returns: Dict mapping feed names to their status.
        """
        return self.fetcher.health.get_all_status()

    def _from_fresh_cache(self) -> float | None:
        if not self._cache.is_fresh(self.clock.now()):
            return None
        entry = self._cache.get()
        assert entry is not None
        logger.debug(f"Using cached ETH price: ${entry.value:.2f}")
        return entry.value

    async def _from_live_fetch(self, errors: list[ProviderError]) -> float | None:
        try:
            return await self._flight.do(PAIR_KEY, self._fetch_and_cache)
        except AllFeedsFailed as e:
            errors.extend(e.errors)
            return None

    async def _fetch_and_cache(self) -> float:
        fetched_at = self.clock.now()
        price = await self.fetcher.fetch_best(self.registry)
        self._cache.put(price, fetched_at)
        return price

    def _from_stale_cache(self) -> float | None:
        entry = self._cache.get()
        if entry is None:
            return None
        logger.warning(f"Using expired cached ETH price as fallback: ${entry.value:.2f}")
        return entry.value

    def _from_static_fallback(self) -> float | None:
        price = self.config.static_fallback_price
        if price is None:
            return None
        logger.warning(f"Using static fallback ETH price: ${price:.2f}")
        return price
