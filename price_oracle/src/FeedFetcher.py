"""FeedFetcher: First-valid-wins price fetching across prioritized feeds.

Feeds are tried one at a time in registry order, each under its own timeout.
The first feed returning a valid positive price wins and later feeds are not
contacted. Failures are collected per feed and never retried here; when the
registry is exhausted an AllFeedsFailed carrying every reason is raised.

Worst-case latency is the number of feeds times the timeout.

.. code-block:: python

    fetcher = FeedFetcher(timeout=5.0)
    try:
        price = await fetcher.fetch_best(FeedRegistry(DEFAULT_FEEDS))
    except AllFeedsFailed as e:
        ...
    finally:
        await fetcher.aclose()
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from .FeedHealth import FeedHealth
from .FeedRegistry import FeedRegistry
from .feeds import (
    AllFeedsFailed,
    FeedDescriptor,
    FeedHTTPError,
    FeedRequestError,
    ProviderError,
    is_valid_price,
)

logger = logging.getLogger(__name__)


class FeedFetcher:
    """Fetches the best available price from a feed registry.

    :cvar DEFAULT_TIMEOUT: Default per-feed timeout in seconds.
    :ivar timeout: Per-feed timeout in seconds.
    :ivar health: Per-feed outcome counters.
    """

    DEFAULT_TIMEOUT = 5.0

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
        health: FeedHealth | None = None,
    ) -> None:
        """Initialize the fetcher.

        :param client: HTTP client to use. When omitted the fetcher creates
            one and closes it in aclose().
        :param timeout: Per-feed timeout in seconds (default: 5).
        :param health: Optional shared FeedHealth tracker.
        :raises ValueError: If timeout is not positive.
        """
        self.timeout = timeout or self.DEFAULT_TIMEOUT
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        self.health = health or FeedHealth()
        self._owns_client = client is None
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the HTTP client, creating an owned one on first use."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
                follow_redirects=True,
            )
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def fetch_best(self, registry: FeedRegistry) -> float:
        """Fetch a price from the highest-priority feed that answers validly.

        :param registry: Feeds to try, in order.
        :returns: First valid positive price.
        :raises AllFeedsFailed: If no feed produced a valid price.
        """
        errors: list[ProviderError] = []

        for feed in registry.list():
            logger.debug(f"[{feed.name}] Requesting ETH/USD price")
            try:
                price = await asyncio.wait_for(
                    self._fetch_feed(feed), timeout=self.timeout
                )
            except asyncio.TimeoutError:
                error = ProviderError(feed.name, f"timed out after {self.timeout}s")
            except ProviderError as e:
                error = e
            else:
                self.health.record_success(feed.name)
                logger.info(f"[{feed.name}] ETH/USD price: ${price:.2f}")
                return price

            self.health.record_failure(feed.name, error.reason)
            logger.warning(f"[{feed.name}] Failed to fetch price: {error.reason}")
            errors.append(error)

        raise AllFeedsFailed(errors)

    async def _fetch_feed(self, feed: FeedDescriptor) -> float:
        """Query a single feed and validate its answer.

        :param feed: Feed to query.
        :returns: Valid positive price.
        :raises ProviderError: On request, decode, parse or validation failure.
        """
        try:
            response = await self._get(feed.endpoint)
            data = response.json()
        except FeedRequestError as e:
            raise ProviderError(feed.name, str(e)) from e
        except ValueError as e:
            raise ProviderError(feed.name, f"invalid JSON: {e}") from e

        try:
            price = feed.parse(data)
        except (
            AttributeError, KeyError, IndexError, TypeError, ValueError, OverflowError
        ) as e:
            raise ProviderError(
                feed.name, f"malformed response ({type(e).__name__}: {e})"
            ) from e

        if not is_valid_price(price):
            raise ProviderError(feed.name, f"invalid price {price!r}")
        return float(price)

    async def _get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Make an HTTP GET request.

        :param url: Request URL.
        :returns: httpx.Response object.
        :raises FeedHTTPError: On non-2xx response.
        :raises FeedRequestError: On network/timeout errors.
        """
        try:
            response = await self.client.get(url, timeout=self.timeout, **kwargs)
        except httpx.TimeoutException as e:
            raise FeedRequestError(f"Request timeout: {e}") from e
        except httpx.RequestError as e:
            raise FeedRequestError(f"Request failed: {e}") from e

        if not response.is_success:
            logger.debug(
                "HTTP GET %s failed with status %s: %s",
                url,
                response.status_code,
                response.text[:200],
            )
            raise FeedHTTPError(response.status_code, response.text[:200])
        return response
