"""Feed descriptors, price validation and the feed error taxonomy.

A feed is a single external quote provider: an HTTPS endpoint returning JSON
plus a rule that extracts the ETH/USD price from the decoded body. Feeds are
plain data; the network work is done by FeedFetcher.

.. code-block:: python

    MY_FEED = register_feed(
        FeedDescriptor(
            name="myfeed",
            endpoint="https://api.example.com/eth-usd",
            parse=lambda data: float(data["price"]),
            priority=4,
        )
    )
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable


def is_valid_price(value: Any) -> bool:
    """Check that a value is a usable price.

    :param value: Candidate price.
    :returns: True if value is a finite number greater than zero.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value) and value > 0
    except OverflowError:
        # int too large for a float
        return False


@dataclass(frozen=True)
class FeedDescriptor:
    """A quote provider and the rule for reading its response.

    :ivar name: Unique feed identifier (e.g., "coingecko").
    :ivar endpoint: URL queried with an HTTP GET.
    :ivar parse: Callable extracting the price from the decoded JSON body.
    :ivar priority: Lower values are tried first.
    """

    name: str
    endpoint: str
    parse: Callable[[Any], float]
    priority: int


class FeedRequestError(Exception):
    """Raised when a feed request fails at the transport level."""

    pass


class FeedHTTPError(FeedRequestError):
    """Raised when a feed answers with a non-2xx status.

    :ivar status_code: HTTP status code from the failed request.
    """

    def __init__(self, status_code: int, message: str):
        """Initialize the HTTP error.

        :param status_code: HTTP status code.
        :param message: Error message from response.
        """
        self.status_code = status_code
        super().__init__(f"HTTP {status_code}: {message}")


class ProviderError(Exception):
    """One feed failed to produce a valid price.

    :ivar feed: Name of the feed that failed.
    :ivar reason: Human-readable failure reason.
    """

    def __init__(self, feed: str, reason: str):
        self.feed = feed
        self.reason = reason
        super().__init__(f"[{feed}] {reason}")


class AllFeedsFailed(Exception):
    """Every feed in the registry failed during one fetch.

    :ivar errors: Per-feed failures, in the order the feeds were tried.
    """

    def __init__(self, errors: list[ProviderError]):
        self.errors = list(errors)
        if self.errors:
            details = "; ".join(str(e) for e in self.errors)
        else:
            details = "no feeds configured"
        super().__init__(f"All price feeds failed: {details}")


# Catalogue of known feeds (populated by feed module imports)
FEED_CATALOGUE: dict[str, FeedDescriptor] = {}


def register_feed(feed: FeedDescriptor) -> FeedDescriptor:
    """Add a feed to the global catalogue.

    :param feed: Feed descriptor to register.
    :returns: The registered descriptor (unchanged).
    :raises ValueError: If the feed has no name.
    """
    if not feed.name:
        raise ValueError(f"Feed for {feed.endpoint} must define a name")
    FEED_CATALOGUE[feed.name] = feed
    return feed


def get_feed(name: str) -> FeedDescriptor:
    """Get a feed descriptor by name.

    :param name: Feed name (e.g., "coingecko", "binance").
    :returns: Feed descriptor.
    :raises ValueError: If feed name is unknown.
    """
    if name not in FEED_CATALOGUE:
        available = ", ".join(get_available_feeds())
        raise ValueError(f"Unknown feed '{name}'. Available: {available}")
    return FEED_CATALOGUE[name]


def get_available_feeds() -> list[str]:
    """Get catalogue feed names ordered by priority.

    :returns: List of registered feed names, highest priority first.
    """
    feeds = sorted(FEED_CATALOGUE.values(), key=lambda f: f.priority)
    return [f.name for f in feeds]
