"""
ETH/USD quote feeds.

This module provides the descriptors of the external quote providers used by
the oracle, plus the catalogue used to look them up by name.

Usage:
    from price_oracle.src.feeds import get_feed, get_available_feeds

    # Feed names ordered by priority
    available = get_available_feeds()
    # ['coingecko', 'coinbase', 'binance']

    feed = get_feed("coinbase")
    price = feed.parse(payload)
"""

# Import base classes and utilities
from .base import (
    FEED_CATALOGUE,
    AllFeedsFailed,
    FeedDescriptor,
    FeedHTTPError,
    FeedRequestError,
    ProviderError,
    get_available_feeds,
    get_feed,
    is_valid_price,
    register_feed,
)

# Import all feed definitions to trigger registration
from .binance import BINANCE
from .coinbase import COINBASE
from .coingecko import COINGECKO

DEFAULT_FEEDS: tuple[FeedDescriptor, ...] = (COINGECKO, COINBASE, BINANCE)

__all__ = [
    # Base classes
    "FeedDescriptor",
    "FeedRequestError",
    "FeedHTTPError",
    "ProviderError",
    "AllFeedsFailed",
    "is_valid_price",
    # Catalogue functions
    "register_feed",
    "get_feed",
    "get_available_feeds",
    "FEED_CATALOGUE",
    # Feed definitions
    "BINANCE",
    "COINBASE",
    "COINGECKO",
    "DEFAULT_FEEDS",
]
