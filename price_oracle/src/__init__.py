"""
ETH/USD Price Oracle - Cached Multi-Source Price Module

This module answers "what is one ETH worth in USD right now?":
- feeds: Quote provider descriptors (CoinGecko, Coinbase, Binance)
- FeedRegistry: Priority-ordered feed catalogue
- FeedFetcher: First-valid-wins fetching with per-feed timeouts
- PriceCache: Single-entry TTL cache
- PriceOracle: Fallback chain over cache, feeds and static price
- TierPricing: USD quotes for tier prices stored in wei
"""

from .Clock import Clock, ManualClock, SystemClock
from .FeedFetcher import FeedFetcher
from .FeedHealth import FeedHealth, FeedStatus
from .FeedRegistry import FeedRegistry
from .OracleConfig import OracleConfig
from .PriceCache import CacheEntry, PriceCache
from .PriceOracle import CacheStatus, OracleUnavailable, PriceOracle
from .SingleFlight import SingleFlight
from .TierPricing import TierPricing, TierQuote
from .feeds import AllFeedsFailed, FeedDescriptor, ProviderError

__all__ = [
    "AllFeedsFailed",
    "CacheEntry",
    "CacheStatus",
    "Clock",
    "FeedDescriptor",
    "FeedFetcher",
    "FeedHealth",
    "FeedRegistry",
    "FeedStatus",
    "ManualClock",
    "OracleConfig",
    "OracleUnavailable",
    "PriceCache",
    "PriceOracle",
    "ProviderError",
    "SingleFlight",
    "SystemClock",
    "TierPricing",
    "TierQuote",
]
