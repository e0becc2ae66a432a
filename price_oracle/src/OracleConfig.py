"""OracleConfig: Oracle settings and their environment variables.

Environment variables:
    ETH_PRICE_CACHE_TTL   cache time-to-live in milliseconds (default: 300000)
    ETH_FALLBACK_PRICE    optional static price used when every feed fails
                          and nothing is cached
    FETCH_TIMEOUT         per-feed timeout in seconds (default: 5.0)
    FEEDS                 comma-separated feed names
                          (default: coingecko,coinbase,binance)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from .feeds import get_available_feeds, is_valid_price

DEFAULT_CACHE_TTL_MS = 300_000
DEFAULT_FETCH_TIMEOUT = 5.0


def parse_feed_names(feeds_str: str | None) -> tuple[str, ...]:
    """Parse a comma-separated feed list.

    :param feeds_str: String like "coingecko,binance".
    :returns: Lowercased feed names, or every catalogue feed if empty.
    """
    if not feeds_str:
        return tuple(get_available_feeds())
    return tuple(f.strip().lower() for f in feeds_str.split(",") if f.strip())


def parse_fallback_price(value: str | None) -> float | None:
    """Parse the static fallback price.

    :param value: Raw value; empty or None means no fallback.
    :returns: Price, or None if unset.
    :raises ValueError: If the value is not a positive finite number.
    """
    if value is None or not value.strip():
        return None
    try:
        price = float(value)
    except ValueError:
        raise ValueError(f"Static fallback price must be a number, got {value!r}")
    if not is_valid_price(price):
        raise ValueError(f"Static fallback price must be positive, got {value!r}")
    return price


@dataclass(frozen=True)
class OracleConfig:
    """Settings fixed for the lifetime of a PriceOracle.

    :ivar cache_ttl_seconds: How long a fetched price stays fresh.
    :ivar static_fallback_price: Last-resort price, or None.
    :ivar fetch_timeout: Per-feed timeout in seconds.
    :ivar feeds: Feed names to query.
    """

    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_MS / 1000
    static_fallback_price: float | None = None
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    feeds: tuple[str, ...] = ("coingecko", "coinbase", "binance")

    def __post_init__(self) -> None:
        if self.cache_ttl_seconds < 0:
            raise ValueError("cache_ttl_seconds must not be negative")
        if self.fetch_timeout <= 0:
            raise ValueError("fetch_timeout must be positive")
        if self.static_fallback_price is not None and not is_valid_price(
            self.static_fallback_price
        ):
            raise ValueError(
                f"static_fallback_price must be positive, got {self.static_fallback_price!r}"
            )
        if not self.feeds:
            raise ValueError("At least one feed must be configured")
        available = get_available_feeds()
        invalid = [f for f in self.feeds if f not in available]
        if invalid:
            raise ValueError(f"Unknown feeds: {invalid}. Available: {available}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> OracleConfig:
        """Build a config from environment variables.

        :param environ: Mapping to read from (default: os.environ).
        :returns: New OracleConfig instance.
        :raises ValueError: If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ
        ttl_ms = float(env.get("ETH_PRICE_CACHE_TTL") or DEFAULT_CACHE_TTL_MS)
        return cls(
            cache_ttl_seconds=ttl_ms / 1000,
            static_fallback_price=parse_fallback_price(env.get("ETH_FALLBACK_PRICE")),
            fetch_timeout=float(env.get("FETCH_TIMEOUT") or DEFAULT_FETCH_TIMEOUT),
            feeds=parse_feed_names(env.get("FEEDS")),
        )
