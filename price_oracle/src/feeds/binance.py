"""Binance ticker feed.

Binance has no ETH/USD spot pair, so the ETHUSDT ticker stands in for USD.

Endpoint: https://api.binance.com/api/v3/ticker/price?symbol=ETHUSDT
Rate Limit: High (no key required for public endpoints)
Response: {"symbol": "ETHUSDT", "price": "3012.55000000"}
"""

from typing import Any

from .base import FeedDescriptor, register_feed


def parse_ticker_price(data: Any) -> float:
    return float(data["price"])


BINANCE = register_feed(
    FeedDescriptor(
        name="binance",
        endpoint="https://api.binance.com/api/v3/ticker/price?symbol=ETHUSDT",
        parse=parse_ticker_price,
        priority=3,
    )
)
