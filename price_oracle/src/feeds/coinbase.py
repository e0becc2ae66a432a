"""Coinbase exchange-rates feed.

Endpoint: https://api.coinbase.com/v2/exchange-rates?currency=ETH
Rate Limit: High (no key required)
Response: {"data": {"currency": "ETH", "rates": {"USD": "3012.55", ...}}}
"""

from typing import Any

from .base import FeedDescriptor, register_feed


def parse_exchange_rates(data: Any) -> float:
    """Read the USD rate from an /exchange-rates response.

    Rates are returned as decimal strings.

    :param data: Decoded JSON body.
    :returns: Price as float.
    """
    return float(data["data"]["rates"]["USD"])


COINBASE = register_feed(
    FeedDescriptor(
        name="coinbase",
        endpoint="https://api.coinbase.com/v2/exchange-rates?currency=ETH",
        parse=parse_exchange_rates,
        priority=2,
    )
)
