"""CoinGecko feed.

Endpoint: https://api.coingecko.com/api/v3/simple/price?ids=ethereum&vs_currencies=usd
Rate Limit: 30 calls/min (free, no key)
Response: {"ethereum": {"usd": 3012.55}}
"""

from typing import Any

from .base import FeedDescriptor, register_feed


def parse_simple_price(data: Any) -> float:
    """Read the ETH/USD price from a /simple/price response.

    :param data: Decoded JSON body.
    :returns: Price as float.
    """
    return float(data["ethereum"]["usd"])


COINGECKO = register_feed(
    FeedDescriptor(
        name="coingecko",
        endpoint="https://api.coingecko.com/api/v3/simple/price?ids=ethereum&vs_currencies=usd",
        parse=parse_simple_price,
        priority=1,
    )
)
