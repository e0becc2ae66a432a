"""TierPricing: USD quotes for tier prices stored on-chain in wei.

The ledger read itself is injected as an async callable so this module never
touches a node. The oracle supplies the ETH/USD rate; OracleUnavailable is
deliberately not caught so an unpriced tier can never be charged.

.. code-block:: python

    pricing = TierPricing(oracle, tier_price_wei=contract_reader)
    quote = await pricing.quote(2)
    quote.amount_cents  # e.g. 15063
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Awaitable, Callable

from web3 import Web3

from .PriceOracle import PriceOracle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TierQuote:
    """USD price of one tier.

    :ivar tier: Tier identifier.
    :ivar price_eth: Tier price in ETH.
    :ivar eth_usd_rate: ETH/USD rate used for the conversion.
    :ivar price_usd: Tier price in USD.
    :ivar amount_cents: price_usd rounded to whole cents, halves up.
    """

    tier: int
    price_eth: float
    eth_usd_rate: float
    price_usd: float
    amount_cents: int


class TierPricing:
    """Converts on-chain tier prices to USD using the oracle rate."""

    def __init__(
        self,
        oracle: PriceOracle,
        tier_price_wei: Callable[[int], Awaitable[int]],
    ) -> None:
        """Initialize tier pricing.

        :param oracle: Source of the ETH/USD rate.
        :param tier_price_wei: Async callable returning a tier's price in wei.
        """
        self.oracle = oracle
        self.tier_price_wei = tier_price_wei

    async def quote(self, tier: int) -> TierQuote:
        """Price a tier in USD.

        :param tier: Tier identifier.
        :returns: TierQuote for the tier.
        :raises ValueError: If the ledger price is not positive.
        :raises OracleUnavailable: If no ETH/USD rate is available.
        """
        price_wei = await self.tier_price_wei(tier)
        if price_wei <= 0:
            raise ValueError(f"Tier {tier} has no positive on-chain price ({price_wei} wei)")

        price_eth = float(Web3.from_wei(price_wei, "ether"))
        rate = await self.oracle.get_price()
        price_usd = price_eth * rate
        quote = TierQuote(
            tier=tier,
            price_eth=price_eth,
            eth_usd_rate=rate,
            price_usd=price_usd,
            amount_cents=math.floor(price_usd * 100 + 0.5),
        )
        logger.info(
            f"Tier {tier}: {price_eth} ETH = ${price_usd:.2f} USD (Rate: ${rate:.2f}/ETH)"
        )
        return quote
