#!/usr/bin/env python3
"""ETH/USD Price Oracle.

Fetches the ETH/USD price from prioritized off-chain feeds, caches it for a
configurable TTL and falls back to a stale or static price when every feed
is down.

Configure with env vars or CLI flags. See price_oracle/src/OracleConfig.py.
"""

import argparse
import asyncio
import json
import logging
import os
import sys

from .src.OracleConfig import (
    DEFAULT_CACHE_TTL_MS,
    DEFAULT_FETCH_TIMEOUT,
    OracleConfig,
    parse_fallback_price,
    parse_feed_names,
)
from .src.PriceOracle import OracleUnavailable, PriceOracle
from .src.feeds import get_available_feeds

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with environment defaults."""
    available_feeds = get_available_feeds()

    parser = argparse.ArgumentParser(
        description="ETH/USD Price Oracle: cached multi-source price with fallbacks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Available feeds (in priority order):
  {', '.join(available_feeds)}

Examples:
  # Print the current price once
  python -m price_oracle.main

  # Poll every 30 seconds with a 1 minute cache and print cache status
  python -m price_oracle.main --interval 30 --cache-ttl-ms 60000 --status

  # Only use Coinbase and Binance, with a static fallback
  python -m price_oracle.main --feeds coinbase,binance --fallback-price 2500

Environment variables (CLI args take precedence):
  ETH_PRICE_CACHE_TTL, ETH_FALLBACK_PRICE, FETCH_TIMEOUT, FEEDS
""",
    )

    parser.add_argument(
        "--feeds",
        type=str,
        help=f"Comma-separated feeds. Available: {', '.join(available_feeds)}",
        default=os.environ.get("FEEDS") or ",".join(available_feeds),
    )

    parser.add_argument(
        "--cache-ttl-ms",
        dest="cache_ttl_ms",
        type=float,
        help=f"Cache time-to-live in milliseconds (default: {DEFAULT_CACHE_TTL_MS})",
        default=float(os.environ.get("ETH_PRICE_CACHE_TTL") or DEFAULT_CACHE_TTL_MS),
    )

    parser.add_argument(
        "--fallback-price",
        dest="fallback_price",
        type=str,
        help="Static ETH/USD price used when all feeds fail and nothing is cached",
        default=os.environ.get("ETH_FALLBACK_PRICE"),
    )

    parser.add_argument(
        "--fetch-timeout",
        dest="fetch_timeout",
        type=float,
        help=f"Timeout per feed request in seconds (default: {DEFAULT_FETCH_TIMEOUT})",
        default=float(os.environ.get("FETCH_TIMEOUT") or DEFAULT_FETCH_TIMEOUT),
    )

    parser.add_argument(
        "--interval",
        type=float,
        help="Seconds between price reads (default: 0, read once and exit)",
        default=0.0,
    )

    parser.add_argument(
        "--refresh",
        action="store_true",
        help="Clear the cache before each read to force a live fetch",
    )

    parser.add_argument(
        "--status",
        action="store_true",
        help="Print cache status as JSON after each read",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    return parser


def build_config(
    parser: argparse.ArgumentParser, args: argparse.Namespace
) -> OracleConfig:
    """Validate parsed arguments and turn them into an OracleConfig.

    Calls parser.error() (which exits) on invalid input.
    """
    if args.cache_ttl_ms < 0:
        parser.error("--cache-ttl-ms must not be negative")

    if args.fetch_timeout <= 0:
        parser.error("--fetch-timeout must be positive")

    if args.interval < 0:
        parser.error("--interval must not be negative")

    feeds = parse_feed_names(args.feeds)
    available_feeds = get_available_feeds()
    invalid_feeds = [f for f in feeds if f not in available_feeds]
    if invalid_feeds:
        parser.error(
            f"Unknown feeds: {invalid_feeds}. "
            f"Available: {', '.join(available_feeds)}"
        )

    try:
        fallback_price = parse_fallback_price(args.fallback_price)
    except ValueError as e:
        parser.error(str(e))

    return OracleConfig(
        cache_ttl_seconds=args.cache_ttl_ms / 1000,
        static_fallback_price=fallback_price,
        fetch_timeout=args.fetch_timeout,
        feeds=feeds,
    )


async def run(config: OracleConfig, interval: float, refresh: bool, status: bool) -> int:
    """Read the price once, or forever every interval seconds.

    :returns: Process exit code.
    """
    async with PriceOracle(config) as oracle:
        while True:
            try:
                if refresh:
                    price = await oracle.refresh_price()
                else:
                    price = await oracle.get_price()
            except OracleUnavailable as e:
                logger.error(str(e))
                if not interval:
                    return 1
            else:
                print(f"ETH/USD {price:.2f}")

            if status:
                print(json.dumps(oracle.get_cache_status().to_dict()))

            if not interval:
                return 0
            await asyncio.sleep(interval)


def main() -> None:
    """Main entry point for the ETH/USD Price Oracle CLI."""
    parser = build_parser()
    args = parser.parse_args()

    # Configure logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = build_config(parser, args)

    logger.info("=" * 60)
    logger.info("ETH/USD Price Oracle")
    logger.info("=" * 60)
    logger.info(f"Feeds:             {', '.join(config.feeds)}")
    logger.info(f"Cache TTL:         {config.cache_ttl_seconds}s")
    logger.info(f"Fetch Timeout:     {config.fetch_timeout}s")
    if config.static_fallback_price is not None:
        logger.info(f"Static Fallback:   ${config.static_fallback_price:.2f}")
    else:
        logger.info("Static Fallback:   disabled")
    logger.info("=" * 60)

    try:
        exit_code = asyncio.run(
            run(config, args.interval, args.refresh, args.status)
        )
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        exit_code = 0
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
