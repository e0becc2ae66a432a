"""Unit tests for the CLI entry point."""

import asyncio
import json
from unittest.mock import patch

import pytest

from price_oracle import main as cli
from price_oracle.src.OracleConfig import OracleConfig
from price_oracle.src.PriceOracle import CacheStatus, OracleUnavailable

ENV_VARS = ("FEEDS", "ETH_PRICE_CACHE_TTL", "ETH_FALLBACK_PRICE", "FETCH_TIMEOUT")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


def _config(argv: list[str]) -> OracleConfig:
    parser = cli.build_parser()
    return cli.build_config(parser, parser.parse_args(argv))


class FakeOracle:
    """Async-context-manager stand-in for PriceOracle."""

    def __init__(self, config: OracleConfig, price: float | None = 3000.0) -> None:
        self.config = config
        self.price = price
        self.refreshes = 0

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        return None

    async def get_price(self) -> float:
        if self.price is None:
            raise OracleUnavailable([])
        return self.price

    async def refresh_price(self) -> float:
        self.refreshes += 1
        return await self.get_price()

    def get_cache_status(self) -> CacheStatus:
        return CacheStatus(True, True, 0.0, 300.0, self.price)


class TestBuildConfig:
    """Test argument parsing and validation."""

    def test_defaults(self) -> None:
        """No arguments and no environment give the default config."""
        assert _config([]) == OracleConfig()

    def test_environment_defaults(self, monkeypatch) -> None:
        """Environment variables seed the argument defaults."""
        monkeypatch.setenv("ETH_PRICE_CACHE_TTL", "60000")
        monkeypatch.setenv("ETH_FALLBACK_PRICE", "2500")
        monkeypatch.setenv("FEEDS", "binance")

        config = _config([])

        assert config.cache_ttl_seconds == 60.0
        assert config.static_fallback_price == 2500.0
        assert config.feeds == ("binance",)

    def test_fractional_ttl_matches_from_env(self, monkeypatch) -> None:
        """A decimal TTL in the environment is read like OracleConfig.from_env."""
        monkeypatch.setenv("ETH_PRICE_CACHE_TTL", "300000.0")

        assert _config([]) == OracleConfig.from_env()
        assert _config(["--cache-ttl-ms", "1500.5"]).cache_ttl_seconds == 1.5005

    def test_cli_overrides_environment(self, monkeypatch) -> None:
        """CLI arguments take precedence over the environment."""
        monkeypatch.setenv("ETH_PRICE_CACHE_TTL", "60000")
        config = _config(["--cache-ttl-ms", "1000", "--fetch-timeout", "2"])
        assert config.cache_ttl_seconds == 1.0
        assert config.fetch_timeout == 2.0

    @pytest.mark.parametrize(
        "argv",
        [
            ["--feeds", "coingecko,kraken"],
            ["--cache-ttl-ms", "-1"],
            ["--fetch-timeout", "0"],
            ["--interval", "-5"],
            ["--fallback-price", "-10"],
            ["--fallback-price", "free"],
        ],
    )
    def test_invalid_arguments_exit(self, argv) -> None:
        """Invalid arguments exit through parser.error."""
        with pytest.raises(SystemExit) as exc_info:
            _config(argv)
        assert exc_info.value.code == 2


class TestRun:
    """Test the read loop."""

    def test_single_read(self, capsys) -> None:
        """With no interval the price is printed once."""
        with patch.object(cli, "PriceOracle", FakeOracle):
            code = asyncio.run(cli.run(OracleConfig(), 0, refresh=False, status=False))

        assert code == 0
        assert capsys.readouterr().out == "ETH/USD 3000.00\n"

    def test_status_output(self, capsys) -> None:
        """--status prints the cache status as JSON."""
        with patch.object(cli, "PriceOracle", FakeOracle):
            asyncio.run(cli.run(OracleConfig(), 0, refresh=True, status=True))

        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "ETH/USD 3000.00"
        assert json.loads(lines[1])["currentValue"] == 3000.0

    def test_unavailable_exit_code(self) -> None:
        """OracleUnavailable on a single read exits with 1."""

        def unavailable(config):
            return FakeOracle(config, price=None)

        with patch.object(cli, "PriceOracle", unavailable):
            code = asyncio.run(cli.run(OracleConfig(), 0, refresh=False, status=False))

        assert code == 1

    def test_main_exits_with_run_code(self) -> None:
        """main() exits with the code returned by run()."""
        with patch.object(cli, "PriceOracle", FakeOracle), patch(
            "sys.argv", ["price_oracle", "--feeds", "coinbase"]
        ):
            with pytest.raises(SystemExit) as exc_info:
                cli.main()

        assert exc_info.value.code == 0
