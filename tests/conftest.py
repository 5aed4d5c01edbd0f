from unittest.mock import AsyncMock, MagicMock

import pytest

from coinprice.domain.models.coin import CoinIdentity

# 2023-11-14 22:13:20 UTC
NOW = 1_700_000_000

COINS = [
    CoinIdentity(id="bitcoin", symbol="btc", name="Bitcoin"),
    CoinIdentity(id="ethereum", symbol="eth", name="Ethereum"),
    CoinIdentity(id="uniswap-state-dollar", symbol="uni", name="Uniswap State Dollar"),
    CoinIdentity(id="unicorn-token", symbol="uni", name="Unicorn Token"),
    CoinIdentity(id="uniswap", symbol="uni", name="Uniswap"),
    CoinIdentity(id="tether", symbol="usdt", name="Tether"),
    CoinIdentity(id="bridged-tether", symbol="usdt", name="Bridged Tether"),
]


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, now: float = NOW) -> None:
        self.now = float(now)

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def coingecko() -> MagicMock:
    """CoinGeckoClient stand-in with a small catalog and no prices."""
    client = MagicMock()
    client.list_coins = AsyncMock(return_value=list(COINS))
    client.get_spot_price = AsyncMock(return_value={})
    client.get_daily_series = AsyncMock(return_value=[])
    return client
